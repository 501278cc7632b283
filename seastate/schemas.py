"""Validated plugin options, as a SignalK server hands them to the plugin."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import EngineConfig


class PluginOptions(BaseModel):
    """User-facing options, keyed by their camelCase plugin names.

    Bounds follow the options form of the server UI; anything outside them
    is rejected here instead of reaching the engine.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = True
    wave_multiplier: float = Field(0.5, alias="waveMultiplier", description="Wave height multiplier (K)")
    vessel_name: Optional[str] = Field(None, alias="vesselName", description="Source prefix")
    update_rate: float = Field(1000, alias="updateRate", ge=100, description="Update rate (ms)")
    enable_heave: bool = Field(True, alias="enableHeave")
    enable_period: bool = Field(True, alias="enablePeriod")
    enable_direction: bool = Field(True, alias="enableDirection")
    vessel_length: float = Field(12, alias="vesselLength", ge=1, description="Vessel length (m)")
    period_buffer_size: float = Field(
        30, alias="periodBufferSize", ge=10, le=120, description="Seconds of data analysed for period"
    )
    minimum_period: float = Field(2, alias="minimumPeriod", ge=1)
    maximum_period: float = Field(20, alias="maximumPeriod", ge=5)
    direction_smoothing: float = Field(
        0.3, alias="directionSmoothing", ge=0.1, le=0.9,
        description="0.1 = smooth, 0.9 = responsive",
    )
    compass_source: Optional[str] = Field(
        None, alias="compassSource", description="SignalK path for heading data"
    )

    @model_validator(mode="after")
    def check_period_window(self):
        if self.minimum_period >= self.maximum_period:
            raise ValueError(
                f"minimumPeriod ({self.minimum_period}) must be below "
                f"maximumPeriod ({self.maximum_period})"
            )
        return self

    @property
    def heading_path(self) -> str:
        if self.compass_source and self.compass_source.strip():
            return self.compass_source.strip()
        return "navigation.headingMagnetic"

    def to_engine_config(self, design_length: Optional[float] = None) -> EngineConfig:
        """Build an EngineConfig.

        ``design_length`` (the vessel's ``design.length``) is used only when
        the user did not set ``vesselLength`` explicitly.
        """
        vessel_length = self.vessel_length
        if "vessel_length" not in self.model_fields_set and design_length:
            vessel_length = design_length

        return EngineConfig(
            wave_multiplier=self.wave_multiplier,
            vessel_length=vessel_length,
            period_buffer_seconds=self.period_buffer_size,
            minimum_period=self.minimum_period,
            maximum_period=self.maximum_period,
            direction_smoothing=self.direction_smoothing,
            update_rate_ms=self.update_rate,
            enable_heave=self.enable_heave,
            enable_period=self.enable_period,
            enable_direction=self.enable_direction,
        )
