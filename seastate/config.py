"""
Sea State Configuration Module.

Two layers:
- EngineConfig: the read-only snapshot the estimation engine works from
- Settings: process-level settings loaded from environment variables
  (``SEASTATE_*``), with optional ``.env`` support for local development

Usage:
    from seastate.config import settings

    settings.configure_logging()
    engine = SeaStateEngine(settings.engine_config())
"""

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_str(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get string from environment variable, treating blank as unset."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class EngineConfig:
    """Estimation parameters, read once per tick."""

    wave_multiplier: float = 0.5        # K: metres of wave height per degree of motion
    vessel_length: float = 12.0         # metres, used for heave
    period_buffer_seconds: float = 30.0
    minimum_period: float = 2.0         # seconds
    maximum_period: float = 20.0        # seconds
    direction_smoothing: float = 0.3    # 0 < s <= 1, 1 = no smoothing
    update_rate_ms: float = 1000.0
    enable_heave: bool = True
    enable_period: bool = True
    enable_direction: bool = True

    def __post_init__(self):
        """Fall back to defaults for values the engine cannot work with."""
        defaults = EngineConfig.__dataclass_fields__

        if not self.update_rate_ms > 0:
            logger.warning(
                f"Update rate {self.update_rate_ms}ms must be positive, "
                f"using {defaults['update_rate_ms'].default}ms"
            )
            self.update_rate_ms = defaults['update_rate_ms'].default

        if not self.period_buffer_seconds > 0:
            logger.warning(
                f"Period buffer {self.period_buffer_seconds}s must be positive, "
                f"using {defaults['period_buffer_seconds'].default}s"
            )
            self.period_buffer_seconds = defaults['period_buffer_seconds'].default

        if not 0 < self.direction_smoothing <= 1:
            logger.warning(
                f"Direction smoothing {self.direction_smoothing} outside (0, 1], "
                f"using {defaults['direction_smoothing'].default}"
            )
            self.direction_smoothing = defaults['direction_smoothing'].default

        if not 0 <= self.minimum_period < self.maximum_period:
            logger.warning(
                f"Invalid period window [{self.minimum_period}, {self.maximum_period}]s, "
                f"using [{defaults['minimum_period'].default}, "
                f"{defaults['maximum_period'].default}]s"
            )
            self.minimum_period = defaults['minimum_period'].default
            self.maximum_period = defaults['maximum_period'].default

    @property
    def buffer_capacity(self) -> int:
        """Number of samples covering ``period_buffer_seconds`` at the update rate."""
        return max(1, math.ceil(self.period_buffer_seconds * 1000 / self.update_rate_ms))


@dataclass
class Settings:
    """Process settings loaded from environment."""

    # Estimation
    wave_multiplier: float = field(default_factory=lambda: get_float("SEASTATE_WAVE_MULTIPLIER", 0.5))
    vessel_length: float = field(default_factory=lambda: get_float("SEASTATE_VESSEL_LENGTH", 12.0))
    period_buffer_seconds: float = field(
        default_factory=lambda: get_float("SEASTATE_PERIOD_BUFFER_SECONDS", 30.0)
    )
    minimum_period: float = field(default_factory=lambda: get_float("SEASTATE_MINIMUM_PERIOD", 2.0))
    maximum_period: float = field(default_factory=lambda: get_float("SEASTATE_MAXIMUM_PERIOD", 20.0))
    direction_smoothing: float = field(
        default_factory=lambda: get_float("SEASTATE_DIRECTION_SMOOTHING", 0.3)
    )
    update_rate_ms: float = field(default_factory=lambda: get_float("SEASTATE_UPDATE_RATE_MS", 1000.0))
    enable_heave: bool = field(default_factory=lambda: get_bool("SEASTATE_ENABLE_HEAVE", True))
    enable_period: bool = field(default_factory=lambda: get_bool("SEASTATE_ENABLE_PERIOD", True))
    enable_direction: bool = field(default_factory=lambda: get_bool("SEASTATE_ENABLE_DIRECTION", True))

    # Feed / output
    vessel_name: Optional[str] = field(default_factory=lambda: get_str("SEASTATE_VESSEL_NAME"))
    heading_path: str = field(
        default_factory=lambda: get_str("SEASTATE_HEADING_PATH", "navigation.headingMagnetic")
    )
    poll_interval_s: float = field(default_factory=lambda: get_float("SEASTATE_POLL_INTERVAL_S", 2.0))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("SEASTATE_LOG_LEVEL", "INFO"))
    log_format: str = field(
        default_factory=lambda: os.getenv(
            "SEASTATE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def __post_init__(self):
        if self.poll_interval_s <= 0:
            logger.warning(
                f"Poll interval {self.poll_interval_s}s must be positive, using 2.0s"
            )
            self.poll_interval_s = 2.0

    def engine_config(self) -> EngineConfig:
        """Build the engine snapshot from these settings."""
        return EngineConfig(
            wave_multiplier=self.wave_multiplier,
            vessel_length=self.vessel_length,
            period_buffer_seconds=self.period_buffer_seconds,
            minimum_period=self.minimum_period,
            maximum_period=self.maximum_period,
            direction_smoothing=self.direction_smoothing,
            update_rate_ms=self.update_rate_ms,
            enable_heave=self.enable_heave,
            enable_period=self.enable_period,
            enable_direction=self.enable_direction,
        )

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)


# Singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Get the settings instance (useful for dependency injection)."""
    return settings
