"""
SignalK feed adapter and delta output.

Inbound: SignalK deltas (or polled ``getSelfPath`` values) carrying
``navigation.attitude`` and a heading path become typed updates.
Outbound: a SeaStateResult becomes a SignalK delta under a
vessel-derived ``$source``.

Delta shape:
    {"context": "vessels.self",
     "updates": [{"timestamp": "...", "values": [{"path": ..., "value": ...}]}]}
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, field_validator

from ..estimation.engine import SeaStateResult

logger = logging.getLogger(__name__)

ATTITUDE_PATH = "navigation.attitude"
DEFAULT_HEADING_PATH = "navigation.headingMagnetic"

WAVE_HEIGHT_PATH = "environment.wave.height"
HEAVE_PATH = "environment.heave"
WAVE_PERIOD_PATH = "environment.wave.period"
WAVE_DIRECTION_PATH = "navigation.wave.direction"
WAVE_DIRECTION_CONFIDENCE_PATH = "navigation.wave.direction.confidence"


def _finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


class AttitudeValue(BaseModel):
    """``navigation.attitude`` payload; non-numeric angles are treated as absent."""
    pitch: Optional[float] = None
    roll: Optional[float] = None
    yaw: Optional[float] = None

    @field_validator("pitch", "roll", "yaw", mode="before")
    @classmethod
    def numeric_only(cls, value):
        return _finite_number(value)


@dataclass(frozen=True)
class AttitudeUpdate:
    value: AttitudeValue
    timestamp: datetime


@dataclass(frozen=True)
class HeadingUpdate:
    heading: float


FeedUpdate = Union[AttitudeUpdate, HeadingUpdate]


def parse_attitude_value(value: Any) -> Optional[AttitudeValue]:
    if not isinstance(value, dict):
        return None
    return AttitudeValue.model_validate(value)


def parse_heading_value(value: Any) -> Optional[float]:
    return _finite_number(value)


def parse_timestamp(value: Any) -> datetime:
    """ISO timestamp of a delta update, or now when missing or unreadable."""
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unreadable update timestamp '{value}'")
        else:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.now(timezone.utc)


def iter_delta_values(delta: Any, heading_path: str = DEFAULT_HEADING_PATH) -> Iterator[FeedUpdate]:
    """Yield attitude and heading updates contained in a SignalK delta."""
    if not isinstance(delta, dict):
        raise ValueError(f"Delta must be an object, got {type(delta).__name__}")

    for update in delta.get("updates") or []:
        if not isinstance(update, dict):
            continue
        timestamp = parse_timestamp(update.get("timestamp"))
        for item in update.get("values") or []:
            if not isinstance(item, dict):
                continue
            path = item.get("path")
            if path == ATTITUDE_PATH:
                attitude = parse_attitude_value(item.get("value"))
                if attitude is not None:
                    yield AttitudeUpdate(value=attitude, timestamp=timestamp)
            elif path == heading_path:
                heading = parse_heading_value(item.get("value"))
                if heading is not None:
                    yield HeadingUpdate(heading=heading)


def format_source_name(name: str) -> str:
    """Lower-case, dash-separated form of a vessel name."""
    name = re.sub(r"[^a-z0-9]", "-", name.lower())
    name = re.sub(r"-+", "-", name)
    return name.strip("-")


def vessel_source(vessel_name: Optional[str], suffix: str = "derived") -> str:
    """``{vessel}-seastate-{suffix}``, or ``seastate-{suffix}`` without a name."""
    if vessel_name and vessel_name.strip():
        return f"{format_source_name(vessel_name)}-seastate-{suffix}"
    return f"seastate-{suffix}"


def build_delta(result: SeaStateResult, source: str) -> dict:
    """SignalK delta for one sea state result; absent outputs are left out."""
    values = [{"path": WAVE_HEIGHT_PATH, "value": result.wave_height}]

    if result.heave is not None:
        values.append({"path": HEAVE_PATH, "value": result.heave})

    if result.period is not None:
        values.append({"path": WAVE_PERIOD_PATH, "value": result.period})

    if result.direction is not None:
        values.append({"path": WAVE_DIRECTION_PATH, "value": result.direction})
        values.append({
            "path": WAVE_DIRECTION_CONFIDENCE_PATH,
            "value": result.direction_confidence,
        })

    return {
        "context": "vessels.self",
        "updates": [
            {
                "$source": source,
                "timestamp": result.timestamp.isoformat(),
                "values": values,
            }
        ],
    }
