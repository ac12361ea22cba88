"""
Enumeration classes for BoulderLog.

This module defines strongly-typed enums for:
- Grading systems
- Route attempt outcomes
- Climber height bands
- High-level style buckets
"""

from enum import Enum
from typing import Any, List

from boulderlog.core.exceptions import UnknownGradingSystem


class GradingSystem(str, Enum):
    """Supported bouldering grade systems."""
    V_SCALE = "V-Scale"
    V_SCALE_RANGE = "V-Scale Range"
    FRENCH = "French"

    @property
    def display_name(self) -> str:
        """Get human-readable name of grading system."""
        return {
            GradingSystem.V_SCALE: "Hueco/V Scale",
            GradingSystem.V_SCALE_RANGE: "Hueco/V Scale (range)",
            GradingSystem.FRENCH: "French Boulder",
        }[self]

    @property
    def allows_ranges(self) -> bool:
        return self is GradingSystem.V_SCALE_RANGE

    @classmethod
    def get_values(cls) -> List[str]:
        """Return list of enum values."""
        return [e.value for e in cls]

    @classmethod
    def parse(cls, value: Any) -> "GradingSystem":
        """Resolve a member from a member, value or loose spelling.

        "V-Scale", "VScale", "v_scale" and "V_SCALE" all resolve to V_SCALE.

        Raises:
            UnknownGradingSystem: if nothing matches
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace(" ", "").replace("-", "").replace("_", "")
            for member in cls:
                if key in (
                    member.value.lower().replace(" ", "").replace("-", ""),
                    member.name.lower().replace("_", ""),
                ):
                    return member
        raise UnknownGradingSystem(value)


class AttemptStatus(str, Enum):
    """Outcome of a logged route attempt."""

    SUCCESS = "success"
    FAILURE = "failure"

    @classmethod
    def get_values(cls) -> List[str]:
        """Return list of enum values."""
        return [e.value for e in cls]


class HeightBand(str, Enum):
    """Climber height bands used for vote statistics."""

    SHORT = "short"      # < 165cm
    AVERAGE = "average"  # 165-180cm inclusive
    TALL = "tall"        # > 180cm

    @classmethod
    def for_height(cls, height_cm: float) -> "HeightBand":
        if height_cm < 165:
            return cls.SHORT
        if height_cm <= 180:
            return cls.AVERAGE
        return cls.TALL


class StyleBucket(str, Enum):
    """High-level style categories used for the insights radar."""

    POWER = "power"
    GRIP_STRENGTH = "gripStrength"
    TECHNIQUE = "technique"
    COORDINATION = "coordination"
    OTHER = "other"

    @classmethod
    def radar_buckets(cls) -> List["StyleBucket"]:
        """Buckets shown on the radar; OTHER is never visualized."""
        return [cls.POWER, cls.GRIP_STRENGTH, cls.TECHNIQUE, cls.COORDINATION]
