"""
Grade conversion and validation service.

This module provides services for:
- Validating grade text against a grading system
- Converting grades to an ordinal numeric scale and back
- Averaging grades within one grading system

Numeric values are only comparable inside one grading system. For V-Scale
and V-Scale Range the value is the V number (a range maps to its lower
bound). For French the value is ``(number - 1) * 6 + letter + plus`` where
letter is 0/2/4 for a/b/c and plus is 0/1, so 1a = 0 and 9c+ = 53.
"""

import math
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Union

from boulderlog.core.exceptions import (
    InvalidGradeFormat,
    InvalidGradeRange,
    UnknownGradingSystem,
)
from boulderlog.core.logging import logger
from boulderlog.models.enums import GradingSystem

V_SCALE_MIN = 0
V_SCALE_MAX = 17
V_RANGE_MAX_SPAN = 3
FRENCH_LETTERS = ("a", "b", "c")
FRENCH_MAX_VALUE = 9 * 6 - 1  # 9c+

V_SCALE_PATTERN = re.compile(r"^V([0-9]|1[0-7])$")
V_SCALE_RANGE_PATTERN = re.compile(r"^V([0-9]|1[0-7])-V([0-9]|1[0-7])$")
V_SCALE_RANGE_SHAPE_PATTERN = re.compile(r"^V(\d+)-V(\d+)$")
# Historical range spelling "V3-5", readable but never accepted as input
V_SCALE_RANGE_SHORT_PATTERN = re.compile(r"^V(\d+)-(\d+)$")
V_SCALE_SHAPE_PATTERN = re.compile(r"^V(\d+)$")
FRENCH_GRADE_PATTERN = re.compile(r"^([1-9])([abc])(\+?)$")

EXPECTED_PATTERNS = {
    GradingSystem.V_SCALE: "V0-V17 (e.g. \"V4\")",
    GradingSystem.V_SCALE_RANGE: "V0-V17 or VX-VY with X < Y and a span of at most 3 (e.g. \"V4\", \"V3-V6\")",
    GradingSystem.FRENCH: "[1-9][a-c] with optional + (e.g. \"6a\", \"6a+\", \"7b\")",
}

GradingSystemLike = Union[GradingSystem, str]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives (4.5 -> 5)."""
    return int(math.floor(value + 0.5))


def _resolve_system(grading_system: GradingSystemLike) -> Optional[GradingSystem]:
    try:
        return GradingSystem.parse(grading_system)
    except UnknownGradingSystem:
        logger.warning(
            "Unknown grading system, treating grade as unparsable",
            extra={"grading_system": str(grading_system)}
        )
        return None


@lru_cache(maxsize=1024)
def _grade_to_number(grade: str, grading_system: GradingSystem) -> Optional[int]:
    """Cached parser behind GradeService.to_numeric."""
    if grading_system is GradingSystem.V_SCALE:
        match = V_SCALE_PATTERN.match(grade)
        return int(match.group(1)) if match else None

    if grading_system is GradingSystem.V_SCALE_RANGE:
        match = V_SCALE_PATTERN.match(grade)
        if match:
            return int(match.group(1))
        # Ranges count at their easier end so uncertain climbs still average in
        match = V_SCALE_RANGE_SHAPE_PATTERN.match(grade) or V_SCALE_RANGE_SHORT_PATTERN.match(grade)
        if match:
            lower = int(match.group(1))
            if V_SCALE_MIN <= lower <= V_SCALE_MAX:
                return lower
        return None

    if grading_system is GradingSystem.FRENCH:
        match = FRENCH_GRADE_PATTERN.match(grade)
        if not match:
            return None
        number, letter, plus = match.groups()
        letter_offset = FRENCH_LETTERS.index(letter) * 2
        return (int(number) - 1) * 6 + letter_offset + (1 if plus else 0)

    return None


class GradeService:
    """Service for grade validation and numeric conversion.

    The service holds no state besides a parse cache and is safe to share
    between callers.
    """

    def validate_grade(
        self,
        grade: str,
        grading_system: GradingSystemLike,
        allow_ranges: bool = True,
        field: str = "grade"
    ) -> None:
        """Validate user supplied grade text.

        Args:
            grade: Grade text, surrounding whitespace is ignored
            grading_system: System the grade belongs to
            allow_ranges: Whether V-Scale Range accepts ``VX-VY`` (climbs do,
                votes don't)
            field: Name of the offending field, reported in errors

        Raises:
            UnknownGradingSystem: unsupported grading system
            InvalidGradeFormat: text doesn't match the system's pattern
            InvalidGradeRange: V-Scale bounds or range span violated
        """
        system = GradingSystem.parse(grading_system)
        expected = EXPECTED_PATTERNS[system]
        if not allow_ranges and system is GradingSystem.V_SCALE_RANGE:
            expected = EXPECTED_PATTERNS[GradingSystem.V_SCALE]
        error_kwargs = {
            "field": field,
            "grade": grade,
            "grading_system": system.value,
            "expected_pattern": expected,
        }

        if not isinstance(grade, str) or not grade.strip():
            raise InvalidGradeFormat(
                detail=f"{field} must be a non-empty string in format {expected}",
                **error_kwargs
            )
        text = grade.strip()

        if system is GradingSystem.FRENCH:
            if not FRENCH_GRADE_PATTERN.match(text):
                raise InvalidGradeFormat(
                    detail=f"French {field} must be in format {expected}. Ranges are not allowed for French.",
                    **error_kwargs
                )
            return

        if V_SCALE_PATTERN.match(text):
            return

        shape = V_SCALE_SHAPE_PATTERN.match(text)
        if shape and V_SCALE_MIN <= int(shape.group(1)) <= V_SCALE_MAX:
            # in range but not canonical, e.g. "V04"
            raise InvalidGradeFormat(
                detail=f"V-Scale {field} must be in format {expected}",
                **error_kwargs
            )
        if shape:
            raise InvalidGradeRange(
                detail=f"{field} {text} is out of range, V-Scale grades run from V{V_SCALE_MIN} to V{V_SCALE_MAX}",
                **error_kwargs
            )

        range_match = V_SCALE_RANGE_SHAPE_PATTERN.match(text)
        if system is GradingSystem.V_SCALE_RANGE and allow_ranges:
            if not range_match:
                raise InvalidGradeFormat(
                    detail=f"V-Scale Range {field} must be in format {expected}",
                    **error_kwargs
                )
            low, high = int(range_match.group(1)), int(range_match.group(2))
            if not (V_SCALE_MIN <= low <= V_SCALE_MAX and V_SCALE_MIN <= high <= V_SCALE_MAX):
                raise InvalidGradeRange(
                    detail=f"Invalid V-Scale range {text}: both grades must be V{V_SCALE_MIN}-V{V_SCALE_MAX}",
                    **error_kwargs
                )
            if not V_SCALE_RANGE_PATTERN.match(text):
                # in range but not canonical, e.g. "V03-V05"
                raise InvalidGradeFormat(
                    detail=f"V-Scale Range {field} must be in format {expected}",
                    **error_kwargs
                )
            if high <= low:
                raise InvalidGradeRange(
                    detail=f"Invalid V-Scale range {text}: first grade must be lower than second grade",
                    **error_kwargs
                )
            if high - low > V_RANGE_MAX_SPAN:
                raise InvalidGradeRange(
                    detail=f"Invalid V-Scale range {text}: a range may span at most {V_RANGE_MAX_SPAN} grades",
                    **error_kwargs
                )
            return

        if range_match or V_SCALE_RANGE_SHORT_PATTERN.match(text):
            raise InvalidGradeFormat(
                detail=f"{field} must be a specific V-Scale grade in format {expected}. Ranges are not allowed.",
                **error_kwargs
            )
        raise InvalidGradeFormat(
            detail=f"V-Scale {field} must be in format {expected}",
            **error_kwargs
        )

    def is_valid_grade(
        self,
        grade: str,
        grading_system: GradingSystemLike,
        allow_ranges: bool = True
    ) -> bool:
        """Boolean form of validate_grade; unknown systems still raise."""
        try:
            self.validate_grade(grade, grading_system, allow_ranges=allow_ranges)
        except (InvalidGradeFormat, InvalidGradeRange):
            return False
        return True

    def to_numeric(self, grade: Optional[str], grading_system: GradingSystemLike) -> Optional[int]:
        """Convert grade text to its ordinal value.

        Returns None for anything unparsable so callers can drop it from
        aggregates instead of failing.
        """
        if not grade or not isinstance(grade, str):
            return None
        system = _resolve_system(grading_system)
        if system is None:
            return None
        value = _grade_to_number(grade.strip(), system)
        if value is None:
            logger.debug(
                "Unrecognized grade format, skipping",
                extra={"grade": grade, "grading_system": system.value}
            )
        return value

    def from_numeric(self, value: Optional[float], grading_system: GradingSystemLike) -> Optional[str]:
        """Convert an ordinal value back to canonical grade text.

        Non-integer values are rounded half-up first (4.5 -> V5).
        Returns None outside the system's domain.
        """
        if value is None:
            return None
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(value) or math.isinf(value):
            return None

        system = _resolve_system(grading_system)
        if system is None:
            return None

        rounded = round_half_up(value)

        if system in (GradingSystem.V_SCALE, GradingSystem.V_SCALE_RANGE):
            if not V_SCALE_MIN <= rounded <= V_SCALE_MAX:
                return None
            return f"V{rounded}"

        if not 0 <= rounded <= FRENCH_MAX_VALUE:
            return None
        number = rounded // 6 + 1
        letter_offset = rounded % 6
        letter = FRENCH_LETTERS[letter_offset // 2]
        plus = "+" if letter_offset % 2 == 1 else ""
        return f"{number}{letter}{plus}"

    def average(self, grades: Iterable[Optional[str]], grading_system: GradingSystemLike) -> Optional[str]:
        """Average grades within one system.

        Unparsable entries are dropped; None if nothing is left.
        """
        values: List[int] = [
            v for v in (self.to_numeric(g, grading_system) for g in grades or [])
            if v is not None
        ]
        if not values:
            return None
        return self.from_numeric(sum(values) / len(values), grading_system)

    def clear_cache(self) -> None:
        """Clear the grade parse cache."""
        _grade_to_number.cache_clear()

    @staticmethod
    def cache_info():
        return _grade_to_number.cache_info()
