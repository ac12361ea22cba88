"""
Custom exception classes for BoulderLog.

This module defines a hierarchy of application-specific exceptions that:
- Provide consistent error handling
- Map to appropriate HTTP status codes
- Include detailed error messages
- Support additional context and headers
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class BoulderLogException(HTTPException):
    """
    Base exception class for BoulderLog.

    All application-specific exceptions should inherit from this class
    to ensure consistent error handling and response formatting.
    """
    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize the exception with status code, detail message, and optional context.

        Args:
            status_code: HTTP status code
            detail: Error message
            headers: Optional response headers
            context: Optional additional context for logging
        """
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.context = context or {}


class InvalidGradeError(BoulderLogException):
    """Raised when user supplied grade text fails validation."""
    def __init__(
        self,
        detail: str = "Invalid grade",
        field: str = "grade",
        grade: Optional[str] = None,
        grading_system: Optional[str] = None,
        expected_pattern: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.field = field
        self.grade = grade
        self.grading_system = grading_system
        self.expected_pattern = expected_pattern
        context = context or {}
        context.update({
            "field": field,
            "grade": grade,
            "grading_system": grading_system,
            "expected_pattern": expected_pattern,
        })
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            context=context
        )


class InvalidGradeFormat(InvalidGradeError):
    """Grade text does not match the grading system's pattern."""


class InvalidGradeRange(InvalidGradeError):
    """V-Scale range bounds or span are out of limits."""


class UnknownGradingSystem(BoulderLogException):
    """Raised when an unsupported grading system reaches the codec."""
    def __init__(
        self,
        grading_system: Any = None,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.grading_system = grading_system
        context = context or {}
        context["grading_system"] = str(grading_system)
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail or f"Unknown grade system: {grading_system}",
            context=context
        )


class InvalidDescriptorError(BoulderLogException):
    """Raised when a vote carries descriptors outside the accepted vocabulary."""
    def __init__(
        self,
        detail: str = "Invalid descriptors",
        descriptors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        context = context or {}
        context["field"] = "descriptors"
        if descriptors:
            context["descriptors"] = descriptors
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            context=context
        )


class ValidationError(BoulderLogException):
    """Raised when request data fails validation."""
    def __init__(
        self,
        detail: str = "Validation error",
        errors: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        context = context or {}
        if errors:
            context["validation_errors"] = errors
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            context=context
        )


class ResourceNotFound(BoulderLogException):
    """Raised when requested resource does not exist."""
    def __init__(
        self,
        detail: str = "Resource not found",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            context=context
        )
