"""
Exceptions raised by the calibration regression engine.

Provides a small hierarchy:
- FitError (base)
  - SingularSystemError

Insufficient data is not an error: fitters return ``None`` for it.
"""

from typing import Any


class FitError(Exception):
    """Base exception for a regression fit that cannot be completed.

    Attributes:
        operation: Fit step that failed.
        details: Additional error details.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize fit error.

        Args:
            message: Human-readable error message.
            operation: Fit step that was being performed.
            details: Additional context as key-value pairs.
        """
        super().__init__(message)
        self.operation = operation
        self.details = details or {}

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"Details: {details_str}")
        return " | ".join(parts)


class SingularSystemError(FitError):
    """Normal-equations matrix is not invertible.

    Raised when:
    - Every gauge pressure in a channel's data set is identical
    - The design matrix is otherwise rank deficient
    """

    def __init__(
        self,
        message: str = "Matrix is not invertible (det~0)",
        determinant: float | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if determinant is not None:
            details["determinant"] = determinant
        super().__init__(
            message,
            operation=kwargs.pop("operation", "invert_3x3"),
            details=details,
        )
        self.determinant = determinant
