"""Error handling and exception definitions for student_growth."""

from .enums import ControllerState, ErrorCode
from .models import ErrorDetail, ErrorResponse


class StudentGrowthError(Exception):
    """Base exception for all student_growth errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: list[ErrorDetail] | None = None,
        hint: str | None = None,
    ):
        """Initialize student_growth error.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            details: Optional detailed error information
            hint: Optional correction hint for the user
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.hint = hint

    def to_error_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model.

        Returns:
            ErrorResponse model instance
        """
        return ErrorResponse(
            code=self.code.value,
            message=self.message,
            details=self.details if self.details else None,
            hint=self.hint,
        )


class ManifestUnavailableError(StudentGrowthError):
    """Raised when the manifest cannot be fetched."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        code: ErrorCode = ErrorCode.E404_MANIFEST_UNAVAILABLE,
        hint: str | None = None,
    ):
        """Initialize manifest unavailable error."""
        details = [ErrorDetail(field="source", reason=source)] if source else None
        super().__init__(
            message=message,
            code=code,
            details=details,
            hint=hint or "Download the latest data set with 'student-growth download'.",
        )
        self.source = source


class ManifestParseError(ManifestUnavailableError):
    """Raised when the manifest was fetched but is not valid JSON or misses fields."""

    def __init__(self, message: str, source: str | None = None):
        """Initialize manifest parse error."""
        super().__init__(
            message=message,
            source=source,
            code=ErrorCode.E422_MANIFEST_INVALID,
            hint="The info file is corrupt. Download the data set again.",
        )


class DataUnavailableError(StudentGrowthError):
    """Raised when the CSV payload or geo boundaries cannot be loaded."""

    def __init__(self, message: str, source: str | None = None):
        """Initialize data unavailable error."""
        details = [ErrorDetail(field="source", reason=source)] if source else None
        super().__init__(
            message=message,
            code=ErrorCode.E424_DATA_UNAVAILABLE,
            details=details,
        )
        self.source = source


class StateTransitionError(StudentGrowthError):
    """Raised when the controller is moved into a state it cannot reach."""

    def __init__(self, current: ControllerState, target: ControllerState):
        """Initialize state transition error."""
        super().__init__(
            message=f"Cannot move controller from '{current.value}' to '{target.value}'",
            code=ErrorCode.E409_INVALID_STATE,
            hint="Reload the page to start over.",
        )
        self.current = current
        self.target = target


class ExportError(StudentGrowthError):
    """Raised when figure export fails."""

    def __init__(
        self,
        message: str,
        format: str | None = None,  # noqa: A002
    ):
        """Initialize export error."""
        hint = "Failed to export the figure."
        if format:
            hint = f"Failed to export figure as {format}. Install vl-convert-python or try another format."

        super().__init__(
            message=message,
            code=ErrorCode.E500_EXPORT,
            hint=hint,
        )
