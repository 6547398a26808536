"""Pydantic models for student_growth data structures."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Manifest(BaseModel):
    """Dataset metadata loaded from the info file."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Dataset title")
    author: str = Field(..., description="Publisher of the source data")
    url: str = Field(..., description="Download URL of the source data")
    file: str = Field(..., description="CSV data file, relative to the manifest")
    attributes: dict[str, list[str]] = Field(
        default_factory=dict, description="Attribute name to ordered selectable values"
    )

    @field_validator("file")
    @classmethod
    def validate_file_not_empty(cls, v: str) -> str:
        """Ensure the data file reference is not blank."""
        if not v.strip():
            raise ValueError("Data file reference cannot be empty")
        return v


class Selection(BaseModel):
    """Active key selection pushed into the views."""

    key_x: str = Field(..., description="Composite value column, '{nationality} {sex}'")
    key_y: str | None = Field(default=None, description="Active semester (highlighted row id)")


class ChartPoint(BaseModel):
    """One plotted point of the line chart."""

    x: str = Field(..., description="Row id (semester label)")
    y: float = Field(..., description="Value of the active key_x column")
    active: bool = Field(default=False, description="Whether the point matches key_y")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    reason: str | None = Field(default=None, description="Detailed reason for the error")
    suggestion: str | None = Field(default=None, description="Suggested correction")


class ErrorResponse(BaseModel):
    """Serializable form of an application error."""

    code: str = Field(..., description="Error code (e.g., E404_MANIFEST_UNAVAILABLE)")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | None = Field(default=None, description="Detailed error information")
    hint: str | None = Field(default=None, description="Correction hint for the user")
