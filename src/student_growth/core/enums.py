"""Enumerations for student_growth core types."""

from enum import Enum


class FilterAttribute(str, Enum):
    """Manifest attributes that get a select control, in display order."""

    NATIONALITY = "nationality"
    SEX = "sex"
    SEMESTER = "semester"


class ControllerState(str, Enum):
    """Lifecycle states of the controller."""

    LOADING = "loading"
    FILTERS_READY = "filters_ready"
    INTERACTIVE = "interactive"
    ERROR_DISPLAYED = "error_displayed"


class ErrorCode(str, Enum):
    """Application error codes for structured error responses."""

    E404_MANIFEST_UNAVAILABLE = "E404_MANIFEST_UNAVAILABLE"
    E422_MANIFEST_INVALID = "E422_MANIFEST_INVALID"
    E424_DATA_UNAVAILABLE = "E424_DATA_UNAVAILABLE"
    E409_INVALID_STATE = "E409_INVALID_STATE"
    E500_EXPORT = "E500_EXPORT"


class OutputFormat(str, Enum):
    """Supported export formats."""

    PNG = "png"
    SVG = "svg"


class ViewName(str, Enum):
    """Views that can be exported from the command line."""

    CHART = "chart"
    MAP = "map"
