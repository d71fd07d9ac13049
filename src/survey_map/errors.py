"""Error types raised by the survey map recipe steps."""

from __future__ import annotations


class SurveyMapError(ValueError):
    """Base class for malformed input detected by a recipe step."""


class MalformedGeometryError(SurveyMapError):
    """Geometry is invalid and cannot be used for spatial operations."""

    def __init__(self, message: str, rows: list | None = None):
        super().__init__(message)
        self.rows = rows or []


class GroupingCardinalityError(SurveyMapError):
    """An effort segment group does not have exactly one begin and one end."""

    def __init__(self, message: str, keys: list[tuple] | None = None):
        super().__init__(message)
        self.keys = keys or []


class CoordinateParseError(SurveyMapError):
    """A coordinate field is missing or not numeric."""

    def __init__(self, message: str, row=None, columns: list[str] | None = None):
        super().__init__(message)
        self.row = row
        self.columns = columns or []


class CRSMismatchError(SurveyMapError):
    """Tables in one spatial operation have unset or differing CRS."""


class EffortCategoryError(SurveyMapError):
    """An Effort value falls outside the ON/OFF domain."""

    def __init__(self, message: str, values: list[str] | None = None):
        super().__init__(message)
        self.values = values or []
