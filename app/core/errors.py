"""Domain exceptions raised by the series services."""

from typing import Any, List

from pydantic import BaseModel


class FieldFailure(BaseModel):
    """A single failed validation rule for one field of a submitted series."""

    property_name: str
    error_message: str
    attempted_value: Any = None

    def to_json(self) -> dict[str, Any]:
        return {
            "propertyName": self.property_name,
            "errorMessage": self.error_message,
            "attemptedValue": self.attempted_value,
        }


class SeriesError(Exception):
    """Base class for series domain failures."""


class ValidationFailedError(SeriesError):
    """A write was rejected by one or more validation rules."""

    def __init__(self, failures: List[FieldFailure]):
        super().__init__(
            "; ".join(f"{f.property_name}: {f.error_message}" for f in failures)
        )
        self.failures = failures


class SeriesNotFoundError(SeriesError):
    def __init__(self, series_id: int):
        super().__init__(f"Series with ID {series_id} does not exist")
        self.series_id = series_id


class CollaboratorUnavailableError(SeriesError):
    """A dependency (database, statistics, ...) failed to answer."""

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


class UnclassifiedEventError(SeriesError, TypeError):
    """An event reached the notification policy without a rule for its type."""

    def __init__(self, event: object):
        super().__init__(
            f"No notification rule for event type {type(event).__name__}"
        )
        self.event = event
