"""
Custom exceptions for the flight network.

Provides a small hierarchy so callers (and the HTTP layer) can map
failures to responses without inspecting messages.
"""


class FlightNetworkError(Exception):
    """Base exception for all flight network errors."""

    pass


class DuplicateKeyError(FlightNetworkError):
    """Raised when inserting a record whose numeric ID already exists."""

    def __init__(self, entity: str, record_id: int) -> None:
        self.entity = entity
        self.record_id = record_id
        message = f"{entity.capitalize()} with ID {record_id} already exists"
        super().__init__(message)


class NotFoundError(FlightNetworkError):
    """Raised when a lookup or update names an unknown ID or IATA code."""

    def __init__(self, entity: str, key: object, field: str = "ID") -> None:
        self.entity = entity
        self.key = key
        self.field = field
        message = f"{entity.capitalize()} {field} '{key}' not found"
        super().__init__(message)


class InvalidReferenceError(FlightNetworkError):
    """Raised when a new route references an unknown airline or airport."""

    def __init__(self, field: str, value: int) -> None:
        self.field = field
        self.value = value
        message = f"Unknown {field}: {value}"
        super().__init__(message)


class NetworkNotInitializedError(FlightNetworkError):
    """Raised when the network store is accessed before data is loaded."""

    pass
