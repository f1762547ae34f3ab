class MarkerEngineError(Exception):
    """Base marker engine exception."""


class StoreQueryFailure(MarkerEngineError):
    """Raised when the marker store rejected or timed out a query."""

    def __init__(self, message: str, *, transient: bool = False) -> None:
        super().__init__(message)
        self.transient = transient


class LocationUnavailable(MarkerEngineError):
    """Raised when the location provider could not produce a fix."""


class MarkerNotFoundError(MarkerEngineError):
    """Raised when a report is submitted against an unknown marker."""
