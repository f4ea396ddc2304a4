"""Exception hierarchy for the listings API.

Every error carries the HTTP status it maps to; the handler registered
in ``main.py`` turns them into ``{"message": ...}`` responses.
"""


class ListingsError(Exception):
    """Base exception for all listings errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ListingsError):
    """Raised when required fields are missing or invalid."""

    status_code = 400


class InvalidPayloadError(ValidationError):
    """Raised when a request body is not a JSON object."""


class NotFoundError(ListingsError):
    """Raised when no property exists for an id."""

    status_code = 404


class StoreUnavailableError(ListingsError):
    """Raised when the document store was never initialised."""


class StoreError(ListingsError):
    """Raised for any other failure reported by the document store."""


class StoreRejectedError(StoreError):
    """Raised when the store refuses a write payload (e.g. document too large)."""

    status_code = 400


class MissingIndexError(StoreError):
    """Raised when a filtered query needs a composite index that does not exist."""
