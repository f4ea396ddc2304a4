"""Tests for the exception hierarchy."""

from rental_listings_api.app.core.exceptions import (
    InvalidPayloadError,
    ListingsError,
    MissingIndexError,
    NotFoundError,
    StoreError,
    StoreRejectedError,
    StoreUnavailableError,
    ValidationError,
)


class TestExceptionHierarchy:
    def test_all_are_listings_errors(self) -> None:
        for cls in (
            ValidationError,
            InvalidPayloadError,
            NotFoundError,
            StoreUnavailableError,
            StoreError,
            StoreRejectedError,
            MissingIndexError,
        ):
            assert issubclass(cls, ListingsError)

    def test_status_codes(self) -> None:
        assert ValidationError("x").status_code == 400
        assert InvalidPayloadError("x").status_code == 400
        assert NotFoundError("x").status_code == 404
        assert StoreUnavailableError("x").status_code == 500
        assert StoreError("x").status_code == 500
        assert StoreRejectedError("x").status_code == 400
        assert MissingIndexError("x").status_code == 500

    def test_invalid_payload_is_validation_error(self) -> None:
        assert isinstance(InvalidPayloadError("x"), ValidationError)

    def test_message(self) -> None:
        err = NotFoundError("Property with ID x not found.")
        assert err.message == "Property with ID x not found."
        assert str(err) == "Property with ID x not found."
