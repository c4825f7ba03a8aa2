"""Tests for request schemas and their error messages."""

import pytest
from pydantic import ValidationError

from bookkeeper.db.schemas import BookAddRequest, ProgressUpdate, schema_error_message


class TestSchemaErrorMessage:
    """Tests for flattening pydantic errors."""

    def test_field_errors_name_the_field(self):
        with pytest.raises(ValidationError) as exc_info:
            BookAddRequest.model_validate({"bookTitle": "Dune", "totalPages": 0})

        message = schema_error_message(exc_info.value)
        assert message.startswith("totalPages: ")

    def test_model_errors_have_no_location(self):
        """Test cross-field errors come through as the bare message."""
        with pytest.raises(ValidationError) as exc_info:
            BookAddRequest(book_title="Dune", total_pages=10, pages_read=11)

        assert schema_error_message(exc_info.value) == (
            "Value error, pagesRead cannot exceed totalPages"
        )

    def test_multiple_errors_joined(self):
        with pytest.raises(ValidationError) as exc_info:
            ProgressUpdate.model_validate({})

        message = schema_error_message(exc_info.value)
        assert "bookTitle: " in message
        assert "currentPage: " in message
        assert "; " in message
