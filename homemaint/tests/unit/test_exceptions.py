"""Unit tests for the exception hierarchy."""

import pytest

from homemaint.core.exceptions import (
    DateRangeValidationError,
    FileStorageError,
    FileTooLargeError,
    HomeMaintError,
    InvalidInputError,
    MigrationError,
    StorageError,
    StoredFileNotFoundError,
    UnsafePathError,
    ValidationError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        ("exc_class", "parent"),
        [
            (InvalidInputError, ValidationError),
            (DateRangeValidationError, ValidationError),
            (MigrationError, StorageError),
            (FileTooLargeError, FileStorageError),
            (StoredFileNotFoundError, FileStorageError),
            (UnsafePathError, FileStorageError),
            (ValidationError, HomeMaintError),
            (StorageError, HomeMaintError),
            (FileStorageError, HomeMaintError),
        ],
    )
    def test_subclassing(self, exc_class, parent):
        assert issubclass(exc_class, parent)


class TestDetails:
    def test_defaults(self):
        error = StorageError()
        assert error.message == "Database operation failed"
        assert error.error_code == "STORAGE_ERROR"
        assert error.to_dict() == {"code": "STORAGE_ERROR", "message": "Database operation failed"}

    def test_invalid_input_details(self):
        error = InvalidInputError("name is required", field="name", constraint="required")
        assert error.details == {"field": "name", "constraint": "required"}
        assert error.to_dict()["details"]["field"] == "name"

    def test_long_values_are_truncated(self):
        error = InvalidInputError("bad", field="notes", value="x" * 500)
        assert len(error.details["value"]) == 100

    def test_storage_error_records_operation_and_table(self):
        error = StorageError("insert failed", operation="insert", table="assets")
        assert error.details == {"operation": "insert", "table": "assets"}

    def test_file_too_large(self):
        error = FileTooLargeError(2048, 1024)
        assert error.size == 2048
        assert error.limit == 1024
        assert "2048" in error.message
        assert error.error_code == "FILE_TOO_LARGE"

    def test_stored_file_not_found_keeps_path(self):
        error = StoredFileNotFoundError("2024/06/abc.jpg")
        assert error.relative_path == "2024/06/abc.jpg"
        assert error.details["relative_path"] == "2024/06/abc.jpg"

    def test_date_range_details(self):
        error = DateRangeValidationError(start_date="2024-02-01", end_date="2024-01-01")
        assert error.details == {"start_date": "2024-02-01", "end_date": "2024-01-01"}
