"""Exception hierarchy for the home maintenance tracker.

Errors are grouped by what went wrong rather than where:

- ValidationError: caller-supplied fields failed a required-field or shape check
- StorageError: the database rejected or failed an operation
- MigrationError: the schema could not be established (fatal at startup)
- FileStorageError: attachment bytes could not be written, read or removed

Lookups of unknown ids are not errors: repositories return None or False.
"""

from __future__ import annotations

from typing import Any


class HomeMaintError(Exception):
    """Base exception for all application-specific errors."""

    default_message: str = "An unexpected error occurred"
    default_error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Validation Errors
class ValidationError(HomeMaintError):
    default_message = "Validation failed"
    default_error_code = "VALIDATION_ERROR"


class InvalidInputError(ValidationError):
    default_message = "Invalid input provided"
    default_error_code = "INVALID_INPUT"

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if field:
            details["field"] = field
        if value is not None:
            str_value = str(value)
            details["value"] = str_value[:100] if len(str_value) > 100 else str_value
        if constraint:
            details["constraint"] = constraint
        super().__init__(message, details=details, **kwargs)


class DateRangeValidationError(ValidationError):
    default_message = "Invalid date range: start must not be after end"
    default_error_code = "INVALID_DATE_RANGE"

    def __init__(
        self,
        message: str | None = None,
        *,
        start_date: Any = None,
        end_date: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if start_date is not None:
            details["start_date"] = str(start_date)
        if end_date is not None:
            details["end_date"] = str(end_date)
        super().__init__(message, details=details, **kwargs)


# Storage Errors
class StorageError(HomeMaintError):
    """Raised when the database fails or rejects an operation.

    Covers I/O errors, constraint violations (including foreign keys that
    reference missing rows) and a full disk. The driver exception is kept
    as ``__cause__``.
    """

    default_message = "Database operation failed"
    default_error_code = "STORAGE_ERROR"

    def __init__(
        self,
        message: str | None = None,
        *,
        operation: str | None = None,
        table: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details=details, **kwargs)


class MigrationError(StorageError):
    """Raised when a schema migration fails.

    The failed revision is rolled back; the application must not run against
    a partially migrated schema.
    """

    default_message = "Database migration failed"
    default_error_code = "MIGRATION_ERROR"


# File Storage Errors
class FileStorageError(HomeMaintError):
    default_message = "File storage operation failed"
    default_error_code = "FILE_STORAGE_ERROR"


class FileTooLargeError(FileStorageError):
    default_error_code = "FILE_TOO_LARGE"

    def __init__(self, size: int, limit: int, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = f"File size ({size} bytes) exceeds maximum ({limit} bytes)"
        self.size = size
        self.limit = limit
        details = kwargs.pop("details", {}) or {}
        details["size"] = size
        details["limit"] = limit
        super().__init__(message, details=details, **kwargs)


class StoredFileNotFoundError(FileStorageError):
    default_error_code = "FILE_NOT_FOUND"

    def __init__(self, relative_path: str, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = f"File not found: {relative_path}"
        self.relative_path = relative_path
        details = kwargs.pop("details", {}) or {}
        details["relative_path"] = relative_path
        super().__init__(message, details=details, **kwargs)


class UnsafePathError(FileStorageError):
    default_error_code = "UNSAFE_PATH"

    def __init__(self, relative_path: str, message: str | None = None, **kwargs: Any) -> None:
        if message is None:
            message = f"Path {relative_path} attempts to escape the storage directory"
        details = kwargs.pop("details", {}) or {}
        details["relative_path"] = relative_path
        super().__init__(message, details=details, **kwargs)


# Internal Errors
class ConfigurationError(HomeMaintError):
    default_message = "Invalid configuration"
    default_error_code = "CONFIGURATION_ERROR"
