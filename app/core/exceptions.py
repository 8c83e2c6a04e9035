# File: app/core/exceptions.py

from typing import Dict, Any, List, Optional


class DocNotesException(Exception):
    """Base exception for all DocNotes errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a DocNotes exception.

        Args:
            message: Human-readable error message
            code: Optional machine-processable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


# Domain-specific exceptions
class DomainException(DocNotesException):
    """Base exception for domain-related errors."""

    CODE_PREFIX = "DOMAIN_"


class EntityNotFoundException(DomainException):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            f"{self.CODE_PREFIX}001",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


# Validation exceptions
class ValidationException(DocNotesException):
    """Raised when input validation fails."""

    def __init__(
        self, message: str, validation_errors: Optional[Dict[str, List[str]]] = None
    ):
        super().__init__(
            message, "VALIDATION_001", {"validation_errors": validation_errors or {}}
        )


class PayloadTooLargeException(DocNotesException):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, filename: str, max_bytes: int):
        super().__init__(
            f"File '{filename}' is too large. Maximum allowed size is "
            f"{max_bytes / (1024 * 1024):g} MB",
            "VALIDATION_002",
            {"filename": filename, "max_bytes": max_bytes},
        )


class RangeNotSatisfiableException(DocNotesException):
    """Raised when a requested byte range lies outside the stored content."""

    def __init__(self, range_header: str, total_size: int):
        super().__init__(
            f"Requested range '{range_header}' cannot be satisfied",
            "VALIDATION_003",
            {"range": range_header, "total_size": total_size},
        )
        self.total_size = total_size


# Security exceptions
class SecurityException(DocNotesException):
    """Base exception for security-related errors."""

    CODE_PREFIX = "SECURITY_"


class PermissionDeniedException(SecurityException):
    """Raised when a caller's role or ownership does not allow an action."""

    def __init__(self, message: str = "Permission denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, f"{self.CODE_PREFIX}004", details or {})


# Storage exceptions
class StorageException(DocNotesException):
    """Base exception for storage-related errors."""

    CODE_PREFIX = "STORAGE_"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, f"{self.CODE_PREFIX}001", details or {})


class FileStorageException(StorageException):
    """
    Exception raised for blob storage I/O errors.
    """

    def __init__(
        self,
        message: str,
        blob_id: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if blob_id:
            error_details["blob_id"] = blob_id
        if operation:
            error_details["operation"] = operation
        super().__init__(message=message, details=error_details)


class BlobNotFoundException(EntityNotFoundException):
    """Raised when a blob reference does not resolve in the blob store."""

    def __init__(self, blob_id: str):
        super().__init__("Blob", blob_id)
        self.code = "STORAGE_002"


class DatabaseException(DocNotesException):
    """
    Exception raised for database-related errors.
    """

    CODE_PREFIX = "DATABASE_"

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        error_details = details or {}
        if entity_type:
            error_details["entity_type"] = entity_type
        code = error_code or f"{self.CODE_PREFIX}001"
        super().__init__(message=message, code=code, details=error_details)
