"""Domain-specific exceptions for the licence compliance API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses, avoiding string matching in routers.
"""

from typing import Any


class DbLicenceAPIError(Exception):
    """Base exception for all licence compliance API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Data Access Errors (503)
# =============================================================================


class DataAccessError(DbLicenceAPIError):
    """Raised when the entity store cannot be read.

    Fatal to the current compliance computation: no partial result is returned.
    """

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        details: dict[str, Any] = {"operation": operation}
        if cause is not None:
            details["error_type"] = type(cause).__name__
        super().__init__("Entity store unavailable", details)
        self.operation = operation
        self.cause = cause


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(DbLicenceAPIError):
    """Base class for resource not found errors."""

    pass


class LicenseTypeNotFoundError(NotFoundError):
    """Raised when a licence type (contract part) cannot be found."""

    def __init__(self, license_type_id: str | None = None) -> None:
        details = {"license_type_id": license_type_id} if license_type_id else {}
        super().__init__("License type not found", details)


class ContractNotFoundError(NotFoundError):
    """Raised when a contract cannot be found."""

    def __init__(self, contract_id: str | None = None) -> None:
        details = {"contract_id": str(contract_id)} if contract_id else {}
        super().__init__("Contract not found", details)


class HostNotFoundError(NotFoundError):
    """Raised when a host, database or licence entry cannot be found."""

    def __init__(self, hostname: str | None = None, dbname: str | None = None) -> None:
        details: dict[str, Any] = {}
        if hostname:
            details["hostname"] = hostname
        if dbname:
            details["dbname"] = dbname
        super().__init__("Host not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(DbLicenceAPIError):
    """Base class for resource conflict errors."""

    pass


class LicenseTypeAlreadyExistsError(ConflictError):
    """Raised when trying to create a licence type that already exists."""

    def __init__(self, license_type_id: str | None = None) -> None:
        details = {"license_type_id": license_type_id} if license_type_id else {}
        super().__init__("License type already exists", details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(DbLicenceAPIError):
    """Base class for validation errors."""

    pass


class TechnologyMismatchError(ValidationError):
    """Raised when a contract part belongs to a different technology."""

    def __init__(self, license_type_id: str, expected: str, actual: str) -> None:
        super().__init__(
            "License type technology does not match contract technology",
            {"license_type_id": license_type_id, "expected": expected, "actual": actual},
        )
