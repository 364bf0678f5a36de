"""
Domain error taxonomy.

Errors carry an ErrorKind; the HTTP status for each kind lives in
ERROR_STATUS_CODES so the services never deal with transport concerns.
"""

from enum import Enum
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ErrorKind(str, Enum):
    """Kinds of failures raised by the services and stores."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DUPLICATE_KEY = "duplicate_key"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    RULE_NOT_FOUND = "rule_not_found"
    STORAGE = "storage"


ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_KEY: 409,
    ErrorKind.FOREIGN_KEY_VIOLATION: 400,
    ErrorKind.RULE_NOT_FOUND: 500,
    ErrorKind.STORAGE: 500,
}


class AppError(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.STORAGE
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Any = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self.kind]


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class DuplicateKey(AppError):
    kind = ErrorKind.DUPLICATE_KEY
    default_message = "Duplicate entry. This record already exists."


class ForeignKeyViolation(AppError):
    kind = ErrorKind.FOREIGN_KEY_VIOLATION
    default_message = "Foreign key constraint violation"


class RuleNotFound(AppError):
    """A brand has sales but no commission rule: broken reference data."""

    kind = ErrorKind.RULE_NOT_FOUND

    def __init__(self, brand: str):
        self.brand = brand
        super().__init__(f"No commission rule configured for brand '{brand}'")


class StorageError(AppError):
    kind = ErrorKind.STORAGE
    default_message = "Database operation failed"


def _sqlstate(exc: SQLAlchemyError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_storage_error(exc: SQLAlchemyError) -> AppError:
    """Map a SQLAlchemy failure onto the domain taxonomy."""
    if isinstance(exc, IntegrityError):
        code = _sqlstate(exc)
        text = str(exc.orig).lower()
        if code == UNIQUE_VIOLATION or "unique" in text:
            return DuplicateKey()
        if code == FOREIGN_KEY_VIOLATION or "foreign key" in text:
            return ForeignKeyViolation()
    return StorageError()
