"""
Typed exceptions for the budgeting ledger.

Every error carries a machine-readable ``code`` so the API layer can map it
to a response without parsing messages:

    LedgerError
    +-- NotFoundError            entity missing or owned by another user
    +-- InvalidReferenceError    bad cross-entity reference (sweep target, group, account)
    +-- StorageFailure           record store raised; cause is chained
    +-- UnsupportedBackendError  database dialect without a required statement
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(LedgerError):
    """Raised when an entity does not exist for the requesting user."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Optional[int] = None):
        if entity_id is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} {entity_id} not found"
        super().__init__(message, entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InvalidReferenceError(LedgerError):
    """Raised when a configuration references an entity it may not use."""

    code = "INVALID_REFERENCE"

    def __init__(self, message: str, field: str, value: Any = None):
        super().__init__(message, field=field, value=value)
        self.field = field
        self.value = value


class StorageFailure(LedgerError):
    """Raised when the record store fails; aborts the whole computation."""

    code = "STORAGE_FAILURE"

    def __init__(self, operation: str):
        super().__init__(f"Storage failure during {operation}", operation=operation)
        self.operation = operation


class UnsupportedBackendError(LedgerError):
    """Raised when the configured database dialect lacks a required statement."""

    code = "UNSUPPORTED_BACKEND"

    def __init__(self, dialect: str, operation: str):
        super().__init__(f"{operation} is not supported on {dialect}", dialect=dialect, operation=operation)
        self.dialect = dialect
        self.operation = operation
