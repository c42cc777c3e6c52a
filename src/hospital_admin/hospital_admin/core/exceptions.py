class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class StoreError(DomainError):
    """Raised by the database layer when the backing store fails."""


class LoadError(StoreError):
    """A read from the store failed. Already-loaded data stays usable."""


class WriteError(StoreError):
    """An insert/update was rejected or not acknowledged by the store."""
