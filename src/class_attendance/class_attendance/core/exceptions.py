class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when there is no signed-in user or credentials are invalid."""


class ConfigurationError(DomainError):
    """Raised when the account is not set up correctly (e.g. missing profile row)."""


class NotFoundError(DomainError):
    """Raised when a row addressed by key does not exist for the caller."""


class ConfirmationRequiredError(DomainError):
    """Raised when a destructive action is attempted without explicit confirmation."""


class DataServiceError(DomainError):
    """Raised when the data service rejects or fails a request."""
