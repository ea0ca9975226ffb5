class AccountError(Exception):
    """Base exception for identity and subscription handling."""


class AuthenticationError(AccountError):
    """Raised when a request carries no valid session."""


class AuthorizationError(AccountError):
    """Raised when the principal may not perform an operation."""


class QuotaExceededError(AccountError):
    """Raised when the principal's tier has no uploads left this month."""

    def __init__(self, message: str, *, limit: int) -> None:
        super().__init__(message)
        self.limit = limit


class InvalidTierError(AccountError, ValueError):
    """Raised for a subscription tier outside the known set."""


class IdentityProviderError(AccountError):
    """Raised when the identity provider cannot be reached or rejects a call."""
