"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Email/password pair did not authenticate.

    Raised with the same message whether the email is unknown or the
    password is wrong.
    """

    def __init__(self):
        super().__init__("Invalid credentials")


class InvalidTokenError(DomainError):
    """Bearer token is malformed, tampered with, or otherwise unusable."""


class ExpiredTokenError(InvalidTokenError):
    """Bearer token signature is valid but its validity window has passed."""


class AccountConflictError(DomainError):
    """External identity collides with an existing local account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email is already registered with a password")


class OAuthExchangeError(DomainError):
    """OAuth provider rejected or failed the code exchange."""


class UpstreamUnavailableError(DomainError):
    """Backing data store is unreachable or a query against it failed."""
