"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateError(ValidationError):
    """Entity with the same unique key already exists."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class AuthError(DomainError):
    """Caller could not be authenticated."""


class InvalidIdentityTokenError(AuthError):
    """Identity-provider token failed signature, audience or expiry checks."""


class InvalidOrExpiredTokenError(AuthError):
    """Bearer token could not be verified."""


class InvalidTokenError(InvalidOrExpiredTokenError):
    """Bearer token is malformed, has a bad signature or an unexpected payload."""


class ExpiredTokenError(InvalidOrExpiredTokenError):
    """Bearer token signature is valid but the token has expired."""


class UpstreamError(DomainError):
    """Store or external service failed."""
