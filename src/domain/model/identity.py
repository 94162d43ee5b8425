from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityClaims:
    """Verified claims extracted from an identity-provider token."""
    email: str | None
    subject: str
    name: str | None = None
    picture: str | None = None
    email_verified: bool = False
