from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful sign-in or registration."""
    user: User
    tokens: TokenPair
    is_new_user: bool
