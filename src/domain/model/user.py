from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Gender(str, Enum):
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'


MIN_AGE = 1
MAX_AGE = 120


@dataclass(frozen=True)
class PasswordAuth:
    """Account can sign in with email and password."""
    password_hash: str


@dataclass(frozen=True)
class ProviderAuth:
    """Account can sign in through the identity provider."""
    subject: str


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    name: str | None = None
    phone: str | None = None
    password_hash: str | None = None
    google_id: str | None = None
    user_photo: str | None = None
    age: int | None = None
    gender: Gender | None = None

    @property
    def auth_methods(self) -> tuple[PasswordAuth | ProviderAuth, ...]:
        methods: list[PasswordAuth | ProviderAuth] = []
        if self.password_hash:
            methods.append(PasswordAuth(self.password_hash))
        if self.google_id:
            methods.append(ProviderAuth(self.google_id))
        return tuple(methods)

    @property
    def has_password(self) -> bool:
        return any(isinstance(m, PasswordAuth) for m in self.auth_methods)


@dataclass
class ProfileUpdate:
    """Subset of profile fields a user may change. None means 'leave as is'."""
    name: str | None = None
    phone: str | None = None
    age: int | None = None
    gender: Gender | None = None
