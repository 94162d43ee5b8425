"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateError
from domain.model.user import ProfileUpdate, User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        password_hash: str | None = None,
        name: str | None = None,
        phone: str | None = None,
        google_id: str | None = None,
        user_photo: str | None = None,
    ) -> User:
        if any(u.email == email for u in self.store.values()):
            raise DuplicateError("User already exists with this email")

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            created_at=now,
            updated_at=now,
            name=name,
            phone=phone,
            password_hash=password_hash,
            google_id=google_id,
            user_photo=user_photo,
        )
        self.store[user_id] = user
        return replace(user)

    def update_profile(self, user_id: str, changes: ProfileUpdate) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        if changes.name is not None:
            user.name = changes.name
        if changes.phone is not None:
            user.phone = changes.phone
        if changes.age is not None:
            user.age = changes.age
        if changes.gender is not None:
            user.gender = changes.gender
        user.updated_at = datetime.now(timezone.utc)
        return replace(user)

    def link_provider(self, user_id: str, google_id: str, user_photo: str | None = None) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        user.google_id = google_id
        if user_photo and not user.user_photo:
            user.user_photo = user_photo
        user.updated_at = datetime.now(timezone.utc)
        return replace(user)

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None
