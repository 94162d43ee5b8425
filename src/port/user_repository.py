from typing import Protocol

from domain.model.user import ProfileUpdate, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Lookups return None when the user does not exist. Store failures raise
    UpstreamError; a unique-email violation raises DuplicateError.
    """
    def create(
        self,
        email: str,
        password_hash: str | None = None,
        name: str | None = None,
        phone: str | None = None,
        google_id: str | None = None,
        user_photo: str | None = None,
    ) -> User:
        """Create a new user and return it."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID."""
        ...

    def update_profile(self, user_id: str, changes: ProfileUpdate) -> User | None:
        """Apply non-None fields of `changes` and bump updated_at. Return the updated User."""
        ...

    def link_provider(self, user_id: str, google_id: str, user_photo: str | None = None) -> User | None:
        """Attach an identity-provider subject to an existing user. Return the updated User."""
        ...
