"""Tests for the User domain model."""

from datetime import datetime, timezone

from domain.model.user import PasswordAuth, ProviderAuth, User


def _user(**kwargs) -> User:
    now = datetime.now(timezone.utc)
    return User(id="u1", email="a@x.com", created_at=now, updated_at=now, **kwargs)


def test_password_only_account():
    user = _user(password_hash="$2b$10$hash")
    assert user.auth_methods == (PasswordAuth("$2b$10$hash"),)
    assert user.has_password


def test_provider_only_account():
    user = _user(google_id="google-sub-1")
    assert user.auth_methods == (ProviderAuth("google-sub-1"),)
    assert not user.has_password


def test_account_with_both_methods():
    user = _user(password_hash="$2b$10$hash", google_id="google-sub-1")
    assert set(user.auth_methods) == {PasswordAuth("$2b$10$hash"), ProviderAuth("google-sub-1")}


def test_account_without_methods():
    assert _user().auth_methods == ()
