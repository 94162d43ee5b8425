"""Auth service — sign-in, registration, token refresh and profile logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import (
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from domain.model.token import AuthResult
from domain.model.user import MAX_AGE, MIN_AGE, ProfileUpdate, User
from port.identity_provider import IdentityProvider
from port.user_repository import UserRepository
from services.token_service import TokenService

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of the input
MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS = "Invalid email or password"


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash or over-long input
        return False


def _validate_password(password: str) -> None:
    if not password:
        raise ValidationError("Password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def _validate_profile(changes: ProfileUpdate) -> None:
    if changes.age is not None and not MIN_AGE <= changes.age <= MAX_AGE:
        raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}")


def sign_in_with_identity_provider(
    repo: UserRepository,
    provider: IdentityProvider,
    tokens: TokenService,
    id_token: str,
) -> AuthResult:
    """Sign in (or sign up) with an identity-provider token.

    Finds the user by verified email, creating one on first sign-in. An
    existing password-only account is linked to the provider subject.

    Raises:
        InvalidIdentityTokenError: token rejected by the provider verifier
        ValidationError: email not verified by the provider
        UpstreamError: provider or store unavailable
    """
    claims = provider.verify(id_token)
    if not claims.email_verified or not claims.email:
        raise ValidationError("Email not verified by google")

    user = repo.get_by_email(claims.email)
    is_new_user = user is None

    if user is None:
        try:
            user = repo.create(
                email=claims.email,
                name=claims.name,
                google_id=claims.subject,
                user_photo=claims.picture,
            )
            logger.info("User signed up via identity provider", extra={"userId": user.id})
        except DuplicateError:
            # a concurrent sign-in for the same email created the user first
            user = repo.get_by_email(claims.email)
            if user is None:
                raise
            is_new_user = False

    if not is_new_user and not user.google_id:
        linked = repo.link_provider(user.id, claims.subject, user_photo=claims.picture)
        if linked is not None:
            user = linked
            logger.info("Linked identity provider to user", extra={"userId": user.id})

    return AuthResult(user=user, tokens=tokens.issue_pair(user.id), is_new_user=is_new_user)


def register(
    repo: UserRepository,
    tokens: TokenService,
    email: str,
    password: str,
    name: str | None = None,
    phone: str | None = None,
) -> AuthResult:
    """Register a new email/password user.

    Raises:
        DuplicateError: email already registered
        ValidationError: password missing or too long
        UpstreamError: store failure
    """
    if repo.get_by_email(email):
        raise DuplicateError("User already exists with this email")

    _validate_password(password)
    password_hash = _hash_password(password)

    user = repo.create(email=email, password_hash=password_hash, name=name, phone=phone)
    logger.info("User registered", extra={"userId": user.id})
    return AuthResult(user=user, tokens=tokens.issue_pair(user.id), is_new_user=True)


def authenticate(repo: UserRepository, tokens: TokenService, email: str, password: str) -> AuthResult:
    """Authenticate a user by email and password.

    Raises:
        ValidationError: unknown email, wrong password, or provider-only account
    """
    user = repo.get_by_email(email)
    if not user:
        raise ValidationError(INVALID_CREDENTIALS)

    if not user.has_password:
        raise ValidationError("Please use Google sign-in for this account")

    if not _verify_password(password, user.password_hash):
        raise ValidationError(INVALID_CREDENTIALS)

    logger.info("User logged in", extra={"userId": user.id})
    return AuthResult(user=user, tokens=tokens.issue_pair(user.id), is_new_user=False)


def refresh_access_token(repo: UserRepository, tokens: TokenService, refresh_token: str) -> str:
    """Mint a new access token from a refresh token.

    Raises:
        InvalidOrExpiredTokenError: refresh token rejected
        NotFoundError: user no longer exists
    """
    user_id = tokens.verify_refresh(refresh_token)
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return tokens.issue_access(user.id, expires_in=tokens.refreshed_access_ttl)


def get_profile(repo: UserRepository, tokens: TokenService, access_token: str) -> User:
    user_id = tokens.verify_access(access_token)
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_profile(
    repo: UserRepository,
    tokens: TokenService,
    access_token: str,
    changes: ProfileUpdate,
) -> User:
    """Update the caller's profile. Only name, phone, age and gender can change.

    Raises:
        InvalidOrExpiredTokenError: access token rejected
        ValidationError: age out of range
        NotFoundError: user no longer exists
    """
    user_id = tokens.verify_access(access_token)
    _validate_profile(changes)

    user = repo.update_profile(user_id, changes)
    if not user:
        raise NotFoundError("User not found")

    logger.info("Profile updated", extra={"userId": user.id})
    return user
