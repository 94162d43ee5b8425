"""Authentication routes (sign-in, registration, refresh, profile).

Handlers are plain functions: the repository, bcrypt and the Google verifier
all block, so FastAPI runs them in its threadpool.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_identity_provider, get_user_repo
from api.models import (
    AuthResponse,
    EmailLoginRequest,
    GoogleLoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    serialize_user,
)
from api.security import get_bearer_token, get_token_service
from domain.model.errors import InvalidIdentityTokenError, InvalidOrExpiredTokenError
from domain.model.token import AuthResult
from domain.model.user import ProfileUpdate
from port.identity_provider import IdentityProvider
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=serialize_user(result.user),
        accessToken=result.tokens.access_token,
        refreshToken=result.tokens.refresh_token,
        isNewUser=result.is_new_user,
    )


@router.post("/login", response_model=AuthResponse)
def login_with_google(
    request: GoogleLoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    provider: IdentityProvider = Depends(get_identity_provider),
    tokens: TokenService = Depends(get_token_service),
):
    """Sign in or sign up with a Google ID token.

    Returns:
        User, token pair and whether the account was just created

    Raises:
        400 email not verified, 500 rejected ID token, verifier or store failure
    """
    try:
        result = auth_service.sign_in_with_identity_provider(repo, provider, tokens, request.id_token)
    except InvalidIdentityTokenError as e:
        logger.warning("Google ID token rejected", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to authenticate with Google.")
    return _auth_response(result)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user with email and password.

    Raises:
        400 if the email is already registered or the input is invalid
    """
    result = auth_service.register(
        repo,
        tokens,
        email=request.email,
        password=request.password,
        name=request.name,
        phone=request.phone,
    )
    return _auth_response(result)


@router.post("/login-email", response_model=AuthResponse)
def login_with_email(
    request: EmailLoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password. Raises 400 on invalid credentials."""
    result = auth_service.authenticate(repo, tokens, request.email, request.password)
    return _auth_response(result)


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    request: Optional[RefreshRequest] = None,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange a refresh token for a new access token.

    Raises:
        401 no refresh token, 403 invalid or expired, 404 user not found
    """
    if request is None or not request.refreshToken:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No refresh token provided")

    try:
        access_token = auth_service.refresh_access_token(repo, tokens, request.refreshToken)
    except InvalidOrExpiredTokenError as e:
        logger.info("Refresh token rejected", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired refresh token")

    return RefreshResponse(accessToken=access_token)


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    token: str = Depends(get_bearer_token),
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Return the caller's profile. A token that fails verification is reported as a 500."""
    try:
        user = auth_service.get_profile(repo, tokens, token)
    except InvalidOrExpiredTokenError as e:
        logger.info("Access token rejected", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to get user profile")
    return ProfileResponse(user=serialize_user(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    token: str = Depends(get_bearer_token),
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Update name, phone, age and gender. Email cannot be changed."""
    # Empty strings leave the stored value untouched
    changes = ProfileUpdate(
        name=request.name or None,
        phone=request.phone or None,
        age=request.age,
        gender=request.gender,
    )
    try:
        user = auth_service.update_profile(repo, tokens, token, changes)
    except InvalidOrExpiredTokenError as e:
        logger.info("Access token rejected", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update user profile")
    return ProfileResponse(user=serialize_user(user))
