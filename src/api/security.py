"""Bearer-token configuration and security dependencies."""

import os
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from services.token_service import TokenService
from utils.durations import parse_duration

logger = logging.getLogger(__name__)

ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
ACCESS_TOKEN_EXPIRY = os.getenv("ACCESS_TOKEN_EXPIRY", "15m")
REFRESH_TOKEN_EXPIRY = os.getenv("REFRESH_TOKEN_EXPIRY", "7d")
# Lifetime of access tokens minted by /refresh, independent of ACCESS_TOKEN_EXPIRY
REFRESHED_ACCESS_TOKEN_EXPIRY = os.getenv("REFRESHED_ACCESS_TOKEN_EXPIRY", "2d")

security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    """Build the token service from environment configuration (once per process)."""
    if not ACCESS_TOKEN_SECRET or not REFRESH_TOKEN_SECRET:
        raise ValueError(
            "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET environment variables are required. "
            "Generate secure keys with: openssl rand -hex 32"
        )
    return TokenService(
        access_secret=ACCESS_TOKEN_SECRET,
        refresh_secret=REFRESH_TOKEN_SECRET,
        access_ttl=parse_duration(ACCESS_TOKEN_EXPIRY),
        refresh_ttl=parse_duration(REFRESH_TOKEN_EXPIRY),
        refreshed_access_ttl=parse_duration(REFRESHED_ACCESS_TOKEN_EXPIRY),
    )


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Extract the bearer token from the Authorization header. Raises 401 if absent."""
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
