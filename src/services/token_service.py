"""Token service — issues and verifies access/refresh JWTs.

Both token kinds carry only the user id (`userId`) plus `iat`/`exp`, and are
signed with independent secrets so one kind is never accepted as the other.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from domain.model.errors import ExpiredTokenError, InvalidTokenError
from domain.model.token import TokenPair

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
USER_ID_CLAIM = "userId"


class TokenService:
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        refreshed_access_ttl: timedelta | None = None,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh token secrets are required")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.refreshed_access_ttl = refreshed_access_ttl or access_ttl

    def _encode(self, user_id: str, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            USER_ID_CLAIM: user_id,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)

    def _decode(self, token: str, secret: str) -> str:
        try:
            payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
        except ExpiredSignatureError:
            raise ExpiredTokenError("Token has expired")
        except JWTError as e:
            logger.debug("JWT verification failed", extra={"error": str(e)})
            raise InvalidTokenError("Invalid token")

        user_id = payload.get(USER_ID_CLAIM) if isinstance(payload, dict) else None
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Invalid token payload")
        return user_id

    def issue_pair(self, user_id: str) -> TokenPair:
        """Create an access/refresh token pair for a user."""
        return TokenPair(
            access_token=self._encode(user_id, self._access_secret, self.access_ttl),
            refresh_token=self._encode(user_id, self._refresh_secret, self.refresh_ttl),
        )

    def issue_access(self, user_id: str, expires_in: timedelta | None = None) -> str:
        return self._encode(user_id, self._access_secret, expires_in or self.access_ttl)

    def verify_access(self, token: str) -> str:
        """Verify an access token and return the user id.

        Raises:
            ExpiredTokenError: signature valid but token expired
            InvalidTokenError: bad signature, malformed token or payload
        """
        return self._decode(token, self._access_secret)

    def verify_refresh(self, token: str) -> str:
        """Verify a refresh token and return the user id. Raises like verify_access."""
        return self._decode(token, self._refresh_secret)
