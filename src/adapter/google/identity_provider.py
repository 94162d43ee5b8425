"""Google implementation of IdentityProvider.

Verifies Google Sign-In ID tokens against the configured OAuth client id.
Google's signing certificates are fetched over a caching session, so they
are only refetched when their HTTP cache headers expire.

See https://google-auth.readthedocs.io/en/stable/reference/google.oauth2.id_token.html
"""

import logging
from threading import RLock

import cachecontrol
import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.id_token
import requests

from domain.model.errors import InvalidIdentityTokenError, UpstreamError
from domain.model.identity import IdentityClaims

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class _TimeoutRequest(google.auth.transport.requests.Request):
    """Transport request that applies a default timeout to every call."""

    def __init__(self, session: requests.Session, timeout: float):
        super().__init__(session=session)
        self._timeout = timeout

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        return super().__call__(
            url, method=method, body=body, headers=headers,
            timeout=timeout or self._timeout, **kwargs,
        )


def _is_verified(value) -> bool:
    # Some Google tokens carry the flag as the string "true"
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


class GoogleIdentityProvider:
    def __init__(self, client_id: str, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 session: requests.Session | None = None):
        if not client_id:
            raise ValueError("GOOGLE_CLIENT_ID is required for Google sign-in")
        self.client_id = client_id
        self.timeout = timeout
        self._session = session or cachecontrol.CacheControl(requests.Session())
        # requests sessions are not guaranteed thread safe
        self._lock = RLock()

    def verify(self, id_token: str) -> IdentityClaims:
        """Verify a Google ID token and return its claims.

        Raises:
            InvalidIdentityTokenError: bad signature, audience, issuer or expiry
            UpstreamError: Google certificates could not be fetched
        """
        try:
            with self._lock:
                request = _TimeoutRequest(self._session, self.timeout)
                idinfo = google.oauth2.id_token.verify_oauth2_token(id_token, request, self.client_id)
        except google.auth.exceptions.TransportError as e:
            logger.error("Failed to fetch Google certificates", extra={"error": str(e)})
            raise UpstreamError("Failed to authenticate with Google.")
        except (ValueError, google.auth.exceptions.GoogleAuthError) as e:
            logger.warning("Google ID token rejected", extra={"error": str(e)})
            raise InvalidIdentityTokenError("Invalid Google ID token")

        subject = idinfo.get("sub")
        if not subject:
            raise InvalidIdentityTokenError("Google ID token missing subject")

        return IdentityClaims(
            email=idinfo.get("email"),
            subject=subject,
            name=idinfo.get("name"),
            picture=idinfo.get("picture"),
            email_verified=_is_verified(idinfo.get("email_verified")),
        )
