"""Identity provider port — verifies third-party sign-in tokens."""

from typing import Protocol

from domain.model.identity import IdentityClaims


class IdentityProvider(Protocol):
    """Port for verifying identity-provider tokens.

    Raises InvalidIdentityTokenError when the token is rejected and
    UpstreamError when the provider cannot be reached.
    """

    def verify(self, id_token: str) -> IdentityClaims:
        ...
