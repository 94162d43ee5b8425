"""In-memory implementation of IdentityProvider for testing."""

from domain.model.errors import InvalidIdentityTokenError
from domain.model.identity import IdentityClaims


class FakeIdentityProvider:
    """Accepts only tokens registered with `add_token`."""

    def __init__(self):
        self.tokens: dict[str, IdentityClaims] = {}
        self.calls: list[str] = []

    def add_token(self, id_token: str, claims: IdentityClaims) -> None:
        self.tokens[id_token] = claims

    def verify(self, id_token: str) -> IdentityClaims:
        self.calls.append(id_token)
        claims = self.tokens.get(id_token)
        if claims is None:
            raise InvalidIdentityTokenError("Invalid identity token")
        return claims
