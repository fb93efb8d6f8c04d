"""Resolution of authenticated users from access tokens."""

from typing import Protocol
from uuid import UUID


class IdentityProvider(Protocol):
    """Interface for the hosted authentication provider."""

    def resolve_user(self, access_token: str) -> UUID | None:
        """Return the user id behind an access token, or None if invalid."""


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer ...` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
