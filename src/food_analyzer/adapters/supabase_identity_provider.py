"""Supabase Auth backed identity provider."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from food_analyzer.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Resolves access tokens through Supabase Auth."""

    client: Client

    def resolve_user(self, access_token: str) -> UUID | None:
        """Return the Supabase user id for an access token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UUID(response.user.id)
