"""
MS Graph client setup for a signed-in user's delegated token.
"""

import time

from azure.core.credentials import AccessToken
from msgraph import GraphServiceClient

# Delegated tokens from the auth code flow live roughly an hour
DEFAULT_TOKEN_LIFETIME = 3600


class DelegatedTokenCredential:
    """Token credential that hands the Graph SDK an already-acquired access token."""

    def __init__(self, access_token: str, expires_on: int | None = None):
        self._access_token = access_token
        self._expires_on = expires_on or int(time.time()) + DEFAULT_TOKEN_LIFETIME

    def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        return AccessToken(self._access_token, self._expires_on)


def get_graph_client(access_token: str) -> GraphServiceClient:
    """Create a Graph client acting as the user who owns the token."""
    credential = DelegatedTokenCredential(access_token)
    return GraphServiceClient(credentials=credential)
