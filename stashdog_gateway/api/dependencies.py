"""FastAPI dependencies for the backend client."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from stashdog_gateway.integrations.stashdog import StashDogClient

# HTTP Bearer token security scheme; the header is optional
security = HTTPBearer(auto_error=False)

_shared_client: Optional[StashDogClient] = None


def get_shared_client() -> StashDogClient:
    """Process-wide client configured from the environment."""
    global _shared_client
    if _shared_client is None:
        _shared_client = StashDogClient()
    return _shared_client


def get_stashdog_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> StashDogClient:
    """Get the client for this request.

    A bearer token on the request binds a per-request copy of the client to
    that token; otherwise the shared client (and its token, if any) is used.
    """
    client = get_shared_client()
    if credentials and credentials.credentials:
        return client.with_token(credentials.credentials)
    return client
