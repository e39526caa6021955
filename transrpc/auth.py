"""
Basic-auth credentials for the Transmission RPC endpoint.

Credentials are not validated here; the daemon decides. A rejected login comes back
as an HTTP 401 and surfaces from the client as a TransportError or ProtocolError.
"""

from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


class BasicAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: str
    password: str = Field(repr=False)


class AuthProvider:
    """Applies optional credentials to every outbound request."""

    def __init__(self, credentials: Optional[BasicAuth] = None):
        self.credentials = credentials

    @property
    def enabled(self) -> bool:
        return self.credentials is not None

    def httpx_auth(self) -> Optional[httpx.BasicAuth]:
        if self.credentials is None:
            return None
        return httpx.BasicAuth(self.credentials.user, self.credentials.password)

    def __repr__(self):
        user = self.credentials.user if self.credentials else None
        return f"AuthProvider(user={user!r})"
