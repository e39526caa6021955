"""
Session id negotiation for the Transmission RPC endpoint.

Transmission protects its RPC endpoint against CSRF with an opaque session id. The
daemon returns it in the X-Transmission-Session-Id response header, typically on a
409 Conflict answer to a request that did not carry it, and every later request must
send it back in the same header.

SessionNegotiator performs the handshake and nothing else. SessionTokenCache keeps one
token for a client and refreshes it single-flight when it is missing or invalidated.
"""

import asyncio
from enum import Enum
from typing import Dict, Optional

import httpx

from .auth import AuthProvider
from .config import Config
from .errors import ProtocolError, TransmissionError, TransportError
from .logger import logger
from .types import RpcRequest


SESSION_ID_HEADER = "X-Transmission-Session-Id"


def rpc_headers(session_id: Optional[str] = None) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if session_id is not None:
        headers[SESSION_ID_HEADER] = session_id
    return headers


class SessionNegotiator:
    def __init__(
        self,
        url: str,
        auth: Optional[AuthProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = Config.TRANSMISSION_TIMEOUT
    ):
        self.url = url
        self.auth = auth or AuthProvider()
        self.transport = transport
        self.timeout = timeout

    async def fetch_token(self, http: Optional[httpx.AsyncClient] = None) -> str:
        """
        Perform a session-get call and return the session id from its response headers.

        Every call is a full round trip; nothing is cached.

        Args:
            http: Client to send the request with. A temporary one is opened if omitted.

        Raises:
            TransportError: If the daemon could not be reached
            ProtocolError: If the response carries no session id header
        """
        if http is None:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as http:
                return await self.fetch_token(http)

        logger.info("Requesting session id info")
        try:
            response = await http.post(
                self.url,
                content=RpcRequest.session_get().to_json(),
                headers=rpc_headers(),
                auth=self.auth.httpx_auth(),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Could not connect to Transmission at {self.url}: {e}") from e

        session_id = response.headers.get(SESSION_ID_HEADER)
        if not session_id:
            raise ProtocolError(
                f"Response from {self.url} (HTTP {response.status_code}) "
                f"has no {SESSION_ID_HEADER} header"
            )
        logger.info(f"Received session id: {session_id}")
        return session_id


class TokenState(Enum):
    EMPTY = "empty"
    FETCHING = "fetching"
    VALID = "valid"
    INVALIDATED = "invalidated"


class SessionTokenCache:
    """
    Shared session id slot for one client.

    Concurrent callers that find the slot empty wait on a single refresh instead of each
    fetching their own token.
    """

    def __init__(self, negotiator: SessionNegotiator):
        self.negotiator = negotiator
        self.state = TokenState.EMPTY
        self._token: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    async def get(self, http: Optional[httpx.AsyncClient] = None) -> str:
        if self._token is not None:
            return self._token

        async with self._lock:
            if self._token is None:
                previous = self.state
                self.state = TokenState.FETCHING
                try:
                    self._token = await self.negotiator.fetch_token(http)
                except TransmissionError:
                    self.state = previous
                    raise
                self.state = TokenState.VALID
            return self._token

    def invalidate(self, stale: str, replacement: Optional[str] = None):
        """
        Drop ``stale`` from the slot, or swap in ``replacement`` if the server sent one.

        A token that was already replaced by another caller is left alone.
        """
        if self._token is not None and self._token != stale:
            return
        if replacement:
            logger.info(f"Session id rotated: {replacement}")
            self._token = replacement
            self.state = TokenState.VALID
        else:
            logger.info("Session id invalidated")
            self._token = None
            self.state = TokenState.INVALIDATED
