"""
Async client for the Transmission RPC API.

Each call performs the session handshake and then the operation itself:

    1. session-get to obtain the X-Transmission-Session-Id token
    2. POST of the request envelope carrying that token

With ``cache_session=True`` the token is kept between calls and only refetched after
the server rejects it. A rejected token is reported as StaleSessionError and never
retried automatically.

Usage:
    from transrpc import TransClient, BasicAuth, TorrentGetField

    client = TransClient.with_auth(
        "http://localhost:9091/transmission/rpc", BasicAuth(user="admin", password="secret")
    )
    response = await client.torrent_get([TorrentGetField.ID, TorrentGetField.NAME])
    if response.is_success:
        names = [torrent.name for torrent in response.arguments.torrents]
"""

from typing import Optional, Sequence, Type, TypeVar

import httpx
from pydantic import ValidationError

from .auth import AuthProvider, BasicAuth
from .config import Config
from .errors import DecodeError, StaleSessionError, TransportError
from .logger import logger
from .session import SESSION_ID_HEADER, SessionNegotiator, SessionTokenCache, rpc_headers
from .types import (
    Nothing,
    RpcRequest,
    RpcResponse,
    RpcResponseArgument,
    SessionGet,
    Torrent,
    TorrentAction,
    TorrentGetField,
    Torrents,
    check_response_type,
)


ArgumentT = TypeVar("ArgumentT", bound=RpcResponseArgument)


def decode_response(body: str, response_type: Type[ArgumentT]) -> RpcResponse[ArgumentT]:
    """Decode a response body into RpcResponse[response_type]."""
    try:
        return RpcResponse[response_type].model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Invalid {response_type.__name__} response: {e}", body=body) from e


class TransClient:
    def __init__(
        self,
        url: str,
        auth: Optional[BasicAuth] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = Config.TRANSMISSION_TIMEOUT,
        cache_session: bool = False
    ):
        self.url = url
        self.auth = AuthProvider(auth)
        self.timeout = timeout
        self.transport = transport
        self.negotiator = SessionNegotiator(url, self.auth, transport=transport, timeout=timeout)
        self.token_cache = SessionTokenCache(self.negotiator) if cache_session else None

    @classmethod
    def new(cls, url: str, **kwargs) -> "TransClient":
        """Client without authentication."""
        return cls(url, **kwargs)

    @classmethod
    def with_auth(cls, url: str, basic_auth: BasicAuth, **kwargs) -> "TransClient":
        """Client that sends basic auth with every request."""
        return cls(url, auth=basic_auth, **kwargs)

    @classmethod
    def from_config(cls, config=Config, **kwargs) -> "TransClient":
        auth = None
        if config.TRANSMISSION_USERNAME:
            auth = BasicAuth(user=config.TRANSMISSION_USERNAME, password=config.TRANSMISSION_PASSWORD)
        kwargs.setdefault("timeout", config.TRANSMISSION_TIMEOUT)
        kwargs.setdefault("cache_session", config.TRANSMISSION_CACHE_SESSION)
        return cls(config.TRANSMISSION_URL, auth=auth, **kwargs)

    def __repr__(self):
        return f"TransClient(url={self.url!r}, auth={self.auth!r})"

    async def fetch_session_id(self) -> str:
        """Run the session handshake once and return the token."""
        return await self.negotiator.fetch_token()

    # -------------------------------------------------------------------------
    # Typed methods
    # -------------------------------------------------------------------------

    async def session_get(self) -> RpcResponse[SessionGet]:
        """Fetch the daemon's session settings."""
        return await self.call(RpcRequest.session_get(), SessionGet)

    async def torrent_get(self, fields: Sequence[TorrentGetField]) -> RpcResponse[Torrents[Torrent]]:
        """
        List all torrents.

        Args:
            fields: Torrent fields to return; the rest stay None on each Torrent
        """
        return await self.call(RpcRequest.torrent_get(fields), Torrents[Torrent])

    async def torrent_action(self, action: TorrentAction, ids: Sequence[int]) -> RpcResponse[Nothing]:
        """
        Apply an action (start, stop, verify, ...) to the given torrents.

        Args:
            action: Action to perform
            ids: Transmission torrent ids
        """
        return await self.call(RpcRequest.torrent_action(action, ids), Nothing)

    # -------------------------------------------------------------------------
    # Generic call path
    # -------------------------------------------------------------------------

    async def call(self, request: RpcRequest, response_type: Type[ArgumentT]) -> RpcResponse[ArgumentT]:
        """
        Send ``request`` and decode the response arguments as ``response_type``.

        A non-success ``result`` is returned, not raised; check ``is_success``.

        Raises:
            TypeError: If ``response_type`` does not fit ``request.method`` (before any I/O)
            TransportError: If the daemon could not be reached or answered with an HTTP error
            ProtocolError: If the session handshake failed
            StaleSessionError: If the daemon rejected the session id
            DecodeError: If the body does not match ``response_type``
        """
        check_response_type(request.method, response_type)
        body = request.to_json()
        logger.info(f"Calling {request.method} on {self.url} with auth {self.auth!r}")

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as http:
            session_id = await self._session_id(http)
            logger.debug(f"Request body: {body}")
            try:
                response = await http.post(
                    self.url,
                    content=body,
                    headers=rpc_headers(session_id),
                    auth=self.auth.httpx_auth(),
                )
            except httpx.HTTPError as e:
                raise TransportError(f"Could not connect to Transmission at {self.url}: {e}") from e

        if response.status_code == httpx.codes.CONFLICT:
            replacement = response.headers.get(SESSION_ID_HEADER)
            if self.token_cache is not None:
                self.token_cache.invalidate(session_id, replacement)
            raise StaleSessionError(f"Session id rejected by {self.url}", session_id=replacement)

        if response.is_error:
            raise TransportError(
                f"{request.method} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        rpc_response = decode_response(response.text, response_type)
        logger.debug(f"Response body: {rpc_response!r}")
        return rpc_response

    async def _session_id(self, http: httpx.AsyncClient) -> str:
        if self.token_cache is not None:
            return await self.token_cache.get(http)
        return await self.negotiator.fetch_token(http)
