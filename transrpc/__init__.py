"""
transrpc - Typed async client for the Transmission RPC API.

Handles the X-Transmission-Session-Id handshake and decodes each response into a
typed envelope whose argument shape matches the method that was called.
"""

from .auth import BasicAuth
from .client import TransClient
from .config import Config
from .errors import (
    DecodeError,
    ProtocolError,
    RpcResultError,
    StaleSessionError,
    TransmissionError,
    TransportError,
)
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
    TorrentStatus,
)

__version__ = "0.1.0"
__all__ = [
    "TransClient",
    "BasicAuth",
    "Config",
    "TransmissionError",
    "TransportError",
    "ProtocolError",
    "StaleSessionError",
    "DecodeError",
    "RpcResultError",
    "RpcRequest",
    "RpcResponse",
    "RpcResponseArgument",
    "SessionGet",
    "Torrent",
    "Torrents",
    "TorrentGetField",
    "TorrentAction",
    "TorrentStatus",
    "Nothing",
]
