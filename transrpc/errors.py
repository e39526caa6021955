"""
Exceptions raised by the Transmission RPC client.

- TransmissionError: Base exception for all client failures
- TransportError: The HTTP exchange itself failed (connect, timeout, TLS, HTTP status)
- ProtocolError: The server answered but broke the session-id header contract
- StaleSessionError: The server rejected the session id with 409 Conflict
- DecodeError: The response body does not match the expected envelope shape
- RpcResultError: Raised on demand for a non-success ``result`` field
"""

from typing import Optional


class TransmissionError(Exception):
    """Base exception for Transmission RPC errors."""
    pass


class TransportError(TransmissionError):
    """Raised when the request could not be delivered or the HTTP status is an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(TransmissionError):
    """Raised when the server response violates the session-id header contract."""
    pass


class StaleSessionError(ProtocolError):
    """
    Raised when the server answers an operation call with 409 Conflict.

    The session id sent with the request is no longer valid. ``session_id`` holds the
    replacement the server offered, if any.
    """

    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message)
        self.session_id = session_id


class DecodeError(TransmissionError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class RpcResultError(TransmissionError):
    """Raised by RpcResponse.raise_for_result() when ``result`` is not "success"."""

    def __init__(self, result: str):
        super().__init__(f"RPC call failed: {result}")
        self.result = result
