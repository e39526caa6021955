import json

import httpx
import pytest

from transrpc.session import SESSION_ID_HEADER


class FakeTransmission:
    """
    Answers like a Transmission daemon.

    Requests without the current session id get a 409 carrying the id in the
    response header; requests with it get ``body`` with ``status_code``.
    """

    def __init__(self, session_id="abc123", body=None, status_code=200):
        self.session_id = session_id
        self.body = body if body is not None else {"result": "success", "arguments": {}}
        self.status_code = status_code
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.session_id or request.headers.get(SESSION_ID_HEADER) != self.session_id:
            headers = {SESSION_ID_HEADER: self.session_id} if self.session_id else {}
            return httpx.Response(409, headers=headers, text="<h1>409: Conflict</h1>")
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def payloads(self):
        return [json.loads(request.content) for request in self.requests]

    def token_fetches(self):
        return [r for r in self.requests if SESSION_ID_HEADER not in r.headers]


@pytest.fixture
def fake_daemon():
    return FakeTransmission()


@pytest.fixture
def refusing_transport():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)
    return httpx.MockTransport(handler)
