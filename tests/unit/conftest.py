"""Shared fixtures for R2R SDK unit tests.

Requests go through ``httpx.MockTransport`` so every call the client makes is
recorded and can be asserted on; no server is required.
"""

import json
from collections.abc import Callable
from email import message_from_bytes
from email.policy import HTTP

import httpx
import pytest
import pytest_asyncio

from r2r_sdk import R2RClient

BASE_URL = "http://r2r.test"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request and answers with a configurable handler."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={"results": "ok"})
        )
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest_asyncio.fixture
async def client(transport):
    http_client = httpx.AsyncClient(transport=transport)
    r2r = R2RClient(BASE_URL, http_client=http_client)
    yield r2r
    await http_client.aclose()


def json_body(request: httpx.Request):
    return json.loads(request.content)


def multipart_parts(request: httpx.Request) -> list[tuple[str, str | None, bytes]]:
    """Split a multipart request into ordered (field name, filename, payload) triples."""
    head = f"Content-Type: {request.headers['content-type']}\r\n\r\n".encode()
    message = message_from_bytes(head + request.content, policy=HTTP)
    parts = []
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        parts.append((name, part.get_filename(), part.get_payload(decode=True)))
    return parts
