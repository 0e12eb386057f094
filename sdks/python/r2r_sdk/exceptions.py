"""R2R SDK exceptions."""

from typing import Any


class R2RError(Exception):
    """Base exception for R2R SDK errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(R2RError):
    """The request never produced a usable response.

    Raised for connection failures, timeouts, undecodable bodies and
    failures while reading a streamed response.
    """


class ServerError(R2RError):
    """The server answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        super().__init__(message)
