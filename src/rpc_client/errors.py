from __future__ import annotations

from typing import Any


class RpcClientError(Exception):
    """Base class for failures raised while performing a call."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class TransportError(RpcClientError):
    """The HTTP exchange could not be completed (DNS, connect, TLS, timeout)."""


class StatusError(RpcClientError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Unexpected HTTP status {status_code}")


class DecodeError(RpcClientError):
    """The response body is not a JSON-RPC response."""


class ResponseIdMismatchError(DecodeError):
    def __init__(self, expected: Any, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Response id {actual!r} does not match request id {expected!r}")


class EncodeError(RpcClientError):
    """The request could not be serialized."""
