from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from typing import Any

from .errors import ResponseIdMismatchError, StatusError
from .jsonrpc import (
    JsonRpcRequest,
    JsonRpcResponse,
    NonceSource,
    decode_response,
    encode_request,
    extract_result,
)
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class Client:
    """Handle to a remote JSON-RPC 1.0 server reached over HTTP POST."""

    def __init__(
        self,
        url: str,
        user: str | None = None,
        password: str | None = None,
        *,
        transport: HttpTransport | None = None,
        timeout_seconds: float | None = 30.0,
        verify_id: bool = False,
    ) -> None:
        # A username without a password is fine, the reverse is a caller bug.
        assert password is None or user is not None, "password given without user"

        self.url = url
        self.user = user
        self.password = password
        self.verify_id = verify_id
        self._nonce = NonceSource()
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else HttpTransport(timeout_seconds)

    def build_request(self, name: str, params: Sequence[Any] | None = None) -> JsonRpcRequest:
        return JsonRpcRequest(
            method=name,
            params=tuple(params) if params is not None else (),
            id=self._nonce.next(),
        )

    def last_nonce(self) -> int:
        return self._nonce.last()

    def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        body = encode_request(request)
        logger.debug(f"Sending {request.method!r} id={request.id} to {self.url}")

        reply = self.transport.post(self.url, self._headers(), body)
        if reply.status_code != 200:
            logger.warning(f"{request.method!r} id={request.id} got HTTP {reply.status_code}")
            raise StatusError(reply.status_code)

        response = decode_response(reply.body)
        if self.verify_id and response.id != request.id:
            raise ResponseIdMismatchError(expected=request.id, actual=response.id)
        return response

    def call(self, method: str, *params: Any) -> Any:
        request = self.build_request(method, params)
        return extract_result(self.send_request(request))

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.user is not None:
            credentials = f"{self.user}:{self.password or ''}".encode("utf-8")
            headers["Authorization"] = f"Basic {base64.b64encode(credentials).decode('ascii')}"
        return headers
