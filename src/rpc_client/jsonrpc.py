from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError, EncodeError


_NONCE_MODULUS = 2**64


@dataclass(slots=True, frozen=True)
class JsonRpcRequest:
    method: str
    params: tuple[Any, ...] = ()
    id: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "params": list(self.params),
            "id": self.id,
        }


@dataclass(slots=True, frozen=True)
class JsonRpcResponse:
    id: Any
    result: Any = None
    error: Any = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_dict(cls, payload: Any) -> JsonRpcResponse:
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")
        if "id" not in payload:
            raise DecodeError("JSON-RPC response has no 'id' member")
        return cls(
            id=payload["id"],
            result=payload.get("result"),
            error=payload.get("error"),
        )


class JsonRpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"JSON-RPC error {code}: {message}")


class NonceSource:
    """Strictly increasing request ids shared by every caller of one client.

    The counter starts at 0 and the first id handed out is 1. Increment and
    read happen under one lock so concurrent callers never see the same id.
    """

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value = (self._value + 1) % _NONCE_MODULUS
            return self._value

    def last(self) -> int:
        with self._lock:
            return self._value


def encode_request(request: JsonRpcRequest) -> bytes:
    try:
        text = json.dumps(request.to_dict(), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot encode request {request.method!r}: {exc}", exc) from exc
    return text.encode("utf-8")


def decode_response(body: bytes) -> JsonRpcResponse:
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Malformed JSON-RPC response: {exc}", exc) from exc
    return JsonRpcResponse.from_dict(payload)


def extract_result(response: JsonRpcResponse) -> Any:
    if response.is_error:
        err = response.error
        # 1.0 servers are free to send any JSON value as the error
        if isinstance(err, dict):
            raise JsonRpcError(
                code=err.get("code", -32000),
                message=err.get("message", "Unknown JSON-RPC error"),
                data=err.get("data"),
            )
        raise JsonRpcError(code=-32000, message=str(err), data=err)
    return response.result
