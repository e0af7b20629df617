from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class HttpReply:
    status_code: int
    body: bytes


class HttpTransport:
    """One-shot synchronous POSTs over a shared ``httpx.Client``.

    ``httpx.Client`` is safe to use from several threads, so a single
    transport can serve every caller of a client.
    """

    def __init__(self, timeout_seconds: float | None = 30.0, client: httpx.Client | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout_seconds)

    def post(self, url: str, headers: dict[str, str], body: bytes) -> HttpReply:
        try:
            response = self._client.post(url, headers=headers, content=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(f"POST {url} failed: {exc!r}")
            raise TransportError(f"HTTP request to {url} failed: {exc}", exc) from exc
        logger.debug(f"POST {url} -> {response.status_code}")
        return HttpReply(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
