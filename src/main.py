from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from dotenv import load_dotenv
from rich import print as console_print
from rich.markup import escape

from src.rpc_client.client import Client
from src.rpc_client.errors import RpcClientError
from src.rpc_client.jsonrpc import JsonRpcError

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").lower() in _TRUTHY


def _env_timeout() -> float:
    raw = os.getenv("RPC_TIMEOUT_SECONDS", "30")
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"RPC_TIMEOUT_SECONDS must be a number, got {raw!r}") from None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue one JSON-RPC call over HTTP")
    parser.add_argument("method", help="Remote method name")
    parser.add_argument("params", nargs="*", help="Positional parameters, each parsed as JSON")
    parser.add_argument("--url", default=None, help="Endpoint URL (env RPC_URL)")
    parser.add_argument("--user", default=None, help="Basic auth user (env RPC_USER)")
    parser.add_argument("--password", default=None, help="Basic auth password (env RPC_PASSWORD)")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds (env RPC_TIMEOUT_SECONDS)")
    parser.add_argument(
        "--verify-id",
        action="store_true",
        default=None,
        help="Reject responses whose id differs from the request id (env RPC_VERIFY_ID)",
    )
    return parser.parse_args(argv)


def _parse_param(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _build_client(args: argparse.Namespace) -> Client:
    url = args.url or os.getenv("RPC_URL", "http://127.0.0.1:8332")
    user = args.user or os.getenv("RPC_USER") or None
    password = args.password or os.getenv("RPC_PASSWORD") or None
    timeout = args.timeout if args.timeout is not None else _env_timeout()
    verify_id = args.verify_id if args.verify_id is not None else _env_flag("RPC_VERIFY_ID")

    if password is not None and user is None:
        raise RuntimeError("RPC_PASSWORD is set but RPC_USER is missing")

    return Client(url, user, password, timeout_seconds=timeout, verify_id=verify_id)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    verbose = _env_flag("VERBOSE")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = _parse_args(argv)
    params = [_parse_param(raw) for raw in args.params]

    with _build_client(args) as client:
        logger.info(f"Calling {args.method} on {client.url}")
        try:
            result = client.call(args.method, *params)
        except JsonRpcError as exc:
            console_print(f"[red]Server error {exc.code}:[/red] {escape(str(exc.message))}")
            if verbose and exc.data is not None:
                console_print(escape(exc.data) if isinstance(exc.data, str) else exc.data)
            return 1
        except RpcClientError as exc:
            console_print(f"[red]Call failed:[/red] {escape(str(exc))}")
            return 1

    console_print(escape(result) if isinstance(result, str) else result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
