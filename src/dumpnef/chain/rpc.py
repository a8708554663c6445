"""Neo N3 RPC client using raw JSON-RPC via requests."""

from __future__ import annotations

import functools
from typing import Any

import requests


class RPCError(Exception):
    """Raised when an RPC call fails."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


def _call(method: str, params: list[Any], rpc_url: str) -> Any:
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    try:
        resp = requests.post(rpc_url, json=payload, timeout=10)
        resp.raise_for_status()
    except (requests.RequestException, ConnectionError) as e:
        raise RPCError(f"RPC request failed: {e}") from e

    try:
        data = resp.json()
    except ValueError as e:
        raise RPCError(f"RPC returned invalid JSON: {e}") from e

    if "error" in data:
        err = data["error"]
        raise RPCError(
            f"RPC error: {err.get('message', 'unknown')}",
            code=err.get("code"),
        )

    result = data.get("result")
    if result is None:
        raise RPCError("RPC returned null result")

    return result


@functools.lru_cache(maxsize=256)
def get_contract_state(contract: str, rpc_url: str) -> dict[str, Any]:
    """Fetch a deployed contract via getcontractstate.

    `contract` is a script hash, a contract id or a native contract name.
    Returns the state object (with "nef" and "manifest" keys).
    Raises RPCError on network/RPC failures.
    """
    result = _call("getcontractstate", [contract], rpc_url)
    if not isinstance(result, dict) or "nef" not in result:
        raise RPCError("RPC returned a contract state without a NEF")
    return result


def clear_cache() -> None:
    """Clear LRU caches (useful for testing)."""
    get_contract_state.cache_clear()
