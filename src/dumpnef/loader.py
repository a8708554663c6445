"""Input resolution: .nef path, inline Base64/hex script, or RPC contract state."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dumpnef.analysis.interop import UInt160, parse_call_flags
from dumpnef.chain.rpc import RPCError, get_contract_state
from dumpnef.debug_info import manifest_method_starts
from dumpnef.nef import MethodToken, parse_nef

logger = logging.getLogger(__name__)


class InputNotFound(Exception):
    """Raised when the input is neither a file nor an encoded script."""


@dataclass(frozen=True, slots=True)
class LoadedContract:
    script: bytes
    tokens: tuple[MethodToken, ...] = ()
    path: Path | None = None  # set when loaded from a .nef file
    method_names: dict[int, str] = field(default_factory=dict)  # from an RPC manifest


def decode_inline_script(text: str) -> bytes | None:
    """Decode a Base64 or hex script. 0x-prefixed input is always hex."""
    text = text.strip()
    if text.startswith(("0x", "0X")):
        try:
            return bytes.fromhex(text[2:])
        except ValueError:
            return None

    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error:
        pass

    try:
        return bytes.fromhex(text)
    except ValueError:
        return None


def _token_from_json(raw: dict[str, Any]) -> MethodToken:
    return MethodToken(
        hash=UInt160.parse(raw["hash"]),
        method=raw["method"],
        parameters_count=int(raw["paramcount"]),
        has_return_value=bool(raw["hasreturnvalue"]),
        call_flags=parse_call_flags(raw["callflags"]),
    )


def contract_from_state(state: dict[str, Any]) -> LoadedContract:
    """Build a LoadedContract from a getcontractstate result."""
    nef = state["nef"]
    try:
        script = base64.b64decode(nef["script"], validate=True)
        tokens = tuple(_token_from_json(t) for t in nef.get("tokens", []))
        method_names = manifest_method_starts(state.get("manifest") or {})
    except (KeyError, TypeError, ValueError, binascii.Error) as e:
        raise RPCError(f"Malformed contract state: {e}") from e
    return LoadedContract(script=script, tokens=tokens, method_names=method_names)


def _is_file(path: Path) -> bool:
    # Long inline scripts are not valid file names (ENAMETOOLONG)
    try:
        return path.is_file()
    except OSError:
        return False


def load_contract(source: str, rpc_url: str | None = None) -> LoadedContract:
    """Resolve the command line input into a script and its method tokens.

    With `rpc_url`, `source` names a deployed contract. Otherwise an existing
    path is read as a NEF file, then Base64 and hex decoding are tried.
    Raises InputNotFound, NefFormatError or RPCError.
    """
    if rpc_url:
        logger.debug("Fetching contract %s from %s", source, rpc_url)
        return contract_from_state(get_contract_state(source, rpc_url))

    path = Path(source)
    if _is_file(path):
        logger.debug("Reading NEF file %s", path)
        nef = parse_nef(path.read_bytes())
        return LoadedContract(script=nef.script, tokens=nef.tokens, path=path)

    script = decode_inline_script(source)
    if script is None:
        raise InputNotFound(
            "Input must be a path to an .nef file or a Base64 or Hex encoded Neo.VM script"
        )
    return LoadedContract(script=script)
