"""dumpnef command line: disassemble a Neo N3 contract into an annotated listing.

Usage:
    dumpnef contract.nef
    dumpnef contract.nef --method-tokens
    dumpnef DAJoaUA=                      # inline Base64 script
    dumpnef 0x0c02686940                  # inline hex script
    dumpnef 0xd2a4cff31913016155e38e474a2c06d08be276cf --rpc

Environment:
    DUMPNEF_DISABLE_COLORS - disable ANSI colors (NO_COLOR is honored too)
    DUMPNEF_RPC_URL        - node used by --rpc
    DUMPNEF_LOG_LEVEL      - logging level for diagnostics on stderr
"""

from __future__ import annotations

import argparse
import logging
import sys

from dumpnef.analysis.alignment import build_plan
from dumpnef.analysis.disassembler import DecodeError, address_width, disassemble
from dumpnef.chain.rpc import RPCError
from dumpnef.config import ConfigError, load_config
from dumpnef.debug_info import (
    DebugInfoError,
    load_debug_info,
    load_manifest_method_starts,
)
from dumpnef.listing import render_method_tokens, write_listing
from dumpnef.loader import InputNotFound, load_contract
from dumpnef.nef import NefFormatError

logger = logging.getLogger(__name__)

FATAL_ERRORS = (
    ConfigError,
    InputNotFound,
    NefFormatError,
    DecodeError,
    RPCError,
    OSError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dumpnef",
        description="Dump the instructions of a Neo N3 contract",
    )
    parser.add_argument(
        "input",
        help="Path to .NEF file or contract hex string",
    )
    parser.add_argument(
        "--disable-colors",
        action="store_true",
        help="Disable colors in Neo VM output",
    )
    parser.add_argument(
        "--method-tokens",
        action="store_true",
        help="List the contract's method tokens instead of its instructions",
    )
    parser.add_argument(
        "--rpc",
        action="store_true",
        help="Treat input as a deployed contract hash and fetch it over RPC",
    )
    parser.add_argument(
        "--rpc-url",
        default=None,
        help="RPC node for --rpc (default: DUMPNEF_RPC_URL or seed1.neo.org)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostics to stderr",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    config = load_config()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    rpc_url = (args.rpc_url or config.rpc_url) if args.rpc else None
    contract = load_contract(args.input, rpc_url)

    if args.method_tokens:
        for line in render_method_tokens(contract.tokens):
            print(line)
        return 0

    debug_info = None
    method_names = contract.method_names
    if contract.path is not None:
        try:
            debug_info = load_debug_info(contract.path)
        except DebugInfoError as e:
            logger.debug("Ignoring debug info for %s: %s", contract.path, e)
        if debug_info is None:
            method_names = load_manifest_method_starts(contract.path)

    instructions = disassemble(contract.script)
    logger.debug("Decoded %d instructions", len(instructions))

    # The whole plan is built before anything is written
    plan = build_plan(
        instructions,
        debug_info,
        method_names=method_names,
        tokens=contract.tokens,
    )
    colors = not (args.disable_colors or config.disable_colors)
    write_listing(plan, sys.stdout, address_width(instructions), colors=colors)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except FATAL_ERRORS as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
