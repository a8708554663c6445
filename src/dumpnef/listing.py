"""Text rendering of an emission plan, with optional ANSI colors."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TextIO

from colorama import Fore, Style, just_fix_windows_console

from dumpnef.analysis.alignment import (
    InstructionLine,
    MethodEnd,
    MethodStart,
    PlanEntry,
    SourceLine,
)
from dumpnef.analysis.disassembler import format_operand
from dumpnef.analysis.interop import contract_name, format_call_flags
from dumpnef.nef import MethodToken

ADDRESS_COLOR = Fore.YELLOW
OPCODE_COLOR = Fore.BLUE
COMMENT_COLOR = Fore.GREEN
METHOD_COLOR = Fore.MAGENTA
SOURCE_COLOR = Fore.CYAN


def _paint(text: str, color: str, colors: bool) -> str:
    if not colors:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def render_entry(entry: PlanEntry, width: int, colors: bool = False) -> str:
    if isinstance(entry, MethodStart):
        return _paint(f"# Method Start {entry.name}", METHOD_COLOR, colors)
    if isinstance(entry, MethodEnd):
        return _paint(f"# Method End {entry.name}", METHOD_COLOR, colors)
    if isinstance(entry, SourceLine):
        return _paint(
            f'# Code {entry.file_name} line {entry.line}: "{entry.text}"',
            SOURCE_COLOR,
            colors,
        )
    if isinstance(entry, InstructionLine):
        text = _paint(f"{entry.address:0{width}d}", ADDRESS_COLOR, colors)
        opcode = f" {entry.name}"
        if entry.operand:
            opcode += f" {entry.operand}"
        text += _paint(opcode, OPCODE_COLOR, colors)
        if entry.comment:
            text += _paint(f" # {entry.comment}", COMMENT_COLOR, colors)
        return text
    raise TypeError(f"Unknown plan entry: {entry!r}")


def render_lines(
    plan: Iterable[PlanEntry], width: int, colors: bool = False
) -> list[str]:
    """Listing lines, with one blank line between address groups."""
    lines: list[str] = []
    current: int | None = None
    for entry in plan:
        if current is not None and entry.address != current:
            lines.append("")
        current = entry.address
        lines.append(render_entry(entry, width, colors))
    return lines


def render_listing(plan: Iterable[PlanEntry], width: int, colors: bool = False) -> str:
    return "\n".join(render_lines(plan, width, colors))


def write_listing(
    plan: Iterable[PlanEntry], stream: TextIO, width: int, colors: bool = False
) -> None:
    if colors:
        just_fix_windows_console()
    for line in render_lines(plan, width, colors):
        stream.write(line + "\n")


def render_method_tokens(tokens: Sequence[MethodToken]) -> list[str]:
    """Per-token summary, indexed the way CALLT operands are printed."""
    if not tokens:
        return ["No Method Tokens in contract"]

    lines: list[str] = []
    for index, token in enumerate(tokens):
        plural = "" if token.parameters_count == 1 else "s"
        returns = "has" if token.has_return_value else "does not have"
        lines.append(
            f"{format_operand(index.to_bytes(2, 'little'))}: "
            f"{contract_name(token.hash)} {token.method}"
        )
        lines.append(f"\t{token.parameters_count} parameter{plural}")
        lines.append(f"\t{returns} return value")
        lines.append(f"\t{format_call_flags(token.call_flags)} call flags")
    return lines
