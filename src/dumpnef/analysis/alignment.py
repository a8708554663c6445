"""Merge decoded instructions with debug info into an ordered emission plan.

For every instruction address the plan holds, in order: an optional
MethodStart, an optional SourceLine, the InstructionLine and an optional
MethodEnd. Lookup maps are built once from the debug info (or, degraded,
from manifest method offsets) and consulted by address in a single pass.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from dumpnef.analysis.comments import get_comment
from dumpnef.analysis.disassembler import Instruction, format_operand
from dumpnef.debug_info import DebugInfo, DocumentCache, SequencePoint, read_source_lines
from dumpnef.nef import MethodToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MethodStart:
    address: int
    name: str


@dataclass(frozen=True, slots=True)
class SourceLine:
    address: int
    file_name: str
    line: int
    text: str


@dataclass(frozen=True, slots=True)
class InstructionLine:
    address: int
    name: str
    operand: str  # formatted, "" when the instruction has none
    comment: str  # "" when the annotator has nothing to say


@dataclass(frozen=True, slots=True)
class MethodEnd:
    address: int
    name: str


PlanEntry = Union[MethodStart, SourceLine, InstructionLine, MethodEnd]


def _index_methods(
    debug_info: DebugInfo,
) -> tuple[dict[int, str], dict[int, str], dict[int, SequencePoint]]:
    starts: dict[int, str] = {}
    ends: dict[int, str] = {}
    points: dict[int, SequencePoint] = {}

    for method in debug_info.methods:
        start, end = method.range
        if start in starts:
            logger.debug("Duplicate method start at %d: %s", start, method.full_name)
        starts.setdefault(start, method.full_name)
        if end in ends:
            logger.debug("Duplicate method end at %d: %s", end, method.full_name)
        ends.setdefault(end, method.full_name)
        for sp in method.sequence_points:
            if sp.address in points:
                logger.debug("Duplicate sequence point at %d", sp.address)
            points.setdefault(sp.address, sp)

    return starts, ends, points


def source_text(lines: Sequence[str], sp: SequencePoint) -> str | None:
    """Covered text of a sequence point's first line, or None if out of range.

    Single-line spans are cut to their column range; multi-line spans run
    to the end of the first physical line.
    """
    start_line, start_column = sp.start
    end_line, end_column = sp.end
    if not 1 <= start_line <= len(lines):
        return None
    text = lines[start_line - 1][max(start_column - 1, 0) :]
    if start_line == end_line:
        text = text[: max(end_column - start_column, 0)]
    return text


def _source_line(
    documents: DocumentCache | None, sp: SequencePoint
) -> SourceLine | None:
    document = documents.get(sp.document) if documents is not None else None
    if document is None:
        logger.debug(
            "Sequence point at %d references unknown document %d",
            sp.address,
            sp.document,
        )
        return None

    file_name, lines = document
    text = source_text(lines, sp)
    if text is None:
        logger.debug(
            "Sequence point at %d references line %d past the end of %s",
            sp.address,
            sp.start[0],
            file_name,
        )
        return None
    return SourceLine(sp.address, file_name, sp.start[0], text)


def build_plan(
    instructions: Sequence[Instruction],
    debug_info: DebugInfo | None = None,
    *,
    method_names: Mapping[int, str] | None = None,
    tokens: Sequence[MethodToken] = (),
    syscalls: Mapping[int, str] | None = None,
    lookup: Callable[[str], list[str]] = read_source_lines,
) -> list[PlanEntry]:
    """Interleave instructions with method and source markers.

    `method_names` (manifest offset → name) is used only when `debug_info`
    is None and yields method starts alone. `lookup` reads a document's
    lines the first time a sequence point refers to it.
    """
    documents: DocumentCache | None = None
    ends: Mapping[int, str] = {}
    points: Mapping[int, SequencePoint] = {}
    if debug_info is not None:
        starts, ends, points = _index_methods(debug_info)
        documents = DocumentCache(debug_info, lookup)
    else:
        starts = dict(method_names or {})

    plan: list[PlanEntry] = []
    for instruction in instructions:
        address = instruction.address

        if address in starts:
            plan.append(MethodStart(address, starts[address]))

        if address in points:
            line = _source_line(documents, points[address])
            if line is not None:
                plan.append(line)

        operand = format_operand(instruction.operand) if len(instruction.operand) else ""
        plan.append(
            InstructionLine(
                address,
                instruction.name,
                operand,
                get_comment(instruction, tokens, syscalls),
            )
        )

        if address in ends:
            plan.append(MethodEnd(address, ends[address]))

    return plan
