"""Per-opcode semantic comments for the listing.

Each rule takes (instruction, context) and returns the comment text; an
opcode with no rule gets an empty comment.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from dumpnef.analysis.disassembler import Instruction
from dumpnef.analysis.interop import (
    UInt160,
    build_syscall_table,
    contract_name,
    format_call_flags,
    stack_item_type_name,
)
from dumpnef.nef import MethodToken


@functools.lru_cache(maxsize=1)
def default_syscalls() -> Mapping[int, str]:
    """Interop service table for the current Neo N3 release."""
    return build_syscall_table()


@dataclass(frozen=True)
class CommentContext:
    tokens: Sequence[MethodToken] = ()
    syscalls: Mapping[int, str] = field(default_factory=default_syscalls)


def _signed(operand: bytes | memoryview, start: int = 0, size: int | None = None) -> int:
    raw = bytes(operand)
    end = len(raw) if size is None else start + size
    return int.from_bytes(raw[start:end], "little", signed=True)


def _unsigned(operand: bytes | memoryview, start: int = 0, size: int | None = None) -> int:
    raw = bytes(operand)
    end = len(raw) if size is None else start + size
    return int.from_bytes(raw[start:end], "little")


def _position(instruction: Instruction, offset: int) -> str:
    return f"pos: {instruction.address + offset}, offset: {offset}"


def _integer(instruction: Instruction, ctx: CommentContext) -> str:
    return str(_signed(instruction.operand))


def _minus_one(instruction: Instruction, ctx: CommentContext) -> str:
    return "-1"


def _data(instruction: Instruction, ctx: CommentContext) -> str:
    raw = bytes(instruction.operand)
    text = raw.decode("utf-8", "replace").replace("\r", '"\\r"').replace("\n", '"\\n"')
    if len(raw) == 20:
        return f'as script hash: {UInt160(raw)}, as text: "{text}"'
    return f'as text: "{text}"'


def _jump(instruction: Instruction, ctx: CommentContext) -> str:
    return _position(instruction, _signed(instruction.operand))


def _try(instruction: Instruction, ctx: CommentContext) -> str:
    half = len(instruction.operand) // 2
    catch_offset = _signed(instruction.operand, 0, half)
    finally_offset = _signed(instruction.operand, half, half)
    catch = (
        "no catch block"
        if catch_offset == 0
        else f"catch {instruction.address + catch_offset}"
    )
    fin = (
        "no finally block"
        if finally_offset == 0
        else f"finally {instruction.address + finally_offset}"
    )
    return f"{catch}, {fin}"


def _syscall(instruction: Instruction, ctx: CommentContext) -> str:
    token = _unsigned(instruction.operand)
    name = ctx.syscalls.get(token)
    if name is None:
        return f"Unknown SysCall {token}"
    return name


def _static_slots(instruction: Instruction, ctx: CommentContext) -> str:
    return f"{instruction.operand[0]} static variables"


def _slots(instruction: Instruction, ctx: CommentContext) -> str:
    return (
        f"{instruction.operand[0]} local variables, "
        f"{instruction.operand[1]} arguments"
    )


def _slot_index(instruction: Instruction, ctx: CommentContext) -> str:
    return f"Slot index {instruction.operand[0]}"


def _stack_item_type(instruction: Instruction, ctx: CommentContext) -> str:
    return stack_item_type_name(instruction.operand[0])


def describe_token(token: MethodToken) -> str:
    """One-line summary of a method token, shared with the token listing."""
    plural = "" if token.parameters_count == 1 else "s"
    returns = "has" if token.has_return_value else "does not have"
    return (
        f"{contract_name(token.hash)}.{token.method} "
        f"({token.parameters_count} parameter{plural}, {returns} return value, "
        f"{format_call_flags(token.call_flags)} call flags)"
    )


def _method_token(instruction: Instruction, ctx: CommentContext) -> str:
    index = _unsigned(instruction.operand)
    if index >= len(ctx.tokens):
        return f"Unknown token {index}"
    return describe_token(ctx.tokens[index])


_JUMPS = (
    "JMP", "JMPIF", "JMPIFNOT", "JMPEQ", "JMPNE",
    "JMPGT", "JMPGE", "JMPLT", "JMPLE", "CALL", "ENDTRY",
)  # fmt: skip

COMMENT_RULES: dict[str, Callable[[Instruction, CommentContext], str]] = {
    **{f"PUSHINT{bits}": _integer for bits in (8, 16, 32, 64, 128, 256)},
    "PUSHM1": _minus_one,
    "PUSHDATA1": _data,
    "PUSHDATA2": _data,
    "PUSHDATA4": _data,
    "PUSHA": _jump,
    **{name: _jump for name in _JUMPS},
    **{f"{name}_L": _jump for name in _JUMPS},
    "TRY": _try,
    "TRY_L": _try,
    "CALLT": _method_token,
    "SYSCALL": _syscall,
    "INITSSLOT": _static_slots,
    "INITSLOT": _slots,
    **{
        name: _slot_index
        for name in ("LDSFLD", "STSFLD", "LDLOC", "STLOC", "LDARG", "STARG")
    },
    "NEWARRAY_T": _stack_item_type,
    "ISTYPE": _stack_item_type,
    "CONVERT": _stack_item_type,
}


def get_comment(
    instruction: Instruction,
    tokens: Sequence[MethodToken] = (),
    syscalls: Mapping[int, str] | None = None,
) -> str:
    """Human-readable comment for an instruction, or "" when there is none."""
    rule = COMMENT_RULES.get(instruction.name)
    if rule is None:
        return ""
    ctx = CommentContext(
        tokens=tokens,
        syscalls=default_syscalls() if syscalls is None else syscalls,
    )
    return rule(instruction, ctx)
