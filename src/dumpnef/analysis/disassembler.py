"""Neo VM script disassembler: bytes → list of Instruction."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from dumpnef.analysis.opcodes import RET, lookup


class DecodeError(Exception):
    """Raised when a script cannot be decoded into instructions."""

    def __init__(self, message: str, address: int):
        super().__init__(message)
        self.address = address


@dataclass(frozen=True, slots=True)
class Instruction:
    address: int
    opcode: int
    name: str
    operand: memoryview | bytes  # view into the script, empty when absent
    size: int  # opcode byte + length prefix + operand


def _synthetic_ret(address: int) -> Instruction:
    return Instruction(address, RET, "RET", b"", 1)


def iter_instructions(script: bytes) -> Iterator[Instruction]:
    """Lazily decode a script, one instruction at a time.

    A trailing RET is appended at len(script) unless the last decoded
    instruction already is one, so an empty script yields a lone RET.
    Raises DecodeError on unknown opcodes or operands running past the end.
    """
    view = memoryview(script)
    length = len(view)
    address = 0
    last_opcode: int | None = None

    while address < length:
        opcode = view[address]
        entry = lookup(opcode)
        if entry is None:
            raise DecodeError(f"Unknown opcode 0x{opcode:02X} at {address}", address)
        name, operand_size, prefix_size = entry

        cursor = address + 1
        if prefix_size > 0:
            if cursor + prefix_size > length:
                raise DecodeError(
                    f"{name} at {address}: length prefix exceeds script", address
                )
            operand_size = int.from_bytes(view[cursor : cursor + prefix_size], "little")
            cursor += prefix_size

        if cursor + operand_size > length:
            raise DecodeError(
                f"{name} at {address}: operand of {operand_size} bytes "
                f"exceeds script ({length - cursor} remaining)",
                address,
            )

        operand = view[cursor : cursor + operand_size]
        size = cursor + operand_size - address
        yield Instruction(address, opcode, name, operand, size)

        last_opcode = opcode
        address += size

    if last_opcode != RET:
        yield _synthetic_ret(address)


def disassemble(script: bytes) -> list[Instruction]:
    """Decode a whole script. Either every instruction or DecodeError."""
    return list(iter_instructions(script))


def format_operand(operand: bytes | memoryview) -> str:
    """Render operand bytes as uppercase hex pairs joined by '-'."""
    return "-".join(f"{b:02X}" for b in bytes(operand))


def address_width(instructions: list[Instruction]) -> int:
    """Digit count of the highest instruction address (minimum 1)."""
    if not instructions:
        return 1
    return len(str(instructions[-1].address))
