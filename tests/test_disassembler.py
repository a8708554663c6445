import pytest

from dumpnef.analysis.disassembler import (
    DecodeError,
    Instruction,
    address_width,
    disassemble,
    format_operand,
    iter_instructions,
)
from tests.fixtures.scripts import BACKWARD_JUMP, METHOD_SCRIPT, PUSH_HI


def test_simple_sequence():
    instructions = disassemble(PUSH_HI)
    assert len(instructions) == 2
    assert instructions[0] == Instruction(0, 0x0C, "PUSHDATA1", b"hi", 4)
    assert instructions[1] == Instruction(4, 0x40, "RET", b"", 1)


def test_operand_is_a_view_into_the_script():
    instructions = disassemble(PUSH_HI)
    assert isinstance(instructions[0].operand, memoryview)
    assert instructions[0].operand.obj is PUSH_HI


def test_fixed_operand_sizes():
    # PUSHINT32, SYSCALL, INITSLOT, JMP_L, RET
    script = bytes.fromhex("0201000000" "41aabbccdd" "570102" "23fbffffff" "40")
    instructions = disassemble(script)
    assert [i.name for i in instructions] == [
        "PUSHINT32", "SYSCALL", "INITSLOT", "JMP_L", "RET",
    ]
    assert [i.address for i in instructions] == [0, 5, 10, 13, 18]
    assert [i.size for i in instructions] == [5, 5, 3, 5, 1]


def test_pushdata2_length_prefix():
    script = bytes.fromhex("0d0300" "616263" "40")
    first = disassemble(script)[0]
    assert first.name == "PUSHDATA2"
    assert bytes(first.operand) == b"abc"
    assert first.size == 6


def test_pushdata4_length_prefix():
    script = bytes.fromhex("0e02000000" "ffff")
    instructions = disassemble(script)
    assert bytes(instructions[0].operand) == b"\xff\xff"
    assert instructions[0].size == 7
    assert instructions[1].address == 7


def test_synthetic_ret_appended():
    # PUSH1 with no trailing RET
    instructions = disassemble(bytes.fromhex("11"))
    assert [i.name for i in instructions] == ["PUSH1", "RET"]
    assert instructions[-1].address == 1
    assert instructions[-1].operand == b""


def test_no_synthetic_ret_when_script_ends_with_ret():
    instructions = disassemble(METHOD_SCRIPT)
    assert instructions[-1].address == 8
    assert sum(i.size for i in instructions) == len(METHOD_SCRIPT)


def test_empty_script_is_a_lone_ret():
    instructions = disassemble(b"")
    assert instructions == [Instruction(0, 0x40, "RET", b"", 1)]


def test_addresses_are_contiguous():
    script = bytes.fromhex("0c0568656c6c6f" "0001" "3b0300" "3d02" "570201" "40")
    instructions = disassemble(script)
    for current, following in zip(instructions, instructions[1:]):
        assert following.address == current.address + current.size
    assert sum(i.size for i in instructions) == len(script)


def test_decoding_is_repeatable():
    assert disassemble(BACKWARD_JUMP) == disassemble(BACKWARD_JUMP)


def test_unknown_opcode_raises():
    with pytest.raises(DecodeError, match="0x06") as exc_info:
        disassemble(bytes.fromhex("1106"))
    assert exc_info.value.address == 1


def test_pushdata_exceeding_script_raises():
    with pytest.raises(DecodeError, match="exceeds script"):
        disassemble(bytes.fromhex("0c05" "6869"))


def test_truncated_length_prefix_raises():
    with pytest.raises(DecodeError, match="length prefix"):
        disassemble(bytes.fromhex("0d01"))


def test_truncated_fixed_operand_raises():
    # SYSCALL needs 4 bytes
    with pytest.raises(DecodeError):
        disassemble(bytes.fromhex("41aabb"))


def test_lazy_iteration_yields_before_error():
    decoded = iter_instructions(bytes.fromhex("11" "06"))
    assert next(decoded).name == "PUSH1"
    with pytest.raises(DecodeError):
        next(decoded)


def test_format_operand():
    assert format_operand(b"\x0a\xff") == "0A-FF"
    assert format_operand(b"\x05") == "05"
    assert format_operand(memoryview(b"\x00\x10\xab")) == "00-10-AB"


def test_address_width():
    assert address_width(disassemble(b"")) == 1
    assert address_width(disassemble(BACKWARD_JUMP)) == 2
    assert address_width(disassemble(bytes.fromhex("21" * 100))) == 3
