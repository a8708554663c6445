"""Complete Neo N3 VM opcode table: int → (name, operand_size, prefix_size)."""

from __future__ import annotations

# (name, operand_size, prefix_size)
# operand_size is the fixed operand length; prefix_size is non-zero only for
# PUSHDATA1/2/4, whose operand length is read from a little-endian prefix.
OPCODES: dict[int, tuple[str, int, int]] = {
    # Constants
    0x00: ("PUSHINT8", 1, 0),
    0x01: ("PUSHINT16", 2, 0),
    0x02: ("PUSHINT32", 4, 0),
    0x03: ("PUSHINT64", 8, 0),
    0x04: ("PUSHINT128", 16, 0),
    0x05: ("PUSHINT256", 32, 0),
    0x08: ("PUSHT", 0, 0),
    0x09: ("PUSHF", 0, 0),
    0x0A: ("PUSHA", 4, 0),
    0x0B: ("PUSHNULL", 0, 0),
    0x0C: ("PUSHDATA1", 0, 1),
    0x0D: ("PUSHDATA2", 0, 2),
    0x0E: ("PUSHDATA4", 0, 4),
    0x0F: ("PUSHM1", 0, 0),
    # PUSH0 through PUSH16
    **{0x10 + i: (f"PUSH{i}", 0, 0) for i in range(17)},
    # Flow control
    0x21: ("NOP", 0, 0),
    0x22: ("JMP", 1, 0),
    0x23: ("JMP_L", 4, 0),
    0x24: ("JMPIF", 1, 0),
    0x25: ("JMPIF_L", 4, 0),
    0x26: ("JMPIFNOT", 1, 0),
    0x27: ("JMPIFNOT_L", 4, 0),
    0x28: ("JMPEQ", 1, 0),
    0x29: ("JMPEQ_L", 4, 0),
    0x2A: ("JMPNE", 1, 0),
    0x2B: ("JMPNE_L", 4, 0),
    0x2C: ("JMPGT", 1, 0),
    0x2D: ("JMPGT_L", 4, 0),
    0x2E: ("JMPGE", 1, 0),
    0x2F: ("JMPGE_L", 4, 0),
    0x30: ("JMPLT", 1, 0),
    0x31: ("JMPLT_L", 4, 0),
    0x32: ("JMPLE", 1, 0),
    0x33: ("JMPLE_L", 4, 0),
    0x34: ("CALL", 1, 0),
    0x35: ("CALL_L", 4, 0),
    0x36: ("CALLA", 0, 0),
    0x37: ("CALLT", 2, 0),
    0x38: ("ABORT", 0, 0),
    0x39: ("ASSERT", 0, 0),
    0x3A: ("THROW", 0, 0),
    0x3B: ("TRY", 2, 0),
    0x3C: ("TRY_L", 8, 0),
    0x3D: ("ENDTRY", 1, 0),
    0x3E: ("ENDTRY_L", 4, 0),
    0x3F: ("ENDFINALLY", 0, 0),
    0x40: ("RET", 0, 0),
    0x41: ("SYSCALL", 4, 0),
    # Stack
    0x43: ("DEPTH", 0, 0),
    0x45: ("DROP", 0, 0),
    0x46: ("NIP", 0, 0),
    0x48: ("XDROP", 0, 0),
    0x49: ("CLEAR", 0, 0),
    0x4A: ("DUP", 0, 0),
    0x4B: ("OVER", 0, 0),
    0x4D: ("PICK", 0, 0),
    0x4E: ("TUCK", 0, 0),
    0x50: ("SWAP", 0, 0),
    0x51: ("ROT", 0, 0),
    0x52: ("ROLL", 0, 0),
    0x53: ("REVERSE3", 0, 0),
    0x54: ("REVERSE4", 0, 0),
    0x55: ("REVERSEN", 0, 0),
    # Slots
    0x56: ("INITSSLOT", 1, 0),
    0x57: ("INITSLOT", 2, 0),
    **{0x58 + i: (f"LDSFLD{i}", 0, 0) for i in range(7)},
    0x5F: ("LDSFLD", 1, 0),
    **{0x60 + i: (f"STSFLD{i}", 0, 0) for i in range(7)},
    0x67: ("STSFLD", 1, 0),
    **{0x68 + i: (f"LDLOC{i}", 0, 0) for i in range(7)},
    0x6F: ("LDLOC", 1, 0),
    **{0x70 + i: (f"STLOC{i}", 0, 0) for i in range(7)},
    0x77: ("STLOC", 1, 0),
    **{0x78 + i: (f"LDARG{i}", 0, 0) for i in range(7)},
    0x7F: ("LDARG", 1, 0),
    **{0x80 + i: (f"STARG{i}", 0, 0) for i in range(7)},
    0x87: ("STARG", 1, 0),
    # Splice
    0x88: ("NEWBUFFER", 0, 0),
    0x89: ("MEMCPY", 0, 0),
    0x8B: ("CAT", 0, 0),
    0x8C: ("SUBSTR", 0, 0),
    0x8D: ("LEFT", 0, 0),
    0x8E: ("RIGHT", 0, 0),
    # Bitwise logic
    0x90: ("INVERT", 0, 0),
    0x91: ("AND", 0, 0),
    0x92: ("OR", 0, 0),
    0x93: ("XOR", 0, 0),
    0x97: ("EQUAL", 0, 0),
    0x98: ("NOTEQUAL", 0, 0),
    # Arithmetic
    0x99: ("SIGN", 0, 0),
    0x9A: ("ABS", 0, 0),
    0x9B: ("NEGATE", 0, 0),
    0x9C: ("INC", 0, 0),
    0x9D: ("DEC", 0, 0),
    0x9E: ("ADD", 0, 0),
    0x9F: ("SUB", 0, 0),
    0xA0: ("MUL", 0, 0),
    0xA1: ("DIV", 0, 0),
    0xA2: ("MOD", 0, 0),
    0xA3: ("POW", 0, 0),
    0xA4: ("SQRT", 0, 0),
    0xA5: ("MODMUL", 0, 0),
    0xA6: ("MODPOW", 0, 0),
    0xA8: ("SHL", 0, 0),
    0xA9: ("SHR", 0, 0),
    0xAA: ("NOT", 0, 0),
    0xAB: ("BOOLAND", 0, 0),
    0xAC: ("BOOLOR", 0, 0),
    0xB1: ("NZ", 0, 0),
    0xB3: ("NUMEQUAL", 0, 0),
    0xB4: ("NUMNOTEQUAL", 0, 0),
    0xB5: ("LT", 0, 0),
    0xB6: ("LE", 0, 0),
    0xB7: ("GT", 0, 0),
    0xB8: ("GE", 0, 0),
    0xB9: ("MIN", 0, 0),
    0xBA: ("MAX", 0, 0),
    0xBB: ("WITHIN", 0, 0),
    # Compound types
    0xBE: ("PACKMAP", 0, 0),
    0xBF: ("PACKSTRUCT", 0, 0),
    0xC0: ("PACK", 0, 0),
    0xC1: ("UNPACK", 0, 0),
    0xC2: ("NEWARRAY0", 0, 0),
    0xC3: ("NEWARRAY", 0, 0),
    0xC4: ("NEWARRAY_T", 1, 0),
    0xC5: ("NEWSTRUCT0", 0, 0),
    0xC6: ("NEWSTRUCT", 0, 0),
    0xC8: ("NEWMAP", 0, 0),
    0xCA: ("SIZE", 0, 0),
    0xCB: ("HASKEY", 0, 0),
    0xCC: ("KEYS", 0, 0),
    0xCD: ("VALUES", 0, 0),
    0xCE: ("PICKITEM", 0, 0),
    0xCF: ("APPEND", 0, 0),
    0xD0: ("SETITEM", 0, 0),
    0xD1: ("REVERSEITEMS", 0, 0),
    0xD2: ("REMOVE", 0, 0),
    0xD3: ("CLEARITEMS", 0, 0),
    0xD4: ("POPITEM", 0, 0),
    # Types
    0xD8: ("ISNULL", 0, 0),
    0xD9: ("ISTYPE", 1, 0),
    0xDB: ("CONVERT", 1, 0),
    # Extensions
    0xE0: ("ABORTMSG", 0, 0),
    0xE1: ("ASSERTMSG", 0, 0),
}

# Reverse map, used by tests and fixtures to assemble scripts by name
OPCODE_BY_NAME: dict[str, int] = {name: op for op, (name, _, _) in OPCODES.items()}

RET = OPCODE_BY_NAME["RET"]


def lookup(opcode: int) -> tuple[str, int, int] | None:
    """Return (name, operand_size, prefix_size) for an opcode, or None."""
    return OPCODES.get(opcode)
