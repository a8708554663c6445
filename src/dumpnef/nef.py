"""NEF container reader: header, method tokens, script and checksum.

Layout (all integers little-endian):

    magic      u32     0x3346454E ("NEF3")
    compiler   64 bytes, NUL padded UTF-8
    source     var string (max 256 bytes)
    reserved   u8      must be 0
    tokens     var array (max 128) of MethodToken
    reserved   u16     must be 0
    script     var bytes (max 512 KiB, non-empty)
    checksum   u32     first 4 bytes of SHA256(SHA256(everything above))

Var-length integers use the Neo encoding: a single byte below 0xFD, else a
0xFD/0xFE/0xFF marker followed by a u16/u32/u64.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from dumpnef.analysis.interop import CallFlags, UInt160

NEF_MAGIC = 0x3346454E
COMPILER_SIZE = 64
MAX_SOURCE_LENGTH = 256
MAX_TOKENS = 128
MAX_METHOD_NAME_LENGTH = 32
MAX_SCRIPT_LENGTH = 512 * 1024


class NefFormatError(Exception):
    """Raised when a NEF container is malformed."""


@dataclass(frozen=True, slots=True)
class MethodToken:
    hash: UInt160
    method: str
    parameters_count: int
    has_return_value: bool
    call_flags: CallFlags


@dataclass(frozen=True, slots=True)
class NefFile:
    compiler: str
    source: str
    tokens: tuple[MethodToken, ...]
    script: bytes
    checksum: int


def compute_checksum(data: bytes) -> int:
    """Checksum over the serialized file minus its trailing 4 bytes."""
    digest = hashlib.sha256(hashlib.sha256(data).digest()).digest()
    return int.from_bytes(digest[:4], "little")


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def read(self, count: int) -> bytes:
        if self.pos + count > len(self.data):
            raise NefFormatError(
                f"Unexpected end of NEF data at offset {self.pos} "
                f"(needed {count} bytes)"
            )
        chunk = self.data[self.pos : self.pos + count]
        self.pos += count
        return chunk

    def read_int(self, size: int) -> int:
        return int.from_bytes(self.read(size), "little")

    def read_var_int(self, maximum: int) -> int:
        marker = self.read_int(1)
        if marker == 0xFD:
            value = self.read_int(2)
        elif marker == 0xFE:
            value = self.read_int(4)
        elif marker == 0xFF:
            value = self.read_int(8)
        else:
            value = marker
        if value > maximum:
            raise NefFormatError(f"Length {value} exceeds maximum {maximum}")
        return value

    def read_var_bytes(self, maximum: int) -> bytes:
        return self.read(self.read_var_int(maximum))

    def read_var_string(self, maximum: int) -> str:
        raw = self.read_var_bytes(maximum)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NefFormatError(f"Invalid UTF-8 string in NEF: {e}") from e


def _read_token(reader: _Reader) -> MethodToken:
    token_hash = UInt160(reader.read(20))
    method = reader.read_var_string(MAX_METHOD_NAME_LENGTH)
    if method.startswith("_"):
        raise NefFormatError(f"Method token name cannot start with '_': {method}")
    parameters_count = reader.read_int(2)
    has_return_value = reader.read_int(1) != 0
    raw_flags = reader.read_int(1)
    if raw_flags & ~int(CallFlags.ALL):
        raise NefFormatError(f"Invalid call flags 0x{raw_flags:02X}")
    return MethodToken(
        hash=token_hash,
        method=method,
        parameters_count=parameters_count,
        has_return_value=has_return_value,
        call_flags=CallFlags(raw_flags),
    )


def parse_nef(data: bytes) -> NefFile:
    """Deserialize a NEF container.

    Raises NefFormatError on bad magic, reserved bytes, limits, an empty
    script, trailing data or a checksum mismatch.
    """
    reader = _Reader(data)

    magic = reader.read_int(4)
    if magic != NEF_MAGIC:
        raise NefFormatError(f"Wrong NEF magic 0x{magic:08X}")

    compiler = reader.read(COMPILER_SIZE).rstrip(b"\x00").decode("utf-8", "replace")
    source = reader.read_var_string(MAX_SOURCE_LENGTH)

    if reader.read_int(1) != 0:
        raise NefFormatError("Reserved byte must be 0")

    count = reader.read_var_int(MAX_TOKENS)
    tokens = tuple(_read_token(reader) for _ in range(count))

    if reader.read_int(2) != 0:
        raise NefFormatError("Reserved bytes must be 0")

    script = reader.read_var_bytes(MAX_SCRIPT_LENGTH)
    if not script:
        raise NefFormatError("Script can't be empty")

    body_end = reader.pos
    checksum = reader.read_int(4)
    if reader.pos != len(data):
        raise NefFormatError(f"{len(data) - reader.pos} trailing bytes after NEF")
    if checksum != compute_checksum(data[:body_end]):
        raise NefFormatError("NEF checksum mismatch")

    return NefFile(
        compiler=compiler,
        source=source,
        tokens=tokens,
        script=script,
        checksum=checksum,
    )
