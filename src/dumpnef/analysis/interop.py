"""Host-side names the annotator resolves against.

Interop service (SYSCALL) identifiers are the first four bytes of the
SHA-256 of the ASCII service name, read as a little-endian u32. Native
contract hashes are fixed for every Neo N3 network, so they are hardcoded
rather than derived.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum, IntFlag

INTEROP_SERVICES: tuple[str, ...] = (
    "System.Contract.Call",
    "System.Contract.CallNative",
    "System.Contract.CreateMultisigAccount",
    "System.Contract.CreateStandardAccount",
    "System.Contract.GetCallFlags",
    "System.Contract.NativeOnPersist",
    "System.Contract.NativePostPersist",
    "System.Crypto.CheckMultisig",
    "System.Crypto.CheckSig",
    "System.Iterator.Next",
    "System.Iterator.Value",
    "System.Runtime.BurnGas",
    "System.Runtime.CheckWitness",
    "System.Runtime.CurrentSigners",
    "System.Runtime.GasLeft",
    "System.Runtime.GetAddressVersion",
    "System.Runtime.GetCallingScriptHash",
    "System.Runtime.GetEntryScriptHash",
    "System.Runtime.GetExecutingScriptHash",
    "System.Runtime.GetInvocationCounter",
    "System.Runtime.GetNetwork",
    "System.Runtime.GetNotifications",
    "System.Runtime.GetRandom",
    "System.Runtime.GetScriptContainer",
    "System.Runtime.GetTime",
    "System.Runtime.GetTrigger",
    "System.Runtime.LoadScript",
    "System.Runtime.Log",
    "System.Runtime.Notify",
    "System.Runtime.Platform",
    "System.Storage.AsReadOnly",
    "System.Storage.Delete",
    "System.Storage.Find",
    "System.Storage.Get",
    "System.Storage.GetContext",
    "System.Storage.GetReadOnlyContext",
    "System.Storage.Put",
    "System.Storage.Local.Delete",
    "System.Storage.Local.Find",
    "System.Storage.Local.Get",
    "System.Storage.Local.Put",
)


def interop_hash(name: str) -> int:
    """u32 SYSCALL identifier for an interop service name."""
    digest = hashlib.sha256(name.encode("ascii")).digest()
    return int.from_bytes(digest[:4], "little")


def build_syscall_table(names: tuple[str, ...] = INTEROP_SERVICES) -> dict[int, str]:
    return {interop_hash(name): name for name in names}


@dataclass(frozen=True, slots=True)
class UInt160:
    """20-byte script hash, stored little-endian as it appears in scripts."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != 20:
            raise ValueError(f"UInt160 requires 20 bytes, got {len(self.data)}")

    @classmethod
    def parse(cls, text: str) -> UInt160:
        """Parse the display form (0x-prefixed, big-endian hex)."""
        hex_str = text[2:] if text.startswith(("0x", "0X")) else text
        return cls(bytes.fromhex(hex_str)[::-1])

    def __str__(self) -> str:
        return "0x" + self.data[::-1].hex()


NATIVE_CONTRACTS: dict[UInt160, str] = {
    UInt160.parse("0xfffdc93764dbaddd97c48f252a53ea4643faa3fd"): "ContractManagement",
    UInt160.parse("0xacce6fd80d44e1796aa0c2c625e9e4e0ce39efc0"): "StdLib",
    UInt160.parse("0x726cb6e0cd8628a1350a611384688911ab75f51b"): "CryptoLib",
    UInt160.parse("0xda65b600f7124ce6c79950c1772a36403104f2be"): "LedgerContract",
    UInt160.parse("0xef4073a0f2b305a38ec4050e4d3d28bc40ea63f5"): "NeoToken",
    UInt160.parse("0xd2a4cff31913016155e38e474a2c06d08be276cf"): "GasToken",
    UInt160.parse("0xcc5e4edd9f5f8dba8bb65734541df7a1c081c67b"): "PolicyContract",
    UInt160.parse("0x49cf4e5378ffcd4dec034fd98a174c5491e395e2"): "RoleManagement",
    UInt160.parse("0xfe924b7cfe89ddd271abaf7210a80a7e11178758"): "OracleContract",
    UInt160.parse("0xc1e14f19c3e60d0b9244d06dd7ba9b113135ec3b"): "Notary",
}


def contract_name(contract_hash: UInt160) -> str:
    """Native contract name for a well-known hash, else the hash string."""
    return NATIVE_CONTRACTS.get(contract_hash, str(contract_hash))


class CallFlags(IntFlag):
    NONE = 0
    READ_STATES = 0b0001
    WRITE_STATES = 0b0010
    ALLOW_CALL = 0b0100
    ALLOW_NOTIFY = 0b1000
    ALL = 0b1111


# Display names, including the composite aliases, by value
_CALL_FLAG_NAMES: dict[int, str] = {
    0: "None",
    1: "ReadStates",
    2: "WriteStates",
    3: "States",
    4: "AllowCall",
    5: "ReadOnly",
    8: "AllowNotify",
    15: "All",
}


def format_call_flags(flags: int) -> str:
    """Render call flags the way the Neo tooling prints them.

    An exact alias wins; otherwise the largest named values are taken
    greedily and listed in ascending order.
    """
    if flags in _CALL_FLAG_NAMES:
        return _CALL_FLAG_NAMES[flags]

    remaining = int(flags)
    picked: list[int] = []
    for value in sorted(_CALL_FLAG_NAMES, reverse=True):
        if value and remaining & value == value:
            picked.append(value)
            remaining &= ~value
    if remaining:
        return str(int(flags))
    return ", ".join(_CALL_FLAG_NAMES[v] for v in sorted(picked))


_CALL_FLAG_VALUES = {name: value for value, name in _CALL_FLAG_NAMES.items()}


def parse_call_flags(text: str) -> CallFlags:
    """Inverse of format_call_flags, for flags carried in JSON."""
    value = 0
    for part in text.split(","):
        part = part.strip()
        if part not in _CALL_FLAG_VALUES:
            raise ValueError(f"Unknown call flag: {part}")
        value |= _CALL_FLAG_VALUES[part]
    return CallFlags(value)


class StackItemType(IntEnum):
    Any = 0x00
    Pointer = 0x10
    Boolean = 0x20
    Integer = 0x21
    ByteString = 0x28
    Buffer = 0x30
    Array = 0x40
    Struct = 0x41
    Map = 0x48
    InteropInterface = 0x60


def stack_item_type_name(value: int) -> str:
    try:
        return StackItemType(value).name
    except ValueError:
        return str(value)
