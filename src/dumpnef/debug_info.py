"""Contract debug info and manifest loading.

Debug info sits next to the .nef file either as `<stem>.nefdbgnfo` (a zip
archive holding `<stem>.debug.json`) or as a plain `<stem>.debug.json`.
"""

from __future__ import annotations

import json
import logging
import re
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Any

logger = logging.getLogger(__name__)

# "<address>[<document>]<start line>:<start column>-<end line>:<end column>"
SEQUENCE_POINT_RE = re.compile(r"^(\d+)\[(-?\d+)\](\d+):(\d+)-(\d+):(\d+)$")
RANGE_RE = re.compile(r"^(\d+)-(\d+)$")


class DebugInfoError(Exception):
    """Raised when a debug info file exists but cannot be parsed."""


@dataclass(frozen=True, slots=True)
class SequencePoint:
    address: int
    document: int
    start: tuple[int, int]  # (line, column), 1-based
    end: tuple[int, int]


@dataclass(frozen=True, slots=True)
class Method:
    namespace: str
    name: str
    range: tuple[int, int]  # (start, end) addresses, inclusive
    sequence_points: tuple[SequencePoint, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.name}"


@dataclass(frozen=True, slots=True)
class DebugInfo:
    documents: tuple[str, ...]
    methods: tuple[Method, ...]
    document_root: str | None = None


def _parse_sequence_point(text: Any) -> SequencePoint:
    match = SEQUENCE_POINT_RE.match(text) if isinstance(text, str) else None
    if match is None:
        raise DebugInfoError(f"Invalid sequence point: {text!r}")
    address, document, sl, sc, el, ec = (int(g) for g in match.groups())
    return SequencePoint(address, document, (sl, sc), (el, ec))


def _parse_method(raw: Any) -> Method:
    if not isinstance(raw, dict):
        raise DebugInfoError(f"Debug info method must be an object, got {raw!r}")

    name = raw.get("name", "")
    if not isinstance(name, str):
        raise DebugInfoError(f"Invalid method name: {name!r}")
    namespace, _, short_name = name.partition(",")
    if not short_name:
        raise DebugInfoError(f"Invalid method name: {name!r}")

    range_text = raw.get("range", "")
    range_match = RANGE_RE.match(range_text) if isinstance(range_text, str) else None
    if range_match is None:
        raise DebugInfoError(f"Invalid range for method {name!r}: {range_text!r}")
    start, end = int(range_match.group(1)), int(range_match.group(2))

    raw_points = raw.get("sequence-points", [])
    if not isinstance(raw_points, list):
        raise DebugInfoError(f"Sequence points of method {name!r} must be an array")
    points = tuple(_parse_sequence_point(sp) for sp in raw_points)
    return Method(namespace, short_name, (start, end), points)


def parse_debug_info(data: Any) -> DebugInfo:
    """Build DebugInfo from the decoded `.debug.json` object.

    Raises DebugInfoError for any structural problem.
    """
    if not isinstance(data, dict):
        raise DebugInfoError("Debug info must be a JSON object")
    documents = data.get("documents", [])
    methods = data.get("methods", [])
    if not isinstance(documents, list) or not isinstance(methods, list):
        raise DebugInfoError("Debug info 'documents' and 'methods' must be arrays")
    if not all(isinstance(d, str) for d in documents):
        raise DebugInfoError("Debug info 'documents' must hold path strings")
    document_root = data.get("document-root") or None
    if document_root is not None and not isinstance(document_root, str):
        raise DebugInfoError(f"Invalid document-root: {document_root!r}")

    return DebugInfo(
        documents=tuple(documents),
        methods=tuple(_parse_method(m) for m in methods),
        document_root=document_root,
    )


def _read_debug_json(nef_path: Path) -> str | None:
    archive = nef_path.with_suffix(".nefdbgnfo")
    if archive.is_file():
        entry = nef_path.with_suffix(".debug.json").name
        try:
            with zipfile.ZipFile(archive) as zf:
                return zf.read(entry).decode("utf-8")
        except (zipfile.BadZipFile, KeyError, UnicodeDecodeError) as e:
            raise DebugInfoError(f"Cannot read {entry} from {archive}: {e}") from e

    plain = nef_path.with_suffix(".debug.json")
    if plain.is_file():
        try:
            return plain.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DebugInfoError(f"{plain} is not valid UTF-8: {e}") from e
    return None


def load_debug_info(nef_path: str | Path) -> DebugInfo | None:
    """Load debug info stored beside a .nef file, or None when there is none."""
    text = _read_debug_json(Path(nef_path))
    if text is None:
        logger.debug("No debug info found for %s", nef_path)
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DebugInfoError(f"Debug info is not valid JSON: {e}") from e
    return parse_debug_info(data)


def manifest_method_starts(manifest: dict[str, Any]) -> dict[int, str]:
    """ABI method offset → name from a decoded contract manifest."""
    starts: dict[int, str] = {}
    for method in manifest.get("abi", {}).get("methods", []):
        starts.setdefault(int(method["offset"]), str(method["name"]))
    return starts


def load_manifest_method_starts(nef_path: str | Path) -> dict[int, str]:
    """Method starts from `<stem>.manifest.json`; empty when unavailable."""
    path = Path(nef_path).with_suffix(".manifest.json")
    if not path.is_file():
        return {}
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
        return manifest_method_starts(manifest)
    except (OSError, ValueError, KeyError, TypeError, AttributeError):
        logger.debug("Ignoring unreadable manifest %s", path, exc_info=True)
        return {}


def read_source_lines(path: str) -> list[str]:
    """Default document lookup: the file's lines without terminators.

    Invalid UTF-8 bytes are replaced with U+FFFD.
    """
    return Path(path).read_text(encoding="utf-8-sig", errors="replace").splitlines()


class DocumentCache:
    """Lazily materialized (file name, lines) per debug-info document index."""

    def __init__(
        self,
        debug_info: DebugInfo,
        lookup: Callable[[str], list[str]] = read_source_lines,
    ):
        self._debug_info = debug_info
        self._lookup = lookup
        self._cache: dict[int, tuple[str, list[str]]] = {}

    def __len__(self) -> int:
        return len(self._debug_info.documents)

    def get(self, index: int) -> tuple[str, list[str]] | None:
        """Document at index, or None when the index is out of range."""
        if not 0 <= index < len(self):
            return None
        if index not in self._cache:
            path = self._debug_info.documents[index]
            if self._debug_info.document_root:
                path = str(Path(self._debug_info.document_root) / path)
            self._cache[index] = (PureWindowsPath(path).name, self._lookup(path))
        return self._cache[index]
