"""Exported tree nodes and a compressed form of the export stream.

The compressed stream drops branch keys (they can be rebuilt from the leaves),
delta-encodes each leaf key against the previous leaf, and stores a branch's
version as the difference from the larger version of its two children.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any, Protocol

from iavlkit.encoding import DecodeError, decode_uvarint, encode_uvarint


@dataclass
class ExportNode:
    """One node of an exported tree, in depth-first post-order."""

    key: bytes | None
    value: bytes | None
    version: int
    height: int


class ExportDone(Exception):
    """Raised when an export has produced all of its nodes."""

    def __init__(self, message: str = "export is complete") -> None:
        super().__init__(message)


class NodeImporter(Protocol):
    def add(self, node: ExportNode) -> Any: ...


def _require_children(stack: list, what: str) -> None:
    if len(stack) < 2:
        raise ValueError(f"invalid node structure: branch node {what} before its two children")


class CompressExporter:
    """Wrap an iterable of export nodes, yielding their compressed form."""

    def __init__(self, exporter: Iterable[ExportNode]) -> None:
        self._inner = iter(exporter)
        self._last_key = b""
        self._version_stack: list[int] = []

    def __iter__(self) -> CompressExporter:
        return self

    def __next__(self) -> ExportNode:
        node = next(self._inner)
        stack = self._version_stack

        if node.height == 0:
            key = node.key or b""
            encoded = delta_encode(key, self._last_key)
            self._last_key = key
            stack.append(node.version)
            return replace(node, key=encoded)

        _require_children(stack, "exported")
        max_version = max(stack[-1], stack[-2])
        stack.pop()
        stack[-1] = node.version
        return replace(node, key=None, version=node.version - max_version)


class CompressImporter:
    """Decompress nodes before passing them on to an inner importer."""

    def __init__(self, importer: NodeImporter) -> None:
        self._inner = importer
        self._last_key = b""
        self._min_key_stack: list[bytes] = []
        self._version_stack: list[int] = []

    def add(self, node: ExportNode) -> Any:
        """Restore ``node`` and add it to the inner importer."""
        if node.height == 0:
            key = delta_decode(node.key or b"", self._last_key)
            self._last_key = key
            self._min_key_stack.append(key)
            self._version_stack.append(node.version)
            restored = replace(node, key=key)
        else:
            _require_children(self._min_key_stack, "imported")
            _require_children(self._version_stack, "imported")
            # The branch key is the smallest key of its right subtree; the left
            # subtree's smallest key stays on the stack for the parent.
            key = self._min_key_stack.pop()
            stack = self._version_stack
            version = node.version + max(stack[-1], stack[-2])
            stack.pop()
            stack[-1] = version
            restored = replace(node, key=key, version=version)
        return self._inner.add(restored)


def delta_encode(key: bytes, last_key: bytes | None) -> bytes:
    """Encode ``key`` as the length shared with ``last_key`` plus the rest."""
    shared = diff_offset(last_key or b"", key)
    return encode_uvarint(shared) + bytes(key[shared:])


def delta_decode(key: bytes, last_key: bytes | None) -> bytes:
    """Rebuild a key produced by :func:`delta_encode`."""
    try:
        shared, n = decode_uvarint(key)
    except DecodeError as exc:
        n = -exc.consumed
        raise DecodeError(f"uvarint parse failed {n}", exc.consumed) from exc

    rest = bytes(key[n:])
    if shared == 0:
        return rest
    last_key = last_key or b""
    if shared > len(last_key):
        raise DecodeError(
            f"shared prefix length {shared} exceeds previous key length {len(last_key)}", n
        )
    return bytes(last_key[:shared]) + rest


def diff_offset(a: bytes, b: bytes) -> int:
    """Return the index of the first byte where ``a`` and ``b`` differ."""
    for offset, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return offset
    return min(len(a), len(b))