"""A least-recently-used cache of keyed nodes."""

from __future__ import annotations

from collections import OrderedDict
from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheNode(Protocol):
    """Anything with a ``key`` can be cached."""

    @property
    def key(self) -> bytes: ...


class LRUCache:
    """An LRU cache bounded by the number of nodes it holds.

    The most recently used node sits at the end of the internal ordering and
    the least recently used at the front, where evictions happen.
    """

    def __init__(self, max_element_count: int) -> None:
        self.max_element_count = max_element_count
        self._entries: OrderedDict[bytes, CacheNode] = OrderedDict()

    def add(self, node: CacheNode) -> CacheNode | None:
        """Add ``node``, returning the node it replaced or evicted, if any.

        If a node with the same key is present it is replaced and returned.
        Otherwise, if the cache grows past its maximum, the least recently
        used node is evicted and returned.
        """
        key = bytes(node.key)
        if key in self._entries:
            old = self._entries[key]
            self._entries[key] = node
            self._entries.move_to_end(key)
            return old

        self._entries[key] = node
        if len(self._entries) > self.max_element_count:
            _, oldest = self._entries.popitem(last=False)
            return oldest
        return None

    def get(self, key: bytes) -> CacheNode | None:
        """Return the node for ``key`` and mark it recently used, or None."""
        key = bytes(key)
        node = self._entries.get(key)
        if node is not None:
            self._entries.move_to_end(key)
        return node

    def has(self, key: bytes) -> bool:
        """Return whether a node with ``key`` is cached, without touching it."""
        return bytes(key) in self._entries

    def remove(self, key: bytes) -> CacheNode | None:
        """Remove and return the node for ``key``, or None if absent."""
        return self._entries.pop(bytes(key), None)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, (bytes, bytearray)) and self.has(key)

    def __len__(self) -> int:
        return len(self._entries)