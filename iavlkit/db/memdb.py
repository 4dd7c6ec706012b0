"""An in-memory, ordered key-value store, mainly for tests."""

from __future__ import annotations

import threading
from collections.abc import Iterator as _PyIterator
from dataclasses import dataclass
from enum import Enum

from sortedcontainers import SortedDict

from iavlkit.db.types import (
    Batch,
    BatchClosedError,
    Iterator,
    KeyEmptyError,
    KVStoreWithBatch,
    ValueNilError,
)


def _check_bounds(start: bytes | None, end: bytes | None) -> None:
    if (start is not None and len(start) == 0) or (end is not None and len(end) == 0):
        raise KeyEmptyError()


def _as_bytes(value: bytes | None) -> bytes | None:
    return None if value is None else bytes(value)


class MemDB(KVStoreWithBatch):
    """An ordered in-memory store backed by a sorted dictionary.

    Keys and values are stored as given; callers should treat them as read-only.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tree: SortedDict = SortedDict()
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called; the contents stay usable."""
        return self._closed

    def get(self, key: bytes) -> bytes | None:
        """Return the value for ``key``, or None if absent."""
        if not key:
            raise KeyEmptyError()
        with self._lock:
            return self._tree.get(bytes(key))

    def has(self, key: bytes) -> bool:
        """Return whether ``key`` is present."""
        if not key:
            raise KeyEmptyError()
        with self._lock:
            return bytes(key) in self._tree

    def set(self, key: bytes, value: bytes) -> None:
        """Set ``key`` to ``value``."""
        if not key:
            raise KeyEmptyError()
        if value is None:
            raise ValueNilError()
        with self._lock:
            self._set(key, value)

    def _set(self, key: bytes, value: bytes) -> None:
        self._tree[bytes(key)] = bytes(value)

    def set_sync(self, key: bytes, value: bytes) -> None:
        """Same as :meth:`set`; there is nothing to flush."""
        self.set(key, value)

    def delete(self, key: bytes) -> None:
        """Delete ``key`` if present."""
        if not key:
            raise KeyEmptyError()
        with self._lock:
            self._delete(key)

    def _delete(self, key: bytes) -> None:
        self._tree.pop(bytes(key), None)

    def delete_sync(self, key: bytes) -> None:
        """Same as :meth:`delete`; there is nothing to flush."""
        self.delete(key)

    def close(self) -> None:
        """Mark the store closed; its contents stay available."""
        with self._lock:
            self._closed = True

    def print(self) -> None:
        """Print every key and value in hex, in key order."""
        with self._lock:
            for key, value in self._tree.items():
                print(f"[{key.hex().upper()}]:\t[{value.hex().upper()}]")

    def stats(self) -> dict[str, str]:
        """Return the backend type and the number of entries."""
        with self._lock:
            return {"database.type": "memDB", "database.size": str(len(self._tree))}

    def new_batch(self) -> MemDBBatch:
        return MemDBBatch(self)

    def new_batch_with_size(self, size: int) -> MemDBBatch:
        """Same as :meth:`new_batch`; the batch cannot be pre-allocated."""
        return MemDBBatch(self)

    def _snapshot(
        self, start: bytes | None, end: bytes | None, reverse: bool
    ) -> list[tuple[bytes, bytes]]:
        keys = self._tree.irange(
            minimum=_as_bytes(start),
            maximum=_as_bytes(end),
            inclusive=(True, False),
            reverse=reverse,
        )
        return [(key, self._tree[key]) for key in keys]

    def _make_iterator(
        self, start: bytes | None, end: bytes | None, reverse: bool, use_lock: bool
    ) -> MemDBIterator:
        _check_bounds(start, end)
        if use_lock:
            with self._lock:
                items = self._snapshot(start, end, reverse)
        else:
            items = self._snapshot(start, end, reverse)
        return MemDBIterator(items, start, end)

    def iterator(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate ascending over ``[start, end)``."""
        return self._make_iterator(start, end, reverse=False, use_lock=True)

    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate descending over ``[start, end)``."""
        return self._make_iterator(start, end, reverse=True, use_lock=True)

    def iterator_no_mtx(self, start: bytes | None, end: bytes | None) -> MemDBIterator:
        """Iterate ascending without taking the store's lock."""
        return self._make_iterator(start, end, reverse=False, use_lock=False)

    def reverse_iterator_no_mtx(
        self, start: bytes | None, end: bytes | None
    ) -> MemDBIterator:
        """Iterate descending without taking the store's lock."""
        return self._make_iterator(start, end, reverse=True, use_lock=False)


class MemDBIterator(Iterator):
    """A cursor over the items of a :class:`MemDB` range."""

    def __init__(
        self,
        items: list[tuple[bytes, bytes]],
        start: bytes | None,
        end: bytes | None,
    ) -> None:
        self._items = iter(items)
        self._start = start
        self._end = end
        self._err: Exception | None = None
        self._item: tuple[bytes, bytes] | None = next(self._items, None)

    def domain(self) -> tuple[bytes | None, bytes | None]:
        return self._start, self._end

    def valid(self) -> bool:
        return self._item is not None

    def _assert_valid(self) -> tuple[bytes, bytes]:
        if self._item is None:
            raise RuntimeError("iterator is invalid")
        return self._item

    def next(self) -> None:
        self._assert_valid()
        self._item = next(self._items, None)

    def key(self) -> bytes:
        return self._assert_valid()[0]

    def value(self) -> bytes:
        return self._assert_valid()[1]

    def error(self) -> Exception | None:
        """Return the iteration error; reading a snapshot never fails."""
        return self._err

    def close(self) -> None:
        self._items = iter(())
        self._item = None

    def __iter__(self) -> _PyIterator[tuple[bytes, bytes]]:
        while self._item is not None:
            yield self._item
            self.next()


class _OpType(Enum):
    SET = 1
    DELETE = 2


@dataclass(frozen=True)
class _Operation:
    op_type: _OpType
    key: bytes
    value: bytes | None = None


class MemDBBatch(Batch):
    """Writes queued for a :class:`MemDB` and applied together."""

    def __init__(self, db: MemDB) -> None:
        self._db = db
        self._ops: list[_Operation] | None = []
        self._size = 0

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        if value is None:
            raise ValueNilError()
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key) + len(value)
        self._ops.append(_Operation(_OpType.SET, bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError()
        if self._ops is None:
            raise BatchClosedError()
        self._size += len(key)
        self._ops.append(_Operation(_OpType.DELETE, bytes(key)))

    def write(self) -> None:
        """Apply the queued writes; the batch cannot be used afterwards."""
        if self._ops is None:
            raise BatchClosedError()
        with self._db._lock:
            for op in self._ops:
                if op.op_type is _OpType.SET:
                    self._db._set(op.key, op.value)
                else:
                    self._db._delete(op.key)
        self.close()

    def write_sync(self) -> None:
        self.write()

    def close(self) -> None:
        self._ops = None
        self._size = 0

    def get_byte_size(self) -> int:
        if self._ops is None:
            raise BatchClosedError()
        return self._size