"""A logical store that lives under a key prefix of another store."""

from __future__ import annotations

import threading
from collections.abc import Iterator as _PyIterator

from iavlkit.byteutil import cp_incr
from iavlkit.db.types import (
    Batch,
    DBError,
    Iterator,
    KeyEmptyError,
    KVStoreWithBatch,
    ValueNilError,
)


def _check_bounds(start: bytes | None, end: bytes | None) -> None:
    if (start is not None and len(start) == 0) or (end is not None and len(end) == 0):
        raise KeyEmptyError("key is empty")


class PrefixDB(KVStoreWithBatch):
    """Namespace a store: every key is stored with ``prefix`` in front of it."""

    def __init__(self, db: KVStoreWithBatch, prefix: bytes) -> None:
        self._lock = threading.Lock()
        self.prefix = bytes(prefix)
        self._db = db

    def _prefixed(self, key: bytes) -> bytes:
        return self.prefix + bytes(key)

    def get(self, key: bytes) -> bytes | None:
        """Return the value for ``key``, or None if absent."""
        if not key:
            raise KeyEmptyError("key is empty")
        return self._db.get(self._prefixed(key))

    def has(self, key: bytes) -> bool:
        """Return whether ``key`` is present."""
        if not key:
            raise KeyEmptyError("key is empty")
        return self._db.has(self._prefixed(key))

    def set(self, key: bytes, value: bytes) -> None:
        """Set ``key`` to ``value``."""
        if not key:
            raise KeyEmptyError("key is empty")
        self._db.set(self._prefixed(key), value)

    def delete(self, key: bytes) -> None:
        """Delete ``key``."""
        if not key:
            raise KeyEmptyError("key is empty")
        self._db.delete(self._prefixed(key))

    def _bounds(
        self, start: bytes | None, end: bytes | None
    ) -> tuple[bytes, bytes | None]:
        _check_bounds(start, end)
        pstart = self.prefix + (bytes(start) if start is not None else b"")
        if end is None:
            pend = cp_incr(self.prefix) if self.prefix else None
        else:
            pend = self.prefix + bytes(end)
        return pstart, pend

    def iterator(self, start: bytes | None, end: bytes | None) -> PrefixDBIterator:
        """Iterate ascending over ``[start, end)`` within the namespace."""
        pstart, pend = self._bounds(start, end)
        source = self._db.iterator(pstart or None, pend)
        return PrefixDBIterator(self.prefix, start, end, source)

    def reverse_iterator(
        self, start: bytes | None, end: bytes | None
    ) -> PrefixDBIterator:
        """Iterate descending over ``[start, end)`` within the namespace."""
        pstart, pend = self._bounds(start, end)
        source = self._db.reverse_iterator(pstart or None, pend)
        return PrefixDBIterator(self.prefix, start, end, source)

    def new_batch(self) -> PrefixDBBatch:
        return PrefixDBBatch(self.prefix, self._db.new_batch())

    def new_batch_with_size(self, size: int) -> PrefixDBBatch:
        return PrefixDBBatch(self.prefix, self._db.new_batch_with_size(size))

    def close(self) -> None:
        """Close the underlying store."""
        with self._lock:
            self._db.close()

    def print(self) -> None:
        """Print the prefix and every key and value of the namespace in hex."""
        print(f"prefix: {self.prefix.hex().upper()}")
        with self.iterator(None, None) as itr:
            for key, value in itr:
                print(f"[{bytes(key).hex().upper()}]:\t[{bytes(value).hex().upper()}]")


def iterate_prefix(db: KVStoreWithBatch, prefix: bytes) -> Iterator:
    """Return an iterator over the keys of ``db`` that start with ``prefix``."""
    if not prefix:
        return db.iterator(None, None)
    return db.iterator(bytes(prefix), cp_incr(prefix))


class PrefixDBIterator(Iterator):
    """Wrap an iterator of the underlying store, stripping the prefix from keys."""

    def __init__(
        self,
        prefix: bytes,
        start: bytes | None,
        end: bytes | None,
        source: Iterator,
    ) -> None:
        self._prefix = bytes(prefix)
        self._start = start
        self._end = end
        self._source = source
        self._err: Exception | None = None

        # Empty keys are not allowed, so an entry matching the prefix exactly is skipped.
        if source.valid() and bytes(source.key()) == self._prefix:
            source.next()
        self._valid = source.valid() and bytes(source.key()).startswith(self._prefix)

    def domain(self) -> tuple[bytes | None, bytes | None]:
        return self._start, self._end

    def valid(self) -> bool:
        if not self._valid or self._err is not None or not self._source.valid():
            return False
        key = bytes(self._source.key())
        if not key.startswith(self._prefix):
            self._err = DBError(
                f"received invalid key from backend: {key.hex()} "
                f"(expected prefix {self._prefix.hex()})"
            )
            return False
        return True

    def _assert_valid(self) -> None:
        if not self.valid():
            raise RuntimeError("iterator is invalid")

    def next(self) -> None:
        self._assert_valid()
        while True:
            self._source.next()
            if not self._source.valid():
                self._valid = False
                return
            key = bytes(self._source.key())
            if not key.startswith(self._prefix):
                self._valid = False
                return
            if key != self._prefix:
                return

    def key(self) -> bytes:
        self._assert_valid()
        return bytes(self._source.key())[len(self._prefix):]

    def value(self) -> bytes:
        self._assert_valid()
        return self._source.value()

    def error(self) -> Exception | None:
        err = self._source.error()
        if err is not None:
            return err
        return self._err

    def close(self) -> None:
        self._source.close()

    def __iter__(self) -> _PyIterator[tuple[bytes, bytes]]:
        while self.valid():
            yield self.key(), self.value()
            self.next()


class PrefixDBBatch(Batch):
    """A batch whose keys are written under a prefix."""

    def __init__(self, prefix: bytes, source: Batch | None) -> None:
        self._prefix = bytes(prefix)
        self._source = source

    def _require_source(self) -> Batch:
        if self._source is None:
            raise DBError("source batch is nil")
        return self._source

    def set(self, key: bytes, value: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        if value is None:
            raise ValueNilError("value is nil")
        self._require_source().set(self._prefix + bytes(key), value)

    def delete(self, key: bytes) -> None:
        if not key:
            raise KeyEmptyError("key is empty")
        self._require_source().delete(self._prefix + bytes(key))

    def write(self) -> None:
        self._require_source().write()

    def write_sync(self) -> None:
        self._require_source().write_sync()

    def close(self) -> None:
        self._require_source().close()

    def get_byte_size(self) -> int:
        return self._require_source().get_byte_size()