"""Interfaces and errors shared by the key-value store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator as _PyIterator


class DBError(Exception):
    """Base class for store errors."""


class KeyEmptyError(DBError):
    """Raised when an empty or missing key is used."""

    def __init__(self, message: str = "key cannot be empty") -> None:
        super().__init__(message)


class ValueNilError(DBError):
    """Raised when a missing value is set."""

    def __init__(self, message: str = "value cannot be nil") -> None:
        super().__init__(message)


class BatchClosedError(DBError):
    """Raised when a written or closed batch is used."""

    def __init__(self, message: str = "batch has been written or closed") -> None:
        super().__init__(message)


class Iterator(ABC):
    """A cursor over a key range of a store.

    Iterating it in Python yields ``(key, value)`` pairs from the current
    position onwards; used as a context manager it is closed on exit.
    """

    @abstractmethod
    def domain(self) -> tuple[bytes | None, bytes | None]:
        """Return the (start, end) bounds the iterator was created with."""

    @abstractmethod
    def valid(self) -> bool:
        """Return whether the cursor points at an item."""

    @abstractmethod
    def next(self) -> None:
        """Advance the cursor; the cursor must be valid."""

    @abstractmethod
    def key(self) -> bytes:
        """Return the current key; the cursor must be valid."""

    @abstractmethod
    def value(self) -> bytes:
        """Return the current value; the cursor must be valid."""

    @abstractmethod
    def error(self) -> Exception | None:
        """Return the error that ended iteration, if any."""

    @abstractmethod
    def close(self) -> None:
        """Release the iterator's resources."""

    def __iter__(self) -> _PyIterator[tuple[bytes, bytes]]:
        while self.valid():
            yield self.key(), self.value()
            self.next()

    def __enter__(self) -> Iterator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Batch(ABC):
    """A set of writes applied to a store together."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Queue setting ``key`` to ``value``."""

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Queue deleting ``key``."""

    @abstractmethod
    def write(self) -> None:
        """Apply the queued writes."""

    @abstractmethod
    def write_sync(self) -> None:
        """Apply the queued writes and flush them durably."""

    @abstractmethod
    def close(self) -> None:
        """Discard the batch."""

    @abstractmethod
    def get_byte_size(self) -> int:
        """Return the approximate size of the queued writes in bytes."""

    def __enter__(self) -> Batch:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class KVStoreWithBatch(ABC):
    """An ordered byte key-value store that can create write batches."""

    @abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """Return the value for ``key``, or None if absent."""

    @abstractmethod
    def has(self, key: bytes) -> bool:
        """Return whether ``key`` is present."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Set ``key`` to ``value``."""

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete ``key``."""

    @abstractmethod
    def iterator(self, start: bytes | None, end: bytes | None) -> Iterator:
        """Iterate ascending over ``[start, end)``; None leaves a side open."""

    @abstractmethod
    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> Iterator:
        """Iterate descending over ``[start, end)``; None leaves a side open."""

    @abstractmethod
    def close(self) -> None:
        """Close the store."""

    @abstractmethod
    def new_batch(self) -> Batch:
        """Create a batch for atomic updates."""

    @abstractmethod
    def new_batch_with_size(self, size: int) -> Batch:
        """Create a batch, pre-sized where the backend supports it."""