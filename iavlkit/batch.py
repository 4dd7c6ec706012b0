"""A write batch that flushes itself to the store once it grows too large."""

from __future__ import annotations

import threading

from iavlkit.db.types import Batch, KVStoreWithBatch

# Backends may add per-entry overhead beyond the key and value; this
# over-accounts for it when deciding whether the next write would overflow.
_ENTRY_OVERHEAD = 100


class BatchWithFlusher(Batch):
    """Wrap a store's batch, writing it out before it exceeds a size threshold.

    When adding an entry would push the batch past ``flush_threshold`` bytes,
    the current batch is written and replaced by a fresh one before the entry
    is added.
    """

    def __init__(self, db: KVStoreWithBatch, flush_threshold: int) -> None:
        self._lock = threading.RLock()
        self._db = db
        self.flush_threshold = flush_threshold
        self._batch = db.new_batch_with_size(flush_threshold)

    def _size_after(self, key: bytes, value: bytes) -> int:
        return self._batch.get_byte_size() + len(key) + len(value) + _ENTRY_OVERHEAD

    def set(self, key: bytes, value: bytes) -> None:
        """Queue setting ``key``, flushing first if the batch would overflow."""
        with self._lock:
            if self._size_after(key, value) > self.flush_threshold:
                self.write()
            self._batch.set(key, value)

    def delete(self, key: bytes) -> None:
        """Queue deleting ``key``, flushing first if the batch would overflow."""
        with self._lock:
            if self._size_after(key, b"") > self.flush_threshold:
                self.write()
            self._batch.delete(key)

    def _renew(self) -> None:
        self._batch.close()
        self._batch = self._db.new_batch_with_size(self.flush_threshold)

    def write(self) -> None:
        """Write the queued entries and start a new batch."""
        with self._lock:
            self._batch.write()
            self._renew()

    def write_sync(self) -> None:
        """Write the queued entries durably and start a new batch."""
        with self._lock:
            self._batch.write_sync()
            self._renew()

    def close(self) -> None:
        with self._lock:
            self._batch.close()

    def get_byte_size(self) -> int:
        return self._batch.get_byte_size()