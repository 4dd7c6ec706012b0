import pytest

from iavlkit.batch import BatchWithFlusher
from iavlkit.db.memdb import MemDB
from iavlkit.db.types import BatchClosedError

VALUE_10KB = bytes(10000)


def make_key(n: int) -> bytes:
    return n.to_bytes(2, "big")


def test_batch_with_flusher_commits_everything():
    db = MemDB()
    batch = BatchWithFlusher(db, 100000)
    for nonce in range(1000):
        batch.set(make_key(nonce), VALUE_10KB)
    batch.write()

    items = list(db.iterator(None, None))
    assert len(items) == 1000
    for nonce, (key, value) in enumerate(items):
        assert key == make_key(nonce)
        assert value == VALUE_10KB


def test_flushes_when_threshold_exceeded():
    db = MemDB()
    batch = BatchWithFlusher(db, 150)
    value = bytes(40)
    batch.set(b"1", value)
    assert db.get(b"1") is None
    batch.set(b"2", value)
    assert db.get(b"1") == value
    assert db.get(b"2") is None
    assert batch.get_byte_size() == len(b"2") + len(value)
    batch.write()
    assert db.get(b"2") == value
    assert batch.get_byte_size() == 0


def test_close_discards_pending():
    db = MemDB()
    batch = BatchWithFlusher(db, 100000)
    batch.set(b"k", b"v")
    batch.close()
    assert db.get(b"k") is None
    with pytest.raises(BatchClosedError):
        batch.get_byte_size()
    with pytest.raises(BatchClosedError):
        batch.write()


def test_write_renews_batch():
    db = MemDB()
    batch = BatchWithFlusher(db, 100000)
    batch.set(b"k", b"v")
    batch.write()
    batch.set(b"j", b"w")
    batch.write_sync()
    assert [k for k, _ in db.iterator(None, None)] == [b"j", b"k"]