# iavlkit

Building blocks for a versioned, snapshottable AVL+ key-value store: the
byte encodings, a node cache, ordered key-value stores, write batching and
compression of exported node streams.

## What is inside

- `iavlkit.encoding` – varint, zig-zag varint and length-prefixed byte
  encodings: `encode_uvarint`, `decode_uvarint`, `encode_varint`,
  `decode_varint`, `encode_bytes`, `decode_bytes`, `encode_32bytes_hash`
  and the size helpers `encode_uvarint_size`, `encode_varint_size`,
  `encode_bytes_size`. Malformed input raises `DecodeError`, whose
  `consumed` attribute tells how many bytes were read.
- `iavlkit.byteutil` – `HexBytes`, a `bytes` subclass that prints as
  upper-case hex and converts to and from a JSON string literal
  (`to_json`, `HexBytes.from_json`), and `cp_incr`, which increments a
  byte string as a big-endian number (returning `None` on overflow) to
  give the exclusive end of a prefix range.
- `iavlkit.color` – ANSI colouring helpers `treat`, `green`, `blue`,
  `cyan` and `colored_bytes`. `colored_bytes` colours only when the
  `TENDERMINT_IAVL_COLORS_ON` environment variable is set; otherwise it
  returns just the first byte as a character.
- `iavlkit.randutil` – `Rand`, a seedable, thread-safe pseudo-random
  generator (not for cryptographic use), and module-level helpers backed
  by a shared instance: `seed`, `rand_str`, `rand_int`, `rand_int31`,
  `rand_bytes`, `rand_perm`.
- `iavlkit.cache` – `LRUCache`, a cache of objects with a `key`
  attribute, bounded by element count. `add` returns the node it replaced
  or evicted.
- `iavlkit.fastnode` – `FastNode`, a key's live value and the version it
  was last updated at, with `to_bytes`, `FastNode.deserialize` and
  `encoded_size`.
- `iavlkit.compress` – `ExportNode` and `ExportDone`, plus
  `CompressExporter` (wraps any iterable of export nodes) and
  `CompressImporter` (wraps any object with an `add(node)` method), which
  drop branch keys, delta-encode leaf keys and store branch versions as a
  difference from their children's. The helpers `delta_encode`,
  `delta_decode` and `diff_offset` are public too.
- `iavlkit.db.types` – the store interface: `KVStoreWithBatch`,
  `Iterator`, `Batch`, and the errors `DBError`, `KeyEmptyError`,
  `ValueNilError`, `BatchClosedError`. Iterators yield `(key, value)`
  pairs when looped over and close themselves when used in a `with`
  block.
- `iavlkit.db.memdb` – `MemDB`, an ordered in-memory store, with
  `MemDBIterator` and `MemDBBatch`. Its iterators read a snapshot of the
  range taken when they are created.
- `iavlkit.db.prefixdb` – `PrefixDB`, a namespaced view over another
  store, with `PrefixDBIterator`, `PrefixDBBatch` and `iterate_prefix`.
- `iavlkit.batch` – `BatchWithFlusher`, a batch that writes itself to the
  store and starts afresh before it would exceed a byte threshold.

## Installation

```
pip install iavlkit
```

## Examples

Stores and prefixed views:

```python
from iavlkit.db.memdb import MemDB
from iavlkit.db.prefixdb import PrefixDB

db = MemDB()
db.set(b"alice", b"abc")
assert db.get(b"alice") == b"abc"

users = PrefixDB(db, b"users/")
users.set(b"bob", b"xyz")
assert db.get(b"users/bob") == b"xyz"

with users.iterator(None, None) as itr:
    for key, value in itr:
        print(key, value)  # b'bob' b'xyz'
```

Batched writes:

```python
from iavlkit.batch import BatchWithFlusher

batch = BatchWithFlusher(db, 100_000)
for n in range(1000):
    batch.set(n.to_bytes(2, "big"), b"\x00" * 100)
batch.write()
```

Encodings:

```python
from iavlkit.encoding import encode_varint, decode_varint

data = encode_varint(-100)
value, read = decode_varint(data)
assert value == -100 and read == len(data)
```

An LRU cache of nodes:

```python
from iavlkit.cache import LRUCache
from iavlkit.fastnode import FastNode

cache = LRUCache(2)
cache.add(FastNode(b"k1", 1, b"v1"))
cache.add(FastNode(b"k2", 1, b"v2"))
evicted = cache.add(FastNode(b"k3", 1, b"v3"))  # the k1 node
```

Compressing an export stream:

```python
from iavlkit.compress import CompressExporter, ExportNode

nodes = [
    ExportNode(b"a", b"\x01", 1, 0),
    ExportNode(b"ab", b"\x02", 2, 0),
    ExportNode(b"ab", None, 2, 1),
]
for node in CompressExporter(nodes):
    print(node)  # leaf keys delta-encoded; branch key dropped, version 0
```

## What it does not do

The package holds the parts around a tree, not the tree: there is no
mutable or immutable AVL+ tree, no hashing, versioning or proofs, no
exporter that walks a tree and no importer that rebuilds one.
`CompressImporter` needs an importer supplied by the caller. The only
store is the in-memory `MemDB` (and `PrefixDB` views over any store);
there is no on-disk backend, and there is no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```