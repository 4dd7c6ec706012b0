from dataclasses import dataclass

import pytest

from iavlkit.cache import CacheNode, LRUCache

NONE_REMOVED = -1


@dataclass(eq=False)
class _Node:
    key: bytes


TEST_NODES = [_Node(b"key1"), _Node(b"key2"), _Node(b"key3")]


def _validate_contents(cache, expected_indexes):
    assert len(cache) == len(expected_indexes)
    for idx in expected_indexes:
        node = TEST_NODES[idx]
        assert cache.has(node.key)
        assert cache.get(node.key) is node


ADD_CASES = {
    "add 1 node with 1 max - added": (1, [(0, NONE_REMOVED)], [0]),
    "add 1 node twice, cache max 2 - only one added": (2, [(0, NONE_REMOVED), (0, 0)], [0]),
    "add 1 node with 0 max - not added and return itself": (0, [(0, 0)], []),
    "add 3 nodes with 1 max - first 2 removed": (1, [(0, NONE_REMOVED), (1, 0), (2, 1)], [2]),
    "add 3 nodes with 2 max - first removed": (
        2,
        [(0, NONE_REMOVED), (1, NONE_REMOVED), (2, 0)],
        [1, 2],
    ),
    "add 3 nodes with 10 max - non removed": (
        10,
        [(0, NONE_REMOVED), (1, NONE_REMOVED), (2, NONE_REMOVED)],
        [0, 1, 2],
    ),
}


@pytest.mark.parametrize("name", sorted(ADD_CASES))
def test_cache_add(name):
    cache_max, ops, expected_indexes = ADD_CASES[name]
    cache = LRUCache(cache_max)
    expected_size = 0
    for node_idx, expected in ops:
        result = cache.add(TEST_NODES[node_idx])
        if expected == NONE_REMOVED:
            assert result is None
            expected_size += 1
        else:
            assert result is TEST_NODES[expected]
        assert len(cache) == expected_size
    _validate_contents(cache, expected_indexes)


REMOVE_CASES = {
    "remove non-existent key, cache max 0 - nil returned": (0, [], [(0, NONE_REMOVED)], []),
    "remove non-existent key, cache max 1 - nil returned": (1, [1], [(0, NONE_REMOVED)], [1]),
    "remove existent key, cache max 1 - removed": (1, [0], [(0, 0)], []),
    "remove twice, cache max 1 - removed first time, then nil": (
        1,
        [0],
        [(0, 0), (0, NONE_REMOVED)],
        [],
    ),
    "remove all, cache max 3": (3, [0, 1, 2], [(2, 2), (0, 0), (1, 1)], []),
}


@pytest.mark.parametrize("name", sorted(REMOVE_CASES))
def test_cache_remove(name):
    cache_max, setup, ops, expected_indexes = REMOVE_CASES[name]
    cache = LRUCache(cache_max)
    for idx in setup:
        assert cache.add(TEST_NODES[idx]) is None
    assert len(cache) == len(setup)

    expected_size = len(cache)
    for node_idx, expected in ops:
        result = cache.remove(TEST_NODES[node_idx].key)
        if expected == NONE_REMOVED:
            assert result is None
        else:
            expected_size -= 1
            assert result is TEST_NODES[expected]
        assert len(cache) == expected_size
    _validate_contents(cache, expected_indexes)


def test_get_refreshes_recency():
    cache = LRUCache(2)
    cache.add(TEST_NODES[0])
    cache.add(TEST_NODES[1])
    assert cache.get(TEST_NODES[0].key) is TEST_NODES[0]
    evicted = cache.add(TEST_NODES[2])
    assert evicted is TEST_NODES[1]
    assert cache.has(b"key1")
    assert not cache.has(b"key2")


def test_has_does_not_refresh_recency():
    cache = LRUCache(2)
    cache.add(TEST_NODES[0])
    cache.add(TEST_NODES[1])
    assert cache.has(TEST_NODES[0].key)
    assert cache.add(TEST_NODES[2]) is TEST_NODES[0]


def test_get_missing_returns_none():
    cache = LRUCache(5)
    assert cache.get(b"missing") is None
    assert b"missing" not in cache


def test_many_random_adds_stay_bounded():
    cache = LRUCache(50)
    evictions = 0
    for i in range(200):
        if cache.add(_Node(i.to_bytes(4, "big"))) is not None:
            evictions += 1
    assert len(cache) == 50
    assert evictions == 150
    assert cache.has((199).to_bytes(4, "big"))
    assert not cache.has((0).to_bytes(4, "big"))


def test_cached_nodes_satisfy_protocol():
    cache = LRUCache(3)
    cache.add(TEST_NODES[0])
    cached = cache.get(TEST_NODES[0].key)
    assert cached is TEST_NODES[0]
    assert isinstance(cached, CacheNode)