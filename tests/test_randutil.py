import string

import pytest

from iavlkit.randutil import (
    Rand,
    rand_bytes,
    rand_int,
    rand_int31,
    rand_perm,
    rand_str,
    seed,
)


def test_rand_str_length():
    assert len(rand_str(243)) == 243


def test_rand_bytes_length():
    assert len(rand_bytes(243)) == 243


def _sample_all():
    seed(1)
    return (rand_perm(10), rand_int(), rand_int31())


def test_determinism():
    first = _sample_all()
    for _ in range(100):
        assert _sample_all() == first
    perm, i, i31 = first
    assert sorted(perm) == list(range(10))
    assert 0 <= i < 2**63
    assert 0 <= i31 < 2**31


def test_seeded_instances_agree():
    a, b = Rand(5), Rand(5)
    assert [a.uint64() for _ in range(5)] == [b.uint64() for _ in range(5)]
    assert a.string(30) == b.string(30)


def test_reseed_restarts_sequence():
    r = Rand(9)
    first = r.bytes(16)
    r.seed(9)
    assert r.bytes(16) == first


def test_string_is_alphanumeric():
    s = Rand(3).string(500)
    assert len(s) == 500
    assert set(s) <= set(string.ascii_letters + string.digits)
    assert Rand(3).string(0) == ""


def test_integer_ranges():
    r = Rand(11)
    for _ in range(200):
        assert 0 <= r.uint16() < 2**16
        assert -(2**15) <= r.int16() < 2**15
        assert -(2**31) <= r.int32() < 2**31
        assert -(2**63) <= r.int64() < 2**63
        assert 0 <= r.uint() < 2**63
        assert 0 <= r.int31n(7) < 7
        assert 0 <= r.int63n(1000) < 1000
        assert 0 <= r.intn(3) < 3
        assert 0.0 <= r.float32() < 1.0
        assert 0.0 <= r.float64() < 1.0
        assert -(2**63) <= r.time() < 2**63


def test_bool_produces_both_values():
    r = Rand(13)
    results = {r.bool() for _ in range(200)}
    assert results == {True, False}


def test_perm_is_permutation():
    assert sorted(Rand(2).perm(50)) == list(range(50))
    assert Rand(2).perm(0) == []


@pytest.mark.parametrize("method", ["intn", "int31n", "int63n"])
def test_non_positive_bound_raises(method):
    with pytest.raises(ValueError):
        getattr(Rand(1), method)(0)


def test_negative_perm_raises():
    with pytest.raises(ValueError):
        Rand(1).perm(-1)