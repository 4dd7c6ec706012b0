"""Seedable pseudo-random helpers. Not suitable for cryptographic use."""

from __future__ import annotations

import os
import random
import struct
import threading

_STR_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def _to_signed(value: int, bits: int) -> int:
    if value >= 1 << (bits - 1):
        return value - (1 << bits)
    return value


class Rand:
    """A thread-safe PRNG seeded from OS randomness unless a seed is given."""

    def __init__(self, seed: int | None = None) -> None:
        self._lock = threading.Lock()
        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._rng = random.Random(seed)

    def seed(self, seed: int) -> None:
        """Reset the generator to the sequence for ``seed``."""
        with self._lock:
            self._rng = random.Random(seed)

    def string(self, length: int) -> str:
        """Return a random alphanumeric string of ``length`` characters."""
        if length <= 0:
            return ""
        chars: list[str] = []
        while True:
            val = self.int63()
            for _ in range(10):
                v = val & 0x3F
                if v < len(_STR_CHARS):
                    chars.append(_STR_CHARS[v])
                    if len(chars) == length:
                        return "".join(chars)
                val >>= 6

    def uint16(self) -> int:
        return self.uint32() & 0xFFFF

    def uint32(self) -> int:
        with self._lock:
            return self._rng.getrandbits(32)

    def uint64(self) -> int:
        return (self.uint32() << 32) + self.uint32()

    def uint(self) -> int:
        return self.int()

    def int16(self) -> int:
        return _to_signed(self.uint32() & 0xFFFF, 16)

    def int32(self) -> int:
        return _to_signed(self.uint32(), 32)

    def int64(self) -> int:
        return _to_signed(self.uint64(), 64)

    def int(self) -> int:
        """Return a non-negative 63-bit integer."""
        with self._lock:
            return self._rng.getrandbits(63)

    def int31(self) -> int:
        with self._lock:
            return self._rng.getrandbits(31)

    def int31n(self, n: int) -> int:
        if n <= 0:
            raise ValueError("invalid argument to int31n")
        with self._lock:
            return self._rng.randrange(n)

    def int63(self) -> int:
        with self._lock:
            return self._rng.getrandbits(63)

    def int63n(self, n: int) -> int:
        if n <= 0:
            raise ValueError("invalid argument to int63n")
        with self._lock:
            return self._rng.randrange(n)

    def float32(self) -> float:
        """Return a single-precision float in [0, 1)."""
        while True:
            with self._lock:
                raw = self._rng.random()
            value = struct.unpack("<f", struct.pack("<f", raw))[0]
            if value < 1.0:
                return value

    def float64(self) -> float:
        with self._lock:
            return self._rng.random()

    def time(self) -> int:
        """Return a random instant as whole seconds since the Unix epoch."""
        return self.int64()

    def bytes(self, n: int) -> bytes:
        """Return ``n`` bytes drawn from the internal PRNG."""
        return bytes(self.int() & 0xFF for _ in range(n))

    def intn(self, n: int) -> int:
        """Return a uniform integer in [0, n)."""
        if n <= 0:
            raise ValueError("invalid argument to intn")
        with self._lock:
            return self._rng.randrange(n)

    def bool(self) -> bool:
        return self.int63() % 2 == 0

    def perm(self, n: int) -> list[int]:
        """Return a random permutation of range(n)."""
        if n < 0:
            raise ValueError("invalid argument to perm")
        values = list(range(n))
        with self._lock:
            self._rng.shuffle(values)
        return values


_GLOBAL = Rand()


def seed(seed: int) -> None:
    _GLOBAL.seed(seed)


def rand_str(length: int) -> str:
    return _GLOBAL.string(length)


def rand_int() -> int:
    return _GLOBAL.int()


def rand_int31() -> int:
    return _GLOBAL.int31()


def rand_bytes(n: int) -> bytes:
    return _GLOBAL.bytes(n)


def rand_perm(n: int) -> list[int]:
    return _GLOBAL.perm(n)