"""Byte helpers: hex-rendered byte strings and big-endian increment."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes that render and serialise to JSON as upper-case hex."""

    def __str__(self) -> str:
        return self.hex().upper()

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def to_json(self) -> str:
        """Return the JSON string literal holding the upper-case hex."""
        return '"' + str(self) + '"'

    @classmethod
    def from_json(cls, data: str | bytes) -> HexBytes:
        """Parse a JSON string literal of hex digits."""
        text = data.decode("ascii") if isinstance(data, (bytes, bytearray)) else data
        if len(text) < 2 or text[0] != '"' or text[-1] != '"':
            raise ValueError(f"invalid hex string: {text}")
        return cls(binascii.unhexlify(text[1:-1]))


def cp_incr(bz: bytes) -> bytes | None:
    """Return ``bz`` incremented by one as a big-endian number of the same
    length, or None if it overflows (all bytes 0xFF)."""
    if len(bz) == 0:
        raise ValueError("cp_incr expects non-zero length")
    value = int.from_bytes(bz, "big") + 1
    if value >= 1 << (8 * len(bz)):
        return None
    return value.to_bytes(len(bz), "big")