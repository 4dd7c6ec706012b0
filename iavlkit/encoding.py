"""Varint and length-prefixed byte encodings used by the node formats."""

from __future__ import annotations

MAX_VARINT_LEN64 = 10

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class DecodeError(ValueError):
    """Raised when encoded input cannot be decoded.

    ``consumed`` is the number of input bytes read before the failure.
    """

    def __init__(self, message: str, consumed: int = 0) -> None:
        super().__init__(message)
        self.consumed = consumed


def _read_uvarint(bz: bytes) -> tuple[int, int]:
    """Read an unsigned varint; returns (value, n) with n == 0 on short input
    and n < 0 on overflow (then -n bytes were read)."""
    value = 0
    shift = 0
    for i, b in enumerate(bz):
        if i == MAX_VARINT_LEN64:
            return 0, -(i + 1)
        if b < 0x80:
            if i == MAX_VARINT_LEN64 - 1 and b > 1:
                return 0, -(i + 1)
            return value | (b << shift), i + 1
        value |= (b & 0x7F) << shift
        shift += 7
    return 0, 0


def decode_uvarint(bz: bytes) -> tuple[int, int]:
    """Decode an unsigned varint, returning the value and the bytes read."""
    value, n = _read_uvarint(bz)
    if n == 0:
        raise DecodeError("buffer too small", 0)
    if n < 0:
        raise DecodeError("EOF decoding uvarint", -n)
    return value, n


def decode_varint(bz: bytes) -> tuple[int, int]:
    """Decode a zig-zag signed varint, returning the value and the bytes read."""
    ux, n = _read_uvarint(bz)
    if n == 0:
        raise DecodeError("buffer too small", 0)
    if n < 0:
        raise DecodeError("EOF decoding varint", -n)
    value = ux >> 1
    if ux & 1:
        value = ~value
    return value, n


def decode_bytes(bz: bytes) -> tuple[bytes, int]:
    """Decode a varint length-prefixed byte string.

    Returns the bytes and the total number of input bytes read.
    """
    size, n = decode_uvarint(bz)
    if size >= _INT64_MAX:
        raise DecodeError(f"invalid out of range length {size} decoding bytes", n)
    end = n + size
    if len(bz) < end:
        raise DecodeError(f"insufficient bytes decoding bytes of length {size}", n)
    return bytes(bz[n:end]), end


def encode_uvarint(u: int) -> bytes:
    """Encode an unsigned 64-bit integer as a varint."""
    if not 0 <= u <= _UINT64_MAX:
        raise ValueError(f"value {u} out of range for uint64")
    out = bytearray()
    while u >= 0x80:
        out.append((u & 0x7F) | 0x80)
        u >>= 7
    out.append(u)
    return bytes(out)


def _zigzag(i: int) -> int:
    if not _INT64_MIN <= i <= _INT64_MAX:
        raise ValueError(f"value {i} out of range for int64")
    return ((i << 1) ^ (i >> 63)) & _UINT64_MAX


def encode_varint(i: int) -> bytes:
    """Encode a signed 64-bit integer as a zig-zag varint."""
    return encode_uvarint(_zigzag(i))


def encode_bytes(bz: bytes) -> bytes:
    """Return ``bz`` prefixed with its varint length."""
    return encode_uvarint(len(bz)) + bytes(bz)


def encode_32bytes_hash(bz: bytes) -> bytes:
    """Encode a 32-byte hash with its fixed one-byte length prefix."""
    return encode_uvarint(32) + bytes(bz)


def encode_uvarint_size(u: int) -> int:
    """Return the encoded size of ``u`` as an unsigned varint."""
    if u == 0:
        return 1
    return (u.bit_length() + 6) // 7


def encode_varint_size(i: int) -> int:
    """Return the encoded size of ``i`` as a signed varint."""
    return encode_uvarint_size(_zigzag(i))


def encode_bytes_size(bz: bytes) -> int:
    """Return the size of ``bz`` once length-prefixed."""
    return encode_uvarint_size(len(bz)) + len(bz)