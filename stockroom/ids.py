"""
Identifier helpers.

Item ids are unsigned 64-bit integers handed out by a persisted counter that
holds the last allocated id (0 = none yet). Keys are packed big-endian so
byte order matches numeric order.
"""

from __future__ import annotations

import struct

from stockroom.errors import StorageFailure

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

_U64 = struct.Struct(">Q")


def next_id(current: int) -> int:
    """
    Return the id that follows ``current``. Refuses to wrap around.

    >>> next_id(0)
    1
    >>> next_id(U64_MAX)
    Traceback (most recent call last):
    ...
    stockroom.errors.StorageFailure: id counter exhausted at 18446744073709551615
    """
    if current >= U64_MAX:
        raise StorageFailure(f"id counter exhausted at {current}")
    return current + 1


def pack_u64(value: int) -> bytes:
    """
    Encode an unsigned 64-bit integer as 8 big-endian bytes.

    >>> pack_u64(1)
    b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    try:
        return _U64.pack(value)
    except struct.error as e:
        raise StorageFailure(f"value {value} is not an unsigned 64-bit integer") from e


def unpack_u64(raw: bytes) -> int:
    """Inverse of pack_u64."""
    try:
        return _U64.unpack(raw)[0]
    except struct.error as e:
        raise StorageFailure(f"corrupt u64 cell ({len(raw)} bytes)") from e
