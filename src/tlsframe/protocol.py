"""
tlsframe.protocol
Big-endian field helpers and window bounds checks shared by every codec.
"""
from __future__ import annotations

import struct

from .errors import BoundsError


def pack_u8(n: int) -> bytes:
    return struct.pack(">B", n)


def pack_u16(n: int) -> bytes:
    return struct.pack(">H", n)


def unpack_u16(b: bytes, offset: int = 0) -> int:
    return struct.unpack_from(">H", b, offset)[0]


def pack_u24(n: int) -> bytes:
    if not 0 <= n <= 0xFFFFFF:
        raise ValueError(f"u24 out of range: {n}")
    return n.to_bytes(3, "big")


def unpack_u24(b: bytes, offset: int = 0) -> int:
    return int.from_bytes(b[offset:offset + 3], "big")


def check_bounds(buffer: bytes, offset: int, length: int) -> None:
    """Raise BoundsError unless buffer[offset:offset+length] lies inside buffer."""
    if offset < 0 or length < 0:
        raise BoundsError("negative offset or length", offset, length, len(buffer))
    available = len(buffer) - offset
    if available < length:
        raise BoundsError("window exceeds buffer", offset, length, max(available, 0))


def require(available: int, needed: int, offset: int, what: str) -> None:
    if available < needed:
        raise BoundsError(f"buffer too short for {what}", offset, needed, available)
