"""
tlsframe.header
The fixed 5-byte record header and the body it owns.

    offset 0  content type (1)
    offset 1  version      (2)
    offset 3  length       (2)
    offset 5  body         (length)
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Union

from .protocol import check_bounds, require, unpack_u16
from .records import RecordBody
from .registry import ContentType, codec_for, content_type_name, version_name

HEADER_LENGTH = 5


@dataclass(frozen=True)
class RecordHeader:
    content_type: Union[ContentType, int]
    version: int
    # stored as given; a negative (signed short) value means its unsigned twin
    record_length: int
    body: RecordBody

    @property
    def body_length(self) -> int:
        return self.record_length & 0xFFFF

    @property
    def total_length(self) -> int:
        return HEADER_LENGTH + self.body_length

    def encode(self) -> bytes:
        return encode_header(self)

    def describe(self) -> str:
        lines = [
            f"[TLS Header ({self.total_length} bytes)]",
            f"  Version: {version_name(self.version)}",
            f"  Type: {content_type_name(self.content_type)}",
        ]
        lines.extend(self.body.describe())
        return "\n".join(lines)


def decode_header(buffer: bytes, offset: int, length: int) -> RecordHeader:
    """Decode one header plus its body from buffer[offset:offset+length]."""
    check_bounds(buffer, offset, length)
    require(length, HEADER_LENGTH, offset, "fixed header")
    codec = codec_for(buffer[offset], offset)
    content_type = ContentType(buffer[offset])
    version = unpack_u16(buffer, offset + 1)
    record_length = unpack_u16(buffer, offset + 3)
    require(length - HEADER_LENGTH, record_length, offset + HEADER_LENGTH, f"{content_type.name} body")
    body = codec.decode(buffer, offset + HEADER_LENGTH, record_length)
    return RecordHeader(content_type=content_type, version=version, record_length=record_length, body=body)


def encode_header(header: RecordHeader) -> bytes:
    """
    Fixed prefix followed by the body's own encoding.

    record_length is written as stored, never recomputed from the body.
    """
    prefix = struct.pack(">BHH", int(header.content_type), header.version & 0xFFFF, header.body_length)
    return prefix + header.body.encode()
