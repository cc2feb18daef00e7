"""
tlsframe.registry
Content-type / version lookups and the tag -> record body codec table.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, Type

from .errors import UnrecognizedTagError
from .records import (
    AlertRecord,
    ApplicationDataRecord,
    ChangeCipherSpecRecord,
    HandshakeRecord,
    HeartbeatRecord,
    RecordBody,
)


class ContentType(IntEnum):
    CHANGE_CIPHER_SPEC = 20
    ALERT = 21
    HANDSHAKE = 22
    APPLICATION_DATA = 23
    HEARTBEAT = 24


class TlsVersion(IntEnum):
    SSL_3_0 = 0x0300
    TLS_1_0 = 0x0301
    TLS_1_1 = 0x0302
    TLS_1_2 = 0x0303
    TLS_1_3 = 0x0304


_VERSION_NAMES = {
    TlsVersion.SSL_3_0: "SSL 3.0",
    TlsVersion.TLS_1_0: "TLS 1.0",
    TlsVersion.TLS_1_1: "TLS 1.1",
    TlsVersion.TLS_1_2: "TLS 1.2",
    TlsVersion.TLS_1_3: "TLS 1.3",
}

CODECS: Dict[ContentType, Type[RecordBody]] = {
    ContentType.CHANGE_CIPHER_SPEC: ChangeCipherSpecRecord,
    ContentType.ALERT: AlertRecord,
    ContentType.HANDSHAKE: HandshakeRecord,
    ContentType.APPLICATION_DATA: ApplicationDataRecord,
    ContentType.HEARTBEAT: HeartbeatRecord,
}


def version_name(value: int) -> str:
    value &= 0xFFFF
    try:
        name = _VERSION_NAMES[TlsVersion(value)]
    except ValueError:
        name = "unknown"
    return f"{name} (0x{value:04x})"


def content_type_name(value: int) -> str:
    try:
        name = ContentType(value).name.lower()
    except ValueError:
        name = "unknown"
    return f"{name} ({int(value)})"


def lookup_content_type(tag: int, offset: int = 0) -> ContentType:
    try:
        return ContentType(tag)
    except ValueError:
        raise UnrecognizedTagError(tag, offset) from None


def codec_for(tag: int, offset: int = 0) -> Type[RecordBody]:
    """Body class for a content-type tag; every ContentType member has exactly one."""
    return CODECS[lookup_content_type(tag, offset)]
