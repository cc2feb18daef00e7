"""
tlsframe.records
Record body codecs, one per content type.

Every body class exposes the same three operations:

    decode(buffer, offset, length)  -> body   (staticmethod)
    body.encode()                   -> bytes  (exact inverse of decode)
    body.describe()                 -> list of indented text lines
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple, Union

from .errors import RecordBodyError
from .handshake import HandshakeMessage, split_messages
from .protocol import check_bounds, pack_u16, unpack_u16


class AlertLevel(IntEnum):
    WARNING = 1
    FATAL = 2


class AlertDescription(IntEnum):
    CLOSE_NOTIFY = 0
    UNEXPECTED_MESSAGE = 10
    BAD_RECORD_MAC = 20
    DECRYPTION_FAILED = 21
    RECORD_OVERFLOW = 22
    DECOMPRESSION_FAILURE = 30
    HANDSHAKE_FAILURE = 40
    NO_CERTIFICATE = 41
    BAD_CERTIFICATE = 42
    UNSUPPORTED_CERTIFICATE = 43
    CERTIFICATE_REVOKED = 44
    CERTIFICATE_EXPIRED = 45
    CERTIFICATE_UNKNOWN = 46
    ILLEGAL_PARAMETER = 47
    UNKNOWN_CA = 48
    ACCESS_DENIED = 49
    DECODE_ERROR = 50
    DECRYPT_ERROR = 51
    EXPORT_RESTRICTION = 60
    PROTOCOL_VERSION = 70
    INSUFFICIENT_SECURITY = 71
    INTERNAL_ERROR = 80
    INAPPROPRIATE_FALLBACK = 86
    USER_CANCELED = 90
    NO_RENEGOTIATION = 100
    MISSING_EXTENSION = 109
    UNSUPPORTED_EXTENSION = 110
    UNRECOGNIZED_NAME = 112
    BAD_CERTIFICATE_STATUS_RESPONSE = 113
    UNKNOWN_PSK_IDENTITY = 115
    CERTIFICATE_REQUIRED = 116
    NO_APPLICATION_PROTOCOL = 120


class HeartbeatMessageType(IntEnum):
    REQUEST = 1
    RESPONSE = 2


def _name(enum_cls, value: int) -> str:
    try:
        return f"{enum_cls(value).name.lower()} ({value})"
    except ValueError:
        return f"unknown ({value})"


def _slice(buffer: bytes, offset: int, length: int) -> bytes:
    check_bounds(buffer, offset, length)
    return bytes(buffer[offset:offset + length])


@dataclass(frozen=True)
class ChangeCipherSpecRecord:
    value: int = 1

    def encode(self) -> bytes:
        return bytes([self.value])

    @staticmethod
    def decode(buffer: bytes, offset: int, length: int) -> "ChangeCipherSpecRecord":
        data = _slice(buffer, offset, length)
        if length != 1:
            raise RecordBodyError(f"ChangeCipherSpec body must be 1 byte, got {length}")
        return ChangeCipherSpecRecord(value=data[0])

    def describe(self) -> List[str]:
        return [f"  Change Cipher Spec: {self.value}"]


@dataclass(frozen=True)
class AlertRecord:
    """A plaintext alert (level + description) or, for any other body length, encrypted bytes."""
    level: Optional[int] = None
    description: Optional[int] = None
    encrypted: bytes = b""

    @property
    def is_encrypted(self) -> bool:
        return self.level is None

    def encode(self) -> bytes:
        if self.is_encrypted:
            return self.encrypted
        return bytes([self.level, self.description])

    @staticmethod
    def decode(buffer: bytes, offset: int, length: int) -> "AlertRecord":
        data = _slice(buffer, offset, length)
        if length == 2:
            return AlertRecord(level=data[0], description=data[1])
        return AlertRecord(encrypted=data)

    def describe(self) -> List[str]:
        if self.is_encrypted:
            return [f"  Encrypted Alert: {len(self.encrypted)} bytes"]
        return [
            f"  Alert Level: {_name(AlertLevel, self.level)}",
            f"  Alert Description: {_name(AlertDescription, self.description)}",
        ]


@dataclass(frozen=True)
class ApplicationDataRecord:
    data: bytes = b""

    def encode(self) -> bytes:
        return self.data

    @staticmethod
    def decode(buffer: bytes, offset: int, length: int) -> "ApplicationDataRecord":
        return ApplicationDataRecord(data=_slice(buffer, offset, length))

    def describe(self) -> List[str]:
        return [f"  Application Data: {len(self.data)} bytes"]


@dataclass(frozen=True)
class HeartbeatRecord:
    message_type: int
    payload: bytes = b""
    padding: bytes = b""

    def encode(self) -> bytes:
        return bytes([self.message_type]) + pack_u16(len(self.payload)) + self.payload + self.padding

    @staticmethod
    def decode(buffer: bytes, offset: int, length: int) -> "HeartbeatRecord":
        data = _slice(buffer, offset, length)
        if length < 3:
            raise RecordBodyError(f"heartbeat body too short: {length} bytes")
        payload_length = unpack_u16(data, 1)
        if payload_length > length - 3:
            raise RecordBodyError(
                f"heartbeat payload_length {payload_length} exceeds body ({length - 3} bytes follow)"
            )
        return HeartbeatRecord(
            message_type=data[0],
            payload=data[3:3 + payload_length],
            padding=data[3 + payload_length:],
        )

    def describe(self) -> List[str]:
        return [
            f"  Heartbeat: {_name(HeartbeatMessageType, self.message_type)}",
            f"  Payload: {len(self.payload)} bytes, Padding: {len(self.padding)} bytes",
        ]


@dataclass(frozen=True)
class HandshakeRecord:
    messages: Tuple[HandshakeMessage, ...] = ()
    # fragmented or encrypted handshake bytes after the last complete message
    trailing: bytes = b""

    def encode(self) -> bytes:
        return b"".join(m.encode() for m in self.messages) + self.trailing

    @staticmethod
    def decode(buffer: bytes, offset: int, length: int) -> "HandshakeRecord":
        messages, trailing = split_messages(_slice(buffer, offset, length))
        return HandshakeRecord(messages=messages, trailing=trailing)

    def describe(self) -> List[str]:
        lines: List[str] = []
        for m in self.messages:
            lines.extend(m.describe())
        if self.trailing:
            lines.append(f"  Encrypted or fragmented handshake data: {len(self.trailing)} bytes")
        return lines


RecordBody = Union[
    ChangeCipherSpecRecord,
    AlertRecord,
    ApplicationDataRecord,
    HeartbeatRecord,
    HandshakeRecord,
]
