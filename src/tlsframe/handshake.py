"""
tlsframe.handshake
Handshake message splitting and certificate rendering for Handshake records.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

from cryptography import x509

from .protocol import pack_u8, pack_u24, unpack_u24

MESSAGE_HEADER_LENGTH = 4  # type(1) + length(3)


class HandshakeType(IntEnum):
    HELLO_REQUEST = 0
    CLIENT_HELLO = 1
    SERVER_HELLO = 2
    NEW_SESSION_TICKET = 4
    END_OF_EARLY_DATA = 5
    ENCRYPTED_EXTENSIONS = 8
    CERTIFICATE = 11
    SERVER_KEY_EXCHANGE = 12
    CERTIFICATE_REQUEST = 13
    SERVER_HELLO_DONE = 14
    CERTIFICATE_VERIFY = 15
    CLIENT_KEY_EXCHANGE = 16
    FINISHED = 20
    CERTIFICATE_STATUS = 22
    KEY_UPDATE = 24
    MESSAGE_HASH = 254


_KNOWN_TYPES = frozenset(t.value for t in HandshakeType)


def handshake_type_name(value: int) -> str:
    try:
        return HandshakeType(value).name.lower()
    except ValueError:
        return f"unknown ({value})"


@dataclass(frozen=True)
class HandshakeMessage:
    msg_type: int
    body: bytes

    def encode(self) -> bytes:
        return pack_u8(self.msg_type) + pack_u24(len(self.body)) + self.body

    def describe(self) -> List[str]:
        lines = [f"  Handshake: {handshake_type_name(self.msg_type)} ({len(self.body)} bytes)"]
        if self.msg_type == HandshakeType.CERTIFICATE:
            lines.extend(f"    Certificate: {s}" for s in certificate_subjects(self.body))
        return lines


def split_messages(data: bytes) -> Tuple[Tuple[HandshakeMessage, ...], bytes]:
    """
    Peel complete known-type messages off the front of a handshake body.

    Whatever is left once the next bytes are not a complete message of a
    known type (a fragment, or an encrypted Finished) is returned verbatim.
    """
    messages: List[HandshakeMessage] = []
    pos = 0
    while len(data) - pos >= MESSAGE_HEADER_LENGTH:
        msg_type = data[pos]
        if msg_type not in _KNOWN_TYPES:
            break
        n = unpack_u24(data, pos + 1)
        end = pos + MESSAGE_HEADER_LENGTH + n
        if end > len(data):
            break
        messages.append(HandshakeMessage(msg_type=msg_type, body=data[pos + MESSAGE_HEADER_LENGTH:end]))
        pos = end
    return tuple(messages), data[pos:]


def split_certificate_list(body: bytes) -> List[bytes]:
    """DER entries of a TLS 1.2 certificate_list; ValueError if the lengths do not line up."""
    if len(body) < 3 or unpack_u24(body) != len(body) - 3:
        raise ValueError("bad certificate_list length")
    entries: List[bytes] = []
    pos = 3
    while pos < len(body):
        if len(body) - pos < 3:
            raise ValueError("truncated certificate entry length")
        n = unpack_u24(body, pos)
        der = body[pos + 3:pos + 3 + n]
        if len(der) != n:
            raise ValueError("truncated certificate entry")
        entries.append(der)
        pos += 3 + n
    return entries


def certificate_subjects(body: bytes) -> List[str]:
    try:
        entries = split_certificate_list(body)
    except ValueError:
        return [f"<unparseable certificate_list, {len(body)} bytes>"]
    subjects = []
    for der in entries:
        try:
            cert = x509.load_der_x509_certificate(der)
        except ValueError:
            subjects.append(f"<unparseable DER, {len(der)} bytes>")
            continue
        subjects.append(cert.subject.rfc4514_string())
    return subjects
