"""
tlsframe.chain
A buffer of back-to-back records as an immutable chain of header nodes,
plus the mutable builder used to craft or rewrite one.

Parsing, encoding and building all walk the chain with loops, so a buffer
packed with thousands of empty records cannot exhaust the stack.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .header import RecordHeader, decode_header, encode_header
from .protocol import check_bounds
from .records import RecordBody
from .registry import ContentType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False, repr=False)
class RecordChain:
    header: RecordHeader
    next: Optional["RecordChain"] = None

    def __iter__(self) -> Iterator[RecordHeader]:
        for node in self.nodes():
            yield node.header

    def nodes(self) -> Iterator["RecordChain"]:
        node: Optional[RecordChain] = self
        while node is not None:
            yield node
            node = node.next

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordChain):
            return NotImplemented
        return list(self) == list(other)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"RecordChain(records={len(self)}, total_length={self.total_length})"

    def __str__(self) -> str:
        return self.describe()

    @property
    def total_length(self) -> int:
        return sum(h.total_length for h in self)

    def encode(self) -> bytes:
        return encode_chain(self)

    def describe(self) -> str:
        return describe(self)

    def to_builder(self) -> "RecordChainBuilder":
        return RecordChainBuilder.from_chain(self)


def _check_content_type(content_type: Union[ContentType, int]) -> None:
    if not 0 <= int(content_type) <= 0xFF:
        raise ValueError(f"content type out of range: {content_type}")


def _link(headers: List[RecordHeader]) -> RecordChain:
    node: Optional[RecordChain] = None
    for header in reversed(headers):
        node = RecordChain(header=header, next=node)
    assert node is not None
    return node


def parse_chain(buffer: Union[bytes, bytearray, memoryview], offset: int = 0,
                length: Optional[int] = None) -> RecordChain:
    """
    Decode every record in buffer[offset:offset+length] (default: to the end).

    All or nothing: a malformed record anywhere, including a short trailing
    fragment, fails the whole call and no prefix is returned.
    """
    data = bytes(buffer)
    if length is None:
        length = len(data) - offset
    check_bounds(data, offset, length)

    headers: List[RecordHeader] = []
    pos, remaining = offset, length
    while True:
        header = decode_header(data, pos, remaining)
        logger.debug("record at %d: type=%s length=%d", pos, header.content_type.name, header.body_length)
        headers.append(header)
        pos += header.total_length
        remaining -= header.total_length
        if remaining == 0:
            break
    return _link(headers)


def encode_chain(chain: RecordChain) -> bytes:
    return b"".join(encode_header(h) for h in chain)


def describe(chain: RecordChain) -> str:
    return "\n".join(h.describe() for h in chain)


@dataclass(eq=False, repr=False)
class RecordChainBuilder:
    """
    Mutable staging copy of a chain node. Fields are plain attributes;
    build() snapshots them, taking record_length verbatim.

    Not synchronized: one builder, one owner.
    """
    content_type: Optional[Union[ContentType, int]] = None
    version: Optional[int] = None
    record_length: Optional[int] = None
    body: Optional[RecordBody] = None
    next_builder: Optional["RecordChainBuilder"] = None

    @classmethod
    def from_chain(cls, chain: RecordChain) -> "RecordChainBuilder":
        builders = [
            cls(content_type=h.content_type, version=h.version, record_length=h.record_length, body=h.body)
            for h in chain
        ]
        for builder, nxt in zip(builders, builders[1:]):
            builder.next_builder = nxt
        return builders[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordChainBuilder):
            return NotImplemented
        return [b._fields() for b in self.builders()] == [b._fields() for b in other.builders()]

    def __repr__(self) -> str:
        return (
            f"RecordChainBuilder(content_type={self.content_type!r}, version={self.version!r}, "
            f"record_length={self.record_length!r}, body={self.body!r}, "
            f"builders={sum(1 for _ in self.builders())})"
        )

    def _fields(self) -> tuple:
        return (self.content_type, self.version, self.record_length, self.body)

    def builders(self) -> Iterator["RecordChainBuilder"]:
        seen = set()
        builder: Optional[RecordChainBuilder] = self
        while builder is not None:
            if id(builder) in seen:
                raise ValueError("next_builder links form a cycle")
            seen.add(id(builder))
            yield builder
            builder = builder.next_builder

    def build(self) -> RecordChain:
        return _link([b._header() for b in self.builders()])

    def _header(self) -> RecordHeader:
        for name in ("content_type", "version", "record_length", "body"):
            if getattr(self, name) is None:
                raise ValueError(f"builder field {name} is not set")
        _check_content_type(self.content_type)
        return RecordHeader(
            content_type=self.content_type,
            version=self.version,
            record_length=self.record_length,
            body=self.body,
        )


def chain_from_records(records: Iterable[Tuple[Union[ContentType, int], int, RecordBody]]) -> RecordChain:
    """Chain of new records, each record_length taken from its encoded body."""
    headers = []
    for content_type, version, body in records:
        _check_content_type(content_type)
        n = len(body.encode())
        if n > 0xFFFF:
            raise ValueError(f"record body too long: {n} bytes")
        headers.append(RecordHeader(content_type=content_type, version=version, record_length=n, body=body))
    if not headers:
        raise ValueError("no records")
    return _link(headers)
