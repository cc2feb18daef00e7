import pytest

from tlsframe.chain import describe, encode_chain, parse_chain
from tlsframe.errors import BoundsError, RecordBodyError, UnrecognizedTagError
from tlsframe.registry import ContentType

CCS = bytes([0x14, 0x03, 0x03, 0x00, 0x01, 0x01])
ALERT = bytes([0x15, 0x03, 0x03, 0x00, 0x02, 0x02, 0x28])
APP = bytes([0x17, 0x03, 0x03, 0x00, 0x04]) + b"data"
HANDSHAKE = bytes([0x16, 0x03, 0x01, 0x00, 0x08, 0x01, 0x00, 0x00, 0x04]) + b"abcd"
HEARTBEAT = bytes([0x18, 0x03, 0x03, 0x00, 0x07, 0x01, 0x00, 0x02]) + b"hi" + b"pad"


def test_single_change_cipher_spec():
    chain = parse_chain(CCS)
    assert len(chain) == 1
    assert chain.header.content_type == ContentType.CHANGE_CIPHER_SPEC
    assert chain.header.version == 0x0303
    assert chain.header.record_length == 1
    assert chain.header.body.encode() == b"\x01"
    assert chain.next is None


def test_two_records_are_linked_in_order():
    chain = parse_chain(CCS + CCS)
    assert len(chain) == 2
    assert chain.next is not None
    assert chain.next.next is None
    assert chain.header == chain.next.header


def test_short_buffer_is_rejected():
    with pytest.raises(BoundsError):
        parse_chain(bytes([0x14, 0x03, 0x03, 0x00]))


def test_empty_buffer_is_rejected():
    with pytest.raises(BoundsError):
        parse_chain(b"")


def test_declared_length_past_end_is_rejected():
    with pytest.raises(BoundsError) as ei:
        parse_chain(bytes([0x14, 0x03, 0x03, 0x00, 0x05, 0x01]))
    assert ei.value.offset == 5
    assert ei.value.needed == 5
    assert ei.value.available == 1


def test_unknown_tag_is_rejected():
    with pytest.raises(UnrecognizedTagError) as ei:
        parse_chain(bytes([0x00, 0x03, 0x03, 0x00, 0x00]))
    assert ei.value.tag == 0


def test_unknown_tag_in_later_record_fails_whole_parse():
    with pytest.raises(UnrecognizedTagError) as ei:
        parse_chain(CCS + bytes([0x63, 0x03, 0x03, 0x00, 0x00]))
    assert ei.value.offset == 6


def test_trailing_fragment_fails_whole_parse():
    with pytest.raises(BoundsError):
        parse_chain(CCS + APP + b"\x14\x03")


def test_body_error_propagates():
    with pytest.raises(RecordBodyError):
        parse_chain(bytes([0x14, 0x03, 0x03, 0x00, 0x02, 0x01, 0x01]))


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_chain(b"\x16")


def test_round_trip_mixed_records():
    buf = HANDSHAKE + CCS + ALERT + APP + HEARTBEAT
    chain = parse_chain(buf)
    assert encode_chain(chain) == buf
    assert chain.encode() == buf
    assert [h.content_type for h in chain] == [
        ContentType.HANDSHAKE,
        ContentType.CHANGE_CIPHER_SPEC,
        ContentType.ALERT,
        ContentType.APPLICATION_DATA,
        ContentType.HEARTBEAT,
    ]


def test_length_accounting():
    buf = HANDSHAKE + APP + APP + CCS
    chain = parse_chain(buf)
    assert sum(5 + h.record_length for h in chain) == len(buf)
    assert chain.total_length == len(buf)


def test_concatenated_buffers_give_one_node_each():
    parts = [APP, CCS, HANDSHAKE, ALERT, APP]
    chain = parse_chain(b"".join(parts))
    assert len(chain) == len(parts)
    assert [h.encode() for h in chain] == parts


def test_window_inside_larger_buffer():
    chain = parse_chain(b"junk" + CCS + b"tail", 4, len(CCS))
    assert chain.encode() == CCS


def test_window_outside_buffer_is_rejected():
    with pytest.raises(BoundsError):
        parse_chain(CCS, 2, len(CCS))
    with pytest.raises(BoundsError):
        parse_chain(CCS, -1, 3)


def test_mutable_input_is_not_aliased():
    buf = bytearray(APP)
    chain = parse_chain(buf)
    buf[5:9] = b"XXXX"
    assert chain.header.body.data == b"data"


def test_many_empty_records_do_not_recurse():
    empty = bytes([0x17, 0x03, 0x03, 0x00, 0x00])
    buf = empty * 10000
    chain = parse_chain(buf)
    assert len(chain) == 10000
    assert encode_chain(chain) == buf


def test_max_record_length():
    body = b"\xaa" * 0xFFFF
    buf = bytes([0x17, 0x03, 0x03, 0xFF, 0xFF]) + body
    chain = parse_chain(buf)
    assert chain.header.record_length == 0xFFFF
    assert chain.total_length == len(buf)
    assert chain.encode() == buf


def test_describe():
    text = describe(parse_chain(CCS + ALERT))
    assert text == "\n".join([
        "[TLS Header (6 bytes)]",
        "  Version: TLS 1.2 (0x0303)",
        "  Type: change_cipher_spec (20)",
        "  Change Cipher Spec: 1",
        "[TLS Header (7 bytes)]",
        "  Version: TLS 1.2 (0x0303)",
        "  Type: alert (21)",
        "  Alert Level: fatal (2)",
        "  Alert Description: handshake_failure (40)",
    ])
    assert str(parse_chain(CCS)) == describe(parse_chain(CCS))


def test_describe_unknown_version():
    chain = parse_chain(bytes([0x17, 0x7f, 0x12, 0x00, 0x00]))
    assert "  Version: unknown (0x7f12)" in chain.describe()
