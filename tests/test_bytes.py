import pytest

from kns_sdk.errors import ValueTooLarge
from kns_sdk.utils.bytes import (b64_decode, b64_encode, from_hex, to_bytes32,
                                 to_hex, utf8_decode, uvarint_decode,
                                 uvarint_encode)
from kns_sdk.utils.proto import encode_bytes_field, encode_varint_field, iter_fields


def test_to_bytes32_pads_right():
    out = to_bytes32(b"www")
    assert len(out) == 32
    assert out[:3] == b"www"
    assert out[3:] == b"\x00" * 29


def test_to_bytes32_exact_and_empty():
    assert to_bytes32(b"\x01" * 32) == b"\x01" * 32
    assert to_bytes32(b"") == b"\x00" * 32


def test_to_bytes32_rejects_oversize():
    with pytest.raises(ValueTooLarge) as ei:
        to_bytes32(b"\xaa" * 40)
    assert ei.value.size == 40
    assert ei.value.limit == 32
    # still a ValueError for generic callers
    assert isinstance(ei.value, ValueError)


def test_hex_helpers():
    assert to_hex(b"\x00\xff") == "00ff"
    assert to_hex(b"\x00\xff", prefix=True) == "0x00ff"
    assert from_hex("0xABcd") == b"\xab\xcd"
    with pytest.raises(ValueError):
        from_hex("abc")
    with pytest.raises(ValueError):
        from_hex("zz")


def test_base64_strict():
    assert b64_decode(b64_encode(b"\x00\x01\xfe")) == b"\x00\x01\xfe"
    with pytest.raises(ValueError):
        b64_decode("not base64!")


@pytest.mark.parametrize(
    "n,encoded",
    [(0, b"\x00"), (0x7F, b"\x7f"), (0x80, b"\x80\x01"), (1040, b"\x90\x08")],
)
def test_uvarint_known_vectors(n, encoded):
    assert uvarint_encode(n) == encoded
    assert uvarint_decode(encoded) == (n, len(encoded))


def test_uvarint_errors():
    with pytest.raises(ValueError):
        uvarint_encode(-1)
    with pytest.raises(ValueError):
        uvarint_decode(b"\x80\x80")


def test_proto_fields():
    msg = encode_varint_field(1, 5) + encode_bytes_field(4, b"abc")
    assert list(iter_fields(msg)) == [(1, 0, 5), (4, 2, b"abc")]


def test_proto_truncated_and_bad_wire_type():
    with pytest.raises(ValueError):
        list(iter_fields(b"\x22\x05ab"))
    with pytest.raises(ValueError):
        # field 1, wire type 5 (fixed32) is not supported
        list(iter_fields(b"\x0d\x00\x00\x00\x00"))


def test_utf8_decode_modes():
    assert utf8_decode("ℏ".encode()) == "ℏ"
    with pytest.raises(UnicodeDecodeError):
        utf8_decode(b"\xff")
    assert utf8_decode(b"a\xff", errors="replace") == "a\ufffd"
