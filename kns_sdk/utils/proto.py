"""
Minimal protobuf wire-format helpers.

Only the two wire types the ledger identifier messages use are supported:

- 0: varint (int64 / uint64 fields)
- 2: length-delimited (bytes / embedded messages)

Fields are written in the order given; decoding yields ``(field_number,
wire_type, value)`` triples where `value` is an ``int`` for varints and
``bytes`` for length-delimited fields.
"""

from __future__ import annotations

from typing import Iterator, Tuple, Union

from .bytes import BytesLike, uvarint_decode, uvarint_encode

WIRE_VARINT = 0
WIRE_LEN = 2

FieldValue = Union[int, bytes]


def _tag(field_number: int, wire_type: int) -> bytes:
    return uvarint_encode((field_number << 3) | wire_type)


def encode_varint_field(field_number: int, value: int) -> bytes:
    if value < 0:
        raise ValueError(f"field {field_number}: negative values are not supported")
    return _tag(field_number, WIRE_VARINT) + uvarint_encode(value)


def encode_bytes_field(field_number: int, value: BytesLike) -> bytes:
    raw = bytes(value)
    return _tag(field_number, WIRE_LEN) + uvarint_encode(len(raw)) + raw


def iter_fields(data: BytesLike) -> Iterator[Tuple[int, int, FieldValue]]:
    buf = bytes(data)
    pos = 0
    while pos < len(buf):
        key, used = uvarint_decode(buf, offset=pos)
        pos += used
        field_number, wire_type = key >> 3, key & 0x07
        if field_number == 0:
            raise ValueError("invalid protobuf field number 0")
        if wire_type == WIRE_VARINT:
            value, used = uvarint_decode(buf, offset=pos)
            pos += used
            yield field_number, wire_type, value
        elif wire_type == WIRE_LEN:
            size, used = uvarint_decode(buf, offset=pos)
            pos += used
            if pos + size > len(buf):
                raise ValueError(f"field {field_number}: truncated length-delimited value")
            yield field_number, wire_type, buf[pos : pos + size]
            pos += size
        else:
            raise ValueError(f"unsupported protobuf wire type {wire_type}")


__all__ = [
    "WIRE_VARINT",
    "WIRE_LEN",
    "encode_varint_field",
    "encode_bytes_field",
    "iter_fields",
]
