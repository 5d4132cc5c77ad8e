"""
Utility helpers for the KNS SDK.

Re-exports:
- bytes: hex / base64 / utf-8 helpers, 32-byte padding, uvarint encode/decode
- proto: protobuf wire-format field helpers
"""

from .bytes import (b64_decode, b64_encode, from_hex, to_bytes32, to_hex,
                    utf8_decode, utf8_encode, uvarint_decode, uvarint_encode)
from .proto import encode_bytes_field, encode_varint_field, iter_fields

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "to_bytes32",
    "utf8_encode",
    "utf8_decode",
    "b64_encode",
    "b64_decode",
    "uvarint_encode",
    "uvarint_decode",
    # proto
    "encode_varint_field",
    "encode_bytes_field",
    "iter_fields",
]
