from __future__ import annotations

import base64
import binascii
from typing import Tuple, Union

from ..errors import ValueTooLarge

BytesLike = Union[bytes, bytearray, memoryview]

BYTES32 = 32


def to_hex(b: BytesLike, prefix: bool = False) -> str:
    """
    Bytes -> hex string (lowercase). No '0x' prefix unless asked for.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even-length (nibbles must pair to bytes) and lowercase/uppercase agnostic.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def to_bytes32(data: BytesLike) -> bytes:
    """
    Right-pad `data` with zero bytes to exactly 32 bytes.

    Used for fixed-width `bytes32` contract parameters. Input longer than 32
    bytes raises ValueTooLarge; nothing is truncated.
    """
    raw = bytes(data)
    if len(raw) > BYTES32:
        raise ValueTooLarge(size=len(raw), limit=BYTES32)
    return raw + b"\x00" * (BYTES32 - len(raw))


# --- Text / base64 ------------------------------------------------------------


def utf8_encode(text: str) -> bytes:
    return text.encode("utf-8")


def utf8_decode(data: BytesLike, errors: str = "strict") -> str:
    return bytes(data).decode("utf-8", errors)


def b64_encode(data: BytesLike) -> str:
    return base64.b64encode(bytes(data)).decode("ascii")


def b64_decode(text: str) -> bytes:
    """Standard (padded) base64 -> bytes. Raises ValueError on malformed input."""
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 string: {e}") from e


# --- Unsigned varint (LEB128) -------------------------------------------------


def uvarint_encode(n: int) -> bytes:
    """
    Encode an unsigned integer using LEB128 (base-128 varint).

    - Non-negative integers only.
    - Little-endian groups of 7 bits; MSB continuation bit.

    Example:
        0x00 -> b'\\x00'
        0x7f -> b'\\x7f'
        0x80 -> b'\\x80\\x01'
    """
    if n < 0:
        raise ValueError("uvarint_encode expects a non-negative integer")
    out = bytearray()
    while True:
        to_write = n & 0x7F
        n >>= 7
        if n:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            break
    return bytes(out)


def uvarint_decode(b: BytesLike, *, offset: int = 0) -> Tuple[int, int]:
    """
    Decode an unsigned LEB128 varint from bytes starting at `offset`.

    Returns:
        (value, length_consumed)

    Raises:
        ValueError if the varint is malformed or overflows 64-bit.
    """
    result = 0
    shift = 0
    b = memoryview(b)[offset:].tobytes()

    for consumed, byte in enumerate(b, start=1):
        result |= (byte & 0x7F) << shift
        if (byte & 0x80) == 0:
            return result, consumed
        shift += 7
        if shift >= 64:
            raise ValueError("uvarint too large (exceeds 64 bits)")
    raise ValueError("truncated uvarint (input ended before termination byte)")


__all__ = [
    "BytesLike",
    "BYTES32",
    "to_hex",
    "from_hex",
    "to_bytes32",
    "utf8_encode",
    "utf8_decode",
    "b64_encode",
    "b64_decode",
    "uvarint_encode",
    "uvarint_decode",
]
