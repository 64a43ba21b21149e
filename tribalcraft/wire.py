"""Compact binary encoding used on the game socket.

Integers are variable-length: values below 251 take one byte, larger
values use a marker byte (251 = u16, 252 = u32, 253 = u64, 254 = u128)
followed by the little-endian value. Floats are little-endian f32,
strings are a length prefix plus UTF-8 bytes, and optional values are a
0/1 tag followed by the value when present.
"""

from __future__ import annotations

import struct
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

_SINGLE_BYTE_MAX = 250
_U16_MARKER = 251
_U32_MARKER = 252
_U64_MARKER = 253
_U128_MARKER = 254

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF
_U128_MAX = (1 << 128) - 1

_F32 = struct.Struct("<f")


class DecodeError(ValueError):
    """Raised when bytes cannot be decoded into the expected value."""


class Encoder:
    """Accumulates encoded values into a byte string."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def write_varint(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"cannot encode negative integer {value}")
        if value <= _SINGLE_BYTE_MAX:
            self._buffer.append(value)
        elif value <= _U16_MAX:
            self._buffer.append(_U16_MARKER)
            self._buffer += value.to_bytes(2, "little")
        elif value <= _U32_MAX:
            self._buffer.append(_U32_MARKER)
            self._buffer += value.to_bytes(4, "little")
        elif value <= _U64_MAX:
            self._buffer.append(_U64_MARKER)
            self._buffer += value.to_bytes(8, "little")
        elif value <= _U128_MAX:
            self._buffer.append(_U128_MARKER)
            self._buffer += value.to_bytes(16, "little")
        else:
            raise ValueError(f"integer {value} does not fit in 128 bits")

    def write_f32(self, value: float) -> None:
        try:
            self._buffer += _F32.pack(value)
        except OverflowError as exc:
            raise ValueError(f"{value} does not fit in a 32-bit float") from exc

    def write_str(self, text: str) -> None:
        raw = text.encode("utf-8")
        self.write_varint(len(raw))
        self._buffer += raw

    def write_option(self, value: Optional[T], write: Callable[[T], None]) -> None:
        if value is None:
            self._buffer.append(0)
        else:
            self._buffer.append(1)
            write(value)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class Decoder:
    """Reads encoded values from a byte string, front to back."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise DecodeError(
                f"unexpected end of data: needed {count} bytes at offset "
                f"{self._pos}, only {len(self._data) - self._pos} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_bool(self) -> bool:
        byte = self._take(1)[0]
        if byte == 0:
            return False
        if byte == 1:
            return True
        raise DecodeError(f"invalid boolean byte {byte}")

    def read_varint(self) -> int:
        marker = self._take(1)[0]
        if marker <= _SINGLE_BYTE_MAX:
            return marker
        widths = {
            _U16_MARKER: 2,
            _U32_MARKER: 4,
            _U64_MARKER: 8,
            _U128_MARKER: 16,
        }
        width = widths.get(marker)
        if width is None:
            raise DecodeError(f"invalid integer marker byte {marker}")
        return int.from_bytes(self._take(width), "little")

    def read_f32(self) -> float:
        return _F32.unpack(self._take(4))[0]

    def read_str(self) -> str:
        length = self.read_varint()
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"string is not valid UTF-8: {exc}") from exc

    def read_option(self, read: Callable[[], T]) -> Optional[T]:
        tag = self._take(1)[0]
        if tag == 0:
            return None
        if tag == 1:
            return read()
        raise DecodeError(f"invalid option tag {tag}")

    def consumed(self) -> int:
        """Number of bytes read so far."""
        return self._pos