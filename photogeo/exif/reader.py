"""Bounds-checked reads over an immutable byte buffer.

Every other parser component reads through ``ByteReader`` so that a
corrupt offset surfaces as ``OutOfBounds`` rather than ``struct.error``,
``IndexError`` or a silently wrapped negative index.
"""

import struct

from photogeo.errors import OutOfBounds
from photogeo.models import ByteOrder


class ByteReader:
    """Read-only view over a photo's bytes."""
    __slots__ = ('_data',)

    def __init__(self, data):
        if not isinstance(data, (bytes, bytearray)):
            data = bytes(data)
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    def has(self, offset: int, length: int) -> bool:
        return offset >= 0 and length >= 0 and offset + length <= len(self._data)

    def _check(self, offset: int, length: int):
        if not self.has(offset, length):
            raise OutOfBounds(f'read of {length} byte(s) at offset {offset} '
                              f'exceeds buffer of {len(self._data)}')

    def read_u8(self, offset: int) -> int:
        self._check(offset, 1)
        return self._data[offset]

    def read_u16(self, offset: int, order: ByteOrder) -> int:
        self._check(offset, 2)
        return struct.unpack_from(order.value + 'H', self._data, offset)[0]

    def read_u32(self, offset: int, order: ByteOrder) -> int:
        self._check(offset, 4)
        return struct.unpack_from(order.value + 'I', self._data, offset)[0]

    def read_bytes(self, offset: int, length: int) -> bytes:
        self._check(offset, length)
        return bytes(self._data[offset:offset + length])

    def read_ascii(self, offset: int, length: int) -> str:
        """Single-byte character decode of ``length`` bytes."""
        return self.read_bytes(offset, length).decode('latin-1')

    def find(self, needle: bytes, start: int = 0) -> int:
        """Offset of the next occurrence of ``needle`` at or after ``start``, or -1."""
        return self._data.find(needle, start)
