"""TIFF Image File Directory (IFD) reader for Exif streams.

Reads are lenient: a missing directory returns an empty dict, entries with
unknown field types or unreadable values are skipped, and a truncated
directory yields the entries read so far.
"""

import logging
from typing import Dict, Optional

from photogeo.exif.reader import ByteReader
from photogeo.models import TiffStream

logger = logging.getLogger(__name__)

# TIFF field types used by Exif: {type_id: element_size_bytes}
FIELD_TYPES: Dict[int, int] = {
    1: 1,    # BYTE
    2: 1,    # ASCII
    3: 2,    # SHORT
    4: 4,    # LONG
    5: 8,    # RATIONAL (num/denom)
    6: 1,    # SBYTE
    7: 1,    # UNDEFINED
    8: 2,    # SSHORT
    9: 4,    # SLONG
    10: 8,   # SRATIONAL
}

ENTRY_SIZE = 12
INLINE_VALUE_SIZE = 4

GPS_IFD_POINTER_TAG = 0x8825

TAG_NAMES: Dict[int, str] = {
    256: 'ImageWidth', 257: 'ImageLength', 271: 'Make', 272: 'Model',
    274: 'Orientation', 282: 'XResolution', 283: 'YResolution',
    296: 'ResolutionUnit', 305: 'Software', 306: 'DateTime',
    531: 'YCbCrPositioning', 34665: 'ExifIFDPointer',
    GPS_IFD_POINTER_TAG: 'GPSInfoIFDPointer',
}

GPS_TAG_NAMES: Dict[int, str] = {
    0: 'GPSVersionID', 1: 'GPSLatitudeRef', 2: 'GPSLatitude',
    3: 'GPSLongitudeRef', 4: 'GPSLongitude', 5: 'GPSAltitudeRef',
    6: 'GPSAltitude', 7: 'GPSTimeStamp', 18: 'GPSMapDatum', 29: 'GPSDateStamp',
}


def element_size(field_type: int) -> int:
    """Bytes per element for a field type, 0 if the type is unknown."""
    return FIELD_TYPES.get(field_type, 0)


class DirectoryEntry:
    """A single 12-byte IFD entry.

    ``value_offset`` is the raw 4-byte value/offset field as stored.
    ``data_offset`` is where the value actually lives in the outer buffer:
    inside the entry itself when it fits in 4 bytes, otherwise at
    ``base_offset + value_offset``.
    """
    __slots__ = ('tag', 'field_type', 'count', 'value_offset',
                 'data_offset', 'entry_offset')

    def __init__(self, tag: int, field_type: int, count: int,
                 value_offset: int, data_offset: int, entry_offset: int):
        self.tag = tag
        self.field_type = field_type
        self.count = count
        self.value_offset = value_offset
        self.data_offset = data_offset
        self.entry_offset = entry_offset

    @property
    def tag_name(self) -> str:
        return TAG_NAMES.get(self.tag, f'Tag_{self.tag}')

    @property
    def total_size(self) -> int:
        return element_size(self.field_type) * self.count

    @property
    def is_inline(self) -> bool:
        return self.total_size <= INLINE_VALUE_SIZE

    def __repr__(self) -> str:
        return (f'DirectoryEntry(tag=0x{self.tag:04x}, type={self.field_type}, '
                f'count={self.count}, data_offset={self.data_offset})')


def read_first_ifd_offset(reader: ByteReader, stream: TiffStream) -> int:
    """Read the first-IFD pointer stored 4 bytes into the TIFF header."""
    return reader.read_u32(stream.resolve(4), stream.byte_order)


def read_directory(reader: ByteReader, stream: TiffStream,
                   directory_offset: int) -> Dict[int, DirectoryEntry]:
    """Read all entries of the IFD at absolute ``directory_offset``.

    Returns a dict keyed by tag, in file order. Duplicate tags: last wins.
    """
    order = stream.byte_order
    entries: Dict[int, DirectoryEntry] = {}

    if directory_offset <= 0 or not reader.has(directory_offset, 2):
        return entries

    num_entries = reader.read_u16(directory_offset, order)
    cursor = directory_offset + 2

    for _ in range(num_entries):
        if not reader.has(cursor, ENTRY_SIZE):
            logger.debug("ifd at %d truncated after %d entries",
                         directory_offset, len(entries))
            break
        entry = _read_entry(reader, stream, cursor)
        if entry is not None:
            entries[entry.tag] = entry
        cursor += ENTRY_SIZE

    return entries


def _read_entry(reader: ByteReader, stream: TiffStream,
                cursor: int) -> Optional[DirectoryEntry]:
    """Decode one entry record. None if the entry must be skipped."""
    order = stream.byte_order
    tag = reader.read_u16(cursor, order)
    field_type = reader.read_u16(cursor + 2, order)
    count = reader.read_u32(cursor + 4, order)
    value_offset = reader.read_u32(cursor + 8, order)

    size = element_size(field_type)
    if not size:
        logger.debug("skipping tag 0x%04x with unknown field type %d", tag, field_type)
        return None

    total = size * count
    if total <= INLINE_VALUE_SIZE:
        data_offset = cursor + 8
    else:
        data_offset = stream.resolve(value_offset)
        if not reader.has(data_offset, total):
            logger.debug("skipping tag 0x%04x: %d byte value at %d is outside the buffer",
                         tag, total, data_offset)
            return None

    return DirectoryEntry(tag, field_type, count, value_offset, data_offset, cursor)
