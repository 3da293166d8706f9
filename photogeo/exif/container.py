"""Locate the Exif TIFF stream inside a JPEG or HEIC container.

JPEG is walked segment by segment up to Start-Of-Scan. HEIC boxes are not
parsed at all: the Exif item payload is itself a self-describing TIFF
stream, so a signature scan over the raw bytes is enough to find it.
"""

import logging

from photogeo.errors import InvalidByteOrder, NoMetadataFound, NotAJpeg, OutOfBounds
from photogeo.exif.reader import ByteReader
from photogeo.models import ByteOrder, TiffStream

logger = logging.getLogger(__name__)

JPEG_SOI = b'\xFF\xD8'
JPEG_MARKER_PREFIX = 0xFF
JPEG_SOS = 0xDA    # Start-Of-Scan: image data follows, no more metadata
JPEG_APP1 = 0xE1

# "Exif" + two NUL bytes, immediately followed by the TIFF header
EXIF_SIGNATURE = b'Exif\x00\x00'

# Byte order (2) + magic (2) + first IFD offset (4)
TIFF_HEADER_SIZE = 8


def locate_jpeg_exif(reader: ByteReader) -> TiffStream:
    """Walk JPEG marker segments and return the TIFF stream of the Exif APP1.

    Raises:
        NotAJpeg: buffer does not start with the SOI marker.
        InvalidByteOrder: Exif APP1 found, but its byte order is not II/MM.
        NoMetadataFound: no Exif APP1 before SOS or the end of the buffer.
    """
    if len(reader) < 2 or reader.read_bytes(0, 2) != JPEG_SOI:
        raise NotAJpeg('missing JPEG SOI marker')

    offset = 2
    try:
        while offset + 4 <= len(reader):
            if reader.read_u8(offset) != JPEG_MARKER_PREFIX:
                logger.debug("jpeg: no marker prefix at offset %d", offset)
                break

            marker = reader.read_u8(offset + 1)
            if marker == JPEG_SOS:
                break

            # Segment length is always big-endian and includes itself
            length = reader.read_u16(offset + 2, ByteOrder.BIG)

            if marker == JPEG_APP1 and length >= 8:
                body = offset + 4
                if reader.read_bytes(body, 6) == EXIF_SIGNATURE:
                    tiff_offset = body + 6
                    marker_bytes = reader.read_bytes(tiff_offset, 2)
                    order = ByteOrder.from_marker(marker_bytes)
                    if order is None:
                        raise InvalidByteOrder(
                            f'byte order marker {marker_bytes!r} at offset {tiff_offset}')
                    logger.debug("jpeg: Exif APP1 at offset %d, TIFF stream at %d (%s)",
                                 offset, tiff_offset, order.name)
                    return TiffStream(tiff_offset, order)

            offset += 2 + length
    except OutOfBounds as e:
        raise NoMetadataFound(f'JPEG segment walk ran past the buffer: {e}')

    raise NoMetadataFound('no Exif APP1 segment before image data')


def locate_heic_exif(reader: ByteReader) -> TiffStream:
    """Scan the whole buffer for the Exif signature.

    The first occurrence followed by a valid byte order marker and a
    complete TIFF header wins; other occurrences are ignored.

    Raises:
        NoMetadataFound: no usable signature anywhere in the buffer.
    """
    start = 0
    while True:
        found = reader.find(EXIF_SIGNATURE, start)
        if found < 0:
            break
        start = found + 1

        tiff_offset = found + len(EXIF_SIGNATURE)
        if not reader.has(tiff_offset, TIFF_HEADER_SIZE):
            continue
        order = ByteOrder.from_marker(reader.read_bytes(tiff_offset, 2))
        if order is None:
            logger.debug("heic: signature at %d without byte order, continuing", found)
            continue

        logger.debug("heic: TIFF stream at %d (%s)", tiff_offset, order.name)
        return TiffStream(tiff_offset, order)

    raise NoMetadataFound('no Exif signature in HEIC data')
