"""GPS sub-IFD decoding -- latitude/longitude in decimal degrees."""

import logging
import math
from typing import List, Sequence

from photogeo.errors import MalformedGpsValue, NoGpsData, OutOfBounds
from photogeo.exif.ifd import (
    GPS_IFD_POINTER_TAG,
    GPS_TAG_NAMES,
    DirectoryEntry,
    read_directory,
    read_first_ifd_offset,
)
from photogeo.exif.reader import ByteReader
from photogeo.models import Coordinate, Rational, TiffStream

logger = logging.getLogger(__name__)

GPS_LATITUDE_REF = 0x0001
GPS_LATITUDE = 0x0002
GPS_LONGITUDE_REF = 0x0003
GPS_LONGITUDE = 0x0004

REQUIRED_GPS_TAGS = (GPS_LATITUDE_REF, GPS_LATITUDE, GPS_LONGITUDE_REF, GPS_LONGITUDE)

RATIONAL_SIZE = 8
NEGATIVE_REFERENCES = ('S', 'W')


def read_gps_coordinate(reader: ByteReader, stream: TiffStream) -> Coordinate:
    """Decode the GPS coordinate of a located TIFF stream.

    Raises:
        NoGpsData: no GPS IFD, or one of the four position tags is missing.
        MalformedGpsValue: rational data truncated, zero denominator,
            fewer than three components, or a non-finite result.
    """
    if not reader.has(stream.base_offset, 8):
        raise NoGpsData('TIFF header is truncated')

    first_offset = read_first_ifd_offset(reader, stream)
    if first_offset == 0:
        raise NoGpsData('TIFF stream has no primary IFD')

    first_ifd = read_directory(reader, stream, stream.resolve(first_offset))

    gps_pointer = first_ifd.get(GPS_IFD_POINTER_TAG)
    if gps_pointer is None or gps_pointer.value_offset == 0:
        raise NoGpsData('no GPS IFD pointer in the primary IFD')

    gps_ifd = read_directory(reader, stream, stream.resolve(gps_pointer.value_offset))
    missing = [tag for tag in REQUIRED_GPS_TAGS if tag not in gps_ifd]
    if missing:
        raise NoGpsData('GPS IFD lacks ' + ', '.join(GPS_TAG_NAMES[t] for t in missing))

    lat_ref = read_reference(reader, gps_ifd[GPS_LATITUDE_REF])
    lon_ref = read_reference(reader, gps_ifd[GPS_LONGITUDE_REF])
    lat_values = read_rationals(reader, stream, gps_ifd[GPS_LATITUDE])
    lon_values = read_rationals(reader, stream, gps_ifd[GPS_LONGITUDE])

    latitude = to_decimal_degrees(lat_values, lat_ref)
    longitude = to_decimal_degrees(lon_values, lon_ref)

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise MalformedGpsValue(f'non-finite coordinate ({latitude}, {longitude})')

    logger.debug("gps: %s %r, %s %r", lat_ref, lat_values, lon_ref, lon_values)
    return Coordinate(latitude, longitude)


def read_reference(reader: ByteReader, entry: DirectoryEntry) -> str:
    """Read a GPS reference letter (N/S/E/W), trimmed and upper-cased.

    Stops at the first NUL, after ``count`` bytes, or at the buffer end.
    """
    chars = []
    for pointer in range(entry.data_offset, entry.data_offset + entry.count):
        if not reader.has(pointer, 1):
            break
        value = reader.read_u8(pointer)
        if value == 0:
            break
        chars.append(chr(value))
    return ''.join(chars).strip().upper()


def read_rationals(reader: ByteReader, stream: TiffStream,
                   entry: DirectoryEntry) -> List[Rational]:
    """Read the ``count`` unsigned rationals stored at the entry's data location."""
    order = stream.byte_order
    values = []
    for index in range(entry.count):
        offset = entry.data_offset + index * RATIONAL_SIZE
        try:
            numerator = reader.read_u32(offset, order)
            denominator = reader.read_u32(offset + 4, order)
        except OutOfBounds:
            raise MalformedGpsValue(f'tag 0x{entry.tag:04x}: rational {index} is truncated')
        if denominator == 0:
            raise MalformedGpsValue(f'tag 0x{entry.tag:04x}: rational {index} has a zero denominator')
        values.append(Rational(numerator, denominator))
    return values


def to_decimal_degrees(values: Sequence[Rational], reference: str = '') -> float:
    """Degrees + minutes/60 + seconds/3600, negated for S and W.

    Returns NaN when fewer than three components are given.
    """
    if values is None or len(values) < 3:
        return math.nan

    degrees, minutes, seconds = (v.value for v in values[:3])
    result = degrees + minutes / 60 + seconds / 3600
    if (reference or '').strip().upper() in NEGATIVE_REFERENCES:
        result = -result
    return result
