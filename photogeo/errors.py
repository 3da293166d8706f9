"""Exceptions raised inside the parser layer.

``extract()`` converts every one of these into an ``ErrorKind`` on the
returned result; none of them escape the public API.
"""

from photogeo.models import ErrorKind


class ExifError(Exception):
    """Base class. ``kind`` is the user-facing reason it maps to."""
    kind = ErrorKind.OUT_OF_BOUNDS

    def __init__(self, detail: str = ''):
        super().__init__(detail or self.kind.message)
        self.detail = detail


class OutOfBounds(ExifError):
    """A read would cross the end (or start) of the buffer."""
    kind = ErrorKind.OUT_OF_BOUNDS


class NotAJpeg(ExifError):
    kind = ErrorKind.UNSUPPORTED_FORMAT


class NoMetadataFound(ExifError):
    kind = ErrorKind.NO_METADATA_FOUND


class InvalidByteOrder(ExifError):
    kind = ErrorKind.INVALID_BYTE_ORDER


class NoGpsData(ExifError):
    kind = ErrorKind.NO_GPS_DATA


class MalformedGpsValue(ExifError):
    kind = ErrorKind.MALFORMED_GPS_VALUE
