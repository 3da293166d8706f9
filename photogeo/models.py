"""Data models for photogeo extraction results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ByteOrder(Enum):
    """TIFF stream byte order. Values are ``struct`` prefixes."""
    LITTLE = '<'
    BIG = '>'

    @classmethod
    def from_marker(cls, marker) -> Optional['ByteOrder']:
        """Resolve a 2-byte ``II``/``MM`` marker. None if unrecognized."""
        if marker in (b'II', 'II'):
            return cls.LITTLE
        if marker in (b'MM', 'MM'):
            return cls.BIG
        return None


@dataclass(frozen=True)
class TiffStream:
    """Location of a TIFF stream inside the outer buffer.

    All offsets stored inside the stream are relative to ``base_offset``.
    """
    base_offset: int
    byte_order: ByteOrder

    def resolve(self, offset: int) -> int:
        return self.base_offset + offset


@dataclass(frozen=True)
class Rational:
    numerator: int
    denominator: int

    @property
    def value(self) -> float:
        return self.numerator / self.denominator


@dataclass(frozen=True)
class Coordinate:
    """Decimal degrees, positive north/east."""
    latitude: float
    longitude: float

    def format(self, precision: int = 6) -> str:
        return f'{self.latitude:.{precision}f}, {self.longitude:.{precision}f}'


class ErrorKind(Enum):
    """Reasons an extraction can end without a coordinate."""
    UNSUPPORTED_FORMAT = 'unsupported_format'
    NO_METADATA_FOUND = 'no_metadata_found'
    INVALID_BYTE_ORDER = 'invalid_byte_order'
    NO_GPS_DATA = 'no_gps_data'
    MALFORMED_GPS_VALUE = 'malformed_gps_value'
    OUT_OF_BOUNDS = 'out_of_bounds'

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    ErrorKind.UNSUPPORTED_FORMAT: 'Only JPEG or HEIC photos are supported.',
    ErrorKind.NO_METADATA_FOUND: ('No metadata found. Location data may have '
                                  'been removed when the photo was shared.'),
    ErrorKind.INVALID_BYTE_ORDER: 'Metadata is corrupt (unrecognized byte order).',
    ErrorKind.NO_GPS_DATA: 'No location data found.',
    ErrorKind.MALFORMED_GPS_VALUE: 'Location data is present but malformed.',
    ErrorKind.OUT_OF_BOUNDS: 'The file is truncated or corrupt.',
}

# Advisory pre-flight rejection, shown before any bytes are read
PREFLIGHT_MESSAGE = ('This photo format is not supported. '
                     'Please use JPEG or HEIC photos.')


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one in-memory extraction: a coordinate or a reason."""
    coordinate: Optional[Coordinate] = None
    error: Optional[ErrorKind] = None

    @property
    def found(self) -> bool:
        return self.coordinate is not None

    @property
    def message(self) -> str:
        if self.coordinate is not None:
            return self.coordinate.format()
        return self.error.message if self.error else ''


@dataclass
class PhotoResult:
    """Result of extracting the location of a single photo file."""
    filepath: Path
    format: str  # "jpeg" | "heic" | "unknown"
    coordinate: Optional[Coordinate] = None
    reason: Optional[ErrorKind] = None
    extract_time_ms: float = 0.0
    file_size: int = 0
    error: Optional[str] = None  # I/O or unexpected failure
    warning: Optional[str] = None  # pre-flight rejection, file not read

    @property
    def found(self) -> bool:
        return self.coordinate is not None

    @property
    def message(self) -> str:
        if self.error:
            return self.error
        if self.coordinate is not None:
            return self.coordinate.format()
        if self.warning:
            return self.warning
        if self.reason is not None:
            return self.reason.message
        return ''


@dataclass
class BatchResult:
    """Result of a batch extraction run. ``results`` keeps input order."""
    results: List[PhotoResult] = field(default_factory=list)
    total_files: int = 0
    files_located: int = 0
    files_without_location: int = 0
    files_errored: int = 0
    total_time_seconds: float = 0.0

    @property
    def coordinates(self) -> List[Coordinate]:
        return [r.coordinate for r in self.results if r.coordinate is not None]
