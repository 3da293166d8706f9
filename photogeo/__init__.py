"""photogeo -- GPS coordinates from the Exif metadata of JPEG and HEIC photos."""

__version__ = "1.1.0"

from photogeo.models import (
    BatchResult,
    Coordinate,
    ErrorKind,
    ExtractionResult,
    PhotoResult,
)
from photogeo.config import ExtractorConfig
from photogeo.formats import detect_format, preflight_check
from photogeo.extractor import extract, extract_batch, extract_file

__all__ = [
    "__version__",
    "Coordinate",
    "ErrorKind",
    "ExtractionResult",
    "PhotoResult",
    "BatchResult",
    "ExtractorConfig",
    "detect_format",
    "preflight_check",
    "extract",
    "extract_file",
    "extract_batch",
]
