"""Format detection -- JPEG by magic bytes, HEIC by MIME type or extension.

JPEG recognition is content-based. HEIC recognition has to trust the
caller's hint because the HEIC box structure is never validated.
"""

from typing import Iterable, Optional

from photogeo.exif import locate_heic_exif, locate_jpeg_exif
from photogeo.models import PREFLIGHT_MESSAGE

JPEG_MAGIC = b'\xFF\xD8'

JPEG_EXTENSIONS = ('.jpg', '.jpeg')
HEIC_EXTENSIONS = ('.heic', '.heif')

# Locator per detected format
LOCATORS = {
    'jpeg': locate_jpeg_exif,
    'heic': locate_heic_exif,
}


def _normalize(mime_type: Optional[str], filename: Optional[str]):
    return (mime_type or '').strip().lower(), (filename or '').strip().lower()


def is_jpeg_bytes(data) -> bool:
    return bytes(data[:2]) == JPEG_MAGIC


def is_heic_hint(mime_type: Optional[str] = None, filename: Optional[str] = None) -> bool:
    """MIME type containing heic/heif, or a .heic/.heif filename."""
    mime, name = _normalize(mime_type, filename)
    return ('heic' in mime or 'heif' in mime
            or name.endswith(HEIC_EXTENSIONS))


def is_jpeg_hint(mime_type: Optional[str] = None, filename: Optional[str] = None) -> bool:
    mime, name = _normalize(mime_type, filename)
    return mime == 'image/jpeg' or name.endswith(JPEG_EXTENSIONS)


def detect_format(data, mime_type: Optional[str] = None,
                  filename: Optional[str] = None) -> str:
    """Classify a photo as "jpeg", "heic" or "unknown".

    JPEG wins whenever the bytes carry the SOI marker, regardless of hint.
    """
    if is_jpeg_bytes(data):
        return 'jpeg'
    if is_heic_hint(mime_type, filename):
        return 'heic'
    return 'unknown'


def preflight_check(mime_type: Optional[str] = None,
                    filename: Optional[str] = None,
                    extensions: Optional[Iterable[str]] = None) -> Optional[str]:
    """Advisory check before reading any bytes.

    Returns None if the pair looks like a JPEG or HEIC photo, or the filename
    ends with one of ``extensions``, otherwise a user-facing rejection
    message. The parser re-verifies JPEG from the bytes, so passing this
    check guarantees nothing.
    """
    if is_jpeg_hint(mime_type, filename) or is_heic_hint(mime_type, filename):
        return None
    _, name = _normalize(mime_type, filename)
    if extensions and name.endswith(tuple(e.lower() for e in extensions)):
        return None
    return PREFLIGHT_MESSAGE


def get_locator(fmt: str):
    """Container locator for a detected format, or None."""
    return LOCATORS.get(fmt)
