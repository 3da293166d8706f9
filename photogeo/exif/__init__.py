"""Low-level Exif binary parser package -- stdlib only (struct module).

Re-exports the public names of the parser layer so callers can write
``from photogeo.exif import X``.
"""

# --- reader.py: bounds-checked byte access ---
from photogeo.exif.reader import ByteReader  # noqa: F401

# --- container.py: JPEG segment walk, HEIC signature scan ---
from photogeo.exif.container import (  # noqa: F401
    EXIF_SIGNATURE,
    locate_heic_exif,
    locate_jpeg_exif,
)

# --- ifd.py: field types, tag names, directory reading ---
from photogeo.exif.ifd import (  # noqa: F401
    FIELD_TYPES,
    GPS_IFD_POINTER_TAG,
    GPS_TAG_NAMES,
    TAG_NAMES,
    DirectoryEntry,
    element_size,
    read_directory,
    read_first_ifd_offset,
)

# --- gps.py: GPS IFD decoding ---
from photogeo.exif.gps import (  # noqa: F401
    REQUIRED_GPS_TAGS,
    read_gps_coordinate,
    read_rationals,
    read_reference,
    to_decimal_degrees,
)
