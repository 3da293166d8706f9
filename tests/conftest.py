"""Shared test fixtures — synthetic TIFF/Exif, JPEG and HEIC byte generators."""

import struct

import pytest

GPS_POINTER_TAG = 0x8825

# N 35°40'45", E 139°41'30" (Tokyo)
TOKYO_LAT = ((35, 1), (40, 1), (45, 1))
TOKYO_LON = ((139, 1), (41, 1), (30, 1))
TOKYO_EXPECTED = (35 + 40 / 60 + 45 / 3600, 139 + 41 / 60 + 30 / 3600)


def rationals(pairs, endian='<'):
    """Pack (numerator, denominator) pairs as TIFF RATIONAL bytes."""
    return b''.join(struct.pack(endian + 'II', n, d) for n, d in pairs)


def _pack_ifd(entries, ifd_offset, endian='<', next_ifd=0):
    """Pack one IFD located at ``ifd_offset`` followed by its out-of-line data.

    Args:
        entries: List of (tag_id, type_id, count, value) tuples.
            An int is written into the 4-byte value field as-is.
            Bytes of 4 or fewer are written inline (NUL padded).
            Longer bytes are stored after the IFD and referenced by offset.

    Returns:
        bytes: IFD plus data area, to be placed at ``ifd_offset``.
    """
    n = len(entries)
    data_start = ifd_offset + 2 + 12 * n + 4

    ifd_bytes = struct.pack(endian + 'H', n)
    data_bytes = b''

    for tag_id, type_id, count, value in entries:
        ifd_bytes += struct.pack(endian + 'HHI', tag_id, type_id, count)
        if isinstance(value, bytes) and len(value) <= 4:
            ifd_bytes += value.ljust(4, b'\x00')
        elif isinstance(value, bytes):
            ifd_bytes += struct.pack(endian + 'I', data_start + len(data_bytes))
            data_bytes += value
        else:
            ifd_bytes += struct.pack(endian + 'I', value)

    ifd_bytes += struct.pack(endian + 'I', next_ifd)
    return ifd_bytes + data_bytes


def _ifd_size(entries):
    return 2 + 12 * len(entries) + 4 + sum(
        len(v) for _, _, _, v in entries if isinstance(v, bytes) and len(v) > 4)


def build_tiff(entries, endian='<'):
    """Build a minimal TIFF stream with a single IFD at offset 8."""
    bo = b'II' if endian == '<' else b'MM'
    header = bo + struct.pack(endian + 'HI', 42, 8)
    return header + _pack_ifd(entries, 8, endian)


def build_tiff_with_sub_ifd(main_entries, sub_ifd_entries,
                            pointer_tag=GPS_POINTER_TAG, endian='<'):
    """Build a TIFF whose first IFD has a LONG pointer tag to a sub-IFD.

    The pointer entry is appended to ``main_entries`` automatically.
    """
    bo = b'II' if endian == '<' else b'MM'

    all_main = list(main_entries) + [(pointer_tag, 4, 1, 0)]
    sub_ifd_offset = 8 + _ifd_size(all_main)
    all_main[-1] = (pointer_tag, 4, 1, sub_ifd_offset)

    result = bo + struct.pack(endian + 'HI', 42, 8)
    result += _pack_ifd(all_main, 8, endian)
    assert len(result) == sub_ifd_offset
    result += _pack_ifd(sub_ifd_entries, sub_ifd_offset, endian)
    return result


def gps_entries(lat=TOKYO_LAT, lon=TOKYO_LON, lat_ref=b'N\x00', lon_ref=b'E\x00',
                endian='<', omit=()):
    """GPS IFD entries for a coordinate given as DMS rational pairs."""
    entries = [
        (0x0000, 1, 4, b'\x02\x03\x00\x00'),                 # GPSVersionID
        (0x0001, 2, len(lat_ref), lat_ref),                   # GPSLatitudeRef
        (0x0002, 5, len(lat), rationals(lat, endian)),        # GPSLatitude
        (0x0003, 2, len(lon_ref), lon_ref),                   # GPSLongitudeRef
        (0x0004, 5, len(lon), rationals(lon, endian)),        # GPSLongitude
    ]
    return [e for e in entries if e[0] not in omit]


def build_gps_tiff(endian='<', main_entries=None, **gps_kwargs):
    """TIFF stream with a primary IFD pointing at a GPS IFD."""
    if main_entries is None:
        main_entries = [(256, 3, 1, 4032), (257, 3, 1, 3024),
                        (271, 2, 6, b'Apple\x00')]
    return build_tiff_with_sub_ifd(main_entries,
                                   gps_entries(endian=endian, **gps_kwargs),
                                   GPS_POINTER_TAG, endian)


def jpeg_segment(marker, body):
    """A JPEG marker segment; the length field counts itself plus the body."""
    return bytes([0xFF, marker]) + struct.pack('>H', len(body) + 2) + body


JFIF_APP0 = jpeg_segment(0xE0, b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00')
DQT = jpeg_segment(0xDB, b'\x00' + b'\x01' * 64)
SOS_AND_DATA = jpeg_segment(0xDA, b'\x01\x01\x00\x00\x3f\x00') + b'\x12\x34\x56' + b'\xFF\xD9'


def build_jpeg(tiff, before=(JFIF_APP0,), after=(DQT,), exif_header=b'Exif\x00\x00'):
    """JPEG: SOI, leading segments, Exif APP1 carrying ``tiff``, more segments, scan."""
    app1 = jpeg_segment(0xE1, exif_header + tiff) if tiff is not None else b''
    return b'\xFF\xD8' + b''.join(before) + app1 + b''.join(after) + SOS_AND_DATA


def build_heic(tiff, decoy=b''):
    """Fake HEIC: ftyp box, opaque filler, then an Exif item payload.

    Real HEIC Exif items start with a 4-byte offset to the TIFF header,
    followed by "Exif\\0\\0".
    """
    ftyp = struct.pack('>I', 24) + b'ftypheic' + b'\x00\x00\x00\x00' + b'mif1heic'
    meta = struct.pack('>I', 16) + b'meta' + b'\x00' * 8
    item = struct.pack('>I', 6) + b'Exif\x00\x00' + tiff
    mdat = struct.pack('>I', 8 + len(decoy) + len(item)) + b'mdat' + decoy + item
    return ftyp + meta + mdat


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def gps_jpeg_bytes():
    return build_jpeg(build_gps_tiff())


@pytest.fixture
def gps_heic_bytes():
    return build_heic(build_gps_tiff(endian='>'))


@pytest.fixture
def tmp_jpeg(tmp_path, gps_jpeg_bytes):
    """A JPEG with a GPS IFD (Tokyo)."""
    filepath = tmp_path / 'tokyo.jpg'
    filepath.write_bytes(gps_jpeg_bytes)
    return filepath


@pytest.fixture
def tmp_heic(tmp_path, gps_heic_bytes):
    """A HEIC with a big-endian Exif payload (Tokyo)."""
    filepath = tmp_path / 'tokyo.HEIC'
    filepath.write_bytes(gps_heic_bytes)
    return filepath


@pytest.fixture
def tmp_jpeg_no_gps(tmp_path):
    """A JPEG whose Exif block has no GPS pointer."""
    filepath = tmp_path / 'no_gps.jpeg'
    filepath.write_bytes(build_jpeg(build_tiff([(256, 3, 1, 640), (257, 3, 1, 480)])))
    return filepath


@pytest.fixture
def tmp_photo_dir(tmp_path):
    """Directory with located, unlocated, unsupported and ignored files."""
    root = tmp_path / 'photos'
    (root / 'trip').mkdir(parents=True)
    (root / 'a_tokyo.jpg').write_bytes(build_jpeg(build_gps_tiff()))
    (root / 'b_plain.jpg').write_bytes(build_jpeg(None))
    (root / 'trip' / 'c_south.heic').write_bytes(build_heic(build_gps_tiff(
        lat=((33, 1), (52, 1), (0, 1)), lat_ref=b'S\x00',
        lon=((151, 1), (12, 1), (0, 1)), lon_ref=b'E\x00')))
    (root / 'notes.txt').write_bytes(b'not a photo')
    return root
