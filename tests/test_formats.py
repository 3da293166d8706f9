"""Tests for format detection and the advisory pre-flight check."""

import pytest

from photogeo.exif import locate_heic_exif, locate_jpeg_exif
from photogeo.formats import (
    detect_format, get_locator, is_heic_hint, is_jpeg_hint, preflight_check,
)
from photogeo.models import PREFLIGHT_MESSAGE


class TestHints:

    @pytest.mark.parametrize('mime,name', [
        ('image/heic', None),
        ('image/HEIF', ''),
        ('image/heic-sequence', None),
        (None, 'IMG_0001.HEIC'),
        ('', 'photo.heif'),
        ('application/octet-stream', 'photo.heic'),
    ])
    def test_heic_hint_matches(self, mime, name):
        assert is_heic_hint(mime, name)

    @pytest.mark.parametrize('mime,name', [
        (None, None),
        ('image/jpeg', 'photo.jpg'),
        (None, 'heic_photo.jpg'),
        (None, 'photo.heic.zip'),
    ])
    def test_heic_hint_rejects(self, mime, name):
        assert not is_heic_hint(mime, name)

    @pytest.mark.parametrize('mime,name', [
        ('image/jpeg', None), ('IMAGE/JPEG', None),
        (None, 'a.jpg'), (None, 'b.JPEG'),
    ])
    def test_jpeg_hint(self, mime, name):
        assert is_jpeg_hint(mime, name)

    def test_jpeg_hint_rejects_png(self):
        assert not is_jpeg_hint('image/png', 'a.png')


class TestDetectFormat:

    def test_jpeg_by_magic(self):
        assert detect_format(b'\xFF\xD8\xFF\xE0') == 'jpeg'

    def test_jpeg_magic_overrides_heic_hint(self):
        assert detect_format(b'\xFF\xD8\xFF\xE1', 'image/heic', 'x.heic') == 'jpeg'

    def test_jpeg_name_without_magic_is_unknown(self):
        """JPEG is recognized from content only, never from the hint."""
        assert detect_format(b'\x89PNG', 'image/jpeg', 'fake.jpg') == 'unknown'

    def test_heic_by_hint(self):
        assert detect_format(b'\x00\x00\x00\x18ftypheic', None, 'a.heic') == 'heic'

    def test_unknown(self):
        assert detect_format(b'GIF89a', 'image/gif', 'a.gif') == 'unknown'

    def test_empty(self):
        assert detect_format(b'') == 'unknown'

    def test_locators(self):
        assert get_locator('jpeg') is locate_jpeg_exif
        assert get_locator('heic') is locate_heic_exif
        assert get_locator('unknown') is None


class TestPreflight:

    @pytest.mark.parametrize('mime,name', [
        ('image/jpeg', 'x'), (None, 'x.jpg'), (None, 'x.HEIC'), ('image/heif', None),
    ])
    def test_accepts_photos(self, mime, name):
        assert preflight_check(mime, name) is None

    @pytest.mark.parametrize('mime,name', [
        ('image/png', 'x.png'), (None, None), ('video/quicktime', 'x.mov'),
    ])
    def test_rejects_others(self, mime, name):
        assert preflight_check(mime, name) == PREFLIGHT_MESSAGE

    def test_configured_extension_accepted(self):
        assert preflight_check(None, 'scan.JPE', {'.jpe'}) is None
        assert preflight_check(None, 'scan.jpe') == PREFLIGHT_MESSAGE

    def test_extensions_do_not_widen_other_names(self):
        assert preflight_check(None, 'x.png', {'.jpe'}) == PREFLIGHT_MESSAGE
