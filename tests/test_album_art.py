"""
Album art bounding tests

Images are generated with Pillow in memory.
"""

from __future__ import annotations

import io

import pytest
from PIL import Image

from services.album_art import AlbumArtEncoder, fit_within, sample_size_for


def _image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 40, 90)).save(buffer, format=fmt)
    return buffer.getvalue()


def _size_of(data: bytes):
    with Image.open(io.BytesIO(data)) as image:
        return image.size, image.format


@pytest.mark.parametrize("width,height,expected", [
    (720, 720, 1),
    (1440, 1440, 1),
    (1441, 100, 2),
    (3000, 3000, 4),
    (6000, 1000, 8),
])
def test_sample_size_for(width, height, expected):
    assert sample_size_for(width, height, 720) == expected


def test_fit_within_keeps_aspect_ratio():
    assert fit_within(500, 1000, 720) == (360, 720)
    assert fit_within(1000, 3, 720) == (720, 2)
    assert fit_within(100, 200, 720) == (100, 200)


class TestAlbumArtEncoder:
    """AlbumArtEncoder Tests"""

    def test_small_image_passes_through_unchanged(self):
        data = _image_bytes(300, 300)

        assert AlbumArtEncoder().encode(data) is data

    def test_tall_image_is_scaled_to_bound(self):
        result = AlbumArtEncoder().encode(_image_bytes(500, 1000))

        assert _size_of(result) == ((360, 720), "JPEG")

    def test_large_jpeg_is_subsampled_and_scaled(self):
        result = AlbumArtEncoder().encode(_image_bytes(3000, 2000, "JPEG"))

        size, fmt = _size_of(result)
        assert fmt == "JPEG"
        assert max(size) == 720
        assert size == (720, 480)

    def test_oversized_payload_is_reencoded(self):
        data = _image_bytes(600, 600)

        result = AlbumArtEncoder(max_bytes=len(data) - 1).encode(data)

        assert result is not data
        assert _size_of(result) == ((600, 600), "JPEG")

    def test_rgba_image_is_flattened(self):
        buffer = io.BytesIO()
        Image.new("RGBA", (1000, 1000), (0, 0, 0, 0)).save(buffer, format="PNG")

        result = AlbumArtEncoder().encode(buffer.getvalue())

        assert _size_of(result) == ((720, 720), "JPEG")

    @pytest.mark.parametrize("data", [None, b"", b"definitely not an image", _image_bytes(2000, 2000)[:200]])
    def test_unusable_data_yields_none(self, data):
        assert AlbumArtEncoder().encode(data) is None
