"""
Album Art Module

Bounds cover images to the watch's wire budget.

Images already within both the dimension and the byte bound pass through
untouched. Everything else is decoded at a power-of-two subsampling, resized
to the dimension bound and re-encoded as JPEG.
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Tuple

from PIL import Image

logger = logging.getLogger(__name__)


def sample_size_for(width: int, height: int, max_dimension: int) -> int:
    """
    Largest power-of-two downsample keeping both sides above 2x the bound

    The subsampled image stays within 2x max_dimension, leaving the final
    resize enough pixels to stay sharp.
    """
    sample_size = 1
    while (width // sample_size) > max_dimension * 2 or (height // sample_size) > max_dimension * 2:
        sample_size *= 2
    return sample_size


def fit_within(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """Scale (width, height) so the longest side equals max_dimension, keeping aspect ratio"""
    longest = max(width, height)
    if longest <= max_dimension:
        return width, height
    scale = max_dimension / longest
    return max(1, int(width * scale + 0.5)), max(1, int(height * scale + 0.5))


class AlbumArtEncoder:
    """
    Album Art Encoder

    Usage example:
        encoder = AlbumArtEncoder(max_dimension=720, max_bytes=900_000, quality=95)
        payload = encoder.encode(cover_bytes)  # None when there is no usable image
    """

    def __init__(self, max_dimension: int = 720, max_bytes: int = 900_000, quality: int = 95):
        self._max_dimension = max_dimension
        self._max_bytes = max_bytes
        self._quality = quality

    def encode(self, data: Optional[bytes]) -> Optional[bytes]:
        """
        Produce a bounded image payload

        Returns:
            The input bytes when already within bounds, re-encoded JPEG
            bytes otherwise, or None if the image cannot be processed.
        """
        if not data:
            return None

        try:
            # Image.open only parses the header; pixels are decoded on load
            with Image.open(io.BytesIO(data)) as image:
                width, height = image.size
                if width <= 0 or height <= 0:
                    return None

                if max(width, height) <= self._max_dimension and len(data) <= self._max_bytes:
                    return data

                scaled = self._decode_bounded(image, width, height)

            buffer = io.BytesIO()
            scaled.save(buffer, format="JPEG", quality=self._quality)
            return buffer.getvalue()
        except Exception as e:
            logger.warning("Failed to create album art asset: %s", e)
            return None

    def _decode_bounded(self, image: Image.Image, width: int, height: int) -> Image.Image:
        sample_size = sample_size_for(width, height, self._max_dimension)

        if sample_size > 1 and image.format == "JPEG":
            # Let the JPEG decoder scale during decode
            image.draft("RGB", (width // sample_size, height // sample_size))

        decoded = image.convert("RGB")
        if sample_size > 1 and image.format != "JPEG":
            decoded = decoded.reduce(sample_size)

        target = fit_within(decoded.width, decoded.height, self._max_dimension)
        if target == decoded.size:
            return decoded
        return decoded.resize(target, Image.Resampling.LANCZOS)
