"""
Pillow-backed decoder turning a byte stream into a loaded raster.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

from PIL import Image, UnidentifiedImageError

from image_reader.core.transform import Raster
from image_reader.errors import DecodeError

LOGGER = logging.getLogger(__name__)


class Decoder(Protocol):
    def decode(self, stream: BinaryIO) -> Raster: ...


class PillowDecoder:
    """Decode any format Pillow understands. The result no longer references the stream."""

    def __init__(self, max_pixels: int | None = None) -> None:
        self.max_pixels = max_pixels

    def decode(self, stream: BinaryIO) -> Image.Image:
        try:
            with Image.open(stream) as image:
                width, height = image.size
                if self.max_pixels is not None and width * height > self.max_pixels:
                    raise DecodeError(
                        f"Image of {width}x{height} exceeds the {self.max_pixels} pixel limit"
                    )
                image.load()
                # copy() detaches pixel data from the file-backed image before it closes
                decoded = image.copy()
        except DecodeError:
            raise
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as exc:
            raise DecodeError(f"Cannot decode image: {exc}") from exc
        LOGGER.debug("Decoded %s image %dx%d", decoded.mode, decoded.width, decoded.height)
        return decoded
