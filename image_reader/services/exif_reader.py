"""
EXIF orientation lookup.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol

from PIL import ExifTags, Image

from image_reader.core.orientation import OrientationCode


class ExifReader(Protocol):
    def read_orientation(self, stream: BinaryIO) -> int: ...


class PillowExifReader:
    """Read the Orientation tag with Pillow without decoding pixel data."""

    def read_orientation(self, stream: BinaryIO) -> int:
        """Return the raw tag value, or NORMAL when the tag is absent. Corrupt data raises."""
        with Image.open(stream) as image:
            exif = image.getexif()
        value = exif.get(ExifTags.Base.Orientation)
        if value is None:
            return int(OrientationCode.NORMAL)
        return value
