"""
EXIF orientation codes and the transform each one calls for.

Only the six codes below are honoured. Transposed variants (5 and 7) and any
other value leave the raster as decoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar

ORIENTATION_TAG = 0x0112


class OrientationCode(IntEnum):
    NORMAL = 1
    FLIP_HORIZONTAL = 2
    ROTATE_180 = 3
    FLIP_VERTICAL = 4
    ROTATE_90 = 6
    ROTATE_270 = 8


@dataclass(frozen=True)
class Transform:
    """A clockwise rotation or a single-axis flip. At most one field is set."""

    rotation: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    IDENTITY: ClassVar["Transform"]

    def __post_init__(self) -> None:
        if self.rotation not in (0, 90, 180, 270):
            raise ValueError(f"Unsupported rotation {self.rotation}; expected a multiple of 90 below 360")
        active = bool(self.rotation) + self.flip_horizontal + self.flip_vertical
        if active > 1:
            raise ValueError("Composite transforms are not supported")

    @property
    def is_identity(self) -> bool:
        return not (self.rotation or self.flip_horizontal or self.flip_vertical)

    def output_size(self, width: int, height: int) -> tuple[int, int]:
        """Dimensions of the raster this transform produces from a width x height input."""
        if self.rotation in (90, 270):
            return height, width
        return width, height


Transform.IDENTITY = Transform()

_TRANSFORMS: dict[OrientationCode, Transform] = {
    OrientationCode.ROTATE_90: Transform(rotation=90),
    OrientationCode.ROTATE_180: Transform(rotation=180),
    OrientationCode.ROTATE_270: Transform(rotation=270),
    OrientationCode.FLIP_HORIZONTAL: Transform(flip_horizontal=True),
    OrientationCode.FLIP_VERTICAL: Transform(flip_vertical=True),
}


def coerce_orientation(value: Any) -> OrientationCode:
    """Map a raw tag value (int, numeric str/bytes, None, ...) to a known code, defaulting to NORMAL."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    try:
        if isinstance(value, str):
            number = int(value.strip().rstrip("\x00"))
        else:
            number = int(value)
            # fractional values (6.5, Fraction(13, 2)) are not codes
            if number != value:
                return OrientationCode.NORMAL
        return OrientationCode(number)
    except (TypeError, ValueError, ArithmeticError):
        return OrientationCode.NORMAL


def resolve_orientation(code: Any) -> Transform:
    """Return the transform that makes a raster tagged with `code` upright. Never raises."""
    return _TRANSFORMS.get(coerce_orientation(code), Transform.IDENTITY)
