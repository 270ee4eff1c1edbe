"""
Apply an orientation Transform to a raster.

Rotations are multiples of 90 degrees, so every transform is an exact pixel
permutation into a newly allocated buffer; nothing is resampled. Rasters are
either Pillow images or NumPy arrays laid out as (height, width[, channels]).
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from PIL import Image

from image_reader.core.orientation import Transform
from image_reader.errors import RasterAllocationError

LOGGER = logging.getLogger(__name__)

Raster = Union[Image.Image, np.ndarray]

# Pillow's ROTATE_* members turn counter-clockwise.
_PIL_ROTATIONS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def raster_size(raster: Raster) -> tuple[int, int]:
    """Return (width, height) of a raster."""
    if isinstance(raster, Image.Image):
        return raster.size
    if isinstance(raster, np.ndarray):
        _check_array(raster)
        return int(raster.shape[1]), int(raster.shape[0])
    raise TypeError(f"Unsupported raster type: {type(raster).__name__}")


def _check_array(array: np.ndarray) -> None:
    if array.ndim < 2:
        raise ValueError(f"Raster array needs at least 2 dimensions, got shape {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise ValueError(f"Raster array has an empty dimension: shape {array.shape}")


def _apply_pil(image: Image.Image, transform: Transform) -> Image.Image:
    if transform.rotation:
        return image.transpose(_PIL_ROTATIONS[transform.rotation])
    if transform.flip_horizontal:
        return image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def _apply_array(array: np.ndarray, transform: Transform) -> np.ndarray:
    _check_array(array)
    if transform.rotation:
        view = np.rot90(array, k=-(transform.rotation // 90), axes=(0, 1))
    elif transform.flip_horizontal:
        view = array[:, ::-1]
    else:
        view = array[::-1]
    # rot90 and slicing return views; the result must own its buffer.
    return view.copy()


def apply_transform(raster: Raster, transform: Transform) -> Raster:
    """
    Return a new raster with `transform` applied.

    The identity transform returns `raster` itself. Raises RasterAllocationError
    when the output buffer cannot be allocated, TypeError for unsupported raster
    types.
    """
    if not isinstance(raster, (Image.Image, np.ndarray)):
        raise TypeError(f"Unsupported raster type: {type(raster).__name__}")
    if transform.is_identity:
        return raster

    width, height = raster_size(raster)
    out_width, out_height = transform.output_size(width, height)
    try:
        if isinstance(raster, Image.Image):
            result = _apply_pil(raster, transform)
        else:
            result = _apply_array(raster, transform)
    except MemoryError as exc:
        LOGGER.warning("Could not allocate %dx%d raster for %s", out_width, out_height, transform)
        raise RasterAllocationError(f"Cannot allocate {out_width}x{out_height} raster") from exc

    if raster_size(result) != (out_width, out_height):  # pragma: no cover - backend contract
        raise RuntimeError(f"Transform produced {raster_size(result)}, expected {(out_width, out_height)}")
    return result
