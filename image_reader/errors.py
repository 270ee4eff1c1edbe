"""
Exception types raised inside the reader pipeline.

They never cross the ImageReader boundary: read orchestration maps each of them
onto a ResultCode before the completion callback fires.
"""

from __future__ import annotations


class ImageReaderError(Exception):
    """Base class for reader failures."""


class ResourceOpenError(ImageReaderError):
    """A resource identifier could not be opened as a byte stream."""


class DecodeError(ImageReaderError):
    """The byte stream could not be decoded into a raster."""


class RasterAllocationError(ImageReaderError, MemoryError):
    """Not enough memory to allocate the output raster of a transform."""
