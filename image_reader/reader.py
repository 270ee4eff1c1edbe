"""
Asynchronous image reads with EXIF orientation applied.

Usage:

    ImageReader.with_store(FileResourceStore()) \
        .configure("photo.jpg") \
        .on_complete(lambda result: ...) \
        .start()

The completion callback receives one ReadResult, exactly once per start().
Failures never raise into the caller; they arrive as result codes.
"""

from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable

from image_reader.core.orientation import OrientationCode, coerce_orientation, resolve_orientation
from image_reader.core.transform import Raster, apply_transform
from image_reader.errors import DecodeError, ResourceOpenError
from image_reader.services.decoder import Decoder, PillowDecoder
from image_reader.services.exif_reader import ExifReader, PillowExifReader
from image_reader.services.resource_store import ResourceId, ResourceStore
from image_reader.services.workers import JobManager

LOGGER = logging.getLogger(__name__)


class ResultCode(IntEnum):
    OK = 0
    ERROR_UNKNOWN = -1
    ERROR_OUT_OF_MEMORY = -2
    ERROR_WRONG_URI = -3


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a read: a raster on success, only a code otherwise."""

    code: ResultCode
    raster: Raster | None = None

    def __post_init__(self) -> None:
        if (self.code == ResultCode.OK) != (self.raster is not None):
            raise ValueError("A raster is carried exactly when the code is OK")

    @property
    def ok(self) -> bool:
        return self.code == ResultCode.OK

    @classmethod
    def success(cls, raster: Raster) -> "ReadResult":
        return cls(ResultCode.OK, raster)

    @classmethod
    def failure(cls, code: ResultCode) -> "ReadResult":
        return cls(code, None)


CompletionCallback = Callable[[ReadResult], Any]


def read_orientation(
    resource_id: ResourceId, store: ResourceStore, exif_reader: ExifReader | None = None
) -> OrientationCode:
    """Best-effort orientation lookup on a fresh stream. Any failure yields NORMAL."""
    exif_reader = exif_reader or PillowExifReader()
    try:
        with closing(store.open(resource_id)) as stream:
            raw = exif_reader.read_orientation(stream)
        return coerce_orientation(raw)
    except Exception as exc:
        LOGGER.debug("No usable orientation for %s (%s); assuming NORMAL", resource_id, exc)
        return OrientationCode.NORMAL


def read_image(
    resource_id: ResourceId | None,
    store: ResourceStore,
    decoder: Decoder | None = None,
    exif_reader: ExifReader | None = None,
) -> ReadResult:
    """Open, decode and orient one resource synchronously. Never raises."""
    if resource_id is None or resource_id == "":
        return ReadResult.failure(ResultCode.ERROR_WRONG_URI)
    decoder = decoder or PillowDecoder()

    try:
        stream = store.open(resource_id)
    except ResourceOpenError as exc:
        LOGGER.warning("Cannot open %s: %s", resource_id, exc)
        return ReadResult.failure(ResultCode.ERROR_UNKNOWN)
    except Exception:
        LOGGER.exception("Unexpected error opening %s", resource_id)
        return ReadResult.failure(ResultCode.ERROR_UNKNOWN)

    try:
        with closing(stream):
            raster = decoder.decode(stream)
    except DecodeError as exc:
        LOGGER.warning("Cannot decode %s: %s", resource_id, exc)
        return ReadResult.failure(ResultCode.ERROR_UNKNOWN)
    except Exception:
        LOGGER.exception("Unexpected error decoding %s", resource_id)
        return ReadResult.failure(ResultCode.ERROR_UNKNOWN)

    orientation = read_orientation(resource_id, store, exif_reader)
    transform = resolve_orientation(orientation)
    try:
        oriented = apply_transform(raster, transform)
    except MemoryError:
        # RasterAllocationError is a MemoryError as well
        LOGGER.error("Out of memory orienting %s (%s)", resource_id, orientation.name)
        return ReadResult.failure(ResultCode.ERROR_OUT_OF_MEMORY)
    except Exception:
        LOGGER.exception("Unexpected error orienting %s", resource_id)
        return ReadResult.failure(ResultCode.ERROR_UNKNOWN)

    LOGGER.info("Read %s with orientation %s", resource_id, orientation.name)
    return ReadResult.success(oriented)


class ImageReader:
    """Builder around read_image that runs the read on a JobManager worker."""

    JOB_TYPE = "read_image"

    def __init__(
        self,
        store: ResourceStore,
        jobs: JobManager | None = None,
        decoder: Decoder | None = None,
        exif_reader: ExifReader | None = None,
    ) -> None:
        self.store = store
        self.jobs = jobs or JobManager(max_workers=1)
        self.decoder = decoder or PillowDecoder()
        self.exif_reader = exif_reader or PillowExifReader()
        self._resource_id: ResourceId | None = None
        self._callback: CompletionCallback | None = None

    @classmethod
    def with_store(cls, store: ResourceStore, jobs: JobManager | None = None) -> "ImageReader":
        return cls(store, jobs=jobs)

    @property
    def resource_id(self) -> ResourceId | None:
        return self._resource_id

    def configure(self, resource_id: ResourceId | None) -> "ImageReader":
        self._resource_id = resource_id
        return self

    def on_complete(self, callback: CompletionCallback | None) -> "ImageReader":
        self._callback = callback
        return self

    def start(self) -> str | None:
        """
        Trigger the read and return immediately.

        Without a resource id the callback fires right away with ERROR_WRONG_URI
        and None is returned. Otherwise the read is queued and its job id returned.
        """
        resource_id = self._resource_id
        callback = self._callback
        if resource_id is None or resource_id == "":
            _deliver(callback, ReadResult.failure(ResultCode.ERROR_WRONG_URI), resource_id)
            return None

        store, decoder, exif_reader = self.store, self.decoder, self.exif_reader

        def job(payload: dict[str, Any] | None) -> ResultCode:
            try:
                result = read_image(resource_id, store, decoder, exif_reader)
            except Exception:  # pragma: no cover - read_image does not raise
                LOGGER.exception("Read of %s aborted", resource_id)
                result = ReadResult.failure(ResultCode.ERROR_UNKNOWN)
            _deliver(callback, result, resource_id)
            return result.code

        try:
            return self.jobs.enqueue(self.JOB_TYPE, job, payload={"resource_id": str(resource_id)})
        except RuntimeError:
            LOGGER.exception("Cannot schedule read of %s", resource_id)
            _deliver(callback, ReadResult.failure(ResultCode.ERROR_UNKNOWN), resource_id)
            return None


def _deliver(callback: CompletionCallback | None, result: ReadResult, resource_id: ResourceId | None) -> None:
    if callback is None:
        return
    try:
        callback(result)
    except Exception:
        LOGGER.exception("Completion callback for %s raised", resource_id)
