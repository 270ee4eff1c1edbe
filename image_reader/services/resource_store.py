"""
Resource stores: open a resource identifier as a fresh binary stream.

Every call to open() returns a new stream positioned at the start, so a reader
may open the same resource twice (pixels, then metadata).
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Mapping, Protocol
from urllib.parse import unquote, urlparse

from image_reader.errors import ResourceOpenError

LOGGER = logging.getLogger(__name__)

ResourceId = str | Path


class ResourceStore(Protocol):
    def open(self, resource_id: ResourceId) -> BinaryIO: ...


class FileResourceStore:
    """Opens local files given as paths, plain strings or file:// URIs."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = Path(root) if root is not None else None

    def resolve(self, resource_id: ResourceId) -> Path:
        if isinstance(resource_id, str) and resource_id.startswith("file:"):
            parsed = urlparse(resource_id)
            if parsed.netloc not in ("", "localhost"):
                raise ResourceOpenError(f"Remote file URI not supported: {resource_id}")
            path = Path(unquote(parsed.path))
        else:
            path = Path(resource_id)
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path

    def open(self, resource_id: ResourceId) -> BinaryIO:
        path = self.resolve(resource_id)
        try:
            return path.open("rb")
        except OSError as exc:
            LOGGER.debug("Cannot open %s: %s", path, exc)
            raise ResourceOpenError(f"Cannot open {path}: {exc}") from exc


class BytesResourceStore:
    """In-memory store keyed by identifier."""

    def __init__(self, resources: Mapping[str, bytes] | None = None) -> None:
        self._resources: dict[str, bytes] = dict(resources or {})

    def add(self, resource_id: str, data: bytes) -> None:
        self._resources[resource_id] = data

    def open(self, resource_id: ResourceId) -> BinaryIO:
        try:
            data = self._resources[str(resource_id)]
        except KeyError:
            raise ResourceOpenError(f"Unknown resource: {resource_id}") from None
        return BytesIO(data)
