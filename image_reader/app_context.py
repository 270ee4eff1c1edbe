"""
Bootstrap helpers.

Responsibilities:
- Locate/load configuration.
- Configure logging.
- Build the shared JobManager and default collaborators.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from image_reader.config.loader import load_config
from image_reader.logging.setup import setup_logging
from image_reader.reader import ImageReader
from image_reader.services.decoder import PillowDecoder
from image_reader.services.exif_reader import PillowExifReader
from image_reader.services.resource_store import FileResourceStore
from image_reader.services.workers import JobManager

ENV_CONFIG_DIR = "IMAGE_READER_CONFIG_DIR"


@dataclass
class ReaderContext:
    """Shared collaborators for every read started from this process."""

    config: dict[str, Any]
    config_path: Path
    job_manager: JobManager
    store: FileResourceStore
    decoder: PillowDecoder
    exif_reader: PillowExifReader

    def reader(self) -> ImageReader:
        """Return a fresh, unconfigured ImageReader bound to this context."""
        return ImageReader(self.store, jobs=self.job_manager, decoder=self.decoder, exif_reader=self.exif_reader)

    def close(self, wait: bool = True) -> None:
        """Shut down the workers. With wait=False a read still in progress is abandoned."""
        self.job_manager.shutdown(wait=wait)


def default_config_dir() -> Path:
    """Return the directory to hold config files, honoring env override."""
    override = os.getenv(ENV_CONFIG_DIR)
    if override:
        return Path(override)
    return Path.home() / ".image_reader"


def default_config_path() -> Path:
    """Return default config file path."""
    return default_config_dir() / "config.toml"


def initialize_reader(config_path: Path | None = None) -> ReaderContext:
    """
    Load configuration, set up logging and return a ReaderContext.
    A missing config file is fine; defaults apply.
    """
    config_path = config_path or default_config_path()
    config = load_config(config_path)

    log_cfg = config.get("logging", {})
    log_dir = log_cfg.get("dir")
    setup_logging(log_dir=Path(log_dir) if log_dir else None, level=str(log_cfg.get("level", "INFO")))

    store_root = config.get("store", {}).get("root")
    return ReaderContext(
        config=config,
        config_path=config_path,
        job_manager=JobManager(max_workers=int(config["reader"]["max_workers"])),
        store=FileResourceStore(root=Path(store_root) if store_root else None),
        decoder=PillowDecoder(max_pixels=config.get("decoder", {}).get("max_pixels")),
        exif_reader=PillowExifReader(),
    )
