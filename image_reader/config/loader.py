"""
Configuration loader: TOML file merged over DEFAULTS.
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any

from image_reader.config.defaults import DEFAULTS


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two dictionaries without mutating the originals."""
    merged: dict[str, Any] = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(config: dict[str, Any], path: Path) -> None:
    workers = config.get("reader", {}).get("max_workers")
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ValueError(f"Invalid config file {path}: reader.max_workers must be a positive integer")
    max_pixels = config.get("decoder", {}).get("max_pixels")
    if max_pixels is not None and (not isinstance(max_pixels, int) or max_pixels < 1):
        raise ValueError(f"Invalid config file {path}: decoder.max_pixels must be a positive integer")


def load_config(path: Path) -> dict[str, Any]:
    """
    Load a TOML config file and merge it over defaults.
    Missing files return defaults; malformed or invalid files raise ValueError.
    """
    if path.is_dir():
        raise IsADirectoryError(f"Config path points to a directory: {path}")

    user_config: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as fh:
                user_config = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid config file {path}: {exc}") from exc

    merged = _deep_merge(DEFAULTS, user_config)
    _validate(merged, path)
    return merged
