"""
Default configuration values.
"""

from __future__ import annotations

DEFAULTS: dict[str, object] = {
    "reader": {"max_workers": 2},
    "decoder": {"max_pixels": None},
    "store": {"root": None},
    "logging": {"level": "info", "dir": None},
}
