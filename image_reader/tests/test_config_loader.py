from pathlib import Path

import pytest

from image_reader.config.defaults import DEFAULTS
from image_reader.config.loader import load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    loaded = load_config(config_path)
    assert loaded == DEFAULTS
    assert loaded is not DEFAULTS  # caller can mutate safely


def test_load_config_merges_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
        [reader]
        max_workers = 4

        [decoder]
        max_pixels = 1000000

        [logging]
        level = "debug"
        """,
        encoding="utf-8",
    )

    loaded = load_config(config_path)

    assert loaded["reader"]["max_workers"] == 4
    assert loaded["decoder"]["max_pixels"] == 1_000_000
    assert loaded["logging"]["level"] == "debug"
    assert loaded["logging"]["dir"] == DEFAULTS["logging"]["dir"]
    assert loaded["store"] == DEFAULTS["store"]


def test_load_config_raises_value_error_on_bad_toml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("this is not valid toml", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


@pytest.mark.parametrize("body", ["[reader]\nmax_workers = 0\n", "[decoder]\nmax_pixels = -5\n"])
def test_load_config_rejects_invalid_values(tmp_path: Path, body: str) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_load_config_rejects_directory(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError):
        load_config(tmp_path)
