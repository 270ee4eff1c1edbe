from __future__ import annotations

from pathlib import Path

import pytest

from image_reader.errors import ResourceOpenError
from image_reader.services.resource_store import BytesResourceStore, FileResourceStore


def test_file_store_opens_paths_and_uris(tmp_path: Path) -> None:
    target = tmp_path / "a b.bin"
    target.write_bytes(b"payload")
    store = FileResourceStore()

    with store.open(target) as fh:
        assert fh.read() == b"payload"
    with store.open(str(target)) as fh:
        assert fh.read() == b"payload"
    with store.open(target.as_uri()) as fh:
        assert fh.read() == b"payload"


def test_file_store_resolves_relative_ids_under_root(tmp_path: Path) -> None:
    (tmp_path / "img.bin").write_bytes(b"x")
    store = FileResourceStore(root=tmp_path)
    with store.open("img.bin") as fh:
        assert fh.read() == b"x"


def test_file_store_returns_fresh_streams(tmp_path: Path) -> None:
    target = tmp_path / "img.bin"
    target.write_bytes(b"abc")
    store = FileResourceStore()
    with store.open(target) as first, store.open(target) as second:
        assert first.read() == b"abc"
        assert second.read() == b"abc"


def test_file_store_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ResourceOpenError):
        FileResourceStore().open(tmp_path / "missing.jpg")
    with pytest.raises(ResourceOpenError):
        FileResourceStore().open(tmp_path)


def test_file_store_rejects_remote_uri() -> None:
    with pytest.raises(ResourceOpenError):
        FileResourceStore().open("file://server/share/img.jpg")


def test_bytes_store() -> None:
    store = BytesResourceStore({"a": b"123"})
    store.add("b", b"456")
    assert store.open("a").read() == b"123"
    assert store.open("b").read() == b"456"
    with pytest.raises(ResourceOpenError):
        store.open("c")
