"""Tests for cache.py: JSON snapshot of the post index."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fileblog.cache import clear_cache, read_cache, write_cache
from fileblog.document import Document
from fileblog.errors import CacheReadError, CacheWriteError


def _index() -> dict[str, Document]:
    return {
        "a.md": Document(url="a", body="Alpha", meta={"title": "Ålpha", "tags": ["x"]}),
        "c.md": Document(url="c", body="Gamma", meta={"title": "Gamma", "n": 3}),
    }


# ------------------------------------------------------------------
# write_cache
# ------------------------------------------------------------------


def test_write_cache_format(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    write_cache(path, _index())

    raw = path.read_text(encoding="utf-8")
    assert "Ålpha" in raw  # non-ASCII written unescaped
    data = json.loads(raw)
    assert list(data) == ["a.md", "c.md"]
    assert data["a.md"] == {"title": "Ålpha", "tags": ["x"], "body": "Alpha", "url": "a"}


def test_write_cache_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text('{"old.md": {"url": "old"}}', encoding="utf-8")
    write_cache(path, _index())
    assert "old.md" not in json.loads(path.read_text(encoding="utf-8"))


def test_write_cache_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "cache.json"
    write_cache(path, _index())
    assert path.exists()


def test_write_cache_no_temp_files_left(tmp_path: Path) -> None:
    write_cache(tmp_path / "cache.json", _index())
    assert [p.name for p in tmp_path.iterdir()] == ["cache.json"]


def test_write_cache_path_unset() -> None:
    with pytest.raises(CacheWriteError, match="cache_path"):
        write_cache(None, _index())


def test_write_cache_unserializable_value(tmp_path: Path) -> None:
    index = {"a.md": Document(url="a", meta={"blob": b"\x00\x01"})}
    with pytest.raises(CacheWriteError):
        write_cache(tmp_path / "cache.json", index)


# ------------------------------------------------------------------
# read_cache
# ------------------------------------------------------------------


def test_read_cache_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    original = _index()
    write_cache(path, original)
    loaded = read_cache(path)
    assert loaded == original
    assert list(loaded) == list(original)


@pytest.mark.parametrize(
    "content",
    ["", "not json", "{}", "[]", "null", '{"a.md": "text"}', '{"a.md": {"title": "no url"}}'],
)
def test_read_cache_rejects_bad_content(tmp_path: Path, content: str) -> None:
    path = tmp_path / "cache.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CacheReadError):
        read_cache(path)


def test_read_cache_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CacheReadError):
        read_cache(tmp_path / "missing.json")


# ------------------------------------------------------------------
# clear_cache
# ------------------------------------------------------------------


def test_clear_cache_removes_file(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{}", encoding="utf-8")
    assert clear_cache(path) is True
    assert not path.exists()


def test_clear_cache_missing_is_noop(tmp_path: Path) -> None:
    assert clear_cache(tmp_path / "missing.json") is False
    assert clear_cache(None) is False
