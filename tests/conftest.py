"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


def write_post(directory: Path, filename: str, front_matter: str, body: str = "Body.\n") -> Path:
    """Write ``---\\n<front_matter>---\\n<body>`` to *directory*/*filename*."""
    path = directory / filename
    path.write_text(f"---\n{front_matter}---\n{body}", encoding="utf-8")
    return path


@pytest.fixture
def make_post(tmp_path) -> Callable[..., Path]:
    """Factory writing posts into ``tmp_path / "posts"``."""
    posts = tmp_path / "posts"
    posts.mkdir(exist_ok=True)

    def _make(filename: str, front_matter: str, body: str = "Body.\n") -> Path:
        return write_post(posts, filename, front_matter, body)

    return _make


@pytest.fixture
def abc_posts(tmp_path) -> Path:
    """a.md published + tagged x, b.md unpublished, c.md tagged x,y."""
    posts = tmp_path / "posts"
    posts.mkdir()
    write_post(posts, "a.md", "title: Alpha\npublished: true\ntags: [x]\n", "Alpha body.\n")
    write_post(posts, "b.md", "title: Beta\npublished: false\n", "Beta body.\n")
    write_post(posts, "c.md", "title: Gamma\ntags: [x, y]\n", "Gamma body.\n")
    return posts


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep FILEBLOG_* variables and ~/.fileblog out of tests."""
    monkeypatch.setattr(
        "fileblog.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global" / "config.yaml"
    )
    for name in (
        "FILEBLOG_POSTS_DIR",
        "FILEBLOG_CACHE_PATH",
        "FILEBLOG_USE_CACHE",
        "FILEBLOG_POSTS_PER_PAGE",
    ):
        monkeypatch.delenv(name, raising=False)
