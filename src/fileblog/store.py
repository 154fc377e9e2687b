"""ContentStore: load posts from a directory and query them in memory.

Usage:
    store = ContentStore(posts_dir=Path("posts"), post_extension=".md")
    store.load_posts()
    store.sort_by("date", SortOrder.DESC)
    for filename, post in store.get_posts_on_page(1).items():
        print(post.url, post.get("title"))

The index is a ``dict[str, Document]`` keyed by filename (extension
included). It is owned by the store, filled once per ``load_posts()`` call
and reordered in place by ``sort_by()``. Not thread-safe: serialize access
externally if several threads share one store.
"""

from __future__ import annotations

import enum
import json
import logging
import math
import warnings
from itertools import islice
from pathlib import Path
from typing import Any
from urllib.parse import unquote_plus

from fileblog import cache
from fileblog.config import FileBlogConfig
from fileblog.document import Document, parse_document
from fileblog.errors import (
    ConfigError,
    NotFoundError,
    ParseError,
    ReadError,
    SortPreconditionError,
)

logger = logging.getLogger(__name__)

# Stripped from slugs before they touch the filesystem. Containment is
# enforced separately by _resolve_inside().
_SLUG_DENYLIST: tuple[str, ...] = ("..", "~", "|", "*", "$", '"', "?", "'")


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


def _sort_rank(value: Any) -> tuple[int, Any]:
    """Sort key for a present field value: numbers < strings < the rest."""
    if isinstance(value, (bool, int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, json.dumps(value, sort_keys=True, default=str))


def _has_tag(value: Any, tag: str) -> bool:
    if isinstance(value, str):
        return value == tag
    if isinstance(value, (list, tuple)):
        return tag in value
    return False


def _tag_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(t) for t in value if t is not None]
    return []


class ContentStore:
    """In-memory index of published posts with an optional JSON cache.

    Nothing is validated at construction time: a missing ``posts_dir`` or
    ``cache_path`` only raises when an operation needs it.
    """

    def __init__(
        self,
        posts_dir: Path | str | None = None,
        post_extension: str = ".md",
        *,
        use_cache: bool = False,
        cache_path: Path | str | None = None,
        posts_per_page: int = 10,
        published_key: str = "published",
        tags_key: str = "tags",
        skip_invalid: bool = False,
    ) -> None:
        self.posts_dir: Path | None = Path(posts_dir) if posts_dir is not None else None
        self.post_extension = post_extension
        self.cache_enabled = use_cache
        self.cache_path: Path | None = Path(cache_path) if cache_path is not None else None
        self.posts_per_page = posts_per_page
        self.published_key = published_key
        self.tags_key = tags_key
        self.skip_invalid = skip_invalid
        self._posts: dict[str, Document] = {}

    @classmethod
    def from_config(cls, cfg: FileBlogConfig) -> ContentStore:
        """Build a store from a loaded *FileBlogConfig*."""
        return cls(
            posts_dir=cfg.posts.dir,
            post_extension=cfg.posts.extension,
            use_cache=cfg.cache.enabled,
            cache_path=cfg.cache.path,
            posts_per_page=cfg.posts.per_page,
            published_key=cfg.posts.published_key,
            tags_key=cfg.posts.tags_key,
            skip_invalid=cfg.posts.skip_invalid,
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_posts_dir(self, posts_dir: Path | str) -> None:
        self.posts_dir = Path(posts_dir)

    def set_post_extension(self, extension: str) -> None:
        self.post_extension = extension

    def use_cache(self, value: bool) -> None:
        self.cache_enabled = value

    def set_cache_path(self, path: Path | str) -> None:
        self.cache_path = Path(path)

    def set_posts_per_page(self, number: int) -> None:
        self.posts_per_page = number

    def set_published_key(self, key: str) -> None:
        self.published_key = key

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_posts(self) -> None:
        """Populate the index from the cache file, or by scanning posts_dir.

        A usable cache short-circuits the scan entirely. After a scan the
        cache (if enabled) is rewritten. Any previous index is replaced.
        Scanning an empty directory with caching on writes an empty cache,
        which later loads reject with CacheReadError until ``clear_cache()``
        (or ``fileblog cache build``) runs.

        Raises:
            CacheReadError: cache file present but empty or corrupt.
            ConfigError: posts_dir is not set.
            ReadError / ParseError: a post file failed (unless skip_invalid).
            CacheWriteError: caching enabled but cache_path unset or unwritable.
        """
        if self._load_from_cache():
            return

        posts_dir = self._require_posts_dir("load_posts()")

        posts: dict[str, Document] = {}
        skipped = 0
        for path in sorted(posts_dir.glob(f"*{self.post_extension}")):
            if not path.is_file():
                continue
            try:
                doc = parse_document(path, self.post_extension, self.published_key)
            except (ReadError, ParseError) as exc:
                if not self.skip_invalid:
                    raise
                warnings.warn(f"Skipping '{path.name}': {exc}", UserWarning, stacklevel=2)
                continue
            if doc is None:
                logger.debug("Skipping unpublished post %s", path.name)
                skipped += 1
                continue
            posts[path.name] = doc

        self._posts = posts
        logger.debug(
            "Loaded %d posts from %s (%d unpublished)", len(posts), posts_dir, skipped
        )

        if self.cache_enabled:
            cache.write_cache(self.cache_path, self._posts)

    def load_post(self, slug: str) -> Document:
        """Return the post for *slug* (filename without extension).

        Lookup order: loaded index → cache file (if enabled) → the file itself.

        Raises:
            NotFoundError: no published post with that slug, or the slug
                resolves outside posts_dir.
            ConfigError: the file must be read but posts_dir is not set.
        """
        filename = slug + self.post_extension

        if filename in self._posts:
            return self._posts[filename]

        if self._load_from_cache() and filename in self._posts:
            return self._posts[filename]

        posts_dir = self._require_posts_dir("load_post()")
        for bad in _SLUG_DENYLIST:
            filename = filename.replace(bad, "")

        path = self._resolve_inside(posts_dir, filename)
        if path is None or not path.is_file():
            raise NotFoundError(f"Post not found: '{slug}'.")

        doc = parse_document(path, self.post_extension, self.published_key)
        if doc is None:
            raise NotFoundError(f"Post not found: '{slug}'.")
        return doc

    def clear_cache(self) -> bool:
        """Delete the cache file if it exists. Returns True if one was removed."""
        return cache.clear_cache(self.cache_path)

    def _load_from_cache(self) -> bool:
        if not self.cache_enabled or self.cache_path is None or not self.cache_path.exists():
            return False
        self._posts = cache.read_cache(self.cache_path)
        return True

    def _require_posts_dir(self, operation: str) -> Path:
        if self.posts_dir is None:
            raise ConfigError(f"posts_dir must be set before calling {operation}.")
        return self.posts_dir

    @staticmethod
    def _resolve_inside(base: Path, filename: str) -> Path | None:
        """Join *filename* to *base*; None if the result escapes *base*."""
        base = base.resolve()
        try:
            resolved = (base / filename).resolve()
            resolved.relative_to(base)
        except (OSError, ValueError):
            # outside base, or unresolvable (e.g. embedded NUL byte)
            return None
        if resolved == base:
            return None
        return resolved

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def sort_by(self, key: str, order: SortOrder | str = SortOrder.ASC) -> None:
        """Reorder the index by the value of metadata field *key*.

        Stable. Posts without *key* keep their relative order and go last
        in both directions.

        Raises:
            SortPreconditionError: no posts are loaded.
            ValueError: *order* is not "asc" or "desc".
        """
        if not self._posts:
            raise SortPreconditionError("Cannot sort posts when no posts are loaded.")

        order = SortOrder(order)
        present = [(name, doc) for name, doc in self._posts.items() if key in doc]
        missing = [(name, doc) for name, doc in self._posts.items() if key not in doc]

        present.sort(
            key=lambda item: _sort_rank(item[1][key]),
            reverse=order is SortOrder.DESC,
        )
        self._posts = dict(present + missing)

    def get_all_posts(self) -> dict[str, Document]:
        return dict(self._posts)

    def get_count_posts(self) -> int:
        return len(self._posts)

    def get_count_pages(self) -> int:
        """Total number of pages for the current ``posts_per_page``.

        Raises:
            ConfigError: posts_per_page is below 1.
        """
        per_page = self._require_page_size()
        return math.ceil(len(self._posts) / per_page)

    def get_posts_on_page(self, page: int) -> dict[str, Document]:
        """Posts on 1-indexed *page*, keys preserved. Out of range → empty."""
        per_page = self._require_page_size()
        if page < 1:
            return {}
        start = (page - 1) * per_page
        return dict(islice(self._posts.items(), start, start + per_page))

    def get_posts_by_tag(self, tag: str, tags_key: str | None = None) -> list[Document]:
        """Posts whose tags contain *tag* (URL-decoded first), in index order."""
        if not self._posts:
            return []

        key = tags_key or self.tags_key
        tag = unquote_plus(tag)
        return [doc for doc in self._posts.values() if _has_tag(doc.get(key), tag)]

    def get_all_tags(self, tags_key: str | None = None) -> dict[str, int]:
        """Tag → number of posts carrying it, in order of first appearance."""
        key = tags_key or self.tags_key
        counts: dict[str, int] = {}
        for doc in self._posts.values():
            for tag in dict.fromkeys(_tag_list(doc.get(key))):
                counts[tag] = counts.get(tag, 0) + 1
        return counts

    def _require_page_size(self) -> int:
        if self.posts_per_page < 1:
            raise ConfigError(
                f"posts_per_page must be at least 1, got {self.posts_per_page}."
            )
        return self.posts_per_page
