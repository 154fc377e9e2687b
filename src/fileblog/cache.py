"""JSON snapshot of the parsed post index.

The cache file holds one JSON object mapping filename → document mapping
(metadata plus ``body`` and ``url``). It is rewritten wholesale after every
directory scan and never updated incrementally; it goes stale as soon as a
post file changes. ``clear_cache()`` is the only invalidation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from fileblog.document import URL_KEY, Document
from fileblog.errors import CacheReadError, CacheWriteError

logger = logging.getLogger(__name__)


def read_cache(path: Path) -> dict[str, Document]:
    """Load the index stored at *path*.

    Raises:
        CacheReadError: if the file cannot be read, is not valid JSON, is not
            an object of post objects, or holds no posts.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CacheReadError(f"Cannot read cache file '{path}': {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CacheReadError(f"Cache file '{path}' is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or not data:
        raise CacheReadError(f"Error loading posts from cache '{path}' (no posts?).")

    index: dict[str, Document] = {}
    for filename, entry in data.items():
        if not isinstance(entry, dict) or URL_KEY not in entry:
            raise CacheReadError(
                f"Cache file '{path}' has a malformed entry for '{filename}'."
            )
        index[filename] = Document.from_dict(entry)

    logger.debug("Loaded %d posts from cache %s", len(index), path)
    return index


def write_cache(path: Path | None, index: dict[str, Document]) -> None:
    """Write *index* to *path* atomically (temp → rename), overwriting it.

    Raises:
        CacheWriteError: if *path* is None or the write fails.
    """
    if path is None:
        raise CacheWriteError("Cannot save cache when cache_path is not set.")

    try:
        payload = json.dumps(
            {filename: doc.to_dict() for filename, doc in index.items()},
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as exc:
        # e.g. !!binary or !!set metadata values
        raise CacheWriteError(f"Posts cannot be serialized to JSON: {exc}") from exc

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    except OSError as exc:
        raise CacheWriteError(f"Cannot write cache file '{path}': {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except OSError as exc:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise CacheWriteError(f"Cannot write cache file '{path}': {exc}") from exc

    logger.debug("Wrote %d posts to cache %s", len(index), path)


def clear_cache(path: Path | None) -> bool:
    """Delete the cache file at *path*. Returns True if a file was removed."""
    if path is None or not path.exists():
        return False
    path.unlink()
    logger.debug("Removed cache file %s", path)
    return True
