"""fileblog: flat-file post store with YAML front matter and a JSON index cache."""

from fileblog.document import Document, parse_document
from fileblog.errors import (
    CacheReadError,
    CacheWriteError,
    ConfigError,
    FileBlogError,
    NotFoundError,
    ParseError,
    ReadError,
    SortPreconditionError,
)
from fileblog.store import ContentStore, SortOrder

__all__ = [
    "ContentStore",
    "SortOrder",
    "Document",
    "parse_document",
    "FileBlogError",
    "ConfigError",
    "ReadError",
    "ParseError",
    "CacheReadError",
    "CacheWriteError",
    "NotFoundError",
    "SortPreconditionError",
]
