"""Exception hierarchy for the content store.

All errors are raised synchronously to the caller and never retried or
logged by the library. Catch ``FileBlogError`` to handle any of them.
"""

from __future__ import annotations


class FileBlogError(Exception):
    """Base class for every error raised by fileblog."""


class ConfigError(FileBlogError, ValueError):
    """A required setting is missing or a config value is invalid."""


class ReadError(FileBlogError):
    """A post file exists but could not be read."""


class ParseError(FileBlogError):
    """A post's metadata block is missing, empty or not a YAML mapping."""


class CacheReadError(FileBlogError):
    """The cache file exists but is empty, corrupt or holds no posts."""


class CacheWriteError(FileBlogError):
    """The cache file could not be written (or no cache path is set)."""


class NotFoundError(FileBlogError, LookupError):
    """The requested slug does not resolve to a published post."""


class SortPreconditionError(FileBlogError):
    """``sort_by()`` was called before any posts were loaded."""
