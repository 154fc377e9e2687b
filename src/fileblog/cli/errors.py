"""fileblog rich error messages: actionable feedback for CLI users.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from fileblog.cli.errors import err_for
    console.print(err_for(exc))
    raise typer.Exit(1)
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

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


def err_no_posts_dir() -> str:
    """posts_dir was never configured."""
    return (
        "[red]Error:[/] No posts directory configured.\n"
        "  Pass:  fileblog --posts-dir <dir> ...\n"
        "  Or set posts.dir in fileblog.yaml  (run: fileblog init)"
    )


def err_config(message: str) -> str:
    """Any other configuration problem."""
    return (
        f"[red]Error:[/] Invalid configuration: {message}\n"
        "  Check fileblog.yaml and FILEBLOG_* environment variables."
    )


def err_post_not_found(message: str) -> str:
    return (
        f"[red]Error:[/] {message}\n"
        "  Run:  fileblog list  to see all published posts."
    )


def err_post_unreadable(message: str) -> str:
    return (
        f"[red]Error:[/] {message}\n"
        "  Check the file's permissions and that it is UTF-8 text."
    )


def err_post_invalid(message: str) -> str:
    """Metadata block could not be parsed."""
    return (
        f"[red]Error:[/] Invalid post metadata: {message}\n"
        "  Each post must start with a YAML mapping between two '---' lines:\n"
        "    ---\n"
        "    title: My post\n"
        "    ---\n"
        "  Or pass --skip-invalid to skip broken posts."
    )


def err_cache_corrupt(message: str, cache_path: Path | None = None) -> str:
    target = escape(str(cache_path)) if cache_path else "the cache file"
    return (
        f"[red]Error:[/] {message}\n"
        f"  Run:  fileblog cache clear  to delete {target} and rescan."
    )


def err_cache_write(message: str) -> str:
    return (
        f"[red]Error:[/] {message}\n"
        "  Pass --cache-path <file> or set cache.path in fileblog.yaml."
    )


def err_nothing_to_sort() -> str:
    return (
        "[yellow]No posts loaded, nothing to sort.[/]\n"
        "  Add posts to the posts directory first."
    )


def err_for(exc: FileBlogError, cache_path: Path | None = None) -> str:
    """Map a library exception to its user-facing message."""
    message = escape(str(exc))
    if isinstance(exc, ConfigError):
        if "posts_dir" in message:
            return err_no_posts_dir()
        return err_config(message)
    if isinstance(exc, NotFoundError):
        return err_post_not_found(message)
    if isinstance(exc, ReadError):
        return err_post_unreadable(message)
    if isinstance(exc, ParseError):
        return err_post_invalid(message)
    if isinstance(exc, CacheReadError):
        return err_cache_corrupt(message, cache_path)
    if isinstance(exc, CacheWriteError):
        return err_cache_write(message)
    if isinstance(exc, SortPreconditionError):
        return err_nothing_to_sort()
    return f"[red]Error:[/] {message}"
