"""Shared CLI state: global options collected by the app callback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from fileblog.cli.errors import err_for
from fileblog.config import load_config
from fileblog.errors import FileBlogError
from fileblog.store import ContentStore

console = Console()


@dataclass
class StoreOptions:
    """CLI overrides; None means "use the config file / default"."""

    config_dir: Path | None = None
    posts_dir: Path | None = None
    extension: str | None = None
    cache: bool | None = None
    cache_path: Path | None = None
    skip_invalid: bool = False


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


def get_options(ctx: typer.Context) -> StoreOptions:
    return ctx.obj if isinstance(ctx.obj, StoreOptions) else StoreOptions()


def open_store(ctx: typer.Context) -> ContentStore:
    """Build a ContentStore from fileblog.yaml + env vars + CLI flags.

    Exits with code 1 and a rich message on configuration errors.
    """
    opts = get_options(ctx)
    try:
        cfg = load_config(opts.config_dir)
    except FileBlogError as exc:
        console.print(err_for(exc))
        raise typer.Exit(1)

    # Layer 1: CLI flags
    if opts.posts_dir is not None:
        cfg.posts.dir = opts.posts_dir
    if opts.extension is not None:
        cfg.posts.extension = opts.extension
    if opts.cache is not None:
        cfg.cache.enabled = opts.cache
    if opts.cache_path is not None:
        cfg.cache.path = opts.cache_path
    if opts.skip_invalid:
        cfg.posts.skip_invalid = True

    return ContentStore.from_config(cfg)


def load_or_exit(store: ContentStore) -> None:
    """``store.load_posts()``, turning library errors into exit code 1."""
    try:
        store.load_posts()
    except FileBlogError as exc:
        console.print(err_for(exc, store.cache_path))
        raise typer.Exit(1)
