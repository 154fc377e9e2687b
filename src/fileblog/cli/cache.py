"""fileblog cache commands.

Commands:
  fileblog cache build  rescan posts and rewrite the cache file
  fileblog cache clear  delete the cache file
"""

from __future__ import annotations

import typer
from rich.markup import escape

from fileblog.cli.errors import err_cache_write
from fileblog.cli.options import console, load_or_exit, open_store

cache_app = typer.Typer(
    name="cache",
    help="Manage the post index cache (build, clear).",
    add_completion=False,
)


@cache_app.command("build")
def cache_build_cmd(ctx: typer.Context) -> None:
    """Rescan the posts directory and rewrite the cache file."""
    store = open_store(ctx)
    if store.cache_path is None:
        console.print(err_cache_write("No cache path configured."))
        raise typer.Exit(1)

    # A stale cache would short-circuit the scan.
    store.clear_cache()
    store.use_cache(True)
    load_or_exit(store)

    console.print(
        f"[green]✓[/] Cached {store.get_count_posts()} posts → {escape(str(store.cache_path))}"
    )


@cache_app.command("clear")
def cache_clear_cmd(ctx: typer.Context) -> None:
    """Delete the cache file (no-op if it does not exist)."""
    store = open_store(ctx)
    if store.clear_cache():
        console.print(f"[green]✓[/] Removed cache: {escape(str(store.cache_path))}")
    else:
        console.print("[dim]No cache file to remove.[/]")
