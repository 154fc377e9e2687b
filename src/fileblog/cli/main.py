"""fileblog CLI entry point."""

from __future__ import annotations

import importlib.metadata
from pathlib import Path
from typing import Annotated

import typer

from fileblog.cli.cache import cache_app
from fileblog.cli.init import init_cmd
from fileblog.cli.options import StoreOptions, setup_logging
from fileblog.cli.posts import list_cmd, show_cmd, tag_cmd, tags_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("fileblog")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fileblog {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="fileblog",
    help=(
        "fileblog: flat-file post store.\n\n"
        "  fileblog list        List published posts (sorted, paginated).\n"
        "  fileblog show SLUG   Show one post."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    posts_dir: Annotated[
        Path | None,
        typer.Option("--posts-dir", "-d", help="Directory holding the posts."),
    ] = None,
    extension: Annotated[
        str | None,
        typer.Option("--ext", help="Post file extension, e.g. .md"),
    ] = None,
    cache: Annotated[
        bool | None,
        typer.Option("--cache/--no-cache", help="Use the JSON index cache."),
    ] = None,
    cache_path: Annotated[
        Path | None,
        typer.Option("--cache-path", help="Path of the JSON index cache file."),
    ] = None,
    skip_invalid: Annotated[
        bool,
        typer.Option("--skip-invalid", help="Skip unparsable posts instead of failing."),
    ] = False,
    config_dir: Annotated[
        Path | None,
        typer.Option("--config-dir", help="Directory holding fileblog.yaml (default: CWD)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """fileblog: flat-file post store."""
    setup_logging(verbose)
    ctx.obj = StoreOptions(
        config_dir=config_dir,
        posts_dir=posts_dir,
        extension=extension,
        cache=cache,
        cache_path=cache_path,
        skip_invalid=skip_invalid,
    )


app.command("list")(list_cmd)
app.command("show")(show_cmd)
app.command("tag")(tag_cmd)
app.command("tags")(tags_cmd)
app.command("init")(init_cmd)
app.add_typer(cache_app, name="cache")


@app.command("version")
def version_cmd() -> None:
    """Show the installed fileblog version."""
    typer.echo(f"fileblog {_installed_version()}")


if __name__ == "__main__":
    app()
