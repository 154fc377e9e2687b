"""fileblog init: write a default fileblog.yaml and posts/ directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from fileblog.cli.options import console
from fileblog.config import ensure_project_config

_DEFAULT_PROJECT_DIR = Path(".")


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
) -> None:
    """Create fileblog.yaml and an empty posts/ directory."""
    project_dir = project_dir.resolve()
    config_path, created = ensure_project_config(project_dir)

    if created:
        console.print(f"  [green]✓[/] {escape(str(config_path))}")
    else:
        console.print(f"  [yellow]⚠[/]  {escape(str(config_path))} already exists, left unchanged.")

    posts_dir = project_dir / "posts"
    posts_dir.mkdir(exist_ok=True)
    console.print("  [green]✓[/] posts/")
