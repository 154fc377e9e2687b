"""fileblog post commands.

Commands:
  fileblog list [--page N] [--sort FIELD] [--desc]  table of published posts
  fileblog show <slug>                              one post's metadata + body
  fileblog tag <tag>                                posts carrying a tag
  fileblog tags                                     all tags with post counts
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fileblog.cli.errors import err_for
from fileblog.cli.options import console, load_or_exit, open_store
from fileblog.document import Document
from fileblog.errors import FileBlogError
from fileblog.store import SortOrder


def _fmt(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _posts_table(title: str, posts: Iterable[Document], tags_key: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Slug", style="bold")
    table.add_column("Title")
    table.add_column("Tags")
    for post in posts:
        table.add_row(
            escape(post.url),
            escape(_fmt(post.get("title"))),
            escape(_fmt(post.get(tags_key))),
        )
    return table


def list_cmd(
    ctx: typer.Context,
    page: Annotated[
        int | None,
        typer.Option("--page", "-p", min=1, help="Show only this page (1-based)."),
    ] = None,
    per_page: Annotated[
        int | None,
        typer.Option("--per-page", min=1, help="Posts per page (overrides config)."),
    ] = None,
    sort: Annotated[
        str | None,
        typer.Option("--sort", "-s", help="Metadata field to sort by (e.g. date)."),
    ] = None,
    desc: Annotated[
        bool,
        typer.Option("--desc", help="Sort descending."),
    ] = False,
) -> None:
    """List published posts, optionally sorted and paginated."""
    store = open_store(ctx)
    load_or_exit(store)

    if per_page is not None:
        store.set_posts_per_page(per_page)

    if store.get_count_posts() == 0:
        console.print("[yellow]No published posts found.[/]")
        raise typer.Exit(0)

    try:
        if sort:
            store.sort_by(sort, SortOrder.DESC if desc else SortOrder.ASC)
        pages = store.get_count_pages()
        posts = store.get_posts_on_page(page) if page else store.get_all_posts()
    except FileBlogError as exc:
        console.print(err_for(exc))
        raise typer.Exit(1)

    title = f"Posts (page {page}/{pages})" if page else "Posts"
    console.print(_posts_table(title, posts.values(), store.tags_key))
    console.print(f"\n  {len(posts)} shown, {store.get_count_posts()} published, {pages} page(s)")


def show_cmd(
    ctx: typer.Context,
    slug: Annotated[
        str,
        typer.Argument(help="Post slug: filename without extension (e.g. hello-world)."),
    ],
) -> None:
    """Show one post's metadata and body."""
    store = open_store(ctx)
    try:
        post = store.load_post(slug)
    except FileBlogError as exc:
        console.print(err_for(exc, store.cache_path))
        raise typer.Exit(1)

    meta = Table(show_header=False, box=None)
    meta.add_column("Field", style="bold")
    meta.add_column("Value")
    for key, value in post.meta.items():
        meta.add_row(escape(key), escape(_fmt(value)))

    console.print(Panel(meta, title=f"[bold]{escape(post.url)}[/]", expand=False))
    console.print(escape(post.body.strip()))


def tag_cmd(
    ctx: typer.Context,
    tag: Annotated[str, typer.Argument(help="Tag to filter by (URL-encoded is fine).")],
    tags_key: Annotated[
        str | None,
        typer.Option("--tags-key", help="Metadata field holding tags (overrides config)."),
    ] = None,
) -> None:
    """List posts carrying TAG."""
    store = open_store(ctx)
    load_or_exit(store)

    posts = store.get_posts_by_tag(tag, tags_key)
    if not posts:
        console.print(f"[yellow]No posts tagged '{escape(tag)}'.[/]")
        raise typer.Exit(0)

    console.print(_posts_table(f"Tagged: {escape(tag)}", posts, tags_key or store.tags_key))


def tags_cmd(
    ctx: typer.Context,
    tags_key: Annotated[
        str | None,
        typer.Option("--tags-key", help="Metadata field holding tags (overrides config)."),
    ] = None,
) -> None:
    """List all tags with the number of posts carrying each."""
    store = open_store(ctx)
    load_or_exit(store)

    counts = store.get_all_tags(tags_key)
    if not counts:
        console.print("[yellow]No tags found.[/]")
        raise typer.Exit(0)

    table = Table(title="Tags", show_header=True, header_style="bold")
    table.add_column("Tag", style="bold")
    table.add_column("Posts", justify="right")
    for tag, count in counts.items():
        table.add_row(escape(tag), str(count))
    console.print(table)
