#!/usr/bin/env python3
import asyncio
import logging
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from video_manager.categories import get_parent_categories, get_subcategories
from video_manager.config import get_settings
from video_manager.filters import FilterState, page_window
from video_manager.platforms import VideoPlatform, platform_display_name
from video_manager.services.api_client import ApiError, ManagerClient
from video_manager.services.backup_service import BackupService, InvalidBackupError
from video_manager.services.collection_store import CollectionStore

console = Console()


def make_client(api_url: str) -> ManagerClient:
    return ManagerClient(base_url=api_url)


def _shorten(text: Optional[str], width: int) -> str:
    text = text or ""
    return text[:width] + "..." if len(text) > width else text


async def _load_store(api_url: str) -> CollectionStore:
    async with make_client(api_url) as client:
        store = CollectionStore(client)
        await store.load()
    return store


@click.group()
@click.option("--api-url", envvar="VIDEO_MANAGER_API_URL", default=None, help="Base URL of the API")
@click.pass_context
def cli(ctx, api_url: Optional[str]):
    """Video Manager CLI"""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url or settings.api_url


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, help="Port")
def serve(host: str, port: int):
    """Run the API server"""
    import uvicorn

    uvicorn.run("video_manager.main:app", host=host, port=port, log_level=get_settings().log_level.lower())


@cli.command()
@click.option("--database-url", default=None, help="Defaults to DATABASE_URL")
def migrate(database_url: Optional[str]):
    """Create tables, add missing columns and seed defaults"""
    from video_manager.database import DatabaseNotConfigured
    from video_manager.migrations import migrate as run

    try:
        asyncio.run(run(database_url))
    except DatabaseNotConfigured as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)
    console.print("[green]✓[/green] Database is up to date")


@cli.command()
@click.option("--output", "output_dir", default=".", type=click.Path(file_okay=False), help="Directory for the backup file")
@click.pass_context
def export(ctx, output_dir: str):
    """Export videos, links and categories to a JSON backup"""
    async def run():
        async with make_client(ctx.obj["api_url"]) as client:
            return await BackupService(client).write_backup(output_dir)

    try:
        path = asyncio.run(run())
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)
    console.print(f"[green]✓[/green] Exported to {path}")


@cli.command(name="import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--keep-categories", is_flag=True, help="Keep category assignments of imported items")
@click.pass_context
def import_backup(ctx, backup_file: str, keep_categories: bool):
    """Import a JSON backup, skipping items that already exist"""
    async def run():
        async with make_client(ctx.obj["api_url"]) as client:
            return await BackupService(client).import_file(backup_file, keep_categories=keep_categories)

    try:
        report = asyncio.run(run())
    except InvalidBackupError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    except ApiError as e:
        console.print(f"[red]Import stopped:[/red] {e.message}")
        raise SystemExit(1)

    table = Table(title="Import")
    table.add_column("Kind", style="cyan")
    table.add_column("Imported", style="green")
    table.add_column("Skipped", style="yellow")
    for kind in report.imported:
        table.add_row(kind.replace("_", " "), str(report.imported[kind]), str(report.skipped[kind]))
    console.print(table)
    console.print(f"{report.total_imported} imported, {report.total_skipped} skipped")


@cli.command()
@click.option("--platform", type=click.Choice([p.value for p in VideoPlatform if p != VideoPlatform.unknown]), help="Filter by platform")
@click.option("--search", default="", help="Search titles and tags")
@click.option("--category", default=None, help="Category id, or 'uncategorized'")
@click.option("--page", default=1, help="Page number")
@click.pass_context
def videos(ctx, platform: Optional[str], search: str, category: Optional[str], page: int):
    """List videos"""
    try:
        store = asyncio.run(_load_store(ctx.obj["api_url"]))
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)

    store.video_filter = FilterState(platform=VideoPlatform(platform) if platform else None, query=search, page=page)
    store.video_filter.selection.select(category)
    result = store.video_page()

    if not result.items:
        console.print("[yellow]No videos found[/yellow]")
        return

    names = {c.id: c.name for c in store.categories}
    table = Table(title=f"Videos ({result.total})")
    table.add_column("Title", style="white")
    table.add_column("Platform", style="magenta")
    table.add_column("Category", style="cyan")
    table.add_column("URL", style="blue")
    for video in result.items:
        table.add_row(
            _shorten(video.title, 50),
            platform_display_name(video.platform),
            names.get(video.category_id, "-"),
            _shorten(video.url, 50),
        )
    console.print(table)

    if result.total_pages > 1:
        pages = " ".join(
            f"[bold]{n}[/bold]" if n == result.page else str(n)
            for n in page_window(result.page, result.total_pages)
        )
        console.print(f"Page {pages} of {result.total_pages}")


@cli.command()
@click.option("--search", default="", help="Search titles, URLs and tags")
@click.option("--page", default=1, help="Page number")
@click.pass_context
def links(ctx, search: str, page: int):
    """List links"""
    try:
        store = asyncio.run(_load_store(ctx.obj["api_url"]))
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)

    store.link_filter = FilterState(query=search, page=page)
    result = store.link_page()

    if not result.items:
        console.print("[yellow]No links found[/yellow]")
        return

    table = Table(title=f"Links ({result.total})")
    table.add_column("Title", style="white")
    table.add_column("Tags", style="green")
    table.add_column("URL", style="blue")
    for link in result.items:
        table.add_row(_shorten(link.title, 50), ", ".join(link.tags), _shorten(link.url, 60))
    console.print(table)


@cli.command()
@click.pass_context
def categories(ctx):
    """Show both category trees with item counts"""
    try:
        store = asyncio.run(_load_store(ctx.obj["api_url"]))
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)

    for title, tree, count in (
        ("Video categories", store.categories, store.video_count),
        ("Link categories", store.link_categories, store.link_count),
    ):
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Items", style="green")
        table.add_column("ID", style="dim")
        table.add_row("All", str(count()), "")
        for parent in get_parent_categories(tree):
            table.add_row(parent.name, str(count(parent.id)), parent.id)
            for child in get_subcategories(tree, parent.id):
                table.add_row(f"  └ {child.name}", str(count(child.id)), child.id)
        table.add_row("Uncategorized", str(count("uncategorized")), "uncategorized")
        console.print(table)


@cli.command()
@click.argument("url")
@click.pass_context
def title(ctx, url: str):
    """Fetch the page title of a URL"""
    async def run():
        async with make_client(ctx.obj["api_url"]) as client:
            return await client.fetch_title(url)

    try:
        page_title = asyncio.run(run())
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)

    if page_title is None:
        console.print("[yellow]No title found[/yellow]")
        return
    console.print(page_title)


@cli.command()
@click.option("--name", "display_name", default=None, help="Display name")
@click.option("--slug", "public_slug", default=None, help="Public URL slug, '' clears it")
@click.option("--public/--private", "is_public", default=None, help="Share the collection")
@click.option("--share-videos/--hide-videos", default=None)
@click.option("--share-links/--hide-links", default=None)
@click.pass_context
def profile(ctx, **options):
    """Show or update the sharing profile"""
    changes = {key: value for key, value in options.items() if value is not None}

    async def run():
        async with make_client(ctx.obj["api_url"]) as client:
            if changes:
                return await client.update_profile(**changes)
            return await client.get_profile()

    try:
        result = asyncio.run(run())
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)

    table = Table(title="Profile")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Display name", result.display_name or "-")
    table.add_row("Public", "yes" if result.is_public else "no")
    table.add_row("Slug", result.public_slug or "-")
    table.add_row("Share videos", "yes" if result.share_videos else "no")
    table.add_row("Share links", "yes" if result.share_links else "no")
    console.print(table)


@cli.command()
@click.option("--username", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_context
def login(ctx, username: str, password: str):
    """Check the shared login and print a session token"""
    async def run():
        async with make_client(ctx.obj["api_url"]) as client:
            return await client.login(username, password)

    try:
        data = asyncio.run(run())
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)
    console.print(f"[green]✓[/green] Logged in as {data['username']}")
    console.print(f"  Token: {data['token']}")


if __name__ == "__main__":
    cli()
