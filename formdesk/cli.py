"""
Command-line interface for formdesk.

Provides commands to log in, load and refresh submissions, inspect the
cache, export CSV, and manage blog posts.

Usage:
    formdesk login             # Authenticate and load submissions
    formdesk dashboard         # Summary counts by organization
    formdesk submissions       # List/filter/export submissions
    formdesk refresh           # Force a fresh fetch from every source
    formdesk cache-info        # Show cache age and freshness
    formdesk training          # Show training form submissions
    formdesk blogs list        # List blog posts
    formdesk blogs create      # Publish a post (optionally with a thumbnail)
    formdesk blogs update ID   # Edit a post
    formdesk logout            # End the session
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

import click

from formdesk.auth.credentials import CredentialDirectory
from formdesk.auth.login import login as login_flow
from formdesk.auth.session import SessionManager
from formdesk.config.settings import Settings, get_settings
from formdesk.observability.logging import bind_context, clear_context, setup_logging
from formdesk.services.data_service import DataService, LoadResult
from formdesk.services.factory import create_data_service
from formdesk.storage.kv import KeyValueStore, open_store


T = TypeVar("T")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """Formdesk - form submission admin toolkit."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()
    clear_context()
    bind_context(command=ctx.invoked_subcommand)


def _sessions(settings: Settings, store: KeyValueStore) -> SessionManager:
    return SessionManager(store, ttl_minutes=settings.session_ttl_minutes)


def _run_authenticated(body: Callable[[Settings, KeyValueStore], Awaitable[T]]) -> T:
    """Run ``body`` inside an open store after checking and touching the session."""
    settings = get_settings()

    async def run() -> T:
        async with open_store(settings) as store:
            sessions = _sessions(settings, store)
            if not await sessions.is_valid():
                await sessions.clear()
                click.echo(
                    click.style("Not logged in or session expired. Run `formdesk login`.", fg="red")
                )
                sys.exit(1)

            session = await sessions.get()
            if session is not None:
                bind_context(session_id=session.id)
            await sessions.touch()
            return await body(settings, store)

    return asyncio.run(run())


def _print_load_status(result: LoadResult) -> None:
    updated = result.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    click.echo(f"Last updated: {updated}")
    if result.is_cached:
        click.echo(click.style("Showing cached data - refreshing in background...", fg="yellow"))
    if result.is_warning:
        click.echo(click.style(f"Warning: {result.error}", fg="yellow"))


def _exit_if_fatal(result: LoadResult) -> None:
    if result.is_fatal:
        click.echo(click.style(f"Error: {result.error}", fg="red"))
        sys.exit(1)


async def _await_background_refresh(service: DataService) -> LoadResult | None:
    """Let a detached refresh finish before the event loop closes."""
    refreshed = await service.wait_for_refresh()
    if refreshed is not None and refreshed.ok:
        click.echo(
            click.style(
                f"Background refresh complete: {len(refreshed.data)} submissions", fg="green"
            )
        )
    elif refreshed is not None:
        click.echo(click.style(f"Background refresh failed: {refreshed.error}", fg="yellow"))
    return refreshed


@main.command()
@click.option("--username", prompt=True, help="Admin username")
@click.option("--password", prompt=True, hide_input=True, help="Admin password")
def login(username: str, password: str) -> None:
    """Log in and load submissions (cached data is used when fresh)."""
    settings = get_settings()

    async def run() -> None:
        async with open_store(settings) as store:
            service = create_data_service(settings, store)
            result = await login_flow(
                username,
                password,
                credentials=CredentialDirectory.from_json(settings.admin_users_file),
                sessions=_sessions(settings, store),
                data_service=service,
            )

            if not result.success:
                click.echo(click.style(result.message or "Login failed", fg="red"))
                sys.exit(1)

            click.echo(click.style(f"Logged in as {username}", fg="green"))
            if result.message:
                click.echo(click.style(result.message, fg="yellow"))
            if result.load is not None:
                click.echo(f"Loaded {len(result.load.data)} submissions")
            await _await_background_refresh(service)

    asyncio.run(run())


@main.command()
def logout() -> None:
    """End the admin session."""
    settings = get_settings()

    async def run() -> None:
        async with open_store(settings) as store:
            await _sessions(settings, store).clear()

    asyncio.run(run())
    click.echo("Logged out")


@main.command()
def refresh() -> None:
    """Fetch fresh data from every source, bypassing the cache."""

    async def body(settings: Settings, store: KeyValueStore) -> None:
        service = create_data_service(settings, store)
        result = await service.fetch_fresh()
        _exit_if_fatal(result)
        _print_load_status(result)
        click.echo(f"Submissions: {len(result.data)}")

    _run_authenticated(body)


@main.command()
def dashboard() -> None:
    """Show submission counts and a per-organization breakdown."""
    from formdesk.reports.dashboard import summarize

    async def body(settings: Settings, store: KeyValueStore) -> None:
        service = create_data_service(settings, store)
        result = await service.initialize()
        _exit_if_fatal(result)
        _print_load_status(result)

        summary = summarize(result.data)
        click.echo("\nSubmission Dashboard")
        click.echo("-" * 40)
        for label, value in summary.stats():
            click.echo(f"  {label}: {value}")
        click.echo("-" * 40)
        for group in summary.by_organization:
            click.echo(f"  {group.name} ({group.url}): {len(group.submissions)}")

        await _await_background_refresh(service)

    _run_authenticated(body)


@main.command()
@click.option("--search", default="", help="Search name, email, subject, website or company")
@click.option(
    "--type",
    "type_filter",
    type=click.Choice(["all", "contact", "subscription"]),
    default="all",
    help="Filter by submission type",
)
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=True, path_type=Path),
    default=None,
    help="Write matching submissions to CSV (file or directory)",
)
def submissions(search: str, type_filter: str, export_path: Path | None) -> None:
    """List submissions, optionally filtered and exported to CSV."""
    from formdesk.reports.export import (
        export_csv,
        export_filename,
        filter_submissions,
        format_submitted_at,
        source_website,
    )

    async def body(settings: Settings, store: KeyValueStore) -> None:
        service = create_data_service(settings, store)
        result = await service.initialize()
        _exit_if_fatal(result)
        _print_load_status(result)

        matched = filter_submissions(result.data, search=search, type_filter=type_filter)
        noun = "entry" if len(matched) == 1 else "entries"
        click.echo(f"{len(matched)} {noun}")

        for s in matched:
            click.echo(
                f"  #{s.id} [{s.type}] {s.name} <{s.email}> | {s.subject} | "
                f"{source_website(s.source_site)} | {format_submitted_at(s.submitted_at)}"
            )
        if not matched:
            click.echo("  No submissions found. Try adjusting your search or filter criteria.")

        if export_path is not None:
            target = export_path / export_filename() if export_path.is_dir() else export_path
            target.write_text(export_csv(matched), encoding="utf-8")
            click.echo(click.style(f"Exported {len(matched)} rows to {target}", fg="green"))

        await _await_background_refresh(service)

    _run_authenticated(body)


@main.command("cache-info")
def cache_info() -> None:
    """Show what the submissions cache holds and whether it is fresh."""

    async def body(settings: Settings, store: KeyValueStore) -> None:
        cache = create_data_service(settings, store).cache
        entry = await cache.read_any()
        if entry is None:
            click.echo("Cache is empty")
            return

        captured = datetime.fromtimestamp(entry.timestamp / 1000, tz=timezone.utc)
        age_seconds = (cache.now_ms() - entry.timestamp) / 1000
        fresh = cache.is_fresh(entry)
        click.echo(f"Key: {cache.key}")
        click.echo(f"Captured: {captured.astimezone():%Y-%m-%d %H:%M:%S}")
        click.echo(f"Age: {age_seconds:.0f}s")
        click.echo(f"Submissions: {len(entry.data)}")
        click.echo(click.style(f"Fresh: {fresh}", fg="green" if fresh else "yellow"))

    _run_authenticated(body)


@main.command()
def training() -> None:
    """Show training form submissions."""
    from formdesk.ingestion.http_client import HTTPClient
    from formdesk.ingestion.training import TrainingFormError, fetch_training_sheet

    async def body(settings: Settings, store: KeyValueStore) -> None:
        try:
            async with HTTPClient.from_settings(settings) as http:
                sheet = await fetch_training_sheet(
                    http, settings.training_form_url, settings.training_form_sheet
                )
        except TrainingFormError as e:
            click.echo(click.style(f"Error: {e}", fg="red"))
            sys.exit(1)

        if not sheet.header:
            click.echo("No submissions available")
            return

        click.echo(f"Showing {sheet.submission_count} submissions")
        click.echo(" | ".join(sheet.header))
        for row in sheet.display_rows():
            click.echo(" | ".join(row))
        if not sheet.rows:
            click.echo("No training submissions found")

    _run_authenticated(body)


@main.group()
def blogs() -> None:
    """Manage blog posts."""


def _run_blog_action(action: Callable[[Any], Awaitable[T]]) -> T:
    from formdesk.blogs.client import BlogClient, BlogClientError
    from formdesk.ingestion.http_client import HTTPClient

    async def body(settings: Settings, store: KeyValueStore) -> T:
        try:
            async with HTTPClient.from_settings(settings) as http:
                return await action(BlogClient(settings.blog_api_url, http))
        except (BlogClientError, ValueError) as e:
            click.echo(click.style(f"Error: {e}", fg="red"))
            sys.exit(1)

    return _run_authenticated(body)


@blogs.command("list")
def blogs_list() -> None:
    """List published blog posts."""

    async def action(client: Any) -> None:
        posts = await client.list_posts()
        if not posts:
            click.echo("No blog posts")
        for post in posts:
            click.echo(f"  {post.id}: {post.title} by {post.author or 'Unknown'}")

    _run_blog_action(action)


@blogs.command("delete")
@click.argument("post_id")
@click.confirmation_option(prompt="Are you sure you want to delete this blog post?")
def blogs_delete(post_id: str) -> None:
    """Delete a blog post by id."""

    async def action(client: Any) -> None:
        await client.delete_post(post_id)
        click.echo(click.style("Blog deleted successfully!", fg="green"))

    _run_blog_action(action)


def _post_options(required: bool) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Options shared by ``blogs create`` and ``blogs update``."""

    def decorate(command: Callable[..., Any]) -> Callable[..., Any]:
        options = [
            click.option("--title", required=required, default=None, help="Post title"),
            click.option("--author", required=required, default=None, help="Post author"),
            click.option("--content", default=None, help="Markdown body"),
            click.option(
                "--content-file",
                type=click.Path(exists=True, dir_okay=False, path_type=Path),
                default=None,
                help="Read the markdown body from a file",
            ),
            click.option(
                "--thumbnail",
                type=click.Path(exists=True, dir_okay=False, path_type=Path),
                default=None,
                help="Thumbnail image; a 150x150 JPEG copy is uploaded alongside",
            ),
        ]
        for option in reversed(options):
            command = option(command)
        return command

    return decorate


def _read_content(content: str | None, content_file: Path | None) -> str | None:
    if content is not None and content_file is not None:
        raise click.UsageError("Use either --content or --content-file, not both")
    if content_file is not None:
        return content_file.read_text(encoding="utf-8")
    return content


async def _thumbnail_urls(client: Any, thumbnail: Path | None) -> tuple[str, str] | None:
    if thumbnail is None:
        return None
    click.echo(f"Uploading {thumbnail.name}...")
    return await client.upload_thumbnail(thumbnail.read_bytes(), thumbnail.name)


@blogs.command("create")
@_post_options(required=True)
def blogs_create(
    title: str,
    author: str,
    content: str | None,
    content_file: Path | None,
    thumbnail: Path | None,
) -> None:
    """Publish a new blog post."""
    from formdesk.blogs.schemas import BlogDraft

    body = _read_content(content, content_file) or ""

    async def action(client: Any) -> None:
        urls = await _thumbnail_urls(client, thumbnail)
        thumbnail_url, thumbnail_small_url = urls or ("", "")
        await client.create_post(
            BlogDraft(
                title=title,
                author=author,
                content=body,
                thumbnail_url=thumbnail_url,
                thumbnail_small_url=thumbnail_small_url,
            )
        )
        click.echo(click.style("Blog created successfully!", fg="green"))

    _run_blog_action(action)


@blogs.command("update")
@click.argument("post_id")
@_post_options(required=False)
def blogs_update(
    post_id: str,
    title: str | None,
    author: str | None,
    content: str | None,
    content_file: Path | None,
    thumbnail: Path | None,
) -> None:
    """Edit a blog post; options left out keep their current values."""
    from formdesk.blogs.schemas import BlogDraft

    body = _read_content(content, content_file)

    async def action(client: Any) -> None:
        current = await client.get_post(post_id)
        urls = await _thumbnail_urls(client, thumbnail)
        thumbnail_url, thumbnail_small_url = urls or (
            current.thumbnail_url,
            current.thumbnail_small_url,
        )
        await client.update_post(
            post_id,
            BlogDraft(
                title=title if title is not None else current.title,
                author=author if author is not None else current.author,
                content=body if body is not None else current.content,
                thumbnail_url=thumbnail_url,
                thumbnail_small_url=thumbnail_small_url,
            ),
        )
        click.echo(click.style("Blog updated successfully!", fg="green"))

    _run_blog_action(action)


if __name__ == "__main__":
    main()
