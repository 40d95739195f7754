"""Command-line interface for the catbox client."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from catbox_client.albums import AlbumResolver, extract_slug, fetch_album_files, normalize_album
from catbox_client.config import (
    DEFAULT_MAX_CONCURRENT_UPLOADS,
    PASSWORD_ENV,
    USERNAME_ENV,
    Credentials,
    resolve_credentials,
)
from catbox_client.exceptions import CatboxError
from catbox_client.models import Album, UploadBatch
from catbox_client.session import CatboxSession
from catbox_client.uploader import FileUploader
from catbox_client.utils import parse_url

app = typer.Typer(
    name="cbx",
    help="Upload files to catbox.moe and manage albums",
    add_completion=False,
)
file_app = typer.Typer(help="Control uploaded files", add_completion=False)
album_app = typer.Typer(help="Control your albums", add_completion=False)
app.add_typer(file_app, name="file")
app.add_typer(album_app, name="album")

console = Console()
logger = logging.getLogger(__name__)

USERNAME_OPTION = typer.Option(
    None,
    "--username",
    "-u",
    envvar=USERNAME_ENV,
    help=f"Account user name (or set {USERNAME_ENV} env var)",
)
PASSWORD_OPTION = typer.Option(
    None,
    "--password",
    "-p",
    envvar=PASSWORD_ENV,
    help=f"Account password (or set {PASSWORD_ENV} env var)",
)


def setup_logging(verbose: bool) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
        force=True,
    )


def print_error(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")


def require_credentials(username: str | None, password: str | None) -> Credentials:
    try:
        return resolve_credentials(username, password)
    except CatboxError as e:
        print_error(e)
        raise typer.Exit(1) from e


class RichUploadProgress:
    """Draws one transfer bar per file being uploaded."""

    def __init__(self, progress: Progress) -> None:
        self._progress = progress
        self._tasks: dict[Path, TaskID] = {}

    def start(self, path: Path, total: int) -> None:
        self._tasks[path] = self._progress.add_task(str(path), total=total)

    def advance(self, path: Path, delta: int) -> None:
        task = self._tasks.get(path)
        if task is not None:
            self._progress.advance(task, delta)

    def finish(self, path: Path) -> None:
        task = self._tasks.pop(path, None)
        if task is not None:
            self._progress.remove_task(task)


def upload_progress() -> Progress:
    return Progress(
        TextColumn("[magenta]{task.description}"),
        BarColumn(),
        DownloadColumn(binary_units=False),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    )


async def async_upload(
    paths: list[Path], credentials: Credentials, max_concurrent: int
) -> int:
    """Async upload implementation.

    Args:
        paths: Files to upload
        credentials: Account to upload to
        max_concurrent: Maximum concurrent uploads

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    results = []
    try:
        async with CatboxSession() as session:
            await session.login(credentials.username, credentials.password)

            with upload_progress() as progress:
                uploader = FileUploader(
                    session,
                    max_concurrent_uploads=max_concurrent,
                    progress=RichUploadProgress(progress),
                )
                async for result in uploader.iter_uploads(paths):
                    results.append(result)
                    if result.success:
                        progress.console.print(f"{result.path}: {result.url}", soft_wrap=True)
    except CatboxError as e:
        logger.error(f"Upload failed: {e}")
        print_error(e)
        return 1

    batch = UploadBatch(results)
    failed = len(batch.failures)

    console.print("\n[bold]Upload Summary:[/bold]")
    console.print(f"  Total files: {len(batch)}")
    console.print(f"  [green]Successful: {len(batch) - failed}[/green]")
    console.print(f"  [red]Failed: {failed}[/red]")

    if failed > 0:
        console.print("\n[bold red]Failed uploads:[/bold red]")
        for result in batch.failures:
            console.print(f"  - {result.path}: {escape(str(result.error))}", soft_wrap=True)
        return 1

    return 0


async def async_list_files(credentials: Credentials) -> int:
    async with CatboxSession() as session:
        await session.login(credentials.username, credentials.password)
        files = await AlbumResolver(session).fetch_uploaded_files()

    for i, url in enumerate(files, start=1):
        console.print(f"File {i}: {url}", soft_wrap=True)
    return 0


async def async_fetch_album(url: str | None, short: str | None) -> int:
    album = Album(parse_url(url)) if url is not None else Album.from_short(short)
    files = await fetch_album_files(album)

    # Listings print in reverse page order
    for i, file_url in enumerate(reversed(files.urls), start=1):
        console.print(f"File {i}: {file_url}", soft_wrap=True)
    return 0


async def async_list_albums(credentials: Credentials) -> int:
    async with CatboxSession() as session:
        await session.login(credentials.username, credentials.password)
        albums = await AlbumResolver(session).fetch_albums()

    for i, album in enumerate(reversed(albums), start=1):
        console.print(f"Album {i}: {album}", soft_wrap=True)
    return 0


async def async_add_to_album(credentials: Credentials, album_id: str, file_id: str) -> int:
    album = normalize_album(album_id)
    slug = extract_slug(file_id)

    async with CatboxSession() as session:
        await session.login(credentials.username, credentials.password)
        await AlbumResolver(session).add_to_album(album, slug)

    console.print(f"[green]Added {escape(slug)} to {album}[/green]", soft_wrap=True)
    return 0


def run(coroutine) -> None:
    """Run a command coroutine and exit with its code."""
    try:
        exit_code = asyncio.run(coroutine)
    except CatboxError as e:
        print_error(e)
        raise typer.Exit(1) from e
    raise typer.Exit(exit_code)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Upload files to catbox.moe and manage albums."""
    setup_logging(verbose)


@file_app.command("upload")
def upload(
    paths: list[Path] = typer.Argument(
        ...,
        help="Files to upload",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    username: str = USERNAME_OPTION,
    password: str = PASSWORD_OPTION,
    max_concurrent: int = typer.Option(
        DEFAULT_MAX_CONCURRENT_UPLOADS,
        "--max-concurrent",
        "-c",
        min=1,
        max=50,
        help="Maximum number of concurrent uploads",
    ),
) -> None:
    """Upload files and print their URLs as they finish."""
    credentials = require_credentials(username, password)
    run(async_upload(paths, credentials, max_concurrent))


@file_app.command("list")
def list_files(
    username: str = USERNAME_OPTION,
    password: str = PASSWORD_OPTION,
) -> None:
    """List the files uploaded to your account."""
    credentials = require_credentials(username, password)
    run(async_list_files(credentials))


@album_app.command("fetch-files")
def fetch_files(
    url: str = typer.Option(None, "--url", help="The url of said album"),
    short: str = typer.Option(None, "--short", help="The short of said album (the last part of its url)"),
) -> None:
    """Fetch the files of a public album."""
    if url is None and short is None:
        console.print("[red]Error: you must provide a url or a short![/red]")
        raise typer.Exit(1)
    if url is not None and short is not None:
        console.print("[red]Error: you can't provide both url and short![/red]")
        raise typer.Exit(1)

    run(async_fetch_album(url, short))


@album_app.command("list")
def list_albums(
    username: str = USERNAME_OPTION,
    password: str = PASSWORD_OPTION,
) -> None:
    """List the albums of your account."""
    credentials = require_credentials(username, password)
    run(async_list_albums(credentials))


@album_app.command("add")
def add(
    album: str = typer.Argument(..., help="Album url or short"),
    file: str = typer.Argument(..., help="Uploaded file url or slug"),
    username: str = USERNAME_OPTION,
    password: str = PASSWORD_OPTION,
) -> None:
    """Add one of your uploaded files to an album."""
    credentials = require_credentials(username, password)
    run(async_add_to_album(credentials, album, file))


if __name__ == "__main__":
    app()
