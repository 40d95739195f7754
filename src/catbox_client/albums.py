"""Album lookups and album edits scraped from catbox pages."""

import logging

import httpx

from catbox_client.config import (
    ALBUM_HOST_MARKER,
    ALBUM_VIEW_URL,
    API_URL,
    FILE_HOST_MARKER,
    USER_VIEW_URL,
)
from catbox_client.exceptions import InvalidSlugError
from catbox_client.extractor import (
    ByClass,
    ById,
    Document,
    collect_attribute_values,
    find_container,
    inner_text,
    require_children,
    require_node,
    select_all,
    tags,
)
from catbox_client.models import Album, AlbumFiles
from catbox_client.session import CatboxSession
from catbox_client.utils import collect_urls, parse_url, path_segment

logger = logging.getLogger(__name__)

ALBUM_FILES_CONTAINER = ByClass("imagecontainer")
UPLOADED_FILES_CONTAINER = ById("results")
ALBUM_LINK_SELECTOR = "span.textHolder"


def normalize_album(identifier: str) -> Album:
    """Turn an album URL or a bare short code into an album.

    Raises:
        UnparsableUrlError: If a URL-looking identifier does not parse
    """
    if ALBUM_HOST_MARKER in identifier:
        return Album(parse_url(identifier))
    return Album.from_short(identifier)


def extract_slug(identifier: str) -> str:
    """Turn a direct file URL or a slug into a slug.

    ``https://files.catbox.moe/6r38xu.pdf`` gives ``6r38xu.pdf``; anything
    not on the file host is taken to be a slug already.

    Raises:
        UnparsableUrlError: If a file URL does not parse
        InvalidSlugError: If a file URL has an empty path
    """
    if FILE_HOST_MARKER not in identifier:
        return identifier

    slug = path_segment(parse_url(identifier), 0)
    if slug is None:
        raise InvalidSlugError(identifier)
    return slug


def parse_album_files(html: str) -> list[httpx.URL]:
    """Read the file URLs from a public album page, in page order."""
    doc = Document.parse(html)
    container = require_node(doc, find_container(doc, ALBUM_FILES_CONTAINER))
    children = tags(doc, require_children(doc, container))
    return collect_urls(collect_attribute_values(children, ["src", "href"]))


def parse_albums(html: str) -> list[Album]:
    """Read the album links from the album management page."""
    doc = Document.parse(html)
    texts = (inner_text(element) for element in select_all(doc, ALBUM_LINK_SELECTOR))
    return [Album(url) for url in collect_urls(texts)]


def parse_uploaded_files(html: str) -> list[httpx.URL]:
    """Read the file links from the user's file view page."""
    doc = Document.parse(html)
    container = require_node(doc, find_container(doc, UPLOADED_FILES_CONTAINER))
    # Only the file rows open in a new tab; pager links and empty anchors are skipped
    links = [
        tag
        for tag in tags(doc, require_children(doc, container))
        if tag.has_attr("target") and tag.has_attr("href")
    ]
    return collect_urls(collect_attribute_values(links, ["href"]))


async def fetch_album_files(album: Album, session: CatboxSession | None = None) -> AlbumFiles:
    """Fetch the files of a public album.

    No login is needed; an anonymous session is opened when none is given.

    Args:
        album: Album to list
        session: Session to reuse instead of an anonymous one

    Returns:
        The album's file URLs in page order
    """
    if session is None:
        async with CatboxSession() as anonymous:
            return await fetch_album_files(album, anonymous)

    html = await session.fetch_text(str(album.url))
    files = AlbumFiles(parse_album_files(html))
    logger.debug(f"Album {album.url} lists {len(files)} file(s)")
    return files


class AlbumResolver:
    """Album operations that need a logged in session."""

    def __init__(self, session: CatboxSession) -> None:
        self.session = session

    async def fetch_albums(self) -> list[Album]:
        """List the albums created by the logged in user."""
        html = await self.session.fetch_text(ALBUM_VIEW_URL)
        albums = parse_albums(html)
        logger.debug(f"Found {len(albums)} album(s)")
        return albums

    async def fetch_uploaded_files(self) -> list[httpx.URL]:
        """List the files uploaded by the logged in user."""
        html = await self.session.fetch_text(USER_VIEW_URL)
        files = parse_uploaded_files(html)
        logger.debug(f"Found {len(files)} uploaded file(s)")
        return files

    async def add_to_album(self, album: Album, slug: str) -> None:
        """Add one of the user's uploaded files to an album.

        The slug is checked against the user's uploaded files first; nothing
        is written when it is not among them.

        Args:
            album: Album to add to
            slug: File name part of the uploaded file's URL

        Raises:
            UnparsableUrlError: If the album URL has no short code
            InvalidSlugError: If the slug is not one of the user's files
        """
        short = album.short

        uploaded = await self.fetch_uploaded_files()
        if not any(url.path[1:] == slug for url in uploaded):
            raise InvalidSlugError(slug)

        user_hash = await self.session.user_hash.get()
        await self.session.post_form(
            API_URL,
            data={
                "reqtype": "addtoalbum",
                "userhash": user_hash,
                "short": short,
                "files": slug,
            },
        )
        logger.info(f"Added {slug} to album {short}")
