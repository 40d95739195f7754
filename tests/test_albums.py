"""Tests for album lookups and edits."""

import httpx
import pytest
from urllib.parse import parse_qs
from unittest.mock import AsyncMock, patch
from pytest_httpx import HTTPXMock

from catbox_client.albums import (
    AlbumResolver,
    extract_slug,
    fetch_album_files,
    normalize_album,
    parse_album_files,
    parse_albums,
    parse_uploaded_files,
)
from catbox_client.config import ALBUM_VIEW_URL, API_URL, USER_VIEW_URL
from catbox_client.exceptions import (
    HttpStatusError,
    InvalidSlugError,
    MissingAttributeError,
    MissingChildrenError,
    MissingContainerError,
    UnparsableUrlError,
)
from catbox_client.models import Album
from catbox_client.session import CatboxSession


class TestNormalizeAlbum:
    """Test album identifier normalization."""

    def test_short_code(self) -> None:
        album = normalize_album("abc123")

        assert str(album.url) == "https://catbox.moe/c/abc123"
        assert album.short == "abc123"

    def test_round_trip(self) -> None:
        album = normalize_album("abc123")

        assert normalize_album(str(album.url)) == album

    def test_url_used_as_is(self) -> None:
        album = normalize_album("https://catbox.moe/c/hpxdlu")

        assert album.url == httpx.URL("https://catbox.moe/c/hpxdlu")
        assert album.short == "hpxdlu"

    def test_album_without_short(self) -> None:
        album = Album(httpx.URL("https://catbox.moe/"))

        with pytest.raises(UnparsableUrlError):
            album.short


class TestExtractSlug:
    """Test slug extraction."""

    def test_direct_file_url(self) -> None:
        assert extract_slug("https://files.catbox.moe/6r38xu.pdf") == "6r38xu.pdf"

    def test_recovers_slug_used_to_build_url(self) -> None:
        slug = "k2l9qa.png"

        assert extract_slug(f"https://files.catbox.moe/{slug}") == slug

    def test_slug_passes_through(self) -> None:
        assert extract_slug("6r38xu.pdf") == "6r38xu.pdf"

    def test_file_url_without_path(self) -> None:
        with pytest.raises(InvalidSlugError):
            extract_slug("https://files.catbox.moe/")


class TestPageParsing:
    """Test scraping of the individual pages."""

    def test_album_files_in_document_order(self, album_page: str) -> None:
        urls = parse_album_files(album_page)

        assert [str(url) for url in urls] == ["https://host/a.mp4", "https://host/b.jpg"]

    def test_album_files_href_fallback(self) -> None:
        html = (
            '<div class="imagecontainer"><a href="https://host/a.zip">a</a>'
            '<video src="https://host/b.mp4"></video><img src="broken"></div>'
        )

        assert [str(url) for url in parse_album_files(html)] == [
            "https://host/a.zip",
            "https://host/b.mp4",
        ]

    def test_album_without_container(self) -> None:
        with pytest.raises(MissingContainerError):
            parse_album_files("<html><body>Album not found</body></html>")

    def test_empty_album_container(self) -> None:
        with pytest.raises(MissingChildrenError):
            parse_album_files('<div class="imagecontainer"></div>')

    def test_album_child_without_link(self) -> None:
        with pytest.raises(MissingAttributeError):
            parse_album_files('<div class="imagecontainer"><span>caption</span></div>')

    def test_albums(self, albums_page: str) -> None:
        albums = parse_albums(albums_page)

        assert [album.short for album in albums] == ["hpxdlu", "q8w2zk"]

    def test_no_albums(self) -> None:
        assert parse_albums("<html><body></body></html>") == []

    def test_uploaded_files(self, files_page: str) -> None:
        urls = parse_uploaded_files(files_page)

        assert [str(url) for url in urls] == [
            "https://files.catbox.moe/6r38xu.pdf",
            "https://files.catbox.moe/k2l9qa.png",
        ]

    def test_uploaded_files_skip_target_without_href(self) -> None:
        html = (
            '<div id="results"><a target="_blank">placeholder</a>'
            '<a href="https://files.catbox.moe/6r38xu.pdf" target="_blank">6r38xu.pdf</a></div>'
        )

        urls = parse_uploaded_files(html)

        assert [str(url) for url in urls] == ["https://files.catbox.moe/6r38xu.pdf"]

    def test_uploaded_files_without_results(self) -> None:
        with pytest.raises(MissingContainerError):
            parse_uploaded_files("<html><body></body></html>")


@pytest.mark.asyncio
class TestAlbumRequests:
    """Test album operations against mocked pages."""

    async def test_fetch_album_files_anonymously(
        self, httpx_mock: HTTPXMock, album_page: str
    ) -> None:
        httpx_mock.add_response(url="https://catbox.moe/c/abc123", text=album_page)

        files = await fetch_album_files(normalize_album("abc123"))

        assert [str(url) for url in files.urls] == ["https://host/a.mp4", "https://host/b.jpg"]
        assert files.random_file() in {"https://host/a.mp4", "https://host/b.jpg"}

    async def test_fetch_albums(self, httpx_mock: HTTPXMock, albums_page: str) -> None:
        httpx_mock.add_response(url=ALBUM_VIEW_URL, text=albums_page)

        async with CatboxSession() as session:
            albums = await AlbumResolver(session).fetch_albums()

        assert albums == [normalize_album("hpxdlu"), normalize_album("q8w2zk")]

    async def test_fetch_uploaded_files(self, httpx_mock: HTTPXMock, files_page: str) -> None:
        httpx_mock.add_response(url=USER_VIEW_URL, text=files_page)

        async with CatboxSession() as session:
            files = await AlbumResolver(session).fetch_uploaded_files()

        assert [url.path for url in files] == ["/6r38xu.pdf", "/k2l9qa.png"]

    async def test_add_to_album(self, httpx_mock: HTTPXMock, files_page: str) -> None:
        httpx_mock.add_response(url=USER_VIEW_URL, text=files_page)
        httpx_mock.add_response(method="POST", url=API_URL, text="")

        async with CatboxSession() as session:
            with patch.object(session.user_hash, "get", AsyncMock(return_value="abc123")):
                await AlbumResolver(session).add_to_album(
                    normalize_album("hpxdlu"), "6r38xu.pdf"
                )

        request = httpx_mock.get_requests(method="POST", url=API_URL)[0]
        assert parse_qs(request.content.decode()) == {
            "reqtype": ["addtoalbum"],
            "userhash": ["abc123"],
            "short": ["hpxdlu"],
            "files": ["6r38xu.pdf"],
        }

    async def test_add_unknown_slug_writes_nothing(
        self, httpx_mock: HTTPXMock, files_page: str
    ) -> None:
        httpx_mock.add_response(url=USER_VIEW_URL, text=files_page)

        async with CatboxSession() as session:
            with pytest.raises(InvalidSlugError) as exc_info:
                await AlbumResolver(session).add_to_album(
                    normalize_album("hpxdlu"), "nothere.png"
                )

        assert exc_info.value.slug == "nothere.png"
        assert httpx_mock.get_requests(method="POST") == []

    async def test_add_to_album_error_status(
        self, httpx_mock: HTTPXMock, files_page: str
    ) -> None:
        httpx_mock.add_response(url=USER_VIEW_URL, text=files_page)
        httpx_mock.add_response(method="POST", url=API_URL, status_code=500)

        async with CatboxSession() as session:
            with patch.object(session.user_hash, "get", AsyncMock(return_value="abc123")):
                with pytest.raises(HttpStatusError) as exc_info:
                    await AlbumResolver(session).add_to_album(
                        normalize_album("hpxdlu"), "k2l9qa.png"
                    )

        assert exc_info.value.status_code == 500
