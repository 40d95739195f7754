"""URL helpers shared by the scraping and album code."""

import logging
from collections.abc import Iterable

import httpx

from catbox_client.exceptions import UnparsableUrlError

logger = logging.getLogger(__name__)


def parse_url(value: str) -> httpx.URL:
    """Parse a string as an absolute URL.

    Surrounding whitespace is ignored, as browsers do. Anything without a
    scheme and a host (relative paths, bare words) is rejected.

    Args:
        value: Text expected to hold a URL

    Returns:
        The parsed URL

    Raises:
        UnparsableUrlError: If the value is not an absolute URL
    """
    try:
        url = httpx.URL(value.strip())
    except (httpx.InvalidURL, TypeError) as e:
        raise UnparsableUrlError(f"Failed to parse '{value}' as a URL: {e}") from e

    if not url.scheme or not url.host:
        raise UnparsableUrlError(f"Failed to parse '{value}' as a URL: not absolute")
    return url


def collect_urls(values: Iterable[str]) -> list[httpx.URL]:
    """Parse every value as a URL, dropping the ones that do not parse."""
    urls: list[httpx.URL] = []
    for value in values:
        try:
            urls.append(parse_url(value))
        except UnparsableUrlError:
            logger.warning(f"Skipping unparsable URL: {value!r}")
    return urls


def path_segments(url: httpx.URL) -> list[str]:
    """Split the URL path into its segments, without the leading slash."""
    path = url.path
    if not path.startswith("/"):
        return []
    return path[1:].split("/")


def path_segment(url: httpx.URL, index: int) -> str | None:
    """Return one non-empty path segment of a URL, or None if absent."""
    segments = path_segments(url)
    if index >= len(segments) or not segments[index]:
        return None
    return segments[index]
