"""Authenticated catbox session using httpx for async HTTP calls."""

import logging
from typing import Any

import httpx

from catbox_client.config import LOGIN_URL, REQUEST_TIMEOUT
from catbox_client.exceptions import (
    AuthenticationError,
    ClientConstructionError,
    HttpStatusError,
    MissingContainerError,
    MissingLabelError,
    NetworkRequestError,
    ResponseNotTextError,
)
from catbox_client.user_hash import UserHashCache

logger = logging.getLogger(__name__)

# catbox serves its management pages to browsers only
SPOOF_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


def create_spoof_client(cookies: httpx.Cookies | None = None) -> httpx.AsyncClient:
    """Build an httpx client that looks like a desktop browser.

    Args:
        cookies: Cookie jar to share, a fresh one is used when omitted

    Returns:
        The configured client

    Raises:
        ClientConstructionError: If httpx rejects the configuration
    """
    try:
        return httpx.AsyncClient(
            headers=SPOOF_HEADERS,
            cookies=cookies,
            follow_redirects=True,
            timeout=REQUEST_TIMEOUT,
            trust_env=False,
        )
    except (TypeError, ValueError, httpx.HTTPError) as e:
        raise ClientConstructionError(f"Failed to create http client: {e}") from e


class CatboxSession:
    """One HTTP client and cookie jar, optionally logged in to catbox.

    Use as an async context manager. A client passed in by the caller is
    left open on exit; one created by the session is closed.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the session.

        Args:
            client: Pre-configured client to use instead of a spoofed one
        """
        self._client = client
        self._owns_client = client is None
        self.user_hash = UserHashCache(self)

    async def __aenter__(self) -> "CatboxSession":
        """Async context manager entry."""
        if self._client is None:
            self._client = create_spoof_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the httpx AsyncClient instance.

        Raises:
            RuntimeError: If the session is used outside of async context manager
        """
        if self._client is None:
            raise RuntimeError("Session must be used within async context manager")
        return self._client

    async def login(self, username: str, password: str) -> None:
        """Log in and confirm the session is authenticated.

        catbox answers the login form with a success status whether or not
        the credentials were right, so the session also has to see the user
        hash on the account page, which is only shown to logged in users.

        Raises:
            AuthenticationError: If the account page does not show a user hash
            NetworkRequestError: If the login request fails
            HttpStatusError: If the login request returns an error status
        """
        await self._send(
            "POST", LOGIN_URL, data={"username": username, "password": password}
        )

        try:
            await self.user_hash.get()
        except (MissingContainerError, MissingLabelError) as e:
            raise AuthenticationError(f"Login as '{username}' was not accepted") from e

        logger.info(f"Logged in as '{username}'")

    async def fetch_text(self, url: str) -> str:
        """GET a page and return its body as text."""
        response = await self._send("GET", url)
        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return self._decode_text(response)

    async def post_form(self, url: str, data: dict[str, str]) -> str:
        """POST url-encoded form fields and return the body as text."""
        response = await self._send("POST", url, data=data)
        return self._decode_text(response)

    async def post_multipart(
        self, url: str, data: dict[str, str], files: dict[str, Any]
    ) -> str:
        """POST a multipart body and return the response body as text.

        Args:
            url: Endpoint to post to
            data: Plain text parts
            files: File parts, as accepted by httpx

        Returns:
            Decoded response body
        """
        response = await self._send("POST", url, data=data, files=files)
        return self._decode_text(response)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and require a 2xx answer.

        Raises:
            NetworkRequestError: If the request could not be completed
            HttpStatusError: If the response status is not 2xx
        """
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise NetworkRequestError(url, str(e)) from e

        if not response.is_success:
            raise HttpStatusError(response.status_code, url)
        return response

    @staticmethod
    def _decode_text(response: httpx.Response) -> str:
        """Decode a response body strictly in its declared charset.

        Raises:
            ResponseNotTextError: If the body is not text in that charset
        """
        encoding = response.encoding or "utf-8"
        try:
            return response.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise ResponseNotTextError(
                f"Response from '{response.request.url}' is not {encoding} text"
            ) from e
