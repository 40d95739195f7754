"""Exception hierarchy for the catbox client."""

from __future__ import annotations

from pathlib import Path


class CatboxError(Exception):
    """Base exception for all catbox client errors."""

    pass


class ClientConstructionError(CatboxError):
    """Raised when the HTTP client cannot be built."""

    pass


class AuthenticationError(CatboxError):
    """Raised when a login is answered but the session is not logged in."""

    pass


class CredentialMissingError(CatboxError):
    """Raised when a username or password was not provided."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing {field}, set it with --{field} or CATBOX_{field.upper()}")
        self.field = field


class NetworkRequestError(CatboxError):
    """Raised when a request could not be sent or answered."""

    def __init__(self, endpoint: str, reason: str = "") -> None:
        message = f"Request to '{endpoint}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.endpoint = endpoint


class HttpStatusError(CatboxError):
    """Raised when the service answers with a non-2xx status."""

    def __init__(self, status_code: int, endpoint: str = "") -> None:
        super().__init__(f"Request returned error code {status_code}: '{endpoint}'")
        self.status_code = status_code
        self.endpoint = endpoint


class ResponseNotTextError(CatboxError):
    """Raised when a response body cannot be decoded as text."""

    pass


class FileReadError(CatboxError):
    """Raised when a local file cannot be opened or read."""

    def __init__(self, path: Path, reason: str = "") -> None:
        message = f"Failed to read file '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class InvalidSlugError(CatboxError):
    """Raised when a slug is not one of the user's uploaded files."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' can not be found in user profile")
        self.slug = slug


class ExtractionError(CatboxError):
    """Base exception for failures while reading values out of a page."""

    pass


class MissingContainerError(ExtractionError):
    """Raised when the element holding the wanted values is absent."""

    pass


class MissingNodeError(ExtractionError):
    """Raised when a node index does not resolve inside its document.

    Indices are only handed out by the document they belong to, so this
    marks a broken invariant rather than unexpected markup.
    """

    pass


class MissingChildrenError(ExtractionError):
    """Raised when a container has no child nodes."""

    pass


class MissingAttributeError(ExtractionError):
    """Raised when a tag carries none of the requested attributes."""

    pass


class InvalidEncodingError(ExtractionError):
    """Raised when an attribute value is not valid text."""

    pass


class UnparsableUrlError(ExtractionError):
    """Raised when a required value does not parse as an absolute URL."""

    pass


class MissingLabelError(ExtractionError):
    """Raised when no node carries the exact label text."""

    pass
