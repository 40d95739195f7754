"""Data models for the catbox client."""

import random
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from catbox_client.config import ALBUM_BASE_URL
from catbox_client.exceptions import CatboxError, UnparsableUrlError
from catbox_client.utils import parse_url, path_segment


@dataclass(frozen=True)
class Album:
    """A catbox album, identified by its canonical URL."""

    url: httpx.URL

    @classmethod
    def from_short(cls, short: str) -> "Album":
        """Expand a bare short code into the album's canonical URL."""
        return cls(parse_url(f"{ALBUM_BASE_URL}/{short}"))

    @property
    def short(self) -> str:
        """The short code, i.e. the path segment after ``/c/``.

        Raises:
            UnparsableUrlError: If the URL has no such segment
        """
        short = path_segment(self.url, 1)
        if short is None:
            raise UnparsableUrlError(f"Failed to parse a short from url: {self.url}")
        return short

    def __str__(self) -> str:
        return str(self.url)


@dataclass(frozen=True)
class AlbumFiles:
    """Files listed on an album's public page, in page order."""

    urls: list[httpx.URL] = field(default_factory=list)

    def random_file(self) -> str | None:
        """Pick one file URL at random, or None for an empty album."""
        if not self.urls:
            return None
        return str(random.choice(self.urls))

    def __len__(self) -> int:
        return len(self.urls)


@dataclass(frozen=True)
class UploadResult:
    """Result of a single file upload."""

    path: Path
    url: str | None = None
    error: CatboxError | None = None

    def __post_init__(self) -> None:
        """Validate upload result."""
        if self.url is None and self.error is None:
            raise ValueError("Upload result needs either a url or an error")
        if self.url is not None and self.error is not None:
            raise ValueError("Upload result can not have both a url and an error")

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UploadBatch:
    """Outcomes of a batch upload, in the order the uploads finished."""

    results: list[UploadResult]

    @property
    def failures(self) -> list[UploadResult]:
        return [result for result in self.results if not result.success]

    @property
    def urls(self) -> dict[Path, str]:
        """Remote URLs of the successful uploads, keyed by local path."""
        return {result.path: result.url for result in self.results if result.url is not None}

    @property
    def first_error(self) -> CatboxError | None:
        """The first failure encountered, or None if every upload succeeded."""
        for result in self.results:
            if result.error is not None:
                return result.error
        return None

    def raise_for_failures(self) -> None:
        """Raise the first failure encountered, if any."""
        error = self.first_error
        if error is not None:
            raise error

    def __len__(self) -> int:
        return len(self.results)
