"""File uploader with concurrency control and progress reporting."""

import asyncio
import logging
import mimetypes
import os
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import BinaryIO, Protocol

from catbox_client.config import API_URL, DEFAULT_MAX_CONCURRENT_UPLOADS
from catbox_client.exceptions import CatboxError, FileReadError
from catbox_client.models import UploadBatch, UploadResult
from catbox_client.session import CatboxSession

logger = logging.getLogger(__name__)


class UploadProgress(Protocol):
    """Receives byte progress for every file being uploaded."""

    def start(self, path: Path, total: int) -> None: ...

    def advance(self, path: Path, delta: int) -> None: ...

    def finish(self, path: Path) -> None: ...


class NullProgress:
    """Progress sink that ignores every event."""

    def start(self, path: Path, total: int) -> None:
        pass

    def advance(self, path: Path, delta: int) -> None:
        pass

    def finish(self, path: Path) -> None:
        pass


class ProgressReader:
    """Binary file wrapper that reports every chunk httpx reads from it."""

    def __init__(self, file: BinaryIO, path: Path, progress: UploadProgress) -> None:
        self._file = file
        self._path = path
        self._progress = progress

    def read(self, size: int = -1) -> bytes:
        try:
            chunk = self._file.read(size)
        except OSError as e:
            raise FileReadError(self._path, str(e)) from e
        if chunk:
            self._progress.advance(self._path, len(chunk))
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def fileno(self) -> int:
        # httpx sizes the multipart body from fstat
        return self._file.fileno()


class FileUploader:
    """Uploads local files to catbox, a bounded number at a time."""

    def __init__(
        self,
        session: CatboxSession,
        max_concurrent_uploads: int = DEFAULT_MAX_CONCURRENT_UPLOADS,
        progress: UploadProgress | None = None,
    ) -> None:
        """Initialize file uploader.

        Args:
            session: Logged in session shared by all uploads
            max_concurrent_uploads: Maximum number of uploads in flight
            progress: Sink for per-file byte progress
        """
        if max_concurrent_uploads < 1:
            raise ValueError("max_concurrent_uploads must be at least 1")
        self.session = session
        self.max_concurrent_uploads = max_concurrent_uploads
        self.progress = progress or NullProgress()
        self._semaphore = asyncio.Semaphore(max_concurrent_uploads)

    async def upload_file(self, path: Path) -> str:
        """Upload a single file.

        Args:
            path: Local file to upload

        Returns:
            The remote URL, exactly as the service returned it

        Raises:
            FileReadError: If the file can not be opened or read
            NetworkRequestError: If the upload request fails
            HttpStatusError: If the service answers with an error status
            ResponseNotTextError: If the answer is not text
        """
        try:
            file = path.open("rb")
        except OSError as e:
            raise FileReadError(path, str(e)) from e

        with file:
            try:
                total_bytes = os.fstat(file.fileno()).st_size
            except OSError as e:
                raise FileReadError(path, str(e)) from e

            self.progress.start(path, total_bytes)
            try:
                user_hash = await self.session.user_hash.get()
                mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
                reader = ProgressReader(file, path, self.progress)
                try:
                    url = await self.session.post_multipart(
                        API_URL,
                        data={"reqtype": "fileupload", "userhash": user_hash},
                        files={"fileToUpload": (path.name, reader, mime_type)},
                    )
                except (ValueError, TypeError) as e:
                    # httpx rejects file names it can not encode into the form
                    raise FileReadError(path, f"can not be sent as a form file: {e}") from e
            finally:
                self.progress.finish(path)

        logger.info(f"Uploaded {path} ({total_bytes} bytes): {url}")
        return url

    async def iter_uploads(self, paths: Iterable[Path]) -> AsyncIterator[UploadResult]:
        """Upload files concurrently, yielding each result as it finishes.

        Results arrive in completion order, not input order; each one carries
        the path it was started with. A failed upload does not stop the
        others.
        """
        tasks = [
            asyncio.ensure_future(self._upload_file_with_semaphore(Path(path)))
            for path in paths
        ]
        try:
            for next_done in asyncio.as_completed(tasks):
                yield await next_done
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def upload_all(self, paths: Iterable[Path]) -> UploadBatch:
        """Upload files concurrently and collect every outcome.

        Args:
            paths: Local files to upload

        Returns:
            Per-file results in completion order
        """
        results = [result async for result in self.iter_uploads(paths)]
        batch = UploadBatch(results)
        if batch.failures:
            logger.warning(f"{len(batch.failures)} of {len(batch)} upload(s) failed")
        return batch

    async def _upload_file_with_semaphore(self, path: Path) -> UploadResult:
        async with self._semaphore:
            try:
                url = await self.upload_file(path)
            except CatboxError as e:
                logger.error(f"Failed to upload {path}: {e}")
                return UploadResult(path=path, error=e)
            except Exception as e:
                logger.error(f"Failed to upload {path}: {e}", exc_info=True)
                error = CatboxError(f"Unexpected error while uploading {path}: {e}")
                error.__cause__ = e
                return UploadResult(path=path, error=error)
            return UploadResult(path=path, url=url)
