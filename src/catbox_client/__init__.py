"""catbox client - Upload files to catbox.moe and manage albums."""

__version__ = "0.1.0"

from catbox_client.albums import AlbumResolver, extract_slug, fetch_album_files, normalize_album
from catbox_client.models import Album, AlbumFiles, UploadBatch, UploadResult
from catbox_client.session import CatboxSession
from catbox_client.uploader import FileUploader

__all__ = [
    "AlbumResolver",
    "extract_slug",
    "fetch_album_files",
    "normalize_album",
    "Album",
    "AlbumFiles",
    "UploadBatch",
    "UploadResult",
    "CatboxSession",
    "FileUploader",
]
