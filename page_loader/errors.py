"""Error taxonomy for page downloads.

Every failure that aborts a download is one of the classes below. Each carries a
human-readable message and a fixed machine-readable ``code``.
"""

from __future__ import annotations

from typing import Optional


class PageLoaderError(Exception):
    """Base class for all errors surfaced by :func:`page_loader.download_page`."""

    code = "UNKNOWN"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidUrlError(PageLoaderError):
    code = "INVALID_URL"


class DnsError(PageLoaderError):
    code = "ENOTFOUND"


class ConnectRefusedError(PageLoaderError):
    code = "ECONNREFUSED"


class FetchTimeoutError(PageLoaderError):
    code = "ETIMEDOUT"


class HttpStatusError(PageLoaderError):
    code = "HTTP_STATUS"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class DirectoryNotWritableError(PageLoaderError):
    code = "EACCES"


class DirectoryNotFoundError(PageLoaderError):
    code = "ENOENT"


class NotADirectoryPathError(PageLoaderError):
    code = "ENOTDIR"


class UnknownError(PageLoaderError):
    code = "UNKNOWN"
