"""page-loader: download a web page together with its same-origin resources."""

from .config import Settings, get_settings
from .errors import (
    ConnectRefusedError,
    DirectoryNotFoundError,
    DirectoryNotWritableError,
    DnsError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NotADirectoryPathError,
    PageLoaderError,
    UnknownError,
)
from .loader import PageLoader, download_page
from .models import PageResult
from .naming import generate_file_name
from .origin import is_local

__all__ = [
    "Settings",
    "get_settings",
    "PageLoader",
    "download_page",
    "PageResult",
    "generate_file_name",
    "is_local",
    "PageLoaderError",
    "InvalidUrlError",
    "DnsError",
    "ConnectRefusedError",
    "FetchTimeoutError",
    "HttpStatusError",
    "DirectoryNotWritableError",
    "DirectoryNotFoundError",
    "NotADirectoryPathError",
    "UnknownError",
]
