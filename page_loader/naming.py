"""Deterministic mapping from URLs to file system safe names."""

from __future__ import annotations

import os
import re
from typing import List, Tuple
from urllib.parse import urlsplit

from .errors import InvalidUrlError
from .models import NameRole

PAGE_EXTENSION = ".html"
RESOURCES_DIR_SUFFIX = "_files"
ALLOWED_SCHEMES = frozenset({"http", "https"})

NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def _split_url(url: str) -> Tuple[str, List[str]]:
    """Return (host, path segments) or raise InvalidUrlError."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except (ValueError, AttributeError) as exc:
        raise InvalidUrlError(f"Invalid URL: {url!r}") from exc

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not host:
        raise InvalidUrlError(f"Invalid URL: {url!r}")

    segments = [seg for seg in parts.path.split("/") if seg]
    return host, segments


def _slug(parts: List[str]) -> str:
    """Join parts with hyphens, replacing every non-alphanumeric run."""
    return NON_ALNUM_RE.sub("-", "-".join(parts)).strip("-")


def generate_file_name(url: str, role: NameRole = NameRole.RESOURCE) -> str:
    """Build a file name for ``url``.

    Pages always end in ``.html``. Resources keep the extension of their last
    path segment verbatim, falling back to ``.html`` when there is none.

    Raises:
        InvalidUrlError: If ``url`` is not an absolute http(s) URL.
    """
    host, segments = _split_url(url)
    role = NameRole(role)

    extension = ""
    if segments:
        stem, ext = os.path.splitext(segments[-1])
        if ext and stem and (role is NameRole.RESOURCE or ext == PAGE_EXTENSION):
            extension = ext
            segments = segments[:-1] + [stem]

    base = _slug([host] + segments)

    if role is NameRole.PAGE:
        return base + PAGE_EXTENSION
    return base + (extension or PAGE_EXTENSION)


def page_base_name(url: str) -> str:
    """Return the page file name without its ``.html`` extension."""
    return generate_file_name(url, NameRole.PAGE)[: -len(PAGE_EXTENSION)]


def resources_dir_name(url: str) -> str:
    """Return the name of the directory holding a page's resources."""
    return page_base_name(url) + RESOURCES_DIR_SUFFIX
