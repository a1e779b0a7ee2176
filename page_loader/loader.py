"""Download a page with its local resources and save it to disk.

Steps run strictly in order: validate input, check the output directory,
fetch the page, scan it for resources, fetch the resources concurrently,
rewrite the markup and persist it. A failure in any step other than the
resource fetch aborts the run with a :class:`PageLoaderError`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

import httpx

from .assembler import rewrite
from .config import Settings, get_settings
from .errors import (
    DirectoryNotFoundError,
    DirectoryNotWritableError,
    NotADirectoryPathError,
    UnknownError,
)
from .fetcher import fetch_all, fetch_page, make_client, make_progress
from .models import DownloadOutcome, NameRole, PageRequest, PageResult
from .naming import generate_file_name, resources_dir_name
from .scanner import parse_markup, scan

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def check_output_directory(path: Path) -> None:
    """Ensure ``path`` is an existing, writable directory."""
    if not path.exists():
        raise DirectoryNotFoundError(f"Output directory does not exist: {path}")
    if not path.is_dir():
        raise NotADirectoryPathError(f"Output path is not a directory: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        raise DirectoryNotWritableError(f"Output directory is not writable: {path}")


def _failed_urls(outcomes: Sequence[DownloadOutcome]) -> List[str]:
    failed: List[str] = []
    for outcome in outcomes:
        url = outcome.reference.absolute_url
        if not outcome.is_success and url not in failed:
            failed.append(url)
    return failed


class PageLoader:
    """Downloads pages using one fixed configuration.

    Args:
        settings: Loader settings. Loaded from the environment if omitted.
        verbose: Log per-resource progress at INFO instead of DEBUG.
            Defaults to ``settings.verbose``.
        show_progress: Show a live progress display while resources download.
            Defaults to ``settings.show_progress``.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        verbose: Optional[bool] = None,
        show_progress: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.verbose = self.settings.verbose if verbose is None else verbose
        self.show_progress = (
            self.settings.show_progress if show_progress is None else show_progress
        )
        self._transport = transport

    @property
    def progress_level(self) -> int:
        return logging.INFO if self.verbose else logging.DEBUG

    async def download(
        self, url: str, output_directory: Optional[PathLike] = None
    ) -> PageResult:
        """Download ``url`` into ``output_directory`` (default: current directory).

        Raises:
            PageLoaderError: If the URL is invalid, the output directory is
                unusable or the page itself cannot be fetched.
        """
        page_file_name = generate_file_name(url, NameRole.PAGE)
        request = PageRequest(
            source_url=url,
            output_directory=Path(output_directory) if output_directory else Path.cwd(),
        )
        out_dir = request.output_directory

        check_output_directory(out_dir)

        dir_name = resources_dir_name(url)
        resources_dir = out_dir / dir_name
        html_path = out_dir / page_file_name

        try:
            async with make_client(self.settings, self._transport) as client:
                markup = await fetch_page(client, request.source_url, settings=self.settings)

                tree = parse_markup(markup)
                references = scan(tree, request.source_url, dir_name)
                resources_dir.mkdir(parents=True, exist_ok=True)
                logger.log(
                    self.progress_level,
                    "Downloading %d resource(s) into %s",
                    len(references),
                    resources_dir,
                )

                progress = make_progress() if self.show_progress and references else None
                with progress or contextlib.nullcontext():
                    outcomes = await fetch_all(
                        client,
                        references,
                        resources_dir,
                        max_concurrency=self.settings.max_concurrency,
                        log_level=self.progress_level,
                        progress=progress,
                    )

            html = rewrite(tree, outcomes)
            html_path.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise UnknownError(str(exc)) from exc

        logger.info("Saved page: %s", html_path)
        return PageResult(
            html_path=html_path,
            resources_directory=resources_dir,
            failed_resources=_failed_urls(outcomes),
        )


def download_page(
    url: str,
    output_directory: Optional[PathLike] = None,
    *,
    settings: Optional[Settings] = None,
    verbose: Optional[bool] = None,
    show_progress: Optional[bool] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PageResult:
    """Synchronous wrapper around :meth:`PageLoader.download`."""
    loader = PageLoader(
        settings, verbose=verbose, show_progress=show_progress, transport=transport
    )
    return asyncio.run(loader.download(url, output_directory))
