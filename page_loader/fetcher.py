"""Concurrent HTTP fetching of a page and its resources."""

from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
import socket
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import httpx
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import Settings
from .errors import (
    ConnectRefusedError,
    DnsError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    PageLoaderError,
    UnknownError,
)
from .models import DownloadOutcome, OutcomeStatus, ResourceReference

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200


def make_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.timeout_total,
        follow_redirects=settings.follow_redirects,
        transport=transport,
        headers={
            "user-agent": settings.user_agent,
            "accept-language": settings.accept_language,
        },
    )


def make_progress(console: Optional[Console] = None) -> Progress:
    """Progress display for resource downloads, written to stderr by default."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console or Console(stderr=True),
    )


def _retry_decorator(settings: Settings):
    return retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(max(1, settings.page_max_attempts)),
        wait=wait_exponential(
            multiplier=settings.backoff_multiplier,
            min=settings.backoff_min,
            max=settings.backoff_max,
        ),
        reraise=True,
    )


def _require_success(resp: httpx.Response) -> None:
    if resp.status_code != SUCCESS_STATUS:
        raise httpx.HTTPStatusError(
            f"HTTP {resp.status_code} for {resp.request.url}",
            request=resp.request,
            response=resp,
        )


def _walk_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc``, its causes/contexts and members of exception groups."""
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(getattr(current, "exceptions", ()))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                stack.append(linked)


def classify_transport_error(exc: Exception, url: str) -> PageLoaderError:
    """Map an httpx failure on the main page to the loader's error taxonomy."""
    if isinstance(exc, PageLoaderError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return HttpStatusError(f"Request failed with status {status}: {url}", status)
    if isinstance(exc, httpx.TimeoutException):
        return FetchTimeoutError(f"Request timed out: {url}")
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return InvalidUrlError(f"Invalid URL: {url!r}")

    for cause in _walk_causes(exc):
        if isinstance(cause, socket.gaierror):
            return DnsError(f"Network error: could not resolve host for {url}")
        if isinstance(cause, ConnectionRefusedError) or (
            isinstance(cause, OSError) and cause.errno == errno.ECONNREFUSED
        ):
            return ConnectRefusedError(f"Network error: connection refused by {url}")
        if isinstance(cause, (socket.timeout, TimeoutError)):
            return FetchTimeoutError(f"Request timed out: {url}")

    return UnknownError(str(exc) or exc.__class__.__name__)


async def fetch_page(client: httpx.AsyncClient, url: str, *, settings: Settings) -> str:
    """GET the main page and return its decoded body.

    Transport errors are retried up to ``settings.page_max_attempts`` times.

    Raises:
        PageLoaderError: A classified error for any failure, including a
            status other than 200.
    """

    @_retry_decorator(settings)
    async def _do_request() -> httpx.Response:
        return await client.get(url)

    logger.info("Fetching page: %s", url)
    try:
        resp = await _do_request()
        _require_success(resp)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise classify_transport_error(exc, url) from exc

    logger.info("Fetched page OK: %s (%d bytes)", url, len(resp.content))
    return resp.text


async def fetch_one(client: httpx.AsyncClient, url: str, destination: Path) -> Path:
    """Download ``url`` to ``destination`` as raw bytes.

    Redirects are followed when the client allows it; only a final HTTP 200
    counts as success. The parent directory is created if needed.

    Raises:
        httpx.HTTPStatusError: On any status other than 200.
        httpx.HTTPError: On transport failures.
        OSError: If the file cannot be written.
    """
    resp = await client.get(url)
    _require_success(resp)
    await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
    await asyncio.to_thread(destination.write_bytes, resp.content)
    return destination


async def fetch_all(
    client: httpx.AsyncClient,
    references: Sequence[ResourceReference],
    resources_dir: Path,
    *,
    max_concurrency: Optional[int] = None,
    log_level: int = logging.DEBUG,
    progress: Optional[Progress] = None,
) -> List[DownloadOutcome]:
    """Download every reference concurrently and report one outcome per reference.

    References sharing a local file name are downloaded once. A failure is
    recorded in that reference's outcome and never affects the others. When
    ``progress`` is given, every download gets its own task line.
    """
    groups: Dict[str, List[ResourceReference]] = {}
    for ref in references:
        groups.setdefault(ref.local_file_name, []).append(ref)
    if not groups:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _worker(file_name: str, url: str) -> Optional[str]:
        destination = resources_dir / file_name
        task_id = progress.add_task(escape(url), total=1) if progress is not None else None
        try:
            async with semaphore or contextlib.nullcontext():
                await fetch_one(client, url, destination)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.log(log_level, "Failed %s: %s", url, exc)
            if progress is not None:
                progress.update(task_id, completed=1, description=f"[red]✗[/red] {escape(url)}")
            return str(exc) or exc.__class__.__name__
        logger.log(log_level, "Downloaded %s -> %s", url, destination)
        if progress is not None:
            progress.update(task_id, completed=1, description=f"[green]✓[/green] {escape(url)}")
        return None

    names = list(groups)
    errors = await asyncio.gather(
        *(_worker(name, groups[name][0].absolute_url) for name in names)
    )
    error_by_name = dict(zip(names, errors))

    failed = sum(1 for e in errors if e is not None)
    if failed:
        logger.warning("%d/%d resource(s) failed to download", failed, len(names))

    outcomes: List[DownloadOutcome] = []
    for ref in references:
        detail = error_by_name[ref.local_file_name]
        status = OutcomeStatus.SUCCESS if detail is None else OutcomeStatus.FAILED
        outcomes.append(DownloadOutcome(reference=ref, status=status, error_detail=detail))
    return outcomes
