"""Command-line interface for page-loader."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from .config import get_settings
from .errors import PageLoaderError
from .loader import download_page

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("page-loader")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="page-loader",
        description="Download a web page together with its local resources.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    p.add_argument("url", help="URL of the page to download")
    p.add_argument(
        "-o", "--output",
        default=os.getcwd(),
        help="Output directory (default: current working directory)",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    p.add_argument(
        "--no-progress",
        dest="progress",
        action="store_false",
        help="Do not show the resource download progress display",
    )
    return p


def _configure_logging(verbose: bool) -> None:
    """Set up root logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        result = download_page(
            args.url,
            args.output,
            settings=get_settings(),
            verbose=args.verbose,
            show_progress=args.progress,
        )
    except PageLoaderError as exc:
        logger.debug("Download failed [%s]", exc.code, exc_info=True)
        print(exc.message, file=sys.stderr)
        return 1

    for url in result.failed_resources:
        logger.warning("Kept remote reference: %s", url)
    print(result.html_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
