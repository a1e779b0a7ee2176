"""Discover same-origin resources in page markup."""

from __future__ import annotations

import logging
from typing import List, NamedTuple
from urllib.parse import urldefrag, urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from .errors import InvalidUrlError
from .models import NameRole, ResourceReference, ResourceRole
from .naming import PAGE_EXTENSION, generate_file_name
from .origin import is_local

logger = logging.getLogger(__name__)


class _Selector(NamedTuple):
    role: ResourceRole
    css: str
    attribute: str


# Processed in this order; document order is kept within each category.
SELECTORS = (
    _Selector(ResourceRole.IMAGE, "img[src]", "src"),
    _Selector(ResourceRole.STYLESHEET, "link[href]", "href"),
    _Selector(ResourceRole.SCRIPT, "script[src]", "src"),
    _Selector(ResourceRole.LINKED_PAGE, "a[href]", "href"),
)


def parse_markup(markup: str) -> BeautifulSoup:
    """Parse page markup into a tree that references point into."""
    return BeautifulSoup(markup, "lxml")


def _is_stylesheet(node: Tag) -> bool:
    rel = node.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(r.lower() == "stylesheet" for r in rel)


def _is_linked_page(target: str, absolute_url: str, base_url: str) -> bool:
    """Anchors count only when the authored href names another .html document."""
    if target.startswith("#"):
        return False
    if not urlsplit(target).path.endswith(PAGE_EXTENSION):
        return False
    return absolute_url != urldefrag(base_url)[0]


def _matches(selector: _Selector, node: Tag, target: str, absolute_url: str, base_url: str) -> bool:
    if selector.role is ResourceRole.STYLESHEET:
        return _is_stylesheet(node)
    if selector.role is ResourceRole.LINKED_PAGE:
        return _is_linked_page(target, absolute_url, base_url)
    return True


def _local_path(resources_dir_name: str, file_name: str, fragment: str) -> str:
    path = f"{resources_dir_name}/{file_name}"
    return f"{path}#{fragment}" if fragment else path


def scan(tree: BeautifulSoup, base_url: str, resources_dir_name: str) -> List[ResourceReference]:
    """Collect same-origin resource references from ``tree``.

    The tree is not modified; each reference keeps a handle to its element so the
    attribute can be rewritten once the download outcome is known.

    Args:
        tree: Parsed page markup.
        base_url: URL the page was fetched from.
        resources_dir_name: Directory name (relative to the page) that local
            paths are built from.

    Returns:
        References in category order (images, stylesheets, scripts, linked
        pages), document order within a category.
    """
    refs: List[ResourceReference] = []

    for selector in SELECTORS:
        for node in tree.select(selector.css):
            original = node.get(selector.attribute)
            if not is_local(base_url, original):
                continue

            target = original.strip()
            absolute_url, fragment = urldefrag(urljoin(base_url, target))
            if not _matches(selector, node, target, absolute_url, base_url):
                continue

            try:
                file_name = generate_file_name(absolute_url, NameRole.RESOURCE)
            except InvalidUrlError:
                logger.warning("Skipping unparseable reference %r", original)
                continue

            refs.append(
                ResourceReference(
                    original_url=original,
                    absolute_url=absolute_url,
                    role=selector.role,
                    attribute=selector.attribute,
                    local_file_name=file_name,
                    local_path=_local_path(resources_dir_name, file_name, fragment),
                    node=node,
                )
            )

    logger.debug("Found %d local resource reference(s) on %s", len(refs), base_url)
    return refs
