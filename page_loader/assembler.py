"""Rewrite resource references in the page tree and serialize it."""

from __future__ import annotations

import logging
from typing import Iterable

from bs4 import BeautifulSoup

from .models import DownloadOutcome

logger = logging.getLogger(__name__)


def rewrite(tree: BeautifulSoup, outcomes: Iterable[DownloadOutcome]) -> str:
    """Point successfully downloaded references at their local copies.

    Failed references keep the URL they were authored with. The tree is
    serialized once, after every rewrite has been applied.
    """
    rewritten = kept = 0
    for outcome in outcomes:
        ref = outcome.reference
        if outcome.is_success:
            ref.node[ref.attribute] = ref.local_path
            rewritten += 1
        else:
            kept += 1

    logger.debug("Rewrote %d reference(s), kept %d original URL(s)", rewritten, kept)
    return str(tree)
