"""Same-origin checks for resource references."""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin, urlsplit

from .naming import ALLOWED_SCHEMES

logger = logging.getLogger(__name__)

MALFORMED_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def is_local(base_url: str, candidate_url: str) -> bool:
    """Return True when ``candidate_url`` resolves to the same host as ``base_url``.

    Relative and protocol-relative candidates are resolved against ``base_url``.
    Hosts are compared exactly, so subdomains count as foreign. Anything that
    cannot be resolved is treated as non-local.
    """
    if not isinstance(candidate_url, str) or not candidate_url:
        return False
    if MALFORMED_RE.search(candidate_url.strip()):
        return False
    try:
        base = urlsplit(base_url)
        resolved = urlsplit(urljoin(base_url, candidate_url.strip()))
        base_host = base.hostname
        resolved_host = resolved.hostname
    except (TypeError, ValueError):
        logger.debug("Unresolvable reference %r on %s", candidate_url, base_url)
        return False

    if resolved.scheme.lower() not in ALLOWED_SCHEMES:
        return False
    return bool(base_host) and base_host == resolved_host
