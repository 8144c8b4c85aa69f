# site_mapper/crawler/normalizer.py
"""
Reference resolution, normalization and scope filtering for SiteMapper.

Every function here is pure: no shared state, safe to call from any task.
"""
from __future__ import annotations

import posixpath
from typing import Iterable, List
from urllib.parse import urljoin, urlsplit, urlunsplit

from site_mapper.crawler.models import InvalidReference, LinkScope
from site_mapper.logger import logger

__all__ = ("normalize", "in_scope", "sanitize_links", "CRAWLABLE_SCHEMES")

CRAWLABLE_SCHEMES = frozenset(("http", "https"))


def normalize(raw: str, base: str) -> str:
    """
    Resolve *raw* against *base* and canonicalize the result.

    - Empty input stays empty
    - Relative references are resolved with standard URI rules
    - Dot segments are removed, whatever the form of the reference
    - Fragments (#...) are dropped
    - Trailing path separators are stripped
    - The whole address is lower-cased

    Normalizing an already normalized address returns it unchanged.
    Raises :class:`InvalidReference` on malformed input.
    """
    if not raw:
        return ""
    try:
        parts = urlsplit(urljoin(base, raw.strip()))
    except ValueError as exc:
        raise InvalidReference(f"malformed reference {raw!r}: {exc}") from exc
    path = parts.path
    if path:
        path = posixpath.normpath(path)
    path = path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, "")).lower()


def in_scope(raw: str, address: str, base: str, scope: LinkScope) -> bool:
    """Return True if *address* (normalized from *raw*) may be followed from page *base*."""
    target = urlsplit(address)
    if target.scheme not in CRAWLABLE_SCHEMES or not target.netloc:
        return False
    if scope is LinkScope.UNRESTRICTED:
        return True
    if scope is LinkScope.RELATIVE:
        ref = urlsplit(raw.strip())
        return not ref.scheme and not ref.netloc
    origin = urlsplit(base.lower())
    return (target.scheme, target.netloc) == (origin.scheme, origin.netloc)


def sanitize_links(
    raws: Iterable[str],
    base: str,
    scope: LinkScope = LinkScope.SAME_ORIGIN,
) -> List[str]:
    """Turn raw hrefs found on *base* into in-scope addresses, dropping bad ones one by one."""
    links: List[str] = []
    for raw in raws:
        try:
            address = normalize(raw, base)
            keep = bool(address) and in_scope(raw, address, base, scope)
        except ValueError as exc:
            logger.debug("Dropped reference %r on %s: %s", raw, base, exc)
            continue
        if keep:
            links.append(address)
    return links
