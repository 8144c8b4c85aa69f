# site_mapper/crawler/content_type.py
"""
Content-Type gate: decides whether a response is worth parsing for links.
"""
from __future__ import annotations

from typing import Collection, Optional

__all__ = ("DEFAULT_CONTENT_TYPES", "parse_content_type", "is_crawlable")

DEFAULT_CONTENT_TYPES: tuple[str, ...] = ("text/html",)


def parse_content_type(header: Optional[str]) -> str:
    """Return the media type before any ``;`` parameter separator."""
    if not header:
        return ""
    return header.split(";", 1)[0].strip()


def is_crawlable(header: Optional[str], allowed: Collection[str] = DEFAULT_CONTENT_TYPES) -> bool:
    """Case-sensitive allow-list match; a missing header is never crawlable."""
    media_type = parse_content_type(header)
    return bool(media_type) and media_type in allowed
