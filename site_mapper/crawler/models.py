# site_mapper/crawler/models.py
"""
Data models and errors shared by the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

__all__ = (
    "LinkScope",
    "FetchResult",
    "WorkBatch",
    "CrawlResult",
    "FetchError",
    "InvalidReference",
)


class LinkScope(str, Enum):
    """Which discovered references are followed."""

    SAME_ORIGIN = "same-origin"
    RELATIVE = "relative"
    UNRESTRICTED = "unrestricted"


class InvalidReference(ValueError):
    """A reference that cannot be resolved into a crawlable address."""


class FetchError(Exception):
    """Transport-level failure (DNS, connect, timeout) while fetching an address."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"{address}: {reason}")
        self.address = address
        self.reason = reason


@dataclass(slots=True)
class FetchResult:
    """Response metadata and (possibly empty) text body of one fetch."""

    url: str
    status: int
    content_type: str
    content: str = ""


@dataclass(slots=True)
class WorkBatch:
    """Addresses reported back by one fetch task; ``error`` is set when the fetch failed."""

    source: str
    addresses: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CrawlResult:
    """Outcome of one crawl run."""

    seed: str
    visited: FrozenSet[str]
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> FrozenSet[str]:
        """Visited addresses whose fetch did not fail."""
        return self.visited.difference(self.failed)

    def __len__(self) -> int:
        return len(self.visited)
