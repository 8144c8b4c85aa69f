# site_mapper/crawler/link_extractor.py
"""
Anchor href extraction for SiteMapper.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag


def extract_hrefs(content: str) -> List[str]:
    """
    Return the raw ``href`` value of every ``<a>`` element, in document order.

    html.parser is lenient: broken markup yields whatever was recovered
    instead of an exception.
    """
    if not content:
        return []
    soup = BeautifulSoup(content, "html.parser")
    hrefs: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if isinstance(href_val, str):
            hrefs.append(href_val)
    return hrefs
