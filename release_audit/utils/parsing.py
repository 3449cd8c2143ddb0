from __future__ import annotations

import re
from typing import List, Optional, Pattern, Union
from urllib.parse import unquote

from bs4 import BeautifulSoup

# Attributes that may hold a badge image URL. GitHub proxies README images
# through camo and keeps the original shields.io URL in data-canonical-src.
_BADGE_ATTRS = ("data-canonical-src", "src")

_BADGE_ESCAPES = re.compile(r"--|__|_")
_BADGE_UNESCAPE = {"--": "-", "__": "_", "_": " "}


def badge_urls(html: str) -> List[str]:
    """
    Collect image URLs from an HTML page, in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    for img in soup.find_all("img"):
        for attr in _BADGE_ATTRS:
            value = img.get(attr)
            if value:
                out.append(value)
    return out


def extract_version(pattern: Union[str, Pattern[str]], body: str, *, html: bool = False) -> Optional[str]:
    """
    Return the first capture group of the first match of ``pattern`` in ``body``.

    Returns None when nothing matches; a missing version marker is a normal
    outcome. With ``html=True`` image URLs are searched before the raw body so
    prose that merely mentions a badge cannot win over the badge itself.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    if html:
        for url in badge_urls(body):
            m = regex.search(url)
            if m:
                return m.group(1)
    m = regex.search(body)
    if m:
        return m.group(1)
    return None


def decode_badge_text(text: str) -> str:
    """
    Undo shields.io static badge escaping: "--" is a literal dash,
    "__" a literal underscore, and the rest is percent-encoded.
    """
    return _BADGE_ESCAPES.sub(lambda m: _BADGE_UNESCAPE[m.group(0)], unquote(text))
