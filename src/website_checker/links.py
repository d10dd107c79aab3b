"""
Link extraction and address canonicalization.
"""
from __future__ import annotations

import html
import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlunparse, urldefrag

# Binary asset suffixes that are never followed (frozen set for O(1) lookup)
SKIP_EXTENSIONS: frozenset[str] = frozenset((
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg", ".ico", ".tif", ".tiff",
    ".mp3", ".wav", ".ogg", ".flac", ".m4a",
    ".mp4", ".avi", ".mov", ".webm",
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
))

# Anchor tags with a quoted href attribute (not data-href and the like)
ANCHOR_HREF = re.compile(
    r"""<a\b[^>]*?\shref\s*=\s*(["'])(.*?)\1""",
    re.IGNORECASE | re.DOTALL,
)


def canonicalize(url: str) -> Optional[str]:
    """
    Canonical form of an absolute URL, used for equality and deduplication.

    - Drops fragments (#...)
    - Normalizes scheme/host case
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)

    Returns None for non-http(s) or malformed URLs.
    """
    if not url:
        return None

    try:
        joined, _ = urldefrag(url.strip())
        parsed = urlparse(joined)
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https"):
        return None

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return None
    if ":" in hostname:
        hostname = f"[{hostname}]"

    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    elif port:
        netloc = f"{hostname}:{port}"
    else:
        netloc = hostname

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",
    ))


def host_of(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def same_host(url: str, other: str) -> bool:
    """Check if both URLs point at exactly the same host (no subdomain matching)."""
    return host_of(url) == host_of(other)


def has_skipped_extension(url: str) -> bool:
    path_lower = (urlparse(url).path or "").lower()
    return any(path_lower.endswith(ext) for ext in SKIP_EXTENSIONS)


def find_hrefs(source: str) -> List[str]:
    """Raw href values of every anchor tag, in document order."""
    return [html.unescape(match.group(2)).strip() for match in ANCHOR_HREF.finditer(source)]


def _resolve(base_url: str, href: str) -> Optional[str]:
    if href.startswith("/"):
        try:
            href = urljoin(base_url, href)
        except ValueError:
            return None
    elif not href.startswith("http"):
        return None
    return canonicalize(href)


def extract_links(base_url: str, source: str) -> List[str]:
    """
    In-scope outbound addresses of a page, in first-seen order.

    Only absolute (``http...``) and root-relative (``/...``) hrefs are
    considered. Malformed URLs, the page itself, other hosts and binary
    assets are dropped.
    """
    base = canonicalize(base_url)
    if base is None or not source:
        return []

    links: List[str] = []
    seen = set()
    for href in find_hrefs(source):
        target = _resolve(base, href)
        if target is None or target in seen:
            continue
        seen.add(target)

        if target == base:
            continue
        if not same_host(target, base):
            continue
        if has_skipped_extension(target):
            continue
        links.append(target)

    return links
