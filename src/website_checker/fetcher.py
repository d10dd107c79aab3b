"""
Fetching a single page and recording its response metadata.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import requests

from website_checker.links import extract_links

logger = logging.getLogger(__name__)

UNKNOWN_CONTENT_TYPE = "unknown"


@dataclass(frozen=True, slots=True)
class PageInfo:
    """Response metadata for a single fetched page.

    ``status_code`` is None when the request failed before any response
    was received.
    """
    url: str
    status_code: Optional[int]
    content_type: str = UNKNOWN_CONTENT_TYPE
    latency_ms: int = 0
    links: Tuple[str, ...] = ()

    @property
    def link_count(self) -> int:
        return len(self.links)

    @property
    def failed(self) -> bool:
        return self.status_code is None


def primary_content_type(header: Optional[str]) -> str:
    """Return the MIME type of a Content-Type header without its parameters."""
    if not header:
        return UNKNOWN_CONTENT_TYPE
    token = header.split(";", 1)[0].strip()
    return token or UNKNOWN_CONTENT_TYPE


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))


def fetch_page(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> PageInfo:
    """
    GET a URL and describe the outcome as a PageInfo.

    Any HTTP response, whatever its status, is a normal result. Transport
    errors are turned into a PageInfo with no links; this function does not
    raise for them.
    """
    http = session or requests
    started = time.perf_counter()

    try:
        resp = http.get(url, timeout=timeout, allow_redirects=True)
        # Reading the body is part of the measured latency
        body = resp.text if resp.content else ""
        latency = _elapsed_ms(started)
    except requests.RequestException as e:
        latency = _elapsed_ms(started)
        partial = e.response
        logger.warning("Request failed for %s: %s", url, e)
        return PageInfo(
            url=url,
            status_code=partial.status_code if partial is not None else None,
            content_type=primary_content_type(
                partial.headers.get("content-type") if partial is not None else None
            ),
            latency_ms=latency,
        )

    links = extract_links(url, body) if body else []
    logger.debug("Fetched %s: %s, %d links", url, resp.status_code, len(links))

    return PageInfo(
        url=url,
        status_code=resp.status_code,
        content_type=primary_content_type(resp.headers.get("content-type")),
        latency_ms=latency,
        links=tuple(links),
    )
