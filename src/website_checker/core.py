"""
Core crawling logic: level-synchronous BFS over a single host.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import requests
from requests.adapters import HTTPAdapter

from website_checker.config import CrawlConfig
from website_checker.fetcher import PageInfo, fetch_page
from website_checker.links import canonicalize
from website_checker.tracker import Tracker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CrawlResult:
    """Every page fetched during a crawl, in completion order."""
    pages: List[PageInfo] = field(default_factory=list)
    elapsed_ms: float = 0.0
    waves: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)


def make_session(config: CrawlConfig) -> requests.Session:
    """HTTP session with one pooled connection per worker."""
    session = requests.Session()
    session.headers["User-Agent"] = config.user_agent
    adapter = HTTPAdapter(pool_maxsize=config.max_workers)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _visit(
    url: str,
    tracker: Tracker,
    session: requests.Session,
    timeout: Optional[float],
) -> PageInfo:
    """Fetch one page and queue its unseen links for the next wave."""
    info = fetch_page(url, session=session, timeout=timeout)
    admitted = sum(1 for link in info.links if tracker.admit(link))
    logger.debug("%s: %d links, %d new", url, info.link_count, admitted)
    return info


def crawl(
    seed_url: str,
    config: Optional[CrawlConfig] = None,
    on_page: Optional[Callable[[PageInfo], None]] = None,
    session: Optional[requests.Session] = None,
) -> CrawlResult:
    """
    Crawl every page reachable from a seed URL on the seed's host.

    Pages are fetched wave by wave: all addresses at the same link distance
    from the seed are fetched concurrently, and the next wave only starts
    once every fetch of the current one has completed.

    Args:
        seed_url: Absolute http(s) URL to start from.
        config: Crawl settings; defaults to ``CrawlConfig()``.
        on_page: Called on this thread once per page, in completion order.
        session: HTTP session to use. One is created (and closed) if omitted.

    Returns:
        The crawl result with all pages and the total elapsed time.

    Raises:
        ValueError: If the seed URL is not a valid absolute http(s) URL.
    """
    seed = canonicalize(seed_url)
    if not seed:
        raise ValueError(f"Invalid start URL: {seed_url}")

    config = config or CrawlConfig()
    owns_session = session is None
    if owns_session:
        session = make_session(config)

    tracker = Tracker()
    tracker.admit(seed)
    result = CrawlResult()
    started = time.perf_counter()

    try:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            wave = tracker.next_wave()
            while wave:
                result.waves += 1
                logger.info("Wave %d: %d pages", result.waves, len(wave))

                futures = [
                    executor.submit(_visit, url, tracker, session, config.timeout)
                    for url in wave
                ]
                for future in as_completed(futures):
                    info = future.result()
                    result.pages.append(info)
                    if on_page is not None:
                        on_page(info)

                wave = tracker.next_wave()
    finally:
        result.elapsed_ms = (time.perf_counter() - started) * 1000
        if owns_session:
            session.close()

    logger.info(
        "Crawl of %s finished: %d pages in %d waves, %d addresses visited",
        seed, result.page_count, result.waves, len(tracker),
    )
    return result
