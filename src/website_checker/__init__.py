"""
Website checker: crawls every same-host page reachable from a start URL.
Reports status codes, content types, response times and link counts.
"""
from website_checker.config import CrawlConfig
from website_checker.core import crawl, CrawlResult
from website_checker.fetcher import PageInfo, fetch_page
from website_checker.links import canonicalize, extract_links
from website_checker.report import Reporter
from website_checker.tracker import Tracker

__version__ = "1.0.0"
__all__ = [
    "crawl",
    "canonicalize",
    "extract_links",
    "fetch_page",
    "CrawlConfig",
    "CrawlResult",
    "PageInfo",
    "Reporter",
    "Tracker",
]
