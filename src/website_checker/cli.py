"""
Command-line interface for the website checker.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from website_checker.config import CrawlConfig, DEFAULT_USER_AGENT, MIN_WIDTH
from website_checker.core import crawl
from website_checker.links import canonicalize
from website_checker.report import Reporter


def setup_logging(verbose: bool) -> None:
    """Send diagnostics to stderr so they never interleave with the table on stdout."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="website-checker",
        description="Crawl every page of a website and report status codes and response times.",
    )
    parser.add_argument("start_url", help="Start URL (e.g. https://example.com)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--workers", type=int, default=8, help="Concurrent fetches per wave (default: 8)")
    parser.add_argument("--width", type=int, default=80, help=f"Table width in columns (default: 80, minimum: {MIN_WIDTH})")
    parser.add_argument("--verbose", action="store_true", help="Log crawl progress to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the website checker CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if canonicalize(args.start_url) is None:
        parser.error(f"invalid start URL: {args.start_url}")

    try:
        config = CrawlConfig(
            timeout=args.timeout,
            user_agent=args.user_agent,
            max_workers=args.workers,
            width=args.width,
        )
    except ValueError as e:
        parser.error(str(e))

    setup_logging(args.verbose)

    reporter = Reporter(sys.stdout, width=config.width)
    reporter.start(args.start_url)
    result = crawl(args.start_url, config=config, on_page=reporter.page)
    reporter.finish(result)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
