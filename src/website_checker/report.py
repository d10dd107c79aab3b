"""
Progress table and post-crawl summary.
"""
from __future__ import annotations

import sys
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, TextIO

from website_checker.core import CrawlResult
from website_checker.fetcher import PageInfo

SEPARATOR = "---------"
ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class Column:
    """One table cell. A width of None marks the elastic column."""
    text: str
    width: Optional[int] = None


def _fit(text: str, width: int) -> str:
    """Truncate from the left with an ellipsis, or right-pad with spaces."""
    if len(text) > width:
        if width <= len(ELLIPSIS):
            return text[-width:] if width > 0 else ""
        return ELLIPSIS + text[len(text) - width + len(ELLIPSIS):]
    return text.ljust(width)


def format_row(columns: Sequence[Column], total_width: int = 80) -> str:
    """Lay out columns on one fixed-width line.

    The elastic column, if there is exactly one, takes whatever
    ``total_width`` leaves after the fixed columns.
    """
    elastic = [c for c in columns if c.width is None]
    elastic_width = 0
    if len(elastic) == 1:
        fixed = sum(c.width for c in columns if c.width is not None)
        elastic_width = max(total_width - fixed, 0)

    return "".join(
        _fit(c.text, elastic_width if c.width is None else c.width)
        for c in columns
    )


def status_label(status_code: Optional[int]) -> str:
    return "ERR" if status_code is None else str(status_code)


def page_columns(page: PageInfo) -> List[Column]:
    return [
        Column(page.url),
        Column(" ", 1),
        Column("ERR" if page.failed else str(page.status_code), 5),
        Column(page.content_type, 15),
        Column(f"{page.latency_ms:>5,}ms", 8),
        Column(f"{page.link_count:>4,} links", 10),
    ]


def format_page(page: PageInfo, total_width: int = 80) -> str:
    return format_row(page_columns(page), total_width)


def group_problems(pages: Iterable[PageInfo]) -> Dict[Optional[int], List[PageInfo]]:
    """Pages without a 200 status, grouped by status in order of first appearance."""
    groups: Dict[Optional[int], List[PageInfo]] = defaultdict(list)
    for page in pages:
        if page.status_code != 200:
            groups[page.status_code].append(page)
    return dict(groups)


def slowest_page(pages: Sequence[PageInfo]) -> Optional[PageInfo]:
    """The page with the highest latency; the earliest one wins a tie."""
    if not pages:
        return None
    # max() keeps the first maximal element
    return max(pages, key=lambda page: page.latency_ms)


def average_ms(result: CrawlResult) -> float:
    """Total crawl time divided by the number of pages."""
    if not result.page_count:
        return 0.0
    return result.elapsed_ms / result.page_count


def summary_line(result: CrawlResult) -> str:
    return (
        f"Processed: {result.page_count} links, "
        f"total time: {result.elapsed_ms / 1000:,.0f}s, "
        f"average response: {average_ms(result):,.0f}ms"
    )


class Reporter:
    """Writes the progress table and final report to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, width: int = 80) -> None:
        self.stream = stream or sys.stdout
        self.width = width

    def _line(self, text: str = "") -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def start(self, seed_url: str) -> None:
        self._line(seed_url)
        self._line(SEPARATOR)

    def page(self, info: PageInfo) -> None:
        self._line(format_page(info, self.width))

    def problems(self, pages: Sequence[PageInfo]) -> None:
        groups = group_problems(pages)
        if not groups:
            return
        self._line("Problems")
        self._line("--------")
        for status_code, group in groups.items():
            self._line(f" {status_label(status_code)}")
            for page in group:
                self._line(f"   {page.url}")
            self._line()

    def finish(self, result: CrawlResult) -> None:
        self._line(SEPARATOR)
        self._line(summary_line(result))
        self.problems(result.pages)

        slowest = slowest_page(result.pages)
        self._line("Slowest page")
        if slowest is not None:
            self._line(format_page(slowest, self.width))
        self._line("done.")
