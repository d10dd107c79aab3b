"""
Crawl settings.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_USER_AGENT = "WebsiteChecker/1.0"

# Room for the fixed table columns plus a usable URL column
MIN_WIDTH = 50


@dataclass(slots=True)
class CrawlConfig:
    """Settings for a crawl run.

    ``timeout`` of None leaves requests without a timeout.
    """
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    max_workers: int = 8
    width: int = 80

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.width < MIN_WIDTH:
            raise ValueError(f"width must be at least {MIN_WIDTH} columns, got {self.width}")
