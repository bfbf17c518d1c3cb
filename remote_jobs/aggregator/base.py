"""Source Adapter Base Class.

This module defines the interface every job source adapter implements, plus the
HTTP fetch step they all share. Adding a new job board means adding an entry to
`config/sources.yml` and, if its wire format is new, one adapter subclass.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional
from urllib.parse import urljoin

import requests

from .errors import (
    ClientError,
    FetchError,
    ItemParseError,
    NetworkError,
    RateLimited,
    ServerError,
)
from .source_config import SourceConfig

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; JobScraper/1.0)"
JOB_TYPE_REMOTE = "Remote"


@dataclass
class JobPosting:
    """A job posting, either a parsed candidate or a stored record.

    `id` stays None until the store assigns one. `url` is the dedup key.
    """

    title: str
    company: str
    url: str
    source: str
    type: str = JOB_TYPE_REMOTE
    id: Optional[int] = None


def clean_text(value: Any) -> str:
    """Return a trimmed string for any payload value (None becomes "")."""
    if value is None:
        return ""
    return str(value).strip()


class SourceAdapter(ABC):
    """Abstract base class for job source adapters.

    Subclasses implement `parse()` for their wire format; fetching, empty-body
    handling and per-item error isolation live here.

    Usage:
        class MyFeedAdapter(SourceAdapter):
            def parse(self, body):
                return self.collect(items_from(body))

            def map_item(self, item):
                return JobPosting(...)
    """

    accepts_json = False

    def __init__(self, config: SourceConfig):
        """Initialize the adapter.

        Args:
            config: Static description of the source (endpoint, field names,
                    base URL for relative links)
        """
        self.config = config

    @property
    def source_name(self) -> str:
        return self.config.name

    def fetch_and_parse(self) -> List[JobPosting]:
        """Fetch the payload and parse it into candidate postings.

        Raises:
            FetchError: If the payload could not be retrieved
            EnvelopeParseError: If the feed document or JSON root is malformed
        """
        logger.info(
            "Fetching jobs from %s",
            self.source_name,
            extra={"source": self.source_name, "endpoint": self.config.endpoint},
        )
        body = self.fetch()

        if not body or not body.strip():
            logger.warning(
                "%s returned empty response",
                self.source_name,
                extra={"source": self.source_name},
            )
            return []

        return self.parse(body)

    def fetch(self) -> bytes:
        """Issue the GET request and classify failures.

        Returns:
            Raw response body

        Raises:
            NetworkError: Connection failure or timeout
            RateLimited: HTTP 429
            ClientError: Any other 4xx
            ServerError: 5xx
            FetchError: Any other non-2xx status
        """
        headers = {"User-Agent": USER_AGENT}
        if self.accepts_json:
            headers["Accept"] = "application/json"

        try:
            response = requests.get(
                self.config.endpoint,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                "Network error accessing %s: %s",
                self.source_name,
                e,
                extra={"source": self.source_name, "error_type": type(e).__name__},
            )
            raise NetworkError(f"{self.source_name} network error: {e}", source=self.source_name) from e

        status = response.status_code
        if 200 <= status < 300:
            return response.content

        if status == 429:
            logger.warning("Rate limited by %s", self.source_name, extra={"source": self.source_name})
            raise RateLimited(
                f"{self.source_name} rate limit exceeded", status_code=status, source=self.source_name
            )
        if 400 <= status < 500:
            raise ClientError(
                f"{self.source_name} client error: HTTP {status}", status_code=status, source=self.source_name
            )
        if status >= 500:
            raise ServerError(
                f"{self.source_name} server error: HTTP {status}", status_code=status, source=self.source_name
            )
        raise FetchError(f"{self.source_name} returned status: {status}", source=self.source_name)

    @abstractmethod
    def parse(self, body: bytes) -> List[JobPosting]:
        """Parse a non-empty response body into candidate postings.

        Raises:
            EnvelopeParseError: If the top-level structure is malformed
        """
        pass

    @abstractmethod
    def map_item(self, item: Any) -> JobPosting:
        """Map a single payload element to a candidate posting.

        Raises:
            ItemParseError: If the element cannot be mapped
        """
        pass

    def collect(self, items: Iterable[Any], start: int = 0) -> List[JobPosting]:
        """Map every element, skipping (and counting) the malformed ones."""
        jobs: List[JobPosting] = []
        skipped = 0

        for index, item in enumerate(items, start=start):
            try:
                jobs.append(self.map_item(item))
            except ItemParseError as e:
                skipped += 1
                logger.warning(
                    "Error processing %s item %d: %s",
                    self.source_name,
                    index,
                    e,
                    extra={"source": self.source_name, "item_index": index},
                )

        logger.info(
            "Parsed %d jobs from %s",
            len(jobs),
            self.source_name,
            extra={"source": self.source_name, "parsed": len(jobs), "skipped": skipped},
        )
        return jobs

    def absolute_url(self, link: str) -> str:
        """Resolve a relative job link against the source's base URL."""
        if link and not link.startswith("http") and self.config.base_url:
            return urljoin(self.config.base_url + "/", link)
        return link

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return f"{self.__class__.__name__}(source='{self.source_name}')"
