"""
RSS feed adapter (We Work Remotely).

Each <item> carries a title, a link and usually a dc:creator naming the company.
When the creator is missing, feeds of this kind publish titles as
"Company: Job Title", so the company is recovered from the title instead.
"""

import io
import logging
from typing import Any, List

import feedparser

from ..base import JobPosting, SourceAdapter, clean_text
from ..errors import EnvelopeParseError, ItemParseError

logger = logging.getLogger(__name__)


def split_company_from_title(title: str, company: str) -> tuple[str, str]:
    """Apply the "Company: Title" fallback when no company is known.

    Returns:
        Tuple of (title, company)
    """
    if not company and ":" in title:
        left, right = title.split(":", 1)
        return right.strip(), left.strip()
    return title, company


class RssFeedAdapter(SourceAdapter):
    """Adapter for syndication feeds parsed with feedparser."""

    def parse(self, body: bytes) -> List[JobPosting]:
        # A bare bytes argument may be treated as a file path or URL
        feed = feedparser.parse(io.BytesIO(body))
        entries = feed.get("entries") or []

        if not entries:
            if feed.get("bozo") and not feed.get("version"):
                error = feed.get("bozo_exception")
                raise EnvelopeParseError(f"{self.source_name} feed could not be parsed: {error}")

            logger.warning(
                "No job items found in %s RSS feed",
                self.source_name,
                extra={"source": self.source_name},
            )
            return []

        return self.collect(entries)

    def map_item(self, item: Any) -> JobPosting:
        if not hasattr(item, "get"):
            raise ItemParseError(f"unexpected feed entry type {type(item).__name__}")

        # feedparser exposes dc:creator as `author`
        title, company = split_company_from_title(
            clean_text(item.get("title")),
            clean_text(item.get("author")),
        )

        return JobPosting(
            title=title,
            company=company,
            url=clean_text(item.get("link")),
            source=self.source_name,
        )
