"""
JSON API adapters.

Two envelope shapes are supported:
- MetadataArrayAdapter (RemoteOK): a JSON array whose first element is API
  metadata (legal notice, version) and never a job
- KeyedObjectAdapter (Remotive): a JSON object with the job list under a key

Both map elements through the source's `fields` configuration and resolve
relative job links against the source's base URL.
"""

import json
import logging
from typing import Any, List

from ..base import JobPosting, SourceAdapter, clean_text
from ..errors import EnvelopeParseError, ItemParseError

logger = logging.getLogger(__name__)


class JsonSourceAdapter(SourceAdapter):
    """Shared decoding and element mapping for JSON sources."""

    accepts_json = True

    def decode(self, body: bytes) -> Any:
        try:
            return json.loads(body)
        except ValueError as e:
            raise EnvelopeParseError(f"{self.source_name} returned invalid JSON: {e}") from e

    def map_item(self, item: Any) -> JobPosting:
        if not isinstance(item, dict):
            raise ItemParseError(f"expected a JSON object, got {type(item).__name__}")

        link = clean_text(item.get(self.config.field_key("url")))

        return JobPosting(
            title=clean_text(item.get(self.config.field_key("title"))),
            company=clean_text(item.get(self.config.field_key("company"))),
            url=self.absolute_url(link),
            source=self.source_name,
        )


class MetadataArrayAdapter(JsonSourceAdapter):
    """Adapter for a JSON array prefixed by one metadata element."""

    def parse(self, body: bytes) -> List[JobPosting]:
        data = self.decode(body)
        if not isinstance(data, list):
            raise EnvelopeParseError(
                f"{self.source_name} expected a JSON array, got {type(data).__name__}"
            )

        if len(data) <= 1:
            logger.warning(
                "%s API returned no job data",
                self.source_name,
                extra={"source": self.source_name},
            )
            return []

        # Element 0 is metadata, even when it looks like a job
        return self.collect(data[1:], start=1)


class KeyedObjectAdapter(JsonSourceAdapter):
    """Adapter for a JSON object wrapping the job list under `items_key`."""

    def parse(self, body: bytes) -> List[JobPosting]:
        data = self.decode(body)
        if not isinstance(data, dict):
            raise EnvelopeParseError(
                f"{self.source_name} expected a JSON object, got {type(data).__name__}"
            )

        key = self.config.items_key or "jobs"
        items = data.get(key)
        if not isinstance(items, list):
            logger.warning(
                "%s API response missing '%s' key",
                self.source_name,
                key,
                extra={"source": self.source_name},
            )
            return []

        logger.info(
            "%s API returned %d jobs",
            self.source_name,
            len(items),
            extra={"source": self.source_name, "jobs_returned": len(items)},
        )
        return self.collect(items)
