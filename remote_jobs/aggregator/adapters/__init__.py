"""Job Source Adapters.

This package contains concrete implementations of the SourceAdapter interface,
one per wire format:
- RssFeedAdapter: syndication feeds (rss_adapter.py)
- MetadataArrayAdapter: metadata-prefixed JSON arrays (json_adapters.py)
- KeyedObjectAdapter: key-wrapped JSON objects (json_adapters.py)
"""

from typing import Iterable

from ..base import SourceAdapter
from ..source_config import SourceConfig
from .json_adapters import KeyedObjectAdapter, MetadataArrayAdapter
from .rss_adapter import RssFeedAdapter

ADAPTERS: dict[str, type[SourceAdapter]] = {
    "rss": RssFeedAdapter,
    "json_array": MetadataArrayAdapter,
    "json_object": KeyedObjectAdapter,
}


def build_adapter(config: SourceConfig) -> SourceAdapter:
    """Instantiate the adapter matching a source's wire format tag."""
    adapter_cls = ADAPTERS.get(config.format)
    if adapter_cls is None:
        raise ValueError(f"missing adapter for format={config.format} (source={config.name})")
    return adapter_cls(config)


def build_adapters(configs: Iterable[SourceConfig]) -> list[SourceAdapter]:
    """Build adapters for the enabled sources, preserving configured order."""
    return [build_adapter(config) for config in configs if config.enabled]


__all__ = [
    "ADAPTERS",
    "KeyedObjectAdapter",
    "MetadataArrayAdapter",
    "RssFeedAdapter",
    "build_adapter",
    "build_adapters",
]
