"""Aggregator Service.

This service fetches job postings from remote-work job boards, validates them
and stores each distinct posting URL exactly once.

Main components:
- SourceAdapter: Abstract base class for all job source adapters
- JobPosting: Data class for candidate and stored postings
- RetryExecutor: Bounded retry with linear backoff per source
- RunCoordinator: Sequential run over all configured sources
- Adapters: Wire-format implementations (in adapters/ directory)
"""

from .base import JobPosting, SourceAdapter
from .coordinator import RunCoordinator, RunStats
from .db_storage import InMemoryJobStore, JobStore, PostgresJobStore
from .retry import CancellationToken, RetryExecutor, RetryOutcome
from .source_config import SourceConfig, default_sources, load_sources_config

__all__ = [
    "SourceAdapter",
    "JobPosting",
    "RunCoordinator",
    "RunStats",
    "JobStore",
    "InMemoryJobStore",
    "PostgresJobStore",
    "CancellationToken",
    "RetryExecutor",
    "RetryOutcome",
    "SourceConfig",
    "default_sources",
    "load_sources_config",
]
__version__ = "0.1.0"
