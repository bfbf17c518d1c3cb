"""
Run coordination for the aggregator.

One run visits every configured source in order. Each source's
fetch -> parse -> validate -> persist pipeline runs under the RetryExecutor,
so a source that keeps failing costs only its own postings for this run.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .base import JobPosting, SourceAdapter
from .db_storage import JobStorageError, JobStore, JobStoreUnavailable
from .retry import RetryExecutor
from .validator import filter_valid

logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    """Counts from one successful source pipeline."""

    fetched: int = 0
    invalid: int = 0
    duplicates: int = 0
    store_errors: int = 0
    new: int = 0


@dataclass
class RunStats:
    """Statistics for a single run.

    `stored_by_source` and `stored_total` are re-read from the store after all
    sources ran; both are None when that recount failed.
    """

    new_jobs_by_source: dict[str, int] = field(default_factory=dict)
    total_new: int = 0
    failed_sources: list[str] = field(default_factory=list)
    cancelled_sources: list[str] = field(default_factory=list)
    stored_by_source: Optional[dict[str, int]] = None
    stored_total: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return not self.failed_sources


def persist_new_jobs(store: JobStore, jobs: Sequence[JobPosting]) -> tuple[int, int, int]:
    """
    Save every posting whose url is not stored yet, in order.

    A posting the store rejects is logged and skipped; the rest of the batch
    is still saved. Losing the store itself (JobStoreUnavailable) propagates
    and fails the source.

    Returns:
        Tuple of (inserted, duplicates, skipped)
    """
    inserted = 0
    duplicates = 0
    skipped = 0
    for job in jobs:
        try:
            if store.exists_by_url(job.url):
                duplicates += 1
                continue
            store.save(job)
        except JobStoreUnavailable:
            raise
        except (JobStorageError, ValueError) as e:
            skipped += 1
            logger.warning(
                "Skipping %s job that could not be stored: %s",
                job.source,
                e,
                extra={"source": job.source, "url": job.url},
            )
            continue
        inserted += 1
    return inserted, duplicates, skipped


class RunCoordinator:
    """Runs all sources sequentially and reports statistics."""

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        store: JobStore,
        executor: Optional[RetryExecutor] = None,
    ):
        self.adapters = list(adapters)
        self.store = store
        self.executor = executor or RetryExecutor()

    def ingest_source(self, adapter: SourceAdapter) -> SourceResult:
        """Fetch, parse, validate and persist one source.

        Raises on fetch and envelope errors, and when the store is unavailable.
        """
        candidates = adapter.fetch_and_parse()
        valid, invalid = filter_valid(candidates)
        new, duplicates, store_errors = persist_new_jobs(self.store, valid)

        result = SourceResult(
            fetched=len(candidates),
            invalid=invalid,
            duplicates=duplicates,
            store_errors=store_errors,
            new=new,
        )
        logger.info(
            "%s: %d new jobs added",
            adapter.source_name,
            new,
            extra={
                "source": adapter.source_name,
                "fetched": result.fetched,
                "invalid": result.invalid,
                "duplicates": result.duplicates,
                "store_errors": result.store_errors,
                "new": result.new,
            },
        )
        return result

    def run_once(self) -> RunStats:
        """Run every source once, then recount the store."""
        stats = RunStats()
        logger.info("Starting job scraping session", extra={"sources": len(self.adapters)})

        for adapter in self.adapters:
            name = adapter.source_name
            outcome = self.executor.execute(name, lambda: self.ingest_source(adapter))

            if outcome:
                new = outcome.value.new
            else:
                new = 0
                stats.failed_sources.append(name)
                if outcome.cancelled:
                    stats.cancelled_sources.append(name)
                logger.info(
                    "%s: %d new jobs added",
                    name,
                    new,
                    extra={"source": name, "new": new, "failed": True, "cancelled": outcome.cancelled},
                )

            stats.new_jobs_by_source[name] = new
            stats.total_new += new

        logger.info(
            "Scraping session completed! %d new jobs added.",
            stats.total_new,
            extra={
                "total_new": stats.total_new,
                "failed_sources": stats.failed_sources,
                "cancelled_sources": stats.cancelled_sources,
            },
        )
        self._collect_store_counts(stats)
        return stats

    def _collect_store_counts(self, stats: RunStats) -> None:
        try:
            by_source = {
                adapter.source_name: self.store.count_by_source(adapter.source_name)
                for adapter in self.adapters
            }
            total = self.store.count()
        except Exception as e:
            logger.warning(
                "Could not generate statistics: %s",
                e,
                extra={"error_type": type(e).__name__},
            )
            return

        stats.stored_by_source = by_source
        stats.stored_total = total

        logger.info("Database Statistics:")
        for name, count in by_source.items():
            logger.info("- %s: %d jobs", name, count, extra={"source": name, "stored": count})
        logger.info("- Total: %d jobs", total, extra={"stored_total": total})
