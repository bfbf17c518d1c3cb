"""Validation of candidate job postings before they reach the store."""

import logging
from typing import Iterable, List, Tuple

from .base import JobPosting
from .errors import ValidationRejected

logger = logging.getLogger(__name__)


def check(job: JobPosting) -> None:
    """Raise ValidationRejected if the posting must not be persisted."""
    for field_name in ("title", "company", "url"):
        if not (getattr(job, field_name) or "").strip():
            raise ValidationRejected(f"blank {field_name}")

    if not job.url.strip().startswith("http"):
        raise ValidationRejected(f"url without http scheme: {job.url!r}")


def is_valid(job: JobPosting) -> bool:
    """True iff title, company and url are non-blank and url starts with http."""
    try:
        check(job)
    except ValidationRejected:
        return False
    return True


def filter_valid(jobs: Iterable[JobPosting]) -> Tuple[List[JobPosting], int]:
    """
    Drop invalid postings, keeping parse order.

    Returns:
        Tuple of (valid postings, number rejected)
    """
    valid: List[JobPosting] = []
    rejected = 0

    for job in jobs:
        try:
            check(job)
        except ValidationRejected as e:
            rejected += 1
            logger.debug(
                "Skipping invalid %s job data: %s",
                job.source,
                e.reason,
                extra={"source": job.source, "url": job.url},
            )
            continue
        valid.append(job)

    return valid, rejected
