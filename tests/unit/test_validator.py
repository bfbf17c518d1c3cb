"""Unit tests for candidate validation."""

import pytest

from remote_jobs.aggregator.base import JobPosting
from remote_jobs.aggregator.errors import ValidationRejected
from remote_jobs.aggregator.validator import check, filter_valid, is_valid


def make_job(title="Backend Engineer", company="Acme Corp", url="https://example.com/jobs/1"):
    return JobPosting(title=title, company=company, url=url, source="Example")


@pytest.mark.parametrize(
    "job,expected",
    [
        (make_job(), True),
        (make_job(url="http://example.com/jobs/1"), True),
        (make_job(title=""), False),
        (make_job(title="   "), False),
        (make_job(company=""), False),
        (make_job(url=""), False),
        (make_job(url="/jobs/1"), False),
        (make_job(url="ftp://example.com/jobs/1"), False),
    ],
)
def test_is_valid(job, expected):
    assert is_valid(job) is expected


def test_check_reports_reason():
    with pytest.raises(ValidationRejected) as exc_info:
        check(make_job(company=" "))

    assert exc_info.value.reason == "blank company"


def test_filter_valid_keeps_order_and_counts_rejections():
    jobs = [
        make_job(title="First", url="https://example.com/1"),
        make_job(company=""),
        make_job(title="Second", url="https://example.com/2"),
        make_job(url="example.com/3"),
    ]

    valid, rejected = filter_valid(jobs)

    assert [job.title for job in valid] == ["First", "Second"]
    assert rejected == 2


def test_filter_valid_empty():
    assert filter_valid([]) == ([], 0)


pytestmark = pytest.mark.unit
