"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import json
from unittest.mock import Mock

import pytest

from remote_jobs.aggregator.db_storage import InMemoryJobStore
from remote_jobs.aggregator.retry import CancellationToken
from remote_jobs.aggregator.source_config import default_sources


SAMPLE_RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>We Work Remotely: Remote jobs</title>
    <link>https://weworkremotely.com/</link>
    <item>
      <title>Acme Corp: Backend Engineer</title>
      <link>https://weworkremotely.com/remote-jobs/acme-corp-backend-engineer</link>
    </item>
    <item>
      <title>Senior Python Developer</title>
      <link>https://weworkremotely.com/remote-jobs/globex-senior-python-developer</link>
      <dc:creator>Globex Inc</dc:creator>
    </item>
    <item>
      <title>Designer without company</title>
      <link>https://weworkremotely.com/remote-jobs/designer</link>
    </item>
  </channel>
</rss>
"""

SAMPLE_REMOTEOK_RESPONSE = [
    {
        "legal": "API Terms of Service: please link back to the job on RemoteOK",
        "position": "Metadata Position",
        "company": "Metadata Co",
        "url": "https://remoteok.com/metadata-should-never-be-stored",
    },
    {
        "id": "42",
        "position": "Data Engineer",
        "company": "Initech LLC",
        "url": "/remote-jobs/42",
    },
    {
        "id": "43",
        "position": "Site Reliability Engineer",
        "company": "Umbrella Corporation",
        "url": "https://remoteok.com/remote-jobs/43",
    },
]

SAMPLE_REMOTIVE_RESPONSE = {
    "job-count": 2,
    "jobs": [
        {
            "id": 1001,
            "title": "Frontend Developer",
            "company_name": "Wayne Enterprises",
            "url": "https://remotive.com/remote-jobs/software-dev/frontend-developer-1001",
        },
        {
            "id": 1002,
            "title": "QA Engineer",
            "company_name": "Stark Industries",
            "url": "https://remotive.com/remote-jobs/qa/qa-engineer-1002",
        },
    ],
}


def make_response(status_code: int = 200, body=b"") -> Mock:
    """Build a mocked requests.Response with the given status and body."""
    response = Mock()
    response.status_code = status_code
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    response.content = body
    return response


class RecordingToken(CancellationToken):
    """Cancellation token that records waits instead of sleeping.

    If `cancel_on_wait` is set, the wait with that (1-based) index reports a
    cancellation, as if a shutdown signal arrived during the backoff.
    """

    def __init__(self, cancel_on_wait: int = 0):
        super().__init__()
        self.waits: list[float] = []
        self.cancel_on_wait = cancel_on_wait

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if self.cancel_on_wait and len(self.waits) >= self.cancel_on_wait:
            self.cancel()
        return self.cancelled


@pytest.fixture
def response_factory():
    """Provide `make_response` for building mocked HTTP responses."""
    return make_response


@pytest.fixture
def token_factory():
    """Provide the RecordingToken class for tests that cancel mid-backoff."""
    return RecordingToken


@pytest.fixture
def rss_feed() -> bytes:
    return SAMPLE_RSS_FEED


@pytest.fixture
def remoteok_payload() -> list:
    return json.loads(json.dumps(SAMPLE_REMOTEOK_RESPONSE))


@pytest.fixture
def remotive_payload() -> dict:
    return json.loads(json.dumps(SAMPLE_REMOTIVE_RESPONSE))


@pytest.fixture(scope="function")
def store() -> InMemoryJobStore:
    """Provide an empty in-memory job store."""
    return InMemoryJobStore()


@pytest.fixture(scope="function")
def recording_token() -> RecordingToken:
    """Provide a cancellation token that never actually sleeps."""
    return RecordingToken()


@pytest.fixture(scope="function")
def source_configs() -> dict:
    """
    Provide the three production source configurations keyed by name.

    Scope: function (created fresh for each test)
    """
    return {config.name: config for config in default_sources()}


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
