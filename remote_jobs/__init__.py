"""Remote Jobs Aggregator Package.

This package contains the services of the remote jobs aggregator:
- aggregator: Fetches job postings from remote-work job boards, validates them
  and stores each distinct posting URL exactly once
"""

__version__ = "0.1.0"
