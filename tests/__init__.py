"""Remote Jobs Aggregator Test Suite.

Test Structure:
- unit/: Unit tests for adapters, validator, retry, storage and the CLI
- integration/: Full aggregator runs with mocked HTTP and an in-memory store
"""
