"""Tests for the sources YAML loader."""

from pathlib import Path

import pytest

from remote_jobs.aggregator.source_config import (
    SourceConfig,
    default_sources,
    load_sources_config,
)

SHIPPED_CONFIG = Path(__file__).resolve().parents[2] / "config" / "sources.yml"


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "sources.yml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_shipped_config_matches_built_in_sources():
    assert load_sources_config(str(SHIPPED_CONFIG)) == default_sources()


def test_sources_keep_file_order(tmp_path):
    path = write_config(
        tmp_path,
        """
sources:
  Zeta:
    endpoint: https://zeta.example.com/feed.rss
    format: rss
  Alpha:
    endpoint: https://alpha.example.com/api
    format: json_array
    base_url: https://alpha.example.com/
    timeout_seconds: 5
""",
    )

    sources = load_sources_config(path)

    assert [source.name for source in sources] == ["Zeta", "Alpha"]
    assert sources[1].base_url == "https://alpha.example.com"
    assert sources[1].timeout_seconds == 5.0
    assert sources[0].timeout_seconds == 15.0


def test_disabled_flag(tmp_path):
    path = write_config(
        tmp_path,
        """
sources:
  Feed:
    endpoint: https://example.com/feed.rss
    format: rss
    enabled: false
""",
    )

    assert load_sources_config(path)[0].enabled is False


def test_field_key_defaults_to_canonical_name():
    config = SourceConfig(name="x", endpoint="https://x", format="json_array", fields={"title": "position"})

    assert config.field_key("title") == "position"
    assert config.field_key("url") == "url"


def test_env_var_overrides_path(tmp_path, monkeypatch):
    path = write_config(
        tmp_path,
        """
sources:
  Only:
    endpoint: https://example.com/api
    format: json_array
""",
    )
    monkeypatch.setenv("SOURCES_CONFIG_PATH", path)

    assert [source.name for source in load_sources_config()] == ["Only"]


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sources_config(str(tmp_path / "missing.yml"))


def test_empty_file_yields_no_sources(tmp_path):
    assert load_sources_config(write_config(tmp_path, "")) == []


@pytest.mark.parametrize(
    "text,message",
    [
        ("sources: [1, 2]", "`sources` section is missing"),
        ("other: {}", "`sources` section is missing"),
        ("sources:\n  Bad: 3", "Invalid source configuration"),
        ("sources:\n  Bad:\n    format: rss", "non-empty `endpoint`"),
        ("sources:\n  Bad:\n    endpoint: https://x\n    format: csv", "unsupported `format`"),
        ("sources:\n  Bad:\n    endpoint: https://x\n    format: json_object", "`items_key`"),
        (
            "sources:\n  Bad:\n    endpoint: https://x\n    format: rss\n    fields: [title]",
            "`fields`",
        ),
        (
            "sources:\n  Bad:\n    endpoint: https://x\n    format: rss\n    timeout_seconds: soon",
            "`timeout_seconds`",
        ),
        ("sources: [unclosed", "Invalid YAML"),
    ],
)
def test_invalid_configuration(tmp_path, text, message):
    with pytest.raises(ValueError, match=message):
        load_sources_config(write_config(tmp_path, text))


pytestmark = pytest.mark.unit
