"""
Source configuration loader for the aggregator.

This module centralizes reading and validating job source definitions from
`config/sources.yml`. The CLI, the run coordinator and the tests should all use
this helper so that a new source is added by editing configuration, not code.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
SUPPORTED_FORMATS = ("rss", "json_array", "json_object")


@dataclass
class SourceConfig:
    """Static description of a single job source."""

    name: str
    endpoint: str
    format: str
    base_url: str = ""
    fields: dict[str, str] = field(default_factory=dict)
    items_key: str | None = None
    enabled: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def field_key(self, canonical: str) -> str:
        """Return the payload key holding a canonical field (title/company/url)."""
        return self.fields.get(canonical, canonical)


def default_sources() -> list[SourceConfig]:
    """Built-in definitions of the three production job boards."""
    return [
        SourceConfig(
            name="We Work Remotely",
            endpoint="https://weworkremotely.com/remote-jobs.rss",
            format="rss",
            base_url="https://weworkremotely.com",
        ),
        SourceConfig(
            name="RemoteOK",
            endpoint="https://remoteok.com/api",
            format="json_array",
            base_url="https://remoteok.com",
            fields={"title": "position", "company": "company", "url": "url"},
        ),
        SourceConfig(
            name="Remotive",
            endpoint="https://remotive.com/api/remote-jobs",
            format="json_object",
            base_url="https://remotive.com",
            fields={"title": "title", "company": "company_name", "url": "url"},
            items_key="jobs",
        ),
    ]


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent.parent


def _default_config_path() -> Path:
    override = os.getenv("SOURCES_CONFIG_PATH")
    if override:
        return Path(override)
    return _project_root() / "config" / "sources.yml"


def _parse_source(source_name: str, source_data: Mapping[str, Any]) -> SourceConfig:
    endpoint = source_data.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValueError(f"Source '{source_name}' must define a non-empty `endpoint` string")

    fmt = source_data.get("format")
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Source '{source_name}' has unsupported `format` {fmt!r} "
            f"(expected one of {', '.join(SUPPORTED_FORMATS)})"
        )

    fields = source_data.get("fields", {}) or {}
    if not isinstance(fields, Mapping):
        raise ValueError(f"`fields` for source '{source_name}' must be a mapping")

    items_key = source_data.get("items_key")
    if fmt == "json_object" and not items_key:
        raise ValueError(f"Source '{source_name}' uses json_object and must define `items_key`")

    try:
        timeout = float(source_data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"`timeout_seconds` for source '{source_name}' must be a number") from exc

    return SourceConfig(
        name=source_name,
        endpoint=endpoint.strip(),
        format=fmt,
        base_url=str(source_data.get("base_url", "") or "").rstrip("/"),
        fields={str(k): str(v) for k, v in fields.items()},
        items_key=items_key,
        enabled=bool(source_data.get("enabled", True)),
        timeout_seconds=timeout,
    )


def load_sources_config(config_path: str | None = None) -> list[SourceConfig]:
    """
    Load source definitions from a YAML file.

    Args:
        config_path: Optional override for the config file path. When omitted,
            `SOURCES_CONFIG_PATH` is used, falling back to `config/sources.yml`
            relative to the project root, and to `default_sources()` when that
            file is absent (e.g. a non-editable install).

    Returns:
        Source configurations in file order. Order matters: the coordinator
        processes sources in exactly this sequence.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist.
        ValueError: If the YAML file cannot be parsed or has invalid structure.
    """
    explicit = bool(config_path or os.getenv("SOURCES_CONFIG_PATH"))
    path = Path(config_path) if config_path else _default_config_path()
    if not path.exists() and not explicit:
        logger.info("No sources configuration at %s, using built-in sources", path)
        return default_sources()
    if not path.exists():
        logger.error("Sources configuration file not found: %s", path)
        raise FileNotFoundError(f"Sources configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config: Mapping[str, Any] | None = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse sources configuration: %s", exc)
        raise ValueError(f"Invalid YAML in sources configuration: {exc}") from exc

    if not raw_config:
        logger.warning("Sources configuration file is empty: %s", path)
        return []

    sources_section = raw_config.get("sources") if isinstance(raw_config, Mapping) else None
    if not isinstance(sources_section, Mapping):
        raise ValueError("`sources` section is missing or invalid in sources configuration")

    sources: list[SourceConfig] = []
    for source_name, source_data in sources_section.items():
        if not isinstance(source_data, Mapping):
            raise ValueError(f"Invalid source configuration for '{source_name}'")
        sources.append(_parse_source(str(source_name), source_data))

    logger.info(
        "Loaded sources configuration",
        extra={
            "sources_count": len(sources),
            "enabled_sources": [cfg.name for cfg in sources if cfg.enabled],
        },
    )
    return sources


__all__ = ["SourceConfig", "default_sources", "load_sources_config"]
