"""
Loading and validation of site_crawler run configuration.
Pydantic describes the schema, YAML/JSON files and CLI flags feed it.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from site_crawler import __version__

DEFAULT_USER_AGENT = (
    f"Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/108.0.0.0 site_crawler/{__version__}"
)
DEFAULT_RANDOM_INDEX_THRESHOLD = 300
DEFAULT_STATUS_LOG_FREQUENCY = 30
DEFAULT_IDLE_INTERVAL = 1.0
DEFAULT_TIMEOUT = 10.0
DEFAULT_MONGODB_DATABASE = "gsearch"


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


class CrawlConfig(BaseModel):
    """Link policy applied by the coordinator; fixed for the whole run."""

    model_config = ConfigDict(frozen=True)

    max_depth: Optional[int] = Field(None, ge=0, description="Deepest level that may be enqueued.")
    whitelisted_hosts: Optional[FrozenSet[str]] = Field(
        None, description="If set, only links to these hosts are enqueued."
    )

    @property
    def whitelisting_enabled(self) -> bool:
        return self.whitelisted_hosts is not None


class CrawlerSettings(BaseModel):
    """Configuration for one crawl run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_urls: List[str] = Field(default_factory=list, description="Start URLs.")
    crawlers: int = Field(1, ge=1, description="Number of concurrent workers.")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-request timeout (seconds).")
    whitelisted_hosts: Optional[List[str]] = Field(None, description="Hosts allowed to be crawled.")
    max_depth: Optional[int] = Field(None, ge=0, description="Maximum link depth.")
    proxy: Optional[str] = Field(None, description="HTTP proxy URL.")
    mock_db: bool = Field(False, description="Send results to a no-op store.")
    mongodb_uri: Optional[str] = Field(
        default_factory=lambda: os.environ.get("MONGODB_URI") or None,
        description="MongoDB connection URI.",
    )
    mongodb_database: str = Field(DEFAULT_MONGODB_DATABASE, min_length=1)
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    random_index_threshold: int = Field(DEFAULT_RANDOM_INDEX_THRESHOLD, ge=1)
    status_log_frequency: int = Field(DEFAULT_STATUS_LOG_FREQUENCY, ge=1)
    idle_interval: float = Field(DEFAULT_IDLE_INTERVAL, ge=0, description="Sleep on an empty queue.")

    @field_validator("seed_urls", mode="before")
    def _split_seed_urls(cls, v: Any) -> Any:
        return _split_list(v)

    @field_validator("whitelisted_hosts", mode="before")
    def _split_hosts(cls, v: Any) -> Any:
        if v is None:
            return None
        return _split_list(v)

    @property
    def crawl_config(self) -> CrawlConfig:
        hosts = frozenset(self.whitelisted_hosts) if self.whitelisted_hosts is not None else None
        return CrawlConfig(max_depth=self.max_depth, whitelisted_hosts=hosts)


DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerSettings:
    """
    Read YAML or JSON and return validated CrawlerSettings.
    Without a path the default config file is used when present, otherwise
    the built-in defaults.
    """
    if path is None:
        if not DEFAULT_CFG.is_file():
            return CrawlerSettings()
        path_obj = DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CrawlerSettings(**data)


def merge_overrides(settings: CrawlerSettings, **overrides: Any) -> CrawlerSettings:
    """Return new settings with every non-None override applied and re-validated."""
    data = settings.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlerSettings(**data)
