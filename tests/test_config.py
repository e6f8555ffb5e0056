# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site_crawler.config import (
    DEFAULT_RANDOM_INDEX_THRESHOLD,
    DEFAULT_STATUS_LOG_FREQUENCY,
    CrawlerSettings,
    load_config,
    merge_overrides,
)


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("seed_urls: [http://example.com]\ncrawlers: 2", None),
        (json.dumps({"seed_urls": ["http://example.com"], "crawlers": 2}), None),
        ("crawlers: 0", ValidationError),
        ("unknown_key: 1", ValidationError),
        ("- just\n- a list", TypeError),
        ("seed_urls: [unclosed", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".json" if content.strip().startswith("{") else ".yaml"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerSettings)
        assert cfg.seed_urls == ["http://example.com"]
        assert cfg.crawlers == 2


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_load_config_unsupported_suffix(tmp_path):
    cfg_path = write_file(tmp_path, "crawlers = 1", ".toml")
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_load_config_default_missing_uses_builtin_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MONGODB_URI", raising=False)
    cfg = load_config(None)
    assert cfg.seed_urls == []
    assert cfg.crawlers == 1
    assert cfg.max_depth is None
    assert cfg.whitelisted_hosts is None
    assert cfg.mongodb_uri is None
    assert cfg.random_index_threshold == DEFAULT_RANDOM_INDEX_THRESHOLD
    assert cfg.status_log_frequency == DEFAULT_STATUS_LOG_FREQUENCY


def test_load_config_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("crawlers: 7\n", encoding="utf-8")
    assert load_config(None).crawlers == 7


def test_mongodb_uri_from_environment(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    assert CrawlerSettings().mongodb_uri == "mongodb://db:27017"


def test_comma_separated_lists():
    cfg = CrawlerSettings(seed_urls="https://a.test, https://b.test,", whitelisted_hosts="a.test,b.test")
    assert cfg.seed_urls == ["https://a.test", "https://b.test"]
    assert cfg.crawl_config.whitelisted_hosts == frozenset({"a.test", "b.test"})
    assert cfg.crawl_config.whitelisting_enabled


def test_crawl_config_without_policy():
    crawl_config = CrawlerSettings().crawl_config
    assert crawl_config.max_depth is None
    assert not crawl_config.whitelisting_enabled


def test_settings_are_frozen():
    cfg = CrawlerSettings()
    with pytest.raises(ValidationError):
        cfg.crawlers = 3


def test_merge_overrides_ignores_none_and_validates():
    cfg = CrawlerSettings(crawlers=2, max_depth=4)
    merged = merge_overrides(cfg, crawlers=None, max_depth=1, seed_urls="https://a.test")
    assert merged.crawlers == 2
    assert merged.max_depth == 1
    assert merged.seed_urls == ["https://a.test"]
    with pytest.raises(ValidationError):
        merge_overrides(cfg, max_depth=-1)
