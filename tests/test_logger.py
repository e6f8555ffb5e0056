# File: tests/test_logger.py
import logging

import pytest

from site_crawler.logger import LOGGER_NAME, configure, get_logger


@pytest.fixture(autouse=True)
def restore_project_logger():
    root = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = root.handlers[:], root.level, root.propagate
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.handlers.extend(handlers)
    root.setLevel(level)
    root.propagate = propagate


def test_module_loggers_are_children_of_project_logger():
    assert get_logger("site_crawler.crawler.worker").name == f"{LOGGER_NAME}.crawler.worker"
    assert get_logger().name == LOGGER_NAME


def test_configure_replaces_handlers():
    configure()
    root = configure(level="DEBUG")
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert root.propagate is False


def test_configure_writes_log_file(tmp_path):
    log_file = tmp_path / "crawl.log"
    root = configure(log_file=log_file, log_format="%(levelname)s %(name)s %(message)s")
    assert len(root.handlers) == 2

    get_logger("site_crawler.coordinator").info("Scraped %s", "https://a.test")
    for handler in root.handlers:
        handler.flush()
    assert log_file.read_text(encoding="utf-8").strip() == f"INFO {LOGGER_NAME}.coordinator Scraped https://a.test"
