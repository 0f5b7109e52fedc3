from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the QueueListener architecture, idempotency of configuration,
and persistence to a log file.
"""

import logging
from pathlib import Path

import pytest

from gocombiner.infra.logging import LoggingConfig, configure_logging, shutdown_logging
from gocombiner.infra.logging.core import _QUEUE_LISTENER_ATTR
from gocombiner.infra.logging.handlers import _is_our_handler


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach our handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers():
    return [h for h in logging.getLogger().handlers if _is_our_handler(h)]


def test_logging_idempotency() -> None:
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    count = len(_our_handlers())
    configure_logging(cfg)

    assert count == 1
    assert len(_our_handlers()) == count


def test_logging_force_replaces_listener() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    first = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG"), force=True)

    assert getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR) is not first
    assert logging.getLogger().level == logging.DEBUG
    assert len(_our_handlers()) == 1


def test_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "combine.log"
    configure_logging(LoggingConfig(level="INFO", console=False, log_file=str(log_file)))

    logging.getLogger("gocombiner.test").info("scan finished")
    shutdown_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "scan finished" in content
    assert "gocombiner.test" in content


def test_shutdown_is_safe_to_repeat() -> None:
    configure_logging(LoggingConfig(level="INFO"))

    shutdown_logging()
    shutdown_logging()

    assert _our_handlers() == []
