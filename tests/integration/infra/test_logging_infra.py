from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, log file rotation and the shutdown lifecycle.
"""

import logging
import time
from logging.handlers import QueueListener
from pathlib import Path

import pytest

from scanex.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up root logger handlers before and after each test."""
    def _reset() -> None:
        root = logging.getLogger()

        listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
        if listener and isinstance(listener, QueueListener):
            listener.stop()
            setattr(root, _QUEUE_LISTENER_ATTR, None)

        for h in list(root.handlers):
            if getattr(h, _HANDLER_TAG_ATTR, False):
                root.removeHandler(h)
                h.close()

        if hasattr(root, _CONFIGURED_FLAG_ATTR):
            delattr(root, _CONFIGURED_FLAG_ATTR)

    _reset()
    yield
    _reset()


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("scanex.rotation")

    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Draining the listener flushes every queued record
    shutdown_logging()

    assert log_file.exists()
    assert (tmp_path / "rotate.log.1").exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-03: Verify that the root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    queue_handlers = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]

    assert len(queue_handlers) == 1
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_shutdown_allows_reconfiguration(tmp_path: Path) -> None:
    """TC-04: Verify that shutdown detaches handlers and clears the configured flag."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    shutdown_logging()

    root = logging.getLogger()
    assert not [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]
    assert getattr(root, _QUEUE_LISTENER_ATTR) is None

    log_file = tmp_path / "second.log"
    configure_logging(LoggingConfig(level="INFO", console=False, log_file=str(log_file)))
    logging.getLogger("scanex.second").info("hello")
    time.sleep(0.1)
    shutdown_logging()

    assert "hello" in log_file.read_text(encoding="utf-8")


def test_quiet_console_keeps_file_detail(tmp_path: Path, capsys) -> None:
    """TC-05: Verify that a stricter console level does not filter the file."""
    log_file = tmp_path / "quiet.log"
    configure_logging(LoggingConfig(level="INFO", console=True, console_level="WARNING", log_file=str(log_file)))

    logging.getLogger("scanex.quiet").info("progress message")
    shutdown_logging()

    assert "progress message" in log_file.read_text(encoding="utf-8")
    assert "progress message" not in capsys.readouterr().err
