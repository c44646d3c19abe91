"""Tests for logging configuration."""

import logging

from label_assistant.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("label_assistant")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.propagate is False


def test_configure_logging_sets_info_level() -> None:
    logger = logging.getLogger("label_assistant")
    logger.setLevel(logging.WARNING)

    configure_logging()

    assert logger.level == logging.INFO
