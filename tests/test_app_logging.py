"""Tests for logging configuration."""

import logging

from photo_gallery.api.app import create_app
from photo_gallery.app_logging import configure_logging


def test_level_changes_without_adding_handlers() -> None:
    logger = logging.getLogger("photo_gallery")
    logger.handlers.clear()

    configure_logging("DEBUG")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False

    configure_logging("WARNING")

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_create_app_applies_configured_level(container) -> None:
    container.settings.log_level = "ERROR"

    create_app(container)

    assert logging.getLogger("photo_gallery").level == logging.ERROR
    assert logging.getLogger("photo_gallery.services").getEffectiveLevel() == (
        logging.ERROR
    )
