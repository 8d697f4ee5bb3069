"""Shared fixtures for the generator tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from class_db_to_dts.logging_config import LOGGER_NAME

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def xml_dir() -> Path:
    """Directory of documentation XML class documents."""
    return TEST_DATA / "godot_xml"


@pytest.fixture
def api_json() -> Path:
    """A small extension_api.json document."""
    return TEST_DATA / "extension_api.json"


@pytest.fixture(autouse=True)
def restore_package_logger():
    """setup_logging() reconfigures the package logger; undo it after each test."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
