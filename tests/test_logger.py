from __future__ import annotations

import logging

from backend.utils.logger import ROOT_PACKAGE_LOGGER, configure_logging, get_logger


def test_get_logger_returns_named_module_logger():
    logger = get_logger("backend.services.availability_service")
    assert logger.name == "backend.services.availability_service"


def test_explicit_level_retunes_package_logger():
    get_logger("backend.tests")
    try:
        configure_logging("debug")
        assert logging.getLogger(ROOT_PACKAGE_LOGGER).level == logging.DEBUG
        configure_logging("warning")
        assert logging.getLogger(ROOT_PACKAGE_LOGGER).level == logging.WARNING
    finally:
        configure_logging("info")
