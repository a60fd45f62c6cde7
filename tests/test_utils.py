"""Tests for logging helpers."""

from __future__ import annotations

import logging
import pathlib
from logging.handlers import RotatingFileHandler

import pytest

from bagforest.decorators import time_func
from bagforest.utils import configure_logging, get_logger


@pytest.fixture
def package_root():
    root = logging.getLogger("bagforest")
    before = list(root.handlers)
    yield root
    for handler in root.handlers:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


class TestGetLogger:
    def test_class_loggers_are_package_children(self) -> None:
        logger = get_logger("RandomForest")
        assert logger.name == "bagforest.RandomForest"
        assert logger.parent is logging.getLogger("bagforest")

    def test_module_names_are_kept(self) -> None:
        assert get_logger("bagforest.models.random_forest.persistence").name == "bagforest.models.random_forest.persistence"

    def test_single_console_handler(self, package_root: logging.Logger) -> None:
        get_logger("DataGridLoader")
        get_logger("RandomForest")
        configure_logging()

        consoles = [h for h in package_root.handlers if type(h) is logging.StreamHandler]
        assert len(consoles) == 1
        assert get_logger("RandomForest").handlers == []


class TestConfigureLogging:
    def test_file_added_after_first_use(self, tmp_path: pathlib.Path, package_root: logging.Logger) -> None:
        logger = get_logger("bagforest.tests.file")
        log_path = tmp_path / "logs" / "run.log"

        configure_logging(log_path=log_path)
        configure_logging(log_path=log_path)
        logger.info("hello")

        file_handlers = [h for h in package_root.handlers if isinstance(h, RotatingFileHandler)]
        assert len([h for h in file_handlers if pathlib.Path(h.baseFilename) == log_path.resolve()]) == 1
        for handler in file_handlers:
            handler.flush()
        assert "bagforest.tests.file" in log_path.read_text()
        assert "hello" in log_path.read_text()

    def test_level_can_be_changed(self, package_root: logging.Logger) -> None:
        previous = package_root.level
        try:
            configure_logging(level=logging.WARNING)
            assert not get_logger("bagforest.tests.level").isEnabledFor(logging.INFO)
        finally:
            package_root.setLevel(previous)


def test_time_func_logs_through_owner_logger(caplog) -> None:
    class Job:
        logger = logging.getLogger("bagforest.tests.job")

        @time_func
        def run(self, value: int) -> int:
            return value * 2

    with caplog.at_level(logging.DEBUG, logger="bagforest.tests.job"):
        assert Job().run(21) == 42
    assert "Function 'run' executed in" in caplog.text
