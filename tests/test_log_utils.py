# tests/test_log_utils.py

import logging
from logging.handlers import RotatingFileHandler

import pytest

from habitlens.utils import log_utils


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    target = tmp_path / "logs"
    monkeypatch.setattr(log_utils, "get_log_dir", lambda: target)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield target
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _our_file_handlers(log_dir):
    path = str(log_dir / "habitlens.log")
    return [h for h in logging.getLogger().handlers
            if isinstance(h, RotatingFileHandler) and h.baseFilename == path]


def test_setup_logging_is_idempotent(log_dir):
    log_utils.setup_logging("DEBUG")
    log_utils.setup_logging("DEBUG")
    assert len(_our_file_handlers(log_dir)) == 1
    assert (log_dir / "habitlens.log").exists()
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_name_means_info(log_dir):
    log_utils.setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO
