import logging
from pathlib import Path

import pytest

from Utils.logging_config import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_error_log_goes_under_log_dir(tmp_path, root_logger):
    log_dir = tmp_path / "logs"
    log_file = Path(setup_logging("parse_formula", logging.WARNING, str(log_dir)))
    assert log_dir.is_dir()
    assert log_file.parent == log_dir
    assert log_file.name.startswith("parse_formula_")
    assert log_file.suffix == ".log"


def test_no_log_dir_keeps_no_file(tmp_path, monkeypatch, root_logger):
    monkeypatch.chdir(tmp_path)
    assert setup_logging("parse_formula", log_dir=None) is None
    assert list(tmp_path.iterdir()) == []
