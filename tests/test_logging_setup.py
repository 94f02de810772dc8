# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from punch_list.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("punch_list.api.server", logging.DEBUG))
    assert f.filter(_record("uvicorn.error", logging.INFO))
    assert not f.filter(_record("uvicorn.access", logging.INFO))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("punch_list.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file.exists()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


def test_console_filter_lets_failed_requests_through() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("uvicorn.access", logging.WARNING))
    assert not f.filter(_record("httpcore.connection", logging.INFO))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_twice_keeps_one_pair_of_handlers(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(root.handlers) == 2
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
