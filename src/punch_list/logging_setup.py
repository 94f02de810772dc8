# src/punch_list/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console filter for the server and the console client.

    punch_list records always pass. uvicorn's startup and error lines pass at
    INFO, but its one-line-per-request access log only shows failures.
    Everything else (httpx/httpcore request chatter from the client,
    captured warnings) reaches the console only at ERROR; the log file still
    gets all of it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("punch_list"):
            return True

        if name == "uvicorn.access":
            return record.levelno >= logging.WARNING

        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/punch_list",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send logs to stderr (filtered) and to <log_dir>/punch_list.log (unfiltered).

    main() calls this before building the store, so the schema migration
    lines land in the file too. run_server() passes log_config=None to
    uvicorn, which then logs through these handlers instead of its own.
    Returns the path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "punch_list.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Calling this again replaces the handlers instead of stacking them.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Deprecation warnings from fastapi/pydantic end up in the log file.
    logging.captureWarnings(True)

    # httpx logs every client request at INFO; only keep problems.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_file
