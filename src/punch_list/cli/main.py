# src/punch_list/cli/main.py

"""
CLI entrypoint.

Initializes logging from settings, then runs one of:
- serve:    the task API (uvicorn) on PUNCH_HOST:PUNCH_PORT,
- console:  the interactive client against PUNCH_BASE_URL,
- reset-db: wipe the task table and start a new store lifetime (ids restart at 1).
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from ..cli.bootstrap import create_client, create_store
from ..config import get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="punch-list",
        description="Personal task list: REST backend and console client.",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Run the task API server.")
    sub.add_parser("console", help="Run the interactive console client.")

    reset = sub.add_parser(
        "reset-db",
        help="Wipe every task and start a new store lifetime (ids restart at 1).",
        description=(
            "Delete every task and reset the id sequence. This starts a new store "
            "lifetime: ids handed out before the reset will be reused, so any id "
            "a client still holds may now point at a different task."
        ),
    )
    reset.add_argument(
        "--seed",
        metavar="TEXT",
        default=None,
        help="Insert one bootstrap task after the reset.",
    )
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    command = args.command or "serve"
    logger.info("Starting %s (%s)...", settings.app_name, command)

    if command == "serve":
        from ..api.server import run_server

        run_server(settings)
        return 0

    if command == "console":
        from ..connectors.console_connector import run_console_loop

        with create_client(settings) as client:
            run_console_loop(client, app_name=settings.app_name)
        logger.info("Bye.")
        return 0

    # reset-db
    if not args.yes:
        answer = input(f"Delete ALL tasks in {settings.tasks_db_path}? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("Aborted.")
            return 1
    store = create_store(settings)
    store.reset(seed_text=args.seed)
    print(f"Task database reset ({store.count_tasks()} task(s) now).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
