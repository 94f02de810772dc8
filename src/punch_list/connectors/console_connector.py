# src/punch_list/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_views
from ..client.task_client import TaskClient

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_line(
    client: TaskClient,
    line: str,
    emit: Callable[[str], None] | None = None,
) -> str | None:
    """
    One console input line -> reply text.

    Slash commands go to the registry; any other non-blank text is added as a
    new task. Returns None when there is nothing to print.
    """
    if not line.strip():
        return None

    try:
        reply = command_registry.handle(client, line, emit=emit)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    if reply is not None:
        return reply

    if client.add(line):
        return render_views(client)
    return None


def run_console_loop(client: TaskClient, app_name: str = "punch-list") -> None:
    logger.info("Console started (app=%s).", app_name)

    client.load()
    print(render_views(client))
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.strip().lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(client, user_input, emit=emit)
        if reply is not None:
            print(reply)
            print()

    logger.info("Console finished.")
