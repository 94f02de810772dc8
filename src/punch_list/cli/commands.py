# src/punch_list/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import re
from collections.abc import Callable
from typing import cast

from ..client.task_client import TaskClient
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[TaskClient, list[str]], str]
CommandHandler3 = Callable[[TaskClient, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# "/edit 2  new text": everything after the task number.
_EDIT_TEXT = re.compile(r"\s*\S+(.*)\Z", re.S)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        client: TaskClient,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers that declare a keyword-only `rest` parameter also receive the
        raw text after the command word, with its whitespace untouched.
        """
        if not line.startswith("/"):
            return None

        body = line[1:].lstrip()
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        rest = _after_token(body[len(parts[0]):])

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            params = inspect.signature(handler).parameters
        except (TypeError, ValueError):
            params = None

        kwargs: dict[str, str] = {}
        if params is None:
            nparams = 3
        else:
            if "rest" in params:
                kwargs["rest"] = rest
            nparams = sum(1 for p in params.values() if p.kind is not p.KEYWORD_ONLY)

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(client, args, emit, **kwargs)

        h2 = cast(CommandHandler2, handler)
        return h2(client, args, **kwargs)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


def _after_token(text: str) -> str:
    """Drop the single separator after a command word or argument."""
    return text[1:] if text[:1].isspace() else text


registry = CommandRegistry()


def render_views(client: TaskClient) -> str:
    """Numbered pending list, then the completed list (hidden when empty)."""
    lines = []
    if client.greeting:
        lines.append(client.greeting)
        lines.append("")

    lines.append("PENDING TASKS")
    if not client.tasks:
        lines.append("  Nada!")
    for i, t in enumerate(client.tasks, start=1):
        lines.append(f"  {i}. {t.task}")

    if client.complete:
        lines.append("")
        lines.append("COMPLETED TASKS")
        for i, t in enumerate(client.complete, start=1):
            lines.append(f"  {i}. [x] {t.task}")

    return "\n".join(lines)


def _pick(items: list[Task], args: list[str], label: str) -> Task | str:
    """Resolve a 1-based list position from args[0]; returns an error string on failure."""
    if not args:
        return f"Missing task number for the {label} list."
    try:
        pos = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]!r}."
    if pos < 1 or pos > len(items):
        return f"No task #{pos} in the {label} list."
    return items[pos - 1]


def cmd_help(client: TaskClient, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(client: TaskClient, args: list[str]) -> str:
    return render_views(client)


def cmd_refresh(client: TaskClient, args: list[str]) -> str:
    client.refetch()
    return render_views(client)


def cmd_add(client: TaskClient, args: list[str], *, rest: str = "") -> str:
    if not client.add(rest):
        return "Nothing to add: type some text after /add."
    return render_views(client)


def cmd_edit(
    client: TaskClient,
    args: list[str],
    emit: CommandEmitter | None = None,
    *,
    rest: str = "",
) -> str:
    """
    /edit N          -> show the current text of pending task N
    /edit N <text>   -> replace the text of pending task N (kept as typed)
    """
    picked = _pick(client.tasks, args, "pending")
    if isinstance(picked, str):
        return picked

    draft = client.begin_edit(picked)
    m = _EDIT_TEXT.match(rest)
    new_text = _after_token(m.group(1)) if m else ""
    if not client.can_add(new_text):
        client.cancel_edit()
        return f"Task #{args[0]}: {draft.text}\nUse /edit {args[0]} <new text> to change it."

    if emit:
        with contextlib.suppress(Exception):
            emit(f"Saving task #{args[0]}...")

    draft.text = new_text
    client.save_edit(draft)
    return render_views(client)


def cmd_done(client: TaskClient, args: list[str]) -> str:
    picked = _pick(client.tasks, args, "pending")
    if isinstance(picked, str):
        return picked
    client.toggle_complete(picked)
    return render_views(client)


def cmd_undo(client: TaskClient, args: list[str]) -> str:
    picked = _pick(client.complete, args, "completed")
    if isinstance(picked, str):
        return picked
    client.toggle_complete(picked)
    return render_views(client)


def cmd_delete(client: TaskClient, args: list[str]) -> str:
    picked = _pick(client.complete, args, "completed")
    if isinstance(picked, str):
        return picked
    client.delete(picked.id)
    return render_views(client)


def cmd_clear(client: TaskClient, args: list[str]) -> str:
    if not client.clear_completed():
        return "No completed tasks to clear."
    return render_views(client)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show both task lists.", aliases=["ls"])
registry.register("refresh", cmd_refresh, help_text="Reload both lists from the server.")
registry.register("add", cmd_add, help_text="Add a task: /add <text> (plain text also adds).")
registry.register("edit", cmd_edit, help_text="Edit pending task: /edit N <new text>.")
registry.register("done", cmd_done, help_text="Mark pending task N complete: /done N.")
registry.register("undo", cmd_undo, help_text="Move completed task N back: /undo N.")
registry.register(
    "delete", cmd_delete, help_text="Delete completed task N: /delete N.", aliases=["rm"]
)
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
