# tests/test_commands.py

from __future__ import annotations

from punch_list.cli.commands import CommandRegistry, registry, render_views
from punch_list.client.task_client import TaskClient
from punch_list.connectors.console_connector import handle_line


def test_command_registry_routes_2_and_3_params(client: TaskClient) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(client, args):
        called["h2"] += 1
        return "h2"

    def h3(client, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bb"])

    assert reg.handle(client, "/a x") == "h2"
    assert reg.handle(client, "/BB y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(client: TaskClient) -> None:
    reg = CommandRegistry()
    assert reg.handle(client, "hello") is None
    assert "Unknown command" in (reg.handle(client, "/nope") or "")
    assert "Empty command" in (reg.handle(client, "/") or "")


def test_render_empty_views(client: TaskClient) -> None:
    client.load()
    out = render_views(client)
    assert "Hello, Tasks." in out
    assert "Nada!" in out
    assert "COMPLETED TASKS" not in out


def test_console_lifecycle(client: TaskClient) -> None:
    client.load()

    out = handle_line(client, "Buy milk")
    assert out is not None and "1. Buy milk" in out

    handle_line(client, "/add Walk the dog")
    assert [t.task for t in client.tasks] == ["Buy milk", "Walk the dog"]

    out = registry.handle(client, "/done 1")
    assert out is not None and "COMPLETED TASKS" in out
    assert [t.task for t in client.complete] == ["Buy milk"]

    registry.handle(client, "/edit 1 Walk the cat")
    assert [t.task for t in client.tasks] == ["Walk the cat"]

    registry.handle(client, "/undo 1")
    assert client.complete == []
    assert [t.task for t in client.tasks] == ["Buy milk", "Walk the cat"]

    registry.handle(client, "/done 2")  # Walk the cat
    registry.handle(client, "/delete 1")
    assert client.complete == []

    assert registry.handle(client, "/clear") == "No completed tasks to clear."


def test_console_guards(client: TaskClient) -> None:
    client.load()
    assert handle_line(client, "   ") is None
    assert "Nothing to add" in (registry.handle(client, "/add") or "")
    assert "No task #3" in (registry.handle(client, "/done 3") or "")
    assert "Not a task number" in (registry.handle(client, "/done x") or "")
    assert client.tasks == []


def test_edit_without_text_shows_current(client: TaskClient) -> None:
    client.add("original")
    out = registry.handle(client, "/edit 1") or ""
    assert "original" in out
    assert client.editing is None
    assert [t.task for t in client.tasks] == ["original"]


def test_clear_command(client: TaskClient) -> None:
    client.add("x")
    client.toggle_complete(client.tasks[0])
    out = registry.handle(client, "/clear") or ""
    assert "COMPLETED TASKS" not in out
    assert client.complete == []


def test_registry_passes_raw_rest_to_handlers_that_ask(client: TaskClient) -> None:
    reg = CommandRegistry()
    seen: list[tuple[list[str], str]] = []

    def h(client, args, *, rest=""):
        seen.append((args, rest))
        return "ok"

    reg.register("say", h, "say")

    assert reg.handle(client, "/say   two  spaces  ") == "ok"
    assert reg.handle(client, "/say") == "ok"
    assert seen == [(["two", "spaces"], "  two  spaces  "), ([], "")]


def test_add_and_edit_keep_whitespace_as_typed(client: TaskClient) -> None:
    client.load()
    registry.handle(client, "/add   indented  text  ")
    assert [t.task for t in client.tasks] == ["  indented  text  "]

    registry.handle(client, "/edit 1  - [ ] two  spaces ")
    assert [t.task for t in client.tasks] == [" - [ ] two  spaces "]


def test_plain_line_is_added_without_trimming(client: TaskClient) -> None:
    client.load()
    handle_line(client, "  leading and trailing  ")
    assert [t.task for t in client.tasks] == ["  leading and trailing  "]
