# src/punch_list/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the HTTP layer.

The API depends on this Protocol instead of the concrete SQLite store.
This keeps storage swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Single-entity repository behind the task API."""

    def list_by_completion(self, complete: bool) -> list[Task]: ...
    def create_task(self, task: str, complete: bool = False) -> Task: ...

    # Mutators report whether a row matched; callers may ignore it.
    def update_text(self, task_id: int, text: str) -> bool: ...
    def update_completion(self, task_id: int, complete: bool) -> bool: ...
    def delete_by_id(self, task_id: int) -> bool: ...
    def delete_where_completed(self) -> int: ...
