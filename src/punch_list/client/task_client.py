# src/punch_list/client/task_client.py

"""
Task client: local UI state mirroring the two server views.

Consistency model:
- the server is the only authority; `tasks` and `complete` are caches
- every mutation is followed by a full refetch of both views (no optimistic patching)
- mutations are serialized; a refetch that has been superseded by a newer one
  does not overwrite the newer result
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any

import httpx

from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

_NON_BLANK = re.compile(r"\S")


def has_valid_text(text: str | None) -> bool:
    """True if the text holds at least one non-whitespace character."""
    return bool(text) and _NON_BLANK.search(text or "") is not None


@dataclass(slots=True)
class EditDraft:
    """Edit overlay state: which task is being edited and its unsaved text."""

    task_id: int
    text: str


class TaskClient:
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:3000",
        *,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )

        self.greeting: str = ""
        self.tasks: list[Task] = []
        self.complete: list[Task] = []
        self.editing: EditDraft | None = None

        self._lock = threading.RLock()
        self._generation = 0

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> TaskClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ---- transport ----

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response | None:
        """
        One HTTP round trip. Transport failures and non-2xx answers are logged
        and reported as None; nothing is retried.
        """
        try:
            resp = self._http.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            return None

    def _fetch_tasks(self, path: str) -> list[Task] | None:
        resp = self._request("GET", path)
        if resp is None:
            return None
        try:
            return [Task.from_json(item) for item in resp.json()]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("GET %s returned an unreadable task list: %s", path, e)
            return None

    # ---- views ----

    def load(self) -> None:
        """Initial load: greeting once, then both task views."""
        resp = self._request("GET", "/")
        if resp is not None:
            try:
                self.greeting = str(resp.json().get("text", ""))
            except (ValueError, AttributeError) as e:
                logger.error("GET / returned an unreadable greeting: %s", e)
        self.refetch()

    def refetch(self) -> None:
        """
        Reload pending then completed views and replace both wholesale.

        A view that failed to load keeps its previous contents.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        pending = self._fetch_tasks("/tasks")
        completed = self._fetch_tasks("/tasks/complete")

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale refetch generation=%s", generation)
                return
            if pending is not None:
                self.tasks = pending
            if completed is not None:
                self.complete = sorted(completed, key=lambda t: t.updated_at, reverse=True)

    # ---- guards ----

    def can_add(self, text: str | None) -> bool:
        return has_valid_text(text)

    def can_clear(self) -> bool:
        return len(self.complete) > 0

    # ---- mutations ----

    def add(self, text: str) -> bool:
        """
        Create a task from input text.

        Returns False without any request when the text is blank; otherwise
        the input is considered consumed (cleared) once the refetch settles.
        """
        if not self.can_add(text):
            return False
        with self._lock:
            self._request("POST", "/tasks", json={"task": text})
            self.refetch()
        return True

    def begin_edit(self, task: Task) -> EditDraft:
        self.editing = EditDraft(task_id=task.id, text=task.task)
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None

    def save_edit(self, draft: EditDraft | None = None) -> None:
        draft = draft or self.editing
        if draft is None:
            return
        with self._lock:
            self._request("PUT", "/tasks", json={"id": draft.task_id, "task": draft.text})
            self.refetch()
        self.editing = None

    def toggle_complete(self, task: Task) -> None:
        with self._lock:
            self._request(
                "PUT",
                "/tasks/complete",
                json={"id": task.id, "complete": not task.complete},
            )
            self.refetch()

    def delete(self, task_id: int) -> None:
        with self._lock:
            self._request("DELETE", f"/tasks/delete/{int(task_id)}")
            self.refetch()

    def clear_completed(self) -> bool:
        """Bulk-delete completed tasks. Disabled (returns False) when none are shown."""
        if not self.can_clear():
            return False
        with self._lock:
            self._request("DELETE", "/tasks/clear")
            self.refetch()
        return True
