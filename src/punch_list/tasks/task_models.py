# src/punch_list/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def ts_to_iso(ts: float) -> str:
    """Epoch seconds -> ISO-8601 UTC with microsecond precision ("...Z")."""
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="microseconds").replace("+00:00", "Z")


def iso_to_ts(raw: str) -> float:
    s = raw.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


@dataclass(slots=True)
class Task:
    id: int
    task: str
    complete: bool
    created_at: float
    updated_at: float

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task": self.task,
            "complete": self.complete,
            "createdAt": ts_to_iso(self.created_at),
            "updatedAt": ts_to_iso(self.updated_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=int(data["id"]),
            task=str(data.get("task") or ""),
            complete=bool(data.get("complete", False)),
            created_at=iso_to_ts(str(data["createdAt"])),
            updated_at=iso_to_ts(str(data["updatedAt"])),
        )
