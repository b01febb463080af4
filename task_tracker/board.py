"""Local view state for a fetched task list: filter, counters, due-date labels.

Tasks are the JSON dicts returned by the API (``_id``, ``status``, ``dueDate``...).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

FILTERS = ("all", "pending", "completed")


@dataclass(frozen=True)
class BoardStats:
    total: int
    pending: int
    completed: int

    @property
    def completion_rate(self) -> int:
        """Whole-number percent of completed tasks; 0 for an empty board."""
        if self.total == 0:
            return 0
        return int(self.completed * 100 / self.total + 0.5)


def _due(task: Dict[str, Any]) -> Optional[date]:
    raw = task.get("dueDate")
    if not raw:
        return None
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw)[:10])


def is_overdue(task: Dict[str, Any], today: date) -> bool:
    due = _due(task)
    return due is not None and due < today


def due_label(task: Dict[str, Any], today: date) -> str:
    due = _due(task)
    if due is None:
        return "No due date"
    days = (due - today).days
    if days < 0:
        return f"Overdue by {-days} day(s)"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} day(s)"


@dataclass
class TaskBoard:
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    filter: str = "all"

    def set_filter(self, name: str) -> None:
        if name not in FILTERS:
            raise ValueError(f"unknown filter {name!r}, expected one of {FILTERS}")
        self.filter = name

    def visible(self) -> List[Dict[str, Any]]:
        if self.filter == "completed":
            return [t for t in self.tasks if t.get("status") == "Completed"]
        if self.filter == "pending":
            return [t for t in self.tasks if t.get("status") == "Pending"]
        return list(self.tasks)

    def stats(self) -> BoardStats:
        return BoardStats(
            total=len(self.tasks),
            pending=sum(1 for t in self.tasks if t.get("status") == "Pending"),
            completed=sum(1 for t in self.tasks if t.get("status") == "Completed"),
        )

    def replace(self, task: Dict[str, Any]) -> None:
        self.tasks = [task if t.get("_id") == task.get("_id") else t for t in self.tasks]

    def remove(self, task_id: str) -> None:
        self.tasks = [t for t in self.tasks if t.get("_id") != task_id]
