# tests/fakes.py

from __future__ import annotations

import itertools
from typing import Any

from task_manager.client.api import ClientRequestError


class FakeTaskApi:
    """
    In-memory stand-in for TaskApiClient used by controller tests.

    - Records every call for assertions
    - `fail` holds method names that should raise ClientRequestError
    - Filtering is deliberately naive; tests only care what the controller
      does with whatever comes back
    """

    def __init__(self, tasks: list[dict[str, Any]] | None = None) -> None:
        self.tasks: list[dict[str, Any]] = list(tasks or [])
        self.calls: list[tuple[str, tuple, dict]] = []
        self.fail: set[str] = set()
        self._ids = itertools.count(100)

    def _record(self, name: str, *args, **kwargs) -> None:
        self.calls.append((name, args, kwargs))
        if name in self.fail:
            raise ClientRequestError(f"{name} failed")

    def call_names(self) -> list[str]:
        return [name for name, _, _ in self.calls]

    def list_tasks(self, filter: str = "all", search: str = "") -> list[dict[str, Any]]:
        self._record("list_tasks", filter, search)
        result = self.tasks
        if filter == "completed":
            result = [t for t in result if t["completed"]]
        elif filter == "pending":
            result = [t for t in result if not t["completed"]]
        elif filter == "important":
            result = [t for t in result if t["important"]]
        if search:
            result = [t for t in result if search.lower() in t["text"].lower()]
        return [dict(t) for t in result]

    def create_task(self, text: str, important: bool = False) -> dict[str, Any]:
        self._record("create_task", text, important=important)
        task = {"id": str(next(self._ids)), "text": text, "completed": False, "important": important}
        self.tasks.insert(0, task)
        return dict(task)

    def update_task(self, task_id: str, **changes) -> dict[str, Any]:
        self._record("update_task", task_id, **changes)
        for task in self.tasks:
            if task["id"] == task_id:
                task.update({k: v for k, v in changes.items() if v is not None})
                return dict(task)
        raise ClientRequestError("404")

    def delete_task(self, task_id: str) -> dict[str, Any]:
        self._record("delete_task", task_id)
        self.tasks = [t for t in self.tasks if t["id"] != task_id]
        return {"message": "Task deleted successfully"}

    def get_stats(self) -> dict[str, int]:
        self._record("get_stats")
        done = sum(t["completed"] for t in self.tasks)
        return {
            "total": len(self.tasks),
            "completed": done,
            "pending": len(self.tasks) - done,
            "important": sum(t["important"] for t in self.tasks),
        }


def task(task_id: str, text: str, completed: bool = False, important: bool = False) -> dict[str, Any]:
    return {"id": task_id, "text": text, "completed": completed, "important": important}
