# src/stayboard/repos/tasks.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from ..core.errors import ValidationError
from ..core.models import Identity, Task, TaskStatus, new_id, utcnow
from .base import Repository
from .validation import validate_task

logger = logging.getLogger(__name__)

_EDITABLE = ("title", "description", "status")


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    incomplete: int


class TaskRepository(Repository[Task]):
    """Personal task list, one storage key per identity (`tasks_<id>`)."""

    entity = "task"
    entity_plural = "tasks"

    def _storage_key(self, identity: Identity) -> str:
        return f"tasks_{identity.id}"

    def _decode(self, rec: dict[str, Any]) -> Task:
        return Task.from_record(rec)

    def _encode(self, item: Task) -> dict[str, Any]:
        return item.to_record()

    def _demo_items(self, identity: Identity) -> list[Task]:
        now = utcnow()
        return [
            Task(
                id="1",
                title="Complete project setup",
                description="Set up the development environment and install dependencies",
                status=TaskStatus.COMPLETED,
                created_at=now,
                updated_at=now,
            ),
            Task(
                id="2",
                title="Design user interface",
                description="Create wireframes and design the task manager interface",
                status=TaskStatus.INCOMPLETE,
                created_at=now,
                updated_at=now,
            ),
        ]

    # ---- mutators ----

    async def create(self, title: str, description: str) -> Task | None:
        if self._session.identity is None:
            self._report_denied("Error adding task", "Sign in to manage tasks")
            return None
        try:
            title, description = validate_task(title, description)
        except ValidationError as e:
            self._notifier.notify("Error adding task", e.message, variant="destructive")
            return None

        now = utcnow()
        task = Task(
            id=new_id(),
            title=title,
            description=description,
            status=TaskStatus.INCOMPLETE,
            created_at=now,
            updated_at=now,
        )
        ok = await self._mutate(
            lambda items: [*items, task],
            action="create",
            success=("Task added", "New task has been created successfully"),
            failure=("Error adding task", "Failed to create new task"),
        )
        return task if ok else None

    async def update(self, task_id: str, **fields: Any) -> None:
        """Merge title/description/status into the task; unknown ids are a no-op."""
        unknown = sorted(set(fields) - set(_EDITABLE))
        if unknown:
            logger.warning("Ignoring non-editable task fields: %s", ", ".join(unknown))
        changes = {k: fields[k] for k in _EDITABLE if k in fields}
        if not changes:
            return

        try:
            if "status" in changes:
                changes["status"] = TaskStatus(changes["status"])
            current = self.get(task_id)
            if current is not None and ("title" in changes or "description" in changes):
                changes["title"], changes["description"] = validate_task(
                    changes.get("title", current.title),
                    changes.get("description", current.description),
                )
        except ValidationError as e:
            self._notifier.notify("Error updating task", e.message, variant="destructive")
            return
        except ValueError:
            self._notifier.notify(
                "Error updating task", f"Unknown status {changes['status']!r}", variant="destructive"
            )
            return

        def build(items: list[Task]) -> list[Task] | None:
            if not any(t.id == task_id for t in items):
                return None
            now = utcnow()
            return [replace(t, **changes, updated_at=now) if t.id == task_id else t for t in items]

        await self._mutate(
            build,
            action="update",
            success=("Task updated", "Task has been updated successfully"),
            failure=("Error updating task", "Failed to update task"),
        )

    async def toggle(self, task_id: str) -> None:
        task = self.get(task_id)
        if task is None:
            return
        await self.update(task_id, status=task.status.flipped())

    async def delete(self, task_id: str) -> None:
        def build(items: list[Task]) -> list[Task] | None:
            if not any(t.id == task_id for t in items):
                return None
            return [t for t in items if t.id != task_id]

        await self._mutate(
            build,
            action="delete",
            success=("Task deleted", "Task has been deleted successfully"),
            failure=("Error deleting task", "Failed to delete task"),
        )

    # ---- derived queries ----

    def search(self, query: str = "", status: TaskStatus | str | None = None) -> list[Task]:
        needle = (query or "").strip().lower()
        try:
            wanted = TaskStatus(status) if status else None
        except ValueError:
            logger.warning("Unknown task status filter: %r", status)
            return []
        out: list[Task] = []
        for t in self._items:
            if needle and needle not in t.title.lower() and needle not in t.description.lower():
                continue
            if wanted is not None and t.status != wanted:
                continue
            out.append(t)
        return out

    def stats(self) -> TaskStats:
        completed = sum(1 for t in self._items if t.status == TaskStatus.COMPLETED)
        return TaskStats(
            total=len(self._items),
            completed=completed,
            incomplete=len(self._items) - completed,
        )
