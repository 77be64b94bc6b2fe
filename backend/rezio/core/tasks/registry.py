"""Requirement-derived task registry.

Each (project_id, discipline) pair owns at most one task. ensure_tasks()
is an idempotent upsert: the existence check and the insert happen under
one lock, so concurrent requests for the same project cannot both create
the same task.

Optional on-disk layout (``path``):
    tasks.json   {"schema_version": 1, "tasks": [ {...}, ... ]}
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from rezio.core.rules.engineering import EngineeringRequirement

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1
_REQUIRED_KEYS = {"id", "project_id", "discipline", "title", "status", "created_at"}


# ── Exceptions ────────────────────────────────────────────────────────────────

class TaskRegistryError(ValueError):
    """Raised when the task store on disk is unreadable or has a corrupt schema."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid task store at '{path}': {reason}")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _utc_now() -> str:
    """Return current UTC time as an ISO-8601 string (e.g. 2026-02-26T10:30:00Z)."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class RequirementTask:
    id: str
    project_id: str
    discipline: str
    title: str
    status: str
    created_at: str
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


RequirementLike = Union[EngineeringRequirement, str]


# ── TaskRegistry ──────────────────────────────────────────────────────────────

class TaskRegistry:
    """Find-or-create store for requirement tasks, keyed by (project, discipline)."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path: Optional[Path] = Path(path).resolve() if path else None
        self._lock = threading.Lock()
        self._tasks: dict[tuple[str, str], RequirementTask] = {}
        if self._path is not None and self._path.is_file():
            self._load()

    def ensure_tasks(
        self,
        project_id: str,
        requirements: Iterable[RequirementLike],
    ) -> list[RequirementTask]:
        """Create a TODO task for every discipline that has none yet.

        Args:
            project_id: Owning project.
            requirements: EngineeringRequirement objects (only those marked
                          required are used) or bare discipline names.

        Returns:
            Only the tasks created by this call; repeating the call with
            the same input returns an empty list.

        Raises:
            OSError: If the task file cannot be written. The registry is
                     left unchanged, so the call can be retried.
        """
        if not project_id:
            raise ValueError("project_id must be a non-empty string.")

        created: list[RequirementTask] = []
        with self._lock:
            # Staged copy; only replaces self._tasks once the file write succeeds.
            pending = dict(self._tasks)
            for req in requirements:
                if isinstance(req, EngineeringRequirement):
                    if not req.required:
                        continue
                    discipline, notes = req.discipline, req.notes
                else:
                    discipline, notes = req, None
                discipline = (discipline or "Engineering").strip()

                key = (project_id, discipline)
                if key in pending:
                    continue
                task = RequirementTask(
                    id=uuid.uuid4().hex,
                    project_id=project_id,
                    discipline=discipline,
                    title=f"Complete {discipline}",
                    status="TODO",
                    created_at=_utc_now(),
                    notes=notes,
                )
                pending[key] = task
                created.append(task)

            if created:
                self._save(pending)
                self._tasks = pending
        logger.info("Project %s: created %d requirement tasks", project_id, len(created))
        return created

    def tasks_for(self, project_id: str) -> list[RequirementTask]:
        with self._lock:
            return [t for (pid, _), t in self._tasks.items() if pid == project_id]

    def __len__(self) -> int:
        return len(self._tasks)

    # ── Persistence ──────────────────────────────────────────────────────────

    def _save(self, tasks: dict[tuple[str, str], RequirementTask]) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "schema_version": _SCHEMA_VERSION,
            "tasks": [t.to_dict() for t in tasks.values()],
        }
        self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def _load(self) -> None:
        context = str(self._path)
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise TaskRegistryError(context, f"not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
            raise TaskRegistryError(context, "top-level 'tasks' list is required")

        for i, raw in enumerate(data["tasks"]):
            missing = _REQUIRED_KEYS - raw.keys() if isinstance(raw, dict) else _REQUIRED_KEYS
            if missing:
                raise TaskRegistryError(context, f"task {i} is missing keys: {sorted(missing)}")
            task = RequirementTask(
                id=raw["id"],
                project_id=raw["project_id"],
                discipline=raw["discipline"],
                title=raw["title"],
                status=raw["status"],
                created_at=raw["created_at"],
                notes=raw.get("notes"),
            )
            self._tasks[(task.project_id, task.discipline)] = task
