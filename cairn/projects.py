"""
Project Registry
================
Tracks which essays are being assembled and the source notes queued for
each of them.

The registry is one JSON document (``projects.json`` by default) guarded by
a file lock; every change is a locked load -> modify -> validate -> save
cycle. The essay files themselves are the source of truth for structure;
the registry only stores paths and queue state.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Literal, Optional
from uuid import uuid4

from filelock import FileLock, Timeout
from loguru import logger

from cairn.config import TIMEOUTS
from cairn.utils.schema_validation import validate_project_registry

SourceStatus = Literal["unread", "active", "done"]
SOURCE_STATUSES = ("unread", "active", "done")


@dataclass
class ProjectSource:
    """A source note queued for an essay."""

    note_path: str
    added_at: float = field(default_factory=time.time)
    status: SourceStatus = "unread"


@dataclass
class Project:
    """An essay being assembled."""

    id: str
    name: str
    file_path: str
    source_folder: str = ""
    sources: List[ProjectSource] = field(default_factory=list)

    def find_source(self, note_path: str) -> int:
        return next((i for i, s in enumerate(self.sources) if s.note_path == note_path), -1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data["id"],
            name=data["name"],
            file_path=data["file_path"],
            source_folder=data.get("source_folder", ""),
            sources=[ProjectSource(**s) for s in data.get("sources", [])],
        )


@dataclass
class RegistryState:
    projects: List[Project] = field(default_factory=list)
    active_project_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "schema_version": "1.0",
            "active_project_id": self.active_project_id,
            "projects": [asdict(p) for p in self.projects],
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RegistryState":
        return cls(
            projects=[Project.from_dict(p) for p in payload.get("projects", [])],
            active_project_id=payload.get("active_project_id"),
        )

    def get(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)


def generate_id() -> str:
    return uuid4().hex[:12]


class ProjectRegistry:
    """JSON-backed registry of essay projects and their source queues."""

    def __init__(self, registry_path: str | Path, lock_timeout_seconds: int = TIMEOUTS.FILE_LOCK):
        self.registry_path = Path(registry_path)
        self.lock_path = self.registry_path.with_suffix(self.registry_path.suffix + ".lock")
        self.lock_timeout_seconds = lock_timeout_seconds

    def load(self) -> RegistryState:
        """Load the registry; a missing file is an empty registry.

        Raises:
            ValueError: If the file is not valid JSON or fails schema validation.
        """
        if not self.registry_path.exists():
            return RegistryState()

        try:
            payload = json.loads(self.registry_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.registry_path}: {e}")

        validate_project_registry(payload)
        return RegistryState.from_payload(payload)

    def save(self, state: RegistryState) -> None:
        payload = state.to_payload()
        validate_project_registry(payload)
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        self.registry_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )

    @contextmanager
    def _transaction(self) -> Iterator[RegistryState]:
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with FileLock(self.lock_path, timeout=self.lock_timeout_seconds):
                state = self.load()
                yield state
                self.save(state)
        except Timeout as e:
            raise TimeoutError(
                f"Timed out acquiring registry lock {self.lock_path} after {self.lock_timeout_seconds}s"
            ) from e

    # ── Projects ──

    def projects(self) -> List[Project]:
        return self.load().projects

    def get(self, project_id: str) -> Optional[Project]:
        return self.load().get(project_id)

    def active_project(self) -> Optional[Project]:
        state = self.load()
        return state.get(state.active_project_id) if state.active_project_id else None

    def create_project(self, name: str, file_path: str, source_folder: str = "") -> Project:
        """Track an essay file as a new project and make it active."""
        if not name.strip():
            raise ValueError("Project name cannot be empty")
        project = Project(id=generate_id(), name=name.strip(), file_path=file_path, source_folder=source_folder)
        with self._transaction() as state:
            state.projects.append(project)
            state.active_project_id = project.id
        logger.info(f'Tracking project "{project.name}" ({file_path})')
        return project

    def set_active(self, project_id: str) -> bool:
        with self._transaction() as state:
            if state.get(project_id) is None:
                return False
            state.active_project_id = project_id
        return True

    def untrack(self, project_id: str) -> bool:
        """Stop tracking a project; its essay file is left in place."""
        with self._transaction() as state:
            before = len(state.projects)
            state.projects = [p for p in state.projects if p.id != project_id]
            if len(state.projects) == before:
                return False
            if state.active_project_id == project_id:
                state.active_project_id = state.projects[0].id if state.projects else None
        logger.info(f"Untracked project {project_id}")
        return True

    # ── Source queue ──

    def add_source(self, project_id: str, note_path: str) -> bool:
        """Queue a source note. Duplicates and the essay file itself are refused."""
        with self._transaction() as state:
            project = state.get(project_id)
            if project is None:
                return False
            if project.find_source(note_path) >= 0:
                logger.warning(f'"{note_path}" is already in sources')
                return False
            if note_path == project.file_path:
                logger.warning("Can't add the project file as a source")
                return False
            project.sources.append(ProjectSource(note_path=note_path))
        return True

    def remove_source(self, project_id: str, index: int) -> bool:
        with self._transaction() as state:
            project = state.get(project_id)
            if project is None or not 0 <= index < len(project.sources):
                return False
            project.sources.pop(index)
        return True

    def mark_source_status(self, project_id: str, index: int, status: SourceStatus) -> bool:
        if status not in SOURCE_STATUSES:
            raise ValueError(f"Unknown source status: {status}")
        with self._transaction() as state:
            project = state.get(project_id)
            if project is None or not 0 <= index < len(project.sources):
                return False
            project.sources[index].status = status
        return True

    def activate_source(self, project_id: str, note_path: str) -> bool:
        """Promote an ``unread`` source to ``active`` once content was pulled from it."""
        with self._transaction() as state:
            project = state.get(project_id)
            idx = project.find_source(note_path) if project else -1
            if idx < 0 or project.sources[idx].status != "unread":
                return False
            project.sources[idx].status = "active"
        return True
