"""In-memory project collection with change notifications."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..audio import AudioBlobRegistry
from ..models import Project

logger = logging.getLogger(__name__)


class StoreEventKind(str, Enum):
    """Kind of change published by the store."""
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    ACTIVE_CHANGED = "active_changed"


@dataclass(frozen=True)
class StoreEvent:
    """A single change to the store."""

    kind: StoreEventKind
    project_id: Optional[str]
    project: Optional[Project] = None


StoreListener = Callable[[StoreEvent], None]


class ProjectStore:
    """Projects keyed by id, listed newest first, with one active selection.

    Every mutation replaces a whole record looked up by id, so completions
    for different projects never overwrite each other. The store owns the
    audio buffers its projects reference and releases them on removal.
    """

    def __init__(self, blobs: Optional[AudioBlobRegistry] = None) -> None:
        self._projects: Dict[str, Project] = {}
        self._active_id: Optional[str] = None
        self._listeners: List[StoreListener] = []
        self.blobs = blobs if blobs is not None else AudioBlobRegistry()

    @property
    def projects(self) -> Tuple[Project, ...]:
        """Snapshot of all projects, newest first."""
        return tuple(reversed(self._projects.values()))

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def __len__(self) -> int:
        return len(self._projects)

    def get(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def add(self, project: Project, activate: bool = True) -> Project:
        """Insert a new project, optionally making it the active one."""
        if project.id in self._projects:
            raise ValueError(f"Project {project.id} already exists")
        self._projects[project.id] = project
        logger.debug(f"Added project {project.id} ({project.name!r})")
        self._publish(StoreEvent(StoreEventKind.ADDED, project.id, project))
        if activate:
            self.set_active(project.id)
        return project

    def update(self, project_id: str, **changes) -> Optional[Project]:
        """Replace a project with a validated copy carrying ``changes``.

        Returns:
            The new record, or None if the project no longer exists.
        """
        current = self._projects.get(project_id)
        if current is None:
            return None
        updated = Project.model_validate({**current.model_dump(), **changes})
        self._projects[project_id] = updated
        self._publish(StoreEvent(StoreEventKind.UPDATED, project_id, updated))
        return updated

    def remove(self, project_id: str) -> Optional[Project]:
        """Delete a project and release the audio it owns."""
        project = self._projects.pop(project_id, None)
        if project is None:
            return None
        if project.audio is not None:
            self.blobs.release(project.audio.ref)
        logger.debug(f"Removed project {project_id}")
        self._publish(StoreEvent(StoreEventKind.REMOVED, project_id, project))
        if self._active_id == project_id:
            self.set_active(None)
        return project

    def set_active(self, project_id: Optional[str]) -> None:
        if project_id is not None and project_id not in self._projects:
            raise KeyError(f"Unknown project: {project_id}")
        if project_id == self._active_id:
            return
        self._active_id = project_id
        project = self.get(project_id) if project_id else None
        self._publish(StoreEvent(StoreEventKind.ACTIVE_CHANGED, project_id, project))

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Store listener failed on {event.kind.value} event")
