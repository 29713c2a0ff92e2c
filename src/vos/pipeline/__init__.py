"""Project store and generation pipeline."""

from .store import ProjectStore, StoreEvent, StoreEventKind
from .orchestrator import Orchestrator

__all__ = ["ProjectStore", "StoreEvent", "StoreEventKind", "Orchestrator"]
