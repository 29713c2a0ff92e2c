"""Data models for the voiceover generator."""

from .voice import VoiceName, DEFAULT_VOICE
from .seo import SEOMetadata, ScriptResult
from .project import AudioPayload, Project, ProjectStatus, WorkflowKind

__all__ = [
    "VoiceName",
    "DEFAULT_VOICE",
    "SEOMetadata",
    "ScriptResult",
    "AudioPayload",
    "Project",
    "ProjectStatus",
    "WorkflowKind",
]
