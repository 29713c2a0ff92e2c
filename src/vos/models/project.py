"""Project state model."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .seo import SEOMetadata
from .voice import DEFAULT_VOICE, VoiceName


class WorkflowKind(str, Enum):
    """Input mode a project follows."""
    TOPIC_TO_VIDEO = "topic_to_video"
    TRANSCRIPT_TO_AUDIO = "transcript_to_audio"


class ProjectStatus(str, Enum):
    """Project state enum."""
    IDLE = "idle"
    GENERATING_SCRIPT = "generating_script"
    GENERATING_AUDIO = "generating_audio"
    COMPLETED = "completed"
    ERROR = "error"


class AudioPayload(BaseModel):
    """Rendered WAV container and the reference it is registered under."""

    ref: str = Field(..., description="Stable reference to the registered blob")
    data: bytes = Field(..., description="WAV container bytes", repr=False)
    sample_rate: int = Field(..., description="Sample rate in Hz", gt=0)

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def duration_seconds(self) -> float:
        """Playback length, assuming 16-bit mono PCM behind a 44-byte header."""
        return max(0, len(self.data) - 44) / 2 / self.sample_rate


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def derive_name(text: str, limit: int) -> str:
    """Truncate input text into a display label."""
    text = text.strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text


class Project(BaseModel):
    """A single topic or transcript voiceover job.

    Instances are immutable; the store replaces whole records by id.
    """

    id: str = Field(default_factory=_new_id, description="Unique project identifier")
    name: str = Field(..., description="Display label derived from the input")
    workflow: WorkflowKind = Field(..., description="Which input mode the project follows")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation time")
    status: ProjectStatus = Field(default=ProjectStatus.IDLE, description="Current state")
    topic: Optional[str] = Field(None, description="Topic input (topic flow)")
    original_transcript: Optional[str] = Field(None, description="Transcript input (transcript flow)")
    script: str = Field(default="", description="Working script text")
    seo_metadata: Optional[SEOMetadata] = Field(None, description="SEO output (topic flow)")
    audio: Optional[AudioPayload] = Field(None, description="Latest rendered audio")
    selected_voice: VoiceName = Field(default=DEFAULT_VOICE, description="Voice for the next speech call")
    error: Optional[str] = Field(None, description="Last failure message")

    class Config:
        """Pydantic config."""
        frozen = True

    @model_validator(mode="after")
    def _check_inputs(self) -> "Project":
        if self.workflow == WorkflowKind.TOPIC_TO_VIDEO:
            if self.topic is None or self.original_transcript is not None:
                raise ValueError("Topic projects need a topic and no transcript")
        else:
            if self.original_transcript is None or self.topic is not None:
                raise ValueError("Transcript projects need a transcript and no topic")
            if self.seo_metadata is not None:
                raise ValueError("SEO metadata is only produced for topic projects")
        return self

    @classmethod
    def for_topic(cls, topic: str, voice: VoiceName) -> "Project":
        """Create a topic project, already generating its script."""
        return cls(
            name=derive_name(topic, 30),
            workflow=WorkflowKind.TOPIC_TO_VIDEO,
            status=ProjectStatus.GENERATING_SCRIPT,
            topic=topic,
            script="",
            selected_voice=voice,
        )

    @classmethod
    def for_transcript(cls, transcript: str, voice: VoiceName) -> "Project":
        """Create a transcript project, already generating its audio."""
        return cls(
            name=derive_name(transcript, 20),
            workflow=WorkflowKind.TRANSCRIPT_TO_AUDIO,
            status=ProjectStatus.GENERATING_AUDIO,
            original_transcript=transcript,
            script=transcript,
            selected_voice=voice,
        )

    @property
    def is_busy(self) -> bool:
        return self.status in (ProjectStatus.GENERATING_SCRIPT, ProjectStatus.GENERATING_AUDIO)
