"""Configuration management."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .models.voice import DEFAULT_VOICE, VoiceName

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_SETTING = "gemini_api_key"


def _default_settings_path() -> Path:
    override = os.getenv("VOS_SETTINGS")
    if override:
        return Path(override)
    return Path.home() / ".config" / "voiceover-studio" / "settings.yaml"


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", ""),
        description="Gemini API key from the environment"
    )

    # Paths
    settings_path: Path = Field(
        default_factory=_default_settings_path,
        description="YAML file holding user-entered settings"
    )
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("VOS_WORKSPACE", ".")),
        description="Workspace directory for exported audio"
    )

    # Model settings
    script_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used for script and SEO generation"
    )
    speech_model: str = Field(
        default="gemini-2.5-flash-preview-tts",
        description="Text-to-speech model"
    )
    sample_rate: int = Field(
        default=24000,
        gt=0,
        description="Sample rate of the PCM returned by the speech model"
    )
    request_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Upper bound in seconds for a single remote call"
    )
    default_voice: VoiceName = Field(
        default=DEFAULT_VOICE,
        description="Voice used when none is chosen"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def load_settings(self) -> dict:
        """Read the persisted settings file, returning an empty mapping if absent."""
        if not self.settings_path.exists():
            return {}
        with open(self.settings_path, "r") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    def save_api_key(self, key: str) -> None:
        """Persist a user-entered API key to the settings file."""
        settings = self.load_settings()
        settings[API_KEY_SETTING] = key
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)
        logger.info(f"Saved API key to {self.settings_path}")

    def resolve_api_key(self, explicit: Optional[str] = None) -> str:
        """Return the credential to use for remote calls.

        Precedence is explicit argument, then the persisted settings file,
        then the environment.

        Args:
            explicit: Key passed directly by the caller.

        Returns:
            The resolved key, or an empty string when none is configured.
        """
        if explicit:
            return explicit
        persisted = self.load_settings().get(API_KEY_SETTING)
        if persisted:
            return str(persisted)
        return self.gemini_api_key

    def validate_required(self, explicit: Optional[str] = None) -> None:
        """Validate that a credential is available."""
        if not self.resolve_api_key(explicit):
            raise ValueError(
                "Gemini API key not set. Pass --api-key, run 'voiceover set-key', "
                "or set GEMINI_API_KEY."
            )


# Global config instance
config = Config()
