"""Google Gemini client for script and speech generation."""

import base64
import logging
from pathlib import Path
from typing import Dict, Optional

import pydantic
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import config
from ..errors import RemoteError
from ..models import ScriptResult, VoiceName

logger = logging.getLogger(__name__)

# Load prompt template
PROMPT_TEMPLATE_PATH = Path(__file__).parent.parent.parent.parent / "templates" / "prompts" / "script.txt"


def _load_system_prompt() -> str:
    """Load the system prompt from template file."""
    if PROMPT_TEMPLATE_PATH.exists():
        return PROMPT_TEMPLATE_PATH.read_text()
    # Fallback inline prompt if template not found
    return """You are an elite YouTube tutorial scriptwriter and SEO strategist.
Given a topic, write a 60-90 second, step-by-step, human-sounding tutorial script
with a hook, a short intro, clear steps and a like/subscribe outro.
Also produce an SEO title under 70 characters, a search-optimized description,
relevant tags and a pinned comment. Respond with JSON only."""


SCRIPT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "script": types.Schema(
            type=types.Type.STRING,
            description="The full spoken script with natural fillers.",
        ),
        "seo": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "title": types.Schema(type=types.Type.STRING),
                "description": types.Schema(type=types.Type.STRING),
                "tags": types.Schema(
                    type=types.Type.ARRAY,
                    items=types.Schema(type=types.Type.STRING),
                ),
                "pinnedComment": types.Schema(type=types.Type.STRING),
            },
            required=["title", "description", "tags", "pinnedComment"],
        ),
    },
    required=["script", "seo"],
)


class GeminiClient:
    """Generation backend backed by the Gemini API.

    Implements :class:`~vos.services.base.GenerationClient`. The credential
    is passed on every call; one SDK client is kept per distinct key.
    """

    def __init__(
        self,
        script_model: Optional[str] = None,
        speech_model: Optional[str] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            script_model: Model for script generation. Defaults to config.script_model.
            speech_model: Model for speech synthesis. Defaults to config.speech_model.
        """
        self._script_model = script_model or config.script_model
        self._speech_model = speech_model or config.speech_model
        self._clients: Dict[str, genai.Client] = {}

    @property
    def script_model(self) -> str:
        return self._script_model

    @property
    def speech_model(self) -> str:
        return self._speech_model

    def _client_for(self, credential: str) -> genai.Client:
        if not credential:
            raise RemoteError("Gemini API key not provided. Set GEMINI_API_KEY or save a key.")
        client = self._clients.get(credential)
        if client is None:
            client = genai.Client(api_key=credential)
            self._clients[credential] = client
        return client

    async def request_script(self, topic: str, credential: str) -> ScriptResult:
        """Generate a tutorial script and SEO metadata for a topic.

        Args:
            topic: Subject or title of the tutorial.
            credential: Gemini API key.

        Returns:
            The parsed script and SEO metadata.

        Raises:
            RemoteError: On API failure, an empty response or a response
                that does not match the expected schema.
        """
        client = self._client_for(credential)
        logger.info(f"Generating script for: '{topic[:50]}' ({self._script_model})")

        try:
            response = await client.aio.models.generate_content(
                model=self._script_model,
                contents=f"Topic: {topic}",
                config=types.GenerateContentConfig(
                    system_instruction=_load_system_prompt(),
                    response_mime_type="application/json",
                    response_schema=SCRIPT_RESPONSE_SCHEMA,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Script generation error: {e}")
            raise RemoteError(e.message or str(e)) from e

        text = response.text
        if not text:
            raise RemoteError("No response from Gemini")

        try:
            result = ScriptResult.model_validate_json(text)
        except pydantic.ValidationError as e:
            logger.debug(f"Raw response: {text}")
            raise RemoteError(f"Invalid script response: {e}") from e

        logger.debug(f"Received script of length: {len(result.script)}")
        return result

    async def request_speech(self, text: str, voice: VoiceName, credential: str) -> str:
        """Synthesize speech for a script with a prebuilt voice.

        Args:
            text: Script to speak.
            voice: Prebuilt voice identifier.
            credential: Gemini API key.

        Returns:
            Base64 text of the raw 16-bit little-endian PCM.

        Raises:
            RemoteError: On API failure or when no audio is present.
        """
        client = self._client_for(credential)
        # The API documents capitalized names, e.g. "Kore".
        voice_name = VoiceName(voice).value.capitalize()
        logger.info(f"Generating speech ({len(text)} chars, voice={voice_name})")

        try:
            response = await client.aio.models.generate_content(
                model=self._speech_model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name)
                        )
                    ),
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"TTS generation error: {e}")
            raise RemoteError(e.message or str(e)) from e

        data = _extract_inline_audio(response)
        if not data:
            raise RemoteError("No audio data received from Gemini")

        # The SDK hands back decoded bytes; the pipeline contract is base64 text.
        if isinstance(data, bytes):
            return base64.b64encode(data).decode("ascii")
        return data


def _extract_inline_audio(response: types.GenerateContentResponse):
    candidates = response.candidates or []
    if not candidates or candidates[0].content is None:
        return None
    parts = candidates[0].content.parts or []
    if not parts or parts[0].inline_data is None:
        return None
    return parts[0].inline_data.data
