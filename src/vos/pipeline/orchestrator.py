"""Generation pipeline driving projects from input to rendered voiceover."""

import asyncio
import logging
from typing import Any, Awaitable, Coroutine, Dict, Optional, Set, Tuple, TypeVar, Union

from ..audio import pcm_to_wav
from ..config import Config, config
from ..errors import RemoteError, ValidationError, VoiceoverError
from ..models import AudioPayload, Project, ProjectStatus, VoiceName
from ..services.base import GenerationClient
from .store import ProjectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Orchestrator:
    """Runs the script and speech steps for each project.

    Host operations return as soon as the project has entered its first
    generating state; remote work continues in asyncio tasks. Each project
    carries an attempt counter, and a completion is applied only while its
    attempt is still the latest one for a project that still exists.

    Example:
        orchestrator = Orchestrator(GeminiClient())
        project = orchestrator.create_topic_project("How to tie a knot", VoiceName.KORE)
        await orchestrator.wait_idle()
    """

    def __init__(
        self,
        client: GenerationClient,
        store: Optional[ProjectStore] = None,
        settings: Optional[Config] = None,
        api_key: Optional[str] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Backend performing the remote generation calls.
            store: Project store to write into. Created if not provided.
            settings: Configuration. Defaults to the global config.
            api_key: Explicit credential, taking precedence over persisted
                and environment keys.
        """
        self._client = client
        self._store = store if store is not None else ProjectStore()
        self._config = settings or config
        self._api_key = self._config.resolve_api_key(api_key)
        self._attempts: Dict[str, int] = {}
        self._tasks: Set[asyncio.Task] = set()

    @property
    def store(self) -> ProjectStore:
        return self._store

    @property
    def projects(self) -> Tuple[Project, ...]:
        return self._store.projects

    @property
    def active_id(self) -> Optional[str]:
        return self._store.active_id

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, key: str, persist: bool = False) -> None:
        """Use a new credential for subsequent remote calls."""
        self._api_key = key
        if persist:
            self._config.save_api_key(key)

    def set_active(self, project_id: Optional[str]) -> None:
        self._store.set_active(project_id)

    # --- Host operations ---

    def create_topic_project(
        self, topic: str, voice: Optional[Union[VoiceName, str]] = None
    ) -> Project:
        """Create a topic project and start generating its script.

        Raises:
            ValidationError: If the topic is blank.
        """
        if not topic or not topic.strip():
            raise ValidationError("Topic cannot be empty")

        project = Project.for_topic(topic, self._voice(voice))
        self._store.add(project)
        token = self._begin_attempt(project.id)
        logger.info(f"Created topic project {project.id}: {project.name!r}")
        self._schedule(self._run_topic(project.id, token, topic, project.selected_voice))
        return project

    def create_transcript_project(
        self, transcript: str, voice: Optional[Union[VoiceName, str]] = None
    ) -> Project:
        """Create a transcript project and start generating its audio.

        Raises:
            ValidationError: If the transcript is blank.
        """
        self._validate_script(transcript)

        project = Project.for_transcript(transcript, self._voice(voice))
        self._store.add(project)
        token = self._begin_attempt(project.id)
        logger.info(f"Created transcript project {project.id}: {project.name!r}")
        self._schedule(
            self._run_speech(
                project.id, token, transcript, project.selected_voice, "Audio generation failed"
            )
        )
        return project

    def update_script(self, project_id: str, text: str) -> Optional[Project]:
        """Edit a project's script without touching its status."""
        return self._store.update(project_id, script=text)

    def regenerate_audio(
        self, project_id: str, script: str, voice: Optional[Union[VoiceName, str]] = None
    ) -> Optional[Project]:
        """Render the script again, superseding any attempt still in flight.

        A blank script leaves the project untouched. The previous audio stays
        on the project until the new one is ready, and is kept if the new
        attempt fails.

        Returns:
            The project after the transition, or None if it does not exist.
        """
        project = self._store.get(project_id)
        if project is None:
            logger.warning(f"Cannot regenerate unknown project {project_id}")
            return None

        try:
            self._validate_script(script)
        except ValidationError as e:
            logger.info(f"Skipping regeneration of {project_id}: {e}")
            return project

        chosen = self._voice(voice) if voice is not None else project.selected_voice
        token = self._begin_attempt(project_id)
        updated = self._store.update(
            project_id,
            status=ProjectStatus.GENERATING_AUDIO,
            selected_voice=chosen,
            script=script,
            error=None,
        )
        logger.info(f"Regenerating audio for {project_id} (attempt {token}, voice={chosen.value})")
        self._schedule(self._run_speech(project_id, token, script, chosen, "Regeneration failed"))
        return updated

    def delete_project(self, project_id: str) -> bool:
        """Remove a project; any result still in flight for it is dropped."""
        self._attempts.pop(project_id, None)
        removed = self._store.remove(project_id)
        if removed is not None:
            logger.info(f"Deleted project {project_id}")
        return removed is not None

    async def wait_idle(self) -> None:
        """Wait until every scheduled pipeline task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # --- Pipeline steps ---

    async def _run_topic(self, project_id: str, token: int, topic: str, voice: VoiceName) -> None:
        try:
            result = await self._call(
                self._client.request_script(topic, self._api_key), "Script generation"
            )
        except Exception as e:
            self._fail(project_id, token, e, "Generation failed")
            return

        current = self._store.get(project_id)
        if current is None:
            logger.warning(f"Discarding script for deleted project {project_id}")
            return

        # A script typed while this step was running wins over the generated one.
        script = current.script if current.script.strip() else result.script

        if not self._is_current(project_id, token):
            # Superseded by a regenerate: keep the SEO output, leave status to the newer attempt.
            logger.warning(f"Script for {project_id} arrived after attempt {token} was superseded")
            self._store.update(project_id, script=script, seo_metadata=result.seo)
            return

        self._store.update(
            project_id,
            script=script,
            seo_metadata=result.seo,
            status=ProjectStatus.GENERATING_AUDIO,
        )
        await self._run_speech(project_id, token, script, voice, "Generation failed")

    async def _run_speech(
        self, project_id: str, token: int, script: str, voice: VoiceName, fallback: str
    ) -> None:
        sample_rate = self._config.sample_rate
        try:
            pcm = await self._call(
                self._client.request_speech(script, voice, self._api_key), "Speech generation"
            )
            wav = pcm_to_wav(pcm, sample_rate)
        except Exception as e:
            self._fail(project_id, token, e, fallback)
            return

        if not self._is_current(project_id, token):
            logger.warning(f"Discarding stale audio for {project_id} (attempt {token})")
            return

        previous = self._store.get(project_id).audio
        ref = self._store.blobs.register(wav)
        self._store.update(
            project_id,
            status=ProjectStatus.COMPLETED,
            audio=AudioPayload(ref=ref, data=wav, sample_rate=sample_rate),
            error=None,
        )
        if previous is not None:
            self._store.blobs.release(previous.ref)
        logger.info(f"Project {project_id} completed ({len(wav)} bytes of audio)")

    # --- Helpers ---

    async def _call(self, awaitable: Awaitable[T], label: str) -> T:
        timeout = self._config.request_timeout
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise RemoteError(f"{label} timed out after {timeout:g}s") from e

    def _apply(self, project_id: str, token: int, **changes) -> Optional[Project]:
        if not self._is_current(project_id, token):
            logger.warning(f"Discarding stale result for {project_id} (attempt {token})")
            return None
        return self._store.update(project_id, **changes)

    def _fail(self, project_id: str, token: int, error: Exception, fallback: str) -> None:
        if isinstance(error, VoiceoverError):
            logger.error(f"Project {project_id} failed: {error}")
        else:
            logger.exception(f"Unexpected error in project {project_id}")
        self._apply(project_id, token, status=ProjectStatus.ERROR, error=str(error) or fallback)

    def _begin_attempt(self, project_id: str) -> int:
        token = self._attempts.get(project_id, 0) + 1
        self._attempts[project_id] = token
        return token

    def _is_current(self, project_id: str, token: int) -> bool:
        return project_id in self._store and self._attempts.get(project_id) == token

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _voice(self, voice: Optional[Union[VoiceName, str]]) -> VoiceName:
        if voice is None:
            return self._config.default_voice
        return VoiceName(voice)

    @staticmethod
    def _validate_script(script: str) -> None:
        if not script or not script.strip():
            raise ValidationError("Script cannot be empty")
