"""Contract between the pipeline and a generation backend."""

from typing import Protocol, runtime_checkable

from ..models import ScriptResult, VoiceName


@runtime_checkable
class GenerationClient(Protocol):
    """Two remote operations the pipeline depends on.

    Both are coroutines that may take seconds and cannot be cancelled on
    the remote side once issued. Every failure is raised as
    :class:`~vos.errors.RemoteError`.
    """

    async def request_script(self, topic: str, credential: str) -> ScriptResult:
        """Generate a spoken script and SEO metadata for a topic."""
        ...

    async def request_speech(self, text: str, voice: VoiceName, credential: str) -> str:
        """Synthesize text and return base64-encoded 16-bit PCM."""
        ...
