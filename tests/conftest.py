import asyncio
import base64
import struct

import pytest

from vos.config import Config
from vos.models import ScriptResult, SEOMetadata
from vos.pipeline import Orchestrator, ProjectStore


def pcm_b64(samples):
    return base64.b64encode(struct.pack(f"<{len(samples)}h", *samples)).decode("ascii")


SCRIPT_RESULT = ScriptResult(
    script="First, make a loop. Then pull the end through. Like and subscribe!",
    seo=SEOMetadata(
        title="How to Tie a Knot in 60 Seconds",
        description="A quick beginner guide to tying a reliable knot.",
        tags=["knots", "how to", "tutorial"],
        pinnedComment="Which knot should we cover next?",
    ),
)

DEFAULT_SAMPLES = [0, 1000, -1000, 32767, -32768]


class FakeGenerationClient:
    """Scriptable stand-in for the remote generation backend.

    With ``manual_speech`` or ``manual_script`` set, each such request parks on a future the
    test resolves explicitly, so completion order is under test control.
    """

    def __init__(
        self,
        script_result=SCRIPT_RESULT,
        speech_pcm=None,
        script_error=None,
        speech_error=None,
        manual_speech=False,
        manual_script=False,
    ):
        self.script_result = script_result
        self.speech_pcm = speech_pcm if speech_pcm is not None else pcm_b64(DEFAULT_SAMPLES)
        self.script_error = script_error
        self.speech_error = speech_error
        self.manual_speech = manual_speech
        self.manual_script = manual_script
        self.script_calls = []
        self.speech_calls = []
        self.pending_speech = []
        self.pending_script = []

    async def request_script(self, topic, credential):
        self.script_calls.append((topic, credential))
        if self.manual_script:
            future = asyncio.get_running_loop().create_future()
            self.pending_script.append(future)
            return await future
        await asyncio.sleep(0)
        if self.script_error:
            raise self.script_error
        return self.script_result

    async def request_speech(self, text, voice, credential):
        self.speech_calls.append((text, voice, credential))
        if self.manual_speech:
            future = asyncio.get_running_loop().create_future()
            self.pending_speech.append(future)
            return await future
        await asyncio.sleep(0)
        if self.speech_error:
            raise self.speech_error
        return self.speech_pcm

    async def wait_for_speech_calls(self, count):
        for _ in range(200):
            if len(self.pending_speech) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} pending speech calls, got {len(self.pending_speech)}")

    async def wait_for_script_calls(self, count):
        for _ in range(200):
            if len(self.pending_script) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} pending script calls, got {len(self.pending_script)}")


@pytest.fixture
def settings(tmp_path):
    return Config(
        settings_path=tmp_path / "settings.yaml",
        gemini_api_key="",
        request_timeout=5.0,
    )


@pytest.fixture
def client():
    return FakeGenerationClient()


@pytest.fixture
def store():
    return ProjectStore()


@pytest.fixture
def orchestrator(client, store, settings):
    return Orchestrator(client, store=store, settings=settings, api_key="test-key")
