import yaml
import pytest
from typer.testing import CliRunner

from conftest import SCRIPT_RESULT, FakeGenerationClient
from vos import __version__, cli
from vos.audio import encode_wav
from vos.config import config
from vos.errors import RemoteError

runner = CliRunner()


@pytest.fixture
def fake_client(monkeypatch, tmp_path):
    client = FakeGenerationClient()
    monkeypatch.setattr(cli, "_make_client", lambda: client)
    monkeypatch.setattr(config, "settings_path", tmp_path / "settings.yaml")
    return client


def test_version():
    result = runner.invoke(cli.app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_voices_lists_all():
    result = runner.invoke(cli.app, ["voices"])
    assert result.exit_code == 0
    assert "kore" in result.stdout
    assert "puck (default)" in result.stdout


def test_topic_writes_outputs(fake_client, tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(
        cli.app, ["topic", "How to tie a knot", "--voice", "leda", "-o", str(out), "--api-key", "k"]
    )

    assert result.exit_code == 0, result.stdout
    assert (out / "script.txt").read_text() == SCRIPT_RESULT.script
    seo = yaml.safe_load((out / "seo.yaml").read_text())
    assert seo["title"] == SCRIPT_RESULT.seo.title
    wavs = list(out.glob("voiceover-*.wav"))
    assert len(wavs) == 1
    assert wavs[0].read_bytes()[:4] == b"RIFF"
    assert fake_client.speech_calls[0][1].value == "leda"


def test_topic_failure_exits_nonzero(fake_client, tmp_path):
    fake_client.script_error = RemoteError("quota exceeded")
    result = runner.invoke(
        cli.app, ["topic", "How to tie a knot", "-o", str(tmp_path / "out"), "--api-key", "k"]
    )

    assert result.exit_code == 1
    assert "quota exceeded" in result.stdout
    assert fake_client.speech_calls == []


def test_topic_requires_api_key(fake_client, monkeypatch, tmp_path):
    monkeypatch.setattr(config, "gemini_api_key", "")
    result = runner.invoke(cli.app, ["topic", "Anything", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Configuration error" in result.stdout


def test_transcript_narrates_file(fake_client, tmp_path):
    source = tmp_path / "transcript.txt"
    source.write_text("Welcome back. Today we fix a sink.")
    out = tmp_path / "out"

    result = runner.invoke(cli.app, ["transcript", str(source), "-o", str(out), "--api-key", "k"])

    assert result.exit_code == 0, result.stdout
    assert not (out / "seo.yaml").exists()
    assert len(list(out.glob("voiceover-*.wav"))) == 1
    assert fake_client.script_calls == []


def test_transcript_rejects_blank_file(fake_client, tmp_path):
    source = tmp_path / "blank.txt"
    source.write_text("   ")

    result = runner.invoke(cli.app, ["transcript", str(source), "--api-key", "k"])

    assert result.exit_code == 1
    assert "Script cannot be empty" in result.stdout


def test_set_key_persists(fake_client, tmp_path):
    result = runner.invoke(cli.app, ["set-key", "saved-key"])

    assert result.exit_code == 0
    assert config.resolve_api_key() == "saved-key"


def test_inspect_reports_header(tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(encode_wav([0] * 24000, 24000))

    result = runner.invoke(cli.app, ["inspect", str(path)])

    assert result.exit_code == 0
    assert "24000 Hz" in result.stdout
    assert "1.00s" in result.stdout


def test_inspect_rejects_non_wav(tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(b"not a wav file at all, definitely not a RIFF container")

    result = runner.invoke(cli.app, ["inspect", str(path)])

    assert result.exit_code == 1
