"""CLI entry point for the voiceover generator."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import typer

from . import __version__
from .config import config
from .models import Project, ProjectStatus, VoiceName
from .services.base import GenerationClient

app = typer.Typer(
    name="voiceover",
    help="AI-powered tutorial script and voiceover generator",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"voiceover version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Voiceover Studio - Turn topics and transcripts into narrated audio."""
    pass


def _make_client() -> GenerationClient:
    from .services.gemini import GeminiClient

    return GeminiClient()


def _run_project(
    start: Callable[["Orchestrator"], Project],
    api_key: Optional[str],
) -> Project:
    """Start a project on a fresh orchestrator and wait for it to settle."""
    from .pipeline import Orchestrator

    async def _run() -> Project:
        orchestrator = Orchestrator(_make_client(), api_key=api_key)
        project = start(orchestrator)
        await orchestrator.wait_idle()
        return orchestrator.store.get(project.id)

    return asyncio.run(_run())


def _save_outputs(project: Project, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)

    script_path = output_dir / "script.txt"
    script_path.write_text(project.script)
    typer.echo(f"   Script: {script_path}")

    if project.seo_metadata:
        seo_path = output_dir / "seo.yaml"
        project.seo_metadata.to_yaml(seo_path)
        typer.echo(f"   SEO metadata: {seo_path}")

    if project.audio:
        audio_path = output_dir / f"voiceover-{int(datetime.now().timestamp() * 1000)}.wav"
        audio_path.write_bytes(project.audio.data)
        typer.echo(
            f"   Audio: {audio_path} ({project.audio.duration_seconds:.1f}s, "
            f"{project.audio.sample_rate} Hz)"
        )


def _report(project: Project, output_dir: Path) -> None:
    if project.status != ProjectStatus.COMPLETED:
        typer.echo(f"❌ Generation failed: {project.error or 'unknown error'}")
        if project.script:
            _save_outputs(project, output_dir)
        raise typer.Exit(1)

    typer.echo(f"\n✅ Project '{project.name}' completed")
    _save_outputs(project, output_dir)


@app.command()
def topic(
    subject: str = typer.Argument(
        ...,
        help="Topic or title of the tutorial"
    ),
    voice: VoiceName = typer.Option(
        config.default_voice,
        "--voice",
        "-v",
        help="Prebuilt voice for the narration"
    ),
    output: Path = typer.Option(
        Path("output"),
        "--output",
        "-o",
        help="Directory for script, SEO metadata and audio"
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        help="Gemini API key (overrides saved and environment keys)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging"
    ),
) -> None:
    """Write a tutorial script with SEO metadata, then narrate it."""
    setup_logging(verbose)

    try:
        config.validate_required(api_key)
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    typer.echo(f"🎬 Topic: {subject}")
    typer.echo(f"   Voice: {voice.value}")

    project = _run_project(lambda o: o.create_topic_project(subject, voice), api_key)
    _report(project, output)

    if project.seo_metadata:
        seo = project.seo_metadata
        typer.echo(f"\n📋 {seo.title}")
        typer.echo(f"   Tags: {', '.join(seo.tags)}")


@app.command()
def transcript(
    source: Path = typer.Argument(
        ...,
        help="Text file containing the transcript to narrate",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    voice: VoiceName = typer.Option(
        config.default_voice,
        "--voice",
        "-v",
        help="Prebuilt voice for the narration"
    ),
    output: Path = typer.Option(
        Path("output"),
        "--output",
        "-o",
        help="Directory for the audio file"
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        help="Gemini API key (overrides saved and environment keys)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging"
    ),
) -> None:
    """Narrate an existing transcript."""
    from .errors import ValidationError

    setup_logging(verbose)

    try:
        config.validate_required(api_key)
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    text = source.read_text()
    typer.echo(f"🎙️  Transcript: {source} ({len(text.split())} words)")
    typer.echo(f"   Voice: {voice.value}")

    try:
        project = _run_project(lambda o: o.create_transcript_project(text, voice), api_key)
    except ValidationError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    _report(project, output)


@app.command()
def voices() -> None:
    """List the available prebuilt voices."""
    for name in VoiceName:
        marker = " (default)" if name == config.default_voice else ""
        typer.echo(f"   • {name.value}{marker}")


@app.command("set-key")
def set_key(
    key: str = typer.Argument(
        ...,
        help="Gemini API key to save"
    ),
) -> None:
    """Save a Gemini API key to the settings file."""
    if not key.strip():
        typer.echo("❌ API key cannot be empty")
        raise typer.Exit(1)

    config.save_api_key(key.strip())
    typer.echo(f"✅ API key saved to {config.settings_path}")


@app.command()
def inspect(
    wav: Path = typer.Argument(
        ...,
        help="WAV file to inspect",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
) -> None:
    """Show the header fields of a generated WAV file."""
    from .audio import read_wav_samples

    try:
        header, samples = read_wav_samples(wav.read_bytes())
    except ValueError as e:
        typer.echo(f"❌ Not a valid PCM WAV: {e}")
        raise typer.Exit(1)

    duration = len(samples) / header.channels / header.sample_rate
    typer.echo(f"🔊 {wav}")
    typer.echo(f"   Format: {'PCM' if header.audio_format == 1 else header.audio_format}")
    typer.echo(f"   Channels: {header.channels}")
    typer.echo(f"   Sample rate: {header.sample_rate} Hz")
    typer.echo(f"   Bits per sample: {header.bits_per_sample}")
    typer.echo(f"   Samples: {len(samples)}")
    typer.echo(f"   Duration: {duration:.2f}s")


if __name__ == "__main__":
    app()
