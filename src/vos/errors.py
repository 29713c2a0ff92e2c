"""Error types raised by the codec, the generation services and the pipeline."""


class VoiceoverError(Exception):
    """Base class for all voiceover-studio errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class DecodeError(VoiceoverError):
    """A PCM payload could not be decoded (malformed base64 or odd length)."""


class RemoteError(VoiceoverError):
    """A generation request failed: transport, auth, quota, timeout or bad response."""


class ValidationError(VoiceoverError):
    """Input was rejected before any remote call was made."""
