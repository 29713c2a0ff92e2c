"""External service integrations."""

from .base import GenerationClient
from .gemini import GeminiClient

__all__ = [
    "GenerationClient",
    "GeminiClient",
]
