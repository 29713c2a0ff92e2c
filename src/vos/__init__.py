"""Tutorial script and voiceover generator."""

__version__ = "0.1.0"
