"""Audio encoding and buffer ownership."""

from .codec import (
    HEADER_SIZE,
    WavHeader,
    decode_pcm16,
    encode_wav,
    pcm_to_wav,
    read_wav_samples,
)
from .blobs import AudioBlobRegistry

__all__ = [
    "HEADER_SIZE",
    "WavHeader",
    "decode_pcm16",
    "encode_wav",
    "pcm_to_wav",
    "read_wav_samples",
    "AudioBlobRegistry",
]
