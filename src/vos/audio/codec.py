"""Base64 PCM decoding and WAV container encoding."""

import array
import base64
import binascii
import struct
import sys
from dataclasses import dataclass
from typing import Iterable, Tuple

from ..errors import DecodeError

HEADER_SIZE = 44

_RIFF_HEADER = struct.Struct("<4sI4s")
_FMT_CHUNK = struct.Struct("<4sIHHIIHH")
_DATA_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class WavHeader:
    """Fields of a canonical 44-byte PCM WAV header."""

    chunk_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def _to_little_endian(samples: array.array) -> bytes:
    if sys.byteorder == "big":
        samples = array.array("h", samples)
        samples.byteswap()
    return samples.tobytes()


def decode_pcm16(data: str) -> array.array:
    """Decode base64 text into signed 16-bit little-endian samples.

    Args:
        data: Standard base64 encoding of a raw PCM byte stream.

    Returns:
        Samples in their original order.

    Raises:
        DecodeError: If the text is not valid base64 or decodes to an
            odd number of bytes.
    """
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Malformed base64 audio payload: {e}") from e

    if len(raw) % 2:
        raise DecodeError(
            f"PCM payload has odd length ({len(raw)} bytes); expected 16-bit samples"
        )

    samples = array.array("h")
    samples.frombytes(raw)
    if sys.byteorder == "big":
        samples.byteswap()
    return samples


def encode_wav(
    samples: Iterable[int],
    sample_rate: int,
    channels: int = 1,
    bits_per_sample: int = 16,
) -> bytes:
    """Wrap 16-bit PCM samples in a WAV container.

    An empty sample sequence produces a valid container with a zero-length
    data chunk.

    Args:
        samples: Signed 16-bit samples, interleaved when channels > 1.
        sample_rate: Samples per second, must be positive.
        channels: Channel count.
        bits_per_sample: Bit depth; only 16 is supported.

    Returns:
        The header followed by the little-endian sample bytes.

    Raises:
        ValueError: If the sample rate or channel count is not positive,
            or the bit depth is not 16.
    """
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    if channels <= 0:
        raise ValueError(f"Channel count must be positive, got {channels}")
    if bits_per_sample != 16:
        raise ValueError(f"Only 16-bit PCM is supported, got {bits_per_sample}")

    if not isinstance(samples, array.array) or samples.typecode != "h":
        samples = array.array("h", samples)
    pcm_bytes = _to_little_endian(samples)

    block_align = channels * (bits_per_sample // 8)
    byte_rate = sample_rate * block_align
    data_size = len(pcm_bytes)

    hdr = _RIFF_HEADER.pack(b"RIFF", 36 + data_size, b"WAVE")
    fmt = _FMT_CHUNK.pack(
        b"fmt ", 16, 1, channels, sample_rate, byte_rate, block_align, bits_per_sample
    )
    dat = _DATA_HEADER.pack(b"data", data_size) + pcm_bytes

    return hdr + fmt + dat


def read_wav_samples(wav: bytes) -> Tuple[WavHeader, array.array]:
    """Parse a canonical 44-byte-header WAV produced by :func:`encode_wav`.

    Raises:
        ValueError: If the buffer is not a canonical PCM WAV.
    """
    if len(wav) < HEADER_SIZE:
        raise ValueError(f"WAV buffer too short: {len(wav)} bytes")

    riff, chunk_size, wave = _RIFF_HEADER.unpack_from(wav, 0)
    if riff != b"RIFF":
        raise ValueError("Not a RIFF file")
    if wave != b"WAVE":
        raise ValueError("RIFF type is not WAVE")

    (fmt_id, fmt_size, audio_format, channels, sample_rate,
     byte_rate, block_align, bits) = _FMT_CHUNK.unpack_from(wav, 12)
    if fmt_id != b"fmt " or fmt_size != 16:
        raise ValueError("Missing 16-byte fmt chunk")
    if bits != 16 or channels == 0 or sample_rate == 0:
        raise ValueError("Only 16-bit PCM with a non-zero rate and channel count is supported")

    data_id, data_size = _DATA_HEADER.unpack_from(wav, 36)
    if data_id != b"data":
        raise ValueError("Missing data chunk")
    if HEADER_SIZE + data_size > len(wav):
        raise ValueError("Data chunk extends past end of buffer")

    header = WavHeader(
        chunk_size=chunk_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits,
        data_size=data_size,
    )

    samples = array.array("h")
    samples.frombytes(wav[HEADER_SIZE:HEADER_SIZE + data_size])
    if sys.byteorder == "big":
        samples.byteswap()
    return header, samples


def pcm_to_wav(data: str, sample_rate: int) -> bytes:
    """Decode a base64 PCM payload and wrap it as mono 16-bit WAV."""
    return encode_wav(decode_pcm16(data), sample_rate)
