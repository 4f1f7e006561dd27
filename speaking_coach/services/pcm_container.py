"""Canonical 16-bit PCM WAV container writer.

Browsers record in whatever codec they prefer (WebM/Opus, Ogg, MP4/AAC),
while the transcription backend is happiest with plain PCM. Decoded
recordings are therefore normalised into an :class:`AudioSampleBuffer`
and serialised here into a 44-byte-header WAV file.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Sequence

import numpy as np

BIT_DEPTH = 16
HEADER_SIZE = 44
_BYTES_PER_SAMPLE = BIT_DEPTH // 8
_PCM_FORMAT_TAG = 1
_FMT_CHUNK_SIZE = 16
_U32_MASK = 0xFFFFFFFF

# RIFF/WAVE header, every numeric field little-endian.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True, eq=False)
class AudioSampleBuffer:
    """Decoded audio, one float sequence per channel (nominally -1.0..1.0)."""

    sample_rate: int
    channels: tuple[np.ndarray, ...]

    def __post_init__(self) -> None:
        lengths = {len(channel) for channel in self.channels}
        if len(lengths) > 1:
            raise ValueError("All channels must hold the same number of samples.")

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[Sequence[float]],
        sample_rate: int,
    ) -> "AudioSampleBuffer":
        return cls(
            sample_rate=sample_rate,
            channels=tuple(np.asarray(channel, dtype=np.float64) for channel in channels),
        )

    @classmethod
    def from_interleaved(
        cls,
        samples: Sequence[float] | np.ndarray,
        channel_count: int,
        sample_rate: int,
    ) -> "AudioSampleBuffer":
        """Split an interleaved stream (``L R L R ...``) into channels.

        A trailing partial frame is dropped.
        """

        data = np.asarray(samples, dtype=np.float64).reshape(-1)
        if channel_count < 1:
            return cls(sample_rate=sample_rate, channels=())
        frames = len(data) // channel_count
        framed = data[: frames * channel_count].reshape(frames, channel_count)
        return cls(
            sample_rate=sample_rate,
            channels=tuple(framed[:, idx].copy() for idx in range(channel_count)),
        )

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def sample_count(self) -> int:
        if not self.channels:
            return 0
        return len(self.channels[0])

    @property
    def duration_seconds(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.sample_count / self.sample_rate


def _quantize(samples: np.ndarray) -> np.ndarray:
    """Clamp floats to [-1, 1] and scale asymmetrically to int16."""

    cleaned = np.nan_to_num(
        np.asarray(samples, dtype=np.float64),
        nan=0.0,
        posinf=1.0,
        neginf=-1.0,
    )
    clipped = np.clip(cleaned, -1.0, 1.0)
    # -1.0 maps to -32768 and +1.0 to 32767 so neither end overflows.
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def build_header(channel_count: int, sample_rate: int, sample_count: int) -> bytes:
    """Return the 44-byte RIFF/WAVE header for a 16-bit PCM payload."""

    block_align = channel_count * _BYTES_PER_SAMPLE
    byte_rate = sample_rate * block_align
    data_size = sample_count * block_align
    return _HEADER.pack(
        b"RIFF",
        (36 + data_size) & _U32_MASK,
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        _PCM_FORMAT_TAG,
        channel_count & 0xFFFF,
        sample_rate & _U32_MASK,
        byte_rate & _U32_MASK,
        block_align & 0xFFFF,
        BIT_DEPTH,
        b"data",
        data_size & _U32_MASK,
    )


def encode_to_pcm_container(buffer: AudioSampleBuffer) -> bytes:
    """Serialise ``buffer`` into a canonical 16-bit PCM WAV byte string.

    Samples are interleaved channel-minor: every channel of frame 0, then
    every channel of frame 1, and so on. Empty buffers produce a valid
    header-only container.
    """

    header = build_header(buffer.channel_count, buffer.sample_rate, buffer.sample_count)
    if buffer.channel_count == 0 or buffer.sample_count == 0:
        return header

    frames = np.stack([_quantize(channel) for channel in buffer.channels], axis=1)
    return header + frames.astype("<i2").tobytes()


__all__ = [
    "AudioSampleBuffer",
    "BIT_DEPTH",
    "HEADER_SIZE",
    "build_header",
    "encode_to_pcm_container",
]
