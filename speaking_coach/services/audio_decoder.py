"""Decode browser recordings into float samples with ffmpeg."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from functools import lru_cache
from typing import Protocol

import numpy as np

from speaking_coach.config.settings import settings
from speaking_coach.services.pcm_container import AudioSampleBuffer

logger = logging.getLogger(__name__)


class AudioDecodeError(RuntimeError):
    """Raised when a recording cannot be decoded into PCM samples."""


class AudioDecoder(Protocol):
    def decode(self, audio_bytes: bytes) -> AudioSampleBuffer:
        ...


class FfmpegAudioDecoder:
    """Run ffmpeg to turn any supported container into 32-bit float PCM."""

    def __init__(
        self,
        *,
        binary: str = "ffmpeg",
        sample_rate: int = 16000,
        channels: int = 1,
    ) -> None:
        self._binary = binary
        self._sample_rate = sample_rate
        self._channels = channels

    def decode(self, audio_bytes: bytes) -> AudioSampleBuffer:
        if not audio_bytes:
            raise AudioDecodeError("No audio bytes to decode.")

        # WebM/MP4 demuxers need a seekable input, so go through a temp file.
        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    self._binary,
                    "-hide_banner",
                    "-loglevel", "error",
                    "-i", tmp_path,
                    "-f", "f32le",
                    "-acodec", "pcm_f32le",
                    "-ac", str(self._channels),
                    "-ar", str(self._sample_rate),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except FileNotFoundError as exc:
            raise AudioDecodeError(f"ffmpeg binary not found: {self._binary}") from exc
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg decode failed. stderr: %s", error_msg)
            raise AudioDecodeError(f"ffmpeg failed to decode audio: {error_msg.strip()}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        samples = np.frombuffer(process.stdout, dtype="<f4")
        logger.debug(
            "Decoded %s float samples (%s channel(s) @ %s Hz)",
            samples.size,
            self._channels,
            self._sample_rate,
        )
        return AudioSampleBuffer.from_interleaved(samples, self._channels, self._sample_rate)


@lru_cache()
def get_audio_decoder() -> AudioDecoder:
    return FfmpegAudioDecoder(
        binary=settings.audio.ffmpeg_binary,
        sample_rate=settings.audio.target_sample_rate,
        channels=settings.audio.target_channels,
    )


__all__ = ["AudioDecodeError", "AudioDecoder", "FfmpegAudioDecoder", "get_audio_decoder"]
