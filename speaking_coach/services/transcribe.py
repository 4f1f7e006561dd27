"""Amazon Transcribe integration helpers using the Streaming API."""

from __future__ import annotations

import asyncio
import io
import logging
import os
import subprocess
import tempfile
import wave
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from speaking_coach.config.settings import settings

logger = logging.getLogger(__name__)

WAV_CONTENT_TYPES = frozenset({"audio/wav", "audio/x-wav", "audio/wave", "audio/vnd.wave"})


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the pipeline."""

    transcript: str
    language_code: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class Transcriber(Protocol):
    async def transcribe(self, audio_bytes: bytes, content_type: str) -> TranscriptionResult:
        ...


@dataclass(frozen=True)
class _PcmStream:
    data: bytes
    sample_rate: int


class TranscribeService:
    """High-level facade for streaming audio to Amazon Transcribe."""

    def __init__(
        self,
        region: str,
        language_code: str = "en-US",
        media_sample_rate_hz: int = 16000,
        chunk_size: int = 8192,
        realtime_pacing: bool = True,
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._media_sample_rate_hz = media_sample_rate_hz
        self._chunk_size = chunk_size
        self._realtime_pacing = realtime_pacing

        # The streaming SDK only reads credentials from its own resolver chain
        if settings.aws.access_key:
            os.environ.setdefault("AWS_ACCESS_KEY_ID", settings.aws.access_key)
        if settings.aws.secret_key:
            os.environ.setdefault(
                "AWS_SECRET_ACCESS_KEY", settings.aws.secret_key.get_secret_value()
            )

        self._client = TranscribeStreamingClient(region=region)

    async def transcribe(self, audio_bytes: bytes, content_type: str) -> TranscriptionResult:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        pcm = self._read_wav_pcm(audio_bytes) if content_type in WAV_CONTENT_TYPES else None
        if pcm is None:
            try:
                pcm = _PcmStream(
                    data=await run_in_threadpool(self._convert_to_pcm_sync, audio_bytes),
                    sample_rate=self._media_sample_rate_hz,
                )
            except (OSError, subprocess.SubprocessError) as exc:
                raise TranscriptionError(f"Audio conversion failed: {exc}") from exc

        if not pcm.data:
            raise TranscriptionError("The recording contains no audio samples.")

        stream = await self._client.start_stream_transcription(
            language_code=self._language_code,
            media_sample_rate_hz=pcm.sample_rate,
            media_encoding="pcm",
        )

        handler = _SimpleTranscriptHandler(stream.output_stream)

        async def write_chunks() -> None:
            chunk_size = self._chunk_size
            # 16-bit mono: two bytes per sample
            sleep_time = chunk_size / (pcm.sample_rate * 2) if self._realtime_pacing else 0

            logger.info(
                "Starting stream. Total bytes: %s. Chunk size: %s. Sleep: %.4fs",
                len(pcm.data),
                chunk_size,
                sleep_time,
            )

            for i in range(0, len(pcm.data), chunk_size):
                await stream.input_stream.send_audio_event(audio_chunk=pcm.data[i : i + chunk_size])
                if sleep_time:
                    await asyncio.sleep(sleep_time)

            logger.info("Finished streaming audio bytes. Ending stream.")
            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        logger.info("Transcription complete. Length: %s", len(handler.transcript))
        return TranscriptionResult(
            transcript=handler.transcript.strip(),
            language_code=self._language_code,
        )

    @staticmethod
    def _read_wav_pcm(audio_bytes: bytes) -> _PcmStream | None:
        """Return raw frames when the WAV is already mono 16-bit PCM."""

        try:
            with wave.open(io.BytesIO(audio_bytes), "rb") as handle:
                if handle.getnchannels() != 1 or handle.getsampwidth() != 2:
                    return None
                return _PcmStream(
                    data=handle.readframes(handle.getnframes()),
                    sample_rate=handle.getframerate(),
                )
        except (wave.Error, EOFError):
            logger.debug("WAV header unreadable, falling back to ffmpeg conversion")
            return None

    def _convert_to_pcm_sync(self, audio_bytes: bytes) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".tmp") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    settings.audio.ffmpeg_binary,
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            if not process.stdout:
                logger.warning("ffmpeg produced empty output. stderr: %s", process.stderr.decode("utf-8", errors="replace"))
            return process.stdout
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class _SimpleTranscriptHandler(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if result.is_partial or not result.alternatives:
                continue
            # First alternative is the most likely one
            text = result.alternatives[0].transcript
            logger.debug("Received transcript chunk: %s...", text[:20])
            self.transcript += text + " "


@lru_cache()
def get_transcribe_service() -> Transcriber:
    """Return a lazily-instantiated transcribe service singleton."""

    return TranscribeService(
        region=settings.transcribe.region,
        language_code=settings.transcribe.language_code,
        media_sample_rate_hz=settings.transcribe.media_sample_rate_hz,
        chunk_size=settings.transcribe.chunk_size,
        realtime_pacing=settings.transcribe.realtime_pacing,
    )


__all__ = [
    "TranscribeService",
    "Transcriber",
    "TranscriptionError",
    "TranscriptionResult",
    "WAV_CONTENT_TYPES",
    "get_transcribe_service",
]
