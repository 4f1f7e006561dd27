"""Container conversion stage (Stage 02) of the coaching pipeline.

WAV uploads pass straight through. Anything else is decoded to float
samples and re-encoded as canonical 16-bit PCM WAV so the transcription
collaborator never sees a browser-specific codec.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool

from speaking_coach.services.audio_decoder import AudioDecodeError, AudioDecoder
from speaking_coach.services.pcm_container import encode_to_pcm_container
from speaking_coach.services.transcribe import WAV_CONTENT_TYPES
from speaking_coach.telemetry import record_conversion

from .types import PreparedAudio

logger = logging.getLogger("speaking_coach.pipeline")


async def prepare_audio(
    audio_bytes: bytes,
    content_type: str,
    decoder: AudioDecoder,
) -> PreparedAudio:
    """Return WAV bytes for the upload, or the original bytes if decoding fails."""

    if content_type in WAV_CONTENT_TYPES:
        record_conversion("passthrough")
        return PreparedAudio(audio_bytes=audio_bytes, content_type="audio/wav")

    try:
        buffer = await run_in_threadpool(decoder.decode, audio_bytes)
    except AudioDecodeError as exc:
        # The transcriber may still accept the original container.
        logger.warning("Conversion to WAV failed for %s, forwarding original: %s", content_type, exc)
        record_conversion("fallback")
        return PreparedAudio(audio_bytes=audio_bytes, content_type=content_type)

    if buffer.sample_count == 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The recording contains no audio.",
        )

    wav_bytes = encode_to_pcm_container(buffer)
    logger.info(
        "Converted %s upload to WAV: %s channel(s) @ %s Hz, %.2fs, %s bytes",
        content_type,
        buffer.channel_count,
        buffer.sample_rate,
        buffer.duration_seconds,
        len(wav_bytes),
    )
    record_conversion("converted")
    return PreparedAudio(audio_bytes=wav_bytes, content_type="audio/wav", converted=True)


__all__ = ["prepare_audio"]
