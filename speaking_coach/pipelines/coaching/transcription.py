"""Transcription stage (Stage 03) of the coaching pipeline."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from speaking_coach.services.transcribe import Transcriber, TranscriptionError

from .types import PreparedAudio

logger = logging.getLogger("speaking_coach.pipeline")


async def transcribe_audio(audio: PreparedAudio, transcriber: Transcriber) -> str:
    """Delegate to the transcription service and surface FastAPI-friendly errors."""

    try:
        result = await transcriber.transcribe(audio.audio_bytes, audio.content_type)
    except TranscriptionError as exc:
        logger.exception("Transcription failed", exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    transcript = (result.transcript or "").strip()
    if not transcript:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No speech was detected in the recording.",
        )
    return transcript


__all__ = ["transcribe_audio"]
