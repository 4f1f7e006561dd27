"""Request ingestion helpers (Stage 01 of the coaching pipeline)."""

from __future__ import annotations

import mimetypes
from typing import Final

from fastapi import HTTPException, UploadFile, status

from speaking_coach.config.settings import settings
from speaking_coach.services.speech_stats import normalize_duration

ACCEPTED_CONTENT_TYPES: Final[frozenset[str]] = frozenset(
    {
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
        "audio/vnd.wave",
        "audio/webm",
        "video/webm",
        "audio/ogg",
        "audio/mp4",
        "audio/x-m4a",
        "audio/m4a",
        "audio/aac",
        "audio/mpeg",
        "audio/mp3",
        "audio/flac",
        "audio/x-flac",
    }
)

_GENERIC_CONTENT_TYPES: Final[set[str]] = {"", "application/octet-stream"}


def require_upload(audio_file: UploadFile | None) -> UploadFile:
    if audio_file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing audio file. Send multipart/form-data with field name 'audio'.",
        )
    return audio_file


def resolve_content_type(audio_file: UploadFile) -> str:
    """Return the bare media type, guessing from the filename when the client did not say."""

    # MediaRecorder reports e.g. "audio/webm;codecs=opus"
    content_type = (audio_file.content_type or "").split(";", 1)[0].strip().lower()
    if content_type in _GENERIC_CONTENT_TYPES and audio_file.filename:
        guessed_type, _ = mimetypes.guess_type(audio_file.filename)
        content_type = (guessed_type or "").lower()

    if content_type not in ACCEPTED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported audio type '{content_type or 'unknown'}'. Upload WAV, WebM, Ogg, MP4/M4A, MP3 or FLAC.",
        )
    return content_type


async def read_audio_bytes(audio_file: UploadFile, max_bytes: int | None = None) -> bytes:
    """Load the upload into memory, rejecting empty and oversized payloads."""

    limit = max_bytes or settings.audio.max_upload_bytes
    audio_bytes = await audio_file.read(limit + 1)
    await audio_file.close()

    if not audio_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded audio file is empty",
        )
    if len(audio_bytes) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded audio exceeds the {limit} byte limit",
        )
    return audio_bytes


def parse_duration(raw: str | None) -> int:
    """Whole recorded seconds (minimum 1), defaulting when missing or not numeric."""

    return normalize_duration(raw, default=settings.default_duration_sec)


__all__ = [
    "ACCEPTED_CONTENT_TYPES",
    "parse_duration",
    "read_audio_bytes",
    "require_upload",
    "resolve_content_type",
]
