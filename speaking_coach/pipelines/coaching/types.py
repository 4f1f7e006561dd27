"""Typed containers shared across the coaching pipeline.

These dataclasses live in their own module so the other stages
(`conversion`, `prompts`, `llm`, `flow`) can import them without creating
circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from speaking_coach.services.response_contract import CoachingResponse
from speaking_coach.services.speech_stats import SpeechStats


@dataclass(frozen=True)
class PreparedAudio:
    """Audio bytes ready for the transcription collaborator."""

    audio_bytes: bytes
    content_type: str
    converted: bool = False


@dataclass(frozen=True)
class CoachingRequest:
    """Normalized payload handed to the coaching LLM client."""

    transcript: str
    stats: SpeechStats
    interview_prompt: str | None
    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class CoachingOutcome:
    """Structured result produced by the LLM stage of the pipeline."""

    response: CoachingResponse
    raw_response: str
    attempts: int = 1
