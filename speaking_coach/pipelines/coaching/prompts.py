"""Prompt construction stage for the coaching pipeline.

Stage **05** turns the transcript, its statistics and the interview
question into the system/user prompts consumed by the coaching LLM.
"""

from __future__ import annotations

import logging

from speaking_coach.services.prompt_builder import build_prompt
from speaking_coach.services.speech_stats import SpeechStats

from .logs import truncate
from .types import CoachingRequest

logger = logging.getLogger("speaking_coach.pipeline")


def build_coaching_request(
    transcript: str,
    stats: SpeechStats,
    *,
    interview_prompt: str | None,
) -> CoachingRequest:
    """Assemble prompts and metadata for the LLM invocation."""

    prompt_bundle = build_prompt(
        transcript=transcript,
        stats=stats,
        interview_prompt=interview_prompt,
    )

    logger.info(
        "Prompts generated question=%r\nUSER> %s",
        interview_prompt,
        truncate(prompt_bundle.user_prompt),
    )

    return CoachingRequest(
        transcript=transcript,
        stats=stats,
        interview_prompt=interview_prompt,
        system_prompt=prompt_bundle.system_prompt,
        user_prompt=prompt_bundle.user_prompt,
    )


__all__ = ["build_coaching_request"]
