"""Transcript analytics stage (Stage 04) of the coaching pipeline."""

from __future__ import annotations

import logging

from speaking_coach.services.speech_stats import (
    DEFAULT_CONFIG,
    AnalyticsConfig,
    SpeechStats,
    compute_speech_stats,
)

logger = logging.getLogger("speaking_coach.pipeline")
transcript_logger = logging.getLogger("speaking_coach.logs.transcript")


def analyze_transcript(
    transcript: str,
    duration_sec: int,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> SpeechStats:
    stats = compute_speech_stats(transcript, duration_sec, config)
    logger.info(
        "Stats words=%s duration=%ss wpm=%s fillers=%s repeated=%s",
        stats.word_count,
        stats.duration_sec,
        stats.wpm,
        stats.filler_total,
        len(stats.repeated_phrases),
    )
    transcript_logger.info(
        "wpm=%s | fillers=%s | text=%s",
        stats.wpm,
        dict(stats.filler_counts),
        transcript,
    )
    return stats


__all__ = ["analyze_transcript"]
