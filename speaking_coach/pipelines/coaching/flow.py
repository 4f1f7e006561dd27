"""High-level orchestration map for the coaching pipeline.

The HTTP controller in ``speaking_coach/controllers/analyze.py`` ties the
stages together; this module documents the canonical execution order so
the `GET /api/analyze` endpoint and contributors share one description:

1. ``ingestion`` – validate the upload, size limit and recorded duration.
2. ``conversion`` – normalise the recording into 16-bit PCM WAV.
3. ``transcription`` – call Amazon Transcribe to obtain text.
4. ``analysis`` – word count, pace, filler words and repeated phrases.
5. ``prompts`` – construct the system/user prompts for the coach.
6. ``llm`` – invoke the coaching model and validate the contract.
7. ``result`` – assemble the response and keep it in the result store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the coaching pipeline."""

    order: int
    name: str
    module: str
    summary: str


class CoachingPipeline:
    """Utility wrapper for documenting the `/api/analyze` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Ingestion",
            "speaking_coach.pipelines.coaching.ingestion",
            "Resolve content type, enforce the upload limit, normalise durationSec.",
        ),
        PipelineStage(
            2,
            "Conversion",
            "speaking_coach.pipelines.coaching.conversion",
            "Decode non-WAV recordings and re-encode them as 16-bit PCM WAV.",
        ),
        PipelineStage(
            3,
            "Transcription",
            "speaking_coach.pipelines.coaching.transcription",
            "Forward the audio to the configured ASR provider (Amazon Transcribe).",
        ),
        PipelineStage(
            4,
            "Transcript Analytics",
            "speaking_coach.pipelines.coaching.analysis",
            "Count words, fillers and repeated phrases; compute words per minute.",
        ),
        PipelineStage(
            5,
            "Prompt Assembly",
            "speaking_coach.pipelines.coaching.prompts",
            "Render the coach persona, question, transcript and stats into prompts.",
        ),
        PipelineStage(
            6,
            "Coaching",
            "speaking_coach.pipelines.coaching.llm",
            "Call Bedrock and validate the structured JSON response.",
        ),
        PipelineStage(
            7,
            "Result",
            "speaking_coach.controllers.analyze",
            "Combine transcript, stats and coaching; store the result for the results page.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["CoachingPipeline", "PipelineStage"]
