"""Schemas for the analyze/results endpoints.

JSON keys are camelCase to match what the browser client stores and renders.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from speaking_coach.services.response_contract import CoachingScore, StarBullets
from speaking_coach.services.speech_stats import SpeechStats


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SpeechStatsView(_CamelModel):
    word_count: int = Field(..., alias="wordCount", ge=0)
    duration_sec: int = Field(..., alias="durationSec", ge=1)
    wpm: int = Field(..., ge=0)
    filler_counts: dict[str, int] = Field(default_factory=dict, alias="fillerCounts")
    repeated_phrases: list[str] = Field(default_factory=list, alias="repeatedPhrases")

    @classmethod
    def from_stats(cls, stats: SpeechStats) -> "SpeechStatsView":
        return cls.model_validate(stats.as_dict())


class AnalysisDebug(_CamelModel):
    received_file_name: Optional[str] = Field(default=None, alias="receivedFileName")
    received_file_type: Optional[str] = Field(default=None, alias="receivedFileType")
    received_file_size_bytes: Optional[int] = Field(default=None, alias="receivedFileSizeBytes")
    transcribed_content_type: Optional[str] = Field(default=None, alias="transcribedContentType")
    converted_to_wav: bool = Field(default=False, alias="convertedToWav")
    coaching_attempts: int = Field(default=1, alias="coachingAttempts")


class AnalysisResult(_CamelModel):
    """Combined transcript, statistics and coaching feedback for one recording."""

    result_id: str = Field(..., alias="resultId")
    prompt: Optional[str] = None
    transcript: str
    stats: SpeechStatsView
    score: CoachingScore
    improved_answer: str = Field(..., alias="improvedAnswer")
    star_bullets: StarBullets = Field(..., alias="starBullets")
    tips: list[str]
    debug: Optional[AnalysisDebug] = None


class AnalyzeUsage(BaseModel):
    ok: bool = True
    message: str
    stages: list[str]


class PromptList(BaseModel):
    prompts: list[str]
