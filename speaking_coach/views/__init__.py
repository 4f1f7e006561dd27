"""Pydantic schemas used as views in the MVC architecture."""

from .analysis import (
    AnalysisDebug,
    AnalysisResult,
    AnalyzeUsage,
    PromptList,
    SpeechStatsView,
)
from .common import ErrorResponse, HealthResponse

__all__ = [
    "AnalysisDebug",
    "AnalysisResult",
    "AnalyzeUsage",
    "PromptList",
    "SpeechStatsView",
    "ErrorResponse",
    "HealthResponse",
]
