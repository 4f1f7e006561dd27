"""Pydantic models for validating the coaching model's JSON response.

The model is asked for a fixed shape (scores, improved answer, STAR
bullets, tips). These schemas normalise what comes back so downstream code
receives clamped, type-safe objects or a clear validation error.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

MAX_SCORE = 10.0
MIN_TIPS = 2
MAX_TIPS = 5


class ResponseContractError(RuntimeError):
    """Raised when the LLM response contract cannot be validated."""


class CoachingScore(BaseModel):
    overall: float
    structure: float
    clarity: float
    specificity: float
    confidence: float

    @model_validator(mode="after")
    def clamp_scores(self) -> "CoachingScore":
        for name in ("overall", "structure", "clarity", "specificity", "confidence"):
            value = float(getattr(self, name))
            setattr(self, name, round(max(0.0, min(MAX_SCORE, value)), 1))
        return self


class StarBullets(BaseModel):
    situation: str = ""
    task: str = ""
    action: str = ""
    result: str = ""


class CoachingResponse(BaseModel):
    score: CoachingScore
    improved_answer: str = Field(alias="improvedAnswer")
    star_bullets: StarBullets = Field(alias="starBullets")
    tips: list[str] = Field(min_length=MIN_TIPS, max_length=MAX_TIPS)

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("tips", mode="before")
    @classmethod
    def trim_tips(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            cleaned = [str(tip).strip() for tip in value if str(tip).strip()]
            return cleaned[:MAX_TIPS]
        return value

    @field_validator("improved_answer", mode="before")
    @classmethod
    def strip_answer(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_json(cls, payload: str) -> "CoachingResponse":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ValidationError.from_exception_data(
                "CoachingResponse",
                line_errors=[{"type": "value_error", "loc": ("__root__",), "input": payload, "ctx": {"error": str(exc)}}],
            )
        return cls.model_validate(data)


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "CoachingResponse",
    "CoachingScore",
    "ResponseContractError",
    "StarBullets",
]
