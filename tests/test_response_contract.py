"""Tests for coaching response validation."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from speaking_coach.services.response_contract import CoachingResponse  # noqa: E402


def _payload(**overrides) -> dict:
    data = {
        "score": {"overall": 7.26, "structure": 6, "clarity": 8, "specificity": 5.5, "confidence": 7},
        "improvedAnswer": "  In my last role I led the migration.  ",
        "starBullets": {
            "situation": "Legacy billing system",
            "task": "Move it without downtime",
            "action": "Planned a staged cutover",
            "result": "Zero failed invoices",
        },
        "tips": ["Lead with the result", "Quantify the impact"],
    }
    data.update(overrides)
    return data


def test_valid_payload_is_parsed():
    response = CoachingResponse.from_json(json.dumps(_payload()))

    assert response.score.overall == 7.3
    assert response.score.structure == 6.0
    assert response.improved_answer == "In my last role I led the migration."
    assert response.star_bullets.result == "Zero failed invoices"
    assert response.tips == ["Lead with the result", "Quantify the impact"]


def test_scores_are_clamped_to_range():
    payload = _payload(score={"overall": 14, "structure": -2, "clarity": 10, "specificity": 0, "confidence": 9.99})

    score = CoachingResponse.from_json(json.dumps(payload)).score

    assert score.overall == 10.0
    assert score.structure == 0.0
    assert score.clarity == 10.0
    assert score.specificity == 0.0
    assert score.confidence == 10.0


def test_markdown_fences_and_chatter_are_stripped():
    raw = "Sure! Here is the feedback:\n```json\n" + json.dumps(_payload()) + "\n```\nGood luck."

    response = CoachingResponse.from_json(raw)

    assert response.score.clarity == 8.0


def test_extra_tips_are_trimmed_to_five():
    payload = _payload(tips=[f"tip {idx}" for idx in range(8)])

    response = CoachingResponse.from_json(json.dumps(payload))

    assert response.tips == ["tip 0", "tip 1", "tip 2", "tip 3", "tip 4"]


def test_blank_tips_do_not_count():
    payload = _payload(tips=["Slow down", "   ", ""])

    with pytest.raises(ValidationError):
        CoachingResponse.from_json(json.dumps(payload))


def test_missing_score_is_rejected():
    payload = _payload()
    del payload["score"]

    with pytest.raises(ValidationError):
        CoachingResponse.from_json(json.dumps(payload))


def test_star_bullets_default_to_empty_strings():
    response = CoachingResponse.from_json(json.dumps(_payload(starBullets={"situation": "Outage"})))

    assert response.star_bullets.situation == "Outage"
    assert response.star_bullets.action == ""


@pytest.mark.parametrize("raw", ["not json at all", "{\"score\": ", "```json\n```"])
def test_unparseable_text_raises_validation_error(raw):
    with pytest.raises(ValidationError):
        CoachingResponse.from_json(raw)


def test_snake_case_names_are_accepted():
    payload = _payload()
    payload["improved_answer"] = payload.pop("improvedAnswer")
    payload["star_bullets"] = payload.pop("starBullets")

    response = CoachingResponse.model_validate(payload)

    assert response.model_dump(by_alias=True)["improvedAnswer"].startswith("In my last role")
