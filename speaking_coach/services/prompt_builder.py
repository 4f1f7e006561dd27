"""Helpers to construct system/user prompts for the coaching LLM.

Given the interview prompt, the transcript and its SpeechStats, we emit:
* A system prompt describing the coach persona and strict JSON contract.
* A user prompt containing the question, the transcript and the measured stats.
"""

from __future__ import annotations

from dataclasses import dataclass

from speaking_coach.services.response_contract import MAX_SCORE, MAX_TIPS, MIN_TIPS
from speaking_coach.services.speech_stats import SpeechStats

DEFAULT_PROMPTS: tuple[str, ...] = (
    "Tell me about yourself.",
    "Why do you want this role?",
    "Describe a challenge you overcame.",
    "Tell me about a time you showed leadership.",
    "Explain a project you're proud of.",
)

# Pace band used in the guidance; outside it the coach should comment on speed.
TARGET_WPM = (120, 160)

SYSTEM_PROMPT = (
    "You are an encouraging but honest interview speaking coach. "
    "You review a candidate's spoken answer, using the transcript and the measured "
    "delivery statistics, and you help them give a clearer, better structured answer "
    "using the STAR method (Situation, Task, Action, Result)."
    " Respond only with valid JSON using exactly this structure:"
    " {\n"
    "  \"score\": {\"overall\": number, \"structure\": number, \"clarity\": number,"
    " \"specificity\": number, \"confidence\": number},\n"
    "  \"improvedAnswer\": string,\n"
    "  \"starBullets\": {\"situation\": string, \"task\": string, \"action\": string, \"result\": string},\n"
    "  \"tips\": [string]\n"
    " }.\n"
    f"Every score is a number from 0 to {MAX_SCORE:g}. "
    f"\"tips\" holds between {MIN_TIPS} and {MAX_TIPS} short, actionable tips. "
    "\"improvedAnswer\" rewrites the answer in the candidate's voice so it can be spoken "
    "in 45 to 60 seconds. Do not write anything before or after the JSON."
)


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


def _format_fillers(stats: SpeechStats) -> str:
    used = [f"\"{key}\" x{count}" for key, count in stats.filler_counts.items() if count]
    if not used:
        return "none detected"
    return ", ".join(used)


def _format_stats(stats: SpeechStats) -> str:
    low, high = TARGET_WPM
    repeated = ", ".join(f"\"{phrase}\"" for phrase in stats.repeated_phrases) or "none"
    return (
        f"- Word count: {stats.word_count}\n"
        f"- Duration: {stats.duration_sec} s\n"
        f"- Pace: {stats.wpm} words per minute (comfortable range {low}-{high})\n"
        f"- Filler words ({stats.filler_total} total): {_format_fillers(stats)}\n"
        f"- Repeated phrases: {repeated}"
    )


def build_prompt(
    *,
    transcript: str,
    stats: SpeechStats,
    interview_prompt: str | None,
) -> PromptBundle:
    """Compose system/user prompts for one recorded answer."""

    question = (interview_prompt or "").strip() or DEFAULT_PROMPTS[0]
    user_prompt = (
        f"Interview question:\n{question}\n\n"
        f"Transcript of the spoken answer:\n{transcript.strip()}\n\n"
        f"Delivery statistics (measured, do not recompute):\n{_format_stats(stats)}\n\n"
        "Score the answer and coach the candidate.\n"
        "Rules:\n"
        "- Base clarity and confidence partly on the filler words and the pace above.\n"
        "- Base specificity on concrete details, numbers and outcomes in the transcript.\n"
        "- If a STAR part is missing from the answer, suggest what it should contain.\n"
        "- Strictly follow the requested JSON format; no text outside the structure."
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)


__all__ = ["DEFAULT_PROMPTS", "PromptBundle", "SYSTEM_PROMPT", "build_prompt"]
