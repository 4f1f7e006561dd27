"""Deterministic speaking statistics derived from a transcript.

Two independent passes run over the text:

* Filler words are counted with case-insensitive regexes against the raw
  transcript, so punctuated or hyphenated occurrences ("Um, so...") still
  match on word boundaries.
* Word count and repeated-phrase mining use a separate tokenizer that
  lowercases the text and drops everything outside ``[a-z0-9 ']``.

Keep the two paths apart: feeding fillers through the tokenizer changes
what counts as a match.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9 ']")


@dataclass(frozen=True)
class FillerCategory:
    """One filler bucket: the reported key plus the regex that counts it."""

    key: str
    pattern: str

    def compile(self) -> re.Pattern[str]:
        # ASCII word boundaries: accented letters next to a filler do not hide it
        return re.compile(self.pattern, re.IGNORECASE | re.ASCII)


DEFAULT_FILLER_CATEGORIES: tuple[FillerCategory, ...] = (
    FillerCategory("um", r"\bum+\b"),
    FillerCategory("uh", r"\buh+\b"),
    FillerCategory("like", r"\blike\b"),
    FillerCategory("you know", r"\byou\s+know\b"),
    FillerCategory("basically", r"\bbasically\b"),
    FillerCategory("kind of", r"\bkind\s+of\b"),
    FillerCategory("sort of", r"\bsort\s+of\b"),
)


@dataclass(frozen=True)
class AnalyticsConfig:
    filler_categories: tuple[FillerCategory, ...] = DEFAULT_FILLER_CATEGORIES
    ngram_size: int = 3
    min_repetitions: int = 2
    max_phrases: int = 5
    # Already reported as fillers, so repeats of them are noise here.
    excluded_fragments: tuple[str, ...] = ("you know", "kind of", "sort of")


DEFAULT_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class SpeechStats:
    word_count: int
    duration_sec: int
    wpm: int
    filler_counts: Mapping[str, int] = field(default_factory=dict, hash=False)
    repeated_phrases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "filler_counts", MappingProxyType(dict(self.filler_counts)))
        object.__setattr__(self, "repeated_phrases", tuple(self.repeated_phrases))

    @property
    def filler_total(self) -> int:
        return sum(self.filler_counts.values())

    def as_dict(self) -> dict[str, object]:
        """camelCase payload matching the JSON the frontend renders."""

        return {
            "wordCount": self.word_count,
            "durationSec": self.duration_sec,
            "wpm": self.wpm,
            "fillerCounts": dict(self.filler_counts),
            "repeatedPhrases": list(self.repeated_phrases),
        }


def tokenize(transcript: str) -> list[str]:
    """Lowercase, replace non ``[a-z0-9 ']`` chars with spaces, split."""

    cleaned = _NON_TOKEN_CHARS.sub(" ", transcript.lower())
    return [token for token in cleaned.split() if token]


def count_fillers(
    transcript: str,
    categories: Sequence[FillerCategory] = DEFAULT_FILLER_CATEGORIES,
) -> dict[str, int]:
    """Count each filler category on the untokenized transcript.

    Every category key is present in the result, in category order.
    """

    return {
        category.key: len(category.compile().findall(transcript))
        for category in categories
    }


def mine_repeated_phrases(
    tokens: Sequence[str],
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Return the most repeated n-grams, most frequent first.

    Order among phrases with equal counts is not part of the contract.
    """

    size = config.ngram_size
    if size < 1 or len(tokens) < size:
        return []

    counts: Counter[str] = Counter()
    for start in range(len(tokens) - size + 1):
        phrase = " ".join(tokens[start : start + size])
        if any(fragment in phrase for fragment in config.excluded_fragments):
            continue
        counts[phrase] += 1

    repeated = [(phrase, total) for phrase, total in counts.items() if total >= config.min_repetitions]
    repeated.sort(key=lambda item: item[1], reverse=True)
    return [phrase for phrase, _ in repeated[: config.max_phrases]]


def normalize_duration(duration_sec: float | int | None, default: int = 60) -> int:
    """Floor a caller-supplied duration to a whole second, minimum 1."""

    if duration_sec is None:
        return max(1, int(default))
    try:
        value = float(duration_sec)
    except (TypeError, ValueError):
        return max(1, int(default))
    if math.isnan(value) or math.isinf(value):
        return max(1, int(default))
    return max(1, math.floor(value))


def words_per_minute(word_count: int, duration_sec: int) -> int:
    # Half-up rounding; builtin round() would round 0.5 to even.
    pace = word_count / max(1, duration_sec) * 60
    return max(0, math.floor(pace + 0.5))


def compute_speech_stats(
    transcript: str,
    duration_sec: float | int | None,
    config: AnalyticsConfig = DEFAULT_CONFIG,
) -> SpeechStats:
    """Derive word count, pace, filler counts and repeated phrases."""

    duration = normalize_duration(duration_sec)
    tokens = tokenize(transcript)
    word_count = len(tokens)
    return SpeechStats(
        word_count=word_count,
        duration_sec=duration,
        wpm=words_per_minute(word_count, duration),
        filler_counts=count_fillers(transcript, config.filler_categories),
        repeated_phrases=tuple(mine_repeated_phrases(tokens, config)),
    )


__all__ = [
    "AnalyticsConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_FILLER_CATEGORIES",
    "FillerCategory",
    "SpeechStats",
    "compute_speech_stats",
    "count_fillers",
    "mine_repeated_phrases",
    "normalize_duration",
    "tokenize",
    "words_per_minute",
]
