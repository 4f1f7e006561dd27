"""In-memory store for recent analysis results.

Results live only as long as the process and are evicted oldest-first
once the configured limit is reached.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Mapping
from uuid import uuid4

from speaking_coach.config.settings import settings

_results: "OrderedDict[str, dict[str, Any]]" = OrderedDict()


def new_result_id() -> str:
    return uuid4().hex


def save_result(result_id: str, result: Mapping[str, Any], *, limit: int | None = None) -> None:
    """Store a copy of ``result`` under ``result_id``, evicting the oldest entries."""

    _results[result_id] = dict(result)
    _results.move_to_end(result_id)
    max_items = limit or settings.result_store_limit
    while len(_results) > max_items:
        _results.popitem(last=False)


def get_result(result_id: str) -> dict[str, Any] | None:
    """Return a copy of the stored result, or None when unknown or evicted."""

    stored = _results.get(result_id)
    return dict(stored) if stored is not None else None


def clear_results() -> None:
    _results.clear()


__all__ = ["new_result_id", "save_result", "get_result", "clear_results"]
