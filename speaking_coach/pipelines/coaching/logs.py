"""Log formatting helpers shared by the pipeline stages."""

from __future__ import annotations


def truncate(value: str, max_length: int = 500) -> str:
    """Shorten ``value`` for a log line, marking the cut with an ellipsis."""

    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


__all__ = ["truncate"]
