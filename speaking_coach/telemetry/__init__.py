"""Telemetry helpers and metrics."""

from .metrics import (
    ANALYSIS_COUNTER,
    CONVERSION_COUNTER,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    observe_request,
    record_analysis,
    record_conversion,
)

__all__ = [
    "ANALYSIS_COUNTER",
    "CONVERSION_COUNTER",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "observe_request",
    "record_analysis",
    "record_conversion",
]
