"""Coaching pipeline package.

Modules are organised by the order in which `/api/analyze` executes:

1. `ingestion` – upload validation and duration parsing.
2. `conversion` – browser container to canonical WAV.
3. `transcription` – speech to text.
4. `analysis` – deterministic transcript statistics.
5. `prompts` – assemble the Bedrock system/user prompts.
6. `llm` – call the coaching model and validate its response.
7. `flow` – human-readable description of the end-to-end stages.
"""

from .analysis import analyze_transcript
from .conversion import prepare_audio
from .flow import CoachingPipeline, PipelineStage
from .ingestion import parse_duration, read_audio_bytes, require_upload, resolve_content_type
from .llm import call_coaching_llm
from .prompts import build_coaching_request
from .transcription import transcribe_audio
from .types import CoachingOutcome, CoachingRequest, PreparedAudio

__all__ = [
    "CoachingPipeline",
    "PipelineStage",
    "CoachingOutcome",
    "CoachingRequest",
    "PreparedAudio",
    "analyze_transcript",
    "build_coaching_request",
    "call_coaching_llm",
    "parse_duration",
    "prepare_audio",
    "read_audio_bytes",
    "require_upload",
    "resolve_content_type",
    "transcribe_audio",
]
