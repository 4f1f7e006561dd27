"""Common FastAPI dependencies reused across controllers.

External collaborators are resolved here so tests can swap them through
``app.dependency_overrides`` without touching the network.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from speaking_coach.services.audio_decoder import AudioDecoder, get_audio_decoder
from speaking_coach.services.llm_client import CoachingLlm, get_llm_client
from speaking_coach.services.transcribe import Transcriber, get_transcribe_service

TranscriberDep = Annotated[Transcriber, Depends(get_transcribe_service)]
CoachingLlmDep = Annotated[CoachingLlm, Depends(get_llm_client)]
AudioDecoderDep = Annotated[AudioDecoder, Depends(get_audio_decoder)]


__all__ = ["TranscriberDep", "CoachingLlmDep", "AudioDecoderDep"]
