"""Service layer helpers for the coaching core and external integrations."""

from .audio_decoder import (
    AudioDecodeError,
    AudioDecoder,
    FfmpegAudioDecoder,
    get_audio_decoder,
)
from .llm_client import BedrockLlmClient, CoachingLlm, LlmInvocationError, get_llm_client
from .pcm_container import AudioSampleBuffer, encode_to_pcm_container
from .speech_stats import SpeechStats, compute_speech_stats
from .transcribe import (
    TranscribeService,
    Transcriber,
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)

__all__ = [
    "AudioDecodeError",
    "AudioDecoder",
    "FfmpegAudioDecoder",
    "get_audio_decoder",
    "BedrockLlmClient",
    "CoachingLlm",
    "LlmInvocationError",
    "get_llm_client",
    "AudioSampleBuffer",
    "encode_to_pcm_container",
    "SpeechStats",
    "compute_speech_stats",
    "TranscribeService",
    "Transcriber",
    "TranscriptionError",
    "TranscriptionResult",
    "get_transcribe_service",
]
