"""Integration-style tests for the /api/analyze endpoint."""

from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from speaking_coach.config.settings import settings  # noqa: E402
from speaking_coach.main import app  # noqa: E402
from speaking_coach.services.audio_decoder import AudioDecodeError, get_audio_decoder  # noqa: E402
from speaking_coach.services.llm_client import LlmInvocationError, get_llm_client  # noqa: E402
from speaking_coach.services.pcm_container import AudioSampleBuffer, encode_to_pcm_container  # noqa: E402
from speaking_coach.services.result_store import clear_results  # noqa: E402
from speaking_coach.services.transcribe import (  # noqa: E402
    TranscriptionError,
    TranscriptionResult,
    get_transcribe_service,
)

TRANSCRIPT = "um um um I think basically basically I did well"

COACHING_JSON = json.dumps(
    {
        "score": {"overall": 6.5, "structure": 6, "clarity": 7, "specificity": 5, "confidence": 8},
        "improvedAnswer": "I believe I performed well because I prepared early.",
        "starBullets": {
            "situation": "Quarter-end deadline",
            "task": "Ship the report",
            "action": "Split the work",
            "result": "Delivered a day early",
        },
        "tips": ["Drop the 'um' openers", "Name one concrete result"],
    }
)


class FakeTranscriber:
    def __init__(self) -> None:
        self.transcript = TRANSCRIPT
        self.error: Exception | None = None
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio_bytes, content_type):
        self.calls.append((audio_bytes, content_type))
        if self.error is not None:
            raise self.error
        return TranscriptionResult(transcript=self.transcript, language_code="en-US")


class FakeLlm:
    def __init__(self) -> None:
        self.responses = [COACHING_JSON]
        self.error: Exception | None = None
        self.prompts: list[str] = []

    async def invoke(self, *, system_prompt, user_prompt):
        self.prompts.append(user_prompt)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeDecoder:
    def __init__(self) -> None:
        self.error: Exception | None = None

    def decode(self, audio_bytes):
        if self.error is not None:
            raise self.error
        return AudioSampleBuffer.from_channels([[0.0, 0.5, -0.5, 1.0]], 16000)


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def llm() -> FakeLlm:
    return FakeLlm()


@pytest.fixture
def decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def client(transcriber, llm, decoder):
    """Swap every external collaborator for an in-process fake."""

    app.dependency_overrides[get_transcribe_service] = lambda: transcriber
    app.dependency_overrides[get_llm_client] = lambda: llm
    app.dependency_overrides[get_audio_decoder] = lambda: decoder

    yield TestClient(app)

    app.dependency_overrides.clear()
    clear_results()


def _wav_bytes() -> bytes:
    return encode_to_pcm_container(AudioSampleBuffer.from_channels([[0.0, 0.25, -0.25, 0.0]], 16000))


def _post(client, *, files=None, data=None):
    if files is None:
        files = {"audio": ("answer.wav", _wav_bytes(), "audio/wav")}
    return client.post("/api/analyze", files=files, data=data or {})


def test_wav_upload_returns_stats_and_coaching(client, transcriber):
    response = _post(client, data={"prompt": "Tell me about yourself.", "durationSec": "10"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["transcript"] == TRANSCRIPT
    assert payload["prompt"] == "Tell me about yourself."
    assert payload["stats"]["wordCount"] == 10
    assert payload["stats"]["durationSec"] == 10
    assert payload["stats"]["wpm"] == 60
    assert payload["stats"]["fillerCounts"]["um"] == 3
    assert payload["stats"]["fillerCounts"]["basically"] == 2
    assert payload["score"]["overall"] == 6.5
    assert payload["improvedAnswer"].startswith("I believe")
    assert payload["starBullets"]["result"] == "Delivered a day early"
    assert len(payload["tips"]) == 2
    assert payload["debug"]["convertedToWav"] is False
    assert payload["debug"]["transcribedContentType"] == "audio/wav"
    assert payload["debug"]["coachingAttempts"] == 1

    # WAV uploads are forwarded untouched
    assert transcriber.calls == [(_wav_bytes(), "audio/wav")]


def test_stored_result_can_be_fetched(client):
    created = _post(client, data={"durationSec": "10"}).json()

    response = client.get(f"/api/results/{created['resultId']}")

    assert response.status_code == 200
    assert response.json() == created


def test_unknown_result_is_404(client):
    response = client.get("/api/results/does-not-exist")

    assert response.status_code == 404
    assert response.json()["ok"] is False


def test_webm_upload_is_converted_before_transcription(client, transcriber):
    files = {"audio": ("answer.webm", b"\x1aE\xdf\xa3fake-webm", "audio/webm;codecs=opus")}

    response = _post(client, files=files, data={"durationSec": "10"})

    assert response.status_code == 200
    debug = response.json()["debug"]
    assert debug["receivedFileType"] == "audio/webm"
    assert debug["convertedToWav"] is True
    assert debug["transcribedContentType"] == "audio/wav"

    audio_bytes, content_type = transcriber.calls[0]
    assert content_type == "audio/wav"
    assert audio_bytes[:4] == b"RIFF"
    assert len(audio_bytes) == 44 + 4 * 2


def test_failed_conversion_forwards_original_recording(client, transcriber, decoder):
    decoder.error = AudioDecodeError("ffmpeg exploded")
    original = b"\x1aE\xdf\xa3fake-webm"

    response = _post(client, files={"audio": ("answer.webm", original, "audio/webm")})

    assert response.status_code == 200
    assert response.json()["debug"]["convertedToWav"] is False
    assert transcriber.calls == [(original, "audio/webm")]


def test_silent_decoded_recording_is_422(client, decoder):
    decoder.decode = lambda audio_bytes: AudioSampleBuffer.from_channels([[]], 16000)

    response = _post(client, files={"audio": ("answer.ogg", b"OggS....", "audio/ogg")})

    assert response.status_code == 422


def test_generic_content_type_is_guessed_from_filename(client):
    files = {"audio": ("answer.wav", _wav_bytes(), "application/octet-stream")}

    response = _post(client, files=files)

    assert response.status_code == 200
    assert response.json()["debug"]["receivedFileType"] in {"audio/wav", "audio/x-wav"}


def test_missing_audio_is_400(client, transcriber):
    response = client.post("/api/analyze", data={"prompt": "Why us?"})

    assert response.status_code == 400
    assert response.json() == {
        "ok": False,
        "detail": "Missing audio file. Send multipart/form-data with field name 'audio'.",
    }
    assert transcriber.calls == []


def test_empty_audio_is_400(client):
    response = _post(client, files={"audio": ("answer.wav", b"", "audio/wav")})

    assert response.status_code == 400


def test_unsupported_type_is_415(client):
    response = _post(client, files={"audio": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 415
    assert response.json()["ok"] is False


def test_oversized_upload_is_413(client, monkeypatch, transcriber):
    monkeypatch.setattr(settings.audio, "max_upload_bytes", 16)

    response = _post(client)

    assert response.status_code == 413
    assert transcriber.calls == []


def test_empty_transcript_is_422(client, transcriber, llm):
    transcriber.transcript = "   "

    response = _post(client)

    assert response.status_code == 422
    assert llm.prompts == []


def test_transcription_failure_is_502(client, transcriber):
    transcriber.error = TranscriptionError("stream closed")

    response = _post(client)

    assert response.status_code == 502
    assert response.json()["detail"] == "stream closed"


def test_llm_failure_is_502(client, llm):
    llm.error = LlmInvocationError("throttled")

    response = _post(client)

    assert response.status_code == 502
    assert response.json()["ok"] is False


def test_invalid_json_twice_is_502(client, llm):
    llm.responses = ["I think you did great!", "```json\n{broken\n```"]

    response = _post(client)

    assert response.status_code == 502
    assert len(llm.prompts) == 2


def test_invalid_json_then_valid_json_succeeds(client, llm):
    llm.responses = ["not json", COACHING_JSON]

    response = _post(client)

    assert response.status_code == 200
    assert response.json()["debug"]["coachingAttempts"] == 2


@pytest.mark.parametrize(
    ("raw_duration", "expected"),
    [(None, 60), ("0", 1), ("-3", 1), ("abc", 60), ("45.9", 45)],
)
def test_duration_is_normalised(client, raw_duration, expected):
    data = {} if raw_duration is None else {"durationSec": raw_duration}

    response = _post(client, data=data)

    assert response.status_code == 200
    assert response.json()["stats"]["durationSec"] == expected


def test_prompt_includes_stats_and_question(client, llm):
    _post(client, data={"prompt": "Describe a conflict.", "durationSec": "10"})

    user_prompt = llm.prompts[0]
    assert "Describe a conflict." in user_prompt
    assert TRANSCRIPT in user_prompt


def test_usage_lists_pipeline_stages(client):
    response = client.get("/api/analyze")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert len(payload["stages"]) == 7
    assert payload["stages"][0].startswith("1. ")


def test_prompts_are_listed(client):
    response = client.get("/api/prompts")

    assert response.status_code == 200
    assert len(response.json()["prompts"]) >= 1


def test_health_and_metrics(client):
    assert client.get("/health").json()["status"] == "healthy"

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "coach_analyses_total" in metrics.text
