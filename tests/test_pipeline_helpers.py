"""Tests for pipeline log helpers and the recording analysis script."""

from __future__ import annotations

import argparse
import asyncio
import importlib.util
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from speaking_coach.pipelines.coaching.logs import truncate  # noqa: E402
from speaking_coach.services.pcm_container import AudioSampleBuffer, encode_to_pcm_container  # noqa: E402


def _load_script():
    spec = importlib.util.spec_from_file_location(
        "analyze_recording", ROOT / "scripts" / "analyze_recording.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_truncate_keeps_short_values():
    assert truncate("hello", 10) == "hello"


def test_truncate_marks_the_cut():
    value = truncate("x" * 600)

    assert len(value) == 500
    assert value.endswith("...")


@pytest.mark.parametrize("content_type", ["audio/wav", "audio/x-wav", "audio/wave", "audio/vnd.wave"])
def test_script_does_not_decode_wav_variants(tmp_path, monkeypatch, capsys, content_type):
    script = _load_script()
    recording = tmp_path / "answer.wav"
    recording.write_bytes(encode_to_pcm_container(AudioSampleBuffer.from_channels([[0.0, 0.5]], 16000)))

    def fail_decoder():
        raise AssertionError("WAV input must not be decoded")

    monkeypatch.setattr(script, "get_audio_decoder", fail_decoder)
    monkeypatch.setattr(script.mimetypes, "guess_type", lambda path: (content_type, None))

    args = argparse.Namespace(path=str(recording), duration=10, transcript="um I did well", wav_out=None)

    assert asyncio.run(script.main(args)) == 0
    assert "wpm=24" in capsys.readouterr().out
