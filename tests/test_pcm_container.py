"""Tests for the canonical 16-bit PCM WAV writer."""

from __future__ import annotations

import io
import struct
import sys
import wave
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from speaking_coach.services.pcm_container import (  # noqa: E402
    HEADER_SIZE,
    AudioSampleBuffer,
    encode_to_pcm_container,
)


def _pcm_values(container: bytes) -> list[int]:
    payload = container[HEADER_SIZE:]
    return list(struct.unpack(f"<{len(payload) // 2}h", payload))


def test_header_layout_for_stereo_buffer():
    buffer = AudioSampleBuffer.from_channels([[0.0, 0.25, 0.5], [0.0, -0.25, -0.5]], 44100)

    container = encode_to_pcm_container(buffer)

    (
        riff,
        riff_size,
        wave_id,
        fmt_id,
        fmt_size,
        format_tag,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bit_depth,
        data_id,
        data_size,
    ) = struct.unpack("<4sI4s4sIHHIIHH4sI", container[:HEADER_SIZE])
    assert (riff, wave_id, fmt_id, data_id) == (b"RIFF", b"WAVE", b"fmt ", b"data")
    assert fmt_size == 16
    assert format_tag == 1
    assert channels == 2
    assert sample_rate == 44100
    assert byte_rate == 44100 * 2 * 2
    assert block_align == 4
    assert bit_depth == 16
    assert data_size == 3 * 2 * 2
    assert riff_size == 36 + data_size
    assert len(container) == HEADER_SIZE + data_size


def test_asymmetric_scaling_of_full_scale_samples():
    buffer = AudioSampleBuffer.from_channels([[1.0, -1.0, 0.0]], 16000)

    assert _pcm_values(encode_to_pcm_container(buffer)) == [32767, -32768, 0]


def test_out_of_range_samples_are_clamped_and_truncated():
    buffer = AudioSampleBuffer.from_channels([[2.5, -3.0, 0.5, -0.5, 0.00001]], 8000)

    # 0.5 * 32767 = 16383.5 and -0.5 * 32768 = -16384, truncated toward zero
    assert _pcm_values(encode_to_pcm_container(buffer)) == [32767, -32768, 16383, -16384, 0]


def test_non_finite_samples_do_not_break_encoding():
    buffer = AudioSampleBuffer.from_channels([[float("nan"), float("inf"), float("-inf")]], 8000)

    assert _pcm_values(encode_to_pcm_container(buffer)) == [0, 32767, -32768]


def test_samples_are_interleaved_channel_minor():
    left = [1.0, 0.0]
    right = [-1.0, 0.5]
    buffer = AudioSampleBuffer.from_channels([left, right], 16000)

    assert _pcm_values(encode_to_pcm_container(buffer)) == [32767, -32768, 0, 16383]


@pytest.mark.parametrize(
    ("channels", "samples"),
    [(1, 0), (1, 1), (1, 480), (2, 160), (3, 7)],
)
def test_container_length_matches_header_arithmetic(channels, samples):
    rng = np.random.default_rng(seed=samples + channels)
    data = rng.uniform(-1.2, 1.2, size=(channels, samples))
    buffer = AudioSampleBuffer.from_channels(list(data), 22050)

    assert len(encode_to_pcm_container(buffer)) == HEADER_SIZE + samples * channels * 2


def test_zero_channel_buffer_yields_header_only_container():
    buffer = AudioSampleBuffer(sample_rate=16000, channels=())

    container = encode_to_pcm_container(buffer)

    assert len(container) == HEADER_SIZE
    assert container[:4] == b"RIFF"
    assert struct.unpack("<I", container[40:44])[0] == 0


def test_encoding_is_deterministic():
    samples = [0.1 * i for i in range(-10, 11)]
    first = encode_to_pcm_container(AudioSampleBuffer.from_channels([samples], 16000))
    second = encode_to_pcm_container(AudioSampleBuffer.from_channels([list(samples)], 16000))

    assert first == second


def test_output_is_readable_by_the_wave_module():
    buffer = AudioSampleBuffer.from_channels([np.linspace(-1.0, 1.0, 100)], 16000)

    with wave.open(io.BytesIO(encode_to_pcm_container(buffer)), "rb") as handle:
        assert handle.getnchannels() == 1
        assert handle.getsampwidth() == 2
        assert handle.getframerate() == 16000
        assert handle.getnframes() == 100


def test_from_interleaved_splits_frames_and_drops_partial_tail():
    buffer = AudioSampleBuffer.from_interleaved([0.1, -0.1, 0.2, -0.2, 0.3], 2, 48000)

    assert buffer.channel_count == 2
    assert buffer.sample_count == 2
    assert list(buffer.channels[0]) == pytest.approx([0.1, 0.2])
    assert list(buffer.channels[1]) == pytest.approx([-0.1, -0.2])
    assert buffer.duration_seconds == pytest.approx(2 / 48000)


def test_ragged_channels_are_rejected():
    with pytest.raises(ValueError):
        AudioSampleBuffer.from_channels([[0.0, 0.1], [0.0]], 16000)
