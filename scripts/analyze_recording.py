import argparse
import asyncio
import mimetypes
import os
import sys

# Add project root to path so we can import speaking_coach
sys.path.append(os.getcwd())

from speaking_coach.services.audio_decoder import AudioDecodeError, get_audio_decoder
from speaking_coach.services.pcm_container import encode_to_pcm_container
from speaking_coach.services.speech_stats import compute_speech_stats
from speaking_coach.services.transcribe import WAV_CONTENT_TYPES, TranscriptionError, get_transcribe_service


async def main(args: argparse.Namespace) -> int:
    if not os.path.exists(args.path):
        print(f"File '{args.path}' not found.")
        print("Usage: python scripts/analyze_recording.py path/to/recording.webm [--duration 45]")
        return 1

    with open(args.path, "rb") as f:
        audio_bytes = f.read()

    content_type = mimetypes.guess_type(args.path)[0] or "application/octet-stream"
    if content_type not in WAV_CONTENT_TYPES:
        print(f"Decoding {len(audio_bytes)} bytes of {content_type} with ffmpeg...")
        try:
            buffer = get_audio_decoder().decode(audio_bytes)
        except AudioDecodeError as e:
            print(f"\nDecode Error: {e}")
            return 1
        audio_bytes = encode_to_pcm_container(buffer)
        content_type = "audio/wav"
        print(f"Encoded {buffer.duration_seconds:.2f}s of audio into {len(audio_bytes)} WAV bytes.")
        if args.wav_out:
            with open(args.wav_out, "wb") as out:
                out.write(audio_bytes)
            print(f"Wrote {args.wav_out}")

    if args.transcript:
        transcript = args.transcript
    else:
        print("Transcribing with Amazon Transcribe Streaming...")
        try:
            result = await get_transcribe_service().transcribe(audio_bytes, content_type)
        except TranscriptionError as e:
            print(f"\nTranscription Error: {e}")
            return 1
        transcript = result.transcript

    stats = compute_speech_stats(transcript, args.duration)

    print("\n--- Transcript ---")
    print(transcript)
    print("--- Stats ---")
    print(f"words={stats.word_count} duration={stats.duration_sec}s wpm={stats.wpm}")
    for key, count in stats.filler_counts.items():
        print(f"  {key!r}: {count}")
    print(f"repeated phrases: {list(stats.repeated_phrases) or '-'}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Convert, transcribe and measure one recording.")
    parser.add_argument("path")
    parser.add_argument("--duration", type=int, default=60, help="Recorded seconds")
    parser.add_argument("--transcript", help="Skip Transcribe and analyse this text instead")
    parser.add_argument("--wav-out", help="Also save the converted WAV here")
    sys.exit(asyncio.run(main(parser.parse_args())))
