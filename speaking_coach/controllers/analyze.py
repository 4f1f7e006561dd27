"""Recording analysis endpoints.

For a stage-by-stage map see
`speaking_coach.pipelines.coaching.flow.CoachingPipeline`. The POST
`/api/analyze` pipeline performs:

1. Validation of the upload and normalisation of the recorded duration.
2. Conversion of browser containers into 16-bit PCM WAV.
3. Transcription, then deterministic transcript statistics.
4. Prompt assembly and the coaching LLM call with contract validation.
5. Storage of the combined result for the results page.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from speaking_coach.controllers.dependencies import (
    AudioDecoderDep,
    CoachingLlmDep,
    TranscriberDep,
)
from speaking_coach.pipelines.coaching import (
    CoachingPipeline,
    analyze_transcript,
    build_coaching_request,
    call_coaching_llm,
    parse_duration,
    prepare_audio,
    read_audio_bytes,
    require_upload,
    resolve_content_type,
    transcribe_audio,
)
from speaking_coach.services.llm_client import LlmInvocationError
from speaking_coach.services.response_contract import ResponseContractError
from speaking_coach.services.result_store import get_result, new_result_id, save_result
from speaking_coach.telemetry import record_analysis
from speaking_coach.views import (
    AnalysisDebug,
    AnalysisResult,
    AnalyzeUsage,
    ErrorResponse,
    SpeechStatsView,
)

router = APIRouter(prefix="/api", tags=["analyze"])

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(CoachingPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

_AUDIO_FILE_UPLOAD = File(None)
_PROMPT_FORM = Form(None)
_DURATION_FORM = Form(None, alias="durationSec")

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    415: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.get("/analyze", response_model=AnalyzeUsage)
async def analyze_usage() -> AnalyzeUsage:
    """Explain how to call the analyze endpoint."""

    return AnalyzeUsage(
        message="Use POST with multipart/form-data to analyze audio.",
        stages=[f"{stage.order}. {stage.name}" for stage in PIPELINE_STAGES],
    )


@router.post("/analyze", response_model=AnalysisResult, responses=_ERROR_RESPONSES)
async def analyze_recording(
    transcriber: TranscriberDep,
    llm: CoachingLlmDep,
    decoder: AudioDecoderDep,
    audio: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
    prompt: Optional[str] = _PROMPT_FORM,
    duration_sec: Optional[str] = _DURATION_FORM,
) -> AnalysisResult:
    """Transcribe, measure and coach one recorded answer."""

    try:
        upload = require_upload(audio)
        content_type = resolve_content_type(upload)
        audio_bytes = await read_audio_bytes(upload)
        duration = parse_duration(duration_sec)
        logger.info(
            "Recording received name=%s type=%s bytes=%s duration=%ss",
            upload.filename,
            content_type,
            len(audio_bytes),
            duration,
        )

        prepared = await prepare_audio(audio_bytes, content_type, decoder)
        transcript = await transcribe_audio(prepared, transcriber)
        stats = analyze_transcript(transcript, duration)

        request = build_coaching_request(transcript, stats, interview_prompt=prompt)
        try:
            outcome = await call_coaching_llm(request, llm)
        except (LlmInvocationError, ResponseContractError) as exc:
            logger.exception("Coaching pipeline failed", exc_info=exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not generate coaching feedback for this recording.",
            ) from exc
    except HTTPException as exc:
        record_analysis(f"http_{exc.status_code}")
        raise

    coaching = outcome.response
    result_id = new_result_id()
    result = AnalysisResult(
        result_id=result_id,
        prompt=prompt,
        transcript=transcript,
        stats=SpeechStatsView.from_stats(stats),
        score=coaching.score,
        improved_answer=coaching.improved_answer,
        star_bullets=coaching.star_bullets,
        tips=list(coaching.tips),
        debug=AnalysisDebug(
            received_file_name=upload.filename,
            received_file_type=content_type,
            received_file_size_bytes=len(audio_bytes),
            transcribed_content_type=prepared.content_type,
            converted_to_wav=prepared.converted,
            coaching_attempts=outcome.attempts,
        ),
    )
    save_result(result_id, result.model_dump(by_alias=True))
    record_analysis("success")
    logger.info("Analysis stored result_id=%s overall=%.1f", result_id, coaching.score.overall)
    return result


@router.get(
    "/results/{result_id}",
    response_model=AnalysisResult,
    responses={404: {"model": ErrorResponse}},
)
async def read_result(result_id: str) -> AnalysisResult:
    """Return a recent analysis; results are kept in memory only."""

    stored = get_result(result_id)
    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Result not found or expired.",
        )
    return AnalysisResult.model_validate(stored)
