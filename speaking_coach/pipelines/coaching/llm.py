"""Coaching LLM stage of the pipeline (Stage 06)."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from speaking_coach.config.settings import settings
from speaking_coach.services.llm_client import CoachingLlm
from speaking_coach.services.response_contract import CoachingResponse, ResponseContractError

from .logs import truncate
from .types import CoachingOutcome, CoachingRequest

logger = logging.getLogger("speaking_coach.pipeline")


async def call_coaching_llm(
    request: CoachingRequest,
    llm: CoachingLlm,
    *,
    json_retries: int | None = None,
) -> CoachingOutcome:
    """Invoke the LLM and validate the coaching contract, re-asking on invalid JSON."""

    retries = settings.bedrock.json_retries if json_retries is None else json_retries
    for attempt in range(retries + 1):
        raw_response = await llm.invoke(
            system_prompt=request.system_prompt,
            user_prompt=request.user_prompt,
        )
        if not raw_response:
            raise ResponseContractError("The coaching model returned an empty response.")

        logger.info("Raw LLM response attempt=%s: %s", attempt + 1, truncate(raw_response))

        try:
            structured = CoachingResponse.from_json(raw_response)
        except ValidationError as exc:
            logger.warning("LLM produced invalid JSON attempt=%s: %s", attempt + 1, exc)
            if attempt < retries:
                continue
            raise ResponseContractError(
                "The coaching model returned invalid JSON even after retrying."
            ) from exc

        return CoachingOutcome(
            response=structured,
            raw_response=raw_response,
            attempts=attempt + 1,
        )

    # Unreachable: the loop either returns or raises.
    raise ResponseContractError("Could not obtain a valid coaching response.")


__all__ = ["call_coaching_llm"]
