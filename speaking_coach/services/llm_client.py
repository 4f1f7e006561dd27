"""Thin Bedrock client wrapper for the coaching model."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Protocol

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from speaking_coach.config.settings import settings
from speaking_coach.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


class CoachingLlm(Protocol):
    """Anything that turns a system/user prompt pair into raw text."""

    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str | None:
        ...


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(self, model_id: str | None = None) -> None:
        self._model_id = model_id or settings.bedrock.model_id

        try:
            self._client = create_boto3_client(
                "bedrock-runtime",
                region_name=settings.bedrock.region,
            )
        except (BotoCoreError, ValueError) as exc:  # pragma: no cover - configuration issue
            logger.warning("Could not initialise Bedrock client: %s", exc)
            self._client = None

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        if not self._client or not self._model_id:
            raise LlmInvocationError("Bedrock client is not configured.")

        inference_cfg = {
            "maxTokens": max_tokens or settings.bedrock.max_tokens,
            "temperature": (
                temperature
                if temperature is not None
                else settings.bedrock.temperature
            ),
            "topP": top_p if top_p is not None else settings.bedrock.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except (BotoCoreError, ClientError) as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc)) from exc

        return result or None


@lru_cache()
def get_llm_client() -> CoachingLlm:
    """Return the process-wide Bedrock client, created on first use."""

    return BedrockLlmClient()


__all__ = ["BedrockLlmClient", "CoachingLlm", "LlmInvocationError", "get_llm_client"]
