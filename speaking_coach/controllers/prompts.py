"""Interview prompt catalogue."""

from fastapi import APIRouter

from speaking_coach.services.prompt_builder import DEFAULT_PROMPTS
from speaking_coach.views import PromptList

router = APIRouter(prefix="/api", tags=["prompts"])


@router.get("/prompts", response_model=PromptList)
async def list_prompts() -> PromptList:
    return PromptList(prompts=list(DEFAULT_PROMPTS))
