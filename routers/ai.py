from typing import Optional

from fastapi import APIRouter, Depends

from core.config import Settings
from core.deps import get_app_settings, get_llm_manager
from llm.llm_client import LLMClientManager
from schemas.ai import AIErrorResponse, ErrorResponse, FormatResponse, SuggestionResponse, TextRequest
from services.ai import FORMAT_TASK, SUGGEST_TASK, run_text_task

router = APIRouter(tags=["AI"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": AIErrorResponse},
    503: {"model": AIErrorResponse},
}


@router.post("/suggest", response_model=SuggestionResponse, responses=ERROR_RESPONSES)
async def suggest_endpoint(
    payload: Optional[TextRequest] = None,
    manager: LLMClientManager = Depends(get_llm_manager),
    settings: Settings = Depends(get_app_settings),
) -> SuggestionResponse:
    """Suggest an improved version of the given document text."""
    text = payload.text if payload else None
    suggestion = await run_text_task(manager, SUGGEST_TASK, text, settings)
    return SuggestionResponse(suggestion=suggestion)


@router.post("/format", response_model=FormatResponse, responses=ERROR_RESPONSES)
async def format_endpoint(
    payload: Optional[TextRequest] = None,
    manager: LLMClientManager = Depends(get_llm_manager),
    settings: Settings = Depends(get_app_settings),
) -> FormatResponse:
    """Restructure the given document text with headings, paragraphs and lists."""
    text = payload.text if payload else None
    formatted = await run_text_task(manager, FORMAT_TASK, text, settings)
    return FormatResponse(formattedText=formatted)
