"""AI service layer.

Holds the per-endpoint task definitions (prompt, persona, temperature, error
wording) and the request flow shared by suggestion and formatting:
client acquisition, input validation, provider call, empty-answer check.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable

from core.config import Settings
from core.exceptions import ErrorCategory, UpstreamRequestError, ValidationError
from llm.llm_client import LLMClientManager, generate_response
from llm.prompts import format_prompt, suggestion_prompt, system_instruction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextTask:
    name: str
    persona: str
    temperature: float
    build_prompt: Callable[[str], str]
    missing_message: str
    empty_message: str
    fallback_message: str


SUGGEST_TASK = TextTask(
    name="suggest",
    persona="assistant",
    temperature=0.7,
    build_prompt=suggestion_prompt,
    missing_message="Please provide text to get suggestions",
    empty_message="No suggestion generated",
    fallback_message="Failed to generate suggestion",
)

FORMAT_TASK = TextTask(
    name="format",
    persona="formatter",
    temperature=0.5,
    build_prompt=format_prompt,
    missing_message="Please provide text to format",
    empty_message="No formatted text generated",
    fallback_message="Failed to format text",
)


def text_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browsers measure strings in."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def validate_text(text: Any, task: TextTask, max_length: int) -> str:
    if not text:
        raise ValidationError("Missing text", task.missing_message)
    if not isinstance(text, str):
        raise ValidationError("Invalid request", "The 'text' field must be a string")
    if text_length(text) > max_length:
        raise ValidationError("Text too long", "The provided text exceeds the maximum length limit")
    return text


async def run_text_task(manager: LLMClientManager, task: TextTask, text: Any, settings: Settings) -> str:
    """Run one suggestion or formatting request end to end."""
    client = (await manager.acquire_client()).unwrap()
    text = validate_text(text, task, settings.max_text_length)

    logger.info("Running %s request (%d chars)", task.name, len(text))
    try:
        result = await generate_response(
            client,
            task.build_prompt(text),
            system_instruction(task.persona),
            task.temperature,
            task.fallback_message,
            settings=settings,
        )
        if not result:
            raise UpstreamRequestError(task.empty_message, ErrorCategory.EMPTY_RESPONSE)
    except UpstreamRequestError as exc:
        logger.error("Error running %s request: %s (category=%s)", task.name, exc.message, exc.category.value)
        raise
    return result
