"""Pydantic models for the AI proxy endpoints."""
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict


class TextRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Type checked in services.ai.validate_text, after the AI client is acquired.
    text: Any = None


class SuggestionResponse(BaseModel):
    suggestion: str


class FormatResponse(BaseModel):
    formattedText: str


class ErrorResponse(BaseModel):
    error: str
    message: str


class AIErrorResponse(ErrorResponse):
    retryable: bool


class HealthResponse(BaseModel):
    server: Literal["healthy"] = "healthy"
    aiService: Literal["available", "unavailable"]
    aiError: Optional[str] = None
    timestamp: str
