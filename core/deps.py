"""Reusable FastAPI dependency functions."""
from fastapi import Request

from core.config import Settings
from llm.llm_client import LLMClientManager


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""

    return request.app.state.settings


def get_llm_manager(request: Request) -> LLMClientManager:
    return request.app.state.llm_manager
