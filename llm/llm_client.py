"""Gemini client lifecycle and request helpers.

A single ``genai.Client`` is shared by the whole process. ``LLMClientManager``
owns it: creation at startup, lazy re-creation when a request finds it
missing, and the attempt counter reported by ``/health``.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, wait_incrementing

from core.config import Settings, get_settings
from core.exceptions import (
    ConfigurationError,
    ErrorCategory,
    UpstreamRequestError,
    UpstreamUnavailable,
    categorize_message,
)

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ClientResult:
    """Outcome of ``LLMClientManager.acquire_client``."""

    state: ClientState
    attempts: int
    client: Optional[genai.Client] = None

    @property
    def ok(self) -> bool:
        return self.client is not None

    def unwrap(self) -> genai.Client:
        if not self.ok:
            raise UpstreamUnavailable()
        return self.client


class LLMClientManager:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_settings()
        self._sleep = sleep
        self._client: Optional[genai.Client] = None
        self._state = ClientState.UNINITIALIZED
        self._attempts = 0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def status_error(self) -> Optional[str]:
        """Message shown by the health check while no client exists."""
        if self._client is not None:
            return None
        return f"AI service not initialized after {self._attempts} attempts"

    def _create_client(self) -> genai.Client:
        api_key = self.settings.gemini_api_key
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set in environment variables")
        return genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=self.settings.ai_request_timeout_ms),
        )

    def initialize(self) -> bool:
        """Try once to build the client. Never raises."""
        try:
            self._client = self._create_client()
        except Exception as exc:
            logger.error("Failed to initialize Gemini client: %s", exc)
            self._state = ClientState.FAILED
            return False
        self._state = ClientState.READY
        logger.info("Gemini AI service initialized successfully")
        return True

    async def _initialize_once(self) -> bool:
        """One retry attempt. ``True`` ends the pass."""
        if self._client is not None or self._attempts >= self.settings.ai_max_init_attempts:
            return True
        self._state = ClientState.INITIALIZING
        if self.initialize():
            return True
        self._attempts += 1
        return False

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.warning(
            "Gemini client initialization attempt %d/%d failed, waiting %.1fs",
            self._attempts,
            self.settings.ai_max_init_attempts,
            retry_state.next_action.sleep if retry_state.next_action else 0.0,
        )

    async def initialize_with_retry(self) -> None:
        """Build the client, backing off linearly after each failed attempt.

        Gives up quietly once ``ai_max_init_attempts`` failures have been
        counted; the counter is shared by every pass for the process lifetime,
        so the pass ends inside ``_initialize_once`` rather than on a stop rule.
        """
        backoff = self.settings.ai_init_backoff_seconds
        retrying = AsyncRetrying(
            retry=retry_if_result(lambda done: not done),
            wait=wait_incrementing(start=backoff, increment=backoff),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        async with self._lock:
            await retrying(self._initialize_once)
            if self._client is None:
                self._state = ClientState.FAILED

    async def acquire_client(self) -> ClientResult:
        """Return the shared client, running an initialization pass if it is missing."""
        if self._client is None:
            if self.settings.ai_init_reset_on_request and self._attempts >= self.settings.ai_max_init_attempts:
                logger.info("Resetting Gemini initialization attempts for a request-triggered retry")
                self._attempts = 0
            await self.initialize_with_retry()
        return ClientResult(state=self._state, attempts=self._attempts, client=self._client)


def classify_provider_error(exc: BaseException) -> ErrorCategory:
    """Map a provider-side exception onto an ``ErrorCategory``."""
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCategory.CONNECTION
    if isinstance(exc, genai_errors.APIError):
        if exc.code == 429:
            return ErrorCategory.RATE_LIMIT
        if exc.code in (408, 504):
            return ErrorCategory.TIMEOUT
    return categorize_message(str(exc))


async def generate_response(
    client: genai.Client,
    prompt: str,
    persona: str,
    temperature: float,
    fallback_message: str,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """Send a single non-streaming completion request and return its text.

    Provider failures are raised as ``UpstreamRequestError``. An empty answer
    is returned as ``None`` for the caller to report.
    """
    settings = settings or get_settings()
    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=[
                types.Content(
                    role="user",
                    parts=[types.Part.from_text(text=prompt)],
                ),
            ],
            config=types.GenerateContentConfig(
                system_instruction=persona,
                temperature=temperature,
                top_p=1,
                max_output_tokens=settings.ai_max_output_tokens,
                thinking_config=types.ThinkingConfig(thinking_budget=0),
            ),
        )
    except Exception as exc:
        message = str(exc) or fallback_message
        raise UpstreamRequestError(message, classify_provider_error(exc)) from exc

    return response.text or None
