import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from core.config import Settings, get_settings
from core.handlers import register_exception_handlers
from core.middleware import setup_middleware
from llm.llm_client import LLMClientManager
from schemas.ai import HealthResponse
from utils.logging import configure_logging

# Routers
from routers.ai import router as ai_router
from routers.client import router as client_router

logger = logging.getLogger("dochelper")


def _report_ai_status(task: "asyncio.Task[None]", manager: LLMClientManager) -> None:
    if task.cancelled():
        return
    if manager.is_available:
        logger.info("AI Service: Available")
    else:
        logger.warning("AI Service: Unavailable. Check your GEMINI_API_KEY.")


# Lifespan Events (Startup/Shutdown)
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    manager: LLMClientManager = app.state.llm_manager
    logger.info("Starting up %s on port %d (%s)...", settings.app_name, settings.port, settings.environment)

    # Fire-and-forget: requests that arrive first run their own pass.
    init_task = asyncio.create_task(manager.initialize_with_retry())
    init_task.add_done_callback(lambda task: _report_ai_status(task, manager))
    app.state.init_task = init_task
    yield
    if not init_task.done():
        init_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await init_task
    logger.info("Shutting down %s...", settings.app_name)


def create_app(settings: Optional[Settings] = None, manager: Optional[LLMClientManager] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="AI proxy for DocHelper text suggestions and formatting.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
    )
    app.state.settings = settings
    app.state.llm_manager = manager or LLMClientManager(settings)

    # Middleware
    setup_middleware(app, settings)
    register_exception_handlers(app)

    # Health & API Endpoints
    @app.get("/health", tags=["System"], summary="Health Check", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Report server and AI client status. Always 200."""
        llm_manager: LLMClientManager = request.app.state.llm_manager
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return HealthResponse(
            aiService="available" if llm_manager.is_available else "unavailable",
            aiError=llm_manager.status_error(),
            timestamp=timestamp,
        )

    app.include_router(ai_router, prefix=settings.api_prefix)

    # Must stay last: matches every GET path.
    app.include_router(client_router)

    return app


app = create_app()


def run() -> None:
    """Serve the app; uvicorn handles SIGTERM and exits 1 if the port is taken."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
