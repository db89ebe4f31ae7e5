"""Main FastAPI application entry point."""

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
from climabot.config import Settings, get_settings
from climabot.core.llm_client import GeminiClient
from climabot.middleware.cors import CorsHeadersMiddleware
import logging

from climabot.api.chat import (
    ChatHandler,
    method_not_allowed_handler,
    router as chat_router,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, llm_client: Optional[GeminiClient] = None
) -> FastAPI:
    """Builds the application around the given settings and Gemini client."""
    settings = settings or get_settings()
    llm_client = llm_client or GeminiClient(settings)

    logging.basicConfig(level=settings.log_level.upper())
    # httpx logs full request URLs, which carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not found in settings. Chat requests will fail.")

    app = FastAPI(
        title="Climabot API",
        description="Weather assistant chat backed by Google Gemini",
        version="1.0.0",
        debug=settings.is_development,
    )
    app.state.settings = settings
    app.state.chat_handler = ChatHandler(settings, llm_client)

    app.add_middleware(CorsHeadersMiddleware)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    app.include_router(chat_router)

    @app.get("/")
    async def root():
        """Provides basic information about the running API."""
        return {
            "message": "Climabot API",
            "status": "running",
            "model": settings.gemini_model,
        }

    @app.get("/health")
    async def health_check():
        """Performs a health check of the API configuration."""
        return {
            "status": "healthy",
            "api_key_configured": bool(settings.gemini_api_key),
        }

    return app


app = create_app()
