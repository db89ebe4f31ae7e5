"""Main conversational chat endpoint for the weather assistant."""

import json
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from climabot.config import Settings
from climabot.core.errors import (
    ConnectionFailed,
    DecodeFailure,
    DnsFailure,
    UpstreamError,
    UpstreamStatus,
    UpstreamTimeout,
)
from climabot.core.llm_client import GeminiClient
from climabot.core.prompt import build_prompt
from climabot.models.chat import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryEntry,
    WeatherContext,
)
from climabot.models.gemini import GenerateContentResponse

# --- Setup ---
router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

DEFAULT_REPLY = (
    "I apologize, but I couldn't generate a response right now. Please try again."
)
SAFETY_REPLY = (
    "I apologize, but I cannot provide a response to that query due to safety "
    "guidelines. Please try rephrasing your question."
)

UPSTREAM_STATUS_MESSAGES = {
    400: "Invalid request to AI service - check your API key format",
    401: "Invalid API key - please check your GEMINI_API_KEY",
    403: "API access forbidden - check your API key permissions and billing",
    429: "Too many requests - please try again later",
}
UPSTREAM_UNAVAILABLE_MESSAGE = "AI service temporarily unavailable"
UPSTREAM_FALLBACK_MESSAGE = "Failed to get response from AI service"

FAILURE_RESPONSES = {
    ConnectionFailed: (
        503,
        "Failed to connect to AI service - check internet connection",
    ),
    DnsFailure: (503, "DNS resolution failed - check internet connection"),
    DecodeFailure: (502, "Invalid response from AI service"),
    UpstreamTimeout: (504, "AI service timed out - please try again later"),
}


def upstream_status_message(status_code: int) -> str:
    """Translates an AI service HTTP status into a user-facing message."""
    if status_code in UPSTREAM_STATUS_MESSAGES:
        return UPSTREAM_STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return UPSTREAM_UNAVAILABLE_MESSAGE
    return UPSTREAM_FALLBACK_MESSAGE


def extract_reply(result: GenerateContentResponse) -> str:
    """Picks the reply text out of the first candidate."""
    reply = DEFAULT_REPLY
    if result.candidates:
        candidate = result.candidates[0]
        if candidate.finish_reason == "SAFETY":
            reply = SAFETY_REPLY
        elif candidate.text and candidate.text.strip():
            reply = candidate.text.strip()
    return reply


class InvalidChatRequest(Exception):
    """The inbound request failed validation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def parse_chat_request(raw_body: bytes) -> ChatRequest:
    """
    Validates the raw request body into a ChatRequest.

    Only the message is mandatory. A malformed weather context is dropped and
    malformed history entries are skipped, so they never reach the prompt.
    """
    try:
        body = json.loads(raw_body) if raw_body.strip() else None
    except (ValueError, RecursionError):
        body = None
    if not body and not isinstance(body, (dict, list)):
        raise InvalidChatRequest("Request body is required")

    message = body.get("message") if isinstance(body, dict) else None
    if not message or not isinstance(message, str):
        raise InvalidChatRequest("Message is required and must be a string")

    weather_context: Optional[WeatherContext] = None
    try:
        if body.get("weatherContext") is not None:
            weather_context = WeatherContext.model_validate(body["weatherContext"])
    except ValidationError:
        logger.warning("Ignoring malformed weatherContext")

    history: List[HistoryEntry] = []
    raw_history = body.get("conversationHistory")
    if isinstance(raw_history, list):
        for entry in raw_history:
            try:
                history.append(HistoryEntry.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed conversationHistory entry")

    return ChatRequest(
        message=message,
        weatherContext=weather_context,
        conversationHistory=history,
    )


class ChatHandler:
    """Turns one inbound chat request into exactly one JSON response."""

    def __init__(self, settings: Settings, llm_client: GeminiClient):
        self.settings = settings
        self.llm_client = llm_client

    def _error(
        self, status_code: int, message: str, details: Optional[Any] = None
    ) -> JSONResponse:
        payload = ErrorResponse(
            error=message,
            details=str(details) if self.settings.is_development and details else None,
        )
        return JSONResponse(
            status_code=status_code, content=payload.model_dump(exclude_none=True)
        )

    async def handle(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)

        if request.method != "POST":
            return self._error(405, "Only POST requests allowed")

        try:
            chat_request = parse_chat_request(await request.body())
        except InvalidChatRequest as e:
            return self._error(400, e.message)

        if not self.settings.gemini_api_key:
            logger.error("GEMINI_API_KEY is not set")
            return self._error(500, "API key not configured")

        try:
            prompt = build_prompt(chat_request)
            result = await self.llm_client.generate(prompt)
            reply = extract_reply(result)
        except UpstreamStatus as e:
            logger.error(f"AI service returned HTTP {e.status_code}")
            return self._error(
                e.status_code, upstream_status_message(e.status_code), e.body
            )
        except UpstreamError as e:
            status_code, message = FAILURE_RESPONSES.get(
                type(e), (500, "Internal server error")
            )
            logger.error(f"Chat request failed: {type(e).__name__}: {e}")
            return self._error(status_code, message, e)
        except Exception as e:
            logger.error(f"Error in chat handler: {e}", exc_info=True)
            return self._error(500, "Internal server error", e)

        return JSONResponse(
            status_code=200, content=ChatResponse(response=reply).model_dump()
        )


# --- Main Chat Endpoint ---


@router.api_route("/chat", methods=ALL_METHODS)
async def chat(request: Request) -> Response:
    """Handles an incoming user message and relays the assistant's reply."""
    handler: ChatHandler = request.app.state.chat_handler
    return await handler.handle(request)


async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answers methods the chat route does not register with the chat 405 body."""
    if exc.status_code == 405 and request.url.path.rstrip("/") == f"{router.prefix}/chat":
        payload = ErrorResponse(error="Only POST requests allowed")
        return JSONResponse(
            status_code=405, content=payload.model_dump(exclude_none=True)
        )
    return await http_exception_handler(request, exc)
