"""Pydantic models for chat-related API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional, Union


class WeatherContext(BaseModel):
    """Current weather shown to the user, passed along as prompt context."""

    location: Optional[Union[str, int, float]] = None
    temperature: Optional[Union[int, float, str]] = None
    condition: Optional[str] = None
    timestamp: Optional[Union[int, float, str]] = None  # ISO-8601 or epoch millis


class HistoryEntry(BaseModel):
    """Data model for a single message in a chat history."""

    type: Optional[Union[str, int, float]] = None  # "user" or "bot"
    message: Optional[Union[str, int, float]] = None


class ChatRequest(BaseModel):
    """Request model for the main chat endpoint."""

    message: str
    weather_context: Optional[WeatherContext] = Field(
        default=None, alias="weatherContext"
    )
    conversation_history: List[HistoryEntry] = Field(
        default_factory=list, alias="conversationHistory"
    )


class ChatResponse(BaseModel):
    """Response model for the main chat endpoint."""

    response: str


class ErrorResponse(BaseModel):
    """Error payload; details are only filled in development mode."""

    error: str
    details: Optional[str] = None
