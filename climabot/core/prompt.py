"""Builds the prompt sent to Gemini from the chat request."""

from datetime import datetime, timezone
from typing import List, Optional, Union

from climabot.models.chat import ChatRequest, HistoryEntry, WeatherContext

SYSTEM_PREAMBLE = """You are Climabot AI, an advanced weather assistant. You provide helpful, accurate, and engaging responses about weather, climate, and atmospheric conditions.

Instructions:
- Be conversational and friendly
- Use weather emojis appropriately
- Provide accurate information
- If you don't know something specific, be honest
- Keep responses informative but concise
- Focus on being helpful for weather-related queries

"""


def _format_scalar(value: Union[int, float, str, None]) -> str:
    if value is None:
        return "unknown"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_timestamp(value: Union[int, float, str, None]) -> str:
    """Renders a timestamp the way a US-locale browser would display it."""
    if value is None or value == "":
        return "unknown"

    try:
        if isinstance(value, (int, float)):
            moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return str(value)

    return moment.strftime("%m/%d/%Y, %I:%M:%S %p")


def weather_block(weather: Optional[WeatherContext]) -> str:
    """Weather context section, empty unless a location is known."""
    if not weather or not weather.location:
        return ""

    return (
        "Current Weather Context:\n"
        f"- Location: {_format_scalar(weather.location)}\n"
        f"- Temperature: {_format_scalar(weather.temperature)}°C\n"
        f"- Conditions: {weather.condition or 'unknown'}\n"
        f"- Data from: {_format_timestamp(weather.timestamp)}\n"
        "\n"
    )


def history_block(history: List[HistoryEntry]) -> str:
    """Recent conversation section, oldest entry first."""
    if not history:
        return ""

    lines = [
        f"{_format_scalar(entry.type)}: {_format_scalar(entry.message)}"
        for entry in history
        if entry.type and entry.message
    ]
    return "Recent conversation:\n" + "".join(f"{line}\n" for line in lines) + "\n"


def build_prompt(chat_request: ChatRequest) -> str:
    """Composes preamble, weather context, history and question, in that order."""
    return (
        SYSTEM_PREAMBLE
        + weather_block(chat_request.weather_context)
        + history_block(chat_request.conversation_history)
        + f"User Question: {chat_request.message}\n\n"
        + "Please provide a helpful response:"
    )
