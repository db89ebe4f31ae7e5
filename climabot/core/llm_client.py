"""Client for interacting with the Google Gemini generateContent REST API."""

import json
import logging
import socket
from typing import Optional

import httpx
from pydantic import ValidationError

from climabot.config import Settings
from climabot.core.errors import (
    ConnectionFailed,
    DecodeFailure,
    DnsFailure,
    UpstreamStatus,
    UpstreamTimeout,
)
from climabot.models.gemini import GenerateContentRequest, GenerateContentResponse

logger = logging.getLogger(__name__)


def _is_dns_failure(exc: BaseException) -> bool:
    """Walks the exception chain looking for a name resolution error."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class GeminiClient:
    """A client to handle interactions with the Google Gemini API."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Stores the settings; transport is only overridden in tests."""
        self.settings = settings
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return (
            f"{self.settings.gemini_base_url}/models/"
            f"{self.settings.gemini_model}:generateContent"
        )

    async def generate(self, prompt: str) -> GenerateContentResponse:
        """
        Sends one generateContent call and parses the result.

        Raises an UpstreamError subclass for every failure: transport problems,
        non-success statuses and bodies that do not match the response schema.
        """
        payload = GenerateContentRequest.from_prompt(prompt).to_payload()
        logger.info(f"Making request to Gemini API: {self.endpoint}")

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.gemini_timeout_seconds,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.settings.gemini_api_key},
                    json=payload,
                )
        except httpx.TimeoutException as e:
            raise UpstreamTimeout(str(e) or "Request to AI service timed out") from e
        except httpx.TransportError as e:
            if _is_dns_failure(e):
                raise DnsFailure(str(e)) from e
            raise ConnectionFailed(str(e)) from e

        logger.info(f"Gemini API response status: {response.status_code}")

        if not response.is_success:
            logger.error(f"Gemini API error response: {response.text}")
            raise UpstreamStatus(response.status_code, response.text)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeFailure(f"Malformed JSON from AI service: {e}") from e

        try:
            result = GenerateContentResponse.model_validate(data)
        except ValidationError as e:
            raise DecodeFailure(f"Unexpected response shape from AI service: {e}") from e

        logger.info(f"Gemini API returned {len(result.candidates)} candidate(s)")
        return result
