"""Tests for the Gemini REST client."""

import asyncio
import json
import socket

import httpx
import pytest

from climabot.config import Settings
from climabot.core.errors import (
    ConnectionFailed,
    DecodeFailure,
    DnsFailure,
    UpstreamStatus,
    UpstreamTimeout,
)
from climabot.core.llm_client import GeminiClient


def make_gemini_client(handler) -> GeminiClient:
    settings = Settings(
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        gemini_base_url="https://gemini.example.com/v1beta",
        _env_file=None,
    )
    return GeminiClient(settings, transport=httpx.MockTransport(handler))


def test_request_payload_shape():
    """Test the URL and JSON body sent to Gemini."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"candidates": []})

    client = make_gemini_client(handler)
    result = asyncio.run(client.generate("Hello there"))
    assert result.candidates == []

    request = seen[0]
    assert request.url.host == "gemini.example.com"
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.url.params["key"] == "test-key"

    body = json.loads(request.content)
    assert body["contents"] == [{"parts": [{"text": "Hello there"}]}]
    assert body["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1024,
        "candidateCount": 1,
    }
    assert [s["category"] for s in body["safetySettings"]] == [
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    ]
    assert {s["threshold"] for s in body["safetySettings"]} == {"BLOCK_MEDIUM_AND_ABOVE"}


def test_parses_candidates():
    """Test that finish reason and text are read from the first candidate."""
    client = make_gemini_client(
        lambda request: httpx.Response(
            200,
            json={
                "candidates": [
                    {
                        "content": {"parts": [{"text": "Rain later."}], "role": "model"},
                        "finishReason": "STOP",
                        "safetyRatings": [],
                    }
                ],
                "usageMetadata": {"totalTokenCount": 12},
            },
        )
    )
    result = asyncio.run(client.generate("Will it rain?"))
    assert result.candidates[0].finish_reason == "STOP"
    assert result.candidates[0].text == "Rain later."


def test_non_success_status():
    """Test that error statuses carry the code and raw body."""
    client = make_gemini_client(
        lambda request: httpx.Response(403, text='{"error": "billing"}')
    )
    with pytest.raises(UpstreamStatus) as exc_info:
        asyncio.run(client.generate("Hi"))
    assert exc_info.value.status_code == 403
    assert exc_info.value.body == '{"error": "billing"}'


def test_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionFailed):
        asyncio.run(make_gemini_client(handler).generate("Hi"))


def test_dns_error():
    def handler(request):
        try:
            raise socket.gaierror(-3, "Temporary failure in name resolution")
        except socket.gaierror as exc:
            raise httpx.ConnectError("name resolution", request=request) from exc

    with pytest.raises(DnsFailure):
        asyncio.run(make_gemini_client(handler).generate("Hi"))


def test_timeout_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(UpstreamTimeout):
        asyncio.run(make_gemini_client(handler).generate("Hi"))


@pytest.mark.parametrize(
    "content",
    [b"not json at all", b"[1, 2, 3]", b'{"candidates": [{"content": "oops"}]}'],
)
def test_decode_failures(content):
    """Test that bodies not matching the schema raise DecodeFailure."""
    client = make_gemini_client(lambda request: httpx.Response(200, content=content))
    with pytest.raises(DecodeFailure):
        asyncio.run(client.generate("Hi"))
