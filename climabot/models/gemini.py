"""Pydantic models for the Gemini generateContent REST payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class GeminiModel(BaseModel):
    """Base model mapping snake_case fields to the API's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Part(GeminiModel):
    text: Optional[str] = None


class Content(GeminiModel):
    parts: List[Part] = []
    role: Optional[str] = None


class GenerationConfig(GeminiModel):
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024
    candidate_count: int = 1


class SafetySetting(GeminiModel):
    category: str
    threshold: str = "BLOCK_MEDIUM_AND_ABOVE"


HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


class GenerateContentRequest(GeminiModel):
    """Request body sent to the generateContent endpoint."""

    contents: List[Content]
    generation_config: GenerationConfig = GenerationConfig()
    safety_settings: List[SafetySetting] = [
        SafetySetting(category=category) for category in HARM_CATEGORIES
    ]

    @classmethod
    def from_prompt(cls, prompt: str) -> "GenerateContentRequest":
        """Wraps a single prompt string with the fixed generation parameters."""
        return cls(contents=[Content(parts=[Part(text=prompt)])])

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Candidate(GeminiModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        """Text of the first generated part, if any."""
        if self.content and self.content.parts:
            return self.content.parts[0].text
        return None


class GenerateContentResponse(GeminiModel):
    """The subset of the generateContent response the chat handler reads."""

    candidates: List[Candidate] = []
