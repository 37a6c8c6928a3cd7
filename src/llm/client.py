"""LLM client abstraction backed by Groq."""

import logging
from abc import ABC, abstractmethod

from fastapi import Request
from groq import APIError, AsyncGroq

from src.config.settings import Settings

logger = logging.getLogger(__name__)

# Purpose accepted by the Groq files API
FILE_PURPOSE = "batch"


class LLMError(Exception):
    """The completion service rejected or failed a request."""


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, messages: list[dict], model: str, temperature: float, max_tokens: int) -> dict:
        """Return {"content": str, "finish_reason": str, "usage": dict}."""
        ...

    @abstractmethod
    async def upload_file(self, filename: str, content: bytes) -> dict:
        """Return {"id": str, "filename": str}."""
        ...


class GroqClient(LLMClient):
    def __init__(self, api_key: str):
        self._client = AsyncGroq(api_key=api_key)

    async def generate(self, messages: list[dict], model: str, temperature: float, max_tokens: int) -> dict:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIError as e:
            raise LLMError(e.message) from e

        choice = response.choices[0]
        usage = response.usage
        return {
            "content": choice.message.content or "",
            "finish_reason": choice.finish_reason,
            "usage": {
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
                "total_tokens": usage.total_tokens if usage else 0,
            },
        }

    async def upload_file(self, filename: str, content: bytes) -> dict:
        try:
            uploaded = await self._client.files.create(file=(filename, content), purpose=FILE_PURPOSE)
        except APIError as e:
            raise LLMError(e.message) from e
        return {"id": uploaded.id, "filename": getattr(uploaded, "filename", None) or filename}


def create_llm_client(settings: Settings) -> LLMClient:
    return GroqClient(settings.GROQ_API_KEY)


def get_llm_client(request: Request) -> LLMClient:
    """FastAPI dependency: the app's completion client, created on first use."""
    state = request.app.state
    if getattr(state, "llm", None) is None:
        state.llm = create_llm_client(state.settings)
    return state.llm
