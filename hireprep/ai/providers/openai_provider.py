from __future__ import annotations

import os
from typing import AsyncGenerator, Optional, Sequence

import httpx
from openai import AsyncOpenAI, OpenAIError

from hireprep.ai.types import ChatMessage
from hireprep.core.config import settings
from hireprep.core.errors import ConfigurationError, UpstreamError


class OpenAIProvider:
    """Chat completions in JSON mode, streamed or single-shot."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        self._model = model
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise ConfigurationError("OPENAI_API_KEY is missing", code="missing_api_key")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=settings.openai_timeout_s if timeout_s is None else timeout_s,
            max_retries=settings.openai_max_retries if max_retries is None else max_retries,
        )

    def _create_kwargs(self, messages: Sequence[ChatMessage], temperature: float) -> dict:
        return {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }

    async def stream(
        self, messages: Sequence[ChatMessage], *, temperature: float
    ) -> AsyncGenerator[str, None]:
        try:
            stream = await self._client.chat.completions.create(
                **self._create_kwargs(messages, temperature),
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = getattr(chunk.choices[0].delta, "content", None)
                if text:
                    yield text
        except (OpenAIError, httpx.HTTPError) as exc:
            raise UpstreamError(f"OpenAI request failed: {exc}") from exc

    async def complete(
        self, messages: Sequence[ChatMessage], *, temperature: float
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                **self._create_kwargs(messages, temperature),
            )
        except (OpenAIError, httpx.HTTPError) as exc:
            raise UpstreamError(f"OpenAI request failed: {exc}") from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
