from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from cv_assistant.ai.prompt import build_answer_messages

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class OpenAICompatibleProvider:
    """Chat completions against OpenAI or any OpenAI-compatible endpoint (Groq)."""

    def __init__(
        self,
        name: str,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 20.0,
        max_retries: int = 0,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError(f"API key for provider '{name}' is missing")

        self.name = name
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def answer(self, context: str, question: str) -> str:
        payload = [{"role": m.role, "content": m.content} for m in build_answer_messages(context, question)]
        completion = await self._client.chat.completions.create(
            model=self._model,
            messages=payload,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()
