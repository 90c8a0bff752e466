from __future__ import annotations

from typing import Any

import httpx

from cv_assistant.ai.prompt import build_answer_messages

COHERE_CHAT_URL = "https://api.cohere.com/v2/chat"


def _response_text(data: dict[str, Any]) -> str:
    message = data.get("message") or {}
    parts = message.get("content") or []
    texts = [part.get("text", "") for part in parts if isinstance(part, dict) and part.get("type") == "text"]
    return "".join(texts).strip()


class CohereProvider:
    name = "cohere"

    def __init__(
        self,
        model: str,
        api_key: str,
        timeout_s: float = 20.0,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("COHERE_API_KEY is missing")
        self._model = model
        self._api_key = key
        self._timeout_s = timeout_s
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def answer(self, context: str, question: str) -> str:
        payload = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in build_answer_messages(context, question)],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(timeout=self._timeout_s) as client:
            response = await client.post(COHERE_CHAT_URL, json=payload, headers=headers)
        response.raise_for_status()
        return _response_text(response.json())
