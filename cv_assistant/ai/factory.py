from __future__ import annotations

from cv_assistant.ai.providers.cohere_provider import CohereProvider
from cv_assistant.ai.providers.openai_provider import GROQ_BASE_URL, OpenAICompatibleProvider
from cv_assistant.ai.types import AnswerProvider
from cv_assistant.core.config import Settings


def _build_provider(name: str, config: Settings) -> AnswerProvider | None:
    if name == "groq" and config.groq_api_key:
        return OpenAICompatibleProvider(
            name="groq",
            model=config.groq_model,
            api_key=config.groq_api_key,
            base_url=GROQ_BASE_URL,
            timeout_s=config.ai_timeout_s,
            max_retries=config.ai_max_retries,
        )

    if name == "openai" and config.openai_api_key:
        return OpenAICompatibleProvider(
            name="openai",
            model=config.openai_model,
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            timeout_s=config.ai_timeout_s,
            max_retries=config.ai_max_retries,
        )

    if name == "cohere" and config.cohere_api_key:
        return CohereProvider(
            model=config.cohere_model,
            api_key=config.cohere_api_key,
            timeout_s=config.ai_timeout_s,
        )

    return None


def build_answer_providers(config: Settings) -> list[AnswerProvider]:
    """Configured providers, in `AI_PROVIDER_PRIORITY` order."""
    providers: list[AnswerProvider] = []
    for name in config.ai_provider_priority:
        provider = _build_provider(name, config)
        if provider is not None:
            providers.append(provider)
    return providers


def select_answer_provider(config: Settings) -> AnswerProvider | None:
    providers = build_answer_providers(config)
    return providers[0] if providers else None
