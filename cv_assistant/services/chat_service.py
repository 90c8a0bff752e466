from __future__ import annotations

import hashlib
import json
import logging
import re
import time
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from cv_assistant.ai.factory import select_answer_provider
from cv_assistant.ai.prompt import build_resume_context
from cv_assistant.ai.types import AnswerProvider
from cv_assistant.core.config import Settings, settings
from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits
from cv_assistant.schemas.chat import ERROR_SOURCE, RULE_BASED_SOURCE, ChatResponse
from cv_assistant.schemas.resume import ParsedResume

logger = logging.getLogger("cv_assistant.chat")

PROVIDER_CONFIDENCE = 0.85
MISSING_FIELD_CONFIDENCE = 0.3
SNIPPET_CONFIDENCE = 0.6
NO_MATCH_CONFIDENCE = 0.2

# Precedence order: the first category whose keyword occurs in the question wins.
QUESTION_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "last_position",
        (
            "last position",
            "recent job",
            "current job",
            "current position",
            "latest position",
            "last job",
            "most recent",
        ),
    ),
    ("skills", ("skill", "technolog", "programming", "tech stack")),
    ("contact", ("email", "contact", "phone")),
    ("education", ("education", "degree", "university", "college", "study")),
    ("experience", ("experience", "work", "job", "project")),
    ("name", ("name", "who are")),
)
FALLBACK_CATEGORY = "fallback"

NO_MATCH_MESSAGE = (
    "I couldn't find specific information to answer your question. "
    "Could you try rephrasing or asking about skills, experience, education, or contact information?"
)
_WORD_STRIP = ".,;:!?\"'()[]{}"


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


def classify_question(question: str) -> str:
    lowered = (question or "").lower()
    for category, keywords in QUESTION_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return FALLBACK_CATEGORY


def _answer(text: str, confidence: float) -> ChatResponse:
    return ChatResponse(text=text, confidence=confidence, source=RULE_BASED_SOURCE)


def _error(text: str) -> ChatResponse:
    return ChatResponse(text=text, confidence=0.0, source=ERROR_SOURCE)


def _answer_last_position(parsed: ParsedResume) -> ChatResponse:
    if parsed.jobs:
        return _answer(f"Your most recent position: {parsed.jobs[0]}", 0.9)
    return _answer("I couldn't find information about your recent positions in your resume.", MISSING_FIELD_CONFIDENCE)


def _answer_skills(parsed: ParsedResume) -> ChatResponse:
    if parsed.skills:
        return _answer(f"Your skills include: {', '.join(parsed.skills)}", 0.9)
    return _answer("I couldn't find a skills section in your resume.", MISSING_FIELD_CONFIDENCE)


def _answer_contact(parsed: ParsedResume) -> ChatResponse:
    contact = []
    if parsed.email:
        contact.append(f"Email: {parsed.email}")
    if parsed.phone:
        contact.append(f"Phone: {parsed.phone}")
    if contact:
        return _answer(f"Your contact information: {', '.join(contact)}", 0.9)
    return _answer("I couldn't find contact information in your resume.", MISSING_FIELD_CONFIDENCE)


def _answer_education(parsed: ParsedResume) -> ChatResponse:
    if parsed.education:
        return _answer(f"Your education: {', '.join(parsed.education)}", 0.8)
    return _answer("I couldn't find education information in your resume.", MISSING_FIELD_CONFIDENCE)


def _answer_experience(parsed: ParsedResume) -> ChatResponse:
    if parsed.jobs:
        listed = "\n\n".join(parsed.jobs[:3])
        return _answer(
            f"You have {len(parsed.jobs)} work experiences listed. Here are your positions:\n\n{listed}",
            0.8,
        )
    return _answer("I couldn't find work experience in your resume.", MISSING_FIELD_CONFIDENCE)


def _answer_name(parsed: ParsedResume) -> ChatResponse:
    if parsed.name:
        return _answer(f"Your name is {parsed.name}", 0.9)
    return _answer("I couldn't identify your name from the resume.", MISSING_FIELD_CONFIDENCE)


def find_snippets(raw: str, question: str, limits: ExtractionLimits) -> list[str]:
    """Single-line windows of `raw` around each longer question word, first matches first."""
    if not raw:
        return []
    window = limits.chat_snippet_window
    snippets: list[str] = []
    for word in question.split():
        term = word.strip(_WORD_STRIP)
        if len(term) < limits.chat_min_word_chars:
            continue
        pattern = re.compile(rf".{{0,{window}}}{re.escape(term)}.{{0,{window}}}", re.IGNORECASE)
        snippets.extend(match.group(0).strip() for match in pattern.finditer(raw))
        if len(snippets) >= limits.chat_max_snippets:
            break
    return snippets[: limits.chat_max_snippets]


def _answer_fallback(parsed: ParsedResume, question: str, limits: ExtractionLimits) -> ChatResponse:
    snippets = find_snippets(parsed.raw, question, limits)
    if snippets:
        return _answer(f"I found this relevant information: {' ... '.join(snippets)}", SNIPPET_CONFIDENCE)
    return _answer(NO_MATCH_MESSAGE, NO_MATCH_CONFIDENCE)


_CATEGORY_ANSWERS = {
    "last_position": _answer_last_position,
    "skills": _answer_skills,
    "contact": _answer_contact,
    "education": _answer_education,
    "experience": _answer_experience,
    "name": _answer_name,
}


def answer_from_rules(
    parsed: ParsedResume,
    question: str,
    limits: ExtractionLimits | None = None,
) -> ChatResponse:
    category = classify_question(question)
    if category == FALLBACK_CATEGORY:
        return _answer_fallback(parsed, question, limits or get_extraction_limits())
    return _CATEGORY_ANSWERS[category](parsed)


def _coerce_parsed(parsed: Any) -> ParsedResume | None:
    if isinstance(parsed, ParsedResume):
        return parsed
    if isinstance(parsed, Mapping):
        try:
            return ParsedResume.model_validate(dict(parsed))
        except ValidationError:
            return None
    return None


async def _answer_from_provider(
    provider: AnswerProvider | None,
    parsed: ParsedResume,
    question: str,
    config: Settings,
    limits: ExtractionLimits,
) -> ChatResponse | None:
    started_at = time.perf_counter()
    provider_name = getattr(provider, "name", "")
    try:
        if provider is None:
            provider = select_answer_provider(config)
            if provider is None:
                logger.info(json.dumps({"event": "chat_provider_unavailable"}))
                return None
            provider_name = provider.name
        text = await provider.answer(build_resume_context(parsed, limits.chat_context_max_chars), question)
    except Exception as exc:
        logger.warning(
            json.dumps(
                {
                    "event": "chat_provider_error",
                    "provider": provider_name,
                    "error": str(exc),
                    "duration_ms": int((time.perf_counter() - started_at) * 1000),
                }
            )
        )
        return None

    text = (text or "").strip()
    if not text:
        logger.warning(json.dumps({"event": "chat_provider_empty", "provider": provider_name}))
        return None
    return ChatResponse(text=text, confidence=PROVIDER_CONFIDENCE, source=provider_name)


async def generate_answer(
    parsed: Any,
    question: Any,
    use_external_model: bool = False,
    *,
    provider: AnswerProvider | None = None,
    config: Settings | None = None,
) -> ChatResponse:
    """Answer a question about a parsed resume.

    With `use_external_model`, the given (or first configured) provider is
    tried first; any failure there falls back to the keyword rules. Bad input
    produces an "error"-sourced response instead of an exception.
    """
    resume = _coerce_parsed(parsed)
    if resume is None:
        return _error("A parsed resume is required. Upload or paste your resume first.")
    if not isinstance(question, str) or not question.strip():
        return _error("Please ask a question about the resume.")

    limits = get_extraction_limits()
    response: ChatResponse | None = None
    if use_external_model:
        response = await _answer_from_provider(provider, resume, question, config or settings, limits)
    if response is None:
        response = answer_from_rules(resume, question, limits)

    logger.info(
        json.dumps(
            {
                "event": "chat_answer",
                "category": classify_question(question),
                "source": response.source,
                "confidence": response.confidence,
                "question_len": len(question),
                "question_hash": _short_hash(question),
            }
        )
    )
    return response
