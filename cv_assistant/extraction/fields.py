from __future__ import annotations

import re
from functools import partial
from typing import Iterable

from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits

from .sections import find_section
from .strategies import first_success
from .text import (
    dedupe,
    is_known_heading,
    is_section_heading,
    normalize_line,
    normalize_newlines,
    strip_bullet_prefix,
)

EDUCATION_HEADERS = (
    "education",
    "academic background",
    "education & training",
    "academic qualifications",
)
EDUCATION_TOKENS = ("education", "degree", "university", "college", "bachelor", "master", "phd")

CERTIFICATION_HEADERS = (
    "licenses & certifications",
    "certifications",
    "certification",
    "certificates",
    "certificate",
)
CERTIFICATION_TOKENS = ("certifications", "certification", "certificates", "certificate")

SUMMARY_HEADERS = (
    "professional summary",
    "profile summary",
    "career summary",
    "summary",
    "career objective",
    "objective",
    "about me",
    "profile",
)
SUMMARY_TOKENS = ("summary", "objective", "profile")

_DEGREE_RE = re.compile(
    r"\b(?:bachelor|master|doctor|ph\.?\s?d|mba|b\.?\s?sc|m\.?\s?sc|b\.?\s?tech|m\.?\s?tech|"
    r"b\.?\s?eng|m\.?\s?eng|b\.?a\.|m\.?a\.|b\.?s\.|m\.?s\.|associate|diploma|degree|a-levels?|high school)\b",
    re.IGNORECASE,
)
_INSTITUTION_RE = re.compile(
    r"\b(?:university|college|institute|school|academy|polytechnic|universit[éeä]t?)\b",
    re.IGNORECASE,
)


def _token_pattern(tokens: Iterable[str], *, keep_token: bool) -> re.Pattern[str]:
    alternation = "|".join(re.escape(token) for token in tokens)
    if keep_token:
        return re.compile(rf"(?P<start>)\b(?:{alternation})\b", re.IGNORECASE)
    return re.compile(rf"\b(?:{alternation})\b[ \t]*[:\-]?[ \t]*(?P<start>)", re.IGNORECASE)


def _collect_lines(source: str, start: int) -> str | None:
    collected: list[str] = []
    for index, line in enumerate(source[start:].split("\n")):
        stripped = line.strip()
        if not stripped:
            if collected:
                break
            continue
        if index > 0:
            ends_span = is_section_heading(stripped) if collected else is_known_heading(stripped)
            if ends_span:
                break
        collected.append(stripped)
    return "\n".join(collected).strip() or None


def _span_from_token(text: str, tokens: tuple[str, ...], *, keep_token: bool = False) -> str | None:
    """Span following a synonym token anywhere in the text, up to a blank or heading line.

    With `keep_token` the whole line holding the token is part of the span,
    unless that line is nothing but a heading.
    """
    source = normalize_newlines(text)
    for match in _token_pattern(tokens, keep_token=keep_token).finditer(source):
        start = match.start("start")
        if keep_token:
            start = source.rfind("\n", 0, start) + 1
            line_end = source.find("\n", start)
            line_end = len(source) if line_end == -1 else line_end
            if is_known_heading(source[start:line_end]):
                start = line_end
        span = _collect_lines(source, start)
        if span:
            return span
    return None


def _section_span(text: str, headers: tuple[str, ...]) -> str | None:
    section = find_section(text, headers)
    return section.content if section else None


def _span_items(span: str) -> list[str]:
    return [normalize_line(strip_bullet_prefix(line)) for line in span.split("\n") if line.strip()]


def _education_entries(span: str) -> list[str]:
    lines = _span_items(span)
    isolated = [line for line in lines if _DEGREE_RE.search(line) or _INSTITUTION_RE.search(line)]
    if isolated:
        return dedupe(isolated)
    return [normalize_line(span.replace("\n", " "))]


def extract_education(text: str, limits: ExtractionLimits | None = None) -> list[str]:
    if not text:
        return []
    resolved = limits or get_extraction_limits()
    span = first_success(
        [
            partial(_section_span, headers=EDUCATION_HEADERS),
            partial(_span_from_token, tokens=EDUCATION_TOKENS, keep_token=True),
        ],
        text,
    )
    if not span:
        return []
    return _education_entries(span)[: resolved.education_max_results]


def extract_certifications(text: str, limits: ExtractionLimits | None = None) -> list[str]:
    if not text:
        return []
    resolved = limits or get_extraction_limits()
    span = first_success(
        [
            partial(_section_span, headers=CERTIFICATION_HEADERS),
            partial(_span_from_token, tokens=CERTIFICATION_TOKENS),
        ],
        text,
    )
    if not span:
        return []
    return dedupe(_span_items(span))[: resolved.certifications_max_results]


def extract_summary(text: str) -> str | None:
    if not text:
        return None
    span = first_success(
        [
            partial(_section_span, headers=SUMMARY_HEADERS),
            partial(_span_from_token, tokens=SUMMARY_TOKENS),
        ],
        text,
    )
    if not span:
        return None
    return normalize_line(span.replace("\n", " ")) or None
