from __future__ import annotations

import re
from functools import partial

from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits

from .strategies import first_success
from .text import split_lines

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_RE = re.compile(r"\+?\d[\d .()\-]{6,}\d")

_CONTACT_MARKER_RE = re.compile(r"\b(?:e-?mail|(?:tele)?phone|tel|mobile)\b|\+\d|@", re.IGNORECASE)
_CAPITALIZED_RUN_RE = re.compile(r"^[ \t]*([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+)", re.MULTILINE)
_NAME_NOISE = "•·*-–—|#>~_ \t"
# Substring match: any line containing "resume" or "cv" is rejected as a name.
_NAME_STOPWORDS_RE = re.compile(r"resume|cv", re.IGNORECASE)


def extract_email(text: str) -> str | None:
    match = EMAIL_RE.search(text or "")
    return match.group(0) if match else None


def extract_phone(text: str) -> str | None:
    match = PHONE_RE.search(text or "")
    return match.group(0) if match else None


def _name_before_contact(text: str) -> str | None:
    marker = _CONTACT_MARKER_RE.search(text)
    if marker is None:
        return None
    match = _CAPITALIZED_RUN_RE.search(text[: marker.start()])
    return match.group(1) if match else None


def _name_from_leading_lines(text: str, limits: ExtractionLimits) -> str | None:
    for line in split_lines(text)[: limits.name_scan_lines]:
        candidate = line.strip(_NAME_NOISE)
        if not limits.name_min_chars <= len(candidate) <= limits.name_max_chars:
            continue
        if "@" in candidate or any(ch.isdigit() for ch in candidate):
            continue
        if len(candidate.split()) < 2:
            continue
        if _NAME_STOPWORDS_RE.search(candidate):
            continue
        if not candidate[0].isupper():
            continue
        return candidate
    return None


def extract_name(text: str, limits: ExtractionLimits | None = None) -> str | None:
    if not text:
        return None
    resolved = limits or get_extraction_limits()
    return first_success(
        [_name_before_contact, partial(_name_from_leading_lines, limits=resolved)],
        text,
    )
