from __future__ import annotations

from typing import Any

from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits
from cv_assistant.schemas.resume import ParsedResume, ResumeMetadata, StructuredResume

from .contact import extract_email, extract_name, extract_phone
from .experience import extract_jobs
from .fields import extract_certifications, extract_education, extract_summary
from .sections import extract_sections
from .skills import extract_skills

_STRUCTURE_MIN_SECTIONS = 2


def _coerce_text(text: Any) -> str:
    return text if isinstance(text, str) else ""


def parse_resume_text(text: Any, limits: ExtractionLimits | None = None) -> ParsedResume:
    """Extract every resume field from plain text.

    Missing fields come back as None or an empty list. Anything that is not a
    string is treated as an empty document, so this never raises on bad input.
    """
    source = _coerce_text(text)
    resolved = limits or get_extraction_limits()
    if not source.strip():
        return ParsedResume(raw=source[: resolved.raw_max_chars])

    return ParsedResume(
        name=extract_name(source, resolved),
        email=extract_email(source),
        phone=extract_phone(source),
        skills=extract_skills(source, resolved),
        jobs=extract_jobs(source, resolved),
        education=extract_education(source, resolved),
        certifications=extract_certifications(source, resolved),
        summary=extract_summary(source),
        raw=source[: resolved.raw_max_chars],
    )


def parse_structured_resume(text: Any, limits: ExtractionLimits | None = None) -> StructuredResume:
    source = _coerce_text(text)
    parsed = parse_resume_text(source, limits)
    sections = extract_sections(source) if source.strip() else []
    metadata = ResumeMetadata(
        word_count=len(source.split()),
        line_count=len(source.splitlines()),
        has_structure=len(sections) > _STRUCTURE_MIN_SECTIONS,
    )
    return StructuredResume(
        **parsed.model_dump(),
        sections=sections,
        metadata=metadata,
    )
