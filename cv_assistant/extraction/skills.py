from __future__ import annotations

import re
from functools import partial

from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits

from .sections import find_section
from .strategies import accumulate_until, first_success
from .text import dedupe, split_bullets, split_lines, strip_bullet_prefix

SKILL_SECTION_HEADERS = (
    "technical skills",
    "skills & technologies",
    "skills and technologies",
    "skills & tools",
    "core competencies",
    "technical expertise",
    "key skills",
    "skills",
    "technologies",
)

CATEGORY_LABELS = (
    "programming languages",
    "languages",
    "frameworks & libraries",
    "frameworks",
    "libraries",
    "web development",
    "mobile development",
    "frontend",
    "backend",
    "databases",
    "cloud & devops",
    "cloud",
    "devops",
    "tools & platforms",
    "tools",
    "machine learning & data science",
    "machine learning",
    "data science",
    "testing",
    "operating systems",
    "version control",
)

_CATEGORY_ITEM_RE = re.compile(r"^(?P<category>[^:]{2,60}):\s*(?P<values>.+)$", re.DOTALL)
_CATEGORY_LABEL_RE = re.compile(
    r"^(?:"
    + "|".join(re.escape(label).replace(r"\ ", r"[ \t]+") for label in CATEGORY_LABELS)
    + r")[ \t]*:[ \t]*(?P<values>.+)$",
    re.IGNORECASE,
)
_GENERIC_SKILLS_RE = re.compile(
    r"\b(?:technical\s+skills?|skills?|technologies|technology|programming\s+languages?)\b"
    r"[ \t]*[:\-]?\s*(?P<values>.+?)(?=\n[ \t]*\n|\n(?-i:[A-Z])|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_GENERIC_SPLIT_RE = re.compile(r"[,•\n]")


def _keep_token(token: str, limits: ExtractionLimits) -> bool:
    return limits.skill_min_chars <= len(token) <= limits.skill_max_chars


def _split_values(values: str, limits: ExtractionLimits) -> list[str]:
    tokens = [token.strip().rstrip(".;").strip() for token in values.split(",")]
    return [token for token in tokens if token and _keep_token(token, limits)]


def _skills_from_section(text: str, limits: ExtractionLimits) -> list[str] | None:
    section = find_section(text, SKILL_SECTION_HEADERS, through_blank_lines=True)
    if section is None:
        return None
    skills: list[str] = []
    for line in section.content.split("\n"):
        for item in split_bullets(line):
            match = _CATEGORY_ITEM_RE.match(item)
            if match:
                skills.extend(_split_values(match.group("values"), limits))
    return dedupe(skills) or None


def _skills_from_category_lines(text: str, limits: ExtractionLimits) -> list[str] | None:
    skills: list[str] = []
    for line in split_lines(text):
        for item in split_bullets(line):
            match = _CATEGORY_LABEL_RE.match(item)
            if match:
                skills.extend(_split_values(match.group("values"), limits))
    return dedupe(skills) or None


def _skills_from_generic_label(text: str, limits: ExtractionLimits) -> list[str] | None:
    match = _GENERIC_SKILLS_RE.search(text)
    if match is None:
        return None
    tokens = [strip_bullet_prefix(token) for token in _GENERIC_SPLIT_RE.split(match.group("values"))]
    skills = [token for token in tokens if token and _keep_token(token, limits)]
    return dedupe(skills) or None


def extract_skills(text: str, limits: ExtractionLimits | None = None) -> list[str]:
    if not text:
        return []
    resolved = limits or get_extraction_limits()
    skills = accumulate_until(
        [
            partial(_skills_from_section, limits=resolved),
            partial(_skills_from_category_lines, limits=resolved),
        ],
        text,
        minimum=resolved.skills_min_results,
    )
    if not skills:
        skills = first_success([partial(_skills_from_generic_label, limits=resolved)], text) or []
    return skills[: resolved.skills_max_results]
