from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import partial

from cv_assistant.core.config.extraction import ExtractionLimits, get_extraction_limits

from .sections import find_sections
from .strategies import first_success
from .text import dedupe, is_bullet_like, normalize_line, split_blocks, strip_bullet_prefix

JOB_SECTION_HEADERS = (
    "work experience",
    "professional experience",
    "experience",
    "employment history",
    "work history",
    "employment",
    "projects",
    "personal projects",
    "academic projects",
    "key projects",
)

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
TECH_MARKER_RE = re.compile(
    r"^(?:tech(?:nology)?[ \t]*stack|technologies(?:[ \t]+used)?|tools(?:[ \t]+used)?|built[ \t]+with|stack)"
    r"[ \t]*[:\-–][ \t]*(?P<values>.*)$",
    re.IGNORECASE,
)
_TITLE_MAX_CHARS = 100


@dataclass
class _Entry:
    lines: list[str] = field(default_factory=list)
    tech: list[str] = field(default_factory=list)


def _is_title_like(line: str) -> bool:
    if is_bullet_like(line) or TECH_MARKER_RE.match(line):
        return False
    stripped = line.strip()
    if not stripped or len(stripped) > _TITLE_MAX_CHARS or stripped.endswith("."):
        return False
    return stripped[0].isupper() or stripped[0].isdigit()


def _starts_new_entry(line: str, previous: str) -> bool:
    """A title line right after a bullet, or a dated title right after a sentence."""
    if not _is_title_like(line):
        return False
    if is_bullet_like(previous):
        return True
    return bool(YEAR_RE.search(line)) and not _is_title_like(previous)


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3].rstrip() + "..."


def _split_entries(content: str) -> list[_Entry]:
    entries: list[_Entry] = []
    current = _Entry()

    def flush() -> None:
        nonlocal current
        if current.lines:
            entries.append(current)
        current = _Entry()

    for line in content.split("\n"):
        if not line.strip():
            flush()
            continue
        tech = TECH_MARKER_RE.match(strip_bullet_prefix(line))
        if tech and current.lines:
            current.tech = [item.strip() for item in tech.group("values").split(",") if item.strip()]
            flush()
            continue
        if current.lines and _starts_new_entry(line, current.lines[-1]):
            flush()
        current.lines.append(line)
    flush()
    return entries


def _format_entry(entry: _Entry, limits: ExtractionLimits) -> list[str]:
    if not entry.tech and len(entry.lines) > 1 and all(_is_title_like(line) for line in entry.lines):
        # A bare list of titles: one job/project per line.
        return [normalize_line(line) for line in entry.lines]

    title = normalize_line(strip_bullet_prefix(entry.lines[0]))
    description = normalize_line(" ".join(strip_bullet_prefix(line) for line in entry.lines[1:]))
    formatted = title
    if description:
        formatted = f"{title} - {_truncate(description, limits.job_description_max_chars)}"
    if entry.tech:
        formatted = f"{formatted} (Tech Stack: {', '.join(entry.tech)})"
    return [formatted]


def _jobs_from_sections(text: str, limits: ExtractionLimits) -> list[str] | None:
    jobs: list[str] = []
    for section in find_sections(text, JOB_SECTION_HEADERS, through_blank_lines=True):
        for entry in _split_entries(section.content):
            jobs.extend(_format_entry(entry, limits))
    return dedupe(jobs) or None


def _jobs_from_year_blocks(text: str, limits: ExtractionLimits) -> list[str] | None:
    jobs = [
        block
        for block in split_blocks(text)
        if YEAR_RE.search(block) and len(block) > limits.job_min_block_chars
    ]
    return dedupe(jobs) or None


def extract_jobs(text: str, limits: ExtractionLimits | None = None) -> list[str]:
    if not text:
        return []
    resolved = limits or get_extraction_limits()
    jobs = first_success(
        [
            partial(_jobs_from_sections, limits=resolved),
            partial(_jobs_from_year_blocks, limits=resolved),
        ],
        text,
    )
    return (jobs or [])[: resolved.jobs_max_results]
