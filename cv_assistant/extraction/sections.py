"""Locate named section headers and the span of text each one introduces."""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from cv_assistant.schemas.resume import ResumeSection

from .text import is_known_heading, is_section_heading, normalize_newlines

SEGMENT_HEADERS = (
    "experience",
    "work experience",
    "professional experience",
    "employment",
    "employment history",
    "education",
    "academic background",
    "skills",
    "technical skills",
    "technologies",
    "projects",
    "personal projects",
    "achievements",
    "accomplishments",
    "certifications",
    "certificates",
    "summary",
    "profile summary",
    "professional summary",
    "objective",
    "profile",
)


@dataclass(frozen=True)
class SectionSpan:
    title: str
    content: str
    start: int


@lru_cache(maxsize=64)
def header_pattern(headers: tuple[str, ...]) -> re.Pattern[str]:
    """Line-anchored, case-insensitive header regex; longer synonyms are tried first."""
    alternatives = sorted(
        (re.escape(header).replace(r"\ ", r"[ \t]+") for header in headers),
        key=len,
        reverse=True,
    )
    return re.compile(
        rf"^[ \t]*(?:[#•*\-][ \t]*)?(?P<title>{'|'.join(alternatives)})[ \t]*(?:[:|\-–][ \t]*|$)",
        re.IGNORECASE | re.MULTILINE,
    )


def _collect_span(source: str, offset: int, *, through_blank_lines: bool) -> str:
    line_end = source.find("\n", offset)
    if line_end == -1:
        line_end = len(source)
    collected: list[str] = []
    inline = source[offset:line_end].strip()
    if inline:
        collected.append(inline)

    for line in source[line_end + 1 :].split("\n"):
        stripped = line.strip()
        if not stripped:
            if not collected:
                continue
            if not through_blank_lines:
                break
            if collected[-1]:
                collected.append("")
            continue
        # The first line under a header only ends the span if it is itself a named heading.
        ends_span = is_section_heading(stripped) if collected else is_known_heading(stripped)
        if ends_span:
            break
        collected.append(stripped)

    return "\n".join(collected).strip()


def find_section(
    text: str,
    headers: Iterable[str],
    *,
    through_blank_lines: bool = False,
) -> SectionSpan | None:
    """First section introduced by one of `headers`.

    The span runs from the text after the header to the next blank line (or,
    with `through_blank_lines`, only to the next heading-looking line) or the
    end of the document.
    """
    if not text:
        return None
    source = normalize_newlines(text)
    for match in header_pattern(tuple(headers)).finditer(source):
        content = _collect_span(source, match.end(), through_blank_lines=through_blank_lines)
        if content:
            return SectionSpan(title=match.group("title").strip(), content=content, start=match.start())
    return None


def find_sections(
    text: str,
    headers: Iterable[str],
    *,
    through_blank_lines: bool = False,
) -> list[SectionSpan]:
    """One span per header that matched, in document order."""
    spans: list[SectionSpan] = []
    seen_starts: set[int] = set()
    for header in headers:
        span = find_section(text, (header,), through_blank_lines=through_blank_lines)
        if span is None or span.start in seen_starts:
            continue
        seen_starts.add(span.start)
        spans.append(span)
    return sorted(spans, key=lambda span: span.start)


def extract_sections(text: str) -> list[ResumeSection]:
    """Title/content pairs for every known header present in the text."""
    sections: list[ResumeSection] = []
    for header in SEGMENT_HEADERS:
        span = find_section(text, (header,))
        if span is not None:
            sections.append(ResumeSection(title=span.title, content=span.content))
    return sections
