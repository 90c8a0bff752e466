from __future__ import annotations

import re
from dataclasses import dataclass

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►➢✓-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_NEWLINE_RE = re.compile(r"\r\n?|\n")
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")

# Every header the segmenter and field extractors know about. A line made of
# one of these (optionally followed by a colon) ends the span of the previous section.
SECTION_HEADINGS = (
    "summary",
    "professional summary",
    "profile summary",
    "career summary",
    "profile",
    "objective",
    "career objective",
    "about me",
    "experience",
    "work experience",
    "professional experience",
    "employment",
    "employment history",
    "work history",
    "education",
    "academic background",
    "education & training",
    "academic qualifications",
    "skills",
    "technical skills",
    "key skills",
    "core competencies",
    "technical expertise",
    "skills & technologies",
    "skills and technologies",
    "technologies",
    "projects",
    "personal projects",
    "academic projects",
    "key projects",
    "achievements",
    "accomplishments",
    "awards",
    "certifications",
    "certificates",
    "licenses & certifications",
    "languages",
    "interests",
    "hobbies",
    "references",
    "publications",
    "volunteering",
    "volunteer experience",
)
_SECTION_HEADING_SET = frozenset(SECTION_HEADINGS)


@dataclass(frozen=True)
class NormalizedText:
    lines: tuple[str, ...]
    blocks: tuple[str, ...]


def normalize_newlines(text: str) -> str:
    return _NEWLINE_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    """Trimmed, non-empty lines for any line-ending convention."""
    return [line.strip() for line in _NEWLINE_RE.split(text) if line.strip()]


def split_blocks(text: str) -> list[str]:
    """Paragraph blocks separated by one or more blank lines, trimmed."""
    source = normalize_newlines(text)
    return [block.strip() for block in _BLANK_LINE_RE.split(source) if block.strip()]


def normalize_text(text: str) -> NormalizedText:
    if not text or not text.strip():
        return NormalizedText(lines=(), blocks=())
    return NormalizedText(lines=tuple(split_lines(text)), blocks=tuple(split_blocks(text)))


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def split_bullets(line: str) -> list[str]:
    """Split a line holding several inline bullets ("• a • b") into items."""
    parts = re.split(r"\s*[•●▪◦■►▶➢]\s*", line)
    return [strip_bullet_prefix(part) for part in parts if part.strip()]


def is_known_heading(line: str) -> bool:
    """True for lines that are exactly one of the vocabulary headings."""
    lowered = normalize_line(line).lower().rstrip(":").strip()
    return bool(lowered) and lowered in _SECTION_HEADING_SET


def is_section_heading(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    if is_known_heading(stripped):
        return True
    if is_bullet_like(line) or any(ch in stripped for ch in ",@:|") or any(ch.isdigit() for ch in stripped):
        return False
    words = stripped.split()
    # Single short all-caps words are usually acronyms (SQL, AWS, MIT).
    if len(words) < 2 and len(stripped) < 6:
        return False
    return bool(stripped.isupper() and len(words) <= 5 and len(stripped) <= 36)


def dedupe(values: list[str]) -> list[str]:
    """Drop exact duplicates, keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out
