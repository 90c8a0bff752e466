from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_EXTRACTION_CONFIG_CACHE: dict[str, Any] | None = None
_EXTRACTION_CONFIG_PATH = Path(__file__).resolve().parent / "extraction.yaml"


def get_extraction_config() -> dict[str, Any]:
    """Load extraction thresholds from extraction.yaml next to this module and cache them."""
    global _EXTRACTION_CONFIG_CACHE

    if _EXTRACTION_CONFIG_CACHE is not None:
        return _EXTRACTION_CONFIG_CACHE

    if not _EXTRACTION_CONFIG_PATH.exists():
        raise RuntimeError(f"Extraction config not found at '{_EXTRACTION_CONFIG_PATH}'.")

    try:
        raw = _EXTRACTION_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read extraction config '{_EXTRACTION_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in extraction config '{_EXTRACTION_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid extraction config '{_EXTRACTION_CONFIG_PATH}': expected a top-level mapping."
        )

    _EXTRACTION_CONFIG_CACHE = parsed
    return _EXTRACTION_CONFIG_CACHE


def get_extraction_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'skills.max_results'."""
    if not path:
        return default

    current: Any = get_extraction_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


@dataclass(frozen=True)
class ExtractionLimits:
    raw_max_chars: int = 4000
    name_scan_lines: int = 5
    name_min_chars: int = 3
    name_max_chars: int = 40
    skills_min_results: int = 8
    skills_max_results: int = 30
    skill_min_chars: int = 2
    skill_max_chars: int = 39
    jobs_max_results: int = 10
    job_min_block_chars: int = 50
    job_description_max_chars: int = 250
    education_max_results: int = 10
    certifications_max_results: int = 10
    chat_snippet_window: int = 100
    chat_max_snippets: int = 2
    chat_min_word_chars: int = 4
    chat_context_max_chars: int = 6000


_LIMIT_PATHS = {
    "raw_max_chars": "raw.max_chars",
    "name_scan_lines": "name.scan_lines",
    "name_min_chars": "name.min_chars",
    "name_max_chars": "name.max_chars",
    "skills_min_results": "skills.min_results",
    "skills_max_results": "skills.max_results",
    "skill_min_chars": "skills.min_token_chars",
    "skill_max_chars": "skills.max_token_chars",
    "jobs_max_results": "jobs.max_results",
    "job_min_block_chars": "jobs.min_block_chars",
    "job_description_max_chars": "jobs.description_max_chars",
    "education_max_results": "education.max_results",
    "certifications_max_results": "certifications.max_results",
    "chat_snippet_window": "chat.snippet_window",
    "chat_max_snippets": "chat.max_snippets",
    "chat_min_word_chars": "chat.min_word_chars",
    "chat_context_max_chars": "chat.context_max_chars",
}

_LIMITS_CACHE: ExtractionLimits | None = None


def get_extraction_limits() -> ExtractionLimits:
    global _LIMITS_CACHE

    if _LIMITS_CACHE is not None:
        return _LIMITS_CACHE

    defaults = ExtractionLimits()
    values: dict[str, int] = {}
    for field_name, path in _LIMIT_PATHS.items():
        fallback = getattr(defaults, field_name)
        value = get_extraction_value(path, fallback)
        try:
            values[field_name] = int(value)
        except (TypeError, ValueError):
            values[field_name] = fallback

    _LIMITS_CACHE = ExtractionLimits(**values)
    return _LIMITS_CACHE
