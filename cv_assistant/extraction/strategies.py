from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar

from .text import dedupe

T = TypeVar("T")

Attempt = Callable[[str], Optional[T]]
ListAttempt = Callable[[str], Optional[list[str]]]


def first_success(attempts: Sequence[Attempt[T]], text: str) -> T | None:
    """Run attempts in order and return the first non-empty result."""
    for attempt in attempts:
        result = attempt(text)
        if result:
            return result
    return None


def accumulate_until(attempts: Sequence[ListAttempt], text: str, minimum: int) -> list[str]:
    """Concatenate attempt results in order until at least `minimum` distinct values are collected."""
    collected: list[str] = []
    for attempt in attempts:
        result = attempt(text)
        if result:
            collected = dedupe(collected + list(result))
        if len(collected) >= minimum:
            break
    return collected
