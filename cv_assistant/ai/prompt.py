from __future__ import annotations

from cv_assistant.ai.types import ChatMessage
from cv_assistant.schemas.resume import ParsedResume

SYSTEM_PROMPT = (
    "You are a helpful assistant answering questions about a candidate's resume. "
    "Answer only using the resume provided. "
    "If the resume does not contain the answer, say so plainly instead of guessing. "
    "Keep answers short and factual."
)


def _list_line(label: str, values: list[str]) -> str | None:
    if not values:
        return None
    return f"{label}:\n" + "\n".join(f"- {value}" for value in values)


def build_resume_context(parsed: ParsedResume, max_chars: int = 6000) -> str:
    """Render the extracted fields plus raw text as a bounded prompt context."""
    parts = [
        f"Name: {parsed.name}" if parsed.name else None,
        f"Email: {parsed.email}" if parsed.email else None,
        f"Phone: {parsed.phone}" if parsed.phone else None,
        f"Summary: {parsed.summary}" if parsed.summary else None,
        _list_line("Skills", parsed.skills),
        _list_line("Experience", parsed.jobs),
        _list_line("Education", parsed.education),
        _list_line("Certifications", parsed.certifications),
        f"Full text:\n{parsed.raw.strip()}" if parsed.raw.strip() else None,
    ]
    context = "\n\n".join(part for part in parts if part)
    if len(context) > max_chars:
        context = context[:max_chars] + "..."
    return context


def build_answer_messages(context: str, question: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=f"RESUME:\n{context}\n\nQUESTION:\n{question}\n\nANSWER:"),
    ]
