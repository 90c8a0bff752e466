from dataclasses import dataclass
from typing import Literal, Protocol


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class AnswerProvider(Protocol):
    name: str

    async def answer(self, context: str, question: str) -> str: ...
