from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EmailRequest(BaseModel):
    to: str = Field(min_length=3, max_length=320)
    subject: str = Field(min_length=1, max_length=300)
    body: str = Field(min_length=1, max_length=50000)


class OutgoingEmail(BaseModel):
    model_config = ConfigDict(frozen=True)

    to: str
    subject: str
    text: str
    html: str
    sender_email: str | None = None
    sender_name: str = "CV Assistant"


class EmailResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_id: str | None = Field(default=None, alias="messageId")
    provider: str
