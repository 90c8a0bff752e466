from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ParsedResume(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    skills: list[str] = Field(default_factory=list)
    jobs: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    summary: str | None = None
    raw: str = ""
    parsed_at: datetime = Field(default_factory=_utc_now, alias="parsedAt")


class ResumeSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str


class ResumeMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    word_count: int = Field(default=0, ge=0, alias="wordCount")
    line_count: int = Field(default=0, ge=0, alias="lineCount")
    has_structure: bool = Field(default=False, alias="hasStructure")


class StructuredResume(ParsedResume):
    sections: list[ResumeSection] = Field(default_factory=list)
    metadata: ResumeMetadata = Field(default_factory=ResumeMetadata)
