from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .resume import ParsedResume

RULE_BASED_SOURCE = "rule-based"
ERROR_SOURCE = "error"


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    parsed: ParsedResume | None = Field(
        default=None,
        validation_alias=AliasChoices("parsedJson", "parsedResume", "parsed"),
    )
    question: str = Field(default="", max_length=2000)
    use_external_model: bool = Field(
        default=False,
        validation_alias=AliasChoices("useExternalModel", "useGroq", "use_external_model"),
    )


class ChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    source: str = RULE_BASED_SOURCE
