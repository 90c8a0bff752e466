from .chat import ERROR_SOURCE, RULE_BASED_SOURCE, ChatRequest, ChatResponse
from .email import EmailRequest, EmailResult, OutgoingEmail
from .resume import ParsedResume, ResumeMetadata, ResumeSection, StructuredResume

__all__ = [
    "ParsedResume",
    "ResumeSection",
    "ResumeMetadata",
    "StructuredResume",
    "ChatRequest",
    "ChatResponse",
    "RULE_BASED_SOURCE",
    "ERROR_SOURCE",
    "EmailRequest",
    "OutgoingEmail",
    "EmailResult",
]
