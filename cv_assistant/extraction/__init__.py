from .assembler import parse_resume_text, parse_structured_resume
from .contact import extract_email, extract_name, extract_phone
from .experience import extract_jobs
from .fields import extract_certifications, extract_education, extract_summary
from .sections import extract_sections, find_section, find_sections
from .skills import extract_skills

__all__ = [
    "parse_resume_text",
    "parse_structured_resume",
    "extract_name",
    "extract_email",
    "extract_phone",
    "extract_skills",
    "extract_jobs",
    "extract_education",
    "extract_certifications",
    "extract_summary",
    "extract_sections",
    "find_section",
    "find_sections",
]
