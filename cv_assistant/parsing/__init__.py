from .models import DocumentText
from .parse import SUPPORTED_EXTENSIONS, extract_document_text

__all__ = ["DocumentText", "SUPPORTED_EXTENSIONS", "extract_document_text"]
