from __future__ import annotations

import codecs
import hashlib
from io import BytesIO
from zipfile import BadZipFile, ZipFile

from .models import DocumentText

SUPPORTED_EXTENSIONS = ("txt", "md", "pdf", "docx")

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
_TEXT_ENCODINGS = ("utf-8", "utf-16", "latin-1")


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def _compute_doc_id(text: str, filename: str) -> str:
    seed = text if text.strip() else filename
    digest = hashlib.sha256(seed.encode("utf-8", errors="ignore")).hexdigest()
    return digest[:16]


def _is_docx_payload(content: bytes) -> bool:
    if not any(content.startswith(magic) for magic in ZIP_MAGICS):
        return False
    try:
        with ZipFile(BytesIO(content)) as archive:
            return any(name.startswith("word/") for name in archive.namelist())
    except BadZipFile:
        return False


def _decode_text(content: bytes) -> tuple[str, list[str]]:
    # Without a BOM, utf-16 would accept most even-length latin-1 files as garbage.
    has_bom = content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE))
    encodings = _TEXT_ENCODINGS if has_bom else tuple(e for e in _TEXT_ENCODINGS if e != "utf-16")
    for encoding in encodings:
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        return text, [] if encoding == "utf-8" else [f"Decoded as {encoding}."]
    raise ValueError("Unable to decode text file.")


def _parse_pdf(content: bytes) -> tuple[str, list[str]]:
    from pypdf import PdfReader

    if not content.startswith(PDF_MAGIC):
        raise ValueError("File signature does not match .pdf content.")
    try:
        reader = PdfReader(BytesIO(content))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except Exception as exc:
        raise ValueError("Unable to extract text from this PDF file.") from exc

    text_parts = [page for page in pages if page]
    warnings = [] if text_parts else ["No extractable text found in PDF."]
    return "\n\n".join(text_parts), warnings


def _parse_docx(content: bytes) -> tuple[str, list[str]]:
    from docx import Document

    if not _is_docx_payload(content):
        raise ValueError("File signature does not match .docx content.")
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise ValueError("Unable to extract text from this DOCX file.") from exc

    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    warnings = [] if paragraphs else ["No extractable text found in DOCX."]
    return "\n".join(paragraphs), warnings


def extract_document_text(filename: str, content: bytes) -> DocumentText:
    """Plain text of an uploaded resume file.

    Raises ValueError for unsupported extensions, mismatched file signatures and
    files the underlying reader cannot open.
    """
    ext = _extension(filename or "")
    if ext == "doc":
        raise ValueError("Legacy .doc is not supported. Convert to .docx.")
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported file type '.{ext}'. Supported types: .txt, .md, .pdf, .docx"
            if ext
            else "File name has no extension. Supported types: .txt, .md, .pdf, .docx"
        )

    if ext == "pdf":
        source_type = "pdf"
        text, warnings = _parse_pdf(content)
    elif ext == "docx":
        source_type = "docx"
        text, warnings = _parse_docx(content)
    else:
        source_type = "txt"
        text, warnings = _decode_text(content)

    return DocumentText(
        doc_id=_compute_doc_id(text=text, filename=filename),
        filename=filename,
        source_type=source_type,
        text=text,
        warnings=warnings,
    )
