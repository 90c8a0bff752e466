from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, Field

from cv_assistant.core.config import settings
from cv_assistant.core.rate_limit import rate_limit
from cv_assistant.extraction import parse_resume_text, parse_structured_resume
from cv_assistant.parsing import SUPPORTED_EXTENSIONS, DocumentText, extract_document_text
from cv_assistant.schemas.resume import ParsedResume, StructuredResume

router = APIRouter()

_READ_CHUNK_BYTES = 1024 * 64


class ParseRequest(BaseModel):
    text: str = Field(default="", max_length=200_000)


class ParseFileResponse(BaseModel):
    document: DocumentText
    resume: ParsedResume


def _require_text(text: str) -> str:
    if not text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required.")
    return text


@router.post("/parse", response_model=ParsedResume)
@rate_limit()
async def parse_text(request: Request, payload: ParseRequest):
    _ = request
    return parse_resume_text(_require_text(payload.text))


@router.post("/parse/structured", response_model=StructuredResume)
@rate_limit()
async def parse_structured(request: Request, payload: ParseRequest):
    _ = request
    return parse_structured_resume(_require_text(payload.text))


@router.post("/parse/file", response_model=ParseFileResponse)
@rate_limit()
async def parse_file(request: Request, file: UploadFile = File(...)):
    _ = request
    filename = file.filename or "uploaded-file"

    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(SUPPORTED_EXTENSIONS))}.",
        )

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    try:
        document = extract_document_text(filename=filename, content=b"".join(chunks))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return ParseFileResponse(document=document, resume=parse_resume_text(document.text))
