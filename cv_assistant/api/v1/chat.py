from fastapi import APIRouter, HTTPException, Request, status

from cv_assistant.core.rate_limit import rate_limit
from cv_assistant.schemas.chat import ChatRequest, ChatResponse
from cv_assistant.services.chat_service import generate_answer

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
@rate_limit()
async def chat(request: Request, payload: ChatRequest):
    _ = request
    if payload.parsed is None or not payload.question.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: parsedJson and question.",
        )
    return await generate_answer(
        payload.parsed,
        payload.question,
        use_external_model=payload.use_external_model,
    )
