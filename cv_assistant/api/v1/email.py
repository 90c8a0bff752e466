from fastapi import APIRouter, Header, HTTPException, Request

from cv_assistant.core.rate_limit import rate_limit
from cv_assistant.core.security import check_api_key
from cv_assistant.integrations.email import EmailDeliveryError, send_email
from cv_assistant.schemas.email import EmailRequest, EmailResult

router = APIRouter()


@router.post("/send-email", response_model=EmailResult)
@rate_limit("10/minute")
def send_email_route(
    request: Request,
    payload: EmailRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    _ = request
    check_api_key(x_api_key)
    try:
        return send_email(payload.to, payload.subject, payload.body)
    except EmailDeliveryError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
