import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from cv_assistant.api.v1.health import router as health_router
from cv_assistant.api.v1.parse import router as parse_router
from cv_assistant.api.v1.chat import router as chat_router
from cv_assistant.api.v1.email import router as email_router
from cv_assistant.core.rate_limit import limiter
from cv_assistant.core.config import settings
from dotenv import load_dotenv

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="CV Assistant API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=settings.cors_allow_origin_regex,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(parse_router, prefix="/v1", tags=["Parse"])
app.include_router(chat_router, prefix="/v1", tags=["Chat"])
app.include_router(email_router, prefix="/v1", tags=["Email"])
