from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

ANSWER_PROVIDER_NAMES = frozenset({"groq", "openai", "cohere"})
EMAIL_PROVIDER_NAMES = frozenset({"mailersend", "brevo", "sendgrid", "smtp"})


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_bytes: int
    email_from: str | None
    email_from_name: str
    email_timeout_s: float
    email_provider_priority: tuple[str, ...]
    mailersend_api_key: str | None
    brevo_api_key: str | None
    sendgrid_api_key: str | None
    smtp_host: str | None
    smtp_port: int
    smtp_user: str | None
    smtp_password: str | None
    smtp_use_tls: bool
    smtp_fallback_ssl: bool
    ai_provider_priority: tuple[str, ...]
    ai_timeout_s: float
    ai_max_retries: int
    groq_api_key: str | None
    groq_model: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str | None
    cohere_api_key: str | None
    cohere_model: str


def load_settings() -> Settings:
    return Settings(
        api_key=_get_env("API_KEY"),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        email_from=_get_env("EMAIL_FROM"),
        email_from_name=_get_env("EMAIL_FROM_NAME", "CV Assistant") or "CV Assistant",
        email_timeout_s=_get_env_float("EMAIL_TIMEOUT_S", 10.0),
        email_provider_priority=tuple(
            name.lower()
            for name in _get_env_list("EMAIL_PROVIDER_PRIORITY", ["mailersend", "brevo", "sendgrid", "smtp"])
        ),
        mailersend_api_key=_get_env("MAILERSEND_API_KEY"),
        brevo_api_key=_get_env("BREVO_API_KEY"),
        sendgrid_api_key=_get_env("SENDGRID_API_KEY"),
        smtp_host=_get_env("SMTP_HOST"),
        smtp_port=_get_env_int("SMTP_PORT", 587),
        smtp_user=_get_env("SMTP_USER"),
        smtp_password=_get_env("SMTP_PASSWORD") or _get_env("SMTP_PASS"),
        smtp_use_tls=_get_env_bool("SMTP_USE_TLS", True),
        smtp_fallback_ssl=_get_env_bool("SMTP_FALLBACK_SSL", True),
        ai_provider_priority=tuple(
            name.lower() for name in _get_env_list("AI_PROVIDER_PRIORITY", ["groq", "openai", "cohere"])
        ),
        ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 20.0),
        ai_max_retries=_get_env_int("AI_MAX_RETRIES", 0),
        groq_api_key=_get_env("GROQ_API_KEY"),
        groq_model=_get_env("GROQ_MODEL", "llama-3.1-8b-instant") or "llama-3.1-8b-instant",
        openai_api_key=_get_env("OPENAI_API_KEY"),
        openai_model=_get_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini",
        openai_base_url=_get_env("OPENAI_BASE_URL"),
        cohere_api_key=_get_env("COHERE_API_KEY"),
        cohere_model=_get_env("COHERE_MODEL", "command-r") or "command-r",
    )


settings = load_settings()

_unknown_ai = set(settings.ai_provider_priority) - ANSWER_PROVIDER_NAMES
if _unknown_ai:
    raise RuntimeError(
        f"AI_PROVIDER_PRIORITY contains unsupported providers: {', '.join(sorted(_unknown_ai))}."
    )

_unknown_email = set(settings.email_provider_priority) - EMAIL_PROVIDER_NAMES
if _unknown_email:
    raise RuntimeError(
        f"EMAIL_PROVIDER_PRIORITY contains unsupported providers: {', '.join(sorted(_unknown_email))}."
    )

__all__ = ["Settings", "load_settings", "settings"]
