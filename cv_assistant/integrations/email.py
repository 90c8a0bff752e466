from __future__ import annotations

import html
import json
import logging
import re
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Any, Protocol, Sequence

import httpx

from cv_assistant.core.config import Settings, settings
from cv_assistant.schemas.email import EmailResult, OutgoingEmail

logger = logging.getLogger(__name__)

EMAIL_ADDRESS_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAILERSEND_URL = "https://api.mailersend.com/v1/email"
BREVO_URL = "https://api.brevo.com/v3/smtp/email"
SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailDeliveryError(RuntimeError):
    def __init__(self, message: str, *, code: str = "email_delivery_failed", status_code: int = 502):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class EmailSender(Protocol):
    name: str

    def send(self, message: OutgoingEmail) -> EmailResult: ...


def render_html(body: str) -> str:
    return html.escape(body).replace("\r\n", "\n").replace("\n", "<br>")


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()[:300] or f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    if isinstance(data, dict) and isinstance(data.get("errors"), list) and data["errors"]:
        first = data["errors"][0]
        if isinstance(first, dict) and first.get("message"):
            return str(first["message"])
    return f"HTTP {response.status_code}"


class _HttpApiSender:
    name = ""
    display_name = ""
    url = ""

    def __init__(self, api_key: str, timeout_s: float = 10.0):
        self._api_key = api_key
        self._timeout_s = timeout_s

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, message: OutgoingEmail) -> dict[str, Any]:
        raise NotImplementedError

    def _message_id(self, response: httpx.Response) -> str:
        return response.headers.get("x-message-id") or f"{self.name}-sent"

    def send(self, message: OutgoingEmail) -> EmailResult:
        try:
            with httpx.Client(timeout=self._timeout_s) as client:
                response = client.post(self.url, json=self._payload(message), headers=self._headers())
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"{self.display_name} failed: {exc}") from exc

        if response.status_code >= 400:
            raise EmailDeliveryError(f"{self.display_name} failed: {_error_detail(response)}")
        return EmailResult(success=True, message_id=self._message_id(response), provider=self.display_name)


class MailerSendSender(_HttpApiSender):
    name = "mailersend"
    display_name = "MailerSend"
    url = MAILERSEND_URL

    def _payload(self, message: OutgoingEmail) -> dict[str, Any]:
        return {
            "from": {"email": message.sender_email, "name": message.sender_name},
            "to": [{"email": message.to}],
            "subject": message.subject,
            "text": message.text,
            "html": message.html,
        }


class BrevoSender(_HttpApiSender):
    name = "brevo"
    display_name = "Brevo"
    url = BREVO_URL

    def _headers(self) -> dict[str, str]:
        return {
            "api-key": self._api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _payload(self, message: OutgoingEmail) -> dict[str, Any]:
        return {
            "sender": {"email": message.sender_email, "name": message.sender_name},
            "to": [{"email": message.to}],
            "subject": message.subject,
            "textContent": message.text,
            "htmlContent": message.html,
        }

    def _message_id(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if isinstance(data, dict) and data.get("messageId"):
            return str(data["messageId"])
        return "brevo-sent"


class SendGridSender(_HttpApiSender):
    name = "sendgrid"
    display_name = "SendGrid"
    url = SENDGRID_URL

    def _payload(self, message: OutgoingEmail) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.sender_email, "name": message.sender_name},
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text},
                {"type": "text/html", "value": message.html},
            ],
        }


class SmtpSender:
    name = "smtp"
    display_name = "SMTP"

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        fallback_ssl: bool = True,
        timeout_s: float = 15.0,
    ):
        self._host = host
        self._port = port
        self._user = user
        # Gmail app passwords are often copied with spaces every 4 chars.
        self._password = password.replace(" ", "") if password else None
        self._use_tls = use_tls
        self._fallback_ssl = fallback_ssl
        self._timeout_s = timeout_s

    def _login_if_needed(self, server: smtplib.SMTP) -> None:
        if self._user and self._password:
            server.login(self._user, self._password)

    def _send_with(self, port: int, use_tls: bool, msg: EmailMessage, context: ssl.SSLContext) -> None:
        if use_tls:
            with smtplib.SMTP(self._host, port, timeout=self._timeout_s) as server:
                server.starttls(context=context)
                self._login_if_needed(server)
                server.send_message(msg)
            return

        with smtplib.SMTP_SSL(self._host, port, context=context, timeout=self._timeout_s) as server:
            self._login_if_needed(server)
            server.send_message(msg)

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        sender = message.sender_email or self._user or ""
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = formataddr((message.sender_name, sender))
        msg["To"] = message.to
        msg["Message-ID"] = make_msgid()
        msg.set_content(message.text)
        msg.add_alternative(message.html, subtype="html")
        return msg

    def send(self, message: OutgoingEmail) -> EmailResult:
        msg = self._build_message(message)
        context = ssl.create_default_context()
        primary_mode = "STARTTLS" if self._use_tls else "SSL"
        try:
            self._send_with(port=self._port, use_tls=self._use_tls, msg=msg, context=context)
            return EmailResult(success=True, message_id=msg["Message-ID"], provider=self.display_name)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception(
                "Email via SMTP failed (host=%s port=%s mode=%s): %s",
                self._host,
                self._port,
                primary_mode,
                exc,
            )
            if not self._fallback_ssl:
                raise EmailDeliveryError(f"SMTP failed: {exc}") from exc

        fallback_port = 465 if self._use_tls else 587
        fallback_tls = not self._use_tls
        fallback_mode = "STARTTLS" if fallback_tls else "SSL"
        try:
            self._send_with(port=fallback_port, use_tls=fallback_tls, msg=msg, context=context)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception(
                "Email SMTP fallback failed (host=%s port=%s mode=%s): %s",
                self._host,
                fallback_port,
                fallback_mode,
                exc,
            )
            raise EmailDeliveryError(f"SMTP failed: {exc}") from exc

        logger.info(
            "Email sent with SMTP fallback (host=%s port=%s mode=%s).",
            self._host,
            fallback_port,
            fallback_mode,
        )
        return EmailResult(success=True, message_id=msg["Message-ID"], provider=self.display_name)


def _build_sender(name: str, config: Settings) -> EmailSender | None:
    if name == "mailersend" and config.mailersend_api_key:
        return MailerSendSender(config.mailersend_api_key, timeout_s=config.email_timeout_s)
    if name == "brevo" and config.brevo_api_key:
        return BrevoSender(config.brevo_api_key, timeout_s=config.email_timeout_s)
    if name == "sendgrid" and config.sendgrid_api_key:
        return SendGridSender(config.sendgrid_api_key, timeout_s=config.email_timeout_s)
    if name == "smtp" and config.smtp_host:
        return SmtpSender(
            host=config.smtp_host,
            port=config.smtp_port,
            user=config.smtp_user,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
            fallback_ssl=config.smtp_fallback_ssl,
        )
    return None


def build_email_senders(config: Settings) -> list[EmailSender]:
    """Configured senders, in `EMAIL_PROVIDER_PRIORITY` order."""
    senders: list[EmailSender] = []
    for name in config.email_provider_priority:
        sender = _build_sender(name, config)
        if sender is not None:
            senders.append(sender)
    return senders


def send_email(
    to: str,
    subject: str,
    body: str,
    *,
    config: Settings | None = None,
    senders: Sequence[EmailSender] | None = None,
) -> EmailResult:
    """Deliver a plain-text email (with an HTML rendering) through the first configured sender.

    A failure of that sender is reported as is; later senders in the priority
    list are not tried.
    """
    resolved = config or settings
    recipient = (to or "").strip()
    if not recipient or not (subject or "").strip() or not (body or "").strip():
        raise EmailDeliveryError(
            "Missing required fields: to, subject, body.",
            code="missing_fields",
            status_code=400,
        )
    if not EMAIL_ADDRESS_RE.match(recipient):
        raise EmailDeliveryError("Invalid email address", code="invalid_recipient", status_code=400)

    available = list(senders) if senders is not None else build_email_senders(resolved)
    if not available:
        raise EmailDeliveryError(
            "No email service configured. Please set up MailerSend, Brevo, SendGrid, or SMTP credentials.",
            code="email_not_configured",
            status_code=503,
        )

    sender = available[0]
    message = OutgoingEmail(
        to=recipient,
        subject=subject.strip(),
        text=body,
        html=render_html(body),
        sender_email=resolved.email_from,
        sender_name=resolved.email_from_name,
    )
    result = sender.send(message)
    logger.info(
        json.dumps(
            {
                "event": "email_sent",
                "provider": result.provider,
                "message_id": result.message_id,
                "subject_len": len(message.subject),
                "body_len": len(body),
            }
        )
    )
    return result
