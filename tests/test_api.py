import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from cv_assistant.core.config import settings  # noqa: E402
from cv_assistant.integrations.email import EmailDeliveryError  # noqa: E402
from cv_assistant.main import app  # noqa: E402
from cv_assistant.schemas.email import EmailResult  # noqa: E402

RESUME_TEXT = (
    "Jane Doe\n"
    "Email: jane.doe@example.com | Phone: +1 555 123 4567\n"
    "\n"
    "Technical Skills\n"
    "Programming Languages: Python, Go, Rust\n"
    "\n"
    "Work Experience\n"
    "Senior Engineer, Acme Corp (2020 - Present)\n"
    "Led the payments platform migration.\n"
    "\n"
    "Education\n"
    "BSc Computer Science, University of Toronto\n"
)


class HealthAndParseApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_parse_text(self):
        response = self.client.post("/v1/parse", json={"text": RESUME_TEXT})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["name"], "Jane Doe")
        self.assertEqual(body["email"], "jane.doe@example.com")
        self.assertEqual(body["skills"], ["Python", "Go", "Rust"])
        self.assertIn("parsedAt", body)

    def test_parse_requires_text(self):
        response = self.client.post("/v1/parse", json={"text": "   "})
        self.assertEqual(response.status_code, 400)

    def test_parse_structured(self):
        response = self.client.post("/v1/parse/structured", json={"text": RESUME_TEXT})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(
            [section["title"] for section in body["sections"]],
            ["Work Experience", "Education", "Technical Skills"],
        )
        self.assertTrue(body["metadata"]["hasStructure"])
        self.assertEqual(body["metadata"]["lineCount"], len(RESUME_TEXT.splitlines()))

    def test_parse_file_upload(self):
        response = self.client.post(
            "/v1/parse/file",
            files={"file": ("resume.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["document"]["source_type"], "txt")
        self.assertEqual(body["document"]["filename"], "resume.txt")
        self.assertEqual(body["resume"]["email"], "jane.doe@example.com")

    def test_parse_file_rejects_unknown_type(self):
        response = self.client.post(
            "/v1/parse/file",
            files={"file": ("resume.exe", b"MZ\x00\x00", "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 400)

    def test_parse_file_rejects_oversize_upload(self):
        small_limit = replace(settings, max_upload_bytes=16)
        with patch("cv_assistant.api.v1.parse.settings", small_limit):
            response = self.client.post(
                "/v1/parse/file",
                files={"file": ("resume.txt", RESUME_TEXT.encode("utf-8"), "text/plain")},
            )
        self.assertEqual(response.status_code, 413)


class ChatApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_chat_rule_based(self):
        response = self.client.post(
            "/v1/chat",
            json={"parsedJson": {"skills": ["Python", "Go"]}, "question": "What are my skills?"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"text": "Your skills include: Python, Go", "confidence": 0.9, "source": "rule-based"},
        )

    def test_chat_accepts_parse_output(self):
        parsed = self.client.post("/v1/parse", json={"text": RESUME_TEXT}).json()
        response = self.client.post("/v1/chat", json={"parsedJson": parsed, "question": "What is my email?"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("jane.doe@example.com", response.json()["text"])

    def test_chat_requires_fields(self):
        missing_question = self.client.post("/v1/chat", json={"parsedJson": {"skills": []}})
        self.assertEqual(missing_question.status_code, 400)
        missing_resume = self.client.post("/v1/chat", json={"question": "What are my skills?"})
        self.assertEqual(missing_resume.status_code, 400)


class EmailApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.payload = {"to": "recruiter@example.com", "subject": "My CV", "body": "Hello\nThanks"}

    def test_send_email(self):
        result = EmailResult(success=True, message_id="m-1", provider="MailerSend")
        with patch("cv_assistant.api.v1.email.send_email", return_value=result) as mock_send, patch(
            "cv_assistant.core.security.settings", replace(settings, api_key=None)
        ):
            response = self.client.post("/v1/send-email", json=self.payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "messageId": "m-1", "provider": "MailerSend"})
        mock_send.assert_called_once_with("recruiter@example.com", "My CV", "Hello\nThanks")

    def test_delivery_error_status_is_forwarded(self):
        error = EmailDeliveryError("No email service configured.", code="email_not_configured", status_code=503)
        with patch("cv_assistant.api.v1.email.send_email", side_effect=error), patch(
            "cv_assistant.core.security.settings", replace(settings, api_key=None)
        ):
            response = self.client.post("/v1/send-email", json=self.payload)
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "No email service configured.")

    def test_api_key_required_when_configured(self):
        result = EmailResult(success=True, message_id="m-2", provider="SMTP")
        with patch("cv_assistant.api.v1.email.send_email", return_value=result), patch(
            "cv_assistant.core.security.settings", replace(settings, api_key="secret")
        ):
            unauthorized = self.client.post("/v1/send-email", json=self.payload)
            authorized = self.client.post("/v1/send-email", json=self.payload, headers={"X-API-Key": "secret"})
        self.assertEqual(unauthorized.status_code, 401)
        self.assertEqual(authorized.status_code, 200)


if __name__ == "__main__":
    unittest.main()
