import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_assistant.core.config import load_settings
from cv_assistant.core.config.extraction import (
    ExtractionLimits,
    get_extraction_config,
    get_extraction_limits,
    get_extraction_value,
)


class ExtractionConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_extraction_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_extraction_value("skills.max_results"), 30)
        self.assertEqual(get_extraction_value("raw.max_chars"), 4000)
        self.assertEqual(get_extraction_value("skills.unknown", "fallback"), "fallback")
        self.assertIsNone(get_extraction_value(""))

    def test_limits_match_yaml(self):
        limits = get_extraction_limits()
        self.assertEqual(limits, ExtractionLimits())
        self.assertEqual(limits.skills_min_results, 8)
        self.assertEqual(limits.job_description_max_chars, 250)


class SettingsTests(unittest.TestCase):
    def test_provider_lists_are_normalized(self):
        env = {
            "AI_PROVIDER_PRIORITY": "Cohere, groq",
            "EMAIL_PROVIDER_PRIORITY": "SMTP,brevo",
            "SMTP_PASSWORD": "",
            "SMTP_PASS": "legacy-secret",
            "SMTP_PORT": "not-a-number",
        }
        with patch.dict(os.environ, env):
            config = load_settings()
        self.assertEqual(config.ai_provider_priority, ("cohere", "groq"))
        self.assertEqual(config.email_provider_priority, ("smtp", "brevo"))
        self.assertEqual(config.smtp_password, "legacy-secret")
        self.assertEqual(config.smtp_port, 587)

    def test_defaults(self):
        with patch.dict(os.environ, {"EMAIL_FROM_NAME": "", "RATE_LIMIT": ""}):
            config = load_settings()
        self.assertEqual(config.email_from_name, "CV Assistant")
        self.assertEqual(config.rate_limit, "60/minute")


if __name__ == "__main__":
    unittest.main()
