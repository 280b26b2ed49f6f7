import os
import unittest
from unittest.mock import patch

import support  # noqa: F401

from resume_builder.ai.config import load_ai_config
from resume_builder.services import ai_service


class AiSwitchTests(unittest.TestCase):
    def test_ai_enabled_flag_is_read_from_config(self):
        env = {"AI_PROVIDER": "openai", "OPENAI_API_KEY": "sk-live-key"}
        with patch.dict(os.environ, {**env, "AI_ENABLED": "off"}):
            self.assertFalse(load_ai_config().enabled)
            self.assertFalse(ai_service.ai_enabled())
        with patch.dict(os.environ, {**env, "AI_ENABLED": "yes"}):
            self.assertTrue(load_ai_config().enabled)
            self.assertTrue(ai_service.ai_enabled())

    def test_placeholder_or_missing_key_disables_ai(self):
        with patch.dict(os.environ, {"AI_ENABLED": "1", "AI_PROVIDER": "openai", "OPENAI_API_KEY": "your_key_here"}):
            self.assertFalse(ai_service.ai_enabled())
        with patch.dict(os.environ, {"AI_ENABLED": "1", "AI_PROVIDER": "claude", "OPENAI_API_KEY": "sk-live-key"}):
            self.assertFalse(ai_service.ai_enabled())

    def test_completions_short_circuit_when_disabled(self):
        with patch.object(ai_service, "_client") as client:
            self.assertIsNone(ai_service.analyze_with_ai("Python developer", "resume"))
            self.assertIsNone(ai_service.json_completion(system_prompt="s", user_prompt="u"))
        client.assert_not_called()


if __name__ == "__main__":
    unittest.main()
