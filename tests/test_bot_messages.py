from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from config.messages import BotMessages
from config.messages import load_bot_messages


class BotMessagesTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "messages.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_no_path_uses_defaults(self):
        messages, warning = load_bot_messages(None)
        self.assertEqual(messages, BotMessages())
        self.assertIsNone(warning)

    def test_missing_file_warns(self):
        messages, warning = load_bot_messages("/nonexistent/messages.yaml")
        self.assertEqual(messages, BotMessages())
        self.assertIn("not found", warning)

    def test_overrides_are_applied(self):
        path = self._write('already_open: "Solo una a la vez."\nconfirm_label: "Vale"\n')
        messages, warning = load_bot_messages(path)
        self.assertIsNone(warning)
        self.assertEqual(messages.already_open, "Solo una a la vez.")
        self.assertEqual(messages.confirm_label, "Vale")
        self.assertEqual(messages.cancel_label, BotMessages().cancel_label)

    def test_unknown_keys_are_reported(self):
        path = self._write("already_open: hola\nnot_a_message: x\n")
        messages, warning = load_bot_messages(path)
        self.assertEqual(messages.already_open, "hola")
        self.assertIn("not_a_message", warning)

    def test_blank_values_keep_defaults(self):
        path = self._write('already_open: ""\n')
        messages, _ = load_bot_messages(path)
        self.assertEqual(messages.already_open, BotMessages().already_open)

    def test_non_mapping_payload_warns(self):
        path = self._write("- just\n- a list\n")
        messages, warning = load_bot_messages(path)
        self.assertEqual(messages, BotMessages())
        self.assertIn("Invalid", warning)


if __name__ == "__main__":
    unittest.main()
