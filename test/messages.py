"""
Message template tests (defaults, host overrides, token substitution).

Conventions
- Test method names follow CamelCase per project convention.
- Host-level overrides are simulated by patching __main__.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase, mock

from commandry import DEFAULTS, Messages


class TestMessages(TestCase):

    def testDefaults(self):
        messages = Messages()
        self.assertEqual(dict(messages.templates), dict(DEFAULTS))
        self.assertEqual(messages["disabled"], "This command is currently disabled.")

    def testKeywordOverride(self):
        messages = Messages(disabled="Nope.")
        self.assertEqual(messages["disabled"], "Nope.")
        self.assertEqual(messages["no_permission"], DEFAULTS["no_permission"])

    def testHostOverride(self):
        with mock.patch.object(sys.modules["__main__"], "__messages__", {"disabled": "Off."}, create=True):
            self.assertEqual(Messages()["disabled"], "Off.")
            self.assertEqual(Messages(disabled="On.")["disabled"], "On.")

    def testUnknownKeyRejected(self):
        with self.assertRaises(ValueError):
            Messages(unknown="x")

    def testTemplateValidation(self):
        with self.assertRaises(TypeError):
            Messages(disabled=3)
        with self.assertRaises(ValueError):
            Messages(disabled="  ")

    def testFormat(self):
        messages = Messages()
        self.assertEqual(
            messages.format("argument_too_long", arg="message", max=10),
            "Argument message exceeds maximum length of 10 characters.",
        )
        self.assertEqual(
            messages.format("requirement_failed", requirement="InParty"),
            "The requirement InParty was not met.",
        )

    def testUnknownTokensLeftUntouched(self):
        messages = Messages(disabled="%who% cannot %verb%.")
        self.assertEqual(messages.format("disabled", who="You"), "You cannot %verb%.")

    def testTemplatesAreReadOnly(self):
        with self.assertRaises(TypeError):
            Messages().templates["disabled"] = "x"


if __name__ == "__main__":
    unittest.main()
