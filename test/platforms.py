"""
Platform tests (abstract surface and the rich console adapter).

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured through an in-memory rich Console.
"""

from __future__ import annotations

import io
import unittest
from types import SimpleNamespace
from unittest import TestCase

from rich.console import Console

from commandry import ConsolePlatform, Platform


def capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestPlatform(TestCase):

    def testAbstract(self):
        with self.assertRaises(TypeError):
            Platform()

    def testHooksDefaultToNoop(self):
        class Minimal(Platform):
            def has_permission(self, sender, permission, /):
                return True

            def is_in_required_context(self, sender, /):
                return True

            def send_message(self, sender, message, /):
                pass

        platform = Minimal()
        self.assertIsNone(platform.on_register("a", None))
        self.assertIsNone(platform.on_unregister("a", True))


class TestConsolePlatform(TestCase):

    def testSendMessagePrintsPlainText(self):
        console = capture()
        ConsolePlatform(console).send_message(None, "[bold]hi[/bold] 42")
        self.assertEqual(console.file.getvalue(), "[bold]hi[/bold] 42\n")

    def testPermissionsFromSender(self):
        platform = ConsolePlatform(capture())
        self.assertTrue(platform.has_permission(SimpleNamespace(permissions={"a"}), "a"))
        self.assertFalse(platform.has_permission(SimpleNamespace(permissions={"a"}), "b"))
        self.assertTrue(platform.has_permission(SimpleNamespace(permissions={"*"}), "b"))
        self.assertFalse(platform.has_permission(object(), "a"))

    def testPermissionsCallable(self):
        platform = ConsolePlatform(capture(), permissions=lambda sender, permission: permission == sender)
        self.assertTrue(platform.has_permission("x", "x"))
        self.assertFalse(platform.has_permission("x", "y"))

    def testContext(self):
        platform = ConsolePlatform(capture())
        self.assertTrue(platform.is_in_required_context(object()))
        self.assertFalse(platform.is_in_required_context(SimpleNamespace(in_context=False)))
        platform = ConsolePlatform(capture(), context=lambda sender: sender == "player")
        self.assertTrue(platform.is_in_required_context("player"))
        self.assertFalse(platform.is_in_required_context("console"))

    def testValidation(self):
        with self.assertRaises(TypeError):
            ConsolePlatform("console")
        with self.assertRaises(TypeError):
            ConsolePlatform(capture(), permissions=3)


if __name__ == "__main__":
    unittest.main()
