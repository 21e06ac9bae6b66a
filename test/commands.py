"""
Command model tests (construction, arguments, subcommands, usage).

Scope
- Validate metadata defaults and shape checks.
- Validate argument ordering rules (infinite last, unique names).
- Validate subcommand composition and the decorator forms.
- Validate generated usage lines.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from commandry import (
    Argument,
    Command,
    DuplicateArgumentError,
    DuplicateLabelError,
    InfiniteArgumentError,
    InvalidLabelError,
    command,
    requirement,
)


def dummy(sender, arguments):
    """Do nothing, loudly."""
    return "ran"


class TestConstruction(TestCase):
    """Metadata defaults and validation."""

    def testDefaultsFromHandler(self):
        cmd = Command(dummy)
        self.assertEqual(cmd.name, "dummy")
        self.assertEqual(cmd.description, "Do nothing, loudly.")
        self.assertEqual(cmd.usage, "")
        self.assertEqual(cmd.permission, "")
        self.assertFalse(cmd.game_only)
        self.assertTrue(cmd.enabled)
        self.assertIs(cmd.handler, dummy)

    def testExplicitMetadata(self):
        cmd = Command(dummy, "Kick", aliases=["k"], description=" x ", permission="mod.kick", game_only=True)
        self.assertEqual(cmd.name, "Kick")
        self.assertEqual(cmd.aliases, ["k"])
        self.assertEqual(cmd.description, "x")
        self.assertEqual(cmd.all_labels(), ["Kick", "k"])
        self.assertTrue(cmd.game_only)

    def testNameMustBeSingleSegment(self):
        with self.assertRaises(InvalidLabelError):
            Command(dummy, "a.b")
        with self.assertRaises(InvalidLabelError):
            Command(dummy, "9lives")

    def testAliasCollision(self):
        with self.assertRaises(DuplicateLabelError):
            Command(dummy, "kick", aliases=["KICK"])
        with self.assertRaises(DuplicateLabelError):
            Command(dummy, "kick", aliases=["k", "k"])

    def testHandlerOrExecuteRequired(self):
        with self.assertRaises(TypeError):
            Command(name="x")
        with self.assertRaises(TypeError):
            Command("not callable", "x")

    def testExecuteOverride(self):
        class Ping(Command):
            def execute(self, sender, arguments, /):
                return "pong"

        self.assertEqual(Ping(name="ping")(None, None), "pong")

    def testTypeChecks(self):
        with self.assertRaises(TypeError):
            Command(dummy, permission=3)
        with self.assertRaises(TypeError):
            Command(dummy, game_only="yes")
        with self.assertRaises(TypeError):
            Command(dummy, aliases="k")

    def testEnabledToggle(self):
        cmd = Command(dummy)
        cmd.enabled = False
        self.assertFalse(cmd.enabled)
        with self.assertRaises(TypeError):
            cmd.enabled = 0

    def testMirroredListsAreCopies(self):
        cmd = Command(dummy, arguments=[("x", str)])
        cmd.arguments.append(Argument("y", str))
        self.assertEqual(len(cmd.arguments), 1)

    def testExecuteCallsHandler(self):
        self.assertEqual(Command(dummy).execute(None, None), "ran")


class TestArgumentRules(TestCase):
    """Argument ordering and arity."""

    def testArity(self):
        cmd = Command(dummy, arguments=[("a", str)], optional_arguments=[("b", int), ("c", int)])
        self.assertEqual(cmd.arity, (1, 3))
        self.assertFalse(cmd.infinite)

    def testArityWithInfinite(self):
        cmd = Command(dummy, arguments=[("a", str), ("rest", "infinite")])
        self.assertEqual(cmd.arity, (2, math.inf))
        self.assertTrue(cmd.infinite)

    def testNothingMayFollowInfinite(self):
        with self.assertRaises(InfiniteArgumentError):
            Command(dummy, arguments=[("rest", "infinite"), ("a", str)])
        with self.assertRaises(InfiniteArgumentError):
            Command(dummy, arguments=[("rest", "infinite")], optional_arguments=[("a", str)])

    def testDuplicateArgumentNames(self):
        with self.assertRaises(DuplicateArgumentError):
            Command(dummy, arguments=[("a", str)], optional_arguments=[("a", int)])

    def testAddArgumentForms(self):
        cmd = Command(dummy)
        cmd.add_argument("a", int).add_optional_argument(Argument("b", str))
        cmd.add_optional_argument("c", bool, completer=lambda context: ["x"])
        self.assertEqual([argument.canonical_name for argument in cmd.arguments], ["a:int"])
        self.assertEqual([argument.canonical_name for argument in cmd.optional_arguments], ["b:str", "c:bool"])
        self.assertIsNotNone(cmd.optional_arguments[1].completer)

    def testBadArgumentShape(self):
        with self.assertRaises(TypeError):
            Command(dummy, arguments=[("a",)])


class TestComposition(TestCase):
    """Subcommands, requirements and decorators."""

    def testSubcommandDecorator(self):
        @command(aliases=["w"])
        def warp(sender, arguments):
            pass

        @warp.command(permission="warp.set")
        def home(sender, arguments):
            pass

        self.assertIsInstance(warp, Command)
        self.assertEqual(warp.subcommands, [home])
        self.assertEqual(home.permission, "warp.set")

    def testDirectSubcommand(self):
        parent = Command(dummy, "parent")
        child = parent.command(dummy, "child")
        self.assertEqual(parent.subcommands, [child])

    def testSubcommandLabelCollision(self):
        parent = Command(dummy, "parent", subcommands=[Command(dummy, "a", aliases=["b"])])
        with self.assertRaises(DuplicateLabelError):
            parent.add_subcommand(Command(dummy, "B"))

    def testSelfSubcommandRejected(self):
        cmd = Command(dummy)
        with self.assertRaises(ValueError):
            cmd.add_subcommand(cmd)

    def testRequirements(self):
        cmd = Command(dummy, requirements=[requirement(lambda sender: True, "nope")])
        self.assertEqual(len(cmd.requirements), 1)
        with self.assertRaises(TypeError):
            cmd.add_requirement(lambda sender: True)

    def testDirectCommandCall(self):
        cmd = command(dummy, "other")
        self.assertEqual(cmd.name, "other")

    def testCommandDecoratorRejectsCommands(self):
        with self.assertRaises(TypeError):
            command(Command(dummy))


class TestUsage(TestCase):
    """Generated usage lines."""

    def testBare(self):
        self.assertEqual(Command(dummy).usage_for("dummy"), "/dummy")

    def testArguments(self):
        cmd = Command(dummy, arguments=[("arg1", str), ("arg2", int)])
        self.assertEqual(cmd.usage_for("dummy"), "/dummy <arg1:str> <arg2:int>")

    def testSubcommandsAndArguments(self):
        cmd = Command(
            dummy,
            arguments=[("req", str)],
            optional_arguments=[("opt", str)],
            subcommands=[Command(dummy, "x"), Command(dummy, "y")],
        )
        self.assertEqual(cmd.usage_for("dummy"), "/dummy <x|y>|<req:str> [opt:str]")

    def testNestedLabelAndFilter(self):
        cmd = Command(dummy, subcommands=[Command(dummy, "x"), Command(dummy, "y", permission="p")])
        self.assertEqual(
            cmd.usage_for("outer.dummy", lambda subcommand: not subcommand.permission),
            "/outer dummy <x>",
        )


if __name__ == "__main__":
    unittest.main()
