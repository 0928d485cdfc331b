"""
Commands module behavioral tests (tree building and lookups).

Scope
- Validate Command construction and its collections.
- Validate the tree: unique sibling names, name-only parent references,
  single ownership, depth-first walk.
- Validate the Command.parse() shortcut.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from theseus import Argument, Command, CommandOption


class TestCommand(TestCase):
    """Behavioral tests for Command declarations."""

    def testDefaults(self):
        command = Command("app")
        self.assertEqual(command.name, "app")
        self.assertIsNone(command.descr)
        self.assertIsNone(command.handler)
        self.assertIsNone(command.parent)
        self.assertTrue(command.root)
        self.assertFalse(command.takes_args)
        self.assertFalse(command.has_children)

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("app", handler="run")
        command = Command("app", handler=print)
        self.assertIs(command.handler, print)

    def testChildKeepsParentNameOnly(self):
        child = Command("get")
        root = Command("app", children=[child])
        self.assertEqual(child.parent, "app")
        self.assertFalse(child.root)
        self.assertIs(root.find("get"), child)
        self.assertIsNone(root.find("put"))
        self.assertIn("get", root)

    def testDuplicateSiblingRejectedWithoutCorruption(self):
        root = Command("app", children=[Command("get")])
        orphan = Command("get")
        with self.assertRaises(ValueError):
            root.add_command(orphan)
        self.assertEqual(len(root.children), 1)
        self.assertIsNone(orphan.parent)

    def testChildCannotHaveTwoParents(self):
        child = Command("get")
        Command("app", children=[child])
        with self.assertRaises(ValueError):
            Command("other", children=[child])

    def testCommandCannotBeItsOwnChild(self):
        command = Command("app")
        with self.assertRaises(ValueError):
            command.add_command(command)

    def testOptionCollisionRejected(self):
        command = Command("app", options=[CommandOption("enable", aliases="e")])
        with self.assertRaises(ValueError):
            command.add_option(CommandOption("exit", aliases="e"))
        self.assertEqual(command.options.names, ("enable",))

    def testWalkIsDepthFirst(self):
        root = Command("app", children=[
            Command("get", children=[Command("all")]),
            Command("put"),
        ])
        self.assertEqual([command.name for command in root.walk()], ["app", "get", "all", "put"])

    def testParseShortcut(self):
        command = Command(
            "app",
            options=[CommandOption("times", aliases="t", arguments=Argument(validator=int))],
            arguments=[Argument.zero_or_more("values")],
        )
        result = command.parse(["-t", "3", "--", "a", "b"])
        self.assertIs(result.command, command)
        self.assertEqual(result.value_of_option("times"), "3")
        self.assertEqual(result.values_of("values"), ["a", "b"])

    def testParseShortcutForwardsContextOptions(self):
        command = Command("app", options=[CommandOption("times", arguments=Argument())])
        result = command.parse(["/times:2"], name_prefixes="/", alias_prefixes="+", assign_operators=":")
        self.assertEqual(result.value_of_option("times"), "2")

    def testRepr(self):
        self.assertEqual(repr(Command("app")), "command(name='app', options=option-list(), arguments=argument-list(), children=())")


if __name__ == "__main__":
    unittest.main()
