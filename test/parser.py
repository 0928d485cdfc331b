"""
Parser behavioral tests (tokens → ParseResult or ParseError).

Scope
- Validate the reference scenarios (values after `--`, validator failures,
  literal values after `--`, unrecognized commands, assigned value counts).
- Validate default-rescue, defaults synthesis, required options, repeated and
  assign-only options, help/version short-circuits, deprecation warnings.
- Validate determinism, failure locality and that declarations are never
  modified by parsing.

Conventions
- Test method names follow CamelCase per project convention.
- Trees are rebuilt per test; results are compared structurally.
"""

from __future__ import annotations

import unittest
import warnings
from unittest import TestCase

from theseus import (
    Argument,
    Command,
    CommandOption,
    Context,
    Help,
    Parser,
    ParseResult,
    Suggester,
    ErrorKind,
    InvalidArgumentError,
    InvalidArgumentCountError,
    InvalidExpressionError,
    UnrecognizedOptionError,
    UnrecognizedCommandError,
    MissingOptionError,
    DeprecatedArgumentWarning,
    parse,
)


def _times():
    return Command(
        "repeat",
        options=[CommandOption("times", aliases="t", required=True, arguments=Argument(validator=int))],
        arguments=[Argument.one_or_more("values")],
    )


class TestScenarios(TestCase):
    """Reference scenarios of the resolution engine."""

    def testValuesAfterEndOfOptions(self):
        result = parse(Context(_times()), ["--times", "2", "--", "one", "two"])
        self.assertEqual(result.value_of_option("times"), "2")
        self.assertEqual(result.values_of("values"), ["one", "two"])

    def testValidatorFailure(self):
        with self.assertRaises(InvalidArgumentError) as context:
            parse(Context(_times()), ["--times", "abc", "one"])
        self.assertEqual(context.exception.value, "abc")
        self.assertIs(context.exception.kind, ErrorKind.INVALID_ARGUMENT)

    def testLiteralValuesAfterEndOfOptions(self):
        root = Command(
            "app",
            options=[CommandOption("enable", aliases="e")],
            arguments=[Argument.zero_or_more("rest")],
        )
        result = parse(Context(root), ["--enable", "--", "--not-an-option"])
        self.assertIn("enable", result)
        self.assertIn("e", result)
        self.assertEqual(result.values_of("rest"), ["--not-an-option"])

    def testUnrecognizedCommandWithSuggestion(self):
        root = Command("root", children=[Command("get")])
        with self.assertRaises(UnrecognizedCommandError) as context:
            parse(Context(root), ["gett"])
        error = context.exception
        self.assertEqual(error.name, "gett")
        self.assertIs(error.result.command, root)
        suggestions = error.suggestions(Suggester())
        self.assertEqual([suggestion.name for suggestion in suggestions], ["get"])
        self.assertGreaterEqual(suggestions[-1].similarity, 0.75)
        self.assertEqual(error.hint(), "did you mean `get`?")

    def testAssignedValueCounts(self):
        root = Command("app", options=[CommandOption("range", arguments=Argument(count=(1, 2)))])
        result = parse(Context(root), ["--range=1,2"])
        self.assertEqual(result.values_of_option("range"), ["1", "2"])
        with self.assertRaises(InvalidArgumentCountError):
            parse(Context(root), ["--range=1,2,3"])


class TestOptions(TestCase):
    """Option resolution and binding."""

    def testAliasResolvesToDeclaredName(self):
        result = parse(Context(_times()), ["-t", "3", "x"])
        self.assertEqual(result.options.names, ("times",))
        self.assertEqual(result.value_of_option("t"), "3")
        self.assertEqual(result.values_of("values"), ["x"])

    def testUnrecognizedOption(self):
        with self.assertRaises(UnrecognizedOptionError) as context:
            parse(Context(_times()), ["--tims", "3", "x"])
        error = context.exception
        self.assertEqual((error.prefix, error.name), ("--", "tims"))
        self.assertEqual(error.hint(), "did you mean `--times`?")

    def testMissingRequiredOption(self):
        with self.assertRaises(MissingOptionError) as context:
            parse(Context(_times()), ["x"])
        self.assertEqual(context.exception.name, "times")
        self.assertEqual(context.exception.result.values_of("values"), ["x"])

    def testLastOptionArgumentAbsorbsValuesBeforeEndOfOptions(self):
        root = Command(
            "app",
            options=[CommandOption("numbers", arguments=Argument.one_or_more())],
            arguments=[Argument.zero_or_more("rest")],
        )
        result = parse(Context(root), ["--numbers", "1", "2", "3", "--", "hello", "world"])
        self.assertEqual(result.values_of_option("numbers"), ["1", "2", "3"])
        self.assertEqual(result.values_of("rest"), ["hello", "world"])

    def testAbsorbedValuesAreCountChecked(self):
        root = Command(
            "app",
            options=[CommandOption("number", arguments=Argument())],
            arguments=[Argument.zero_or_more("rest")],
        )
        with self.assertRaises(InvalidArgumentCountError):
            parse(Context(root), ["--number", "1", "2", "--", "x"])

    def testOptionWithoutValuesRejectsAssignedValues(self):
        root = Command("app", options=[CommandOption("enable")])
        with self.assertRaises(InvalidArgumentCountError):
            parse(Context(root), ["--enable=yes"])

    def testAssignedValuesOnlyReachTheirOption(self):
        root = Command(
            "app",
            options=[CommandOption("name", arguments=Argument())],
            arguments=[Argument.zero_or_more("rest")],
        )
        result = parse(Context(root), ["--name=a", "b"])
        self.assertEqual(result.value_of_option("name"), "a")
        self.assertEqual(result.values_of("rest"), ["b"])

    def testAssignOnlyOptionRejectsSpacedValues(self):
        root = Command("app", options=[CommandOption("token", assign=True, arguments=Argument())])
        self.assertEqual(parse(Context(root), ["--token=abc"]).value_of_option("token"), "abc")
        with self.assertRaises(InvalidArgumentError) as context:
            parse(Context(root), ["--token", "abc"])
        self.assertEqual(context.exception.value, "abc")

    def testRepeatedOptionRejected(self):
        root = Command("app", options=[CommandOption("enable")])
        with self.assertRaises(InvalidArgumentCountError):
            parse(Context(root), ["--enable", "--enable"])

    def testMultipleOptionMergesValues(self):
        root = Command("app", options=[CommandOption("include", aliases="I", multiple=True, arguments=Argument())])
        result = parse(Context(root), ["--include", "a", "-I", "b", "--include=c"])
        self.assertEqual(result.values_of_option("include"), ["a", "b", "c"])

    def testValuesBeforeSecondEndOfOptionsWithoutReceiver(self):
        root = Command("app", arguments=[Argument.zero_or_more("rest")])
        with self.assertRaises(InvalidArgumentError) as context:
            parse(Context(root), ["a", "--", "b"])
        self.assertEqual(context.exception.value, "a")

    def testLaterEndOfOptionsIsALiteralValue(self):
        root = Command("app", arguments=[Argument.zero_or_more("rest")])
        result = parse(Context(root), ["--", "a", "--", "b"])
        self.assertEqual(result.values_of("rest"), ["a", "--", "b"])

    def testLaterEndOfOptionsBindsToLeadingPositional(self):
        root = Command("app", arguments=[Argument("first"), Argument.zero_or_more("rest")])
        result = parse(Context(root), ["--", "--", "x"])
        self.assertEqual(result.value_of("first"), "--")
        self.assertEqual(result.values_of("rest"), ["x"])

    def testLaterEndOfOptionsCountsTowardsRescue(self):
        root = Command("copy", arguments=[Argument("mode", default="fast"), Argument("source"), Argument("target")])
        result = parse(Context(root), ["--", "--", "a", "b"])
        self.assertEqual(
            [(argument.name, argument.value) for argument in result.arguments],
            [("mode", "--"), ("source", "a"), ("target", "b")],
        )

    def testMalformedExpression(self):
        with self.assertRaises(InvalidExpressionError) as context:
            parse(Context(_times()), ["--times=1,,2"])
        self.assertIsNone(context.exception.result)


class TestDefaults(TestCase):
    """Default values and the default-rescue rule."""

    def _range(self):
        return Command("app", options=[
            CommandOption("range", arguments=[Argument("min", default="0"), Argument("max")]),
        ])

    def testRescueWhenValuesAreScarce(self):
        result = parse(Context(self._range()), ["--range", "20"])
        option = result.get_option("range")
        self.assertEqual(option.arguments.value_of("min"), "0")
        self.assertEqual(option.arguments.value_of("max"), "20")

    def testNoRescueWhenValuesSuffice(self):
        result = parse(Context(self._range()), ["--range", "5", "20"])
        self.assertEqual(result.values_of_option("range"), ["5", "20"])

    def testRescueWithAssignedValues(self):
        result = parse(Context(self._range()), ["--range=20"])
        self.assertEqual(result.values_of_option("range"), ["0", "20"])

    def testUninvokedOptionGetsItsDefaults(self):
        root = Command("app", options=[CommandOption("level", arguments=Argument(default="1"))])
        for _ in range(3):
            result = parse(Context(root), [])
            self.assertEqual(result.value_of_option("level"), "1")

    def testOptionWithoutValuesKeepsDefaults(self):
        root = Command("app", options=[CommandOption("level", arguments=Argument(default="1"))])
        self.assertEqual(parse(Context(root), ["--level"]).value_of_option("level"), "1")
        self.assertEqual(parse(Context(root), ["--level", "3"]).value_of_option("level"), "3")

    def testPositionalRescue(self):
        root = Command("copy", arguments=[Argument("mode", default="fast"), Argument("source"), Argument("target")])
        result = parse(Context(root), ["a", "b"])
        self.assertEqual(
            [(argument.name, argument.value) for argument in result.arguments],
            [("mode", "fast"), ("source", "a"), ("target", "b")],
        )
        result = parse(Context(root), ["slow", "a", "b"])
        self.assertEqual(result.value_of("mode"), "slow")

    def testLoneDefaultedArgumentTakesGivenValues(self):
        root = Command("app", options=[
            CommandOption("opt", arguments=Argument(count=(1, 2), default="d")),
        ], arguments=[Argument.zero_or_more("rest")])
        result = parse(Context(root), ["--opt", "5"])
        self.assertEqual(result.values_of_option("opt"), ["5"])
        self.assertEqual(result.values_of("rest"), [])
        self.assertEqual(parse(Context(root), []).values_of_option("opt"), ["d"])

    def testPositionalDefaultsWhenNothingIsGiven(self):
        root = Command("app", arguments=[Argument.zero_or_more("paths", defaults=["."])])
        self.assertEqual(parse(Context(root), []).values_of("paths"), ["."])
        self.assertEqual(parse(Context(root), ["a", "b"]).values_of("paths"), ["a", "b"])


class TestArguments(TestCase):
    """Positional binding of the executing command."""

    def testLeftoverValuesWhenCommandTakesNone(self):
        root = Command("app", options=[CommandOption("enable")])
        with self.assertRaises(InvalidArgumentCountError) as context:
            parse(Context(root), ["--enable", "x"])
        self.assertIn("takes no arguments", context.exception.message)
        self.assertIn("enable", context.exception.result)

    def testMissingPositionalValue(self):
        with self.assertRaises(InvalidArgumentCountError):
            parse(Context(_times()), ["--times", "1"])

    def testSubcommandArguments(self):
        root = Command("git", children=[Command("remote", children=[Command("add", arguments=[
            Argument("name"), Argument("url"),
        ])])])
        result = parse(Context(root), ["remote", "add", "origin", "https://example.org"])
        self.assertEqual(result.command.name, "add")
        self.assertEqual(result.value_of("name"), "origin")
        self.assertEqual(result.value_of("url"), "https://example.org")

    def testEmptyInputResolvesRoot(self):
        root = Command("app")
        result = parse(Context(root), [])
        self.assertIs(result.command, root)
        self.assertEqual(len(result.options), 0)
        self.assertEqual(len(result.arguments), 0)

    def testPromptString(self):
        result = Parser(Context(_times())).parse('--times 2 "one two"')
        self.assertEqual(result.values_of("values"), ["one two"])


class TestShortCircuits(TestCase):
    """Help and version invocations."""

    def _root(self):
        return Command("app", options=[CommandOption("name", required=True, arguments=Argument())], children=[
            Command("get", options=[CommandOption("key", required=True, arguments=Argument())]),
        ])

    def testHelpCommand(self):
        context = Context(self._root(), help=True)
        result = parse(context, ["help", "get", "--key=x"])
        self.assertIs(result.command, context.help.command)
        self.assertEqual(result.values_of("command"), ["get", "--key=x"])

    def testHelpOptionAfterCommand(self):
        result = parse(Context(self._root(), help=True), ["get", "--help"])
        self.assertEqual(result.command.name, "get")
        self.assertEqual(result.values_of_option("help"), ["get"])

    def testHelpOptionFirst(self):
        result = parse(Context(self._root(), help=Help(alias="h")), ["-h", "get"])
        self.assertIn("help", result)
        self.assertEqual(result.values_of_option("h"), ["get"])

    def testVersionOption(self):
        result = parse(Context(self._root(), version=True), ["-v", "ignored"])
        self.assertIn("version", result)
        self.assertEqual(result.values_of_option("version"), [])

    def testHelpIsUnrecognizedWithoutRecognizer(self):
        with self.assertRaises(UnrecognizedOptionError):
            parse(Context(self._root()), ["--help"])


class TestInvariants(TestCase):
    """Determinism, locality and declaration safety."""

    def testRepeatedParsesAreStructurallyIdentical(self):
        context = Context(_times())
        first = parse(context, ["--times", "2", "a", "b"])
        second = parse(context, ["--times", "2", "a", "b"])
        self.assertEqual(first, second)
        self.assertIsNot(first.arguments["values"], second.arguments["values"])

    def testDeclarationsAreNeverModified(self):
        root = _times()
        parse(Context(root), ["--times", "2", "a"])
        self.assertFalse(root.options["times"].arguments["times"].bound)
        self.assertFalse(root.arguments["values"].bound)
        self.assertEqual(root.arguments["values"].values, ())

    def testResultsAreReadOnly(self):
        result = parse(Context(_times()), ["--times", "2", "a"])
        with self.assertRaises(TypeError):
            result.arguments.add(Argument("other"))
        with self.assertRaises(TypeError):
            result.options.add(CommandOption("other"))

    def testFailureCarriesPartialState(self):
        root = Command(
            "app",
            options=[
                CommandOption("first", arguments=Argument()),
                CommandOption("second", arguments=Argument(validator=int)),
            ],
        )
        with self.assertRaises(InvalidArgumentError) as context:
            parse(Context(root), ["--first", "a", "--second", "b"])
        partial = context.exception.result
        self.assertIsInstance(partial, ParseResult)
        self.assertEqual(partial.options.names, ("first",))
        self.assertEqual(partial, parse(Context(root), ["--first", "a"]))

    def testRequiredOptionIsAlwaysPresent(self):
        context = Context(_times())
        for args in (["--times", "1", "a"], ["-t", "2", "--", "a", "b"], ["--times=3", "a"]):
            with self.subTest(args=args):
                self.assertIn("times", parse(context, args))


class TestWarnings(TestCase):
    """Deprecation advisories."""

    def testDeprecatedOptionWarns(self):
        root = Command("app", options=[CommandOption("old", deprecated=True)])
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = parse(Context(root), ["--old"])
        self.assertIn("old", result)
        self.assertTrue(any(issubclass(warning.category, DeprecatedArgumentWarning) for warning in caught))

    def testDeprecatedCommandWarns(self):
        root = Command("app", children=[Command("legacy", deprecated=True)])
        with self.assertWarns(DeprecatedArgumentWarning):
            parse(Context(root), ["legacy"])


if __name__ == "__main__":
    unittest.main()
