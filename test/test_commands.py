"""
Command layer behavioral tests (context getters, callback adaptation, default factory).

Scope
- Validate the typed getter fallback order (value, flag presence, declared default, zero).
- Validate CallbackCommand arity handling and instantiate().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import enum
import unittest
from unittest import TestCase

from helmsman import (
    ArgumentDefinition,
    CallbackCommand,
    Command,
    CommandContext,
    CommandDefinition,
    CommandRegistry,
    CommandRouter,
    MemoryOutput,
    OptionDefinition,
    instantiate,
)


class Level(enum.Enum):
    LOW = 0
    HIGH = 1


def _context(definition, args):
    registry = CommandRegistry()
    registry.register(definition)
    router = CommandRouter(registry)
    route = router.route(args)
    return CommandContext(router.bind(route), args, route.name, route.definition, MemoryOutput())


class TestCommandContext(TestCase):
    """Behavioral tests for CommandContext getters."""

    def setUp(self):
        self.definition = CommandDefinition(
            "serve",
            options=[
                OptionDefinition("port", "p", type=int, default=8080),
                OptionDefinition("host", default="localhost"),
                OptionDefinition("verbose", "v", type=bool),
                OptionDefinition("debug", type=bool, default=True),
                OptionDefinition("ratio", type=float, default="0.5"),
                OptionDefinition("level", type=Level, default=Level.LOW),
                OptionDefinition("tag", "t", multiple=True),
            ],
            arguments=[
                ArgumentDefinition("root", default="."),
                ArgumentDefinition("count", type=int, position=1),
            ],
        )

    def testDeclaredDefaultWhenAbsent(self):
        context = _context(self.definition, ["serve"])
        self.assertEqual(context.get_option("port", int), 8080)
        self.assertEqual(context.get_option("host"), "localhost")

    def testShortNameValueWins(self):
        context = _context(self.definition, ["serve", "-p", "3000"])
        self.assertEqual(context.get_option("port", int), 3000)

    def testDeclaredTypeUsedWithoutExplicitType(self):
        context = _context(self.definition, ["serve", "--port=3000"])
        self.assertEqual(context.get_option("port"), 3000)

    def testUnparsableValueFallsBackToDefault(self):
        context = _context(self.definition, ["serve", "--port=http"])
        self.assertEqual(context.get_option("port"), 8080)

    def testBooleanFlagPresence(self):
        context = _context(self.definition, ["serve", "-v"])
        self.assertIs(context.get_option("verbose"), True)

    def testBooleanAbsentUsesDefaultOrFalse(self):
        context = _context(self.definition, ["serve"])
        self.assertIs(context.get_option("verbose"), False)
        self.assertIs(context.get_option("debug"), True)

    def testBooleanExplicitFalse(self):
        context = _context(self.definition, ["serve", "--debug=false"])
        self.assertIs(context.get_option("debug"), False)

    def testStringDefaultIsConverted(self):
        context = _context(self.definition, ["serve"])
        self.assertEqual(context.get_option("ratio"), 0.5)

    def testTypedDefaultIsConvertedToRequestedType(self):
        context = _context(self.definition, ["serve"])
        self.assertEqual(context.get_option("port", str), "8080")
        self.assertEqual(context.get_option("port", float), 8080.0)
        self.assertEqual(context.get_option("level", str), "LOW")

    def testEnumOption(self):
        self.assertIs(_context(self.definition, ["serve", "--level=high"]).get_option("level"), Level.HIGH)
        self.assertIs(_context(self.definition, ["serve"]).get_option("level"), Level.LOW)

    def testUndeclaredOptionFallsBackToZero(self):
        context = _context(self.definition, ["serve"])
        self.assertEqual(context.get_option("workers", int), 0)
        self.assertIsNone(context.get_option("name"))

    def testRepeatedOptionValues(self):
        context = _context(self.definition, ["serve", "-t", "a", "--tag=b"])
        self.assertEqual(context.get_option_values("tag"), ("b", "a"))

    def testArguments(self):
        context = _context(self.definition, ["serve", "srv", "4"])
        self.assertEqual(context.get_argument("root"), "srv")
        self.assertEqual(context.get_argument("count"), 4)

    def testSlashTokenIsWindowsOptionByDefault(self):
        context = _context(self.definition, ["serve", "/srv", "4"])
        self.assertTrue(context.has_option("srv"))
        self.assertEqual(context.arguments.get_option_value("srv"), "4")
        self.assertEqual(context.get_argument("root"), ".")
        self.assertEqual(context.get_argument("count"), 0)

    def testArgumentDefaults(self):
        context = _context(self.definition, ["serve"])
        self.assertEqual(context.get_argument("root"), ".")
        self.assertEqual(context.get_argument("count"), 0)

    def testContextFields(self):
        context = _context(self.definition, ["serve", "-v"])
        self.assertEqual(context.name, "serve")
        self.assertEqual(context.raw, ("serve", "-v"))
        self.assertIs(context.definition, self.definition)
        self.assertIs(context.data["definition"], self.definition)
        self.assertTrue(context.has_option("verbose"))
        self.assertIsInstance(context.output, MemoryOutput)


class TestCommandInstantiation(TestCase):
    """Behavioral tests for CallbackCommand and instantiate()."""

    def testSingleParameterCallback(self):
        command = CallbackCommand(lambda context: 3)
        self.assertEqual(command.execute(object(), object()), 3)

    def testTwoParameterCallbackReceivesCancellation(self):
        token = object()
        command = CallbackCommand(lambda context, cancellation: cancellation)
        self.assertIs(command.execute(None, token), token)

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            CallbackCommand("not callable")

    def testInstantiateCommandType(self):
        class Hello(Command):
            def execute(self, context, cancellation, /):
                return 0

        self.assertIsInstance(instantiate(Hello), Hello)
        instance = Hello()
        self.assertIs(instantiate(instance), instance)

    def testInstantiateCallable(self):
        self.assertIsInstance(instantiate(lambda context: 0), CallbackCommand)

    def testInstantiateRejectsOtherHandles(self):
        with self.assertRaises(TypeError):
            instantiate(None)


if __name__ == "__main__":
    unittest.main()
