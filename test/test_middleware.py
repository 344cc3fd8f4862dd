"""
Middleware pipeline and validation behavioral tests.

Scope
- Validate onion ordering, short-circuiting and sealing after build.
- Validate required-field checks and the validation middleware report.
- Validate the logging middleware records.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import asyncio
import logging
import unittest
from unittest import TestCase

from helmsman import (
    ArgumentDefinition,
    ArgumentParser,
    CommandContext,
    CommandDefinition,
    DefaultArgumentValidator,
    LoggingMiddleware,
    MemoryOutput,
    Middleware,
    MiddlewarePipeline,
    OptionDefinition,
    PipelineSealedError,
    ValidationMiddleware,
    ValidationResult,
)


def _context(definition, args, output=None):
    arguments = ArgumentParser().parse(args)
    for argument, value in zip(definition.ordered_arguments(), arguments.positionals):
        arguments.add_named_argument(argument.name, value)
    return CommandContext(arguments, args, definition.name, definition, output or MemoryOutput())


class Recorder(Middleware):

    def __init__(self, name, events):
        self.name = name
        self.events = events

    def invoke(self, context, next, cancellation, /):
        self.events.append(f"{self.name}:in")
        code = next(context, cancellation)
        self.events.append(f"{self.name}:out")
        return code


class TestMiddlewarePipeline(TestCase):
    """Behavioral tests for MiddlewarePipeline."""

    def testFirstRegisteredIsOutermost(self):
        events = []
        pipeline = MiddlewarePipeline().use(Recorder("a", events)).use(Recorder("b", events))

        def handler(context, cancellation=None):
            events.append("handler")
            return 7

        code = pipeline.build(handler)(_context(CommandDefinition("x"), []), None)
        self.assertEqual(code, 7)
        self.assertEqual(events, ["a:in", "b:in", "handler", "b:out", "a:out"])

    def testShortCircuitSkipsHandler(self):
        calls = []
        pipeline = MiddlewarePipeline().use(lambda context, next, cancellation: 3)
        code = pipeline.build(lambda context, cancellation=None: calls.append("handler"))(_context(CommandDefinition("x"), []))
        self.assertEqual(code, 3)
        self.assertEqual(calls, [])

    def testCancellationIsPassedThrough(self):
        token = object()
        seen = []

        def spy(context, next, cancellation):
            seen.append(cancellation)
            return next(context, cancellation)

        pipeline = MiddlewarePipeline().use(spy)
        pipeline.build(lambda context, cancellation=None: seen.append(cancellation) or 0)(_context(CommandDefinition("x"), []), token)
        self.assertEqual(seen, [token, token])

    def testEmptyPipelineReturnsHandler(self):
        def handler(context, cancellation=None):
            return 0

        self.assertIs(MiddlewarePipeline().build(handler), handler)

    def testUseAfterBuildRaises(self):
        pipeline = MiddlewarePipeline()
        pipeline.build(lambda context, cancellation=None: 0)
        self.assertTrue(pipeline.built)
        with self.assertRaises(PipelineSealedError):
            pipeline.use(lambda context, next, cancellation: 0)

    def testUseRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            MiddlewarePipeline().use(42)

    def testStepsAreNamedAfterMiddlewares(self):
        events = []
        step = MiddlewarePipeline().use(Recorder("a", events)).build(lambda context, cancellation=None: 0)
        self.assertEqual(step.__name__, "pipeline[Recorder]")


class TestValidation(TestCase):
    """Behavioral tests for DefaultArgumentValidator and ValidationMiddleware."""

    def setUp(self):
        self.definition = CommandDefinition(
            "deploy",
            options=[
                OptionDefinition("target", "t", required=True),
                OptionDefinition("token", required=True),
                OptionDefinition("dry-run", type=bool),
            ],
            arguments=[ArgumentDefinition("service", required=True)],
        )

    def testMissingRequiredFieldsReported(self):
        context = _context(self.definition, [])
        result = DefaultArgumentValidator().validate(context.arguments, self.definition)
        self.assertFalse(result.valid)
        self.assertEqual([error.message for error in result.errors], [
            "Required option '--target/-t' is missing.",
            "Required option '--token' is missing.",
            "Required argument '<service>' is missing.",
        ])
        self.assertEqual(result.errors[0].parameter, "target")

    def testShortSpellingSatisfiesRequiredOption(self):
        context = _context(self.definition, ["api", "-t", "prod", "--token=x"])
        self.assertTrue(DefaultArgumentValidator().validate(context.arguments, self.definition))

    def testSuccessResult(self):
        result = ValidationResult.success()
        self.assertTrue(result.valid)
        self.assertEqual(result.errors, ())

    def testMiddlewareShortCircuitsAndReports(self):
        output = MemoryOutput()
        calls = []
        pipeline = MiddlewarePipeline().use(ValidationMiddleware())
        handler = pipeline.build(lambda context, cancellation=None: calls.append("handler") or 0)

        code = handler(_context(self.definition, ["api"], output))
        self.assertEqual(code, 1)
        self.assertEqual(calls, [])
        self.assertEqual(output.errors, [
            "Validation errors:",
            "  - Required option '--target/-t' is missing.",
            "  - Required option '--token' is missing.",
        ])
        self.assertEqual(output.lines, [])

    def testMiddlewarePassesValidContext(self):
        pipeline = MiddlewarePipeline().use(ValidationMiddleware())
        handler = pipeline.build(lambda context, cancellation=None: 5)
        self.assertEqual(handler(_context(self.definition, ["api", "--target=x", "--token=y"])), 5)

    def testMiddlewareRequiresValidator(self):
        with self.assertRaises(TypeError):
            ValidationMiddleware(object())


class TestLoggingMiddleware(TestCase):
    """Behavioral tests for LoggingMiddleware."""

    def testLogsStartAndExitCode(self):
        pipeline = MiddlewarePipeline().use(LoggingMiddleware())
        handler = pipeline.build(lambda context, cancellation=None: 4)
        with self.assertLogs("helmsman.commands", logging.INFO) as logs:
            self.assertEqual(handler(_context(CommandDefinition("build"), [])), 4)
        self.assertEqual(len(logs.records), 2)
        self.assertIn("exit code 4", logs.output[1])

    def testLogsAndReraisesExceptions(self):
        def handler(context, cancellation=None):
            raise RuntimeError("boom")

        step = MiddlewarePipeline().use(LoggingMiddleware()).build(handler)
        with self.assertLogs("helmsman.commands", logging.ERROR), self.assertRaises(RuntimeError):
            step(_context(CommandDefinition("build"), []))

    def testAwaitsCoroutineResultBeforeLoggingExitCode(self):
        async def handler(context, cancellation=None):
            return 6

        step = MiddlewarePipeline().use(LoggingMiddleware()).build(handler)
        with self.assertLogs("helmsman.commands", logging.INFO) as logs:
            pending = step(_context(CommandDefinition("build"), []))
            self.assertEqual(len(logs.records), 1)
            self.assertEqual(asyncio.run(pending), 6)
        self.assertEqual(len(logs.records), 2)
        self.assertIn("exit code 6", logs.output[1])


if __name__ == "__main__":
    unittest.main()
