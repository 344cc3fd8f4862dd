"""
Helmsman middleware: an onion around the command's execution.

Composition
- Middlewares are wrapped in reverse registration order, so the first one registered
  is outermost: it runs first on the way in and last on the way out.
- Each step receives (context, next, cancellation) and either calls next(context, cancellation)
  or short-circuits by returning an exit code without calling it.
- For an asynchronous command, next() returns a coroutine; a step that needs the exit
  code awaits it inside a coroutine of its own and returns that instead.
- Once build() has run, the pipeline refuses new middlewares.

Built-in steps
- ValidationMiddleware: required-presence checks; reports and returns 1 on failure.
- LoggingMiddleware: standard-library logging of start, exit code and duration.
"""
import inspect
import logging
import time
from abc import ABC, abstractmethod

from .faults import *
from .utils import *
from .validation import ArgumentValidator, DefaultArgumentValidator

logger = logging.getLogger(__name__)


class Middleware(ABC):

    @abstractmethod
    def invoke(self, context, next, cancellation, /):
        """
        Run around `next` and return an exit code.
        """


class MiddlewarePipeline:

    def __init__(self):
        self._middlewares = []
        self._built = False

    @property
    def middlewares(self):
        return tuple(self._middlewares)

    @property
    def built(self):
        return self._built

    def use(self, middleware, /):
        """
        Append a middleware: a Middleware instance or a callable(context, next, cancellation).
        """
        if self._built:
            raise PipelineSealedError("middleware cannot be added after the pipeline is built", middleware=middleware)
        if not isinstance(middleware, Middleware) and not callable(middleware):
            raise TypeError("use() argument must be a Middleware or a callable")
        self._middlewares.append(middleware)
        return self

    def build(self, handler, /):
        """
        Compose every middleware around `handler(context, cancellation)` and return the outermost callable.
        """
        if not callable(handler):
            raise TypeError("build() argument must be callable")
        self._built = True

        pipeline = handler
        for middleware in reversed(self._middlewares):
            pipeline = self._wrap(middleware, pipeline)
        return pipeline

    @staticmethod
    def _wrap(middleware, next):
        if isinstance(middleware, Middleware):
            invoke, label = middleware.invoke, type(middleware).__name__
        else:
            invoke, label = middleware, getattr(middleware, "__name__", "middleware")

        @rename(f"pipeline[{label}]")
        def step(context, cancellation=None, /):
            return invoke(context, next, cancellation)

        return step

    def __len__(self):
        return len(self._middlewares)


class ValidationMiddleware(Middleware):
    """
    Validates the context's arguments against its definition before the command runs.

    On failure, writes "Validation errors:" and one "  - <message>" line per error to
    the context's error sink and returns 1 without calling the command.
    """

    def __init__(self, validator=Unset, /):
        validator = coalesce(validator, DefaultArgumentValidator())
        if not isinstance(validator, ArgumentValidator):
            raise TypeError("validation-middleware validator must be an ArgumentValidator")
        self._validator = validator

    validator = mirror("validator")

    def invoke(self, context, next, cancellation, /):
        definition = context.data.get("definition")
        if definition is None:
            return next(context, cancellation)

        result = self._validator.validate(context.arguments, definition)
        if result.valid:
            return next(context, cancellation)

        logger.debug(
            "[%s] command %r failed validation: %r",
            FaultCode.VALIDATION_FAILED.normalize(),
            context.name,
            [error.message for error in result.errors],
        )
        if context.output is not None:
            context.output.write_error("Validation errors:")
            for error in result.errors:
                context.output.write_error(f"  - {error.message}")
        return 1


class LoggingMiddleware(Middleware):
    """
    Logs command start, exit code and elapsed time; exceptions are logged and re-raised.
    """

    def __init__(self, logger=Unset, /, level=logging.INFO):
        self._logger = coalesce(logger, logging.getLogger("helmsman.commands"))
        self._level = level

    def invoke(self, context, next, cancellation, /):
        self._logger.log(self._level, "running command %r with %r", context.name, context.raw)
        started = time.perf_counter()
        try:
            code = next(context, cancellation)
        except Exception:
            self._failed(context, started)
            raise
        if inspect.isawaitable(code):
            return self._awaiting(context, code, started)
        self._finished(context, code, started)
        return code

    async def _awaiting(self, context, awaitable, started):
        try:
            code = await awaitable
        except Exception:
            self._failed(context, started)
            raise
        self._finished(context, code, started)
        return code

    def _failed(self, context, started):
        self._logger.exception("command %r failed after %.3fs", context.name, time.perf_counter() - started)

    def _finished(self, context, code, started):
        self._logger.log(self._level, "command %r finished with exit code %r in %.3fs", context.name, code, time.perf_counter() - started)


__all__ = (
    "Middleware",
    "MiddlewarePipeline",
    "ValidationMiddleware",
    "LoggingMiddleware",
)
