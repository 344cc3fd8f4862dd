"""
Helmsman application: one argument vector in, one exit code out.

Run sequence
1. Seal the registry (first run only).
2. A leading "--help"/"-h" renders the global help (exit 0).
3. Route the leading tokens; a miss reports "No command specified..." (exit 1).
4. Parse the remaining tokens and bind positionals/short names.
5. A "help"/"h" flag renders the command's help (exit 0) unless the command opted out.
6. Build the context and run it through the middleware pipeline, with the command
   execution as the innermost step.

Entry points
- run(): synchronous. An asynchronous command is completed with asyncio.run, or on a
  worker thread with its own event loop when the caller is already inside one.
- run_async(): awaits asynchronous commands on the caller's event loop.

Exit codes are checked on the way out of the command and of the whole pipeline:
None means 0, anything other than an int raises InvalidExitCodeError.
Anything raised along the way is caught once, reported as "Error: <message>" on the
error sink and turned into exit code 1.
"""
import asyncio
import inspect
import logging
import shlex
import sys
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from .commands import CommandContext, instantiate
from .faults import *
from .help import HelpGenerator
from .middleware import MiddlewarePipeline
from .output import ConsoleOutput
from .registry import CommandRegistry
from .routing import CommandRouter
from .utils import *

logger = logging.getLogger(__name__)

HELP_FLAGS = ("--help", "-h")


def _exit_code(code, name, definition):
    if code is None:
        return 0
    if not isinstance(code, int) or isinstance(code, bool):
        raise InvalidExitCodeError(
            f"command {name!r} returned {type(code).__name__!r} instead of an integer exit code",
            command=definition,
            result=code,
        )
    return code


async def _settle(awaitable, name, definition):
    return _exit_code(await awaitable, name, definition)


def _tokens(args):
    if args is Unset:
        args = sys.argv[1:]
    elif isinstance(args, str):
        args = shlex.split(args)
    elif not isinstance(args, Iterable):
        raise TypeError("run() argument must be a string or an iterable of strings")
    args = tuple(args)
    if not all(isinstance(arg, str) for arg in args):
        raise TypeError("run() argument must be a string or an iterable of strings")
    return args


def _drive(coroutine):
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coroutine)
    with ThreadPoolExecutor(1, thread_name_prefix="helmsman") as executor:
        return executor.submit(asyncio.run, coroutine).result()


class Application:

    def __init__(self, registry, /, router=Unset, pipeline=Unset, factory=Unset, output=Unset, prog=Unset):
        if not isinstance(registry, CommandRegistry):
            raise TypeError("application registry must be a CommandRegistry")
        router = coalesce(router, CommandRouter(registry))
        if not isinstance(router, CommandRouter):
            raise TypeError("application router must be a CommandRouter")
        pipeline = coalesce(pipeline, MiddlewarePipeline())
        if not isinstance(pipeline, MiddlewarePipeline):
            raise TypeError("application pipeline must be a MiddlewarePipeline")
        factory = coalesce(factory, instantiate)
        if not callable(factory):
            raise TypeError("application factory must be callable")

        self._registry = registry
        self._router = router
        self._pipeline = pipeline
        self._factory = factory
        self._output = coalesce(output, ConsoleOutput())
        self._help = HelpGenerator(registry, self._output, prog)

    registry = mirror("registry")
    router = mirror("router")
    pipeline = mirror("pipeline")
    factory = mirror("factory")
    output = mirror("output")

    def run(self, args=Unset, /, cancellation=None):
        """
        Run one invocation and return its exit code.

        Parameters
        - args:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string, split with shlex.split.
          • Iterable[str]: pre-tokenized argument vector.
        - cancellation: opaque token handed to middlewares and the command untouched.
        """
        args = _tokens(args)
        try:
            code = self._dispatch(args, cancellation)
            return _drive(code) if inspect.iscoroutine(code) else code
        except Exception as error:
            return self._report(args, error)

    async def run_async(self, args=Unset, /, cancellation=None):
        """
        Same as run(), awaiting asynchronous commands on the running event loop.
        """
        args = _tokens(args)
        try:
            code = self._dispatch(args, cancellation)
            return await code if inspect.iscoroutine(code) else code
        except Exception as error:
            return self._report(args, error)

    def _report(self, args, error):
        logger.debug("command run %r failed", args, exc_info=True)
        self._output.write_error(f"Error: {error}")
        return 1

    def _dispatch(self, args, cancellation):
        """
        Everything up to the pipeline call; returns an exit code or a coroutine producing one.
        """
        self._registry.seal()

        if args and args[0] in HELP_FLAGS:
            self._help.render_global()
            return 0

        route = self._router.route(args)
        if not route.matched:
            logger.debug("[%s] no command matched %r", FaultCode.UNKNOWN_COMMAND.normalize(), args)
            self._output.write_error("No command specified. Use --help for available commands.")
            return 1

        definition = route.definition
        arguments = self._router.bind(route)

        if (arguments.has_option("help") or arguments.has_option("h")) and not definition.nohelp:
            self._help.render_command(definition, route.path)
            return 0

        context = CommandContext(arguments, args, route.name, definition, self._output)

        @rename(f"command[{definition.name}]")
        def execute(context, cancellation=None, /):
            command = instantiate(self._factory(definition.command))
            code = command.execute(context, cancellation)
            if inspect.isawaitable(code):
                return _settle(code, route.name, definition)
            return _exit_code(code, route.name, definition)

        code = self._pipeline.build(execute)(context, cancellation)
        if inspect.isawaitable(code):
            return _settle(code, route.name, definition)
        return _exit_code(code, route.name, definition)


__all__ = (
    "Application",
)
