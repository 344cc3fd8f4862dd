"""
Helmsman builders: fluent configuration of commands, middlewares and collaborators.

Two layers
- CliBuilder: the application-level builder. It owns the registry and the pipeline,
  registers root commands and subcommands, collects middlewares and the parser,
  factory and output settings, and finally builds an Application.
- CommandBuilder: returned for every registered command; declares its arguments
  (positions assigned in declaration order), options and children, and can opt the
  command out of automatic help.

Quick example:
    >>> cli = CliBuilder()
    >>> (cli.command(GreetCommand, "greet", "Greets a person")
    ...     .add_option("name", "n", descr="Your name", default="World")
    ...     .add_argument("target"))
    >>> @cli.command(name="ping", descr="Replies with pong")
    ... def ping(context):
    ...     context.output.write_line("pong")
    >>> exit(cli.use_validation().build().run())
"""
import builtins
import logging
import re

from .application import Application
from .commands import Command, CallbackCommand
from .faults import *
from .definitions import ArgumentDefinition, CommandDefinition, OptionDefinition
from .middleware import LoggingMiddleware, MiddlewarePipeline, ValidationMiddleware
from .parsing import ArgumentParser, ParserOptions
from .registry import CommandRegistry
from .routing import CommandRouter
from .utils import *


def _derive(source):
    """
    Command name from a handle: "list_files" -> "list-files", "GreetCommand" -> "greet".
    """
    name = getattr(source, "__name__", None)
    if not isinstance(name, str):
        raise TypeError("command name cannot be derived from %r; pass name explicitly" % (source,))
    if isinstance(source, builtins.type):
        name = re.sub(r"Command$", "", name) or name
        name = re.sub(r"(?<!^)(?=[A-Z])", "-", name)
    return name.replace("_", "-").lower()


class CommandBuilder:
    """
    Fluent view over one registered CommandDefinition.
    """

    def __init__(self, registry, definition, /):
        if not isinstance(registry, CommandRegistry):
            raise TypeError("command-builder registry must be a CommandRegistry")
        if not isinstance(definition, CommandDefinition):
            raise TypeError("command-builder definition must be a CommandDefinition")
        self._registry = registry
        self._definition = definition

    definition = mirror("definition")

    def add_argument(self, name, /, type=str, descr=Unset, *, required=False, default=None):
        position = max((argument.position for argument in self._definition.arguments), default=-1) + 1
        self._definition.add_argument(
            ArgumentDefinition(name, type, default, descr, required=required, position=position)
        )
        return self

    def add_option(self, name, short=None, /, type=str, descr=Unset, *, required=False, default=None, multiple=False):
        self._definition.add_option(
            OptionDefinition(name, short, type, default, descr, required=required, multiple=multiple)
        )
        return self

    def add_command(self, command, name=Unset, /, descr=Unset, aliases=(), *, hidden=False):
        """
        Register a child of this command and return its builder.
        """
        child = CommandDefinition(
            name or _derive(command),
            command,
            descr,
            aliases,
            self._definition.path,
            hidden=hidden,
        )
        self._registry.register(child)
        return CommandBuilder(self._registry, child)

    def without_help(self):
        """
        Disable automatic "--help"/"-h" handling; the command receives the flag instead.
        """
        if self._definition.sealed:
            raise RegistrySealedError(f"command {self._definition.name!r} is sealed", command=self._definition)
        self._definition._nohelp = True
        return self

    def __repr__(self):
        return f"command-builder({self._definition!r})"


class CliBuilder:
    """
    Application-level builder; every configuration method returns the builder itself
    except command()/subcommand(), which return the new command's CommandBuilder.
    """

    def __init__(self, *, prog=Unset):
        self._registry = CommandRegistry()
        self._pipeline = MiddlewarePipeline()
        self._parser = ParserOptions()
        self._factory = Unset
        self._output = Unset
        self._prog = prog

    registry = mirror("registry")
    pipeline = mirror("pipeline")

    def command(self, source=Unset, /, name=Unset, descr=Unset, aliases=(), *, parent=None, hidden=False):
        """
        Register a command, directly or as a decorator.

        Invocation modes
        - Direct: cli.command(GreetCommand, "greet", "Greets a person") -> CommandBuilder
        - Decorator: @cli.command(name="ping") over a function taking (context)
          or (context, cancellation); the function is wrapped in a CallbackCommand
          and replaced by the new command's CommandBuilder.

        Without a name, one is derived from the function or class name.
        """
        @rename("command")
        def wrapper(source, /):
            if not callable(source) and not isinstance(source, Command):
                raise TypeError("@command() must be applied to a callable or a Command")
            handle = source
            if not isinstance(source, Command) and not (isinstance(source, builtins.type) and issubclass(source, Command)):
                handle = CallbackCommand(source)
            definition = CommandDefinition(
                name or _derive(source),
                handle,
                descr,
                aliases,
                parent,
                hidden=hidden,
            )
            self._registry.register(definition)
            return CommandBuilder(self._registry, definition)

        return wrapper(source) if source is not Unset else wrapper

    def subcommand(self, source, name, parent, /, descr=Unset, aliases=(), *, hidden=False):
        """
        Register `source` under the dotted `parent` path ("git.remote").
        """
        return self.command(source, name, descr, aliases, parent=parent, hidden=hidden)

    def use(self, middleware, /):
        self._pipeline.use(middleware)
        return self

    def use_validation(self, validator=Unset, /):
        return self.use(ValidationMiddleware(validator))

    def use_logging(self, logger=Unset, /, level=logging.INFO):
        return self.use(LoggingMiddleware(logger, level))

    def configure_parser(self, options=Unset, /, **flags):
        """
        Set the parser style, from a ParserOptions or its keyword flags.
        """
        if options is not Unset and flags:
            raise TypeError("configure_parser() takes either a ParserOptions or keyword flags, not both")
        options = coalesce(options, ParserOptions(**flags))
        if not isinstance(options, ParserOptions):
            raise TypeError("configure_parser() argument must be a ParserOptions")
        self._parser = options
        return self

    def factory(self, factory, /):
        """
        Set the command factory (handle -> Command, Command type or callable).
        """
        if not callable(factory):
            raise TypeError("factory() argument must be callable")
        self._factory = factory
        return self

    def output(self, output, /):
        self._output = output
        return self

    def build(self):
        return Application(
            self._registry,
            router=CommandRouter(self._registry, ArgumentParser(self._parser)),
            pipeline=self._pipeline,
            factory=self._factory,
            output=self._output,
            prog=self._prog,
        )


__all__ = (
    "CliBuilder",
    "CommandBuilder",
)
