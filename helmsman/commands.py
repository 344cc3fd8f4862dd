"""
Helmsman command layer: the executable capability and its per-invocation context.

What this module provides
- Command: single-method abstraction (execute(context, cancellation) -> exit code)
  implemented by host code.
- CallbackCommand: adapts a plain function to Command so small tools do not need a class.
- CommandContext: everything a command (or a middleware) sees for one invocation:
  parsed arguments, raw argument vector, command path, definition, output sink and a
  free-form data bag, plus typed getters honoring declared defaults.
- instantiate(handle): default command factory used when the host supplies none.

Typed getter fallback (get_option / get_argument)
1. an explicitly supplied value, converted (an unparsable value skips to step 3);
2. for booleans, presence without a value means True;
3. the default declared on the matching OptionDefinition/ArgumentDefinition, converted;
4. the zero value of the type (False, 0, 0.0, None...).
"""
import builtins
import enum
import inspect
from abc import ABC, abstractmethod
from types import MappingProxyType

from .converters import convert, unwrap, zero
from .faults import TypeConversionError
from .utils import *


class Command(ABC):

    @abstractmethod
    def execute(self, context, cancellation, /):
        """
        Run the command and return its exit code (None counts as 0).

        `cancellation` is the host's token; the core never inspects it.
        """


class CallbackCommand(Command):
    """
    Command backed by a callable taking (context) or (context, cancellation).
    """

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("callback-command argument must be callable")
        self._callback = callback
        try:
            parameters = inspect.signature(callback).parameters.values()
        except (TypeError, ValueError):
            self._arity = 2
        else:
            positional = [
                parameter for parameter in parameters
                if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            ]
            variadic = any(parameter.kind is inspect.Parameter.VAR_POSITIONAL for parameter in parameters)
            self._arity = 2 if variadic or len(positional) >= 2 else 1

    callback = mirror("callback")

    def execute(self, context, cancellation, /):
        if self._arity == 1:
            return self._callback(context)
        return self._callback(context, cancellation)

    def __repr__(self):
        return f"callback-command({getattr(self._callback, '__qualname__', self._callback)!r})"


def instantiate(handle, /):
    """
    Default factory: turn a definition's command handle into a Command.

    - Command subclass  → a fresh instance (no-argument constructor)
    - Command instance  → used as-is
    - other callable    → wrapped in CallbackCommand
    """
    if isinstance(handle, builtins.type) and issubclass(handle, Command):
        return handle()
    if isinstance(handle, Command):
        return handle
    if callable(handle):
        return CallbackCommand(handle)
    raise TypeError(f"cannot build a command from {handle!r}")


def _declared(value, type):
    """
    Convert a declared default to `type`: values already of that type pass through,
    anything else goes through its text form (enum members by name).
    """
    if builtins.type(value) is unwrap(type):
        return value
    if isinstance(value, enum.Enum):
        value = value.name
    return convert(value if isinstance(value, str) else str(value), type)


class CommandContext:
    """
    Per-invocation context handed through the middleware pipeline to the command.

    Fields
    - arguments: ParsedArguments after the router's remaps.
    - raw: the original argument vector (tuple).
    - name: space-joined command path ("git remote add").
    - definition: the matched CommandDefinition.
    - output: the output sink (write_line / write_error).
    - data: free-form dict shared by middlewares and the command; pre-seeded with
      the definition under "definition".
    """

    def __init__(self, arguments, raw, name, definition, /, output=Unset):
        self._arguments = arguments
        self._raw = tuple(raw)
        self._name = name
        self._definition = definition
        self._output = coalesce(output)
        self.data = {"definition": definition}

    arguments = mirror("arguments")
    raw = mirror("raw")
    name = mirror("name")
    definition = mirror("definition")
    output = mirror("output")

    def has_option(self, name, /):
        return self._arguments.has_option(name)

    def get_option(self, name, type=Unset, /):
        """
        Typed option value (see the module docstring for the fallback order).

        Without `type`, the type declared on the matching OptionDefinition is used (str otherwise).
        """
        declared = self._definition.find_option(name) if self._definition is not None else None
        type = coalesce(type, declared.type if declared is not None else str)

        if (raw := self._arguments.get_option_value(name)) is not None:
            try:
                return convert(raw, type)
            except TypeConversionError:
                pass
        elif unwrap(type) is bool and self._arguments.has_option(name):
            return True

        return self._default(declared, type)

    def get_argument(self, name, type=Unset, /):
        """
        Typed positional argument bound to `name` by the router.
        """
        declared = self._definition.find_argument(name) if self._definition is not None else None
        type = coalesce(type, declared.type if declared is not None else str)

        if (raw := self._arguments.get_named_argument(name)) is not None:
            try:
                return convert(raw, type)
            except TypeConversionError:
                pass

        return self._default(declared, type)

    def get_option_values(self, name, type=Unset, /):
        """
        Every value of a repeatable option, converted; unparsable entries are skipped.
        """
        declared = self._definition.find_option(name) if self._definition is not None else None
        return self._arguments.get_option_values(name, coalesce(type, declared.type if declared is not None else str))

    def _default(self, declared, type):
        if declared is not None and declared.default is not None:
            try:
                return _declared(declared.default, type)
            except TypeConversionError:
                pass
        return zero(type)

    def __rich_repr__(self):
        yield "name", self._name
        yield "arguments", self._arguments
        yield "raw", self._raw
        yield "data", MappingProxyType(self.data)

    def __repr__(self):
        return "command-context(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "Command",
    "CallbackCommand",
    "CommandContext",
    "instantiate",
)
