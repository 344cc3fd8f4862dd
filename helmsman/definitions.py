r"""
Helmsman definitions: the metadata shared by routing, parsing, validation and help.

Overview
- OptionDefinition: named option with a long name, an optional one-letter short name,
  a declared value type, a default, and required/valued/multiple switches.
- ArgumentDefinition: positional argument bound by its zero-based position.
- CommandDefinition: a command (or subcommand) with aliases, a dotted parent path,
  the command-type handle used to build the executable behavior, and its ordered
  options and arguments.

Metadata (sanitized on construction)
- name: non-empty string, trimmed. Option names are given without dashes.
- descr: Unset | str (short help), non-empty when provided; becomes None when omitted.
- type: one of the supported conversion targets (see converters).
- default: any value; not validated (it is converted lazily by typed getters).

Lifecycle
- Definitions are created during configuration. Command definitions accept new
  options/arguments until the registry seals them; afterwards they are read-only.

Quick example:
    >>> greet = CommandDefinition("greet", GreetCommand, descr="Greets a person")
    >>> greet.add_option(OptionDefinition("name", "n", descr="Your name"))
    >>> greet.add_argument(ArgumentDefinition("target", required=True))
"""
import functools
import operator
import re

from .converters import supports, unwrap
from .faults import *
from .utils import *


class DefinitionType(type):
    """
    Metaclass giving definitions read-only properties and stable representations.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field.
    - Derive __typename__ from the class name ("OptionDefinition" → "option-definition")
      for messages and representations.
    - Provide __repr__/__rich_repr__ driven by __displayable__ (or __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the fields shared by every definition (name, descr).

    Raises
    - TypeError: name/descr of the wrong type.
    - ValueError: name/descr empty after trimming.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_typed_metadata(cls, metadata, /):
    """
    Internal: validate the value-bearing fields of options and arguments (type, required).
    """
    if not supports(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be str, int, float, Decimal, bool, an Enum, or a nullable of those")
    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")


class OptionDefinition(metaclass=DefinitionType):
    """
    Named option: "--name" and, when `short` is given, "-s".

    - valued defaults to False for boolean options (flags) and True otherwise.
    - multiple marks options that may be repeated to collect several values.
    """

    __introspectable__ = (
        "name",
        "short",
        "descr",
        "type",
        "default",
        "required",
        "valued",
        "multiple",
    )

    def __init__(
            self,
            name,
            short=None,
            /,
            type=str,
            default=None,
            descr=Unset,
            *,
            required=False,
            valued=Unset,
            multiple=False
    ):
        metadata = {
            "name": name,
            "short": short,
            "descr": descr,
            "type": type,
            "default": default,
            "required": required,
            "valued": coalesce(valued, unwrap(type) is not bool),
            "multiple": multiple,
        }
        _sanitize_metadata(OptionDefinition, metadata)
        _sanitize_typed_metadata(OptionDefinition, metadata)

        if metadata["name"].startswith(("-", "/")):
            raise ValueError("option-definition 'name' must be given without a leading '-' or '/'")
        if (short := metadata["short"]) is not None:
            if not isinstance(short, str):
                raise TypeError("option-definition 'short' must be a single character string")
            if len(short) != 1 or short in "-/ ":
                raise ValueError("option-definition 'short' must be a single character other than '-', '/' or space")
        for flag in ("valued", "multiple"):
            if not isinstance(metadata[flag], bool):
                raise TypeError(f"option-definition {flag!r} must be a boolean")

        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    @property
    def spelling(self):
        """
        Human-facing spelling: "-s, --name" or "--name".
        """
        return f"-{self.short}, --{self.name}" if self.short else f"--{self.name}"


class ArgumentDefinition(metaclass=DefinitionType):
    """
    Positional argument bound by ascending `position` (zero-based).
    """

    __introspectable__ = (
        "name",
        "descr",
        "type",
        "default",
        "required",
        "position",
    )

    def __init__(
            self,
            name,
            /,
            type=str,
            default=None,
            descr=Unset,
            *,
            required=False,
            position=0
    ):
        metadata = {
            "name": name,
            "descr": descr,
            "type": type,
            "default": default,
            "required": required,
            "position": position,
        }
        _sanitize_metadata(ArgumentDefinition, metadata)
        _sanitize_typed_metadata(ArgumentDefinition, metadata)

        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError("argument-definition 'position' must be an integer")
        if position < 0:
            raise ValueError("argument-definition 'position' cannot be negative")

        for field, value in metadata.items():
            setattr(self, "_" + field, value)


class CommandDefinition(metaclass=DefinitionType):
    """
    A routable command.

    Fields
    - name: unique (case-insensitive) across the registry, like every alias.
    - command: opaque handle given to the command factory (a Command subclass,
      a Command instance, or a plain callable).
    - parent: dotted path of the parent command ("git.remote"), None for roots.
      It is not checked at registration; routing resolves it lazily.
    - hidden: routable but omitted from help listings.
    - nohelp: the automatic "--help"/"-h" handling is disabled; the command
      receives the flag and renders its own help.
    """

    __introspectable__ = (
        "name",
        "descr",
        "command",
        "aliases",
        "parent",
        "options",
        "arguments",
        "hidden",
        "nohelp",
    )

    __displayable__ = (
        "name",
        "descr",
        "aliases",
        "parent",
        "options",
        "arguments",
    )

    def __init__(
            self,
            name,
            command=None,
            /,
            descr=Unset,
            aliases=(),
            parent=None,
            options=(),
            arguments=(),
            *,
            hidden=False,
            nohelp=False
    ):
        metadata = {
            "name": name,
            "descr": descr,
        }
        _sanitize_metadata(CommandDefinition, metadata)

        if isinstance(aliases, str):
            raise TypeError("command-definition 'aliases' must be an iterable of strings, not a string")
        sanitized = []
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError("command-definition aliases must be strings")
            elif not (alias := alias.strip()):
                raise ValueError("command-definition aliases cannot be empty-strings")
            sanitized.append(alias)

        if parent is not None:
            if not isinstance(parent, str):
                raise TypeError("command-definition 'parent' must be a string")
            parent = parent.strip() or None

        self._name = metadata["name"]
        self._descr = metadata["descr"]
        self._command = command
        self._aliases = tuple(sanitized)
        self._parent = parent
        self._options = []
        self._arguments = []
        self._hidden = bool(hidden)
        self._nohelp = bool(nohelp)
        self._sealed = False

        for option in options:
            self.add_option(option)
        for argument in arguments:
            self.add_argument(argument)

    @property
    def names(self):
        """
        The primary name followed by every alias.
        """
        return (self.name, *self.aliases)

    @property
    def sealed(self):
        return self._sealed

    @property
    def path(self):
        """
        Dotted path of this command ("git.remote.add"); children use it as their parent key.
        """
        return f"{self.parent}.{self.name}" if self.parent else self.name

    def matches(self, token, /):
        """
        True when `token` equals the name or an alias (case-insensitive).
        """
        return any(same(token, name) for name in self.names)

    def add_option(self, option, /):
        """
        Append an option; long and short names must be unique within the command.
        """
        if self._sealed:
            raise RegistrySealedError(f"command {self.name!r} is sealed; options cannot be added", command=self)
        if not isinstance(option, OptionDefinition):
            raise TypeError("add_option() argument must be an OptionDefinition")
        for other in self._options:
            if same(other.name, option.name):
                raise DuplicateOptionError(
                    f"option '--{option.name}' is already defined on command {self.name!r}",
                    command=self,
                    option=option,
                )
            if option.short and other.short and same(other.short, option.short):
                raise DuplicateOptionError(
                    f"short option '-{option.short}' is shared by '--{other.name}' and '--{option.name}' on command {self.name!r}",
                    command=self,
                    option=option,
                )
        self._options.append(option)
        return option

    def add_argument(self, argument, /):
        """
        Append a positional argument; names and positions must be unique within the command.
        """
        if self._sealed:
            raise RegistrySealedError(f"command {self.name!r} is sealed; arguments cannot be added", command=self)
        if not isinstance(argument, ArgumentDefinition):
            raise TypeError("add_argument() argument must be an ArgumentDefinition")
        for other in self._arguments:
            if same(other.name, argument.name):
                raise DuplicateArgumentError(
                    f"argument {argument.name!r} is already defined on command {self.name!r}",
                    command=self,
                    argument=argument,
                )
            if other.position == argument.position:
                raise DuplicateArgumentError(
                    f"arguments {other.name!r} and {argument.name!r} share position {argument.position} on command {self.name!r}",
                    command=self,
                    argument=argument,
                )
        self._arguments.append(argument)
        return argument

    def find_option(self, name, /):
        """
        The option whose long or short name is `name`, or None.
        """
        for option in self._options:
            if same(option.name, name) or (option.short and same(option.short, name)):
                return option
        return None

    def find_argument(self, name, /):
        for argument in self._arguments:
            if same(argument.name, name):
                return argument
        return None

    def ordered_arguments(self):
        return tuple(sorted(self._arguments, key=operator.attrgetter("position")))

    def _seal(self):
        self._sealed = True


__all__ = (
    "OptionDefinition",
    "ArgumentDefinition",
    "CommandDefinition",
)

# Keep the metaclass out of star-imports and documentation.
del DefinitionType
