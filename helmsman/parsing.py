r"""
Helmsman tokenizer: split a pre-tokenized argument vector into options and positionals.

Grammar (POSIX/GNU with opt-in Windows style)
- "--"            ends option parsing; every later token is positional (including further "--").
- "--name"        long flag; long options never consume the following token.
- "--name=value"  long option with an explicit value (split on the first '=').
- "-n"            short option; the next token is consumed as its value unless it looks like an option.
- "-abc"          combined short flags a, b, c (when enabled); otherwise one option named "abc".
- "/name"         Windows-style option (when enabled); same value rule as a single short option.
- anything else   positional.

"Looks like an option" means: starts with '-', or with '/' when Windows style is enabled.

The parser never fails on malformed input: unrecognized shapes degrade to positionals.
"""
from collections.abc import Iterable

from .converters import convert, unwrap, zero
from .faults import TypeConversionError
from .utils import *


class ParserOptions:
    """
    Style flags for ArgumentParser.

    - allow_windows_style: accept "/name" options (default True).
    - allow_combined_short_options: expand "-abc" into "-a -b -c" (default True).
    """
    __slots__ = ("_allow_windows_style", "_allow_combined_short_options")

    allow_windows_style = mirror("allow_windows_style")
    allow_combined_short_options = mirror("allow_combined_short_options")

    def __init__(self, *, allow_windows_style=True, allow_combined_short_options=True):
        if not isinstance(allow_windows_style, bool):
            raise TypeError("parser-options 'allow_windows_style' must be a boolean")
        if not isinstance(allow_combined_short_options, bool):
            raise TypeError("parser-options 'allow_combined_short_options' must be a boolean")
        self._allow_windows_style = allow_windows_style
        self._allow_combined_short_options = allow_combined_short_options

    def optionlike(self, token, /):
        """
        True when `token` would be read as an option rather than a value.
        """
        if not token:
            return False
        return token.startswith("-") or (self.allow_windows_style and token.startswith("/"))

    def __repr__(self):
        return "parser-options(allow_windows_style=%r, allow_combined_short_options=%r)" % (
            self.allow_windows_style,
            self.allow_combined_short_options,
        )


class ParsedArguments:
    """
    Result of one parse: options (ordered multimap), positionals, and router-bound named arguments.

    Lookups by option or argument name are case-insensitive; the first spelling
    seen for a name is the one reported by option_names.
    """

    def __init__(self):
        self._options = {}  # folded name -> (spelling, [values])
        self._positionals = []
        self._named = {}  # folded name -> value

    @property
    def option_names(self):
        return tuple(spelling for spelling, _ in self._options.values())

    @property
    def positionals(self):
        return tuple(self._positionals)

    def add_option(self, name, value=None, /):
        """
        Record an option occurrence; a None value records presence only.
        """
        _, values = self._options.setdefault(fold(name), (name, []))
        if value is not None:
            values.append(value)

    def add_positional(self, value, /):
        self._positionals.append(value)

    def add_named_argument(self, name, value, /):
        self._named[fold(name)] = value

    def has_option(self, name, /):
        return fold(name) in self._options

    def get_option_value(self, name, /):
        """
        First value recorded for `name`, or None (absent or flag-only).
        """
        try:
            _, values = self._options[fold(name)]
        except KeyError:
            return None
        return values[0] if values else None

    def get_option_values(self, name, type=Unset, /):
        """
        Every value recorded for `name`.

        Without `type` the raw strings are returned; with `type` each value is
        converted and unparsable entries are skipped.
        """
        try:
            _, values = self._options[fold(name)]
        except KeyError:
            return ()
        if type is Unset:
            return tuple(values)

        converted = []
        for value in values:
            try:
                converted.append(convert(value, type))
            except TypeConversionError:
                continue
        return tuple(converted)

    def get_positional(self, index, /):
        return self._positionals[index] if 0 <= index < len(self._positionals) else None

    def try_get_value(self, name, type=str, /):
        """
        Strict accessor: (True, value) when `name` has a value convertible to `type`, else (False, None).
        """
        if (raw := self.get_option_value(name)) is None:
            return False, None
        try:
            return True, convert(raw, type)
        except TypeConversionError:
            return False, None

    def get_option(self, name, type=str, default=None, /):
        """
        Typed option value with a caller-supplied default.

        Booleans: present without a value ⇒ True; absent ⇒ `default`.
        """
        if unwrap(type) is bool:
            if not self.has_option(name):
                return default
            if not (raw := self.get_option_value(name)):
                return True
            return convert(raw, type)

        found, value = self.try_get_value(name, type)
        return value if found else default

    def get_argument(self, index, type=str, /):
        """
        Positional at `index` converted to `type`; missing or unparsable ⇒ the type's zero value.
        """
        if (raw := self.get_positional(index)) is None:
            return zero(type)
        try:
            return convert(raw, type)
        except TypeConversionError:
            return zero(type)

    def get_named_argument(self, name, type=Unset, /):
        """
        Router-bound argument value; raw string without `type`, otherwise converted (zero value on failure).
        """
        raw = self._named.get(fold(name))
        if type is Unset:
            return raw
        if raw is None:
            return zero(type)
        try:
            return convert(raw, type)
        except TypeConversionError:
            return zero(type)

    def has_named_argument(self, name, /):
        return fold(name) in self._named

    def __rich_repr__(self):
        yield "options", {spelling: tuple(values) for spelling, values in self._options.values()}
        yield "positionals", self.positionals
        yield "named", dict(self._named)

    def __repr__(self):
        return "parsed-arguments(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class ArgumentParser:
    """
    Stateless tokenizer; a single instance can be shared across invocations.
    """

    def __init__(self, options=Unset, /):
        options = coalesce(options, ParserOptions())
        if not isinstance(options, ParserOptions):
            raise TypeError("argument-parser options must be a ParserOptions instance")
        self._options = options

    options = mirror("options")

    def parse(self, args, /):
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        args = list(args)
        result = ParsedArguments()
        index = 0
        terminated = False

        while index < len(args):
            token = args[index]

            if token == "--" and not terminated:
                terminated = True
                index += 1
                continue

            if terminated:
                result.add_positional(token)
                index += 1
                continue

            if token.startswith("--") and len(token) > 2:
                index = self._long(args, index, result)
                continue

            if token.startswith("-") and len(token) > 1 and token[1] != "-":
                index = self._short(args, index, result)
                continue

            if self._options.allow_windows_style and token.startswith("/") and len(token) > 1:
                index = self._valued(args, index, token[1:], result)
                continue

            result.add_positional(token)
            index += 1

        return result

    def _long(self, args, index, result):
        option = args[index][2:]
        # '=' at position 0 is part of the name ("--=x" is a flag named "=x")
        if (equal := option.find("=")) > 0:
            result.add_option(option[:equal], option[equal + 1:])
        else:
            result.add_option(option)
        return index + 1

    def _short(self, args, index, result):
        letters = args[index][1:]

        if len(letters) == 1:
            return self._valued(args, index, letters, result)

        if self._options.allow_combined_short_options:
            for letter in letters:
                result.add_option(letter)
            return index + 1

        result.add_option(letters)
        return index + 1

    def _valued(self, args, index, name, result):
        following = index + 1
        if following < len(args) and not self._options.optionlike(args[following]):
            result.add_option(name, args[following])
            return index + 2
        result.add_option(name)
        return index + 1


__all__ = (
    "ParserOptions",
    "ParsedArguments",
    "ArgumentParser",
)
