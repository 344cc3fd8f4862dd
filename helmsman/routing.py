"""
Helmsman router: find the deepest command path matching the leading tokens.

Algorithm
- Start at the root (no parent) with the cursor on the first token.
- Stop when the token looks like an option.
- Otherwise scan the registry in registration order for a definition whose name or
  alias matches the token and whose parent equals the dotted path consumed so far.
  The first match wins: its name joins the path and the cursor advances.
- Stop at the first token that matches nothing.

The remaining tokens are handed to the parser by bind(), which also performs the two
remaps downstream code relies on:
- positionals are bound to ArgumentDefinitions by ascending position;
- values given under an option's short name are copied onto its long name.
"""
import logging
from typing import NamedTuple

from .definitions import CommandDefinition
from .parsing import ArgumentParser
from .registry import CommandRegistry
from .utils import *

logger = logging.getLogger(__name__)


class CommandRoute(NamedTuple):
    """
    Routing outcome: the matched definition (None on a miss), the consumed path and the unconsumed tokens.
    """
    definition: CommandDefinition | None
    path: tuple[str, ...]
    remaining: tuple[str, ...]

    @property
    def matched(self):
        return self.definition is not None

    @property
    def name(self):
        """
        Space-joined command path ("git remote add").
        """
        return " ".join(self.path)


class CommandRouter:

    def __init__(self, registry, /, parser=Unset):
        if not isinstance(registry, CommandRegistry):
            raise TypeError("command-router registry must be a CommandRegistry")
        parser = coalesce(parser, ArgumentParser())
        if not isinstance(parser, ArgumentParser):
            raise TypeError("command-router parser must be an ArgumentParser")
        self._registry = registry
        self._parser = parser

    registry = mirror("registry")
    parser = mirror("parser")

    def route(self, args, /):
        args = tuple(args)
        path = []
        definition = None
        index = 0

        while index < len(args):
            token = args[index]
            if self._parser.options.optionlike(token):
                break

            parent = ".".join(path) or None
            for candidate in self._registry.commands:
                if candidate.matches(token) and same(candidate.parent, parent):
                    definition = candidate
                    path.append(candidate.name)
                    index += 1
                    break
            else:
                break

        route = CommandRoute(definition, tuple(path), args[index:])
        logger.debug("routed %r to path %r with remaining %r", args, route.path, route.remaining)
        return route

    def parse_arguments(self, args, /):
        return self._parser.parse(args)

    def bind(self, route, /):
        """
        Parse the route's remaining tokens and apply the positional and short-name remaps.
        """
        if not isinstance(route, CommandRoute):
            raise TypeError("bind() argument must be a CommandRoute")
        arguments = self.parse_arguments(route.remaining)
        if route.definition is None:
            return arguments

        for argument, value in zip(route.definition.ordered_arguments(), arguments.positionals):
            arguments.add_named_argument(argument.name, value)

        # short-name values land after the long-name ones: "-t a --tag=b" reads ("b", "a") under "tag"
        for option in route.definition.options:
            if not option.short or not arguments.has_option(option.short):
                continue
            values = arguments.get_option_values(option.short)
            for value in values:
                arguments.add_option(option.name, value)
            if not values:
                arguments.add_option(option.name)

        return arguments


__all__ = (
    "CommandRoute",
    "CommandRouter",
)
