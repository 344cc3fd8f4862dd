"""
Helmsman command registry: the write-once, read-many catalogue of command definitions.

Contract
- register(definition): every name and alias must be unique (case-insensitive) across
  the whole registry. The complete uniqueness check runs before anything is inserted,
  so a rejected definition never leaves a partial entry behind.
- try_get_command / get_command: exact name or alias lookup, case-insensitive.
- get_root_commands / get_subcommands: filter by parent path, one entry per definition
  (aliases never double-count), in registration order.
- seal(): freeze the registry and every definition in it. Routing seals it on first use.
"""
import logging

from .definitions import CommandDefinition
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    Owned catalogue passed by reference to the router, the help generator and the application.
    """

    def __init__(self):
        self._entries = {}  # folded name or alias -> definition
        self._definitions = []  # registration order, one per definition
        self._sealed = False

    @property
    def commands(self):
        """
        Every registered definition, once each, in registration order.
        """
        return tuple(self._definitions)

    @property
    def sealed(self):
        return self._sealed

    def register(self, definition, /):
        if not isinstance(definition, CommandDefinition):
            raise TypeError("register() argument must be a CommandDefinition")
        if self._sealed:
            raise RegistrySealedError(
                f"registry is sealed; command {definition.name!r} cannot be registered",
                command=definition,
            )

        claimed = {}
        for name in definition.names:
            if (key := fold(name)) in claimed:
                raise DuplicateNameError(
                    f"command {definition.name!r} lists {name!r} more than once",
                    command=definition,
                    name=name,
                )
            if key in self._entries:
                owner = self._entries[key]
                kind = "name" if same(name, definition.name) else "alias"
                raise DuplicateNameError(
                    f"command {kind} {name!r} is already registered by command {owner.name!r}",
                    command=definition,
                    name=name,
                )
            claimed[key] = definition

        self._entries.update(claimed)
        self._definitions.append(definition)
        logger.debug("registered command %r (aliases=%r, parent=%r)", definition.name, definition.aliases, definition.parent)
        return definition

    def try_get_command(self, name, /):
        """
        The definition registered under `name` (name or alias), or None.
        """
        return self._entries.get(fold(name))

    def get_command(self, name, /):
        if (definition := self.try_get_command(name)) is None:
            raise CommandNotFoundError(f"command {name!r} not found", name=name)
        return definition

    def get_root_commands(self):
        return tuple(definition for definition in self._definitions if not definition.parent)

    def get_subcommands(self, parent, /):
        """
        Definitions whose parent path equals `parent` (case-insensitive).
        """
        return tuple(definition for definition in self._definitions if definition.parent and same(definition.parent, parent))

    def seal(self):
        if self._sealed:
            return
        for definition in self._definitions:
            definition._seal()
        self._sealed = True
        logger.debug("registry sealed with %d command(s)", len(self._definitions))

    def __contains__(self, name, /):
        return isinstance(name, str) and fold(name) in self._entries

    def __iter__(self):
        return iter(self.commands)

    def __len__(self):
        return len(self._definitions)

    def __rich_repr__(self):
        yield "commands", tuple(definition.name for definition in self._definitions)
        yield "sealed", self._sealed

    def __repr__(self):
        return "command-registry(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "CommandRegistry",
)
