"""
Helmsman help rendering: usage, arguments, options and subcommands from the same
definitions used for parsing.

Layouts
- Global help: every visible root command and, indented, its children (recursively),
  names padded to a fixed column and followed by their description.
- Group help (command with children): usage with "<command>", description, the
  "Commands:" section and the built-in help option.
- Leaf help: usage listing required arguments as <name> and optional ones as [name]
  by position, then "Arguments:" and "Options:" sections with type tags,
  "(required)" and "(default: ...)" suffixes, and the built-in help option.

Rendering is pure: it reads the registry and writes lines to the output sink.
The program name shown in usage lines can be set by the host via __prog__ in __main__.
"""
import enum

from .converters import typename, unwrap
from .definitions import CommandDefinition
from .registry import CommandRegistry
from .utils import *

PLACEHOLDER = "No description"
HELP_LINE = "Show this help message"

_NAME_WIDTH = 20
_ARGUMENT_WIDTH = 25
_OPTION_WIDTH = 30


def _display(value):
    if isinstance(value, enum.Enum):
        return value.name
    return str(value)


def _suffixes(definition):
    required = " (required)" if definition.required else ""
    default = f" (default: {_display(definition.default)})" if definition.default is not None else ""
    return required + default


class HelpGenerator:

    def __init__(self, registry, output, /, prog=Unset):
        if not isinstance(registry, CommandRegistry):
            raise TypeError("help-generator registry must be a CommandRegistry")
        self._registry = registry
        self._output = output
        self._prog = prog

    @property
    def prog(self):
        """
        Program name prefixed to usage lines (explicit value, then __main__.__prog__, else none).
        """
        return coalesce(self._prog, getattr(__import__("__main__"), "__prog__", None))

    def _usage(self, *parts):
        return " ".join(part for part in (self.prog, *parts) if part)

    def _children(self, parent):
        children = (child for child in self._registry.get_subcommands(parent) if not child.hidden)
        return sorted(children, key=lambda child: fold(child.name))

    def render(self, definition=None, path=(), /):
        if definition is None:
            return self.render_global()
        return self.render_command(definition, path)

    def render_global(self):
        write = self._output.write_line

        write("Usage: %s" % self._usage("[command]", "[options]"))
        write()
        write("Available commands:")
        write()

        roots = sorted((root for root in self._registry.get_root_commands() if not root.hidden), key=lambda root: fold(root.name))
        for root in roots:
            self._render_tree(root, 0)

        write()
        write("Options:")
        write(f"  {'-h, --help':<{_NAME_WIDTH}}{HELP_LINE}")
        write()
        write("Run '%s --help' for more information on a command." % self._usage("[command]"))

    def _render_tree(self, definition, level):
        indent = "  " * level
        width = max(_NAME_WIDTH - 2 * level, len(definition.name))
        self._output.write_line(f"  {indent}{definition.name:<{width}} {definition.descr or PLACEHOLDER}")
        for child in self._children(definition.path):
            self._render_tree(child, level + 1)

    def render_command(self, definition, path=(), /):
        if not isinstance(definition, CommandDefinition):
            raise TypeError("render_command() argument must be a CommandDefinition")
        command = " ".join(path) if path else definition.path.replace(".", " ")

        # hidden children still make a group; they are only left out of the listing
        if self._registry.get_subcommands(definition.path):
            self._render_group(definition, command, self._children(definition.path))
        else:
            self._render_leaf(definition, command)

    def _render_group(self, definition, command, children):
        write = self._output.write_line

        write("Usage: %s" % self._usage(command, "<command>", "[options]"))
        write()
        if definition.descr:
            write(definition.descr)
            write()

        write("Commands:")
        write()
        for child in children:
            write(f"  {child.name:<{_NAME_WIDTH}} {child.descr or PLACEHOLDER}")

        write()
        write("Options:")
        write(f"  {'-h, --help':<{_NAME_WIDTH}}{HELP_LINE}")
        write()
        write("Run '%s --help' for more information on a command." % self._usage(command, "<command>"))

    def _render_leaf(self, definition, command):
        write = self._output.write_line
        arguments = definition.ordered_arguments()

        usage = [f"<{argument.name}>" if argument.required else f"[{argument.name}]" for argument in arguments]
        write("Usage: %s" % self._usage(command, *usage, "[options]"))
        write()
        if definition.descr:
            write(definition.descr)
            write()

        if arguments:
            write("Arguments:")
            for argument in arguments:
                tag = f" [{typename(argument.type)}]" if unwrap(argument.type) is not str else ""
                write(f"  {argument.name:<{_ARGUMENT_WIDTH}} {argument.descr or PLACEHOLDER}{tag}{_suffixes(argument)}")
            write()

        write("Options:")
        if not definition.options:
            write(f"  {'-h, --help':<{_NAME_WIDTH}}{HELP_LINE}")
            return

        for option in definition.options:
            spelling = option.spelling
            if option.valued and unwrap(option.type) is not bool:
                spelling += f" <{typename(option.type)}>"
            write(f"  {spelling:<{_OPTION_WIDTH}} {option.descr or PLACEHOLDER}{_suffixes(option)}")
        write(f"  {'-h, --help':<{_OPTION_WIDTH}} {HELP_LINE}")


__all__ = (
    "PLACEHOLDER",
    "HelpGenerator",
)
