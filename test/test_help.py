"""
Help rendering behavioral tests (global, group and leaf layouts).

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with MemoryOutput and compared line by line.
"""

from __future__ import annotations

import enum
import unittest
from unittest import TestCase

from helmsman import (
    ArgumentDefinition,
    CommandDefinition,
    CommandRegistry,
    HelpGenerator,
    MemoryOutput,
    OptionDefinition,
)


class Mode(enum.Enum):
    FAST = 1
    SAFE = 2


class TestHelpGenerator(TestCase):
    """Behavioral tests for HelpGenerator."""

    def setUp(self):
        self.registry = CommandRegistry()
        self.greet = self.registry.register(CommandDefinition(
            "greet",
            descr="Greets a person",
            options=[
                OptionDefinition("name", "n", descr="Your name", default="World"),
                OptionDefinition("formal", type=bool, descr="Use formal greeting"),
                OptionDefinition("mode", type=Mode, default=Mode.SAFE),
                OptionDefinition("token", descr="API token", required=True),
            ],
            arguments=[
                ArgumentDefinition("target", descr="Who to greet", required=True),
                ArgumentDefinition("times", int, 1, position=1),
            ],
        ))
        self.git = self.registry.register(CommandDefinition("git", descr="Version control"))
        self.registry.register(CommandDefinition("remote", descr="Manage remotes", parent="git"))
        self.registry.register(CommandDefinition("add", parent="git.remote"))
        self.registry.register(CommandDefinition("secret", descr="Not listed", hidden=True))
        self.registry.register(CommandDefinition("internal", parent="git", hidden=True))
        self.output = MemoryOutput()
        self.help = HelpGenerator(self.registry, self.output, prog="")

    def testGlobalHelp(self):
        self.help.render_global()
        self.assertEqual(self.output.lines, [
            "Usage: [command] [options]",
            "",
            "Available commands:",
            "",
            f"  {'git':<20} Version control",
            f"    {'remote':<18} Manage remotes",
            f"      {'add':<16} No description",
            f"  {'greet':<20} Greets a person",
            "",
            "Options:",
            "  -h, --help          Show this help message",
            "",
            "Run '[command] --help' for more information on a command.",
        ])
        self.assertEqual(self.output.errors, [])

    def testGlobalHelpWithProgramName(self):
        HelpGenerator(self.registry, self.output, prog="tool").render_global()
        self.assertEqual(self.output.lines[0], "Usage: tool [command] [options]")
        self.assertEqual(self.output.lines[-1], "Run 'tool [command] --help' for more information on a command.")

    def testGroupHelp(self):
        self.help.render_command(self.git, ("git",))
        self.assertEqual(self.output.lines, [
            "Usage: git <command> [options]",
            "",
            "Version control",
            "",
            "Commands:",
            "",
            f"  {'remote':<20} Manage remotes",
            "",
            "Options:",
            "  -h, --help          Show this help message",
            "",
            "Run 'git <command> --help' for more information on a command.",
        ])

    def testNestedGroupUsesFullPath(self):
        remote = self.registry.get_command("remote")
        self.help.render_command(remote)
        self.assertEqual(self.output.lines[0], "Usage: git remote <command> [options]")
        self.assertIn(f"  {'add':<20} No description", self.output.lines)

    def testLeafHelp(self):
        self.help.render_command(self.greet, ("greet",))
        self.assertEqual(self.output.lines, [
            "Usage: greet <target> [times] [options]",
            "",
            "Greets a person",
            "",
            "Arguments:",
            f"  {'target':<25} Who to greet (required)",
            f"  {'times':<25} No description [int] (default: 1)",
            "",
            "Options:",
            f"  {'-n, --name <string>':<30} Your name (default: World)",
            f"  {'--formal':<30} Use formal greeting",
            f"  {'--mode <mode>':<30} No description (default: SAFE)",
            f"  {'--token <string>':<30} API token (required)",
            f"  {'-h, --help':<30} Show this help message",
        ])

    def testGroupWithOnlyHiddenChildrenKeepsGroupLayout(self):
        tools = self.registry.register(CommandDefinition("tools", descr="Maintenance"))
        self.registry.register(CommandDefinition("purge", parent="tools", hidden=True))
        self.help.render_command(tools, ("tools",))
        self.assertEqual(self.output.lines, [
            "Usage: tools <command> [options]",
            "",
            "Maintenance",
            "",
            "Commands:",
            "",
            "",
            "Options:",
            "  -h, --help          Show this help message",
            "",
            "Run 'tools <command> --help' for more information on a command.",
        ])

    def testLeafWithoutOptionsOrArguments(self):
        leaf = self.registry.get_command("add")
        self.help.render_command(leaf, ("git", "remote", "add"))
        self.assertEqual(self.output.lines, [
            "Usage: git remote add [options]",
            "",
            "Options:",
            "  -h, --help          Show this help message",
        ])

    def testRenderDispatch(self):
        self.help.render()
        self.assertEqual(self.output.lines[2], "Available commands:")

    def testRenderRequiresDefinition(self):
        with self.assertRaises(TypeError):
            self.help.render_command("greet")


if __name__ == "__main__":
    unittest.main()
