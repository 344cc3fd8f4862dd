"""
Helmsman output sinks.

The core never prints directly: help, validation reports and top-level errors go
through an Output (write_line / write_error) supplied by the host.

- ConsoleOutput: rich consoles on stdout/stderr. User text is printed literally
  (no markup, no highlighting, no wrapping). Error lines use the "error" style,
  which the host can override through a __styles__ mapping in __main__.
- MemoryOutput: keeps every line in memory (capture in hosts and tests).
"""
from abc import ABC, abstractmethod
from collections import defaultdict

from rich.console import Console
from rich.text import Text


class Output(ABC):

    @abstractmethod
    def write_line(self, text="", /):
        ...

    @abstractmethod
    def write_error(self, text, /):
        ...


class ConsoleOutput(Output):

    def __init__(self, *, colorful=True, stdout=None, stderr=None):
        self.colorful = bool(colorful)
        self._stdout = stdout if stdout is not None else Console(highlight=False, soft_wrap=True)
        self._stderr = stderr if stderr is not None else Console(stderr=True, highlight=False, soft_wrap=True)

    def _style(self, name):
        styles = defaultdict(str, {
            "line": "",
            "error": "bold #FF4DA6",  # friendly pinky errors
        } | getattr(__import__("__main__"), "__styles__", {}))
        return styles[name] if self.colorful else ""

    def write_line(self, text="", /):
        self._stdout.print(Text(str(text), self._style("line")))

    def write_error(self, text, /):
        self._stderr.print(Text(str(text), self._style("error")))


class MemoryOutput(Output):

    def __init__(self):
        self.lines = []
        self.errors = []

    @property
    def text(self):
        return "\n".join(self.lines)

    @property
    def error_text(self):
        return "\n".join(self.errors)

    def write_line(self, text="", /):
        self.lines.append(str(text))

    def write_error(self, text, /):
        self.errors.append(str(text))


__all__ = (
    "Output",
    "ConsoleOutput",
    "MemoryOutput",
)
