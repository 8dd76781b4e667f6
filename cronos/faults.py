"""
Cronos faults (usage errors) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every usage error the parser can
  report. Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type carrying a message plus rendering options. It
  knows how to render itself through rich (one line, or a panel when fancy).
- trigger(): single entry point used by the parser to surface a fault.

Shell vs embedded
- shell=True (the default for a Parser): the fault is printed to stderr and
  the process exits with status -1.
- shell=False: the fault is raised so the embedding code can handle it.

Declaration errors (misdeclared commands or parameters) are not faults: they
are programming mistakes and are raised as TypeError/ValueError at
registration time.

Host customization
- __codes__ in __main__ remaps codes to custom labels.
- __prog__ in __main__ overrides the program name shown in the header.
- __styles__ in __main__ overrides palette entries.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

EXIT_FAILURE = -1


class FaultCode(IntEnum):
    """
    canonical usage-error codes.

    grouping
    - routing (1110x): NO_COMMAND
    - options (1111x/1112x): UNKNOWN_OPTION, MISSING_ARGUMENT, MISSING_REQUIRED, INVALID_VALUE
    - delegated (1113x): DELEGATED_ERROR (a command handler failed)
    """
    # --- routing errors ---
    NO_COMMAND                  = 11101

    # --- option errors ---
    UNKNOWN_OPTION              = 11112
    MISSING_ARGUMENT            = 11117
    MISSING_REQUIRED            = 11125
    INVALID_VALUE               = 11126

    # --- delegated errors ---
    DELEGATED_ERROR             = 11131

    def normalize(self):
        """
        return the host label for this code (see __codes__), or its number.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class of every usage error.

    options (all optional, merged in by trigger())
    - tool: the Parser reporting the fault (used for the program name).
    - code: FaultCode; title: short label; hint: one actionable sentence.
    - shell, fancy, colorful: rendering and termination switches.
    """
    code = Unset
    title = "usage error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        tool = self.options.get("tool")
        prog = getattr(main, "__prog__", None) or getattr(getattr(tool, "root", None), "name", None) or "cronos"
        code = self.options.get("code", self.code)
        title = self.options.get("title", self.title)

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "", "code"),
            " | ",
            text(title, "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")

        if fancy:
            body = [message]
            if hint := self.options.get("hint"):
                body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
            return Panel(Group(*body), title=header, title_align="left")

        return Text.assemble(header, " ", message)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self, soft_wrap=True, highlight=False)
        sys.exit(EXIT_FAILURE)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = type(self)(self.message, **{**self.options, **overrides})
        clone.__cause__ = self.__cause__
        return clone


class NoCommandError(CommandException):
    code = FaultCode.NO_COMMAND
    title = "no command"


class UnknownOptionError(CommandException):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing option value"


class MissingRequiredError(CommandException):
    code = FaultCode.MISSING_REQUIRED
    title = "missing required option"


class InvalidValueError(CommandException):
    code = FaultCode.INVALID_VALUE
    title = "invalid option value"


class DelegatedCommandError(CommandException):
    code = FaultCode.DELEGATED_ERROR
    title = "command failed"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see CommandException).
    - options are merged into a copy of the fault, then the copy is triggered:
      raised when shell is false, printed (and the process ended) otherwise.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "NoCommandError",
    "UnknownOptionError",
    "MissingArgumentError",
    "MissingRequiredError",
    "InvalidValueError",
    "DelegatedCommandError",
    "EXIT_FAILURE",
    "trigger",
)
