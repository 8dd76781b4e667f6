r"""
Cronos parser: command registry, token dispatcher and help screen.

Overview
- Parser(*commands, messages=Unset, shell=True, colorful=False, fancy=False)
  registers command classes (instantiated with no arguments) or ready-made
  instances. The first one registered is the root command.
- parse(argv=Unset, multi=False) walks the tokens left to right:
  • "--help" prints the help screen and exits with status 0;
  • a registered command name switches the active command (see below);
  • "--" makes every remaining token positional;
  • "--name" assigns a long option;
  • "-x"/"+x" assigns one option when "x" is a known token, otherwise every
    character is assigned as a short option ("-abc" is "-a -b -c"); "+"
    stores False into boolean options;
  • anything else is positional ("\-x" is the literal positional "-x").
  When the active command changes, or at the end of the input, the active
  command is flushed: its positionals are recorded and its required options
  checked. Then the handler of every command that took part runs, in the
  order the commands were first seen.

Command switching
- multi=False: once a sub-command has been selected, further command names
  are plain positionals.
- multi=True: several sub-commands may follow each other; a command already
  seen (or the active one) is positional.

Usage errors are surfaced through trigger(): in shell mode a one-line
diagnostic goes to stderr and the process exits with status -1, otherwise
the CommandException is raised to the caller.

Example:
    >>> parser = Parser(Git, Add, Commit)
    >>> parser.parse(["-v", "commit", "-m", "initial import"])
"""
import collections
import enum
import logging
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .coercion import coerce
from .commands import CommandInfo, command_of
from .dispatch import Shape, invoke
from .faults import (
    DelegatedCommandError,
    InvalidValueError,
    MissingArgumentError,
    MissingRequiredError,
    NoCommandError,
    UnknownOptionError,
    trigger as _trigger,
)
from .formatting import csplit, format_lines
from .messages import Messages
from .parameters import DescriptorType
from .prompts import read_secret
from .utils import *

logger = logging.getLogger(__name__)

console = Console()


class Polarity(enum.Enum):
    """
    prefix an option was given with.
    """
    LONG = "--"
    SHORT = "-"
    REVERSE = "+"


class Parser(metaclass=DescriptorType):
    """
    Command registry and command-line dispatcher.

    Parameters
    - *commands: command classes or instances; a list/tuple/set argument
      registers each of its items.
    - messages: Messages used for help texts and diagnostics (defaults to the
      built-in English catalog).
    - shell: print usage errors and exit (True) or raise them (False).
    - colorful: highlight the help screen and diagnostics.
    - fancy: render diagnostics inside a panel.
    """

    __introspectable__ = (
        "messages",
        "shell",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "root",
        "shell",
        "colorful",
        "fancy",
    )

    def __init__(self, *commands, messages=Unset, shell=True, colorful=False, fancy=False):
        if not isinstance(messages := coalesce(messages, Messages.default()), Messages):
            raise TypeError(f"{type(self).__typename__} 'messages' must be a Messages instance")

        self._messages = messages
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

        self._commands = {}
        self._instances = {}
        self._root = None
        self._active = None

        for source in commands:
            if isinstance(source, list | tuple | set | frozenset):
                for item in source:
                    self.register(item)
            else:
                self.register(source)

    @property
    def root(self):
        """
        CommandInfo of the root command (None until something is registered).
        """
        return self._root

    @property
    def active(self):
        """
        CommandInfo of the command receiving options during the current parse.
        """
        return self._active

    @property
    def commands(self):
        return dict(self._commands)

    def register(self, source, /):
        """
        Register a command class or instance and return the parser.

        A class is instantiated with no arguments; it must be decorated with
        @command. Registering a name twice is an error.
        """
        klass = source if isinstance(source, type) else type(source)
        spec = command_of(klass, self._messages)

        if (existing := self._commands.get(spec.name)) is not None:
            raise ValueError(self._messages.format(
                "CLI_CLICOMMAND_ALREADY_REGISTERED",
                spec.name,
                klass.__qualname__,
                type(existing.instance).__qualname__
            ))

        if isinstance(source, type):
            try:
                instance = klass()
            except Exception as exception:
                raise TypeError(self._messages.format("CLI_CLICOMMAND_INSTANTIATION_ERROR", klass.__qualname__)) from exception
        else:
            instance = source

        info = CommandInfo(instance, messages=self._messages, context=type(self))
        self._instances[klass] = instance
        self._commands[info.name] = info
        if self._root is None:
            self._root = info
        logger.debug("registered command %r (%s) with %d parameter(s)", info.name, info.shape.name, len(info.bindings))
        return self

    def get(self, klass, /):
        """
        Live instance registered for klass, or None.
        """
        return self._instances.get(klass)

    def trigger(self, fault, /, **options):
        """
        Surface a usage error with this parser's rendering options.
        """
        _trigger(fault, **options, tool=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def parse(self, argv=Unset, /, multi=False):
        """
        Parse argv (sys.argv[1:] by default), then run the handlers.

        argv may be a string, split shell-style. Returns a dict mapping every
        command instance that took part to its positional tokens, in the order
        the commands were first seen.
        """
        if self._root is None:
            self.trigger(NoCommandError(self._messages.resolve("CLI_CLICOMMAND_NO_COMMAND")))

        argv = coalesce(argv, sys.argv[1:])
        if isinstance(argv, str):
            argv = shlex.split(argv)
        if not isinstance(argv, Iterable):
            raise TypeError("parse() argv must be a string or an iterable of strings")
        argv = list(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argv must be a string or an iterable of strings")

        for info in self._commands.values():
            info.reset()

        logger.debug("parsing %r (multi=%s)", argv, multi)
        tokens = collections.deque(argv)
        staged = {}
        params = []
        self._active = self._root

        while tokens:
            token = tokens.popleft()

            if token == "--help":
                self.show_help()
                sys.exit(0)

            if (info := self._commands.get(token)) is not None:
                if info is self._active or info in staged or (not multi and staged):
                    params.append(token)
                else:
                    self._stage(staged, params)
                    params = []
                    logger.debug("switching from %r to %r", self._active.name, info.name)
                    self._active = info
                continue

            if token == "--":
                params.extend(tokens)
                tokens.clear()
            elif token.startswith(Polarity.LONG.value):
                self._assign(token[2:], tokens, Polarity.LONG)
            elif token.startswith((Polarity.SHORT.value, Polarity.REVERSE.value)):
                polarity = Polarity(token[0])
                if (option := token[1:]) in self._active:
                    self._assign(option, tokens, polarity)
                else:
                    for char in csplit(option):
                        self._assign(char, tokens, polarity)
            else:
                params.append(token[1:] if token.startswith("\\") else token)

        self._stage(staged, params)

        for info, positionals in staged.items():
            self._run(info, positionals)

        return {info.instance: list(positionals) for info, positionals in staged.items()}

    def _stage(self, staged, params):
        # flush the active command: record its positionals, check required options
        staged[self._active] = params
        logger.debug("flushing %r with positionals %r", self._active.name, params)
        for binding in self._active.missing():
            self.trigger(MissingRequiredError(self._messages.format("CLI_PARAMETER_REQUIRED_MISSING", binding.name)))

    def _assign(self, option, tokens, polarity):
        if (binding := self._active.lookup(option)) is None:
            self.trigger(UnknownOptionError(self._messages.format("CLI_PARAMETER_UNKNOWN", option)))

        parameter = binding.parameter
        if parameter.secret:
            value = self._coerce(parameter, read_secret(parameter.prompt), polarity.value + option)
        elif parameter.boolean:
            value = polarity is not Polarity.REVERSE
        else:
            if not tokens:
                self.trigger(MissingArgumentError(self._messages.format("CLI_PARAMETER_ARGUMENT_MISSING", polarity.value, option)))
            value = self._coerce(parameter, tokens.popleft(), polarity.value + option)

        logger.debug("assigning %s.%s", self._active.name, binding.name)
        binding.assign(value)

    def _coerce(self, parameter, raw, option):
        try:
            return coerce(parameter.kind, raw)
        except ValueError as exception:
            self.trigger(InvalidValueError(self._messages.format("CLI_PARAMETER_VALUE_INVALID", option, raw, exception)))

    def _run(self, info, positionals):
        if info.shape is Shape.NONE:
            logger.debug("command %r has no handler", info.name)
            return
        try:
            invoke(info, list(positionals), self, messages=self._messages)
        except DelegatedCommandError as error:
            logger.debug("command %r failed", info.name, exc_info=error.__cause__)
            self.trigger(error)

    def render_help(self):
        """
        Build the full help screen as plain text.

        Root help, the synthesized --help entry, every sub-command (sorted by
        name) with its notes, then the root notes.
        """
        if self._root is None:
            self.trigger(NoCommandError(self._messages.resolve("CLI_CLICOMMAND_NO_COMMAND")))

        resolve = self._messages.resolve
        parts = [
            self._root.help(False),
            "\n      --help" + " " * 22 + resolve("CLI_HELP"),
        ]
        for info in sorted((info for info in self._commands.values() if info is not self._root), key=lambda info: info.name):
            parts.append("\n\n[%s '%s']\n\n" % (resolve("CLI_COMMAND"), info.name))
            parts.append(info.help(True))
        parts.append(format_lines([resolve(note) for note in self._root.notes], True) + "\n")
        return "".join(parts)

    def show_help(self):
        """
        Print the help screen to stdout.

        With colorful=True command headers and option labels are highlighted;
        palette entries may be overridden by a __styles__ mapping in __main__.
        """
        text = Text(self.render_help())
        if self._colorful:
            styles = defaultdict(str, {
                "command-header": "bold #FF4DA6",
                "option-name": "bold #00E5FF",
            } | getattr(__import__("__main__"), "__styles__", {}))
            text.highlight_regex(r"(?m)^\[.+\]$", styles["command-header"])
            text.highlight_regex(r"(?m)(?<=^  )-[\w-]+(?:, --?[\w-]+)?", styles["option-name"])
            text.highlight_regex(r"(?m)(?<=^      )--?[\w-]+", styles["option-name"])
        console.print(text, soft_wrap=True, highlight=False, end="")


__all__ = (
    "Parser",
    "Polarity",
)
