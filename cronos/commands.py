"""
Cronos command declarations.

Overview
- @command(name, descrs=(), notes=(), shape=Unset): class decorator marking a
  class as a command. The decorated class gets a CommandSpec as __command__.
- CommandSpec: the declaration itself (name, help texts, optional shape).
- CommandInfo: built by the parser for every registered command instance;
  it owns the parameter bindings and the token index used while parsing, and
  renders the command's help block.

Example:
    >>> from cronos import command, Parameter, Kind
    >>> @command("git", descrs=("GIT_DESCR",), notes=("GIT_NOTES",))
    ... class Git:
    ...     verbose = Parameter("-v", "--verbose", kind=Kind.BOOLEAN, descr="Be verbose")
    ...
    ...     def run(self, params):
    ...         print(params)

Descriptions and notes are plain text or message keys; they are resolved
against the parser's Messages when help is rendered.
"""
from collections.abc import Iterable

from .dispatch import Shape, infer_shape
from .formatting import format_lines, format_option, option_key, strip_prefix
from .messages import Messages
from .parameters import Binding, DescriptorType, parameters_of
from .utils import *


def _sanitize_texts(cls, name, texts, /):
    # a lone string is a single entry, not an iterable of characters
    if isinstance(texts, str):
        texts = (texts,)
    if not isinstance(texts, Iterable):
        raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of strings")
    for text in (texts := tuple(texts)):
        if not isinstance(text, str):
            raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of strings")
    return texts


class CommandSpec(metaclass=DescriptorType):
    """
    Declaration attached to a command class by @command.

    Parameters
    - name: str
      Token selecting the command on the command line. The first registered
      command is the root and its name is only used in help and diagnostics.
    - descrs: str | Iterable[str]
      Description paragraphs (text or message keys).
    - notes: str | Iterable[str]
      Notes printed after the option list (text or message keys).
    - shape: Unset | Shape
      Handler shape; inferred from the `run` signature when Unset.
    """

    __introspectable__ = (
        "name",
        "descrs",
        "notes",
        "shape",
    )

    def __init__(self, name, /, descrs=(), notes=(), shape=Unset):
        cls = type(self)
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()) or any(char.isspace() for char in name):
            raise ValueError(f"{cls.__typename__} 'name' must be a non-empty word")
        if not isinstance(shape, Shape | Unset):
            raise TypeError(f"{cls.__typename__} 'shape' must be a Shape")

        self._name = name
        self._descrs = _sanitize_texts(cls, "descrs", descrs)
        self._notes = _sanitize_texts(cls, "notes", notes)
        self._shape = shape


def command(name, /, descrs=(), notes=(), *, shape=Unset):
    """
    Declare the decorated class as a command (see CommandSpec).

    The class is returned unchanged apart from its __command__ attribute.
    """
    spec = CommandSpec(name, descrs, notes, shape)

    @rename("command")
    def decorator(klass):
        if not isinstance(klass, type):
            raise TypeError("@command() must be applied to a class")
        klass.__command__ = spec
        return klass

    return decorator


def command_of(klass, messages=Unset, /):
    """
    Return the CommandSpec declared on klass itself (not inherited).

    Raises TypeError when klass was not decorated with @command.
    """
    messages = coalesce(messages, Messages.default())
    if not isinstance(spec := vars(klass).get("__command__"), CommandSpec):
        raise TypeError(messages.format("CLI_CLICOMMAND_ANNOTATION_MISSING", klass.__qualname__))
    return spec


class CommandInfo(metaclass=DescriptorType):
    """
    Runtime descriptor of a registered command instance.

    Building one validates the parameter declarations of the instance's class
    and indexes every option token with its prefix stripped ("--all", "-a" and
    "+a" are looked up as "all" and "a"). Errors are fatal declaration errors:

    - a parameter without names (ValueError, CLI_PARAMETER_OPTIONS_EMPTY);
    - a required hidden parameter (ValueError, CLI_PARAMETER_REQUIRED_CANNOT_BE_HIDDEN);
    - a stripped token shared by two parameters (ValueError, CLI_PARAMETER_OPTIONS_CONFLICT).
    """

    __introspectable__ = (
        "spec",
        "shape",
        "bindings",
        "index",
    )

    __displayable__ = (
        "name",
        "shape",
        "bindings",
    )

    def __init__(self, instance, /, messages=Unset, context=None):
        messages = coalesce(messages, Messages.default())
        spec = command_of(type(instance), messages)

        bindings = []
        index = {}
        for name, parameter in parameters_of(type(instance)).items():
            if not parameter.names:
                raise ValueError(messages.format("CLI_PARAMETER_OPTIONS_EMPTY", name))
            if parameter.required and parameter.hidden:
                raise ValueError(messages.format("CLI_PARAMETER_REQUIRED_CANNOT_BE_HIDDEN", parameter.names[0], name))

            binding = Binding(parameter, instance, name)
            for option in parameter.names:
                if (key := strip_prefix(option)) in index:
                    raise ValueError(messages.format("CLI_PARAMETER_OPTIONS_CONFLICT", option, index[key].name, name))
                index[key] = binding
            bindings.append(binding)

        shape = spec.shape
        if shape is Unset:
            shape = infer_shape(getattr(instance, "run", None), context)
        elif shape is not Shape.NONE and not callable(getattr(instance, "run", None)):
            raise TypeError(f"{type(self).__typename__} {spec.name!r} declares shape {shape.name} but has no 'run' method")

        self._spec = spec
        self._instance = instance
        self._messages = messages
        self._shape = shape
        self._bindings = tuple(bindings)
        self._index = index

    @property
    def name(self):
        return self._spec.name

    @property
    def descrs(self):
        return self._spec.descrs

    @property
    def notes(self):
        return self._spec.notes

    @property
    def instance(self):
        return self._instance

    def lookup(self, token, /):
        """
        Binding of a prefix-stripped option token, or None.
        """
        return self._index.get(token)

    def __contains__(self, token):
        return token in self._index

    def reset(self):
        for binding in self._bindings:
            binding.reset()

    def missing(self):
        """
        Required bindings not assigned during the current parse (hidden ones included).
        """
        return [binding for binding in self._bindings if binding.parameter.required and not binding.assigned]

    def help(self, notes=False, /):
        """
        Render the help block of this command.

        Layout: wrapped descriptions, one line per visible option (sorted by
        the first declared name without its dashes), then the notes when
        requested.
        """
        resolve = self._messages.resolve
        parts = [format_lines([resolve(descr) for descr in self._spec.descrs])]

        options = sorted(
            (binding.parameter for binding in self._bindings if not binding.parameter.hidden),
            key=lambda parameter: option_key(parameter.names[0])
        )
        for parameter in options:
            parts.append("\n" + format_option(parameter.names, resolve(parameter.descr) if parameter.descr else ""))

        if notes:
            parts.append(format_lines([resolve(note) for note in self._spec.notes], True))
        return "".join(parts)


__all__ = (
    "command",
    "command_of",
    "CommandSpec",
    "CommandInfo",
)
