r"""
Cronos parameter declarations and their runtime bindings.

Overview
- Parameter: typed option declared as a class attribute of a command class.
  It is a data descriptor: the command instance reads its current value
  through it (the declared default until the parser assigns one).
- Binding: one per (registered command instance, declared Parameter). It
  carries the "assigned during this parse" flag and the setter the parser
  uses to store coerced values.
- DescriptorType: metaclass shared by every cronos descriptor, providing
  __typename__, read-only mirrored properties and stable reprs.

Quick example:
    >>> from cronos.parameters import Parameter
    >>> from cronos.coercion import Kind
    >>> class Commit:
    ...     message = Parameter("-m", "--message", descr="Commit message", required=True)
    ...     amend = Parameter("--amend", kind=Kind.BOOLEAN, descr="Amend the previous commit")
    ...
    >>> Commit().amend
    False

Validation highlights
- Names must match r"--?\w[\w-]*" and be unique within a declaration.
- kind accepts a Kind or a Python type alias (bool, str, int, float, Path).
- kind=SECRET implies secret=True; the default is False for BOOLEAN, None otherwise.
- Registration-time checks (empty names, required+hidden, conflicts between
  parameters) live in cronos.commands since they need the message catalog.
"""
import functools
import operator
import re

from .coercion import Kind
from .utils import *


class DescriptorType(type):
    """
    Metaclass for introspectable cronos descriptors.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for use in messages.
    - Expose every name listed in __introspectable__ as a read-only property
      over the matching private "_name" field (see utils.mirror).
    - Provide __repr__/__rich_repr__ built from __displayable__, falling back
      to __introspectable__.
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
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Parameter(metaclass=DescriptorType):
    """
    Typed option slot of a command class.

    Parameters
    - names: str...
      Accepted spellings, e.g. "-m", "--message" or "-message". The first
      two-character name is the short form shown in help, the first longer one
      the long form.
    - kind: Kind | type
      Storage type; raw tokens are coerced to it (see cronos.coercion).
    - descr: str
      Help text or message key, resolved when help is rendered.
    - required: bool
      The option must be given whenever its command takes part in a parse.
    - hidden: bool
      Suppress the option from help (incompatible with required).
    - secret: bool
      The value is read interactively instead of from the command line.
    - prompt: str
      Prompt used for secret values.
    - default: Any
      Value seen before any assignment. Defaults to False for BOOLEAN and to
      None for every other kind.
    """

    __introspectable__ = (
        "names",
        "kind",
        "descr",
        "required",
        "hidden",
        "secret",
        "prompt",
        "default",
        "name",
    )

    __displayable__ = (
        "name",
        "names",
        "kind",
        "required",
        "hidden",
        "secret",
    )

    def __init__(
            self,
            *names,
            kind=Kind.STRING,
            descr="",
            required=False,
            hidden=False,
            secret=False,
            prompt="password: ",
            default=Unset
    ):
        cls = type(self)

        sanitized = []
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} names must be strings")
            elif not (name := name.strip()):
                raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
            elif not re.fullmatch(r"--?\w[\w-]*", name):
                raise ValueError(f"{cls.__typename__} names must be valid option names (e.g. '-x' or '--long')")
            elif name in sanitized:
                raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
            sanitized.append(name)

        if not isinstance(kind, Kind):
            try:
                kind = Kind(kind)
            except ValueError:
                raise TypeError(f"{cls.__typename__} 'kind' must be a Kind or a supported type") from None

        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        if not isinstance(prompt, str):
            raise TypeError(f"{cls.__typename__} 'prompt' must be a string")

        self._names = tuple(sanitized)
        self._kind = kind
        self._descr = descr
        self._required = bool(required)
        self._hidden = bool(hidden)
        self._secret = bool(secret) or kind is Kind.SECRET
        self._prompt = prompt
        self._default = coalesce(default, False if kind is Kind.BOOLEAN else None)
        self._name = Unset

    def __set_name__(self, owner, name):
        self._name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self._name, self._default)

    def __set__(self, instance, value):
        instance.__dict__[self._name] = value

    def __delete__(self, instance):
        instance.__dict__.pop(self._name, None)

    @property
    def boolean(self):
        return self._kind is Kind.BOOLEAN


def parameters_of(klass, /):
    """
    Collect the Parameters declared on a command class and its bases.

    Returns a dict slot name -> Parameter in declaration order, base classes
    first; a redefinition in a subclass replaces the inherited declaration.
    """
    parameters = {}
    for base in reversed(klass.__mro__):
        for name, object in vars(base).items():
            if isinstance(object, Parameter):
                parameters.pop(name, None)
                parameters[name] = object
            elif name in parameters:
                # shadowed by a plain attribute
                del parameters[name]
    return parameters


class Binding(metaclass=DescriptorType):
    """
    Runtime link between a declared Parameter and one command instance.

    - assigned is False until the parser stores a value during the current
      parse; the parser resets it at the start of every parse.
    - assign(value) stores the value in the instance slot and marks the
      binding as assigned.
    """

    __introspectable__ = (
        "parameter",
        "name",
        "assigned",
    )

    def __init__(self, parameter, instance, name=Unset, /):
        if not isinstance(parameter, Parameter):
            raise TypeError(f"{type(self).__typename__} parameter must be a Parameter")
        self._parameter = parameter
        self._instance = instance
        self._name = coalesce(name, parameter.name)
        self._assigned = False

    @property
    def instance(self):
        return self._instance

    @property
    def value(self):
        return getattr(self._instance, self._name)

    def assign(self, value, /):
        setattr(self._instance, self._name, value)
        self._assigned = True

    def reset(self):
        self._assigned = False


__all__ = (
    "DescriptorType",
    "Parameter",
    "Binding",
    "parameters_of",
)
