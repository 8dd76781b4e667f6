"""
Cronos utilities (internal helpers shared by every layer).

Overview
- UnsetType / Unset
  • Sentinel meaning "the caller did not pass anything", distinct from None.
  • Falsey, printable as "Unset", single instance per process, sealed.

- coalesce(value, default=None)
  • Materialize Unset into a default while keeping None/0/""/False untouched.

- rename(callable, name) / @rename("name")
  • Give generated callables a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private "_attr" field; containers are returned as
    fresh copies so callers cannot mutate descriptor state through the public API.

Only the names listed in __all__ are meant to be imported by other modules.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Used as a parameter default wherever None is a value the caller may
    legitimately pass (a parameter default of None, an empty description...).
    UnsetType() always returns the same object and the type cannot be subclassed.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `object` unless it is Unset, in which case return `default`.

    Falsey values other than Unset are preserved:
    - coalesce(Unset, "x") -> "x"
    - coalesce(None, "x")  -> None
    - coalesce(0, 5)       -> 0
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Assign __name__ and __qualname__ on a callable.

    Two forms are accepted:
    - rename(callable, name) renames in place and returns the callable.
    - rename(name) returns a decorator doing the same on the decorated callable.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    # strings are sequences too, leave them alone
    if isinstance(object, Sequence) and not isinstance(object, str):
        if isinstance(object, tuple):
            return tuple(map(_immortalize, object))
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Build a read-only property that exposes the private field "_{name}".

    Containers are copied on every access (tuples stay tuples, other sequences
    become lists, mappings dicts, sets sets); scalars and objects are returned
    as they are.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
The "not provided" sentinel. Pair it with coalesce() to get a concrete value.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
