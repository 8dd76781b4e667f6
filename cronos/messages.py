"""
Cronos message catalog (localization context).

Every diagnostic and help fragment printed by the parser goes through a
Messages instance:

- resolve(key) returns the localized text for `key`. Lookup order is the
  host catalog, then the built-in English catalog, then the key itself, so
  descriptions can be given either as catalog keys or as literal text.
- format(key, *args) resolves and fills "{0}", "{1}"... placeholders.

A Messages instance is read-only once built. The parser receives one
explicitly; Messages.default() lazily builds (and caches) the English one.

Example
    >>> messages = Messages({"GIT_DESCR": "Git - the stupid content tracker"})
    >>> messages.resolve("GIT_DESCR")
    'Git - the stupid content tracker'
    >>> messages.resolve("literal text")
    'literal text'
"""
import functools
import logging
from collections.abc import Mapping
from types import MappingProxyType

logger = logging.getLogger(__name__)


DEFAULTS = MappingProxyType({
    # help
    "CLI_HELP": "Display this help and exit",
    "CLI_COMMAND": "command",

    # declaration errors
    "CLI_CLICOMMAND_ANNOTATION_MISSING": "class {0} must be declared with @command",
    "CLI_CLICOMMAND_ALREADY_REGISTERED": "command {0!r} from {1} is already registered by {2}",
    "CLI_CLICOMMAND_INSTANTIATION_ERROR": "unable to instantiate command class {0}",
    "CLI_PARAMETER_REQUIRED_CANNOT_BE_HIDDEN": "required option {0} of parameter {1!r} cannot be hidden",
    "CLI_PARAMETER_OPTIONS_EMPTY": "parameter {0!r} must declare at least one option",
    "CLI_PARAMETER_OPTIONS_CONFLICT": "option {0} of parameter {2!r} conflicts with parameter {1!r}",

    # usage errors
    "CLI_CLICOMMAND_NO_COMMAND": "no command has been registered",
    "CLI_PARAMETER_REQUIRED_MISSING": "required parameter {0!r} is missing",
    "CLI_PARAMETER_UNKNOWN": "unknown option: {0!r}",
    "CLI_PARAMETER_ARGUMENT_MISSING": "option {0}{1} requires an argument",
    "CLI_PARAMETER_VALUE_INVALID": "invalid value {1!r} for option {0}: {2}",
    "CLI_CLICOMMAND_RUN_ERROR": "command {0!r} failed: {1}",
})
"""
Built-in English catalog. Keys are stable; hosts override them per locale.
"""


class Messages:
    """
    Read-only key -> text catalog consulted by the parser.

    Parameters
    - catalog: Mapping[str, str] | None
      Host entries. They take precedence over the built-in defaults. Empty
      strings count as missing, the same way a blank bundle entry would.
    """

    __slots__ = ("_catalog",)

    def __init__(self, catalog=None, /):
        if catalog is None:
            catalog = {}
        if not isinstance(catalog, Mapping):
            raise TypeError("messages catalog must be a mapping")
        for key, value in catalog.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError("messages catalog must map strings to strings")
        self._catalog = MappingProxyType(dict(catalog))

    @staticmethod
    @functools.cache
    def default():
        """
        Shared English catalog, built on first use.
        """
        return Messages()

    @property
    def catalog(self):
        return self._catalog

    def resolve(self, key, /):
        if not isinstance(key, str):
            raise TypeError("resolve() argument must be a string")
        if message := self._catalog.get(key) or DEFAULTS.get(key):
            return message
        logger.debug("message key %r not found, using it verbatim", key)
        return key

    def format(self, key, /, *args):
        return self.resolve(key).format(*args)

    def __contains__(self, key):
        return bool(self._catalog.get(key) or DEFAULTS.get(key))

    def __repr__(self):
        return f"messages(entries={len(self._catalog)})"


__all__ = (
    "Messages",
    "DEFAULTS",
)
