"""
Cronos handler dispatch.

A command class may define a `run` method. Its shape (which arguments it
expects) is decided once, at registration:

- explicitly, with @command(..., shape=Shape.X);
- otherwise inferred from the signature of `run` (see infer_shape()).

invoke() then calls the handler with the matching arguments: the positional
tokens collected for the command (a list of strings) and/or the parser
itself (the "context").
"""
import enum
import inspect
import logging

from .faults import DelegatedCommandError
from .messages import Messages
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

CONTEXT_NAMES = frozenset({"parser", "context"})


class Shape(enum.Enum):
    """
    argument shape of a command handler.
    """
    NONE = "none"                               # no handler, nothing to run
    NO_ARGS = "no-args"                         # run()
    POSITIONAL = "positional"                   # run(params)
    CONTEXT = "context"                         # run(parser)
    POSITIONAL_CONTEXT = "positional-context"   # run(params, parser)
    CONTEXT_POSITIONAL = "context-positional"   # run(parser, params)


def _is_context(parameter, context, /):
    if parameter.name in CONTEXT_NAMES:
        return True
    annotation = parameter.annotation
    if annotation is parameter.empty or context is None:
        return False
    # string annotations (quoted or postponed) are matched by class name
    return annotation is context or annotation == context.__name__


def infer_shape(handler, context=None, /):
    """
    Infer the Shape of a handler from its signature.

    Rules (on the bound handler, i.e. without self)
    - handler is None: NONE.
    - no positional parameter: NO_ARGS.
    - one: CONTEXT if it is named "parser"/"context" or annotated with the
      context type, POSITIONAL otherwise.
    - two: whichever one is the context decides CONTEXT_POSITIONAL or
      POSITIONAL_CONTEXT.

    Parameters that have a default value are ignored. Anything else (more
    parameters, two parameters none of which is the context, required
    keyword-only parameters) raises TypeError: pass an explicit shape instead.
    """
    if handler is None:
        return Shape.NONE
    if not callable(handler):
        raise TypeError("command 'run' must be callable")

    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        raise TypeError(f"unable to inspect the signature of {handler!r}") from None

    positional = []
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is not parameter.empty:
            continue
        if parameter.kind is parameter.KEYWORD_ONLY:
            raise TypeError(f"command handler {handler.__qualname__!r} cannot have required keyword-only parameters")
        positional.append(parameter)

    match positional:
        case []:
            return Shape.NO_ARGS
        case [single]:
            return Shape.CONTEXT if _is_context(single, context) else Shape.POSITIONAL
        case [first, second] if _is_context(first, context):
            return Shape.CONTEXT_POSITIONAL
        case [first, second] if _is_context(second, context):
            return Shape.POSITIONAL_CONTEXT
        case [_, _]:
            raise TypeError(
                f"command handler {handler.__qualname__!r} takes two parameters but none of them is the parser "
                f"(name it 'parser' or 'context', or give an explicit shape)"
            )
    raise TypeError(f"command handler {handler.__qualname__!r} takes too many parameters")


def invoke(info, params, context, /, messages=Unset):
    """
    Run the handler of a registered command according to its shape.

    Any Exception raised by the handler is re-raised as DelegatedCommandError
    naming the command, with the original exception as its cause.
    """
    messages = coalesce(messages, Messages.default())
    if info.shape is Shape.NONE:
        return None

    run = info.instance.run
    logger.debug("invoking %r as %s", info.name, info.shape.name)
    try:
        match info.shape:
            case Shape.NO_ARGS:
                return run()
            case Shape.POSITIONAL:
                return run(params)
            case Shape.CONTEXT:
                return run(context)
            case Shape.POSITIONAL_CONTEXT:
                return run(params, context)
            case Shape.CONTEXT_POSITIONAL:
                return run(context, params)
    except Exception as exception:
        raise DelegatedCommandError(messages.format("CLI_CLICOMMAND_RUN_ERROR", info.name, exception)) from exception


__all__ = (
    "Shape",
    "CONTEXT_NAMES",
    "infer_shape",
    "invoke",
)
