"""
Interactive input for secret options.
"""
import logging
import sys

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)

console = Console()


def read_secret(prompt="password: ", /):
    """
    Read a non-empty secret from the user.

    On an interactive terminal the value is read without echo through rich.
    Otherwise (piped or redirected input) the prompt is written to stdout and
    one line is read from stdin. Empty answers are asked again; end of input
    raises EOFError.
    """
    if sys.stdin is not None and sys.stdin.isatty():
        logger.debug("reading secret from the terminal")
        while not (secret := console.input(Text(prompt), password=True)):
            pass
        return secret

    logger.debug("reading secret from standard input")
    while True:
        sys.stdout.write(prompt)
        sys.stdout.flush()
        if not (line := sys.stdin.readline() if sys.stdin is not None else ""):
            raise EOFError("no secret could be read from standard input")
        if secret := line.rstrip("\r\n"):
            return secret


__all__ = (
    "read_secret",
)
