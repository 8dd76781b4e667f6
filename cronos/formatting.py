"""
Cronos help-text layout.

The help screen is plain fixed-width text:

- command descriptions and notes are word-wrapped at TEXT_WIDTH columns;
- each option line is a label ("  -x, --long") left-justified to LABEL_WIDTH
  columns, two spaces, then its description wrapped at DESCR_WIDTH columns,
  continuation lines being indented by PADDING.

Word splitting never splits at the very first character of an entry, so an
entry such as "\\nitem" keeps its leading newline and renders a blank line.
"""
import re

TEXT_WIDTH = 80
DESCR_WIDTH = 44
LABEL_WIDTH = 32
PADDING = " " * 36

_OPTION_PREFIX = re.compile(r"^-{1,2}")
_WORD_SPLITTER = re.compile(r"(?<!^)\s+")


def strip_prefix(token, /):
    """
    Remove one leading "--", "-" or "+" from an option token.

    >>> strip_prefix("--verbose"), strip_prefix("-v"), strip_prefix("+v")
    ('verbose', 'v', 'v')
    """
    for prefix in ("--", "-", "+"):
        if token.startswith(prefix):
            return token[len(prefix):]
    return token


def option_key(token, /):
    # ordering key of an option in help output ("+" is not a declaration prefix)
    return _OPTION_PREFIX.sub("", token, count=1)


def csplit(word, /):
    """
    Split a short-option cluster into its characters.

    An empty cluster yields one empty token so that a lone "-" is reported as
    an unknown option instead of being silently dropped.
    """
    return list(word) or [word]


def wsplit(sentence, /):
    """
    Split a sentence into words on whitespace runs, except at its first character.

    Trailing empty words are dropped.
    """
    words = _WORD_SPLITTER.split(sentence)
    while len(words) > 1 and not words[-1]:
        words.pop()
    return words


def wrap(sentence, indent=False, /):
    """
    Greedy word-wrap of one sentence.

    Without indent, lines hold up to TEXT_WIDTH columns. With indent, they hold
    up to DESCR_WIDTH columns and continuation lines start with PADDING.
    """
    width = DESCR_WIDTH if indent else TEXT_WIDTH
    padding = PADDING if indent else ""

    paragraph = []
    line = ""
    for word in wsplit(sentence):
        if not line or len(line) + len(word) <= width:
            line += word + " "
        else:
            paragraph.append(line[:-1] + "\n" + padding)
            line = word + " "

    return "".join(paragraph) + line[:-1]


def format_lines(sentences, enclosed=False, /):
    """
    Wrap a list of sentences.

    - plain (enclosed=False): every sentence is followed by a newline.
    - enclosed: the block starts with a newline and every sentence is preceded
      by one more, which is how notes are separated from the option list.
    An empty list renders as an empty string.
    """
    if not sentences:
        return ""

    prefix = "\n" if enclosed else ""
    suffix = "" if enclosed else "\n"
    return prefix + "".join(prefix + wrap(sentence) + suffix for sentence in sentences)


def format_label(names, /):
    """
    Build the option label column from declared option names.

    The first two-character name is the short form, the first longer one the
    long form.

    >>> format_label(("-v", "--verbose"))
    '  -v, --verbose                 '
    """
    short = next((name for name in names if len(name) == 2), None)
    long = next((name for name in names if len(name) > 2), None)

    if long is None:
        label = f"  {short}"
    elif short is None:
        label = f"      {long}"
    else:
        label = f"  {short}, {long}"

    if len(label) > LABEL_WIDTH:
        return label + "\n" + " " * LABEL_WIDTH
    return label.ljust(LABEL_WIDTH)


def format_option(names, descr, /):
    """
    One help line (or block) for an option: label, two spaces, wrapped description.
    """
    return f"{format_label(names)}  {wrap(descr, True)}"


__all__ = (
    # Constants
    "TEXT_WIDTH",
    "DESCR_WIDTH",
    "LABEL_WIDTH",
    "PADDING",

    # Functions
    "strip_prefix",
    "option_key",
    "csplit",
    "wsplit",
    "wrap",
    "format_lines",
    "format_label",
    "format_option",
)
