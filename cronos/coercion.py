"""
Cronos value coercion.

Kind names the storage type of a parameter slot; coerce(kind, raw) turns the
raw token read from the command line into a value of that kind.

Numeric literals follow the conventions of the classic "decode" parsers:
- integers accept an optional sign then "0x"/"0X"/"#" for hexadecimal, a
  leading "0" (followed by more digits) for octal, and decimal otherwise; the
  result must fit the kind's width;
- doubles accept decimal or exponential notation with an optional d/D/f/F
  suffix, hexadecimal floating literals ("0x1.8p1"), "NaN" and "Infinity";
  floats are additionally rounded to single precision.

Every failure raises ValueError with a short reason.
"""
import enum
import math
import pathlib
import re
import struct


class Kind(enum.Enum):
    """
    storage type of a parameter slot.

    Python types are accepted as aliases: Kind(bool), Kind(str), Kind(int),
    Kind(float) and Kind(pathlib.Path) map to BOOLEAN, STRING, INTEGER,
    DOUBLE and PATH.
    """
    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BYTE = "byte"
    SHORT = "short"
    DOUBLE = "double"
    FLOAT = "float"
    CHARACTER = "character"
    PATH = "path"
    SECRET = "secret"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, type):
            for base, kind in _ALIASES:
                if issubclass(value, base):
                    return kind
        return None

    @property
    def numeric(self):
        return self in _WIDTHS or self in (Kind.DOUBLE, Kind.FLOAT)


_ALIASES = (
    (bool, Kind.BOOLEAN),
    (int, Kind.INTEGER),
    (float, Kind.DOUBLE),
    (str, Kind.STRING),
    (pathlib.PurePath, Kind.PATH),
)

# bit widths of the integral kinds
_WIDTHS = {
    Kind.BYTE: 8,
    Kind.SHORT: 16,
    Kind.INTEGER: 32,
    Kind.LONG: 64,
}

_DIGITS = {
    16: re.compile(r"[0-9a-fA-F]+"),
    10: re.compile(r"[0-9]+"),
    8: re.compile(r"[0-7]+"),
}

_DECIMAL = re.compile(r"""
    (?P<sign>[+-]?)
    (?:
        (?P<special>NaN|Infinity)
      | (?P<number>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)[fFdD]?
      | (?P<hex>0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+)[fFdD]?
    )
""", re.VERBOSE)


def decode_integer(raw, bits=32, /):
    """
    Decode a signed integral literal that must fit in `bits` bits.

    >>> decode_integer("0x1F"), decode_integer("-010"), decode_integer("#ff")
    (31, -8, 255)
    """
    if not raw:
        raise ValueError("zero length string")

    index, negative = 0, False
    if raw[0] in "+-":
        negative = raw[0] == "-"
        index += 1

    if raw.startswith(("0x", "0X"), index):
        radix, index = 16, index + 2
    elif raw.startswith("#", index):
        radix, index = 16, index + 1
    elif raw.startswith("0", index) and len(raw) > index + 1:
        radix, index = 8, index + 1
    else:
        radix = 10

    digits = raw[index:]
    if digits.startswith(("+", "-")):
        raise ValueError("sign character in wrong position")
    if not _DIGITS[radix].fullmatch(digits):
        raise ValueError(f"not a valid base {radix} number")

    value = int(digits, radix)
    if negative:
        value = -value

    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"value out of range for a {bits}-bit integer")
    return value


def decode_double(raw, /):
    """
    Decode a double precision literal.

    >>> decode_double("1.5e3"), decode_double("2f"), decode_double("-Infinity")
    (1500.0, 2.0, -inf)
    """
    # surrounding control characters and blanks are ignored
    text = raw.strip("".join(map(chr, range(0x21))))
    if not (match := _DECIMAL.fullmatch(text)):
        raise ValueError("not a valid floating point number")

    sign = -1.0 if match["sign"] == "-" else 1.0
    if special := match["special"]:
        return math.nan if special == "NaN" else sign * math.inf
    if number := match["number"]:
        return sign * float(number)
    return sign * float.fromhex(match["hex"])


def decode_float(raw, /):
    """
    Decode a single precision literal (rounded through a 32-bit float).
    """
    value = decode_double(raw)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def decode_boolean(raw, /):
    match raw.lower():
        case "true":
            return True
        case "false":
            return False
    raise ValueError("expected 'true' or 'false'")


def decode_character(raw, /):
    if not raw:
        raise ValueError("expected at least one character")
    return raw[0]


def decode_path(raw, /):
    if "\0" in raw:
        raise ValueError("paths cannot contain NUL characters")
    return pathlib.Path(raw)


def coerce(kind, raw, /):
    """
    Convert a raw command-line token into a value of the given kind.

    STRING and SECRET values are returned untouched. Failures raise ValueError.
    """
    if not isinstance(kind, Kind):
        kind = Kind(kind)
    if not isinstance(raw, str):
        raise TypeError("coerce() raw value must be a string")

    match kind:
        case Kind.STRING | Kind.SECRET:
            return raw
        case Kind.BOOLEAN:
            return decode_boolean(raw)
        case Kind.BYTE | Kind.SHORT | Kind.INTEGER | Kind.LONG:
            return decode_integer(raw, _WIDTHS[kind])
        case Kind.DOUBLE:
            return decode_double(raw)
        case Kind.FLOAT:
            return decode_float(raw)
        case Kind.CHARACTER:
            return decode_character(raw)
        case Kind.PATH:
            return decode_path(raw)


__all__ = (
    # Types
    "Kind",

    # Functions
    "coerce",
    "decode_integer",
    "decode_double",
    "decode_float",
    "decode_boolean",
    "decode_character",
    "decode_path",
)
