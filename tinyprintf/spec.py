"""Parsing of a single printf conversion specification."""

from __future__ import annotations

import enum
from dataclasses import dataclass

_DIGITS = frozenset("0123456789")


class Option(enum.Enum):
    """How a field width or precision was given."""

    NONE = enum.auto()
    LITERAL = enum.auto()
    STAR = enum.auto()


class LengthModifier(enum.Enum):
    """The length modifier of a conversion."""

    NONE = enum.auto()
    SHORT = enum.auto()        # 'h'
    LONG_DOUBLE = enum.auto()  # 'L'
    CHAR = enum.auto()         # 'hh'
    LONG = enum.auto()         # 'l'
    LONG_LONG = enum.auto()    # 'll'
    INTMAX = enum.auto()       # 'j'
    SIZET = enum.auto()        # 'z'
    PTRDIFFT = enum.auto()     # 't'


class Conversion(enum.Enum):
    """The conversion specifier of a conversion."""

    PERCENT = enum.auto()         # '%'
    CHAR = enum.auto()            # 'c'
    STRING = enum.auto()          # 's'
    SIGNED_INT = enum.auto()      # 'i', 'd'
    BINARY = enum.auto()          # 'b', 'B'
    OCTAL = enum.auto()           # 'o'
    HEX_INT = enum.auto()         # 'x', 'X'
    UNSIGNED_INT = enum.auto()    # 'u'
    POINTER = enum.auto()         # 'p'
    WRITEBACK = enum.auto()       # 'n'
    FLOAT_DEC = enum.auto()       # 'f', 'F'
    FLOAT_SCI = enum.auto()       # 'e', 'E'
    FLOAT_SHORTEST = enum.auto()  # 'g', 'G'
    FLOAT_HEX = enum.auto()       # 'a', 'A'

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_CONVERSIONS

    @property
    def is_float(self) -> bool:
        return self in _FLOAT_CONVERSIONS


_INTEGER_CONVERSIONS = frozenset(
    {
        Conversion.SIGNED_INT,
        Conversion.OCTAL,
        Conversion.HEX_INT,
        Conversion.UNSIGNED_INT,
    }
)

_FLOAT_CONVERSIONS = frozenset(
    {
        Conversion.FLOAT_DEC,
        Conversion.FLOAT_SCI,
        Conversion.FLOAT_SHORTEST,
        Conversion.FLOAT_HEX,
    }
)

# Conversion character -> (conversion, uppercase)
_CONVERSIONS: dict[str, tuple[Conversion, bool]] = {
    "%": (Conversion.PERCENT, False),
    "c": (Conversion.CHAR, False),
    "s": (Conversion.STRING, False),
    "i": (Conversion.SIGNED_INT, False),
    "d": (Conversion.SIGNED_INT, False),
    "o": (Conversion.OCTAL, False),
    "u": (Conversion.UNSIGNED_INT, False),
    "x": (Conversion.HEX_INT, False),
    "X": (Conversion.HEX_INT, True),
    "f": (Conversion.FLOAT_DEC, False),
    "F": (Conversion.FLOAT_DEC, True),
    "e": (Conversion.FLOAT_SCI, False),
    "E": (Conversion.FLOAT_SCI, True),
    "g": (Conversion.FLOAT_SHORTEST, False),
    "G": (Conversion.FLOAT_SHORTEST, True),
    "a": (Conversion.FLOAT_HEX, False),
    "A": (Conversion.FLOAT_HEX, True),
    "n": (Conversion.WRITEBACK, False),
    "p": (Conversion.POINTER, False),
    "b": (Conversion.BINARY, False),
    "B": (Conversion.BINARY, True),
}

_LARGE_MODIFIERS = {
    "j": LengthModifier.INTMAX,
    "z": LengthModifier.SIZET,
    "t": LengthModifier.PTRDIFFT,
}


@dataclass
class FormatSpec:
    """A parsed conversion specification such as ``%-08.3lx``."""

    conversion: Conversion = Conversion.PERCENT
    length: int = 0
    field_width: int = 0
    field_width_opt: Option = Option.NONE
    left_justified: bool = False
    leading_zero_pad: bool = False
    prec: int = 0
    prec_opt: Option = Option.NONE
    prepend: str = ""
    alt_form: bool = False
    uppercase: bool = False
    length_modifier: LengthModifier = LengthModifier.NONE


def parse_format_spec(format: str, start: int = 0, large: bool = False) -> FormatSpec | None:
    """Parse the conversion specification beginning at ``format[start]``.

    ``format[start]`` must be ``'%'``.  Returns the parsed spec, whose
    ``length`` is the number of characters consumed, or ``None`` if the
    text is not a valid specification.  ``large`` enables the ``ll``,
    ``j``, ``z`` and ``t`` length modifiers.
    """
    if not format.startswith("%", start):
        raise ValueError(f"no '%' at position {start}")

    def at(i: int) -> str:
        return format[i] if i < len(format) else ""

    spec = FormatSpec()
    pos = start + 1

    while c := at(pos):
        if c == "-":
            spec.left_justified = True
            spec.leading_zero_pad = False
        elif c == "0":
            spec.leading_zero_pad = not spec.left_justified
        elif c == "+":
            spec.prepend = "+"
        elif c == " ":
            if not spec.prepend:
                spec.prepend = " "
        elif c == "#":
            spec.alt_form = True
        else:
            break
        pos += 1

    if at(pos) == "*":
        spec.field_width_opt = Option.STAR
        pos += 1
    else:
        while at(pos) in _DIGITS and at(pos):
            spec.field_width_opt = Option.LITERAL
            spec.field_width = spec.field_width * 10 + int(at(pos))
            pos += 1

    if at(pos) == ".":
        pos += 1
        if at(pos) == "*":
            spec.prec_opt = Option.STAR
            pos += 1
        else:
            if at(pos) == "-":
                pos += 1
            else:
                spec.prec_opt = Option.LITERAL
            while at(pos) in _DIGITS and at(pos):
                spec.prec = spec.prec * 10 + int(at(pos))
                pos += 1

    c = at(pos)
    if c == "h":
        pos += 1
        spec.length_modifier = LengthModifier.SHORT
        if at(pos) == "h":
            spec.length_modifier = LengthModifier.CHAR
            pos += 1
    elif c == "l":
        pos += 1
        spec.length_modifier = LengthModifier.LONG
        if large and at(pos) == "l":
            spec.length_modifier = LengthModifier.LONG_LONG
            pos += 1
    elif c == "L":
        pos += 1
        spec.length_modifier = LengthModifier.LONG_DOUBLE
    elif large and c in _LARGE_MODIFIERS:
        pos += 1
        spec.length_modifier = _LARGE_MODIFIERS[c]

    entry = _CONVERSIONS.get(at(pos)) if at(pos) else None
    if entry is None:
        return None
    pos += 1
    spec.conversion, spec.uppercase = entry
    conv = spec.conversion

    if conv in (Conversion.PERCENT, Conversion.CHAR, Conversion.WRITEBACK, Conversion.POINTER):
        spec.prec_opt = Option.NONE
    elif conv is Conversion.STRING:
        spec.leading_zero_pad = False
    elif conv.is_integer:
        if spec.prec_opt is not Option.NONE:
            spec.leading_zero_pad = False
    elif conv.is_float:
        if spec.prec_opt is Option.NONE:
            spec.prec = 6

    spec.length = pos - start
    return spec