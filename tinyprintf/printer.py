"""Formatting of printf-style format strings."""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .buffer import BufferSink
from .convert import utoa
from .ftoa import DEFAULT_MANTISSA_BITS, MIN_BUFFER_SIZE, ftoa
from .spec import Conversion, FormatSpec, LengthModifier, Option, parse_format_spec

PutC = Callable[[str], None]


@dataclass(frozen=True)
class Features:
    """Which groups of format specifiers are understood.

    Specifications using a disabled feature are not conversions: their
    ``%`` is printed literally and the rest of the text follows as is.
    """

    field_width: bool = True
    precision: bool = True
    floats: bool = True
    large: bool = False
    binary: bool = False
    writeback: bool = False
    conversion_buffer_size: int = MIN_BUFFER_SIZE
    float_mantissa_bits: int = DEFAULT_MANTISSA_BITS

    def __post_init__(self) -> None:
        if self.floats and not self.precision:
            raise ValueError("float support requires precision support")
        if self.conversion_buffer_size < MIN_BUFFER_SIZE:
            raise ValueError(
                f"conversion_buffer_size must be at least {MIN_BUFFER_SIZE}"
            )


DEFAULT_FEATURES = Features()


@dataclass
class Writeback:
    """Receives the number of characters written so far for ``%n``."""

    value: int | float = 0


# Width in bits of the integer type selected by each length modifier.
_WIDTHS = {
    LengthModifier.NONE: 32,
    LengthModifier.SHORT: 16,
    LengthModifier.LONG_DOUBLE: 32,
    LengthModifier.CHAR: 8,
    LengthModifier.LONG: 64,
    LengthModifier.LONG_LONG: 64,
    LengthModifier.INTMAX: 64,
    LengthModifier.SIZET: 64,
    LengthModifier.PTRDIFFT: 64,
}

_UNSIGNED_BASES = {
    Conversion.OCTAL: 8,
    Conversion.HEX_INT: 16,
    Conversion.UNSIGNED_INT: 10,
    Conversion.BINARY: 2,
}

_POINTER_MASK = (1 << 64) - 1
_FIELD_WIDTH_CHARS = frozenset("-*0123456789")


def _wrap_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >> (bits - 1) else value


def _as_int(value: Any) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"an integer is required, not {type(value).__name__}") from None


def _as_float(value: Any) -> float:
    if isinstance(value, (str, bytes, bytearray)):
        raise TypeError(f"a number is required, not {type(value).__name__}")
    return float(value)


def _as_char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("a single character is required")
        return value
    return chr(_as_int(value) & 0xFF)


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("latin-1")
    elif not isinstance(value, str):
        raise TypeError(f"a string is required, not {type(value).__name__}")
    return value.split("\0", 1)[0]


def _as_address(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value & _POINTER_MASK
    return id(value) & _POINTER_MASK


def _store_count(target: Any, written: int, modifier: LengthModifier) -> None:
    if not isinstance(target, Writeback):
        raise TypeError("%n requires a Writeback argument")
    if modifier is LengthModifier.LONG_DOUBLE:
        target.value = float(written)
    elif modifier is LengthModifier.SIZET:
        target.value = written & ((1 << 64) - 1)
    else:
        target.value = _wrap_signed(written, _WIDTHS[modifier])


def _supported(spec: FormatSpec, text: str, features: Features) -> bool:
    conv = spec.conversion
    if conv is Conversion.BINARY and not features.binary:
        return False
    if conv is Conversion.WRITEBACK and not features.writeback:
        return False
    if (conv.is_float or spec.length_modifier is LengthModifier.LONG_DOUBLE) and not features.floats:
        return False
    body = text[1:-1]
    if not features.precision and "." in body:
        return False
    head = body.split(".", 1)[0]
    if not features.field_width and any(c in _FIELD_WIDTH_CHARS for c in head):
        return False
    return True


def _render(
    spec: FormatSpec, take: Callable[[], Any], written: int, features: Features
) -> str:
    if spec.field_width_opt is Option.STAR:
        width = _as_int(take())
        if width < 0:
            width = -width
            spec.left_justified = True
        spec.field_width = width
    if spec.prec_opt is Option.STAR:
        spec.prec = _as_int(take())
        if spec.prec < 0:
            spec.prec_opt = Option.NONE
            if spec.conversion.is_float:
                spec.prec = 6

    conv = spec.conversion
    body = sign = prefix = ""
    zero = False
    no_digits = spec.prec_opt is not Option.NONE and not spec.prec

    if conv is Conversion.PERCENT:
        body = "%"
    elif conv is Conversion.CHAR:
        body = _as_char(take())
    elif conv is Conversion.STRING:
        body = _as_str(take())
        if spec.prec_opt is not Option.NONE:
            body = body[: spec.prec]
    elif conv is Conversion.SIGNED_INT:
        val = _wrap_signed(_as_int(take()), _WIDTHS[spec.length_modifier])
        sign = "-" if val < 0 else spec.prepend
        zero = val == 0
        if not (zero and no_digits):
            body = utoa(abs(val), 10)
    elif conv in _UNSIGNED_BASES:
        val = _as_int(take()) & ((1 << _WIDTHS[spec.length_modifier]) - 1)
        zero = val == 0
        if zero and no_digits:
            if conv is Conversion.OCTAL and spec.alt_form:
                spec.prec = 1
        else:
            body = utoa(val, _UNSIGNED_BASES[conv], spec.uppercase)
        if val and spec.alt_form:
            if conv is Conversion.OCTAL:
                body = "0" + body
            elif conv is Conversion.HEX_INT:
                prefix = "0X" if spec.uppercase else "0x"
            elif conv is Conversion.BINARY:
                prefix = "0B" if spec.uppercase else "0b"
    elif conv is Conversion.POINTER:
        body = utoa(_as_address(take()), 16)
        prefix = "0x"
    elif conv is Conversion.WRITEBACK:
        _store_count(take(), written, spec.length_modifier)
    else:
        val = _as_float(take())
        sign = "-" if val < 0.0 else spec.prepend
        zero = val == 0.0
        body = ftoa(spec, val, features.float_mantissa_bits, features.conversion_buffer_size)

    pad = ""
    if spec.field_width_opt is not Option.NONE:
        if spec.leading_zero_pad:
            if conv not in (Conversion.STRING, Conversion.CHAR, Conversion.PERCENT):
                pad = " " if (no_digits and zero) else "0"
        else:
            pad = " "

    prec_pad = 0
    if conv is not Conversion.STRING and not conv.is_float:
        prec_pad = max(0, spec.prec - len(body))

    field_pad = max(0, spec.field_width - len(body) - len(sign) - len(prefix) - prec_pad)

    if not spec.left_justified and pad:
        if pad == "0":
            lead = sign + prefix + "0" * field_pad
            sign = ""
        else:
            lead = " " * field_pad + prefix
    else:
        lead = prefix

    if conv is Conversion.STRING:
        payload = body
    else:
        payload = sign + "0" * prec_pad + body

    trail = pad * field_pad if spec.left_justified and pad else ""
    return lead + payload + trail


def vpprintf(
    putc: PutC, format: str, args: Iterable[Any], features: Features | None = None
) -> int:
    """Format ``args`` by ``format``, passing each character to ``putc``.

    Returns the number of characters produced.
    """
    if features is None:
        features = DEFAULT_FEATURES
    arg_iter = iter(args)
    count = 0

    def take() -> Any:
        try:
            return next(arg_iter)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    def emit(text: str) -> None:
        nonlocal count
        for c in text:
            putc(c)
            count += 1

    pos = 0
    while pos < len(format):
        if format[pos] != "%":
            nxt = format.find("%", pos)
            if nxt < 0:
                nxt = len(format)
            emit(format[pos:nxt])
            pos = nxt
            continue
        spec = parse_format_spec(format, pos, features.large)
        if spec is None or not _supported(spec, format[pos : pos + spec.length], features):
            emit("%")
            pos += 1
            continue
        pos += spec.length
        emit(_render(spec, take, count, features))
    return count


def pprintf(putc: PutC, format: str, *args: Any, features: Features | None = None) -> int:
    """Format ``args`` by ``format`` to ``putc``; returns the character count."""
    return vpprintf(putc, format, args, features)


def snprintf(
    buffer: bytearray | None,
    bufsz: int,
    format: str,
    *args: Any,
    features: Features | None = None,
    safe_empty: bool = False,
) -> int:
    """Format into at most ``bufsz`` bytes of ``buffer``, NUL-terminated.

    Returns the full length of the formatted text, which may exceed what
    fit.  With ``safe_empty`` an overflowing result leaves an empty string
    instead of a truncated one.  ``buffer`` may be ``None`` to only measure.
    """
    if bufsz < 0:
        raise ValueError("bufsz must be non-negative")
    if buffer is None:
        # A zero-capacity sink accepts every character and stores none.
        putc: PutC = BufferSink(bytearray(), 0).put
    else:
        if bufsz > len(buffer):
            raise ValueError(f"bufsz {bufsz} exceeds buffer of {len(buffer)} bytes")
        putc = BufferSink(buffer, bufsz).put

    n = vpprintf(putc, format, args, features)
    putc("\0")

    if buffer is not None and bufsz:
        if safe_empty:
            if n >= bufsz:
                buffer[0] = 0
        else:
            buffer[bufsz - 1] = 0
    return n


def sprintf(format: str, *args: Any, features: Features | None = None) -> str:
    """Return the formatted text as a string."""
    chars: list[str] = []
    vpprintf(chars.append, format, args, features)
    return "".join(chars)