"""Decimal rendering of doubles with a fixed-width integer mantissa.

Integer and fractional parts are scaled from base 2 to base 10 using an
unsigned working integer of ``mantissa_bits`` bits, so accuracy depends on
that width, just as it would on a small embedded target.  No lookup tables
are needed.
"""

from __future__ import annotations

import struct

from .spec import FormatSpec

DEFAULT_MANTISSA_BITS = 32
DEFAULT_BUFFER_SIZE = 23
MIN_BUFFER_SIZE = 23

# IEEE 754 binary64 layout.
_MANT_DIG = 53
_MAN_BITS = _MANT_DIG - 1
_EXP_MASK = 0x7FF
_EXP_BIAS = 1023
_BIN_BITS = 64
_BIN_MASK = (1 << _BIN_BITS) - 1


class _Overflow(Exception):
    """The conversion does not fit in the buffer."""


def _double_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


def _cased(text: str, uppercase: bool) -> str:
    return text if uppercase else text.lower()


def ftoa(
    spec: FormatSpec,
    value: float,
    mantissa_bits: int = DEFAULT_MANTISSA_BITS,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> str:
    """Render the magnitude of ``value`` with ``spec.prec`` fraction digits.

    The sign is never printed.  Infinities give ``INF``, NaNs ``NAN`` and
    results that do not fit in ``buffer_size`` characters ``ERR``, each in
    lower case unless ``spec.uppercase`` is set.
    """
    if buffer_size < MIN_BUFFER_SIZE:
        raise ValueError(f"buffer_size must be at least {MIN_BUFFER_SIZE}")
    if mantissa_bits < 8:
        raise ValueError("mantissa_bits must be at least 8")
    if spec.prec < 0:
        raise ValueError("precision must be non-negative")

    bits = _double_bits(float(value))
    exp = (bits >> _MAN_BITS) & _EXP_MASK
    mantissa = bits & ((1 << _MAN_BITS) - 1)
    if exp == _EXP_MASK:
        return _cased("NAN" if mantissa else "INF", spec.uppercase)
    if spec.prec > buffer_size - 2:
        return _cased("ERR", spec.uppercase)
    try:
        return _convert(spec, exp, mantissa, mantissa_bits, buffer_size)
    except _Overflow:
        return _cased("ERR", spec.uppercase)


def _convert(
    spec: FormatSpec, exp: int, binv: int, mbits: int, buffer_size: int
) -> str:
    man_mask = (1 << mbits) - 1
    shift_bits = min(mbits, _MANT_DIG) - 1

    if exp:
        binv |= 1 << _MAN_BITS
    else:
        exp += 1
    exp -= _EXP_BIAS

    # Characters are collected least significant first and reversed at the end.
    buf = [""] * buffer_size
    carry = 0
    dec = spec.prec
    if dec or spec.alt_form:
        buf[dec] = "."
        dec += 1

    # Integer part.
    if exp >= 0:
        shift_i = min(exp, shift_bits)
        exp_i = exp - shift_i
        shift_i = _MAN_BITS - shift_i
        man_i = (binv >> shift_i) & man_mask
        if exp_i:
            if shift_i:
                carry = (binv >> (shift_i - 1)) & 1
            exp = _MAN_BITS  # the fraction part is below the resolution
        top_bit = 1 << (mbits - 1)
        while exp_i:
            if not man_i & top_bit:
                man_i = ((man_i << 1) | carry) & man_mask
                carry = 0
            else:
                if dec >= buffer_size:
                    raise _Overflow
                buf[dec] = "0"
                dec += 1
                carry = int((man_i % 5 + carry) > 2)
                man_i //= 5
            exp_i -= 1
    else:
        man_i = 0

    end = dec
    while True:
        if end >= buffer_size:
            raise _Overflow
        buf[end] = chr(ord("0") + man_i % 10)
        end += 1
        man_i //= 10
        if not man_i:
            break

    # Fraction part.
    dec_f = spec.prec
    if exp < _MAN_BITS:
        shift_f = -1 if exp < 0 else exp
        exp_f = exp - shift_f
        bin_f = (binv << ((_BIN_BITS - _MAN_BITS) + shift_f)) & _BIN_MASK

        if _BIN_BITS > mbits:
            man_f = (bin_f >> (_BIN_BITS - mbits)) & man_mask
            carry = (bin_f >> (_BIN_BITS - mbits - 1)) & 1
        else:
            man_f = (bin_f << (mbits - _BIN_BITS)) & man_mask
            carry = 0

        limit = (man_mask - 3) // 5
        digit = 0
        while dec_f and exp_f < 4:
            if man_f > limit or digit:
                carry = man_f & 1
                man_f >>= 1
            else:
                man_f = (man_f * 5) & man_mask
                if carry:
                    man_f = (man_f + 3) & man_mask
                    carry = 0
                if exp_f < 0:
                    dec_f -= 1
                    buf[dec_f] = "0"
                else:
                    digit += 1
            exp_f += 1
        man_f = (man_f + carry) & man_mask
        carry = int(exp_f >= 0)
        dec = 0
    else:
        man_f = 0

    if dec_f:
        nibble_shift = mbits - 4
        keep_mask = ~(0xF << nibble_shift) & man_mask
        while True:
            dec_f -= 1
            buf[dec_f] = chr(ord("0") + (man_f >> nibble_shift))
            man_f &= keep_mask
            if not dec_f:
                break
            man_f = (man_f * 10) & man_mask
        man_f = (man_f << 4) & man_mask
    if exp < _MAN_BITS:
        carry &= man_f >> (mbits - 1)

    # Round.
    while carry:
        if dec >= buffer_size:
            raise _Overflow
        if dec >= end:
            buf[end] = "0"
            end += 1
        if buf[dec] != ".":
            carry = int(buf[dec] == "9")
            buf[dec] = "0" if carry else chr(ord(buf[dec]) + 1)
        dec += 1

    return "".join(reversed(buf[:end]))