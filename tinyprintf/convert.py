"""Integer-to-text conversion helpers."""

from __future__ import annotations

_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def utoa(value: int, base: int, uppercase: bool = False) -> str:
    """Render a non-negative integer in ``base`` (2 to 36)."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"unsupported base {base}")
    digits = []
    while True:
        value, d = divmod(value, base)
        digits.append(_DIGITS[d])
        if not value:
            break
    text = "".join(reversed(digits))
    return text if uppercase else text.lower()


def bin_len(value: int) -> int:
    """Return the number of binary digits needed to print ``value``."""
    if value < 0:
        raise ValueError("value must be non-negative")
    return max(1, value.bit_length())