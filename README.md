# tinyprintf

A compact printf-style formatter that follows the rules of C's `printf`
family for flags, field widths, precisions, length modifiers, padding and
truncation. It suits code that must produce the same text a small C
formatter would, or that needs precise control over how integers and
floats are rendered. It has no dependencies beyond the standard library.

## Installation

```
pip install tinyprintf
```

## Formatting to a string

```python
from tinyprintf.printer import sprintf

sprintf("%s %s", "hello", "tinyprintf")   # 'hello tinyprintf'
sprintf("%+08.3f", -1.5)                  # '-001.500'
sprintf("%#10x", 0x1234)                  # '    0x1234'
sprintf("%-6u|", 5)                       # '5     |'
sprintf("%*.*i", 10, 2, 7)                # '        07'
```

## Formatting into a fixed-size buffer

`snprintf(buffer, bufsz, format, *args)` writes into the first `bufsz`
bytes of a `bytearray`, always leaving a terminating NUL, and returns the
length the full output needs. With `safe_empty=True`, output that does not
fit leaves an empty string (a NUL in the first byte) instead of a
truncated one. Passing `None` as the buffer only measures the output.
`bufsz` may not be negative or larger than the buffer.

```python
from tinyprintf.printer import snprintf

buf = bytearray(8)
snprintf(buf, len(buf), "123456789")   # returns 9, buf holds b"1234567\0"
snprintf(None, 0, "hello %s", "world") # returns 11
```

Only characters that fit in one byte can be stored this way.

## Formatting through a callback

`pprintf(putc, format, *args)` hands each output character to `putc` and
returns the number of characters produced. `vpprintf(putc, format, args)`
does the same with the arguments given as one iterable.

```python
from tinyprintf.printer import pprintf

out = []
count = pprintf(out.append, "%c%c%c", "A", "B", "C")   # 3, out == ["A", "B", "C"]
```

## Conversions and arguments

- `%%` prints a percent sign.
- `%c` takes a one-character string or an integer (its low byte).
- `%s` takes a `str`, `bytes` (decoded as Latin-1) or `None` (printed as
  nothing); the text stops at the first NUL character.
- `%d`/`%i`, `%u`, `%o`, `%x`/`%X` and, when enabled, `%b`/`%B` take
  integers. Values are narrowed to the width their length modifier
  implies: 32 bits with none, 16 with `h`, 8 with `hh`, 64 with `l`, `ll`,
  `j`, `z` and `t`.
- `%p` takes an integer address, `None` (printed as `0x0`), or any other
  object, whose `id()` is printed; the output is `0x` and lower-case hex.
- `%f`/`%F`, `%e`/`%E`, `%g`/`%G` and `%a`/`%A` take numbers. All of them
  are rendered in fixed-point decimal notation with the given precision
  (default 6); no exponent or hexadecimal forms are produced. Infinities
  print as `inf`, NaNs as `nan`, upper case for the capital letters.
- `%n`, when enabled, takes a `Writeback` object and sets its `value` to
  the number of characters written so far (narrowed by the length
  modifier; a float with `L`).

Flags `-`, `+`, space, `#` and `0`, literal and `*` field widths and
precisions, and the length modifiers `hh`, `h`, `l`, `L` and, when large
specifiers are enabled, `ll`, `j`, `z` and `t` are honoured. A negative
`*` width left-justifies; a negative `*` precision is ignored.

Text that is not a valid specification, such as `%` at the end of the
string or an unknown conversion letter, is printed literally. Too few
arguments, or an argument of the wrong kind, raise `TypeError`.

## Feature sets

Every entry point takes a `features` keyword argument, a
`tinyprintf.printer.Features` value:

| field | default | meaning |
|---|---|---|
| `field_width` | `True` | field widths and the `-` and `0` flags |
| `precision` | `True` | precisions |
| `floats` | `True` | float conversions and `L` (needs `precision`) |
| `large` | `False` | `ll`, `j`, `z`, `t` length modifiers |
| `binary` | `False` | `%b` and `%B` |
| `writeback` | `False` | `%n` |
| `conversion_buffer_size` | `23` | largest float rendering, at least 23 |
| `float_mantissa_bits` | `32` | width of the integer used for float digits |

A specification that uses a disabled feature is not recognised: its `%`
is printed literally and the rest follows as plain text.

Float output is computed with an integer of `float_mantissa_bits` bits,
so digits far from the decimal point lose accuracy with small widths.
Output that would not fit in `conversion_buffer_size` characters, or a
precision above `conversion_buffer_size - 2`, prints `err` (`ERR` for
capital conversions).

## Lower-level pieces

- `tinyprintf.spec.parse_format_spec(format, start, large)` parses one
  specification into a `FormatSpec`, or returns `None` if it is invalid.
- `tinyprintf.convert.utoa(value, base, uppercase)` renders a
  non-negative integer in bases 2 to 36; `bin_len(value)` counts its
  binary digits.
- `tinyprintf.ftoa.ftoa(spec, value, mantissa_bits, buffer_size)` renders
  the magnitude of a float in decimal.
- `tinyprintf.buffer.BufferSink` stores characters into a bounded
  `bytearray`, dropping what does not fit.

## What it does not do

The package is a library only; it has no command-line program. It does
not produce scientific or hexadecimal float notation, and it does not
handle wide-character (`%lc`, `%ls`) arguments specially.