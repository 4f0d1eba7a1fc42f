"""A bounded character sink backed by a byte buffer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BufferSink:
    """Writes characters into ``buffer`` until ``length`` bytes are used.

    Characters beyond the limit are silently dropped; ``cur`` is the number
    of bytes written so far.  Only characters in the range 0-255 can be
    stored.
    """

    buffer: bytearray
    length: int | None = None
    cur: int = 0

    def __post_init__(self) -> None:
        if self.length is None:
            self.length = len(self.buffer)
        elif not 0 <= self.length <= len(self.buffer):
            raise ValueError(
                f"length {self.length} does not fit a buffer of {len(self.buffer)} bytes"
            )

    def put(self, c: str | int) -> None:
        """Store one character if there is room left."""
        code = ord(c) if isinstance(c, str) else c
        if not 0 <= code <= 0xFF:
            raise ValueError(f"character {c!r} does not fit in a byte")
        if self.cur < self.length:
            self.buffer[self.cur] = code
            self.cur += 1