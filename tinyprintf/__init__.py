"""Printf-style formatting with C semantics: parsing, conversion and output."""

__version__ = "0.5.5"
__all__ = ["buffer", "convert", "ftoa", "printer", "spec"]