"""A compact, configurable printf-style formatter with C printf semantics."""

__version__ = "0.5.5"
__all__ = ["spec", "convert", "printf"]