"""Configuration and parsing of printf-style conversion specifications."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from functools import lru_cache

MIN_CONVERSION_BUFFER_SIZE = 23

_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class Config:
    """Feature switches and sizes that shape what the formatter accepts."""

    field_width: bool = True
    precision: bool = True
    floats: bool = True
    large: bool = False
    small: bool = True
    binary: bool = False
    writeback: bool = False
    alt_form: bool = True
    conversion_buffer_size: int = MIN_CONVERSION_BUFFER_SIZE
    float_mantissa_bits: int = 32
    long_bits: int = 64
    safe_empty_on_overflow: bool = False

    def __post_init__(self) -> None:
        if self.floats and not self.precision:
            raise ValueError(
                "precision format specifiers must be enabled if float support is enabled"
            )
        if self.conversion_buffer_size < MIN_CONVERSION_BUFFER_SIZE:
            raise ValueError(
                f"the conversion buffer must be at least {MIN_CONVERSION_BUFFER_SIZE} bytes"
            )
        if self.float_mantissa_bits < 8:
            raise ValueError("the float conversion integer must be at least 8 bits wide")
        if self.long_bits not in (32, 64):
            raise ValueError("long must be 32 or 64 bits wide")


DEFAULT_CONFIG = Config()


class Option(enum.Enum):
    """How a field width or precision was given."""

    NONE = enum.auto()
    LITERAL = enum.auto()
    STAR = enum.auto()


class LengthModifier(enum.Enum):
    """Argument size modifiers: h, hh, l, L, ll, j, z, t."""

    NONE = enum.auto()
    SHORT = enum.auto()
    CHAR = enum.auto()
    LONG = enum.auto()
    LONG_DOUBLE = enum.auto()
    LONG_LONG = enum.auto()
    INTMAX = enum.auto()
    SIZET = enum.auto()
    PTRDIFFT = enum.auto()


class Conversion(enum.Enum):
    """The conversion specifier character of a format spec."""

    NONE = enum.auto()
    PERCENT = enum.auto()
    CHAR = enum.auto()
    STRING = enum.auto()
    SIGNED_INT = enum.auto()
    BINARY = enum.auto()
    OCTAL = enum.auto()
    HEX_INT = enum.auto()
    UNSIGNED_INT = enum.auto()
    POINTER = enum.auto()
    WRITEBACK = enum.auto()
    FLOAT_DEC = enum.auto()
    FLOAT_SCI = enum.auto()
    FLOAT_SHORTEST = enum.auto()
    FLOAT_HEX = enum.auto()

    @property
    def is_float(self) -> bool:
        return self in _FLOAT_CONVERSIONS

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_CONVERSIONS


_FLOAT_CONVERSIONS = frozenset(
    {
        Conversion.FLOAT_DEC,
        Conversion.FLOAT_SCI,
        Conversion.FLOAT_SHORTEST,
        Conversion.FLOAT_HEX,
    }
)

_INTEGER_CONVERSIONS = frozenset(
    {
        Conversion.SIGNED_INT,
        Conversion.OCTAL,
        Conversion.HEX_INT,
        Conversion.UNSIGNED_INT,
    }
)


@dataclass
class FormatSpec:
    """One parsed conversion specification such as ``%-08.3lx``."""

    conversion: Conversion = Conversion.NONE
    length_modifier: LengthModifier = LengthModifier.NONE
    field_width: int = 0
    field_width_opt: Option = Option.NONE
    prec: int = 0
    prec_opt: Option = Option.NONE
    left_justified: bool = False
    leading_zero_pad: bool = False
    prepend: str = ""
    alt_form: bool = False
    uppercase: bool = False
    length: int = field(default=0)


_LARGE_MODIFIERS = {
    "j": LengthModifier.INTMAX,
    "z": LengthModifier.SIZET,
    "t": LengthModifier.PTRDIFFT,
}


@lru_cache(maxsize=None)
def _conversion_table(config: Config) -> dict[str, tuple[Conversion, bool]]:
    table: dict[str, tuple[Conversion, bool]] = {
        "%": (Conversion.PERCENT, False),
        "c": (Conversion.CHAR, False),
        "s": (Conversion.STRING, False),
        "i": (Conversion.SIGNED_INT, False),
        "d": (Conversion.SIGNED_INT, False),
        "o": (Conversion.OCTAL, False),
        "u": (Conversion.UNSIGNED_INT, False),
        "x": (Conversion.HEX_INT, False),
        "X": (Conversion.HEX_INT, True),
        "p": (Conversion.POINTER, False),
    }
    if config.floats:
        for lower, conv in (
            ("f", Conversion.FLOAT_DEC),
            ("e", Conversion.FLOAT_SCI),
            ("g", Conversion.FLOAT_SHORTEST),
            ("a", Conversion.FLOAT_HEX),
        ):
            table[lower] = (conv, False)
            table[lower.upper()] = (conv, True)
    if config.writeback:
        table["n"] = (Conversion.WRITEBACK, False)
    if config.binary:
        table["b"] = (Conversion.BINARY, False)
        table["B"] = (Conversion.BINARY, True)
    return table


def parse_format_spec(
    fmt: str, start: int = 0, config: Config | None = None
) -> FormatSpec | None:
    """Parse the spec beginning at ``fmt[start]``, which must be ``'%'``.

    Returns the parsed spec, whose ``length`` counts the characters consumed,
    or ``None`` when the text is not a complete, supported specification.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    if fmt[start:start + 1] != "%":
        raise ValueError(f"no '%' at position {start}")

    def at(i: int) -> str:
        return fmt[i] if i < len(fmt) else ""

    spec = FormatSpec()
    pos = start + 1

    while True:  # optional flags
        c = at(pos)
        if cfg.field_width and c == "-":
            spec.left_justified = True
            spec.leading_zero_pad = False
        elif cfg.field_width and c == "0":
            spec.leading_zero_pad = not spec.left_justified
        elif c == "+":
            spec.prepend = "+"
        elif c == " ":
            if not spec.prepend:
                spec.prepend = " "
        elif cfg.alt_form and c == "#":
            spec.alt_form = True
        else:
            break
        pos += 1

    if cfg.field_width:
        if at(pos) == "*":
            spec.field_width_opt = Option.STAR
            pos += 1
        else:
            while at(pos) in _DIGITS and at(pos):
                spec.field_width_opt = Option.LITERAL
                spec.field_width = spec.field_width * 10 + int(at(pos))
                pos += 1

    if cfg.precision and at(pos) == ".":
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
    if cfg.small and c == "h":
        pos += 1
        spec.length_modifier = LengthModifier.SHORT
        if at(pos) == "h":
            spec.length_modifier = LengthModifier.CHAR
            pos += 1
    elif c == "l":
        pos += 1
        spec.length_modifier = LengthModifier.LONG
        if cfg.large and at(pos) == "l":
            spec.length_modifier = LengthModifier.LONG_LONG
            pos += 1
    elif cfg.floats and c == "L":
        pos += 1
        spec.length_modifier = LengthModifier.LONG_DOUBLE
    elif cfg.large and c in _LARGE_MODIFIERS:
        pos += 1
        spec.length_modifier = _LARGE_MODIFIERS[c]

    entry = _conversion_table(cfg).get(at(pos)) if at(pos) else None
    if entry is None:
        return None
    pos += 1
    conv, uppercase = entry
    spec.conversion = conv
    spec.uppercase = uppercase

    if conv in (Conversion.PERCENT, Conversion.CHAR):
        spec.prec_opt = Option.NONE
        spec.prec = 0
    elif conv.is_integer:
        if cfg.field_width and cfg.precision and spec.prec_opt is not Option.NONE:
            spec.leading_zero_pad = False
    elif conv.is_float:
        if spec.prec_opt is Option.NONE:
            spec.prec = 6
    elif conv in (Conversion.WRITEBACK, Conversion.POINTER):
        spec.prec_opt = Option.NONE

    spec.length = pos - start
    return spec