"""printf-style formatting into callbacks, bounded buffers and strings."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .convert import format_float, format_unsigned
from .spec import (
    DEFAULT_CONFIG,
    Config,
    Conversion,
    FormatSpec,
    LengthModifier,
    Option,
    parse_format_spec,
)

PutC = Callable[[str], Any]

_UNSIGNED_CONVERSIONS = frozenset(
    {
        Conversion.BINARY,
        Conversion.OCTAL,
        Conversion.HEX_INT,
        Conversion.UNSIGNED_INT,
        Conversion.POINTER,
    }
)

_POINTER_BITS = 64


@dataclass
class Writeback:
    """Target of a ``%n`` conversion; receives the number of characters written so far."""

    value: int = 0


class BoundedBuffer:
    """Collects characters up to a fixed capacity and silently drops the rest."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("buffer size must not be negative")
        self.size = size
        self._chars: list[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    def write(self, c: str | int) -> None:
        """Store one character if there is room for it."""
        if isinstance(c, int):
            c = chr(c)
        if len(self._chars) < self.size:
            self._chars.append(c)

    def text(self) -> str:
        """The stored characters up to the first NUL."""
        return "".join(self._chars).split("\0", 1)[0]


class _Args:
    def __init__(self, args: Iterable[Any]) -> None:
        self._it = iter(args)
        self._index = 0

    def next(self, what: str) -> Any:
        try:
            value = next(self._it)
        except StopIteration:
            raise TypeError(f"missing argument {self._index} for {what}") from None
        self._index += 1
        return value


class _Sink:
    def __init__(self, putc: PutC) -> None:
        self._putc = putc
        self.count = 0

    def put(self, text: str) -> None:
        for ch in text:
            self.count += 1
            self._putc(ch)


def _wrap_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _wrap_unsigned(value: int, bits: int) -> int:
    return value & ((1 << bits) - 1)


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, int):
        return int(value)
    raise TypeError(f"{what} needs an integer argument, got {type(value).__name__}")


def _integer_bits(modifier: LengthModifier, cfg: Config) -> int | None:
    return {
        LengthModifier.NONE: 32,
        LengthModifier.SHORT: 16,
        LengthModifier.CHAR: 8,
        LengthModifier.LONG: cfg.long_bits,
        LengthModifier.LONG_LONG: 64,
        LengthModifier.INTMAX: 64,
        LengthModifier.SIZET: 64,
        LengthModifier.PTRDIFFT: 64,
    }.get(modifier)


def _char_arg(value: Any) -> str:
    if isinstance(value, str):
        if len(value) > 1:
            raise TypeError("%c needs a single character")
        return value.replace("\0", "")
    ch = chr(_as_int(value, "%c") & 0xFF)
    return "" if ch == "\0" else ch


def _store_writeback(target: Any, spec: FormatSpec, count: int, cfg: Config) -> None:
    bits = _integer_bits(spec.length_modifier, cfg)
    if bits is None:
        return
    if not isinstance(target, Writeback):
        raise TypeError("%n needs a Writeback argument")
    if spec.length_modifier is LengthModifier.SIZET:
        target.value = _wrap_unsigned(count, bits)
    else:
        target.value = _wrap_signed(count, bits)


def _emit(spec: FormatSpec, args: _Args, sink: _Sink, cfg: Config) -> None:
    conv = spec.conversion

    if spec.field_width_opt is Option.STAR:
        width = _wrap_signed(_as_int(args.next("field width"), "*"), 32)
        if width < 0:
            width = -width
            spec.left_justified = True
        spec.field_width = width
    if spec.prec_opt is Option.STAR:
        prec = _wrap_signed(_as_int(args.next("precision"), "*"), 32)
        spec.prec = prec
        if prec < 0:
            spec.prec_opt = Option.NONE
            spec.prec = 6 if conv.is_float else 0

    digits = ""
    sign = ""
    prefix = ""
    zero = False

    if conv is Conversion.PERCENT:
        digits = "%"
    elif conv is Conversion.CHAR:
        digits = _char_arg(args.next("%c"))
    elif conv is Conversion.STRING:
        value = args.next("%s")
        if value is not None:
            if not isinstance(value, str):
                raise TypeError("%s needs a string argument")
            value = value.split("\0", 1)[0]
            if spec.prec_opt is not Option.NONE:
                value = value[: spec.prec]
            digits = value
    elif conv is Conversion.SIGNED_INT:
        bits = _integer_bits(spec.length_modifier, cfg)
        val = 0 if bits is None else _wrap_signed(_as_int(args.next("%d"), "%d"), bits)
        sign = "-" if val < 0 else spec.prepend
        zero = val == 0
        if not (zero and spec.prec_opt is not Option.NONE and not spec.prec):
            digits = format_unsigned(abs(val), 10)
    elif conv in _UNSIGNED_CONVERSIONS:
        if conv is Conversion.POINTER:
            raw = args.next("%p")
            val = 0 if raw is None else _wrap_unsigned(_as_int(raw, "%p"), _POINTER_BITS)
        else:
            bits = _integer_bits(spec.length_modifier, cfg)
            val = 0 if bits is None else _wrap_unsigned(_as_int(args.next("%u"), "%u"), bits)
        zero = val == 0
        if zero and spec.prec_opt is not Option.NONE and not spec.prec:
            if conv is Conversion.OCTAL and spec.alt_form:
                spec.prec = 1
        else:
            base = {Conversion.BINARY: 2, Conversion.OCTAL: 8, Conversion.UNSIGNED_INT: 10}
            digits = format_unsigned(val, base.get(conv, 16), spec.uppercase)
        if val and spec.alt_form:
            if conv is Conversion.OCTAL:
                digits = "0" + digits
            elif conv in (Conversion.HEX_INT, Conversion.POINTER):
                prefix = "0X" if spec.uppercase else "0x"
            elif conv is Conversion.BINARY:
                prefix = "0B" if spec.uppercase else "0b"
    elif conv is Conversion.WRITEBACK:
        if _integer_bits(spec.length_modifier, cfg) is not None:
            _store_writeback(args.next("%n"), spec, sink.count, cfg)
    elif conv.is_float:
        raw = args.next("%f")
        if not isinstance(raw, (int, float)):
            raise TypeError("floating conversions need a number argument")
        val = float(raw)
        negative = struct.pack("<d", val)[7] & 0x80
        sign = "-" if negative else spec.prepend
        zero = val == 0.0
        digits, numeric = format_float(val, spec, cfg)
        if not numeric:
            spec.leading_zero_pad = False

    pad_c = ""
    if spec.field_width_opt is not Option.NONE:
        if spec.leading_zero_pad:
            if spec.prec_opt is not Option.NONE and not spec.prec and zero:
                pad_c = " "
            else:
                pad_c = "0"
        else:
            pad_c = " "

    prec_pad = 0
    if cfg.precision and conv is not Conversion.STRING and not conv.is_float:
        prec_pad = max(0, spec.prec - len(digits))

    field_pad = max(
        0, spec.field_width - len(digits) - len(sign) - len(prefix) - prec_pad
    )

    if not spec.left_justified and pad_c:
        if pad_c == "0":
            sink.put(sign)
            sign = ""
            sink.put(prefix)
        sink.put(pad_c * field_pad)
        if pad_c != "0":
            sink.put(prefix)
    else:
        sink.put(prefix)

    if conv is Conversion.STRING:
        sink.put(digits)
    else:
        sink.put(sign)
        sink.put("0" * prec_pad)
        sink.put(digits)

    if spec.left_justified and pad_c:
        sink.put(pad_c * field_pad)


def vpprintf(
    putc: PutC, fmt: str, args: Iterable[Any] = (), config: Config | None = None
) -> int:
    """Format ``args`` by ``fmt``, passing each character to ``putc``.

    Returns the number of characters produced.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    sink = _Sink(putc)
    reader = _Args(args)
    fmt = fmt.split("\0", 1)[0]
    pos = 0
    while pos < len(fmt):
        spec = parse_format_spec(fmt, pos, cfg) if fmt[pos] == "%" else None
        if spec is None:
            sink.put(fmt[pos])
            pos += 1
            continue
        pos += spec.length
        _emit(spec, reader, sink, cfg)
    return sink.count


def pprintf(putc: PutC, fmt: str, *args: Any, config: Config | None = None) -> int:
    """Format ``args`` by ``fmt`` into ``putc``; returns the character count."""
    return vpprintf(putc, fmt, args, config)


def snprintf(
    size: int, fmt: str, *args: Any, config: Config | None = None
) -> tuple[str, int]:
    """Format into a buffer of ``size`` bytes including the terminator.

    Returns the text that fits and the length the full result would have.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    buf = BoundedBuffer(size)
    n = vpprintf(buf.write, fmt, args, cfg)
    buf.write("\0")
    if not size:
        return "", n
    text = buf.text()
    if cfg.safe_empty_on_overflow:
        if n >= size:
            text = ""
    else:
        text = text[: size - 1]
    return text, n


def sprintf(fmt: str, *args: Any, config: Config | None = None) -> str:
    """Format ``args`` by ``fmt`` and return the whole result."""
    out: list[str] = []
    vpprintf(out.append, fmt, args, config)
    return "".join(out)