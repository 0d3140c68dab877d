"""Digit conversion for integers and floating-point values."""

from __future__ import annotations

import struct

from .spec import DEFAULT_CONFIG, Config, FormatSpec

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_DBL_MANT_DIG = 53
_MAN_BITS = _DBL_MANT_DIG - 1
_EXP_MASK = 0x7FF
_EXP_BIAS = 1023
_BIN_BITS = 64
_BIN_MASK = (1 << _BIN_BITS) - 1


def format_unsigned(value: int, base: int = 10, uppercase: bool = False) -> str:
    """Render a non-negative integer in ``base``, most significant digit first."""
    if value < 0:
        raise ValueError("value must not be negative")
    if not 2 <= base <= len(_DIGITS):
        raise ValueError(f"unsupported base {base}")
    digits = _DIGITS.upper() if uppercase else _DIGITS
    out = []
    while True:
        value, d = divmod(value, base)
        out.append(digits[d])
        if not value:
            break
    return "".join(reversed(out))


def bin_len(value: int) -> int:
    """Number of binary digits needed to print ``value`` (at least one)."""
    if value < 0:
        raise ValueError("value must not be negative")
    return max(1, value.bit_length())


def _double_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


def _ftoa(man: int, exp: int, prec: int, dot: bool, size: int, mbits: int) -> str | None:
    """Fixed-width decimal expansion; returns None when the buffer would overflow."""
    mask = (1 << mbits) - 1
    shift_bits = min(mbits, _DBL_MANT_DIG) - 1
    buf = [""] * size

    if exp:
        man |= 1 << _MAN_BITS
    else:
        exp += 1
    exp -= _EXP_BIAS

    carry = 0
    dec = prec
    if dec or dot:
        buf[dec] = "."
        dec += 1

    # Integer part
    if exp >= 0:
        shift_i = min(exp, shift_bits)
        exp_i = exp - shift_i
        shift_i = _MAN_BITS - shift_i
        man_i = (man >> shift_i) & mask
        if exp_i:
            if shift_i:
                carry = (man >> (shift_i - 1)) & 1
            exp = _MAN_BITS  # no fraction part left
        while exp_i:
            if not man_i & (1 << (mbits - 1)):
                man_i = ((man_i << 1) | carry) & mask
                carry = 0
            else:
                if dec >= size:
                    return None
                buf[dec] = "0"
                dec += 1
                carry = int((man_i % 5 + carry) > 2)
                man_i //= 5
            exp_i -= 1
    else:
        man_i = 0
    end = dec

    while True:
        if end >= size:
            return None
        buf[end] = chr(ord("0") + man_i % 10)
        end += 1
        man_i //= 10
        if not man_i:
            break

    # Fraction part
    dec_f = prec
    if exp < _MAN_BITS:
        shift_f = -1 if exp < 0 else exp
        exp_f = exp - shift_f
        bin_f = (man << ((_BIN_BITS - _MAN_BITS) + shift_f)) & _BIN_MASK
        if _BIN_BITS > mbits:
            man_f = (bin_f >> (_BIN_BITS - mbits)) & mask
            carry = (bin_f >> (_BIN_BITS - mbits - 1)) & 1
        else:
            man_f = (bin_f << (mbits - _BIN_BITS)) & mask
            carry = 0

        limit = (mask - 3) // 5
        digit = 0
        while dec_f and exp_f < 4:
            if man_f > limit or digit:
                carry = man_f & 1
                man_f >>= 1
            else:
                man_f = (man_f * 5) & mask
                if carry:
                    man_f = (man_f + 3) & mask
                    carry = 0
                if exp_f < 0:
                    dec_f -= 1
                    buf[dec_f] = "0"
                else:
                    digit += 1
            exp_f += 1
        man_f = (man_f + carry) & mask
        carry = int(exp_f >= 0)
        dec = 0
    else:
        man_f = 0

    if dec_f:
        top = 0xF << (mbits - 4)
        while True:
            dec_f -= 1
            buf[dec_f] = chr(ord("0") + (man_f >> (mbits - 4)))
            man_f &= ~top & mask
            if not dec_f:
                break
            man_f = (man_f * 10) & mask
        man_f = (man_f << 4) & mask
    if exp < _MAN_BITS:
        carry &= man_f >> (mbits - 1)

    # Round
    while carry:
        if dec >= size:
            return None
        if dec >= end:
            buf[end] = "0"
            end += 1
        if buf[dec] != ".":
            carry = int(buf[dec] == "9")
            buf[dec] = "0" if carry else chr(ord(buf[dec]) + 1)
        dec += 1

    return "".join(reversed(buf[:end]))


def format_float(
    value: float, spec: FormatSpec, config: Config | None = None
) -> tuple[str, bool]:
    """Render the magnitude of ``value`` in fixed notation with ``spec.prec`` decimals.

    Returns ``(text, numeric)``.  ``numeric`` is False when the text is
    ``nan``, ``inf`` or ``err`` (cased by ``spec.uppercase``) rather than digits;
    ``err`` means the result does not fit the conversion buffer.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    bits = _double_bits(value)
    exp = (bits >> _MAN_BITS) & _EXP_MASK
    man = bits & ((1 << _MAN_BITS) - 1)

    def text(word: str) -> tuple[str, bool]:
        return (word if spec.uppercase else word.lower()), False

    if exp == _EXP_MASK:
        return text("NAN" if man else "INF")
    if spec.prec > cfg.conversion_buffer_size - 2:
        return text("ERR")
    dot = cfg.alt_form and spec.alt_form
    digits = _ftoa(
        man, exp, spec.prec, dot, cfg.conversion_buffer_size, cfg.float_mantissa_bits
    )
    if digits is None:
        return text("ERR")
    return digits, True