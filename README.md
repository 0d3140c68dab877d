# nanofmt

A compact printf-style formatter that follows C `printf` semantics. It
handles flags (`-`, `0`, `+`, space, `#`), field width and precision
(literal or `*`), length modifiers, and the conversions `%%`, `%c`, `%s`,
`%d`/`%i`, `%u`, `%o`, `%x`/`%X`, `%p`, `%b`/`%B`, `%n` and `%f`/`%F`.
Which features are on is set by a `Config`.

## Installation

```
pip install nanofmt
```

## Usage

```python
from nanofmt.printf import sprintf, snprintf, pprintf

sprintf("%s %s", "hello", "nanofmt")   # 'hello nanofmt'
sprintf("%+04i", 1)                     # '+001'
sprintf("%#x", 0x1234)                  # '0x1234'
sprintf("%.3f", 1.5)                    # '1.500'

# Bounded output: a buffer of the given size, one byte of which is kept
# for the terminator. Returns the text that fit and the full length.
text, length = snprintf(8, "123456789")  # ('1234567', 9)

# Character sink: each output character is passed to a callback.
chars = []
count = pprintf(chars.append, "%c%c", "A", "B")  # count == 2, chars == ['A', 'B']
```

`vpprintf(putc, fmt, args, config)` is the same as `pprintf` but takes the
arguments as one iterable.

Integer arguments are wrapped to the width the length modifier implies:
32 bits with no modifier, 16 for `h`, 8 for `hh`, `Config.long_bits` for
`l`, 64 for `ll`, `j`, `z`, `t` and for pointers. So `sprintf("%hhi", 128)`
gives `'-128'`. A missing argument or an argument of the wrong type raises
`TypeError`.

### Configuration

`nanofmt.spec.Config` is a frozen dataclass of feature switches:
`field_width`, `precision`, `floats`, `large` (`ll`, `j`, `z`, `t`),
`small` (`h`, `hh`), `binary` (`%b`), `writeback` (`%n`) and `alt_form`
(`#`), plus `conversion_buffer_size` (at least 23), `float_mantissa_bits`,
`long_bits` (32 or 64) and `safe_empty_on_overflow`, which makes `snprintf`
return an empty string instead of a truncated one when the output does not
fit. Pass it as `config=` to any formatting function. Invalid combinations,
such as floats without precision, raise `ValueError`.

```python
from nanofmt.spec import Config
from nanofmt.printf import Writeback, sprintf

cfg = Config(binary=True, writeback=True)
sprintf("%#b", 5, config=cfg)            # '0b101'

wb = Writeback()
sprintf("abc%n", wb, config=cfg)
wb.value                                 # 3
```

`nanofmt.printf.BoundedBuffer` is the fixed-capacity character store used by
`snprintf`; its `write` drops characters beyond its size and `text` returns
what was stored up to the first NUL.

Lower-level pieces: `nanofmt.spec.parse_format_spec(fmt, start, config)`
parses one conversion specification into a `FormatSpec` (or returns `None`),
and `nanofmt.convert` has `format_unsigned`, `bin_len` and `format_float`.

## Limitations

- `%e`, `%g` and `%a` (and their upper-case forms) are accepted but are
  printed in fixed-point notation, the same as `%f`.
- Floating-point digits are produced in a buffer of `conversion_buffer_size`
  characters; values or precisions that do not fit print as `err` (or `ERR`).
  NaN and infinity print as `nan` and `inf`.

## Testing

```
pip install -e .[test]
pytest
```