"""
Per-kind formatters.

Each formatter takes a FormatInfo and returns the text for one
conversion specifier. Formatters are registered for the (conversion
kind, length modifier) pairs they support with the `formats` decorator,
which fills in the DISPATCH table when this module is imported. A pair
that is not in the table is not a valid specifier.

Padding follows the C rules: the field is padded with spaces up to the
width, on the right when the '-' flag is given and on the left
otherwise. Numeric conversions pad with zeros instead when the '0' flag
is given (and, for integers, no precision is), in which case the zeros
go between the sign (and any radix prefix) and the digits. Widths are
measured in code units of the template being formatted.

"""

import math
from decimal import Decimal
from types import MappingProxyType
from . import args
from .args import ArgKind
from .codeunits import CharWidth, unit_count
from .domain import render, address_text
from .exceptions import InternalError, KindMismatch, MalformedTemplate
from .specifier import ConversionKind as CK, LengthModifier, Flags


DEFAULT_PRECISION = 6

_table = {}

# maps (ConversionKind, LengthModifier) pairs to formatter functions
DISPATCH = MappingProxyType(_table)


def formats(kinds, lengths=(LengthModifier.NONE,)):
    def wrapper(func):
        for kind in kinds:
            for length in lengths:
                if (kind, length) in _table:
                    raise InternalError(
                        f'Duplicate formatter for %{length.value}'
                        f'{kind.value}')
                _table[kind, length] = func
        return func
    return wrapper


def formatter_for(spec):
    try:
        return DISPATCH[spec.kind, spec.length]
    except KeyError:
        raise MalformedTemplate(
            msg=(f'Length modifier {spec.length.value!r} cannot be used '
                 f'with %{spec.kind.value} at offset {spec.loc}'),
            loc=spec.loc) from None


# --- Padding ---

def pad_numeric(prefix, body, info, zero_pad):
    fill = info.width - unit_count(prefix + body, info.char_width)
    if fill <= 0:
        return prefix + body
    if info.has(Flags.LEFT):
        return prefix + body + ' ' * fill
    if zero_pad:
        return prefix + '0' * fill + body
    return ' ' * fill + prefix + body


def pad_text(text, info):
    fill = info.width - unit_count(text, info.char_width)
    if fill <= 0:
        return text
    if info.has(Flags.LEFT):
        return text + ' ' * fill
    return ' ' * fill + text


def truncate(text, max_units, char_width):
    """Return the longest prefix of text that fits in max_units code
units, without splitting a character."""

    if char_width == CharWidth.WIDE32:
        return text[:max_units]
    used = 0
    for i, c in enumerate(text):
        used += unit_count(c, char_width)
        if used > max_units:
            return text[:i]
    return text


def check_encodable(text, info):
    """Raise KindMismatch if text holds characters that cannot be stored
in the code units of the template (lone surrogates in narrow text)."""

    try:
        unit_count(text, info.char_width)
    except UnicodeEncodeError as e:
        raise KindMismatch(
            msg=(f'{info.spec} at offset {info.spec.loc} cannot write '
                 f'{text[e.start]!r} to {info.char_width.value}-bit text'),
            loc=info.spec.loc) from None
    return text


def sign_char(negative, info, signed=True):
    if negative:
        return '-'
    if not signed:
        return ''
    if info.has(Flags.SIGN):
        return '+'
    if info.has(Flags.SPACE):
        return ' '
    return ''


# --- Integers ---

integer_kinds = [k for k in CK if k.is_integer]
decimal_kinds = (CK.SIGNED, CK.SIGNED_I, CK.UNSIGNED)
digit_formats = {2: 'b', 8: 'o', 10: 'd'}


@formats(integer_kinds, list(LengthModifier))
def format_integer(info):
    value = args.as_integer(info.argument, info.spec)
    if isinstance(value, bool):
        if info.kind in decimal_kinds:
            return format_boolean(info, value)
        value = int(value)

    kind = info.kind
    magnitude = abs(value)
    digits = format(magnitude, digit_formats.get(kind.radix, kind.value))

    if info.precision is not None:
        if info.precision == 0 and magnitude == 0:
            digits = ''
        digits = digits.rjust(info.precision, '0')

    prefix = ''
    if info.has(Flags.ALT):
        if kind == CK.OCTAL:
            if not digits.startswith('0'):
                digits = '0' + digits
        elif kind.radix in (2, 16) and magnitude != 0:
            prefix = '0' + kind.value

    sign = sign_char(value < 0, info, kind.is_signed)
    zero_pad = (
        info.has(Flags.ZERO) and
        not info.has(Flags.LEFT) and
        info.precision is None
    )
    return pad_numeric(sign + prefix, digits, info, zero_pad)


def format_boolean(info, value):
    text = 'true' if value else 'false'
    if info.precision is not None:
        text = text[:info.precision]
    return pad_text(text, info)


# --- Floating point ---

float_lengths = (LengthModifier.NONE, LengthModifier.L, LengthModifier.BIG_L)


@formats([CK.FIXED, CK.FIXED_UPPER, CK.EXP, CK.EXP_UPPER,
          CK.GENERAL, CK.GENERAL_UPPER], float_lengths)
def format_float(info):
    value = args.as_float(info.argument, info.spec)
    if isinstance(value, Decimal):
        if value.is_finite():
            return format_fixed_point(info, value)
        value = float(value)

    negative = math.copysign(1.0, value) < 0
    sign = sign_char(negative, info)
    magnitude = abs(value)
    if not math.isfinite(magnitude):
        return format_non_finite(info, sign, magnitude)

    body = format(magnitude, float_spec(info))
    if info.kind.is_upper:
        body = body.upper()
    zero_pad = info.has(Flags.ZERO) and not info.has(Flags.LEFT)
    return pad_numeric(sign, body, info, zero_pad)


def format_fixed_point(info, value):
    """Decimal values are formatted exactly, without going through a
binary float."""

    sign = sign_char(value.is_signed(), info)
    precision = info.precision
    if precision is None:
        precision = DEFAULT_PRECISION
    alt = info.has(Flags.ALT)
    conversion = info.kind.value.lower()
    if conversion == 'g':
        body = decimal_general(abs(value), precision, alt)
    else:
        body = decimal_body(abs(value), precision, conversion, alt)

    if info.kind.is_upper:
        body = body.upper()
    zero_pad = info.has(Flags.ZERO) and not info.has(Flags.LEFT)
    return pad_numeric(sign, body, info, zero_pad)


def decimal_body(magnitude, precision, conversion, alt):
    # Decimal formatting has no alternate form and writes single-digit
    # exponents
    body = format(magnitude, f'.{precision}{conversion}')
    mantissa, e, exp = body.partition('e')
    if alt and '.' not in mantissa:
        mantissa += '.'
    if e:
        exp = exp[0] + exp[1:].rjust(2, '0')
    return mantissa + e + exp


def decimal_general(magnitude, precision, alt):
    """The C %g rules for a Decimal: exponent form when the exponent
after rounding to `precision` significant digits is below -4 or not
below the precision, fixed form otherwise. Trailing zeros are dropped
unless alt is set."""

    if precision == 0:
        precision = 1
    exp = 0
    if magnitude:
        rounded = format(magnitude, f'.{precision - 1}e')
        exp = int(rounded.partition('e')[2])

    if -4 <= exp < precision:
        body = decimal_body(magnitude, precision - 1 - exp, 'f', alt)
    else:
        body = decimal_body(magnitude, precision - 1, 'e', alt)

    if not alt:
        mantissa, e, exp_text = body.partition('e')
        if '.' in mantissa:
            mantissa = mantissa.rstrip('0').rstrip('.')
        body = mantissa + e + exp_text
    return body


def format_non_finite(info, sign, magnitude):
    body = 'nan' if math.isnan(magnitude) else 'inf'
    if info.kind.is_upper:
        body = body.upper()
    return pad_numeric(sign, body, info, False)


def float_spec(info):
    precision = info.precision
    if precision is None:
        precision = DEFAULT_PRECISION
    alt = '#' if info.has(Flags.ALT) else ''
    return f'{alt}.{precision}{info.kind.value.lower()}'


@formats([CK.HEX_FLOAT, CK.HEX_FLOAT_UPPER], float_lengths)
def format_hex_float(info):
    value = args.as_float(info.argument, info.spec)
    value = float(value)

    negative = math.copysign(1.0, value) < 0
    sign = sign_char(negative, info)
    magnitude = abs(value)
    if not math.isfinite(magnitude):
        return format_non_finite(info, sign, magnitude)

    prefix = '0x'
    body = hex_float_body(magnitude, info.precision, info.has(Flags.ALT))
    if info.kind.is_upper:
        prefix = prefix.upper()
        body = body.upper()
    zero_pad = info.has(Flags.ZERO) and not info.has(Flags.LEFT)
    return pad_numeric(sign + prefix, body, info, zero_pad)


def hex_float_body(magnitude, precision, alt):
    """Render a non-negative finite float as hex digits and a binary
exponent, without the 0x prefix: 1.8p+1 for 3.0. When no precision is
given, trailing zeros are dropped.

    """

    mantissa, exp = float.hex(magnitude)[2:].split('p')
    lead, frac = mantissa.split('.')
    exp = int(exp)

    if precision is None:
        frac = frac.rstrip('0')
    elif precision < len(frac):
        # round to the requested number of hex digits, ties to even
        full = int(lead + frac, 16)
        drop = 4 * (len(frac) - precision)
        kept, rest = divmod(full, 1 << drop)
        half = 1 << (drop - 1)
        if rest > half or (rest == half and kept & 1):
            kept += 1
        frac_bits = 4 * precision
        lead = format(kept >> frac_bits, 'x')
        if precision:
            frac = format(kept & ((1 << frac_bits) - 1), f'0{precision}x')
        else:
            frac = ''
    else:
        frac = frac.ljust(precision, '0')

    point = '.' if frac or alt else ''
    return f'{lead}{point}{frac}p{exp:+d}'


# --- Characters and strings ---

@formats([CK.CHAR], (LengthModifier.NONE, LengthModifier.L))
def format_char(info):
    char = check_encodable(args.as_char(info.argument, info.spec), info)
    return pad_text(char, info)


@formats([CK.STRING], (LengthModifier.NONE, LengthModifier.L))
def format_string(info):
    arg = info.argument
    args.check(arg, info.spec)
    if arg.kind in (ArgKind.TEXT, ArgKind.CHARACTER):
        text = arg.value
    else:
        text = render(arg.value, arg.domain)

    check_encodable(text, info)
    if info.precision is not None:
        text = truncate(text, info.precision, info.char_width)
    return pad_text(text, info)


# --- Pointers, counts and percent signs ---

@formats([CK.POINTER])
def format_pointer(info):
    address = args.as_address(info.argument, info.spec)
    return pad_text(address_text(address), info)


@formats([CK.COUNT], list(LengthModifier))
def format_count(info):
    slot = args.as_count_slot(info.argument, info.spec)
    slot.value = info.written
    return ''


@formats([CK.PERCENT])
def format_percent(info):
    return pad_text('%', info)
