"""
Classification of format arguments.

Every value passed to format() is turned into an Argument, a tagged
variant whose `kind` says what family of value it is. Formatters never
look at raw call-site values; they receive the result of one of the
as_* functions below, which check that the argument suits the
conversion and perform the conversions implied by the length modifier.

"""

import ctypes
import datetime
import decimal
import enum
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import numpy as np
from .codeunits import is_text, decode
from .exceptions import KindMismatch
from .specifier import ConversionKind, LengthModifier


logger = logging.getLogger(__name__)


class ArgKind(Enum):
    INTEGER = 1
    FLOAT = 2
    BOOLEAN = 3
    CHARACTER = 4
    TEXT = 5
    ADDRESS = 6
    COUNT_SLOT = 7
    OPAQUE = 8


class DomainKind(Enum):
    ENUM = 1
    DATE_TIME = 2
    DURATION = 3
    FIXED_POINT = 4
    CURRENCY = 5
    OBJECT = 6


@dataclass(frozen=True)
class Address:
    """A raw memory address, formatted by %p."""

    value: int = 0

    def __int__(self):
        return self.value

    def __bool__(self):
        return self.value != 0


class CountSlot:
    """Receives the number of code units written so far when passed to a
%n conversion."""

    def __init__(self):
        self.value = None

    def __repr__(self):
        return f'<CountSlot {self.value}>'


@dataclass(frozen=True)
class Currency:
    amount: decimal.Decimal
    symbol: str = '$'
    decimals: int = 2

    def __post_init__(self):
        if not isinstance(self.amount, decimal.Decimal):
            object.__setattr__(
                self, 'amount', decimal.Decimal(str(self.amount)))


@dataclass(frozen=True)
class Argument:
    kind: ArgKind
    value: object
    bits: Optional[int] = None
    signed: bool = True
    domain: Optional[DomainKind] = None

    def describe(self):
        if self.domain is not None:
            return f'{self.domain.name.lower()} argument'
        if self.kind == ArgKind.INTEGER and self.bits is not None:
            sign = '' if self.signed else 'u'
            return f'{sign}int{self.bits} argument'
        return f'{self.kind.name.lower()} argument'


# ctypes integer types and whether they are signed. The fixed-width
# names (c_int8 etc) are aliases of these.
_ctypes_ints = {
    ctypes.c_byte: True,
    ctypes.c_ubyte: False,
    ctypes.c_short: True,
    ctypes.c_ushort: False,
    ctypes.c_int: True,
    ctypes.c_uint: False,
    ctypes.c_long: True,
    ctypes.c_ulong: False,
    ctypes.c_longlong: True,
    ctypes.c_ulonglong: False,
    ctypes.c_size_t: False,
    ctypes.c_ssize_t: True,
}

_ctypes_floats = (ctypes.c_float, ctypes.c_double, ctypes.c_longdouble)

_ctypes_by_width = {
    (8, True): ctypes.c_int8,
    (8, False): ctypes.c_uint8,
    (16, True): ctypes.c_int16,
    (16, False): ctypes.c_uint16,
    (32, True): ctypes.c_int32,
    (32, False): ctypes.c_uint32,
    (64, True): ctypes.c_int64,
    (64, False): ctypes.c_uint64,
}


def adapt(value):
    """Classify a call-site value into an Argument."""

    if isinstance(value, Argument):
        return value

    # bool is a subclass of int, so it needs to come first
    if isinstance(value, (bool, np.bool_)):
        return Argument(ArgKind.BOOLEAN, bool(value))

    if isinstance(value, np.integer):
        return Argument(
            ArgKind.INTEGER, int(value),
            bits=value.dtype.itemsize * 8,
            signed=bool(np.issubdtype(value.dtype, np.signedinteger)))

    if isinstance(value, enum.Enum) and isinstance(value, int):
        return Argument(ArgKind.INTEGER, value, domain=DomainKind.ENUM)

    if isinstance(value, int):
        return Argument(ArgKind.INTEGER, value)

    if type(value) in _ctypes_ints:
        return Argument(
            ArgKind.INTEGER, value.value,
            bits=ctypes.sizeof(value) * 8,
            signed=_ctypes_ints[type(value)])

    if isinstance(value, (ctypes.c_char, ctypes.c_wchar)):
        char = value.value
        if isinstance(char, bytes):
            char = char.decode('latin-1')
        return Argument(ArgKind.CHARACTER, char, bits=ctypes.sizeof(value) * 8)

    if value is None or isinstance(value, Address):
        return Argument(ArgKind.ADDRESS, 0 if value is None else value.value,
                        bits=64, signed=False)

    if isinstance(value, ctypes.c_void_p):
        return Argument(ArgKind.ADDRESS, value.value or 0,
                        bits=64, signed=False)

    if isinstance(value, np.floating):
        return Argument(ArgKind.FLOAT, float(value),
                        bits=value.dtype.itemsize * 8)

    if isinstance(value, float):
        return Argument(ArgKind.FLOAT, value, bits=64)

    if isinstance(value, _ctypes_floats):
        return Argument(ArgKind.FLOAT, value.value,
                        bits=ctypes.sizeof(value) * 8)

    if is_text(value):
        return Argument(ArgKind.TEXT, decode(value))

    if isinstance(value, CountSlot):
        return Argument(ArgKind.COUNT_SLOT, value)

    return Argument(ArgKind.OPAQUE, value, domain=domain_of(value))


def domain_of(value):
    if isinstance(value, decimal.Decimal):
        return DomainKind.FIXED_POINT
    if isinstance(value, Currency):
        return DomainKind.CURRENCY
    if isinstance(value, enum.Enum):
        return DomainKind.ENUM
    if isinstance(value, (datetime.date, datetime.time)):
        return DomainKind.DATE_TIME
    if isinstance(value, datetime.timedelta):
        return DomainKind.DURATION
    return DomainKind.OBJECT


def accepts(kind, arg):
    """Return whether a conversion of the given kind can format the
given argument."""

    if kind.is_integer:
        return arg.kind in (ArgKind.INTEGER, ArgKind.BOOLEAN)
    if kind.is_float:
        return (
            arg.kind in (ArgKind.FLOAT, ArgKind.INTEGER) or
            arg.domain == DomainKind.FIXED_POINT
        )
    if kind == ConversionKind.CHAR:
        return (
            arg.kind in (ArgKind.CHARACTER, ArgKind.INTEGER) or
            (arg.kind == ArgKind.TEXT and len(arg.value) == 1)
        )
    if kind == ConversionKind.STRING:
        return (
            arg.kind in (ArgKind.TEXT, ArgKind.CHARACTER, ArgKind.OPAQUE) or
            arg.domain == DomainKind.ENUM
        )
    if kind == ConversionKind.POINTER:
        return arg.kind in (ArgKind.ADDRESS, ArgKind.INTEGER)
    if kind == ConversionKind.COUNT:
        return arg.kind == ArgKind.COUNT_SLOT
    return False


def check(arg, spec):
    if not accepts(spec.kind, arg):
        raise KindMismatch(
            msg=(f'{spec} at offset {spec.loc} cannot format '
                 f'{arg.describe()} {arg.value!r}'),
            loc=spec.loc)


def wrap_integer(value, bits, signed):
    """Convert an integer to a C integer of the given width, with
two's-complement wraparound."""

    c_type = _ctypes_by_width[bits, signed]
    return c_type(int(value) & ((1 << bits) - 1)).value


def as_integer(arg, spec):
    check(arg, spec)
    if arg.kind == ArgKind.BOOLEAN:
        return arg.value
    result = wrap_integer(arg.value, spec.length.bits, spec.kind.is_signed)
    if result != arg.value:
        logger.debug('Converted %s %s to %s for %s',
                     arg.describe(), arg.value, result, spec)
    return result


def as_float(arg, spec):
    check(arg, spec)
    if arg.domain == DomainKind.FIXED_POINT:
        return arg.value
    try:
        return float(arg.value)
    except OverflowError:
        raise KindMismatch(
            msg=f'{arg.value} is too large for {spec} at offset {spec.loc}',
            loc=spec.loc) from None


def as_char(arg, spec):
    check(arg, spec)
    if arg.kind != ArgKind.INTEGER:
        return arg.value

    if spec.length == LengthModifier.L:
        code = wrap_integer(arg.value, 32, False)
    else:
        code = wrap_integer(arg.value, 8, False)
    if code > 0x10ffff or 0xd800 <= code <= 0xdfff:
        raise KindMismatch(
            msg=f'{code:#x} is not a valid character for {spec}',
            loc=spec.loc)
    return chr(code)


def as_address(arg, spec):
    check(arg, spec)
    return wrap_integer(arg.value, 64, False)


def as_count_slot(arg, spec):
    check(arg, spec)
    return arg.value


def as_star_value(value, spec, what):
    """Return the integer value of an argument supplying a '*' width or
precision."""

    arg = adapt(value)
    if arg.kind != ArgKind.INTEGER:
        raise KindMismatch(
            msg=(f'{spec} at offset {spec.loc} expects an integer {what}, '
                 f'got {arg.describe()} {arg.value!r}'),
            loc=spec.loc)
    return wrap_integer(arg.value, 32, True)
