from enum import Enum, Flag
from dataclasses import dataclass
from typing import ClassVar, Optional, Union


class Flags(Flag):
    NONE = 0
    LEFT = 1     # -
    SIGN = 2     # +
    SPACE = 4    # ' '
    ALT = 8      # #
    ZERO = 16    # 0

    @classmethod
    def from_chars(cls, chars):
        flags = cls.NONE
        for c in chars:
            flags |= _flag_chars[c]
        return flags

    def to_chars(self):
        return ''.join(c for c, f in _flag_chars.items() if f in self)


_flag_chars = {
    '-': Flags.LEFT,
    '+': Flags.SIGN,
    ' ': Flags.SPACE,
    '#': Flags.ALT,
    '0': Flags.ZERO,
}


class FromArgument(Enum):
    """Marks a width or precision given as '*' in the template, which
is supplied by the next argument."""

    FROM_ARGUMENT = '*'

    def __repr__(self):
        return 'FROM_ARGUMENT'


FROM_ARGUMENT = FromArgument.FROM_ARGUMENT


class LengthModifier(Enum):
    NONE = ''
    HH = 'hh'
    H = 'h'
    L = 'l'
    LL = 'll'
    J = 'j'
    Z = 'z'
    T = 't'
    BIG_L = 'L'

    @property
    def bits(self):
        return LENGTH_BITS[self]


# storage width of integer arguments for each length modifier, assuming
# an LP64 platform
LENGTH_BITS = {
    LengthModifier.NONE: 32,
    LengthModifier.HH: 8,
    LengthModifier.H: 16,
    LengthModifier.L: 64,
    LengthModifier.LL: 64,
    LengthModifier.J: 64,
    LengthModifier.Z: 64,
    LengthModifier.T: 64,
    LengthModifier.BIG_L: 64,
}


class ConversionKind(Enum):
    SIGNED = 'd'
    SIGNED_I = 'i'
    UNSIGNED = 'u'
    OCTAL = 'o'
    HEX = 'x'
    HEX_UPPER = 'X'
    BINARY = 'b'
    BINARY_UPPER = 'B'
    FIXED = 'f'
    FIXED_UPPER = 'F'
    EXP = 'e'
    EXP_UPPER = 'E'
    GENERAL = 'g'
    GENERAL_UPPER = 'G'
    HEX_FLOAT = 'a'
    HEX_FLOAT_UPPER = 'A'
    CHAR = 'c'
    STRING = 's'
    POINTER = 'p'
    COUNT = 'n'
    PERCENT = '%'

    @classmethod
    def from_char(cls, c):
        return cls(c)

    @property
    def is_integer(self):
        return self in _integer_kinds

    @property
    def is_signed(self):
        return self in (ConversionKind.SIGNED, ConversionKind.SIGNED_I)

    @property
    def is_float(self):
        return self in _float_kinds

    @property
    def is_upper(self):
        return self.value.isupper()

    @property
    def radix(self):
        return {
            ConversionKind.OCTAL: 8,
            ConversionKind.HEX: 16,
            ConversionKind.HEX_UPPER: 16,
            ConversionKind.BINARY: 2,
            ConversionKind.BINARY_UPPER: 2,
        }.get(self, 10)


_integer_kinds = frozenset([
    ConversionKind.SIGNED,
    ConversionKind.SIGNED_I,
    ConversionKind.UNSIGNED,
    ConversionKind.OCTAL,
    ConversionKind.HEX,
    ConversionKind.HEX_UPPER,
    ConversionKind.BINARY,
    ConversionKind.BINARY_UPPER,
])

_float_kinds = frozenset([
    ConversionKind.FIXED,
    ConversionKind.FIXED_UPPER,
    ConversionKind.EXP,
    ConversionKind.EXP_UPPER,
    ConversionKind.GENERAL,
    ConversionKind.GENERAL_UPPER,
    ConversionKind.HEX_FLOAT,
    ConversionKind.HEX_FLOAT_UPPER,
])


@dataclass(frozen=True)
class Literal:
    text: str
    loc: int = 0


@dataclass(frozen=True)
class ConversionSpecifier:
    flag_chars: ClassVar[str] = '-+ #0'

    kind: ConversionKind
    flags: Flags = Flags.NONE
    width: Union[int, FromArgument, None] = None
    precision: Union[int, FromArgument, None] = None
    length: LengthModifier = LengthModifier.NONE
    loc: Optional[int] = None

    def __str__(self):
        s = '%' + self.flags.to_chars()
        if self.width is not None:
            s += '*' if self.width is FROM_ARGUMENT else str(self.width)
        if self.precision is not None:
            s += '.'
            if self.precision is FROM_ARGUMENT:
                s += '*'
            else:
                s += str(self.precision)
        return s + self.length.value + self.kind.value
