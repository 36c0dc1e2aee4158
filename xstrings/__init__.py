from .args import Address, CountSlot, Currency
from .codeunits import CharWidth, width_of, encode, decode
from .domain import to_string
from .driver import Formatter, format
from .exceptions import (
    ErrorCode, StringsError, MalformedTemplate, MissingArgument,
    KindMismatch, IndexOutOfRange, InvalidNumber,
)
from .parse import NumberStyles, parse, try_parse
from .strings import (
    SplitOptions, compare, compare_at, contains, starts_with, ends_with,
    to_lower, to_upper, split, concat, concat_as,
)


__version__ = '0.1.1'

__all__ = [
    'Address', 'CountSlot', 'Currency', 'CharWidth', 'width_of', 'encode',
    'decode', 'to_string', 'Formatter', 'format', 'ErrorCode',
    'StringsError', 'MalformedTemplate', 'MissingArgument', 'KindMismatch',
    'IndexOutOfRange', 'InvalidNumber', 'NumberStyles', 'parse',
    'try_parse', 'SplitOptions', 'compare', 'compare_at', 'contains',
    'starts_with', 'ends_with', 'to_lower', 'to_upper', 'split', 'concat',
    'concat_as',
]
