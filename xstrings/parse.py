"""
Parsing numbers from text.

The accepted syntax is controlled by a NumberStyles flag set. The
grammar for a given set of styles is assembled from pyparsing rules the
first time it is needed.

The radix specifier styles enable prefixed literals: 0x1f, 0b101 and
0o17 (the prefix is required).

"""

import decimal
from enum import Flag
from functools import lru_cache
from pyparsing import Regex, Opt, ParseException, StringEnd, one_of
from .codeunits import decode
from .exceptions import InvalidNumber


class NumberStyles(Flag):
    NONE = 0
    ALLOW_LEADING_WHITE = 1
    ALLOW_TRAILING_WHITE = 2
    ALLOW_LEADING_SIGN = 4
    ALLOW_DECIMAL_POINT = 8
    ALLOW_THOUSANDS = 16
    ALLOW_EXPONENT = 32
    ALLOW_HEX_SPECIFIER = 64
    ALLOW_BINARY_SPECIFIER = 128
    ALLOW_OCTAL_SPECIFIER = 256

    INTEGER = ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE | ALLOW_LEADING_SIGN
    NUMBER = INTEGER | ALLOW_DECIMAL_POINT | ALLOW_THOUSANDS
    FLOAT = INTEGER | ALLOW_DECIMAL_POINT | ALLOW_EXPONENT
    HEX_NUMBER = (
        ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE | ALLOW_HEX_SPECIFIER)
    BINARY_NUMBER = (
        ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE | ALLOW_BINARY_SPECIFIER)
    OCTAL_NUMBER = (
        ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE | ALLOW_OCTAL_SPECIFIER)
    ANY = (
        NUMBER | ALLOW_EXPONENT | ALLOW_HEX_SPECIFIER |
        ALLOW_BINARY_SPECIFIER | ALLOW_OCTAL_SPECIFIER)


default_styles = {
    int: NumberStyles.INTEGER,
    float: NumberStyles.FLOAT | NumberStyles.ALLOW_THOUSANDS,
    decimal.Decimal: NumberStyles.FLOAT | NumberStyles.ALLOW_THOUSANDS,
}


class RadixLiteral(int):
    """An integer that was written with a radix prefix."""
    pass


@lru_cache(maxsize=None)
def number_rule(styles):
    radix_patterns = []
    if NumberStyles.ALLOW_HEX_SPECIFIER in styles:
        radix_patterns.append(r'0[xX][0-9a-fA-F]+')
    if NumberStyles.ALLOW_BINARY_SPECIFIER in styles:
        radix_patterns.append(r'0[bB][01]+')
    if NumberStyles.ALLOW_OCTAL_SPECIFIER in styles:
        radix_patterns.append(r'0[oO][0-7]+')

    if NumberStyles.ALLOW_THOUSANDS in styles:
        int_part = r'(?:\d{1,3}(?:,\d{3})+|\d+)'
    else:
        int_part = r'\d+'
    if NumberStyles.ALLOW_DECIMAL_POINT in styles:
        mantissa = rf'(?:{int_part}(?:\.\d*)?|\.\d+)'
    else:
        mantissa = int_part
    if NumberStyles.ALLOW_EXPONENT in styles:
        mantissa += r'(?:[eE][+-]?\d+)?'

    decimal_literal = Regex(mantissa)('decimal')
    decimal_literal.add_parse_action(lambda toks: toks[0].replace(',', ''))
    literal = decimal_literal
    if radix_patterns:
        radix_literal = Regex('|'.join(radix_patterns))('radix')
        radix_literal.add_parse_action(
            lambda toks: RadixLiteral(int(toks[0], 0)))
        literal = radix_literal | decimal_literal

    rule = literal
    if NumberStyles.ALLOW_LEADING_SIGN in styles:
        rule = Opt(one_of('+ -'))('sign') + rule
    if NumberStyles.ALLOW_LEADING_WHITE in styles:
        rule = Opt(Regex(r'\s+')).suppress() + rule
    if NumberStyles.ALLOW_TRAILING_WHITE in styles:
        rule = rule + Opt(Regex(r'\s+')).suppress()
    rule = rule + StringEnd()

    rule.leave_whitespace()
    rule.parse_with_tabs()
    return rule


def parse(text, type=int, styles=None):
    """Parse text of any width into a number of the given type (int,
float or decimal.Decimal). Raises InvalidNumber if the text is not a
valid number under the given styles."""

    if type not in default_styles:
        raise TypeError(f'Cannot parse numbers of type {type.__name__}')
    if styles is None:
        styles = default_styles[type]

    s = decode(text)
    try:
        toks = number_rule(styles).parse_string(s)
    except ParseException as e:
        raise InvalidNumber(
            msg=f'Invalid number {s!r} at offset {e.loc}', loc=e.loc) \
            from None

    negative = toks.get('sign') == '-'
    literal = toks[-1]
    if isinstance(literal, RadixLiteral):
        value = int(literal)
        if type is not int:
            value = type(value)
    elif type is int:
        value = decimal.Decimal(literal)
        if value != value.to_integral_value():
            raise InvalidNumber(msg=f'Not an integer: {s!r}')
        value = int(value)
    else:
        value = type(literal)

    return -value if negative else value


def try_parse(text, type=int, styles=None):
    try:
        return parse(text, type, styles)
    except InvalidNumber:
        return None


def auto_value(text):
    """Convert text to the most specific value it represents: an integer
(decimal or with a radix prefix), a float, a boolean (true/false), or
else the text itself."""

    value = try_parse(text, int, NumberStyles.INTEGER | NumberStyles.ANY)
    if value is not None:
        return value
    value = try_parse(text, float, NumberStyles.FLOAT)
    if value is not None:
        return value
    if text in ('true', 'false'):
        return text == 'true'
    return text
