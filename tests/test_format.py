import ctypes
import datetime
import enum
from decimal import Decimal
import numpy as np
from pytest import mark, raises
from xstrings import (
    format, Formatter, Address, CountSlot, Currency, CharWidth, encode,
    decode, ErrorCode, MalformedTemplate, MissingArgument, KindMismatch,
)
from xstrings.driver import FormatRun, DriverState


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Level(enum.IntEnum):
    LOW = 1
    HIGH = 2


def case_id(case):
    if isinstance(case, tuple):
        return repr(case[0])


integer_cases = [
    ('%d', 42, '42'),
    ('%05d', 42, '00042'),
    ('%-5d|', 42, '42   |'),
    ('%+d', 42, '+42'),
    ('% d', 42, ' 42'),
    ('%+d', -42, '-42'),
    ('%i', -7, '-7'),
    ('%+05d', 42, '+0042'),
    ('%-+5d|', 42, '+42  |'),
    ('%x', 255, 'ff'),
    ('%X', 255, 'FF'),
    ('%#x', 255, '0xff'),
    ('%#X', 255, '0XFF'),
    ('%#x', 0, '0'),
    ('%#010x', 255, '0x000000ff'),
    ('%o', 8, '10'),
    ('%#o', 8, '010'),
    ('%#o', 0, '0'),
    ('%#.0o', 0, '0'),
    ('%.0d', 0, ''),
    ('%5.0d|', 0, '     |'),
    ('%.3d', 7, '007'),
    ('%08.3d', 7, '     007'),
    ('%b', 5, '101'),
    ('%#b', 5, '0b101'),
    ('%#B', 5, '0B101'),
    ('%u', 42, '42'),
    ('%+u', 42, '42'),
]


@mark.parametrize('case', integer_cases, ids=case_id)
def test_integer(case):
    template, value, expected = case
    assert format(template, value) == expected


wraparound_cases = [
    ('%u', -1, '4294967295'),
    ('%x', -1, 'ffffffff'),
    ('%d', 2**32 + 5, '5'),
    ('%hhd', 300, '44'),
    ('%hhu', -1, '255'),
    ('%hd', 65535, '-1'),
    ('%lld', 2**40, '1099511627776'),
    ('%llx', -1, 'ffffffffffffffff'),
    ('%zu', 2**64 + 3, '3'),
    ('%u', np.int8(-1), '4294967295'),
    ('%d', np.uint8(200), '200'),
    ('%lld', np.uint32(4294967295), '4294967295'),
    ('%d', ctypes.c_short(-3), '-3'),
]


@mark.parametrize('case', wraparound_cases, ids=case_id)
def test_integer_width_conversion(case):
    template, value, expected = case
    assert format(template, value) == expected


boolean_cases = [
    ('%d', True, 'true'),
    ('%u', False, 'false'),
    ('%7d|', True, '   true|'),
    ('%-6d|', True, 'true  |'),
    ('%06d', True, '  true'),
    ('%.1d', False, 'f'),
    ('%x', True, '1'),
    ('%o', False, '0'),
]


@mark.parametrize('case', boolean_cases, ids=case_id)
def test_boolean(case):
    template, value, expected = case
    assert format(template, value) == expected


float_cases = [
    ('%.2f', 3.14159, '3.14'),
    ('%f', 1.5, '1.500000'),
    ('%f', 3, '3.000000'),
    ('%f', -0.0, '-0.000000'),
    ('%+.1f', 2.25, '+2.2'),
    ('%.0f', 2.5, '2'),
    ('%#.0f', 3.0, '3.'),
    ('%010.3f', -3.14159, '-00003.142'),
    ('%-8.2f|', 1.0, '1.00    |'),
    ('% .2f', 1.0, ' 1.00'),
    ('%e', 12345.678, '1.234568e+04'),
    ('%E', 0.000123, '1.230000E-04'),
    ('%.0e', 12345.0, '1e+04'),
    ('%#.0e', 12345.0, '1.e+04'),
    ('%g', 100000.0, '100000'),
    ('%g', 1000000.0, '1e+06'),
    ('%g', 0.0001, '0.0001'),
    ('%g', 0.00001, '1e-05'),
    ('%G', 1e-10, '1E-10'),
    ('%.3g', 3.14159, '3.14'),
    ('%#g', 1.0, '1.00000'),
    ('%g', 2.5, '2.5'),
    ('%f', float('inf'), 'inf'),
    ('%F', float('inf'), 'INF'),
    ('%05f', float('-inf'), ' -inf'),
    ('%+f', float('inf'), '+inf'),
    ('%f', float('nan'), 'nan'),
    ('%Lf', 0.5, '0.500000'),
    ('%lf', np.float32(0.5), '0.500000'),
]


@mark.parametrize('case', float_cases, ids=case_id)
def test_float(case):
    template, value, expected = case
    assert format(template, value) == expected


fixed_point_cases = [
    ('%.2f', Decimal('2.675'), '2.68'),
    ('%f', Decimal('-1.5'), '-1.500000'),
    ('%08.2f', Decimal('3.14159'), '00003.14'),
    ('%e', Decimal('12345'), '1.234500e+04'),
    ('%#.0f', Decimal('7'), '7.'),
    ('%f', Decimal('Infinity'), 'inf'),
    ('%g', Decimal('1.500'), '1.5'),
    ('%g', Decimal('0.00001'), '1e-05'),
    ('%#g', Decimal('1'), '1.00000'),
    ('%G', Decimal('123456789'), '1.23457E+08'),
    ('%g', Decimal('100000'), '100000'),
    ('%g', Decimal('9.9999995'), '10'),
    ('%.3g', Decimal('0.0001234'), '0.000123'),
    ('%.0g', Decimal('25'), '2e+01'),
    ('%g', Decimal('0'), '0'),
    ('%+g', Decimal('-2.50'), '-2.5'),
]


@mark.parametrize('case', fixed_point_cases, ids=case_id)
def test_fixed_point(case):
    template, value, expected = case
    assert format(template, value) == expected


hex_float_cases = [
    ('%a', 1.0, '0x1p+0'),
    ('%a', 3.0, '0x1.8p+1'),
    ('%A', 3.0, '0X1.8P+1'),
    ('%a', 0.0, '0x0p+0'),
    ('%a', -0.5, '-0x1p-1'),
    ('%.2a', 1.0, '0x1.00p+0'),
    ('%.1a', 1.5, '0x1.8p+0'),
    ('%.0a', 1.5, '0x2p+0'),
    ('%#a', 1.0, '0x1.p+0'),
    ('%010a', 1.0, '0x00001p+0'),
]


@mark.parametrize('case', hex_float_cases, ids=case_id)
def test_hex_float(case):
    template, value, expected = case
    assert format(template, value) == expected


text_cases = [
    ('%s', 'hi', 'hi'),
    ('%.1s', 'hi', 'h'),
    ('%.0s', 'abc', ''),
    ('%5s', 'hi', '   hi'),
    ('%-5s|', 'hi', 'hi   |'),
    ('%05s', 'ab', '   ab'),
    ('%ls', 'wide', 'wide'),
    ('%s', b'narrow', 'narrow'),
    ('%s', encode('sixteen', CharWidth.WIDE16), 'sixteen'),
    ('%c', 'A', 'A'),
    ('%c', 65, 'A'),
    ('%c', 321, 'A'),
    ('%lc', 0x263a, '☺'),
    ('%3c', 'x', '  x'),
    ('%-3c|', 'x', 'x  |'),
    ('%c', ctypes.c_char(b'z'), 'z'),
]


@mark.parametrize('case', text_cases, ids=case_id)
def test_text(case):
    template, value, expected = case
    assert format(template, value) == expected


domain_cases = [
    ('%s', Color.GREEN, 'GREEN'),
    ('%s', Level.HIGH, 'HIGH'),
    ('%d', Level.HIGH, '2'),
    ('%s', datetime.datetime(2024, 1, 2, 3, 4, 5), '2024-01-02 03:04:05'),
    ('%s', datetime.date(2024, 1, 2), '2024-01-02'),
    ('%.7s', datetime.date(2024, 1, 2), '2024-01'),
    ('%s', datetime.timedelta(days=1, hours=2, minutes=3, seconds=4),
     '1.02:03:04'),
    ('%s', Decimal('1.50'), '1.50'),
    ('%s', Currency(Decimal('1234.5')), '$1,234.50'),
    ('%12s', Currency(-3, symbol='EUR '), '   -EUR 3.00'),
]


@mark.parametrize('case', domain_cases, ids=case_id)
def test_domain_values(case):
    template, value, expected = case
    assert format(template, value) == expected


def test_object_uses_str():
    class Thing:
        def __str__(self):
            return 'thing'

    assert format('<%s>', Thing()) == '<thing>'


def test_pointer():
    assert format('%p', Address(0x1000)) == '0x1000'
    assert format('%p', None) == '(nil)'
    assert format('%10p|', Address(255)) == '      0xff|'
    assert format('%-6p|', Address(0)) == '(nil) |'
    assert format('%p', 4096) == '0x1000'
    assert format('%p', ctypes.c_void_p(16)) == '0x10'


def test_percent():
    assert format('%%') == '%'
    assert format('100%%') == '100%'
    assert format('%5%') == '    %'
    assert format('%-3%|') == '%  |'
    assert format('%d%%', 50) == '50%'


def test_star_width_and_precision():
    assert format('%*d', 5, 42) == '   42'
    assert format('%-*d|', 5, 42) == '42   |'
    assert format('%*d|', -5, 42) == '42   |'
    assert format('%.*f', 2, 3.14159) == '3.14'
    assert format('%.*f', -1, 1.5) == '1.500000'
    assert format('%*.*s|', 4, 1, 'xyz') == '   x|'


def test_count():
    slot = CountSlot()
    assert format('abc%n def', slot) == 'abc def'
    assert slot.value == 3

    slot = CountSlot()
    assert format('%5d%n', 1, slot) == '    1'
    assert slot.value == 5


def test_count_in_code_units():
    slot = CountSlot()
    format(b'\xc3\xa9%n', slot)
    assert slot.value == 2

    slot = CountSlot()
    format(encode('\U0001f600%n', CharWidth.WIDE16), slot)
    assert slot.value == 2


def test_literal_text():
    assert format('') == ''
    assert format('no specifiers') == 'no specifiers'
    assert format('a\tb %d', 1) == 'a\tb 1'
    assert format('%s=%d;', 'x', 1) == 'x=1;'


def test_narrow_template():
    result = format(b'%d-%s', 42, 'ok')
    assert result == b'42-ok'
    assert isinstance(result, bytes)

    result = format(bytearray(b'%x'), 255)
    assert result == bytearray(b'ff')
    assert isinstance(result, bytearray)


def test_narrow_width_counts_code_units():
    assert format(b'%5s|', 'é') == b'   \xc3\xa9|'
    assert format(b'%.1s|', 'éa') == b'|'


def test_wide_templates():
    for width in (CharWidth.WIDE16, CharWidth.WIDE32):
        result = format(encode('%05d %s', width), 42, 'x☺')
        assert result.dtype == width.dtype
        assert decode(result) == '00042 x☺'


def test_extra_arguments_ignored():
    assert format('%d', 1, 2, 3) == '1'
    assert format('plain', 'unused') == 'plain'


def test_formatter_reuse():
    formatter = Formatter('%d-%d')
    assert formatter.format(1, 2) == '1-2'
    assert formatter.format(3, 4) == '3-4'


@mark.parametrize('template, loc', [
    ('abc %', 4),
    ('%', 0),
    ('%q', 0),
    ('%5', 0),
    ('%d%', 2),
    ('x %-', 2),
])
def test_malformed_template(template, loc):
    with raises(MalformedTemplate) as exc_info:
        format(template, 1, 2)
    assert exc_info.value.code == ErrorCode.MALFORMED_TEMPLATE
    assert exc_info.value.loc == loc


@mark.parametrize('template', ['%hf', '%lls', '%hp', '%h%'])
def test_invalid_length_modifier(template):
    with raises(MalformedTemplate):
        format(template, 1)


@mark.parametrize('template, args', [
    ('%d %d', (1,)),
    ('%d', ()),
    ('%*d', (5,)),
    ('%.*f', ()),
    ('%n', ()),
])
def test_missing_argument(template, args):
    with raises(MissingArgument) as exc_info:
        format(template, *args)
    assert exc_info.value.code == ErrorCode.MISSING_ARGUMENT


@mark.parametrize('template, value', [
    ('%s', True),
    ('%s', 42),
    ('%s', 1.5),
    ('%d', 'x'),
    ('%d', 1.5),
    ('%f', 'x'),
    ('%c', 'ab'),
    ('%c', 1.5),
    ('%n', 1),
    ('%p', 1.5),
    ('%x', Decimal('1')),
])
def test_kind_mismatch(template, value):
    with raises(KindMismatch) as exc_info:
        format(template, value)
    assert exc_info.value.code == ErrorCode.KIND_MISMATCH


@mark.parametrize('template, value', [
    (b'%lc', 0xd800),
    ('%lc', 0xdfff),
    (b'%s', '\ud800'),
    (b'%5s', 'a\udbff'),
    (b'%c', '\ud800'),
])
def test_surrogates_rejected(template, value):
    with raises(KindMismatch) as exc_info:
        format(template, value)
    assert exc_info.value.loc == 0


def test_surrogates_in_wide_text():
    assert format('%s', '\ud800') == '\ud800'
    result = format(encode('%s', CharWidth.WIDE16), '\ud800')
    assert list(result) == [0xd800]

    # undecodable bytes survive a narrow round trip
    assert format(b'%s', b'\xff') == b'\xff'


def test_kind_mismatch_is_type_error():
    with raises(TypeError):
        format('%d', 'x')


def test_star_needs_integer():
    with raises(KindMismatch):
        format('%*d', 'x', 1)
    with raises(KindMismatch):
        format('%.*f', 1.5, 1.0)


def test_error_discards_output():
    run = FormatRun(Formatter('abc%d%s'), (1, True))
    with raises(KindMismatch):
        run.execute()
    assert run.state == DriverState.ERROR
    assert run.output == []


def test_run_state_done():
    run = FormatRun(Formatter('%d'), (1,))
    assert run.execute() == '1'
    assert run.state == DriverState.DONE
