"""
String utilities over text of any code unit width.

All functions accept str, bytes/bytearray, or uint8/uint16/uint32 numpy
arrays (see codeunits). Comparison, searching and splitting operate on
code units. Functions that return text return it in the same container
as their first text argument. Passing texts of different widths to one
function raises TypeError.

"""

from enum import Enum
import numpy as np
from .codeunits import (
    width_of, to_units, from_units, as_unit_string, from_unit_string,
    code_unit, encode,
)
from .domain import to_string
from .exceptions import IndexOutOfRange


# tab, line feed, vertical tab, form feed, carriage return and space
DEFAULT_SEPARATORS = (9, 10, 11, 12, 13, 32)


class SplitOptions(Enum):
    NONE = 0
    REMOVE_EMPTY_ENTRIES = 1


def unit_strings(*texts):
    widths = {width_of(t) for t in texts}
    if len(widths) > 1:
        names = ', '.join(sorted(w.name for w in widths))
        raise TypeError(f'Cannot mix texts of different widths: {names}')
    return [as_unit_string(t) for t in texts]


def map_ascii_case(text, first, last):
    """Toggle the case of the code units in the range first..last (which
must be an ASCII letter range); everything else is left unchanged."""

    units = to_units(text)
    mask = (units >= ord(first)) & (units <= ord(last))
    return from_units(np.where(mask, units ^ 0x20, units), text)


def to_lower(text):
    return map_ascii_case(text, 'A', 'Z')


def to_upper(text):
    return map_ascii_case(text, 'a', 'z')


def compare(a, b, ignore_case=False):
    """Compare two texts code unit by code unit. Return -1, 0 or 1 when a
is respectively less than, equal to, or greater than b."""

    if ignore_case:
        a, b = to_lower(a), to_lower(b)
    sa, sb = unit_strings(a, b)
    return (sa > sb) - (sa < sb)


def compare_at(a, index_a, b, index_b, length, ignore_case=False):
    """Compare the substrings of a and b that start at index_a and
index_b and are at most `length` code units long. Return -1, 0 or 1.

An index equal to the length of its text selects an empty substring. A
negative index or length, or an index past the end of the text, raises
IndexOutOfRange.

    """

    if ignore_case:
        a, b = to_lower(a), to_lower(b)
    sa, sb = unit_strings(a, b)
    check_range(sa, index_a, length)
    check_range(sb, index_b, length)
    sa = sa[index_a:index_a + length]
    sb = sb[index_b:index_b + length]
    return (sa > sb) - (sa < sb)


def check_range(s, index, length):
    if length < 0:
        raise IndexOutOfRange(msg=f'Negative length: {length}')
    if index < 0 or index > len(s):
        raise IndexOutOfRange(
            msg=f'Index {index} out of range for text of length {len(s)}')


def contains(text, value):
    st, sv = unit_strings(text, value)
    return sv in st


def starts_with(text, prefix, ignore_case=False):
    if ignore_case:
        text, prefix = to_lower(text), to_lower(prefix)
    st, sp = unit_strings(text, prefix)
    return st.startswith(sp)


def ends_with(text, suffix, ignore_case=False):
    if ignore_case:
        text, suffix = to_lower(text), to_lower(suffix)
    st, ss = unit_strings(text, suffix)
    return st.endswith(ss)


def split(text, separators=(), count=None, options=SplitOptions.NONE):
    """Split text at any of the given separator code units.

Separators can be given as one-character strings or as integer code
unit values; with no separators the text is split at whitespace (see
DEFAULT_SEPARATORS). At most `count` items are returned (no limit when
None); the last item then holds the rest of the text, unsplit. A count
of 0 returns an empty list and a count of 1 returns the text as the
only item.

With SplitOptions.NONE, every separator ends an item, so leading,
trailing and consecutive separators produce empty items. With
REMOVE_EMPTY_ENTRIES empty items are left out.

    """

    if count is not None and count < 0:
        raise IndexOutOfRange(msg=f'Negative split count: {count}')
    if count == 0:
        return []
    if count == 1:
        return [text]

    width = width_of(text)
    units = {code_unit(sep, width) for sep in separators}
    sep_chars = frozenset(map(chr, units or DEFAULT_SEPARATORS))
    remove_empty = (options == SplitOptions.REMOVE_EMPTY_ENTRIES)
    limit = None if count is None else count - 1

    s = as_unit_string(text)
    items = []
    start = 0
    for i, c in enumerate(s):
        if limit is not None and len(items) == limit:
            break
        if c in sep_chars:
            item = s[start:i]
            if item or not remove_empty:
                items.append(item)
            start = i + 1

    rest = s[start:]
    if rest or not remove_empty:
        items.append(rest)

    return [from_unit_string(item, text) for item in items]


def concat(*values):
    """Concatenate the default textual rendering (see to_string) of each
value into a str."""

    return ''.join(to_string(value) for value in values)


def concat_as(width, *values):
    """Like concat, but return text of the given width."""

    return encode(concat(*values), width)
