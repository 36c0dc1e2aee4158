"""
Text values of different code unit widths.

Text comes in one of three widths. Narrow text is a sequence of 8-bit
code units (UTF-8), held in a bytes, bytearray or uint8 numpy array.
16-bit text is held in a uint16 numpy array (UTF-16). 32-bit text is
either a regular str or a uint32 numpy array (UTF-32).

Operations in this package work on one of two views of a text value:

 - the "unit string": a str with exactly one character per code unit;
   comparing, searching and splitting this view operates on code units
   regardless of the width.
 - the decoded str: the actual characters the code units encode; used
   by the format engine.

Either view can be converted back into the original container.

"""

from enum import Enum
import numpy as np


class CharWidth(Enum):
    NARROW = 8
    WIDE16 = 16
    WIDE32 = 32

    @property
    def dtype(self):
        return {
            CharWidth.NARROW: np.uint8,
            CharWidth.WIDE16: np.uint16,
            CharWidth.WIDE32: np.uint32,
        }[self]

    @property
    def max_unit(self):
        return int(np.iinfo(self.dtype).max)


_array_widths = {
    np.dtype(np.uint8): CharWidth.NARROW,
    np.dtype(np.uint16): CharWidth.WIDE16,
    np.dtype(np.uint32): CharWidth.WIDE32,
}


def is_text(value):
    if isinstance(value, (str, bytes, bytearray)):
        return True
    return (
        isinstance(value, np.ndarray) and
        value.ndim == 1 and
        value.dtype in _array_widths
    )


def width_of(text):
    if isinstance(text, str):
        return CharWidth.WIDE32
    if isinstance(text, (bytes, bytearray)):
        return CharWidth.NARROW
    if is_text(text):
        return _array_widths[text.dtype]
    raise TypeError(f'Not a text value: {type(text).__name__}')


def to_units(text):
    """Return a fresh numpy array holding the code units of the given
text."""

    width = width_of(text)
    if isinstance(text, str):
        return np.fromiter(map(ord, text), dtype=np.uint32,
                           count=len(text))
    if isinstance(text, (bytes, bytearray)):
        return np.frombuffer(bytes(text), dtype=np.uint8).copy()
    return np.array(text, dtype=width.dtype)


def from_units(units, like):
    """Convert an array of code units into the same kind of container
as `like`."""

    if isinstance(like, str):
        return ''.join(map(chr, units.tolist()))
    if isinstance(like, bytes):
        return units.astype(np.uint8).tobytes()
    if isinstance(like, bytearray):
        return bytearray(units.astype(np.uint8).tobytes())
    return units.astype(like.dtype)


def as_unit_string(text):
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode('latin-1')
    units = to_units(text).tolist()
    try:
        return ''.join(map(chr, units))
    except ValueError:
        raise ValueError('Code unit out of the valid range') from None


def from_unit_string(s, like):
    if isinstance(like, str):
        return s
    if isinstance(like, bytes):
        return s.encode('latin-1')
    if isinstance(like, bytearray):
        return bytearray(s.encode('latin-1'))
    return np.fromiter(map(ord, s), dtype=like.dtype, count=len(s))


def decode(text):
    """Return the characters encoded by the given text as a str."""

    if isinstance(text, str):
        return text
    width = width_of(text)
    if width == CharWidth.NARROW:
        return bytes(to_units(text)).decode('utf-8', 'surrogateescape')
    if width == CharWidth.WIDE16:
        data = to_units(text).astype('<u2').tobytes()
        return data.decode('utf-16-le', 'surrogatepass')
    return as_unit_string(text)


def encode(s, width):
    """Encode a str into the code units of the given width. Narrow text
is returned as bytes, wide text as a numpy array.

    """

    assert isinstance(s, str)
    if width == CharWidth.NARROW:
        return s.encode('utf-8', 'surrogateescape')
    if width == CharWidth.WIDE16:
        data = s.encode('utf-16-le', 'surrogatepass')
        return np.frombuffer(data, dtype='<u2').astype(np.uint16)
    return np.fromiter(map(ord, s), dtype=np.uint32, count=len(s))


def encode_like(s, like):
    """Encode a str into the same container and width as `like`."""

    if isinstance(like, str):
        return s
    units = encode(s, width_of(like))
    if isinstance(like, (bytes, bytearray)):
        return type(like)(units)
    if isinstance(units, bytes):
        units = np.frombuffer(units, dtype=np.uint8)
    return units.astype(like.dtype)


def unit_count(s, width):
    """Number of code units needed to store the str `s` in the given
width."""

    if width == CharWidth.WIDE32:
        return len(s)
    return len(encode(s, width))


def code_unit(value, width):
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        unit = int(value)
    elif isinstance(value, (bytes, bytearray)) and len(value) == 1:
        unit = value[0]
    elif isinstance(value, str) and len(value) == 1:
        units = encode(value, width)
        if len(units) != 1:
            raise ValueError(
                f'{value!r} takes more than one {width.value}-bit code unit')
        unit = int(units[0])
    else:
        raise ValueError(f'Not a single code unit: {value!r}')

    if not 0 <= unit <= width.max_unit:
        raise ValueError(
            f'Code unit {unit:#x} does not fit in {width.value} bits')
    return unit
