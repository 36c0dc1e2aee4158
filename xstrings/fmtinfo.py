from dataclasses import dataclass
from typing import Optional
from .args import Argument
from .codeunits import CharWidth
from .specifier import ConversionSpecifier, Flags


@dataclass(frozen=True)
class FormatInfo:
    """Everything a formatter needs to render one conversion specifier:
the specifier itself, its width, precision and flags after any '*'
values have been resolved, and the adapted argument.

 - width: minimum field width; 0 when not given
 - precision: None when not given (or given as a negative '*' value)
 - written: number of code units output before this specifier
 - char_width: code unit width of the template being formatted

    """

    spec: ConversionSpecifier
    argument: Optional[Argument]
    flags: Flags = Flags.NONE
    width: int = 0
    precision: Optional[int] = None
    char_width: CharWidth = CharWidth.WIDE32
    written: int = 0

    @classmethod
    def create(cls, spec, argument=None, *, width=None, precision=None,
               char_width=CharWidth.WIDE32, written=0):
        flags = spec.flags
        if width is None:
            width = 0
        elif width < 0:
            # a negative '*' width is taken as the '-' flag followed by
            # a positive width
            flags |= Flags.LEFT
            width = -width
        if precision is not None and precision < 0:
            precision = None
        return cls(spec, argument, flags, width, precision, char_width,
                   written)

    @property
    def kind(self):
        return self.spec.kind

    @property
    def length(self):
        return self.spec.length

    def has(self, flag):
        return flag in self.flags
