import logging
from enum import Enum
from .args import adapt, as_star_value
from .codeunits import width_of, decode, encode_like, unit_count
from .exceptions import InternalError, MissingArgument
from .fmtinfo import FormatInfo
from .formatters import formatter_for
from .scanner import scan
from .specifier import ConversionKind, Literal, FROM_ARGUMENT


logger = logging.getLogger(__name__)


class DriverState(Enum):
    SCANNING_LITERAL = 1
    AWAITING_ARGUMENT = 2
    FORMATTING = 3
    DONE = 4
    ERROR = 5


class Formatter:
    """Formats values according to a printf-style template.

The template can be text of any width; the result of format() has the
same width and container type as the template. A Formatter holds no
state between calls, so one instance can be shared.

    """

    def __init__(self, template):
        self.template = template
        self.char_width = width_of(template)
        self.text = decode(template)

    def __repr__(self):
        return f'<Formatter {self.text!r}>'

    def format(self, *values):
        run = FormatRun(self, values)
        return encode_like(run.execute(), self.template)


class FormatRun:
    """A single call of Formatter.format. Owns the scanner cursor, the
argument cursor and the output buffer for that call.

    """

    def __init__(self, formatter, values):
        self.formatter = formatter
        self.values = values
        self.next_idx = 0
        self.output = []
        self.written = 0
        self.state = DriverState.SCANNING_LITERAL

    def execute(self):
        try:
            for tok in scan(self.formatter.text):
                if isinstance(tok, Literal):
                    self.emit(tok.text)
                else:
                    self.process_specifier(tok)
        except Exception:
            self.state = DriverState.ERROR
            self.output = []
            raise

        self.state = DriverState.DONE
        unused = len(self.values) - self.next_idx
        if unused > 0:
            logger.debug('Ignoring %s unused argument(s).', unused)
        return ''.join(self.output)

    def process_specifier(self, spec):
        if self.state != DriverState.SCANNING_LITERAL:
            raise InternalError(f'Unexpected driver state: {self.state}')
        self.state = DriverState.AWAITING_ARGUMENT

        formatter_func = formatter_for(spec)

        width = spec.width
        if width is FROM_ARGUMENT:
            width = as_star_value(self.next_value(spec), spec, 'width')

        precision = spec.precision
        if precision is FROM_ARGUMENT:
            precision = as_star_value(
                self.next_value(spec), spec, 'precision')

        argument = None
        if spec.kind != ConversionKind.PERCENT:
            argument = adapt(self.next_value(spec))

        info = FormatInfo.create(
            spec, argument,
            width=width,
            precision=precision,
            char_width=self.formatter.char_width,
            written=self.written,
        )

        self.state = DriverState.FORMATTING
        logger.debug('Formatting %s at offset %s with %s', spec, spec.loc,
                     'no argument' if argument is None
                     else argument.describe())
        self.emit(formatter_func(info))
        self.state = DriverState.SCANNING_LITERAL

    def next_value(self, spec):
        if self.next_idx >= len(self.values):
            raise MissingArgument(
                msg=(f'Not enough arguments: {spec} at offset {spec.loc} '
                     f'needs argument #{self.next_idx + 1}'),
                loc=spec.loc)
        value = self.values[self.next_idx]
        self.next_idx += 1
        return value

    def emit(self, text):
        if text:
            self.output.append(text)
            self.written += unit_count(text, self.formatter.char_width)


def format(template, *values):
    """Format the values according to the printf-style template. See
Formatter."""

    return Formatter(template).format(*values)
