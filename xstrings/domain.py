"""
Textual rendering of values that carry their own notation: enums,
dates and times, durations, fixed-point decimals and currency amounts.
The %s conversion and to_string() both render such values through the
functions registered here.

"""

import datetime
import enum
from types import MappingProxyType
from .args import adapt, ArgKind, DomainKind
from .exceptions import InternalError


_renderers = {}

# read-only view of the registered renderers; filled in when this module
# is imported and never modified after that.
RENDERERS = MappingProxyType(_renderers)


def renderer_for(domain):
    def wrapper(func):
        if domain in _renderers:
            raise InternalError(f'Duplicate renderer for {domain}')
        _renderers[domain] = func
        return func
    return wrapper


def render(value, domain):
    renderer = RENDERERS.get(domain)
    if renderer is None:
        raise InternalError(f'No renderer for {domain}')
    return renderer(value)


@renderer_for(DomainKind.ENUM)
def render_enum(value):
    if value.name is not None:
        return value.name

    # unnamed combination of flags
    if isinstance(value, enum.Flag):
        names = [
            member.name
            for member in type(value)
            if member.value and member.value & value.value == member.value
        ]
        if names:
            return '|'.join(names)
    return str(value.value)


@renderer_for(DomainKind.DATE_TIME)
def render_date_time(value):
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=' ')
    return value.isoformat()


@renderer_for(DomainKind.DURATION)
def render_duration(value):
    """Render a timedelta as [-][d.]hh:mm:ss[.fffffff]."""

    total = value // datetime.timedelta(microseconds=1)
    sign = '-' if total < 0 else ''
    seconds, microseconds = divmod(abs(total), 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    result = f'{hours:02}:{minutes:02}:{seconds:02}'
    if days:
        result = f'{days}.{result}'
    if microseconds:
        # seven fraction digits (ticks of 100ns)
        result += f'.{microseconds * 10:07}'
    return sign + result


@renderer_for(DomainKind.FIXED_POINT)
def render_fixed_point(value):
    return format(value, 'f')


@renderer_for(DomainKind.CURRENCY)
def render_currency(value):
    amount = format(abs(value.amount), f',.{value.decimals}f')
    sign = '-' if value.amount < 0 else ''
    return f'{sign}{value.symbol}{amount}'


@renderer_for(DomainKind.OBJECT)
def render_object(value):
    return str(value)


def address_text(address):
    if address == 0:
        return '(nil)'
    return f'0x{address:x}'


def to_string(value):
    """Return the default textual rendering of a value: true/false for
booleans, the shortest round-trip form for floats, the decoded text for
text of any width and the domain rendering for everything else.

    """

    arg = adapt(value)
    if arg.kind == ArgKind.BOOLEAN:
        return 'true' if arg.value else 'false'
    if arg.domain is not None:
        return render(arg.value, arg.domain)
    if arg.kind == ArgKind.INTEGER:
        return str(int(arg.value))
    if arg.kind == ArgKind.FLOAT:
        return repr(float(arg.value))
    if arg.kind in (ArgKind.TEXT, ArgKind.CHARACTER):
        return arg.value
    if arg.kind == ArgKind.ADDRESS:
        return address_text(arg.value)
    return render_object(arg.value)
