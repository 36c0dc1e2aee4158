from pyparsing import Literal as PLiteral, Regex, Opt
from .exceptions import MalformedTemplate
from .specifier import (
    ConversionSpecifier, ConversionKind, LengthModifier, Flags, Literal,
    FROM_ARGUMENT,
)


# --- Grammar ---

literal_run = Regex(r'[^%]+')
percent_escape = PLiteral('%%')

flags = Regex('[' + ConversionSpecifier.flag_chars + ']+')
width = Regex(r'\d+|\*')
precision = Regex(r'\.(\d+|\*)?')
length = Regex(r'hh|h|ll|l|j|z|t|L')
kind = Regex('[' + ''.join(k.value for k in ConversionKind) + ']')

specifier = (
    PLiteral('%').suppress() +
    Opt(flags('flags')) +
    Opt(width('width')) +
    Opt(precision('precision')) +
    Opt(length('length')) +
    kind('kind')
)

token = literal_run | percent_escape | specifier


# --- Parse Actions ---

def parse_action(rule):
    def wrapper(func):
        rule.add_parse_action(func)
        return func
    return wrapper


@parse_action(literal_run)
def parse_literal_run(s, loc, toks):
    return Literal(toks[0], loc)


@parse_action(percent_escape)
def parse_percent_escape(s, loc, toks):
    return Literal('%', loc)


@parse_action(specifier)
def parse_specifier(s, loc, toks):
    spec_width = toks.get('width')
    if spec_width is not None:
        spec_width = parse_count(spec_width)

    spec_precision = toks.get('precision')
    if spec_precision is not None:
        # a lone '.' means a precision of zero
        spec_precision = parse_count(spec_precision[1:] or '0')

    return ConversionSpecifier(
        kind=ConversionKind.from_char(toks['kind']),
        flags=Flags.from_chars(toks.get('flags', '')),
        width=spec_width,
        precision=spec_precision,
        length=LengthModifier(toks.get('length', '')),
        loc=loc,
    )


def parse_count(text):
    if text == '*':
        return FROM_ARGUMENT
    return int(text)


# Whitespace is significant everywhere in a template (space is also a
# flag character) and so are tabs. leave_whitespace copies the
# sub-expressions, so this has to come after the parse actions are set.
token.leave_whitespace()
token.parse_with_tabs()


# --- Scanning ---

def scan(template):
    """Scan a format template (a str), yielding Literal and
ConversionSpecifier tokens in order. Consecutive literal text is merged
into a single Literal token. Raises MalformedTemplate when a '%' does
not start a valid conversion specifier.

    """

    pending = None
    expected_loc = 0
    for toks, start, end in token.scan_string(
            template, always_skip_whitespace=False):
        if start != expected_loc:
            raise malformed(template, expected_loc)
        expected_loc = end

        tok = toks[0]
        if isinstance(tok, Literal):
            if pending is None:
                pending = tok
            else:
                pending = Literal(pending.text + tok.text, pending.loc)
            continue

        if pending is not None:
            yield pending
            pending = None
        yield tok

    if expected_loc != len(template):
        raise malformed(template, expected_loc)

    if pending is not None:
        yield pending


def malformed(template, loc):
    # everything up to the next '%' or whitespace is included in the
    # message, to show what we tried to parse
    end = loc + 1
    while end < len(template) and template[end] not in '% \t\n':
        end += 1
    bad = template[loc:end]
    if bad == '%':
        msg = f'Incomplete conversion specifier at offset {loc}'
    else:
        msg = f'Invalid conversion specifier {bad!r} at offset {loc}'
    return MalformedTemplate(msg=msg, loc=loc)
