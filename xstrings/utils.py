import sys


def eprint(*args, **kwargs):
    print(*args, **kwargs, file=sys.stderr)


def display_with_context(text, loc, msg='Error'):
    """Print a (single line) text to stderr with a marker under the code
unit at offset `loc` and the message under it."""

    assert loc is not None

    # only the line holding loc is shown
    line_start = text.rfind('\n', 0, loc) + 1
    line_end = text.find('\n', loc)
    if line_end < 0:
        line_end = len(text)
    col = loc - line_start

    eprint(' >> ', text[line_start:line_end])
    eprint(' :: ' + ' ' * (col + 1) + '^')
    eprint(' :: ' + ' ' * (col + 1) + msg)
