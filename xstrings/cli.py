import argparse
import logging
import logging.config
import sys
from .driver import format as format_text
from .exceptions import StringsError
from .parse import auto_value
from .strings import compare, split, to_lower, to_upper, SplitOptions
from .utils import eprint, display_with_context


logger = logging.getLogger(__name__)


def config_logging(log_level):
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(levelname)s %(name)s: %(message)s',
            }
        },
        'handlers': {
            'default': {
                'level': log_level,
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
            }
        },
        'loggers': {
            '': {
                'handlers': ['default'],
                'level': log_level,
                'propagate': True,
            },
        }
    })


def cmd_format(args):
    values = [auto_value(v) for v in args.args]
    logger.info('Formatting %r with %s argument(s)', args.template,
                len(values))
    print(format_text(args.template, *values))


def cmd_split(args):
    options = SplitOptions.NONE
    if args.remove_empty:
        options = SplitOptions.REMOVE_EMPTY_ENTRIES
    for item in split(args.text, args.separator, args.count, options):
        print(item)


def cmd_compare(args):
    print(compare(args.a, args.b, ignore_case=args.ignore_case))


def cmd_lower(args):
    print(to_lower(args.text))


def cmd_upper(args):
    print(to_upper(args.text))


def separator(value):
    if len(value) != 1:
        raise argparse.ArgumentTypeError(
            f'separator must be a single character: {value!r}')
    return value


def get_parser():
    parser = argparse.ArgumentParser(
        prog='xstrings',
        description='String utilities and printf-style formatting.',
    )

    parser.add_argument(
        '--verbose', '-v', action='count', default=0,
        help='Set verbosity level. Can be used multiple times for '
        'increasing verbosity.')

    subparsers = parser.add_subparsers(dest='command', required=True)

    format_parser = subparsers.add_parser(
        'format', help='Format arguments with a printf-style template.')
    format_parser.add_argument('template')
    format_parser.add_argument(
        'args', nargs='*',
        help='Arguments. Integers (including 0x/0b/0o prefixed ones), '
        'floats and true/false are converted; anything else is passed as '
        'text.')
    format_parser.set_defaults(func=cmd_format)

    split_parser = subparsers.add_parser(
        'split', help='Split text and print one item per line.')
    split_parser.add_argument('text')
    split_parser.add_argument(
        '--separator', '-s', action='append', default=[], type=separator,
        help='Separator character. Can be used multiple times. Defaults '
        'to whitespace.')
    split_parser.add_argument(
        '--count', '-n', type=int, default=None,
        help='Maximum number of items.')
    split_parser.add_argument(
        '--remove-empty', action='store_true',
        help='Leave out empty items.')
    split_parser.set_defaults(func=cmd_split)

    compare_parser = subparsers.add_parser(
        'compare', help='Compare two strings; prints -1, 0 or 1.')
    compare_parser.add_argument('a')
    compare_parser.add_argument('b')
    compare_parser.add_argument(
        '--ignore-case', '-i', action='store_true',
        help='Ignore the case of ASCII letters.')
    compare_parser.set_defaults(func=cmd_compare)

    lower_parser = subparsers.add_parser(
        'lower', help='Convert ASCII letters to lower case.')
    lower_parser.add_argument('text')
    lower_parser.set_defaults(func=cmd_lower)

    upper_parser = subparsers.add_parser(
        'upper', help='Convert ASCII letters to upper case.')
    upper_parser.add_argument('text')
    upper_parser.set_defaults(func=cmd_upper)

    return parser


def main(argv=None):
    parser = get_parser()
    args = parser.parse_args(argv)

    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    config_logging(log_level)

    try:
        args.func(args)
    except StringsError as e:
        template = getattr(args, 'template', None)
        if template is not None and e.loc is not None:
            display_with_context(template, e.loc, msg=str(e))
        else:
            eprint(f'error: {e}')
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
