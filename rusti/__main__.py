"""Run the rusti REPL with `python -m rusti`."""

import argparse
import os
import sys

import rusti.logging
import rusti.repl
from rusti.backend import RustcBackend
from rusti.error_reporting import create_unterminated_block_message
from rusti.linesource import ReadlineLineSource, StreamLineSource
from rusti.multiline import UnterminatedMultilineError
from rusti.session import Session


arg_parser = argparse.ArgumentParser(
    description='Evaluate Rust interactively, one line at a time.'
)
arg_parser.add_argument(
    '--binary',
    default='rusti',
    help='name of the program built for each evaluation',
)
arg_parser.add_argument(
    '-L',
    '--library-path',
    action='append',
    default=[],
    dest='library_paths',
    help='add a directory to search for crates (can be repeated)',
)
arg_parser.add_argument(
    '--rustc',
    default=os.environ.get('RUSTC', 'rustc'),
    help='the compiler to run (default: $RUSTC or rustc)',
)
arg_parser.add_argument(
    '--prompt',
    default='rusti> ',
    help='text to show before each line',
)
arg_parser.add_argument(
    '--no-init',
    action='store_true',
    default=False,
    help='do not run the {} startup file'.format(rusti.repl.INIT_FILE_NAME),
)
arg_parser.add_argument(
    '--verbose',
    action='store_true',
    default=False,
    help='print internal logs',
)
arg_parser.add_argument(
    '--log-file',
    default=None,
    help='write internal logs as JSON to this file',
)


def main(argv=None) -> int:
    args = arg_parser.parse_args(argv)
    rusti.logging.configure(verbose=args.verbose, log_file=args.log_file)
    if sys.stdin.isatty():
        line_source = ReadlineLineSource()
    else:
        line_source = StreamLineSource(sys.stdin)
    session = Session(
        prompt=args.prompt,
        binary_path=args.binary,
        lib_search_paths=tuple(args.library_paths),
    )
    try:
        rusti.repl.repl(
            line_source,
            session,
            RustcBackend(),
            rustc=args.rustc,
            init_file=None if args.no_init else rusti.repl.INIT_FILE_NAME,
        )
    except UnterminatedMultilineError as e:
        print(create_unterminated_block_message(e), file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
