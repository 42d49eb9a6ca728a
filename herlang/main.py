"""Uses the herlang implementation to interpret herlang files, format them, or run in command-line mode. Also uses the
error handling context manager. Called from the herlang console script.

Python version must be >=3.11, because error handling requires that dicts are insertion-ordered and deep herlang
recursion relies on Python calls that do not consume the C stack.
"""

import argparse
import logging
import os
import sys

from herlang.interpreter import format as format_source
from herlang.lang.error import ErrorHandler, GenericException
from herlang.lang.session import Session
from herlang.lang.shell import Shell

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="herlang")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--format", help="print the file in canonical layout instead of running it",
                        action="store_true")
    parser.add_argument("--max-depth", help="maximum depth of nested function calls", type=int, default=None)
    parser.add_argument("--no-color", help="disable colored error output", action="store_true")
    parser.add_argument("--verbose", help="log parsing and evaluation steps", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs herlang interpreter. Called from herlang console script."""
    assert sys.version_info >= (3, 11), "herlang cannot be run with python < 3.11"

    with ErrorHandler() as error_handler:
        args = parse_args(argv)

        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                            format="%(name)s: %(levelname)s: %(message)s")
        if args.no_color:
            os.environ["ANSI_COLORS_DISABLED"] = "1"  # read by termcolor on every call

        if args.max_depth is not None and args.max_depth < 1:
            raise GenericException("--max-depth must be positive, got {}", str(args.max_depth), diagnosis=False)

        if args.format:
            if args.file is None:
                raise GenericException("--format needs a file", diagnosis=False)
            try:
                with open(args.file, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", args.file, diagnosis=False)

            logger.debug("formatting %s", args.file)
            print(format_source(source), end="")

        elif args.file is not None:
            logger.debug("running %s", args.file)
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth)).cmdloop()


if __name__ == "__main__":
    main()
