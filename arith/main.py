"""Runs arith files or the interactive interpreter. Installed as the arith console script."""

import argparse

from arith.lang.error import ErrorHandler
from arith.lang.session import Session
from arith.lang.shell import Shell
from arith.pure.numerical import FixedWidth


def main(argv=None):
    """Runs arith interpreter. argv defaults to the process arguments."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="arith", description="Minimal arithmetic expression interpreter.")
        parser.add_argument("file", help="file to run line by line (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--overflow", choices=FixedWidth.POLICIES, default=FixedWidth.ERROR,
                            help="what to do when a result doesn't fit in an unsigned 32-bit integer")
        parser.add_argument("-v", "--verbose", action="store_true", help="print tokens and tree of every line")
        args = parser.parse_args(argv)

        error_handler.verbose = args.verbose

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, overflow=args.overflow)
            for result in sess.run():
                print(result)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, overflow=args.overflow)).cmdloop()


if __name__ == "__main__":
    main()
