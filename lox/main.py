"""Uses the lox implementation to interpret .lox files/run in command-line mode. Also uses the error handling context
manager. Called from the lox executable script (see pyproject.toml) or `python -m lox`.

Exit codes follow sysexits: 65 if the script has static (lexical, syntax or resolution) errors, 66 if it can't be
opened, 70 if it failed at runtime.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.printer import AstPrinter
from lox.lang.session import Session
from lox.lang.shell import Shell


def main():
    """Runs lox interpreter. Called from lox executable script."""
    assert sys.version_info >= (3, 7), "lox cannot be run with python < 3.7"

    parser = argparse.ArgumentParser(prog="lox")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", help="print the syntax tree instead of running it", action="store_true")
    parser.add_argument("--no-color", help="do not color error messages", action="store_true")
    args = parser.parse_args()

    with ErrorHandler(color=False if args.no_color else None) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)

            if args.ast:
                statements = sess.parse()
                if statements is not None:
                    print(AstPrinter().print(statements))
            else:
                sess.run()

            sys.exit(error_handler.exit_code)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True), ast=args.ast).cmdloop()
