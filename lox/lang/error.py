"""Error handling for the lox language. Only LoxErrors should be encountered while running a script: if another type
of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every stage of the pipeline reports its errors to an ErrorHandler instead of printing them itself:
    - lexical and syntax errors are reported and the stage keeps going, so one run can show many of them
    - resolution errors are reported and prevent the unit from being executed
    - runtime errors are raised as LoxRuntimeError, abort the unit and are reported by Session
"""

import sys

from termcolor import colored


class LoxError(Exception):
    """Templates an error message so that it can be reported by an ErrorHandler. token is the offending Token, if
    there is one, and is used both as a locator ("at 'x'") and to highlight the offending source line.
    """
    kind = "error"

    def __init__(self, message, line, token=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.token = token

    @property
    def where(self):
        """Locator for static errors: " at end", " at 'lexeme'" or nothing if there is no token."""
        if self.token is None:
            return ""
        if not self.token.lexeme:
            return " at end"
        return f" at '{self.token.lexeme}'"

    def __str__(self):
        return f"[line {self.line}] Error{self.where}: {self.message}"


class LexicalError(LoxError):
    """Unexpected character or unterminated string."""
    kind = "lexical"


class ParseError(LoxError):
    """Unexpected token. Raised inside the parser to unwind to the nearest statement boundary."""
    kind = "syntax"

    def __init__(self, token, message):
        super().__init__(message, token.line, token)


class ResolveError(LoxError):
    """Static scoping error found by the resolver."""
    kind = "resolution"

    def __init__(self, token, message):
        super().__init__(message, token.line, token)


class LoxRuntimeError(LoxError):
    """Error raised while executing a unit. Aborts the unit."""
    kind = "runtime"

    def __init__(self, token, message):
        super().__init__(message, token.line, token)

    def __str__(self):
        return f"{self.message}\n[line {self.line}]"


class ErrorHandler:
    """Collects and displays diagnostics. Also a context manager that will convert Python errors into lox errors."""
    ERROR = "red"

    STATIC_EXIT = 65
    RUNTIME_EXIT = 70

    def __init__(self, fatal=True, stream=None, color=None):
        self.fatal = fatal
        self.stream = stream if stream is not None else sys.stderr
        self.color = color if color is not None else self.stream.isatty()

        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False

        self.path = None
        self.lines = []

    def register_source(self, path, source):
        """Registers the source of the unit currently being run, so that offending lines can be displayed."""
        self.path = path
        self.lines = source.split("\n")

    def reset(self):
        """Forgets error flags and recorded diagnostics. Called before each unit in command-line mode."""
        self.diagnostics = []
        self.had_error = False
        self.had_runtime_error = False

    def _colored(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs, force_color=True)

    def diagnose(self, error):
        """Returns the offending source line with error.token highlighted and bolded, or None if it can't be found."""
        if not 0 < error.line <= len(self.lines) or error.token is None or not error.token.lexeme:
            return None

        line = self.lines[error.line - 1]
        lexeme = error.token.lexeme.split("\n")[0]  # multi-line strings: only highlight the first line
        start = error.token.column
        if start < 0 or not line.startswith(lexeme, start):
            start = line.find(lexeme)
        if start == -1:
            return None

        color = ErrorHandler.ERROR
        end = start + max(len(lexeme), 1)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Records and prints error, which must be a LoxError."""
        self.diagnostics.append(error)
        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
            error_msg = self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.message
            error_msg += f"\n[line {error.line}]"
        else:
            self.had_error = True
            error_msg = self._colored(f"[line {error.line}] ", attrs=["bold"])
            error_msg += self._colored("Error", ErrorHandler.ERROR, attrs=["bold"])
            error_msg += f"{error.where}: {error.message}"

        if self.path is not None:
            error_msg = self._colored(f"{self.path}:{error.line}: ", attrs=["bold"]) + error_msg

        print(error_msg, file=self.stream)

        diagnosis = self.diagnose(error)
        if diagnosis:
            print(diagnosis, file=self.stream)

    def throw(self, message, exit_code=RUNTIME_EXIT, internal=False):
        """Prints a fatal host-level error (not a lox diagnostic) and exits if self.fatal."""
        error_msg = ""
        if internal:
            error_msg += self._colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += self._colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        print(error_msg, file=self.stream)

        self.had_runtime_error = True
        if self.fatal:
            sys.exit(exit_code)

    @property
    def exit_code(self):
        """Process exit code for everything reported so far."""
        if self.had_error:
            return ErrorHandler.STATIC_EXIT
        if self.had_runtime_error:
            return ErrorHandler.RUNTIME_EXIT
        return 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw("keyboard interrupt")
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw("stack overflow: maximum recursion depth exceeded")
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.report(exc_val)
        elif exc_type is not None:
            self.throw(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True)
            do_exit = True

        return not do_exit
