"""Session control for the lox language. Runs the lexer -> parser -> resolver -> interpreter pipeline over units of
source, either a whole file (file interpretation mode) or one input at a time (command-line mode).
"""

import io

from lox.interpreter import Interpreter
from lox.lang.error import ErrorHandler
from lox.lang.lexical import Lexer, TokenType
from lox.lang.parser import Parser
from lox.lang.resolver import Resolver


class Session:
    """Governs a lox session. The session's Interpreter (and so its globals and resolved-variable table) persists
    across calls to run.
    """
    SH_FILE = "<in>"  # command-line interpreter filename
    IO_EXIT = 66      # file could not be opened

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True, output=print):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.source = ""          # source of the file being interpreted (file mode only)

        self.interpreter = Interpreter(error_handler, output)

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                self.error_handler.throw(f"'{path}' could not be opened", exit_code=Session.IO_EXIT)

        elif not cmd_line:
            raise ValueError("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line and whether or not it has unclosed braces, in
        which case the next line must be appended to it before it is run.
        """
        line = line.rstrip()

        # braces inside strings and comments do not count; errors are reported when the input is run
        tokens = Lexer(line, ErrorHandler(fatal=False, stream=io.StringIO(), color=False)).scan_tokens()
        depth = sum(1 if token.kind is TokenType.LEFT_BRACE else -1
                    for token in tokens if token.kind in (TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE))
        return line, depth > 0

    def parse(self, source=None):
        """Lexes and parses source (defaults to the session's file). Returns the statements, or None if any lexical or
        syntax error was reported.
        """
        if source is None:
            source = self.source
        self.error_handler.register_source(self.path, source)

        reported = len(self.error_handler.diagnostics)
        tokens = Lexer(source, self.error_handler).scan_tokens()
        statements = Parser(tokens, self.error_handler).parse()

        if len(self.error_handler.diagnostics) > reported:
            return None
        return statements

    def run(self, source=None):
        """Runs one complete unit of source (defaults to the session's file) and returns the diagnostics it produced.
        The unit is only executed if lexing, parsing and resolving it reported nothing.
        """
        if self.cmd_line:
            self.error_handler.reset()
        reported = len(self.error_handler.diagnostics)

        statements = self.parse(source)
        if statements is not None and Resolver(self.interpreter.locals, self.error_handler).resolve(statements):
            self.interpreter.interpret(statements)

        return self.error_handler.diagnostics[reported:]
