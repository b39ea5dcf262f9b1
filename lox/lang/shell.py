"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.lang.printer import AstPrinter
from lox.lang.session import Session


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    commands = {"help", "exit", "EOF"}

    def __init__(self, sess, *args, ast=False, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.ast = ast  # print the AST of each input instead of running it

        self._tmp_line = ""

    def parseline(self, line):
        """Shell commands are only recognized as a bare word outside of a continuation (EOF is always recognized).
        Anything else is lox input, even if it starts with a command name (e.g. "help = 2;").
        """
        line = line.strip()
        if line == "EOF" or (not self._tmp_line and line in Shell.commands):
            return super().parseline(line)
        return None, None, line

    def default(self, line):
        """Executes arbitrary lox input. Braces that are still open continue the input on the next line."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = Session.preprocess_line(self._tmp_line + line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if self.ast:
                self.sess.error_handler.reset()
                statements = self.sess.parse(line)
                if statements:
                    print(AstPrinter().print(statements))
            else:
                self.sess.run(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with variables, closures and classes. Each line \n"
              "is run as soon as it is entered (a line with unclosed braces continues on the next one), and \n"
              "definitions persist for the rest of the session.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. Next, try typing 'print greeting + \" world\";'.\n"
              "Type 'exit' or press Ctrl-D to leave.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
