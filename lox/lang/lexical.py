"""Lexical analysis for the lox language: converts a complete source string into a flat list of Tokens.

Lexical grammar can be loosely defined as follows:

```
<number>     ::= <digit>+ ( "." <digit>+ )?         ; always stored as a float
<string>     ::= '"' <char except '"'>* '"'         ; may span lines, no escapes
<identifier> ::= <alpha> ( <alpha> | <digit> )*     ; <alpha> includes "_"
<comment>    ::= "//" <char except newline>*        ; discarded
```

Identifiers that are reserved words become keyword tokens. Errors do not stop the scan: they are reported to the
error handler and the offending character/string is skipped.
"""

import enum
from dataclasses import dataclass, field
from typing import Any

from lox.lang.error import LexicalError


class TokenType(enum.Enum):
    # punctuation
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    COMMA = ","
    DOT = "."
    SEMICOLON = ";"

    # operators
    MINUS = "-"
    PLUS = "+"
    SLASH = "/"
    STAR = "*"
    BANG = "!"
    BANG_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    # literals
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"

    # keywords
    AND = "and"
    CLASS = "class"
    ELSE = "else"
    FALSE = "false"
    FOR = "for"
    FUN = "fun"
    IF = "if"
    NIL = "nil"
    OR = "or"
    PRINT = "print"
    RETURN = "return"
    SUPER = "super"
    THIS = "this"
    TRUE = "true"
    VAR = "var"
    WHILE = "while"

    EOF = "eof"


KEYWORDS = {
    keyword: TokenType[keyword.upper()]
    for keyword in ["and", "class", "else", "false", "for", "fun", "if", "nil", "or", "print", "return", "super",
                    "this", "true", "var", "while"]
}

SINGLE = {"(", ")", "{", "}", ",", ".", ";", "-", "+", "*"}  # never the start of a longer token
DOUBLE = {"!": "!=", "=": "==", "<": "<=", ">": ">="}        # may be followed by "="
WHITESPACE = {" ", "\t", "\r"}


@dataclass(frozen=True)
class Token:
    """Immutable token. literal is the parsed float/str payload for NUMBER/STRING tokens and None otherwise."""
    kind: TokenType
    lexeme: str
    literal: Any
    line: int
    column: int = field(default=-1, compare=False)  # offset of the lexeme in its first line, -1 if unknown

    def __str__(self):
        return f"{self.kind.name} {self.lexeme} {self.literal}"


class Lexer:
    """Scans source greedily from left to right, keeping track of the current offset and line."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # start of the lexeme being scanned
        self.current = 0  # character about to be consumed
        self.line = 1
        self.line_start = 0  # offset of the first character of the current line
        self.column = 0

    def scan_tokens(self):
        """Scans the whole source and returns its tokens, terminated by a single EOF token."""
        while not self.at_end:
            self.start = self.current
            self.column = self.start - self.line_start
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.current - self.line_start))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE:
            self.add_token(TokenType(char))
        elif char in DOUBLE:
            self.add_token(TokenType(DOUBLE[char] if self.match("=") else char))
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.at_end:
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif char in WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
            self.line_start = self.current
        elif char == "\"":
            self.string()
        elif Lexer.is_digit(char):
            self.number()
        elif Lexer.is_alpha(char):
            self.identifier()
        else:
            self.error_handler.report(LexicalError("Unexpected character.", self.line))

    def string(self):
        while self.peek() != "\"" and not self.at_end:
            if self.peek() == "\n":
                self.line += 1
                self.line_start = self.current + 1
            self.advance()

        if self.at_end:
            self.error_handler.report(LexicalError("Unterminated string.", self.line))
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Lexer.is_digit(self.peek()):
            self.advance()

        # a "." is only part of the number if a digit follows it
        if self.peek() == "." and Lexer.is_digit(self.peek_next()):
            self.advance()
            while Lexer.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Lexer.is_alpha(self.peek()) or Lexer.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, kind, literal=None):
        self.tokens.append(Token(kind, self.source[self.start:self.current], literal, self.line, self.column))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.at_end or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "" if self.at_end else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return ""
        return self.source[self.current + 1]

    @property
    def at_end(self):
        return self.current >= len(self.source)

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"
