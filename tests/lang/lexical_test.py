import io
import unittest

from lox.lang.error import ErrorHandler, LexicalError
from lox.lang.lexical import Lexer, Token, TokenType


def scan(source):
    error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
    return Lexer(source, error_handler).scan_tokens(), error_handler.diagnostics


def kinds(source):
    tokens, __ = scan(source)
    return [token.kind for token in tokens]


class LexerTestCase(unittest.TestCase):

    def test_punctuation_and_operators(self):
        cases = {
            "(){},.;": [TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                        TokenType.COMMA, TokenType.DOT, TokenType.SEMICOLON],
            "- + / *": [TokenType.MINUS, TokenType.PLUS, TokenType.SLASH, TokenType.STAR],
            "! != = ==": [TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL],
            "< <= > >=": [TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL],
            "<==": [TokenType.LESS_EQUAL, TokenType.EQUAL],
        }
        for case, expected in cases.items():
            self.assertEqual(expected + [TokenType.EOF], kinds(case), case)

    def test_numbers(self):
        cases = {
            "123": [123.0],
            "12.5": [12.5],
            "0.25 7": [0.25, 7.0],
        }
        for case, expected in cases.items():
            tokens, __ = scan(case)
            self.assertEqual(expected, [token.literal for token in tokens[:-1]], case)
            self.assertTrue(all(isinstance(token.literal, float) for token in tokens[:-1]), case)

        # a "." not followed by a digit belongs to the next token
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], kinds("12."))
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF], kinds("1.x"))
        self.assertEqual([TokenType.DOT, TokenType.NUMBER, TokenType.EOF], kinds(".5"))

    def test_strings(self):
        tokens, diagnostics = scan("\"hello world\"")
        self.assertEqual(Token(TokenType.STRING, "\"hello world\"", "hello world", 1), tokens[0])
        self.assertEqual([], diagnostics)

        tokens, __ = scan("\"one\ntwo\" x")
        self.assertEqual("one\ntwo", tokens[0].literal)
        self.assertEqual(2, tokens[1].line)

    def test_identifiers_and_keywords(self):
        keywords = ["and", "class", "else", "false", "for", "fun", "if", "nil", "or", "print", "return", "super",
                    "this", "true", "var", "while"]
        for keyword in keywords:
            self.assertEqual([TokenType[keyword.upper()], TokenType.EOF], kinds(keyword), keyword)

        should_be_identifiers = ["andy", "_x", "x1", "Class", "printer", "__init"]
        for case in should_be_identifiers:
            self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], kinds(case), case)

        self.assertEqual([TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.EOF], kinds("1abc"))

    def test_comments_and_lines(self):
        tokens, __ = scan("1 // two three\n\t\r 4 // trailing")
        self.assertEqual([1.0, 4.0, None], [token.literal for token in tokens])
        self.assertEqual([1, 2, 2], [token.line for token in tokens])

        self.assertEqual([TokenType.SLASH, TokenType.NUMBER, TokenType.EOF], kinds("/ 2"))

    def test_columns(self):
        tokens, __ = scan("var x;\n  print \"a\nb\" x;")
        self.assertEqual([0, 4, 5, 2, 8, 3, 4], [token.column for token in tokens[:-1]])
        self.assertEqual([1, 1, 1, 2, 3, 3, 3], [token.line for token in tokens[:-1]])

    def test_eof(self):
        should_pass = ["", "   ", "// only a comment", "\n\n"]
        for case in should_pass:
            tokens, diagnostics = scan(case)
            self.assertEqual([TokenType.EOF], [token.kind for token in tokens], repr(case))
            self.assertEqual([], diagnostics, repr(case))

        tokens, __ = scan("\n\n")
        self.assertEqual(3, tokens[-1].line)

    def test_unexpected_character(self):
        tokens, diagnostics = scan("1 @\n2 #")
        self.assertEqual([TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF], [token.kind for token in tokens])

        self.assertEqual(2, len(diagnostics))
        for error, line in zip(diagnostics, [1, 2]):
            self.assertIsInstance(error, LexicalError)
            self.assertEqual("Unexpected character.", error.message)
            self.assertEqual(line, error.line)

    def test_unterminated_string(self):
        tokens, diagnostics = scan("var a = 1;\n\"never\nclosed")
        self.assertEqual(TokenType.SEMICOLON, tokens[-2].kind)
        self.assertEqual(TokenType.EOF, tokens[-1].kind)

        self.assertEqual(1, len(diagnostics))
        self.assertEqual("Unterminated string.", diagnostics[0].message)
        self.assertEqual(3, diagnostics[0].line)

    def test_errors_do_not_stop_scanning(self):
        __, diagnostics = scan("@ var x = 1; $ \"open")
        self.assertEqual(["Unexpected character.", "Unexpected character.", "Unterminated string."],
                         [error.message for error in diagnostics])


if __name__ == '__main__':
    unittest.main()
