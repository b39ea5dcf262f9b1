import io
import unittest

from lox.lang.error import ErrorHandler, ResolveError
from lox.lang.lexical import Lexer
from lox.lang.parser import Parser
from lox.lang.resolver import Resolver


def resolve(source):
    """Returns (statements, locals, diagnostics, ok)."""
    error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
    statements = Parser(Lexer(source, error_handler).scan_tokens(), error_handler).parse()
    assert not error_handler.diagnostics, error_handler.diagnostics

    locals_ = {}
    ok = Resolver(locals_, error_handler).resolve(statements)
    return statements, locals_, error_handler.diagnostics, ok


class DistanceTestCase(unittest.TestCase):

    def test_globals_are_not_recorded(self):
        should_pass = ["var a = 1; print a;", "fun f() { return g(); } fun g() { return 1; }", "a = 2;"]
        for case in should_pass:
            __, locals_, diagnostics, ok = resolve(case)
            self.assertEqual({}, locals_, case)
            self.assertTrue(ok, case)

    def test_block_distances(self):
        statements, locals_, __, __ = resolve("{ var a = 1; { print a; } print a; }")
        outer = statements[0]
        inner_print = outer.statements[1].statements[0]
        outer_print = outer.statements[2]

        self.assertEqual(1, locals_[inner_print.expression])
        self.assertEqual(0, locals_[outer_print.expression])

    def test_same_name_different_nodes(self):
        statements, locals_, __, __ = resolve("{ var a = 1; { var a = 2; print a; } print a; }")
        inner_print = statements[0].statements[1].statements[1]
        outer_print = statements[0].statements[2]

        self.assertEqual(0, locals_[inner_print.expression])
        self.assertEqual(0, locals_[outer_print.expression])
        self.assertEqual(2, len(locals_))

    def test_assignment_distance(self):
        statements, locals_, __, __ = resolve("{ var a; { { a = 3; } } }")
        assign = statements[0].statements[1].statements[0].statements[0].expression
        self.assertEqual(2, locals_[assign])

    def test_parameters_and_closures(self):
        statements, locals_, __, __ = resolve("fun f(a) { print a; fun g() { return a; } }")
        function = statements[0]
        print_a = function.body[0].expression
        return_a = function.body[1].body[0].value

        self.assertEqual(0, locals_[print_a])
        self.assertEqual(1, locals_[return_a])

    def test_this_and_super(self):
        statements, locals_, __, ok = resolve("class A {} class B < A { m() { return this; } n() { super.m(); } }")
        self.assertTrue(ok)

        klass = statements[1]
        this = klass.methods[0].body[0].value
        super_ = klass.methods[1].body[0].expression.callee

        self.assertEqual(1, locals_[this])    # function scope, then "this" scope
        self.assertEqual(2, locals_[super_])  # function scope, "this" scope, then "super" scope

    def test_shared_table(self):
        locals_ = {}
        error_handler = ErrorHandler(fatal=False, stream=io.StringIO(), color=False)
        for source in ["{ var a; print a; }", "{ var b; { print b; } }"]:
            statements = Parser(Lexer(source, error_handler).scan_tokens(), error_handler).parse()
            Resolver(locals_, error_handler).resolve(statements)
        self.assertEqual([0, 1], sorted(locals_.values()))


class StaticErrorTestCase(unittest.TestCase):

    def test_errors(self):
        should_fail = {
            "{ var a = a; }": "Can't read local variable in its own initializer.",
            "fun f() { var b = b + 1; }": "Can't read local variable in its own initializer.",
            "{ var a = 1; var a = 2; }": "Already a variable with this name in this scope.",
            "fun f(a, a) {}": "Already a variable with this name in this scope.",
            "return 1;": "Can't return from top-level code.",
            "print this;": "Can't use 'this' outside of a class.",
            "fun f() { return this; }": "Can't use 'this' outside of a class.",
            "print super.x;": "Can't use 'super' outside of a class.",
            "class A { m() { super.m(); } }": "Can't use 'super' in a class with no superclass.",
            "class A < A {}": "A class can't inherit from itself.",
            "class A < A { m() { super.m(); } }": "A class can't inherit from itself.",
            "class A { init() { return 1; } }": "Can't return a value from an initializer.",
        }
        for case, expected in should_fail.items():
            __, __, diagnostics, ok = resolve(case)
            self.assertFalse(ok, case)
            self.assertEqual([expected], [error.message for error in diagnostics], case)
            self.assertIsInstance(diagnostics[0], ResolveError, case)

    def test_valid(self):
        should_pass = [
            "var a = a;",  # globals are looked up dynamically
            "var a = 1; var a = 2;",
            "{ var a = 1; { var b = a; } }",
            "class A { init() { return; } }",
            "class A { m() { fun inner() { return this; } } }",
            "fun f() { return; }",
            "fun f() { fun f() {} }",
        ]
        for case in should_pass:
            __, __, diagnostics, ok = resolve(case)
            self.assertTrue(ok, case)
            self.assertEqual([], diagnostics, case)

    def test_errors_do_not_stop_the_pass(self):
        __, __, diagnostics, ok = resolve("return 1;\nprint this;\n{ var a = a; }")
        self.assertFalse(ok)
        self.assertEqual([1, 2, 3], [error.line for error in diagnostics])

    def test_locator(self):
        __, __, diagnostics, __ = resolve("{ var a = 1;\nvar a = 2; }")
        self.assertEqual("[line 2] Error at 'a': Already a variable with this name in this scope.",
                         str(diagnostics[0]))


if __name__ == '__main__':
    unittest.main()
