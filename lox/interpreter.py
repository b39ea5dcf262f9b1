"""Tree-walking interpreter for the lox language.

Basic program flow (see lox.lang.session.Session, which drives it):
    1. Lexer: produces a flat list of tokens from a complete unit of source (lox/lang/lexical.py)
    2. Parser: produces an AST by recursive descent, recovering from syntax errors (lox/lang/parser.py)
    3. Resolver: walks the AST once and records the scope distance of every local variable reference
        - Will fail if there is a static error, in which case the unit is not run (lox/lang/resolver.py)
    4. Interpreter: not a compiler, so walks the AST and executes it on the fly (this module)

One Interpreter lives as long as its Session: its global environment and resolved-variable table persist across
units, so that definitions made by one command-line input are visible to the next ones.
"""

import math
from dataclasses import dataclass
from typing import Any

from lox.lang import syntax
from lox.lang.environment import Environment
from lox.lang.error import LoxRuntimeError
from lox.lang.lexical import TokenType
from lox.lang.runtime import LoxCallable, LoxClass, LoxFunction, LoxInstance, natives


@dataclass(frozen=True)
class Completion:
    """Early exit from a function body carrying the returned value. Statements return None on normal completion and
    forward a Completion untouched until the enclosing call consumes it.
    """
    value: Any


def is_truthy(value):
    """nil and false are falsey, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Equality with no coercion between kinds: bool is an int subclass in Python, so 1 == true must be checked."""
    if left is None or right is None:
        return left is right
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value):
    """Text form of a lox value, as written by print."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and 0 < abs(value) < 1e21:
            return str(int(value))  # repr would switch to exponent notation from 1e16

        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def type_name(value):
    """Lox name of value's type, used in runtime error messages."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, LoxClass):
        return "class"
    if isinstance(value, LoxCallable):
        return "function"
    return "instance"


class Interpreter:
    """Executes resolved statements against a persistent global environment.

    output is called with one line of text per print statement; error_handler receives runtime errors.
    """

    def __init__(self, error_handler, output=print):
        self.error_handler = error_handler
        self.output = output

        self.globals = Environment()
        for name, native in natives().items():
            self.globals.define(name, native)

        self.environment = self.globals
        self.locals = {}  # resolved-variable table: expr node -> hop distance

        self._stmts = {
            syntax.Block: self._block,
            syntax.Class: self._class,
            syntax.Expression: self._expression,
            syntax.Function: self._function,
            syntax.If: self._if,
            syntax.Print: self._print,
            syntax.Return: self._return,
            syntax.Var: self._var,
            syntax.While: self._while,
        }
        self._exprs = {
            syntax.Assign: self._assign,
            syntax.Binary: self._binary,
            syntax.Call: self._call,
            syntax.Get: self._get,
            syntax.Grouping: self._grouping,
            syntax.Literal: self._literal,
            syntax.Logical: self._logical,
            syntax.Set: self._set,
            syntax.Super: self._super,
            syntax.This: self._this,
            syntax.Unary: self._unary,
            syntax.Variable: self._variable,
        }

    def interpret(self, statements):
        """Runs statements in order. A runtime error aborts the rest of them and is reported. Returns whether the
        statements ran to completion.
        """
        try:
            for stmt in statements:
                self.execute(stmt)
        except LoxRuntimeError as error:
            self.error_handler.report(error)
            return False
        return True

    def execute(self, stmt):
        return self._stmts[type(stmt)](stmt)

    def evaluate(self, expr):
        return self._exprs[type(expr)](expr)

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment on every exit path."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                completion = self.execute(stmt)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous
        return None

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    # statements

    def _block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def _class(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {
            method.name.lexeme: LoxFunction(method, self.environment, method.name.lexeme == "init")
            for method in stmt.methods
        }
        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    def _expression(self, stmt):
        self.evaluate(stmt.expression)

    def _function(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def _if(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def _print(self, stmt):
        self.output(stringify(self.evaluate(stmt.expression)))

    def _return(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return Completion(value)

    def _var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def _while(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion is not None:
                return completion
        return None

    # expressions

    def _assign(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name.lexeme, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def _binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        kind = operator.kind

        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if kind is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, f"Operands of '{operator.lexeme}' must be two numbers or two strings.")

        Interpreter.check_number_operands(operator, left, right)

        if kind is TokenType.MINUS:
            return left - right
        if kind is TokenType.STAR:
            return left * right
        if kind is TokenType.SLASH:
            return Interpreter.divide(left, right)
        if kind is TokenType.GREATER:
            return left > right
        if kind is TokenType.GREATER_EQUAL:
            return left >= right
        if kind is TokenType.LESS:
            return left < right
        if kind is TokenType.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(operator, f"Unknown operator '{operator.lexeme}'.")

    def _call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            msg = f"Can only call functions and classes, got {type_name(callee)} '{stringify(callee)}'."
            raise LoxRuntimeError(expr.paren, msg)

        if len(arguments) != callee.arity:
            msg = f"Expected {callee.arity} arguments but got {len(arguments)}."
            raise LoxRuntimeError(expr.paren, msg)

        return callee.call(self, arguments)

    def _get(self, expr):
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)

        raise LoxRuntimeError(expr.name, f"Only instances have properties, got {type_name(obj)}.")

    def _grouping(self, expr):
        return self.evaluate(expr.expression)

    def _literal(self, expr):
        return expr.value

    def _logical(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.kind is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def _set(self, expr):
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, f"Only instances have fields, got {type_name(obj)}.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def _super(self, expr):
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        instance = self.environment.get_at(distance - 1, "this")  # "this" is always one frame inside "super"

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")

        return method.bind(instance)

    def _this(self, expr):
        return self.look_up_variable(expr.keyword, expr)

    def _unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.kind is TokenType.MINUS:
            Interpreter.check_number_operand(expr.operator, right)
            return -right

        return not is_truthy(right)

    def _variable(self, expr):
        return self.look_up_variable(expr.name, expr)

    # operand checks

    @staticmethod
    def check_number_operand(operator, operand):
        if not isinstance(operand, float):
            raise LoxRuntimeError(operator, f"Operand of '{operator.lexeme}' must be a number.")

    @staticmethod
    def check_number_operands(operator, left, right):
        if not isinstance(left, float) or not isinstance(right, float):
            raise LoxRuntimeError(operator, f"Operands of '{operator.lexeme}' must be numbers.")

    @staticmethod
    def divide(left, right):
        """IEEE 754 division: dividing by zero gives an infinity or NaN instead of raising."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right
