"""Static variable resolution for the lox language.

A single depth-first pass over the AST with its own stack of scopes (dicts of name -> "is fully initialized"). For
every local variable reference, the number of scopes between the reference and the scope that declares it (its hop
distance) is recorded in the resolved-variable table, keyed by the reference node itself. References that aren't
found in any scope are globals and are not recorded: Interpreter looks those up by name at runtime.

The global scope is not part of the stack, so globals may be redeclared and used before they are defined.
"""

import enum

from lox.lang import syntax
from lox.lang.error import ResolveError


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()
    INITIALIZER = enum.auto()
    METHOD = enum.auto()


class ClassType(enum.Enum):
    NONE = enum.auto()
    CLASS = enum.auto()
    SUBCLASS = enum.auto()


class Resolver:
    """Fills locals (node -> hop distance) for a list of statements. Errors are reported, never raised."""

    def __init__(self, locals_, error_handler):
        self.locals = locals_
        self.error_handler = error_handler

        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.had_error = False

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
            syntax.Logical: self._binary,
            syntax.Set: self._set,
            syntax.Super: self._super,
            syntax.This: self._this,
            syntax.Unary: self._unary,
            syntax.Variable: self._variable,
        }

    def resolve(self, statements):
        """Resolves statements. Returns False if any static error was found (the unit must not be run)."""
        for stmt in statements:
            self.resolve_stmt(stmt)
        return not self.had_error

    def resolve_stmt(self, stmt):
        self._stmts[type(stmt)](stmt)

    def resolve_expr(self, expr):
        self._exprs[type(expr)](expr)

    # scopes

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        """Records the hop distance of name for expr, if name is declared in any local scope."""
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr] = depth
                return

    def resolve_function(self, function, function_type):
        enclosing_function = self.current_function
        self.current_function = function_type

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function

    def error(self, token, message):
        self.had_error = True
        self.error_handler.report(ResolveError(token, message))

    # statements

    def _block(self, stmt):
        self.begin_scope()
        for inner in stmt.statements:
            self.resolve_stmt(inner)
        self.end_scope()

    def _class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            self.current_class = ClassType.SUBCLASS
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error(stmt.superclass.name, "A class can't inherit from itself.")
            else:
                self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            function_type = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.resolve_function(method, function_type)

        self.end_scope()
        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def _expression(self, stmt):
        self.resolve_expr(stmt.expression)

    def _function(self, stmt):
        # defined before the body is resolved, so that functions can recurse
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    def _if(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve_stmt(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve_stmt(stmt.else_branch)

    def _print(self, stmt):
        self.resolve_expr(stmt.expression)

    def _return(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function is FunctionType.INITIALIZER:
                self.error(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve_expr(stmt.value)

    def _var(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.define(stmt.name)

    def _while(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve_stmt(stmt.body)

    # expressions

    def _assign(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def _binary(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def _call(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def _get(self, expr):
        self.resolve_expr(expr.object)  # property names are looked up dynamically

    def _grouping(self, expr):
        self.resolve_expr(expr.expression)

    def _literal(self, expr):
        pass

    def _set(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_expr(expr.object)

    def _super(self, expr):
        if self.current_class is ClassType.NONE:
            self.error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class is not ClassType.SUBCLASS:
            self.error(expr.keyword, "Can't use 'super' in a class with no superclass.")

        self.resolve_local(expr, expr.keyword)

    def _this(self, expr):
        if self.current_class is ClassType.NONE:
            self.error(expr.keyword, "Can't use 'this' outside of a class.")
            return

        self.resolve_local(expr, expr.keyword)

    def _unary(self, expr):
        self.resolve_expr(expr.right)

    def _variable(self, expr):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.error(expr.name, "Can't read local variable in its own initializer.")

        self.resolve_local(expr, expr.name)
