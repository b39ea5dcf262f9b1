"""Debug rendering of lox ASTs as parenthesized prefix expressions. Only used for inspection (lox --ast), never to run
code.

Format:
(* (- 123.0) (group 45.67))
(var x (+ 1.0 2.0))
(fun add (a b)
    (return (+ a b)))
"""

from lox.lang import syntax


class AstPrinter:

    def __init__(self, indent="    "):
        self.indent = indent

        self._stmts = {
            syntax.Block: self._block,
            syntax.Class: self._class,
            syntax.Expression: lambda stmt: f"(; {self.expr(stmt.expression)})",
            syntax.Function: self._function,
            syntax.If: self._if,
            syntax.Print: lambda stmt: f"(print {self.expr(stmt.expression)})",
            syntax.Return: self._return,
            syntax.Var: self._var,
            syntax.While: self._while,
        }
        self._exprs = {
            syntax.Assign: lambda expr: self.parenthesize("=", expr.name.lexeme, expr.value),
            syntax.Binary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Call: lambda expr: self.parenthesize("call", expr.callee, *expr.arguments),
            syntax.Get: lambda expr: self.parenthesize(".", expr.object, expr.name.lexeme),
            syntax.Grouping: lambda expr: self.parenthesize("group", expr.expression),
            syntax.Literal: self._literal,
            syntax.Logical: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Set: lambda expr: self.parenthesize("=", expr.object, expr.name.lexeme, expr.value),
            syntax.Super: lambda expr: self.parenthesize("super", expr.method.lexeme),
            syntax.This: lambda expr: "this",
            syntax.Unary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.right),
            syntax.Variable: lambda expr: expr.name.lexeme,
        }

    def print(self, statements):
        """Returns the rendering of a whole program, one top-level statement per line."""
        return "\n".join(self.stmt(stmt) for stmt in statements)

    def stmt(self, stmt):
        return self._stmts[type(stmt)](stmt)

    def expr(self, expr):
        return self._exprs[type(expr)](expr)

    def parenthesize(self, name, *parts):
        """parts are either sub-expressions or plain strings (names)."""
        rendered = [part if isinstance(part, str) else self.expr(part) for part in parts]
        return f"({' '.join([name] + rendered)})"

    def _indented(self, stmt):
        rendered = self.stmt(stmt)
        return "\n".join(self.indent + line for line in rendered.split("\n"))

    def _body(self, statements):
        return "".join("\n" + self._indented(stmt) for stmt in statements)

    def _block(self, stmt):
        return f"(block{self._body(stmt.statements)})"

    def _class(self, stmt):
        header = f"(class {stmt.name.lexeme}"
        if stmt.superclass is not None:
            header += f" < {stmt.superclass.name.lexeme}"
        return header + self._body(stmt.methods) + ")"

    def _function(self, stmt):
        params = " ".join(param.lexeme for param in stmt.params)
        return f"(fun {stmt.name.lexeme} ({params}){self._body(stmt.body)})"

    def _if(self, stmt):
        branches = [stmt.then_branch] if stmt.else_branch is None else [stmt.then_branch, stmt.else_branch]
        return f"(if {self.expr(stmt.condition)}{self._body(branches)})"

    def _return(self, stmt):
        if stmt.value is None:
            return "(return)"
        return f"(return {self.expr(stmt.value)})"

    def _var(self, stmt):
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return f"(var {stmt.name.lexeme} {self.expr(stmt.initializer)})"

    def _while(self, stmt):
        return f"(while {self.expr(stmt.condition)}{self._body([stmt.body])})"

    @staticmethod
    def _literal(expr):
        if expr.value is None:
            return "nil"
        if isinstance(expr.value, bool):
            return "true" if expr.value else "false"
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return repr(expr.value)
