"""Abstract syntax tree for the lox language, built by Parser and walked by Resolver, Interpreter and AstPrinter.

The set of nodes is closed: every pass keeps a table of node type -> handler and covers every node below. Nodes are
frozen and compared/hashed by identity (eq=False), which is what the resolved-variable table relies on: two
references to the same name at different places in the source are different keys.

Formally, the grammar is

```
<program>     ::= <declaration>* EOF
<declaration> ::= <class_decl> | <fun_decl> | <var_decl> | <statement>
<class_decl>  ::= "class" IDENTIFIER ( "<" IDENTIFIER )? "{" <function>* "}"
<fun_decl>    ::= "fun" <function>
<function>    ::= IDENTIFIER "(" <parameters>? ")" <block>
<var_decl>    ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement>   ::= <expr_stmt> | <for_stmt> | <if_stmt> | <print_stmt> | <return_stmt> | <while_stmt> | <block>

<expression>  ::= <assignment>
<assignment>  ::= ( <call> "." )? IDENTIFIER "=" <assignment> | <logic_or>
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" | "." IDENTIFIER )*
<primary>     ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
                | "super" "." IDENTIFIER
```

There is no for-loop node: Parser desugars "for" into Block/While/Expression nodes.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from lox.lang.lexical import Token


class Expr:
    """Superclass for every expression node."""


class Stmt:
    """Superclass for every statement node."""


node = dataclass(frozen=True, eq=False)


# expressions

@node
class Literal(Expr):
    value: Any


@node
class Grouping(Expr):
    expression: Expr


@node
class Unary(Expr):
    operator: Token
    right: Expr


@node
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@node
class Logical(Expr):
    """Short-circuiting "and"/"or"."""
    left: Expr
    operator: Token
    right: Expr


@node
class Variable(Expr):
    name: Token


@node
class Assign(Expr):
    name: Token
    value: Expr


@node
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate runtime errors
    arguments: List[Expr]


@node
class Get(Expr):
    object: Expr
    name: Token


@node
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@node
class This(Expr):
    keyword: Token


@node
class Super(Expr):
    keyword: Token
    method: Token


# statements

@node
class Expression(Stmt):
    expression: Expr


@node
class Print(Stmt):
    expression: Expr


@node
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@node
class Block(Stmt):
    statements: List[Stmt]


@node
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@node
class While(Stmt):
    condition: Expr
    body: Stmt


@node
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@node
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@node
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: List[Function]
