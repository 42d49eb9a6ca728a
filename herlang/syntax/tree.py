"""Abstract syntax tree for herlang.

Nodes are frozen dataclasses and every sequence inside them is a tuple, so a tree is never mutated once the parser has
built it and two trees compare equal iff they are structurally identical. Both the evaluator and the formatter consume
these nodes.

```
<program>   ::= <stmt>*
<stmt>      ::= "let" <ident> "=" <expr> [";"]
              | "return" <expr> [";"]
              | "break" [";"] | "continue" [";"]
              | <blank line>
              | <expr> [";"]
<expr>      ::= <ident> | <int> | <string> | <bool>
              | "[" <exprs> "]" | "{" (<expr> ":" <expr>),* "}"
              | <prefix-op> <expr> | <expr> <infix-op> <expr>
              | <expr> "[" <expr> "]" | <expr> "." <ident>
              | "if" "(" <expr> ")" <block> ["else" <block>]
              | "while" "(" <expr> ")" <block>
              | "fn" "(" <idents> ")" <block>
              | <expr> "(" <exprs> ")"
```
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Ident:
    name: str

    def __str__(self):
        return self.name


# Literals

@dataclass(frozen=True)
class IntLiteral:
    value: int


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class BoolLiteral:
    value: bool


@dataclass(frozen=True)
class ArrayLiteral:
    elements: Tuple["Expr", ...]


@dataclass(frozen=True)
class HashLiteral:
    pairs: Tuple[Tuple["Expr", "Expr"], ...]  # insertion order is kept for the formatter


# Expressions

@dataclass(frozen=True)
class Prefix:
    op: str
    right: "Expr"


@dataclass(frozen=True)
class Infix:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Index:
    left: "Expr"
    index: "Expr"


@dataclass(frozen=True)
class If:
    cond: "Expr"
    consequence: "Block"
    alternative: Optional["Block"] = None


@dataclass(frozen=True)
class While:
    cond: "Expr"
    consequence: "Block"


@dataclass(frozen=True)
class Func:
    params: Tuple[Ident, ...]
    body: "Block"


@dataclass(frozen=True)
class Call:
    func: "Expr"
    args: Tuple["Expr", ...]


Literal = Union[IntLiteral, StringLiteral, BoolLiteral, ArrayLiteral, HashLiteral]
Expr = Union[Ident, Literal, Prefix, Infix, Index, If, While, Func, Call]


# Statements

@dataclass(frozen=True)
class Let:
    name: Ident
    value: Expr


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Break:
    pass


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


@dataclass(frozen=True)
class Blank:
    """A blank line in the source. Only the formatter cares about it."""


Stmt = Union[Let, Return, Break, Continue, ExprStmt, Blank]
Block = Tuple[Stmt, ...]
Program = Tuple[Stmt, ...]
