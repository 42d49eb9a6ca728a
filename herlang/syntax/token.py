"""Token kinds and the keyword lexicons for the herlang language.

Every keyword has a plain ASCII spelling and one or more localized spellings. Both lexicons live in a single read-only
table, so a program written with either set of spellings lexes to exactly the same token stream.
"""

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Union


class TokenKind(enum.Enum):
    # Meta
    ILLEGAL = "illegal"
    EOF = "eof"
    BLANK = "blank"
    # Identifiers and literals
    IDENT = "identifier"
    INT = "int"
    STRING = "string"
    BOOL = "bool"
    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="
    # Delimiters
    COMMA = ","
    COLON = ":"
    SEMICOLON = ";"
    DOT = "."
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    # Keywords
    FUNC = "fn"
    LET = "let"
    IF = "if"
    ELSE = "else"
    WHILE = "while"
    BREAK = "break"
    CONTINUE = "continue"
    RETURN = "return"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Union[int, str, bool, None] = None

    def __str__(self):
        if self.kind in (TokenKind.IDENT, TokenKind.INT):
            return f"{self.kind.name}({self.value})"
        if self.kind == TokenKind.STRING:
            return f"STRING({self.value!r})"
        if self.kind == TokenKind.BOOL:
            return f"BOOL({str(self.value).lower()})"
        if self.kind == TokenKind.ILLEGAL:
            return f"ILLEGAL({self.value})"
        return self.kind.name


EOF = Token(TokenKind.EOF)
BLANK = Token(TokenKind.BLANK)

KEYWORDS = MappingProxyType({
    # fmt: off
    # plain spellings
    "fn":                 Token(TokenKind.FUNC),
    "let":                Token(TokenKind.LET),
    "true":               Token(TokenKind.BOOL, True),
    "false":              Token(TokenKind.BOOL, False),
    "if":                 Token(TokenKind.IF),
    "else":               Token(TokenKind.ELSE),
    "while":              Token(TokenKind.WHILE),
    "break":              Token(TokenKind.BREAK),
    "continue":           Token(TokenKind.CONTINUE),
    "return":             Token(TokenKind.RETURN),
    # localized spellings
    "想要你一个态度":        Token(TokenKind.FUNC),
    "宝宝你是一个":          Token(TokenKind.LET),
    "那么普通却那么自信":     Token(TokenKind.BOOL, True),
    "那咋了":              Token(TokenKind.BOOL, False),
    "姐妹们觉得呢":          Token(TokenKind.IF),
    "抛开事实不谈":          Token(TokenKind.IF),
    "那能一样吗":           Token(TokenKind.ELSE),
    "我接受不等于我同意":     Token(TokenKind.ELSE),
    "你再说一遍":           Token(TokenKind.WHILE),
    "下头":               Token(TokenKind.BREAK),
    "反手举报":             Token(TokenKind.RETURN),
    "我同意":              Token(TokenKind.EQ),
    "我接受":              Token(TokenKind.EQ),
    "拼单":               Token(TokenKind.PLUS),
    "接":                 Token(TokenKind.PLUS),
    "差异":               Token(TokenKind.MINUS),
    "种草":               Token(TokenKind.ASTERISK),
    "踩雷":               Token(TokenKind.SLASH),
    "避雷":               Token(TokenKind.SLASH),
    # keyword that stands for a literal
    "微胖":               Token(TokenKind.STRING, "180kg"),
    # fmt: on
})

# names that may never be the target of a let statement
RESERVED_NAMES = frozenset(["女性", "her", "女", "female", "woman", "girl", "lady"])


def lookup_identifier(name: str) -> Optional[Token]:
    """Returns the keyword token spelled by name, or None if name is an ordinary identifier."""
    return KEYWORDS.get(name)
