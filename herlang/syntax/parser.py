"""Precedence-climbing (Pratt) parser for herlang.

The parser keeps two tokens of state, the current token and the one after it (peek). Every prefix handler starts with
the current token on the first token of its expression and finishes with the current token on the last token it
consumed. Infix handlers are entered with the current token on the operator.

Parsing never stops at the first problem: every diagnostic is appended to Parser.errors and the offending statement or
sub-expression is dropped. A non-empty error list means the whole parse failed, no matter how much of the Program was
built.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from herlang.syntax import tree
from herlang.syntax.lexical import Lexer
from herlang.syntax.token import RESERVED_NAMES, Token, TokenKind

SCREAM = "啊啊啊啊啊啊啊啊啊啊啊啊"


class Precedence(enum.IntEnum):
    LOWEST = enum.auto()
    EQUALS = enum.auto()       # == !=
    LESSGREATER = enum.auto()  # < <= > >=
    SUM = enum.auto()          # + -
    PRODUCT = enum.auto()      # * /
    PREFIX = enum.auto()       # !x -x +x
    INDEX = enum.auto()        # x[y] x.y
    CALL = enum.auto()         # f(x)


PRECEDENCES = {
    # fmt: off
    TokenKind.EQ:       Precedence.EQUALS,
    TokenKind.NE:       Precedence.EQUALS,
    TokenKind.LT:       Precedence.LESSGREATER,
    TokenKind.LE:       Precedence.LESSGREATER,
    TokenKind.GT:       Precedence.LESSGREATER,
    TokenKind.GE:       Precedence.LESSGREATER,
    TokenKind.PLUS:     Precedence.SUM,
    TokenKind.MINUS:    Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH:    Precedence.PRODUCT,
    TokenKind.LBRACKET: Precedence.INDEX,
    TokenKind.DOT:      Precedence.INDEX,
    TokenKind.LPAREN:   Precedence.CALL,
    # fmt: on
}


class ParseError:
    """Base class of every parse diagnostic."""


@dataclass(frozen=True)
class UnexpectedToken(ParseError):
    expected: TokenKind
    got: Token

    def __str__(self):
        return f"{SCREAM} Unexpected Token: expected {self.expected.name}, got {self.got}"


@dataclass(frozen=True)
class NoPrefixRule(ParseError):
    got: Token

    def __str__(self):
        return f"{SCREAM} Unexpected Token: no prefix rule for {self.got}"


@dataclass(frozen=True)
class ReservedName(ParseError):
    name: str

    def __str__(self):
        return f"{SCREAM} SyntaxError: 女性是不能被定义的！！！ (let {self.name})"


@dataclass(frozen=True)
class IllegalToken(ParseError):
    message: str

    def __str__(self):
        return f"{SCREAM} SyntaxError: {self.message}"


class Parser:
    ParseNud = Callable[["Parser"], Optional[tree.Expr]]
    ParseLed = Callable[["Parser", tree.Expr], Optional[tree.Expr]]

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[ParseError] = []

        self.current_token = self.lexer.next_token()
        self.peek_token = self.lexer.next_token()

        self.parse_nud_functions: Dict[TokenKind, Parser.ParseNud] = {}
        self.parse_led_functions: Dict[TokenKind, Parser.ParseLed] = {}

        self._register_nud(TokenKind.IDENT, Parser.parse_identifier)
        self._register_nud(TokenKind.INT, Parser.parse_int)
        self._register_nud(TokenKind.STRING, Parser.parse_string)
        self._register_nud(TokenKind.BOOL, Parser.parse_bool)
        self._register_nud(TokenKind.LBRACKET, Parser.parse_array)
        self._register_nud(TokenKind.LBRACE, Parser.parse_hash)
        self._register_nud(TokenKind.BANG, Parser.parse_prefix)
        self._register_nud(TokenKind.MINUS, Parser.parse_prefix)
        self._register_nud(TokenKind.PLUS, Parser.parse_prefix)
        self._register_nud(TokenKind.LPAREN, Parser.parse_grouped)
        self._register_nud(TokenKind.IF, Parser.parse_if)
        self._register_nud(TokenKind.WHILE, Parser.parse_while)
        self._register_nud(TokenKind.FUNC, Parser.parse_func)
        self._register_nud(TokenKind.ILLEGAL, Parser.parse_illegal)

        for kind in (TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASTERISK, TokenKind.SLASH, TokenKind.EQ,
                     TokenKind.NE, TokenKind.LT, TokenKind.LE, TokenKind.GT, TokenKind.GE):
            self._register_led(kind, Parser.parse_infix)
        self._register_led(TokenKind.LBRACKET, Parser.parse_index)
        self._register_led(TokenKind.DOT, Parser.parse_dot_access)
        self._register_led(TokenKind.LPAREN, Parser.parse_call)

    def _register_nud(self, kind: TokenKind, parse: "Parser.ParseNud") -> None:
        self.parse_nud_functions[kind] = parse

    def _register_led(self, kind: TokenKind, parse: "Parser.ParseLed") -> None:
        self.parse_led_functions[kind] = parse

    def _bump(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def _current_is(self, kind: TokenKind) -> bool:
        return self.current_token.kind == kind

    def _peek_is(self, kind: TokenKind) -> bool:
        return self.peek_token.kind == kind

    def _expect_peek(self, kind: TokenKind) -> bool:
        """Advances if the next token is of kind, otherwise records an UnexpectedToken diagnostic."""
        if self._peek_is(kind):
            self._bump()
            return True
        self.errors.append(UnexpectedToken(kind, self.peek_token))
        return False

    def _skip_semicolon(self) -> None:
        if self._peek_is(TokenKind.SEMICOLON):
            self._bump()

    def parse_program(self) -> tree.Program:
        statements = []
        while not self._current_is(TokenKind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._bump()
        return tuple(statements)

    def parse_block(self) -> tree.Block:
        """Parses statements up to the closing brace. The current token must be the opening brace. Running into EOF
        records a diagnostic and returns what was parsed so far.
        """
        self._bump()
        statements = []

        while not self._current_is(TokenKind.RBRACE):
            if self._current_is(TokenKind.EOF):
                self.errors.append(UnexpectedToken(TokenKind.RBRACE, self.current_token))
                break

            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._bump()

        return tuple(statements)

    # Statements

    def parse_statement(self) -> Optional[tree.Stmt]:
        kind = self.current_token.kind
        if kind == TokenKind.LET:
            return self.parse_let()
        if kind == TokenKind.RETURN:
            return self.parse_return()
        if kind == TokenKind.BREAK:
            self._skip_semicolon()
            return tree.Break()
        if kind == TokenKind.CONTINUE:
            self._skip_semicolon()
            return tree.Continue()
        if kind == TokenKind.BLANK:
            return tree.Blank()
        return self.parse_expression_statement()

    def parse_let(self) -> Optional[tree.Let]:
        if not self._expect_peek(TokenKind.IDENT):
            return None
        name = tree.Ident(self.current_token.value)

        if not self._expect_peek(TokenKind.ASSIGN):
            return None
        self._bump()

        value = self.parse_expression()
        if value is None:
            return None
        self._skip_semicolon()

        if name.name in RESERVED_NAMES:
            self.errors.append(ReservedName(name.name))
            return None

        return tree.Let(name, value)

    def parse_return(self) -> Optional[tree.Return]:
        self._bump()

        value = self.parse_expression()
        if value is None:
            return None
        self._skip_semicolon()

        return tree.Return(value)

    def parse_expression_statement(self) -> Optional[tree.ExprStmt]:
        expr = self.parse_expression()
        if expr is None:
            return None
        self._skip_semicolon()
        return tree.ExprStmt(expr)

    # Expressions

    def parse_expression(self, precedence: Precedence = Precedence.LOWEST) -> Optional[tree.Expr]:
        parse_nud = self.parse_nud_functions.get(self.current_token.kind)
        if parse_nud is None:
            self.errors.append(NoPrefixRule(self.current_token))
            return None

        left = parse_nud(self)
        while left is not None and not self._peek_is(TokenKind.SEMICOLON) and \
                precedence < PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST):
            parse_led = self.parse_led_functions.get(self.peek_token.kind)
            if parse_led is None:
                return left
            self._bump()
            left = parse_led(self, left)

        return left

    def parse_identifier(self) -> tree.Ident:
        return tree.Ident(self.current_token.value)

    def parse_int(self) -> tree.IntLiteral:
        return tree.IntLiteral(self.current_token.value)

    def parse_string(self) -> tree.StringLiteral:
        return tree.StringLiteral(self.current_token.value)

    def parse_bool(self) -> tree.BoolLiteral:
        return tree.BoolLiteral(self.current_token.value)

    def parse_illegal(self) -> None:
        message = self.current_token.value
        if len(message) == 1:
            message = f"illegal character {message!r}"
        self.errors.append(IllegalToken(message))
        return None

    def parse_array(self) -> Optional[tree.ArrayLiteral]:
        elements = self.parse_expression_list(TokenKind.RBRACKET)
        if elements is None:
            return None
        return tree.ArrayLiteral(elements)

    def parse_hash(self) -> Optional[tree.HashLiteral]:
        pairs = []

        while not self._peek_is(TokenKind.RBRACE):
            self._bump()
            key = self.parse_expression()
            if key is None or not self._expect_peek(TokenKind.COLON):
                return None

            self._bump()
            value = self.parse_expression()
            if value is None:
                return None
            pairs.append((key, value))

            if not self._peek_is(TokenKind.RBRACE) and not self._expect_peek(TokenKind.COMMA):
                return None

        self._bump()
        return tree.HashLiteral(tuple(pairs))

    def parse_expression_list(self, end: TokenKind) -> Optional[Tuple[tree.Expr, ...]]:
        """Comma-separated expressions up to end, shared by calls and array literals."""
        if self._peek_is(end):
            self._bump()
            return ()

        self._bump()
        first = self.parse_expression()
        if first is None:
            return None
        items = [first]

        while self._peek_is(TokenKind.COMMA):
            self._bump()
            self._bump()
            item = self.parse_expression()
            if item is None:
                return None
            items.append(item)

        if not self._expect_peek(end):
            return None
        return tuple(items)

    def parse_prefix(self) -> Optional[tree.Prefix]:
        op = self.current_token.kind.value
        self._bump()

        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return tree.Prefix(op, right)

    def parse_infix(self, left: tree.Expr) -> Optional[tree.Infix]:
        op = self.current_token.kind.value
        precedence = PRECEDENCES[self.current_token.kind]
        self._bump()

        right = self.parse_expression(precedence)
        if right is None:
            return None
        return tree.Infix(op, left, right)

    def parse_index(self, left: tree.Expr) -> Optional[tree.Index]:
        self._bump()

        index = self.parse_expression()
        if index is None or not self._expect_peek(TokenKind.RBRACKET):
            return None
        return tree.Index(left, index)

    def parse_dot_access(self, left: tree.Expr) -> Optional[tree.Index]:
        """a.b is sugar for a["b"]."""
        if not self._expect_peek(TokenKind.IDENT):
            return None
        return tree.Index(left, tree.StringLiteral(self.current_token.value))

    def parse_grouped(self) -> Optional[tree.Expr]:
        self._bump()

        expr = self.parse_expression()
        if expr is None or not self._expect_peek(TokenKind.RPAREN):
            return None
        return expr

    def _parse_condition(self) -> Optional[tree.Expr]:
        """Parses `( <expr> ) {`, leaving the current token on the opening brace of the block."""
        if not self._expect_peek(TokenKind.LPAREN):
            return None
        self._bump()

        cond = self.parse_expression()
        if cond is None:
            return None
        if not self._expect_peek(TokenKind.RPAREN) or not self._expect_peek(TokenKind.LBRACE):
            return None
        return cond

    def parse_if(self) -> Optional[tree.If]:
        cond = self._parse_condition()
        if cond is None:
            return None

        consequence = self.parse_block()
        alternative = None

        if self._peek_is(TokenKind.ELSE):
            self._bump()
            if not self._expect_peek(TokenKind.LBRACE):
                return None
            alternative = self.parse_block()

        return tree.If(cond, consequence, alternative)

    def parse_while(self) -> Optional[tree.While]:
        cond = self._parse_condition()
        if cond is None:
            return None
        return tree.While(cond, self.parse_block())

    def parse_func(self) -> Optional[tree.Func]:
        if not self._expect_peek(TokenKind.LPAREN):
            return None

        params = self.parse_func_params()
        if params is None or not self._expect_peek(TokenKind.LBRACE):
            return None
        return tree.Func(params, self.parse_block())

    def parse_func_params(self) -> Optional[Tuple[tree.Ident, ...]]:
        if self._peek_is(TokenKind.RPAREN):
            self._bump()
            return ()

        if not self._expect_peek(TokenKind.IDENT):
            return None
        params = [tree.Ident(self.current_token.value)]

        while self._peek_is(TokenKind.COMMA):
            self._bump()
            if not self._expect_peek(TokenKind.IDENT):
                return None
            params.append(tree.Ident(self.current_token.value))

        if not self._expect_peek(TokenKind.RPAREN):
            return None
        return tuple(params)

    def parse_call(self, func: tree.Expr) -> Optional[tree.Call]:
        args = self.parse_expression_list(TokenKind.RPAREN)
        if args is None:
            return None
        return tree.Call(func, args)


def parse(source: str) -> Tuple[tree.Program, List[ParseError]]:
    """Parses source into a best-effort Program and the list of diagnostics. The parse failed iff the list is
    non-empty.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
