"""Lexical analysis for herlang: converts a Unicode string into a stream of Tokens.

The lexer owns the whitespace policy (a lone newline is an ordinary separator, a newline directly followed by another
newline produces a BLANK token for the formatter), identifier normalization (every identifier is NFC-normalized, so
visually identical names with different encodings are the same name) and string unescaping.

Lexing never fails: anything the lexer cannot make sense of becomes an ILLEGAL token, which the parser reports.
"""

import unicodedata
from typing import Iterator, List

from herlang.syntax.token import BLANK, EOF, Token, TokenKind, lookup_identifier

INT_MAX = 2 ** 63 - 1

# Pattern_White_Space minus "\n"
WHITESPACE = frozenset("\t\x0b\x0c\r \x85\u200e\u200f\u2028\u2029")

# ranges (inclusive) of characters that may show up in emoji
EMOJI_RANGES = [
    (0x1F000, 0x1FAFF),  # big SMP chunk, includes modifiers
    (0x2190, 0x21FF),    # arrows
    (0x2300, 0x23FF),
    (0x25A0, 0x25FF),
    (0x2600, 0x26FF),
    (0x2700, 0x27FF),    # dingbats
]
EMOJI_SINGLES = frozenset("\u200d\ufe0e\ufe0f\u2139")  # ZWJ, VS15, VS16, information source

SINGLE_CHAR_TOKENS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ".": TokenKind.DOT,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
}

# first char: (kind without "=", kind with "=" following)
TWO_CHAR_TOKENS = {
    "=": (TokenKind.ASSIGN, TokenKind.EQ),
    "!": (TokenKind.BANG, TokenKind.NE),
    "<": (TokenKind.LT, TokenKind.LE),
    ">": (TokenKind.GT, TokenKind.GE),
}

ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", "\"": "\"", "'": "'"}
REVERSE_ESCAPES = {"\n": "\\n", "\t": "\\t", "\r": "\\r", "\0": "\\0", "\\": "\\\\", "\"": "\\\""}


def nfc_normalize(name: str) -> str:
    if unicodedata.is_normalized("NFC", name):
        return name
    return unicodedata.normalize("NFC", name)


def is_whitespace(char: str) -> bool:
    return char in WHITESPACE


def is_emoji_like(char: str) -> bool:
    """Whether char may show up in an emoji. Only single characters are checked, never whole sequences."""
    if char < "\x7f":
        return False
    code = ord(char)
    return char in EMOJI_SINGLES or any(low <= code <= high for low, high in EMOJI_RANGES)


def is_id_start(char: str) -> bool:
    if char.isascii():
        return char.isalpha() or char in "_$"
    return char == "¥" or char.isidentifier() or is_emoji_like(char)


def is_id_continue(char: str) -> bool:
    if char.isascii():
        return char.isalnum() or char in "_$"
    return char == "¥" or ("a" + char).isidentifier() or is_emoji_like(char)


def unescape(text: str) -> str:
    """Processes backslash escapes in the body of a string literal. An escape the language does not define stands for
    the escaped character itself.
    """
    result = []
    idx = 0
    while idx < len(text):
        char = text[idx]
        if char != "\\" or idx + 1 == len(text):
            result.append(char)
            idx += 1
            continue

        escaped = text[idx + 1]
        idx += 2

        if escaped == "x" and len(text[idx:idx + 2]) == 2 and _is_hex(text[idx:idx + 2]):
            result.append(chr(int(text[idx:idx + 2], 16)))
            idx += 2
        elif escaped == "u" and text[idx:idx + 1] == "{" and "}" in text[idx:]:
            close = text.index("}", idx)
            digits = text[idx + 1:close]
            if _is_hex(digits) and len(digits) <= 6 and int(digits, 16) <= 0x10FFFF:
                result.append(chr(int(digits, 16)))
                idx = close + 1
            else:
                result.append(escaped)
        else:
            result.append(ESCAPES.get(escaped, escaped))

    return "".join(result)


def escape(text: str) -> str:
    """Quoted, escaped rendering of text, used whenever a string is shown as a repr."""
    body = []
    for char in text:
        if char in REVERSE_ESCAPES:
            body.append(REVERSE_ESCAPES[char])
        elif unicodedata.category(char) in ("Cc", "Cf", "Zl", "Zp"):
            body.append(f"\\u{{{ord(char):x}}}")
        else:
            body.append(char)
    return "\"" + "".join(body) + "\""


def _is_hex(text):
    return len(text) > 0 and all(char in "0123456789abcdefABCDEF" for char in text)


class Lexer:
    """Produces Tokens from source on demand. Call next_token until it returns EOF, or iterate over the lexer."""
    EOF_CHAR = ""

    def __init__(self, source: str):
        self.source = source
        self.position = 0

    def _current_character(self) -> str:
        if self.position >= len(self.source):
            return Lexer.EOF_CHAR
        return self.source[self.position]

    def _peek_character(self) -> str:
        if self.position + 1 >= len(self.source):
            return Lexer.EOF_CHAR
        return self.source[self.position + 1]

    def _is_eof(self) -> bool:
        return self.position >= len(self.source)

    def _advance_character(self) -> None:
        if not self._is_eof():
            self.position += 1

    def _skip_whitespace(self) -> None:
        while not self._is_eof() and is_whitespace(self._current_character()):
            self._advance_character()

    def next_token(self) -> Token:
        while True:
            self._skip_whitespace()
            if self._current_character() != "\n":
                break

            # only the first newline of a blank line is consumed, so "\n\n\n" produces two BLANKs
            self._advance_character()
            if self._current_character() == "\n":
                return BLANK

        if self._is_eof():
            return EOF

        char = self._current_character()

        if char == "\"":
            return self._lex_string()
        if char.isascii() and char.isdigit():
            return self._lex_number()
        if is_id_start(char):
            return self._lex_keyword_or_identifier()

        if char in TWO_CHAR_TOKENS:
            single, double = TWO_CHAR_TOKENS[char]
            if self._peek_character() == "=":
                self._advance_character()
                self._advance_character()
                return Token(double)
            self._advance_character()
            return Token(single)

        self._advance_character()
        if char in SINGLE_CHAR_TOKENS:
            return Token(SINGLE_CHAR_TOKENS[char])
        return Token(TokenKind.ILLEGAL, char)

    def _lex_keyword_or_identifier(self) -> Token:
        start = self.position
        while not self._is_eof() and is_id_continue(self._current_character()):
            self._advance_character()

        text = self.source[start:self.position]
        keyword = lookup_identifier(text)
        if keyword is not None:
            return keyword
        return Token(TokenKind.IDENT, nfc_normalize(text))

    def _lex_number(self) -> Token:
        start = self.position
        while not self._is_eof() and self._current_character() in "0123456789":
            self._advance_character()

        text = self.source[start:self.position]
        number = int(text)
        if number > INT_MAX:
            return Token(TokenKind.ILLEGAL, f"integer literal {text} does not fit in 64 bits")
        return Token(TokenKind.INT, number)

    def _lex_string(self) -> Token:
        self._advance_character()  # opening quote
        start = self.position
        backslash = False

        while not self._is_eof():
            char = self._current_character()
            if backslash:
                backslash = False
            elif char == "\\":
                backslash = True
            elif char == "\"":
                literal = self.source[start:self.position]
                self._advance_character()
                return Token(TokenKind.STRING, unescape(literal))
            self._advance_character()

        return Token(TokenKind.ILLEGAL, "unterminated string literal")

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return


def tokenize(source: str) -> List[Token]:
    """Returns every token of source, ending with EOF."""
    return list(Lexer(source))
