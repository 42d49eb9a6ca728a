import unittest

from herlang.syntax.lexical import Lexer, escape, is_id_start, tokenize, unescape
from herlang.syntax.token import BLANK, EOF, Token, TokenKind


def kinds(source):
    return [token.kind for token in tokenize(source)]


class LexerTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "=": TokenKind.ASSIGN, "==": TokenKind.EQ, "!": TokenKind.BANG, "!=": TokenKind.NE,
            "<": TokenKind.LT, "<=": TokenKind.LE, ">": TokenKind.GT, ">=": TokenKind.GE,
            "+": TokenKind.PLUS, "-": TokenKind.MINUS, "*": TokenKind.ASTERISK, "/": TokenKind.SLASH,
            ".": TokenKind.DOT, ":": TokenKind.COLON,
        }
        for case, result in cases.items():
            self.assertEqual([result, TokenKind.EOF], kinds(case), case)

        self.assertEqual([TokenKind.EQ, TokenKind.ASSIGN, TokenKind.EOF], kinds("==="))

    def test_program(self):
        source = "let five = 5;\nlet add = fn(x, y) { x + y };\nadd(five, 10);"
        expected = [
            Token(TokenKind.LET), Token(TokenKind.IDENT, "five"), Token(TokenKind.ASSIGN),
            Token(TokenKind.INT, 5), Token(TokenKind.SEMICOLON),
            Token(TokenKind.LET), Token(TokenKind.IDENT, "add"), Token(TokenKind.ASSIGN), Token(TokenKind.FUNC),
            Token(TokenKind.LPAREN), Token(TokenKind.IDENT, "x"), Token(TokenKind.COMMA),
            Token(TokenKind.IDENT, "y"), Token(TokenKind.RPAREN), Token(TokenKind.LBRACE),
            Token(TokenKind.IDENT, "x"), Token(TokenKind.PLUS), Token(TokenKind.IDENT, "y"),
            Token(TokenKind.RBRACE), Token(TokenKind.SEMICOLON),
            Token(TokenKind.IDENT, "add"), Token(TokenKind.LPAREN), Token(TokenKind.IDENT, "five"),
            Token(TokenKind.COMMA), Token(TokenKind.INT, 10), Token(TokenKind.RPAREN), Token(TokenKind.SEMICOLON),
            EOF,
        ]
        self.assertEqual(expected, tokenize(source))

    def test_blank_lines(self):
        cases = {
            "\n": [EOF],
            "\n\n": [BLANK, EOF],
            "\n\n\n": [BLANK, BLANK, EOF],
            "a\nb": [Token(TokenKind.IDENT, "a"), Token(TokenKind.IDENT, "b"), EOF],
            "a\n\nb": [Token(TokenKind.IDENT, "a"), BLANK, Token(TokenKind.IDENT, "b"), EOF],
            "a\n  \t\nb": [Token(TokenKind.IDENT, "a"), Token(TokenKind.IDENT, "b"), EOF],  # not blank
        }
        for case, result in cases.items():
            self.assertEqual(result, tokenize(case), repr(case))

    def test_keywords(self):
        cases = {
            "fn": Token(TokenKind.FUNC),
            "想要你一个态度": Token(TokenKind.FUNC),
            "let": Token(TokenKind.LET),
            "宝宝你是一个": Token(TokenKind.LET),
            "true": Token(TokenKind.BOOL, True),
            "那么普通却那么自信": Token(TokenKind.BOOL, True),
            "false": Token(TokenKind.BOOL, False),
            "那咋了": Token(TokenKind.BOOL, False),
            "姐妹们觉得呢": Token(TokenKind.IF),
            "抛开事实不谈": Token(TokenKind.IF),
            "那能一样吗": Token(TokenKind.ELSE),
            "我接受不等于我同意": Token(TokenKind.ELSE),
            "你再说一遍": Token(TokenKind.WHILE),
            "下头": Token(TokenKind.BREAK),
            "continue": Token(TokenKind.CONTINUE),
            "反手举报": Token(TokenKind.RETURN),
            "我同意": Token(TokenKind.EQ),
            "我接受": Token(TokenKind.EQ),
            "拼单": Token(TokenKind.PLUS),
            "接": Token(TokenKind.PLUS),
            "差异": Token(TokenKind.MINUS),
            "种草": Token(TokenKind.ASTERISK),
            "踩雷": Token(TokenKind.SLASH),
            "避雷": Token(TokenKind.SLASH),
            "微胖": Token(TokenKind.STRING, "180kg"),
        }
        for case, result in cases.items():
            self.assertEqual([result, EOF], tokenize(case), case)

    def test_identifiers(self):
        should_pass = ["foo", "_bar", "$baz", "x1", "¥money", "姐妹", "café", "😀", "a😀b"]
        for case in should_pass:
            self.assertEqual([Token(TokenKind.IDENT, case), EOF], tokenize(case), case)

        self.assertFalse(is_id_start("1"))
        self.assertFalse(is_id_start("#"))

    def test_identifiers_are_nfc_normalized(self):
        decomposed = "cafe\u0301"
        self.assertEqual([Token(TokenKind.IDENT, "caf\u00e9"), EOF], tokenize(decomposed))

    def test_integers(self):
        self.assertEqual([Token(TokenKind.INT, 9223372036854775807), EOF], tokenize("9223372036854775807"))

        overflow = tokenize("9223372036854775808")
        self.assertEqual(TokenKind.ILLEGAL, overflow[0].kind)
        self.assertIn("does not fit in 64 bits", overflow[0].value)

    def test_strings(self):
        cases = {
            "\"hello world\"": "hello world",
            "\"\"": "",
            "\"a\\nb\"": "a\nb",
            "\"tab\\t\"": "tab\t",
            "\"quote \\\" inside\"": "quote \" inside",
            "\"\\x41\"": "A",
            "\"\\u{1F600}\"": "\U0001F600",
            "\"\\q\"": "q",
        }
        for case, result in cases.items():
            self.assertEqual([Token(TokenKind.STRING, result), EOF], tokenize(case), case)

    def test_unterminated_string(self):
        tokens = tokenize("\"abc")
        self.assertEqual(Token(TokenKind.ILLEGAL, "unterminated string literal"), tokens[0])
        self.assertEqual(EOF, tokens[-1])

    def test_illegal_character(self):
        self.assertEqual([Token(TokenKind.ILLEGAL, "#"), Token(TokenKind.INT, 1), EOF], tokenize("#1"))

    def test_eof_is_sticky(self):
        lexer = Lexer("x")
        self.assertEqual(Token(TokenKind.IDENT, "x"), lexer.next_token())
        for __ in range(3):
            self.assertEqual(EOF, lexer.next_token())

    def test_escape(self):
        cases = {"abc": "\"abc\"", "a\nb": "\"a\\nb\"", "say \"hi\"": "\"say \\\"hi\\\"\"", "\x01": "\"\\u{1}\""}
        for case, result in cases.items():
            self.assertEqual(result, escape(case))
            self.assertEqual(case, unescape(result[1:-1]))


if __name__ == '__main__':
    unittest.main()
