import unittest

from herlang import interpreter
from herlang.lang.error import GenericException
from herlang.runtime.builtins import new_builtins
from herlang.syntax.parser import ReservedName


class InterpreterTestCase(unittest.TestCase):

    def test_evaluate(self):
        cases = {
            "": "null",
            "1 + 2 * 3": "7",
            "let x = \"a\"; x + \"b\"": "\"ab\"",
            "微胖": "\"180kg\"",
            "len(5)": "啊啊啊啊啊啊啊啊(argument to `len` not supported, got INTEGER)",
            "len(\"ab\")": "2",
            "[1, 2][10]": "null",
            "{\"a\": 1}[\"b\"]": "null",
            "her;": "啊啊啊啊啊啊啊啊(identifier not found: her)",
            "break;": "[break statement]",
            "continue": "[continue statement]",
            "{[1]: 2}": "啊啊啊啊啊啊啊啊(unusable as hash key: ARRAY)",
            "let f = fn(x) { fn() { x } }; f(5)()": "5",
            "let c = fn() { 0 }; let g = fn() { c }; let c = fn() { 1 }; g()()": "1",
        }
        for case, result in cases.items():
            self.assertEqual(result, interpreter.evaluate(case), case)

    def test_diagnostics(self):
        self.assertEqual(str(ReservedName("her")) + "\n", interpreter.evaluate("let her = 1;"))

        diagnostics = interpreter.evaluate("let = 1;\n* 2;")
        self.assertTrue(diagnostics.endswith("\n"))
        self.assertEqual(3, len(diagnostics.splitlines()))

    def test_quit(self):
        with self.assertRaises(SystemExit) as context:
            interpreter.evaluate("quit(3)")
        self.assertEqual(3, context.exception.code)

    def test_custom_builtins(self):
        output = []
        self.assertEqual("null", interpreter.evaluate("puts(1, 2)", builtins=new_builtins(output=output.append)))
        self.assertEqual(["1", "2"], output)

        self.assertEqual("啊啊啊啊啊啊啊啊(identifier not found: puts)", interpreter.evaluate("puts(1)", builtins={}))

    def test_max_depth(self):
        source = "let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(20)"
        self.assertEqual("0", interpreter.evaluate(source))
        self.assertEqual("啊啊啊啊啊啊啊啊(maximum recursion depth exceeded)", interpreter.evaluate(source, max_depth=10))

        total = "let f = fn(n) { if (n == 0) { 0 } else { n + f(n - 1) } }; f(100)"
        self.assertEqual("5050", interpreter.evaluate(total))

    def test_format(self):
        self.assertEqual("let x = [1, 2];\nx[0] + 1;\n", interpreter.format("宝宝你是一个 x=[1,2]\nx[0] 拼单 1"))
        self.assertRaises(GenericException, interpreter.format, "let = 1")


if __name__ == '__main__':
    unittest.main()
