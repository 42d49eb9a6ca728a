import unittest

from herlang.runtime.environment import Environment
from herlang.runtime.objects import (BREAK, CONTINUE, FALSE, NULL, TRUE, Array, Builtin, Error, Function, Hash, Int,
                                     ReturnValue, Signal, String, Terminate, display, is_hashable, is_truthy, wrap_int)


class ObjectsTestCase(unittest.TestCase):

    def test_inspect(self):
        cases = [  # not a dict, most of these are unhashable
            (Int(-3), "-3"),
            (String("hi"), "\"hi\""),
            (String("a\"b\n"), "\"a\\\"b\\n\""),
            (TRUE, "true"),
            (FALSE, "false"),
            (NULL, "null"),
            (Array([Int(1), String("a")]), "[1, \"a\"]"),
            (Hash({String("a"): Int(1), Int(2): TRUE}), "{\"a\": 1, 2: true}"),
            (Function((), (), Environment()), "fn() { ... }"),
            (Builtin("len", 1, len), "[builtin function]"),
        ]
        for case, result in cases:
            self.assertEqual(result, case.inspect())
            self.assertEqual(result, str(case))

    def test_signals(self):
        cases = {
            ReturnValue(Int(1)): "ReturnValue(1)",
            BREAK: "[break statement]",
            CONTINUE: "[continue statement]",
            Error("boom"): "啊啊啊啊啊啊啊啊(boom)",
            Terminate(3): "[quit 3]",
        }
        for case, result in cases.items():
            self.assertIsInstance(case, Signal)
            self.assertEqual(result, case.inspect())

    def test_display(self):
        self.assertEqual("hi", display(String("hi")))
        self.assertEqual("[\"hi\"]", display(Array([String("hi")])))
        self.assertEqual("5", display(Int(5)))

    def test_equality(self):
        self.assertEqual(Array([Int(1)]), Array([Int(1)]))
        self.assertNotEqual(Array([Int(1)]), Array([Int(2)]))
        self.assertEqual(Hash({Int(1): TRUE, Int(2): FALSE}), Hash({Int(2): FALSE, Int(1): TRUE}))
        self.assertNotEqual(Int(1), String("1"))

        env = Environment()
        self.assertEqual(Function((), (), env), Function((), (), env))
        self.assertEqual(Function((), (), env), Function((), (), Environment()))
        self.assertNotEqual(Function((), (), env), Function((), (), Environment(store={"x": Int(1)})))

    def test_hashable(self):
        should_pass = [Int(1), String("a"), TRUE]
        for case in should_pass:
            self.assertTrue(is_hashable(case))
            hash(case)

        should_fail = [Array([]), Hash({}), NULL, Function((), (), Environment())]
        for case in should_fail:
            self.assertFalse(is_hashable(case))
        self.assertRaises(TypeError, hash, Array([]))
        self.assertRaises(TypeError, hash, Hash({}))

    def test_truthiness(self):
        self.assertFalse(is_truthy(FALSE))
        self.assertFalse(is_truthy(NULL))
        for case in [TRUE, Int(0), String(""), Array([]), Hash({})]:
            self.assertTrue(is_truthy(case), case)

    def test_wrap_int(self):
        cases = {0: 0, 2 ** 63 - 1: 2 ** 63 - 1, 2 ** 63: -2 ** 63, -2 ** 63 - 1: 2 ** 63 - 1}
        for case, result in cases.items():
            self.assertEqual(result, wrap_int(case))


if __name__ == '__main__':
    unittest.main()
