import unittest

from herlang.runtime.environment import Environment
from herlang.runtime.objects import Function, Int


class EnvironmentTestCase(unittest.TestCase):

    def test_get_and_set(self):
        env = Environment()
        self.assertIsNone(env.get("x"))

        env.set("x", Int(1))
        self.assertEqual(Int(1), env.get("x"))
        self.assertIn("x", env)

        env.set("x", Int(2))
        self.assertEqual(Int(2), env.get("x"))

    def test_chain(self):
        outer = Environment(store={"x": Int(1), "y": Int(2)})
        inner = outer.enclosed()
        inner.set("x", Int(10))

        self.assertEqual(Int(10), inner.get("x"))
        self.assertEqual(Int(2), inner.get("y"))
        self.assertEqual(Int(1), outer.get("x"))
        self.assertEqual(["x"], list(inner))

    def test_shared_by_reference(self):
        outer = Environment()
        inner = outer.enclosed()
        outer.set("late", Int(3))
        self.assertEqual(Int(3), inner.get("late"))

    def test_names_are_normalized(self):
        env = Environment()
        env.set("cafe\u0301", Int(1))
        self.assertEqual(Int(1), env.get("caf\u00e9"))

        env = Environment(store={"caf\u00e9": Int(2)})
        self.assertEqual(Int(2), env.get("cafe\u0301"))
        self.assertIn("cafe\u0301", env)

    def test_equality(self):
        self.assertEqual(Environment(store={"x": Int(1)}), Environment(store={"x": Int(1)}))
        self.assertNotEqual(Environment(store={"x": Int(1)}), Environment(store={"x": Int(2)}))
        self.assertNotEqual(Environment(store={"x": Int(1)}), Environment(store={"y": Int(1)}))

        outer = Environment(store={"x": Int(1)})
        self.assertEqual(outer.enclosed(), outer.enclosed())
        self.assertNotEqual(outer.enclosed(), Environment())

    def test_cyclic_equality(self):
        first, second = Environment(), Environment()
        first.set("g", Function((), (), first))
        second.set("g", Function((), (), second))
        self.assertEqual(first, second)

        second.set("x", Int(1))
        self.assertNotEqual(first, second)


if __name__ == '__main__':
    unittest.main()
