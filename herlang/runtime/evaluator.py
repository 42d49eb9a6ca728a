"""Tree-walking evaluator for herlang.

Evaluation is plain recursion over the AST. Every evaluation step returns either an Object or a Signal; a Signal
(ReturnValue, BreakSignal, ContinueSignal, Error, Terminate) stops the rest of the enclosing block and travels outwards
until something consumes it:

- a function call unwraps ReturnValue into its value,
- a while loop ends on BreakSignal and skips to the next condition check on ContinueSignal,
- the program unwraps ReturnValue; every other Signal becomes the final result.

There is no catch construct, so the first Error anywhere is the result of the whole program. Terminate is never acted
on here: the outermost driver decides what ending the program means.
"""

import sys
from typing import List, Optional

from herlang.runtime.environment import Environment
from herlang.runtime.objects import (BREAK, CONTINUE, NULL, Array, BreakSignal, Builtin, ContinueSignal, Error,
                                     Function, Hash, Int, Object, Result, ReturnValue, Signal, String, is_hashable,
                                     is_truthy, native_bool, wrap_int)
from herlang.syntax import tree


class Evaluator:
    """Evaluates Programs against env, which should already hold the builtins."""
    MAX_DEPTH = 1000      # nested function calls
    FRAMES_PER_CALL = 32  # upper bound of Python frames one herlang call nests, deeply nested operands included

    def __init__(self, env: Environment, max_depth: Optional[int] = None):
        self.env = env
        self.max_depth = max_depth if max_depth is not None else Evaluator.MAX_DEPTH
        self.depth = 0

        self.expression_handlers = {
            tree.Ident: self.eval_identifier,
            tree.IntLiteral: lambda expr, env: Int(expr.value),
            tree.StringLiteral: lambda expr, env: String(expr.value),
            tree.BoolLiteral: lambda expr, env: native_bool(expr.value),
            tree.ArrayLiteral: self.eval_array,
            tree.HashLiteral: self.eval_hash,
            tree.Prefix: self.eval_prefix,
            tree.Infix: self.eval_infix,
            tree.Index: self.eval_index,
            tree.If: self.eval_if,
            tree.While: self.eval_while,
            tree.Func: lambda expr, env: Function(expr.params, expr.body, env),
            tree.Call: self.eval_call,
        }

    def eval(self, program: tree.Program) -> Result:
        """Evaluates program in the root environment. Returns the value of the last statement, or the Signal that cut
        evaluation short (a top-level return is unwrapped into its value).
        """
        self.depth = 0
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + self.max_depth * Evaluator.FRAMES_PER_CALL)  # max_depth is the real bound
        try:
            result = self.eval_block(program, self.env)
        except RecursionError:
            return Error("maximum recursion depth exceeded")
        finally:
            sys.setrecursionlimit(limit)

        if isinstance(result, ReturnValue):
            return result.value
        return result

    def eval_block(self, block: tree.Block, env: Environment) -> Result:
        result = NULL
        for stmt in block:
            if isinstance(stmt, tree.Blank):
                continue
            result = self.eval_statement(stmt, env)
            if isinstance(result, Signal):
                return result
        return result

    def eval_statement(self, stmt: tree.Stmt, env: Environment) -> Result:
        if isinstance(stmt, tree.ExprStmt):
            return self.eval_expression(stmt.expr, env)

        if isinstance(stmt, tree.Let):
            value = self.eval_expression(stmt.value, env)
            if isinstance(value, Signal):
                return value
            env.set(stmt.name.name, value)
            return NULL

        if isinstance(stmt, tree.Return):
            value = self.eval_expression(stmt.value, env)
            if isinstance(value, Signal):
                return value
            return ReturnValue(value)

        if isinstance(stmt, tree.Break):
            return BREAK
        if isinstance(stmt, tree.Continue):
            return CONTINUE
        if isinstance(stmt, tree.Blank):
            return NULL
        raise TypeError(f"unknown statement {stmt!r}")

    def eval_expression(self, expr: tree.Expr, env: Environment) -> Result:
        return self.expression_handlers[type(expr)](expr, env)

    def eval_expressions(self, exprs, env) -> Result:
        """Evaluates exprs left to right. Returns the list of values, or the first Signal."""
        values = []
        for expr in exprs:
            value = self.eval_expression(expr, env)
            if isinstance(value, Signal):
                return value
            values.append(value)
        return values

    def eval_identifier(self, expr: tree.Ident, env: Environment) -> Result:
        value = env.get(expr.name)
        if value is None:
            return Error(f"identifier not found: {expr.name}")
        return value

    def eval_array(self, expr: tree.ArrayLiteral, env: Environment) -> Result:
        elements = self.eval_expressions(expr.elements, env)
        if isinstance(elements, Signal):
            return elements
        return Array(elements)

    def eval_hash(self, expr: tree.HashLiteral, env: Environment) -> Result:
        pairs = {}
        for key_expr, value_expr in expr.pairs:
            key = self.eval_expression(key_expr, env)
            if isinstance(key, Signal):
                return key
            if not is_hashable(key):
                return Error(f"unusable as hash key: {key.TYPENAME}")

            value = self.eval_expression(value_expr, env)
            if isinstance(value, Signal):
                return value
            pairs[key] = value
        return Hash(pairs)

    def eval_prefix(self, expr: tree.Prefix, env: Environment) -> Result:
        right = self.eval_expression(expr.right, env)
        if isinstance(right, Signal):
            return right

        if expr.op == "!":
            return native_bool(not is_truthy(right))
        if isinstance(right, Int):
            if expr.op == "-":
                return Int(wrap_int(-right.value))
            if expr.op == "+":
                return right
        return Error(f"unknown operator: {expr.op}{right.TYPENAME}")

    def eval_infix(self, expr: tree.Infix, env: Environment) -> Result:
        left = self.eval_expression(expr.left, env)
        if isinstance(left, Signal):
            return left
        right = self.eval_expression(expr.right, env)
        if isinstance(right, Signal):
            return right

        if type(left) is not type(right):
            return Error(f"type mismatch: {left.TYPENAME} {expr.op} {right.TYPENAME}")

        if expr.op == "==":
            return native_bool(left == right)
        if expr.op == "!=":
            return native_bool(left != right)
        if isinstance(left, Int):
            return self._eval_integer_infix(expr.op, left.value, right.value)
        if isinstance(left, String) and expr.op == "+":
            return String(left.value + right.value)
        return Error(f"unknown operator: {left.TYPENAME} {expr.op} {right.TYPENAME}")

    @staticmethod
    def _eval_integer_infix(op: str, left: int, right: int) -> Result:
        if op == "+":
            return Int(wrap_int(left + right))
        if op == "-":
            return Int(wrap_int(left - right))
        if op == "*":
            return Int(wrap_int(left * right))
        if op == "/":
            if right == 0:
                return Error("division by zero")
            quotient = abs(left) // abs(right)  # truncates toward zero
            return Int(wrap_int(quotient if (left < 0) == (right < 0) else -quotient))
        if op == "<":
            return native_bool(left < right)
        if op == "<=":
            return native_bool(left <= right)
        if op == ">":
            return native_bool(left > right)
        if op == ">=":
            return native_bool(left >= right)
        return Error(f"unknown operator: INTEGER {op} INTEGER")

    def eval_index(self, expr: tree.Index, env: Environment) -> Result:
        left = self.eval_expression(expr.left, env)
        if isinstance(left, Signal):
            return left
        index = self.eval_expression(expr.index, env)
        if isinstance(index, Signal):
            return index

        if isinstance(left, Array) and isinstance(index, Int):
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL
        if isinstance(left, Hash):
            if not is_hashable(index):
                return Error(f"unusable as hash key: {index.TYPENAME}")
            return left.pairs.get(index, NULL)
        return Error(f"index operator not supported: {left.TYPENAME}[{index.TYPENAME}]")

    def eval_if(self, expr: tree.If, env: Environment) -> Result:
        cond = self.eval_expression(expr.cond, env)
        if isinstance(cond, Signal):
            return cond

        if is_truthy(cond):
            return self.eval_block(expr.consequence, env)
        if expr.alternative is not None:
            return self.eval_block(expr.alternative, env)
        return NULL

    def eval_while(self, expr: tree.While, env: Environment) -> Result:
        while True:
            cond = self.eval_expression(expr.cond, env)
            if isinstance(cond, Signal):
                return cond
            if not is_truthy(cond):
                return NULL

            result = self.eval_block(expr.consequence, env)
            if isinstance(result, BreakSignal):
                return NULL
            if isinstance(result, ContinueSignal):
                continue
            if isinstance(result, Signal):
                return result

    def eval_call(self, expr: tree.Call, env: Environment) -> Result:
        func = self.eval_expression(expr.func, env)
        if isinstance(func, Signal):
            return func

        args = self.eval_expressions(expr.args, env)
        if isinstance(args, Signal):
            return args
        return self.apply(func, args)

    def apply(self, func: Object, args: List[Object]) -> Result:
        """Calls func with already evaluated args."""
        if isinstance(func, Builtin):
            if func.arity != Builtin.VARIADIC and len(args) != func.arity:
                return Error(f"wrong number of arguments to `{func.name}`: want={func.arity}, got={len(args)}")
            return func.function(args)

        if not isinstance(func, Function):
            return Error(f"not a function: {func.TYPENAME}")

        if len(args) != len(func.params):
            return Error(f"wrong number of arguments: want={len(func.params)}, got={len(args)}")
        if self.depth >= self.max_depth:
            return Error("maximum recursion depth exceeded")

        call_env = func.env.enclosed()
        for param, arg in zip(func.params, args):
            call_env.set(param.name, arg)

        self.depth += 1
        try:
            result = self.eval_block(func.body, call_env)
        finally:
            self.depth -= 1

        if isinstance(result, ReturnValue):
            return result.value
        return result
