"""herlang interpreter.

For reference:
- "herlang": a small dynamically typed, expression oriented language with integers, strings, booleans, arrays, hashes
  and first-class closures. Every keyword has a plain spelling and a localized one.

Basic program flow:
    1. Lexer: turns source text into Tokens, folding the localized keyword spellings into the same tokens as the plain
       ones (see herlang/syntax/lexical.py and herlang/syntax/token.py)
    2. Parser: Pratt parser that builds an immutable AST and collects every diagnostic instead of stopping at the
       first one (see herlang/syntax/parser.py)
    3. Evaluator: walks the AST in an environment holding the builtins. Runtime failures are Error values, not
       exceptions (see herlang/runtime/evaluator.py)

The two functions below are the embedding entry points. The command line driver (herlang/main.py) goes through
herlang/lang/session.py instead, which reports the same failures through the ErrorHandler.
"""

from herlang.lang.error import GenericException, escape_braces
from herlang.runtime.builtins import new_builtins
from herlang.runtime.environment import Environment
from herlang.runtime.evaluator import Evaluator
from herlang.runtime.objects import Terminate
from herlang.syntax.formatter import Formatter
from herlang.syntax.parser import parse


def evaluate(source, builtins=None, max_depth=None):
    """Runs source in a fresh environment and returns the rendering of its result. If source does not parse, the
    diagnostics are returned instead, one per line. A call to quit raises SystemExit with its code.
    """
    program, errors = parse(source)
    if errors:
        return "".join(f"{error}\n" for error in errors)

    env = Environment(store=builtins if builtins is not None else new_builtins())
    result = Evaluator(env, max_depth).eval(program)

    if isinstance(result, Terminate):
        raise SystemExit(result.code)
    return result.inspect()


def format(source):
    """Returns source in canonical layout. Raises GenericException if source does not parse."""
    program, errors = parse(source)
    if errors:
        raise GenericException("\n".join(escape_braces(error) for error in errors), diagnosis=False)
    return Formatter().format(program)

