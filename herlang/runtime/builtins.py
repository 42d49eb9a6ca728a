"""Standard builtin functions.

Every builtin is registered under a plain name and, for most of them, a localized alias bound to the very same Builtin.
The table is plain data: a host can add bindings or override any of them (typically the output functions) before
handing it to an Evaluator.
"""

from typing import Callable, Dict, List

from herlang.runtime.objects import (NULL, Array, Builtin, Error, Int, Object, String, Terminate, display,
                                     wrap_int)

Output = Callable[[str], None]

# plain name: localized alias
ALIASES = {
    "quit": "哼",
    "puts": "小作文",
    "print": "聚焦",
    "repr": "复用",
    "str": "疏通",
    "atoi": "抹零",
}


def builtin_len(args: List[Object]):
    arg, = args
    if isinstance(arg, String):
        return Int(len(arg.value))
    if isinstance(arg, Array):
        return Int(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.TYPENAME}")


def builtin_first(args):
    arg, = args
    if not isinstance(arg, Array):
        return Error(f"argument to `first` must be ARRAY, got {arg.TYPENAME}")
    return arg.elements[0] if arg.elements else NULL


def builtin_last(args):
    arg, = args
    if not isinstance(arg, Array):
        return Error(f"argument to `last` must be ARRAY, got {arg.TYPENAME}")
    return arg.elements[-1] if arg.elements else NULL


def builtin_rest(args):
    arg, = args
    if not isinstance(arg, Array):
        return Error(f"argument to `rest` must be ARRAY, got {arg.TYPENAME}")
    return Array(arg.elements[1:]) if arg.elements else NULL


def builtin_push(args):
    array, element = args
    if not isinstance(array, Array):
        return Error(f"argument to `push` must be ARRAY, got {array.TYPENAME}")
    return Array(array.elements + [element])


def builtin_repr(args):
    arg, = args
    return String(arg.inspect())


def builtin_str(args):
    arg, = args
    return String(display(arg))


def builtin_atoi(args):
    arg, = args
    if not isinstance(arg, String):
        return Error(f"argument to `atoi` must be STRING, got {arg.TYPENAME}")

    text = arg.value
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        return Error(f"argument to `atoi` must be valid digits, got {arg.inspect()}")

    number = int(text)
    if wrap_int(number) != number:
        return Error(f"argument to `atoi` does not fit in 64 bits, got {arg.inspect()}")
    return Int(number)


def builtin_quit(args):
    if not args:
        return Terminate(0)
    if len(args) > 1:
        return Error(f"too many arguments to `quit` (want 0 or 1, got {len(args)})")

    code, = args
    if not isinstance(code, Int):
        return Error(f"argument to `quit` must be INTEGER, got {code.TYPENAME}")
    return Terminate(code.value)


def make_puts(output: Output):

    def builtin_puts(args):
        for arg in args:
            output(arg.inspect())
        return NULL

    return builtin_puts


def make_print(output: Output):

    def builtin_print(args):
        arg, = args
        if not isinstance(arg, String):
            return Error(f"argument to `print` must be STRING, got {arg.TYPENAME}")
        output(arg.value)
        return NULL

    return builtin_print


def new_builtins(output: Output = print) -> Dict[str, Builtin]:
    """Returns the standard builtin table. output receives one line of text per call of puts/print."""
    table = [
        Builtin("len", 1, builtin_len),
        Builtin("first", 1, builtin_first),
        Builtin("last", 1, builtin_last),
        Builtin("rest", 1, builtin_rest),
        Builtin("push", 2, builtin_push),
        Builtin("puts", Builtin.VARIADIC, make_puts(output)),
        Builtin("quit", Builtin.VARIADIC, builtin_quit),
        Builtin("print", 1, make_print(output)),
        Builtin("repr", 1, builtin_repr),
        Builtin("str", 1, builtin_str),
        Builtin("atoi", 1, builtin_atoi),
    ]

    builtins = {}
    for builtin in table:
        builtins[builtin.name] = builtin
        if builtin.name in ALIASES:
            builtins[ALIASES[builtin.name]] = builtin
    return builtins
