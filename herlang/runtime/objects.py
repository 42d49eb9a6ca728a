"""Runtime values for herlang.

Two families live here:

- Objects, the values a program can store in a binding or a container: Int, String, Bool, Array, Hash, Function,
  Builtin and Null.
- Signals, the results that only steer evaluation: ReturnValue, BreakSignal, ContinueSignal, Error and Terminate.
  A Signal is never an Object, so it can never end up inside a binding, an Array or a Hash.

Every value has one canonical rendering, inspect(). Strings inspect quoted and escaped; display() is the raw form used
when a value is printed at top level. Equality is structural within a kind. Only Int, Bool and String are hashable;
hashing anything else raises TypeError, which keeps them out of Hash keys.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple, Union

from herlang.syntax import tree
from herlang.syntax.lexical import escape

INT_BITS = 64


def wrap_int(value: int) -> int:
    """Wraps value into the signed 64 bit range."""
    return (value + 2 ** (INT_BITS - 1)) % 2 ** INT_BITS - 2 ** (INT_BITS - 1)


class Object(ABC):
    """Superclass of every storable runtime value."""
    TYPENAME = "OBJECT"

    @abstractmethod
    def inspect(self) -> str:
        """Canonical rendering, used for reprs and inside containers."""

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Int(Object):
    TYPENAME = "INTEGER"
    value: int

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class String(Object):
    TYPENAME = "STRING"
    value: str

    def inspect(self):
        return escape(self.value)


@dataclass(frozen=True)
class Bool(Object):
    TYPENAME = "BOOLEAN"
    value: bool

    def inspect(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Null(Object):
    TYPENAME = "NULL"

    def inspect(self):
        return "null"


@dataclass
class Array(Object):
    TYPENAME = "ARRAY"
    elements: List[Object] = field(default_factory=list)

    def inspect(self):
        return "[" + ", ".join(element.inspect() for element in self.elements) + "]"


@dataclass
class Hash(Object):
    """Mapping of hashable Objects to Objects. Keeps insertion order for display, but two Hashes with the same pairs
    are equal in any order.
    """
    TYPENAME = "HASH"
    pairs: Dict[Object, Object] = field(default_factory=dict)

    def inspect(self):
        return "{" + ", ".join(f"{key.inspect()}: {value.inspect()}" for key, value in self.pairs.items()) + "}"


@dataclass(eq=False)
class Function(Object):
    """A closure: the function literal plus the environment it was created in (shared, never copied). Two closures are
    equal when their literals are equal and their environments are equal.
    """
    TYPENAME = "FUNCTION"
    params: Tuple[tree.Ident, ...]
    body: tree.Block
    env: "Environment"

    def inspect(self):
        return "fn(" + ", ".join(param.name for param in self.params) + ") { ... }"

    def __eq__(self, other):
        return isinstance(other, Function) and self.params == other.params and self.body == other.body \
            and self.env == other.env


@dataclass(eq=False)
class Builtin(Object):
    """Native function. arity is the exact number of arguments, or VARIADIC."""
    TYPENAME = "BUILTIN"
    VARIADIC = -1
    name: str
    arity: int
    function: Callable[[List[Object]], Union[Object, "Signal"]]

    def inspect(self):
        return "[builtin function]"

    def __eq__(self, other):
        return isinstance(other, Builtin) and self.function is other.function


NULL = Null()
TRUE = Bool(True)
FALSE = Bool(False)

HASHABLE = (Int, Bool, String)


def native_bool(value: bool) -> Bool:
    return TRUE if value else FALSE


def is_hashable(obj) -> bool:
    return isinstance(obj, HASHABLE)


def is_truthy(obj) -> bool:
    """false and null are falsy, every other value is truthy."""
    return obj not in (FALSE, NULL)


def display(obj) -> str:
    """Top-level rendering: strings are written raw, everything else as its inspect()."""
    if isinstance(obj, String):
        return obj.value
    return obj.inspect()


class Signal(ABC):
    """Superclass of evaluation results that short-circuit the enclosing block."""

    @abstractmethod
    def inspect(self) -> str:
        ...

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class ReturnValue(Signal):
    value: Object

    def inspect(self):
        return f"ReturnValue({self.value.inspect()})"


@dataclass(frozen=True)
class BreakSignal(Signal):

    def inspect(self):
        return "[break statement]"


@dataclass(frozen=True)
class ContinueSignal(Signal):

    def inspect(self):
        return "[continue statement]"


@dataclass(frozen=True)
class Error(Signal):
    message: str

    def inspect(self):
        return f"啊啊啊啊啊啊啊啊({self.message})"


@dataclass(frozen=True)
class Terminate(Signal):
    """Request to end the host process. Only the outermost driver acts on it."""
    code: int = 0

    def inspect(self):
        return f"[quit {self.code}]"


BREAK = BreakSignal()
CONTINUE = ContinueSignal()

Result = Union[Object, Signal]
