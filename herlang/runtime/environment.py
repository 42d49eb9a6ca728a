"""Lexical scopes. An Environment is shared by reference: the frame that created it and every closure created while it
was active see each other's bindings, including later rebindings of the same name.

Two environments are equal when they bind the same names to equal values and their outer scopes are equal. A closure
stored in its own scope makes that comparison cyclic; a pair of scopes already under comparison counts as equal.
"""

from typing import Dict, Iterator, Mapping, Optional, Set, Tuple

from herlang.runtime.objects import Object
from herlang.syntax.lexical import nfc_normalize

_comparing: Set[Tuple[int, int]] = set()


class Environment:

    def __init__(self, outer: Optional["Environment"] = None, store: Optional[Mapping[str, Object]] = None):
        self.outer = outer
        self.store: Dict[str, Object] = {}
        if store:
            for name, value in store.items():
                self.set(name, value)

    def get(self, name: str) -> Optional[Object]:
        """Innermost binding of name, or None if no enclosing scope binds it."""
        name = nfc_normalize(name)
        env = self
        while env is not None:
            value = env.store.get(name)
            if value is not None:
                return value
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> None:
        """Binds name in this scope, shadowing any outer binding and replacing an existing one here."""
        self.store[nfc_normalize(name)] = value

    def enclosed(self) -> "Environment":
        """New child scope of this one, as created for a function call."""
        return Environment(outer=self)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.store)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Environment):
            return NotImplemented
        pair = (id(self), id(other))
        if pair in _comparing:
            return True
        _comparing.add(pair)
        try:
            return self.store == other.store and self.outer == other.outer
        finally:
            _comparing.discard(pair)

    def __repr__(self):
        return f"Environment({sorted(self.store)}, outer={'yes' if self.outer else 'no'})"
