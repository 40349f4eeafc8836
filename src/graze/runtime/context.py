"""
Execution state for the graze interpreter.

Manages the evaluation stack and the variable environment. Both are
owned by a single Runtime; the stack lives for one instruction, the
environment for the whole run.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .values import Value
from ..errors import EvalError, EvalErrorKind, error_variable_not_found


class Stack:
    """
    The evaluation stack.

    Void values are silently dropped on push.
    """

    def __init__(self):
        self._items: List[Value] = []

    def push(self, value: Value) -> None:
        if value.is_void:
            return
        self._items.append(value)

    def pop(self) -> Value:
        """Pop the most recently pushed value."""
        if not self._items:
            raise EvalError(EvalErrorKind.STACK_UNDERFLOW)
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    @property
    def values(self) -> List[Value]:
        """A copy of the stack contents, bottom first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"


@dataclass
class Environment:
    """
    The global variable scope.

    Last write wins; there is no shadowing and no nested scope.
    """
    variables: Dict[str, Value] = field(default_factory=dict)

    def get(self, name: str) -> Optional[Value]:
        """Look up a variable, or None if unbound."""
        return self.variables.get(name)

    def lookup(self, name: str) -> Value:
        """Look up a variable, failing if unbound."""
        value = self.variables.get(name)
        if value is None:
            raise error_variable_not_found(name)
        return value

    def set(self, name: str, value: Value) -> None:
        """Bind a variable, replacing any previous binding."""
        self.variables[name] = value

    def contains(self, name: str) -> bool:
        return name in self.variables

    def __len__(self) -> int:
        return len(self.variables)
