"""The cons cell and structural equality over runtime values."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from klisp.types.nil import Nil


class Pair:
    """An immutable (head . tail) cell.

    Cells are never mutated after construction, so any number of lists may
    share a tail or an element without copying.
    """

    __slots__ = ("head", "tail")

    def __init__(self, head: Any, tail: Any):
        object.__setattr__(self, "head", head)
        object.__setattr__(self, "tail", tail)

    def __setattr__(self, name, value):
        raise AttributeError("Pair is immutable")

    @classmethod
    def from_list(cls, values: Iterable[Any], tail: Any = Nil) -> Any:
        """Build a chain of pairs from `values`, ending in `tail` (Nil by default)."""
        result = tail
        for value in reversed(list(values)):
            result = cls(value, result)
        return result

    def __iter__(self) -> Iterator[Any]:
        """Iterate over heads along the spine, stopping at the first non-pair tail."""
        cell: Any = self
        while isinstance(cell, Pair):
            yield cell.head
            cell = cell.tail

    def is_proper(self) -> bool:
        cell: Any = self
        while isinstance(cell, Pair):
            cell = cell.tail
        return cell is Nil

    def __eq__(self, other: object) -> bool:
        return is_equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from klisp.printer import to_string
        return to_string(self)


def is_equal(a: Any, b: Any) -> bool:
    """Deep structural equality for Lisp values.

    Pairs compare element-wise; atoms compare by variant and payload, so `#t`
    never equals `1`. Procedures are only equal to themselves.
    """
    while True:
        if a is b:
            return True
        if isinstance(a, Pair) and isinstance(b, Pair):
            if not is_equal(a.head, b.head):
                return False
            a, b = a.tail, b.tail
            continue
        if type(a) is not type(b):
            return False
        return a == b
