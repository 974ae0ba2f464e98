"""Syntax node shapes produced by the reader.

Atoms are plain Python data (`Nil`, `Symbol`, `int`, `str`), a proper list is
a Python `list`, and a dotted list is a `DottedList`. `DottedList.items` is
never empty; `(. x)` reads as `x` itself.
"""

from __future__ import annotations

from typing import Any, NamedTuple


class DottedList(NamedTuple):
    items: list
    tail: Any

    def __repr__(self) -> str:
        return f"DottedList({self.items!r}, {self.tail!r})"
