from __future__ import annotations

from typing import ClassVar


class Symbol:
    """An identifier. Symbols are interned: equal names give the same object."""

    __slots__ = ("name",)
    _table: ClassVar[dict[str, Symbol]] = {}

    def __new__(cls, name: str) -> Symbol:
        sym = cls._table.get(name)
        if sym is None:
            sym = super().__new__(cls)
            sym.name = name
            cls._table[name] = sym
        return sym

    def __reduce__(self):
        return Symbol, (self.name,)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name
