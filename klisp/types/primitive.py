from __future__ import annotations

from typing import Callable

from klisp import LispValue


class Primitive:
    """A built-in procedure. Receives the caller's env and already-evaluated args."""

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: Callable[..., LispValue]):
        self.name = name
        self.fn = fn

    def __call__(self, env, args: list[LispValue]) -> LispValue:
        return self.fn(env, args)

    def __str__(self) -> str:
        return f"#<primitive {self.name}>"

    def __repr__(self) -> str:
        return str(self)
