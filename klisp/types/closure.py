"""User-defined procedures created by `lambda`."""

from __future__ import annotations

from klisp import SExpression, LispValue
from klisp.errors import KlispArityError
from klisp.types.environment import Environment
from klisp.types.symbol import Symbol


class Closure:
    """A first-class procedure with formal parameters, body forms and the defining env.

    The env is held by reference, never copied: a `define` that runs in the
    defining frame after the closure was built is visible when it is called.
    """

    __slots__ = ("formals", "body", "env")

    def __init__(self, formals: list[Symbol], body: list[SExpression], env: Environment):
        self.formals: list[Symbol] = formals
        self.body: list[SExpression] = body
        self.env: Environment = env

    def __str__(self) -> str:
        return "#<lambda (" + " ".join(str(f) for f in self.formals) + ")>"

    def __repr__(self) -> str:
        return str(self)

    def extend_env(self, args: list[LispValue]) -> Environment:
        """Bind `args` positionally to the formals in a fresh frame under the captured env."""
        if len(args) != len(self.formals):
            raise KlispArityError("lambda", str(len(self.formals)), len(args))
        frame = Environment(outer=self.env)
        for name, value in zip(self.formals, args):
            frame.define(name, value)
        return frame
