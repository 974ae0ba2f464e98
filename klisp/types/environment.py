"""Runtime environment for klisp.

An Environment is one scope frame: a mapping from Symbols to evaluated values
plus an optional `outer` link. Lookup walks outward and the first match wins.
`define` only ever writes into the frame it is called on, so a nested call
frame can never leak a binding into the frame a closure captured.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from klisp import LispValue
from klisp.errors import KlispMalformedExpression, KlispUnboundSymbol
from klisp.types.symbol import Symbol


class Environment:
    """Hierarchical mapping from Symbols to Lisp values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer

    def define(self, name: Symbol | str, value: LispValue) -> None:
        """Bind `name` to `value` in this frame, inserting or overwriting."""
        if isinstance(name, str):
            name = Symbol(name)
        if not isinstance(name, Symbol):
            raise KlispMalformedExpression(f"Cannot define {name} as a symbol")
        self.vars[name] = value

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol | str) -> LispValue:
        """Look up the value bound to `name`.

        Raises KlispUnboundSymbol if no frame in the chain binds it.
        """
        if isinstance(name, str):
            name = Symbol(name)
        env = self.find(name)
        if env is None:
            raise KlispUnboundSymbol(str(name))
        return env.vars[name]

    def __contains__(self, name: Symbol | str) -> bool:
        if isinstance(name, str):
            name = Symbol(name)
        return self.find(name) is not None

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Detailed chain representation for debugging purposes."""
        chain = []
        env: Optional[Environment] = self
        while env is not None:
            with StringIO() as env_buf:
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
            env = env.outer
        return "<Environment chain: " + " -> ".join(chain) + ">"
