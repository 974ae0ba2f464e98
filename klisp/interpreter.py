from __future__ import annotations

import logging
from typing import Callable

from klisp import SExpression, LispValue
from klisp import runtime_context
from klisp.builtin.env_builtin import register
from klisp.evaluation.evaluator import evaluate
from klisp.reader.parser import parse
from klisp.types.environment import Environment
from klisp.types.nil import Nil
from klisp.types.symbol import Symbol

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading and evaluating klisp programs.
    Maintains one global Environment across calls, seeded with the primitives.
    """

    def __init__(
        self,
        bindings: dict[str, LispValue] | None = None,
        eval_fn: Callable[[SExpression, Environment], LispValue] | None = None,
    ):
        self.eval_fn = eval_fn or evaluate
        self.env: Environment = Environment()
        register(self.env)
        for name, value in (bindings or {}).items():
            self.define(name, value)

    def define(self, name: str | Symbol, value: LispValue) -> None:
        """Pre-bind a global, e.g. the `table` the program transforms."""
        self.env.define(name, value)

    def eval(self, code: str) -> LispValue:
        """Read all of `code`, then evaluate each form in order; return the last value.

        Nothing is evaluated if any form fails to read. An evaluation error
        stops the program at the failing form and propagates.
        """
        runtime_context.ensure_recursion_headroom()
        forms = parse(code)
        logger.debug("Evaluating %d top-level form(s)", len(forms))
        result: LispValue = Nil
        for form in forms:
            result = self.eval_fn(form, self.env)
        return result
