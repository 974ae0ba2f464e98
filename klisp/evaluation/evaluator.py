"""Core evaluator for the klisp interpreter.

Dispatches on the shape of a syntax node: atoms evaluate to themselves,
symbols are looked up, a list headed by a special-form name goes to that
form's handler, and any other list is a procedure call. Every nested call
goes through the depth guard in `runtime_context`.
"""

from __future__ import annotations

from klisp import SExpression, LispValue
from klisp import runtime_context
from klisp.errors import KlispMalformedExpression, KlispStackOverflow
from klisp.evaluation.apply import apply
from klisp.evaluation.special_forms import SPECIAL_FORMS
from klisp.types.environment import Environment
from klisp.types.nil import Nil
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    """Evaluate one syntax node in `env`. Never mutates `expr`."""
    runtime_context.enter()
    try:
        match expr:
            case Symbol():
                return env.lookup(expr)

            case DottedList():
                raise KlispMalformedExpression("A dotted list cannot be evaluated as a call")

            case []:
                return Nil

            case [head, *tail_args]:
                # --- Special forms handling ---
                if isinstance(head, Symbol) and head in SPECIAL_FORMS:
                    return SPECIAL_FORMS[head](tail_args, env, evaluate)

                fn = evaluate(head, env)
                args = [evaluate(arg, env) for arg in tail_args]
                return apply(fn, args, env, evaluate)

        # --- Atoms return as-is ---
        return expr
    except RecursionError:
        # Only the outermost evaluation reports it, once the stack has unwound.
        if runtime_context.get_depth() > 1:
            raise
        raise KlispStackOverflow("Host recursion limit reached during evaluation") from None
    finally:
        runtime_context.leave()
