from klisp import EvaluatorFn
from klisp import SExpression, LispValue
from klisp.errors import KlispArityError, KlispMalformedExpression
from klisp.types.environment import Environment
from klisp.types.symbol import Symbol


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """
    (define name value)
    Binds in the current frame only and returns the bound value.
    """
    if len(tail) != 2:
        raise KlispArityError("define", "2", len(tail))

    name, val_expr = tail
    if not isinstance(name, Symbol):
        raise KlispMalformedExpression("define requires a symbol as first argument")
    value = evaluate_fn(val_expr, env)
    env.define(name, value)
    return value
