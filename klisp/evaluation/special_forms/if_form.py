from klisp import EvaluatorFn
from klisp import SExpression, LispValue
from klisp.errors import KlispArityError
from klisp.types.nil import Nil
from klisp.types.environment import Environment


def is_truthy(value: LispValue) -> bool:
    """Anything except #f and () is true."""
    return value is not False and value is not Nil


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    if len(tail) != 3:
        raise KlispArityError("if", "3", len(tail))

    cond = evaluate_fn(tail[0], env)
    if is_truthy(cond):
        return evaluate_fn(tail[1], env)
    return evaluate_fn(tail[2], env)
