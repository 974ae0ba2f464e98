from klisp.errors import KlispArityError, KlispMalformedExpression
from klisp.types.closure import Closure

from klisp import EvaluatorFn
from klisp import SExpression, LispValue
from klisp.types.environment import Environment
from klisp.types.nil import Nil
from klisp.types.symbol import Symbol


def _formals(params: SExpression) -> list[Symbol]:
    if params is Nil:
        return []
    if not isinstance(params, list):
        raise KlispMalformedExpression("lambda requires a parameter list")
    formals: list[Symbol] = []
    for p in params:
        if not isinstance(p, Symbol):
            raise KlispMalformedExpression("lambda parameters must be symbols")
        if p in formals:
            raise KlispMalformedExpression(f"Duplicate lambda parameter: {p}")
        formals.append(p)
    return formals


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    # (lambda (params) body...): the body is one or more forms, run in order.
    # The closure keeps `env` itself, not a copy.
    if len(tail) < 2:
        raise KlispArityError("lambda", "at least 2", len(tail))

    return Closure(_formals(tail[0]), list(tail[1:]), env)
