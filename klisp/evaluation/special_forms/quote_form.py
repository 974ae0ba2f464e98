from klisp import SExpression, LispValue, EvaluatorFn
from klisp.errors import KlispArityError
from klisp.types.environment import Environment
from klisp.types.pair import Pair
from klisp.types.syntax import DottedList


def syntax_to_value(expr: SExpression) -> LispValue:
    """Mirror a syntax node as data: lists become pair chains, symbols stay symbols."""
    if isinstance(expr, DottedList):
        return Pair.from_list([syntax_to_value(e) for e in expr.items], syntax_to_value(expr.tail))
    if isinstance(expr, list):
        return Pair.from_list([syntax_to_value(e) for e in expr])
    return expr


def quote_form(
    tail: list[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue:
    if len(tail) != 1:
        raise KlispArityError("quote", "1", len(tail))
    return syntax_to_value(tail[0])
