"""Application engine for klisp.

Centralizes procedure application so that the evaluator and primitives that
take procedures (such as `group-by`) share one calling protocol:
- Closures get a fresh frame under their captured env, with arity checked.
- Primitives receive the caller env and the already-evaluated arguments.
- Anything else is not callable.
"""

from klisp import LispValue, EvaluatorFn
from klisp.errors import KlispNotCallable
from klisp.types.closure import Closure
from klisp.types.environment import Environment
from klisp.types.nil import Nil
from klisp.types.primitive import Primitive


def apply_closure(
    fn: Closure, args: list[LispValue], evaluate_fn: EvaluatorFn
) -> LispValue:
    """Run the body forms of `fn` in a new frame and return the last value."""
    frame = fn.extend_env(args)
    result: LispValue = Nil
    for form in fn.body:
        result = evaluate_fn(form, frame)
    return result


def apply(
    head: Closure | Primitive | object,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply either a Closure or a Primitive.

    Raises KlispNotCallable for any other value in operator position.
    """
    if isinstance(head, Closure):
        return apply_closure(head, args, evaluate_fn)
    if isinstance(head, Primitive):
        return head(env, args)
    from klisp.printer import to_string
    raise KlispNotCallable(f"Cannot apply non-procedure {to_string(head)}")
