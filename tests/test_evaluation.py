import pytest

from klisp import runtime_context
from klisp.errors import (
    KlispArityError,
    KlispMalformedExpression,
    KlispNotCallable,
    KlispStackOverflow,
    KlispUnboundSymbol,
)
from klisp.evaluation.evaluator import evaluate
from klisp.printer import to_string
from klisp.types.closure import Closure
from klisp.types.nil import Nil
from klisp.types.pair import Pair
from klisp.types.primitive import Primitive
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList


@pytest.mark.parametrize("atom", [Nil, 0, 42, -7, "hello", ""])
def test_atoms_evaluate_to_themselves(env, atom):
    assert evaluate(atom, env) == atom


def test_empty_list_is_nil(env):
    assert evaluate([], env) is Nil


def test_symbol_lookup(env):
    env.define(Symbol("x"), 10)
    assert evaluate(Symbol("x"), env) == 10


def test_unbound_symbol(env):
    with pytest.raises(KlispUnboundSymbol) as exc:
        evaluate(Symbol("nope"), env)
    assert exc.value.name == "nope"


def test_special_form_names_are_not_values(env):
    with pytest.raises(KlispUnboundSymbol):
        evaluate(Symbol("quote"), env)


def test_builtins_are_primitives(env):
    car = evaluate(Symbol("car"), env)
    assert isinstance(car, Primitive)
    assert car.name == "car"


def test_application_evaluates_arguments_left_to_right(interp):
    assert to_string(interp.eval("(cons (car '(1 2)) (cdr '(1 2)))")) == "(1 2)"


def test_operator_position_may_be_any_expression(interp):
    assert interp.eval("((lambda (x) x) 5)") == 5
    assert interp.eval("((if (null? ()) car cdr) '(1 2))") == 1


@pytest.mark.parametrize("code", ["(1 2)", '("f")', "(() 1)", "((null? ()) 1)"])
def test_not_callable(interp, code):
    with pytest.raises(KlispNotCallable):
        interp.eval(code)


def test_dotted_list_cannot_be_evaluated(env):
    with pytest.raises(KlispMalformedExpression):
        evaluate(DottedList([Symbol("car")], Symbol("x")), env)


def test_evaluation_does_not_mutate_the_form(env):
    form = [Symbol("cons"), 1, [Symbol("quote"), [Symbol("a"), Symbol("b")]]]
    snapshot = [Symbol("cons"), 1, [Symbol("quote"), [Symbol("a"), Symbol("b")]]]
    evaluate(form, env)
    assert form == snapshot


def test_primitive_arity_errors(interp):
    with pytest.raises(KlispArityError) as exc:
        interp.eval("(car '(1) '(2))")
    assert exc.value.expected == "1"
    assert exc.value.got == 2


def test_program_returns_last_value_and_shares_state(interp):
    assert interp.eval("(define x '(1 2 3)) (define y (cdr x)) (car y)") == 2
    # later calls still see earlier definitions
    assert interp.eval("(car x)") == 1


def test_empty_program_returns_nil(interp):
    assert interp.eval("; nothing here") is Nil


def test_error_stops_remaining_forms(interp):
    with pytest.raises(KlispUnboundSymbol):
        interp.eval("(define a 1) (car missing) (define b 2)")
    assert interp.eval("a") == 1
    with pytest.raises(KlispUnboundSymbol):
        interp.eval("b")


def test_parse_error_prevents_any_evaluation(interp):
    from klisp.errors import KlispParseError

    with pytest.raises(KlispParseError):
        interp.eval("(define a 1) (car")
    with pytest.raises(KlispUnboundSymbol):
        interp.eval("a")


def test_unbounded_recursion_reports_stack_overflow(interp):
    interp.eval("(define f (lambda (x) (f x)))")
    with pytest.raises(KlispStackOverflow):
        interp.eval("(f 1)")
    assert runtime_context.get_depth() == 0
    # the session is still usable afterwards
    assert interp.eval("(car '(ok))") == Symbol("ok")


LAST = "(define last (lambda (l) (if (null? (cdr l)) (car l) (last (cdr l)))))"


def test_depth_limit_is_configurable(interp):
    interp.define("xs", Pair.from_list(range(10)))
    interp.eval(LAST)
    runtime_context.set_max_depth(5)
    with pytest.raises(KlispStackOverflow):
        interp.eval("(last xs)")
    runtime_context.set_max_depth(50)
    assert interp.eval("(last xs)") == 9


@pytest.mark.parametrize("length", [1000, 3000])
def test_deep_but_finite_recursion(interp, length):
    interp.define("xs", Pair.from_list(range(length)))
    interp.eval(LAST)
    assert interp.eval("(last xs)") == length - 1
    assert runtime_context.get_depth() == 0


def test_closure_value(interp):
    fn = interp.eval("(lambda (a b) a)")
    assert isinstance(fn, Closure)
    assert fn.formals == [Symbol("a"), Symbol("b")]
    assert fn.env is interp.env
