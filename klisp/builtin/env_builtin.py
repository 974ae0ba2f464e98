"""Built-in procedures for the klisp runtime environment.

This module defines the pair primitives, predicates, association-list lookup
and the table-grouping primitive, plus the registration helpers that seed a
global environment with them.
"""
from __future__ import annotations
from typing import Any, Callable

from klisp import LispValue
from klisp.errors import KlispArityError, KlispTypeError
from klisp.evaluation.apply import apply as apply_engine
from klisp.evaluation.evaluator import evaluate
from klisp.printer import to_string
from klisp.types.closure import Closure
from klisp.types.environment import Environment
from klisp.types.nil import Nil
from klisp.types.pair import Pair, is_equal
from klisp.types.primitive import Primitive
from klisp.types.symbol import Symbol


def _check_arity(name: str, args: list[LispValue], n: int) -> None:
    if len(args) != n:
        raise KlispArityError(name, str(n), len(args))


def _proper_list(name: str, value: LispValue) -> list[LispValue]:
    """Collect the elements of a proper list, or fail with a type error."""
    items: list[LispValue] = []
    cell = value
    while isinstance(cell, Pair):
        items.append(cell.head)
        cell = cell.tail
    if cell is not Nil:
        raise KlispTypeError(f"{name} requires a proper list, got {to_string(value)}")
    return items


# -------------------------------
# Pairs
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> Pair:
    """(cons a b) => (a . b)"""
    _check_arity("cons", args, 2)
    return Pair(args[0], args[1])


def car(env: Environment, args: list[LispValue]) -> LispValue:
    """Head of a pair."""
    _check_arity("car", args, 1)
    if not isinstance(args[0], Pair):
        raise KlispTypeError(f"car requires a pair, got {to_string(args[0])}")
    return args[0].head


def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    """Tail of a pair."""
    _check_arity("cdr", args, 1)
    if not isinstance(args[0], Pair):
        raise KlispTypeError(f"cdr requires a pair, got {to_string(args[0])}")
    return args[0].tail


# -------------------------------
# Predicates
# -------------------------------
def is_null(env: Environment, args: list[LispValue]) -> bool:
    """Predicate: #t if the single argument is (), else #f."""
    _check_arity("null?", args, 1)
    return args[0] is Nil


def equals(env: Environment, args: list[LispValue]) -> bool:
    """Deep structural equality of two values."""
    _check_arity("equal?", args, 2)
    return is_equal(args[0], args[1])


# -------------------------------
# Association lists and tables
# -------------------------------
def assoc(env: Environment, args: list[LispValue]) -> LispValue:
    """(assoc key alist) => the first (key . value) element whose key is equal?, else ()."""
    _check_arity("assoc", args, 2)
    key, alist = args
    cell = alist
    while isinstance(cell, Pair):
        entry = cell.head
        if isinstance(entry, Pair) and is_equal(entry.head, key):
            return entry
        cell = cell.tail
    if cell is not Nil:
        raise KlispTypeError("assoc requires a proper list")
    return Nil


def _group_key(value: LispValue) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Symbol):
        return value.name
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise KlispTypeError(
        f"group-by key must be string, symbol, or number, got {to_string(value)}"
    )


def group_by(env: Environment, args: list[LispValue]) -> LispValue:
    """(group-by rows key-fn) => (("key" row ...) ...)

    Groups appear in order of first appearance of their key; rows keep their
    original relative order inside a group. Keys are compared by their text,
    and each group's head is that text as a string.
    """
    _check_arity("group-by", args, 2)
    table, key_fn = args
    if not isinstance(key_fn, (Closure, Primitive)):
        raise KlispTypeError(f"group-by requires a procedure, got {to_string(key_fn)}")

    groups: dict[str, list[LispValue]] = {}
    for row in _proper_list("group-by", table):
        key = apply_engine(key_fn, [row], env, evaluate)
        groups.setdefault(_group_key(key), []).append(row)

    return Pair.from_list(Pair(key, Pair.from_list(rows)) for key, rows in groups.items())


BUILTINS: dict[str, Callable[[Environment, list[Any]], LispValue]] = {
    "cons": cons,
    "car": car,
    "cdr": cdr,
    "null?": is_null,
    "equal?": equals,
    "assoc": assoc,
    "group-by": group_by,
}


def register(env: Environment) -> None:
    """Bind every primitive under its Lisp name in `env`."""
    for name, fn in BUILTINS.items():
        env.define(Symbol(name), Primitive(name, fn))


def create_global_env() -> Environment:
    env = Environment()
    register(env)
    return env
