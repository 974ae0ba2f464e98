import re

import pytest

from klisp.printer import colorize, format_form, to_string
from klisp.reader.parser import parse
from klisp.types.nil import Nil
from klisp.types.pair import Pair
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList

ANSI = re.compile(r"\033\[[0-9;]*m")


@pytest.mark.parametrize(
    "value, expected",
    [
        (Nil, "()"),
        (True, "#t"),
        (False, "#f"),
        (-12, "-12"),
        ("Food", '"Food"'),
        (Symbol("ID-001"), "ID-001"),
        (Pair(1, Nil), "(1)"),
        (Pair(1, 2), "(1 . 2)"),
        (Pair.from_list([1, 2], 3), "(1 2 . 3)"),
        (Pair.from_list([Pair.from_list([1]), Nil]), "((1) ())"),
    ]
)
def test_to_string(value, expected):
    assert to_string(value) == expected


def test_procedures_print_opaquely(interp):
    assert to_string(interp.eval("(lambda (row key) row)")) == "#<lambda (row key)>"
    assert to_string(interp.eval("group-by")) == "#<primitive group-by>"


def test_pair_repr_is_lisp_text():
    assert repr(Pair(Symbol("a"), "b")) == '(a . "b")'


@pytest.mark.parametrize(
    "source",
    [
        "()",
        "(a b c)",
        "(a . b)",
        "(a b . (c d))",
        "(quote (x . ()))",
        '(define f (lambda (row) (cdr (assoc (quote category) (cdr row)))))',
        '("a ; b" -5 sym)',
    ]
)
def test_format_form_is_canonical(source):
    (form,) = parse(source)
    assert format_form(form) == source


def test_format_form_of_quote_sugar():
    (form,) = parse("'(a . b)")
    assert format_form(form) == "(quote (a . b))"
    assert format_form(DottedList([1], 2)) == "(1 . 2)"


def test_colorize_matches_plain_text(interp):
    value = interp.eval("(cons (cons 'define \"s\") (cons 7 (cons car ())))")
    colored = colorize(value)
    assert colored != to_string(value)
    assert ANSI.sub("", colored) == to_string(value)


def test_colorize_can_be_disabled():
    options = {
        "color_symbols": False,
        "color_strings": False,
        "color_numbers": False,
        "color_procedures": False,
        "color_special_forms": False,
    }
    value = Pair.from_list([Symbol("a"), "b", 1])
    assert colorize(value, options) == to_string(value)
