"""Text rendering for syntax nodes and runtime values.

`format_form` writes a syntax tree back in canonical source form, so that
reading the output yields an equal tree. `to_string` writes runtime values the
way the REPL shows them. `colorize` adds ANSI colours on top of `to_string`.
"""

from __future__ import annotations

from io import StringIO
from typing import Any

from klisp.types.closure import Closure
from klisp.types.nil import NilType
from klisp.types.pair import Pair
from klisp.types.primitive import Primitive
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_SYMBOL = "\033[94m"
COLOR_STRING = "\033[32m"
COLOR_NUMBER = "\033[33m"
COLOR_PROCEDURE = "\033[95m"
COLOR_SPECIAL_FORM = "\033[90m"

SPECIAL_FORMS = {"define", "lambda", "if", "quote"}

DEFAULT_OPTIONS = {
    "color_symbols": True,
    "color_strings": True,
    "color_numbers": True,
    "color_procedures": True,
    "color_special_forms": True,
}


def _atom_text(obj: Any) -> str:
    if isinstance(obj, NilType):
        return "()"
    if isinstance(obj, bool):
        return "#t" if obj else "#f"
    if isinstance(obj, str):
        return f'"{obj}"'
    return str(obj)


def format_form(expr: Any) -> str:
    """Render a syntax node as canonical source text."""
    if isinstance(expr, DottedList):
        items = " ".join(format_form(e) for e in expr.items)
        return f"({items} . {format_form(expr.tail)})"
    if isinstance(expr, list):
        if not expr:
            return "()"
        return "(" + " ".join(format_form(e) for e in expr) + ")"
    return _atom_text(expr)


def _write_value(obj: Any, buffer: StringIO, paint) -> None:
    if not isinstance(obj, Pair):
        buffer.write(paint(obj))
        return
    buffer.write("(")
    _write_value(obj.head, buffer, paint)
    cell = obj.tail
    while isinstance(cell, Pair):
        buffer.write(" ")
        _write_value(cell.head, buffer, paint)
        cell = cell.tail
    if not isinstance(cell, NilType):
        buffer.write(" . ")
        _write_value(cell, buffer, paint)
    buffer.write(")")


def to_string(value: Any) -> str:
    """Render a runtime value, e.g. `(ID-001 . ((date . "2025-01-01")))`."""
    with StringIO() as buffer:
        _write_value(value, buffer, _atom_text)
        return buffer.getvalue()


def colorize(value: Any, options: dict = DEFAULT_OPTIONS) -> str:
    """Like `to_string`, with ANSI colours for the atom kinds enabled in `options`."""

    def paint(obj: Any) -> str:
        text = _atom_text(obj)
        if isinstance(obj, Symbol):
            if str(obj) in SPECIAL_FORMS and options.get("color_special_forms", True):
                return f"{COLOR_SPECIAL_FORM}{text}{RESET}"
            if options.get("color_symbols", True):
                return f"{COLOR_SYMBOL}{text}{RESET}"
        elif isinstance(obj, str) and options.get("color_strings", True):
            return f"{COLOR_STRING}{text}{RESET}"
        elif isinstance(obj, (bool, int)) and options.get("color_numbers", True):
            return f"{COLOR_NUMBER}{text}{RESET}"
        elif isinstance(obj, (Closure, Primitive)) and options.get("color_procedures", True):
            return f"{COLOR_PROCEDURE}{text}{RESET}"
        return text

    with StringIO() as buffer:
        _write_value(value, buffer, paint)
        return buffer.getvalue()
