"""Table transformation: the bridge between transaction records and klisp.

Transactions become a table value of the shape

    ((ID-001 . ((date . "2025-01-01") (amount . -1000) (category . "Food")
                (account . "Cash") (memo . "")))
     ...)

which a program receives as `table`. The value it returns is turned back into
display rows, flattening grouped results produced by `group-by`.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from klisp import LispValue
from klisp.errors import KlispError, KlispParseError
from klisp.interpreter import Interpreter
from klisp.printer import to_string
from klisp.types.nil import Nil
from klisp.types.pair import Pair
from klisp.types.symbol import Symbol

logger = logging.getLogger(__name__)

TABLE_SYMBOL = Symbol("table")
FIELDS = ("date", "amount", "category", "account", "memo")


class TransformError(Exception):
    """Raised when a program cannot transform a table."""


@dataclass(frozen=True)
class Transaction:
    date: datetime.date
    amount: int  # minor units
    category: str
    account: str
    memo: Optional[str] = None


def transaction_to_value(tx: Transaction, row_id: int) -> Pair:
    """One row: `(ID-nnn . ((date . "...") (amount . n) ...))`."""
    fields = [
        Pair(Symbol("date"), tx.date.isoformat()),
        Pair(Symbol("amount"), tx.amount),
        Pair(Symbol("category"), tx.category),
        Pair(Symbol("account"), tx.account),
        Pair(Symbol("memo"), tx.memo or ""),
    ]
    return Pair(Symbol(f"ID-{row_id:03}"), Pair.from_list(fields))


def transactions_to_table(transactions: Iterable[Transaction]) -> LispValue:
    """Convert records into a table value, numbering rows from 1."""
    return Pair.from_list(
        transaction_to_value(tx, i) for i, tx in enumerate(transactions, start=1)
    )


def transform_table(table: LispValue, program: str) -> LispValue:
    """Run `program` with `table` bound and return the value of its last form."""
    interp = Interpreter(bindings={TABLE_SYMBOL.name: table})
    try:
        result = interp.eval(program)
    except KlispParseError as ex:
        logger.error("Transform program failed to parse: %s", ex)
        raise TransformError(f"Parse error: {ex}") from ex
    except KlispError as ex:
        logger.error("Transform program failed: %s", ex)
        raise TransformError(f"Evaluation error: {ex}") from ex
    logger.debug("Transform produced %s", "a grouped result" if is_grouped_result(result) else "a table")
    return result


def format_value(value: LispValue) -> str:
    return to_string(value)


def value_to_display_string(value: LispValue) -> str:
    if value is Nil:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, Symbol)):
        return str(value)
    return to_string(value)


def extract_field(row: LispValue, field_name: str) -> Optional[str]:
    """The display text of `field_name` in a `(id . alist)` row, or None."""
    if not isinstance(row, Pair):
        return None
    for entry in row.tail if isinstance(row.tail, Pair) else ():
        if isinstance(entry, Pair) and entry.head == Symbol(field_name):
            return value_to_display_string(entry.tail)
    return None


def format_amount(amount: str) -> str:
    """Format minor units for display, e.g. -1000 -> ¥-1000."""
    try:
        return f"¥{int(amount)}"
    except ValueError:
        return amount


@dataclass
class DisplayRow:
    date: str = ""
    amount: str = ""
    category: str = ""
    account: str = ""
    memo: str = ""


@dataclass
class GroupedTable:
    group_name: str
    rows: list[DisplayRow] = field(default_factory=list)


def _row_to_display(row: LispValue) -> DisplayRow:
    values = {name: extract_field(row, name) or "" for name in FIELDS}
    if values["amount"]:
        values["amount"] = format_amount(values["amount"])
    return DisplayRow(**values)


def _is_group(entry: LispValue) -> bool:
    return isinstance(entry, Pair) and isinstance(entry.head, str)


def value_to_display_rows(value: LispValue) -> list[DisplayRow]:
    """Flatten a table or grouped table into display rows."""
    rows: list[DisplayRow] = []
    cell = value
    while isinstance(cell, Pair):
        entry = cell.head
        if _is_group(entry):
            rows.extend(value_to_display_rows(entry.tail))
        else:
            rows.append(_row_to_display(entry))
        cell = cell.tail
    if cell is not Nil:
        raise TransformError(f"Expected a list of rows, but got: {to_string(cell)}")
    return rows


def value_to_grouped_tables(value: LispValue) -> list[GroupedTable]:
    """Convert a `group-by` result into named groups of display rows."""
    groups: list[GroupedTable] = []
    cell = value
    while isinstance(cell, Pair):
        entry = cell.head
        if _is_group(entry):
            groups.append(GroupedTable(entry.head, value_to_display_rows(entry.tail)))
        cell = cell.tail
    if cell is not Nil:
        raise TransformError("Unexpected grouped value structure")
    return groups


def is_grouped_result(value: LispValue) -> bool:
    """True if `value` looks like `group-by` output: its first element is ("name" . rows)."""
    return isinstance(value, Pair) and _is_group(value.head)
