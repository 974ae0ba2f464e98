import pytest

from klisp.printer import to_string
from klisp.table import (
    DisplayRow,
    TransformError,
    extract_field,
    format_amount,
    format_value,
    is_grouped_result,
    transaction_to_value,
    transform_table,
    value_to_display_rows,
    value_to_display_string,
    value_to_grouped_tables,
)
from klisp.errors import KlispParseError, KlispUnboundSymbol
from klisp.types.nil import Nil
from klisp.types.pair import Pair
from klisp.types.symbol import Symbol

from conftest import make_transaction

GROUP_BY_CATEGORY = "(group-by table (lambda (row) (cdr (assoc 'category (cdr row)))))"


def test_transaction_to_value_shape():
    tx = make_transaction("2025-01-01", -1000, "Food", "Cash")
    assert to_string(transaction_to_value(tx, 1)) == (
        '(ID-001 (date . "2025-01-01") (amount . -1000) (category . "Food") '
        '(account . "Cash") (memo . ""))'
    )


def test_table_is_proper_list_of_rows(table):
    assert isinstance(table, Pair)
    assert table.is_proper()
    assert [row.head for row in table] == [Symbol("ID-001"), Symbol("ID-002"), Symbol("ID-003")]


def test_transform_identity(table):
    assert transform_table(table, "table") is table


def test_cons_first_row(table):
    result = transform_table(table, "(cons (car table) ())")
    assert list(result) == [table.head]
    assert result.tail is Nil


def test_cdr_drops_rows(table):
    rest = transform_table(table, "(cdr table)")
    assert rest == Pair.from_list(list(table)[1:])
    assert transform_table(table, "(cdr (cdr (cdr table)))") is Nil


def test_program_can_define_helpers(table):
    program = """
    ; pick a field out of a row
    (define field (lambda (name row) (cdr (assoc name (cdr row)))))
    (define category (lambda (row) (field 'category row)))
    (group-by table category)
    """
    result = transform_table(table, program)
    assert [group.head for group in result] == ["Food", "Transport"]


def test_grouped_tables(table):
    result = transform_table(table, GROUP_BY_CATEGORY)
    assert is_grouped_result(result)
    groups = value_to_grouped_tables(result)
    assert [g.group_name for g in groups] == ["Food", "Transport"]
    assert [r.date for r in groups[0].rows] == ["2025-01-01", "2025-01-03"]
    assert groups[1].rows == [
        DisplayRow(date="2025-01-02", amount="¥-2000", category="Transport", account="Card", memo="")
    ]


def test_display_rows_flatten_groups(table):
    result = transform_table(table, GROUP_BY_CATEGORY)
    rows = value_to_display_rows(result)
    assert [r.category for r in rows] == ["Food", "Food", "Transport"]


def test_display_rows_flat_table(table):
    assert not is_grouped_result(table)
    rows = value_to_display_rows(table)
    assert rows[0] == DisplayRow(
        date="2025-01-01", amount="¥-1000", category="Food", account="Cash", memo="lunch"
    )
    assert len(rows) == 3


def test_display_rows_rejects_non_list():
    with pytest.raises(TransformError):
        value_to_display_rows(Pair(1, 2))
    assert value_to_display_rows(Nil) == []


def test_is_grouped_result_edge_cases():
    assert not is_grouped_result(Nil)
    assert not is_grouped_result(42)


def test_extract_field(table):
    row = table.head
    assert extract_field(row, "date") == "2025-01-01"
    assert extract_field(row, "amount") == "-1000"
    assert extract_field(row, "nonexistent") is None
    assert extract_field(Nil, "date") is None


@pytest.mark.parametrize(
    "value, expected",
    [("test", "test"), (42, "42"), (Symbol("sym"), "sym"), (True, "true"), (Nil, ""), (Pair(1, 2), "(1 . 2)")],
)
def test_value_to_display_string(value, expected):
    assert value_to_display_string(value) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("1000", "¥1000"), ("-1000", "¥-1000"), ("0", "¥0"), ("invalid", "invalid")],
)
def test_format_amount(text, expected):
    assert format_amount(text) == expected


def test_format_value(table):
    assert format_value(Pair(Symbol("a"), "b")) == '(a . "b")'


def test_transform_parse_error(table):
    with pytest.raises(TransformError) as exc:
        transform_table(table, "(group-by table")
    assert isinstance(exc.value.__cause__, KlispParseError)


def test_transform_eval_error(table):
    with pytest.raises(TransformError) as exc:
        transform_table(table, "(car unknown)")
    assert isinstance(exc.value.__cause__, KlispUnboundSymbol)


def test_transform_deeply_nested_program(table):
    value = transform_table(table, "'" + "(" * 5000 + ")" * 5000)
    assert isinstance(value, Pair)
    with pytest.raises(TransformError) as exc:
        transform_table(table, "'" + "(" * 20000 + ")" * 20000)
    assert str(exc.value).startswith("Parse error: Nesting too deep")
