import datetime

import pytest

from klisp import runtime_context
from klisp.builtin.env_builtin import create_global_env
from klisp.interpreter import Interpreter
from klisp.table import Transaction, transactions_to_table


@pytest.fixture(autouse=True)
def _reset_depth_guard():
    # Every test starts and ends with a clean depth counter and the configured limit.
    runtime_context.reset()
    runtime_context.set_max_depth(None)
    yield
    runtime_context.reset()
    runtime_context.set_max_depth(None)


@pytest.fixture
def env():
    """Return a fresh global environment for each test."""
    return create_global_env()


@pytest.fixture
def interp():
    return Interpreter()


def make_transaction(date: str, amount: int, category: str, account: str, memo=None) -> Transaction:
    return Transaction(
        date=datetime.date.fromisoformat(date),
        amount=amount,
        category=category,
        account=account,
        memo=memo,
    )


@pytest.fixture
def transactions():
    return [
        make_transaction("2025-01-01", -1000, "Food", "Cash", "lunch"),
        make_transaction("2025-01-02", -2000, "Transport", "Card"),
        make_transaction("2025-01-03", -3000, "Food", "Cash"),
    ]


@pytest.fixture
def table(transactions):
    return transactions_to_table(transactions)


@pytest.fixture
def table_interp(table):
    return Interpreter(bindings={"table": table})
