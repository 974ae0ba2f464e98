# Core type aliases for klisp's data model.
# Syntax nodes are plain Python data (Nil, Symbol, int, str, list, DottedList);
# runtime values add bool, Pair, Closure and Primitive.
#
# Naming guidance:
# - SExpression: Use in reader/parser code to denote syntactic forms.
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.

from typing import Any, Callable

__version__ = "0.1.0"

# Runtime value alias
LispValue = Any
# Syntax node alias
SExpression = Any

# Evaluator function type: passed to special forms and the application engine
EvaluatorFn = Callable[..., LispValue]

from klisp.reader.parser import parse  # noqa: E402
from klisp.evaluation.evaluator import evaluate  # noqa: E402
from klisp.builtin.env_builtin import create_global_env  # noqa: E402
from klisp.interpreter import Interpreter  # noqa: E402
from klisp.table import transform_table, transactions_to_table  # noqa: E402

__all__ = [
    "LispValue",
    "SExpression",
    "EvaluatorFn",
    "parse",
    "evaluate",
    "create_global_env",
    "Interpreter",
    "transform_table",
    "transactions_to_table",
]
