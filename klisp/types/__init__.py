from klisp.types.nil import Nil, NilType
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList
from klisp.types.pair import Pair
from klisp.types.environment import Environment
from klisp.types.closure import Closure
from klisp.types.primitive import Primitive

__all__ = [
    "Nil",
    "NilType",
    "Symbol",
    "DottedList",
    "Pair",
    "Environment",
    "Closure",
    "Primitive",
]
