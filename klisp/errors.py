

class KlispError(Exception):
    """ Base class for all klisp errors"""
    pass


class KlispParseError(KlispError):
    """ Raised when source text cannot be read"""

    def __init__(self, message: str, offset: int, source: str = ""):
        self.message = message
        self.offset = offset
        self.line = source.count("\n", 0, offset) + 1
        self.column = offset - (source.rfind("\n", 0, offset) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class KlispUnboundSymbol(KlispError):
    """ Raised when a symbol is used before it is bound"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound symbol: {name}")


class KlispArityError(KlispError):
    """ Raised when the number of arguments passed to a function is incorrect"""

    def __init__(self, what: str, expected: str, got: int):
        self.expected = expected
        self.got = got
        super().__init__(f"{what}: expected {expected} argument(s), got {got}")


class KlispTypeError(KlispError):
    """ Raised when the types of arguments passed to a function are incorrect"""


class KlispNotCallable(KlispError):
    """ Raised when a value that is not a procedure is applied"""


class KlispMalformedExpression(KlispError):
    """ Raised when a special form or call form is structurally invalid"""


class KlispStackOverflow(KlispError):
    """ Raised when evaluation nests deeper than the configured limit"""


ParseError = KlispParseError
UnboundSymbol = KlispUnboundSymbol
ArityMismatch = KlispArityError
TypeMismatch = KlispTypeError
NotCallable = KlispNotCallable
MalformedExpression = KlispMalformedExpression
StackOverflow = KlispStackOverflow
