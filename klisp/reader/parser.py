"""
  Lisp Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits Python primitives instead of Cons cells:

    - () -> Nil
    - lists -> Python list
    - dotted lists -> DottedList(items, tail)
    - symbols -> Symbol
    - strings -> str
    - numbers -> int (signed 64-bit)
    - 'x -> [quote, x]

`parse` is atomic: a malformed form anywhere fails the whole text. Iterating
`TokenStream.parse_all` instead yields each complete form before the first
failure.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from klisp import SExpression
from klisp import runtime_context
from klisp.errors import KlispParseError
from klisp.types.nil import Nil
from klisp.types.symbol import Symbol
from klisp.types.syntax import DottedList


TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<quote>')"  # quote sugar
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r'|(?P<string>"[^"]*")'  # double-quoted string, taken verbatim
    r'|(?P<open_string>")'  # a quote with no closing partner
    r"|(?P<atom>[^\s()'\";]+)"  # numbers, symbols and the dot
)
WHITESPACE_RE = re.compile(r"\s+")
NUMBER_RE = re.compile(r"-?[0-9]+")
NUMBER_PREFIX_RE = re.compile(r"-?[0-9]")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

QUOTE = Symbol("quote")

Token = tuple[str, str, int]


def _classify_atom(text: str, pos: int, source: str) -> Token:
    if text == ".":
        return "dot", text, pos
    if NUMBER_RE.fullmatch(text):
        if not INT64_MIN <= int(text) <= INT64_MAX:
            raise KlispParseError(f"Integer literal out of range: {text}", pos, source)
        return "number", text, pos
    if NUMBER_PREFIX_RE.match(text):
        raise KlispParseError(f"Invalid number literal: {text}", pos, source)
    return "symbol", text, pos


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields (token_type, token_value, offset) tuples."""
    pos = 0
    n = len(source)

    while pos < n:
        ws = WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()
            continue

        m = TOKEN_RE.match(source, pos)
        if m is None:
            raise KlispParseError(f"Unexpected character {source[pos]!r}", pos, source)
        kind = m.lastgroup
        text = m.group(kind)
        if kind == "open_string":
            raise KlispParseError("Unterminated string literal", pos, source)
        if kind == "atom":
            yield _classify_atom(text, pos, source)
        elif kind != "comment":
            yield kind, text, pos
        pos = m.end()


class TokenStream:
    def __init__(
        self,
        token_iter: Iterator[Token],
        source: str = "",
        max_depth: Optional[int] = None,
    ):
        self.tokens = iter(token_iter)
        self.source = source
        self.buffer: list[Token] = []
        self.depth = 0
        self.max_depth = max_depth if max_depth is not None else runtime_context.get_max_depth_limit()

    def peek(self) -> tuple[Optional[str], Optional[str], int]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None, len(self.source)
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str], int]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None, len(self.source)))

    def _error(self, message: str, pos: int) -> KlispParseError:
        return KlispParseError(message, pos, self.source)

    def _descend(self, pos: int) -> None:
        if self.depth >= self.max_depth:
            raise self._error("Nesting too deep", pos)
        self.depth += 1

    def parse_expr(self) -> SExpression:
        tok_type, tok_val, pos = self.advance()

        if tok_type is None:
            raise self._error("Unexpected end of input", pos)
        if tok_type == "number":
            return int(tok_val)
        if tok_type == "symbol":
            return Symbol(tok_val)
        if tok_type == "string":
            return tok_val[1:-1]

        if tok_type == "quote":
            if self.peek()[0] is None:
                raise self._error("Expected an expression after quote", pos)
            self._descend(pos)
            try:
                return [QUOTE, self.parse_expr()]
            finally:
                self.depth -= 1

        if tok_type == "lparen":
            self._descend(pos)
            try:
                return self._parse_list(pos)
            finally:
                self.depth -= 1

        if tok_type == "rparen":
            raise self._error("Unmatched ')'", pos)
        if tok_type == "dot":
            raise self._error("Unexpected '.' outside of a list", pos)

        raise self._error(f"Unknown token: {tok_type} {tok_val}", pos)

    def _parse_list(self, open_pos: int) -> SExpression:
        items: list[SExpression] = []
        while True:
            tok_type, _, pos = self.peek()
            if tok_type is None:
                raise self._error("Unmatched '('", open_pos)
            if tok_type == "rparen":
                self.advance()
                return items if items else Nil
            if tok_type == "dot":
                self.advance()
                if self.peek()[0] in (None, "rparen"):
                    raise self._error("Expected an expression after '.'", pos)
                tail = self.parse_expr()
                close_type, _, close_pos = self.advance()
                if close_type != "rparen":
                    raise self._error("Expected ')' after dotted tail", close_pos)
                # (. x) degenerates to x
                return DottedList(items, tail) if items else tail
            items.append(self.parse_expr())

    def parse_all(self) -> Iterator[SExpression]:
        while self.peek()[0] is not None:
            yield self.parse_expr()


def parse(source: str) -> list[SExpression]:
    """Read every top-level form in `source`, failing atomically on the first error."""
    runtime_context.ensure_recursion_headroom()
    try:
        return list(TokenStream(lex(source), source).parse_all())
    except RecursionError:
        raise KlispParseError("Nesting too deep", 0, source) from None
