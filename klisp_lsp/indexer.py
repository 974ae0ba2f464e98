from __future__ import annotations

"""
Lightweight indexer for klisp programs without evaluating code.

We scan for top-level forms and build an index for:
- definitions: (define name ...), with `function` kind when the value is a lambda
- parenthesis balance and unmatched string quotes

The scanner is tolerant: it never raises on partial/incomplete buffers. Exact
syntax errors come from the real reader via `diagnostics_for`.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
import re

from klisp.errors import KlispParseError
from klisp.reader.parser import parse

# Simple token patterns for scanning
TOKEN_REGEX = re.compile(
    r"\s+|;.*$|\(|\)|'|\"[^\"]*\"|[^\s()'\";]+",
    re.MULTILINE,
)

WORD_BREAKS = " \t()'\"\n\r"


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function"
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    paren_balance: int = 0
    has_unmatched_quote: bool = False


@dataclass
class DiagnosticInfo:
    line: int  # 0-based
    col: int  # 0-based
    message: str


def _iter_tokens(text: str):
    for m in TOKEN_REGEX.finditer(text):
        tok = m.group(0)
        if not tok or tok.isspace() or tok.startswith(';'):
            continue
        yield tok, m.start(), m.end()


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = list(_iter_tokens(text))

    for i, (tok, start, _) in enumerate(tokens):
        if tok == '(':
            idx.paren_balance += 1
            # (define name value): only top-level definitions are indexed
            if idx.paren_balance != 1 or i + 2 >= len(tokens) or tokens[i + 1][0] != "define":
                continue
            name, name_start, _ = tokens[i + 2]
            if name in ('(', ')', "'") or name.startswith('"'):
                continue
            kind = 'var'
            if i + 4 < len(tokens) and tokens[i + 3][0] == '(' and tokens[i + 4][0] == 'lambda':
                kind = 'function'
            line, col = _position_from_offset(text, name_start)
            idx.symbols[name] = SymbolDef(name=name, kind=kind, line=line, col=col)
        elif tok == ')':
            idx.paren_balance -= 1

    # strings carry no escapes and may span lines; comments end at the newline
    in_string = False
    for line_text in text.splitlines():
        for ch in line_text:
            if ch == '"':
                in_string = not in_string
            elif ch == ';' and not in_string:
                break
    idx.has_unmatched_quote = in_string

    return idx


def diagnostics_for(text: str) -> List[DiagnosticInfo]:
    """Run the reader over `text` and report its error, if any, at the exact position."""
    try:
        parse(text)
    except KlispParseError as ex:
        return [DiagnosticInfo(line=ex.line - 1, col=ex.column - 1, message=ex.message)]
    return []


# --- Text helpers (0-based line/character positions) ---

def get_line_prefix(text: str, line: int, character: int) -> str:
    # Return the text from start of line up to the position
    lines = text.splitlines(True)
    if line >= len(lines):
        return ""
    return lines[line][:character]


def extract_word_at(text: str, line: int, character: int) -> Tuple[Optional[str], int]:
    """The symbol-like word under the cursor and its starting column."""
    lines = text.splitlines(True)
    if line >= len(lines):
        return None, character
    line_text = lines[line]
    start = character
    while start > 0 and line_text[start - 1] not in WORD_BREAKS:
        start -= 1
    end = character
    while end < len(line_text) and line_text[end] not in WORD_BREAKS:
        end += 1
    word = line_text[start:end]
    return (word if word else None), start


def extract_callee_name(prefix: str) -> Optional[str]:
    # find last '(' and take following token
    lp = prefix.rfind('(')
    if lp == -1:
        return None
    tail = prefix[lp + 1 :].strip()
    if not tail:
        return None
    return re.split(r"[\s)]", tail, maxsplit=1)[0]


# Signatures for quick hover/signature help without eval
SPECIAL_FORM_SIGNATURES: Dict[str, str] = {
    "quote": "(quote expr)",
    "define": "(define name value)",
    "lambda": "(lambda (params) body ...)",
    "if": "(if condition then else)",
}

BUILTIN_SIGNATURES: Dict[str, str] = {
    "cons": "(cons head tail)",
    "car": "(car pair)",
    "cdr": "(cdr pair)",
    "null?": "(null? value)",
    "equal?": "(equal? a b)",
    "assoc": "(assoc key alist)",
    "group-by": "(group-by rows key-fn)",
}

PREBOUND_SYMBOLS: Dict[str, str] = {
    "table": "table: the transaction rows, ((ID-001 . ((date . \"...\") (amount . n) ...)) ...)",
}
