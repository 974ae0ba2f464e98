"""klisp Language Server package.

This package provides:
- A pygls-based Language Server for the klisp dialect.
- A lightweight indexer that scans documents for top-level forms without evaluation.

Note: The LSP does not evaluate user buffers; it builds a static index from text
and runs the real reader only to report syntax errors.
"""

__all__ = [
    "server",
    "indexer",
]
