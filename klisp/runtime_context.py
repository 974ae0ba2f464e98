from __future__ import annotations

import sys

from klisp.config import get_max_depth
from klisp.errors import KlispStackOverflow

# NOTE: process-global; evaluation is single threaded.
_depth: int = 0
_max_depth: int = get_max_depth()

# Host frames used per unit of evaluation or nesting depth, with slack for callers.
_FRAMES_PER_DEPTH = 4
_FRAME_SLACK = 1000


def set_max_depth(limit: int | None) -> None:
    """Override the depth limit; None re-reads the configured value."""
    global _max_depth
    _max_depth = limit if limit is not None else get_max_depth()


def get_max_depth_limit() -> int:
    return _max_depth


def get_depth() -> int:
    return _depth


def ensure_recursion_headroom() -> None:
    """Raise the host recursion limit so the depth guard trips before Python does."""
    needed = _max_depth * _FRAMES_PER_DEPTH + _FRAME_SLACK
    if sys.getrecursionlimit() < needed:
        sys.setrecursionlimit(needed)


def enter() -> None:
    global _depth
    if _depth >= _max_depth:
        raise KlispStackOverflow(f"Maximum evaluation depth of {_max_depth} exceeded")
    _depth += 1


def leave() -> None:
    global _depth
    _depth -= 1


def reset() -> None:
    global _depth
    _depth = 0
