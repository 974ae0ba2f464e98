from __future__ import annotations
import os
from pathlib import Path

# Defaults
_DEFAULT_MAX_DEPTH = 10000
_DEFAULT_HISTORY_FILE = Path.home() / '.klisp_history'
_DEFAULT_LOG_LEVEL = 'WARNING'


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def get_max_depth() -> int:
    return int_from_env('KLISP_MAX_DEPTH', _DEFAULT_MAX_DEPTH)


def get_history_file() -> Path:
    raw = os.environ.get('KLISP_HISTORY')
    return Path(raw).expanduser() if raw else _DEFAULT_HISTORY_FILE


def get_log_level() -> str:
    return os.environ.get('KLISP_LOG_LEVEL', _DEFAULT_LOG_LEVEL).upper()
