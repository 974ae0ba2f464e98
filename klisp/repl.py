"""Command-line entry point: interactive REPL, or run a program file."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from klisp import __version__
from klisp.config import get_history_file, get_log_level
from klisp.errors import KlispError, KlispParseError
from klisp.interpreter import Interpreter
from klisp.printer import colorize, to_string

logger = logging.getLogger(__name__)

PROMPT = "klisp> "


def _setup_history():
    try:
        import readline
    except ImportError:
        return None
    path = get_history_file()
    try:
        readline.read_history_file(path)
    except OSError:
        pass
    return readline, path


def _save_history(history) -> None:
    if history is None:
        return
    readline, path = history
    try:
        readline.write_history_file(path)
    except OSError as ex:
        logger.warning("Could not write history file %s: %s", path, ex)


def repl(interp: Interpreter, color: bool = True) -> int:
    print(f"klisp REPL v{__version__}")
    print("Type expressions to evaluate. Press Ctrl+C or Ctrl+D to exit.")
    print()
    history = _setup_history()
    render = colorize if color else to_string
    try:
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                print("^D")
                break
            except KeyboardInterrupt:
                print("^C")
                break
            if not line.strip():
                continue
            try:
                print(render(interp.eval(line)))
            except KlispParseError as ex:
                print(f"Parse error: {ex}", file=sys.stderr)
            except KlispError as ex:
                print(f"Evaluation error: {ex}", file=sys.stderr)
    finally:
        _save_history(history)
    return 0


def run(interp: Interpreter, code: str) -> int:
    try:
        result = interp.eval(code)
    except KlispError as ex:
        logger.error("Program failed: %s", ex)
        print(f"Error: {ex}", file=sys.stderr)
        return 1
    print(to_string(result))
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="klisp", description="klisp interpreter")
    parser.add_argument("file", nargs="?", help="program file to run; starts a REPL if omitted")
    parser.add_argument("-e", "--eval", dest="code", help="evaluate CODE and print the result")
    parser.add_argument("--no-color", action="store_true", help="disable ANSI colours in the REPL")
    parser.add_argument("--log-level", default=get_log_level(), help="logging level (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    interp = Interpreter()
    if args.code is not None:
        return run(interp, args.code)
    if args.file is not None:
        try:
            with open(args.file, encoding="utf-8") as fh:
                code = fh.read()
        except OSError as ex:
            print(f"Error: {ex}", file=sys.stderr)
            return 1
        return run(interp, code)
    return repl(interp, color=not args.no_color)


if __name__ == "__main__":
    sys.exit(main())
