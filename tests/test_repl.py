import pytest

from klisp import __version__
from klisp.repl import main


def test_eval_option_prints_result(capsys):
    assert main(["-e", "(define xs '(1 2 3)) (cdr xs)"]) == 0
    assert capsys.readouterr().out.strip() == "(2 3)"


def test_eval_option_reports_errors(capsys):
    assert main(["-e", "(car 1)"]) == 1
    assert "car requires a pair" in capsys.readouterr().err


def test_runs_program_file(tmp_path, capsys):
    program = tmp_path / "prog.klisp"
    program.write_text("; comment\n(assoc 'b '((a . 1) (b . 2)))\n", encoding="utf-8")
    assert main([str(program)]) == 0
    assert capsys.readouterr().out.strip() == "(b . 2)"


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.klisp")]) == 1
    assert "Error" in capsys.readouterr().err


def test_repl_session(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv("KLISP_HISTORY", str(tmp_path / "history"))
    lines = iter(["(define x 'hello)", "", "(car", "unknown", "x"])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    assert main(["--no-color"]) == 0
    captured = capsys.readouterr()
    assert "hello" in captured.out
    assert "Parse error" in captured.err
    assert "Evaluation error: Unbound symbol: unknown" in captured.err


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out
