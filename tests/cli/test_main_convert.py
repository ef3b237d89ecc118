"""
Tests for the command-line entry point.
"""

import json
from unittest.mock import patch

import pytest

from typed_rewrite import __version__
from typed_rewrite.cli.__main__ import main

SOURCE = "def f(cosTheta: complex, eta: complex, lam: float):\n    return cosTheta + eta/lam\n"
EXPECTED = "def f(cosTheta: complex, eta: complex, lam: float):\n    return complex_add(cosTheta,complex_div_real(eta,lam))\n"


@pytest.fixture
def source_file(tmp_path):
  path = tmp_path / "kernel.py"
  path.write_text(SOURCE, encoding="utf-8")
  return path


def test_rewrites_to_stdout(source_file, capsys, captured_console):
  assert main([str(source_file)]) == 0
  assert capsys.readouterr().out == EXPECTED


def test_missing_input_reports_error_and_writes_nothing(tmp_path, capsys, captured_console):
  exit_code = main([str(tmp_path / "missing.cpp")])

  assert exit_code == 1
  assert capsys.readouterr().out == ""
  assert "Cannot read input" in captured_console.export_text()


def test_directory_input_is_an_error(tmp_path, capsys, captured_console):
  assert main([str(tmp_path)]) == 1
  assert capsys.readouterr().out == ""


def test_writes_out_file(source_file, tmp_path, capsys, captured_console):
  out = tmp_path / "build" / "kernel_rewritten.py"

  assert main([str(source_file), "--out", str(out)]) == 0

  assert out.read_text(encoding="utf-8") == EXPECTED
  assert capsys.readouterr().out == ""


def test_preserves_line_endings(tmp_path, captured_console):
  src = tmp_path / "crlf.py"
  src.write_bytes(b"def f(a: complex, b: complex):\r\n    return a - b\r\n")
  out = tmp_path / "out.py"

  assert main([str(src), "--out", str(out)]) == 0
  assert out.read_bytes() == b"def f(a: complex, b: complex):\r\n    return complex_sub(a,b)\r\n"


def test_target_type_flag(tmp_path, capsys, captured_console):
  src = tmp_path / "q.py"
  src.write_text("def g(a: quat, b: quat):\n    return a * b\n", encoding="utf-8")

  assert main([str(src), "--target-type", "quat"]) == 0
  assert "return quat_mul(a,b)" in capsys.readouterr().out


def test_invalid_target_type_flag(source_file, capsys, captured_console):
  assert main([str(source_file), "--target-type", "not a type"]) == 1
  assert capsys.readouterr().out == ""
  assert "Invalid configuration" in captured_console.export_text()


def test_parse_error_writes_nothing(tmp_path, capsys, captured_console):
  src = tmp_path / "broken.py"
  src.write_text("def broken(:\n", encoding="utf-8")

  assert main([str(src)]) == 1
  assert capsys.readouterr().out == ""
  assert "Parse Error" in captured_console.export_text()


def test_json_trace_dump(source_file, tmp_path, capsys, captured_console):
  trace = tmp_path / "trace.json"

  assert main([str(source_file), "--json-trace", str(trace)]) == 0

  events = json.loads(trace.read_text(encoding="utf-8"))
  mutations = [e for e in events if e["type"] == "ast_mutation"]
  assert len(mutations) == 2


def test_frontend_flag_overrides_suffix(tmp_path, capsys, captured_console):
  src = tmp_path / "kernel.txt"
  src.write_text(SOURCE, encoding="utf-8")

  assert main([str(src), "--frontend", "python"]) == 0
  assert capsys.readouterr().out == EXPECTED


def test_version_flag(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])
  assert excinfo.value.code == 0
  assert __version__ in capsys.readouterr().out


def test_frontend_choices_follow_registry(source_file, capsys):
  with patch("typed_rewrite.cli.__main__.available_frontends", return_value=["python"]):
    with pytest.raises(SystemExit) as excinfo:
      main([str(source_file), "--frontend", "cpp"])
  assert excinfo.value.code == 2
  assert capsys.readouterr().out == ""


def test_unknown_frontend_rejected(source_file):
  with pytest.raises(SystemExit) as excinfo:
    main([str(source_file), "--frontend", "fortran"])
  assert excinfo.value.code == 2
