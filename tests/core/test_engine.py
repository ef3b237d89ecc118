"""
Tests for the ASTEngine pipeline.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

from typed_rewrite.config import RuntimeConfig
from typed_rewrite.core.engine import ASTEngine
from typed_rewrite.core.errors import FrontendError
from typed_rewrite.core.nodes import ExprNode, make_root
from typed_rewrite.core.source_range import SourceRange
from typed_rewrite.core.tracer import TraceEventType
from typed_rewrite.enums import NodeKind

CODE = "def f(a: complex, b: complex):\n    return a * b\n"


def python_engine(**kwargs):
  return ASTEngine(config=RuntimeConfig(frontend="python", **kwargs))


def test_run_rewrites_python_source():
  result = python_engine().run(CODE)

  assert result.success
  assert result.code == "def f(a: complex, b: complex):\n    return complex_mul(a,b)\n"
  assert result.rewrites == 1
  assert not result.has_errors


def test_trace_contains_phases_and_mutations():
  result = python_engine().run(CODE)

  types = [e["type"] for e in result.trace_events]
  descriptions = [e["description"] for e in result.trace_events if e["type"] == TraceEventType.PHASE_START]
  assert descriptions == ["Rewrite Pipeline", "Parsing", "Rewrite Engine", "Finalize"]
  assert types.count(TraceEventType.PHASE_START) == types.count(TraceEventType.PHASE_END)
  assert TraceEventType.AST_MUTATION in types


def test_parse_error_returns_failed_result():
  code = "def broken(:\n"
  result = python_engine().run(code)

  assert not result.success
  assert result.code == code
  assert result.errors[0].startswith("Parse Error:")
  assert result.trace_events


def declining_frontend():
  """A front end that routes an operator call with two real operands."""
  code = "y = a + b\n"
  leaf_a = ExprNode(NodeKind.OTHER, SourceRange(4, 5), type_name="float")
  leaf_b = ExprNode(NodeKind.OTHER, SourceRange(8, 9), type_name="float")
  add = ExprNode(
    NodeKind.BINARY_OPERATOR_CALL, SourceRange(4, 9), children=[leaf_a, leaf_b], operands=[leaf_a, leaf_b], op="+"
  )
  frontend = MagicMock()
  frontend.parse.return_value = make_root(len(code), [add])
  return code, frontend


def test_dead_end_is_a_warning_by_default(captured_console):
  code, frontend = declining_frontend()
  with patch("typed_rewrite.core.engine.get_frontend", return_value=frontend):
    result = python_engine().run(code)

  assert result.success
  assert result.code == code
  assert len(result.warnings) == 1
  assert result.errors == []


def test_dead_end_fails_in_strict_mode(captured_console):
  code, frontend = declining_frontend()
  with patch("typed_rewrite.core.engine.get_frontend", return_value=frontend):
    result = python_engine(strict_mode=True).run(code)

  assert not result.success
  assert result.errors[0].startswith("Strict mode:")
  assert result.code == code


def test_auto_frontend_uses_path_suffix():
  frontend = MagicMock()
  frontend.parse.return_value = make_root(len(CODE), [])
  with patch("typed_rewrite.core.engine.get_frontend", return_value=frontend) as mock_get:
    ASTEngine(config=RuntimeConfig(clang_args=["-std=c++20"])).run(CODE, path=None)
    ASTEngine(config=RuntimeConfig()).run(CODE, path=Path("x.py"))

  assert mock_get.call_args_list[0].args == ("cpp",)
  assert mock_get.call_args_list[0].kwargs == {"clang_args": ["-std=c++20"]}
  assert mock_get.call_args_list[1].args == ("python",)


def test_frontend_error_from_any_frontend_is_caught():
  frontend = MagicMock()
  frontend.parse.side_effect = FrontendError("libclang could not be loaded")
  with patch("typed_rewrite.core.engine.get_frontend", return_value=frontend):
    result = ASTEngine(config=RuntimeConfig(frontend="cpp")).run("int x;")

  assert not result.success
  assert "libclang could not be loaded" in result.errors[0]
