"""
Tests for Symbol Table Analysis.
"""

import pytest
import libcst as cst

from typed_rewrite.analysis.symbol_table import SymbolTableAnalyzer, annotation_name


@pytest.fixture
def analyzer():
  return SymbolTableAnalyzer("complex")


def analyze(code, analyzer):
  tree = cst.parse_module(code)
  tree.visit(analyzer)
  return tree


def first(tree, node_type):
  found = []

  class _Finder(cst.CSTVisitor):
    def on_visit(self, node):
      if isinstance(node, node_type) and not found:
        found.append(node)
      return True

  tree.visit(_Finder())
  return found[0]


def test_annotated_assignment(analyzer):
  analyze("z: complex = make()\n", analyzer)
  assert analyzer.current_scope.get("z") == "complex"


def test_assignment_from_constructor(analyzer):
  analyze("z = complex(1.0, 2.0)\nr = 1.5\n", analyzer)
  assert analyzer.current_scope.get("z") == "complex"
  assert analyzer.current_scope.get("r") == "float"


def test_imaginary_literal_is_complex(analyzer):
  analyze("j = 2j\n", analyzer)
  assert analyzer.current_scope.get("j") == "complex"


def test_parameters_are_scoped(analyzer):
  code = """
def f(a: complex, b: float, c):
    return a
"""
  tree = analyze(code, analyzer)
  ret = first(tree, cst.Return)
  assert analyzer.table.get_type(ret.value) == "complex"
  # Parameters do not leak into the module scope
  assert analyzer.current_scope.get("a") is None


def test_arithmetic_propagation(analyzer):
  code = """
def f(a: complex, x: float, n: int):
    p = a * x
    q = x / n
    m = n - n
    return p
"""
  tree = analyze(code, analyzer)
  # The function scope is gone, read the types recorded on the assigned values
  types = {}

  class _Collect(cst.CSTVisitor):
    def visit_Assign(self, node):
      types[node.targets[0].target.value] = analyzer.table.get_type(node.value)

  tree.visit(_Collect())
  assert types == {"p": "complex", "q": "float", "m": "int"}


def test_function_return_annotation(analyzer):
  code = """
def polar(r: float) -> complex:
    return complex(r)

z = polar(1.0)
"""
  analyze(code, analyzer)
  assert analyzer.current_scope.get("z") == "complex"


def test_branch_conflict_is_unresolved(analyzer):
  code = """
if flag:
    x = 1.0
else:
    x = complex(1.0)
y = complex(2.0)
"""
  analyze(code, analyzer)
  assert analyzer.current_scope.get("x") is None
  assert analyzer.current_scope.get("y") == "complex"


def test_branch_agreement_is_kept(analyzer):
  code = """
if flag:
    x = complex(1.0)
else:
    x = 2j
"""
  analyze(code, analyzer)
  assert analyzer.current_scope.get("x") == "complex"


def test_unary_and_conditional(analyzer):
  code = "z: complex = w\nn = -z\nc = z if flag else -z\n"
  analyze(code, analyzer)
  assert analyzer.current_scope.get("n") == "complex"
  assert analyzer.current_scope.get("c") == "complex"


@pytest.mark.parametrize(
  "annotation, expected",
  [("complex", "complex"), ("numbers.Complex", "Complex"), ("'complex'", "complex"), ("List[complex]", None)],
)
def test_annotation_name(annotation, expected):
  expr = cst.parse_expression(annotation)
  assert annotation_name(expr) == expected
