"""
Python Front End (LibCST).

Parses Python source with LibCST and builds the rewrite tree:

- ``a + b`` (also ``-``, ``*``, ``/``) where at least one operand resolves to the
  target type becomes a binary operator call. Other operators on target values
  (``**``, ``//``, ...) are routed too, and the engine leaves them untouched.
- ``complex(x, ...)`` (a call to the target type by its bare name, with
  positional arguments) becomes a converting constructor call, unless it merely
  copies a value that already has the target type.

Byte ranges come from `ByteSpanPositionProvider`, which reports the syntactic
span of each expression: surrounding parentheses belong to the parent node.
"""

from pathlib import Path
from typing import Dict, List, Optional

import libcst as cst
from libcst.metadata import ByteSpanPositionProvider, MetadataWrapper

from typed_rewrite.analysis.symbol_table import SymbolTable, SymbolTableAnalyzer
from typed_rewrite.core.errors import FrontendError
from typed_rewrite.core.nodes import ExprNode, make_root
from typed_rewrite.core.source_range import SourceRange
from typed_rewrite.enums import NodeKind
from typed_rewrite.frontends.base import register_frontend

_OPERATOR_SPELLING = {
  cst.Add: "+",
  cst.Subtract: "-",
  cst.Multiply: "*",
  cst.Divide: "/",
  cst.Power: "**",
  cst.FloorDivide: "//",
  cst.Modulo: "%",
  cst.MatrixMultiply: "@",
}


class _TreeBuilder(cst.CSTVisitor):
  """
  Mirrors every LibCST expression as an `ExprNode`, nesting by expression parentage.
  Statements and other non-expression nodes are transparent.
  """

  def __init__(self, spans: Dict[cst.CSTNode, object], table: SymbolTable, target_type: str):
    self.spans = spans
    self.table = table
    self.target_type = target_type
    self.roots: List[ExprNode] = []
    self._nodes: Dict[cst.CSTNode, ExprNode] = {}
    self._pending: List[List[ExprNode]] = []

  def on_visit(self, node: cst.CSTNode) -> bool:
    if isinstance(node, cst.BaseExpression):
      self._pending.append([])
    return True

  def on_leave(self, original_node: cst.CSTNode) -> None:
    if not isinstance(original_node, cst.BaseExpression):
      return
    children = self._pending.pop()
    expr = self._build(original_node, children)
    self._nodes[original_node] = expr
    if self._pending:
      self._pending[-1].append(expr)
    else:
      self.roots.append(expr)

  def _build(self, node: cst.BaseExpression, children: List[ExprNode]) -> ExprNode:
    span = self.spans[node]
    expr = ExprNode(
      kind=NodeKind.OTHER,
      range=SourceRange(span.start, span.start + span.length),
      children=children,
      type_name=self.table.get_type(node),
      label=type(node).__name__,
    )

    if isinstance(node, cst.BinaryOperation):
      self._classify_binary(node, expr)
    elif isinstance(node, cst.Call):
      self._classify_call(node, expr)
    return expr

  def _classify_binary(self, node: cst.BinaryOperation, expr: ExprNode) -> None:
    spelling = _OPERATOR_SPELLING.get(type(node.operator))
    if spelling is None:
      return
    operand_types = (self.table.get_type(node.left), self.table.get_type(node.right))
    if self.target_type not in operand_types:
      return
    expr.kind = NodeKind.BINARY_OPERATOR_CALL
    expr.op = spelling
    expr.operands = [self._nodes[node.left], self._nodes[node.right]]

  def _classify_call(self, node: cst.Call, expr: ExprNode) -> None:
    func = node.func
    if not isinstance(func, cst.Name) or func.value != self.target_type:
      return
    if any(arg.keyword is not None or arg.star for arg in node.args):
      return
    if len(node.args) == 1 and self.table.get_type(node.args[0].value) == self.target_type:
      return
    expr.kind = NodeKind.CONVERTING_CONSTRUCTOR_CALL
    expr.operands = [self._nodes[arg.value] for arg in node.args]


@register_frontend("python")
class PythonFrontend:
  """
  Builds the rewrite tree for Python modules.
  """

  name = "python"
  suffixes = (".py", ".pyi")

  def parse(self, source: str, target_type: str, path: Optional[Path] = None) -> ExprNode:
    """
    Parses `source` and returns the rewrite tree.

    Raises:
        FrontendError: On Python syntax errors.
    """
    try:
      module = cst.parse_module(source)
    except cst.ParserSyntaxError as e:
      raise FrontendError(f"Python syntax error: {e.message}", (e.editor_line, e.editor_column)) from e

    wrapper = MetadataWrapper(module)
    spans = wrapper.resolve(ByteSpanPositionProvider)

    analyzer = SymbolTableAnalyzer(target_type)
    wrapper.module.visit(analyzer)

    builder = _TreeBuilder(spans, analyzer.table, target_type)
    wrapper.module.visit(builder)

    return make_root(len(source.encode("utf-8")), builder.roots)
