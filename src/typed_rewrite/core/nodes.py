"""
Expression Node Model.

Front ends translate their native syntax trees into `ExprNode` records. The
rewrite engine only ever reads these records: it never needs to know whether
they came from libclang cursors or LibCST nodes.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from typed_rewrite.core.source_range import SourceRange
from typed_rewrite.enums import NodeKind


@dataclass(eq=False)
class ExprNode:
  """
  A node of the front-end tree.

  Attributes:
      kind (NodeKind): Dispatch tag.
      range (SourceRange): Byte span of the node in the original buffer.
      children (List[ExprNode]): Every syntactic child, in source order.
      operands (List[ExprNode]): Semantic operands. Left and right for binary
          operator calls, the constructor arguments for constructor calls.
          Each operand is also reachable through `children`.
      type_name (Optional[str]): Resolved static type name, if known.
      op (Optional[str]): Operator spelling for binary operator calls.
      label (str): Short description used in logs and traces.
  """

  kind: NodeKind
  range: SourceRange
  children: List["ExprNode"] = field(default_factory=list)
  operands: List["ExprNode"] = field(default_factory=list)
  type_name: Optional[str] = None
  op: Optional[str] = None
  label: str = ""

  def walk(self) -> Iterator["ExprNode"]:
    """
    Yields this node and all descendants in pre-order.

    Uses an explicit stack so that deep trees do not hit the recursion limit.
    """
    stack = [self]
    while stack:
      node = stack.pop()
      yield node
      stack.extend(reversed(node.children))

  def __repr__(self) -> str:
    return f"ExprNode({self.kind.value}, {self.range}, type={self.type_name!r}, label={self.label!r})"


def make_root(length: int, children: List[ExprNode]) -> ExprNode:
  """
  Builds the synthetic root that spans a whole file.

  Args:
      length (int): Size of the original buffer in bytes.
      children (List[ExprNode]): Top-level expression trees.

  Returns:
      ExprNode: An `OTHER` node covering ``[0, length)``.
  """
  return ExprNode(kind=NodeKind.OTHER, range=SourceRange(0, length), children=children, label="<file>")
