"""
Type Classifier.

Decides whether an operand is of the configured target type, after stripping the
transparent conversion wrappers a front end may leave around it (implicit casts,
temporaries, copy construction).
"""

from typed_rewrite.core.nodes import ExprNode
from typed_rewrite.enums import NodeKind


class TypeClassifier:
  """
  Compares resolved operand types against a single target type identifier.
  """

  def __init__(self, target_type: str):
    """
    Args:
        target_type (str): Name of the user-defined numeric type, e.g. ``complex``.
    """
    self.target_type = target_type

  @staticmethod
  def underlying(expr: ExprNode) -> ExprNode:
    """
    Unwraps implicit conversion wrappers until a real expression is reached.

    Args:
        expr (ExprNode): Possibly wrapped expression.

    Returns:
        ExprNode: The first non-wrapper node.
    """
    node = expr
    while node.kind is NodeKind.IMPLICIT_CONVERSION and node.children:
      node = node.children[0]
    return node

  def is_target_type(self, expr: ExprNode) -> bool:
    """
    Returns:
        bool: True if the underlying expression resolves to the target type.
    """
    return self.underlying(expr).type_name == self.target_type
