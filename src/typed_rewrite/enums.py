"""
Enumerations for typed-rewrite.

This module defines the standard enumerations shared by the front ends and the
rewrite engine: expression node kinds and the supported arithmetic operators.
"""

from enum import Enum
from typing import Optional


class NodeKind(str, Enum):
  """
  Tag of an expression node as delivered by a front end.

  The rewrite engine dispatches on this tag instead of on concrete parser classes.
  """

  BINARY_OPERATOR_CALL = "binary_operator_call"
  CONVERTING_CONSTRUCTOR_CALL = "converting_constructor_call"
  IMPLICIT_CONVERSION = "implicit_conversion"  # transparent wrapper, exactly one child
  OTHER = "other"


class ArithmeticOp(str, Enum):
  """
  Binary operators that map onto free functions.

  The enum value is the operator spelling; `opname` is the suffix used in the
  synthesized function name (``complex_add``, ``real_div_complex`` ...).
  """

  ADD = "+"
  SUB = "-"
  MUL = "*"
  DIV = "/"

  @property
  def opname(self) -> str:
    """Function-name fragment for this operator."""
    return self.name.lower()

  @classmethod
  def from_spelling(cls, spelling: Optional[str]) -> Optional["ArithmeticOp"]:
    """
    Looks up an operator by its source spelling.

    Args:
        spelling (Optional[str]): Operator token, e.g. ``"+"``.

    Returns:
        Optional[ArithmeticOp]: The operator, or None if the spelling is not one
        of the rewritable operators.
    """
    if spelling is None:
      return None
    try:
      return cls(spelling.strip())
    except ValueError:
      return None
