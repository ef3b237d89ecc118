"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture for asserting on log output.
- Helpers to build front-end trees by hand.
"""

import io
import re
import sys
import pytest
from pathlib import Path
from typing import List, Optional

from rich.console import Console

# Add src to path so we can import 'typed_rewrite' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from typed_rewrite.core.nodes import ExprNode  # noqa: E402
from typed_rewrite.core.source_range import SourceRange  # noqa: E402
from typed_rewrite.enums import NodeKind  # noqa: E402
from typed_rewrite.utils.console import reset_console, set_console  # noqa: E402


class NodeFactory:
  """
  Builds `ExprNode` trees over a source string by locating substrings.

  ``span("eta/lambda")`` resolves to the byte range of the first whole-word
  occurrence of that text (searching from ``start``), so hand-written trees stay
  readable.
  """

  def __init__(self, source: str):
    self.source = source

  def span(self, text: str, start: int = 0) -> SourceRange:
    pattern = re.escape(text)
    if re.match(r"\w", text[0]):
      pattern = r"(?<!\w)" + pattern
    if re.match(r"\w", text[-1]):
      pattern = pattern + r"(?!\w)"
    match = re.compile(pattern).search(self.source, start)
    if match is None:
      raise ValueError(f"{text!r} not found in source")
    begin = len(self.source[: match.start()].encode("utf-8"))
    return SourceRange(begin, begin + len(text.encode("utf-8")))

  def leaf(self, text: str, type_name: Optional[str] = None, start: int = 0) -> ExprNode:
    return ExprNode(NodeKind.OTHER, self.span(text, start), type_name=type_name, label=text)

  def wrap(self, inner: ExprNode, type_name: Optional[str] = None) -> ExprNode:
    """Implicit conversion around `inner`, sharing its range."""
    return ExprNode(NodeKind.IMPLICIT_CONVERSION, inner.range, children=[inner], type_name=type_name)

  def binary(self, text: str, op: str, left: ExprNode, right: ExprNode, type_name: Optional[str] = None, start: int = 0) -> ExprNode:
    return ExprNode(
      NodeKind.BINARY_OPERATOR_CALL,
      self.span(text, start),
      children=[left, right],
      operands=[left, right],
      type_name=type_name,
      op=op,
      label=text,
    )

  def construct(self, text: str, args: List[ExprNode], type_name: str = "complex", start: int = 0) -> ExprNode:
    return ExprNode(
      NodeKind.CONVERTING_CONSTRUCTOR_CALL,
      self.span(text, start),
      children=list(args),
      operands=list(args),
      type_name=type_name,
      label=text,
    )

  def other(self, text: str, children: List[ExprNode], type_name: Optional[str] = None, start: int = 0) -> ExprNode:
    return ExprNode(NodeKind.OTHER, self.span(text, start), children=children, type_name=type_name, label=text)

  def root(self, *children: ExprNode) -> ExprNode:
    return ExprNode(NodeKind.OTHER, SourceRange(0, len(self.source.encode("utf-8"))), children=list(children))


@pytest.fixture
def nodes():
  """Factory fixture: ``nodes(source)`` returns a `NodeFactory`."""
  return NodeFactory


@pytest.fixture
def captured_console():
  """
  Redirects all rich/logging output to an in-memory console.

  Yields:
      Console: The recording console; read it with ``export_text()``.
  """
  buffer_console = Console(file=io.StringIO(), record=True, width=200, force_terminal=False)
  set_console(buffer_console)
  yield buffer_console
  reset_console()

