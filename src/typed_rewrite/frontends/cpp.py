"""
C++ Front End (libclang).

Parses a C++ translation unit through the ``clang.cindex`` bindings and maps the
cursors of the main file onto the rewrite tree:

- Overloaded binary operator calls (``CXXOperatorCallExpr``) become binary
  operator calls when an operand has the target type. Their three cursor
  children are, in source order, the left operand, the reference to the
  ``operator+`` function (spanning the operator token) and the right operand.
  Explicit calls such as ``operator+(a, b)`` are left alone.
- Explicit constructions of the target type, ``complex(x)`` (functional cast) and
  ``complex(a, b)`` / ``complex()`` (temporary object), become converting
  constructor calls. A one-argument construction from a value that already has
  the target type is a copy and stays untouched.
- Implicit casts, materialized temporaries and implicit constructions (the
  ``float -> complex`` conversion of an operand, by-value copies) become
  implicit conversion wrappers, so the classifier sees the operand as written.

Only cursors located in the main file are mapped; included headers are skipped.
"""

import re
from pathlib import Path
from typing import List, Optional, Sequence

from typed_rewrite.core.classifier import TypeClassifier
from typed_rewrite.core.errors import FrontendError
from typed_rewrite.core.nodes import ExprNode, make_root
from typed_rewrite.core.source_range import SourceRange
from typed_rewrite.enums import NodeKind
from typed_rewrite.frontends.base import register_frontend

DEFAULT_CLANG_ARGS = ["-x", "c++", "-std=c++17"]

_QUALIFIERS = re.compile(r"\b(const|volatile|struct|class|union)\b")


def _load_cindex():
  """Imports the libclang bindings on first use."""
  try:
    from clang import cindex
  except ImportError as e:
    raise FrontendError("The C++ front end requires the 'libclang' package (pip install libclang)") from e
  return cindex


def normalize_type_name(spelling: str) -> Optional[str]:
  """
  Reduces a clang type spelling to a bare type name.

  ``const complex &`` -> ``complex``, ``struct complex`` -> ``complex``.

  Args:
      spelling (str): ``Type.spelling`` as reported by libclang.

  Returns:
      Optional[str]: The bare name, or None for an empty spelling.
  """
  name = _QUALIFIERS.sub("", spelling).replace("&", "")
  name = " ".join(name.split())
  return name or None


class _CursorMapper:
  """
  Converts the cursors of one translation unit into `ExprNode` trees.
  """

  def __init__(self, cindex, filename: str, source: bytes, target_type: str):
    self.cindex = cindex
    self.kinds = cindex.CursorKind
    self.filename = filename
    self.source = source
    self.buffer_size = len(source)
    self.target_type = target_type

  def map_children(self, cursor) -> List[ExprNode]:
    nodes = []
    for child in cursor.get_children():
      node = self.map(child)
      if node is not None:
        nodes.append(node)
    return nodes

  def map(self, cursor) -> Optional[ExprNode]:
    rng = self._range_of(cursor)
    if rng is None:
      return None

    raw_children = [c for c in cursor.get_children() if self._range_of(c) is not None]
    children = [self.map(c) for c in raw_children]
    node = ExprNode(
      kind=NodeKind.OTHER,
      range=rng,
      children=children,
      type_name=self._type_of(cursor),
      label=f"{cursor.kind.name} {cursor.spelling}".strip(),
    )

    if cursor.kind == self.kinds.CALL_EXPR:
      self._classify_call(cursor, raw_children, node)
    elif cursor.kind == self.kinds.CXX_FUNCTIONAL_CAST_EXPR:
      self._classify_functional_cast(raw_children, node)
    elif cursor.kind == self.kinds.UNEXPOSED_EXPR and len(children) == 1:
      node.kind = NodeKind.IMPLICIT_CONVERSION
    return node

  # --- Classification ---

  def _classify_call(self, cursor, raw_children: Sequence, node: ExprNode) -> None:
    referenced = cursor.referenced
    if referenced is not None and referenced.kind == self.kinds.CONSTRUCTOR:
      explicit = any(c.kind == self.kinds.TYPE_REF for c in raw_children)
      args = self._expression_children(raw_children, node.children)
      if explicit:
        if node.type_name == self.target_type and not self._is_copy(args):
          node.kind = NodeKind.CONVERTING_CONSTRUCTOR_CALL
          node.operands = args
      elif len(args) == 1:
        node.kind = NodeKind.IMPLICIT_CONVERSION
      return

    spelling = cursor.spelling or ""
    if not spelling.startswith("operator") or len(node.children) != 3:
      return
    op = spelling[len("operator") :].strip()
    # Infix form, in source order: left operand, operator token, right operand.
    # An explicit call `operator+(a, b)` starts with the reference instead.
    left, callee, right = sorted(node.children, key=lambda n: n.range.begin)
    if self._text(callee).strip() != op.encode("utf-8"):
      return
    if self.target_type not in (TypeClassifier.underlying(left).type_name, TypeClassifier.underlying(right).type_name):
      return
    node.kind = NodeKind.BINARY_OPERATOR_CALL
    node.op = op
    node.operands = [left, right]

  def _classify_functional_cast(self, raw_children: Sequence, node: ExprNode) -> None:
    if node.type_name != self.target_type:
      return
    inner = self._expression_children(raw_children, node.children)
    inner_raw = [c for c in raw_children if c.kind != self.kinds.TYPE_REF]
    args = inner
    if len(inner_raw) == 1 and inner_raw[0].kind == self.kinds.CALL_EXPR:
      ref = inner_raw[0].referenced
      if ref is not None and ref.kind == self.kinds.CONSTRUCTOR:
        construct_raw = [c for c in inner_raw[0].get_children() if self._range_of(c) is not None]
        args = self._expression_children(construct_raw, inner[0].children)
    if self._is_copy(args):
      return
    node.kind = NodeKind.CONVERTING_CONSTRUCTOR_CALL
    node.operands = args

  def _is_copy(self, args: List[ExprNode]) -> bool:
    if len(args) != 1:
      return False
    arg = args[0]
    while arg.kind is NodeKind.IMPLICIT_CONVERSION and arg.children:
      arg = arg.children[0]
    return arg.type_name == self.target_type

  def _expression_children(self, raw_children: Sequence, nodes: List[ExprNode]) -> List[ExprNode]:
    return [node for raw, node in zip(raw_children, nodes) if raw.kind != self.kinds.TYPE_REF]

  # --- Cursor helpers ---

  def _text(self, node: ExprNode) -> bytes:
    return self.source[node.range.begin : node.range.end]

  def _range_of(self, cursor) -> Optional[SourceRange]:
    extent = cursor.extent
    start, end = extent.start, extent.end
    if start.file is None or start.file.name != self.filename:
      return None
    if end.file is None or end.file.name != self.filename:
      return None
    if start.offset > end.offset or end.offset > self.buffer_size:
      return None
    return SourceRange(start.offset, end.offset)

  def _type_of(self, cursor) -> Optional[str]:
    if not cursor.kind.is_expression():
      return None
    ctype = cursor.type
    if ctype.kind == self.cindex.TypeKind.INVALID:
      return None
    name = normalize_type_name(ctype.spelling)
    if name == self.target_type:
      return name
    # Typedefs and aliases: compare the declaration behind the canonical type
    canonical = ctype.get_canonical()
    if canonical.kind in (self.cindex.TypeKind.LVALUEREFERENCE, self.cindex.TypeKind.RVALUEREFERENCE):
      canonical = canonical.get_pointee().get_canonical()
    decl = canonical.get_declaration()
    if decl.kind != self.kinds.NO_DECL_FOUND and decl.spelling == self.target_type:
      return self.target_type
    return name


@register_frontend("cpp")
class CppFrontend:
  """
  Builds the rewrite tree for C++ sources through libclang.
  """

  name = "cpp"
  suffixes = (".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h")

  def __init__(self, clang_args: Optional[List[str]] = None):
    """
    Args:
        clang_args: Command line passed to clang. Defaults to C++17.
    """
    self.clang_args = list(clang_args) if clang_args is not None else list(DEFAULT_CLANG_ARGS)

  def parse(self, source: str, target_type: str, path: Optional[Path] = None) -> ExprNode:
    """
    Parses `source` as the main file of a translation unit.

    Raises:
        FrontendError: If libclang is unavailable or reports errors.
    """
    cindex = _load_cindex()
    filename = str(path) if path else "input.cpp"

    try:
      index = cindex.Index.create()
      tu = index.parse(filename, args=self.clang_args, unsaved_files=[(filename, source)])
    except cindex.LibclangError as e:
      raise FrontendError(f"libclang could not be loaded: {e}") from e
    except cindex.TranslationUnitLoadError as e:
      raise FrontendError(f"clang failed to parse {filename}: {e}") from e

    for diag in tu.diagnostics:
      if diag.severity >= cindex.Diagnostic.Error:
        loc = diag.location
        raise FrontendError(f"clang: {diag.spelling}", (loc.line, loc.column))

    source_bytes = source.encode("utf-8")
    mapper = _CursorMapper(cindex, filename, source_bytes, target_type)
    return make_root(len(source_bytes), mapper.map_children(tu.cursor))
