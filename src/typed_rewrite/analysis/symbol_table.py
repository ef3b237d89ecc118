"""
Symbol Table and Type Inference for Python sources.

This module provides the static analysis pass the Python front end runs before
building the rewrite tree. It maps LibCST expression nodes to a resolved static
type *name* (``"complex"``, ``"float"``, ...), which is all the rewrite engine
needs to classify operands.

The `SymbolTableAnalyzer` visitor populates a `SymbolTable` by tracking:
1.  **Annotations**: Parameters, annotated assignments and return annotations.
2.  **Assignments**: Propagating types from RHS to LHS.
3.  **Scopes**: Handling nested function/class definitions.
4.  **Control Flow**: Branches that disagree on a variable's type leave it unresolved.
"""

import libcst as cst
from typing import Dict, Optional

# Literal node class -> builtin type name
_LITERAL_TYPES = {
  cst.Integer: "int",
  cst.Float: "float",
  cst.Imaginary: "complex",
}

_ARITHMETIC_OPS = (cst.Add, cst.Subtract, cst.Multiply, cst.Divide, cst.Power)

_REAL_TYPES = {"int", "float"}


def annotation_name(node: Optional[cst.BaseExpression]) -> Optional[str]:
  """
  Extracts a plain type name from an annotation expression.

  ``complex`` -> ``complex``, ``numbers.Complex`` -> ``Complex``,
  ``"complex"`` -> ``complex``. Anything more elaborate (subscripts, unions)
  is unresolved.

  Args:
      node: The annotation expression (``Annotation.annotation``).

  Returns:
      Optional[str]: The type name, or None.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    return node.attr.value
  if isinstance(node, cst.SimpleString):
    inner = node.evaluated_value
    if isinstance(inner, str) and inner.isidentifier():
      return inner
  return None


class Scope:
  """
  Represents a variable scope (Global, Class, or Function).
  """

  def __init__(self, parent: Optional["Scope"] = None, name: str = "<root>"):
    self.parent = parent
    self.name = name
    self.symbols: Dict[str, Optional[str]] = {}

  def set(self, name: str, type_name: Optional[str]) -> None:
    self.symbols[name] = type_name

  def get(self, name: str) -> Optional[str]:
    """
    Resolve a symbol, traversing parent scopes.

    A name bound in an inner scope shadows outer bindings even when its own type
    is unresolved.
    """
    if name in self.symbols:
      return self.symbols[name]
    if self.parent:
      return self.parent.get(name)
    return None

  def snapshot(self) -> Dict[str, Optional[str]]:
    """Returns a shallow copy of the current symbol table for branching."""
    return self.symbols.copy()


class SymbolTable:
  """
  Container for analysis results. Maps CST Nodes (by identity) to type names.
  """

  def __init__(self):
    self._node_types: Dict[cst.CSTNode, str] = {}

  def record_type(self, node: cst.CSTNode, type_name: Optional[str]) -> None:
    if type_name:
      self._node_types[node] = type_name

  def get_type(self, node: cst.CSTNode) -> Optional[str]:
    return self._node_types.get(node)


class SymbolTableAnalyzer(cst.CSTVisitor):
  """
  Static Analysis pass to populate the SymbolTable.
  Types propagate bottom-up through the ``leave_*`` methods.
  """

  def __init__(self, target_type: str):
    """
    Args:
        target_type: Name of the rewritten type. Calls to it produce a value of
            that type, and arithmetic with one target operand stays in that type.
    """
    self.target_type = target_type
    self.table = SymbolTable()
    self.root_scope = Scope(name="global")
    self.current_scope = self.root_scope
    # function name -> annotated return type
    self.function_returns: Dict[str, Optional[str]] = {}

  # --- Scoping ---

  def visit_ClassDef(self, node: cst.ClassDef) -> None:
    self.current_scope = Scope(parent=self.current_scope, name=f"class_{node.name.value}")

  def leave_ClassDef(self, node: cst.ClassDef) -> None:
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  def visit_FunctionDef(self, node: cst.FunctionDef) -> None:
    """Registers the return type, then enters the function scope with its parameters bound."""
    returns = annotation_name(node.returns.annotation) if node.returns else None
    self.function_returns[node.name.value] = returns

    self.current_scope = Scope(parent=self.current_scope, name=f"func_{node.name.value}")
    params = node.params
    for param in [*params.posonly_params, *params.params, *params.kwonly_params]:
      ann = annotation_name(param.annotation.annotation) if param.annotation else None
      self.current_scope.set(param.name.value, ann)

  def leave_FunctionDef(self, node: cst.FunctionDef) -> None:
    if self.current_scope.parent:
      self.current_scope = self.current_scope.parent

  # --- Control Flow Support ---

  def visit_If(self, node: cst.If) -> bool:
    """
    Visits both branches from the same starting state and merges the results.
    """
    node.test.visit(self)
    start_state = self.current_scope.snapshot()

    node.body.visit(self)
    body_state = self.current_scope.snapshot()

    self.current_scope.symbols = start_state.copy()
    if node.orelse:
      node.orelse.visit(self)
    else_state = self.current_scope.snapshot()

    self.current_scope.symbols = self._merge_states(body_state, else_state)
    return False

  def _merge_states(self, state_a: Dict[str, Optional[str]], state_b: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
    """
    Merges two symbol dictionaries. Conflicting bindings become unresolved;
    a name bound in only one branch keeps that branch's type.
    """
    merged = {}
    for key in set(state_a) | set(state_b):
      if key in state_a and key in state_b:
        merged[key] = state_a[key] if state_a[key] == state_b[key] else None
      else:
        merged[key] = state_a.get(key, state_b.get(key))
    return merged

  # --- Definition Tracking ---

  def leave_AnnAssign(self, node: cst.AnnAssign) -> None:
    """``x: complex = ...`` binds `x` to the annotated type."""
    ann = annotation_name(node.annotation.annotation)
    if isinstance(node.target, cst.Name):
      self.current_scope.set(node.target.value, ann)
      self.table.record_type(node.target, ann)

  def leave_Assign(self, node: cst.Assign) -> None:
    """
    Propagate type from RHS to LHS.
    z = complex(x) -> z is complex.
    """
    rhs_type = self.table.get_type(node.value)
    for target in node.targets:
      if isinstance(target.target, cst.Name):
        self.current_scope.set(target.target.value, rhs_type)
        self.table.record_type(target.target, rhs_type)

  # --- Usage Resolution ---

  def leave_Name(self, node: cst.Name) -> None:
    self.table.record_type(node, self.current_scope.get(node.value))

  def on_leave(self, original_node: cst.CSTNode) -> None:
    literal = _LITERAL_TYPES.get(type(original_node))
    if literal:
      self.table.record_type(original_node, literal)
    super().on_leave(original_node)

  def leave_UnaryOperation(self, node: cst.UnaryOperation) -> None:
    if isinstance(node.operator, (cst.Minus, cst.Plus)):
      self.table.record_type(node, self.table.get_type(node.expression))

  def leave_BinaryOperation(self, node: cst.BinaryOperation) -> None:
    """
    Arithmetic involving the target type yields the target type; arithmetic on
    plain reals yields a real.
    """
    if not isinstance(node.operator, _ARITHMETIC_OPS):
      return
    left = self.table.get_type(node.left)
    right = self.table.get_type(node.right)
    if self.target_type in (left, right):
      self.table.record_type(node, self.target_type)
    elif left in _REAL_TYPES and right in _REAL_TYPES:
      as_int = left == right == "int" and not isinstance(node.operator, cst.Divide)
      self.table.record_type(node, "int" if as_int else "float")

  def leave_Call(self, node: cst.Call) -> None:
    if not isinstance(node.func, cst.Name):
      return
    name = node.func.value
    if name == self.target_type or name in _REAL_TYPES:
      self.table.record_type(node, name)
    elif name in self.function_returns:
      self.table.record_type(node, self.function_returns[name])

  def leave_IfExp(self, node: cst.IfExp) -> None:
    body = self.table.get_type(node.body)
    if body and body == self.table.get_type(node.orelse):
      self.table.record_type(node, body)
