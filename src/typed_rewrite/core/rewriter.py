"""
Rewrite Engine.

Turns target-type operator calls and converting constructor calls into free
function calls::

    cosTheta + eta/lambda   ->   complex_add(cosTheta,complex_div_real(eta,lambda))

The outer traversal is top-down (pre-order over the front-end tree), but the
replacement text of a node depends on the *final* text of its operands. The pass
therefore resolves operands on demand (`RewritePass.resolve`) before
synthesizing the parent, then marks the whole subtree in the `RewrittenSet` so
later visits of the descendants become no-ops. Every node is rewritten at most
once and no two recorded edits overlap.

Recursion depth of `resolve` is bounded by the expression nesting depth.
"""

import logging
from typing import Callable, Dict, List, Optional, Set

from rich.markup import escape

from typed_rewrite.core.classifier import TypeClassifier
from typed_rewrite.core.edit_buffer import EditBuffer
from typed_rewrite.core.nodes import ExprNode
from typed_rewrite.core.source_range import SourceRange
from typed_rewrite.core.tracer import TraceLogger, get_tracer
from typed_rewrite.core.tracker import RewrittenSet
from typed_rewrite.enums import ArithmeticOp, NodeKind
from typed_rewrite.utils.console import log_warning

logger = logging.getLogger(__name__)


class RewriteContext:
  """
  Shared state of one rewrite pass over one file.

  Attributes:
      buffer (EditBuffer): Original bytes plus recorded edits.
      rewritten (RewrittenSet): Ranges already consumed by a rewrite.
      classifier (TypeClassifier): Target type test.
      tracer (TraceLogger): Event sink.
      warnings (List[str]): Contract-mismatch warnings raised during the pass.
      rewrites (int): Number of committed replacements.
      output (Optional[str]): Finalized text once the pass completed.
  """

  def __init__(self, source: str, target_type: str, tracer: Optional[TraceLogger] = None):
    self.buffer = EditBuffer(source)
    self.rewritten = RewrittenSet()
    self.classifier = TypeClassifier(target_type)
    self.tracer = tracer or get_tracer()
    self.warnings: List[str] = []
    self.rewrites = 0
    self.output: Optional[str] = None

  @property
  def target_type(self) -> str:
    return self.classifier.target_type


class RewritePass:
  """
  Per-node state machine driven by a pre-order traversal.
  """

  def __init__(self, context: RewriteContext):
    self.ctx = context
    # Binary calls that were inspected and left alone
    self._declined: Set[SourceRange] = set()
    self._handlers: Dict[NodeKind, Callable[[ExprNode], bool]] = {
      NodeKind.BINARY_OPERATOR_CALL: self._rewrite_binary,
      NodeKind.CONVERTING_CONSTRUCTOR_CALL: self._rewrite_constructor,
    }

  def rewrite(self, root: ExprNode) -> str:
    """
    Visits every node of the tree and returns the finalized text.

    Args:
        root (ExprNode): Front-end tree covering the buffer.

    Returns:
        str: The rewritten source.
    """
    for node in root.walk():
      self.visit(node)
    return self.ctx.buffer.finalize()

  def visit(self, node: ExprNode) -> bool:
    """
    Processes a single node.

    Returns:
        bool: True if a replacement was committed for `node`.
    """
    if not self.ctx.rewritten.is_unrewritten(node.range):
      return False
    if node.range in self._declined:
      return False

    handler = self._handlers.get(node.kind)
    if handler is None:
      return False
    return handler(node)

  def resolve(self, node: ExprNode) -> str:
    """
    Rewrites `node` (and whatever it contains) if still pending, then returns
    its current text.

    Nodes that are not rewritten themselves still get their children resolved,
    so that e.g. a parenthesized operand reflects the rewrite of its content.
    """
    self.visit(node)
    if self.ctx.rewritten.is_unrewritten(node.range):
      for child in node.children:
        self.resolve(child)
    return self.ctx.buffer.text_for(node.range)

  # --- Handlers ---

  def _rewrite_binary(self, node: ExprNode) -> bool:
    op = ArithmeticOp.from_spelling(node.op)
    if op is None or len(node.operands) != 2:
      self._declined.add(node.range)
      self.ctx.tracer.log_inspection(self._describe(node), "skipped", f"unsupported operator {node.op!r}")
      return False

    classifier = self.ctx.classifier
    left = classifier.underlying(node.operands[0])
    right = classifier.underlying(node.operands[1])
    left_text = self.resolve(left)
    right_text = self.resolve(right)

    left_is_target = classifier.is_target_type(left)
    right_is_target = classifier.is_target_type(right)
    target = self.ctx.target_type

    if left_is_target and right_is_target:
      func = f"{target}_{op.opname}"
    elif left_is_target:
      func = f"{target}_{op.opname}_real"
    elif right_is_target:
      func = f"real_{op.opname}_{target}"
    else:
      self._decline(node, f"neither operand of '{op.value}' is of type '{target}'")
      return False

    self._commit(node, f"{func}({left_text},{right_text})")
    return True

  def _rewrite_constructor(self, node: ExprNode) -> bool:
    classifier = self.ctx.classifier
    args = [self.resolve(classifier.underlying(arg)) for arg in node.operands]
    self._commit(node, f"to_{self.ctx.target_type}({','.join(args)})")
    return True

  # --- Helpers ---

  def _commit(self, node: ExprNode, text: str) -> None:
    buffer = self.ctx.buffer
    before = buffer.original_text(node.range)
    buffer.replace(node.range, text)
    self.ctx.rewritten.mark(node)
    self.ctx.rewrites += 1
    self.ctx.tracer.log_mutation(self._describe(node), str(node.range), before, text)
    logger.debug("Rewrote %s %s: %r -> %r", node.kind.value, node.range, before, text)

  def _decline(self, node: ExprNode, reason: str) -> None:
    self._declined.add(node.range)
    snippet = self.ctx.buffer.original_text(node.range)
    message = f"Left '{snippet}' at {node.range} unchanged: {reason}"
    self.ctx.warnings.append(message)
    self.ctx.tracer.log_warning(message)
    log_warning(escape(message))

  def _describe(self, node: ExprNode) -> str:
    return node.label or self.ctx.buffer.original_text(node.range)


def rewrite_tree(source: str, root: ExprNode, target_type: str, tracer: Optional[TraceLogger] = None) -> RewriteContext:
  """
  Runs a complete pass over one file.

  Args:
      source (str): Original text the tree's ranges point into.
      root (ExprNode): Front-end tree.
      target_type (str): Name of the type whose operators are rewritten.
      tracer (TraceLogger, optional): Event sink, defaults to the global tracer.

  Returns:
      RewriteContext: The finished context; the rewritten text is in ``output``.
  """
  ctx = RewriteContext(source, target_type, tracer=tracer)
  ctx.output = RewritePass(ctx).rewrite(root)
  return ctx
