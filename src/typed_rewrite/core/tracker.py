"""
Rewritten-Set Tracker.

Remembers which node ranges were already absorbed into a completed rewrite. The
set only grows during a pass; once a range is present the engine treats the node
(and everything below it) as done.
"""

from typing import Iterator, Set

from typed_rewrite.core.nodes import ExprNode
from typed_rewrite.core.source_range import SourceRange


class RewrittenSet:
  """
  Growing set of `SourceRange` keys.
  """

  def __init__(self) -> None:
    self._ranges: Set[SourceRange] = set()

  def mark(self, node: ExprNode) -> None:
    """
    Records the range of `node` and of every descendant.

    Args:
        node (ExprNode): Root of the subtree consumed by a rewrite.
    """
    for sub in node.walk():
      self._ranges.add(sub.range)

  def is_unrewritten(self, rng: SourceRange) -> bool:
    """
    Returns:
        bool: True if `rng` has not been consumed by any rewrite yet.
    """
    return rng not in self._ranges

  def __contains__(self, rng: object) -> bool:
    return rng in self._ranges

  def __len__(self) -> int:
    return len(self._ranges)

  def __iter__(self) -> Iterator[SourceRange]:
    return iter(sorted(self._ranges))
