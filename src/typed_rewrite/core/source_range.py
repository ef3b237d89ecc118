"""
Source Range Model.

A `SourceRange` is a half-open interval ``[begin, end)`` of byte offsets into the
immutable original buffer of a single file. Ranges compare and hash by value,
which makes them usable directly as keys of the rewritten-set and the edit buffer.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class SourceRange:
  """
  Half-open byte interval into the original source buffer.

  Attributes:
      begin (int): Offset of the first byte covered by the range.
      end (int): Offset one past the last byte covered by the range.
  """

  begin: int
  end: int

  def __post_init__(self) -> None:
    """
    Validates the interval bounds.

    Raises:
        ValueError: If offsets are negative or ``end`` precedes ``begin``.
    """
    if self.begin < 0 or self.end < self.begin:
      raise ValueError(f"Invalid source range [{self.begin}, {self.end})")

  @property
  def length(self) -> int:
    """Number of bytes covered."""
    return self.end - self.begin

  def contains(self, other: "SourceRange") -> bool:
    """
    Checks whether `other` lies fully inside this range (equality included).

    Args:
        other (SourceRange): The candidate inner range.

    Returns:
        bool: True if ``self.begin <= other.begin`` and ``other.end <= self.end``.
    """
    return self.begin <= other.begin and other.end <= self.end

  def overlaps(self, other: "SourceRange") -> bool:
    """
    Checks whether the two ranges share at least one byte.

    Empty ranges never overlap anything.

    Args:
        other (SourceRange): The range to compare against.

    Returns:
        bool: True if the intervals intersect.
    """
    if self.length == 0 or other.length == 0:
      return False
    return self.begin < other.end and other.begin < self.end

  def __str__(self) -> str:
    return f"[{self.begin}, {self.end})"
