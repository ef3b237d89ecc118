"""
Edit Buffer.

Holds the immutable original bytes of one file together with the pending
``range -> replacement`` edits. Offsets are byte offsets; text crossing the API
is `str` (UTF-8 on the byte side).

Nested edits are folded rather than stacked: when an enclosing range is replaced,
every recorded edit inside it is dropped, because the enclosing replacement was
built from `text_for` and therefore already contains their text. This keeps the
recorded ranges pairwise disjoint at all times.
"""

from typing import Dict, List, Tuple, Union

from typed_rewrite.core.errors import OverlappingEditError
from typed_rewrite.core.source_range import SourceRange

ENCODING = "utf-8"


class EditBuffer:
  """
  Pending, non-overlapping replacements over one original buffer.
  """

  def __init__(self, original: Union[str, bytes]):
    """
    Args:
        original: Source text. `str` input is encoded as UTF-8.
    """
    self._original: bytes = original.encode(ENCODING) if isinstance(original, str) else original
    self._edits: Dict[SourceRange, str] = {}

  @property
  def original(self) -> bytes:
    """The untouched input bytes."""
    return self._original

  def original_text(self, rng: SourceRange) -> str:
    """Returns the original slice for `rng`, ignoring edits."""
    self._check_bounds(rng)
    return self._original[rng.begin : rng.end].decode(ENCODING)

  def replace(self, rng: SourceRange, text: str) -> None:
    """
    Records that the bytes of `rng` become `text` in the output.

    Args:
        rng (SourceRange): Span to replace.
        text (str): Replacement text.

    Raises:
        OverlappingEditError: If `rng` equals, lies inside, or partially overlaps
            a recorded edit.
    """
    self._check_bounds(rng)
    absorbed = []
    for existing in self._edits:
      if existing == rng:
        raise OverlappingEditError(f"Range {rng} was already edited")
      if rng.contains(existing):
        absorbed.append(existing)
      elif existing.contains(rng) or existing.overlaps(rng):
        raise OverlappingEditError(f"Edit {rng} conflicts with recorded edit {existing}")

    for existing in absorbed:
      del self._edits[existing]
    self._edits[rng] = text

  def text_for(self, rng: SourceRange) -> str:
    """
    Current text of `rng`.

    Returns the recorded replacement if `rng` itself was edited, otherwise the
    original slice with the replacements of nested ranges spliced in.

    Raises:
        OverlappingEditError: If a recorded edit straddles the boundary of `rng`
            or encloses it, since no consistent text exists for it then.
    """
    if rng in self._edits:
      return self._edits[rng]

    self._check_bounds(rng)
    nested = []
    for existing in self._edits:
      if rng.contains(existing):
        nested.append(existing)
      elif existing.contains(rng) or existing.overlaps(rng):
        raise OverlappingEditError(f"Range {rng} is split by recorded edit {existing}")

    return self._splice(rng.begin, rng.end, sorted(nested))

  def edits(self) -> List[Tuple[SourceRange, str]]:
    """Recorded edits in range order."""
    return sorted(self._edits.items())

  def finalize(self) -> str:
    """
    Produces the complete output text.

    Raises:
        OverlappingEditError: If the recorded ranges are not pairwise disjoint.
    """
    ordered = sorted(self._edits)
    for prev, cur in zip(ordered, ordered[1:]):
      if prev.end > cur.begin:
        raise OverlappingEditError(f"Edits {prev} and {cur} overlap")
    return self._splice(0, len(self._original), ordered)

  def _splice(self, begin: int, end: int, ordered: List[SourceRange]) -> str:
    pieces: List[bytes] = []
    cursor = begin
    for rng in ordered:
      pieces.append(self._original[cursor : rng.begin])
      pieces.append(self._edits[rng].encode(ENCODING))
      cursor = rng.end
    pieces.append(self._original[cursor:end])
    return b"".join(pieces).decode(ENCODING)

  def _check_bounds(self, rng: SourceRange) -> None:
    if rng.end > len(self._original):
      raise ValueError(f"Range {rng} exceeds buffer of {len(self._original)} bytes")

  def __len__(self) -> int:
    return len(self._edits)
