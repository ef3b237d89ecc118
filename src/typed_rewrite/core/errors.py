"""
Exception hierarchy for typed-rewrite.

Front-end failures are converted into failed `ConversionResult` objects by the
engine. Edit-buffer violations are internal invariant breaks and propagate.
"""

from typing import Optional


class RewriteError(Exception):
  """Base class for all errors raised by the package."""


class OverlappingEditError(RewriteError):
  """Raised when an edit would partially overlap, or re-edit, a recorded edit."""


class FrontendError(RewriteError):
  """
  Raised when a front end cannot produce a node tree.

  Attributes:
      message (str): Human readable description.
      location (Optional[tuple]): ``(line, column)`` of the failure, 1-based, if known.
  """

  def __init__(self, message: str, location: Optional[tuple] = None):
    self.message = message
    self.location = location
    if location:
      line, col = location
      super().__init__(f"{message} at line {line}, column {col}")
    else:
      super().__init__(message)
