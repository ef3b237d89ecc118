"""
Base Protocol and Registry for Front Ends.

A front end turns source text into the `ExprNode` tree the rewrite engine
consumes: for each relevant expression its kind, byte range, operands and
resolved operand type names. How that is computed (libclang, LibCST, ...) is
invisible to the engine.
"""

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Type

from typed_rewrite.core.nodes import ExprNode

_FRONTEND_REGISTRY: Dict[str, Type["Frontend"]] = {}

# File suffix -> front end key, used when the configuration says "auto"
_SUFFIX_MAP: Dict[str, str] = {}


class Frontend(Protocol):
  """
  Interface every front end implements.

  Attributes:
      name (str): Registry key.
      suffixes (tuple): File suffixes handled when the front end is chosen automatically.
  """

  name: str
  suffixes: tuple

  def parse(self, source: str, target_type: str, path: Optional[Path] = None) -> ExprNode:
    """
    Builds the node tree for `source`.

    Args:
        source (str): The complete file text. Node ranges index its UTF-8 bytes.
        target_type (str): Name of the rewritten type, for front ends that need it
            to decide which nodes to route to the engine.
        path (Path, optional): Original file location, for diagnostics.

    Returns:
        ExprNode: Root node spanning the whole buffer.

    Raises:
        FrontendError: If the source cannot be parsed.
    """
    ...


def register_frontend(name: str):
  def wrapper(cls):
    _FRONTEND_REGISTRY[name] = cls
    for suffix in getattr(cls, "suffixes", ()):
      _SUFFIX_MAP[suffix] = name
    return cls

  return wrapper


def get_frontend(name: str, **kwargs) -> Optional[Frontend]:
  """
  Instantiates a registered front end.

  Args:
      name (str): Registry key.
      **kwargs: Passed to the front end constructor.

  Returns:
      Optional[Frontend]: The instance, or None if `name` is unknown.
  """
  cls = _FRONTEND_REGISTRY.get(name)
  if cls:
    return cls(**kwargs)
  return None


def available_frontends() -> List[str]:
  return sorted(_FRONTEND_REGISTRY.keys())


def frontend_for_path(path: Optional[Path], default: str = "cpp") -> str:
  """
  Picks a front end key from a file suffix.

  Args:
      path (Optional[Path]): Input file, may be None for in-memory sources.
      default (str): Key used when the suffix is unknown.

  Returns:
      str: Front end key.
  """
  if path is None:
    return default
  return _SUFFIX_MAP.get(path.suffix.lower(), default)
