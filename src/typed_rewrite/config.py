"""
Runtime Configuration Store.

Settings are resolved from three layers, lowest precedence first: model
defaults, the ``[tool.typed_rewrite]`` table of the nearest ``pyproject.toml``,
and explicit (CLI) overrides.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from typed_rewrite.frontends import available_frontends, frontend_for_path
from typed_rewrite.frontends.cpp import DEFAULT_CLANG_ARGS

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

AUTO_FRONTEND = "auto"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the rewrite engine.
  """

  target_type: str = Field("complex", description="Name of the type whose operators and constructors are rewritten.")
  frontend: str = Field(AUTO_FRONTEND, description="Front end key ('cpp', 'python') or 'auto' to pick by file suffix.")
  strict_mode: bool = Field(False, description="If True, operator calls left untouched for lack of typed operands fail.")
  clang_args: List[str] = Field(
    default_factory=lambda: list(DEFAULT_CLANG_ARGS), description="Arguments passed to clang by the C++ front end."
  )

  @field_validator("target_type")
  @classmethod
  def validate_target_type(cls, v: str) -> str:
    """
    Ensures the target type can be spliced into function names.

    Raises:
        ValueError: If the name is not an identifier.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier():
      raise ValueError(f"Target type must be an identifier, got '{v}'")
    return v_clean

  @field_validator("frontend")
  @classmethod
  def validate_frontend(cls, v: str) -> str:
    """
    Ensures the front end is registered.

    Raises:
        ValueError: If the key is unknown.
    """
    v_clean = v.lower().strip()
    known = available_frontends()
    if v_clean != AUTO_FRONTEND and v_clean not in known:
      raise ValueError(f"Unknown frontend: '{v_clean}'. Supported frontends: {[AUTO_FRONTEND, *known]}")
    return v_clean

  def effective_frontend(self, path: Optional[Path] = None) -> str:
    """
    Resolves 'auto' to a concrete front end key.

    Args:
        path (Optional[Path]): Input file used for suffix detection.

    Returns:
        str: The active front end key.
    """
    if self.frontend != AUTO_FRONTEND:
      return self.frontend
    return frontend_for_path(path)

  @classmethod
  def load(
    cls,
    target_type: Optional[str] = None,
    frontend: Optional[str] = None,
    strict_mode: Optional[bool] = None,
    clang_args: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        target_type (Optional[str]): Override for the rewritten type.
        frontend (Optional[str]): Override for the front end key.
        strict_mode (Optional[bool]): Override for strict mode.
        clang_args (Optional[List[str]]): Override for clang arguments.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    values: Dict[str, Any] = {}
    for key, override in (
      ("target_type", target_type),
      ("frontend", frontend),
      ("strict_mode", strict_mode),
      ("clang_args", clang_args),
    ):
      if override is not None:
        values[key] = override
      elif key in toml_config:
        values[key] = toml_config[key]

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get("typed_rewrite", {}), parent

  return {}, None
