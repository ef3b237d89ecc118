"""
Front End Package.

Automatically discovers and registers front ends by scanning this directory for
modules. Each module decorates its front end class with
``@register_frontend("key")``; importing it is enough to make the key available
to `RuntimeConfig` and the engine.
"""

import importlib
import logging
import pkgutil
from pathlib import Path

from typed_rewrite.frontends.base import (
  Frontend,
  available_frontends,
  frontend_for_path,
  get_frontend,
  register_frontend,
)

# Infrastructure modules, not front ends.
_EXCLUDED_MODULES = {"base", "__init__"}


def _auto_register_frontends() -> None:
  """
  Scans the current directory for modules and imports them.

  A front end whose import fails is logged and skipped.
  """
  pkg_path = str(Path(__file__).parent)

  for _, module_name, _ in pkgutil.iter_modules([pkg_path]):
    if module_name in _EXCLUDED_MODULES:
      continue

    try:
      importlib.import_module(f".{module_name}", package=__name__)
    except Exception as e:
      logging.warning(f"⚠️  Failed to load front end module '{module_name}': {e}. This front end will not be available.")


# Execute discovery on import
_auto_register_frontends()


__all__ = [
  "Frontend",
  "available_frontends",
  "frontend_for_path",
  "get_frontend",
  "register_frontend",
]
