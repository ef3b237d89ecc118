"""
Entry point for module execution (``python -m typed_rewrite``).

This module delegates execution to the CLI handler in ``typed_rewrite.cli.__main__``.
"""

import sys
from typed_rewrite.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
