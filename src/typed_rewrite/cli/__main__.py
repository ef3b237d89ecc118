"""
Main Entry Point for typed-rewrite CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `typed_rewrite.cli.handlers`.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from typed_rewrite import __version__
from typed_rewrite.cli.handlers import handle_convert
from typed_rewrite.config import AUTO_FRONTEND
from typed_rewrite.frontends import available_frontends


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the convert handler.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(
    prog="typed-rewrite",
    description="typed-rewrite: Rewrite target-type operators into free function calls",
  )
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("path", type=Path, help="Input source file")
  parser.add_argument("--target-type", default=None, help="Type whose operations are rewritten (default: from toml, or 'complex')")
  parser.add_argument(
    "--frontend",
    choices=[AUTO_FRONTEND, *available_frontends()],
    default=None,
    help="Front end used to parse the input (default: from toml, or pick by file suffix)",
  )
  parser.add_argument("--out", type=Path, default=None, help="Output file (default: standard output)")
  parser.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail when an operator call has no operand of the target type (Overrides config)",
  )
  parser.add_argument(
    "--json-trace", type=Path, default=None, help="Dump full execution trace (events, edits) to a JSON file."
  )
  parser.add_argument(
    "--clang-arg",
    dest="clang_args",
    action="append",
    default=None,
    help="Argument passed to clang by the C++ front end (repeatable, replaces the default arguments)",
  )

  args = parser.parse_args(argv)

  return handle_convert(
    input_path=args.path,
    output_path=args.out,
    target_type=args.target_type,
    frontend=args.frontend,
    strict=args.strict,
    clang_args=args.clang_args,
    json_trace_path=args.json_trace,
  )


if __name__ == "__main__":
  raise SystemExit(main())
