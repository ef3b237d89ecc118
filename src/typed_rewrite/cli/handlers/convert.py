"""
Convert Command Handler.

This module implements the logic for the `typed-rewrite` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Reading the input file.
3. The rewrite via the Engine.
4. Output writing and trace logging.
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from typed_rewrite.config import RuntimeConfig
from typed_rewrite.core.engine import ASTEngine
from typed_rewrite.utils.console import log_error, log_info, log_success, log_warning


def handle_convert(
  input_path: Path,
  output_path: Optional[Path] = None,
  target_type: Optional[str] = None,
  frontend: Optional[str] = None,
  strict: Optional[bool] = None,
  clang_args: Optional[List[str]] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the conversion of a single file.

  Nothing is written to the output when the input cannot be read or the
  rewrite fails.

  Args:
      input_path: Path to the source file to rewrite.
      output_path: Path where the rewritten code should be saved. Standard output if None.
      target_type: Override for the rewritten type.
      frontend: Override for the front end key.
      strict: If True, enforces strict mode on the Engine.
      clang_args: Override for the arguments passed to clang.
      json_trace_path: Optional path to dump execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  try:
    with open(input_path, "rt", encoding="utf-8", newline="") as f:
      code = f.read()
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Cannot read input [path]{input_path}[/path]: {e}")
    return 1

  try:
    config = RuntimeConfig.load(
      target_type=target_type,
      frontend=frontend,
      strict_mode=strict,
      clang_args=clang_args,
      search_path=input_path.resolve().parent,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  engine = ASTEngine(config=config)
  result = engine.run(code, path=input_path)

  if json_trace_path and result.trace_events:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {e}")

  if not result.success:
    for err in result.errors:
      log_error(err)
    return 1

  if output_path:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8", newline="") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Cannot write output [path]{output_path}[/path]: {e}")
      return 1
    log_success(f"Rewrote {result.rewrites} expression(s): [path]{input_path}[/path] -> [path]{output_path}[/path]")
  else:
    # Standard output carries only the rewritten text
    sys.stdout.write(result.code)
    sys.stdout.flush()

  if result.warnings:
    log_warning(f"{len(result.warnings)} operator call(s) left unchanged in [path]{input_path}[/path]")
  return 0
