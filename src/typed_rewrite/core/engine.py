"""
Orchestration Engine for Typed Rewrites.

This module provides the `ASTEngine`, the primary driver for one rewrite job.

The Engine pipeline consists of:

1.  **Parsing Phase**: The configured front end (libclang for C++, LibCST for
    Python) turns the source text into an `ExprNode` tree with resolved operand
    types. Front end failures end the run with a failed result.
2.  **Rewrite Phase**: `RewritePass` walks the tree and records replacements
    in the edit buffer.
3.  **Finalization**: The buffer is rendered. Operator calls left untouched for
    lack of typed operands are reported as warnings, or as errors in strict mode.
"""

from pathlib import Path
from typing import Optional

from typed_rewrite.config import RuntimeConfig
from typed_rewrite.core.conversion_result import ConversionResult
from typed_rewrite.core.errors import FrontendError
from typed_rewrite.core.rewriter import rewrite_tree
from typed_rewrite.core.tracer import get_tracer, reset_tracer
from typed_rewrite.frontends import get_frontend
from typed_rewrite.utils.console import log_info


class ASTEngine:
  """
  Runs front end, rewrite pass and finalization over a single source text.
  """

  def __init__(
    self,
    config: Optional[RuntimeConfig] = None,
    target_type: Optional[str] = None,
    frontend: Optional[str] = None,
    strict_mode: Optional[bool] = None,
  ):
    """
    Initializes the Engine.

    If `config` is not provided, one is built through `RuntimeConfig.load` from
    the optional args and the project's pyproject.toml.

    Args:
        config (RuntimeConfig, optional): The runtime configuration object.
        target_type (str, optional): Override for the rewritten type.
        frontend (str, optional): Override for the front end key.
        strict_mode (bool, optional): Override for strict mode.
    """
    if config:
      self.config = config
    else:
      self.config = RuntimeConfig.load(target_type=target_type, frontend=frontend, strict_mode=strict_mode)

  @property
  def target_type(self) -> str:
    return self.config.target_type

  @property
  def strict_mode(self) -> bool:
    return self.config.strict_mode

  def _build_frontend(self, key: str):
    if key == "cpp":
      return get_frontend(key, clang_args=self.config.clang_args)
    return get_frontend(key)

  def run(self, code: str, path: Optional[Path] = None) -> ConversionResult:
    """
    Executes the full rewrite pipeline.

    Args:
        code (str): The input source string.
        path (Path, optional): Location of the input, used to pick the front end
            when configured as 'auto' and for diagnostics.

    Returns:
        ConversionResult: Object containing rewritten code, warnings and error logs.
    """
    reset_tracer()
    tracer = get_tracer()

    frontend_key = self.config.effective_frontend(path)
    log_info(f"Rewriting '{self.target_type}' operations ({frontend_key} front end, strict: {self.strict_mode})")

    tracer.start_phase("Rewrite Pipeline", f"{frontend_key} -> {self.target_type}")

    # --- PHASE 1: PARSING ---
    tracer.start_phase("Parsing", f"{frontend_key} front end")
    frontend = self._build_frontend(frontend_key)
    try:
      root = frontend.parse(code, self.target_type, path=path)
    except FrontendError as e:
      tracer.end_phase()
      tracer.end_phase()
      return ConversionResult(
        code=code,
        errors=[f"Parse Error: {e}"],
        success=False,
        trace_events=tracer.export(),
      )
    tracer.end_phase()

    # --- PHASE 2: REWRITE ---
    tracer.start_phase("Rewrite Engine", "Pre-order traversal")
    ctx = rewrite_tree(code, root, self.target_type, tracer=tracer)
    tracer.end_phase()

    # --- PHASE 3: FINALIZATION ---
    tracer.start_phase("Finalize", "Checking results")
    errors = []
    if self.strict_mode and ctx.warnings:
      errors = [f"Strict mode: {w}" for w in ctx.warnings]
    tracer.end_phase()
    tracer.end_phase()

    return ConversionResult(
      code=ctx.output,
      errors=errors,
      warnings=list(ctx.warnings),
      success=not errors,
      rewrites=ctx.rewrites,
      trace_events=tracer.export(),
    )
