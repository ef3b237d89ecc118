"""
typed-rewrite Package.

A type-directed expression rewriter. Arithmetic operators applied to values of a
target type (``complex`` by default) are replaced by calls to free functions,
and explicit conversions to that type by ``to_<type>(...)`` calls, leaving every
other byte of the file untouched::

    cosTheta + eta/lambda   ->   complex_add(cosTheta,complex_div_real(eta,lambda))

C++ sources are analysed with libclang, Python sources with LibCST.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import typed_rewrite as tr
    code = "def f(a: complex, b: complex):\\n    return a * b\\n"
    print(tr.convert(code, frontend="python"))
    # def f(a: complex, b: complex):
    #     return complex_mul(a,b)

Advanced Usage (AST Engine)
^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from typed_rewrite import ASTEngine, RuntimeConfig

    config = RuntimeConfig(frontend="cpp", strict_mode=True)
    engine = ASTEngine(config=config)
    res = engine.run(open("kernel.cpp").read())

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typed_rewrite.config import RuntimeConfig
from typed_rewrite.core.conversion_result import ConversionResult
from typed_rewrite.core.engine import ASTEngine

__version__ = "0.1.0"


def convert(code: str, target_type: str = "complex", frontend: str = "python", strict: bool = False) -> str:
  """
  Rewrites a string of source code.

  This is a high-level convenience wrapper around the `ASTEngine`. For files,
  consider using the ``typed-rewrite`` CLI or `ASTEngine` directly.

  Args:
      code (str): The source code to rewrite.
      target_type (str): The type whose operators and constructors are rewritten.
      frontend (str): The front end key ("python" or "cpp").
      strict (bool): If True, operator calls on values without the target type
                     make the conversion fail instead of producing a warning.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If the conversion fails (e.g. syntax errors or strict mode violations).
  """
  config = RuntimeConfig(target_type=target_type, frontend=frontend, strict_mode=strict)
  engine = ASTEngine(config=config)
  result = engine.run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Rewrite failed:\n{error_msg}")

  return result.code


__all__ = [
  "ASTEngine",
  "ConversionResult",
  "RuntimeConfig",
  "convert",
  "__version__",
]
