"""
Core Package.

Contains the rewrite machinery:
- Source ranges, the rewritten-set tracker and the edit buffer
- The type classifier and the rewrite pass
- The AST Engine driver, its results and the trace logger
"""
