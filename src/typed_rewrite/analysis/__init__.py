"""
Static Analysis Package.

Visitors that infer static types of Python expressions before the Python front
end builds the rewrite tree.

Modules:
    - ``symbol_table``: Inferring variable types and scopes.
"""
