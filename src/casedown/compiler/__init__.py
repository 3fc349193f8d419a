"""casedown compiler package — lowers rewritten trees to Python.

Converts `Node` trees into Python ``ast`` expressions and code objects so
rewritten statements can be executed in-process.

Example:
    >>> from casedown import Compiler, PatternMatchingRewriter
    >>> rewritten = PatternMatchingRewriter().rewrite(tree)
    >>> namespace = {"value": [1, 2, 3]}
    >>> Compiler().evaluate(rewritten, namespace)

"""

from __future__ import annotations

from casedown.compiler.core import Compiler

__all__ = ["Compiler"]
