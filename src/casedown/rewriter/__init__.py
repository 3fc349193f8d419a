"""Pattern-matching rewriter.

The rewriter is assembled from mixins, one per responsibility:

- base: output-node constructors and generated raise nodes
- dispatch: pattern kind → truth-expression rules
- clauses: clause chain, guards and the default branch
- arrays: array patterns with positional and rest elements
- hashes: hash patterns with destructive key lookup on a copy
- context: per-statement cache flags and synthetic names

"""

from __future__ import annotations

from casedown.rewriter.context import TransformContext
from casedown.rewriter.core import PatternMatchingRewriter

__all__ = ["PatternMatchingRewriter", "TransformContext"]
