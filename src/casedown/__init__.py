"""casedown — desugar case/in pattern matching into plain conditionals.

Rewrites structural pattern matching statements into trees built only from
local assignment, if/else, and/or/not, method sends, sequencing and raises,
so code written against the pattern-matching construct can run on targets
that lack it.

Quickstart:
    >>> from casedown import Compiler, PatternMatchingRewriter, s
    >>> tree = s(
    ...     "case_match",
    ...     s("lvar", "value"),
    ...     s(
    ...         "in_pattern",
    ...         s("array_pattern", s("int", 1), s("match_rest", s("match_var", "rest"))),
    ...         None,
    ...         s("lvar", "rest"),
    ...     ),
    ...     None,
    ... )
    >>> rewritten = PatternMatchingRewriter().rewrite(tree)
    >>> Compiler().evaluate(rewritten, {"value": [1, 2, 3]})
    [2, 3]

Architecture:
Input tree → PatternMatchingRewriter → output tree → Compiler → Python code

Pipeline stages:
1. **Rewriter**: replaces every ``case_match`` node, bottom-up, using a fresh
   per-statement context (deconstruction caches, synthetic names)
2. **Compiler** (optional): lowers the output tree to ``ast`` and compiles it
   so it can run against `casedown.runtime`

Parsing source text, rendering trees back to text and deciding whether a
target needs the rewrite are left to the caller.

"""

from __future__ import annotations

from typing import Any

from casedown.compiler import Compiler
from casedown.config import DEFAULT_CONFIG, RewriterConfig
from casedown.errors import (
    CasedownError,
    CompileError,
    ErrorCode,
    MisplacedDefaultError,
    RewriteError,
    UnknownRestPatternError,
    UnsupportedPatternError,
)
from casedown.hooks import NullHooks, RecordingHooks, RewriteHooks
from casedown.nodes import Node, PatternKind, s
from casedown.rewriter import PatternMatchingRewriter, TransformContext
from casedown.runtime import NoMatchingPatternError, Range

__version__ = "0.1.0"


def rewrite(
    tree: Any,
    config: RewriterConfig | None = None,
    hooks: RewriteHooks | None = None,
) -> Any:
    """Rewrite every case/in statement in ``tree`` with a fresh rewriter."""
    return PatternMatchingRewriter(config=config, hooks=hooks).rewrite(tree)


__all__ = [
    "DEFAULT_CONFIG",
    "CasedownError",
    "CompileError",
    "Compiler",
    "ErrorCode",
    "MisplacedDefaultError",
    "NoMatchingPatternError",
    "Node",
    "NullHooks",
    "PatternKind",
    "PatternMatchingRewriter",
    "Range",
    "RecordingHooks",
    "RewriteError",
    "RewriteHooks",
    "RewriterConfig",
    "TransformContext",
    "UnknownRestPatternError",
    "UnsupportedPatternError",
    "__version__",
    "rewrite",
    "s",
]
