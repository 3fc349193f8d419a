"""casedown syntax tree nodes.

A single immutable `Node` class carries every node type. Input trees use
the pattern-matching grammar (``case_match``, ``in_pattern``, patterns and
guards); rewritten trees use only assignment, conditionals, boolean
connectives, method sends, sequencing and raises.

"""

from __future__ import annotations

from casedown.nodes.base import Node, s
from casedown.nodes.patterns import (
    ELEMENT_KINDS,
    PATTERN_NODE_TYPES,
    PatternKind,
    classify,
)

__all__ = [
    "ELEMENT_KINDS",
    "PATTERN_NODE_TYPES",
    "Node",
    "PatternKind",
    "classify",
    "s",
]
