"""Pattern kinds recognised by the rewriter.

Every node that can appear in pattern position maps to exactly one
`PatternKind`. Node types without a dedicated kind are *value* patterns:
literals, constants, ranges and arbitrary expressions tested with ``===``.
"""

from __future__ import annotations

from enum import Enum

from casedown.nodes.base import Node


class PatternKind(Enum):
    """Closed set of pattern kinds handled by the dispatcher."""

    VALUE = "value"
    MATCH_VAR = "match_var"
    PIN = "pin"
    MATCH_ALT = "match_alt"
    MATCH_AS = "match_as"
    CONST_PATTERN = "const_pattern"
    ARRAY_PATTERN = "array_pattern"
    HASH_PATTERN = "hash_pattern"
    MATCH_REST = "match_rest"


# Node type → pattern kind. Anything missing here is a value pattern.
PATTERN_NODE_TYPES: dict[str, PatternKind] = {
    "match_var": PatternKind.MATCH_VAR,
    "pin": PatternKind.PIN,
    "match_alt": PatternKind.MATCH_ALT,
    "match_as": PatternKind.MATCH_AS,
    "const_pattern": PatternKind.CONST_PATTERN,
    "array_pattern": PatternKind.ARRAY_PATTERN,
    "array_pattern_with_tail": PatternKind.ARRAY_PATTERN,
    "hash_pattern": PatternKind.HASH_PATTERN,
    "match_rest": PatternKind.MATCH_REST,
}

# Kinds that may sit at an array element or hash value position
ELEMENT_KINDS = frozenset(
    {
        PatternKind.VALUE,
        PatternKind.MATCH_VAR,
        PatternKind.PIN,
        PatternKind.MATCH_ALT,
        PatternKind.MATCH_AS,
    }
)


def classify(node: Node) -> PatternKind:
    """Return the pattern kind of a node in pattern position."""
    return PATTERN_NODE_TYPES.get(node.type, PatternKind.VALUE)
