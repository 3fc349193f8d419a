"""Tree builders shared by the casedown tests.

Short constructors for input-grammar nodes, plus helpers to run a
rewritten tree and to inspect output trees.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from casedown import Compiler, Node, PatternMatchingRewriter, s

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def lvar(name: str) -> Node:
    return s("lvar", name)


def sym(name: str) -> Node:
    return s("sym", name)


def const(name: str) -> Node:
    return s("const", None, name)


def literal(value: Any) -> Node:
    """Python value → literal node (dict keys become symbols)."""
    if value is None:
        return s("nil")
    if value is True:
        return s("true")
    if value is False:
        return s("false")
    if isinstance(value, int):
        return s("int", value)
    if isinstance(value, float):
        return s("float", value)
    if isinstance(value, str):
        return s("str", value)
    if isinstance(value, list):
        return s("array", *(literal(item) for item in value))
    if isinstance(value, dict):
        return s("hash", *(s("pair", sym(key), literal(item)) for key, item in value.items()))
    raise TypeError(f"No literal node for {value!r}")


# ---------------------------------------------------------------------------
# Statements, clauses and guards
# ---------------------------------------------------------------------------


def case(matchee: Node, *clauses: Node, default: Node | None = None) -> Node:
    return s("case_match", matchee, *clauses, default)


def in_(pattern: Node, body: Node | None = None, guard: Node | None = None) -> Node:
    return s("in_pattern", pattern, guard, body)


def if_guard(expr: Node) -> Node:
    return s("if_guard", expr)


def unless_guard(expr: Node) -> Node:
    return s("unless_guard", expr)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


def var(name: str) -> Node:
    return s("match_var", name)


def pin(name: str) -> Node:
    return s("pin", lvar(name))


def alt(*patterns: Node) -> Node:
    return s("match_alt", *patterns)


def as_(pattern: Node, name: str) -> Node:
    return s("match_as", pattern, var(name))


def const_pat(name: str, pattern: Node | None = None) -> Node:
    return s("const_pattern", const(name), pattern)


def arr(*elements: Node) -> Node:
    return s("array_pattern", *elements)


def arr_tail(*elements: Node) -> Node:
    return s("array_pattern_with_tail", *elements)


def rest(name: str | None = None) -> Node:
    return s("match_rest", var(name)) if name else s("match_rest")


def hsh(*entries: Node) -> Node:
    return s("hash_pattern", *entries)


def pair(key: str, pattern: Node) -> Node:
    return s("pair", sym(key), pattern)


# ---------------------------------------------------------------------------
# Running and inspecting
# ---------------------------------------------------------------------------


def run(tree: Node, value: Any = None, **namespace: Any) -> tuple[Any, dict[str, Any]]:
    """Rewrite ``tree``, evaluate it with ``value`` bound, return (result, namespace)."""
    rewritten = PatternMatchingRewriter().rewrite(tree)
    env: dict[str, Any] = {"value": value, **namespace}
    result = Compiler().evaluate(rewritten, env)
    return result, env


def walk(node: Any) -> Iterator[Node]:
    if not isinstance(node, Node):
        return
    yield node
    for child in node.children:
        yield from walk(child)


def count_sends(tree: Node, method: str) -> int:
    return sum(1 for node in walk(tree) if node.type == "send" and node.children[1] == method)


def node_types(tree: Node) -> set[str]:
    return {node.type for node in walk(tree)}
