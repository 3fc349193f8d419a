"""Clause chain rewriting for case/in statements.

    case expr
    in pattern1 if guard then body1
    in pattern2 then body2
    else default
    end

becomes::

    __matchee_N__ = expr
    if (pattern1 and guard) then body1
    elsif pattern2 then body2
    else default
    end

Without an ``else`` the innermost branch raises ``NoMatchingPatternError``
with the inspected matchee.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from casedown.errors import MisplacedDefaultError, UnsupportedPatternError
from casedown.nodes import Node, s

if TYPE_CHECKING:
    from casedown.rewriter.context import TransformContext


class ClauseChainMixin:
    """Mixin folding in-clauses into a nested conditional chain.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        # From NodeBuilderMixin
        def _no_matching_pattern(self, ctx: TransformContext) -> Node: ...

        # From PatternDispatchMixin
        def _pattern_clause(self, node: Node, ctx: TransformContext) -> Node: ...

    def _build_case_match(self, node: Node, ctx: TransformContext) -> Node:
        matchee, *clauses = node.children
        matchee_ast = s("lvasgn", ctx.matchee, matchee)

        if clauses:
            ifs_ast = self._build_if_clause(clauses[0], clauses[1:], ctx)
        else:
            ifs_ast = self._no_matching_pattern(ctx)

        return node.updated("begin", [matchee_ast, ifs_ast])

    def _build_if_clause(
        self, node: Node | None, rest: Sequence[Node | None], ctx: TransformContext
    ) -> Node:
        if node is not None and node.type == "in_pattern":
            return self._build_in_pattern(node, rest, ctx)

        if rest:
            raise MisplacedDefaultError(
                "Default clause must be the last element of case/in",
                node.lineno if node is not None else None,
            )

        if node is None:
            return self._no_matching_pattern(ctx)
        if node.type == "empty_else":
            return s("nil")
        return node

    def _build_in_pattern(
        self, clause: Node, rest: Sequence[Node | None], ctx: TransformContext
    ) -> Node:
        pattern, guard, body = clause.children

        # Build this clause before the remainder: cache flags follow clause order
        condition = self._with_guard(self._pattern_clause(pattern, ctx), guard)

        if rest:
            else_branch = self._build_if_clause(rest[0], rest[1:], ctx)
        else:
            else_branch = self._no_matching_pattern(ctx)

        return clause.updated(
            "if",
            [condition, body if body is not None else s("nil"), else_branch],
        )

    def _with_guard(self, node: Node, guard: Node | None) -> Node:
        """Combine a pattern test with an ``if``/``unless`` guard."""
        if guard is None:
            return node

        if guard.type not in ("if_guard", "unless_guard"):
            raise UnsupportedPatternError(f"Unknown guard type: {guard.type}", guard.lineno)

        expr = s("and", node, guard.children[0])
        if guard.type == "unless_guard":
            return s("send", expr, "!")
        return expr
