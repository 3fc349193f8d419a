"""Pattern dispatch for the pattern-matching rewriter.

Maps every `PatternKind` to the rule that builds its truth expression.
Two tables exist:

- clause table: a pattern at the top of a clause, tested against the
  bound matchee variable;
- element table: a pattern at an array element or hash value position,
  tested against an arbitrary subject node (``arr[i]``, ``h.delete(k)``).

Both tables cover the whole enumeration; kinds that cannot appear at a
position map to a handler raising `UnsupportedPatternError`.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from casedown.errors import UnsupportedPatternError
from casedown.nodes import ELEMENT_KINDS, Node, PatternKind, classify, s

if TYPE_CHECKING:
    from casedown.rewriter.context import TransformContext

ClauseHandler = Callable[[Node, "TransformContext"], Node]
ElementHandler = Callable[[Node, Node, "TransformContext"], Node]


class PatternDispatchMixin:
    """Mixin mapping pattern kinds to truth-expression builders.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Host attributes and cross-mixin dependencies (type-check only)
    # ─────────────────────────────────────────────────────────────────────────
    if TYPE_CHECKING:
        _clause_dispatch: dict[PatternKind, ClauseHandler]
        _element_dispatch: dict[PatternKind, ElementHandler]

        # From NodeBuilderMixin
        def _case_eq(self, pattern: Node, subject: Node) -> Node: ...
        def _bind(self, name: str, value: Node) -> Node: ...
        def _and(self, *nodes: Node | None) -> Node: ...
        def _conditional(self, ctx: TransformContext): ...

        # From ArrayPatternMixin
        def _array_pattern_clause(self, node: Node, ctx: TransformContext) -> Node: ...

        # From HashPatternMixin
        def _hash_pattern_clause(self, node: Node, ctx: TransformContext) -> Node: ...

    def _pattern_clause(self, node: Node, ctx: TransformContext) -> Node:
        """Build the truth expression of a clause-level pattern."""
        handler = self._get_clause_dispatch()[classify(node)]
        return handler(node, ctx)

    def _element_test(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        """Build the truth expression of ``node`` tested against ``subject``."""
        handler = self._get_element_dispatch()[classify(node)]
        return handler(node, subject, ctx)

    def _get_clause_dispatch(self) -> dict[PatternKind, ClauseHandler]:
        """Get the clause-level handler table (cached on first call)."""
        if not hasattr(self, "_clause_dispatch"):
            self._clause_dispatch = {
                PatternKind.VALUE: self._value_clause,
                PatternKind.MATCH_VAR: self._match_var_clause,
                PatternKind.PIN: self._pin_clause,
                PatternKind.MATCH_ALT: self._match_alt_clause,
                PatternKind.MATCH_AS: self._match_as_clause,
                PatternKind.CONST_PATTERN: self._const_pattern_clause,
                PatternKind.ARRAY_PATTERN: self._array_pattern_clause,
                PatternKind.HASH_PATTERN: self._hash_pattern_clause,
                PatternKind.MATCH_REST: self._misplaced_rest,
            }
        return self._clause_dispatch

    def _get_element_dispatch(self) -> dict[PatternKind, ElementHandler]:
        """Get the element-level handler table (cached on first call)."""
        if not hasattr(self, "_element_dispatch"):
            table: dict[PatternKind, ElementHandler] = {
                PatternKind.VALUE: self._value_element,
                PatternKind.MATCH_VAR: self._match_var_element,
                PatternKind.PIN: self._pin_element,
                PatternKind.MATCH_ALT: self._match_alt_element,
                PatternKind.MATCH_AS: self._match_as_element,
            }
            # Composite kinds are only translated at the top of a clause
            for kind in PatternKind:
                if kind not in ELEMENT_KINDS:
                    table[kind] = self._nested_pattern_element
            self._element_dispatch = table
        return self._element_dispatch

    # ─────────────────────────────────────────────────────────────────────────
    # Clause-level rules (subject is the bound matchee)
    # ─────────────────────────────────────────────────────────────────────────

    def _value_clause(self, node: Node, ctx: TransformContext) -> Node:
        return self._case_eq(node, s("lvar", ctx.matchee))

    def _match_var_clause(self, node: Node, ctx: TransformContext) -> Node:
        return self._bind(node.children[0], s("lvar", ctx.matchee))

    def _pin_clause(self, node: Node, ctx: TransformContext) -> Node:
        return self._case_eq(node.children[0], s("lvar", ctx.matchee))

    def _match_alt_clause(self, node: Node, ctx: TransformContext) -> Node:
        first, *others = node.children
        alternatives = [self._pattern_clause(first, ctx)]
        # Later alternatives only run when the earlier ones fail
        with self._conditional(ctx):
            alternatives.extend(self._pattern_clause(child, ctx) for child in others)
        return s("or", *alternatives)

    def _match_as_clause(self, node: Node, ctx: TransformContext) -> Node:
        pattern, target = node.children
        return self._and(
            self._pattern_clause(pattern, ctx),
            self._bind(target.children[0], s("lvar", ctx.matchee)),
        )

    def _const_pattern_clause(self, node: Node, ctx: TransformContext) -> Node:
        """``Const === matchee``, then the sub-pattern: ``in Point[x, y]``."""
        const, pattern = node.children
        test = self._case_eq(const, s("lvar", ctx.matchee))
        if pattern is None:
            return test

        with self._conditional(ctx):
            return s("and", test, self._pattern_clause(pattern, ctx))

    def _misplaced_rest(self, node: Node, ctx: TransformContext) -> Node:
        raise UnsupportedPatternError(
            "Rest marker is only allowed inside an array or hash pattern",
            node.lineno,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Element-level rules (subject is an element or a removed hash value)
    # ─────────────────────────────────────────────────────────────────────────

    def _value_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        return self._case_eq(node, subject)

    def _match_var_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        return self._bind(node.children[0], subject)

    def _pin_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        return self._case_eq(node.children[0], subject)

    def _match_alt_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        return s("or", *(self._element_test(child, subject, ctx) for child in node.children))

    def _match_as_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        pattern, target = node.children
        return self._and(
            self._element_test(pattern, subject, ctx),
            self._bind(target.children[0], subject),
        )

    def _nested_pattern_element(self, node: Node, subject: Node, ctx: TransformContext) -> Node:
        raise UnsupportedPatternError(
            f"'{node.type}' is not supported inside an array element or hash value",
            node.lineno,
        )
