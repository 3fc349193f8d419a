"""Array pattern rewriting.

    in [Integer => x, *rest, 0]

becomes (numbers abbreviated)::

    ((arr = matchee.deconstruct) or true) and (Array === arr or raise TypeError)
    and arr.length >= 2
    and (Integer === arr[0] and ((x = arr[0]) or true))
    and ((rest = arr[1..-2]) or true)
    and 0 === arr[-1]

Elements before the rest marker are addressed from the front, elements
after it from the back with negative indices, and the rest marker takes the
inclusive slice in between.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from casedown.nodes import Node, s

if TYPE_CHECKING:
    from casedown.rewriter.context import TransformContext


class ArrayPatternMixin:
    """Mixin building truth expressions for array patterns.

    Host attributes and cross-mixin dependencies are declared via inline
    TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        # From NodeBuilderMixin
        def _case_eq(self, pattern: Node, subject: Node) -> Node: ...
        def _bind(self, name: str, value: Node) -> Node: ...
        def _and(self, *nodes: Node | None) -> Node: ...
        def _type_mismatch(self, ctx: TransformContext) -> Node: ...

        # From PatternDispatchMixin
        def _element_test(self, node: Node, subject: Node, ctx: TransformContext) -> Node: ...

    def _array_pattern_clause(self, node: Node, ctx: TransformContext) -> Node:
        elements = node.children
        has_rest = node.type == "array_pattern_with_tail" or any(
            child.type == "match_rest" for child in elements
        )
        fixed = sum(1 for child in elements if child.type != "match_rest")

        return self._and(
            self._deconstruct_node(ctx),
            self._array_length_check(fixed, has_rest, ctx),
            self._array_element(0, elements, ctx) if elements else None,
        )

    def _deconstruct_node(self, ctx: TransformContext) -> Node | None:
        """Compute the sequence form once per statement; None when cached."""
        if ctx.array_deconstructed:
            return None

        # A skipped deconstruction must not hide later ones
        if ctx.unconditional:
            ctx.array_deconstructed = True

        right = s("send", s("lvar", ctx.matchee), "deconstruct")
        return s(
            "and",
            self._bind(ctx.array, right),
            s(
                "or",
                self._case_eq(s("const", None, "Array"), s("lvar", ctx.array)),
                self._type_mismatch(ctx),
            ),
        )

    def _array_length_check(self, fixed: int, has_rest: bool, ctx: TransformContext) -> Node:
        return s(
            "send",
            s("send", s("lvar", ctx.array), "length"),
            ">=" if has_rest else "==",
            s("int", fixed),
        )

    def _array_element(self, index: int, elements: Sequence[Node], ctx: TransformContext) -> Node:
        head, *tail = elements
        if head.type == "match_rest":
            return self._array_match_rest(index, head, tail, ctx)

        test = self._element_test(head, self._arr_item_at(index, ctx), ctx)
        if not tail:
            return test

        return s("and", test, self._array_element(index + 1, tail, ctx))

    def _array_match_rest(
        self, index: int, node: Node, tail: Sequence[Node], ctx: TransformContext
    ) -> Node:
        rest = None
        if node.children:
            target = node.children[0]
            rest = self._bind(target.children[0], self._arr_rest_items(index, len(tail), ctx))

        return self._and(rest, self._array_rest_element(tail, ctx) if tail else None)

    def _array_rest_element(self, tail: Sequence[Node], ctx: TransformContext) -> Node:
        size = len(tail)
        return self._and(
            *(
                self._element_test(child, self._arr_item_at(-(size - position), ctx), ctx)
                for position, child in enumerate(tail)
            )
        )

    def _arr_item_at(self, index: int, ctx: TransformContext) -> Node:
        return s("index", s("lvar", ctx.array), s("int", index))

    def _arr_rest_items(self, index: int, size: int, ctx: TransformContext) -> Node:
        """``arr[index..-(size + 1)]``: everything between prefix and suffix."""
        return s(
            "index",
            s("lvar", ctx.array),
            s("irange", s("int", index), s("int", -(size + 1))),
        )
