"""Hash pattern rewriting.

Values are read with ``h.delete(key)`` so that whatever remains after the
named keys can be captured by ``**rest``. Deletion is destructive, therefore
every hash pattern works on its own ``dup`` of the deconstructed source;
the source itself is computed once per statement and never modified.

    in {name: String => name, age:, **rest}

becomes::

    ((src = matchee.deconstruct_keys(nil)) or true)
    and ((Hash === src or raise TypeError) and ((h = src.dup) or true))
    and (h.key?(:name) and ((val = h.delete(:name)) or true) and ...)
    and (h.key?(:age) and ((age = h.delete(:age)) or true))
    and ((rest = h) or true)

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from casedown.errors import UnknownRestPatternError, UnsupportedPatternError
from casedown.nodes import Node, PatternKind, classify, s

if TYPE_CHECKING:
    from casedown.rewriter.context import TransformContext

# Value patterns that read their subject more than once
_MULTI_READ_KINDS = frozenset({PatternKind.MATCH_ALT, PatternKind.MATCH_AS})


class HashPatternMixin:
    """Mixin building truth expressions for hash patterns.

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

    def _hash_pattern_clause(self, node: Node, ctx: TransformContext) -> Node:
        keys = self._hash_pattern_keys(node.children)
        dnode = self._deconstruct_keys_node(keys, ctx)

        if not node.children:
            right = self._case_eq(s("hash"), s("lvar", ctx.hash))
        else:
            right = self._and(*(self._hash_element(child, ctx) for child in node.children))

        return s("and", dnode, right)

    def _hash_pattern_keys(self, children: Sequence[Node]) -> Node:
        """Keys to request from deconstruct_keys; ``nil`` means all of them."""
        if not children:
            return s("nil")

        keys: list[Node] = []
        for child in children:
            if child.type == "match_rest":
                return s("nil")
            keys.append(self._hash_key(child))
        return s("array", *keys)

    def _hash_key(self, node: Node) -> Node:
        if node.type == "pair":
            return node.children[0]
        if node.type == "match_var":
            return s("sym", node.children[0])
        raise UnsupportedPatternError(
            f"'{node.type}' is not a valid hash pattern entry",
            node.lineno,
        )

    def _deconstruct_keys_node(self, keys: Node, ctx: TransformContext) -> Node:
        # Every hash pattern gets a fresh copy: key lookups delete keys
        hash_dup = self._bind(ctx.hash, s("send", s("lvar", ctx.hash_source), "dup"))
        if ctx.hash_deconstructed:
            return hash_dup

        if ctx.unconditional:
            ctx.hash_deconstructed = True

        right = s("send", s("lvar", ctx.matchee), "deconstruct_keys", keys)
        return s(
            "and",
            self._bind(ctx.hash_source, right),
            s(
                "and",
                s(
                    "or",
                    self._case_eq(s("const", None, "Hash"), s("lvar", ctx.hash_source)),
                    self._type_mismatch(ctx),
                ),
                hash_dup,
            ),
        )

    def _hash_element(self, node: Node, ctx: TransformContext) -> Node | None:
        if node.type == "pair":
            return self._pair_hash_element(node, ctx)
        if node.type == "match_var":
            return self._match_var_hash_element(node, ctx)
        if node.type == "match_rest":
            return self._match_rest_hash_element(node, ctx)
        raise UnsupportedPatternError(
            f"'{node.type}' is not a valid hash pattern entry",
            node.lineno,
        )

    def _pair_hash_element(self, node: Node, ctx: TransformContext) -> Node:
        key, pattern = node.children
        removed = self._hash_value_at(key, ctx)

        if classify(pattern) in _MULTI_READ_KINDS:
            # delete() only yields the value once; park it in the scratch slot
            test = self._and(
                self._bind(ctx.value, removed),
                self._element_test(pattern, s("lvar", ctx.value), ctx),
            )
        else:
            test = self._element_test(pattern, removed, ctx)

        return s("and", self._hash_has_key(key, ctx), test)

    def _match_var_hash_element(self, node: Node, ctx: TransformContext) -> Node:
        key = s("sym", node.children[0])
        # The key must be present; a missing key is not a nil value
        return s(
            "and",
            self._hash_has_key(key, ctx),
            self._bind(node.children[0], self._hash_value_at(key, ctx)),
        )

    def _match_rest_hash_element(self, node: Node, ctx: TransformContext) -> Node | None:
        # in {a: 1, **}
        if not node.children:
            return None

        child = node.children[0]
        if child.type != "match_var":
            raise UnknownRestPatternError(
                f"Unknown hash rest pattern child: {child.type}",
                child.lineno or node.lineno,
            )

        return self._bind(child.children[0], s("lvar", ctx.hash))

    def _hash_value_at(self, key: Node, ctx: TransformContext) -> Node:
        return s("send", s("lvar", ctx.hash), "delete", key)

    def _hash_has_key(self, key: Node, ctx: TransformContext) -> Node:
        return s("send", s("lvar", ctx.hash), "key?", key)
