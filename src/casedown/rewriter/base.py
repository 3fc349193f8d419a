"""Node-building helpers shared by the rewriter mixins.

Small constructors for the output grammar: case-equality sends,
always-true bindings, AND folds and the two generated raise nodes.

Uses inline TYPE_CHECKING declarations for host attributes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from casedown.nodes import Node, s

if TYPE_CHECKING:
    from casedown.config import RewriterConfig
    from casedown.rewriter.context import TransformContext


class NodeBuilderMixin:
    """Mixin providing output-node constructors.

    Host attributes are declared via inline TYPE_CHECKING blocks.
    """

    if TYPE_CHECKING:
        # Host attributes (from PatternMatchingRewriter.__init__)
        _config: RewriterConfig

    @staticmethod
    def _case_eq(pattern: Node, subject: Node) -> Node:
        """``pattern === subject``"""
        return s("send", pattern, "===", subject)

    @staticmethod
    def _bind(name: str, value: Node) -> Node:
        """``(name = value) or true``: assign without affecting the condition."""
        return s("or", s("lvasgn", name, value), s("true"))

    @staticmethod
    def _and(*nodes: Node | None) -> Node:
        """Right-nested AND over the non-None nodes; ``true`` when there are none."""
        present = [node for node in nodes if node is not None]
        if not present:
            return s("true")

        result = present[-1]
        for node in reversed(present[:-1]):
            result = s("and", node, result)
        return result

    @contextmanager
    def _conditional(self, ctx: TransformContext) -> Iterator[None]:
        """Mark nodes built inside the block as possibly skipped at run time."""
        ctx.conditional_depth += 1
        try:
            yield
        finally:
            ctx.conditional_depth -= 1

    # ─────────────────────────────────────────────────────────────────────────
    # Generated errors
    # ─────────────────────────────────────────────────────────────────────────

    def _raise_error(self, error: str, ctx: TransformContext) -> Node:
        """``Kernel.raise(error, matchee.inspect)``"""
        return s(
            "send",
            s("const", None, self._config.raise_receiver),
            "raise",
            s("const", None, error),
            s("send", s("lvar", ctx.matchee), "inspect"),
        )

    def _no_matching_pattern(self, ctx: TransformContext) -> Node:
        return self._raise_error(self._config.no_match_error, ctx)

    def _type_mismatch(self, ctx: TransformContext) -> Node:
        return self._raise_error(self._config.type_error, ctx)
