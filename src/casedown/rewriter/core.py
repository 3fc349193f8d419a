"""casedown rewriter core: the PatternMatchingRewriter class.

Walks a syntax tree and replaces every ``case_match`` node with an
equivalent tree that uses only assignment, conditionals, boolean
connectives, method sends, sequencing and raises.

Design Principles:
1. **Tree-to-tree**: input and output are `Node` trees; no source text
2. **Bottom-up**: children are rewritten first, so a statement nested in a
   matchee, guard or body is finished before its parent starts
3. **Per-statement context**: cache flags and synthetic names live in a
   fresh `TransformContext`, never on the rewriter
4. **Table dispatch**: node type → handler, pattern kind → handler

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from casedown.config import DEFAULT_CONFIG, RewriterConfig
from casedown.hooks import NullHooks, RewriteHooks
from casedown.nodes import Node
from casedown.rewriter.arrays import ArrayPatternMixin
from casedown.rewriter.base import NodeBuilderMixin
from casedown.rewriter.clauses import ClauseChainMixin
from casedown.rewriter.context import TransformContext
from casedown.rewriter.dispatch import PatternDispatchMixin
from casedown.rewriter.hashes import HashPatternMixin

logger = logging.getLogger(__name__)


class PatternMatchingRewriter(
    NodeBuilderMixin,
    PatternDispatchMixin,
    ClauseChainMixin,
    ArrayPatternMixin,
    HashPatternMixin,
):
    """Desugar ``case ... in`` statements.

    Attributes:
        NAME: Feature name reported to usage tracking.
        SYNTAX_PROBE: Source snippet a gating component can try to parse to
            find out whether the target already supports the feature.
        MIN_SUPPORTED_VERSION: First language version with native support.
            Gating components compare against it; the rewriter itself
            ignores it.

    Example:
            >>> from casedown import PatternMatchingRewriter, s
            >>> tree = s(
            ...     "case_match",
            ...     s("lvar", "value"),
            ...     s("in_pattern", s("match_var", "x"), None, s("lvar", "x")),
            ...     None,
            ... )
            >>> PatternMatchingRewriter().rewrite(tree).type
            'begin'

    Thread-Safety:
        Not safe to share between threads while a rewrite is running; the
        statement counter is instance state. Instances are cheap to create.

    """

    NAME = "pattern-matching"
    SYNTAX_PROBE = "case 0; in 0; true; else; 1; end"
    MIN_SUPPORTED_VERSION = (2, 7, 0)

    __slots__ = (
        "_clause_dispatch",
        "_config",
        "_element_dispatch",
        "_hooks",
        "_node_dispatch",
        "_statement_counter",
    )

    def __init__(
        self,
        config: RewriterConfig | None = None,
        hooks: RewriteHooks | None = None,
    ):
        self._config = config or DEFAULT_CONFIG
        self._hooks = hooks or NullHooks()
        # Numbers synthetic variables so nested statements never share them
        self._statement_counter = 0

    @property
    def config(self) -> RewriterConfig:
        return self._config

    def rewrite(self, tree: Any) -> Any:
        """Rewrite every case/in statement in ``tree``.

        Args:
            tree: Root node. Non-node atoms are returned unchanged.

        Returns:
            The rewritten tree. Subtrees without case/in statements are
            returned as the same objects.

        Raises:
            RewriteError: If a statement is structurally invalid.
        """
        self._statement_counter = 0
        return self._process(tree)

    def _process(self, node: Any) -> Any:
        if not isinstance(node, Node):
            return node

        children = tuple(self._process(child) for child in node.children)
        if any(new is not old for new, old in zip(children, node.children, strict=True)):
            node = node.updated(children=children)

        handler = self._get_node_dispatch().get(node.type)
        if handler is None:
            return node
        return handler(node)

    def _get_node_dispatch(self) -> dict[str, Callable[[Node], Node]]:
        """Get node type dispatch table (cached on first call)."""
        if not hasattr(self, "_node_dispatch"):
            self._node_dispatch = {
                "case_match": self._rewrite_case_match,
            }
        return self._node_dispatch

    def _rewrite_case_match(self, node: Node) -> Node:
        self._hooks.track(self)
        self._hooks.use_runtime()

        self._statement_counter += 1
        ctx = TransformContext.create(self._config.variable_prefix, self._statement_counter)
        logger.debug(
            f"Rewriting case/in with {len(node.children) - 1} branch(es) "
            f"as {ctx.matchee} (line {node.lineno})"
        )

        result = self._build_case_match(node, ctx)

        logger.debug(
            f"Rewrote {ctx.matchee}: array_deconstructed={ctx.array_deconstructed}, "
            f"hash_deconstructed={ctx.hash_deconstructed}"
        )
        return result
