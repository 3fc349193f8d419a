"""Collaborator notifications emitted by the rewriter.

The rewriter reports two facts for every statement it rewrites:

- ``track(rewriter)``: the statement was rewritten (for usage tracking);
- ``use_runtime()``: the generated code depends on runtime support
  (error types and deconstruction protocol functions), so whoever loads
  compatibility shims must make `casedown.runtime` available.

Both are fire-and-forget. Implementations must not raise.

Example:
    >>> hooks = RecordingHooks()
    >>> PatternMatchingRewriter(hooks=hooks).rewrite(tree)
    >>> hooks.tracked
    ['pattern-matching']

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from casedown.rewriter import PatternMatchingRewriter


@runtime_checkable
class RewriteHooks(Protocol):
    def track(self, rewriter: PatternMatchingRewriter) -> None: ...

    def use_runtime(self) -> None: ...


class NullHooks:
    """Hooks that ignore every notification."""

    __slots__ = ()

    def track(self, rewriter: PatternMatchingRewriter) -> None:
        pass

    def use_runtime(self) -> None:
        pass


class RecordingHooks:
    """Hooks that remember notifications, for tests and build reports.

    Attributes:
        tracked: Feature name of every rewritten statement, in order.
        runtime_required: True once any statement needed runtime support.
    """

    __slots__ = ("runtime_required", "tracked")

    def __init__(self) -> None:
        self.tracked: list[str] = []
        self.runtime_required = False

    def track(self, rewriter: PatternMatchingRewriter) -> None:
        self.tracked.append(rewriter.NAME)

    def use_runtime(self) -> None:
        self.runtime_required = True
