"""Base node class for casedown syntax trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Node:
    """A tagged syntax node: a type name plus an ordered tuple of children.

    Children are either nodes or literal atoms (``str``, ``int``, ``float``,
    ``None``). The same class represents both the input grammar
    (``case_match``, ``in_pattern``, ``array_pattern``...) and the output
    grammar (``lvasgn``, ``if``, ``and``, ``send``...).

    Nodes are immutable; use `updated` to derive a modified copy that keeps
    the source line.

    """

    type: str
    children: tuple[Any, ...] = ()
    lineno: int | None = None

    def updated(
        self,
        type: str | None = None,
        children: tuple[Any, ...] | list[Any] | None = None,
    ) -> Node:
        """Return a copy with a new type and/or children, keeping ``lineno``."""
        return Node(
            self.type if type is None else type,
            self.children if children is None else tuple(children),
            self.lineno,
        )

    def __repr__(self) -> str:
        # Mirrors the s() builder so failing assertions print buildable trees
        args = [repr(self.type), *(repr(child) for child in self.children)]
        return f"s({', '.join(args)})"


def s(type: str, *children: Any, lineno: int | None = None) -> Node:
    """Build a node: ``s("send", None, "puts", s("int", 1))``."""
    return Node(type, children, lineno)
