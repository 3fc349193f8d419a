"""Per-statement transformation context.

One `TransformContext` is created for every ``case_match`` node and passed
explicitly to each builder. Nested statements get their own context, so
their deconstruction caches never interfere.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TransformContext:
    """Cache flags and synthetic variable names for one case statement.

    Attributes:
        matchee: Variable bound to the matchee value.
        array: Variable caching the sequence form of the matchee.
        hash_source: Variable caching the key-value form of the matchee.
        hash: Per-pattern working copy of ``hash_source``.
        value: Scratch variable for a removed hash value tested twice.
        array_deconstructed: Sequence form already computed.
        hash_deconstructed: Key-value form already computed.
        conditional_depth: Number of enclosing short-circuit positions.
            Deconstruction emitted at depth > 0 may never run, so it does
            not mark the cache.
    """

    matchee: str
    array: str
    hash_source: str
    hash: str
    value: str
    array_deconstructed: bool = False
    hash_deconstructed: bool = False
    conditional_depth: int = 0

    @classmethod
    def create(cls, prefix: str, number: int) -> TransformContext:
        """Build a context whose variable names are unique to statement ``number``."""
        return cls(
            matchee=f"{prefix}_{number}__",
            array=f"{prefix}_arr_{number}__",
            hash_source=f"{prefix}_hash_src_{number}__",
            hash=f"{prefix}_hash_{number}__",
            value=f"{prefix}_val_{number}__",
        )

    @property
    def unconditional(self) -> bool:
        return self.conditional_depth == 0
