"""Rewriter configuration.

Example:
    >>> from casedown import PatternMatchingRewriter, RewriterConfig
    >>> config = RewriterConfig(variable_prefix="__pm")
    >>> rewriter = PatternMatchingRewriter(config=config)

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RewriterConfig:
    """Names used by generated code.

    Attributes:
        variable_prefix: Prefix of synthetic local variables. The rewriter
            appends a role suffix and a per-statement number, e.g.
            ``__matchee_arr_2__``.
        no_match_error: Constant raised when no clause matches and there is
            no default clause.
        type_error: Constant raised when a deconstruction result has the
            wrong container shape.
        raise_receiver: Constant receiving the ``raise`` call.
    """

    variable_prefix: str = "__matchee"
    no_match_error: str = "NoMatchingPatternError"
    type_error: str = "TypeError"
    raise_receiver: str = "Kernel"

    def __post_init__(self) -> None:
        if not self.variable_prefix.isidentifier():
            raise ValueError(
                f"variable_prefix must be a valid identifier, got {self.variable_prefix!r}"
            )
        for field_name in ("no_match_error", "type_error", "raise_receiver"):
            value = getattr(self, field_name)
            if not value or not value[0].isupper():
                raise ValueError(f"{field_name} must name a constant, got {value!r}")


DEFAULT_CONFIG = RewriterConfig()
