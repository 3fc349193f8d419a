"""Runtime support for rewritten code.

Rewritten statements call a handful of protocol operations that the
original construct performed implicitly. These pure functions implement
them for Python values and are injected into the namespace of code
produced by `casedown.compiler`.

Protocols:
**Case equality** (`case_eq`, ``pattern === value``):
    - types: ``isinstance(value, pattern)``; booleans are not integers
    - `Range` and `range`: membership
    - compiled regular expressions: ``pattern.search(value)`` on strings
    - objects defining ``__case_eq__(value)``: its truthiness
    - anything else: ``pattern == value``, or identity when either side
      is a bool

**Sequence deconstruction** (`deconstruct`):
    ``value.__deconstruct__()`` when defined, a list copy of any non-string
    sequence, otherwise ``None`` (which fails the generated shape check).

**Key-value deconstruction** (`deconstruct_keys`):
    ``value.__deconstruct_keys__(keys)`` when defined, a dict copy of any
    mapping, otherwise ``None``.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NoReturn

from casedown.errors import CasedownError, ErrorCode


class NoMatchingPatternError(CasedownError, RuntimeError):
    """No clause of a case/in statement matched and there was no else branch.

    The message is the ``repr`` of the matchee.
    """

    code = ErrorCode.NO_MATCHING_PATTERN


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive (or end-exclusive) range over any comparable values.

    ``None`` bounds are open: ``Range(1, None)`` contains every value >= 1.
    """

    begin: Any
    end: Any
    exclude_end: bool = False

    def __contains__(self, value: Any) -> bool:
        try:
            if self.begin is not None and value < self.begin:
                return False
            if self.end is None:
                return True
            return value < self.end if self.exclude_end else value <= self.end
        except TypeError:
            return False


@dataclass(frozen=True, slots=True)
class BooleanClass:
    """Matcher for a single boolean singleton (``TrueClass``, ``FalseClass``)."""

    name: str
    instance: bool

    def __case_eq__(self, value: Any) -> bool:
        return value is self.instance

    def __repr__(self) -> str:
        return self.name


def case_eq(pattern: Any, value: Any) -> bool:
    """Return True if ``pattern`` accepts ``value``.

    ``true`` and ``false`` are not numbers: a `bool` value never matches a
    numeric type, a range, or a non-bool literal.
    """
    is_bool = isinstance(value, bool)
    if isinstance(pattern, type):
        if is_bool and pattern is not bool and issubclass(pattern, int):
            return False
        return isinstance(value, pattern)
    if isinstance(pattern, (Range, range)):
        if is_bool:
            return False
        try:
            return value in pattern
        except TypeError:
            return False
    if isinstance(pattern, re.Pattern):
        return isinstance(value, str) and pattern.search(value) is not None

    case_eq_method = getattr(pattern, "__case_eq__", None)
    if case_eq_method is not None:
        return bool(case_eq_method(value))
    if is_bool or isinstance(pattern, bool):
        return pattern is value
    return bool(pattern == value)


def deconstruct(value: Any) -> Any:
    """Return the sequence form of ``value`` for array patterns."""
    method = getattr(value, "__deconstruct__", None)
    if method is not None:
        return method()
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return list(value)
    return None


def deconstruct_keys(value: Any, keys: list[Any] | None) -> Any:
    """Return the key-value form of ``value`` for hash patterns.

    Args:
        value: The matchee.
        keys: Keys the pattern will read, or None when it needs all of
            them (``**rest``). Custom implementations may use this to
            compute only what is asked for.
    """
    method = getattr(value, "__deconstruct_keys__", None)
    if method is not None:
        return method(keys)
    if isinstance(value, Mapping):
        return dict(value)
    return None


def dup(value: Any) -> Any:
    """Shallow copy, used for the per-pattern working copy of a hash."""
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return copy.copy(value)


def inclusive_slice(items: Sequence[Any], start: int, stop: int) -> list[Any]:
    """``items[start..stop]`` with an inclusive, possibly negative, end."""
    end = stop + 1 if stop >= 0 else len(items) + stop + 1
    return list(items[start:end])


def raise_error(error_type: type[BaseException], message: Any) -> NoReturn:
    raise error_type(message)


# Constant names used by rewritten trees
CONSTANTS: dict[str, Any] = {
    "Array": list,
    "Hash": dict,
    "Integer": int,
    "Float": float,
    "String": str,
    "Symbol": str,
    "NilClass": type(None),
    "TrueClass": BooleanClass("TrueClass", True),
    "FalseClass": BooleanClass("FalseClass", False),
    "TypeError": TypeError,
    "NoMatchingPatternError": NoMatchingPatternError,
}

# =============================================================================
# Base namespace for compiled code
# =============================================================================
# Copied into every evaluation namespace; read-only after module load.
# =============================================================================

NAMESPACE: dict[str, Any] = {
    "__builtins__": {},
    "_case_eq": case_eq,
    "_deconstruct": deconstruct,
    "_deconstruct_keys": deconstruct_keys,
    "_dup": dup,
    "_slice": inclusive_slice,
    "_raise": raise_error,
    "_inspect": repr,
    "_len": len,
    "_str": str,
    "_range": Range,
    **CONSTANTS,
}
