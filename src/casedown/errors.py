"""Exceptions for casedown.

Exception Hierarchy:
CasedownError (base)
├── RewriteError                 # Structural error found while rewriting
│   ├── MisplacedDefaultError    # Default clause is not the last element
│   ├── UnknownRestPatternError  # Unrecognised child of a hash **rest marker
│   └── UnsupportedPatternError  # Pattern kind not allowed at this position
└── CompileError                 # Output tree cannot be lowered to Python

Structural errors abort the rewrite of the current statement and never reach
the generated program. Run-time failures of generated code are represented
as raise nodes in the output tree; see `casedown.runtime`.

Example:
    ```
    C-REW-001: Default clause must be the last element of case/in (line 3)
      Docs: https://casedown.readthedocs.io/en/latest/errors.html#c-rew-001
    ```

"""

from __future__ import annotations

from enum import Enum

_CASEDOWN_DOCS_BASE = "https://casedown.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: C-{CATEGORY}-{NUMBER}
    Categories: REW (rewriter), CMP (compiler), RUN (generated code at run time)
    """

    # Rewriter errors (C-REW-xxx)
    MISPLACED_DEFAULT = "C-REW-001"
    UNKNOWN_REST_CHILD = "C-REW-002"
    UNSUPPORTED_PATTERN = "C-REW-003"

    # Compiler errors (C-CMP-xxx)
    UNSUPPORTED_NODE = "C-CMP-001"
    UNSUPPORTED_METHOD = "C-CMP-002"

    # Run-time errors (C-RUN-xxx)
    NO_MATCHING_PATTERN = "C-RUN-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_CASEDOWN_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (``rewriter``, ``compiler`` or ``runtime``)."""
        prefix = self.value.split("-")[1]
        return {
            "REW": "rewriter",
            "CMP": "compiler",
            "RUN": "runtime",
        }.get(prefix, "unknown")


class CasedownError(Exception):
    """Base exception for all casedown errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short, human-readable summary.

        Returns:
            The message prefixed with its error code, followed by the
            documentation URL when a code is set.
        """
        header = str(self)
        if self.code is None:
            return header

        if self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return f"{header}\n  Docs: {self.code.docs_url}"


class RewriteError(CasedownError):
    """Structural error in an input tree, raised while rewriting."""

    def __init__(self, message: str, lineno: int | None = None):
        self.message = message
        self.lineno = lineno
        if lineno is not None:
            message = f"{message} (line {lineno})"
        super().__init__(message)


class MisplacedDefaultError(RewriteError):
    """A default (``else``) clause appears before the end of the clause list."""

    code = ErrorCode.MISPLACED_DEFAULT


class UnknownRestPatternError(RewriteError):
    """A hash ``**rest`` marker holds something other than a variable."""

    code = ErrorCode.UNKNOWN_REST_CHILD


class UnsupportedPatternError(RewriteError):
    """A pattern kind appears where the rewriter cannot translate it.

    Array, hash and constant sub-patterns are only supported at the top of
    a clause (or of an alternation); nested inside an array element or a
    hash value they raise this error.
    """

    code = ErrorCode.UNSUPPORTED_PATTERN


class CompileError(CasedownError):
    """A node or method cannot be lowered to a Python expression."""

    code = ErrorCode.UNSUPPORTED_NODE

    def __init__(self, message: str, code: ErrorCode | None = None):
        if code is not None:
            self.code = code
        super().__init__(message)
