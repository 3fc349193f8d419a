"""Tests for the runtime protocol functions."""

from __future__ import annotations

import re
from collections import OrderedDict
from types import MappingProxyType

import pytest

from casedown import CasedownError, ErrorCode, NoMatchingPatternError, Range
from casedown.runtime import (
    CONSTANTS,
    NAMESPACE,
    case_eq,
    deconstruct,
    deconstruct_keys,
    dup,
    inclusive_slice,
    raise_error,
)


class TestCaseEq:
    @pytest.mark.parametrize(
        ("pattern", "value", "expected"),
        [
            (int, 3, True),
            (int, "3", False),
            (str, "s", True),
            (Range(1, 5), 5, True),
            (Range(1, 5, exclude_end=True), 5, False),
            (Range(1, None), 10**9, True),
            (Range(None, 0), -1, True),
            (Range(1, 5), "x", False),
            (range(0, 3), 2, True),
            (range(0, 3), 3, False),
            (re.compile(r"^\d+$"), "123", True),
            (re.compile(r"^\d+$"), 123, False),
            (1, 1, True),
            ("a", "b", False),
            (None, None, True),
            (CONSTANTS["FalseClass"], True, False),
            (CONSTANTS["FalseClass"], False, True),
            (CONSTANTS["TrueClass"], True, True),
            (CONSTANTS["TrueClass"], 1, False),
            (int, True, False),
            (bool, True, True),
            (object, False, True),
            (1, True, False),
            (0, False, False),
            (1.0, True, False),
            (True, 1, False),
            (True, True, True),
            (Range(0, 1), True, False),
            (range(0, 2), False, False),
        ],
    )
    def test_protocol(self, pattern, value, expected: bool) -> None:
        assert case_eq(pattern, value) is expected

    def test_custom_case_eq(self) -> None:
        class Even:
            def __case_eq__(self, value: int) -> bool:
                return value % 2 == 0

        assert case_eq(Even(), 4) is True
        assert case_eq(Even(), 5) is False


class TestDeconstruct:
    def test_sequences_become_lists(self) -> None:
        assert deconstruct((1, 2)) == [1, 2]
        assert deconstruct([1]) == [1]

    @pytest.mark.parametrize("value", ["abc", b"abc", 5, None, {"a": 1}])
    def test_non_sequences_yield_none(self, value) -> None:
        assert deconstruct(value) is None

    def test_custom_protocol(self) -> None:
        class Pair:
            def __deconstruct__(self) -> list[int]:
                return [1, 2]

        assert deconstruct(Pair()) == [1, 2]


class TestDeconstructKeys:
    def test_mappings_become_dicts(self) -> None:
        source = OrderedDict(a=1)
        result = deconstruct_keys(source, None)
        assert result == {"a": 1}
        assert type(result) is dict
        assert deconstruct_keys(MappingProxyType({"b": 2}), ["b"]) == {"b": 2}

    def test_result_is_a_copy(self) -> None:
        source = {"a": 1}
        deconstruct_keys(source, None)["a"] = 2
        assert source == {"a": 1}

    def test_non_mappings_yield_none(self) -> None:
        assert deconstruct_keys([("a", 1)], None) is None

    def test_custom_protocol_receives_keys(self) -> None:
        class Record:
            def __deconstruct_keys__(self, keys):
                return {key: key.upper() for key in keys}

        assert deconstruct_keys(Record(), ["a"]) == {"a": "A"}


class TestHelpers:
    def test_dup_is_shallow(self) -> None:
        inner = [1]
        source = {"a": inner}
        copied = dup(source)
        assert copied == source
        assert copied is not source
        assert copied["a"] is inner

    @pytest.mark.parametrize(
        ("start", "stop", "expected"),
        [
            (1, -2, [2, 3]),
            (0, -1, [1, 2, 3, 4]),
            (1, 2, [2, 3]),
            (2, -3, []),
        ],
    )
    def test_inclusive_slice(self, start: int, stop: int, expected: list[int]) -> None:
        assert inclusive_slice([1, 2, 3, 4], start, stop) == expected

    def test_raise_error(self) -> None:
        with pytest.raises(NoMatchingPatternError, match=r"\{'a': 1\}"):
            raise_error(NoMatchingPatternError, repr({"a": 1}))

    def test_no_matching_pattern_error(self) -> None:
        error = NoMatchingPatternError("5")
        assert isinstance(error, CasedownError)
        assert isinstance(error, RuntimeError)
        assert error.code is ErrorCode.NO_MATCHING_PATTERN
        assert error.format_compact().startswith("C-RUN-001: 5")

    def test_namespace_has_no_builtins(self) -> None:
        assert NAMESPACE["__builtins__"] == {}
        assert NAMESPACE["Array"] is list
        assert NAMESPACE["Hash"] is dict
