"""Tests for per-statement contexts and nested case/in statements."""

from __future__ import annotations

from casedown import PatternMatchingRewriter, s

from .builders import arr, case, count_sends, hsh, in_, lvar, rest, run, sym, var, walk


def _assigned_names(tree) -> set[str]:
    return {node.children[0] for node in walk(tree) if node.type == "lvasgn"}


class TestNestedStatements:
    """A statement inside another statement gets its own context."""

    def test_statement_in_body_has_independent_cache(
        self, rewriter: PatternMatchingRewriter
    ) -> None:
        inner = case(lvar("a"), in_(arr(var("x"), var("y")), lvar("y")))
        outer = case(lvar("value"), in_(arr(var("a")), inner))
        result = rewriter.rewrite(outer)

        assert count_sends(result, "deconstruct") == 2
        names = _assigned_names(result)
        assert {"__matchee_arr_1__", "__matchee_arr_2__"} <= names
        assert {"__matchee_1__", "__matchee_2__"} <= names

    def test_no_case_match_nodes_remain(self, rewriter: PatternMatchingRewriter) -> None:
        inner = case(lvar("a"), in_(var("x"), lvar("x")))
        outer = case(lvar("value"), in_(var("a"), inner))
        result = rewriter.rewrite(outer)

        types = {node.type for node in walk(result)}
        assert "case_match" not in types
        assert "in_pattern" not in types

    def test_statement_in_body_evaluates(self) -> None:
        inner = case(lvar("a"), in_(arr(var("x"), var("y")), lvar("y")))
        outer = case(lvar("value"), in_(arr(var("a")), inner))
        assert run(outer, [[5, 6]])[0] == 6

    def test_statement_in_matchee_evaluates(self) -> None:
        inner = case(lvar("value"), in_(arr(var("x")), lvar("x")))
        outer = case(inner, in_(arr(var("a"), var("b")), lvar("b")))
        assert run(outer, [[1, 2]])[0] == 2

    def test_statement_in_guard_evaluates(self) -> None:
        inner = case(lvar("x"), in_(hsh(var("ok")), lvar("ok")), default=s("false"))
        guard = s("if_guard", inner)
        outer = case(
            lvar("value"),
            in_(var("x"), sym("accepted"), guard),
            default=sym("rejected"),
        )
        assert run(outer, {"ok": True})[0] == "accepted"
        assert run(outer, {"ok": False})[0] == "rejected"
        assert run(outer, {"other": 1})[0] == "rejected"

    def test_inner_hash_rest_does_not_leak_into_outer(self) -> None:
        inner = case(lvar("meta"), in_(hsh(var("id"), rest("extra")), lvar("extra")))
        outer = case(lvar("value"), in_(hsh(var("meta"), rest("others")), inner))
        result, env = run(outer, {"meta": {"id": 1, "tag": "x"}, "size": 3})

        assert result == {"tag": "x"}
        assert env["others"] == {"size": 3}


class TestSiblingStatements:
    """Consecutive statements in one tree never share state."""

    def test_siblings_get_distinct_names(self, rewriter: PatternMatchingRewriter) -> None:
        first = case(lvar("a"), in_(arr(var("x")), lvar("x")))
        second = case(lvar("b"), in_(arr(var("y")), lvar("y")))
        result = rewriter.rewrite(s("begin", first, second))

        assert count_sends(result, "deconstruct") == 2
        assert {"__matchee_1__", "__matchee_2__"} <= _assigned_names(result)

    def test_numbering_restarts_for_each_rewrite(
        self, rewriter: PatternMatchingRewriter
    ) -> None:
        tree = case(lvar("value"), in_(var("x"), lvar("x")))
        assert rewriter.rewrite(tree) == rewriter.rewrite(tree)

    def test_untouched_subtrees_are_kept(self, rewriter: PatternMatchingRewriter) -> None:
        plain = s("send", lvar("a"), "+", s("int", 1))
        tree = s("begin", plain, case(lvar("value"), in_(var("x"), lvar("x"))))
        result = rewriter.rewrite(tree)

        assert result.children[0] is plain

    def test_tree_without_statements_is_returned_as_is(
        self, rewriter: PatternMatchingRewriter
    ) -> None:
        tree = s("begin", s("lvasgn", "a", s("int", 1)), lvar("a"))
        assert rewriter.rewrite(tree) is tree
