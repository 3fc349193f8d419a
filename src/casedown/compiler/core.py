"""casedown Compiler — lowers rewritten trees to Python code objects.

The Compiler turns a `Node` tree built from the output grammar (plus the
plain expressions that appear in matchee, guard and body positions) into a
single ``ast.Expression``, then compiles it for ``eval()`` against a
namespace seeded with `casedown.runtime.NAMESPACE`.

Design Principles:
1. **AST-to-AST**: generate ``ast`` nodes, not source strings
2. **Expression-only**: every construct lowers to an expression; local
   assignment is a walrus, sequencing is ``(a, b, c)[-1]``
3. **O(1) dispatch**: dict-based node type → handler and method → handler

Lowering Table:
    ``lvasgn``            → ``(name := value)``
    ``if``                → ``body if test else orelse``
    ``and`` / ``or``      → ``BoolOp``
    ``send ===``          → ``_case_eq(recv, arg)``
    ``send deconstruct``  → ``_deconstruct(recv)``
    ``send delete``       → ``recv.pop(key, None)``
    ``send key?``         → ``key in recv``
    ``index`` + ``irange``→ ``_slice(recv, start, stop)``
    ``send raise``        → ``_raise(error, message)``

Example:
    >>> from casedown import Compiler, s
    >>> Compiler().evaluate(s("send", s("int", 1), "+", s("int", 2)))
    3

"""

from __future__ import annotations

import ast
import logging
import types
from collections.abc import Callable
from typing import Any

from casedown.errors import CompileError, ErrorCode
from casedown.nodes import Node
from casedown.runtime import NAMESPACE

logger = logging.getLogger(__name__)

_COMPARE_OPS: dict[str, type[ast.cmpop]] = {
    "==": ast.Eq,
    "!=": ast.NotEq,
    "<": ast.Lt,
    "<=": ast.LtE,
    ">": ast.Gt,
    ">=": ast.GtE,
}

_BINARY_OPS: dict[str, type[ast.operator]] = {
    "+": ast.Add,
    "-": ast.Sub,
    "*": ast.Mult,
    "/": ast.Div,
    "%": ast.Mod,
    "**": ast.Pow,
    "&": ast.BitAnd,
    "|": ast.BitOr,
    "^": ast.BitXor,
    "<<": ast.LShift,
    ">>": ast.RShift,
}


def _load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _call(func: ast.expr, *args: ast.expr) -> ast.Call:
    return ast.Call(func=func, args=list(args), keywords=[])


class Compiler:
    """Compile casedown trees to Python code objects.

    Attributes:
        _filename: Filename reported in tracebacks of compiled code.

    Node Dispatch:
        Uses O(1) dict lookup for node type → handler:
            ```python
            handler = self._get_node_dispatch()[node.type]
            ```
        Sends are dispatched a second time on the method name; operators
        fall back to ``_COMPARE_OPS`` and ``_BINARY_OPS``, other methods
        become attribute calls.

    """

    __slots__ = ("_filename", "_node_dispatch", "_send_dispatch")

    def __init__(self, filename: str = "<casedown>"):
        self._filename = filename

    def compile(self, node: Node) -> types.CodeType:
        """Compile a tree to a code object for ``eval()``.

        Raises:
            CompileError: If the tree contains an unsupported node or method.
        """
        expression = ast.Expression(body=self._compile_expr(node))
        ast.fix_missing_locations(expression)
        logger.debug(f"Compiling {node.type} tree to {self._filename}")
        return compile(expression, self._filename, "eval")

    def evaluate(self, node: Node, namespace: dict[str, Any] | None = None) -> Any:
        """Compile and evaluate a tree.

        Args:
            node: Tree to evaluate.
            namespace: Variables visible to the code. Runtime helpers are
                added to it, and every local assignment the code performs
                (pattern bindings included) is written back into it.

        Returns:
            The value of the expression.
        """
        if namespace is None:
            namespace = {}
        for key, value in NAMESPACE.items():
            namespace.setdefault(key, value)
        return eval(self.compile(node), namespace)

    def to_ast(self, node: Node) -> ast.expr:
        """Lower a tree without compiling it (useful with ``ast.unparse``)."""
        expr = self._compile_expr(node)
        ast.fix_missing_locations(expr)
        return expr

    def _compile_expr(self, node: Any) -> ast.expr:
        if node is None:
            return ast.Constant(value=None)
        if not isinstance(node, Node):
            raise CompileError(f"Expected a node, got {node!r}")

        handler = self._get_node_dispatch().get(node.type)
        if handler is None:
            raise CompileError(f"Cannot compile node type '{node.type}'")
        return handler(node)

    def _get_node_dispatch(self) -> dict[str, Callable[[Node], ast.expr]]:
        """Get node type dispatch table (cached on first call)."""
        if not hasattr(self, "_node_dispatch"):
            self._node_dispatch = {
                "int": self._compile_literal,
                "float": self._compile_literal,
                "str": self._compile_literal,
                "sym": self._compile_literal,
                "nil": self._compile_nil,
                "true": self._compile_true,
                "false": self._compile_false,
                "lvar": self._compile_lvar,
                "lvasgn": self._compile_lvasgn,
                "const": self._compile_const,
                "array": self._compile_array,
                "hash": self._compile_hash,
                "begin": self._compile_begin,
                "if": self._compile_if,
                "and": self._compile_bool_op,
                "or": self._compile_bool_op,
                "index": self._compile_index,
                "irange": self._compile_range,
                "erange": self._compile_range,
                "send": self._compile_send,
            }
        return self._node_dispatch

    # ─────────────────────────────────────────────────────────────────────────
    # Literals and variables
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_literal(self, node: Node) -> ast.expr:
        return ast.Constant(value=node.children[0])

    def _compile_nil(self, node: Node) -> ast.expr:
        return ast.Constant(value=None)

    def _compile_true(self, node: Node) -> ast.expr:
        return ast.Constant(value=True)

    def _compile_false(self, node: Node) -> ast.expr:
        return ast.Constant(value=False)

    def _compile_lvar(self, node: Node) -> ast.expr:
        return _load(node.children[0])

    def _compile_lvasgn(self, node: Node) -> ast.expr:
        name, value = node.children
        return ast.NamedExpr(
            target=ast.Name(id=name, ctx=ast.Store()),
            value=self._compile_expr(value),
        )

    def _compile_const(self, node: Node) -> ast.expr:
        scope, name = node.children
        if scope is None or scope.type == "cbase":
            return _load(name)
        return ast.Attribute(value=self._compile_expr(scope), attr=name, ctx=ast.Load())

    def _compile_array(self, node: Node) -> ast.expr:
        return ast.List(elts=[self._compile_expr(child) for child in node.children], ctx=ast.Load())

    def _compile_hash(self, node: Node) -> ast.expr:
        keys: list[ast.expr | None] = []
        values: list[ast.expr] = []
        for pair in node.children:
            if pair.type != "pair":
                raise CompileError(f"Cannot compile hash entry '{pair.type}'")
            keys.append(self._compile_expr(pair.children[0]))
            values.append(self._compile_expr(pair.children[1]))
        return ast.Dict(keys=keys, values=values)

    # ─────────────────────────────────────────────────────────────────────────
    # Control flow
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_begin(self, node: Node) -> ast.expr:
        """Evaluate children in order, yielding the last: ``(a, b, c)[-1]``."""
        if not node.children:
            return ast.Constant(value=None)
        if len(node.children) == 1:
            return self._compile_expr(node.children[0])
        return ast.Subscript(
            value=ast.Tuple(elts=[self._compile_expr(child) for child in node.children], ctx=ast.Load()),
            slice=ast.Constant(value=-1),
            ctx=ast.Load(),
        )

    def _compile_if(self, node: Node) -> ast.expr:
        test, body, orelse = node.children
        return ast.IfExp(
            test=self._compile_expr(test),
            body=self._compile_expr(body),
            orelse=self._compile_expr(orelse),
        )

    def _compile_bool_op(self, node: Node) -> ast.expr:
        op = ast.And() if node.type == "and" else ast.Or()
        values: list[ast.expr] = []
        for child in node.children:
            # Flatten right-nested chains of the same connective
            compiled = self._compile_expr(child)
            if isinstance(compiled, ast.BoolOp) and type(compiled.op) is type(op):
                values.extend(compiled.values)
            else:
                values.append(compiled)
        if len(values) == 1:
            return values[0]
        return ast.BoolOp(op=op, values=values)

    # ─────────────────────────────────────────────────────────────────────────
    # Indexing and ranges
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_index(self, node: Node) -> ast.expr:
        receiver, index = node.children
        target = self._compile_expr(receiver)

        if isinstance(index, Node) and index.type == "irange":
            start, stop = index.children
            return _call(_load("_slice"), target, self._compile_expr(start), self._compile_expr(stop))
        if isinstance(index, Node) and index.type == "erange":
            start, stop = index.children
            return ast.Subscript(
                value=target,
                slice=ast.Slice(lower=self._compile_expr(start), upper=self._compile_expr(stop)),
                ctx=ast.Load(),
            )
        return ast.Subscript(value=target, slice=self._compile_expr(index), ctx=ast.Load())

    def _compile_range(self, node: Node) -> ast.expr:
        begin, end = node.children
        return _call(
            _load("_range"),
            self._compile_expr(begin),
            self._compile_expr(end),
            ast.Constant(value=node.type == "erange"),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Method sends
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_send(self, node: Node) -> ast.expr:
        receiver, method, *args = node.children

        handler = self._get_send_dispatch().get(method)
        if handler is not None:
            return handler(receiver, args)

        if method in _COMPARE_OPS and len(args) == 1:
            return ast.Compare(
                left=self._compile_expr(receiver),
                ops=[_COMPARE_OPS[method]()],
                comparators=[self._compile_expr(args[0])],
            )
        if method in _BINARY_OPS and len(args) == 1:
            return ast.BinOp(
                left=self._compile_expr(receiver),
                op=_BINARY_OPS[method](),
                right=self._compile_expr(args[0]),
            )

        if not method.isidentifier():
            raise CompileError(
                f"Cannot compile method '{method}'",
                code=ErrorCode.UNSUPPORTED_METHOD,
            )

        compiled_args = [self._compile_expr(arg) for arg in args]
        if receiver is None:
            return _call(_load(method), *compiled_args)
        return _call(
            ast.Attribute(value=self._compile_expr(receiver), attr=method, ctx=ast.Load()),
            *compiled_args,
        )

    def _get_send_dispatch(self) -> dict[str, Callable[[Any, list[Any]], ast.expr]]:
        """Get method name dispatch table (cached on first call)."""
        if not hasattr(self, "_send_dispatch"):
            self._send_dispatch = {
                "===": self._compile_case_eq,
                "!": self._compile_not,
                "-@": self._compile_negate,
                "[]": self._compile_getitem,
                "deconstruct": self._runtime_call("_deconstruct"),
                "deconstruct_keys": self._runtime_call("_deconstruct_keys"),
                "dup": self._runtime_call("_dup"),
                "inspect": self._runtime_call("_inspect"),
                "length": self._runtime_call("_len"),
                "size": self._runtime_call("_len"),
                "to_s": self._runtime_call("_str"),
                "delete": self._compile_delete,
                "key?": self._compile_has_key,
                "nil?": self._compile_is_nil,
                "raise": self._compile_raise,
            }
        return self._send_dispatch

    def _runtime_call(self, helper: str) -> Callable[[Any, list[Any]], ast.expr]:
        """Lower ``recv.method(*args)`` to ``helper(recv, *args)``."""

        def lower(receiver: Any, args: list[Any]) -> ast.expr:
            return _call(
                _load(helper),
                self._compile_expr(receiver),
                *(self._compile_expr(arg) for arg in args),
            )

        return lower

    def _compile_case_eq(self, receiver: Any, args: list[Any]) -> ast.expr:
        return _call(_load("_case_eq"), self._compile_expr(receiver), self._compile_expr(args[0]))

    def _compile_not(self, receiver: Any, args: list[Any]) -> ast.expr:
        return ast.UnaryOp(op=ast.Not(), operand=self._compile_expr(receiver))

    def _compile_negate(self, receiver: Any, args: list[Any]) -> ast.expr:
        return ast.UnaryOp(op=ast.USub(), operand=self._compile_expr(receiver))

    def _compile_getitem(self, receiver: Any, args: list[Any]) -> ast.expr:
        return ast.Subscript(
            value=self._compile_expr(receiver),
            slice=self._compile_expr(args[0]),
            ctx=ast.Load(),
        )

    def _compile_delete(self, receiver: Any, args: list[Any]) -> ast.expr:
        """``h.delete(k)`` → ``h.pop(k, None)``"""
        return _call(
            ast.Attribute(value=self._compile_expr(receiver), attr="pop", ctx=ast.Load()),
            self._compile_expr(args[0]),
            ast.Constant(value=None),
        )

    def _compile_has_key(self, receiver: Any, args: list[Any]) -> ast.expr:
        return ast.Compare(
            left=self._compile_expr(args[0]),
            ops=[ast.In()],
            comparators=[self._compile_expr(receiver)],
        )

    def _compile_is_nil(self, receiver: Any, args: list[Any]) -> ast.expr:
        return ast.Compare(
            left=self._compile_expr(receiver),
            ops=[ast.Is()],
            comparators=[ast.Constant(value=None)],
        )

    def _compile_raise(self, receiver: Any, args: list[Any]) -> ast.expr:
        # Kernel.raise(Error, message) and bare raise(Error, message)
        return _call(_load("_raise"), *(self._compile_expr(arg) for arg in args))
