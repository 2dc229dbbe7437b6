"""Selection expressions evaluated against single events.

The grammar supports numbers, column names (optionally indexed, ``A1[0]``),
arithmetic, comparisons, ``!``, ``&&``, ``||``, parentheses and the function
``No56``. A vector column used without an index is evaluated element by
element and the event passes if any element passes.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


class CutError(ValueError):
    """An invalid selection expression."""


def no_56(values: Iterable[int]) -> bool:
    """True when neither bar 5 nor bar 6 appears among the hits."""
    return not any(x in (5, 6) for x in values)


_FUNCTIONS: dict[str, Callable[..., Any]] = {"No56": no_56}

_SPACE_RE = re.compile(r"\s*")
_TOKEN_RE = re.compile(
    r"(?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>&&|\|\||==|!=|<=|>=|[<>!+\-*/()\[\],])",
    re.ASCII,
)


class _NoValue(Exception):
    """The requested element does not exist for this instance."""


def _lookup(event: Mapping[str, Any], name: str) -> Any:
    try:
        return event[name]
    except KeyError:
        raise CutError(f"unknown variable {name!r}") from None


class _Node:
    def value(self, event: Mapping[str, Any], instance: int) -> float:
        raise NotImplementedError

    def names(self) -> set[str]:
        return set()

    def iterated(self) -> set[str]:
        return set()


@dataclass
class _Number(_Node):
    number: float

    def value(self, event, instance):
        return self.number


@dataclass
class _Var(_Node):
    name: str
    index: int | None = None

    def value(self, event, instance):
        raw = _lookup(event, self.name)
        if isinstance(raw, (list, tuple)):
            k = instance if self.index is None else self.index
            if k >= len(raw):
                raise _NoValue
            return raw[k]
        if self.index not in (None, 0):
            raise _NoValue
        return raw

    def names(self):
        return {self.name}

    def iterated(self):
        return {self.name} if self.index is None else set()


@dataclass
class _Call(_Node):
    name: str
    args: list[_Node]

    def value(self, event, instance):
        values = []
        for arg in self.args:
            if isinstance(arg, _Var) and arg.index is None:
                raw = _lookup(event, arg.name)
                values.append(raw if isinstance(raw, (list, tuple)) else [raw])
            else:
                values.append(arg.value(event, instance))
        return float(bool(_FUNCTIONS[self.name](*values)))

    def names(self):
        return set().union(*(a.names() for a in self.args))

    def iterated(self):
        return set().union(
            *(a.iterated() for a in self.args if not (isinstance(a, _Var) and a.index is None))
        )


@dataclass
class _Unary(_Node):
    op: str
    operand: _Node

    def value(self, event, instance):
        v = self.operand.value(event, instance)
        if self.op == "!":
            return float(not v)
        return -v if self.op == "-" else v

    def names(self):
        return self.operand.names()

    def iterated(self):
        return self.operand.iterated()


_COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


@dataclass
class _Binary(_Node):
    op: str
    left: _Node
    right: _Node

    def value(self, event, instance):
        if self.op == "&&":
            return float(bool(self.left.value(event, instance)) and bool(self.right.value(event, instance)))
        if self.op == "||":
            return float(bool(self.left.value(event, instance)) or bool(self.right.value(event, instance)))
        a = self.left.value(event, instance)
        b = self.right.value(event, instance)
        if self.op in _COMPARISONS:
            return float(_COMPARISONS[self.op](a, b))
        if self.op == "+":
            return a + b
        if self.op == "-":
            return a - b
        if self.op == "*":
            return a * b
        return a / b if b else 0.0

    def names(self):
        return self.left.names() | self.right.names()

    def iterated(self):
        return self.left.iterated() | self.right.iterated()


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens = []
    pos = _SPACE_RE.match(text).end()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise CutError(f"unexpected character {text[pos]!r} at position {pos}")
        tokens.append((match.lastgroup, match.group(match.lastgroup)))
        pos = _SPACE_RE.match(text, match.end()).end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[tuple[str, str]]):
        self._tokens = tokens
        self._pos = 0

    def _peek_op(self) -> str | None:
        if self._pos < len(self._tokens) and self._tokens[self._pos][0] == "op":
            return self._tokens[self._pos][1]
        return None

    def _take(self) -> tuple[str, str]:
        if self._pos >= len(self._tokens):
            raise CutError("unexpected end of expression")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _expect(self, op: str) -> None:
        kind, text = self._take()
        if kind != "op" or text != op:
            raise CutError(f"expected {op!r}, found {text!r}")

    def parse(self) -> _Node:
        node = self._or()
        if self._pos != len(self._tokens):
            raise CutError(f"unexpected token {self._tokens[self._pos][1]!r}")
        return node

    def _binary_level(self, ops: tuple[str, ...], operand: Callable[[], _Node]) -> _Node:
        node = operand()
        while self._peek_op() in ops:
            op = self._take()[1]
            node = _Binary(op, node, operand())
        return node

    def _or(self):
        return self._binary_level(("||",), self._and)

    def _and(self):
        return self._binary_level(("&&",), self._comparison)

    def _comparison(self):
        return self._binary_level(tuple(_COMPARISONS), self._additive)

    def _additive(self):
        return self._binary_level(("+", "-"), self._multiplicative)

    def _multiplicative(self):
        return self._binary_level(("*", "/"), self._unary)

    def _unary(self):
        if self._peek_op() in ("!", "-", "+"):
            op = self._take()[1]
            return _Unary(op, self._unary())
        return self._primary()

    def _primary(self) -> _Node:
        kind, text = self._take()
        if kind == "number":
            return _Number(float(text))
        if kind == "name":
            if self._peek_op() == "(":
                return self._call(text)
            if self._peek_op() == "[":
                self._take()
                index_kind, index_text = self._take()
                if index_kind != "number" or not index_text.isdigit():
                    raise CutError(f"invalid index {index_text!r}")
                self._expect("]")
                return _Var(text, int(index_text))
            return _Var(text)
        if text == "(":
            node = self._or()
            self._expect(")")
            return node
        raise CutError(f"unexpected token {text!r}")

    def _call(self, name: str) -> _Node:
        if name not in _FUNCTIONS:
            raise CutError(f"unknown function {name!r}")
        self._expect("(")
        args = [self._or()]
        while self._peek_op() == ",":
            self._take()
            args.append(self._or())
        self._expect(")")
        if len(args) != 1:
            raise CutError(f"{name} takes exactly one argument")
        return _Call(name, args)


@dataclass(frozen=True)
class Cut:
    """A parsed selection expression."""

    text: str
    _root: _Node = field(repr=False, compare=False)

    @property
    def variables(self) -> frozenset[str]:
        """Names of all columns the expression refers to."""
        return frozenset(self._root.names())

    def evaluate(self, event: Mapping[str, Any]) -> bool:
        """Whether the event passes the selection."""
        lengths = [
            len(raw)
            for raw in (_lookup(event, n) for n in self._root.iterated())
            if isinstance(raw, (list, tuple))
        ]
        instances = min(lengths) if lengths else 1
        for instance in range(instances):
            try:
                if self._root.value(event, instance):
                    return True
            except _NoValue:
                continue
        return False

    def combine(self, other: Cut, use_or: bool = False) -> Cut:
        """Join two cuts with ``&&`` (default) or ``||``."""
        op = "||" if use_or else "&&"
        return Cut(f"({self.text}){op}({other.text})", _Binary(op, self._root, other._root))

    def __str__(self) -> str:
        return self.text


def parse_cut(text: str) -> Cut:
    """Parse a selection expression, raising :class:`CutError` if it is invalid."""
    tokens = _tokenize(text)
    if not tokens:
        raise CutError("empty expression")
    return Cut(text, _Parser(tokens).parse())