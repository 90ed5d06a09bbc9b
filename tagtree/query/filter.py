#!/usr/bin/env python3
"""Boolean filter expressions over tags.

Grammar:
    - A tag is any run of characters other than whitespace and ``&|!()``
    - ``!x`` negates; ``!!x`` folds back to ``x``
    - ``a & b`` and ``a | b`` have equal precedence and associate left to
      right, so ``a & b | c`` means ``(a & b) | c``
    - Parentheses group sub-expressions

Example:
    >>> expr = parse_filter("(jpg | png) & !draft")
    >>> str(expr)
    '(jpg | png) & !draft'
    >>> expr.evaluate(lambda tag: tag in {"png"})
    True
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Union

from tagtree.core.errors import FilterErrorKind, FilterParseError


class Filter:
    """Base class of filter expression nodes."""

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        """Evaluate the expression.

        Args:
            lookup: Called with each Tag's value, returns whether it is set

        Returns:
            Truth value of the expression
        """
        raise NotImplementedError

    def to_text(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_text()

    def _child_text(self, child: "Filter") -> str:
        if isinstance(child, (And, Or)) and type(child) is not type(self):
            return f"({child.to_text()})"
        return child.to_text()


@dataclass(frozen=True)
class Tag(Filter):
    value: Any

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return lookup(self.value)

    def to_text(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class And(Filter):
    left: Filter
    right: Filter

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return self.left.evaluate(lookup) and self.right.evaluate(lookup)

    def to_text(self) -> str:
        return f"{self._child_text(self.left)} & {self._child_text(self.right)}"


@dataclass(frozen=True)
class Or(Filter):
    left: Filter
    right: Filter

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return self.left.evaluate(lookup) or self.right.evaluate(lookup)

    def to_text(self) -> str:
        return f"{self._child_text(self.left)} | {self._child_text(self.right)}"


@dataclass(frozen=True)
class Not(Filter):
    operand: Filter

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return not self.operand.evaluate(lookup)

    def to_text(self) -> str:
        return f"!{self._child_text(self.operand)}"


@dataclass(frozen=True)
class TrueTag(Filter):
    """Always true."""

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return True

    def to_text(self) -> str:
        return "<true>"


@dataclass(frozen=True)
class FalseTag(Filter):
    """Always false. Stands in for tags that exist nowhere in the tree."""

    def evaluate(self, lookup: Callable[[Any], bool]) -> bool:
        return False

    def to_text(self) -> str:
        return "<false>"


class _Op:
    """Operator token waiting to be reduced."""

    def __init__(self, symbol: str):
        self.symbol = symbol

    def __repr__(self) -> str:
        return f"_Op({self.symbol!r})"


_AND = _Op("&")
_OR = _Op("|")
_NOT = _Op("!")

Token = Union[_Op, Filter]


def negate(node: Filter) -> Filter:
    """Negate a node, folding double negation and constants."""
    if isinstance(node, Not):
        return node.operand
    if isinstance(node, TrueTag):
        return FalseTag()
    if isinstance(node, FalseTag):
        return TrueTag()
    return Not(node)


def _next_filter(tokens: List[Token], pos: int, text: str):
    if pos >= len(tokens):
        raise FilterParseError(FilterErrorKind.END_OF_TOKENS, text)
    token = tokens[pos]
    if token is _AND or token is _OR:
        raise FilterParseError(FilterErrorKind.UNEXPECTED_BINARY_OPERATOR, text)
    if token is _NOT:
        node, pos = _next_filter(tokens, pos + 1, text)
        return negate(node), pos
    return token, pos + 1


def _parse_tokens(tokens: List[Token], text: str) -> Filter:
    node, pos = _next_filter(tokens, 0, text)
    while pos < len(tokens):
        token = tokens[pos]
        if token is _AND:
            right, pos = _next_filter(tokens, pos + 1, text)
            node = And(node, right)
        elif token is _OR:
            right, pos = _next_filter(tokens, pos + 1, text)
            node = Or(node, right)
        else:
            raise FilterParseError(FilterErrorKind.EXPECTED_BINARY_OPERATOR, text)
    return node


def parse_filter(text: str, make_tag: Callable[[str], Filter] = Tag) -> Filter:
    """Parse a filter string.

    Args:
        text: Filter expression
        make_tag: Builds the node for each tag name. The default keeps the
            name itself; a tag table supplies a resolver mapping names to
            indices.

    Returns:
        Root node of the expression

    Raises:
        FilterParseError: If the expression is malformed
    """
    if not text or text.isspace():
        raise FilterParseError(FilterErrorKind.EMPTY_QUERY, text)

    stack: List[Token] = []
    parens: List[int] = []
    begin = 0

    def push_tag(end: int) -> None:
        if end > begin:
            stack.append(make_tag(text[begin:end]))

    for i, c in enumerate(text):
        if c == "(":
            push_tag(i)
            parens.append(len(stack))
        elif c == ")":
            push_tag(i)
            if not parens:
                raise FilterParseError(FilterErrorKind.MALFORMED_PARENS, text)
            last = parens.pop()
            if last < len(stack) - 1:
                node = _parse_tokens(stack[last:], text)
                del stack[last:]
                stack.append(node)
        elif c == "!":
            push_tag(i)
            stack.append(_NOT)
        elif c == "&":
            push_tag(i)
            stack.append(_AND)
        elif c == "|":
            push_tag(i)
            stack.append(_OR)
        elif c.isspace():
            push_tag(i)
        else:
            continue
        begin = i + 1

    push_tag(len(text))
    if parens:
        raise FilterParseError(FilterErrorKind.MALFORMED_PARENS, text)

    return _parse_tokens(stack, text)
