"""String literal sub-parser: raw literal text to Constant or JoinedStr.

Formatted literals are scanned left to right. Replacement fields are split
into expression, conversion, and format spec; the expression goes to an
injected expression parser and the format spec is scanned again by the
same routine, since it may hold nested fields of its own.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Callable

from .errors import (
    MAX_NESTING_DEPTH,
    EmptyExpression,
    InvalidConversion,
    NestingTooDeep,
    UnmatchedBrace,
    UnterminatedField,
)
from .nodes import Constant, Expr, FormattedValue, JoinedStr, Node, StringLiteral

ExprParser = Callable[[str], Expr]

CONVERSIONS: set[str] = {"s", "r", "a"}

CLOSERS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}


@dataclass
class FieldSpan:
    """Offsets of one {...} field. bang and colon are -1 when absent."""

    start: int
    end: int
    bang: int
    colon: int

    def expr_end(self) -> int:
        if self.bang >= 0:
            return self.bang
        if self.colon >= 0:
            return self.colon
        return self.end


def parse_literal(
    literal: StringLiteral,
    parse_expression: ExprParser,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Expr:
    """Turn a raw string token into its final node.

    Plain literals come back as Constant(content), untouched. Formatted
    literals always produce a JoinedStr, even when empty.
    """
    if not literal.is_formatted():
        return Constant(literal.content)
    return JoinedStr(parse_fstring(literal.content, parse_expression, max_depth))


def parse_fstring(
    content: str,
    parse_expression: ExprParser,
    max_depth: int = MAX_NESTING_DEPTH,
    depth: int = 0,
    offset: int = 0,
) -> list[Expr]:
    """Parse f-string content to a list of Constant and FormattedValue nodes.

    offset is where content starts in the outermost literal, so error
    positions always refer to the text the caller handed in.
    """
    if depth > max_depth:
        raise NestingTooDeep(max_depth)
    values: list[Expr] = []
    current: list[str] = []
    i = 0
    length = len(content)
    while i < length:
        c = content[i]
        if c == "{" and i + 1 < length and content[i + 1] == "{":
            current.append("{")
            i += 2
            continue
        if c == "}" and i + 1 < length and content[i + 1] == "}":
            current.append("}")
            i += 2
            continue
        if c == "}":
            raise UnmatchedBrace(offset + i)
        if c == "{":
            if len(current) > 0:
                values.append(Constant("".join(current)))
                current = []
            span = scan_field(content, i, max_depth, depth, offset)
            values.append(
                _build_field(content, span, parse_expression, max_depth, depth, offset)
            )
            i = span.end + 1
            continue
        current.append(c)
        i += 1
    if len(current) > 0:
        values.append(Constant("".join(current)))
    return values


def scan_field(
    content: str,
    start: int,
    max_depth: int = MAX_NESTING_DEPTH,
    depth: int = 0,
    offset: int = 0,
) -> FieldSpan:
    """Find the } closing the field opened at content[start].

    In the expression part, brackets and quotes are tracked so that a } or
    ! or : inside them does not count. After the conversion bang only : and
    } matter. In the format spec, quotes are plain text and each { opens a
    nested field that is skipped whole.
    """
    if depth > max_depth:
        raise NestingTooDeep(max_depth)
    i = start + 1
    length = len(content)
    stack: list[str] = []
    quote = ""
    bang = -1
    colon = -1
    while i < length:
        c = content[i]
        if colon >= 0:
            if c == "{":
                inner = scan_field(content, i, max_depth, depth + 1, offset)
                i = inner.end + 1
                continue
            if c == "}":
                return FieldSpan(start, i, bang, colon)
            i += 1
            continue
        if bang >= 0:
            if c == ":":
                colon = i
            elif c == "}":
                return FieldSpan(start, i, bang, colon)
            i += 1
            continue
        if quote != "":
            if c == "\\":
                i += 2
                continue
            if content.startswith(quote, i):
                i += len(quote)
                quote = ""
                continue
            i += 1
            continue
        if c in "\"'":
            if content.startswith(c * 3, i):
                quote = c * 3
            else:
                quote = c
            i += len(quote)
            continue
        if c in CLOSERS:
            stack.append(CLOSERS[c])
            i += 1
            continue
        if c in ")]}":
            if len(stack) == 0:
                if c == "}":
                    return FieldSpan(start, i, bang, colon)
            else:
                stack.pop()
            i += 1
            continue
        if len(stack) == 0:
            if c == "!" and not content.startswith("!=", i):
                bang = i
            elif c == ":":
                colon = i
        i += 1
    raise UnterminatedField(offset + start)


def _build_field(
    content: str,
    span: FieldSpan,
    parse_expression: ExprParser,
    max_depth: int,
    depth: int,
    offset: int,
) -> FormattedValue:
    expr_str = content[span.start + 1 : span.expr_end()]
    if expr_str.strip() == "":
        raise EmptyExpression(offset + span.start)
    conversion: str | None = None
    if span.bang >= 0:
        conv_end = span.colon if span.colon >= 0 else span.end
        conv_str = content[span.bang + 1 : conv_end]
        if len(conv_str) != 1 or conv_str not in CONVERSIONS:
            raise InvalidConversion(conv_str, offset + span.bang + 1)
        conversion = conv_str
    value = _resolve(parse_expression(expr_str), parse_expression, max_depth, depth + 1)
    format_spec: JoinedStr | None = None
    if span.colon >= 0:
        spec_str = content[span.colon + 1 : span.end]
        format_spec = JoinedStr(
            parse_fstring(
                spec_str, parse_expression, max_depth, depth + 1, offset + span.colon + 1
            )
        )
    return FormattedValue(value, conversion, format_spec)


def resolve_literals(
    tree: Node,
    parse_expression: ExprParser,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Node:
    """Return tree with every StringLiteral placeholder replaced.

    Subtrees without placeholders are shared with the input, not copied.
    """
    return _resolve(tree, parse_expression, max_depth, 0)


def _resolve(obj: object, parse_expression: ExprParser, max_depth: int, depth: int):
    if isinstance(obj, StringLiteral):
        if not obj.is_formatted():
            return Constant(obj.content)
        return JoinedStr(parse_fstring(obj.content, parse_expression, max_depth, depth))
    if isinstance(obj, list):
        items = [_resolve(x, parse_expression, max_depth, depth) for x in obj]
        if all(new is old for new, old in zip(items, obj)):
            return obj
        return items
    if isinstance(obj, Node):
        changes: dict[str, object] = {}
        for f in fields(obj):
            old = getattr(obj, f.name)
            new = _resolve(old, parse_expression, max_depth, depth)
            if new is not old:
                changes[f.name] = new
        if len(changes) == 0:
            return obj
        return replace(obj, **changes)
    return obj
