"""Error taxonomy for the validator, the literal sub-parser, and the bridge."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import Node


class FrontendError(Exception):
    """Base for every error raised by pyfront."""

    def __init__(self, msg: str):
        self.msg: str = msg
        super().__init__(msg)


class ParseError(FrontendError):
    """Syntax error reported by the grammar parser, with location info."""

    def __init__(self, msg: str, lineno: int, col: int):
        self.lineno: int = lineno
        self.col: int = col
        super().__init__(msg)


MAX_NESTING_DEPTH = 200


class NestingTooDeep(FrontendError):
    """Unpacking target or f-string field nested past the configured limit."""

    def __init__(self, limit: int):
        self.limit: int = limit
        super().__init__("nesting too deep (limit " + str(limit) + ")")


# ============================================================
# VALIDATION
# ============================================================


class ValidationError(FrontendError):
    """Structural legality violation found in a parsed tree."""

    message: str = "Invalid tree"

    def __init__(self, node: Node | None = None, msg: str | None = None):
        self.node: Node | None = node
        super().__init__(msg if msg is not None else self.message)


class DuplicateArgument(ValidationError):
    message = "Duplicate argument in function definition"


class NotAssignable(ValidationError):
    message = "Cannot assign to left hand-side"


class ArgumentMustBeName(ValidationError):
    message = "Argument must be a name"


# ============================================================
# STRING LITERALS
# ============================================================


class LiteralError(FrontendError):
    """Malformed string literal; pos is the offset into the scanned text."""

    def __init__(self, msg: str, pos: int):
        self.pos: int = pos
        super().__init__(msg)


class UnterminatedField(LiteralError):
    def __init__(self, pos: int):
        super().__init__("f-string: expecting '}'", pos)


class UnmatchedBrace(LiteralError):
    def __init__(self, pos: int):
        super().__init__("f-string: single '}' is not allowed", pos)


class InvalidConversion(LiteralError):
    def __init__(self, conversion: str, pos: int):
        self.conversion: str = conversion
        if conversion == "":
            super().__init__("f-string: missing conversion character", pos)
        else:
            super().__init__("f-string: invalid conversion character", pos)


class EmptyExpression(LiteralError):
    def __init__(self, pos: int):
        super().__init__("f-string: empty expression not allowed", pos)
