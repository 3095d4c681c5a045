"""pyfront — tree validation and string-literal parsing for a Python front end."""

from .errors import (
    ArgumentMustBeName,
    DuplicateArgument,
    EmptyExpression,
    FrontendError,
    InvalidConversion,
    LiteralError,
    NestingTooDeep,
    NotAssignable,
    ParseError,
    UnmatchedBrace,
    UnterminatedField,
    ValidationError,
)
from .literals import parse_fstring, parse_literal, resolve_literals
from .nodes import Module, StringLiteral, to_dict
from .pyast import parse_expression, parse_module
from .validate import is_assignable, is_valid, validate, validate_assignable


def check(source: str) -> Module:
    """Parse source and validate it. Returns the tree; raises the first error."""
    tree = parse_module(source)
    validate(tree)
    return tree


__all__ = [
    "ArgumentMustBeName",
    "DuplicateArgument",
    "EmptyExpression",
    "FrontendError",
    "InvalidConversion",
    "LiteralError",
    "Module",
    "NestingTooDeep",
    "NotAssignable",
    "ParseError",
    "StringLiteral",
    "UnmatchedBrace",
    "UnterminatedField",
    "ValidationError",
    "check",
    "is_assignable",
    "is_valid",
    "parse_expression",
    "parse_fstring",
    "parse_literal",
    "parse_module",
    "resolve_literals",
    "to_dict",
    "validate",
    "validate_assignable",
]
