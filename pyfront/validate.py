"""Structural legality checks over a parsed Module.

Runs after parsing and literal resolution. Walks every node left to right
and raises the first violation found; the rest of the tree is not visited.
Only three rules go beyond structural recursion: parameter names must be
unique per Arguments node, assignment targets must be assignable, and a
keyword argument's name must be a plain Name.
"""

from __future__ import annotations

from .errors import (
    MAX_NESTING_DEPTH,
    ArgumentMustBeName,
    DuplicateArgument,
    NestingTooDeep,
    NotAssignable,
    ValidationError,
)
from .nodes import (
    Alias,
    AnnAssign,
    Arg,
    Arguments,
    Assert,
    Assign,
    Attribute,
    AugAssign,
    Await,
    BinOp,
    BoolOp,
    Break,
    Call,
    ClassDef,
    Compare,
    Comprehension,
    Constant,
    Continue,
    DefaultSlice,
    Delete,
    Dict,
    DictComp,
    ExceptionHandler,
    Expr,
    ExprStmt,
    ExtSlice,
    For,
    FormattedValue,
    FunctionDef,
    GeneratorExp,
    Global,
    If,
    IfExpr,
    Import,
    ImportFrom,
    Index,
    JoinedStr,
    KeyVal,
    KeywordArg,
    Lambda,
    List,
    ListComp,
    Module,
    Name,
    NamedExpr,
    Node,
    Nonlocal,
    Pass,
    PosArg,
    Raise,
    Return,
    Set,
    SetComp,
    Starred,
    StringLiteral,
    Subscript,
    Try,
    Tuple,
    UnaryOp,
    While,
    With,
    WithItem,
    Yield,
    YieldFrom,
)

# Kinds with nothing to check: no children that can hold a violation.
LEAF_NODES: tuple[type, ...] = (
    Constant,
    Name,
    StringLiteral,
    Alias,
    Import,
    ImportFrom,
    Global,
    Nonlocal,
    Pass,
    Break,
    Continue,
)


def is_assignable(expr: Expr, max_depth: int = MAX_NESTING_DEPTH) -> bool:
    """Can expr appear on the left of =, in a for target, or after del?

    Unpacking nested past max_depth raises NestingTooDeep rather than
    answering.
    """
    try:
        _check_assignable(expr, 0, max_depth)
    except NotAssignable:
        return False
    return True


def validate_assignable(expr: Expr, max_depth: int = MAX_NESTING_DEPTH) -> None:
    """Raise NotAssignable unless expr is a legal assignment target."""
    _check_assignable(expr, 0, max_depth)


def _check_assignable(expr: Expr, depth: int, max_depth: int) -> None:
    if isinstance(expr, (Name, Attribute, Subscript)):
        return
    if isinstance(expr, (Tuple, List)):
        # unpacking is recursive
        if depth >= max_depth:
            raise NestingTooDeep(max_depth)
        for elt in expr.elts:
            _check_assignable(elt, depth + 1, max_depth)
        return
    raise NotAssignable(expr)


def duplicate_argument(arguments: Arguments) -> str | None:
    """First parameter name that appears twice across all four groups, if any."""
    names: list[str] = [a.arg for a in arguments.args]
    if arguments.vararg is not None:
        names.append(arguments.vararg.arg)
    names.extend(a.arg for a in arguments.kwonly)
    if arguments.kwarg is not None:
        names.append(arguments.kwarg.arg)
    seen: set[str] = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None


class TreeValidator:
    """Recursive walker; raises on the first illegal construct."""

    def __init__(self, max_depth: int = MAX_NESTING_DEPTH) -> None:
        self.max_depth: int = max_depth

    def validate_all(self, nodes: list[Node]) -> None:
        for node in nodes:
            self.visit(node)

    def validate_optional(self, node: Node | None) -> None:
        if node is not None:
            self.visit(node)

    def validate_target(self, expr: Expr) -> None:
        _check_assignable(expr, 0, self.max_depth)

    def validate_targets(self, exprs: list[Expr]) -> None:
        for expr in exprs:
            self.validate_target(expr)

    def visit(self, node: Node) -> None:
        """Dispatch on node kind. Unknown kinds are a programming error."""
        if isinstance(node, LEAF_NODES):
            return
        # Statements
        if isinstance(node, Module):
            self.validate_all(node.body)
        elif isinstance(node, FunctionDef):
            self.visit(node.args)
            self.validate_all(node.body)
            self.validate_all(node.decorators)
            self.validate_optional(node.returns)
        elif isinstance(node, ClassDef):
            self.validate_all(node.bases)
            self.validate_all(node.body)
            self.validate_all(node.decorators)
        elif isinstance(node, Return):
            self.validate_optional(node.value)
        elif isinstance(node, Delete):
            self.validate_targets(node.targets)
        elif isinstance(node, Assign):
            self.validate_targets(node.targets)
            self.visit(node.value)
        elif isinstance(node, AugAssign):
            self.validate_target(node.target)
            self.visit(node.value)
        elif isinstance(node, AnnAssign):
            # the annotation may be any expression
            self.validate_target(node.target)
            self.validate_optional(node.value)
        elif isinstance(node, For):
            self.validate_target(node.target)
            self.visit(node.iter)
            self.validate_all(node.body)
            self.validate_all(node.orelse)
        elif isinstance(node, (While, If)):
            self.visit(node.test)
            self.validate_all(node.body)
            self.validate_all(node.orelse)
        elif isinstance(node, With):
            self.validate_all(node.items)
            self.validate_all(node.body)
        elif isinstance(node, Raise):
            self.validate_optional(node.exc)
            self.validate_optional(node.cause)
        elif isinstance(node, Try):
            self.validate_all(node.body)
            self.validate_all(node.handlers)
            self.validate_all(node.orelse)
            self.validate_all(node.finalbody)
        elif isinstance(node, Assert):
            self.visit(node.test)
            self.validate_optional(node.msg)
        elif isinstance(node, ExprStmt):
            self.visit(node.value)
        # Expressions
        elif isinstance(node, BoolOp):
            self.validate_all(node.values)
        elif isinstance(node, NamedExpr):
            self.visit(node.target)
            self.visit(node.value)
        elif isinstance(node, BinOp):
            self.visit(node.left)
            self.visit(node.right)
        elif isinstance(node, UnaryOp):
            self.visit(node.operand)
        elif isinstance(node, Lambda):
            self.visit(node.args)
            self.visit(node.body)
        elif isinstance(node, IfExpr):
            self.visit(node.test)
            self.visit(node.body)
            self.visit(node.orelse)
        elif isinstance(node, Dict):
            self.validate_all(node.items)
        elif isinstance(node, (Set, List, Tuple)):
            self.validate_all(node.elts)
        elif isinstance(node, (ListComp, SetComp, DictComp, GeneratorExp)):
            self.visit(node.elt)
            self.validate_all(node.generators)
        elif isinstance(node, (Await, YieldFrom, Starred)):
            self.visit(node.value)
        elif isinstance(node, Yield):
            self.validate_optional(node.value)
        elif isinstance(node, Compare):
            self.visit(node.left)
            self.validate_all(node.comparators)
        elif isinstance(node, Call):
            self.visit(node.func)
            self.validate_all(node.args)
        elif isinstance(node, FormattedValue):
            self.visit(node.value)
            self.validate_optional(node.format_spec)
        elif isinstance(node, JoinedStr):
            self.validate_all(node.values)
        elif isinstance(node, Attribute):
            self.visit(node.value)
        elif isinstance(node, Subscript):
            self.visit(node.value)
            self.visit(node.slice)
        # Helpers
        elif isinstance(node, Arguments):
            self.validate_all(node.args)
            self.validate_optional(node.vararg)
            self.validate_all(node.kwonly)
            self.validate_optional(node.kwarg)
            if duplicate_argument(node) is not None:
                raise DuplicateArgument(node)
        elif isinstance(node, Arg):
            self.validate_optional(node.annotation)
            self.validate_optional(node.default)
        elif isinstance(node, KeyVal):
            self.validate_optional(node.key)
            self.visit(node.value)
        elif isinstance(node, PosArg):
            self.visit(node.value)
        elif isinstance(node, KeywordArg):
            if node.arg is not None and not isinstance(node.arg, Name):
                raise ArgumentMustBeName(node.arg)
            self.visit(node.value)
        elif isinstance(node, Comprehension):
            self.validate_target(node.target)
            self.visit(node.iter)
            self.validate_all(node.ifs)
        elif isinstance(node, ExceptionHandler):
            self.validate_optional(node.type)
            self.validate_all(node.body)
        elif isinstance(node, WithItem):
            self.visit(node.context_expr)
            self.validate_optional(node.optional_vars)
        elif isinstance(node, DefaultSlice):
            self.validate_optional(node.lower)
            self.validate_optional(node.upper)
            self.validate_optional(node.step)
        elif isinstance(node, ExtSlice):
            self.validate_all(node.dims)
        elif isinstance(node, Index):
            self.visit(node.value)
        else:
            raise TypeError("unknown node kind: " + type(node).__name__)


def validate(tree: Module, max_depth: int = MAX_NESTING_DEPTH) -> None:
    """Raise the first ValidationError in tree; return None if it is legal."""
    TreeValidator(max_depth).visit(tree)


def is_valid(tree: Module, max_depth: int = MAX_NESTING_DEPTH) -> bool:
    try:
        validate(tree, max_depth)
    except (ValidationError, NestingTooDeep):
        return False
    return True
