"""AST node model — closed set of statement, expression, and helper nodes."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass(frozen=True)
class Node:
    """Base for every node kind."""


@dataclass(frozen=True)
class Stmt(Node):
    """Base for all statements."""


@dataclass(frozen=True)
class Expr(Node):
    """Base for all expressions."""


# ============================================================
# HELPER NODES
# ============================================================


@dataclass(frozen=True)
class Arg(Node):
    """Single parameter: name, annotation?, default?."""

    arg: str
    annotation: Expr | None = None
    default: Expr | None = None


@dataclass(frozen=True)
class Arguments(Node):
    """Parameter list of a def or lambda."""

    args: list[Arg] = field(default_factory=list)
    vararg: Arg | None = None
    kwonly: list[Arg] = field(default_factory=list)
    kwarg: Arg | None = None


@dataclass(frozen=True)
class KeyVal(Node):
    """Dict entry; key None means **unpacking."""

    key: Expr | None
    value: Expr


@dataclass(frozen=True)
class PosArg(Node):
    """Positional call argument."""

    value: Expr


@dataclass(frozen=True)
class KeywordArg(Node):
    """name=value call argument; arg None means **unpacking."""

    arg: Expr | None
    value: Expr


@dataclass(frozen=True)
class Comprehension(Node):
    """for target in iter if ifs..."""

    target: Expr
    iter: Expr
    ifs: list[Expr] = field(default_factory=list)
    is_async: bool = False


@dataclass(frozen=True)
class Alias(Node):
    """import name as asname."""

    name: str
    asname: str | None = None


@dataclass(frozen=True)
class ExceptionHandler(Node):
    """except type as name: body."""

    type: Expr | None
    name: str | None
    body: list[Stmt]


@dataclass(frozen=True)
class WithItem(Node):
    """context_expr as optional_vars."""

    context_expr: Expr
    optional_vars: Expr | None = None


@dataclass(frozen=True)
class Slice(Node):
    """Base for subscript slices."""


@dataclass(frozen=True)
class DefaultSlice(Slice):
    """lower:upper:step."""

    lower: Expr | None = None
    upper: Expr | None = None
    step: Expr | None = None


@dataclass(frozen=True)
class ExtSlice(Slice):
    """a[1:2, 3] — two or more dimensions."""

    dims: list[Slice]


@dataclass(frozen=True)
class Index(Slice):
    """a[value]."""

    value: Expr


CallArg = PosArg | KeywordArg


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Module(Node):
    """Top-level module — list of statements."""

    body: list[Stmt]


@dataclass(frozen=True)
class FunctionDef(Stmt):
    name: str
    args: Arguments
    body: list[Stmt]
    decorators: list[Expr] = field(default_factory=list)
    returns: Expr | None = None
    is_async: bool = False


@dataclass(frozen=True)
class ClassDef(Stmt):
    """bases holds positional bases and keywords such as metaclass=."""

    name: str
    bases: list[CallArg]
    body: list[Stmt]
    decorators: list[Expr] = field(default_factory=list)


@dataclass(frozen=True)
class Return(Stmt):
    value: Expr | None = None


@dataclass(frozen=True)
class Delete(Stmt):
    targets: list[Expr]


@dataclass(frozen=True)
class Assign(Stmt):
    """t1 = t2 = ... = value."""

    targets: list[Expr]
    value: Expr


@dataclass(frozen=True)
class AugAssign(Stmt):
    """target op= value; op is the bare operator, e.g. "+"."""

    target: Expr
    op: str
    value: Expr


@dataclass(frozen=True)
class AnnAssign(Stmt):
    """target: annotation = value?; simple is False for (x): int."""

    target: Expr
    annotation: Expr
    value: Expr | None = None
    simple: bool = True


@dataclass(frozen=True)
class For(Stmt):
    target: Expr
    iter: Expr
    body: list[Stmt]
    orelse: list[Stmt] = field(default_factory=list)
    is_async: bool = False


@dataclass(frozen=True)
class While(Stmt):
    test: Expr
    body: list[Stmt]
    orelse: list[Stmt] = field(default_factory=list)


@dataclass(frozen=True)
class If(Stmt):
    test: Expr
    body: list[Stmt]
    orelse: list[Stmt] = field(default_factory=list)


@dataclass(frozen=True)
class With(Stmt):
    items: list[WithItem]
    body: list[Stmt]
    is_async: bool = False


@dataclass(frozen=True)
class Raise(Stmt):
    exc: Expr | None = None
    cause: Expr | None = None


@dataclass(frozen=True)
class Try(Stmt):
    body: list[Stmt]
    handlers: list[ExceptionHandler] = field(default_factory=list)
    orelse: list[Stmt] = field(default_factory=list)
    finalbody: list[Stmt] = field(default_factory=list)


@dataclass(frozen=True)
class Assert(Stmt):
    test: Expr
    msg: Expr | None = None


@dataclass(frozen=True)
class Import(Stmt):
    names: list[Alias]


@dataclass(frozen=True)
class ImportFrom(Stmt):
    """from .module import names; level counts leading dots."""

    module: str | None
    names: list[Alias]
    level: int = 0


@dataclass(frozen=True)
class Global(Stmt):
    names: list[str]


@dataclass(frozen=True)
class Nonlocal(Stmt):
    names: list[str]


@dataclass(frozen=True)
class Pass(Stmt):
    pass


@dataclass(frozen=True)
class Break(Stmt):
    pass


@dataclass(frozen=True)
class Continue(Stmt):
    pass


@dataclass(frozen=True)
class ExprStmt(Stmt):
    """Bare expression as statement."""

    value: Expr


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class BoolOp(Expr):
    """op is "and" or "or"; two or more values."""

    op: str
    values: list[Expr]


@dataclass(frozen=True)
class NamedExpr(Expr):
    """target := value."""

    target: Expr
    value: Expr


@dataclass(frozen=True)
class BinOp(Expr):
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class UnaryOp(Expr):
    """op is one of "not", "-", "+", "~"."""

    op: str
    operand: Expr


@dataclass(frozen=True)
class Lambda(Expr):
    args: Arguments
    body: Expr


@dataclass(frozen=True)
class IfExpr(Expr):
    """body if test else orelse."""

    test: Expr
    body: Expr
    orelse: Expr


@dataclass(frozen=True)
class Dict(Expr):
    items: list[KeyVal]


@dataclass(frozen=True)
class Set(Expr):
    elts: list[Expr]


@dataclass(frozen=True)
class ListComp(Expr):
    elt: Expr
    generators: list[Comprehension]


@dataclass(frozen=True)
class SetComp(Expr):
    elt: Expr
    generators: list[Comprehension]


@dataclass(frozen=True)
class DictComp(Expr):
    elt: KeyVal
    generators: list[Comprehension]


@dataclass(frozen=True)
class GeneratorExp(Expr):
    elt: Expr
    generators: list[Comprehension]


@dataclass(frozen=True)
class Await(Expr):
    value: Expr


@dataclass(frozen=True)
class Yield(Expr):
    value: Expr | None = None


@dataclass(frozen=True)
class YieldFrom(Expr):
    value: Expr


@dataclass(frozen=True)
class Compare(Expr):
    """left ops[0] comparators[0] ops[1] comparators[1] ..."""

    left: Expr
    ops: list[str]
    comparators: list[Expr]


@dataclass(frozen=True)
class Call(Expr):
    func: Expr
    args: list[CallArg] = field(default_factory=list)


@dataclass(frozen=True)
class FormattedValue(Expr):
    """{value!conversion:format_spec} inside an f-string."""

    value: Expr
    conversion: str | None = None
    format_spec: JoinedStr | None = None


@dataclass(frozen=True)
class JoinedStr(Expr):
    """f-string — Constant and FormattedValue fragments in source order."""

    values: list[Expr]


@dataclass(frozen=True)
class Constant(Expr):
    """int, float, complex, str, bytes, bool, None, or Ellipsis."""

    value: object


@dataclass(frozen=True)
class Attribute(Expr):
    value: Expr
    attr: str


@dataclass(frozen=True)
class Subscript(Expr):
    value: Expr
    slice: Slice


@dataclass(frozen=True)
class Starred(Expr):
    value: Expr


@dataclass(frozen=True)
class Name(Expr):
    id: str


@dataclass(frozen=True)
class List(Expr):
    elts: list[Expr]


@dataclass(frozen=True)
class Tuple(Expr):
    elts: list[Expr]


@dataclass(frozen=True)
class StringLiteral(Expr):
    """Unresolved string token: prefix letters, quote, and text between quotes.

    Left in the tree by a parser that defers literal handling; resolve_literals
    replaces each one with a Constant or JoinedStr.
    """

    prefix: str
    quote: str
    content: str

    def is_formatted(self) -> bool:
        return "f" in self.prefix.lower()


# ============================================================
# SERIALIZATION
# ============================================================


def to_dict(obj: object) -> object:
    """Render a node tree as JSON-compatible data."""
    if isinstance(obj, Node):
        result: dict[str, object] = {"_type": type(obj).__name__}
        for f in fields(obj):
            result[f.name] = to_dict(getattr(obj, f.name))
        return result
    if isinstance(obj, list):
        return [to_dict(x) for x in obj]
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, bytes):
        return {"_type": "bytes", "value": obj.decode("latin-1")}
    if obj is Ellipsis:
        return {"_type": "Ellipsis"}
    return {"_type": type(obj).__name__, "value": repr(obj)}
