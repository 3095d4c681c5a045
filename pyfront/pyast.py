"""Bridge from CPython's ast module to the pyfront node model.

Stands in for the external grammar parser: parse_module feeds the validator
and parse_expression is the expression parser handed to the literal
sub-parser. No legality checks happen here beyond CPython's own grammar.
"""

from __future__ import annotations

import ast

from .errors import ParseError
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
    CallArg,
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
    Nonlocal,
    Pass,
    PosArg,
    Raise,
    Return,
    Set,
    SetComp,
    Slice,
    Starred,
    Stmt,
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

BINARY_OPS: dict[type, str] = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.MatMult: "@",
    ast.Div: "/",
    ast.FloorDiv: "//",
    ast.Mod: "%",
    ast.Pow: "**",
    ast.LShift: "<<",
    ast.RShift: ">>",
    ast.BitOr: "|",
    ast.BitXor: "^",
    ast.BitAnd: "&",
}

UNARY_OPS: dict[type, str] = {
    ast.Not: "not",
    ast.USub: "-",
    ast.UAdd: "+",
    ast.Invert: "~",
}

COMPARE_OPS: dict[type, str] = {
    ast.Eq: "==",
    ast.NotEq: "!=",
    ast.Lt: "<",
    ast.LtE: "<=",
    ast.Gt: ">",
    ast.GtE: ">=",
    ast.Is: "is",
    ast.IsNot: "is not",
    ast.In: "in",
    ast.NotIn: "not in",
}


def parse_module(source: str) -> Module:
    """Parse Python source to a Module."""
    try:
        tree = ast.parse(source, mode="exec")
    except SyntaxError as e:
        raise _syntax_error(e) from e
    return Module([convert_stmt(s) for s in tree.body])


def parse_expression(text: str) -> Expr:
    """Parse one expression, as found between the braces of an f-string field.

    Error columns count from the start of text.
    """
    try:
        tree = ast.parse("(" + text + ")", mode="eval")
    except SyntaxError as e:
        err = _syntax_error(e)
        # drop the opening paren
        if err.lineno == 1 and err.col > 0:
            err.col -= 1
        raise err from e
    return convert_expr(tree.body)


def _syntax_error(e: SyntaxError) -> ParseError:
    lineno = e.lineno if e.lineno is not None else 1
    col = e.offset if e.offset is not None else 0
    return ParseError(e.msg, lineno, col)


def _unsupported(node: ast.AST) -> ParseError:
    lineno = getattr(node, "lineno", 1)
    col = getattr(node, "col_offset", 0)
    return ParseError("unsupported syntax: " + type(node).__name__, lineno, col)


def _opt_expr(node: ast.expr | None) -> Expr | None:
    if node is None:
        return None
    return convert_expr(node)


def _exprs(nodes: list[ast.expr]) -> list[Expr]:
    return [convert_expr(n) for n in nodes]


def _stmts(nodes: list[ast.stmt]) -> list[Stmt]:
    return [convert_stmt(n) for n in nodes]


# ============================================================
# STATEMENTS
# ============================================================


def convert_stmt(node: ast.stmt) -> Stmt:
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        if len(getattr(node, "type_params", [])) > 0:
            raise _unsupported(node)
        return FunctionDef(
            node.name,
            convert_arguments(node.args),
            _stmts(node.body),
            _exprs(node.decorator_list),
            _opt_expr(node.returns),
            isinstance(node, ast.AsyncFunctionDef),
        )
    if isinstance(node, ast.ClassDef):
        if len(getattr(node, "type_params", [])) > 0:
            raise _unsupported(node)
        return ClassDef(
            node.name,
            _call_args(node.bases, node.keywords),
            _stmts(node.body),
            _exprs(node.decorator_list),
        )
    if isinstance(node, ast.Return):
        return Return(_opt_expr(node.value))
    if isinstance(node, ast.Delete):
        return Delete(_exprs(node.targets))
    if isinstance(node, ast.Assign):
        return Assign(_exprs(node.targets), convert_expr(node.value))
    if isinstance(node, ast.AugAssign):
        return AugAssign(
            convert_expr(node.target), BINARY_OPS[type(node.op)], convert_expr(node.value)
        )
    if isinstance(node, ast.AnnAssign):
        return AnnAssign(
            convert_expr(node.target),
            convert_expr(node.annotation),
            _opt_expr(node.value),
            node.simple == 1,
        )
    if isinstance(node, (ast.For, ast.AsyncFor)):
        return For(
            convert_expr(node.target),
            convert_expr(node.iter),
            _stmts(node.body),
            _stmts(node.orelse),
            isinstance(node, ast.AsyncFor),
        )
    if isinstance(node, ast.While):
        return While(convert_expr(node.test), _stmts(node.body), _stmts(node.orelse))
    if isinstance(node, ast.If):
        return If(convert_expr(node.test), _stmts(node.body), _stmts(node.orelse))
    if isinstance(node, (ast.With, ast.AsyncWith)):
        items = [
            WithItem(convert_expr(item.context_expr), _opt_expr(item.optional_vars))
            for item in node.items
        ]
        return With(items, _stmts(node.body), isinstance(node, ast.AsyncWith))
    if isinstance(node, ast.Raise):
        return Raise(_opt_expr(node.exc), _opt_expr(node.cause))
    if isinstance(node, ast.Try):
        handlers = [
            ExceptionHandler(_opt_expr(h.type), h.name, _stmts(h.body))
            for h in node.handlers
        ]
        return Try(_stmts(node.body), handlers, _stmts(node.orelse), _stmts(node.finalbody))
    if isinstance(node, ast.Assert):
        return Assert(convert_expr(node.test), _opt_expr(node.msg))
    if isinstance(node, ast.Import):
        return Import([Alias(a.name, a.asname) for a in node.names])
    if isinstance(node, ast.ImportFrom):
        level = node.level if node.level is not None else 0
        return ImportFrom(node.module, [Alias(a.name, a.asname) for a in node.names], level)
    if isinstance(node, ast.Global):
        return Global(list(node.names))
    if isinstance(node, ast.Nonlocal):
        return Nonlocal(list(node.names))
    if isinstance(node, ast.Pass):
        return Pass()
    if isinstance(node, ast.Break):
        return Break()
    if isinstance(node, ast.Continue):
        return Continue()
    if isinstance(node, ast.Expr):
        return ExprStmt(convert_expr(node.value))
    # match, try*, type aliases
    raise _unsupported(node)


def convert_arguments(node: ast.arguments) -> Arguments:
    """Fold positional-only args into args and line defaults up from the right."""
    positional = list(node.posonlyargs) + list(node.args)
    n_plain = len(positional) - len(node.defaults)
    args: list[Arg] = []
    for i, a in enumerate(positional):
        default = node.defaults[i - n_plain] if i >= n_plain else None
        args.append(_arg(a, default))
    kwonly = [_arg(a, d) for a, d in zip(node.kwonlyargs, node.kw_defaults)]
    vararg = _arg(node.vararg, None) if node.vararg is not None else None
    kwarg = _arg(node.kwarg, None) if node.kwarg is not None else None
    return Arguments(args, vararg, kwonly, kwarg)


def _arg(node: ast.arg, default: ast.expr | None) -> Arg:
    return Arg(node.arg, _opt_expr(node.annotation), _opt_expr(default))


def _call_args(args: list[ast.expr], keywords: list[ast.keyword]) -> list[CallArg]:
    result: list[CallArg] = [PosArg(convert_expr(a)) for a in args]
    for kw in keywords:
        name = Name(kw.arg) if kw.arg is not None else None
        result.append(KeywordArg(name, convert_expr(kw.value)))
    return result


# ============================================================
# EXPRESSIONS
# ============================================================


def convert_expr(node: ast.expr) -> Expr:
    if isinstance(node, ast.BoolOp):
        op = "and" if isinstance(node.op, ast.And) else "or"
        return BoolOp(op, _exprs(node.values))
    if isinstance(node, ast.NamedExpr):
        return NamedExpr(convert_expr(node.target), convert_expr(node.value))
    if isinstance(node, ast.BinOp):
        return BinOp(
            BINARY_OPS[type(node.op)], convert_expr(node.left), convert_expr(node.right)
        )
    if isinstance(node, ast.UnaryOp):
        return UnaryOp(UNARY_OPS[type(node.op)], convert_expr(node.operand))
    if isinstance(node, ast.Lambda):
        return Lambda(convert_arguments(node.args), convert_expr(node.body))
    if isinstance(node, ast.IfExp):
        return IfExpr(convert_expr(node.test), convert_expr(node.body), convert_expr(node.orelse))
    if isinstance(node, ast.Dict):
        return Dict(
            [KeyVal(_opt_expr(k), convert_expr(v)) for k, v in zip(node.keys, node.values)]
        )
    if isinstance(node, ast.Set):
        return Set(_exprs(node.elts))
    if isinstance(node, ast.ListComp):
        return ListComp(convert_expr(node.elt), _generators(node.generators))
    if isinstance(node, ast.SetComp):
        return SetComp(convert_expr(node.elt), _generators(node.generators))
    if isinstance(node, ast.DictComp):
        elt = KeyVal(convert_expr(node.key), convert_expr(node.value))
        return DictComp(elt, _generators(node.generators))
    if isinstance(node, ast.GeneratorExp):
        return GeneratorExp(convert_expr(node.elt), _generators(node.generators))
    if isinstance(node, ast.Await):
        return Await(convert_expr(node.value))
    if isinstance(node, ast.Yield):
        return Yield(_opt_expr(node.value))
    if isinstance(node, ast.YieldFrom):
        return YieldFrom(convert_expr(node.value))
    if isinstance(node, ast.Compare):
        ops = [COMPARE_OPS[type(op)] for op in node.ops]
        return Compare(convert_expr(node.left), ops, _exprs(node.comparators))
    if isinstance(node, ast.Call):
        return Call(convert_expr(node.func), _call_args(node.args, node.keywords))
    if isinstance(node, ast.FormattedValue):
        return _formatted_value(node)
    if isinstance(node, ast.JoinedStr):
        return JoinedStr(_joined_values(node.values))
    if isinstance(node, ast.Constant):
        return Constant(node.value)
    if isinstance(node, ast.Attribute):
        return Attribute(convert_expr(node.value), node.attr)
    if isinstance(node, ast.Subscript):
        return Subscript(convert_expr(node.value), convert_slice(node.slice))
    if isinstance(node, ast.Starred):
        return Starred(convert_expr(node.value))
    if isinstance(node, ast.Name):
        return Name(node.id)
    if isinstance(node, ast.List):
        return List(_exprs(node.elts))
    if isinstance(node, ast.Tuple):
        return Tuple(_exprs(node.elts))
    # bare Slice outside a subscript, and anything newer than this model
    raise _unsupported(node)


def convert_slice(node: ast.expr) -> Slice:
    if isinstance(node, ast.Slice):
        return DefaultSlice(_opt_expr(node.lower), _opt_expr(node.upper), _opt_expr(node.step))
    if isinstance(node, ast.Tuple) and any(isinstance(e, ast.Slice) for e in node.elts):
        return ExtSlice([convert_slice(e) for e in node.elts])
    return Index(convert_expr(node))


def _generators(nodes: list[ast.comprehension]) -> list[Comprehension]:
    return [
        Comprehension(
            convert_expr(g.target), convert_expr(g.iter), _exprs(g.ifs), g.is_async == 1
        )
        for g in nodes
    ]


def _formatted_value(node: ast.FormattedValue) -> FormattedValue:
    conversion = chr(node.conversion) if node.conversion >= 0 else None
    format_spec: JoinedStr | None = None
    if node.format_spec is not None:
        spec = convert_expr(node.format_spec)
        format_spec = spec if isinstance(spec, JoinedStr) else JoinedStr([spec])
    return FormattedValue(convert_expr(node.value), conversion, format_spec)


def _joined_values(nodes: list[ast.expr]) -> list[Expr]:
    """Convert f-string parts; CPython 3.12+ can emit an empty Constant, drop it."""
    values: list[Expr] = []
    for n in nodes:
        if isinstance(n, ast.Constant) and n.value == "":
            continue
        values.append(convert_expr(n))
    return values
