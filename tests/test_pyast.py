"""Tests for the CPython ast bridge."""

import ast

import pytest

from pyfront.errors import ParseError
from pyfront.nodes import (
    Alias,
    Arg,
    Arguments,
    Assign,
    Attribute,
    BinOp,
    BoolOp,
    Call,
    ClassDef,
    Compare,
    Comprehension,
    Constant,
    DefaultSlice,
    DictComp,
    ExprStmt,
    ExtSlice,
    FormattedValue,
    FunctionDef,
    ImportFrom,
    Index,
    JoinedStr,
    KeyVal,
    KeywordArg,
    Module,
    Name,
    Pass,
    PosArg,
    Starred,
    Subscript,
    Tuple,
    UnaryOp,
)
from pyfront.pyast import parse_expression, parse_module


def test_assignment():
    assert parse_module("x = 1") == Module([Assign([Name("x")], Constant(1))])


def test_function_arguments():
    tree = parse_module("def f(a, b=1, /, c=2, *d, e, f=3, **g):\n    pass\n")
    assert tree.body[0] == FunctionDef(
        "f",
        Arguments(
            [Arg("a"), Arg("b", None, Constant(1)), Arg("c", None, Constant(2))],
            Arg("d"),
            [Arg("e"), Arg("f", None, Constant(3))],
            Arg("g"),
        ),
        [Pass()],
    )


def test_annotations_and_async():
    tree = parse_module("async def f(x: int) -> str:\n    pass\n")
    func = tree.body[0]
    assert func.is_async
    assert func.args.args == [Arg("x", Name("int"))]
    assert func.returns == Name("str")


def test_call_arguments():
    assert parse_expression("f(a, *b, c=1, **d)") == Call(
        Name("f"),
        [
            PosArg(Name("a")),
            PosArg(Starred(Name("b"))),
            KeywordArg(Name("c"), Constant(1)),
            KeywordArg(None, Name("d")),
        ],
    )


def test_class_bases_and_keywords():
    tree = parse_module("class C(B, metaclass=M):\n    pass\n")
    assert tree.body[0] == ClassDef(
        "C", [PosArg(Name("B")), KeywordArg(Name("metaclass"), Name("M"))], [Pass()]
    )


@pytest.mark.parametrize(
    "text,expected",
    [
        ("x[1]", Index(Constant(1))),
        ("x[1:2]", DefaultSlice(Constant(1), Constant(2), None)),
        ("x[::3]", DefaultSlice(None, None, Constant(3))),
        (
            "x[1:2, 3]",
            ExtSlice([DefaultSlice(Constant(1), Constant(2), None), Index(Constant(3))]),
        ),
        ("x[a, b]", Index(Tuple([Name("a"), Name("b")]))),
    ],
)
def test_slices(text: str, expected):
    assert parse_expression(text) == Subscript(Name("x"), expected)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("a and b and c", BoolOp("and", [Name("a"), Name("b"), Name("c")])),
        ("not a", UnaryOp("not", Name("a"))),
        ("-a // b", BinOp("//", UnaryOp("-", Name("a")), Name("b"))),
        ("a not in b is c", Compare(Name("a"), ["not in", "is"], [Name("b"), Name("c")])),
        ("a.b", Attribute(Name("a"), "b")),
    ],
)
def test_operators(text: str, expected):
    assert parse_expression(text) == expected


def test_dict_comprehension():
    assert parse_expression("{k: v for k, v in d}") == DictComp(
        KeyVal(Name("k"), Name("v")),
        [Comprehension(Tuple([Name("k"), Name("v")]), Name("d"))],
    )


def test_fstring():
    assert parse_expression("f'a{x!r:>3}'") == JoinedStr(
        [Constant("a"), FormattedValue(Name("x"), "r", JoinedStr([Constant(">3")]))]
    )


def test_relative_import():
    assert parse_module("from ..pkg import a as b").body[0] == ImportFrom(
        "pkg", [Alias("a", "b")], 2
    )


@pytest.mark.parametrize("text", [" x ", "x\n", "\nx", "  x  \n  "])
def test_expression_whitespace(text: str):
    assert parse_expression(text) == Name("x")


def test_expression_statement():
    assert parse_module("f()").body[0] == ExprStmt(Call(Name("f")))


def test_syntax_error():
    with pytest.raises(ParseError) as exc:
        parse_module("x = 1\ndef\n")
    assert exc.value.lineno == 2


def test_expression_syntax_error():
    with pytest.raises(ParseError):
        parse_expression("1 +")


def test_expression_error_column_counts_from_text():
    with pytest.raises(SyntaxError) as wrapped:
        ast.parse("(1 +)", mode="eval")
    with pytest.raises(ParseError) as exc:
        parse_expression("1 +")
    assert exc.value.lineno == 1
    assert exc.value.col == wrapped.value.offset - 1


def test_unsupported_statement():
    with pytest.raises(ParseError) as exc:
        parse_module("match x:\n    case 1:\n        pass\n")
    assert "unsupported" in exc.value.msg
