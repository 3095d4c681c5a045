"""pyfront command-line driver."""

from __future__ import annotations

import json
import sys

from .errors import MAX_NESTING_DEPTH, FrontendError, LiteralError, ParseError
from .literals import parse_literal
from .nodes import Node, StringLiteral, to_dict
from .pyast import parse_expression, parse_module
from .validate import validate

PHASES: list[str] = ["parse", "validate"]

USAGE: str = """\
pyfront [OPTIONS] [INPUT] [-o OUTPUT]

Parse Python source and check it for structural errors.

Options:
  --stop-at PHASE     Stop after phase: parse, validate
  --fstring           Treat input as the text inside an f'...' literal
  --max-depth N       Maximum unpacking / f-string field nesting depth
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


class Options:
    def __init__(self) -> None:
        self.stop_at: str = "validate"
        self.fstring: bool = False
        self.max_depth: int = MAX_NESTING_DEPTH
        self.input_file: str | None = None
        self.output_file: str | None = None


def read_source(input_file: str | None, allow_empty: bool = False) -> tuple[str, int]:
    """Read UTF-8 text from input_file, or stdin when it is None.

    Returns (source, exit_code); a nonzero code means the message has already
    been printed. Empty input is a usage error unless allow_empty is set.
    """
    if input_file is None:
        raw = sys.stdin.buffer.read()
    else:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    if len(raw) == 0 and not allow_empty:
        print("error: no input provided", file=sys.stderr)
        return ("", 2)
    try:
        return (raw.decode("utf-8"), 0)
    except UnicodeDecodeError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)


def write_output(output: str, output_file: str | None) -> int:
    """Print output, or write it to output_file. Returns 0 on success, 1 on error."""
    if output_file is None:
        print(output)
        return 0
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            print(output, file=f)
    except OSError:
        print("error: cannot write '" + output_file + "'", file=sys.stderr)
        return 1
    return 0


def to_json(node: Node) -> str:
    return json.dumps(to_dict(node), indent=2, ensure_ascii=False)


def report(e: FrontendError) -> None:
    """Print one error line to stderr."""
    if isinstance(e, ParseError):
        print("error:" + str(e.lineno) + ":" + str(e.col) + ": " + e.msg, file=sys.stderr)
    elif isinstance(e, LiteralError):
        print("error:" + str(e.pos) + ": " + e.msg, file=sys.stderr)
    else:
        print("error: " + e.msg, file=sys.stderr)


def run_pipeline(source: str, opts: Options) -> tuple[int, str]:
    """Run parse and validation. Returns (exit_code, output)."""
    try:
        if opts.fstring:
            if source.endswith("\n"):
                source = source[:-1]
            literal = StringLiteral("f", "'", source)
            return (0, to_json(parse_literal(literal, parse_expression, opts.max_depth)))
        tree = parse_module(source)
        if opts.stop_at == "parse":
            return (0, to_json(tree))
        validate(tree, opts.max_depth)
    except FrontendError as e:
        report(e)
        return (1, "")
    return (0, "")


def parse_args(args: list[str]) -> Options | int:
    """Parse command-line arguments. Returns Options, or an exit code to stop with."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg in ("--stop-at", "--max-depth", "-o", "--output"):
            if i + 1 >= len(args):
                print("error: " + arg + " requires an argument", file=sys.stderr)
                return 2
            value = args[i + 1]
            if arg == "--stop-at":
                if value not in PHASES:
                    print("error: unknown phase '" + value + "'", file=sys.stderr)
                    return 2
                opts.stop_at = value
            elif arg == "--max-depth":
                if not value.isdigit() or int(value) < 1:
                    print("error: --max-depth expects a positive integer", file=sys.stderr)
                    return 2
                opts.max_depth = int(value)
            else:
                opts.output_file = value
            i += 2
        elif arg == "--fstring":
            opts.fstring = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        else:
            if opts.input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                return 2
            if arg != "-":
                opts.input_file = arg
            i += 1
    return opts


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    opts = parse_args(argv if argv is not None else sys.argv[1:])
    if isinstance(opts, int):
        return opts
    source, err = read_source(opts.input_file, allow_empty=opts.fstring)
    if err != 0:
        return err
    exit_code, output = run_pipeline(source, opts)
    if exit_code != 0:
        return exit_code
    if len(output) > 0:
        return write_output(output, opts.output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
