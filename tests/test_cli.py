"""CLI tests for the pyfront entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: --stop-at parse
    source code here
    (stdin for the CLI)
    ---
    exit: 0
    stderr: error: some message
    stdout-contains: "_type": "Module"
    stdout-empty: true
    stderr-empty: true
    ---

Special directives in the input section:
    args:           CLI arguments (first line, required)
    stdin-bytes:    hex-encoded raw bytes instead of text (e.g. "ff fe")

Assertion directives in the expected section:
    exit:             exact exit code
    stderr:           exact stderr content (trailing newline added)
    stderr-contains:  stderr must contain substring
    stderr-empty:     stderr must be empty
    stdout-contains:  stdout must contain substring
    stdout-empty:     stdout must be empty
"""

import subprocess
import sys
from pathlib import Path

import pytest

from pyfront.cli import main

CLI_DIR = Path(__file__).parent / "cli"
ROOT_DIR = Path(__file__).parent.parent


def parse_cli_test_file(path: Path) -> list[tuple[str, dict]]:
    """Parse a .tests file into (name, spec) tuples.

    Each spec dict has keys: args, stdin, stdin_bytes, assertions.
    """
    lines = path.read_text().split("\n")
    result: list[tuple[str, dict]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            result.append((test_name, _parse_spec(input_lines, expected_lines)))
        else:
            i += 1
    return result


def _parse_spec(input_lines: list[str], expected_lines: list[str]) -> dict:
    """Parse input + expected lines into a test spec dict."""
    spec: dict = {
        "args": [],
        "stdin": None,
        "stdin_bytes": None,
        "assertions": [],
    }
    body_start = 0
    if input_lines and input_lines[0].startswith("args:"):
        args_str = input_lines[0][5:].strip()
        spec["args"] = args_str.split() if args_str else []
        body_start = 1

    remaining = input_lines[body_start:]
    if remaining and remaining[0].startswith("stdin-bytes:"):
        hex_str = remaining[0][len("stdin-bytes:") :].strip()
        spec["stdin_bytes"] = bytes.fromhex(hex_str)
    else:
        spec["stdin"] = "\n".join(remaining)

    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith("exit:"):
            spec["assertions"].append(("exit", int(line[5:].strip())))
        elif line.startswith("stderr:"):
            spec["assertions"].append(("stderr", line[7:].strip()))
        elif line.startswith("stderr-contains:"):
            spec["assertions"].append(("stderr-contains", line[16:].strip()))
        elif line.startswith("stderr-empty:"):
            spec["assertions"].append(("stderr-empty", None))
        elif line.startswith("stdout-contains:"):
            spec["assertions"].append(("stdout-contains", line[16:].strip()))
        elif line.startswith("stdout-empty:"):
            spec["assertions"].append(("stdout-empty", None))
    return spec


def discover_cli_tests() -> list[tuple[str, dict]]:
    """Find all CLI tests across .tests files."""
    results = []
    for test_file in sorted(CLI_DIR.glob("*.tests")):
        for name, spec in parse_cli_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", spec))
    return results


def run_cli(spec: dict) -> subprocess.CompletedProcess[bytes]:
    """Run the pyfront CLI from a test spec."""
    cmd = [sys.executable, "-m", "pyfront", *spec["args"]]
    if spec["stdin_bytes"] is not None:
        stdin_data = spec["stdin_bytes"]
    elif spec["stdin"] is not None:
        stdin_data = spec["stdin"].encode()
    else:
        stdin_data = b""
    return subprocess.run(cmd, input=stdin_data, capture_output=True, cwd=ROOT_DIR)


def check_assertions(result: subprocess.CompletedProcess[bytes], assertions: list[tuple]) -> None:
    """Check all assertions against a CLI result."""
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}"
                f"\nstderr: {result.stderr.decode(errors='replace')}"
            )
        elif kind == "stderr":
            actual = result.stderr.decode(errors="replace").rstrip("\n")
            assert actual == value, f"expected stderr {value!r}, got {actual!r}"
        elif kind == "stderr-contains":
            actual = result.stderr.decode(errors="replace")
            assert value in actual, f"expected stderr to contain {value!r}, got {actual!r}"
        elif kind == "stderr-empty":
            assert result.stderr == b"", f"expected empty stderr, got {result.stderr!r}"
        elif kind == "stdout-contains":
            actual = result.stdout.decode(errors="replace")
            assert value in actual, f"expected stdout to contain {value!r}, got {actual!r}"
        elif kind == "stdout-empty":
            assert result.stdout == b"", f"expected empty stdout, got {result.stdout[:200]!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_spec" in metafunc.fixturenames:
        params = [pytest.param(spec, id=test_id) for test_id, spec in discover_cli_tests()]
        metafunc.parametrize("cli_spec", params)


def test_cli(cli_spec: dict) -> None:
    """Run a single CLI test case from .tests file."""
    result = run_cli(cli_spec)
    check_assertions(result, cli_spec["assertions"])


# --- In-process ---


def test_output_file(tmp_path: Path, capsys):
    source = tmp_path / "input.py"
    source.write_text("x = 1\n")
    out = tmp_path / "tree.json"
    assert main(["--stop-at", "parse", str(source), "-o", str(out)]) == 0
    assert '"_type": "Module"' in out.read_text()
    assert capsys.readouterr().out == ""


def test_input_file_validation_error(tmp_path: Path, capsys):
    source = tmp_path / "input.py"
    source.write_text("def f(a, **a):\n    pass\n")
    assert main([str(source)]) == 1
    assert capsys.readouterr().err == "error: Duplicate argument in function definition\n"


def test_empty_input_file_is_usage_error(tmp_path: Path, capsys):
    source = tmp_path / "empty.py"
    source.write_text("")
    assert main([str(source)]) == 2
    assert capsys.readouterr().err == "error: no input provided\n"


def test_empty_input_file_is_empty_fstring(tmp_path: Path, capsys):
    source = tmp_path / "empty.txt"
    source.write_text("")
    assert main(["--fstring", str(source)]) == 0
    assert '"values": []' in capsys.readouterr().out


def test_literal_error_reports_offset(tmp_path: Path, capsys):
    source = tmp_path / "field.txt"
    source.write_text("ab{x!z}")
    assert main(["--fstring", str(source)]) == 1
    assert capsys.readouterr().err == "error:5: f-string: invalid conversion character\n"
