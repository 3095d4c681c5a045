"""Pytest configuration for the pyfront test suite."""

import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from pyfront.pyast import parse_expression  # noqa: E402


@pytest.fixture
def expr_parser():
    """Expression parser that records every text it is handed."""
    seen: list[str] = []

    def parse(text: str):
        seen.append(text)
        return parse_expression(text)

    parse.seen = seen
    return parse
