"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a small Istanbul coverage fixture shared by the test modules.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))


CALC_PATH = "/proj/src/calc.js"

CALC_SOURCE = "\n".join(
    [
        "function add(a, b) {",
        "  if (a < b) {",
        "    return a;",
        "  }",
        "  return b;",
        "}",
        "add(1, 2);",
    ]
)


def span(start_line: int, start_col: int, end_line: int, end_col: int) -> dict[str, Any]:
    """Istanbul location object."""
    return {
        "start": {"line": start_line, "column": start_col},
        "end": {"line": end_line, "column": end_col},
    }


def calc_record(path: str = CALC_PATH) -> dict[str, Any]:
    """Raw coverage-final.json record for CALC_SOURCE.

    Statement 2 (``return b;``) never ran and the implicit else of the ``if``
    was never taken.
    """
    return {
        "path": path,
        "statementMap": {
            "0": span(2, 2, 4, 3),
            "1": span(3, 4, 3, 13),
            "2": span(5, 2, 5, 11),
            "3": span(7, 0, 7, 10),
        },
        "s": {"0": 1, "1": 1, "2": 0, "3": 1},
        "fnMap": {
            "0": {"name": "add", "line": 1, "decl": span(1, 9, 1, 12), "loc": span(1, 0, 6, 1)},
        },
        "f": {"0": 1},
        "branchMap": {
            "0": {
                "type": "if",
                "line": 2,
                "loc": span(2, 2, 4, 3),
                "locations": [span(2, 2, 4, 3), span(2, 2, 4, 3)],
            },
        },
        "b": {"0": [1, 0]},
    }


@pytest.fixture
def calc_coverage() -> dict[str, Any]:
    """A coverage-final.json object holding one file."""
    return {CALC_PATH: calc_record()}


@pytest.fixture
def calc_path() -> str:
    return CALC_PATH


@pytest.fixture
def calc_source() -> str:
    return CALC_SOURCE
