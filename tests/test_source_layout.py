"""Checks on the layout of the package source files."""

import ast
from pathlib import Path

import pytest

PACKAGE_DIR = Path(__file__).resolve().parents[1] / "src" / "pos_analytics"


def _top_level_defs(path: Path) -> list[tuple[str, int]]:
    """``(name, first line)`` of each top-level def or class after the first statement."""
    tree = ast.parse(path.read_text(encoding="utf-8"))
    defs = []
    for node in tree.body[1:]:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            first = min([node.lineno] + [d.lineno for d in node.decorator_list])
            defs.append((node.name, first))
    return defs


@pytest.mark.parametrize(
    "path", sorted(PACKAGE_DIR.rglob("*.py")), ids=lambda p: str(p.relative_to(PACKAGE_DIR))
)
def test_two_blank_lines_before_top_level_defs(path: Path) -> None:
    lines = path.read_text(encoding="utf-8").splitlines()
    cramped = []
    for name, first in _top_level_defs(path):
        above = lines[max(first - 3, 0) : first - 1]
        if above and above[-1].startswith("#"):
            continue
        if above != ["", ""]:
            cramped.append(name)
    assert cramped == []
