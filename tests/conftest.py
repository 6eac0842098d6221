from collections.abc import Sequence
from difflib import ndiff
from typing import Optional

import pytest
from phaseview import g_ast


def _shorten(value: object, width: int = 40) -> str:
    text = repr(value)
    if len(text) <= width:
        return text
    half = (width - 3) // 2
    return f"{text[:half]}...{text[-half:]}"


def _as_tree_list(value: object) -> Optional[list[g_ast.Node]]:
    if isinstance(value, g_ast.Node):
        return [value]
    if isinstance(value, Sequence) and not isinstance(value, str) and all(isinstance(v, g_ast.Node) for v in value):
        return list(value)
    return None


def _dump_lines(trees: list[g_ast.Node], include_coords: bool) -> list[str]:
    lines: list[str] = []
    for index, tree in enumerate(trees):
        if len(trees) > 1:
            lines.append(f"[{index}]")
        lines.extend(g_ast.dump(tree, indent=2, include_coords=include_coords).splitlines())
    return lines


def pytest_assertrepr_compare(config: pytest.Config, op: str, left: object, right: object) -> Optional[list[str]]:
    """Diff the dumps of syntax trees, or of lists of them, when an equality assertion fails.

    Coordinates are left out of the diff unless the run is at least ``-vvv``, since node equality ignores them.
    """

    if op != "==":
        return None

    left_trees = _as_tree_list(left)
    right_trees = _as_tree_list(right)
    if left_trees is None or right_trees is None or not (left_trees or right_trees):
        return None

    verbosity = config.get_verbosity()
    explanation = [f"{_shorten(left)} == {_shorten(right)}"]
    if len(left_trees) != len(right_trees):
        explanation.append(f"Tree counts differ: {len(left_trees)} != {len(right_trees)}")

    if verbosity == 0:
        explanation.append("Use -v to get the tree diff")
        return explanation

    diff = [
        line
        for line in ndiff(
            _dump_lines(left_trees, verbosity >= 3),
            _dump_lines(right_trees, verbosity >= 3),
        )
        if not line.startswith("?")
    ]
    if verbosity == 1:
        changed = [line for line in diff if line[:1] in "+-"]
        explanation.extend(("", "Changed lines:", *changed[:10]))
        if len(changed) > 10:
            explanation.append(f"...{len(changed) - 10} more changed lines, use '-vv' to show the full diff")
    else:
        explanation.extend(("", "Full diff:", *diff))
    return explanation
