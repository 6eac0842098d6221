from importlib import metadata
from types import SimpleNamespace

import pytest
from conftest import pytest_assertrepr_compare
from phaseview import g_ast


def test_runtime_requirements():
    requirements = metadata.requires("phaseview") or []
    runtime = [requirement for requirement in requirements if "extra ==" not in requirement]

    assert [requirement.split(">=")[0].strip() for requirement in runtime] == ["sly"]


# ============================================================================
# region -------- Tree comparison output
# ============================================================================


def explain(left: object, right: object, verbosity: int) -> "list[str] | None":
    config = SimpleNamespace(get_verbosity=lambda: verbosity)
    return pytest_assertrepr_compare(config, "==", left, right)  # pyright: ignore


@pytest.mark.parametrize(
    ("left", "right"),
    [
        pytest.param(1, 2, id="plain values"),
        pytest.param("a", g_ast.constant("a"), id="mixed"),
        pytest.param([], [], id="empty lists"),
    ],
)
def test_other_comparisons_are_left_alone(left: object, right: object):
    assert explain(left, right, 2) is None


def test_quiet_tree_comparison():
    lines = explain(g_ast.constant(1), g_ast.constant(2), 0)

    assert lines is not None
    assert lines[-1] == "Use -v to get the tree diff"


def test_tree_diff():
    lines = explain(g_ast.constant(1), g_ast.constant(2), 2)

    assert lines is not None
    assert "Full diff:" in lines
    assert any(line.startswith("- ") and "1" in line for line in lines)
    assert any(line.startswith("+ ") and "2" in line for line in lines)


def test_tree_list_counts():
    lines = explain([g_ast.constant(1)], [g_ast.constant(1), g_ast.constant(2)], 1)

    assert lines is not None
    assert "Tree counts differ: 1 != 2" in lines


# endregion
