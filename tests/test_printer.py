import pytest
from phaseview.printer import Printer


@pytest.fixture
def printer() -> Printer:
    return Printer()


def test_write_strips_leading_spaces_at_line_start(printer: Printer):
    printer.write("   def")
    assert printer.getvalue() == "def"


def test_write_indents_fresh_lines(printer: Printer):
    printer.write("a {")
    printer.line_break()
    with printer.indented():
        printer.write("  b")
        printer.line_break()
        with printer.indented():
            printer.write("c")
    printer.line_break()
    printer.write("}")

    assert printer.getvalue() == "a {\n    b\n        c\n}"


@pytest.mark.parametrize(
    ("pieces", "expected"),
    [
        pytest.param(["a ", " b"], "a b", id="one space collapsed"),
        pytest.param(["a ", "  b"], "a  b", id="only one space stripped"),
        pytest.param(["a", " b"], "a b", id="no space before"),
        pytest.param(["a ", "b"], "a b", id="no space after"),
        pytest.param(["a", "", "b"], "ab", id="empty write"),
    ],
)
def test_space_collapsing(printer: Printer, pieces: list[str], expected: str):
    for piece in pieces:
        printer.write(piece)
    assert printer.getvalue() == expected


def test_empty_write_keeps_pending_indent(printer: Printer):
    with printer.indented():
        printer.write("")
        printer.write("x")
    assert printer.getvalue() == "    x"


def test_line_break_is_idempotent(printer: Printer):
    printer.write("a")
    printer.line_break()
    printer.line_break()
    printer.line_break()
    assert printer.getvalue() == "a\n"


@pytest.mark.parametrize(
    "setup",
    [
        pytest.param([], id="after text"),
        pytest.param([Printer.line_break], id="after one newline"),
        pytest.param([Printer.double_break], id="after blank line"),
    ],
)
def test_double_break(printer: Printer, setup: list):
    printer.write("a")
    for step in setup:
        step(printer)

    printer.double_break()
    printer.double_break()
    assert printer.getvalue() == "a\n\n"


def test_breaks_never_make_triple_newlines(printer: Printer):
    printer.write("a")
    printer.double_break()
    printer.line_break()
    printer.double_break()
    printer.write("b")
    assert "\n\n\n" not in printer.getvalue()
    assert printer.getvalue() == "a\n\nb"


def test_indent_restored_after_error(printer: Printer):
    with pytest.raises(RuntimeError), printer.indented():
        assert printer.indent == Printer.INDENT_UNIT
        raise RuntimeError

    assert printer.indent == ""

    printer.write("x")
    assert printer.getvalue() == "x"
