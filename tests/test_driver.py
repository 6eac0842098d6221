import re

import pytest
from phaseview.control import CompilePhase
from phaseview.driver import RenderOptions, Rendered, RenderedWithDiagnostic, compile_to_script, render_script
from phaseview.errors import CompilationFailedError

PROPERTY_CLASS = "class Widget {\n    String label\n}"

GENERATED_WIDGET = """
public class Widget extends Object {

    private String label

    public Widget() {
    }

    public String getLabel() {
        return label
    }

    public void setLabel(String value) {
        label = value
    }

    public MetaClass getMetaClass() {
        /*BytecodeExpression*/
    }

    public void setMetaClass(MetaClass mc) {
        /*BytecodeExpression*/
    }

}
"""


# ============================================================================
# region -------- Rendering
# ============================================================================


def test_free_form_only():
    assert compile_to_script("println 'hi'", "CONVERSION", show_script_class=False) == "println ('hi')\n"


def test_script_class_is_rendered():
    text = compile_to_script("println 'hi'\nclass Widget {}", CompilePhase.CONVERSION)

    assert text.startswith("println ('hi')\n")
    assert re.search(r"public class script\d+ extends Script \{", text)
    assert "public class Widget extends Object {" in text


def test_empty_class():
    assert compile_to_script("class Foo {}", "conversion") == "\npublic class Foo extends Object {\n\n}\n"


def test_class_generation():
    result = render_script(PROPERTY_CLASS, "CLASS_GENERATION")

    assert isinstance(result, Rendered)
    assert result.text == GENERATED_WIDGET


def test_rendering_is_deterministic():
    assert compile_to_script(PROPERTY_CLASS, 8) == compile_to_script(PROPERTY_CLASS, 8)


def test_inlined_constant():
    text = compile_to_script("class Config {\n    public static final int X = 42\n}", "CLASS_GENERATION")
    assert text.count("final public static int X = 42") == 1


def test_hidden_script_parts():
    text = compile_to_script(
        "println 'hi'\nclass Widget {}", "CONVERSION", show_script_free_form=False, show_script_class=False
    )

    assert "println" not in text
    assert "script" not in text
    assert "public class Widget extends Object {" in text


# endregion


# ============================================================================
# region -------- Failures
# ============================================================================


def test_compilation_error_is_contained():
    result = render_script("def x = ", "CONVERSION")

    assert isinstance(result, RenderedWithDiagnostic)
    assert isinstance(result.error, CompilationFailedError)
    assert "Unable to produce AST for this phase due to earlier compilation error:" in result.text
    assert "unexpected end of file" in result.text
    assert result.text.endswith("Fix the above error(s) and then press Refresh\n")


def test_duplicate_classes_are_reported():
    text = compile_to_script("class A {}\nclass A {}", "CONVERSION")

    assert "Unable to produce AST for this phase due to earlier compilation error:" in text
    assert "Invalid duplicate class definition of class A" in text


def test_invalid_phase_is_contained():
    result = render_script("x = 1", "bogus")

    assert isinstance(result, RenderedWithDiagnostic)
    assert isinstance(result.error, ValueError)
    assert result.text == (
        "Unable to produce AST for this phase due to an error:\n"
        "Compile phase bogus cannot be mapped to a CompilePhase.\n"
        "Fix the above error(s) and then press Refresh\n"
    )


# endregion


# ============================================================================
# region -------- Options
# ============================================================================


@pytest.mark.parametrize(
    ("options", "expected"),
    [
        pytest.param({}, RenderOptions(True, True), id="defaults"),
        pytest.param({"showScriptFreeForm": False}, RenderOptions(False, True), id="camel case"),
        pytest.param({"show_script_class": 0}, RenderOptions(True, False), id="snake case"),
        pytest.param(
            {"showScriptClass": False, "show_script_free_form": False}, RenderOptions(False, False), id="mixed"
        ),
    ],
)
def test_options_from_mapping(options: dict, expected: RenderOptions):
    assert RenderOptions.from_mapping(options) == expected


def test_unknown_option():
    with pytest.raises(ValueError, match="Unknown render option: 'colour'"):
        RenderOptions.from_mapping({"colour": True})


# endregion
