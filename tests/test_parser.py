from decimal import Decimal

import pytest
from phaseview import g_ast
from phaseview.control import SourceUnit, parse
from phaseview.errors import CompilationFailedError
from phaseview.g_ast import Modifier


def parse_with_errors(text: str) -> tuple[g_ast.ModuleNode, list[str]]:
    source = SourceUnit("test.groovy", text)
    source.parse()
    return source.ast, [error.message for error in source.error_collector.messages]


def first_expression(text: str) -> g_ast.Expression:
    module = parse(text)
    assert module.statement_block is not None
    statement = module.statement_block.statements[0]
    assert isinstance(statement, g_ast.ExpressionStatement)
    return statement.expression


# ============================================================================
# region -------- Modules
# ============================================================================


@pytest.mark.parametrize("text", ["", "\n\n", ";"])
def test_empty_source(text: str):
    module = parse(text)

    assert module.package is None
    assert module.classes == []
    assert module.methods == []
    assert module.statement_block == g_ast.BlockStatement([])
    assert module.is_empty


def test_package_and_imports():
    module = parse(
        "package com.example\n"
        "import java.util.List\n"
        "import java.io.*\n"
        "import static java.lang.Math.max\n"
        "import foo.Bar as Baz\n"
    )

    assert module.package is not None
    assert module.package.name == "com.example."

    assert [(node.type.name, node.alias) for node in module.imports if node.type] == [
        ("java.util.List", "List"),
        ("foo.Bar", "Baz"),
    ]
    assert [node.package_name for node in module.star_imports] == ["java.io."]

    static_import = module.static_imports["max"]
    assert static_import.type is not None
    assert static_import.type.name == "java.lang.Math"
    assert static_import.field_name == "max"


def test_script_statements():
    module = parse("def x = 1\nprintln 'hi'")

    assert module.statement_block is not None
    declaration, command = (statement.expression for statement in module.statement_block.statements)

    assert isinstance(declaration, g_ast.DeclarationExpression)
    assert declaration.left_expression == g_ast.VariableExpression("x", g_ast.make_type(g_ast.OBJECT))
    assert declaration.right_expression == g_ast.constant(1)

    assert isinstance(command, g_ast.MethodCallExpression)
    assert command.implicit_this
    assert command.method_as_string == "println"
    assert command.arguments == g_ast.ArgumentListExpression([g_ast.constant("hi")])


def test_script_method():
    module = parse("int twice(int n) {\n    n * 2\n}")

    (method,) = module.methods
    assert method.name == "twice"
    assert method.modifiers == Modifier.PUBLIC
    assert method.return_type is not None
    assert method.return_type.name == "int"
    assert [parameter.name for parameter in method.parameters] == ["n"]


# endregion


# ============================================================================
# region -------- Classes
# ============================================================================


def test_class_members():
    module = parse(
        "class Foo extends Bar implements Baz {\n"
        "    String name\n"
        "    private int count = 0\n"
        "    def greet(String who) {\n"
        "        return who\n"
        "    }\n"
        "}\n"
    )

    (class_node,) = module.classes
    assert class_node.name == "Foo"
    assert class_node.superclass is not None
    assert class_node.superclass.name == "Bar"
    assert [interface.name for interface in class_node.interfaces] == ["Baz"]

    assert [field.name for field in class_node.fields] == ["name", "count"]
    assert class_node.fields[0].modifiers == Modifier.PRIVATE
    assert class_node.fields[1].initial_expression == g_ast.constant(0)

    (prop,) = class_node.properties
    assert prop.name == "name"
    assert prop.modifiers == Modifier.PUBLIC
    assert prop.field is class_node.fields[0]

    (method,) = class_node.methods
    assert method.name == "greet"
    assert method.modifiers == Modifier.PUBLIC
    assert method.return_type == g_ast.make_type(g_ast.OBJECT)
    assert isinstance(method.code, g_ast.BlockStatement)
    assert isinstance(method.code.statements[0], g_ast.ReturnStatement)


def test_class_defaults_to_object():
    (class_node,) = parse("class Foo {}").classes
    assert class_node.superclass == g_ast.make_type(g_ast.OBJECT)
    assert class_node.modifiers == 0


def test_constructor():
    (class_node,) = parse("class Foo {\n    Foo(int x) {\n    }\n}").classes

    assert class_node.methods == []
    (constructor,) = class_node.constructors
    assert constructor.name == g_ast.MethodNode.CONSTRUCTOR_NAME
    assert constructor.modifiers == Modifier.PUBLIC
    assert [parameter.name for parameter in constructor.parameters] == ["x"]


def test_interface_methods_are_abstract():
    module, errors = parse_with_errors("interface Shape {\n    double area()\n}")

    assert errors == []
    (class_node,) = module.classes
    assert class_node.is_interface
    (method,) = class_node.methods
    assert method.is_abstract
    assert method.code is None


def test_static_initializers_merge():
    (class_node,) = parse("class Foo {\n    static {\n        a()\n    }\n    static {\n        b()\n    }\n}").classes

    (initializer,) = class_node.methods
    assert initializer.is_static_initializer
    assert isinstance(initializer.code, g_ast.BlockStatement)
    assert [statement.expression.method_as_string for statement in initializer.code.statements] == ["a", "b"]


def test_annotations():
    module = parse("@Deprecated\n@Grab(group = 'x', version = '1')\nclass Foo {}")

    (class_node,) = module.classes
    names = [annotation.class_node.name for annotation in class_node.annotations]
    assert names == ["Deprecated", "Grab"]
    assert class_node.annotations[1].members == {"group": g_ast.constant("x"), "version": g_ast.constant("1")}


def test_single_annotation_value():
    (class_node,) = parse("@SuppressWarnings('unused')\nclass Foo {}").classes
    assert class_node.annotations[0].members == {"value": g_ast.constant("unused")}


# endregion


# ============================================================================
# region -------- Statements and expressions
# ============================================================================


def test_if_else():
    module = parse("if (a) {\n    b()\n} else {\n    c()\n}")

    assert module.statement_block is not None
    (statement,) = module.statement_block.statements
    assert isinstance(statement, g_ast.IfStatement)
    assert statement.boolean_expression == g_ast.BooleanExpression(g_ast.VariableExpression("a"))
    assert isinstance(statement.if_block, g_ast.BlockStatement)
    assert isinstance(statement.else_block, g_ast.BlockStatement)


def test_if_without_else():
    module = parse("if (a) {\n}")

    assert module.statement_block is not None
    (statement,) = module.statement_block.statements
    assert isinstance(statement, g_ast.IfStatement)
    assert statement.else_block == g_ast.EmptyStatement()


def test_trailing_closure():
    expression = first_expression("xs.each { x -> x * 2 }")

    assert isinstance(expression, g_ast.MethodCallExpression)
    assert expression.object_expression == g_ast.VariableExpression("xs")
    assert expression.method_as_string == "each"

    assert isinstance(expression.arguments, g_ast.ArgumentListExpression)
    (closure,) = expression.arguments.expressions
    assert isinstance(closure, g_ast.ClosureExpression)
    assert closure.parameters is not None
    assert [parameter.name for parameter in closure.parameters] == ["x"]


def test_generic_declaration():
    expression = first_expression("List<String> names = []")

    assert isinstance(expression, g_ast.DeclarationExpression)
    assert isinstance(expression.left_expression, g_ast.VariableExpression)
    declared = expression.left_expression.type
    assert declared is not None
    assert declared.name == "List"
    assert [generic.name for generic in declared.generics] == ["String"]
    assert expression.right_expression == g_ast.ListExpression([])


@pytest.mark.parametrize(
    ("literal", "value", "type_name"),
    [
        pytest.param("1", 1, "java.lang.Integer", id="integer"),
        pytest.param("3000000000", 3000000000, "java.lang.Long", id="long"),
        pytest.param("10G", 10, "java.math.BigInteger", id="big integer"),
        pytest.param("0x10", 16, "java.lang.Integer", id="hex"),
        pytest.param("1.5", Decimal("1.5"), "java.math.BigDecimal", id="decimal"),
        pytest.param("1.5d", 1.5, "java.lang.Double", id="double"),
        pytest.param("-5", -5, "java.lang.Integer", id="negative"),
        pytest.param("'text'", "text", g_ast.STRING, id="string"),
        pytest.param('"text"', "text", g_ast.STRING, id="gstring without placeholders"),
        pytest.param("null", None, g_ast.OBJECT, id="null"),
        pytest.param("true", True, "java.lang.Boolean", id="boolean"),
    ],
)
def test_literals(literal: str, value: object, type_name: str):
    expression = first_expression(f"x = {literal}")

    assert isinstance(expression, g_ast.BinaryExpression)
    assert expression.right_expression == g_ast.constant(value, type_name)


def test_gstring_placeholders():
    expression = first_expression('x = "hi $name and ${a + b}"')

    assert isinstance(expression, g_ast.BinaryExpression)
    gstring = expression.right_expression
    assert isinstance(gstring, g_ast.GStringExpression)
    assert gstring.text == "hi $name and ${a + b}"
    assert [string.value for string in gstring.strings] == ["hi ", " and ", ""]
    assert gstring.values == [
        g_ast.VariableExpression("name"),
        g_ast.BinaryExpression(g_ast.VariableExpression("a"), "+", g_ast.VariableExpression("b")),
    ]


def test_command_with_name_argument():
    expression = first_expression("println value")

    assert isinstance(expression, g_ast.MethodCallExpression)
    assert expression.implicit_this
    assert expression.method_as_string == "println"
    assert expression.arguments == g_ast.ArgumentListExpression([g_ast.VariableExpression("value")])


@pytest.mark.parametrize(
    ("text", "type_name"),
    [
        pytest.param("Widget w", "Widget", id="class type"),
        pytest.param("int n", "int", id="primitive"),
        pytest.param("List<String> names", "List", id="generic"),
    ],
)
def test_typed_declaration_without_value(text: str, type_name: str):
    expression = first_expression(text)

    assert isinstance(expression, g_ast.DeclarationExpression)
    assert isinstance(expression.left_expression, g_ast.VariableExpression)
    assert expression.left_expression.type is not None
    assert expression.left_expression.type.name == type_name


def test_named_arguments_lead():
    expression = first_expression("foo(2, a: 1)")

    assert isinstance(expression, g_ast.MethodCallExpression)
    assert isinstance(expression.arguments, g_ast.ArgumentListExpression)
    named, positional = expression.arguments.expressions
    assert named == g_ast.MapExpression([g_ast.MapEntryExpression(g_ast.constant("a"), g_ast.constant(1))])
    assert positional == g_ast.constant(2)


def test_precedence():
    expression = first_expression("x = 1 + 2 * 3")

    assert isinstance(expression, g_ast.BinaryExpression)
    assert expression.right_expression == g_ast.BinaryExpression(
        g_ast.constant(1), "+", g_ast.BinaryExpression(g_ast.constant(2), "*", g_ast.constant(3))
    )


# endregion


# ============================================================================
# region -------- Errors
# ============================================================================


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("public public class Foo {}", "Cannot repeat modifier: public", id="repeated modifier"),
        pytest.param(
            "import java.util.List\npackage foo",
            "Package definition should be the first statement",
            id="late package",
        ),
        pytest.param("void x = 1", "The variable 'x' has invalid type void", id="void variable"),
        pytest.param(
            "class Foo {\n    def bar()\n}",
            "You defined a method without a body. Try adding a body, or declare it abstract.",
            id="method without body",
        ),
    ],
)
def test_recoverable_errors(text: str, expected: str):
    _, errors = parse_with_errors(text)
    assert errors == [expected]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("def x = ", "unexpected end of file", id="end of file"),
        pytest.param("a = )", "unexpected token: )", id="unexpected token"),
    ],
)
def test_fatal_errors(text: str, expected: str):
    with pytest.raises(CompilationFailedError) as exc_info:
        parse(text)

    (error,) = exc_info.value.errors
    assert error.message == expected
    assert error.source_name == "script.groovy"
    assert "startup failed:" in str(exc_info.value)


# endregion
