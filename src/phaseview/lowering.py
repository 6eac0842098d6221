"""Late phases that reshape classes: default members, initializer placement, implicit returns, and meta-class
support methods.
"""

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Optional

from . import g_ast
from .g_ast import Modifier

if TYPE_CHECKING:
    from .control import SourceUnit

__all__ = (
    "canonicalize",
    "select_instructions",
    "generate_classes",
    "add_default_constructor",
    "add_property_accessors",
    "move_field_initializers",
    "is_inlined_constant",
    "add_implicit_returns",
    "add_meta_class_methods",
)


_META_CLASS = "groovy.lang.MetaClass"


def _qualify_string(type_name: str) -> str:
    return g_ast.STRING if type_name == "String" else type_name


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _block(*statements: g_ast.Statement) -> g_ast.BlockStatement:
    return g_ast.BlockStatement(list(statements))


# ============================================================================
# region -------- Canonicalization
# ============================================================================


def add_default_constructor(class_node: g_ast.ClassNode) -> None:
    if class_node.is_interface or class_node.constructors:
        return
    class_node.constructors.append(
        g_ast.ConstructorNode(
            g_ast.MethodNode.CONSTRUCTOR_NAME,
            g_ast.make_type(g_ast.VOID),
            modifiers=Modifier.PUBLIC,
            code=_block(),
        )
    )


def add_property_accessors(class_node: g_ast.ClassNode) -> None:
    """Add a getter, and a setter unless the property is final, where the class does not declare one."""

    for prop in class_node.properties:
        suffix = _capitalize(prop.name)
        modifiers = (prop.modifiers & ~Modifier.FINAL) | Modifier.PUBLIC
        field = g_ast.FieldExpression(prop.field.name, prop.type)

        getter_name = f"get{suffix}"
        if not class_node.get_methods(getter_name):
            class_node.methods.append(
                g_ast.MethodNode(
                    getter_name,
                    prop.type,
                    modifiers=modifiers,
                    code=_block(g_ast.ReturnStatement(field)),
                    coord=prop.coord,
                )
            )

        setter_name = f"set{suffix}"
        if prop.modifiers & Modifier.FINAL or class_node.get_methods(setter_name):
            continue
        assignment = g_ast.BinaryExpression(field, "=", g_ast.VariableExpression("value", prop.type))
        class_node.methods.append(
            g_ast.MethodNode(
                setter_name,
                g_ast.make_type(g_ast.VOID),
                [g_ast.Parameter(prop.type, "value")],
                modifiers,
                code=_block(g_ast.ExpressionStatement(assignment)),
                coord=prop.coord,
            )
        )


def canonicalize(source: "SourceUnit") -> None:
    for class_node in source.ast.classes:
        add_default_constructor(class_node)
        add_property_accessors(class_node)


# endregion


# ============================================================================
# region -------- Instruction selection
# ============================================================================


def is_inlined_constant(field: g_ast.FieldNode) -> bool:
    """Whether a field is a static final constant of a primitive or String type, kept at the field."""

    initial = field.initial_expression
    if not (field.is_static and field.is_final and isinstance(initial, g_ast.ConstantExpression)):
        return False
    if initial.value is None or initial.type is None:
        return False
    field_type = _qualify_string(field.type.name)
    constant_type = _qualify_string(g_ast.primitive_of(initial.type.name))
    return g_ast.is_static_constant_initializer_type(field_type) and constant_type == field_type


def _field_assignment(field: g_ast.FieldNode, value: g_ast.Expression) -> g_ast.ExpressionStatement:
    target = g_ast.FieldExpression(field.name, field.type, coord=field.coord)
    return g_ast.ExpressionStatement(g_ast.BinaryExpression(target, "=", value, coord=field.coord))


def _special_call(statement: g_ast.Statement) -> Optional[g_ast.ConstructorCallExpression]:
    if isinstance(statement, g_ast.ExpressionStatement) and isinstance(
        statement.expression, g_ast.ConstructorCallExpression
    ):
        if statement.expression.is_special_call:
            return statement.expression
    return None


def move_field_initializers(class_node: g_ast.ClassNode) -> None:
    """Move field initial values and initializer blocks to where they run: constructors and ``<clinit>``."""

    if class_node.is_interface:
        return

    instance_init: list[g_ast.Statement] = []
    static_init: list[g_ast.Statement] = []

    for field in class_node.fields:
        if field.initial_expression is None:
            continue
        if is_inlined_constant(field):
            assert isinstance(field.initial_expression, g_ast.ConstantExpression)
            value = field.initial_expression.value
            field.initial_expression = g_ast.ConstantExpression(value, g_ast.make_type(field.type.name))
            continue

        target = static_init if field.is_static else instance_init
        target.append(_field_assignment(field, field.initial_expression))
        field.initial_expression = None

    for initializer in class_node.object_initializers:
        if isinstance(initializer, g_ast.BlockStatement):
            instance_init.extend(initializer.statements)
        else:
            instance_init.append(initializer)
    class_node.object_initializers = []

    if instance_init:
        for constructor in class_node.constructors:
            code = constructor.code
            if not isinstance(code, g_ast.BlockStatement):
                code = constructor.code = _block(*([code] if code is not None else []))
            first = _special_call(code.statements[0]) if code.statements else None
            if first is not None and first.is_this_call:
                continue
            position = 1 if first is not None else 0
            code.statements[position:position] = list(instance_init)

    if static_init:
        clinit = class_node.get_static_initializer()
        if clinit is None:
            clinit = g_ast.MethodNode(
                g_ast.MethodNode.STATIC_INITIALIZER_NAME,
                g_ast.make_type(g_ast.VOID),
                modifiers=Modifier.STATIC,
                code=_block(),
            )
            class_node.methods.append(clinit)
        if not isinstance(clinit.code, g_ast.BlockStatement):
            clinit.code = _block(*([clinit.code] if clinit.code is not None else []))
        clinit.code.statements[0:0] = static_init


def _return_null() -> g_ast.ReturnStatement:
    return g_ast.ReturnStatement(g_ast.constant(None))


def _replace_last(block: g_ast.BlockStatement, replacement: g_ast.Statement) -> None:
    if isinstance(replacement, g_ast.BlockStatement):
        block.statements[-1:] = replacement.statements
    else:
        block.statements[-1] = replacement


def add_implicit_returns(block: g_ast.BlockStatement) -> None:
    """Make the value of the last statement of ``block`` the returned value.

    Trailing blocks, ``if``/``else`` branches and ``try``/``catch`` bodies are followed with an explicit work
    stack, so nesting depth is not limited by the interpreter's recursion limit.
    """

    # Each entry is a statement in tail position and the callback that puts its replacement in place.
    pending: list[tuple[g_ast.Statement, Callable[[g_ast.Statement], None]]] = []

    def push_block(target: g_ast.BlockStatement) -> None:
        if target.statements:
            pending.append((target.statements[-1], partial(_replace_last, target)))
        else:
            target.statements.append(_return_null())

    push_block(block)
    while pending:
        statement, replace = pending.pop()

        if isinstance(statement, (g_ast.ReturnStatement, g_ast.ThrowStatement)):
            continue

        if isinstance(statement, g_ast.ExpressionStatement):
            expression = statement.expression
            if isinstance(expression, g_ast.DeclarationExpression) and isinstance(
                expression.left_expression, g_ast.VariableExpression
            ):
                variable = g_ast.VariableExpression(expression.left_expression.name)
                replace(_block(statement, g_ast.ReturnStatement(variable, coord=statement.coord)))
            else:
                replace(g_ast.ReturnStatement(expression, coord=statement.coord))
        elif isinstance(statement, g_ast.BlockStatement):
            push_block(statement)
        elif isinstance(statement, g_ast.IfStatement):
            pending.append((statement.if_block, partial(setattr, statement, "if_block")))
            pending.append((statement.else_block, partial(setattr, statement, "else_block")))
        elif isinstance(statement, g_ast.TryCatchStatement):
            pending.append((statement.try_statement, partial(setattr, statement, "try_statement")))
            for catch in statement.catch_statements:
                pending.append((catch.code, partial(setattr, catch, "code")))
        elif isinstance(statement, g_ast.EmptyStatement):
            replace(_block(_return_null()))
        else:
            replace(_block(statement, _return_null()))


def _returns_value(method: g_ast.MethodNode) -> bool:
    return not (
        isinstance(method, g_ast.ConstructorNode)
        or method.is_static_initializer
        or method.is_void
        or method.code is None
    )


def select_instructions(source: "SourceUnit") -> None:
    for class_node in source.ast.classes:
        move_field_initializers(class_node)

        for method in class_node.methods:
            if _returns_value(method) and isinstance(method.code, g_ast.BlockStatement):
                add_implicit_returns(method.code)

        for node in g_ast.walk(class_node):
            if isinstance(node, g_ast.ClosureExpression) and isinstance(node.code, g_ast.BlockStatement):
                add_implicit_returns(node.code)


# endregion


# ============================================================================
# region -------- Class generation
# ============================================================================


def add_meta_class_methods(class_node: g_ast.ClassNode) -> None:
    if class_node.is_interface:
        return

    meta_class = g_ast.make_type(_META_CLASS)
    if not class_node.get_methods("getMetaClass"):
        class_node.methods.append(
            g_ast.MethodNode(
                "getMetaClass",
                meta_class,
                modifiers=Modifier.PUBLIC,
                code=_block(g_ast.ExpressionStatement(g_ast.BytecodeExpression("getMetaClass"))),
            )
        )
    if not class_node.get_methods("setMetaClass"):
        class_node.methods.append(
            g_ast.MethodNode(
                "setMetaClass",
                g_ast.make_type(g_ast.VOID),
                [g_ast.Parameter(meta_class, "mc")],
                Modifier.PUBLIC,
                code=_block(g_ast.ExpressionStatement(g_ast.BytecodeExpression("setMetaClass"))),
            )
        )


def generate_classes(source: "SourceUnit") -> None:
    for class_node in source.ast.classes:
        add_meta_class_methods(class_node)


# endregion
