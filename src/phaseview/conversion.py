"""Conversion: turn a parsed module into the classes the later phases work on."""

from typing import TYPE_CHECKING

from . import g_ast
from .g_ast import Modifier

if TYPE_CHECKING:
    from .control import SourceUnit

__all__ = ("convert_module", "build_script_class")


_INVOKER_HELPER = "org.codehaus.groovy.runtime.InvokerHelper"
_BINDING = "groovy.lang.Binding"


def build_script_class(source: "SourceUnit", name: str) -> g_ast.ClassNode:
    """Create the class that runs the loose statements and holds the script methods of a module."""

    module = source.ast
    script = g_ast.ClassNode(
        name,
        Modifier.PUBLIC,
        g_ast.TypeRef(source.configuration.script_base_class),
        is_script=True,
    )

    run_script = g_ast.StaticMethodCallExpression(
        g_ast.TypeRef(_INVOKER_HELPER),
        "runScript",
        g_ast.ArgumentListExpression(
            [g_ast.ClassExpression(g_ast.TypeRef(name, resolved=True)), g_ast.VariableExpression("args")]
        ),
    )
    main = g_ast.MethodNode(
        "main",
        g_ast.make_type(g_ast.VOID),
        [g_ast.Parameter(g_ast.make_type(g_ast.STRING).make_array(), "args")],
        Modifier.PUBLIC | Modifier.STATIC,
        code=g_ast.BlockStatement([g_ast.ExpressionStatement(run_script)]),
    )
    run = g_ast.MethodNode(
        "run",
        g_ast.make_type(g_ast.OBJECT),
        modifiers=Modifier.PUBLIC,
        code=module.statement_block or g_ast.BlockStatement([]),
    )
    script.methods.extend([main, run, *module.methods])

    super_call = g_ast.ConstructorCallExpression(
        None,
        g_ast.ArgumentListExpression([g_ast.VariableExpression("context")]),
        g_ast.SUPER_MARKER,
    )
    script.constructors.extend(
        [
            g_ast.ConstructorNode(
                g_ast.MethodNode.CONSTRUCTOR_NAME,
                g_ast.make_type(g_ast.VOID),
                modifiers=Modifier.PUBLIC,
                code=g_ast.BlockStatement([]),
            ),
            g_ast.ConstructorNode(
                g_ast.MethodNode.CONSTRUCTOR_NAME,
                g_ast.make_type(g_ast.VOID),
                [g_ast.Parameter(g_ast.TypeRef(_BINDING), "context")],
                Modifier.PUBLIC,
                code=g_ast.BlockStatement([g_ast.ExpressionStatement(super_call)]),
            ),
        ]
    )
    return script


def convert_module(source: "SourceUnit") -> None:
    module = source.ast
    prefix = module.package.name if module.package is not None else ""

    for class_node in module.classes:
        if prefix and "." not in class_node.name:
            class_node.name = prefix + class_node.name
        if not class_node.is_interface and not class_node.modifiers & g_ast.ACCESS_MODIFIERS:
            class_node.modifiers |= Modifier.PUBLIC

    has_script_code = bool(module.methods or (module.statement_block and module.statement_block.statements))
    if has_script_code or not module.classes:
        module.classes.insert(0, build_script_class(source, prefix + source.script_class_name))

    seen: set[str] = set()
    for class_node in module.classes:
        if class_node.name in seen:
            source.add_error(f"Invalid duplicate class definition of class {class_node.name}", class_node.coord)
        seen.add(class_node.name)
