"""Render a syntax tree back into source text."""

import re
from collections.abc import Generator, Iterable
from typing import TYPE_CHECKING, Any, Optional

from . import g_ast
from ._typing_compat import TypeAlias
from .g_ast import Modifier
from .lowering import is_inlined_constant
from .printer import Printer

if TYPE_CHECKING:
    from .control import SourceUnit

__all__ = ("ScriptRenderer", "MODIFIER_ORDER")


_Visit: TypeAlias = Generator[g_ast.Node, Any, None]

MODIFIER_ORDER = (
    Modifier.ABSTRACT,
    Modifier.FINAL,
    Modifier.INTERFACE,
    Modifier.NATIVE,
    Modifier.PRIVATE,
    Modifier.PROTECTED,
    Modifier.PUBLIC,
    Modifier.STATIC,
    Modifier.SYNCHRONIZED,
    Modifier.TRANSIENT,
    Modifier.VOLATILE,
)

_identifier = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*\Z")


def _escape(value: str) -> str:
    return value.replace("\n", "\\n").replace("'", "\\'")


def _is_object(type_ref: Optional[g_ast.TypeRef]) -> bool:
    return type_ref is None or (type_ref.name_without_package == "Object" and not type_ref.generics)


class ScriptRenderer(g_ast.NodeVisitor):
    """Write source text for syntax tree nodes into a printer.

    An instance is also a phase operation: called with a source and one of its classes, it renders the
    source's package and imports (once per source), the loose script statements (once), and then the class.

    Parameters
    ----------
    printer: Printer, optional
        Where to write. A new one is made if not given.
    show_script_free_form: bool, default=True
        Whether to render the loose statements of a script outside any class.
    show_script_class: bool, default=True
        Whether to render the generated script class.
    """

    def __init__(
        self,
        printer: Optional[Printer] = None,
        show_script_free_form: bool = True,
        show_script_class: bool = True,
    ) -> None:
        self.printer = printer if printer is not None else Printer()
        self.show_script_free_form = show_script_free_form
        self.show_script_class = show_script_class

        self.class_name_stack: list[str] = []
        self.in_control_statement = False
        self.script_has_been_visited = False
        self._headers_rendered: list["SourceUnit"] = []

    def __call__(self, source: "SourceUnit", class_node: g_ast.ClassNode) -> None:
        module = source.ast

        if not any(seen is source for seen in self._headers_rendered):
            self._headers_rendered.append(source)
            if module.package is not None:
                self.visit(module.package)
            self.render_imports(module)

        if self.show_script_free_form and not self.script_has_been_visited:
            self.script_has_been_visited = True
            if module.statement_block is not None:
                self.visit(module.statement_block)

        if self.show_script_class or not class_node.is_script:
            self.visit(class_node)

    def render(self, node: g_ast.Node) -> str:
        """Render one node and give back everything written so far."""

        self.visit(node)
        return self.printer.getvalue()

    def render_imports(self, module: g_ast.ModuleNode) -> None:
        static_imports = [*module.static_imports.values(), *module.static_star_imports.values()]
        for import_node in static_imports:
            self.visit(import_node)
        if static_imports:
            self.printer.double_break()

        imports = [*module.imports, *module.star_imports]
        for import_node in imports:
            self.visit(import_node)
        if imports:
            self.printer.double_break()

    # ============================================================================
    # region ---- Writing helpers
    # ============================================================================

    def write(self, text: str) -> None:
        self.printer.write(text)

    def write_modifiers(self, modifiers: int) -> None:
        for modifier in MODIFIER_ORDER:
            if modifiers & modifier:
                assert modifier.name is not None
                self.write(f"{modifier.name.lower()} ")

    def type_text(self, type_ref: g_ast.TypeRef) -> str:
        element, dimensions = g_ast.split_array_descriptor(type_ref.name)
        return element.rpartition(".")[2] + self.generics_text(type_ref.generics) + "[]" * dimensions

    def generics_text(self, generics: list[g_ast.GenericsType]) -> str:
        if not generics:
            return ""
        return "<" + ", ".join(self._generic_text(generic) for generic in generics) + ">"

    def _generic_text(self, generic: g_ast.GenericsType) -> str:
        if generic.wildcard or generic.placeholder or generic.type is None:
            text = generic.name
        else:
            text = self.type_text(generic.type)
        if generic.upper_bounds:
            text += " extends " + " & ".join(self.type_text(bound) for bound in generic.upper_bounds)
        if generic.lower_bound is not None:
            text += " super " + self.type_text(generic.lower_bound)
        return text

    def write_type(self, type_ref: Optional[g_ast.TypeRef]) -> None:
        """Write a type in a declaration position, where the top type is spelled ``def``."""

        if type_ref is None or (_is_object(type_ref) and not type_ref.is_array):
            self.write("def ")
        else:
            self.write(self.type_text(type_ref) + " ")

    def constant_text(self, node: g_ast.ConstantExpression, *, unwrap: bool = False) -> str:
        value = node.value
        if isinstance(value, str):
            return value if unwrap else f"'{_escape(value)}'"
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def _annotation(self, node: g_ast.AnnotationNode) -> _Visit:
        self.write(f"@{node.class_node.name}")
        if node.members:
            self.write("(")
            for index, (name, value) in enumerate(node.members.items()):
                if index:
                    self.write(", ")
                self.write(f"{name} = ")
                yield value
            self.write(")")

    def _annotations(self, annotations: list[g_ast.AnnotationNode]) -> _Visit:
        for annotation in annotations:
            yield from self._annotation(annotation)
            self.printer.line_break()

    def _parameters(self, parameters: Iterable[g_ast.Parameter]) -> _Visit:
        for index, parameter in enumerate(parameters):
            if index:
                self.write(", ")
            for annotation in parameter.annotations:
                yield from self._annotation(annotation)
                self.write(" ")
            self.write_modifiers(parameter.modifiers)
            self.write_type(parameter.type)
            self.write(f" {parameter.name}")
            initial = parameter.initial_expression
            if initial is not None and not isinstance(initial, g_ast.EmptyExpression):
                self.write(" = ")
                yield initial

    def _comma_separated(self, expressions: Iterable[g_ast.Expression]) -> _Visit:
        for index, expression in enumerate(expressions):
            if index:
                self.write(", ")
            yield from self._operand(expression)

    def _operand(self, expression: g_ast.Expression) -> _Visit:
        """Render an expression, without the leading pad a variable reference normally gets."""

        if isinstance(expression, g_ast.VariableExpression):
            self.write(expression.name)
        else:
            yield expression

    def _member_name(self, name: g_ast.Expression) -> _Visit:
        if isinstance(name, g_ast.ConstantExpression):
            self.write(self.constant_text(name, unwrap=True))
        else:
            yield name

    def _block_body(self, code: Optional[g_ast.Statement]) -> _Visit:
        with self.printer.indented():
            if code is not None:
                yield code

    def _guard(self, expression: g_ast.Expression) -> _Visit:
        self.in_control_statement = True
        try:
            yield expression
        finally:
            self.in_control_statement = False

    def _argument_list(self, expressions: list[g_ast.Expression], *, show_types: bool = False) -> _Visit:
        self.write("(" if self.in_control_statement else " (")

        for index, expression in enumerate(expressions):
            if index:
                self.write(", ")
            if show_types and isinstance(expression, g_ast.VariableExpression) and not _is_object(expression.type):
                self.write_type(expression.type)
            if len(expressions) > 1 and isinstance(expression, g_ast.MapExpression):
                # A map among other arguments keeps its own parentheses.
                self.write("(")
                yield expression
                self.write(")")
            else:
                yield from self._operand(expression)

        self.write(")")

    def _call_arguments(self, arguments: g_ast.Expression) -> _Visit:
        """Render call arguments, moving a trailing closure outside the parentheses."""

        if (
            isinstance(arguments, g_ast.ArgumentListExpression)
            and arguments.expressions
            and isinstance(arguments.expressions[-1], g_ast.ClosureExpression)
            and not self.in_control_statement
        ):
            *leading, closure = arguments.expressions
            if leading:
                yield from self._argument_list(leading)
            self.write(" ")
            yield closure
        else:
            yield arguments

    def _map_entries(self, node: g_ast.MapExpression) -> _Visit:
        for index, entry in enumerate(node.map_entry_expressions):
            if index:
                self.write(", ")
            yield entry

    # endregion

    # ============================================================================
    # region ---- Declarations
    # ============================================================================

    def visit_PackageNode(self, node: g_ast.PackageNode) -> _Visit:
        yield from self._annotations(node.annotations)
        text = node.text
        self.write(text[:-1] if text.endswith(".") else text)
        self.printer.double_break()

    def visit_ImportNode(self, node: g_ast.ImportNode) -> _Visit:
        yield from self._annotations(node.annotations)
        self.write(node.text)
        self.printer.line_break()

    def visit_AnnotationNode(self, node: g_ast.AnnotationNode) -> _Visit:
        yield from self._annotation(node)

    def visit_ClassNode(self, node: g_ast.ClassNode) -> _Visit:
        printer = self.printer
        self.class_name_stack.append(node.name_without_package)
        try:
            yield from self._annotations(node.annotations)

            self.write_modifiers(node.modifiers)
            self.write(f"class {node.name_without_package}{self.generics_text(node.generics)}")
            if node.interfaces:
                self.write(" implements " + ", ".join(self.type_text(interface) for interface in node.interfaces))
            superclass = node.superclass if node.superclass is not None else g_ast.make_type(g_ast.OBJECT)
            self.write(f" extends {self.type_text(superclass)} {{")
            printer.double_break()

            with printer.indented():
                for prop in node.properties:
                    yield prop
                printer.line_break()
                for field in node.fields:
                    yield field
                printer.double_break()
                for initializer in node.object_initializers:
                    self.write("{")
                    printer.line_break()
                    yield from self._block_body(initializer)
                    self.write("}")
                    printer.double_break()
                for constructor in node.constructors:
                    yield constructor
                printer.line_break()
                for method in node.methods:
                    yield method

            self.write("}")
            printer.line_break()
        finally:
            self.class_name_stack.pop()

    def visit_PropertyNode(self, node: g_ast.PropertyNode) -> None:
        # Rendered once, as its backing field.
        return None

    def visit_FieldNode(self, node: g_ast.FieldNode) -> _Visit:
        yield from self._annotations(node.annotations)
        self.write_modifiers(node.modifiers)
        self.write_type(node.type)
        self.write(f" {node.name}")
        if is_inlined_constant(node):
            assert isinstance(node.initial_expression, g_ast.ConstantExpression)
            self.write(f" = {self.constant_text(node.initial_expression)}")
        self.printer.line_break()

    def visit_MethodNode(self, node: g_ast.MethodNode) -> _Visit:
        printer = self.printer
        yield from self._annotations(node.annotations)
        self.write_modifiers(node.modifiers)

        if node.name == g_ast.MethodNode.CONSTRUCTOR_NAME:
            self.write(f"{self.class_name_stack[-1]}(")
            yield from self._parameters(node.parameters)
            self.write(")")
        elif node.is_static_initializer:
            pass
        else:
            self.write_type(node.return_type)
            self.write(f" {node.name}(")
            yield from self._parameters(node.parameters)
            self.write(")")
            if node.exceptions:
                self.write(" throws " + ", ".join(self.type_text(exception) for exception in node.exceptions))

        if node.code is None:
            printer.double_break()
            return

        self.write(" {")
        printer.line_break()
        yield from self._block_body(node.code)
        printer.line_break()
        self.write("}")
        printer.double_break()

    visit_ConstructorNode = visit_MethodNode

    def visit_Parameter(self, node: g_ast.Parameter) -> _Visit:
        yield from self._parameters([node])

    def visit_GenericsType(self, node: g_ast.GenericsType) -> None:
        self.write(self._generic_text(node))

    def visit_TypeRef(self, node: g_ast.TypeRef) -> None:
        self.write_type(node)

    # endregion

    # ============================================================================
    # region ---- Statements
    # ============================================================================

    def visit_BlockStatement(self, node: g_ast.BlockStatement) -> _Visit:
        for statement in node.statements:
            yield statement
            self.printer.line_break()
        self.printer.line_break()

    def visit_ExpressionStatement(self, node: g_ast.ExpressionStatement) -> _Visit:
        yield node.expression

    def visit_ReturnStatement(self, node: g_ast.ReturnStatement) -> _Visit:
        if isinstance(node.expression, g_ast.EmptyExpression):
            self.write("return")
        else:
            self.write("return ")
            yield node.expression
        self.printer.line_break()

    def visit_IfStatement(self, node: g_ast.IfStatement) -> _Visit:
        printer = self.printer
        self.write("if (")
        yield from self._guard(node.boolean_expression)
        self.write(") {")
        printer.line_break()
        yield from self._block_body(node.if_block)
        printer.line_break()

        if not isinstance(node.else_block, g_ast.EmptyStatement):
            self.write("} else {")
            printer.line_break()
            yield from self._block_body(node.else_block)
            printer.line_break()

        self.write("}")
        printer.line_break()

    def visit_ForStatement(self, node: g_ast.ForStatement) -> _Visit:
        self.write("for (")
        if node.variable is not None:
            yield from self._parameters([node.variable])
            self.write(" : ")
        yield node.collection_expression
        self.write(") {")
        self.printer.line_break()
        yield from self._block_body(node.loop_block)
        self.write("}")
        self.printer.line_break()

    def visit_WhileStatement(self, node: g_ast.WhileStatement) -> _Visit:
        self.write("while (")
        yield from self._guard(node.boolean_expression)
        self.write(") {")
        self.printer.line_break()
        yield from self._block_body(node.loop_block)
        self.printer.line_break()
        self.write("}")
        self.printer.line_break()

    def visit_DoWhileStatement(self, node: g_ast.DoWhileStatement) -> _Visit:
        self.write("do {")
        self.printer.line_break()
        yield from self._block_body(node.loop_block)
        self.write("} while (")
        yield from self._guard(node.boolean_expression)
        self.write(")")
        self.printer.line_break()

    def visit_SwitchStatement(self, node: g_ast.SwitchStatement) -> _Visit:
        printer = self.printer
        self.write("switch (")
        yield node.expression
        self.write(") {")
        printer.line_break()

        with printer.indented():
            for case in node.case_statements:
                yield case
            default = node.default_statement
            if default is not None and not isinstance(default, g_ast.EmptyStatement):
                self.write("default:")
                printer.line_break()
                yield from self._block_body(default)

        self.write("}")
        printer.line_break()

    def visit_CaseStatement(self, node: g_ast.CaseStatement) -> _Visit:
        self.write("case ")
        yield node.expression
        self.write(":")
        self.printer.line_break()
        yield from self._block_body(node.code)

    def visit_BreakStatement(self, node: g_ast.BreakStatement) -> None:
        self.write("break")
        self.printer.line_break()

    def visit_ContinueStatement(self, node: g_ast.ContinueStatement) -> None:
        self.write("continue")
        self.printer.line_break()

    def visit_TryCatchStatement(self, node: g_ast.TryCatchStatement) -> _Visit:
        printer = self.printer
        self.write("try {")
        printer.line_break()
        yield from self._block_body(node.try_statement)
        printer.line_break()
        self.write("}")
        printer.line_break()

        for catch in node.catch_statements:
            yield catch

        self.write("finally {")
        printer.line_break()
        yield from self._block_body(node.finally_statement)
        self.write("}")
        printer.line_break()

    def visit_CatchStatement(self, node: g_ast.CatchStatement) -> _Visit:
        self.write("catch (")
        yield from self._parameters([node.variable])
        self.write(") {")
        self.printer.line_break()
        yield from self._block_body(node.code)
        self.write("}")
        self.printer.line_break()

    def visit_ThrowStatement(self, node: g_ast.ThrowStatement) -> _Visit:
        self.write("throw ")
        yield node.expression
        self.printer.line_break()

    def visit_SynchronizedStatement(self, node: g_ast.SynchronizedStatement) -> _Visit:
        self.write("synchronized (")
        yield node.expression
        self.write(") {")
        self.printer.line_break()
        yield from self._block_body(node.code)
        self.write("}")

    def visit_AssertStatement(self, node: g_ast.AssertStatement) -> _Visit:
        self.write("assert ")
        yield node.boolean_expression
        self.write(" : ")
        yield node.message_expression

    def visit_EmptyStatement(self, node: g_ast.EmptyStatement) -> None:
        return None

    # endregion

    # ============================================================================
    # region ---- Expressions
    # ============================================================================

    def visit_ConstantExpression(self, node: g_ast.ConstantExpression) -> None:
        self.write(self.constant_text(node))

    def visit_VariableExpression(self, node: g_ast.VariableExpression) -> None:
        self.write(f" {node.name}")

    def visit_FieldExpression(self, node: g_ast.FieldExpression) -> None:
        self.write(node.name)

    def visit_ClassExpression(self, node: g_ast.ClassExpression) -> None:
        self.write(node.type.name_without_package)

    def visit_PropertyExpression(self, node: g_ast.PropertyExpression) -> _Visit:
        yield from self._operand(node.object_expression)
        if node.spread_safe:
            self.write("*.")
        elif node.safe:
            self.write("?.")
        else:
            self.write(".")
        yield from self._member_name(node.property)

    def visit_AttributeExpression(self, node: g_ast.AttributeExpression) -> _Visit:
        yield from self._operand(node.object_expression)
        self.write("?.@" if node.safe else ".@")
        yield from self._member_name(node.property)

    def visit_MethodCallExpression(self, node: g_ast.MethodCallExpression) -> _Visit:
        if not node.implicit_this:
            yield from self._operand(node.object_expression)
            if node.spread_safe:
                self.write("*.")
            elif node.safe:
                self.write("?.")
            else:
                self.write(".")
        yield from self._member_name(node.method)
        yield from self._call_arguments(node.arguments)

    def visit_StaticMethodCallExpression(self, node: g_ast.StaticMethodCallExpression) -> _Visit:
        self.write(f"{node.owner_type.name}.{node.method}")
        if isinstance(node.arguments, (g_ast.VariableExpression, g_ast.MethodCallExpression)):
            self.write("(")
            yield from self._operand(node.arguments)
            self.write(")")
        else:
            yield from self._call_arguments(node.arguments)

    def visit_ConstructorCallExpression(self, node: g_ast.ConstructorCallExpression) -> _Visit:
        if node.is_super_call:
            self.write("super")
        elif node.is_this_call:
            self.write("this")
        else:
            type_ref = node.type if node.type is not None else g_ast.make_type(g_ast.OBJECT)
            self.write(f"new {self.type_text(type_ref)}")
        yield from self._call_arguments(node.arguments)

    def visit_ArgumentListExpression(self, node: g_ast.ArgumentListExpression) -> _Visit:
        yield from self._argument_list(node.expressions)

    def visit_TupleExpression(self, node: g_ast.TupleExpression) -> _Visit:
        self.write(" ")
        yield from self._comma_separated(node.expressions)
        self.write(" ")

    def visit_BinaryExpression(self, node: g_ast.BinaryExpression) -> _Visit:
        yield node.left_expression
        self.write(f" {node.operation} ")
        yield node.right_expression
        if node.operation == "[":
            self.write("]")

    def visit_DeclarationExpression(self, node: g_ast.DeclarationExpression) -> _Visit:
        target = node.left_expression
        if isinstance(target, g_ast.ArgumentListExpression):
            self.write("def")
            yield from self._argument_list(target.expressions, show_types=True)
        else:
            self.write_type(target.type if isinstance(target, g_ast.VariableExpression) else None)
            yield target

        if not isinstance(node.right_expression, g_ast.EmptyExpression):
            self.write(f" {node.operation} ")
            yield node.right_expression

    def visit_PostfixExpression(self, node: g_ast.PostfixExpression) -> _Visit:
        self.write("(")
        yield from self._operand(node.expression)
        self.write(f"){node.operation}")

    def visit_PrefixExpression(self, node: g_ast.PrefixExpression) -> _Visit:
        self.write(f"{node.operation}(")
        yield from self._operand(node.expression)
        self.write(")")

    def _wrapped(self, prefix: str, expression: g_ast.Expression) -> _Visit:
        self.write(f"{prefix}(")
        yield from self._operand(expression)
        self.write(")")

    def visit_NotExpression(self, node: g_ast.NotExpression) -> _Visit:
        yield from self._wrapped("!", node.expression)

    def visit_UnaryMinusExpression(self, node: g_ast.UnaryMinusExpression) -> _Visit:
        yield from self._wrapped("-", node.expression)

    def visit_UnaryPlusExpression(self, node: g_ast.UnaryPlusExpression) -> _Visit:
        yield from self._wrapped("+", node.expression)

    def visit_BitwiseNegationExpression(self, node: g_ast.BitwiseNegationExpression) -> _Visit:
        yield from self._wrapped("~", node.expression)

    def visit_BooleanExpression(self, node: g_ast.BooleanExpression) -> _Visit:
        yield node.expression

    def visit_TernaryExpression(self, node: g_ast.TernaryExpression) -> _Visit:
        yield node.boolean_expression
        self.write(" ? ")
        yield node.true_expression
        self.write(" : ")
        yield node.false_expression

    visit_ElvisOperatorExpression = visit_TernaryExpression

    def visit_CastExpression(self, node: g_ast.CastExpression) -> _Visit:
        self.write("((")
        yield from self._operand(node.expression)
        self.write(f") as {self.type_text(node.type)})")

    def visit_RangeExpression(self, node: g_ast.RangeExpression) -> _Visit:
        self.write("(")
        yield from self._operand(node.from_expression)
        self.write(".." if node.inclusive else "..<")
        yield from self._operand(node.to_expression)
        self.write(")")

    def visit_ClosureExpression(self, node: g_ast.ClosureExpression) -> _Visit:
        self.write("{")
        if node.parameters:
            self.write(" ")
            yield from self._parameters(node.parameters)
            self.write(" ->")
        self.printer.line_break()
        yield from self._block_body(node.code)
        self.write("}")
        self.printer.line_break()

    def visit_ClosureListExpression(self, node: g_ast.ClosureListExpression) -> _Visit:
        for index, expression in enumerate(node.expressions):
            if index:
                self.write("; ")
            yield expression

    def visit_ListExpression(self, node: g_ast.ListExpression) -> _Visit:
        self.write("[")
        yield from self._comma_separated(node.expressions)
        self.write("]")

    def visit_MapExpression(self, node: g_ast.MapExpression) -> _Visit:
        if not node.map_entry_expressions:
            self.write(":")
            return
        yield from self._map_entries(node)

    def visit_MapEntryExpression(self, node: g_ast.MapEntryExpression) -> _Visit:
        key = node.key_expression
        if isinstance(key, g_ast.SpreadMapExpression):
            self.write("*:")
            yield from self._operand(node.value_expression)
            return

        if isinstance(key, g_ast.ConstantExpression):
            unwrap = isinstance(key.value, str) and _identifier.match(key.value) is not None
            self.write(self.constant_text(key, unwrap=unwrap))
        else:
            self.write("(")
            yield from self._operand(key)
            self.write(")")
        self.write(": ")
        yield from self._operand(node.value_expression)

    def visit_SpreadExpression(self, node: g_ast.SpreadExpression) -> _Visit:
        self.write("*")
        yield from self._operand(node.expression)

    def visit_SpreadMapExpression(self, node: g_ast.SpreadMapExpression) -> _Visit:
        self.write("*:")
        yield from self._operand(node.expression)

    def visit_GStringExpression(self, node: g_ast.GStringExpression) -> None:
        self.write(f'"{node.text}"')

    def visit_MethodPointerExpression(self, node: g_ast.MethodPointerExpression) -> _Visit:
        yield from self._operand(node.expression)
        self.write(".&")
        yield from self._member_name(node.method_name)

    def visit_ArrayExpression(self, node: g_ast.ArrayExpression) -> _Visit:
        self.write(f"new {self.type_text(node.element_type)}")
        if node.size_expressions is not None:
            self.write("[")
            yield from self._comma_separated(node.size_expressions)
            self.write("]")
        else:
            self.write("[] {")
            yield from self._comma_separated(node.expressions)
            self.write("}")

    def visit_EmptyExpression(self, node: g_ast.EmptyExpression) -> None:
        return None

    def visit_BytecodeExpression(self, node: g_ast.BytecodeExpression) -> None:
        self.write("/*BytecodeExpression*/")
        self.printer.line_break()

    # endregion
