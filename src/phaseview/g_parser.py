# pyright: reportRedeclaration=none, reportUndefinedVariable=none
"""Module for parsing Groovy tokens into a syntax tree."""

import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING, Any, NoReturn, Optional, Union

from sly import Parser

from . import g_ast
from ._datum import Datum
from ._typing_compat import override
from .g_ast import Modifier
from .g_lexer import GroovyLexer, unescape
from .utils import Coord, find_column

if TYPE_CHECKING:
    from .control import SourceUnit


__all__ = ("GroovyParser",)


log = logging.getLogger(__name__)


# ============================================================================
# region -------- Misc
# ============================================================================


class _Modifiers(Datum):
    """Modifier keywords and annotations in front of a declaration.

    Attributes
    ----------
    flags: int, default=0
        The combined modifier bits.
    annotations: list[g_ast.AnnotationNode], default=[]
        The annotations, in source order.
    """

    flags: int = 0
    annotations: list[g_ast.AnnotationNode] = []


class _NamedArgument(Datum):
    entry: g_ast.MapEntryExpression


_gstring_pattern = re.compile(
    r"(?<!\\)\$(?:\{(?P<expr>[^}]*)\}|(?P<path>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*))"
)

_INT_MAX = 2**31 - 1
_LONG_MAX = 2**63 - 1

_integer_types = {"l": "java.lang.Long", "g": "java.math.BigInteger", "i": "java.lang.Integer"}
_decimal_types = {"f": "java.lang.Float", "d": "java.lang.Double", "g": "java.math.BigDecimal"}


def _integer_constant(text: str, coord: Optional[Coord]) -> g_ast.ConstantExpression:
    suffix = text[-1].lower() if text[-1] in "lLgGiI" else ""
    digits = text[:-1] if suffix else text
    value = int(digits, 16) if digits[:2] in {"0x", "0X"} else int(digits)

    if suffix:
        type_name = _integer_types[suffix]
    elif value <= _INT_MAX:
        type_name = "java.lang.Integer"
    elif value <= _LONG_MAX:
        type_name = "java.lang.Long"
    else:
        type_name = "java.math.BigInteger"
    return g_ast.constant(value, type_name, coord=coord)


def _decimal_constant(text: str, coord: Optional[Coord]) -> g_ast.ConstantExpression:
    suffix = text[-1].lower() if text[-1] in "fFdDgG" else ""
    digits = text[:-1] if suffix else text
    type_name = _decimal_types.get(suffix, "java.math.BigDecimal")
    value: Union[float, Decimal] = Decimal(digits) if type_name == "java.math.BigDecimal" else float(digits)
    return g_ast.constant(value, type_name, coord=coord)


def _map_key(key: g_ast.Expression) -> g_ast.Expression:
    """A bare identifier used as a map key names a string."""

    if isinstance(key, g_ast.VariableExpression) and not (key.is_this or key.is_super):
        return g_ast.constant(key.name, coord=key.coord)
    return key


def _as_boolean(expression: g_ast.Expression) -> g_ast.BooleanExpression:
    return g_ast.BooleanExpression(expression, coord=expression.coord)


def _is_command_name(type_ref: g_ast.TypeRef) -> bool:
    """Whether a would-be local type is really the name of a called method, as in ``println x``."""

    return (
        not type_ref.resolved
        and not type_ref.generics
        and not type_ref.is_array
        and type_ref.name[:1].islower()
    )


# endregion


class GroovyParser(Parser):
    log = logging.getLogger(__name__)
    debugfile = None

    tokens = GroovyLexer.tokens

    precedence = (
        ("right", ASSIGN, PLUSEQ, MINUSEQ, TIMESEQ, DIVEQ, MODEQ),
        ("right", QUESTION, COLON, ELVIS),
        ("left", LOR),
        ("left", LAND),
        ("left", BOR),
        ("left", XOR),
        ("left", BAND),
        ("nonassoc", EQ, NE, COMPARE),
        ("nonassoc", LT, LE, GT, GE, INSTANCEOF),
        ("nonassoc", RANGE, RANGE_EXCL),
        ("left", LSHIFT, RSHIFT, URSHIFT),
        ("left", PLUS, MINUS),
        ("left", TIMES, DIVIDE, MOD),
        ("right", UMINUS),
        ("right", POWER),
        ("left", AS),
        ("nonassoc", NEW_ARRAY),
        ("left", LBRACKET),
    )

    def __init__(self, source: "SourceUnit", text: Optional[str] = None) -> None:
        self.source = source
        self.text = source.text if text is None else text

    # ============================================================================
    # region ---- Error helpers
    # ============================================================================

    def _coord(self, p: Any) -> Optional[Coord]:
        try:
            return Coord(p.lineno, find_column(self.text, p.index), self.source.name)
        except AttributeError:
            return None

    def _error(self, message: str, coord: Optional[Coord]) -> None:
        self.source.add_error(message, coord)

    @override
    def error(self, token: Any) -> NoReturn:
        if token is None:
            coord = Coord(self.text.count("\n") + 1, find_column(self.text, len(self.text)), self.source.name)
            self.source.add_fatal_error("unexpected end of file", coord)

        value = "<newline>" if token.type == "NEWLINE" else token.value
        coord = Coord.from_token(self.text, token, self.source.name)
        self.source.add_fatal_error(f"unexpected token: {value}", coord)

    # endregion

    # ============================================================================
    # region ---- Tree helpers
    # ============================================================================

    def _build_module(self, items: list[Any]) -> g_ast.ModuleNode:
        module = g_ast.ModuleNode(self.source.name)
        statements: list[g_ast.Statement] = []

        for index, item in enumerate(items):
            if isinstance(item, g_ast.PackageNode):
                if index != 0:
                    self._error("Package definition should be the first statement", item.coord)
                else:
                    module.package = item
            elif isinstance(item, g_ast.ImportNode):
                self._add_import(module, item)
            elif isinstance(item, g_ast.ClassNode):
                module.classes.append(item)
            elif isinstance(item, g_ast.MethodNode):
                module.methods.append(item)
            else:
                statements.append(item)

        module.statement_block = g_ast.BlockStatement(statements)
        return module

    @staticmethod
    def _add_import(module: g_ast.ModuleNode, node: g_ast.ImportNode) -> None:
        if node.is_static and node.is_star:
            assert node.type is not None
            module.static_star_imports[node.type.name] = node
        elif node.is_static:
            assert node.alias is not None
            module.static_imports[node.alias] = node
        elif node.is_star:
            module.star_imports.append(node)
        else:
            module.imports.append(node)

    def _add_modifier(self, modifiers: _Modifiers, modifier: Any) -> _Modifiers:
        if isinstance(modifier, g_ast.AnnotationNode):
            modifiers.annotations.append(modifier)
            return modifiers

        flag, coord = modifier
        if modifiers.flags & flag:
            self._error(f"Cannot repeat modifier: {flag.name.lower()}", coord)
        modifiers.flags |= flag
        return modifiers

    def _class_header(
        self,
        modifiers: Optional[_Modifiers],
        name: str,
        generics: list[g_ast.GenericsType],
        superclass: Optional[g_ast.TypeRef],
        interfaces: list[g_ast.TypeRef],
        coord: Optional[Coord],
        *,
        interface: bool = False,
    ) -> g_ast.ClassNode:
        flags = modifiers.flags if modifiers else 0
        if interface:
            flags |= Modifier.INTERFACE | Modifier.ABSTRACT

        return g_ast.ClassNode(
            name,
            flags,
            superclass or g_ast.make_type(g_ast.OBJECT),
            interfaces,
            generics,
            annotations=modifiers.annotations if modifiers else [],
            coord=coord,
        )

    def _add_member(self, class_node: g_ast.ClassNode, member: Any) -> None:
        if isinstance(member, g_ast.BlockStatement):
            class_node.object_initializers.append(member)

        elif isinstance(member, g_ast.FieldNode):
            if class_node.is_interface:
                member.modifiers |= Modifier.PUBLIC | Modifier.STATIC | Modifier.FINAL
                class_node.fields.append(member)
            elif not member.modifiers & g_ast.ACCESS_MODIFIERS:
                property_modifiers = Modifier.PUBLIC | (member.modifiers & (Modifier.STATIC | Modifier.FINAL))
                member.modifiers |= Modifier.PRIVATE
                class_node.fields.append(member)
                class_node.properties.append(
                    g_ast.PropertyNode(member.name, member.type, member, property_modifiers, coord=member.coord)
                )
            else:
                class_node.fields.append(member)

        elif member.is_static_initializer:
            existing = class_node.get_static_initializer()
            if existing is None:
                class_node.methods.append(member)
            else:
                assert isinstance(existing.code, g_ast.BlockStatement)
                existing.code.statements.extend(member.code.statements)

        elif member.return_type is None and member.name == class_node.name_without_package:
            constructor = g_ast.ConstructorNode(
                g_ast.MethodNode.CONSTRUCTOR_NAME,
                g_ast.make_type(g_ast.VOID),
                member.parameters,
                member.modifiers,
                member.exceptions,
                member.code,
                member.annotations,
                coord=member.coord,
            )
            if constructor.code is None:
                self._error(f"Constructor of {class_node.name} must have a body", member.coord)
            class_node.constructors.append(constructor)

        else:
            if member.return_type is None:
                member.return_type = g_ast.make_type(g_ast.OBJECT)
            if class_node.is_interface:
                member.modifiers |= Modifier.ABSTRACT
            elif member.code is None and not member.is_abstract:
                self._error(
                    "You defined a method without a body. Try adding a body, or declare it abstract.", member.coord
                )
            class_node.methods.append(member)

    def _method(
        self,
        modifiers: Optional[_Modifiers],
        return_type: Optional[g_ast.TypeRef],
        name: str,
        parameters: list[g_ast.Parameter],
        exceptions: list[g_ast.TypeRef],
        code: Optional[g_ast.Statement],
        coord: Optional[Coord],
    ) -> g_ast.MethodNode:
        flags = modifiers.flags if modifiers else 0
        if not flags & g_ast.ACCESS_MODIFIERS:
            flags |= Modifier.PUBLIC
        annotations = modifiers.annotations if modifiers else []
        return g_ast.MethodNode(name, return_type, parameters, flags, exceptions, code, annotations, coord=coord)

    def _field(
        self,
        modifiers: Optional[_Modifiers],
        field_type: g_ast.TypeRef,
        name: str,
        initial: Optional[g_ast.Expression],
        coord: Optional[Coord],
    ) -> g_ast.FieldNode:
        flags = modifiers.flags if modifiers else 0
        annotations = modifiers.annotations if modifiers else []
        return g_ast.FieldNode(name, field_type, flags, initial, annotations, coord=coord)

    def _parameter(
        self,
        modifiers: Optional[_Modifiers],
        parameter_type: Optional[g_ast.TypeRef],
        name: str,
        initial: Optional[g_ast.Expression],
        coord: Optional[Coord],
    ) -> g_ast.Parameter:
        return g_ast.Parameter(
            parameter_type or g_ast.make_type(g_ast.OBJECT),
            name,
            initial,
            modifiers.flags if modifiers else 0,
            modifiers.annotations if modifiers else [],
            coord=coord,
        )

    def _declaration(
        self, var_type: g_ast.TypeRef, name: str, value: Optional[g_ast.Expression], coord: Optional[Coord]
    ) -> g_ast.DeclarationExpression:
        if var_type.name == g_ast.VOID:
            self._error(f"The variable '{name}' has invalid type void", coord)
        target = g_ast.VariableExpression(name, var_type, coord=coord)
        return g_ast.DeclarationExpression(target, "=", value or g_ast.EmptyExpression(), coord=coord)

    @staticmethod
    def _arguments(items: list[Any], coord: Optional[Coord]) -> g_ast.ArgumentListExpression:
        """Gather call arguments, moving named arguments into one leading map."""

        named = [item.entry for item in items if isinstance(item, _NamedArgument)]
        positional = [item for item in items if not isinstance(item, _NamedArgument)]
        if named:
            positional.insert(0, g_ast.MapExpression(named, coord=named[0].coord))
        return g_ast.ArgumentListExpression(positional, coord=coord)

    @staticmethod
    def _call(
        callee: g_ast.Expression, arguments: g_ast.ArgumentListExpression, coord: Optional[Coord]
    ) -> g_ast.Expression:
        if isinstance(callee, g_ast.PropertyExpression) and not isinstance(callee, g_ast.AttributeExpression):
            return g_ast.MethodCallExpression(
                callee.object_expression,
                callee.property,
                arguments,
                callee.safe,
                callee.spread_safe,
                coord=coord,
            )

        if isinstance(callee, g_ast.VariableExpression):
            if callee.is_this or callee.is_super:
                return g_ast.ConstructorCallExpression(None, arguments, callee.name, coord=coord)
            receiver = g_ast.VariableExpression(g_ast.THIS_MARKER, coord=callee.coord)
            return g_ast.MethodCallExpression(
                receiver, g_ast.constant(callee.name, coord=callee.coord), arguments, implicit_this=True, coord=coord
            )

        return g_ast.MethodCallExpression(callee, g_ast.constant("call"), arguments, coord=coord)

    def _gstring(self, raw: str, coord: Optional[Coord]) -> g_ast.Expression:
        strings: list[g_ast.ConstantExpression] = []
        values: list[g_ast.Expression] = []
        position = 0

        for match in _gstring_pattern.finditer(raw):
            strings.append(g_ast.constant(unescape(raw[position : match.start()])))
            if match.group("expr") is not None:
                values.append(self._embedded_expression(match.group("expr"), coord))
            else:
                first, *rest = match.group("path").split(".")
                value: g_ast.Expression = g_ast.VariableExpression(first, coord=coord)
                for part in rest:
                    value = g_ast.PropertyExpression(value, g_ast.constant(part), coord=coord)
                values.append(value)
            position = match.end()

        if not values:
            return g_ast.constant(unescape(raw), coord=coord)

        strings.append(g_ast.constant(unescape(raw[position:])))
        return g_ast.GStringExpression(raw, strings, values, coord=coord)

    def _embedded_expression(self, text: str, coord: Optional[Coord]) -> g_ast.Expression:
        """Parse the code of a ``${...}`` placeholder with a fresh lexer and parser."""

        if not text.strip():
            return g_ast.constant(None, coord=coord)

        lexer = GroovyLexer(self.source)
        module: g_ast.ModuleNode = type(self)(self.source, text).parse(lexer.tokenize(text))

        assert module.statement_block is not None
        statements = module.statement_block.statements
        if (
            module.classes
            or module.methods
            or len(statements) != 1
            or not isinstance(statements[0], g_ast.ExpressionStatement)
        ):
            self._error(f"Unsupported expression in GString: {text}", coord)
            return g_ast.constant(None, coord=coord)
        return statements[0].expression

    # endregion

    # ============================================================================
    # region ---- Grammar productions
    # ============================================================================

    # ---- Compilation unit

    @_("opt_seps")
    def compilation_unit(self, p: Any):
        return self._build_module([])

    @_("opt_seps top_items opt_seps")
    def compilation_unit(self, p: Any):
        return self._build_module(p.top_items)

    @_("top_item")
    def top_items(self, p: Any):
        return [p.top_item]

    @_("top_items seps top_item")
    def top_items(self, p: Any):
        p.top_items.append(p.top_item)
        return p.top_items

    @_("package_declaration", "import_declaration", "class_declaration", "method_declaration", "statement")
    def top_item(self, p: Any):
        return p[0]

    @_("NEWLINE", "SEMI", "seps NEWLINE", "seps SEMI")
    def seps(self, p: Any):
        return None

    @_("", "seps")
    def opt_seps(self, p: Any):
        return None

    # ---- Packages and imports

    @_("PACKAGE qualified_name")
    def package_declaration(self, p: Any):
        return g_ast.PackageNode(f"{p.qualified_name}.", coord=self._coord(p))

    @_("modifiers PACKAGE qualified_name")
    def package_declaration(self, p: Any):
        if p.modifiers.flags:
            self._error("Package definitions cannot have modifiers", self._coord(p))
        return g_ast.PackageNode(f"{p.qualified_name}.", p.modifiers.annotations, coord=self._coord(p))

    @_("IMPORT qualified_name")
    def import_declaration(self, p: Any):
        import_type = g_ast.TypeRef(p.qualified_name, coord=self._coord(p))
        return g_ast.ImportNode(import_type, import_type.name_without_package, coord=self._coord(p))

    @_("IMPORT qualified_name AS ID")
    def import_declaration(self, p: Any):
        return g_ast.ImportNode(g_ast.TypeRef(p.qualified_name, coord=self._coord(p)), p.ID, coord=self._coord(p))

    @_("IMPORT qualified_name DOT TIMES")
    def import_declaration(self, p: Any):
        return g_ast.ImportNode(package_name=f"{p.qualified_name}.", is_star=True, coord=self._coord(p))

    @_("IMPORT STATIC qualified_name", "IMPORT STATIC qualified_name AS ID")
    def import_declaration(self, p: Any):
        owner, _, field_name = p.qualified_name.rpartition(".")
        if not owner:
            self._error(f"Invalid static import of {field_name}", self._coord(p))
        alias = p.ID if len(p) == 5 else field_name
        return g_ast.ImportNode(
            g_ast.TypeRef(owner, coord=self._coord(p)),
            alias,
            field_name=field_name,
            is_static=True,
            coord=self._coord(p),
        )

    @_("IMPORT STATIC qualified_name DOT TIMES")
    def import_declaration(self, p: Any):
        return g_ast.ImportNode(
            g_ast.TypeRef(p.qualified_name, coord=self._coord(p)), is_star=True, is_static=True, coord=self._coord(p)
        )

    @_("ID")
    def qualified_name(self, p: Any):
        return p.ID

    @_("qualified_name DOT ID")
    def qualified_name(self, p: Any):
        return f"{p.qualified_name}.{p.ID}"

    # ---- Modifiers and annotations

    @_("modifier")
    def modifiers(self, p: Any):
        return self._add_modifier(_Modifiers(), p.modifier)

    @_("modifiers modifier")
    def modifiers(self, p: Any):
        return self._add_modifier(p.modifiers, p.modifier)

    @_(
        "PUBLIC",
        "PRIVATE",
        "PROTECTED",
        "STATIC",
        "FINAL",
        "ABSTRACT",
        "SYNCHRONIZED",
        "TRANSIENT",
        "VOLATILE",
        "NATIVE",
    )
    def modifier(self, p: Any):
        return Modifier.from_keyword(p[0]), self._coord(p)

    @_("annotation")
    def modifier(self, p: Any):
        return p.annotation

    @_("AT qualified_name", "AT qualified_name LPAREN RPAREN")
    def annotation(self, p: Any):
        return g_ast.AnnotationNode(g_ast.TypeRef(p.qualified_name, coord=self._coord(p)), coord=self._coord(p))

    @_("AT qualified_name LPAREN expression_list RPAREN")
    def annotation(self, p: Any):
        coord = self._coord(p)
        values = p.expression_list
        members: dict[str, g_ast.Expression] = {}

        if len(values) == 1 and not (isinstance(values[0], g_ast.BinaryExpression) and values[0].operation == "="):
            members["value"] = values[0]
        else:
            for value in values:
                if (
                    isinstance(value, g_ast.BinaryExpression)
                    and value.operation == "="
                    and isinstance(value.left_expression, g_ast.VariableExpression)
                ):
                    members[value.left_expression.name] = value.right_expression
                else:
                    self._error(f"Invalid member of annotation @{p.qualified_name}", coord)

        return g_ast.AnnotationNode(g_ast.TypeRef(p.qualified_name, coord=coord), members, coord=coord)

    # ---- Types

    @_("qualified_type")
    def member_type(self, p: Any):
        return p.qualified_type

    @_("qualified_type dims")
    def member_type(self, p: Any):
        return p.qualified_type.make_array(p.dims)

    @_("primitive_type", "dynamic_type")
    def member_type(self, p: Any):
        return p[0]

    @_("qualified_name")
    def qualified_type(self, p: Any):
        return g_ast.TypeRef(p.qualified_name, coord=self._coord(p))

    @_("qualified_name type_arguments")
    def qualified_type(self, p: Any):
        return g_ast.TypeRef(p.qualified_name, p.type_arguments, coord=self._coord(p))

    @_("ID")
    def local_type(self, p: Any):
        return g_ast.TypeRef(p.ID, coord=self._coord(p))

    @_("ID type_arguments")
    def local_type(self, p: Any):
        return g_ast.TypeRef(p.ID, p.type_arguments, coord=self._coord(p))

    @_("ID dims")
    def local_type(self, p: Any):
        return g_ast.TypeRef(p.ID, coord=self._coord(p)).make_array(p.dims)

    @_("ID type_arguments dims")
    def local_type(self, p: Any):
        return g_ast.TypeRef(p.ID, p.type_arguments, coord=self._coord(p)).make_array(p.dims)

    @_("primitive_type", "dynamic_type")
    def local_type(self, p: Any):
        return p[0]

    @_("PRIMITIVE")
    def primitive_type(self, p: Any):
        return g_ast.TypeRef(p.PRIMITIVE, resolved=True, coord=self._coord(p))

    @_("PRIMITIVE dims")
    def primitive_type(self, p: Any):
        return g_ast.TypeRef(p.PRIMITIVE, resolved=True, coord=self._coord(p)).make_array(p.dims)

    @_("DEF")
    def dynamic_type(self, p: Any):
        return g_ast.TypeRef(g_ast.OBJECT, resolved=True, coord=self._coord(p))

    @_("VOID")
    def dynamic_type(self, p: Any):
        return g_ast.TypeRef(g_ast.VOID, resolved=True, coord=self._coord(p))

    @_("DIMS")
    def dims(self, p: Any):
        return 1

    @_("dims DIMS")
    def dims(self, p: Any):
        return p.dims + 1

    @_("GENERIC_LT GENERIC_GT")
    def type_arguments(self, p: Any):
        return []

    @_("GENERIC_LT type_argument_list GENERIC_GT")
    def type_arguments(self, p: Any):
        return p.type_argument_list

    @_("type_argument")
    def type_argument_list(self, p: Any):
        return [p.type_argument]

    @_("type_argument_list COMMA type_argument")
    def type_argument_list(self, p: Any):
        p.type_argument_list.append(p.type_argument)
        return p.type_argument_list

    @_("member_type")
    def type_argument(self, p: Any):
        return g_ast.GenericsType(p.member_type.name, p.member_type, coord=p.member_type.coord)

    @_("QUESTION")
    def type_argument(self, p: Any):
        return g_ast.GenericsType("?", g_ast.make_type(g_ast.OBJECT), wildcard=True, coord=self._coord(p))

    @_("QUESTION EXTENDS member_type")
    def type_argument(self, p: Any):
        wildcard = g_ast.make_type(g_ast.OBJECT)
        return g_ast.GenericsType("?", wildcard, [p.member_type], wildcard=True, coord=self._coord(p))

    @_("QUESTION SUPER member_type")
    def type_argument(self, p: Any):
        wildcard = g_ast.make_type(g_ast.OBJECT)
        return g_ast.GenericsType("?", wildcard, lower_bound=p.member_type, wildcard=True, coord=self._coord(p))

    @_("", "generic_parameters")
    def opt_generic_parameters(self, p: Any):
        return p[0] if len(p) else []

    @_("GENERIC_LT generic_parameter_list GENERIC_GT")
    def generic_parameters(self, p: Any):
        return p.generic_parameter_list

    @_("generic_parameter")
    def generic_parameter_list(self, p: Any):
        return [p.generic_parameter]

    @_("generic_parameter_list COMMA generic_parameter")
    def generic_parameter_list(self, p: Any):
        p.generic_parameter_list.append(p.generic_parameter)
        return p.generic_parameter_list

    @_("ID")
    def generic_parameter(self, p: Any):
        placeholder = g_ast.TypeRef(p.ID, placeholder=True, coord=self._coord(p))
        return g_ast.GenericsType(p.ID, placeholder, placeholder=True, coord=self._coord(p))

    @_("ID EXTENDS bound_list")
    def generic_parameter(self, p: Any):
        placeholder = g_ast.TypeRef(p.ID, placeholder=True, coord=self._coord(p))
        return g_ast.GenericsType(p.ID, placeholder, p.bound_list, placeholder=True, coord=self._coord(p))

    @_("member_type")
    def bound_list(self, p: Any):
        return [p.member_type]

    @_("bound_list BAND member_type")
    def bound_list(self, p: Any):
        p.bound_list.append(p.member_type)
        return p.bound_list

    @_("member_type")
    def type_list(self, p: Any):
        return [p.member_type]

    @_("type_list COMMA member_type")
    def type_list(self, p: Any):
        p.type_list.append(p.member_type)
        return p.type_list

    # ---- Classes

    @_("class_header class_body")
    def class_declaration(self, p: Any):
        class_node = p.class_header
        for member in p.class_body:
            self._add_member(class_node, member)
        return class_node

    @_("CLASS ID opt_generic_parameters opt_extends opt_implements")
    def class_header(self, p: Any):
        return self._class_header(
            None, p.ID, p.opt_generic_parameters, p.opt_extends, p.opt_implements, self._coord(p)
        )

    @_("modifiers CLASS ID opt_generic_parameters opt_extends opt_implements")
    def class_header(self, p: Any):
        return self._class_header(
            p.modifiers, p.ID, p.opt_generic_parameters, p.opt_extends, p.opt_implements, self._coord(p)
        )

    @_("INTERFACE ID opt_generic_parameters opt_interface_extends")
    def class_header(self, p: Any):
        return self._class_header(
            None, p.ID, p.opt_generic_parameters, None, p.opt_interface_extends, self._coord(p), interface=True
        )

    @_("modifiers INTERFACE ID opt_generic_parameters opt_interface_extends")
    def class_header(self, p: Any):
        return self._class_header(
            p.modifiers,
            p.ID,
            p.opt_generic_parameters,
            None,
            p.opt_interface_extends,
            self._coord(p),
            interface=True,
        )

    @_("")
    def opt_extends(self, p: Any):
        return None

    @_("EXTENDS member_type")
    def opt_extends(self, p: Any):
        return p.member_type

    @_("")
    def opt_implements(self, p: Any):
        return []

    @_("IMPLEMENTS type_list")
    def opt_implements(self, p: Any):
        return p.type_list

    @_("")
    def opt_interface_extends(self, p: Any):
        return []

    @_("EXTENDS type_list")
    def opt_interface_extends(self, p: Any):
        return p.type_list

    @_("LBRACE RBRACE")
    def class_body(self, p: Any):
        return []

    @_("LBRACE members opt_seps RBRACE")
    def class_body(self, p: Any):
        return p.members

    @_("member")
    def members(self, p: Any):
        return [p.member]

    @_("members seps member")
    def members(self, p: Any):
        p.members.append(p.member)
        return p.members

    @_("member_type ID")
    def member(self, p: Any):
        return self._field(None, p.member_type, p.ID, None, self._coord(p))

    @_("member_type ID ASSIGN expr")
    def member(self, p: Any):
        return self._field(None, p.member_type, p.ID, p.expr, self._coord(p))

    @_("modifiers member_type ID")
    def member(self, p: Any):
        return self._field(p.modifiers, p.member_type, p.ID, None, self._coord(p))

    @_("modifiers member_type ID ASSIGN expr")
    def member(self, p: Any):
        return self._field(p.modifiers, p.member_type, p.ID, p.expr, self._coord(p))

    @_("modifiers ID")
    def member(self, p: Any):
        return self._field(p.modifiers, g_ast.make_type(g_ast.OBJECT), p.ID, None, self._coord(p))

    @_("modifiers ID ASSIGN expr")
    def member(self, p: Any):
        return self._field(p.modifiers, g_ast.make_type(g_ast.OBJECT), p.ID, p.expr, self._coord(p))

    @_("member_type ID LPAREN opt_parameters RPAREN opt_throws method_body")
    def member(self, p: Any):
        return self._method(
            None, p.member_type, p.ID, p.opt_parameters, p.opt_throws, p.method_body, self._coord(p)
        )

    @_("modifiers member_type ID LPAREN opt_parameters RPAREN opt_throws method_body")
    def member(self, p: Any):
        return self._method(
            p.modifiers, p.member_type, p.ID, p.opt_parameters, p.opt_throws, p.method_body, self._coord(p)
        )

    @_("ID LPAREN opt_parameters RPAREN opt_throws method_body")
    def member(self, p: Any):
        return self._method(None, None, p.ID, p.opt_parameters, p.opt_throws, p.method_body, self._coord(p))

    @_("modifiers ID LPAREN opt_parameters RPAREN opt_throws method_body")
    def member(self, p: Any):
        return self._method(
            p.modifiers, None, p.ID, p.opt_parameters, p.opt_throws, p.method_body, self._coord(p)
        )

    @_("STATIC block")
    def member(self, p: Any):
        return g_ast.MethodNode(
            g_ast.MethodNode.STATIC_INITIALIZER_NAME,
            g_ast.make_type(g_ast.VOID),
            modifiers=Modifier.STATIC,
            code=p.block,
            coord=self._coord(p),
        )

    @_("block")
    def member(self, p: Any):
        return p.block

    @_("")
    def method_body(self, p: Any):
        return None

    @_("block")
    def method_body(self, p: Any):
        return p.block

    @_("")
    def opt_parameters(self, p: Any):
        return []

    @_("parameters")
    def opt_parameters(self, p: Any):
        return p.parameters

    @_("parameter")
    def parameters(self, p: Any):
        return [p.parameter]

    @_("parameters COMMA parameter")
    def parameters(self, p: Any):
        p.parameters.append(p.parameter)
        return p.parameters

    @_("ID")
    def parameter(self, p: Any):
        return self._parameter(None, None, p.ID, None, self._coord(p))

    @_("ID ASSIGN expr")
    def parameter(self, p: Any):
        return self._parameter(None, None, p.ID, p.expr, self._coord(p))

    @_("member_type ID")
    def parameter(self, p: Any):
        return self._parameter(None, p.member_type, p.ID, None, self._coord(p))

    @_("member_type ID ASSIGN expr")
    def parameter(self, p: Any):
        return self._parameter(None, p.member_type, p.ID, p.expr, self._coord(p))

    @_("modifiers member_type ID")
    def parameter(self, p: Any):
        return self._parameter(p.modifiers, p.member_type, p.ID, None, self._coord(p))

    @_("modifiers member_type ID ASSIGN expr")
    def parameter(self, p: Any):
        return self._parameter(p.modifiers, p.member_type, p.ID, p.expr, self._coord(p))

    @_("")
    def opt_throws(self, p: Any):
        return []

    @_("THROWS type_list")
    def opt_throws(self, p: Any):
        return p.type_list

    # ---- Script methods

    @_("local_type ID LPAREN opt_parameters RPAREN opt_throws block")
    def method_declaration(self, p: Any):
        return self._method(None, p.local_type, p.ID, p.opt_parameters, p.opt_throws, p.block, self._coord(p))

    @_("modifiers local_type ID LPAREN opt_parameters RPAREN opt_throws block")
    def method_declaration(self, p: Any):
        return self._method(
            p.modifiers, p.local_type, p.ID, p.opt_parameters, p.opt_throws, p.block, self._coord(p)
        )

    @_("modifiers ID LPAREN opt_parameters RPAREN opt_throws block")
    def method_declaration(self, p: Any):
        return self._method(
            p.modifiers,
            g_ast.make_type(g_ast.OBJECT),
            p.ID,
            p.opt_parameters,
            p.opt_throws,
            p.block,
            self._coord(p),
        )

    # ---- Blocks and statements

    @_("LBRACE RBRACE")
    def block(self, p: Any):
        return g_ast.BlockStatement([], coord=self._coord(p))

    @_("LBRACE statements opt_seps RBRACE")
    def block(self, p: Any):
        return g_ast.BlockStatement(p.statements, coord=self._coord(p))

    @_("statement")
    def statements(self, p: Any):
        return [p.statement]

    @_("statements seps statement")
    def statements(self, p: Any):
        p.statements.append(p.statement)
        return p.statements

    @_("local_declaration", "expr", "command")
    def statement(self, p: Any):
        return g_ast.ExpressionStatement(p[0], coord=p[0].coord)

    @_(
        "if_statement",
        "while_statement",
        "do_statement",
        "for_statement",
        "switch_statement",
        "try_statement",
        "synchronized_statement",
    )
    def statement(self, p: Any):
        return p[0]

    @_("RETURN")
    def statement(self, p: Any):
        return g_ast.ReturnStatement(g_ast.EmptyExpression(), coord=self._coord(p))

    @_("RETURN expr")
    def statement(self, p: Any):
        return g_ast.ReturnStatement(p.expr, coord=self._coord(p))

    @_("THROW expr")
    def statement(self, p: Any):
        return g_ast.ThrowStatement(p.expr, coord=self._coord(p))

    @_("BREAK")
    def statement(self, p: Any):
        return g_ast.BreakStatement(coord=self._coord(p))

    @_("CONTINUE")
    def statement(self, p: Any):
        return g_ast.ContinueStatement(coord=self._coord(p))

    @_("ASSERT expr")
    def statement(self, p: Any):
        return g_ast.AssertStatement(_as_boolean(p.expr), g_ast.constant(None), coord=self._coord(p))

    @_("ASSERT expr COLON expr", "ASSERT expr COMMA expr")
    def statement(self, p: Any):
        return g_ast.AssertStatement(_as_boolean(p.expr0), p.expr1, coord=self._coord(p))

    @_("local_type ID")
    def local_declaration(self, p: Any):
        var_type = p.local_type
        if _is_command_name(var_type):
            # `println x`: a lowercase bare name followed by a name is a one-argument command call.
            callee = g_ast.VariableExpression(var_type.name, coord=var_type.coord)
            argument = g_ast.VariableExpression(p.ID, coord=self._coord(p))
            return self._call(callee, g_ast.ArgumentListExpression([argument], coord=self._coord(p)), var_type.coord)
        return self._declaration(var_type, p.ID, None, self._coord(p))

    @_("local_type ID ASSIGN expr")
    def local_declaration(self, p: Any):
        return self._declaration(p.local_type, p.ID, p.expr, self._coord(p))

    @_("modifiers local_type ID")
    def local_declaration(self, p: Any):
        return self._declaration(p.local_type, p.ID, None, self._coord(p))

    @_("modifiers local_type ID ASSIGN expr")
    def local_declaration(self, p: Any):
        return self._declaration(p.local_type, p.ID, p.expr, self._coord(p))

    @_("modifiers ID ASSIGN expr")
    def local_declaration(self, p: Any):
        return self._declaration(g_ast.make_type(g_ast.OBJECT), p.ID, p.expr, self._coord(p))

    @_("DEF LPAREN variable_list RPAREN ASSIGN expr")
    def local_declaration(self, p: Any):
        targets = g_ast.ArgumentListExpression(p.variable_list, coord=self._coord(p))
        return g_ast.DeclarationExpression(targets, "=", p.expr, coord=self._coord(p))

    @_("ID")
    def variable_list(self, p: Any):
        return [g_ast.VariableExpression(p.ID, g_ast.make_type(g_ast.OBJECT), coord=self._coord(p))]

    @_("variable_list COMMA ID")
    def variable_list(self, p: Any):
        p.variable_list.append(g_ast.VariableExpression(p.ID, g_ast.make_type(g_ast.OBJECT), coord=self._coord(p)))
        return p.variable_list

    @_("ID command_arguments")
    def command(self, p: Any):
        callee = g_ast.VariableExpression(p.ID, coord=self._coord(p))
        return self._call(callee, self._arguments(p.command_arguments, self._coord(p)), self._coord(p))

    @_("postfix DOT name command_arguments")
    def command(self, p: Any):
        callee = g_ast.PropertyExpression(p.postfix, g_ast.constant(p.name), coord=p.postfix.coord)
        return self._call(callee, self._arguments(p.command_arguments, self._coord(p)), p.postfix.coord)

    @_("literal")
    def command_arguments(self, p: Any):
        return [p.literal]

    @_("literal COMMA call_arguments")
    def command_arguments(self, p: Any):
        return [p.literal, *p.call_arguments]

    # ---- Control flow

    @_("IF LPAREN expr RPAREN block")
    def if_statement(self, p: Any):
        return g_ast.IfStatement(_as_boolean(p.expr), p.block, g_ast.EmptyStatement(), coord=self._coord(p))

    @_("IF LPAREN expr RPAREN block ELSE block")
    def if_statement(self, p: Any):
        return g_ast.IfStatement(_as_boolean(p.expr), p.block0, p.block1, coord=self._coord(p))

    @_("IF LPAREN expr RPAREN block ELSE if_statement")
    def if_statement(self, p: Any):
        return g_ast.IfStatement(_as_boolean(p.expr), p.block, p.if_statement, coord=self._coord(p))

    @_("WHILE LPAREN expr RPAREN block")
    def while_statement(self, p: Any):
        return g_ast.WhileStatement(_as_boolean(p.expr), p.block, coord=self._coord(p))

    @_("DO block WHILE LPAREN expr RPAREN")
    def do_statement(self, p: Any):
        return g_ast.DoWhileStatement(_as_boolean(p.expr), p.block, coord=self._coord(p))

    @_("FOR LPAREN ID IN expr RPAREN block")
    def for_statement(self, p: Any):
        variable = self._parameter(None, None, p.ID, None, self._coord(p))
        return g_ast.ForStatement(variable, p.expr, p.block, coord=self._coord(p))

    @_("FOR LPAREN local_type ID IN expr RPAREN block", "FOR LPAREN local_type ID COLON expr RPAREN block")
    def for_statement(self, p: Any):
        variable = self._parameter(None, p.local_type, p.ID, None, self._coord(p))
        return g_ast.ForStatement(variable, p.expr, p.block, coord=self._coord(p))

    @_("FOR LPAREN for_init SEMI for_condition SEMI for_update RPAREN block")
    def for_statement(self, p: Any):
        loop = g_ast.ClosureListExpression([p.for_init, p.for_condition, p.for_update], coord=self._coord(p))
        return g_ast.ForStatement(None, loop, p.block, coord=self._coord(p))

    @_("")
    def for_init(self, p: Any):
        return g_ast.EmptyExpression()

    @_("local_declaration")
    def for_init(self, p: Any):
        return p.local_declaration

    @_("expression_list")
    def for_init(self, p: Any):
        if len(p.expression_list) == 1:
            return p.expression_list[0]
        return g_ast.ClosureListExpression(p.expression_list)

    @_("")
    def for_condition(self, p: Any):
        return g_ast.EmptyExpression()

    @_("expr")
    def for_condition(self, p: Any):
        return _as_boolean(p.expr)

    @_("")
    def for_update(self, p: Any):
        return g_ast.EmptyExpression()

    @_("expression_list")
    def for_update(self, p: Any):
        if len(p.expression_list) == 1:
            return p.expression_list[0]
        return g_ast.ClosureListExpression(p.expression_list)

    @_("SWITCH LPAREN expr RPAREN LBRACE RBRACE")
    def switch_statement(self, p: Any):
        return g_ast.SwitchStatement(p.expr, [], g_ast.EmptyStatement(), coord=self._coord(p))

    @_("SWITCH LPAREN expr RPAREN LBRACE case_groups RBRACE")
    def switch_statement(self, p: Any):
        cases: list[g_ast.CaseStatement] = []
        default: Optional[g_ast.Statement] = None

        for case in p.case_groups:
            if isinstance(case, g_ast.CaseStatement):
                cases.append(case)
            elif default is not None:
                self._error("A switch statement may only have one default branch", case.coord)
            else:
                default = case

        return g_ast.SwitchStatement(p.expr, cases, default or g_ast.EmptyStatement(), coord=self._coord(p))

    @_("case_group")
    def case_groups(self, p: Any):
        return [p.case_group]

    @_("case_groups case_group")
    def case_groups(self, p: Any):
        p.case_groups.append(p.case_group)
        return p.case_groups

    @_("CASE expr COLON")
    def case_group(self, p: Any):
        return g_ast.CaseStatement(p.expr, g_ast.BlockStatement([]), coord=self._coord(p))

    @_("CASE expr COLON statements opt_seps")
    def case_group(self, p: Any):
        return g_ast.CaseStatement(p.expr, g_ast.BlockStatement(p.statements), coord=self._coord(p))

    @_("DEFAULT COLON")
    def case_group(self, p: Any):
        return g_ast.BlockStatement([], coord=self._coord(p))

    @_("DEFAULT COLON statements opt_seps")
    def case_group(self, p: Any):
        return g_ast.BlockStatement(p.statements, coord=self._coord(p))

    @_("TRY block catches")
    def try_statement(self, p: Any):
        return g_ast.TryCatchStatement(p.block, p.catches, g_ast.EmptyStatement(), coord=self._coord(p))

    @_("TRY block catches FINALLY block")
    def try_statement(self, p: Any):
        return g_ast.TryCatchStatement(p.block0, p.catches, p.block1, coord=self._coord(p))

    @_("TRY block FINALLY block")
    def try_statement(self, p: Any):
        return g_ast.TryCatchStatement(p.block0, [], p.block1, coord=self._coord(p))

    @_("catch_clause")
    def catches(self, p: Any):
        return [p.catch_clause]

    @_("catches catch_clause")
    def catches(self, p: Any):
        p.catches.append(p.catch_clause)
        return p.catches

    @_("CATCH LPAREN member_type ID RPAREN block")
    def catch_clause(self, p: Any):
        variable = self._parameter(None, p.member_type, p.ID, None, self._coord(p))
        return g_ast.CatchStatement(variable, p.block, coord=self._coord(p))

    @_("CATCH LPAREN ID RPAREN block")
    def catch_clause(self, p: Any):
        variable = self._parameter(None, g_ast.TypeRef("Exception", coord=self._coord(p)), p.ID, None, self._coord(p))
        return g_ast.CatchStatement(variable, p.block, coord=self._coord(p))

    @_("SYNCHRONIZED LPAREN expr RPAREN block")
    def synchronized_statement(self, p: Any):
        return g_ast.SynchronizedStatement(p.expr, p.block, coord=self._coord(p))

    # ---- Expressions

    @_(
        "expr ASSIGN expr",
        "expr PLUSEQ expr",
        "expr MINUSEQ expr",
        "expr TIMESEQ expr",
        "expr DIVEQ expr",
        "expr MODEQ expr",
        "expr LOR expr",
        "expr LAND expr",
        "expr BOR expr",
        "expr XOR expr",
        "expr BAND expr",
        "expr EQ expr",
        "expr NE expr",
        "expr COMPARE expr",
        "expr LT expr",
        "expr LE expr",
        "expr GT expr",
        "expr GE expr",
        "expr LSHIFT expr",
        "expr RSHIFT expr",
        "expr URSHIFT expr",
        "expr PLUS expr",
        "expr MINUS expr",
        "expr TIMES expr",
        "expr DIVIDE expr",
        "expr MOD expr",
        "expr POWER expr",
    )
    def expr(self, p: Any):
        return g_ast.BinaryExpression(p.expr0, p[1], p.expr1, coord=p.expr0.coord)

    @_("expr QUESTION expr COLON expr")
    def expr(self, p: Any):
        return g_ast.TernaryExpression(_as_boolean(p.expr0), p.expr1, p.expr2, coord=p.expr0.coord)

    @_("expr ELVIS expr")
    def expr(self, p: Any):
        return g_ast.ElvisOperatorExpression(_as_boolean(p.expr0), p.expr0, p.expr1, coord=p.expr0.coord)

    @_("expr INSTANCEOF local_type")
    def expr(self, p: Any):
        target = g_ast.ClassExpression(p.local_type, coord=p.local_type.coord)
        return g_ast.BinaryExpression(p.expr, "instanceof", target, coord=p.expr.coord)

    @_("expr AS local_type")
    def expr(self, p: Any):
        return g_ast.CastExpression(p.local_type, p.expr, coord=p.expr.coord)

    @_("expr RANGE expr")
    def expr(self, p: Any):
        return g_ast.RangeExpression(p.expr0, p.expr1, coord=p.expr0.coord)

    @_("expr RANGE_EXCL expr")
    def expr(self, p: Any):
        return g_ast.RangeExpression(p.expr0, p.expr1, inclusive=False, coord=p.expr0.coord)

    @_("MINUS expr %prec UMINUS")
    def expr(self, p: Any):
        operand = p.expr
        if isinstance(operand, g_ast.ConstantExpression) and isinstance(operand.value, (int, float, Decimal)):
            return g_ast.ConstantExpression(-operand.value, operand.type, coord=self._coord(p))
        return g_ast.UnaryMinusExpression(operand, coord=self._coord(p))

    @_("PLUS expr %prec UMINUS")
    def expr(self, p: Any):
        return g_ast.UnaryPlusExpression(p.expr, coord=self._coord(p))

    @_("NOT expr %prec UMINUS")
    def expr(self, p: Any):
        return g_ast.NotExpression(p.expr, coord=self._coord(p))

    @_("BNOT expr %prec UMINUS")
    def expr(self, p: Any):
        return g_ast.BitwiseNegationExpression(p.expr, coord=self._coord(p))

    @_("PLUSPLUS expr %prec UMINUS", "MINUSMINUS expr %prec UMINUS")
    def expr(self, p: Any):
        return g_ast.PrefixExpression(p.expr, p[0], coord=self._coord(p))

    @_("postfix")
    def expr(self, p: Any):
        return p.postfix

    @_("primary")
    def postfix(self, p: Any):
        return p.primary

    @_("postfix DOT name")
    def postfix(self, p: Any):
        return g_ast.PropertyExpression(p.postfix, g_ast.constant(p.name), coord=p.postfix.coord)

    @_("postfix SAFE_DOT name")
    def postfix(self, p: Any):
        return g_ast.PropertyExpression(p.postfix, g_ast.constant(p.name), safe=True, coord=p.postfix.coord)

    @_("postfix SPREAD_DOT name")
    def postfix(self, p: Any):
        return g_ast.PropertyExpression(p.postfix, g_ast.constant(p.name), spread_safe=True, coord=p.postfix.coord)

    @_("postfix ATTR_DOT name")
    def postfix(self, p: Any):
        return g_ast.AttributeExpression(p.postfix, g_ast.constant(p.name), coord=p.postfix.coord)

    @_("postfix METHOD_POINTER name")
    def postfix(self, p: Any):
        return g_ast.MethodPointerExpression(p.postfix, g_ast.constant(p.name), coord=p.postfix.coord)

    @_("postfix LPAREN RPAREN")
    def postfix(self, p: Any):
        return self._call(p.postfix, self._arguments([], self._coord(p)), p.postfix.coord)

    @_("postfix LPAREN call_arguments RPAREN")
    def postfix(self, p: Any):
        return self._call(p.postfix, self._arguments(p.call_arguments, self._coord(p)), p.postfix.coord)

    @_("postfix closure")
    def postfix(self, p: Any):
        callee = p.postfix
        arguments = getattr(callee, "arguments", None)
        if isinstance(callee, g_ast.MethodCallExpression) and isinstance(arguments, g_ast.ArgumentListExpression):
            arguments.expressions.append(p.closure)
            return callee
        return self._call(callee, g_ast.ArgumentListExpression([p.closure], coord=p.closure.coord), callee.coord)

    @_("postfix LBRACKET expr RBRACKET")
    def postfix(self, p: Any):
        return g_ast.BinaryExpression(p.postfix, "[", p.expr, coord=p.postfix.coord)

    @_("postfix PLUSPLUS", "postfix MINUSMINUS")
    def postfix(self, p: Any):
        return g_ast.PostfixExpression(p.postfix, p[1], coord=p.postfix.coord)

    @_("ID", "CLASS")
    def name(self, p: Any):
        return p[0]

    @_("call_argument")
    def call_arguments(self, p: Any):
        return [p.call_argument]

    @_("call_arguments COMMA call_argument")
    def call_arguments(self, p: Any):
        p.call_arguments.append(p.call_argument)
        return p.call_arguments

    @_("expr")
    def call_argument(self, p: Any):
        return p.expr

    @_("expr COLON expr")
    def call_argument(self, p: Any):
        entry = g_ast.MapEntryExpression(_map_key(p.expr0), p.expr1, coord=p.expr0.coord)
        return _NamedArgument(entry)

    @_("TIMES expr")
    def call_argument(self, p: Any):
        return g_ast.SpreadExpression(p.expr, coord=self._coord(p))

    @_("TIMES COLON expr")
    def call_argument(self, p: Any):
        spread = g_ast.SpreadMapExpression(p.expr, coord=self._coord(p))
        return _NamedArgument(g_ast.MapEntryExpression(spread, p.expr, coord=self._coord(p)))

    @_("expr")
    def expression_list(self, p: Any):
        return [p.expr]

    @_("expression_list COMMA expr")
    def expression_list(self, p: Any):
        p.expression_list.append(p.expr)
        return p.expression_list

    # ---- Primaries

    @_("literal")
    def primary(self, p: Any):
        return p.literal

    @_("ID")
    def primary(self, p: Any):
        return g_ast.VariableExpression(p.ID, coord=self._coord(p))

    @_("THIS", "SUPER")
    def primary(self, p: Any):
        return g_ast.VariableExpression(p[0], coord=self._coord(p))

    @_("LPAREN expr RPAREN")
    def primary(self, p: Any):
        return p.expr

    @_("DIMS")
    def primary(self, p: Any):
        return g_ast.ListExpression([], coord=self._coord(p))

    @_("LBRACKET expression_list RBRACKET", "LBRACKET expression_list COMMA RBRACKET")
    def primary(self, p: Any):
        return g_ast.ListExpression(p.expression_list, coord=self._coord(p))

    @_("LBRACKET COLON RBRACKET")
    def primary(self, p: Any):
        return g_ast.MapExpression([], coord=self._coord(p))

    @_("LBRACKET map_entries RBRACKET", "LBRACKET map_entries COMMA RBRACKET")
    def primary(self, p: Any):
        return g_ast.MapExpression(p.map_entries, coord=self._coord(p))

    @_("closure", "creator")
    def primary(self, p: Any):
        return p[0]

    @_("map_entry")
    def map_entries(self, p: Any):
        return [p.map_entry]

    @_("map_entries COMMA map_entry")
    def map_entries(self, p: Any):
        p.map_entries.append(p.map_entry)
        return p.map_entries

    @_("expr COLON expr")
    def map_entry(self, p: Any):
        return g_ast.MapEntryExpression(_map_key(p.expr0), p.expr1, coord=p.expr0.coord)

    @_("TIMES COLON expr")
    def map_entry(self, p: Any):
        spread = g_ast.SpreadMapExpression(p.expr, coord=self._coord(p))
        return g_ast.MapEntryExpression(spread, p.expr, coord=self._coord(p))

    @_("INTEGER")
    def literal(self, p: Any):
        return _integer_constant(p.INTEGER, self._coord(p))

    @_("DECIMAL")
    def literal(self, p: Any):
        return _decimal_constant(p.DECIMAL, self._coord(p))

    @_("STRING")
    def literal(self, p: Any):
        return g_ast.constant(p.STRING, coord=self._coord(p))

    @_("GSTRING")
    def literal(self, p: Any):
        return self._gstring(p.GSTRING, self._coord(p))

    @_("TRUE", "FALSE")
    def literal(self, p: Any):
        return g_ast.constant(p[0] == "true", coord=self._coord(p))

    @_("NULL")
    def literal(self, p: Any):
        return g_ast.constant(None, coord=self._coord(p))

    # ---- Closures

    @_("LBRACE RBRACE")
    def closure(self, p: Any):
        return g_ast.ClosureExpression(None, g_ast.BlockStatement([]), coord=self._coord(p))

    @_("LBRACE statements opt_seps RBRACE")
    def closure(self, p: Any):
        return g_ast.ClosureExpression(None, g_ast.BlockStatement(p.statements), coord=self._coord(p))

    @_("LBRACE ARROW RBRACE")
    def closure(self, p: Any):
        return g_ast.ClosureExpression([], g_ast.BlockStatement([]), coord=self._coord(p))

    @_("LBRACE ARROW statements opt_seps RBRACE")
    def closure(self, p: Any):
        return g_ast.ClosureExpression([], g_ast.BlockStatement(p.statements), coord=self._coord(p))

    @_("LBRACE closure_parameters ARROW RBRACE")
    def closure(self, p: Any):
        return g_ast.ClosureExpression(p.closure_parameters, g_ast.BlockStatement([]), coord=self._coord(p))

    @_("LBRACE closure_parameters ARROW statements opt_seps RBRACE")
    def closure(self, p: Any):
        code = g_ast.BlockStatement(p.statements)
        return g_ast.ClosureExpression(p.closure_parameters, code, coord=self._coord(p))

    @_("closure_parameter")
    def closure_parameters(self, p: Any):
        return [p.closure_parameter]

    @_("closure_parameters COMMA closure_parameter")
    def closure_parameters(self, p: Any):
        p.closure_parameters.append(p.closure_parameter)
        return p.closure_parameters

    @_("ID")
    def closure_parameter(self, p: Any):
        return self._parameter(None, None, p.ID, None, self._coord(p))

    @_("local_type ID")
    def closure_parameter(self, p: Any):
        return self._parameter(None, p.local_type, p.ID, None, self._coord(p))

    # ---- Object and array creation

    @_("NEW qualified_type LPAREN RPAREN")
    def creator(self, p: Any):
        return g_ast.ConstructorCallExpression(
            p.qualified_type, self._arguments([], self._coord(p)), coord=self._coord(p)
        )

    @_("NEW qualified_type LPAREN call_arguments RPAREN")
    def creator(self, p: Any):
        arguments = self._arguments(p.call_arguments, self._coord(p))
        return g_ast.ConstructorCallExpression(p.qualified_type, arguments, coord=self._coord(p))

    @_("NEW qualified_type array_sizes %prec NEW_ARRAY", "NEW primitive_type array_sizes %prec NEW_ARRAY")
    def creator(self, p: Any):
        return g_ast.ArrayExpression(p[1], [], p.array_sizes, coord=self._coord(p))

    @_("NEW qualified_type DIMS LBRACE RBRACE", "NEW primitive_type DIMS LBRACE RBRACE")
    def creator(self, p: Any):
        return g_ast.ArrayExpression(p[1], [], coord=self._coord(p))

    @_("NEW qualified_type DIMS LBRACE expression_list RBRACE", "NEW primitive_type DIMS LBRACE expression_list RBRACE")
    def creator(self, p: Any):
        return g_ast.ArrayExpression(p[1], p.expression_list, coord=self._coord(p))

    @_("LBRACKET expr RBRACKET")
    def array_sizes(self, p: Any):
        return [p.expr]

    @_("array_sizes LBRACKET expr RBRACKET")
    def array_sizes(self, p: Any):
        p.array_sizes.append(p.expr)
        return p.array_sizes

    # endregion
