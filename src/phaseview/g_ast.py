# ruff: noqa: A002, A003
"""Syntax tree nodes for the Groovy subset, and tools to walk, compare and display them."""

import contextlib
import enum
from collections import deque
from collections.abc import Generator, Iterator, MutableSequence
from io import StringIO
from types import GeneratorType
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

from ._datum import Datum, all_clues
from ._typing_compat import override

if TYPE_CHECKING:
    from .utils import Coord

__all__ = (
    # Modifiers and types
    "Modifier",
    "TypeRef",
    "GenericsType",
    "make_type",
    "array_descriptor",
    "split_array_descriptor",
    "primitive_of",
    "is_static_constant_initializer_type",
    # Declarations
    "Node",
    "AnnotationNode",
    "PackageNode",
    "ImportNode",
    "ModuleNode",
    "ClassNode",
    "FieldNode",
    "PropertyNode",
    "Parameter",
    "MethodNode",
    "ConstructorNode",
    # Statements
    "Statement",
    "BlockStatement",
    "ExpressionStatement",
    "ReturnStatement",
    "IfStatement",
    "ForStatement",
    "WhileStatement",
    "DoWhileStatement",
    "SwitchStatement",
    "CaseStatement",
    "BreakStatement",
    "ContinueStatement",
    "TryCatchStatement",
    "CatchStatement",
    "ThrowStatement",
    "SynchronizedStatement",
    "AssertStatement",
    "EmptyStatement",
    # Expressions
    "Expression",
    "ConstantExpression",
    "VariableExpression",
    "PropertyExpression",
    "AttributeExpression",
    "FieldExpression",
    "ClassExpression",
    "MethodCallExpression",
    "StaticMethodCallExpression",
    "ConstructorCallExpression",
    "BinaryExpression",
    "DeclarationExpression",
    "PostfixExpression",
    "PrefixExpression",
    "NotExpression",
    "UnaryMinusExpression",
    "UnaryPlusExpression",
    "BitwiseNegationExpression",
    "BooleanExpression",
    "TernaryExpression",
    "ElvisOperatorExpression",
    "CastExpression",
    "RangeExpression",
    "ClosureExpression",
    "ClosureListExpression",
    "TupleExpression",
    "ArgumentListExpression",
    "ListExpression",
    "MapExpression",
    "MapEntryExpression",
    "SpreadExpression",
    "SpreadMapExpression",
    "GStringExpression",
    "MethodPointerExpression",
    "ArrayExpression",
    "EmptyExpression",
    "BytecodeExpression",
    "constant",
    # Utilities
    "compare",
    "iter_child_nodes",
    "walk",
    "NodeVisitor",
    "dump",
)


# ============================================================================
# region -------- Modifiers and type references
# ============================================================================


class Modifier(enum.IntFlag):
    """Modifier bits, with the same values the JVM uses."""

    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SYNCHRONIZED = 0x0020
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    NATIVE = 0x0100
    INTERFACE = 0x0200
    ABSTRACT = 0x0400

    @classmethod
    def from_keyword(cls, word: str) -> "Modifier":
        return cls[word.upper()]


ACCESS_MODIFIERS = Modifier.PUBLIC | Modifier.PRIVATE | Modifier.PROTECTED

OBJECT = "java.lang.Object"
STRING = "java.lang.String"
VOID = "void"
SUPER_MARKER = "super"
THIS_MARKER = "this"

PRIMITIVES = frozenset({"boolean", "byte", "char", "short", "int", "long", "float", "double"})

_WRAPPERS = {
    "java.lang.Boolean": "boolean",
    "java.lang.Byte": "byte",
    "java.lang.Character": "char",
    "java.lang.Short": "short",
    "java.lang.Integer": "int",
    "java.lang.Long": "long",
    "java.lang.Float": "float",
    "java.lang.Double": "double",
}

_DESCRIPTOR_CODES = {
    "boolean": "Z",
    "byte": "B",
    "char": "C",
    "short": "S",
    "int": "I",
    "long": "J",
    "float": "F",
    "double": "D",
}
_DESCRIPTOR_PRIMITIVES = {code: name for name, code in _DESCRIPTOR_CODES.items()}


def array_descriptor(element_name: str, dimensions: int) -> str:
    """Encode an array type name the way the JVM does, e.g. ``[I`` or ``[[Ljava.lang.String;``."""

    code = _DESCRIPTOR_CODES.get(element_name, f"L{element_name};")
    return "[" * dimensions + code


def split_array_descriptor(name: str) -> tuple[str, int]:
    """Split a possibly array-encoded type name into its element name and dimension count."""

    dimensions = len(name) - len(name.lstrip("["))
    if not dimensions:
        return name, 0

    rest = name[dimensions:]
    if rest.startswith("L") and rest.endswith(";"):
        return rest[1:-1], dimensions
    return _DESCRIPTOR_PRIMITIVES.get(rest, rest), dimensions


def primitive_of(type_name: str) -> str:
    """Give the primitive counterpart of a wrapper type name, or the name itself."""

    return _WRAPPERS.get(type_name, type_name)


def is_static_constant_initializer_type(type_name: str) -> bool:
    return type_name in PRIMITIVES or type_name == STRING


# endregion


# ============================================================================
# region -------- Base node
# ============================================================================


class Node(Datum):
    """Base class of every tree node.

    Fields come from annotations. Every node also accepts a keyword-only ``coord``, which never takes part in
    equality or in ``dump()`` output unless asked for.
    """

    _fields: ClassVar[tuple[str, ...]] = ()
    _datum_kw_only: ClassVar[dict[str, Any]] = {"coord": None}

    if TYPE_CHECKING:
        coord: Optional[Coord]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._fields = tuple(all_clues(cls))

    @override
    def __eq__(self, other: object) -> bool:
        """Return whether two nodes have the same values, disregarding coordinates."""

        if type(self) is not type(other):
            return NotImplemented

        return compare(self, other)


class TypeRef(Node):
    """A reference to a type by name.

    Array types are named with a descriptor (``[I``, ``[Ljava.lang.String;``). Until semantic analysis runs, the
    name is whatever the source wrote; afterwards it is fully qualified and ``resolved`` is set.
    """

    name: str
    generics: list["GenericsType"] = []
    placeholder: bool = False
    resolved: bool = False

    @property
    def is_array(self) -> bool:
        return self.name.startswith("[")

    @property
    def element_name(self) -> str:
        return split_array_descriptor(self.name)[0]

    @property
    def array_dimensions(self) -> int:
        return split_array_descriptor(self.name)[1]

    @property
    def is_primitive(self) -> bool:
        return self.name in PRIMITIVES

    @property
    def name_without_package(self) -> str:
        element, dimensions = split_array_descriptor(self.name)
        return element.rpartition(".")[2] + "[]" * dimensions

    @property
    def package_name(self) -> Optional[str]:
        package, _, _ = self.element_name.rpartition(".")
        return package or None

    def make_array(self, dimensions: int = 1) -> "TypeRef":
        element, existing = split_array_descriptor(self.name)
        return TypeRef(
            array_descriptor(element, existing + dimensions),
            self.generics,
            self.placeholder,
            self.resolved,
            coord=self.coord,
        )


def make_type(name: str, *generics: "GenericsType") -> TypeRef:
    """Create an already-resolved reference to a well-known type."""

    return TypeRef(name, list(generics), resolved=True)


class GenericsType(Node):
    """A generic parameter (``T extends A & B``) or argument (``String``, ``? super X``)."""

    name: str
    type: Optional[TypeRef] = None
    upper_bounds: list[TypeRef] = []
    lower_bound: Optional[TypeRef] = None
    wildcard: bool = False
    placeholder: bool = False


# endregion


# ============================================================================
# region -------- Declarations
# ============================================================================


class AnnotationNode(Node):
    class_node: TypeRef
    members: dict[str, "Expression"] = {}


class PackageNode(Node):
    name: str
    annotations: list[AnnotationNode] = []

    @property
    def text(self) -> str:
        return f"package {self.name}"


class ImportNode(Node):
    """An import. Star imports keep their package name with a trailing dot."""

    type: Optional[TypeRef] = None
    alias: Optional[str] = None
    package_name: Optional[str] = None
    field_name: Optional[str] = None
    is_star: bool = False
    is_static: bool = False
    annotations: list[AnnotationNode] = []

    @property
    def text(self) -> str:
        if self.is_static:
            assert self.type is not None
            if self.is_star:
                return f"import static {self.type.name}.*"
            text = f"import static {self.type.name}.{self.field_name}"
            if self.alias and self.alias != self.field_name:
                text += f" as {self.alias}"
            return text

        if self.is_star:
            return f"import {self.package_name}*"

        assert self.type is not None
        text = f"import {self.type.name}"
        if self.alias and self.alias != self.type.name_without_package:
            text += f" as {self.alias}"
        return text


class FieldNode(Node):
    name: str
    type: TypeRef
    modifiers: int = 0
    initial_expression: Optional["Expression"] = None
    annotations: list[AnnotationNode] = []

    @property
    def is_static(self) -> bool:
        return bool(self.modifiers & Modifier.STATIC)

    @property
    def is_final(self) -> bool:
        return bool(self.modifiers & Modifier.FINAL)


class PropertyNode(Node):
    """A property; its storage is the backing field, which is also listed among the class fields."""

    name: str
    type: TypeRef
    field: FieldNode
    modifiers: int = Modifier.PUBLIC


class Parameter(Node):
    type: Optional[TypeRef]
    name: str
    initial_expression: Optional["Expression"] = None
    modifiers: int = 0
    annotations: list[AnnotationNode] = []


class MethodNode(Node):
    name: str
    return_type: Optional[TypeRef]
    parameters: list[Parameter] = []
    modifiers: int = 0
    exceptions: list[TypeRef] = []
    code: Optional["Statement"] = None
    annotations: list[AnnotationNode] = []

    CONSTRUCTOR_NAME: ClassVar[str] = "<init>"
    STATIC_INITIALIZER_NAME: ClassVar[str] = "<clinit>"

    @property
    def is_static(self) -> bool:
        return bool(self.modifiers & Modifier.STATIC)

    @property
    def is_abstract(self) -> bool:
        return bool(self.modifiers & Modifier.ABSTRACT)

    @property
    def is_void(self) -> bool:
        return self.return_type is not None and self.return_type.name == VOID

    @property
    def is_static_initializer(self) -> bool:
        return self.name == self.STATIC_INITIALIZER_NAME


class ConstructorNode(MethodNode):
    """A constructor; it always carries the synthetic ``<init>`` name."""


class ClassNode(Node):
    name: str
    modifiers: int = 0
    superclass: Optional[TypeRef] = None
    interfaces: list[TypeRef] = []
    generics: list[GenericsType] = []
    fields: list[FieldNode] = []
    properties: list[PropertyNode] = []
    constructors: list[ConstructorNode] = []
    methods: list[MethodNode] = []
    annotations: list[AnnotationNode] = []
    object_initializers: list["Statement"] = []
    is_script: bool = False

    @property
    def is_interface(self) -> bool:
        return bool(self.modifiers & Modifier.INTERFACE)

    @property
    def name_without_package(self) -> str:
        return self.name.rpartition(".")[2]

    def get_field(self, name: str) -> Optional[FieldNode]:
        return next((field for field in self.fields if field.name == name), None)

    def get_methods(self, name: str) -> list[MethodNode]:
        return [method for method in self.methods if method.name == name]

    def get_static_initializer(self) -> Optional[MethodNode]:
        return next((method for method in self.methods if method.is_static_initializer), None)


class ModuleNode(Node):
    """Everything parsed from one source: its package, imports, classes, and loose script code."""

    description: str
    package: Optional[PackageNode] = None
    imports: list[ImportNode] = []
    star_imports: list[ImportNode] = []
    static_imports: dict[str, ImportNode] = {}
    static_star_imports: dict[str, ImportNode] = {}
    classes: list[ClassNode] = []
    methods: list[MethodNode] = []
    statement_block: Optional["BlockStatement"] = None

    @property
    def package_name(self) -> Optional[str]:
        return self.package.name if self.package is not None else None

    @property
    def is_empty(self) -> bool:
        return not self.classes and not self.methods and not (self.statement_block and self.statement_block.statements)


# endregion


# ============================================================================
# region -------- Statements
# ============================================================================


class Statement(Node):
    pass


class BlockStatement(Statement):
    statements: list[Statement] = []


class ExpressionStatement(Statement):
    expression: "Expression"


class ReturnStatement(Statement):
    expression: "Expression"


class IfStatement(Statement):
    boolean_expression: "Expression"
    if_block: Statement
    else_block: Statement


class ForStatement(Statement):
    """A for loop. Without a variable, the collection is a ClosureListExpression of init, condition and update."""

    variable: Optional[Parameter]
    collection_expression: "Expression"
    loop_block: Statement


class WhileStatement(Statement):
    boolean_expression: "Expression"
    loop_block: Statement


class DoWhileStatement(Statement):
    boolean_expression: "Expression"
    loop_block: Statement


class CaseStatement(Statement):
    expression: "Expression"
    code: Statement


class SwitchStatement(Statement):
    expression: "Expression"
    case_statements: list[CaseStatement] = []
    default_statement: Optional[Statement] = None


class BreakStatement(Statement):
    label: Optional[str] = None


class ContinueStatement(Statement):
    label: Optional[str] = None


class CatchStatement(Statement):
    variable: Parameter
    code: Statement


class TryCatchStatement(Statement):
    try_statement: Statement
    catch_statements: list[CatchStatement] = []
    finally_statement: Optional[Statement] = None


class ThrowStatement(Statement):
    expression: "Expression"


class SynchronizedStatement(Statement):
    expression: "Expression"
    code: Statement


class AssertStatement(Statement):
    boolean_expression: "Expression"
    message_expression: "Expression"


class EmptyStatement(Statement):
    pass


# endregion


# ============================================================================
# region -------- Expressions
# ============================================================================


class Expression(Node):
    pass


class ConstantExpression(Expression):
    value: Any
    type: Optional[TypeRef] = None


def constant(value: Any, type_name: Optional[str] = None, *, coord: "Optional[Coord]" = None) -> ConstantExpression:
    """Create a constant, inferring its type from the Python value unless a type name is given."""

    if type_name is None:
        if value is None:
            type_name = OBJECT
        elif isinstance(value, bool):
            type_name = "java.lang.Boolean"
        elif isinstance(value, int):
            type_name = "java.lang.Integer"
        elif isinstance(value, float):
            type_name = "java.lang.Double"
        elif isinstance(value, str):
            type_name = STRING
        else:
            type_name = "java.math.BigDecimal"
    return ConstantExpression(value, make_type(type_name), coord=coord)


class VariableExpression(Expression):
    """A variable reference. A missing type means the dynamic type."""

    name: str
    type: Optional[TypeRef] = None

    @property
    def is_this(self) -> bool:
        return self.name == THIS_MARKER

    @property
    def is_super(self) -> bool:
        return self.name == SUPER_MARKER


class PropertyExpression(Expression):
    object_expression: Expression
    property: Expression
    safe: bool = False
    spread_safe: bool = False

    @property
    def property_as_string(self) -> Optional[str]:
        return self.property.value if isinstance(self.property, ConstantExpression) else None


class AttributeExpression(PropertyExpression):
    pass


class FieldExpression(Expression):
    name: str
    type: Optional[TypeRef] = None


class ClassExpression(Expression):
    type: TypeRef


class MethodCallExpression(Expression):
    object_expression: Expression
    method: Expression
    arguments: Expression
    safe: bool = False
    spread_safe: bool = False
    implicit_this: bool = False

    @property
    def method_as_string(self) -> Optional[str]:
        return self.method.value if isinstance(self.method, ConstantExpression) else None


class StaticMethodCallExpression(Expression):
    owner_type: TypeRef
    method: str
    arguments: Expression


class ConstructorCallExpression(Expression):
    """``new T(args)``, or a ``super(args)``/``this(args)`` call when ``special`` names one of those."""

    type: Optional[TypeRef]
    arguments: Expression
    special: Optional[str] = None

    @property
    def is_super_call(self) -> bool:
        return self.special == SUPER_MARKER

    @property
    def is_this_call(self) -> bool:
        return self.special == THIS_MARKER

    @property
    def is_special_call(self) -> bool:
        return self.special is not None


class BinaryExpression(Expression):
    """A binary operation; indexing uses ``[`` as its operator."""

    left_expression: Expression
    operation: str
    right_expression: Expression


class DeclarationExpression(BinaryExpression):
    """A local declaration; a multiple assignment has an ArgumentListExpression on the left."""


class PostfixExpression(Expression):
    expression: Expression
    operation: str


class PrefixExpression(Expression):
    expression: Expression
    operation: str


class NotExpression(Expression):
    expression: Expression


class UnaryMinusExpression(Expression):
    expression: Expression


class UnaryPlusExpression(Expression):
    expression: Expression


class BitwiseNegationExpression(Expression):
    expression: Expression


class BooleanExpression(Expression):
    expression: Expression


class TernaryExpression(Expression):
    boolean_expression: Expression
    true_expression: Expression
    false_expression: Expression


class ElvisOperatorExpression(TernaryExpression):
    pass


class CastExpression(Expression):
    type: TypeRef
    expression: Expression


class RangeExpression(Expression):
    from_expression: Expression
    to_expression: Expression
    inclusive: bool = True


class ClosureExpression(Expression):
    """A closure. ``parameters`` is None for the implicit-parameter form and an empty list for ``{ -> }``."""

    parameters: Optional[list[Parameter]]
    code: Statement


class ClosureListExpression(Expression):
    expressions: list[Expression] = []


class TupleExpression(Expression):
    expressions: list[Expression] = []


class ArgumentListExpression(TupleExpression):
    pass


class ListExpression(Expression):
    expressions: list[Expression] = []


class MapEntryExpression(Expression):
    key_expression: Expression
    value_expression: Expression


class MapExpression(Expression):
    map_entry_expressions: list[MapEntryExpression] = []


class SpreadExpression(Expression):
    expression: Expression


class SpreadMapExpression(Expression):
    expression: Expression


class GStringExpression(Expression):
    """An interpolated string; ``text`` is the verbatim source between the quotes."""

    text: str
    strings: list[ConstantExpression] = []
    values: list[Expression] = []


class MethodPointerExpression(Expression):
    expression: Expression
    method_name: Expression


class ArrayExpression(Expression):
    element_type: TypeRef
    expressions: list[Expression] = []
    size_expressions: Optional[list[Expression]] = None


class EmptyExpression(Expression):
    pass


class BytecodeExpression(Expression):
    """Code with no source form, generated late in compilation."""

    description: str = ""


# endregion


# ============================================================================
# region -------- Tree tools
# ============================================================================


_Comparable = Union[Node, MutableSequence[Any], dict[str, Any], Any]
_CONTAINER_TYPES = (list, dict)


def compare(first_node: _Comparable, second_node: _Comparable) -> bool:
    """Compare two nodes for equality, to see if they have the same field structure with the same values.

    Coordinates are ignored. The walk is iterative, so deep trees compare without recursion.
    """

    nodes: deque[tuple[_Comparable, _Comparable]] = deque([(first_node, second_node)])

    while nodes:
        node1, node2 = nodes.pop()

        # Plain values may differ in type, e.g. an int and a Modifier flag.
        if type(node1) is not type(node2) and isinstance(node1, _CONTAINER_TYPES + (Node,)):
            return False

        if isinstance(node1, Node):
            nodes.extend((getattr(node1, field), getattr(node2, field)) for field in node1._fields)
            continue

        if isinstance(node1, list):
            if len(node1) != len(node2):
                return False
            nodes.extend(zip(node1, node2))
            continue

        if isinstance(node1, dict):
            if list(node1) != list(node2):
                return False
            nodes.extend((node1[key], node2[key]) for key in node1)
            continue

        if node1 != node2:
            return False

    return True


def iter_child_nodes(node: Node) -> Iterator[Node]:
    for field in node._fields:
        potential_subnode = getattr(node, field)

        if isinstance(potential_subnode, Node):
            yield potential_subnode

        elif isinstance(potential_subnode, (list, dict)):
            values = potential_subnode.values() if isinstance(potential_subnode, dict) else potential_subnode
            for subsub in values:
                if isinstance(subsub, Node):
                    yield subsub


def walk(node: Node) -> Iterator[Node]:
    stack: deque[Node] = deque([node])
    while stack:
        curr_node = stack.popleft()
        stack.extend(iter_child_nodes(curr_node))
        yield curr_node


class NodeVisitor:
    """Visitor pattern for the syntax tree.

    A ``visit_<ClassName>`` method may be a generator: each node it yields is visited next, and the result is
    sent back into it. This keeps deep trees from exhausting the interpreter stack. An exception raised while
    visiting a yielded node is thrown into the generator that yielded it, so ``with`` blocks and ``finally``
    clauses in visit methods run as they would with plain recursion.

    Implementation is based on a talk by David Beazley called "Generators: The Final Frontier".
    """

    def _visit(self, node: Node) -> Generator[Any, Any, Any]:
        result: Any = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)(node)
        if isinstance(result, GeneratorType):
            result = yield from result
        return result

    def visit(self, node: Node) -> Any:
        """Visit a node."""

        stack: deque[Generator[Any, Any, Any]] = deque([self._visit(node)])
        result: Any = None
        pending_error: Optional[Exception] = None

        while stack:
            try:
                if pending_error is None:
                    child = stack[-1].send(result)
                else:
                    error, pending_error = pending_error, None
                    child = stack[-1].throw(error)
            except StopIteration as exc:
                stack.pop()
                result = exc.value
            except Exception as exc:
                stack.pop()
                if not stack:
                    raise
                pending_error = exc
            else:
                stack.append(self._visit(child))
                result = None

        return result

    def generic_visit(self, node: Node) -> Generator[Node, Any, Any]:
        """Called if no explicit visitor function exists for a node."""

        yield from iter_child_nodes(node)


# ========
# region ---- Pretty Printer
# ========


class _NodePrettyPrinter(NodeVisitor):
    def __init__(self, indent: Optional[Union[str, int]] = None, *, include_coords: bool = False) -> None:
        self.indent = (" " * indent) if isinstance(indent, int) else indent
        self.include_coords = include_coords

        self.buffer = StringIO()
        self.indent_level = 0

    @property
    def prefix(self) -> str:
        return f"\n{self.indent * self.indent_level}" if self.indent is not None else ""

    @property
    def sep(self) -> str:
        return f",\n{self.indent * self.indent_level}" if self.indent is not None else ", "

    def write(self, s: str, /) -> None:
        self.buffer.write(s)

    def remove_extra_separator(self) -> None:
        self.buffer.seek(self.buffer.tell() - len(self.sep))
        self.buffer.truncate()

    @contextlib.contextmanager
    def add_indent_level(self, val: int = 1) -> Iterator[None]:
        self.indent_level += val
        try:
            yield
        finally:
            self.indent_level -= val

    @contextlib.contextmanager
    def delimit(self, start: str, end: str) -> Iterator[None]:
        self.write(start)
        try:
            yield
        finally:
            self.write(end)

    def _visit_value(self, value: Any) -> Generator[Node, Any, None]:
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            yield from self._visit_container(value, "[", "]", None)
        elif isinstance(value, dict):
            yield from self._visit_container(list(value.values()), "{", "}", list(value))
        else:
            self.write(repr(value))

    def _visit_container(
        self,
        items: list[Any],
        start: str,
        end: str,
        keys: Optional[list[str]],
    ) -> Generator[Node, Any, None]:
        if not items:
            self.write(start + end)
            return

        with self.add_indent_level(), self.delimit(start, end):
            self.write(self.prefix)
            for position, item in enumerate(items):
                if keys is not None:
                    self.write(f"{keys[position]!r}: ")
                yield from self._visit_value(item)
                self.write(self.sep)
            self.remove_extra_separator()

    @override
    def generic_visit(self, node: Node) -> Generator[Node, Any, None]:
        with self.add_indent_level():
            self.write(type(node).__name__)

            node_fields = node._fields
            if self.include_coords and node.coord:
                node_fields += ("coord",)

            if not node_fields:
                self.write("()")
                return

            with self.delimit("(", ")"):
                self.write(self.prefix)
                for field_name in node_fields:
                    self.write(f"{field_name}=")
                    yield from self._visit_value(getattr(node, field_name))
                    self.write(self.sep)
                self.remove_extra_separator()


def dump(node: Node, indent: Optional[Union[str, int]] = None, *, include_coords: bool = False) -> str:
    """Give a formatted string representation of a tree.

    Parameters
    ----------
    node: Node
        The tree to format as a string.
    indent: str | int | None, optional
        The indent to pretty-print the tree with. Default is None, which selects the single line representation.
    include_coords: bool, default=False
        Whether to display coordinates for each node. Default is False.

    Returns
    -------
    str
        The formatted string representation of the given tree.
    """

    visitor = _NodePrettyPrinter(indent, include_coords=include_coords)
    visitor.visit(node)
    return visitor.buffer.getvalue()


# endregion

# endregion
