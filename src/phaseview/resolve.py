"""Semantic analysis: resolve type names to classes and scope variables."""

from collections import ChainMap
from collections.abc import Generator, Iterable
from typing import TYPE_CHECKING, Any, Optional

from . import g_ast
from ._typing_compat import override

if TYPE_CHECKING:
    from .control import SourceUnit

__all__ = ("ClassResolver", "ResolveVisitor")


_KNOWN_CLASSES = {
    "java.lang": (
        "ArithmeticException",
        "Boolean",
        "Byte",
        "CharSequence",
        "Character",
        "Class",
        "ClassCastException",
        "Cloneable",
        "Comparable",
        "Deprecated",
        "Double",
        "Enum",
        "Error",
        "Exception",
        "Float",
        "IllegalArgumentException",
        "IllegalStateException",
        "IndexOutOfBoundsException",
        "Integer",
        "InterruptedException",
        "Iterable",
        "Long",
        "Math",
        "NullPointerException",
        "Number",
        "NumberFormatException",
        "Object",
        "Override",
        "Runnable",
        "RuntimeException",
        "Short",
        "String",
        "StringBuffer",
        "StringBuilder",
        "SuppressWarnings",
        "System",
        "Thread",
        "Throwable",
        "UnsupportedOperationException",
        "Void",
    ),
    "java.util": (
        "AbstractList",
        "AbstractMap",
        "ArrayDeque",
        "ArrayList",
        "Arrays",
        "Calendar",
        "Collection",
        "Collections",
        "Comparator",
        "Date",
        "Deque",
        "HashMap",
        "HashSet",
        "Iterator",
        "LinkedHashMap",
        "LinkedHashSet",
        "LinkedList",
        "List",
        "Locale",
        "Map",
        "NoSuchElementException",
        "Objects",
        "Optional",
        "Properties",
        "Queue",
        "Random",
        "Set",
        "SortedMap",
        "SortedSet",
        "TreeMap",
        "TreeSet",
        "UUID",
    ),
    "java.util.concurrent": (
        "Callable",
        "ConcurrentHashMap",
        "CountDownLatch",
        "ExecutorService",
        "Executors",
        "Future",
        "TimeUnit",
    ),
    "java.util.function": ("BiFunction", "Consumer", "Function", "Predicate", "Supplier"),
    "java.util.regex": ("Matcher", "Pattern"),
    "java.io": (
        "BufferedReader",
        "BufferedWriter",
        "File",
        "FileNotFoundException",
        "FileReader",
        "FileWriter",
        "IOException",
        "InputStream",
        "OutputStream",
        "PrintStream",
        "PrintWriter",
        "Reader",
        "Serializable",
        "StringReader",
        "StringWriter",
        "UncheckedIOException",
        "Writer",
    ),
    "java.net": ("HttpURLConnection", "MalformedURLException", "Socket", "URI", "URL", "URLEncoder"),
    "java.math": ("BigDecimal", "BigInteger", "MathContext", "RoundingMode"),
    "java.time": ("Duration", "Instant", "LocalDate", "LocalDateTime", "LocalTime", "ZonedDateTime"),
    "groovy.lang": (
        "Binding",
        "Closure",
        "DelegatesTo",
        "GString",
        "GroovyObject",
        "GroovyObjectSupport",
        "GroovyRuntimeException",
        "IntRange",
        "MetaClass",
        "MissingMethodException",
        "MissingPropertyException",
        "Range",
        "Script",
        "Tuple",
        "Tuple2",
    ),
    "groovy.util": ("ConfigObject", "ConfigSlurper", "Eval", "Expando", "GroovyTestCase", "Node", "NodeList"),
    "groovy.transform": (
        "Canonical",
        "CompileStatic",
        "EqualsAndHashCode",
        "Field",
        "Immutable",
        "Memoized",
        "ToString",
        "TupleConstructor",
        "TypeChecked",
    ),
    "groovy.json": ("JsonBuilder", "JsonOutput", "JsonSlurper"),
    "org.codehaus.groovy.runtime": ("DefaultGroovyMethods", "InvokerHelper"),
}


class ClassResolver:
    """The classes a compilation can see: a fixed registry of JDK and Groovy classes, plus any extras.

    Parameters
    ----------
    extra_classes: Iterable[str], default=()
        Fully qualified names of further classes to make visible.
    """

    def __init__(self, extra_classes: Iterable[str] = ()) -> None:
        self.known_classes: set[str] = {
            f"{package}.{name}" for package, names in _KNOWN_CLASSES.items() for name in names
        }
        self.known_classes.update(extra_classes)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} with {len(self.known_classes)} classes>"

    def is_known(self, qualified_name: str) -> bool:
        return qualified_name in self.known_classes


class ResolveVisitor(g_ast.NodeVisitor):
    """Resolve every type reference of a module in place, and rewrite names that turn out to be classes.

    Each ``visit_*`` method returns the node that should take the visited node's place.
    """

    def __init__(self, source: "SourceUnit") -> None:
        self.source = source
        self.module = source.ast
        self.resolver = source.resolver

        self.class_node: Optional[g_ast.ClassNode] = None
        self.placeholders: set[str] = set()
        self.scope: ChainMap[str, bool] = ChainMap()

        self.module_classes = {class_node.name_without_package: class_node.name for class_node in self.module.classes}
        self.module_classes.update((class_node.name, class_node.name) for class_node in self.module.classes)

    def resolve_module(self) -> None:
        for import_node in [*self.module.imports, *self.module.static_imports.values()]:
            self._resolve_import(import_node)
        for import_node in self.module.static_star_imports.values():
            self._resolve_import(import_node)

        for class_node in self.module.classes:
            self.visit(class_node)

    def _resolve_import(self, import_node: g_ast.ImportNode) -> None:
        assert import_node.type is not None
        name = import_node.type.name
        if self.resolver.is_known(name) or name in self.module_classes.values():
            import_node.type.resolved = True
        else:
            self.source.add_error(f"unable to resolve class {name}", import_node.coord)

    # ============================================================================
    # region ---- Name resolution
    # ============================================================================

    def _is_class(self, name: str) -> bool:
        return self.resolver.is_known(name) or name in self.module_classes.values()

    def resolve_name(self, name: str) -> Optional[str]:
        """Find the fully qualified name for a class name as written in the source, or None."""

        if name in g_ast.PRIMITIVES or name == g_ast.VOID:
            return name

        if name in self.module_classes:
            return self.module_classes[name]

        for import_node in self.module.imports:
            assert import_node.type is not None
            if import_node.alias == name:
                return import_node.type.name

        if "." not in name:
            package = self.module.package_name
            if package and self._is_class(package + name):
                return package + name

            for import_node in self.module.star_imports:
                candidate = f"{import_node.package_name}{name}"
                if self._is_class(candidate):
                    return candidate

            for default in self.source.configuration.default_imports:
                if default.endswith("."):
                    if self.resolver.is_known(default + name):
                        return default + name
                elif default.rpartition(".")[2] == name:
                    return default

        if self._is_class(name):
            return name

        return None

    def resolve_type(self, type_ref: g_ast.TypeRef) -> bool:
        if type_ref.placeholder or type_ref.resolved:
            return True

        element, dimensions = g_ast.split_array_descriptor(type_ref.name)
        if element in self.placeholders:
            type_ref.placeholder = True
            return True

        qualified = self.resolve_name(element)
        if qualified is None:
            self.source.add_error(f"unable to resolve class {element}", type_ref.coord)
            return False

        type_ref.name = g_ast.array_descriptor(qualified, dimensions) if dimensions else qualified
        type_ref.resolved = True
        return True

    def _declare(self, name: str, coord: Any) -> None:
        if name in self.scope.maps[0]:
            self.source.add_error(f"The current scope already contains a variable of the name {name}", coord)
        self.scope[name] = True

    # endregion

    # ============================================================================
    # region ---- Visitor methods
    # ============================================================================

    @override
    def generic_visit(self, node: g_ast.Node) -> Generator[g_ast.Node, Any, g_ast.Node]:
        for field in node._fields:
            value = getattr(node, field)
            if isinstance(value, g_ast.Node):
                setattr(node, field, (yield value))
            elif isinstance(value, list):
                for index, item in enumerate(value):
                    if isinstance(item, g_ast.Node):
                        value[index] = yield item
            elif isinstance(value, dict):
                for key, item in value.items():
                    if isinstance(item, g_ast.Node):
                        value[key] = yield item
        return node

    def visit_TypeRef(self, node: g_ast.TypeRef) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.resolve_type(node)
        for generic in node.generics:
            yield generic
        return node

    def visit_ClassNode(self, node: g_ast.ClassNode) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.class_node = node
        self.placeholders = {generic.name for generic in node.generics if generic.placeholder}
        self.scope = ChainMap({field.name: True for field in node.fields})
        try:
            return (yield from self.generic_visit(node))
        finally:
            self.class_node = None
            self.placeholders = set()
            self.scope = ChainMap()

    def visit_PropertyNode(self, node: g_ast.PropertyNode) -> Generator[g_ast.Node, Any, g_ast.Node]:
        # The backing field is visited with the other fields, and usually shares its type.
        if node.type is not node.field.type:
            node.type = yield node.type
        return node

    def visit_MethodNode(self, node: g_ast.MethodNode) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.scope = self.scope.new_child()
        try:
            for parameter in node.parameters:
                self._declare(parameter.name, parameter.coord)
            return (yield from self.generic_visit(node))
        finally:
            self.scope = self.scope.parents

    visit_ConstructorNode = visit_MethodNode

    def visit_BlockStatement(self, node: g_ast.BlockStatement) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.scope = self.scope.new_child()
        try:
            return (yield from self.generic_visit(node))
        finally:
            self.scope = self.scope.parents

    def visit_ForStatement(self, node: g_ast.ForStatement) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.scope = self.scope.new_child()
        try:
            node.collection_expression = yield node.collection_expression
            if node.variable is not None:
                node.variable = yield node.variable
                self._declare(node.variable.name, node.variable.coord)
            node.loop_block = yield node.loop_block
            return node
        finally:
            self.scope = self.scope.parents

    def visit_CatchStatement(self, node: g_ast.CatchStatement) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.scope = self.scope.new_child()
        try:
            node.variable = yield node.variable
            self._declare(node.variable.name, node.variable.coord)
            node.code = yield node.code
            return node
        finally:
            self.scope = self.scope.parents

    def visit_ClosureExpression(self, node: g_ast.ClosureExpression) -> Generator[g_ast.Node, Any, g_ast.Node]:
        self.scope = self.scope.new_child()
        try:
            if node.parameters is None:
                self.scope["it"] = True
            else:
                for index, parameter in enumerate(node.parameters):
                    node.parameters[index] = yield parameter
                    self._declare(parameter.name, parameter.coord)
            node.code = yield node.code
            return node
        finally:
            self.scope = self.scope.parents

    def visit_DeclarationExpression(
        self, node: g_ast.DeclarationExpression
    ) -> Generator[g_ast.Node, Any, g_ast.Node]:
        node.right_expression = yield node.right_expression

        targets = node.left_expression
        variables = targets.expressions if isinstance(targets, g_ast.ArgumentListExpression) else [targets]
        for variable in variables:
            if isinstance(variable, g_ast.VariableExpression):
                if variable.type is not None:
                    variable.type = yield variable.type
                self._declare(variable.name, variable.coord)
        return node

    def visit_VariableExpression(self, node: g_ast.VariableExpression) -> Generator[g_ast.Node, Any, g_ast.Node]:
        if node.type is not None:
            node.type = yield node.type

        name = node.name
        if node.is_this or node.is_super or name in self.scope:
            return node

        static_import = self.module.static_imports.get(name)
        if static_import is not None:
            assert static_import.type is not None
            owner = g_ast.ClassExpression(static_import.type, coord=node.coord)
            return g_ast.PropertyExpression(owner, g_ast.constant(static_import.field_name), coord=node.coord)

        if name[:1].isupper():
            qualified = self.resolve_name(name)
            if qualified is not None:
                type_ref = g_ast.TypeRef(qualified, resolved=True, coord=node.coord)
                return g_ast.ClassExpression(type_ref, coord=node.coord)

        return node

    def visit_MethodCallExpression(self, node: g_ast.MethodCallExpression) -> Generator[g_ast.Node, Any, g_ast.Node]:
        if node.implicit_this:
            node.arguments = yield node.arguments
            name = node.method_as_string
            static_import = self.module.static_imports.get(name) if name is not None else None
            if static_import is not None and not (self.class_node and self.class_node.get_methods(name)):
                assert static_import.type is not None
                return g_ast.StaticMethodCallExpression(
                    static_import.type, static_import.field_name, node.arguments, coord=node.coord
                )
            return node

        return (yield from self.generic_visit(node))

    # endregion
