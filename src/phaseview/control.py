"""The compilation pipeline: phases, configuration, source units, and the compilation unit that drives them."""

import enum
import logging
import posixpath
from collections import defaultdict
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, ClassVar, NoReturn, Optional, Union

from . import g_ast
from ._datum import Datum
from .errors import ErrorCollector, SyntaxErrorMessage
from .g_lexer import GroovyLexer
from .g_parser import GroovyParser

if TYPE_CHECKING:
    from sly.lex import Token

    from .resolve import ClassResolver
    from .utils import Coord

__all__ = ("CompilePhase", "CompilerConfiguration", "SourceUnit", "CompilationUnit", "PhaseOperation", "parse")


log = logging.getLogger(__name__)


class CompilePhase(enum.IntEnum):
    INITIALIZATION = 1
    PARSING = 2
    CONVERSION = 3
    SEMANTIC_ANALYSIS = 4
    CANONICALIZATION = 5
    INSTRUCTION_SELECTION = 6
    CLASS_GENERATION = 7
    OUTPUT = 8
    FINALIZATION = 9

    @classmethod
    def coerce(cls, value: Union["CompilePhase", int, str]) -> "CompilePhase":
        """Get a phase from a member, a phase number, or a case-insensitive phase name."""

        if isinstance(value, cls):
            return value

        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            name = value.strip()
            if name.isdigit():
                return cls.coerce(int(name))
            try:
                return cls[name.upper()]
            except KeyError:
                pass

        msg = f"Compile phase {value} cannot be mapped to a CompilePhase."
        raise ValueError(msg)


class CompilerConfiguration(Datum):
    """Settings shared by every source of a compilation.

    Attributes
    ----------
    script_base_class: str, default="groovy.lang.Script"
        The superclass of generated script classes.
    default_imports: list[str]
        Packages (with a trailing dot) and classes that every source imports implicitly.
    tolerance: int, default=10
        How many errors one source may collect before compilation aborts. Zero or less means no limit.
    debug: bool, default=False
        Whether to log every token at DEBUG level while parsing.
    """

    script_base_class: str = "groovy.lang.Script"
    default_imports: list[str] = [
        "java.lang.",
        "java.util.",
        "java.io.",
        "java.net.",
        "groovy.lang.",
        "groovy.util.",
        "java.math.BigInteger",
        "java.math.BigDecimal",
    ]
    tolerance: int = 10
    debug: bool = False

    DEFAULT: ClassVar["CompilerConfiguration"]


CompilerConfiguration.DEFAULT = CompilerConfiguration()


class SourceUnit:
    """One source text, its syntax tree, and the errors found in it."""

    def __init__(
        self,
        name: str,
        text: str,
        configuration: Optional[CompilerConfiguration] = None,
        resolver: "Optional[ClassResolver]" = None,
    ) -> None:
        from .resolve import ClassResolver

        self.name = name
        self.text = text
        self.configuration = configuration or CompilerConfiguration.DEFAULT
        self.resolver = resolver or ClassResolver()
        self.error_collector = ErrorCollector(self.configuration.tolerance)
        self._ast: Optional[g_ast.ModuleNode] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    @property
    def ast(self) -> g_ast.ModuleNode:
        if self._ast is None:
            msg = "ast does not exist yet; parse() has not been run."
            raise AttributeError(msg)
        return self._ast

    @property
    def has_ast(self) -> bool:
        return self._ast is not None

    @property
    def script_class_name(self) -> str:
        """The name of the class that holds the loose statements of this source."""

        base = posixpath.basename(self.name.replace("\\", "/"))
        stem, _, _ = base.partition(".")
        return stem or "script"

    def _message(self, message: str, coord: "Optional[Coord]") -> SyntaxErrorMessage:
        if coord is None:
            return SyntaxErrorMessage(message, self.name)
        return SyntaxErrorMessage(message, self.name, coord.line, coord.column)

    def add_error(self, message: str, coord: "Optional[Coord]" = None) -> None:
        self.error_collector.add_error(self._message(message, coord))

    def add_fatal_error(self, message: str, coord: "Optional[Coord]" = None) -> NoReturn:
        self.error_collector.add_fatal_error(self._message(message, coord))

    def _logged(self, tokens: "Iterator[Token]") -> "Iterator[Token]":
        for tok in tokens:
            log.debug("%s: %s %r at line %s", self.name, tok.type, tok.value, tok.lineno)
            yield tok

    def parse(self) -> None:
        lexer = GroovyLexer(self)
        parser = GroovyParser(self)

        tokens = lexer.tokenize(self.text)
        if self.configuration.debug:
            tokens = self._logged(tokens)
        self._ast = parser.parse(tokens)

    def convert(self) -> None:
        from .conversion import convert_module

        convert_module(self)


PhaseOperation = Callable[[SourceUnit, g_ast.ClassNode], Any]


def _parse(source: SourceUnit) -> None:
    source.parse()


def _convert(source: SourceUnit) -> None:
    source.convert()


def _resolve(source: SourceUnit) -> None:
    from .resolve import ResolveVisitor

    ResolveVisitor(source).resolve_module()


def _canonicalize(source: SourceUnit) -> None:
    from .lowering import canonicalize

    canonicalize(source)


def _select_instructions(source: SourceUnit) -> None:
    from .lowering import select_instructions

    select_instructions(source)


def _generate_classes(source: SourceUnit) -> None:
    from .lowering import generate_classes

    generate_classes(source)


_BUILTIN_OPERATIONS: dict[CompilePhase, Callable[[SourceUnit], None]] = {
    CompilePhase.PARSING: _parse,
    CompilePhase.CONVERSION: _convert,
    CompilePhase.SEMANTIC_ANALYSIS: _resolve,
    CompilePhase.CANONICALIZATION: _canonicalize,
    CompilePhase.INSTRUCTION_SELECTION: _select_instructions,
    CompilePhase.CLASS_GENERATION: _generate_classes,
}


class CompilationUnit:
    """A set of sources compiled together, phase by phase.

    Operations added with ``add_phase_operation`` run after the built-in work of their phase, once for every
    class of every source.
    """

    def __init__(
        self,
        configuration: Optional[CompilerConfiguration] = None,
        resolver: "Optional[ClassResolver]" = None,
    ) -> None:
        from .resolve import ClassResolver

        self.configuration = configuration or CompilerConfiguration.DEFAULT
        self.resolver = resolver or ClassResolver()
        self.sources: list[SourceUnit] = []
        self.phase_operations: defaultdict[CompilePhase, list[PhaseOperation]] = defaultdict(list)
        self.phase: Optional[CompilePhase] = None

    def add_source(self, name: str, text: str) -> SourceUnit:
        source = SourceUnit(name, text, self.configuration, self.resolver)
        self.sources.append(source)
        return source

    def add_phase_operation(self, operation: PhaseOperation, phase: Union[CompilePhase, int, str]) -> None:
        self.phase_operations[CompilePhase.coerce(phase)].append(operation)

    def compile(self, phase: Union[CompilePhase, int, str] = CompilePhase.FINALIZATION) -> None:
        """Run every phase up to and including the given one.

        Raises
        ------
        CompilationFailedError
            If any source has errors once a phase finishes, or a fatal error is found during one.
        """

        target = CompilePhase.coerce(phase)

        for current in CompilePhase:
            if current > target:
                break
            if self.phase is not None and current <= self.phase:
                continue

            log.debug("Running phase %s on %d source(s).", current.name, len(self.sources))

            builtin = _BUILTIN_OPERATIONS.get(current)
            for source in self.sources:
                if builtin is not None:
                    builtin(source)
                if current is CompilePhase.CONVERSION:
                    self._check_duplicate_classes(source)
                source.error_collector.fail_if_errors()

            for operation in self.phase_operations[current]:
                for source in self.sources:
                    if not source.has_ast:
                        continue
                    for class_node in list(source.ast.classes):
                        operation(source, class_node)

            self.phase = current

    def _check_duplicate_classes(self, source: SourceUnit) -> None:
        earlier = self.sources[: self.sources.index(source)]
        seen = {class_node.name for other in earlier for class_node in other.ast.classes}
        for class_node in source.ast.classes:
            if class_node.name in seen:
                source.add_error(f"Invalid duplicate class definition of class {class_node.name}", class_node.coord)


def parse(
    text: str,
    name: str = "script.groovy",
    configuration: Optional[CompilerConfiguration] = None,
) -> g_ast.ModuleNode:
    """Parse one source and give back its module, without running any later phase."""

    source = SourceUnit(name, text, configuration)
    source.parse()
    return source.ast
