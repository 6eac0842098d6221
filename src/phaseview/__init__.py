"""Compile a Groovy-like script up to a chosen phase with a sly-based front end, and render its syntax tree back
into source text.
"""

from .control import CompilationUnit, CompilePhase, CompilerConfiguration, SourceUnit, parse
from .driver import RenderOptions, Rendered, RenderedWithDiagnostic, compile_to_script, render_script
from .errors import CompilationFailedError, PhaseviewError
from .printer import Printer
from .renderer import ScriptRenderer

__all__ = (
    "CompilationUnit",
    "CompilePhase",
    "CompilerConfiguration",
    "SourceUnit",
    "parse",
    "RenderOptions",
    "Rendered",
    "RenderedWithDiagnostic",
    "compile_to_script",
    "render_script",
    "CompilationFailedError",
    "PhaseviewError",
    "Printer",
    "ScriptRenderer",
)
