"""Compile a script up to a phase and render the tree as it stands at the end of that phase."""

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Union

from ._datum import Datum
from .control import CompilationUnit, CompilePhase
from .errors import CompilationFailedError
from .printer import Printer
from .renderer import ScriptRenderer

if TYPE_CHECKING:
    from .resolve import ClassResolver

__all__ = ("RenderOptions", "Rendered", "RenderedWithDiagnostic", "RenderResult", "render_script", "compile_to_script")


log = logging.getLogger(__name__)

_FIX_HINT = "Fix the above error(s) and then press Refresh"


class RenderOptions(Datum):
    show_script_free_form: bool = True
    show_script_class: bool = True

    _ALIASES = {
        "showScriptFreeForm": "show_script_free_form",
        "showScriptClass": "show_script_class",
        "show_script_free_form": "show_script_free_form",
        "show_script_class": "show_script_class",
    }

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "RenderOptions":
        """Build options from a mapping that uses either the camelCase or the snake_case option names."""

        kwargs: dict[str, bool] = {}
        for key, value in options.items():
            try:
                name = cls._ALIASES[key]
            except KeyError:
                msg = f"Unknown render option: {key!r}"
                raise ValueError(msg) from None
            kwargs[name] = bool(value)
        return cls(**kwargs)


class Rendered(Datum):
    text: str


class RenderedWithDiagnostic(Datum):
    """Whatever was rendered before a failure, followed by a diagnostic block describing it."""

    text: str
    error: BaseException


RenderResult = Union[Rendered, RenderedWithDiagnostic]


def _diagnostic(rendered: str, heading: str, detail: str) -> str:
    lines = [heading, *detail.splitlines(), _FIX_HINT]
    prefix = rendered if (not rendered or rendered.endswith("\n")) else rendered + "\n"
    return prefix + "\n".join(lines) + "\n"


def render_script(
    script: str,
    compile_phase: Union[CompilePhase, int, str],
    resolver: "Union[ClassResolver, None]" = None,
    show_script_free_form: bool = True,
    show_script_class: bool = True,
) -> RenderResult:
    """Compile ``script`` up to ``compile_phase`` and render every class as it looks after that phase.

    Failures are contained, an unknown phase included: the result then holds whatever was rendered, plus a
    diagnostic block.
    """

    printer = Printer()
    renderer = ScriptRenderer(printer, show_script_free_form, show_script_class)

    unit = CompilationUnit(resolver=resolver)
    unit.add_source(f"script{time.time_ns() // 1_000_000}.groovy", script)

    try:
        phase = CompilePhase.coerce(compile_phase)
        unit.add_phase_operation(renderer, phase)
        unit.compile(phase)
    except CompilationFailedError as exc:
        log.debug("Compilation failed before rendering finished.", exc_info=True)
        text = _diagnostic(
            printer.getvalue(),
            "Unable to produce AST for this phase due to earlier compilation error:",
            str(exc),
        )
        return RenderedWithDiagnostic(text, exc)
    except Exception as exc:  # noqa: BLE001
        log.debug("Rendering failed.", exc_info=True)
        text = _diagnostic(printer.getvalue(), "Unable to produce AST for this phase due to an error:", str(exc))
        return RenderedWithDiagnostic(text, exc)

    return Rendered(printer.getvalue())


def compile_to_script(
    script: str,
    compile_phase: Union[CompilePhase, int, str],
    resolver: "Union[ClassResolver, None]" = None,
    show_script_free_form: bool = True,
    show_script_class: bool = True,
) -> str:
    return render_script(script, compile_phase, resolver, show_script_free_form, show_script_class).text
