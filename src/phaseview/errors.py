"""Exceptions and error collection for compilation."""

from typing import NoReturn, Optional

from ._datum import Datum

__all__ = ("PhaseviewError", "SyntaxErrorMessage", "CompilationFailedError", "ErrorCollector")


class PhaseviewError(Exception):
    """Base class for errors raised by this package."""


class SyntaxErrorMessage(Datum):
    """One reported problem in a source, with its position when known."""

    message: str
    source_name: str
    line: Optional[int] = None
    column: Optional[int] = None

    def format(self) -> str:
        if self.line is None:
            return f"{self.source_name}: {self.message}"
        return f"{self.source_name}: {self.line}: {self.message} @ line {self.line}, column {self.column}."


class CompilationFailedError(PhaseviewError):
    """Compilation stopped because of the errors gathered in ``collector``."""

    def __init__(self, collector: "ErrorCollector") -> None:
        super().__init__(collector.format())
        self.collector = collector

    @property
    def errors(self) -> list[SyntaxErrorMessage]:
        return list(self.collector.messages)


class ErrorCollector:
    """Gathers the errors of one source, aborting once ``tolerance`` errors have been seen."""

    def __init__(self, tolerance: int = 10) -> None:
        self.tolerance = tolerance
        self.messages: list[SyntaxErrorMessage] = []

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def has_errors(self) -> bool:
        return bool(self.messages)

    def add_error(self, message: SyntaxErrorMessage) -> None:
        self.messages.append(message)
        if self.tolerance > 0 and len(self.messages) >= self.tolerance:
            raise CompilationFailedError(self)

    def add_fatal_error(self, message: SyntaxErrorMessage) -> NoReturn:
        self.messages.append(message)
        raise CompilationFailedError(self)

    def fail_if_errors(self) -> None:
        if self.messages:
            raise CompilationFailedError(self)

    def format(self) -> str:
        count = len(self.messages)
        lines = ["startup failed:", *(message.format() for message in self.messages)]
        lines.append(f"{count} error" if count == 1 else f"{count} errors")
        return "\n".join(lines) + "\n"
