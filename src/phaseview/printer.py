"""An indenting text sink that keeps line breaks and separating spaces tidy."""

import contextlib
from collections.abc import Iterator
from io import StringIO

__all__ = ("Printer",)


class Printer:
    """Accumulates rendered text.

    The printer tracks the current indent and whether the next write starts a fresh line. It never emits more
    than two consecutive line breaks through its break methods, and it never lets a written leading space
    follow a space already in the buffer.
    """

    INDENT_UNIT = "    "

    def __init__(self) -> None:
        self._buffer = StringIO()
        self._tail = ""
        self.indent = ""
        self.pending_indent = True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} indent={len(self.indent)} pending_indent={self.pending_indent}>"

    def _emit(self, text: str) -> None:
        if text:
            self._buffer.write(text)
            self._tail = (self._tail + text)[-2:]

    def write(self, text: str) -> None:
        """Append text, indenting it first if it starts a line.

        All leading spaces are dropped from text that starts a line, and one leading space is dropped from text
        that follows a space.
        """

        if not text:
            return

        if self.pending_indent:
            self._emit(self.indent)
            self.pending_indent = False
            text = text.lstrip(" ")

        if text.startswith(" ") and self._tail.endswith(" "):
            text = text[1:]

        self._emit(text)

    def line_break(self) -> None:
        if not self._tail.endswith("\n"):
            self._emit("\n")
        self.pending_indent = True

    def double_break(self) -> None:
        """Make the buffer end with exactly one blank line."""

        if self._tail.endswith("\n\n"):
            pass
        elif self._tail.endswith("\n"):
            self._emit("\n")
        else:
            self._emit("\n\n")
        self.pending_indent = True

    @contextlib.contextmanager
    def indented(self) -> Iterator[None]:
        starting_indent = self.indent
        self.indent += self.INDENT_UNIT
        try:
            yield
        finally:
            self.indent = starting_indent

    def getvalue(self) -> str:
        return self._buffer.getvalue()
