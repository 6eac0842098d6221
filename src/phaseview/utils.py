"""Some utilities for internal use."""

from typing import TYPE_CHECKING

from ._datum import Datum
from ._typing_compat import Self, override

if TYPE_CHECKING:
    from sly.lex import Token

__all__ = ("Coord", "find_column")


def find_column(text: str, index: int) -> int:
    """Get the 1-based column of a character index within some text."""

    return index - (text.rfind("\n", 0, index) + 1) + 1


class Coord(Datum):
    line: int
    column: int
    filename: str = "<unknown>"

    @classmethod
    def from_token(cls, text: str, t: "Token", filename: str = "<unknown>") -> Self:
        return cls(t.lineno, find_column(text, t.index), filename)

    @override
    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"
