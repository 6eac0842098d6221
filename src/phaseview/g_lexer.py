# pyright: reportUndefinedVariable=none, reportIndexIssue=none, reportConstantRedefinition=none, reportRedeclaration=none
"""Module for lexing Groovy code."""

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING, NoReturn, Optional

from sly import Lexer
from sly.lex import Token

from ._typing_compat import override
from .utils import Coord

if TYPE_CHECKING:
    from .control import SourceUnit


__all__ = ("GroovyLexer", "unescape")


# ============================================================================
# region -------- Helpers
# ============================================================================


_escape_pattern = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_simple_escapes = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "0": "\0"}


def unescape(text: str) -> str:
    """Decode the backslash escapes of a string literal."""

    def replace(match: "re.Match[str]") -> str:
        escape = match.group(1)
        if escape[0] == "u" and len(escape) == 5:
            return chr(int(escape[1:], 16))
        return _simple_escapes.get(escape, escape)

    return _escape_pattern.sub(replace, text)


# Characters that may appear between the angle brackets of a type argument list.
_generic_chars = frozenset("_$.,?&[] \t")

# Tokens after which a newline ends the statement.
_statement_enders = frozenset(
    {
        "ID", "INTEGER", "DECIMAL", "STRING", "GSTRING", "RPAREN", "RBRACKET", "RBRACE", "DIMS",
        "THIS", "SUPER", "TRUE", "FALSE", "NULL", "BREAK", "CONTINUE", "RETURN",
        "PLUSPLUS", "MINUSMINUS", "PRIMITIVE", "GENERIC_GT", "CLASS",
    }
)  # fmt: skip

# Tokens that continue the statement from the previous line.
_continuations = frozenset(
    {"ELSE", "CATCH", "FINALLY", "DOT", "SAFE_DOT", "SPREAD_DOT", "LBRACE", "RBRACE", "RPAREN", "RBRACKET"}
)

_openers = frozenset({"LPAREN", "LBRACKET", "LBRACE"})
_closers = frozenset({"RPAREN", "RBRACKET", "RBRACE"})


# endregion


# ============================================================================
# region -------- Lexer
# ============================================================================


class GroovyLexer(Lexer):
    # ---- Reserved keywords
    # fmt: off
    keywords: set[str] = {
        ABSTRACT, AS, ASSERT, BREAK, CASE, CATCH, CLASS, CONTINUE, DEF, DEFAULT, DO, ELSE, EXTENDS,
        FALSE, FINAL, FINALLY, FOR, IF, IMPLEMENTS, IMPORT, IN, INSTANCEOF, INTERFACE, NATIVE, NEW,
        NULL, PACKAGE, PRIVATE, PROTECTED, PUBLIC, RETURN, STATIC, SUPER, SWITCH, SYNCHRONIZED, THIS,
        THROW, THROWS, TRANSIENT, TRUE, TRY, VOID, VOLATILE, WHILE,
    }

    tokens = keywords | {
        # Identifiers and primitive type names
        ID, PRIMITIVE,

        # Literals
        INTEGER, DECIMAL, STRING, GSTRING,

        # Statement separator
        NEWLINE,

        # Delimiters
        LPAREN, RPAREN, LBRACKET, RBRACKET, DIMS, LBRACE, RBRACE,
        SEMI, COMMA, COLON, DOT, AT,

        # Groovy navigation
        RANGE_EXCL, RANGE, SPREAD_DOT, SAFE_DOT, METHOD_POINTER, ATTR_DOT,

        # Operators
        ELVIS, ARROW, COMPARE, POWER, PLUSPLUS, MINUSMINUS,
        EQ, NE, LE, GE, LT, GT, LSHIFT, RSHIFT, URSHIFT,
        LAND, LOR, NOT, BNOT, BAND, BOR, XOR,
        PLUS, MINUS, TIMES, DIVIDE, MOD, QUESTION,

        # Assignment
        ASSIGN, PLUSEQ, MINUSEQ, TIMESEQ, DIVEQ, MODEQ,

        # Angle brackets of a type argument list
        GENERIC_LT, GENERIC_GT,
    }
    # fmt: on

    ignore = " \t\r"

    # ---- Comments
    ignore_shebang = r"\A\#![^\n]*"
    ignore_comment = r"//[^\n]*"

    @_(r"/\*[\s\S]*?\*/")
    def ignore_block_comment(self, t: Token) -> None:
        self.lineno += t.value.count("\n")

    # ---- Literals
    DECIMAL = r"(\d+\.\d+([eE][-+]?\d+)?[fFdDgG]?)|(\d+[eE][-+]?\d+[fFdDgG]?)|(\d+[fFdD])"
    INTEGER = r"(0[xX][0-9a-fA-F]+[lLgGiI]?)|(\d+[lLgGiI]?)"

    @_(r"'([^'\\\n]|\\.)*'")
    def STRING(self, t: Token) -> Token:
        t.value = unescape(t.value[1:-1])
        return t

    @_(r'"([^"\\\n]|\\.)*"')
    def GSTRING(self, t: Token) -> Token:
        t.value = t.value[1:-1]
        return t

    DIMS = r"\[[ \t]*\]"

    # fmt: off
    # Navigation, longest first
    RANGE_EXCL      = r"\.\.<"
    RANGE           = r"\.\."
    SPREAD_DOT      = r"\*\."
    SAFE_DOT        = r"\?\."
    METHOD_POINTER  = r"\.&"
    ATTR_DOT        = r"\.@"
    ELVIS           = r"\?:"
    ARROW           = r"->"
    COMPARE         = r"<=>"
    POWER           = r"\*\*"
    PLUSPLUS        = r"\+\+"
    MINUSMINUS      = r"--"

    # Assignment operators
    PLUSEQ          = r"\+="
    MINUSEQ         = r"-="
    TIMESEQ         = r"\*="
    DIVEQ           = r"/="
    MODEQ           = r"%="

    # Operators
    EQ              = r"=="
    NE              = r"!="
    LSHIFT          = r"<<"
    LE              = r"<="
    # fmt: on

    @_(r"<")
    def LT(self, t: Token) -> Token:
        if self._opens_type_arguments(t.index):
            t.type = "GENERIC_LT"
        return t

    @_(r">>>")
    def URSHIFT(self, t: Token) -> Token:
        return self._close_type_arguments(t)

    @_(r">>")
    def RSHIFT(self, t: Token) -> Token:
        return self._close_type_arguments(t)

    GE = r">="

    @_(r">")
    def GT(self, t: Token) -> Token:
        return self._close_type_arguments(t)

    # fmt: off
    LAND        = r"&&"
    LOR         = r"\|\|"
    ASSIGN      = r"="
    NOT         = r"!"
    BNOT        = r"~"
    BAND        = r"&"
    BOR         = r"\|"
    XOR         = r"\^"
    PLUS        = r"\+"
    MINUS       = r"-"
    TIMES       = r"\*"
    DIVIDE      = r"/"
    MOD         = r"%"
    QUESTION    = r"\?"

    # Delimiters
    LPAREN      = r"\("
    RPAREN      = r"\)"
    LBRACKET    = r"\["
    RBRACKET    = r"\]"
    LBRACE      = r"\{"
    RBRACE      = r"\}"
    SEMI        = r";"
    COMMA       = r","
    COLON       = r":"
    DOT         = r"\."
    AT          = r"@"

    # Identifiers and keywords
    ID = r"[a-zA-Z_$][0-9a-zA-Z_$]*"  # pyright: ignore [reportAssignmentType]

    ID["abstract"]      = ABSTRACT
    ID["as"]            = AS
    ID["assert"]        = ASSERT
    ID["break"]         = BREAK
    ID["case"]          = CASE
    ID["catch"]         = CATCH
    ID["class"]         = CLASS
    ID["continue"]      = CONTINUE
    ID["def"]           = DEF
    ID["default"]       = DEFAULT
    ID["do"]            = DO
    ID["else"]          = ELSE
    ID["extends"]       = EXTENDS
    ID["false"]         = FALSE
    ID["final"]         = FINAL
    ID["finally"]       = FINALLY
    ID["for"]           = FOR
    ID["if"]            = IF
    ID["implements"]    = IMPLEMENTS
    ID["import"]        = IMPORT
    ID["in"]            = IN
    ID["instanceof"]    = INSTANCEOF
    ID["interface"]     = INTERFACE
    ID["native"]        = NATIVE
    ID["new"]           = NEW
    ID["null"]          = NULL
    ID["package"]       = PACKAGE
    ID["private"]       = PRIVATE
    ID["protected"]     = PROTECTED
    ID["public"]        = PUBLIC
    ID["return"]        = RETURN
    ID["static"]        = STATIC
    ID["super"]         = SUPER
    ID["switch"]        = SWITCH
    ID["synchronized"]  = SYNCHRONIZED
    ID["this"]          = THIS
    ID["throw"]         = THROW
    ID["throws"]        = THROWS
    ID["transient"]     = TRANSIENT
    ID["true"]          = TRUE
    ID["try"]           = TRY
    ID["void"]          = VOID
    ID["volatile"]      = VOLATILE
    ID["while"]         = WHILE

    ID["boolean"]       = PRIMITIVE
    ID["byte"]          = PRIMITIVE
    ID["char"]          = PRIMITIVE
    ID["short"]         = PRIMITIVE
    ID["int"]           = PRIMITIVE
    ID["long"]          = PRIMITIVE
    ID["float"]         = PRIMITIVE
    ID["double"]        = PRIMITIVE
    # fmt: on

    @_(r"\n([ \t\r]*\n)*")
    def NEWLINE(self, t: Token) -> Token:
        self.lineno += t.value.count("\n")
        return t

    @override
    def error(self, t: Token) -> NoReturn:
        coord = Coord.from_token(self.text, t, self.source.name)
        self.source.add_fatal_error(f"unexpected char: {t.value[0]!r}", coord)

    def __init__(self, source: "SourceUnit") -> None:
        self.source = source
        self._type_argument_closers: set[int] = set()

    # ---- Type argument brackets

    def _opens_type_arguments(self, index: int) -> bool:
        """Scan ahead from a ``<`` to see whether it opens a balanced type argument list.

        The closing brackets found on the way are remembered, so they lex as ``GENERIC_GT``.
        """

        text = self.text
        if index == 0 or not (text[index - 1].isalnum() or text[index - 1] in "_$"):
            return False

        rest = text[index + 1 :].lstrip(" \t")
        if not rest or not (rest[0].isalpha() or rest[0] in "?>_$"):
            return False

        depth = 0
        closers: list[int] = []
        for pos in range(index, len(text)):
            char = text[pos]
            if char == "<":
                depth += 1
            elif char == ">":
                depth -= 1
                closers.append(pos)
                if depth == 0:
                    self._type_argument_closers.update(closers)
                    return True
            elif char == "&" and text[pos + 1 : pos + 2] == "&":
                return False
            elif not (char.isalnum() or char in _generic_chars):
                return False
        return False

    def _close_type_arguments(self, t: Token) -> Token:
        if t.index in self._type_argument_closers:
            self._type_argument_closers.discard(t.index)
            t.type = "GENERIC_GT"
            t.value = ">"
            # Lex whatever follows the first '>' of '>>' or '>>>' again.
            self.index = t.index + 1
        return t

    # ---- Statement separators

    @override
    def tokenize(self, text: str, lineno: int = 1, index: int = 0) -> Iterator[Token]:
        """Tokenize the text, keeping only the newlines that separate statements."""

        self._type_argument_closers = set()

        brackets: list[str] = []
        previous: Optional[str] = None
        pending: Optional[Token] = None
        # A star import ends with TIMES, which otherwise continues the statement.
        in_import = False

        # An annotation ends at the newline after its name or its argument list.
        annotation_state: Optional[str] = None
        annotation_depth = 0

        for tok in super().tokenize(text, lineno, index):
            if tok.type == "NEWLINE":
                if annotation_state in {"after_name", "closed"} and annotation_depth == len(brackets):
                    annotation_state = None
                elif (not brackets or brackets[-1] == "LBRACE") and (
                    previous in _statement_enders or (in_import and previous == "TIMES")
                ):
                    pending = tok
                in_import = False
                continue

            if pending is not None:
                if tok.type not in _continuations:
                    yield pending
                pending = None

            if tok.type in {"IMPORT", "SEMI"}:
                in_import = tok.type == "IMPORT"

            if tok.type == "AT":
                annotation_state = "name"
                annotation_depth = len(brackets)
            elif annotation_state is not None:
                annotation_state = self._next_annotation_state(
                    annotation_state, tok.type, len(brackets) - annotation_depth
                )

            if tok.type in _openers:
                brackets.append(tok.type)
            elif tok.type in _closers and brackets:
                brackets.pop()

            previous = tok.type
            yield tok

    @staticmethod
    def _next_annotation_state(state: str, token_type: str, depth: int) -> Optional[str]:
        if state == "args":
            if depth == 1 and token_type == "RPAREN":
                return "closed"
            return state
        if depth != 0:
            return None
        if state == "name" and token_type == "ID":
            return "after_name"
        if state == "after_name" and token_type == "DOT":
            return "name"
        if state == "after_name" and token_type == "LPAREN":
            return "args"
        return None


# endregion
