import pytest
from phaseview.control import SourceUnit
from phaseview.errors import CompilationFailedError
from phaseview.g_lexer import GroovyLexer, unescape


def tokens(text: str) -> list:
    return list(GroovyLexer(SourceUnit("test.groovy", text)).tokenize(text))


def token_types(text: str) -> list[str]:
    return [tok.type for tok in tokens(text)]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("def x = 1", ["DEF", "ID", "ASSIGN", "INTEGER"], id="declaration"),
        pytest.param("int count", ["PRIMITIVE", "ID"], id="primitive"),
        pytest.param("x += 2.5", ["ID", "PLUSEQ", "DECIMAL"], id="compound assignment"),
        pytest.param(
            "a?.b*.c.@d.&e",
            ["ID", "SAFE_DOT", "ID", "SPREAD_DOT", "ID", "ATTR_DOT", "ID", "METHOD_POINTER", "ID"],
            id="navigation",
        ),
        pytest.param("1..<5", ["INTEGER", "RANGE_EXCL", "INTEGER"], id="exclusive range"),
        pytest.param("a ?: b", ["ID", "ELVIS", "ID"], id="elvis"),
        pytest.param("a <=> b", ["ID", "COMPARE", "ID"], id="spaceship"),
        pytest.param("String[] names", ["ID", "DIMS", "ID"], id="array type"),
        pytest.param("xs[0]", ["ID", "LBRACKET", "INTEGER", "RBRACKET"], id="index"),
        pytest.param("{ x -> x }", ["LBRACE", "ID", "ARROW", "ID", "RBRACE"], id="closure"),
        pytest.param("a // trailing comment", ["ID"], id="line comment"),
        pytest.param("a /* one\ntwo */ b", ["ID", "ID"], id="block comment"),
        pytest.param("#!/usr/bin/env groovy\nx", ["ID"], id="shebang"),
    ],
)
def test_token_types(text: str, expected: list[str]):
    assert token_types(text) == expected


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("class", "CLASS"),
        ("def", "DEF"),
        ("instanceof", "INSTANCEOF"),
        ("synchronized", "SYNCHRONIZED"),
        ("boolean", "PRIMITIVE"),
        ("double", "PRIMITIVE"),
        ("classes", "ID"),
        ("$value", "ID"),
    ],
)
def test_keywords(word: str, expected: str):
    assert token_types(word) == [expected]


# ============================================================================
# region -------- Newlines
# ============================================================================


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("a\nb", ["ID", "NEWLINE", "ID"], id="separates statements"),
        pytest.param("a\n\n\nb", ["ID", "NEWLINE", "ID"], id="blank lines collapse"),
        pytest.param("f(a,\nb)", ["ID", "LPAREN", "ID", "COMMA", "ID", "RPAREN"], id="inside parentheses"),
        pytest.param("[1,\n2]", ["LBRACKET", "INTEGER", "COMMA", "INTEGER", "RBRACKET"], id="inside brackets"),
        pytest.param("a +\nb", ["ID", "PLUS", "ID"], id="after operator"),
        pytest.param("x\n.foo()", ["ID", "DOT", "ID", "LPAREN", "RPAREN"], id="leading dot continues"),
        pytest.param("\n\na", ["ID"], id="leading newlines"),
        pytest.param(
            "if (a) {\nb\n}\nelse {\nc\n}",
            ["IF", "LPAREN", "ID", "RPAREN", "LBRACE", "ID", "RBRACE", "ELSE", "LBRACE", "ID", "RBRACE"],
            id="else continues",
        ),
        pytest.param(
            "{\na\nb\n}",
            ["LBRACE", "ID", "NEWLINE", "ID", "RBRACE"],
            id="inside braces",
        ),
    ],
)
def test_newlines(text: str, expected: list[str]):
    assert token_types(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("@Immutable\nclass A", ["AT", "ID", "CLASS", "ID"], id="bare annotation"),
        pytest.param(
            "@Field(x = 1)\nint y",
            ["AT", "ID", "LPAREN", "ID", "ASSIGN", "INTEGER", "RPAREN", "PRIMITIVE", "ID"],
            id="annotation with arguments",
        ),
        pytest.param(
            "@groovy.transform.Field\nint y", ["AT", "ID", "DOT", "ID", "DOT", "ID", "PRIMITIVE", "ID"], id="qualified"
        ),
    ],
)
def test_newline_after_annotation(text: str, expected: list[str]):
    assert token_types(text) == expected


def test_line_numbers():
    toks = tokens("a\n\nb /* x\n */ c\nd")
    assert [(tok.value, tok.lineno) for tok in toks if tok.type == "ID"] == [("a", 1), ("b", 3), ("c", 4), ("d", 5)]


# endregion


# ============================================================================
# region -------- Angle brackets
# ============================================================================


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        pytest.param("List<String> xs", ["ID", "GENERIC_LT", "ID", "GENERIC_GT", "ID"], id="type argument"),
        pytest.param("a < b", ["ID", "LT", "ID"], id="less than"),
        pytest.param("a<b", ["ID", "LT", "ID"], id="unbalanced"),
        pytest.param("a > b", ["ID", "GT", "ID"], id="greater than"),
        pytest.param("a >> 2", ["ID", "RSHIFT", "INTEGER"], id="shift"),
        pytest.param("i < n && j > 0", ["ID", "LT", "ID", "LAND", "ID", "GT", "INTEGER"], id="comparisons"),
        pytest.param(
            "Map<String, List<Integer>> m",
            ["ID", "GENERIC_LT", "ID", "COMMA", "ID", "GENERIC_LT", "ID", "GENERIC_GT", "GENERIC_GT", "ID"],
            id="nested closers",
        ),
        pytest.param(
            "List<? extends Number> xs",
            ["ID", "GENERIC_LT", "QUESTION", "EXTENDS", "ID", "GENERIC_GT", "ID"],
            id="wildcard",
        ),
        pytest.param("a <= b", ["ID", "LE", "ID"], id="less or equal"),
    ],
)
def test_angle_brackets(text: str, expected: list[str]):
    assert token_types(text) == expected


def test_split_closer_value():
    toks = tokens("Map<String, List<Integer>> m")
    assert [tok.value for tok in toks if tok.type == "GENERIC_GT"] == [">", ">"]


# endregion


# ============================================================================
# region -------- Literals
# ============================================================================


def test_string_value_is_unescaped():
    (tok,) = tokens(r"'it\'s\n'")
    assert tok.type == "STRING"
    assert tok.value == "it's\n"


def test_gstring_value_is_raw():
    (tok,) = tokens(r'"hi $name\n"')
    assert tok.type == "GSTRING"
    assert tok.value == r"hi $name\n"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (r"plain", "plain"),
        (r"a\tb", "a\tb"),
        (r"\u0041", "A"),
        (r"\\", "\\"),
        (r"\$", "$"),
    ],
)
def test_unescape(text: str, expected: str):
    assert unescape(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", "INTEGER"),
        ("0xFF", "INTEGER"),
        ("10L", "INTEGER"),
        ("3.14", "DECIMAL"),
        ("1e10", "DECIMAL"),
        ("2f", "DECIMAL"),
    ],
)
def test_numbers(text: str, expected: str):
    assert token_types(text) == [expected]


# endregion


def test_unexpected_character():
    with pytest.raises(CompilationFailedError) as exc_info:
        tokens("a = #")

    (error,) = exc_info.value.errors
    assert error.message == "unexpected char: '#'"
    assert (error.line, error.column) == (1, 5)
