import math

import pytest

from tokenjson5.parser import parse, parse_value
from tokenjson5.tokens import ErrorPriority, Errors, Input, Json5SyntaxError, tokenize

EXAMPLE = r"""{
    // comments
    unquoted: "and you can quote me on that",
    singleQuotes: "I can use \"double quotes\" here",
    lineBreaks: "Look, Mom! \
	No \\n's!",
    hexadecimal: 0xdecaf,
    leadingDecimalPoint: .8675309, andTrailing: 8675309.,
    positiveSign: +1,
    nan: NaN,
    infinity: infinity,
    negative_infinity: -infinity,
    json_value: (JsonValue::Null),
    trailingComma: "in objects", andIn: ["arrays",],
    "backwardsCompatible": "with JSON",
}"""


def test_example():
    result = parse(EXAMPLE, {"JsonValue::Null": None})
    assert math.isnan(result.pop("nan"))
    expected = {
        "unquoted": "and you can quote me on that",
        "singleQuotes": 'I can use "double quotes" here',
        "lineBreaks": "Look, Mom! No \\n's!",
        "hexadecimal": 0xDECAF,
        "leadingDecimalPoint": 0.8675309,
        "andTrailing": 8675309.0,
        "positiveSign": 1,
        "infinity": math.inf,
        "negative_infinity": -math.inf,
        "json_value": None,
        "trailingComma": "in objects",
        "andIn": ["arrays"],
        "backwardsCompatible": "with JSON",
    }
    assert result == expected
    assert list(result) == list(expected)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("true", True),
        ("false", False),
        ("null", None),
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        ("1e3", 1000.0),
        ("0x1F", 31),
        (".5", 0.5),
        ("-.25", -0.25),
        ("2.5", 2.5),
        ("infinity", math.inf),
        ("-infinity", -math.inf),
    ],
)
def test_scalars(text, expected):
    assert parse(text) == expected


def test_integer_stays_int():
    integer = parse("42")
    assert integer == 42
    assert repr(integer) == "42"
    real = parse("42.")
    assert real == 42.0
    assert repr(real) == "42.0"


def test_nan():
    value = parse("NaN")
    assert repr(value) == "nan"
    assert math.isnan(value)


def test_negative_nan_rejected():
    with pytest.raises(Json5SyntaxError) as info:
        parse("-NaN")
    assert "Expected number literal or `infinity`." in str(info.value)


def test_string_escapes():
    assert parse(r'"a\tb\u{41}\x41\0"') == "a\tbAA\0"


def test_unknown_escape_rejected():
    with pytest.raises(Json5SyntaxError) as info:
        parse(r'"\q"')
    assert "Unknown character escape" in str(info.value)


def test_string_suffix_rejected():
    with pytest.raises(Json5SyntaxError):
        parse('"a"x')


@pytest.mark.parametrize("text", ["1e", "0xfg"])
def test_invalid_number_rejected(text):
    with pytest.raises(Json5SyntaxError) as info:
        parse(text)
    assert "Invalid number literal" in str(info.value)


def test_empty_containers():
    assert parse("[]") == []
    assert parse("{}") == {}


def test_nested_values():
    assert parse('{a: [1, {b: null}], "c d": true,}') == {
        "a": [1, {"b": None}],
        "c d": True,
    }


def test_duplicate_key_keeps_last_value():
    result = parse("{a: 1, b: 2, a: 3}")
    assert result == {"a": 3, "b": 2}
    assert list(result) == ["a", "b"]


def test_unconsumed_token():
    with pytest.raises(Json5SyntaxError) as info:
        parse("1 2")
    assert [error.priority for error in info.value.errors] == [ErrorPriority.UNCONSUMED]


def test_empty_input():
    with pytest.raises(Json5SyntaxError) as info:
        parse("")
    assert [error.message for error in info.value.errors] == ["Expected JSON5 value."]


def test_missing_colon():
    with pytest.raises(Json5SyntaxError) as info:
        parse("{a 1}")
    assert "Expected `:`." in str(info.value)


def test_raw_identifier_key_rejected():
    with pytest.raises(Json5SyntaxError) as info:
        parse("{r#type: 1}")
    assert "Expected key (plain identifier or string literal)." in str(info.value)


def test_recovery_collects_every_error():
    with pytest.raises(Json5SyntaxError) as info:
        parse("[true, @, false, #]")
    assert [error.message for error in info.value.errors] == [
        "Expected JSON5 value.",
        "Expected JSON5 value.",
    ]


def test_inline_value():
    assert parse("[(answer), (a.b)]", {"answer": 42, "a.b": "x"}) == [42, "x"]


def test_unknown_inline_value():
    with pytest.raises(Json5SyntaxError) as info:
        parse("(missing)", {"answer": 42})
    assert "Unknown inline value `missing`." in str(info.value)


def test_parse_value_leaves_rest():
    input = Input(tokenize("[1, 2] rest"))
    errors = Errors()
    assert parse_value(input, errors) == [1, 2]
    assert len(input) == 1
    assert len(errors) == 0