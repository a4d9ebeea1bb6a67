"""Parsing of JSON5 values from token trees into plain Python objects.

Objects become ``dict``, arrays ``list``, strings ``str``, integer literals
``int`` and other numbers ``float``; ``true``, ``false`` and ``null`` become
``True``, ``False`` and ``None``. A parenthesised group is an inline value:
its contents, written out as text, are looked up in the ``values`` mapping.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, NoReturn

from .tokens import (
    Delimiter,
    Error,
    ErrorPriority,
    Errors,
    Group,
    Ident,
    Input,
    Literal,
    Punct,
    Span,
    parse_delimited,
    peek_group,
    peek_identifier,
    peek_keyword,
    peek_number_literal,
    peek_punct,
    peek_string,
    pop_group,
    pop_identifier,
    pop_keyword,
    pop_number_literal,
    pop_punct,
    pop_string,
    tokenize,
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}

_ESCAPE = re.compile(
    r"\\(?:(\r?\n)[ \t\r\n]*|u\{([0-9a-fA-F_]*)\}|x([0-9a-fA-F]{2})|(.))",
    re.DOTALL,
)


def _report(errors: Errors, priority: ErrorPriority, message: str, spans: tuple) -> NoReturn:
    error = Error(priority, message, spans)
    errors.push(error)
    raise error


def _peek_comma(input: Input) -> bool:
    return peek_punct(input, ",")


def _pop_comma(input: Input, errors: Errors) -> Punct:
    return pop_punct(input, errors, ",")


def _replace_escape(match: re.Match) -> str:
    continuation, unicode, hex_byte, simple = match.groups()
    if continuation is not None:
        return ""
    if unicode is not None:
        digits = unicode.replace("_", "")
        if not digits or len(digits) > 6:
            raise ValueError("Invalid unicode escape.")
        code = int(digits, 16)
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise ValueError("Invalid unicode escape.")
        return chr(code)
    if hex_byte is not None:
        code = int(hex_byte, 16)
        if code > 0x7F:
            raise ValueError("Character escape out of range.")
        return chr(code)
    try:
        return _SIMPLE_ESCAPES[simple]
    except KeyError:
        raise ValueError(f"Unknown character escape `{simple}`.") from None


def _string_value(literal: Literal, errors: Errors) -> str:
    text = literal.text
    close = text.rfind('"')
    if close <= 0:
        _report(errors, ErrorPriority.TOKEN, "Expected String.", (literal.span,))
    if close != len(text) - 1:
        _report(
            errors,
            ErrorPriority.TOKEN,
            f"Invalid suffix `{text[close + 1:]}` on string literal.",
            (literal.span,),
        )
    try:
        return _ESCAPE.sub(_replace_escape, text[1:close])
    except ValueError as exc:
        _report(errors, ErrorPriority.TOKEN, str(exc), (literal.span,))


def _number_value(literal: Literal, negative: bool, errors: Errors) -> int | float:
    text = literal.text
    try:
        if text.startswith("0x"):
            value: int | float = int(text, 0)
        elif any(char in text for char in ".eE"):
            value = float(text)
        else:
            value = int(text)
    except ValueError:
        _report(
            errors,
            ErrorPriority.TOKEN,
            f"Invalid number literal `{text}`.",
            (literal.span,),
        )
    return -value if negative else value


def _peek_sign(input: Input) -> bool:
    return peek_punct(input, "+") or peek_punct(input, "-")


def _peek_number(input: Input) -> bool:
    return (
        peek_keyword(input, "NaN")
        or _peek_sign(input)
        or peek_number_literal(input)
        or peek_keyword(input, "infinity")
    )


def _pop_number(input: Input, errors: Errors) -> int | float:
    if peek_keyword(input, "NaN"):
        pop_keyword(input, errors, "NaN")
        return float("nan")
    negative = False
    if _peek_sign(input):
        negative = input.pop().char == "-"
    if peek_keyword(input, "infinity"):
        pop_keyword(input, errors, "infinity")
        return float("-inf") if negative else float("inf")
    if peek_number_literal(input):
        return _number_value(pop_number_literal(input, errors), negative, errors)
    _report(
        errors,
        ErrorPriority.GRAMMAR,
        "Expected number literal or `infinity`.",
        (input.front_span(),),
    )


def _pop_key(input: Input, errors: Errors) -> str:
    if peek_identifier(input):
        return pop_identifier(input, errors).name
    if peek_string(input):
        return _string_value(pop_string(input, errors), errors)
    _report(
        errors,
        ErrorPriority.GRAMMAR,
        "Expected key (plain identifier or string literal).",
        (input.front_span(),),
    )


def _pop_property(input: Input, errors: Errors, values: Mapping | None) -> tuple[str, Any]:
    key = _pop_key(input, errors)
    pop_punct(input, errors, ":")
    return key, parse_value(input, errors, values)


def _pop_object(input: Input, errors: Errors, values: Mapping | None) -> dict:
    with pop_group(input, errors, Delimiter.BRACE) as inner:
        properties = parse_delimited(
            inner,
            errors,
            lambda tokens, errs: _pop_property(tokens, errs, values),
            _peek_comma,
            _pop_comma,
        )
    return {key: value for (key, value), _ in properties}


def _pop_array(input: Input, errors: Errors, values: Mapping | None) -> list:
    with pop_group(input, errors, Delimiter.BRACKET) as inner:
        items = parse_delimited(
            inner,
            errors,
            lambda tokens, errs: parse_value(tokens, errs, values),
            _peek_comma,
            _pop_comma,
        )
    return [item for item, _ in items]


def _render(tokens) -> str:
    """Write token trees back out as compact text, spacing adjacent words."""
    parts = []
    previous_word = False
    for token in tokens:
        if isinstance(token, Group):
            open_char, close_char = token.delimiter.value
            text, word = f"{open_char}{_render(token.tokens)}{close_char}", False
        elif isinstance(token, Punct):
            text, word = token.char, False
        elif isinstance(token, Ident):
            text, word = token.name, True
        else:
            text, word = token.text, True
        if word and previous_word:
            parts.append(" ")
        parts.append(text)
        previous_word = word
    return "".join(parts)


def _pop_inline(input: Input, errors: Errors, values: Mapping | None) -> Any:
    group = input.front()
    with pop_group(input, errors, Delimiter.PARENTHESIS) as inner:
        key = _render(inner.tokens)
        inner.tokens.clear()
    if values is None or key not in values:
        _report(
            errors,
            ErrorPriority.GRAMMAR,
            f"Unknown inline value `{key}`.",
            (group.span,),
        )
    return values[key]


def parse_value(input: Input, errors: Errors, values: Mapping | None = None) -> Any:
    """Consume one JSON5 value from ``input`` and return it as a Python object.

    Errors are pushed to ``errors``; when no value can be produced the
    :class:`Error` is raised as well.
    """
    if peek_string(input):
        return _string_value(pop_string(input, errors), errors)
    if _peek_number(input):
        return _pop_number(input, errors)
    if peek_group(input, Delimiter.BRACE):
        return _pop_object(input, errors, values)
    if peek_group(input, Delimiter.BRACKET):
        return _pop_array(input, errors, values)
    if peek_keyword(input, "true"):
        pop_keyword(input, errors, "true")
        return True
    if peek_keyword(input, "false"):
        pop_keyword(input, errors, "false")
        return False
    if peek_keyword(input, "null"):
        pop_keyword(input, errors, "null")
        return None
    if peek_group(input, Delimiter.PARENTHESIS):
        return _pop_inline(input, errors, values)
    _report(errors, ErrorPriority.GRAMMAR, "Expected JSON5 value.", (input.front_span(),))


def parse(text: str, values: Mapping | None = None) -> Any:
    """Parse ``text`` as exactly one JSON5 value.

    Raises :class:`Json5SyntaxError` carrying every error found.
    """
    errors = Errors()
    input = Input(tokenize(text), Span(len(text), len(text)))
    try:
        value = parse_value(input, errors, values)
    except Error:
        value = None
    else:
        if not input.is_empty():
            errors.push(
                Error(ErrorPriority.UNCONSUMED, "Unconsumed token.", (input.front_span(),))
            )
    errors.raise_if_any()
    return value