"""Token trees for JSON5 sources and the primitive parsers that consume them.

Source text is split into token trees: identifiers, punctuation, literals and
delimited groups, with comments and whitespace dropped. The ``peek_*``
functions look at the front of an :class:`Input` without consuming it. The
``pop_*`` functions consume a token; on failure they record an :class:`Error`
in an :class:`Errors` collection and raise it.
"""

from __future__ import annotations

import bisect
import re
import string
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Union

_DIGITS = frozenset(string.digits)
_PUNCT_CHARS = frozenset("=<>!~+-*/%^&|@.,;:#$?")
_NUMBER_CHARS = frozenset(string.digits + ".e")
_DOTTED_NUMBER_CHARS = frozenset(string.digits + "e")


@dataclass(frozen=True)
class Span:
    """A region of source text: character offsets plus the 1-based start position."""

    start: int
    end: int
    line: int = 1
    column: int = 1


def _join(first: Span, last: Span) -> Span:
    return Span(first.start, last.end, first.line, first.column)


class Delimiter(Enum):
    """The three bracket kinds that form groups; the value holds open and close."""

    PARENTHESIS = "()"
    BRACKET = "[]"
    BRACE = "{}"


@dataclass(frozen=True)
class Group:
    """A delimited sequence of token trees."""

    delimiter: Delimiter
    tokens: tuple
    span: Span
    open_span: Span
    close_span: Span


@dataclass(frozen=True)
class Punct:
    """A single punctuation character."""

    char: str
    span: Span


@dataclass(frozen=True)
class Ident:
    """An identifier or keyword, raw identifiers keeping their ``r#`` prefix."""

    name: str
    span: Span


@dataclass(frozen=True)
class Literal:
    """A string, character or number literal, kept as written."""

    text: str
    span: Span


TokenTree = Union[Group, Punct, Ident, Literal]

_OPENERS = {d.value[0]: d for d in Delimiter}
_CLOSERS = {d.value[1]: d for d in Delimiter}


class ErrorPriority(IntEnum):
    """How significant a reported error is; higher is more significant."""

    TOKEN = 1
    GRAMMAR = 2
    UNCONSUMED_IN_DELIMITER = 3
    UNCONSUMED = 4


@dataclass(eq=False)
class Error(Exception):
    """A parse error with its priority and the spans it refers to."""

    priority: ErrorPriority
    message: str
    spans: tuple = ()

    def __str__(self) -> str:
        if self.spans:
            span = self.spans[0]
            return f"{span.line}:{span.column}: {self.message}"
        return self.message


class Json5SyntaxError(ValueError):
    """Raised when source text is not valid; carries every collected error."""

    def __init__(self, errors: Iterable[Error]) -> None:
        self.errors = tuple(errors)
        super().__init__("\n".join(str(error) for error in self.errors))


class Errors:
    """An ordered collection of the errors reported while parsing."""

    def __init__(self) -> None:
        self._errors: list[Error] = []

    def push(self, error: Error) -> None:
        self._errors.append(error)

    def raise_if_any(self) -> None:
        if self._errors:
            raise Json5SyntaxError(self._errors)

    def __iter__(self) -> Iterator[Error]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)


@dataclass
class Input:
    """A queue of token trees with the span that marks its end."""

    tokens: deque = field(default_factory=deque)
    end: Span = Span(0, 0)

    def __post_init__(self) -> None:
        self.tokens = deque(self.tokens)

    def front(self) -> TokenTree | None:
        return self.tokens[0] if self.tokens else None

    def pop(self) -> TokenTree:
        return self.tokens.popleft()

    def is_empty(self) -> bool:
        return not self.tokens

    def front_span(self) -> Span:
        front = self.front()
        return self.end if front is None else front.span

    def __len__(self) -> int:
        return len(self.tokens)


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def _span(self, start: int, end: int) -> Span:
        line = bisect.bisect_right(self._line_starts, start)
        return Span(start, end, line, start - self._line_starts[line - 1] + 1)

    def _fail(self, message: str, start: int, end: int | None = None) -> None:
        span = self._span(start, start + 1 if end is None else end)
        raise Json5SyntaxError([Error(ErrorPriority.TOKEN, message, (span,))])

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _take_while(self, predicate: Callable[[str], bool]) -> None:
        while self.pos < len(self.text) and predicate(self.text[self.pos]):
            self.pos += 1

    def run(self) -> list:
        stack: list[tuple[Delimiter | None, Span | None, list]] = [(None, None, [])]
        while True:
            self._skip_trivia()
            if self.pos >= len(self.text):
                break
            char = self.text[self.pos]
            if char in _OPENERS:
                stack.append((_OPENERS[char], self._span(self.pos, self.pos + 1), []))
                self.pos += 1
            elif char in _CLOSERS:
                close = self._span(self.pos, self.pos + 1)
                if len(stack) == 1 or stack[-1][0] is not _CLOSERS[char]:
                    self._fail(f"Unexpected closing delimiter `{char}`.", self.pos)
                delimiter, open_span, tokens = stack.pop()
                self.pos += 1
                stack[-1][2].append(
                    Group(
                        delimiter,
                        tuple(tokens),
                        self._span(open_span.start, self.pos),
                        open_span,
                        close,
                    )
                )
            else:
                stack[-1][2].append(self._token())
        if len(stack) > 1:
            delimiter, open_span, _ = stack[-1]
            self._fail(f"Unclosed delimiter `{delimiter.value[0]}`.", open_span.start)
        return stack[0][2]

    def _skip_trivia(self) -> None:
        while self.pos < len(self.text):
            if self.text[self.pos].isspace():
                self.pos += 1
            elif self.text.startswith("//", self.pos):
                self._take_while(lambda ch: ch != "\n")
            elif self.text.startswith("/*", self.pos):
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        self._fail("Unterminated block comment.", start, start + 2)

    def _token(self) -> TokenTree:
        start = self.pos
        char = self.text[start]
        if char in _DIGITS:
            return self._number()
        if char == '"':
            return self._string(start)
        if char == "'":
            return self._char_or_quote(start)
        if _is_ident_start(char):
            return self._word()
        if char in _PUNCT_CHARS:
            self.pos += 1
            return Punct(char, self._span(start, self.pos))
        self._fail(f"Unexpected character `{char}`.", start)

    def _word(self) -> TokenTree:
        start = self.pos
        self._take_while(_is_ident_continue)
        word = self.text[start : self.pos]
        following = self._peek()
        if word == "r" and following == "#" and _is_ident_start(self._peek(1)):
            self.pos += 1
            self._take_while(_is_ident_continue)
            return Ident(self.text[start : self.pos], self._span(start, self.pos))
        if word in ("r", "br", "cr") and following in ('"', "#"):
            return self._raw_string(start)
        if word in ("b", "c") and following == '"':
            return self._string(start)
        if word == "b" and following == "'":
            return self._char_or_quote(start)
        return Ident(word, self._span(start, self.pos))

    def _literal(self, start: int) -> Literal:
        self._take_while(_is_ident_continue)
        return Literal(self.text[start : self.pos], self._span(start, self.pos))

    def _string(self, start: int) -> Literal:
        self.pos += 1
        while True:
            char = self._peek()
            if char == "":
                self._fail("Unterminated string literal.", start)
            if char == "\\":
                self.pos += 2
            elif char == '"':
                self.pos += 1
                return self._literal(start)
            else:
                self.pos += 1

    def _raw_string(self, start: int) -> Literal:
        hashes_start = self.pos
        self._take_while(lambda ch: ch == "#")
        hashes = self.pos - hashes_start
        if self._peek() != '"':
            self._fail("Invalid raw string literal.", start, self.pos)
        terminator = '"' + "#" * hashes
        close = self.text.find(terminator, self.pos + 1)
        if close < 0:
            self._fail("Unterminated raw string literal.", start)
        self.pos = close + len(terminator)
        return self._literal(start)

    def _char_or_quote(self, start: int) -> TokenTree:
        quote = self.pos
        if self._peek(1) == "\\":
            self.pos += 3
            self._take_while(lambda ch: ch not in "'\n")
            if self._peek() != "'":
                self._fail("Unterminated character literal.", start)
            self.pos += 1
            return self._literal(start)
        if self._peek(1) not in ("", "'") and self._peek(2) == "'":
            self.pos += 3
            return self._literal(start)
        if quote != start:
            self._fail("Invalid byte literal.", start, quote + 1)
        self.pos += 1
        return Punct("'", self._span(start, self.pos))

    def _number(self) -> Literal:
        start = self.pos
        if self.text.startswith(("0x", "0o", "0b"), self.pos):
            self.pos += 2
            return self._literal(start)
        self._take_while(_is_digit_or_underscore)
        if (
            self._peek() == "."
            and self._peek(1) != "."
            and not _is_ident_start(self._peek(1))
        ):
            self.pos += 1
            self._take_while(_is_digit_or_underscore)
        if self._peek() in ("e", "E") and (
            self._peek(1) in _DIGITS
            or (self._peek(1) in ("+", "-") and self._peek(2) in _DIGITS)
        ):
            self.pos += 1
            if self._peek() in ("+", "-"):
                self.pos += 1
            self._take_while(_is_digit_or_underscore)
        return self._literal(start)


def _is_ident_start(char: str) -> bool:
    return char == "_" or char.isalpha()


def _is_ident_continue(char: str) -> bool:
    return char == "_" or char.isalnum()


def _is_digit_or_underscore(char: str) -> bool:
    return char == "_" or char in _DIGITS


def tokenize(text: str) -> list:
    """Split ``text`` into token trees, dropping whitespace and comments."""
    return _Lexer(text).run()


def _fail(input: Input, errors: Errors, message: str, spans: tuple | None = None):
    error = Error(
        ErrorPriority.TOKEN,
        message,
        (input.front_span(),) if spans is None else spans,
    )
    errors.push(error)
    raise error


def peek_group(input: Input, delimiter: Delimiter) -> bool:
    front = input.front()
    return isinstance(front, Group) and front.delimiter is delimiter


@contextmanager
def pop_group(input: Input, errors: Errors, delimiter: Delimiter) -> Iterator[Input]:
    """Consume a group and yield an :class:`Input` over its contents.

    If the body fails, the group is put back and an error is reported for it.
    Tokens the body leaves unconsumed are reported as well.
    """
    open_char, close_char = delimiter.value
    if not peek_group(input, delimiter):
        _fail(input, errors, f"Expected `{open_char}`.")
    group = input.pop()
    inner = Input(group.tokens, group.close_span)
    try:
        yield inner
    except Error:
        input.tokens.appendleft(group)
        _fail(input, errors, f"Expected `{open_char}`.", (group.span,))
    if not inner.is_empty():
        errors.push(
            Error(
                ErrorPriority.UNCONSUMED_IN_DELIMITER,
                f"Unconsumed token inside `{open_char}…{close_char}`.",
                (inner.front_span(),),
            )
        )


def peek_punct(input: Input, char: str) -> bool:
    front = input.front()
    return isinstance(front, Punct) and front.char == char


def pop_punct(input: Input, errors: Errors, char: str) -> Punct:
    if not peek_punct(input, char):
        _fail(input, errors, f"Expected `{char}`.")
    return input.pop()


def peek_keyword(input: Input, word: str) -> bool:
    front = input.front()
    return isinstance(front, Ident) and front.name == word


def pop_keyword(input: Input, errors: Errors, word: str) -> Ident:
    if not peek_keyword(input, word):
        _fail(input, errors, f"Expected `{word}`.")
    return input.pop()


def _is_number_text(text: str) -> bool:
    return text.startswith("0x") or all(char in _NUMBER_CHARS for char in text)


def peek_number_literal(input: Input) -> bool:
    if peek_punct(input, "."):
        return True
    front = input.front()
    return isinstance(front, Literal) and _is_number_text(front.text)


def pop_number_literal(input: Input, errors: Errors) -> Literal:
    """Consume a number literal; a leading ``.`` gives a literal ``0.<digits>``."""
    if peek_punct(input, "."):
        dot = input.pop()
        front = input.front()
        if isinstance(front, Literal) and all(
            char in _DOTTED_NUMBER_CHARS for char in front.text
        ):
            input.pop()
            return Literal(f"0.{front.text}", _join(dot.span, front.span))
    else:
        front = input.front()
        if isinstance(front, Literal) and _is_number_text(front.text):
            return input.pop()
    _fail(input, errors, "Expected number literal.")


def peek_string(input: Input) -> bool:
    front = input.front()
    return isinstance(front, Literal) and front.text.startswith('"')


def pop_string(input: Input, errors: Errors) -> Literal:
    if not peek_string(input):
        _fail(input, errors, "Expected String.")
    return input.pop()


def peek_identifier(input: Input) -> bool:
    front = input.front()
    return isinstance(front, Ident) and not front.name.startswith("r#")


def pop_identifier(input: Input, errors: Errors) -> Ident:
    if not peek_identifier(input):
        _fail(input, errors, "Expected plain identifier.")
    return input.pop()


def _recover(
    input: Input,
    peek_delimiter: Callable[[Input], bool],
    pop_delimiter: Callable[[Input, Errors], Any],
) -> Any:
    """Skip tokens up to and including the next delimiter; None if none is left."""
    suppressed = Errors()
    while not input.is_empty():
        length_before = len(input)
        try:
            if peek_delimiter(input):
                return pop_delimiter(input, suppressed)
            input.pop()
        except Error:
            if len(input) == length_before:
                input.pop()
    return None


def parse_delimited(
    input: Input,
    errors: Errors,
    pop_item: Callable[[Input, Errors], Any],
    peek_delimiter: Callable[[Input], bool],
    pop_delimiter: Callable[[Input, Errors], Any],
) -> list:
    """Parse items separated by a delimiter until the input is exhausted.

    Returns ``(item, delimiter)`` pairs; the delimiter is None after the last
    item when there is no trailing one. Failed items are reported and skipped.
    """
    items = []
    while not input.is_empty():
        try:
            value = pop_item(input, errors)
        except Error:
            _recover(input, peek_delimiter, pop_delimiter)
            continue
        if input.is_empty():
            items.append((value, None))
            continue
        try:
            delimiter = pop_delimiter(input, errors)
        except Error:
            delimiter = _recover(input, peek_delimiter, pop_delimiter)
        items.append((value, delimiter))
    return items