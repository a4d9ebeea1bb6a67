# tokenjson5

`tokenjson5` reads a single JSON5 value from text and returns it as plain
Python objects: objects become `dict`, arrays `list`, strings `str`, integer
literals `int` and other numbers `float`; `true`, `false` and `null` become
`True`, `False` and `None`.

What it accepts:

- keys written as plain identifiers or as double-quoted strings
- trailing commas in objects and arrays
- hexadecimal integers such as `0xdecaf`
- a leading or trailing decimal point (`.5`, `5.`)
- an explicit `+` or `-` sign
- `NaN`, `infinity` and `-infinity`
- `//` line comments and `/* ... */` block comments (which may nest)
- string escapes `\n`, `\r`, `\t`, `\\`, `\0`, `\'`, `\"`, `\xNN` (up to
  `\x7F`), `\u{...}`, and a backslash before a line break, which drops the
  break and the indentation after it

Strings must use double quotes. When a key appears twice in one object, the
last value is kept.

## Installation

```
pip install .
```

## Usage

```python
from tokenjson5.parser import parse

document = parse(
    """
    {
        // comments are allowed
        unquoted: "and you can quote me on that",
        hexadecimal: 0xdecaf,
        leadingDecimalPoint: .8675309,
        positiveSign: +1,
        trailingComma: "in objects", andIn: ["arrays",],
        "backwardsCompatible": "with JSON",
    }
    """
)

assert document["hexadecimal"] == 0xDECAF
assert document["andIn"] == ["arrays"]
```

### Inline values

A parenthesised group stands for a value you supply. Its contents, written out
as compact text, are looked up in the `values` mapping passed to `parse`:

```python
from tokenjson5.parser import parse

assert parse("{ answer: (answer) }", {"answer": 42}) == {"answer": 42}
```

A group whose text is not a key of `values` (or any group, when no mapping is
given) is reported as an unknown inline value.

### Errors

Input that is not exactly one valid value raises
`tokenjson5.tokens.Json5SyntaxError`, a `ValueError`. Parsing carries on past
a bad item where it can, so the exception holds every problem found in its
`errors` attribute, each an `Error` with a `priority`, a `message` and the
`spans` it refers to. Its text lists them as `line:column: message`.

```python
from tokenjson5.parser import parse
from tokenjson5.tokens import Json5SyntaxError

try:
    parse("{ key: }")
except Json5SyntaxError as error:
    for problem in error.errors:
        print(problem)
```

## Lower-level pieces

`tokenjson5.tokens.tokenize` splits text into token trees (`Group`, `Punct`,
`Ident` and `Literal`, each with a `Span`), dropping whitespace and comments.
`tokenjson5.parser.parse_value(input, errors, values)` reads one value from an
`Input` of such tokens, pushing problems into an `Errors` collection and
leaving any following tokens in place. The `peek_*` and `pop_*` functions and
`parse_delimited` in `tokenjson5.tokens` are the primitives it is built from,
for reading JSON5 values embedded in a larger token stream.

## What it does not do

`tokenjson5` only reads. It has no way to write Python objects out as JSON5 or
JSON, and it has no command-line tool.

## Running the tests

```
pip install ".[test]"
pytest
```