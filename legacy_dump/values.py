"""
legacy_dump/values.py

Scalar value types and the row lexer for legacy SQL dump VALUES lists.

A row is the text between the parentheses of one VALUES group, e.g.::

    'SITE-01', 42, NULL, 3.14, _binary 'x\\0y'

and lexes to ``['SITE-01', 42, None, 3.14, OPAQUE]``.
"""

from __future__ import annotations

import re
from typing import Union

_WHITESPACE = " \t\n\r"
_NULL_TOKEN = "NULL"
_BINARY_PREFIX = "_binary"
_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


class OpaqueValue:
    """
    Placeholder for binary payloads the pipeline intentionally does not decode.
    """

    _instance: "OpaqueValue | None" = None

    def __new__(cls) -> "OpaqueValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OPAQUE"

    def __str__(self) -> str:
        return "[BINARY]"


OPAQUE = OpaqueValue()

ScalarValue = Union[None, int, float, str, OpaqueValue]


def parse_numeric_literal(literal: str) -> int | float | None:
    """
    Parse a bare SQL literal as a number.

    The integer/float split follows the decimal point or exponent: ``5`` is
    an int, ``5.0`` and ``5e2`` are floats. Returns None when the literal is
    not numeric.
    """

    text = literal.strip()
    if not text or not _NUMERIC_PATTERN.match(text):
        return None
    if "." in text or "e" in text or "E" in text:
        return float(text)
    return int(text)


def lex_row(text: str) -> list[ScalarValue]:
    """
    Convert one VALUES row substring into an ordered list of scalar values.

    Single left-to-right scan, no backtracking. Quoted strings are consumed
    up to the matching unescaped quote before separator handling runs, so a
    comma inside a string never splits a value.
    """

    values: list[ScalarValue] = []
    position = 0
    length = len(text)

    while position < length:
        while position < length and text[position] in _WHITESPACE:
            position += 1
        if position >= length:
            break

        if text.startswith(_NULL_TOKEN, position):
            values.append(None)
            position += len(_NULL_TOKEN)
        elif text.startswith(_BINARY_PREFIX, position):
            values.append(OPAQUE)
            position = _skip_binary_payload(text, position + len(_BINARY_PREFIX))
        elif text[position] == "'":
            value, position = _read_quoted(text, position + 1)
            values.append(value)
        else:
            start = position
            while position < length and text[position] != ",":
                position += 1
            literal = text[start:position].strip()
            number = parse_numeric_literal(literal)
            values.append(number if number is not None else literal)

        while position < length and (text[position] == "," or text[position] in _WHITESPACE):
            position += 1

    return values


def _read_quoted(text: str, position: int) -> tuple[str, int]:
    """
    Read a quoted string body starting just after the opening quote.

    ``\\x`` yields ``x`` and ``''`` yields ``'``. Returns the decoded value and
    the position just after the closing quote (or end of input).
    """

    chunks: list[str] = []
    length = len(text)
    while position < length:
        char = text[position]
        if char == "\\" and position + 1 < length:
            chunks.append(text[position + 1])
            position += 2
        elif char == "'":
            if position + 1 < length and text[position + 1] == "'":
                chunks.append("'")
                position += 2
            else:
                return "".join(chunks), position + 1
        else:
            chunks.append(char)
            position += 1
    return "".join(chunks), position


def _skip_binary_payload(text: str, position: int) -> int:
    length = len(text)
    while position < length and text[position] in _WHITESPACE:
        position += 1
    if position < length and text[position] == "'":
        _, position = _read_quoted(text, position + 1)
    while position < length and text[position] != ",":
        position += 1
    return position
