# json_parser.py
# Hand-rolled recursive-descent JSON parser producing json_value trees
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A CHARACTER CURSOR
# =============================================================================
#
# JSON is LL(1): every rule is chosen by the next character alone, so the
# parser needs no token buffer and no backtracking. Each grammar rule maps to
# one function; nesting maps to recursion [RFC 8259].
#
# Design Rationale:
# 1. A single Cursor walks the input string. peek() looks at the next
#    character without consuming it, advance() consumes it. Nothing is ever
#    pushed back.
# 2. Numbers are validated incrementally against
#    -?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)? and only then handed
#    to float().
# 3. Strings are decoded in the same pass that validates them, including
#    UTF-16 surrogate pairs written as two \uXXXX escapes.
# 4. Nesting is capped at max_depth so hostile input fails with a ParseError
#    instead of exhausting the interpreter stack.
#
# Every rule fails on the first bad character. There is no recovery and no
# partial tree.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] RFC 8259 - The JavaScript Object Notation (JSON) Data Interchange Format
# [2] RFC 2781 - UTF-16, an encoding of ISO 10646 (surrogate pairs)
# =============================================================================

import enum
import logging
import math
from typing import Dict, List, Optional

from json_value import FALSE, NULL, TRUE, Array, Number, Object, String, Value

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 128   # Trees this deep still compare with == under the default recursion limit
DEPTH_LIMIT_MAX     = 160   # Ceiling for caller-supplied max_depth; deeper trees overflow the stack in ==

_WHITESPACE = frozenset(" \t\n\r")
_DIGITS     = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

_SHORT_ESCAPES = {
    '"':  '"',
    "\\": "\\",
    "/":  "/",
    "b":  "\b",
    "f":  "\f",
    "n":  "\n",
    "r":  "\r",
    "t":  "\t",
}

_LITERALS = {
    "n": ("null", NULL),
    "t": ("true", TRUE),
    "f": ("false", FALSE),
}

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES  = range(0xDC00, 0xE000)

# ---------------------------------------------------------------------------
# ERROR RECORD
# ---------------------------------------------------------------------------
class ErrorKind(enum.Enum):
    UNEXPECTED_CHARACTER = "unexpected character"
    UNEXPECTED_END       = "unexpected end of input"
    LITERAL_MISMATCH     = "literal mismatch"
    MALFORMED_NUMBER     = "malformed number"
    MALFORMED_STRING     = "malformed string"
    MALFORMED_STRUCTURE  = "malformed structure"
    DEPTH_LIMIT          = "depth limit exceeded"


class ParseError(SyntaxError):
    """
    Terminal parse failure.

    str(error) is the human-readable message. `position` is the character
    offset where parsing stopped and `kind` classifies the failure.
    """
    def __init__(self, message: str, position: int, kind: ErrorKind):
        super().__init__(message)
        self.message = message
        self.position = position
        self.kind = kind


def _describe(ch: Optional[str]) -> str:
    if ch is None:
        return "end of input"
    if ch < " " or ch == "\x7f":
        return f"U+{ord(ch):04X}"
    return f"'{ch}'"

# ---------------------------------------------------------------------------
# CURSOR
# ---------------------------------------------------------------------------
class Cursor:
    """
    Forward-only position in the input with one character of lookahead.
    """
    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> Optional[str]:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def advance(self) -> str:
        if self._pos >= len(self._text):
            raise ParseError(f"unexpected end of input at offset {self._pos}",
                             self._pos, ErrorKind.UNEXPECTED_END)
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos] in _WHITESPACE:
            self._pos += 1

    def fail(self, message: str, kind: ErrorKind, position: Optional[int] = None) -> ParseError:
        pos = self._pos if position is None else position
        return ParseError(f"{message} at offset {pos}", pos, kind)

    def unexpected(self, context: str) -> ParseError:
        """Error for the current lookahead, which does not fit `context`."""
        ch = self.peek()
        if ch is None:
            return self.fail(f"unexpected end of input - {context}", ErrorKind.UNEXPECTED_END)
        return self.fail(f"unexpected character {_describe(ch)} - {context}",
                         ErrorKind.UNEXPECTED_CHARACTER)

# ---------------------------------------------------------------------------
# UTILITY
# ---------------------------------------------------------------------------
def _expect(cursor: Cursor, expected: str, context: str) -> None:
    """
    Consume `expected` or raise with the actual character found.
    """
    if cursor.peek() != expected:
        raise cursor.unexpected(f"expected '{expected}' {context}")
    cursor.advance()

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(cursor: Cursor, depth: int, max_depth: int) -> Value:
    """
    Dispatch on the lookahead character. Whitespace on both sides of the
    value is consumed here so callers always see a delimiter next.
    """
    cursor.skip_whitespace()
    ch = cursor.peek()

    if ch in _LITERALS:
        value = _parse_literal(cursor, *_LITERALS[ch])
    elif ch == "-" or ch in _DIGITS:
        value = _parse_number(cursor)
    elif ch == '"':
        value = String(_parse_string(cursor))
    elif ch == "[":
        value = _parse_array(cursor, depth + 1, max_depth)
    elif ch == "{":
        value = _parse_object(cursor, depth + 1, max_depth)
    else:
        raise cursor.unexpected("value expected")

    cursor.skip_whitespace()
    return value

# ---------------------------------------------------------------------------
# LITERALS
# ---------------------------------------------------------------------------
def _parse_literal(cursor: Cursor, literal: str, value: Value) -> Value:
    for expected in literal:
        found = cursor.peek()
        if found != expected:
            raise cursor.fail(
                f"invalid literal '{literal}': expected '{expected}' but found {_describe(found)}",
                ErrorKind.LITERAL_MISMATCH,
            )
        cursor.advance()
    return value

# ---------------------------------------------------------------------------
# NUMBERS
# ---------------------------------------------------------------------------
def _take_digits(cursor: Cursor, out: List[str], what: str, start: int) -> None:
    """
    Consume one or more digits into `out`. Zero digits is an error.
    """
    if cursor.peek() not in _DIGITS:
        raise cursor.fail(
            f"malformed number starting at offset {start}: expected digit {what} "
            f"but found {_describe(cursor.peek())}",
            ErrorKind.MALFORMED_NUMBER,
        )
    while cursor.peek() in _DIGITS:
        out.append(cursor.advance())


def _parse_number(cursor: Cursor) -> Number:
    """
    Parse a JSON number.

    The integer part is either a lone 0 or a non-zero digit run, so "00"
    stops after the first 0 and the caller rejects the leftover digit.
    """
    start = cursor.position
    chars: List[str] = []

    if cursor.peek() == "-":
        chars.append(cursor.advance())

    if cursor.peek() == "0":
        chars.append(cursor.advance())
    else:
        _take_digits(cursor, chars, "in integer part", start)

    if cursor.peek() == ".":
        chars.append(cursor.advance())
        _take_digits(cursor, chars, "after decimal point", start)

    if cursor.peek() in ("e", "E"):
        chars.append(cursor.advance())
        if cursor.peek() in ("+", "-"):
            chars.append(cursor.advance())
        _take_digits(cursor, chars, "in exponent", start)

    literal = "".join(chars)
    try:
        number = float(literal)
    except ValueError as exc:
        raise cursor.fail(f"internal error converting number literal '{literal}'",
                          ErrorKind.MALFORMED_NUMBER, start) from exc
    # RFC 8259 section 9 lets a parser limit range. A literal beyond the double
    # range would become inf, which no JSON text can express, so it is refused.
    if math.isinf(number):
        raise cursor.fail(f"number out of range '{literal}'", ErrorKind.MALFORMED_NUMBER, start)
    return Number(number)

# ---------------------------------------------------------------------------
# STRINGS
# ---------------------------------------------------------------------------
def _read_hex4(cursor: Cursor, escape_start: int) -> int:
    """
    Read the four hex digits of a \\u escape and return the code unit.
    """
    digits = []
    for _ in range(4):
        ch = cursor.peek()
        if ch is None:
            raise cursor.fail(f"unterminated unicode escape starting at offset {escape_start}",
                              ErrorKind.MALFORMED_STRING)
        if ch not in _HEX_DIGITS:
            raise cursor.fail(f"invalid hex digit {_describe(ch)} in unicode escape",
                              ErrorKind.MALFORMED_STRING)
        digits.append(cursor.advance())
    return int("".join(digits), 16)


def _parse_unicode_escape(cursor: Cursor, escape_start: int) -> str:
    """
    Decode the body of a \\u escape (the "\\u" is already consumed).

    A high surrogate must be followed directly by a \\u escape holding a low
    surrogate. The pair is combined into a single scalar value.
    """
    unit = _read_hex4(cursor, escape_start)
    if unit in _LOW_SURROGATES:
        raise cursor.fail(f"unpaired low surrogate \\u{unit:04X}", ErrorKind.MALFORMED_STRING,
                          escape_start)
    if unit not in _HIGH_SURROGATES:
        return chr(unit)

    low_start = cursor.position
    if cursor.peek() != "\\":
        raise cursor.fail(f"unpaired high surrogate \\u{unit:04X}", ErrorKind.MALFORMED_STRING,
                          escape_start)
    cursor.advance()
    if cursor.peek() != "u":
        raise cursor.fail(f"unpaired high surrogate \\u{unit:04X}", ErrorKind.MALFORMED_STRING,
                          escape_start)
    cursor.advance()
    low = _read_hex4(cursor, low_start)
    if low not in _LOW_SURROGATES:
        raise cursor.fail(f"invalid surrogate pair \\u{unit:04X}\\u{low:04X}",
                          ErrorKind.MALFORMED_STRING, escape_start)
    return chr(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))


def _parse_string(cursor: Cursor) -> str:
    """
    Parse a quoted string and return its decoded contents.

    Handles three classes of errors with precise offsets:
    1) Structural issues - unterminated string.
    2) Escape syntax - unknown escape, short or non-hex unicode escape.
    3) Unicode correctness - unpaired surrogates and raw control characters.
    """
    start = cursor.position
    _expect(cursor, '"', "to open string")
    out: List[str] = []

    while True:
        ch = cursor.peek()
        if ch is None:
            raise cursor.fail(f"unterminated string starting at offset {start}",
                              ErrorKind.MALFORMED_STRING)
        if ch == '"':
            cursor.advance()
            return "".join(out)
        if ch == "\\":
            escape_start = cursor.position
            cursor.advance()
            esc = cursor.peek()
            if esc is None:
                raise cursor.fail(f"unterminated string starting at offset {start}",
                                  ErrorKind.MALFORMED_STRING)
            cursor.advance()
            if esc == "u":
                out.append(_parse_unicode_escape(cursor, escape_start))
            elif esc in _SHORT_ESCAPES:
                out.append(_SHORT_ESCAPES[esc])
            else:
                raise cursor.fail(f"invalid escape \\{esc}", ErrorKind.MALFORMED_STRING,
                                  escape_start)
            continue
        if ch < " ":
            raise cursor.fail(f"unescaped control character {_describe(ch)} in string",
                              ErrorKind.MALFORMED_STRING)
        out.append(cursor.advance())

# ---------------------------------------------------------------------------
# ARRAY PARSER
# ---------------------------------------------------------------------------
def _check_depth(cursor: Cursor, depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise cursor.fail(f"depth limit of {max_depth} exceeded", ErrorKind.DEPTH_LIMIT)


def _parse_array(cursor: Cursor, depth: int, max_depth: int) -> Array:
    """
    Parse a JSON array. A ']' where an element should follow a comma is a
    trailing comma and is rejected.
    """
    _check_depth(cursor, depth, max_depth)
    _expect(cursor, "[", "to open array")
    cursor.skip_whitespace()
    items: List[Value] = []
    if cursor.peek() == "]":
        cursor.advance()
        return Array(())

    while True:
        items.append(_parse_value(cursor, depth, max_depth))
        ch = cursor.peek()
        if ch == "]":
            cursor.advance()
            return Array(items)
        _expect(cursor, ",", "or ']' after array element")
        cursor.skip_whitespace()
        if cursor.peek() == "]":
            raise cursor.fail("trailing comma in array", ErrorKind.MALFORMED_STRUCTURE)

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _parse_key(cursor: Cursor) -> str:
    if cursor.peek() != '"':
        if cursor.peek() is None:
            raise cursor.unexpected("expected string key")
        raise cursor.fail(f"expected string key but found {_describe(cursor.peek())}",
                          ErrorKind.MALFORMED_STRUCTURE)
    return _parse_string(cursor)


def _parse_object(cursor: Cursor, depth: int, max_depth: int) -> Object:
    """
    Parse a JSON object. Keys go through the string rule directly, so bare
    words are rejected. A repeated key overwrites the earlier member.
    """
    _check_depth(cursor, depth, max_depth)
    _expect(cursor, "{", "to open object")
    cursor.skip_whitespace()
    members: Dict[str, Value] = {}
    if cursor.peek() == "}":
        cursor.advance()
        return Object(members)

    while True:
        key = _parse_key(cursor)
        cursor.skip_whitespace()
        _expect(cursor, ":", "after object key")
        members[key] = _parse_value(cursor, depth, max_depth)
        ch = cursor.peek()
        if ch == "}":
            cursor.advance()
            return Object(members)
        _expect(cursor, ",", "or '}' after object member")
        cursor.skip_whitespace()
        if cursor.peek() == "}":
            raise cursor.fail("trailing comma in object", ErrorKind.MALFORMED_STRUCTURE)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Value:
    """
    Parse JSON text into a json_value tree.

    Any single value is accepted at the root. Whatever follows it, other
    than whitespace, is rejected so the whole input is consumed [RFC 8259].
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    if max_depth > DEPTH_LIMIT_MAX:
        raise ValueError(f"max_depth must be at most {DEPTH_LIMIT_MAX}, got {max_depth}")

    cursor = Cursor(text)
    try:
        result = _parse_value(cursor, 0, max_depth)
        if not cursor.at_end():
            raise cursor.unexpected("extra data after root value")
    except ParseError as exc:
        logger.debug("parse failed (%s): %s", exc.kind.name, exc.message)
        raise
    logger.debug("parsed %d characters into %s", len(text), type(result).__name__)
    return result


__all__ = ["parse", "ParseError", "ErrorKind", "Cursor", "DEPTH_LIMIT_DEFAULT", "DEPTH_LIMIT_MAX"]
