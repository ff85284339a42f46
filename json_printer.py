# json_printer.py
# Serializes json_value trees back to JSON text
#
# =============================================================================
#  PRINTER IMPLEMENTATION: COMPACT AND INDENTED RENDERING
# =============================================================================
#
# Two modes share one recursive walk:
# 1. Compact - no inserted whitespace at all.
# 2. Pretty  - one element or member per line, indented by level * width.
#
# Pieces are appended to a single list and joined once at the end.
#
# Numbers use the shortest digits that round-trip (repr of the float) and are
# then written out positionally through Decimal, so neither 1e-11 nor
# 2405946039048539 ever comes back in exponent form.
#
# Objects are written in the order the value model stores them: sorted by
# key.
# =============================================================================

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Union

from json_value import Array, Boolean, Null, Number, Object, String, Value

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
INDENT_DEFAULT = 2

_ESCAPES = {
    "\\": "\\\\",
    '"':  '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
    "\b": "\\b",
}

# ---------------------------------------------------------------------------
# RENDER MODES
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Compact:
    """No whitespace between tokens."""


@dataclass(frozen=True)
class Pretty:
    indent_width: int = INDENT_DEFAULT

    def __post_init__(self):
        if self.indent_width < 0:
            raise ValueError(f"indent_width must be non-negative, got {self.indent_width}")


RenderMode = Union[Compact, Pretty]

COMPACT = Compact()

# ---------------------------------------------------------------------------
# SCALARS
# ---------------------------------------------------------------------------
def _escape_char(ch: str) -> str:
    if ch in _ESCAPES:
        return _ESCAPES[ch]
    if ch < " ":
        return f"\\u{ord(ch):04X}"
    return ch


def format_string(text: str) -> str:
    """
    Quote and escape `text`. Forward slash and non-ASCII pass through.
    """
    return '"' + "".join(_escape_char(ch) for ch in text) + '"'


def format_number(number: float) -> str:
    """
    Shortest round-trip digits in positional notation, without a trailing
    ".0" on integral values.
    """
    if not math.isfinite(number):
        raise ValueError(f"cannot render non-finite number {number!r} as JSON")
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text

# ---------------------------------------------------------------------------
# RECURSIVE WALK
# ---------------------------------------------------------------------------
def _emit(value: Value, mode: RenderMode, level: int, out: List[str]) -> None:
    if isinstance(value, Null):
        out.append("null")
    elif isinstance(value, Boolean):
        out.append("true" if value.value else "false")
    elif isinstance(value, Number):
        out.append(format_number(value.value))
    elif isinstance(value, String):
        out.append(format_string(value.value))
    elif isinstance(value, Array):
        _emit_array(value, mode, level, out)
    elif isinstance(value, Object):
        _emit_object(value, mode, level, out)
    else:
        raise TypeError(f"cannot render {type(value).__name__} as JSON")


def _emit_array(array: Array, mode: RenderMode, level: int, out: List[str]) -> None:
    if not array:
        out.append("[]")
        return
    out.append("[")
    for index, item in enumerate(array):
        if index > 0:
            out.append(",")
        _open_line(mode, level + 1, out)
        _emit(item, mode, level + 1, out)
    _open_line(mode, level, out)
    out.append("]")


def _emit_object(obj: Object, mode: RenderMode, level: int, out: List[str]) -> None:
    if not obj:
        out.append("{}")
        return
    separator = ": " if isinstance(mode, Pretty) else ":"
    out.append("{")
    for index, (key, member) in enumerate(obj.items()):
        if index > 0:
            out.append(",")
        _open_line(mode, level + 1, out)
        out.append(format_string(key))
        out.append(separator)
        _emit(member, mode, level + 1, out)
    _open_line(mode, level, out)
    out.append("}")


def _open_line(mode: RenderMode, level: int, out: List[str]) -> None:
    """Start a new indented line in pretty mode; nothing in compact mode."""
    if isinstance(mode, Pretty):
        out.append("\n")
        out.append(" " * (level * mode.indent_width))

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def render(value: Value, mode: RenderMode = COMPACT) -> str:
    """
    Render a json_value tree as JSON text in the given mode.
    """
    if not isinstance(mode, (Compact, Pretty)):
        raise TypeError(f"unknown render mode {mode!r}")
    out: List[str] = []
    _emit(value, mode, 0, out)
    return "".join(out)


__all__ = [
    "render", "Compact", "Pretty", "RenderMode", "COMPACT", "INDENT_DEFAULT",
    "format_string", "format_number",
]
