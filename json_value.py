# json_value.py
# Tree model for parsed JSON documents
#
# =============================================================================
#  VALUE MODEL: CLOSED SET OF VARIANTS
# =============================================================================
#
# Every JSON value is exactly one of six frozen dataclasses. Consumers match
# on the class (isinstance) and the union alias `Value` names the full set.
#
# Storage choices:
# 1. Number is always a float. Integers and decimals are not distinguished
#    beyond what a double carries.
# 2. Array holds a tuple so a tree is immutable once built.
# 3. Object keeps its members sorted by key (code point order). Iteration and
#    printing follow key order, never the order keys appeared in the source.
#
# =============================================================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Tuple, Union


@dataclass(frozen=True)
class Null:
    """The JSON `null` literal."""


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Number:
    """
    Double-precision number. Ints are coerced so Number(1) == Number(1.0)
    and both carry a float payload.
    """
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Number payload must be int or float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class Array:
    items: Tuple["Value", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


@dataclass(frozen=True)
class Object:
    """
    Key-sorted mapping of member names to values.

    Accepts a mapping or an iterable of (key, value) pairs. With pairs, a
    repeated key keeps its last value, matching how the parser resolves
    duplicate members.
    """
    members: Mapping[str, "Value"] = field(default_factory=dict)

    def __post_init__(self):
        source = self.members.items() if isinstance(self.members, Mapping) else self.members
        collected = {}
        for key, value in source:
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be str, got {type(key).__name__}")
            collected[key] = value
        ordered = {key: collected[key] for key in sorted(collected)}
        object.__setattr__(self, "members", MappingProxyType(ordered))

    def __hash__(self) -> int:
        return hash(tuple(self.members.items()))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def __getitem__(self, key: str) -> "Value":
        return self.members[key]

    def __contains__(self, key: object) -> bool:
        return key in self.members

    def items(self) -> Iterable[Tuple[str, "Value"]]:
        return self.members.items()


Value = Union[Null, Boolean, String, Number, Array, Object]

NULL  = Null()
TRUE  = Boolean(True)
FALSE = Boolean(False)

__all__ = [
    "Null", "Boolean", "String", "Number", "Array", "Object", "Value",
    "NULL", "TRUE", "FALSE",
]
