"""
Fact value kinds and comparator evaluation.

Fact data is an open mapping, so every stored value is classified into a
``ValueKind`` before it is compared. Comparators take a string literal;
numeric attributes compare against the literal's leading integer, all
other kinds compare against the literal's text.
"""

import math
import re
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from .models import Comparator

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

CONTAINER_TYPES = (list, tuple, set, frozenset)


class ValueKind(str, Enum):
    """Tagged kinds of fact values."""
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    LIST = "list"
    MAP = "map"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a fact value."""
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, CONTAINER_TYPES):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.MAP
    return ValueKind.OTHER


def stringify(value: Any) -> str:
    """Render a fact value as text, e.g. ``True -> 'true'``, ``3.0 -> '3'``."""
    kind = kind_of(value)

    if kind == ValueKind.NULL:
        return "null"
    if kind == ValueKind.BOOL:
        return "true" if value else "false"
    if kind == ValueKind.NUMBER:
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            if value.is_integer():
                return str(int(value))
        return str(value)
    if kind == ValueKind.STRING:
        return value
    if kind == ValueKind.LIST:
        return ",".join("" if item is None else stringify(item) for item in value)
    if kind == ValueKind.MAP:
        return "[object Object]"
    return str(value)


def parse_int(literal: Any) -> Optional[int]:
    """Parse the leading integer of a literal; ``None`` when there is none.

    Fractional literals are truncated: ``'10.9' -> 10``.
    """
    match = _LEADING_INT.match(str(literal))
    if match is None:
        return None
    return int(match.group(1))


def _elements(value: Any) -> Iterable[Any]:
    if isinstance(value, Mapping):
        return value.values()
    return value


def _element_matches(item: Any, literal: str) -> bool:
    if kind_of(item) == ValueKind.NUMBER:
        number = parse_int(literal)
        if number is not None and item == number:
            return True
    return stringify(item) == literal


def compare(attribute: Any, comparator: Comparator, literal: str,
            legacy_numeric_not_equal: bool = False) -> bool:
    """Evaluate ``attribute <comparator> literal``."""
    comparator = Comparator(comparator)
    kind = kind_of(attribute)
    numeric = kind == ValueKind.NUMBER
    number = parse_int(literal) if numeric else None

    if comparator == Comparator.EQUAL:
        if numeric:
            return number is not None and attribute == number
        return stringify(attribute) == literal

    if comparator == Comparator.NOTEQUAL:
        if numeric:
            if legacy_numeric_not_equal:
                return number is not None and attribute == number
            return number is None or attribute != number
        return stringify(attribute) != literal

    if comparator == Comparator.CONTAINS:
        if kind not in (ValueKind.LIST, ValueKind.MAP):
            return False
        return any(_element_matches(item, literal) for item in _elements(attribute))

    if comparator == Comparator.NOTCONTAINS:
        if kind not in (ValueKind.LIST, ValueKind.MAP):
            return True
        return not any(_element_matches(item, literal) for item in _elements(attribute))

    # Ordering comparators only apply to numbers
    if not numeric or number is None:
        return False

    if comparator == Comparator.GREATERTHAN:
        return attribute > number
    if comparator == Comparator.LESSTHAN:
        return attribute < number
    if comparator == Comparator.GREATEROREQUAL:
        return attribute >= number
    if comparator == Comparator.LESSOREQUAL:
        return attribute <= number

    return False
