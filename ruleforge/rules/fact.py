"""
Fact: the named data tree a ruleset is evaluated against.
"""

import copy
from typing import Any, Dict, Mapping, Optional, Tuple

from shared.errors import ValidationError
from .models import Comparator
from .values import compare


class Fact:
    """Immutable ``subject -> attribute -> value`` tree with comparison accessors.

    The tree is copied on the way in and every accessor hands out copies, so
    nothing a condition or action does to returned values reaches the fact.

    Example:
        fact = Fact("fact1", {"subject1": {"attribute1": True}})
        fact.has_value("subject1", "attribute1", Comparator.EQUAL, "true")  # True
    """

    def __init__(self, name: str, data: Optional[Mapping[str, Any]] = None):
        if not isinstance(name, str) or not name:
            raise ValidationError("Fact name must be a non-empty string", {"name": repr(name)})
        if data is not None and not isinstance(data, Mapping):
            raise ValidationError("Fact data must be a mapping", {"fact": name})

        self._name = name
        self._data: Dict[str, Any] = copy.deepcopy(dict(data or {}))

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> Dict[str, Any]:
        """Copy of the data tree."""
        return copy.deepcopy(self._data)

    @property
    def subjects(self) -> Tuple[str, ...]:
        return tuple(self._data.keys())

    def get(self, key: str, default: Any = None) -> Any:
        """Top-level value, e.g. a ``subject`` field."""
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def has_subject(self, subject: str) -> bool:
        return subject in self._data

    def has_attribute(self, subject: str, attribute: str) -> bool:
        node = self._data.get(subject)
        return isinstance(node, Mapping) and attribute in node

    def get_value(self, subject: str, attribute: str, default: Any = None) -> Any:
        if not self.has_attribute(subject, attribute):
            return default
        return copy.deepcopy(self._data[subject][attribute])

    def has_value(self, subject: str, attribute: str, comparator: Comparator, value: str,
                  legacy_numeric_not_equal: bool = False) -> bool:
        """Compare ``subject.attribute`` against a string literal.

        Missing subjects or attributes never match, whatever the comparator.
        ``legacy_numeric_not_equal`` makes NOTEQUAL on numbers behave like EQUAL.
        """
        if not self.has_attribute(subject, attribute):
            return False

        return compare(
            self._data[subject][attribute],
            comparator,
            value,
            legacy_numeric_not_equal=legacy_numeric_not_equal
        )

    def __repr__(self) -> str:
        return f"Fact(name={self._name!r}, subjects={list(self._data)!r})"
