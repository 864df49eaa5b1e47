"""
Unit tests for Fact and comparator evaluation.
"""

import pytest

from shared.errors import ValidationError
from ruleforge.rules.fact import Fact
from ruleforge.rules.models import Comparator
from ruleforge.rules.values import ValueKind, kind_of, parse_int, stringify


class TestValueHelpers:
    """Test value classification, rendering and literal parsing."""

    @pytest.mark.parametrize("value,kind", [
        (None, ValueKind.NULL),
        (True, ValueKind.BOOL),
        (3, ValueKind.NUMBER),
        (2.5, ValueKind.NUMBER),
        ("text", ValueKind.STRING),
        ([1, 2], ValueKind.LIST),
        ({"a": 1}, ValueKind.MAP),
    ])
    def test_kind_of(self, value, kind):
        """Test value classification."""
        assert kind_of(value) == kind

    def test_stringify(self):
        """Test rendering of fact values as text."""
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(None) == "null"
        assert stringify(3.0) == "3"
        assert stringify(2.5) == "2.5"
        assert stringify([1, None, "a"]) == "1,,a"
        assert stringify({"a": 1}) == "[object Object]"

    def test_parse_int(self):
        """Test leading-integer parsing of literals."""
        assert parse_int("42") == 42
        assert parse_int(" 42abc") == 42
        assert parse_int("-7") == -7
        assert parse_int("10.9") == 10
        assert parse_int("abc") is None
        assert parse_int("") is None


class TestFact:
    """Test cases for Fact accessors."""

    @pytest.fixture
    def fact(self):
        """Create sample fact."""
        return Fact("fact1", {
            "subject1": {
                "attribute1": True,
                "attribute2": "rule2",
                "score": 10,
                "ratio": 2.5,
                "tags": ["red", "blue", 7],
                "owners": {"first": "ann"},
            },
            "subject2": {
                "attribute3": "passme",
            },
            "subject": "subject1",
        })

    def test_name_and_subjects(self, fact):
        """Test name and subject listing."""
        assert fact.name == "fact1"
        assert fact.subjects == ("subject1", "subject2", "subject")

    def test_invalid_name(self):
        """Test that an empty fact name is rejected."""
        with pytest.raises(ValidationError):
            Fact("", {})

    def test_invalid_data(self):
        """Test that non-mapping data is rejected."""
        with pytest.raises(ValidationError):
            Fact("bad", ["not", "a", "mapping"])

    def test_has_subject(self, fact):
        """Test subject lookup."""
        assert fact.has_subject("subject1") is True
        assert fact.has_subject("missing") is False

    def test_has_attribute(self, fact):
        """Test attribute lookup."""
        assert fact.has_attribute("subject1", "attribute1") is True
        assert fact.has_attribute("subject1", "missing") is False
        assert fact.has_attribute("missing", "attribute1") is False
        # Leaf subjects have no attributes
        assert fact.has_attribute("subject", "anything") is False

    def test_get_value_and_get(self, fact):
        """Test value accessors."""
        assert fact.get_value("subject1", "attribute2") == "rule2"
        assert fact.get_value("subject1", "missing", "default") == "default"
        assert fact.get("subject") == "subject1"
        assert fact.get("missing") is None

    def test_data_is_copied(self):
        """Test that the fact owns its data."""
        source = {"subject1": {"score": 1}}
        fact = Fact("fact", source)
        source["subject1"]["score"] = 99
        fact.data["subject2"] = {}

        assert fact.get_value("subject1", "score") == 1
        assert fact.has_subject("subject2") is False

    def test_nested_values_cannot_be_changed(self):
        """Test that nested dicts and lists handed out by accessors are copies."""
        fact = Fact("fact", {"s": {"a": 1, "tags": ["x"]}, "subject": ["s"]})

        fact.data["s"]["a"] = 99
        fact.get_value("s", "tags").append("y")
        fact.get("s")["a"] = 42
        fact.get("subject").append("t")

        assert fact.get_value("s", "a") == 1
        assert fact.get_value("s", "tags") == ["x"]
        assert fact.get("subject") == ["s"]
        assert fact.has_value("s", "tags", Comparator.CONTAINS, "y") is False

    def test_missing_paths_never_match(self, fact):
        """Test that every comparator is false on missing subjects or attributes."""
        for comparator in Comparator:
            assert fact.has_value("missing", "score", comparator, "10") is False
            assert fact.has_value("subject1", "missing", comparator, "10") is False

    def test_equal(self, fact):
        """Test EQUAL on numbers, booleans and strings."""
        assert fact.has_value("subject1", "score", Comparator.EQUAL, "10") is True
        assert fact.has_value("subject1", "score", Comparator.EQUAL, "10.7") is True
        assert fact.has_value("subject1", "score", Comparator.EQUAL, "11") is False
        assert fact.has_value("subject1", "score", Comparator.EQUAL, "ten") is False
        assert fact.has_value("subject1", "attribute1", Comparator.EQUAL, "true") is True
        assert fact.has_value("subject2", "attribute3", Comparator.EQUAL, "passme") is True
        assert fact.has_value("subject2", "attribute3", Comparator.EQUAL, "failme") is False

    def test_comparator_accepts_string_name(self, fact):
        """Test that comparators can be given by name."""
        assert fact.has_value("subject1", "score", "EQUAL", "10") is True

    def test_not_equal_strings(self, fact):
        """Test NOTEQUAL on non-numeric values."""
        assert fact.has_value("subject2", "attribute3", Comparator.NOTEQUAL, "failme") is True
        assert fact.has_value("subject2", "attribute3", Comparator.NOTEQUAL, "passme") is False

    def test_not_equal_numbers_negates(self, fact):
        """Test NOTEQUAL on numbers negates EQUAL by default."""
        assert fact.has_value("subject1", "score", Comparator.NOTEQUAL, "10") is False
        assert fact.has_value("subject1", "score", Comparator.NOTEQUAL, "11") is True

    def test_not_equal_numbers_legacy(self, fact):
        """Test NOTEQUAL on numbers mirrors EQUAL in legacy mode."""
        assert fact.has_value("subject1", "score", Comparator.NOTEQUAL, "10",
                              legacy_numeric_not_equal=True) is True
        assert fact.has_value("subject1", "score", Comparator.NOTEQUAL, "11",
                              legacy_numeric_not_equal=True) is False
        assert fact.has_value("subject2", "attribute3", Comparator.NOTEQUAL, "failme",
                              legacy_numeric_not_equal=True) is True

    def test_contains(self, fact):
        """Test CONTAINS on lists, mappings and scalars."""
        assert fact.has_value("subject1", "tags", Comparator.CONTAINS, "blue") is True
        assert fact.has_value("subject1", "tags", Comparator.CONTAINS, "7") is True
        assert fact.has_value("subject1", "tags", Comparator.CONTAINS, "green") is False
        assert fact.has_value("subject1", "owners", Comparator.CONTAINS, "ann") is True
        assert fact.has_value("subject1", "score", Comparator.CONTAINS, "10") is False
        assert fact.has_value("subject2", "attribute3", Comparator.CONTAINS, "pass") is False

    def test_not_contains(self, fact):
        """Test NOTCONTAINS on lists and scalars."""
        assert fact.has_value("subject1", "tags", Comparator.NOTCONTAINS, "green") is True
        assert fact.has_value("subject1", "tags", Comparator.NOTCONTAINS, "red") is False
        assert fact.has_value("subject1", "score", Comparator.NOTCONTAINS, "10") is True

    def test_ordering(self, fact):
        """Test ordering comparators."""
        assert fact.has_value("subject1", "score", Comparator.GREATERTHAN, "5") is True
        assert fact.has_value("subject1", "score", Comparator.GREATERTHAN, "10") is False
        assert fact.has_value("subject1", "score", Comparator.LESSTHAN, "11") is True
        assert fact.has_value("subject1", "score", Comparator.GREATEROREQUAL, "10") is True
        assert fact.has_value("subject1", "score", Comparator.LESSOREQUAL, "9") is False
        assert fact.has_value("subject1", "ratio", Comparator.GREATERTHAN, "2.9") is True
        assert fact.has_value("subject1", "score", Comparator.GREATERTHAN, "abc") is False

    def test_ordering_non_numeric(self, fact):
        """Test ordering comparators on non-numeric values."""
        assert fact.has_value("subject2", "attribute3", Comparator.GREATERTHAN, "0") is False
        assert fact.has_value("subject1", "attribute1", Comparator.LESSOREQUAL, "5") is False

    def test_accessors_are_idempotent(self, fact):
        """Test that repeated reads give identical answers and leave data untouched."""
        before = {key: value for key, value in fact.data.items()}
        answers = [
            (fact.has_subject("subject1"),
             fact.has_attribute("subject1", "score"),
             fact.has_value("subject1", "tags", Comparator.CONTAINS, "red"))
            for _ in range(3)
        ]

        assert answers == [(True, True, True)] * 3
        assert dict(fact.data) == before
