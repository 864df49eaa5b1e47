"""
Conditions guard rules; each test returns an Outcome.
"""

from typing import TYPE_CHECKING, Callable, Optional

from .models import Comparator, Outcome, PASS, FAIL

if TYPE_CHECKING:  # pragma: no cover
    from ruleforge.knowledge.base import KnowledgeBase
    from .fact import Fact

ConditionTest = Callable[["Fact", Optional["KnowledgeBase"]], Outcome]


class Condition:
    """Named predicate over a fact and, optionally, the knowledge base."""

    def __init__(self, name: str, test: ConditionTest):
        self._name = name
        self.test = test

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Condition(name={self._name!r})"


class StandardCondition(Condition):
    """Condition built from a single ``Fact.has_value`` comparison."""

    def __init__(
        self,
        name: str,
        subject: str,
        attribute: str,
        comparator: Comparator,
        value: str,
        pass_outcome: Outcome = PASS,
        fail_outcome: Outcome = FAIL,
        legacy_numeric_not_equal: bool = False
    ):
        self.subject = subject
        self.attribute = attribute
        self.comparator = Comparator(comparator)
        self.value = value
        self.pass_outcome = pass_outcome
        self.fail_outcome = fail_outcome
        self.legacy_numeric_not_equal = legacy_numeric_not_equal
        super().__init__(name, self._compare)

    def _compare(self, fact: "Fact", knowledge_base: Optional["KnowledgeBase"] = None) -> Outcome:
        if fact.has_value(self.subject, self.attribute, self.comparator, self.value,
                          legacy_numeric_not_equal=self.legacy_numeric_not_equal):
            return self.pass_outcome
        return self.fail_outcome
