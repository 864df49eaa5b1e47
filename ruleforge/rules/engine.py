"""
Rule evaluation engine for RuleForge.
"""

from typing import Any, Dict, List, Optional

from shared.logging import get_logger, set_run_context, clear_context
from shared.errors import NotFoundError, OutcomeTypeError, RuleError, CycleError
from shared.metrics import MetricsCollector
from ruleforge.knowledge.actions import Action
from ruleforge.knowledge.base import KnowledgeBase
from .conditions import Condition, ConditionTest
from .fact import Fact
from .models import Outcome, OutcomeKind, Result, PASS, FAIL


class Rule:
    """A named, ordered set of conditions guarding one action."""

    def __init__(self, name: str, action: Optional[Action] = None,
                 conditions: Optional[List[Condition]] = None):
        self._name = name
        self._action = action if action is not None else Action()
        self._conditions: Dict[str, Condition] = {}
        for condition in conditions or []:
            self.add_condition(condition)

    @property
    def name(self) -> str:
        return self._name

    @property
    def action(self) -> Action:
        return self._action

    @action.setter
    def action(self, action: Action):
        self._action = action

    @property
    def conditions(self) -> List[Condition]:
        return list(self._conditions.values())

    def add_condition(self, condition: Condition):
        """Add a condition; an existing name keeps its position but takes the new test."""
        self._conditions[condition.name] = condition

    def get_condition(self, name: str) -> Condition:
        condition = self._conditions.get(name)
        if condition is None:
            raise NotFoundError("condition", name, self._name)
        return condition

    def remove_condition(self, name: str):
        if name not in self._conditions:
            raise NotFoundError("condition", name, self._name)
        del self._conditions[name]

    def update_condition(self, name: str, test: ConditionTest):
        self.get_condition(name).test = test

    def test_conditions(self, fact: Fact, knowledge_base: Optional[KnowledgeBase] = None) -> Outcome:
        """Test conditions in order, stopping at the first one that does not pass."""
        for condition in self._conditions.values():
            outcome = condition.test(fact, knowledge_base)
            if not isinstance(outcome, Outcome):
                raise OutcomeTypeError(condition.name, outcome)
            if outcome.kind != OutcomeKind.PASS:
                return outcome

        # No condition stopped us, so all of them passed
        return PASS

    def fire_action(self, payload: Any = None, knowledge_base: Optional[KnowledgeBase] = None):
        self._action.act(payload, knowledge_base)

    def __repr__(self) -> str:
        return f"Rule(name={self._name!r}, conditions={list(self._conditions)!r})"


class Ruleset:
    """Insertion-ordered rules evaluated against one fact at a time.

    A rule whose conditions return ``redirect(name)`` hands evaluation to the
    named rule, on the same fact, until a PASS, FAIL or ERROR is reached. The
    first chain that ends in FAIL stops the whole run; ERROR and redirect
    cycles raise.

    ``legacy_numeric_not_equal`` is the NOTEQUAL mode handed to standard
    conditions built for this ruleset.
    """

    def __init__(self, name: str, knowledge_base: Optional[KnowledgeBase] = None,
                 metrics: Optional[MetricsCollector] = None,
                 legacy_numeric_not_equal: bool = False):
        self.logger = get_logger("ruleforge.ruleset")
        self._name = name
        self.knowledge_base = knowledge_base
        self.metrics = metrics
        self.legacy_numeric_not_equal = legacy_numeric_not_equal
        self._rules: Dict[str, Rule] = {}
        self._passed_rules: List[str] = []
        self._results: List[Result] = []
        self._run_knowledge_base: Optional[KnowledgeBase] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules.values())

    @property
    def passed_rules(self) -> List[str]:
        return list(self._passed_rules)

    @property
    def results(self) -> List[Result]:
        return list(self._results)

    def add_rule(self, rule: Rule):
        self._rules[rule.name] = rule
        self.logger.debug("Rule added", ruleset=self._name, rule=rule.name)

    def get_rule(self, name: str) -> Rule:
        rule = self._rules.get(name)
        if rule is None:
            raise NotFoundError("rule", name, self._name)
        return rule

    def remove_rule(self, name: str):
        if name not in self._rules:
            raise NotFoundError("rule", name, self._name)
        del self._rules[name]
        self.logger.debug("Rule removed", ruleset=self._name, rule=name)

    def run_rules(self, fact: Fact, fire_on_pass: bool = True, fail_on_infinite: bool = False,
                  knowledge_base: Optional[KnowledgeBase] = None) -> Result:
        """Evaluate every rule against ``fact`` and return the last recorded result."""
        kb = knowledge_base if knowledge_base is not None else self.knowledge_base
        self._passed_rules = []
        self._results = []
        self._run_knowledge_base = kb

        set_run_context(ruleset=self._name, fact=fact.name)
        self.logger.info("Ruleset run started", rules=len(self._rules), fire_on_pass=fire_on_pass)
        try:
            if self.metrics is not None:
                with self.metrics.time_operation("ruleset_run_duration_seconds", ruleset=self._name):
                    result = self._run(fact, fire_on_pass, fail_on_infinite, kb)
            else:
                result = self._run(fact, fire_on_pass, fail_on_infinite, kb)
        finally:
            clear_context()

        return result

    def _run(self, fact: Fact, fire_on_pass: bool, fail_on_infinite: bool,
             kb: Optional[KnowledgeBase]) -> Result:
        result = Result(ruleset_name=self._name, rule_name="", fact_name=fact.name, outcome="")

        for head, rule in list(self._rules.items()):
            outcome = self._evaluate(rule, fact, kb)
            result = self._record(head, fact, outcome)
            seen = {head}

            while outcome.is_redirect:
                target = outcome.target
                if target in seen:
                    self._on_cycle(result.rule_name, target)
                    if fail_on_infinite:
                        result = result.model_copy(update={"outcome": str(FAIL)})
                        self._results[-1] = result
                        self._finish(result)
                        return result
                    if self.metrics is not None:
                        self.metrics.record_run(self._name, "CYCLE")
                    raise CycleError(result.rule_name, target)

                seen.add(target)
                outcome = self._evaluate(self.get_rule(target), fact, kb)
                result = self._record(target, fact, outcome)

            if outcome.kind == OutcomeKind.FAIL:
                self.logger.info("Rule chain failed, stopping run", rule=head, failed_at=result.rule_name)
                self._finish(result)
                return result

            if outcome.kind == OutcomeKind.ERROR:
                self.logger.error("Rule signalled an error", rule=result.rule_name, chain=head)
                if self.metrics is not None:
                    self.metrics.record_error(self._name)
                    self.metrics.record_run(self._name, OutcomeKind.ERROR.value)
                raise RuleError(result.rule_name, {"ruleset": self._name, "fact": fact.name})

            self._passed_rules.append(head)
            if fire_on_pass:
                self._fire(rule, fact, kb)

        self._finish(result)
        return result

    def _evaluate(self, rule: Rule, fact: Fact, kb: Optional[KnowledgeBase]) -> Outcome:
        outcome = rule.test_conditions(fact, kb)
        self.logger.debug("Rule evaluated", rule=rule.name, outcome=str(outcome))
        if self.metrics is not None:
            self.metrics.record_evaluation(self._name, outcome.kind.value)
        return outcome

    def _record(self, rule_name: str, fact: Fact, outcome: Outcome) -> Result:
        result = Result(
            ruleset_name=self._name,
            rule_name=rule_name,
            fact_name=fact.name,
            outcome=str(outcome)
        )
        self._results.append(result)
        return result

    def _on_cycle(self, rule_name: str, target: str):
        self.logger.warning("Redirect cycle detected", rule=rule_name, target=target)
        if self.metrics is not None:
            self.metrics.record_cycle(self._name)

    def _fire(self, rule: Rule, payload: Any, kb: Optional[KnowledgeBase]):
        rule.fire_action(payload, kb)
        self.logger.debug("Action fired", rule=rule.name, action=rule.action.name)
        if self.metrics is not None:
            self.metrics.record_action(self._name, rule.name)

    def _finish(self, result: Result):
        self.logger.info(
            "Ruleset run finished",
            outcome=result.outcome,
            last_rule=result.rule_name,
            passed=len(self._passed_rules),
            visited=len(self._results)
        )
        if self.metrics is not None:
            self.metrics.record_run(self._name, result.outcome if result.outcome else "EMPTY")

    def fire_all_passes(self, payload: Any = None):
        """Fire the action of every rule that passed in the last run, in pass order."""
        kb = self._run_knowledge_base if self._run_knowledge_base is not None else self.knowledge_base
        for name in self._passed_rules:
            self._fire(self.get_rule(name), payload, kb)
