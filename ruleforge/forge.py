"""
RuleForge: builder and registry for rulesets and facts.

Every builder call targets an explicit handle, so there is no hidden
"current ruleset" or "current rule" shared between calls:

    forge = RuleForge()
    rules = forge.new_ruleset("ruleset1")
    rules.add_rule("rule1").add_condition("cond1", lambda fact, kb: PASS)
    rules.run(fact)
"""

from typing import Any, Dict, List, Optional

from shared.config import RuleForgeSettings, get_config
from shared.logging import configure_logging, get_logger
from shared.errors import NotFoundError
from shared.metrics import MetricsCollector, get_metrics_collector
from ruleforge.knowledge.actions import (
    Action, ActionCallback, KnowledgeAction, RelationshipAction
)
from ruleforge.knowledge.base import KnowledgeBase
from ruleforge.rules.conditions import Condition, ConditionTest, StandardCondition
from ruleforge.rules.engine import Rule, Ruleset
from ruleforge.rules.fact import Fact
from ruleforge.rules.models import Comparator, Outcome, Result, PASS, FAIL


class RuleBuilder:
    """Handle on one rule of one ruleset."""

    def __init__(self, ruleset: Ruleset, rule: Rule):
        self.ruleset = ruleset
        self.rule = rule

    @property
    def name(self) -> str:
        return self.rule.name

    def add_condition(self, name: str, test: ConditionTest) -> "RuleBuilder":
        self.rule.add_condition(Condition(name, test))
        return self

    def add_standard_condition(self, name: str, subject: str, attribute: str,
                               comparator: Comparator, value: str,
                               pass_outcome: Outcome = PASS,
                               fail_outcome: Outcome = FAIL) -> "RuleBuilder":
        self.rule.add_condition(StandardCondition(
            name, subject, attribute, comparator, value, pass_outcome, fail_outcome,
            legacy_numeric_not_equal=self.ruleset.legacy_numeric_not_equal
        ))
        return self

    def remove_condition(self, name: str) -> "RuleBuilder":
        self.rule.remove_condition(name)
        return self

    def add_action(self, callback: ActionCallback) -> "RuleBuilder":
        self.rule.action = Action(callback, self.rule.name)
        return self

    def add_knowledge_action(self, callback: Optional[ActionCallback], name: str,
                             subject: str, attribute: str, value: Any) -> "RuleBuilder":
        self.rule.action = KnowledgeAction(callback, name, subject, attribute, value)
        return self

    def add_relationship_action(self, callback: Optional[ActionCallback], name: str,
                                description: str = "") -> "RuleBuilder":
        self.rule.action = RelationshipAction(callback, name, description)
        return self

    def clear_action(self) -> "RuleBuilder":
        self.rule.action = Action()
        return self


class RulesetBuilder:
    """Handle on one ruleset registered with a RuleForge."""

    def __init__(self, forge: "RuleForge", ruleset: Ruleset):
        self.forge = forge
        self.ruleset = ruleset

    @property
    def name(self) -> str:
        return self.ruleset.name

    @property
    def results(self) -> List[Result]:
        return self.ruleset.results

    def add_rule(self, name: str, action: Optional[Action] = None) -> RuleBuilder:
        rule = Rule(name, action)
        self.ruleset.add_rule(rule)
        return RuleBuilder(self.ruleset, rule)

    def rule(self, name: str) -> RuleBuilder:
        return RuleBuilder(self.ruleset, self.ruleset.get_rule(name))

    def remove_rule(self, name: str) -> "RulesetBuilder":
        self.ruleset.remove_rule(name)
        return self

    def run(self, fact: Fact, fire_on_pass: Optional[bool] = None,
            fail_on_infinite: Optional[bool] = None) -> Result:
        return self.forge.run_rules(self.name, fact, fire_on_pass, fail_on_infinite)

    def fire_all_passes(self, payload: Any = None) -> "RulesetBuilder":
        self.ruleset.fire_all_passes(payload)
        return self


class RuleForge:
    """Registry of rulesets and named facts sharing one knowledge base."""

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None,
                 settings: Optional[RuleForgeSettings] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.settings = settings or get_config()
        configure_logging("ruleforge", self.settings.log_level)
        self.logger = get_logger("ruleforge.forge")
        self.knowledge_base = knowledge_base if knowledge_base is not None else KnowledgeBase()
        if metrics is None and self.settings.enable_metrics:
            metrics = get_metrics_collector("ruleforge")
        self.metrics = metrics
        self._rulesets: Dict[str, Ruleset] = {}
        self._facts: Dict[str, Fact] = {}
        self._bulk_results: List[Result] = []

    # Rulesets

    def new_ruleset(self, name: str) -> RulesetBuilder:
        ruleset = Ruleset(
            name,
            knowledge_base=self.knowledge_base,
            metrics=self.metrics,
            legacy_numeric_not_equal=self.settings.legacy_numeric_not_equal
        )
        self._rulesets[name] = ruleset
        self.logger.info("Ruleset created", ruleset=name)
        return RulesetBuilder(self, ruleset)

    def get_ruleset(self, name: str) -> Ruleset:
        ruleset = self._rulesets.get(name)
        if ruleset is None:
            raise NotFoundError("ruleset", name)
        return ruleset

    def ruleset(self, name: str) -> RulesetBuilder:
        return RulesetBuilder(self, self.get_ruleset(name))

    def remove_ruleset(self, name: str):
        if name not in self._rulesets:
            raise NotFoundError("ruleset", name)
        del self._rulesets[name]
        self.logger.info("Ruleset removed", ruleset=name)

    @property
    def rulesets(self) -> List[str]:
        return list(self._rulesets.keys())

    # Facts

    def add_fact(self, fact: Fact) -> "RuleForge":
        self._facts[fact.name] = fact
        return self

    def get_fact(self, name: str) -> Optional[Fact]:
        return self._facts.get(name)

    def delete_fact(self, name: str) -> "RuleForge":
        self._facts.pop(name, None)
        return self

    @property
    def facts(self) -> List[Fact]:
        return list(self._facts.values())

    # Running

    def run_rules(self, ruleset_name: str, fact: Fact, fire_on_pass: Optional[bool] = None,
                  fail_on_infinite: Optional[bool] = None) -> Result:
        """Run one ruleset; unset flags fall back to the configured defaults."""
        if fire_on_pass is None:
            fire_on_pass = self.settings.fire_on_pass
        if fail_on_infinite is None:
            fail_on_infinite = self.settings.fail_on_infinite

        return self.get_ruleset(ruleset_name).run_rules(fact, fire_on_pass, fail_on_infinite)

    def get_results(self, ruleset_name: str) -> List[Result]:
        return self.get_ruleset(ruleset_name).results

    def bulk_run_rules(self, ruleset_name: str, fire_on_pass: Optional[bool] = None,
                       fail_on_infinite: Optional[bool] = None) -> List[Result]:
        """Run every registered fact, in registration order; returns the last result per fact."""
        ruleset = self.get_ruleset(ruleset_name)
        self._bulk_results = []
        last_results: List[Result] = []

        for fact in list(self._facts.values()):
            last_results.append(self.run_rules(ruleset_name, fact, fire_on_pass, fail_on_infinite))
            self._bulk_results.extend(ruleset.results)

        self.logger.info("Bulk run finished", ruleset=ruleset_name, facts=len(last_results))
        return last_results

    @property
    def bulk_results(self) -> List[Result]:
        """Every result recorded by the last bulk run, across all facts."""
        return list(self._bulk_results)

    def fire_all_passes(self, ruleset_name: str, payload: Any = None):
        self.get_ruleset(ruleset_name).fire_all_passes(payload)
