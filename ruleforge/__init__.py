"""
RuleForge: forward-chaining rule evaluation engine.

Evaluates named rules, each guarded by ordered conditions, against one
fact at a time. A condition can redirect evaluation to another rule
(chaining); repeated rules within a chain are reported as cycles.
Passing rules fire actions that may record derived knowledge in a
shared knowledge base.

Modules of interest:
- rules: Fact, Outcome, Condition, Rule and the Ruleset chaining algorithm.
- knowledge: KnowledgeBase plus the actions that write to it.
- forge: Builder and registry wiring rulesets, facts and the knowledge base.

Evaluation is synchronous and single-threaded; callers sharing a
knowledge base across threads must serialize runs themselves.
"""

__version__ = "1.0.0"
