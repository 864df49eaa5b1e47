"""
Rules engine package.

Defines facts, conditions, rules and the ruleset evaluation algorithm.
Conditions return a tagged Outcome (PASS, FAIL, ERROR or a redirect to
another rule by name), which keeps chaining explicit and separate from
plain values.

Modules of interest:
- models: Outcome, Comparator, Result and Relationship.
- values: Value kinds and comparator evaluation for fact data.
- fact: The Fact data tree and its accessors.
- conditions: Condition and StandardCondition.
- engine: Rule and Ruleset, including redirect and cycle handling.
"""
