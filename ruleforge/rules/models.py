"""
Rule data models for RuleForge.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import ValidationError


class Comparator(str, Enum):
    """Fact value comparators."""
    EQUAL = "EQUAL"
    NOTEQUAL = "NOTEQUAL"
    CONTAINS = "CONTAINS"
    NOTCONTAINS = "NOTCONTAINS"
    GREATERTHAN = "GREATERTHAN"
    LESSTHAN = "LESSTHAN"
    GREATEROREQUAL = "GREATEROREQUAL"
    LESSOREQUAL = "LESSOREQUAL"


class OutcomeKind(str, Enum):
    """Outcome kinds of a condition or rule."""
    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"
    REDIRECT = "REDIRECT"


@dataclass(frozen=True)
class Outcome:
    """Result of testing a condition: PASS, FAIL, ERROR or a redirect to another rule."""
    kind: OutcomeKind
    target: Optional[str] = None

    def __post_init__(self):
        if self.kind == OutcomeKind.REDIRECT:
            if not isinstance(self.target, str) or not self.target:
                raise ValidationError(
                    "Redirect outcome needs a rule name",
                    {"target": repr(self.target)}
                )
        elif self.target is not None:
            raise ValidationError(
                f"{self.kind.value} outcome cannot carry a target",
                {"target": self.target}
            )

    @property
    def is_redirect(self) -> bool:
        return self.kind == OutcomeKind.REDIRECT

    def __str__(self) -> str:
        if self.is_redirect:
            return self.target
        return self.kind.value


PASS = Outcome(OutcomeKind.PASS)
FAIL = Outcome(OutcomeKind.FAIL)
ERROR = Outcome(OutcomeKind.ERROR)


def redirect(rule_name: str) -> Outcome:
    """Outcome that continues evaluation with the named rule."""
    return Outcome(OutcomeKind.REDIRECT, rule_name)


class Result(BaseModel):
    """One visited rule within a ruleset run."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    ruleset_name: str = Field(..., alias="rulesetName", description="Ruleset that ran")
    rule_name: str = Field(..., alias="ruleName", description="Rule that was evaluated")
    fact_name: str = Field(..., alias="factName", description="Fact evaluated")
    outcome: str = Field(..., description="PASS, FAIL, ERROR or the redirect target")

    @property
    def passed(self) -> bool:
        return self.outcome == OutcomeKind.PASS.value

    @property
    def failed(self) -> bool:
        return self.outcome == OutcomeKind.FAIL.value

    def to_dict(self) -> dict:
        """Exchange format with camelCase keys."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class Relationship:
    """Named edge: ``subject`` relates to ``relation`` under ``name``."""
    name: str
    description: str
    subject: str
    relation: str
