"""
Shared error handling for RuleForge.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class RuleForgeException(Exception):
    """Base exception for the rule engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class NotFoundError(RuleForgeException, LookupError):
    """A named rule, ruleset, condition or knowledge entry does not exist."""

    def __init__(self, kind: str, name: str, container: Optional[str] = None):
        message = f"{kind.capitalize()} '{name}' does not exist"
        if container:
            message += f" in '{container}'"
        details = {"kind": kind, "name": name}
        if container:
            details["container"] = container
        super().__init__("NOT_FOUND", message, details)
        self.kind = kind
        self.name = name


class ValidationError(RuleForgeException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class OutcomeTypeError(ValidationError):
    """A condition returned something other than an Outcome."""

    def __init__(self, condition_name: str, value: Any):
        super().__init__(
            f"Condition '{condition_name}' returned {type(value).__name__}, expected Outcome",
            {"condition": condition_name, "returned": repr(value)}
        )
        self.condition_name = condition_name


class RuleError(RuleForgeException):
    """A condition signalled an ERROR outcome."""

    def __init__(self, rule_name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "RULE_ERROR",
            f"An error occurred when running rule '{rule_name}'",
            {"rule": rule_name, **(details or {})}
        )
        self.rule_name = rule_name


class CycleError(RuleForgeException):
    """A redirect chain returned to a rule it had already visited."""

    def __init__(self, rule_name: str, target: str):
        super().__init__(
            "CYCLE_ERROR",
            f"An infinite loop happened when running rule '{rule_name}', "
            f"it loops back to a rule that has run before ('{target}')",
            {"rule": rule_name, "target": target}
        )
        self.rule_name = rule_name
        self.target = target


class ActionError(RuleForgeException):
    """Action-related errors."""

    def __init__(self, message: str = "Action failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("ACTION_ERROR", message, details)


class ActionPayloadError(ActionError):
    """An action was fired with a payload it cannot use."""


class MissingKnowledgeBaseError(ActionError):
    """An action that writes knowledge was fired without a knowledge base."""

    def __init__(self, action_name: str):
        super().__init__(
            f"No knowledge base was passed to action '{action_name}'",
            {"action": action_name}
        )
