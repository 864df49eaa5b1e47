"""
Actions fired for rules whose conditions pass.
"""

from typing import Any, Callable, Optional

from shared.logging import get_logger
from shared.errors import ActionPayloadError, MissingKnowledgeBaseError
from ruleforge.rules.fact import Fact
from ruleforge.rules.models import Relationship
from .base import KnowledgeBase

logger = get_logger("ruleforge.actions")

ActionCallback = Callable[[Any], None]


class Action:
    """Side effect invoked with an optional payload. Without a callback it does nothing."""

    def __init__(self, callback: Optional[ActionCallback] = None, name: str = "action"):
        self.callback = callback
        self.name = name

    def act(self, payload: Any = None, knowledge_base: Optional[KnowledgeBase] = None):
        if self.callback is not None:
            self.callback(payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class KnowledgeAction(Action):
    """Records ``{subject: {attribute: value}}`` in the knowledge base, then calls back.

    The fact is built once, when the action is defined, and appended under
    ``subject`` every time the action fires.
    """

    def __init__(self, callback: Optional[ActionCallback], name: str, subject: str,
                 attribute: str, value: Any):
        super().__init__(callback, name)
        self.fact = Fact(name, {subject: {attribute: value}})

    @property
    def subject(self) -> str:
        return self.fact.subjects[0]

    def act(self, payload: Any = None, knowledge_base: Optional[KnowledgeBase] = None):
        if knowledge_base is None:
            raise MissingKnowledgeBaseError(self.name)

        knowledge_base.add_memory_element(self.subject, self.fact)
        logger.debug("Knowledge recorded", action=self.name, subject=self.subject)
        super().act(payload, knowledge_base)


class RelationshipAction(Action):
    """Links the payload fact's ``subject`` to every entry in ``related``.

    The payload must be a Fact whose data carries a top-level ``subject``
    field. The scratch list is cleared once consumed and the callback then
    receives the fact data.
    """

    def __init__(self, callback: Optional[ActionCallback], name: str, description: str = ""):
        super().__init__(callback, name)
        self.description = description

    def act(self, payload: Any = None, knowledge_base: Optional[KnowledgeBase] = None):
        if knowledge_base is None:
            raise MissingKnowledgeBaseError(self.name)

        if not isinstance(payload, Fact):
            raise ActionPayloadError(
                f"Relationship action '{self.name}' needs a Fact payload",
                {"action": self.name, "payload": type(payload).__name__}
            )

        subject = payload.get("subject")
        if subject is None:
            raise ActionPayloadError(
                f"Fact '{payload.name}' has no subject field for relationship '{self.name}'",
                {"action": self.name, "fact": payload.name}
            )

        related = knowledge_base.related
        for relation in related:
            knowledge_base.add_relationship(Relationship(
                name=self.name,
                description=self.description,
                subject=str(subject),
                relation=relation
            ))
        knowledge_base.clear_related()

        logger.debug("Relationships derived", action=self.name, subject=subject, related=related)

        if self.callback is not None:
            self.callback(dict(payload.data))
