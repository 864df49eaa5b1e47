"""
Knowledge base shared by every rule and ruleset of one engine instance.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from shared.logging import get_logger
from shared.errors import NotFoundError
from ruleforge.rules.fact import Fact
from ruleforge.rules.models import Relationship


class KnowledgeBase:
    """In-memory store of memory elements, relationships and the related scratch list.

    Memory elements are append-only fact logs keyed by subject. Relationships
    are keyed by relation name, and only the first edge written under a name is
    kept. ``related`` is filled by conditions and consumed by the paired action;
    the engine never clears it on its own.

    Example:
        kb = KnowledgeBase()
        kb.add_memory_element("scores", Fact("jack", {"jack": {"score": 5}}))
        kb.get_memory_element("scores")  # [Fact(name='jack', ...)]
    """

    def __init__(self):
        self.logger = get_logger("ruleforge.knowledge_base")
        self._memory_elements: Dict[str, List[Fact]] = {}
        self._relationships: Dict[str, List[Relationship]] = {}
        self._related: List[str] = []

    # Memory elements

    @property
    def memory_elements(self) -> Mapping[str, List[Fact]]:
        return MappingProxyType(self._memory_elements)

    def add_memory_element(self, subject: str, fact: Fact):
        """Append a fact to the subject's log."""
        self._memory_elements.setdefault(subject, []).append(fact)
        self.logger.debug(
            "Memory element added",
            subject=subject,
            fact=fact.name,
            size=len(self._memory_elements[subject])
        )

    def get_memory_element(self, subject: str) -> List[Fact]:
        """Get the subject's log, or an empty list."""
        return list(self._memory_elements.get(subject, []))

    def has_memory_element(self, subject: str) -> bool:
        return subject in self._memory_elements

    def remove_memory_element(self, subject: str):
        if subject not in self._memory_elements:
            raise NotFoundError("memory element", subject)
        del self._memory_elements[subject]
        self.logger.debug("Memory element removed", subject=subject)

    def get_memory_elements_by_fact(self, fact: Fact) -> List[Fact]:
        """Concatenate the logs of every subject present in the fact."""
        elements: List[Fact] = []
        for subject in fact.subjects:
            elements.extend(self._memory_elements.get(subject, []))
        return elements

    # Relationships

    @property
    def relationships(self) -> Mapping[str, List[Relationship]]:
        return MappingProxyType(self._relationships)

    def add_relationship(self, relationship: Relationship):
        """Store a relationship unless its relation name already has one."""
        if self._relationships.get(relationship.name):
            self.logger.debug(
                "Relationship already recorded, ignoring",
                relationship=relationship.name,
                subject=relationship.subject,
                relation=relationship.relation
            )
            return

        self._relationships[relationship.name] = [relationship]
        self.logger.debug(
            "Relationship added",
            relationship=relationship.name,
            subject=relationship.subject,
            relation=relationship.relation
        )

    def get_relationships(self, name: str) -> List[Relationship]:
        return list(self._relationships.get(name, []))

    def has_relationship(self, name: str) -> bool:
        return name in self._relationships

    def remove_relationship(self, name: str):
        if name not in self._relationships:
            raise NotFoundError("relationship", name)
        del self._relationships[name]
        self.logger.debug("Relationship removed", relationship=name)

    # Related scratch list

    @property
    def related(self) -> List[str]:
        return list(self._related)

    def add_to_related(self, name: str):
        self._related.append(name)

    def clear_related(self):
        self._related.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get knowledge base statistics."""
        return {
            "memory_subjects": list(self._memory_elements.keys()),
            "memory_elements": sum(len(log) for log in self._memory_elements.values()),
            "relationships": list(self._relationships.keys()),
            "related": len(self._related)
        }
