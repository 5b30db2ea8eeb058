"""
Dependency Resolver.

Computes the transitive prerequisite set of a technology and classifies it
as Unlocked or Required against the current completion state.

Everything is derived fresh on each call; nothing is cached, so a toggle is
reflected by the very next query.
"""

from collections import deque
from typing import List, Protocol, Set

from .errors import InvalidNodeKind, UnknownNodeError
from .graph import TechGraph
from .types import Verdict


class CompletionView(Protocol):
    """Read-only view of completion state used by the resolver."""

    def is_complete(self, tech_id: str) -> bool:
        ...


class DependencyResolver:
    """
    Resolves ancestors and verdicts for technologies.

    Attributes:
        graph: The validated tech graph.
        completion: Anything answering `is_complete(tech_id)`.
    """

    def __init__(self, graph: TechGraph, completion: CompletionView):
        self.graph = graph
        self.completion = completion

    def ancestors(self, tech_id: str) -> Set[str]:
        """
        Every technology that must be complete before `tech_id`.

        Follows prerequisite edges backward. The visited set keeps diamond
        shaped dependencies from being walked twice; the node itself is
        never part of the result.
        """
        self._check_tech(tech_id, "ancestors")

        visited: Set[str] = set()
        queue = deque(self.graph.prereqs(tech_id))

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            for prereq_id in self.graph.prereqs(current):
                if prereq_id not in visited:
                    queue.append(prereq_id)

        visited.discard(tech_id)
        return visited

    def missing(self, tech_id: str) -> List[str]:
        """Ancestors not yet complete, in declaration order."""
        return self.graph.sort_techs(
            a for a in self.ancestors(tech_id) if not self.completion.is_complete(a)
        )

    def verdict(self, tech_id: str) -> Verdict:
        """
        Unlocked iff every ancestor is complete.

        The technology's own completion flag does not enter into it.
        """
        if self.missing(tech_id):
            return Verdict.REQUIRED
        return Verdict.UNLOCKED

    def _check_tech(self, node_id: str, operation: str) -> None:
        if self.graph.is_tech(node_id):
            return
        if self.graph.is_unlock(node_id):
            raise InvalidNodeKind(node_id, operation)
        raise UnknownNodeError(node_id)
