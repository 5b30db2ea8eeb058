"""
Search Index - case-insensitive substring lookup over node names.

Built once from a TechGraph and never mutated. Results follow graph
declaration order (each technology, then its unlocks); there is no
relevance ranking.
"""

from typing import List, NamedTuple, Optional, Tuple

from .graph import TechGraph


class SearchEntry(NamedTuple):
    node_id: str
    name: str
    lowered: str


class SearchIndex:
    """Name index over every technology and unlock of a graph."""

    def __init__(self, graph: TechGraph):
        self._entries: Tuple[SearchEntry, ...] = tuple(
            SearchEntry(node.id, node.name, node.name.lower())
            for node in graph.iter_nodes()
        )

    def search(self, query: str) -> List[str]:
        """
        Ids of nodes whose name contains `query`, ignoring case.

        An empty or whitespace-only query matches nothing.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []
        return [entry.node_id for entry in self._entries if needle in entry.lowered]

    def first(self, query: str) -> Optional[str]:
        """First match for `query`, or None."""
        needle = (query or "").strip().lower()
        if not needle:
            return None
        return next((e.node_id for e in self._entries if needle in e.lowered), None)

    def __len__(self) -> int:
        return len(self._entries)
