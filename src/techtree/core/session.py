"""
Viewer Session - routes renderer events to the core components.

One session exists per open viewer. Each handler runs to completion and
returns the RenderUpdate the renderer should apply; the session never
touches layout or geometry.

Consumed events:
    hover_enter(node_id), hover_exit(), click(node_id),
    search_query(text), search_submit(), select_result(node_id),
    reset() (only after the user confirmed it outside the core)
"""

import logging
from typing import List, Optional

from ..storage.base import StateBackend
from .graph import TechGraph
from .highlight import HighlightSession
from .resolver import DependencyResolver
from .search import SearchIndex
from .store import DEFAULT_SLOT, CompletionStore, ToggleOutcome
from .types import COMPLETED_CLASS, ClassChange, RenderUpdate

logger = logging.getLogger(__name__)


class ViewerSession:
    """
    Event router wiring store, resolver, search index and highlights.

    Attributes:
        graph: The validated tech graph.
        store: Completion flags with persistence.
        resolver: Ancestor and verdict computation.
        index: Name search over all nodes.
        highlights: The active hover, if any.
        results: Ids from the latest search query.
        last_toggle: Outcome of the latest click, including its flush result.
    """

    def __init__(self, graph: TechGraph, backend: StateBackend, slot: str = DEFAULT_SLOT):
        self.graph = graph
        self.store = CompletionStore(graph, backend, slot=slot)
        self.resolver = DependencyResolver(graph, self.store)
        self.index = SearchIndex(graph)
        self.highlights = HighlightSession(graph, self.resolver)
        self.results: List[str] = []
        self.query: str = ""
        self.last_toggle: Optional[ToggleOutcome] = None

    def start(self) -> RenderUpdate:
        """Load persisted completions and return the classes to apply at startup."""
        completed = self.store.load()
        return RenderUpdate(changes=[
            ClassChange(node_id=tech_id, css_class=COMPLETED_CLASS, added=True)
            for tech_id in self.graph.sort_techs(completed)
        ])

    # =========================================================================
    # Pointer events
    # =========================================================================

    def hover_enter(self, node_id: str) -> RenderUpdate:
        return self.highlights.enter(node_id)

    def hover_exit(self) -> RenderUpdate:
        return self.highlights.exit()

    def click(self, node_id: str) -> RenderUpdate:
        """Toggle the clicked technology; unlocks toggle their parent."""
        tech_id = self.graph.resolve_tech(node_id)
        outcome = self.store.toggle(tech_id)
        self.last_toggle = outcome
        if not outcome.persisted:
            logger.warning(f"Toggle of '{tech_id}' kept in memory only: {outcome.flush.unwrap_err()}")

        changes = [ClassChange(node_id=tech_id, css_class=COMPLETED_CLASS, added=outcome.completed)]
        changes.extend(self.highlights.refresh().changes)
        return RenderUpdate(changes=changes)

    # =========================================================================
    # Search
    # =========================================================================

    def search_query(self, text: str) -> List[str]:
        """
        Run a search as the user types.

        An empty query leaves the previous results in place.
        """
        self.query = text
        if not (text or "").strip():
            return list(self.results)
        self.results = self.index.search(text)
        return list(self.results)

    def search_submit(self) -> RenderUpdate:
        """Focus and highlight the first result of the latest search."""
        if not self.results:
            return RenderUpdate()
        return self.select_result(self.results[0])

    def select_result(self, node_id: str) -> RenderUpdate:
        """Focus and highlight a chosen search result."""
        update = self.highlights.enter(node_id)
        return RenderUpdate(changes=update.changes, center_on=node_id)

    # =========================================================================
    # Reset
    # =========================================================================

    def reset(self) -> RenderUpdate:
        """Clear every completion; the caller has already confirmed."""
        previously = self.graph.sort_techs(self.store.completed_ids())
        self.store.clear_all()
        changes = [
            ClassChange(node_id=tech_id, css_class=COMPLETED_CLASS, added=False)
            for tech_id in previously
        ]
        changes.extend(self.highlights.refresh().changes)
        return RenderUpdate(changes=changes)
