"""
Completion Store - owns which technologies are marked complete.

State is loaded once from a named backend slot, mutated only by explicit
toggles or a full reset, and flushed to the backend after every mutation.
The slot holds a JSON array of completed technology ids.

A failed flush is logged and returned to the caller as an Err result; the
in-memory change stands and the next successful flush reconciles storage.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from ..storage.base import StateBackend
from .errors import InvalidNodeKind, StorageError, UnknownNodeError
from .graph import TechGraph
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "completedTechnologies"


@dataclass(frozen=True)
class ToggleOutcome:
    """
    Result of a toggle.

    Attributes:
        tech_id: The technology that was toggled.
        completed: Its completion flag after the toggle.
        flush: Ok(None) if the new state reached storage, Err(message) otherwise.
    """
    tech_id: str
    completed: bool
    flush: Result[None, str]

    @property
    def persisted(self) -> bool:
        return self.flush.is_ok()


class CompletionStore:
    """
    Per-technology completion flags with write-through persistence.

    Only technology ids are accepted: unlock ids raise InvalidNodeKind and
    ids missing from the graph raise UnknownNodeError. Callers holding an
    unlock id resolve it with `TechGraph.resolve_tech` first.
    """

    def __init__(self, graph: TechGraph, backend: StateBackend, slot: str = DEFAULT_SLOT):
        self.graph = graph
        self.backend = backend
        self.slot = slot
        self._state: Dict[str, bool] = {}
        self.last_flush: Optional[Result[None, str]] = None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self) -> FrozenSet[str]:
        """
        Replace in-memory state with the persisted completed set.

        Missing, empty or malformed data yields an empty state. Ids that are
        not technologies of the current graph are dropped.
        """
        self._state = {}

        try:
            raw = self.backend.read(self.slot)
        except StorageError as e:
            logger.error(f"Could not read completion state from slot '{self.slot}': {e}")
            return self.completed_ids()

        if not raw:
            return self.completed_ids()

        try:
            stored = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Completion slot '{self.slot}' is malformed, starting empty: {e}")
            return self.completed_ids()

        if not isinstance(stored, list):
            logger.warning(f"Completion slot '{self.slot}' is not a list, starting empty")
            return self.completed_ids()

        dropped = []
        for tech_id in stored:
            if isinstance(tech_id, str) and self.graph.is_tech(tech_id):
                self._state[tech_id] = True
            else:
                dropped.append(tech_id)

        if dropped:
            logger.warning(
                f"Ignored {len(dropped)} stored id(s) that are not technologies of this tree: "
                f"{dropped[:5]}"
            )
        logger.debug(f"Loaded {len(self._state)} completed technologies")
        return self.completed_ids()

    # =========================================================================
    # Queries
    # =========================================================================

    def is_complete(self, tech_id: str) -> bool:
        self._check_tech(tech_id, "is_complete")
        return self._state.get(tech_id, False)

    def completed_ids(self) -> FrozenSet[str]:
        return frozenset(tech_id for tech_id, done in self._state.items() if done)

    # =========================================================================
    # Mutations
    # =========================================================================

    def toggle(self, tech_id: str) -> ToggleOutcome:
        """Flip the completion flag of a technology and persist."""
        self._check_tech(tech_id, "toggle")
        completed = not self._state.get(tech_id, False)
        self._state[tech_id] = completed
        logger.info(f"{'Completed' if completed else 'Reopened'} technology '{tech_id}'")
        return ToggleOutcome(tech_id=tech_id, completed=completed, flush=self.flush())

    def set_complete(self, tech_id: str, completed: bool) -> ToggleOutcome:
        """Set the flag explicitly; toggles only when it differs."""
        if self.is_complete(tech_id) == completed:
            return ToggleOutcome(tech_id=tech_id, completed=completed, flush=Ok(None))
        return self.toggle(tech_id)

    def clear_all(self) -> Result[None, str]:
        """Reset every technology to incomplete and persist."""
        for tech_id in self._state:
            self._state[tech_id] = False
        logger.info("Cleared all completed technologies")
        return self.flush()

    def flush(self) -> Result[None, str]:
        """Write the full completed set to the backend."""
        completed = self.graph.sort_techs(self.completed_ids())
        try:
            self.backend.write(self.slot, json.dumps(completed))
        except StorageError as e:
            logger.error(f"Failed to persist completion state to slot '{self.slot}': {e}")
            self.last_flush = Err(str(e))
        else:
            self.last_flush = Ok(None)
        return self.last_flush

    def _check_tech(self, node_id: str, operation: str) -> None:
        if self.graph.is_tech(node_id):
            return
        if self.graph.is_unlock(node_id):
            raise InvalidNodeKind(node_id, operation)
        raise UnknownNodeError(node_id)
